"""
3D scene aggregate.

Objects and lights are owned child lists. The `metadata` counters are kept
in step with the lists by `add_object` / `add_light` / the remove methods.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from studio.models.base import ChildRecord, SharedAggregate, clone_document, find_child


class Vec3(BaseModel):
    x: float = 0
    y: float = 0
    z: float = 0


class Light(ChildRecord):
    name: str
    type: Literal["ambient", "directional", "point", "spot", "area", "hemisphere"] = "point"
    color: str = "#ffffff"
    intensity: float = 1.0
    position: Vec3 = Field(default_factory=Vec3)
    rotation: Vec3 = Field(default_factory=Vec3)
    cast_shadow: bool = True


class ObjectMetadata(BaseModel):
    poly_count: int = Field(default=0, ge=0)
    vertex_count: int = Field(default=0, ge=0)
    file_size: int = 0
    format: Optional[str] = None


class Object3D(ChildRecord):
    name: str
    type: Literal["model", "primitive", "avatar", "particle", "group", "ai-generated", "custom"] = "model"
    model_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    position: Vec3 = Field(default_factory=Vec3)
    rotation: Vec3 = Field(default_factory=Vec3)
    scale: Vec3 = Field(default_factory=lambda: Vec3(x=1, y=1, z=1))
    visible: bool = True
    primitive_type: Literal["box", "sphere", "cylinder", "cone", "plane", "torus", "custom"] = "box"
    avatar_id: Optional[str] = None
    interactive: bool = False
    custom_properties: Dict[str, Any] = Field(default_factory=dict)
    metadata: ObjectMetadata = Field(default_factory=ObjectMetadata)


class Camera(BaseModel):
    position: Vec3 = Field(default_factory=lambda: Vec3(y=1.6, z=5))
    rotation: Vec3 = Field(default_factory=Vec3)
    fov: float = 75
    near: float = 0.1
    far: float = 1000


class SceneMetadata(BaseModel):
    object_count: int = 0
    light_count: int = 0
    total_poly_count: int = 0
    total_vertex_count: int = 0
    tags: List[str] = Field(default_factory=list)


class Scene3D(SharedAggregate):
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    is_template: bool = False
    category: Literal["interior", "exterior", "landscape", "abstract", "fantasy", "scifi", "other"] = "other"
    thumbnail_url: Optional[str] = None
    lights: List[Light] = Field(default_factory=list)
    objects: List[Object3D] = Field(default_factory=list)
    camera: Camera = Field(default_factory=Camera)
    metadata: SceneMetadata = Field(default_factory=SceneMetadata)
    status: Literal["draft", "processing", "completed", "archived"] = "completed"

    def add_object(self, obj: Object3D) -> Object3D:
        self.objects = [*self.objects, obj]
        self.metadata.object_count = len(self.objects)
        self.metadata.total_poly_count += obj.metadata.poly_count
        self.metadata.total_vertex_count += obj.metadata.vertex_count
        self.touch()
        return obj

    def remove_object(self, object_id: str) -> bool:
        obj = find_child(self.objects, object_id)
        if obj is None:
            return False
        self.objects = [o for o in self.objects if o.id != object_id]
        self.metadata.object_count = len(self.objects)
        self.metadata.total_poly_count -= obj.metadata.poly_count
        self.metadata.total_vertex_count -= obj.metadata.vertex_count
        self.touch()
        return True

    def add_light(self, light: Light) -> Light:
        self.lights = [*self.lights, light]
        self.metadata.light_count = len(self.lights)
        self.touch()
        return light

    def remove_light(self, light_id: str) -> bool:
        remaining = [light for light in self.lights if light.id != light_id]
        removed = len(remaining) != len(self.lights)
        self.lights = remaining
        self.metadata.light_count = len(self.lights)
        self.touch()
        return removed

    def clone(self, new_owner_id: str, new_name: Optional[str] = None) -> "Scene3D":
        """Private, non-template copy owned by `new_owner_id`, without collaborators."""
        return clone_document(
            self,
            owner_id=new_owner_id,
            name=new_name or f"{self.name} (Clone)",
            is_public=False,
            is_template=False,
            collaborators=[],
        )
