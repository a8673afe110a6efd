"""3D avatar document: a base model plus animation and texture lists."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from studio.models.base import ChildRecord, OwnedDocument, clone_document


class Animation(ChildRecord):
    name: str
    category: Literal["idle", "walk", "run", "talk", "dance", "gesture", "emotion", "custom"] = "custom"
    file_url: str
    thumbnail_url: Optional[str] = None
    duration: float = Field(default=0.0, ge=0)
    loopable: bool = False
    tags: List[str] = Field(default_factory=list)
    ai_generated: bool = False


class TextureResolution(BaseModel):
    width: int = 1024
    height: int = 1024


class Texture(ChildRecord):
    name: str
    type: Literal[
        "diffuse", "normal", "specular", "roughness", "metallic", "emissive", "ao", "height", "custom"
    ] = "diffuse"
    file_url: str
    thumbnail_url: Optional[str] = None
    resolution: TextureResolution = Field(default_factory=TextureResolution)
    ai_generated: bool = False


class AvatarMetadata(BaseModel):
    poly_count: Optional[int] = None
    vertex_count: Optional[int] = None
    texture_count: int = 0
    animation_count: int = 0
    file_size: Optional[int] = None
    tags: List[str] = Field(default_factory=list)


class Avatar3D(OwnedDocument):
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    is_template: bool = False
    category: Literal["human", "animal", "fantasy", "robot", "abstract", "other"] = "human"
    thumbnail_url: Optional[str] = None
    model_url: str
    format: Literal["glb", "gltf", "fbx", "obj", "custom"] = "glb"
    animations: List[Animation] = Field(default_factory=list)
    textures: List[Texture] = Field(default_factory=list)
    rigged: bool = False
    metadata: AvatarMetadata = Field(default_factory=AvatarMetadata)
    status: Literal["draft", "processing", "completed", "archived"] = "completed"

    def add_animation(self, animation: Animation) -> Animation:
        self.animations = [*self.animations, animation]
        self.metadata.animation_count = len(self.animations)
        self.touch()
        return animation

    def remove_animation(self, animation_id: str) -> bool:
        remaining = [a for a in self.animations if a.id != animation_id]
        removed = len(remaining) != len(self.animations)
        self.animations = remaining
        self.metadata.animation_count = len(self.animations)
        self.touch()
        return removed

    def add_texture(self, texture: Texture) -> Texture:
        self.textures = [*self.textures, texture]
        self.metadata.texture_count = len(self.textures)
        self.touch()
        return texture

    def remove_texture(self, texture_id: str) -> bool:
        remaining = [t for t in self.textures if t.id != texture_id]
        removed = len(remaining) != len(self.textures)
        self.textures = remaining
        self.metadata.texture_count = len(self.textures)
        self.touch()
        return removed

    def clone(self, new_owner_id: str, new_name: Optional[str] = None) -> "Avatar3D":
        return clone_document(
            self,
            owner_id=new_owner_id,
            name=new_name or f"{self.name} (Clone)",
            is_public=False,
            is_template=False,
        )
