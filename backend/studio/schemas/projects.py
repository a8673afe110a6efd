"""
EdAiVi Studio Backend: Project Request Schemas
==============================================

What:  Request bodies for audio, video, 3D scene and avatar routes.
How:   Create bodies mirror the document fields a client may set; update
       bodies make every field optional and are applied with
       `model_dump(exclude_unset=True)`, so omitted fields keep their value.
       Responses are the domain documents themselves.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from studio.models.audio import AudioFormat, AudioQuality, Effect, MasterSettings, TrackType
from studio.models.avatar import TextureResolution
from studio.models.base import Collaborator, CollaboratorRole
from studio.models.scene3d import Camera, ObjectMetadata, Vec3
from studio.models.video import Background, Resolution, Transition, Vector3, VideoFormat, VideoQuality


class CollaboratorRequest(BaseModel):
    email: str
    role: CollaboratorRole = "viewer"


class DeletedResponse(BaseModel):
    message: str
    id: str


class CollaboratorAddedResponse(BaseModel):
    message: str
    collaborator: Collaborator
    email: str
    display_name: str


# ══════════════════════════════════════════════════════════════════════════
# Audio
# ══════════════════════════════════════════════════════════════════════════


class AudioProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    bpm: int = Field(default=120, gt=0)
    key: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False


class AudioProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    bpm: Optional[int] = Field(default=None, gt=0)
    key: Optional[str] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    cover_image: Optional[str] = None
    master_settings: Optional[MasterSettings] = None
    status: Optional[Literal["draft", "processing", "completed", "archived"]] = None


class TrackCreate(BaseModel):
    name: str = Field(min_length=1)
    type: TrackType = "other"
    file_url: str
    waveform_url: Optional[str] = None
    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.0, ge=0)
    volume: float = Field(default=1.0, ge=0, le=2.0)
    muted: bool = False
    solo: bool = False
    effects: List[Effect] = Field(default_factory=list)


class TrackUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[TrackType] = None
    file_url: Optional[str] = None
    waveform_url: Optional[str] = None
    start_time: Optional[float] = Field(default=None, ge=0)
    duration: Optional[float] = Field(default=None, ge=0)
    volume: Optional[float] = Field(default=None, ge=0, le=2.0)
    muted: Optional[bool] = None
    solo: Optional[bool] = None
    effects: Optional[List[Effect]] = None


class AudioExportRequest(BaseModel):
    format: AudioFormat = "mp3"
    quality: AudioQuality = "high"
    normalization: bool = True


# ══════════════════════════════════════════════════════════════════════════
# Video
# ══════════════════════════════════════════════════════════════════════════


class VideoProjectCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    resolution: Resolution = Field(default_factory=Resolution)
    frame_rate: int = Field(default=30, gt=0)
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False


class VideoProjectUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    resolution: Optional[Resolution] = None
    frame_rate: Optional[int] = Field(default=None, gt=0)
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    status: Optional[Literal["draft", "processing", "completed", "archived"]] = None


class SceneCreate(BaseModel):
    name: str = Field(min_length=1)
    description: str = ""
    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.0, ge=0)
    background: Background = Field(default_factory=Background)
    transition: Transition = Field(default_factory=Transition)


class SceneUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    start_time: Optional[float] = Field(default=None, ge=0)
    duration: Optional[float] = Field(default=None, ge=0)
    background: Optional[Background] = None
    transition: Optional[Transition] = None


class MediaElementCreate(BaseModel):
    type: Literal["video", "image", "audio", "text", "3d-model", "ai-generated", "effect"]
    name: str = Field(min_length=1)
    file_url: Optional[str] = None
    start_time: float = Field(default=0.0, ge=0)
    duration: float = Field(default=0.0, ge=0)
    position: Vector3 = Field(default_factory=Vector3)
    opacity: float = Field(default=1.0, ge=0, le=1.0)
    volume: float = Field(default=1.0, ge=0, le=2.0)
    scene_id: Optional[str] = None


class VideoExportRequest(BaseModel):
    format: VideoFormat = "mp4"
    quality: VideoQuality = "1080p"


# ══════════════════════════════════════════════════════════════════════════
# 3D Scenes
# ══════════════════════════════════════════════════════════════════════════


class Scene3DCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    category: Literal["interior", "exterior", "landscape", "abstract", "fantasy", "scifi", "other"] = "other"
    is_public: bool = False
    is_template: bool = False
    camera: Camera = Field(default_factory=Camera)


class Scene3DUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    category: Optional[
        Literal["interior", "exterior", "landscape", "abstract", "fantasy", "scifi", "other"]
    ] = None
    is_public: Optional[bool] = None
    is_template: Optional[bool] = None
    camera: Optional[Camera] = None


class Object3DCreate(BaseModel):
    name: str = Field(min_length=1)
    type: Literal["model", "primitive", "avatar", "particle", "group", "ai-generated", "custom"] = "model"
    model_url: Optional[str] = None
    position: Vec3 = Field(default_factory=Vec3)
    rotation: Vec3 = Field(default_factory=Vec3)
    scale: Vec3 = Field(default_factory=lambda: Vec3(x=1, y=1, z=1))
    primitive_type: Literal["box", "sphere", "cylinder", "cone", "plane", "torus", "custom"] = "box"
    avatar_id: Optional[str] = None
    custom_properties: Dict[str, Any] = Field(default_factory=dict)
    metadata: ObjectMetadata = Field(default_factory=ObjectMetadata)

    model_config = {"protected_namespaces": ()}


class LightCreate(BaseModel):
    name: str = Field(min_length=1)
    type: Literal["ambient", "directional", "point", "spot", "area", "hemisphere"] = "point"
    color: str = "#ffffff"
    intensity: float = 1.0
    position: Vec3 = Field(default_factory=Vec3)
    cast_shadow: bool = True


class CloneRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)


# ══════════════════════════════════════════════════════════════════════════
# Avatars
# ══════════════════════════════════════════════════════════════════════════


class AvatarCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    model_url: str
    format: Literal["glb", "gltf", "fbx", "obj", "custom"] = "glb"
    category: Literal["human", "animal", "fantasy", "robot", "abstract", "other"] = "human"
    is_public: bool = False
    is_template: bool = False
    rigged: bool = False

    model_config = {"protected_namespaces": ()}


class AvatarUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    category: Optional[Literal["human", "animal", "fantasy", "robot", "abstract", "other"]] = None
    is_public: Optional[bool] = None
    is_template: Optional[bool] = None
    rigged: Optional[bool] = None


class AnimationCreate(BaseModel):
    name: str = Field(min_length=1)
    category: Literal["idle", "walk", "run", "talk", "dance", "gesture", "emotion", "custom"] = "custom"
    file_url: str
    duration: float = Field(default=0.0, ge=0)
    loopable: bool = False
    tags: List[str] = Field(default_factory=list)


class TextureCreate(BaseModel):
    name: str = Field(min_length=1)
    type: Literal[
        "diffuse", "normal", "specular", "roughness", "metallic", "emissive", "ao", "height", "custom"
    ] = "diffuse"
    file_url: str
    resolution: TextureResolution = Field(default_factory=TextureResolution)
