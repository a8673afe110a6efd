"""
Video project aggregate.

The project owns scenes and media elements. Media elements may reference a
scene through `scene_id`; removing a scene removes every media element that
references it. Duration is recomputed from the scene list after each scene
mutation.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from studio.models.base import (
    ChildRecord,
    ExportedFile,
    SharedAggregate,
    Timed,
    epoch_ms,
    find_child,
    max_end_time,
    patched,
    utcnow,
)

VideoFormat = Literal["mp4", "mov", "webm", "avi", "gif"]
VideoQuality = Literal["480p", "720p", "1080p", "4k"]

# Output frame size per export quality
QUALITY_RESOLUTIONS: Dict[str, tuple] = {
    "480p": (854, 480),
    "720p": (1280, 720),
    "1080p": (1920, 1080),
    "4k": (3840, 2160),
}


class Resolution(BaseModel):
    width: int = 1920
    height: int = 1080


class Background(BaseModel):
    type: Literal["color", "image", "video", "ai-generated", "3d-scene"] = "color"
    value: Optional[str] = None
    opacity: float = Field(default=1.0, ge=0, le=1.0)


class Transition(BaseModel):
    type: Literal["none", "fade", "wipe", "slide", "zoom", "ai-transition", "custom"] = "none"
    duration: float = 1.0
    settings: Dict[str, Any] = Field(default_factory=dict)


class Scene(ChildRecord, Timed):
    name: str
    description: str = ""
    background: Background = Field(default_factory=Background)
    transition: Transition = Field(default_factory=Transition)


class Vector3(BaseModel):
    x: float = 0
    y: float = 0
    z: float = 0


class MediaElement(ChildRecord, Timed):
    type: Literal["video", "image", "audio", "text", "3d-model", "ai-generated", "effect"]
    name: str
    file_url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    position: Vector3 = Field(default_factory=Vector3)
    rotation: Vector3 = Field(default_factory=Vector3)
    opacity: float = Field(default=1.0, ge=0, le=1.0)
    volume: float = Field(default=1.0, ge=0, le=2.0)
    muted: bool = False
    scene_id: Optional[str] = None


class VideoExportSettings(BaseModel):
    format: VideoFormat = "mp4"
    quality: VideoQuality = "1080p"
    codec: Literal["h264", "h265", "vp9", "av1"] = "h264"
    bitrate: int = 8000  # kbps


class VideoExportedFile(ExportedFile):
    resolution: Resolution = Field(default_factory=Resolution)


class VideoProject(SharedAggregate):
    title: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    resolution: Resolution = Field(default_factory=Resolution)
    frame_rate: int = Field(default=30, gt=0)
    duration: float = 0.0
    scenes: List[Scene] = Field(default_factory=list)
    media_elements: List[MediaElement] = Field(default_factory=list)
    export_settings: VideoExportSettings = Field(default_factory=VideoExportSettings)
    exported_files: List[VideoExportedFile] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    status: Literal["draft", "processing", "completed", "archived"] = "draft"
    last_opened: Optional[datetime] = None

    def calculate_duration(self) -> float:
        self.duration = max_end_time(self.scenes)
        return self.duration

    def get_scene(self, scene_id: str) -> Optional[Scene]:
        return find_child(self.scenes, scene_id)

    def add_scene(self, scene: Scene) -> Scene:
        self.scenes = [*self.scenes, scene]
        self.calculate_duration()
        self.touch()
        return scene

    def update_scene(self, scene_id: str, changes: Dict[str, Any]) -> Optional[Scene]:
        scene = self.get_scene(scene_id)
        if scene is None:
            return None
        scene = patched(scene, changes)
        self.scenes = [scene if s.id == scene_id else s for s in self.scenes]
        self.calculate_duration()
        self.touch()
        return scene

    def remove_scene(self, scene_id: str) -> List[MediaElement]:
        """
        Remove a scene and cascade to its media elements.

        Returns the media elements removed by the cascade.
        """
        self.scenes = [s for s in self.scenes if s.id != scene_id]
        cascaded = [m for m in self.media_elements if m.scene_id == scene_id]
        self.media_elements = [m for m in self.media_elements if m.scene_id != scene_id]
        self.calculate_duration()
        self.touch()
        return cascaded

    def add_media_element(self, element: MediaElement) -> MediaElement:
        self.media_elements = [*self.media_elements, element]
        self.touch()
        return element

    def remove_media_element(self, element_id: str) -> bool:
        remaining = [m for m in self.media_elements if m.id != element_id]
        removed = len(remaining) != len(self.media_elements)
        self.media_elements = remaining
        self.touch()
        return removed

    def mark_opened(self) -> None:
        self.last_opened = utcnow()

    def export(self, base_url: str, format: Optional[str] = None, quality: Optional[str] = None) -> VideoExportedFile:
        if format:
            self.export_settings.format = format
        if quality:
            self.export_settings.quality = quality
        settings = self.export_settings
        width, height = QUALITY_RESOLUTIONS[settings.quality]
        exported = VideoExportedFile(
            url=f"{base_url}/exports/{self.id}_{epoch_ms()}.{settings.format}",
            format=settings.format,
            quality=settings.quality,
            duration=self.duration,
            file_size=int(self.duration * settings.bitrate * 1000 / 8),
            resolution=Resolution(width=width, height=height),
        )
        self.exported_files = [*self.exported_files, exported]
        self.status = "completed"
        self.touch()
        return exported
