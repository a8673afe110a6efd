"""
Audio project aggregate.

The project owns its tracks. Every structural change to the track list
(add / update / remove) is followed by `calculate_duration()`, so
`duration == max(track.start_time + track.duration)` holds after each call.
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

TrackType = Literal["vocal", "instrument", "beat", "effect", "ai-generated", "other"]
AudioFormat = Literal["mp3", "wav", "ogg", "flac", "aac"]
AudioQuality = Literal["low", "medium", "high", "ultra"]

AUDIO_BYTES_PER_SECOND = {"low": 8_000, "medium": 16_000, "high": 40_000, "ultra": 176_400}


class Effect(BaseModel):
    type: str
    settings: Dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True


class AudioTrack(ChildRecord, Timed):
    name: str
    type: TrackType = "other"
    file_url: str
    waveform_url: Optional[str] = None
    volume: float = Field(default=1.0, ge=0, le=2.0)
    muted: bool = False
    solo: bool = False
    effects: List[Effect] = Field(default_factory=list)


class MasterSettings(BaseModel):
    volume: float = Field(default=1.0, ge=0, le=2.0)
    effects: List[Effect] = Field(default_factory=list)


class AudioExportSettings(BaseModel):
    format: AudioFormat = "mp3"
    quality: AudioQuality = "high"
    normalization: bool = True


class AudioProject(SharedAggregate):
    title: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    tracks: List[AudioTrack] = Field(default_factory=list)
    master_settings: MasterSettings = Field(default_factory=MasterSettings)
    export_settings: AudioExportSettings = Field(default_factory=AudioExportSettings)
    exported_files: List[ExportedFile] = Field(default_factory=list)
    duration: float = 0.0
    bpm: int = Field(default=120, gt=0)
    key: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    cover_image: Optional[str] = None
    status: Literal["draft", "processing", "completed", "archived"] = "draft"
    last_opened: Optional[datetime] = None

    # ── Track list mutations ──────────────────────────────────────────────

    def calculate_duration(self) -> float:
        self.duration = max_end_time(self.tracks)
        return self.duration

    def get_track(self, track_id: str) -> Optional[AudioTrack]:
        return find_child(self.tracks, track_id)

    def add_track(self, track: AudioTrack) -> AudioTrack:
        self.tracks = [*self.tracks, track]
        self.calculate_duration()
        self.touch()
        return track

    def update_track(self, track_id: str, changes: Dict[str, Any]) -> Optional[AudioTrack]:
        """Apply field changes to one track. Returns None when the id is unknown."""
        track = self.get_track(track_id)
        if track is None:
            return None
        track = patched(track, changes)
        self.tracks = [track if t.id == track_id else t for t in self.tracks]
        self.calculate_duration()
        self.touch()
        return track

    def remove_track(self, track_id: str) -> bool:
        remaining = [t for t in self.tracks if t.id != track_id]
        removed = len(remaining) != len(self.tracks)
        self.tracks = remaining
        self.calculate_duration()
        self.touch()
        return removed

    def mark_opened(self) -> None:
        self.last_opened = utcnow()

    def export(
        self,
        base_url: str,
        format: Optional[str] = None,
        quality: Optional[str] = None,
        normalization: Optional[bool] = None,
    ) -> ExportedFile:
        """
        Record a (simulated) render of the mix and mark the project completed.

        File size is an estimate from duration and the quality's byte rate.
        """
        if format:
            self.export_settings.format = format
        if quality:
            self.export_settings.quality = quality
        if normalization is not None:
            self.export_settings.normalization = normalization
        settings = self.export_settings
        exported = ExportedFile(
            url=f"{base_url}/exports/{self.id}_{epoch_ms()}.{settings.format}",
            format=settings.format,
            quality=settings.quality,
            duration=self.duration,
            file_size=int(self.duration * AUDIO_BYTES_PER_SECOND[settings.quality]),
        )
        self.exported_files = [*self.exported_files, exported]
        self.status = "completed"
        self.touch()
        return exported
