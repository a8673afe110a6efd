# Models package init
"""
EdAiVi Studio Backend: Domain Documents
=======================================

What:  Pydantic documents stored by the repositories in `studio.database`.
How:   Each top-level document (an aggregate) exclusively owns its nested
       child lists; children are addressed by generated ids inside the
       parent's list, never stored as separate rows.

Document Inventory:
    - User              (user.py)
    - AIModel           (ai_model.py)
    - AudioProject      (audio.py)
    - VideoProject      (video.py)
    - Scene3D           (scene3d.py)
    - Avatar3D          (avatar.py)
    - StreamSession     (stream.py)
"""

from studio.models.ai_model import AIModel, UsageStats
from studio.models.audio import AudioProject, AudioTrack
from studio.models.avatar import Avatar3D
from studio.models.base import Collaborator, Document, new_id, utcnow
from studio.models.scene3d import Scene3D
from studio.models.stream import StreamSession, StreamStatus
from studio.models.user import User
from studio.models.video import MediaElement, Scene, VideoProject

__all__ = [
    "AIModel",
    "AudioProject",
    "AudioTrack",
    "Avatar3D",
    "Collaborator",
    "Document",
    "MediaElement",
    "Scene",
    "Scene3D",
    "StreamSession",
    "StreamStatus",
    "UsageStats",
    "User",
    "VideoProject",
    "new_id",
    "utcnow",
]
