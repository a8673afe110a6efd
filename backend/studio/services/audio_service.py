"""
EdAiVi Studio Backend: Audio Project Service
============================================

What:  CRUD for audio projects and their tracks, export, and collaborators.
How:   Access is checked through `project_access`; track mutations delegate
       to AudioProject methods, which keep `duration` recomputed.
Who:   Called by routes/audio.py.
"""

import logging
from typing import Any, Dict, List, Optional

from studio.config import settings
from studio.database import Store
from studio.exceptions import NotFoundError
from studio.models import AudioProject, AudioTrack, User
from studio.models.base import ExportedFile
from studio.services import project_access as access

logger = logging.getLogger(__name__)

RESOURCE = "audio project"


class AudioService:

    async def list_projects(self, store: Store, user: User) -> List[AudioProject]:
        return await access.list_visible(store.audio_projects, user)

    async def create_project(self, store: Store, user: User, data: Dict[str, Any]) -> AudioProject:
        project = AudioProject(owner_id=user.id, **data)
        await store.audio_projects.insert(project)
        logger.info("Audio project created", extra={"project_id": project.id, "user_id": user.id})
        return project

    async def get_project(self, store: Store, user: User, project_id: str) -> AudioProject:
        project = await access.load_viewable(store.audio_projects, project_id, user, RESOURCE)
        project.mark_opened()
        return project

    async def update_project(
        self, store: Store, user: User, project_id: str, changes: Dict[str, Any]
    ) -> AudioProject:
        project = await access.load_owned(store.audio_projects, project_id, user, RESOURCE)
        project.apply_changes(changes)
        return await store.audio_projects.update(project)

    async def delete_project(self, store: Store, user: User, project_id: str) -> None:
        await access.load_owned(store.audio_projects, project_id, user, RESOURCE)
        await store.audio_projects.delete(project_id)
        logger.info("Audio project deleted", extra={"project_id": project_id, "user_id": user.id})

    # ── Tracks ────────────────────────────────────────────────────────────

    async def add_track(self, store: Store, user: User, project_id: str, data: Dict[str, Any]) -> AudioTrack:
        project = await access.load_editable(store.audio_projects, project_id, user, RESOURCE)
        track = project.add_track(AudioTrack(**data))
        await store.audio_projects.update(project)
        return track

    async def update_track(
        self, store: Store, user: User, project_id: str, track_id: str, changes: Dict[str, Any]
    ) -> AudioTrack:
        project = await access.load_editable(store.audio_projects, project_id, user, RESOURCE)
        track = project.update_track(track_id, changes)
        if track is None:
            raise NotFoundError("track", track_id)
        await store.audio_projects.update(project)
        return track

    async def remove_track(self, store: Store, user: User, project_id: str, track_id: str) -> AudioProject:
        project = await access.load_editable(store.audio_projects, project_id, user, RESOURCE)
        if not project.remove_track(track_id):
            raise NotFoundError("track", track_id)
        return await store.audio_projects.update(project)

    # ── Export ────────────────────────────────────────────────────────────

    async def export(
        self,
        store: Store,
        user: User,
        project_id: str,
        format: Optional[str] = None,
        quality: Optional[str] = None,
        normalization: Optional[bool] = None,
    ) -> ExportedFile:
        project = await access.load_for_member(store.audio_projects, project_id, user, RESOURCE)
        exported = project.export(
            settings.media_base_url, format=format, quality=quality, normalization=normalization
        )
        await store.audio_projects.update(project)
        return exported

    # ── Collaborators ─────────────────────────────────────────────────────

    async def add_collaborator(self, store: Store, user: User, project_id: str, email: str, role: Optional[str]):
        return await access.add_collaborator(
            store, store.audio_projects, project_id, user, email, role, resource=RESOURCE
        )

    async def remove_collaborator(self, store: Store, user: User, project_id: str, user_id: str) -> AudioProject:
        return await access.remove_collaborator(store.audio_projects, project_id, user, user_id, resource=RESOURCE)


audio_service = AudioService()
