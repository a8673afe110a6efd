"""
EdAiVi Studio Backend: Video Project Service
============================================

What:  CRUD for video projects, scenes (with cascade), media elements,
       export and collaborators.
Who:   Called by routes/video.py.

Scene removal cascades: every media element whose `scene_id` equals the
removed scene's id is removed with it, then the duration is recomputed.
"""

import logging
from typing import Any, Dict, List, Optional

from studio.config import settings
from studio.database import Store
from studio.exceptions import NotFoundError, ValidationError
from studio.models import MediaElement, Scene, User, VideoProject
from studio.models.video import VideoExportedFile
from studio.services import project_access as access

logger = logging.getLogger(__name__)

RESOURCE = "video project"


class VideoService:

    async def list_projects(self, store: Store, user: User) -> List[VideoProject]:
        return await access.list_visible(store.video_projects, user)

    async def create_project(self, store: Store, user: User, data: Dict[str, Any]) -> VideoProject:
        project = VideoProject(owner_id=user.id, **data)
        await store.video_projects.insert(project)
        logger.info("Video project created", extra={"project_id": project.id, "user_id": user.id})
        return project

    async def get_project(self, store: Store, user: User, project_id: str) -> VideoProject:
        project = await access.load_viewable(store.video_projects, project_id, user, RESOURCE)
        project.mark_opened()
        return project

    async def update_project(
        self, store: Store, user: User, project_id: str, changes: Dict[str, Any]
    ) -> VideoProject:
        project = await access.load_owned(store.video_projects, project_id, user, RESOURCE)
        project.apply_changes(changes)
        return await store.video_projects.update(project)

    async def delete_project(self, store: Store, user: User, project_id: str) -> None:
        await access.load_owned(store.video_projects, project_id, user, RESOURCE)
        await store.video_projects.delete(project_id)

    # ── Scenes ────────────────────────────────────────────────────────────

    async def add_scene(self, store: Store, user: User, project_id: str, data: Dict[str, Any]) -> Scene:
        project = await access.load_editable(store.video_projects, project_id, user, RESOURCE)
        scene = project.add_scene(Scene(**data))
        await store.video_projects.update(project)
        return scene

    async def update_scene(
        self, store: Store, user: User, project_id: str, scene_id: str, changes: Dict[str, Any]
    ) -> Scene:
        project = await access.load_editable(store.video_projects, project_id, user, RESOURCE)
        scene = project.update_scene(scene_id, changes)
        if scene is None:
            raise NotFoundError("scene", scene_id)
        await store.video_projects.update(project)
        return scene

    async def remove_scene(self, store: Store, user: User, project_id: str, scene_id: str) -> VideoProject:
        project = await access.load_editable(store.video_projects, project_id, user, RESOURCE)
        if project.get_scene(scene_id) is None:
            raise NotFoundError("scene", scene_id)
        cascaded = project.remove_scene(scene_id)
        logger.info(
            "Scene removed",
            extra={"project_id": project.id, "scene_id": scene_id, "media_removed": len(cascaded)},
        )
        return await store.video_projects.update(project)

    # ── Media ─────────────────────────────────────────────────────────────

    async def add_media_element(
        self, store: Store, user: User, project_id: str, data: Dict[str, Any]
    ) -> MediaElement:
        project = await access.load_editable(store.video_projects, project_id, user, RESOURCE)
        scene_id = data.get("scene_id")
        if scene_id and project.get_scene(scene_id) is None:
            raise ValidationError("Media element references an unknown scene", field="scene_id")
        element = project.add_media_element(MediaElement(**data))
        await store.video_projects.update(project)
        return element

    async def remove_media_element(
        self, store: Store, user: User, project_id: str, element_id: str
    ) -> VideoProject:
        project = await access.load_editable(store.video_projects, project_id, user, RESOURCE)
        if not project.remove_media_element(element_id):
            raise NotFoundError("media element", element_id)
        return await store.video_projects.update(project)

    # ── Export / collaborators ────────────────────────────────────────────

    async def export(
        self,
        store: Store,
        user: User,
        project_id: str,
        format: Optional[str] = None,
        quality: Optional[str] = None,
    ) -> VideoExportedFile:
        project = await access.load_for_member(store.video_projects, project_id, user, RESOURCE)
        exported = project.export(settings.media_base_url, format=format, quality=quality)
        await store.video_projects.update(project)
        return exported

    async def add_collaborator(self, store: Store, user: User, project_id: str, email: str, role: Optional[str]):
        return await access.add_collaborator(
            store, store.video_projects, project_id, user, email, role, resource=RESOURCE
        )

    async def remove_collaborator(self, store: Store, user: User, project_id: str, user_id: str) -> VideoProject:
        return await access.remove_collaborator(store.video_projects, project_id, user, user_id, resource=RESOURCE)


video_service = VideoService()
