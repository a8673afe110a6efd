"""
EdAiVi Studio Backend: 3D Scene Service
=======================================

What:  CRUD for 3D scenes, their objects and lights, cloning, collaborators.
How:   Object/light mutations go through Scene3D methods, which keep the
       metadata counters (object_count, light_count, poly/vertex totals)
       in step with the child lists.
Who:   Called by routes/scene.py.

Cloning:
    Any viewer may clone a scene. The clone belongs to the caller, is
    private and not a template, and starts with no collaborators.
"""

import logging
from typing import Any, Dict, List, Optional

from studio.database import Store
from studio.exceptions import NotFoundError
from studio.models import Scene3D, User
from studio.models.scene3d import Light, Object3D
from studio.services import project_access as access

logger = logging.getLogger(__name__)

RESOURCE = "scene"


class SceneService:

    async def list_scenes(self, store: Store, user: User, templates_only: bool = False) -> List[Scene3D]:
        scenes = await access.list_visible(store.scenes, user)
        if templates_only:
            scenes = [s for s in scenes if s.is_template]
        return scenes

    async def create_scene(self, store: Store, user: User, data: Dict[str, Any]) -> Scene3D:
        scene = Scene3D(owner_id=user.id, **data)
        await store.scenes.insert(scene)
        logger.info("Scene created", extra={"scene_id": scene.id, "user_id": user.id})
        return scene

    async def get_scene(self, store: Store, user: User, scene_id: str) -> Scene3D:
        return await access.load_viewable(store.scenes, scene_id, user, RESOURCE)

    async def update_scene(self, store: Store, user: User, scene_id: str, changes: Dict[str, Any]) -> Scene3D:
        scene = await access.load_owned(store.scenes, scene_id, user, RESOURCE)
        scene.apply_changes(changes)
        return await store.scenes.update(scene)

    async def delete_scene(self, store: Store, user: User, scene_id: str) -> None:
        await access.load_owned(store.scenes, scene_id, user, RESOURCE)
        await store.scenes.delete(scene_id)

    # ── Objects and lights ────────────────────────────────────────────────

    async def add_object(self, store: Store, user: User, scene_id: str, data: Dict[str, Any]) -> Object3D:
        scene = await access.load_editable(store.scenes, scene_id, user, RESOURCE)
        obj = scene.add_object(Object3D(**data))
        await store.scenes.update(scene)
        return obj

    async def remove_object(self, store: Store, user: User, scene_id: str, object_id: str) -> Scene3D:
        scene = await access.load_editable(store.scenes, scene_id, user, RESOURCE)
        if not scene.remove_object(object_id):
            raise NotFoundError("object", object_id)
        return await store.scenes.update(scene)

    async def add_light(self, store: Store, user: User, scene_id: str, data: Dict[str, Any]) -> Light:
        scene = await access.load_editable(store.scenes, scene_id, user, RESOURCE)
        light = scene.add_light(Light(**data))
        await store.scenes.update(scene)
        return light

    async def remove_light(self, store: Store, user: User, scene_id: str, light_id: str) -> Scene3D:
        scene = await access.load_editable(store.scenes, scene_id, user, RESOURCE)
        if not scene.remove_light(light_id):
            raise NotFoundError("light", light_id)
        return await store.scenes.update(scene)

    # ── Cloning / collaborators ───────────────────────────────────────────

    async def clone_scene(self, store: Store, user: User, scene_id: str, name: Optional[str] = None) -> Scene3D:
        source = await access.load_viewable(store.scenes, scene_id, user, RESOURCE)
        clone = source.clone(user.id, name)
        await store.scenes.insert(clone)
        logger.info("Scene cloned", extra={"source_id": source.id, "scene_id": clone.id, "user_id": user.id})
        return clone

    async def add_collaborator(self, store: Store, user: User, scene_id: str, email: str, role: Optional[str]):
        return await access.add_collaborator(store, store.scenes, scene_id, user, email, role, resource=RESOURCE)

    async def remove_collaborator(self, store: Store, user: User, scene_id: str, user_id: str) -> Scene3D:
        return await access.remove_collaborator(store.scenes, scene_id, user, user_id, resource=RESOURCE)


scene_service = SceneService()
