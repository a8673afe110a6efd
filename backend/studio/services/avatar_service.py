"""
EdAiVi Studio Backend: Avatar Service
=====================================

What:  CRUD for 3D avatars, their animations and textures, and cloning.
Who:   Called by routes/avatar.py.

Avatars have no collaborators: only the owner edits, and anyone may view
(and clone) a public avatar.
"""

import logging
from typing import Any, Dict, List, Optional

from studio.database import Store
from studio.exceptions import NotFoundError
from studio.models import Avatar3D, User
from studio.models.avatar import Animation, Texture
from studio.services import project_access as access

logger = logging.getLogger(__name__)

RESOURCE = "avatar"


class AvatarService:

    async def list_avatars(self, store: Store, user: User) -> List[Avatar3D]:
        return await access.list_visible(store.avatars, user)

    async def create_avatar(self, store: Store, user: User, data: Dict[str, Any]) -> Avatar3D:
        avatar = Avatar3D(owner_id=user.id, **data)
        await store.avatars.insert(avatar)
        return avatar

    async def get_avatar(self, store: Store, user: User, avatar_id: str) -> Avatar3D:
        return await access.load_viewable(store.avatars, avatar_id, user, RESOURCE)

    async def update_avatar(self, store: Store, user: User, avatar_id: str, changes: Dict[str, Any]) -> Avatar3D:
        avatar = await access.load_owned(store.avatars, avatar_id, user, RESOURCE)
        avatar.apply_changes(changes)
        return await store.avatars.update(avatar)

    async def delete_avatar(self, store: Store, user: User, avatar_id: str) -> None:
        await access.load_owned(store.avatars, avatar_id, user, RESOURCE)
        await store.avatars.delete(avatar_id)

    async def add_animation(self, store: Store, user: User, avatar_id: str, data: Dict[str, Any]) -> Animation:
        avatar = await access.load_owned(store.avatars, avatar_id, user, RESOURCE)
        animation = avatar.add_animation(Animation(**data))
        await store.avatars.update(avatar)
        return animation

    async def remove_animation(self, store: Store, user: User, avatar_id: str, animation_id: str) -> Avatar3D:
        avatar = await access.load_owned(store.avatars, avatar_id, user, RESOURCE)
        if not avatar.remove_animation(animation_id):
            raise NotFoundError("animation", animation_id)
        return await store.avatars.update(avatar)

    async def add_texture(self, store: Store, user: User, avatar_id: str, data: Dict[str, Any]) -> Texture:
        avatar = await access.load_owned(store.avatars, avatar_id, user, RESOURCE)
        texture = avatar.add_texture(Texture(**data))
        await store.avatars.update(avatar)
        return texture

    async def remove_texture(self, store: Store, user: User, avatar_id: str, texture_id: str) -> Avatar3D:
        avatar = await access.load_owned(store.avatars, avatar_id, user, RESOURCE)
        if not avatar.remove_texture(texture_id):
            raise NotFoundError("texture", texture_id)
        return await store.avatars.update(avatar)

    async def clone_avatar(self, store: Store, user: User, avatar_id: str, name: Optional[str] = None) -> Avatar3D:
        source = await access.load_viewable(store.avatars, avatar_id, user, RESOURCE)
        clone = source.clone(user.id, name)
        await store.avatars.insert(clone)
        logger.info("Avatar cloned", extra={"source_id": source.id, "avatar_id": clone.id})
        return clone


avatar_service = AvatarService()
