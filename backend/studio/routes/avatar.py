"""
EdAiVi Studio Backend: Avatar Routes
====================================

What:  /api/avatar: 3D avatars with their animations and textures.
Who:   Only the owner edits an avatar; anyone may view or clone a public one.
"""

from typing import List

from fastapi import APIRouter, status

from studio.dependencies import CurrentUser, StoreDep
from studio.models import Avatar3D
from studio.models.avatar import Animation, Texture
from studio.schemas.common import ErrorResponse
from studio.schemas.projects import (
    AnimationCreate,
    AvatarCreate,
    AvatarUpdate,
    CloneRequest,
    DeletedResponse,
    TextureCreate,
)
from studio.services.avatar_service import avatar_service

router = APIRouter(prefix="/api/avatar", tags=["Avatars"])

_ERRORS = {
    403: {"description": "Caller lacks the required access", "model": ErrorResponse},
    404: {"description": "Avatar (or child) not found", "model": ErrorResponse},
}


@router.get("", response_model=List[Avatar3D], summary="List avatars")
async def list_avatars(user: CurrentUser, store: StoreDep) -> List[Avatar3D]:
    return await avatar_service.list_avatars(store, user)


@router.post("", response_model=Avatar3D, status_code=status.HTTP_201_CREATED, summary="Create an avatar")
async def create_avatar(body: AvatarCreate, user: CurrentUser, store: StoreDep) -> Avatar3D:
    return await avatar_service.create_avatar(store, user, body.model_dump())


@router.get("/{avatar_id}", response_model=Avatar3D, responses=_ERRORS, summary="Get an avatar")
async def get_avatar(avatar_id: str, user: CurrentUser, store: StoreDep) -> Avatar3D:
    return await avatar_service.get_avatar(store, user, avatar_id)


@router.put("/{avatar_id}", response_model=Avatar3D, responses=_ERRORS, summary="Update an avatar")
async def update_avatar(avatar_id: str, body: AvatarUpdate, user: CurrentUser, store: StoreDep) -> Avatar3D:
    return await avatar_service.update_avatar(store, user, avatar_id, body.model_dump(exclude_unset=True))


@router.delete("/{avatar_id}", response_model=DeletedResponse, responses=_ERRORS, summary="Delete an avatar")
async def delete_avatar(avatar_id: str, user: CurrentUser, store: StoreDep) -> DeletedResponse:
    await avatar_service.delete_avatar(store, user, avatar_id)
    return DeletedResponse(message="Avatar deleted", id=avatar_id)


@router.post(
    "/{avatar_id}/animations",
    response_model=Animation,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add an animation",
)
async def add_animation(avatar_id: str, body: AnimationCreate, user: CurrentUser, store: StoreDep) -> Animation:
    return await avatar_service.add_animation(store, user, avatar_id, body.model_dump())


@router.delete(
    "/{avatar_id}/animations/{animation_id}",
    response_model=Avatar3D,
    responses=_ERRORS,
    summary="Remove an animation",
)
async def remove_animation(avatar_id: str, animation_id: str, user: CurrentUser, store: StoreDep) -> Avatar3D:
    return await avatar_service.remove_animation(store, user, avatar_id, animation_id)


@router.post(
    "/{avatar_id}/textures",
    response_model=Texture,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add a texture",
)
async def add_texture(avatar_id: str, body: TextureCreate, user: CurrentUser, store: StoreDep) -> Texture:
    return await avatar_service.add_texture(store, user, avatar_id, body.model_dump())


@router.delete(
    "/{avatar_id}/textures/{texture_id}",
    response_model=Avatar3D,
    responses=_ERRORS,
    summary="Remove a texture",
)
async def remove_texture(avatar_id: str, texture_id: str, user: CurrentUser, store: StoreDep) -> Avatar3D:
    return await avatar_service.remove_texture(store, user, avatar_id, texture_id)


@router.post(
    "/{avatar_id}/clone",
    response_model=Avatar3D,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Clone an avatar into the caller's library",
)
async def clone_avatar(avatar_id: str, body: CloneRequest, user: CurrentUser, store: StoreDep) -> Avatar3D:
    return await avatar_service.clone_avatar(store, user, avatar_id, body.name)
