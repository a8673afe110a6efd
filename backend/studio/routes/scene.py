"""
EdAiVi Studio Backend: 3D Scene Routes
======================================

What:  /api/scene: 3D scenes, their objects and lights, cloning and
       collaborators. Object and light counts in the scene metadata are
       kept in step by the Scene3D aggregate.

Anyone who can view a scene may clone it; the clone is private, not a
template, and owned by the caller.
"""

from typing import List

from fastapi import APIRouter, Query, status

from studio.dependencies import CurrentUser, StoreDep
from studio.models import Scene3D
from studio.models.scene3d import Light, Object3D
from studio.schemas.common import ErrorResponse
from studio.schemas.projects import (
    CloneRequest,
    CollaboratorAddedResponse,
    CollaboratorRequest,
    DeletedResponse,
    LightCreate,
    Object3DCreate,
    Scene3DCreate,
    Scene3DUpdate,
)
from studio.services.scene_service import scene_service

router = APIRouter(prefix="/api/scene", tags=["3D Scenes"])

_ERRORS = {
    403: {"description": "Caller lacks the required access", "model": ErrorResponse},
    404: {"description": "Scene (or child) not found", "model": ErrorResponse},
}


@router.get("", response_model=List[Scene3D], summary="List 3D scenes")
async def list_scenes(
    user: CurrentUser,
    store: StoreDep,
    templates: bool = Query(default=False, description="Only public templates"),
) -> List[Scene3D]:
    return await scene_service.list_scenes(store, user, templates_only=templates)


@router.post("", response_model=Scene3D, status_code=status.HTTP_201_CREATED, summary="Create a scene")
async def create_scene(body: Scene3DCreate, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.create_scene(store, user, body.model_dump())


@router.get("/{scene_id}", response_model=Scene3D, responses=_ERRORS, summary="Get a scene")
async def get_scene(scene_id: str, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.get_scene(store, user, scene_id)


@router.put("/{scene_id}", response_model=Scene3D, responses=_ERRORS, summary="Update a scene")
async def update_scene(scene_id: str, body: Scene3DUpdate, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.update_scene(store, user, scene_id, body.model_dump(exclude_unset=True))


@router.delete("/{scene_id}", response_model=DeletedResponse, responses=_ERRORS, summary="Delete a scene")
async def delete_scene(scene_id: str, user: CurrentUser, store: StoreDep) -> DeletedResponse:
    await scene_service.delete_scene(store, user, scene_id)
    return DeletedResponse(message="Scene deleted", id=scene_id)


@router.post(
    "/{scene_id}/objects",
    response_model=Object3D,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add an object",
)
async def add_object(scene_id: str, body: Object3DCreate, user: CurrentUser, store: StoreDep) -> Object3D:
    return await scene_service.add_object(store, user, scene_id, body.model_dump())


@router.delete("/{scene_id}/objects/{object_id}", response_model=Scene3D, responses=_ERRORS, summary="Remove an object")
async def remove_object(scene_id: str, object_id: str, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.remove_object(store, user, scene_id, object_id)


@router.post(
    "/{scene_id}/lights",
    response_model=Light,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add a light",
)
async def add_light(scene_id: str, body: LightCreate, user: CurrentUser, store: StoreDep) -> Light:
    return await scene_service.add_light(store, user, scene_id, body.model_dump())


@router.delete("/{scene_id}/lights/{light_id}", response_model=Scene3D, responses=_ERRORS, summary="Remove a light")
async def remove_light(scene_id: str, light_id: str, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.remove_light(store, user, scene_id, light_id)


@router.post(
    "/{scene_id}/clone",
    response_model=Scene3D,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Clone a scene into the caller's library",
)
async def clone_scene(scene_id: str, body: CloneRequest, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.clone_scene(store, user, scene_id, body.name)


@router.post(
    "/{scene_id}/collaborators",
    response_model=CollaboratorAddedResponse,
    responses={**_ERRORS, 400: {"description": "Already a collaborator", "model": ErrorResponse}},
    summary="Add a collaborator by email",
)
async def add_collaborator(
    scene_id: str, body: CollaboratorRequest, user: CurrentUser, store: StoreDep
) -> CollaboratorAddedResponse:
    collaborator, invited = await scene_service.add_collaborator(store, user, scene_id, body.email, body.role)
    return CollaboratorAddedResponse(
        message="Collaborator added",
        collaborator=collaborator,
        email=invited.email,
        display_name=invited.display_name,
    )


@router.delete(
    "/{scene_id}/collaborators/{user_id}",
    response_model=Scene3D,
    responses=_ERRORS,
    summary="Remove a collaborator",
)
async def remove_collaborator(scene_id: str, user_id: str, user: CurrentUser, store: StoreDep) -> Scene3D:
    return await scene_service.remove_collaborator(store, user, scene_id, user_id)
