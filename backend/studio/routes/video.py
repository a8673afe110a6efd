"""
EdAiVi Studio Backend: Video Project Routes
===========================================

What:  /api/video: video projects, scenes, media elements, export and
       collaborators. Same access rules as audio projects.

Removing a scene also removes every media element placed in it; the
response is the project after the cascade.
"""

from typing import List

from fastapi import APIRouter, status

from studio.dependencies import CurrentUser, StoreDep
from studio.models import MediaElement, Scene, VideoProject
from studio.models.video import VideoExportedFile
from studio.schemas.common import ErrorResponse
from studio.schemas.projects import (
    CollaboratorAddedResponse,
    CollaboratorRequest,
    DeletedResponse,
    MediaElementCreate,
    SceneCreate,
    SceneUpdate,
    VideoExportRequest,
    VideoProjectCreate,
    VideoProjectUpdate,
)
from studio.services.video_service import video_service

router = APIRouter(prefix="/api/video", tags=["Video"])

_ERRORS = {
    403: {"description": "Caller lacks the required access", "model": ErrorResponse},
    404: {"description": "Project (or child) not found", "model": ErrorResponse},
}


@router.get("", response_model=List[VideoProject], summary="List video projects")
async def list_projects(user: CurrentUser, store: StoreDep) -> List[VideoProject]:
    return await video_service.list_projects(store, user)


@router.post("", response_model=VideoProject, status_code=status.HTTP_201_CREATED, summary="Create a project")
async def create_project(body: VideoProjectCreate, user: CurrentUser, store: StoreDep) -> VideoProject:
    return await video_service.create_project(store, user, body.model_dump())


@router.get("/{project_id}", response_model=VideoProject, responses=_ERRORS, summary="Get a project")
async def get_project(project_id: str, user: CurrentUser, store: StoreDep) -> VideoProject:
    return await video_service.get_project(store, user, project_id)


@router.put("/{project_id}", response_model=VideoProject, responses=_ERRORS, summary="Update a project")
async def update_project(
    project_id: str, body: VideoProjectUpdate, user: CurrentUser, store: StoreDep
) -> VideoProject:
    return await video_service.update_project(store, user, project_id, body.model_dump(exclude_unset=True))


@router.delete("/{project_id}", response_model=DeletedResponse, responses=_ERRORS, summary="Delete a project")
async def delete_project(project_id: str, user: CurrentUser, store: StoreDep) -> DeletedResponse:
    await video_service.delete_project(store, user, project_id)
    return DeletedResponse(message="Video project deleted", id=project_id)


# ── Scenes ────────────────────────────────────────────────────────────────


@router.post(
    "/{project_id}/scenes",
    response_model=Scene,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add a scene",
)
async def add_scene(project_id: str, body: SceneCreate, user: CurrentUser, store: StoreDep) -> Scene:
    return await video_service.add_scene(store, user, project_id, body.model_dump())


@router.put("/{project_id}/scenes/{scene_id}", response_model=Scene, responses=_ERRORS, summary="Update a scene")
async def update_scene(
    project_id: str, scene_id: str, body: SceneUpdate, user: CurrentUser, store: StoreDep
) -> Scene:
    return await video_service.update_scene(store, user, project_id, scene_id, body.model_dump(exclude_unset=True))


@router.delete(
    "/{project_id}/scenes/{scene_id}",
    response_model=VideoProject,
    responses=_ERRORS,
    summary="Remove a scene and its media",
)
async def remove_scene(project_id: str, scene_id: str, user: CurrentUser, store: StoreDep) -> VideoProject:
    return await video_service.remove_scene(store, user, project_id, scene_id)


# ── Media ─────────────────────────────────────────────────────────────────


@router.post(
    "/{project_id}/media",
    response_model=MediaElement,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 400: {"description": "Unknown scene_id", "model": ErrorResponse}},
    summary="Add a media element",
)
async def add_media_element(
    project_id: str, body: MediaElementCreate, user: CurrentUser, store: StoreDep
) -> MediaElement:
    return await video_service.add_media_element(store, user, project_id, body.model_dump())


@router.delete(
    "/{project_id}/media/{element_id}",
    response_model=VideoProject,
    responses=_ERRORS,
    summary="Remove a media element",
)
async def remove_media_element(
    project_id: str, element_id: str, user: CurrentUser, store: StoreDep
) -> VideoProject:
    return await video_service.remove_media_element(store, user, project_id, element_id)


# ── Export / collaborators ────────────────────────────────────────────────


@router.post(
    "/{project_id}/export",
    response_model=VideoExportedFile,
    responses=_ERRORS,
    summary="Export the video",
)
async def export_project(
    project_id: str, body: VideoExportRequest, user: CurrentUser, store: StoreDep
) -> VideoExportedFile:
    return await video_service.export(store, user, project_id, format=body.format, quality=body.quality)


@router.post(
    "/{project_id}/collaborators",
    response_model=CollaboratorAddedResponse,
    responses={**_ERRORS, 400: {"description": "Already a collaborator", "model": ErrorResponse}},
    summary="Add a collaborator by email",
)
async def add_collaborator(
    project_id: str, body: CollaboratorRequest, user: CurrentUser, store: StoreDep
) -> CollaboratorAddedResponse:
    collaborator, invited = await video_service.add_collaborator(store, user, project_id, body.email, body.role)
    return CollaboratorAddedResponse(
        message="Collaborator added",
        collaborator=collaborator,
        email=invited.email,
        display_name=invited.display_name,
    )


@router.delete(
    "/{project_id}/collaborators/{user_id}",
    response_model=VideoProject,
    responses=_ERRORS,
    summary="Remove a collaborator",
)
async def remove_collaborator(project_id: str, user_id: str, user: CurrentUser, store: StoreDep) -> VideoProject:
    return await video_service.remove_collaborator(store, user, project_id, user_id)
