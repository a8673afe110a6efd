"""
EdAiVi Studio Backend: Audio Project Routes
===========================================

What:  /api/audio: audio projects, their tracks, export and collaborators.
How:   Handlers translate bodies into plain dicts and call `audio_service`,
       which enforces the view/edit/owner rules.

Routes:
    GET    /api/audio                              list visible projects
    POST   /api/audio                              create (caller is owner)
    GET    /api/audio/{id}                         read (stamps last_opened)
    PUT    /api/audio/{id}                         update (owner)
    DELETE /api/audio/{id}                         delete (owner)
    POST   /api/audio/{id}/tracks                  add track (owner/editor)
    PUT    /api/audio/{id}/tracks/{track_id}       update track (owner/editor)
    DELETE /api/audio/{id}/tracks/{track_id}       remove track (owner/editor)
    POST   /api/audio/{id}/export                  render mix (any member)
    POST   /api/audio/{id}/collaborators           add by email (owner)
    DELETE /api/audio/{id}/collaborators/{user_id} remove (owner)
"""

from typing import List

from fastapi import APIRouter, status

from studio.dependencies import CurrentUser, StoreDep
from studio.models import AudioProject, AudioTrack
from studio.models.base import ExportedFile
from studio.schemas.common import ErrorResponse
from studio.schemas.projects import (
    AudioExportRequest,
    AudioProjectCreate,
    AudioProjectUpdate,
    CollaboratorAddedResponse,
    CollaboratorRequest,
    DeletedResponse,
    TrackCreate,
    TrackUpdate,
)
from studio.services.audio_service import audio_service

router = APIRouter(prefix="/api/audio", tags=["Audio"])

_ERRORS = {
    403: {"description": "Caller lacks the required access", "model": ErrorResponse},
    404: {"description": "Project (or child) not found", "model": ErrorResponse},
}


@router.get("", response_model=List[AudioProject], summary="List audio projects")
async def list_projects(user: CurrentUser, store: StoreDep) -> List[AudioProject]:
    return await audio_service.list_projects(store, user)


@router.post("", response_model=AudioProject, status_code=status.HTTP_201_CREATED, summary="Create a project")
async def create_project(body: AudioProjectCreate, user: CurrentUser, store: StoreDep) -> AudioProject:
    return await audio_service.create_project(store, user, body.model_dump())


@router.get("/{project_id}", response_model=AudioProject, responses=_ERRORS, summary="Get a project")
async def get_project(project_id: str, user: CurrentUser, store: StoreDep) -> AudioProject:
    return await audio_service.get_project(store, user, project_id)


@router.put("/{project_id}", response_model=AudioProject, responses=_ERRORS, summary="Update a project")
async def update_project(
    project_id: str, body: AudioProjectUpdate, user: CurrentUser, store: StoreDep
) -> AudioProject:
    return await audio_service.update_project(store, user, project_id, body.model_dump(exclude_unset=True))


@router.delete("/{project_id}", response_model=DeletedResponse, responses=_ERRORS, summary="Delete a project")
async def delete_project(project_id: str, user: CurrentUser, store: StoreDep) -> DeletedResponse:
    await audio_service.delete_project(store, user, project_id)
    return DeletedResponse(message="Audio project deleted", id=project_id)


# ── Tracks ────────────────────────────────────────────────────────────────


@router.post(
    "/{project_id}/tracks",
    response_model=AudioTrack,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add a track",
)
async def add_track(project_id: str, body: TrackCreate, user: CurrentUser, store: StoreDep) -> AudioTrack:
    return await audio_service.add_track(store, user, project_id, body.model_dump())


@router.put(
    "/{project_id}/tracks/{track_id}",
    response_model=AudioTrack,
    responses=_ERRORS,
    summary="Update a track",
)
async def update_track(
    project_id: str, track_id: str, body: TrackUpdate, user: CurrentUser, store: StoreDep
) -> AudioTrack:
    return await audio_service.update_track(
        store, user, project_id, track_id, body.model_dump(exclude_unset=True)
    )


@router.delete(
    "/{project_id}/tracks/{track_id}",
    response_model=AudioProject,
    responses=_ERRORS,
    summary="Remove a track",
)
async def remove_track(project_id: str, track_id: str, user: CurrentUser, store: StoreDep) -> AudioProject:
    return await audio_service.remove_track(store, user, project_id, track_id)


# ── Export / collaborators ────────────────────────────────────────────────


@router.post("/{project_id}/export", response_model=ExportedFile, responses=_ERRORS, summary="Export the mix")
async def export_project(
    project_id: str, body: AudioExportRequest, user: CurrentUser, store: StoreDep
) -> ExportedFile:
    return await audio_service.export(
        store,
        user,
        project_id,
        format=body.format,
        quality=body.quality,
        normalization=body.normalization,
    )


@router.post(
    "/{project_id}/collaborators",
    response_model=CollaboratorAddedResponse,
    responses={**_ERRORS, 400: {"description": "Already a collaborator", "model": ErrorResponse}},
    summary="Add a collaborator by email",
)
async def add_collaborator(
    project_id: str, body: CollaboratorRequest, user: CurrentUser, store: StoreDep
) -> CollaboratorAddedResponse:
    collaborator, invited = await audio_service.add_collaborator(store, user, project_id, body.email, body.role)
    return CollaboratorAddedResponse(
        message="Collaborator added",
        collaborator=collaborator,
        email=invited.email,
        display_name=invited.display_name,
    )


@router.delete(
    "/{project_id}/collaborators/{user_id}",
    response_model=AudioProject,
    responses=_ERRORS,
    summary="Remove a collaborator",
)
async def remove_collaborator(project_id: str, user_id: str, user: CurrentUser, store: StoreDep) -> AudioProject:
    return await audio_service.remove_collaborator(store, user, project_id, user_id)
