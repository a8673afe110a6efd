"""
EdAiVi Studio Backend: Stream Session Routes
============================================

What:  /api/stream: stream sessions, owner-driven status changes, chat and
       viewer counts.
How:   `POST /{id}/status` is the only way to move a stream through its
       lifecycle. Transitions outside the table answer 400 with error code
       `invalid_transition` and leave the session unchanged.
"""

from typing import List

from fastapi import APIRouter, status

from studio.dependencies import CurrentUser, StoreDep
from studio.models import StreamSession
from studio.models.stream import ChatMessage, StreamEvent
from studio.schemas.common import ErrorResponse
from studio.schemas.projects import DeletedResponse
from studio.schemas.stream import (
    ChatMessageRequest,
    StatusChangeRequest,
    StreamCreate,
    StreamUpdate,
    ViewerCountRequest,
    ViewerCountResponse,
)
from studio.services.stream_service import stream_service

router = APIRouter(prefix="/api/stream", tags=["Streams"])

_ERRORS = {
    403: {"description": "Caller lacks the required access", "model": ErrorResponse},
    404: {"description": "Stream not found", "model": ErrorResponse},
}


@router.get("", response_model=List[StreamSession], summary="List streams")
async def list_streams(user: CurrentUser, store: StoreDep) -> List[StreamSession]:
    return await stream_service.list_streams(store, user)


@router.post("", response_model=StreamSession, status_code=status.HTTP_201_CREATED, summary="Schedule a stream")
async def create_stream(body: StreamCreate, user: CurrentUser, store: StoreDep) -> StreamSession:
    return await stream_service.create_stream(store, user, body.model_dump())


@router.get("/{stream_id}", response_model=StreamSession, responses=_ERRORS, summary="Get a stream")
async def get_stream(stream_id: str, user: CurrentUser, store: StoreDep) -> StreamSession:
    return await stream_service.get_stream(store, user, stream_id)


@router.put("/{stream_id}", response_model=StreamSession, responses=_ERRORS, summary="Update stream details")
async def update_stream(stream_id: str, body: StreamUpdate, user: CurrentUser, store: StoreDep) -> StreamSession:
    return await stream_service.update_stream(store, user, stream_id, body.model_dump(exclude_unset=True))


@router.delete("/{stream_id}", response_model=DeletedResponse, responses=_ERRORS, summary="Delete a stream")
async def delete_stream(stream_id: str, user: CurrentUser, store: StoreDep) -> DeletedResponse:
    await stream_service.delete_stream(store, user, stream_id)
    return DeletedResponse(message="Stream deleted", id=stream_id)


@router.post(
    "/{stream_id}/status",
    response_model=StreamEvent,
    responses={**_ERRORS, 400: {"description": "Transition not allowed", "model": ErrorResponse}},
    summary="Move the stream to a new status",
)
async def change_status(
    stream_id: str, body: StatusChangeRequest, user: CurrentUser, store: StoreDep
) -> StreamEvent:
    """
    Allowed moves: scheduled → live|cancelled, live → paused|ended,
    paused → live|ended, ended → archived. Returns the recorded event.
    """
    return await stream_service.change_status(store, user, stream_id, body.status)


@router.post(
    "/{stream_id}/chat",
    response_model=ChatMessage,
    status_code=status.HTTP_201_CREATED,
    responses={**_ERRORS, 400: {"description": "Chat is closed", "model": ErrorResponse}},
    summary="Post a chat message",
)
async def post_chat(
    stream_id: str, body: ChatMessageRequest, user: CurrentUser, store: StoreDep
) -> ChatMessage:
    return await stream_service.post_chat(store, user, stream_id, body.message, body.type)


@router.post(
    "/{stream_id}/viewers",
    response_model=ViewerCountResponse,
    responses=_ERRORS,
    summary="Report the current viewer count",
)
async def update_viewers(
    stream_id: str, body: ViewerCountRequest, user: CurrentUser, store: StoreDep
) -> ViewerCountResponse:
    peak = await stream_service.update_viewer_count(store, user, stream_id, body.count)
    return ViewerCountResponse(count=body.count, peak_viewers=peak)
