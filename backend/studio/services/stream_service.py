"""
EdAiVi Studio Backend: Stream Session Service
=============================================

What:  Stream session CRUD, owner-driven status transitions, chat and
       viewer-count updates.
How:   Status changes go through `StreamSession.transition_to()`, the only
       code path that consults the transition table. Refused transitions
       raise InvalidTransitionError (400) before anything is mutated.
Who:   Called by routes/stream.py.

Who may do what:
    owner         → update, delete, change status, report viewer counts
    any viewer    → read, post chat while the stream is live or paused
"""

import logging
from typing import Any, Dict, List

from studio.database import Store
from studio.models import StreamSession, StreamStatus, User
from studio.models.stream import ChatMessage, StreamEvent
from studio.services import project_access as access

logger = logging.getLogger(__name__)

RESOURCE = "stream"


class StreamService:

    async def list_streams(self, store: Store, user: User) -> List[StreamSession]:
        return await access.list_visible(store.streams, user)

    async def create_stream(self, store: Store, user: User, data: Dict[str, Any]) -> StreamSession:
        stream = StreamSession(owner_id=user.id, **data)
        await store.streams.insert(stream)
        logger.info("Stream scheduled", extra={"stream_id": stream.id, "user_id": user.id})
        return stream

    async def get_stream(self, store: Store, user: User, stream_id: str) -> StreamSession:
        return await access.load_viewable(store.streams, stream_id, user, RESOURCE)

    async def update_stream(self, store: Store, user: User, stream_id: str, changes: Dict[str, Any]) -> StreamSession:
        stream = await access.load_owned(store.streams, stream_id, user, RESOURCE)
        stream.apply_changes(changes)
        return await store.streams.update(stream)

    async def delete_stream(self, store: Store, user: User, stream_id: str) -> None:
        await access.load_owned(store.streams, stream_id, user, RESOURCE)
        await store.streams.delete(stream_id)

    async def change_status(
        self, store: Store, user: User, stream_id: str, target: StreamStatus
    ) -> StreamEvent:
        stream = await access.load_owned(store.streams, stream_id, user, RESOURCE)
        previous = stream.status
        event = stream.transition_to(target)
        await store.streams.update(stream)
        logger.info(
            "Stream status changed",
            extra={"stream_id": stream.id, "from": previous.value, "to": stream.status.value},
        )
        return event

    async def post_chat(
        self, store: Store, user: User, stream_id: str, message: str, message_type: str = "text"
    ) -> ChatMessage:
        stream = await access.load_viewable(store.streams, stream_id, user, RESOURCE)
        chat = ChatMessage(
            user_id=user.id,
            username=user.display_name,
            message=message,
            type=message_type,
        )
        stream.add_chat_message(chat)
        await store.streams.update(stream)
        return chat

    async def update_viewer_count(self, store: Store, user: User, stream_id: str, count: int) -> int:
        stream = await access.load_owned(store.streams, stream_id, user, RESOURCE)
        peak = stream.update_viewer_count(count)
        await store.streams.update(stream)
        return peak


stream_service = StreamService()
