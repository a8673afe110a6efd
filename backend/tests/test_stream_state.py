"""
EdAiVi Studio Backend: Stream State Machine Tests
=================================================

What:  StreamSession transitions, chat gating and viewer analytics, plus
       the owner-only rule in StreamService.

What we test:
    ✅ Every listed transition is accepted, every other one refused
    ✅ A refused transition leaves status, events and timestamps unchanged
    ✅ Event types and the start/end timestamps and duration
    ✅ Chat only while live or paused, and only when enabled
    ✅ Peak viewers only rises
"""

import itertools
from datetime import timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from studio.exceptions import ForbiddenError, InvalidTransitionError, ValidationError
from studio.models import StreamSession, StreamStatus
from studio.models.stream import STREAM_TRANSITIONS, ChatMessage, ChatSettings
from studio.services.stream_service import StreamService

S = StreamStatus

ALLOWED = {
    (S.SCHEDULED, S.LIVE), (S.SCHEDULED, S.CANCELLED),
    (S.LIVE, S.PAUSED), (S.LIVE, S.ENDED),
    (S.PAUSED, S.LIVE), (S.PAUSED, S.ENDED),
    (S.ENDED, S.ARCHIVED),
}


def session_in(status: StreamStatus) -> StreamSession:
    return StreamSession(owner_id="host", title="Show", status=status)


class TestTransitionTable:

    def test_table_matches_the_documented_moves(self):
        listed = {(src, dst) for src, targets in STREAM_TRANSITIONS.items() for dst in targets}
        assert listed == ALLOWED

    @pytest.mark.parametrize("current,target", sorted(ALLOWED))
    def test_listed_transitions_are_accepted(self, current, target):
        stream = session_in(current)
        stream.transition_to(target)
        assert stream.status is target
        assert len(stream.events) == 1

    @pytest.mark.parametrize(
        "current,target",
        [pair for pair in itertools.product(S, S) if pair not in ALLOWED],
    )
    def test_unlisted_transitions_fail_closed(self, current, target):
        stream = session_in(current)
        before = stream.model_dump()

        with pytest.raises(InvalidTransitionError) as exc_info:
            stream.transition_to(target)

        assert exc_info.value.status_code == 400
        assert stream.model_dump() == before


class TestTransitionEffects:

    def test_going_live_stamps_start_and_records_stream_start(self):
        stream = session_in(S.SCHEDULED)
        event = stream.start()
        assert event.type == "stream_start"
        assert stream.actual_start_time is not None

    def test_pause_and_resume_events(self):
        stream = session_in(S.SCHEDULED)
        stream.start()
        first_start = stream.actual_start_time
        assert stream.pause().type == "stream_pause"
        assert stream.start().type == "stream_resume"
        assert stream.actual_start_time == first_start

    def test_ending_computes_whole_seconds(self):
        stream = session_in(S.SCHEDULED)
        stream.start()
        stream.actual_start_time = stream.actual_start_time - timedelta(seconds=90, milliseconds=700)
        event = stream.end()
        assert event.type == "stream_end"
        assert stream.end_time is not None
        assert stream.duration == 90

    def test_archive_and_cancel_are_custom_events(self):
        ended = session_in(S.ENDED)
        assert ended.transition_to(S.ARCHIVED).type == "custom"
        scheduled = session_in(S.SCHEDULED)
        assert scheduled.transition_to("cancelled").type == "custom"


class TestChat:

    def message(self, user_id: str, text: str = "hi") -> ChatMessage:
        return ChatMessage(user_id=user_id, username=user_id.title(), message=text)

    @pytest.mark.parametrize("status", [S.SCHEDULED, S.ENDED, S.ARCHIVED, S.CANCELLED])
    def test_chat_closed_off_air(self, status):
        stream = session_in(status)
        with pytest.raises(ValidationError):
            stream.add_chat_message(self.message("ann"))
        assert stream.chat == []

    def test_chat_closed_when_disabled(self):
        stream = StreamSession(owner_id="host", title="Quiet", status=S.LIVE,
                               chat_settings=ChatSettings(enabled=False))
        with pytest.raises(ValidationError):
            stream.add_chat_message(self.message("ann"))

    def test_counts_messages_and_unique_chatters(self):
        stream = session_in(S.LIVE)
        stream.add_chat_message(self.message("ann"))
        stream.add_chat_message(self.message("bob"))
        stream.pause()
        stream.add_chat_message(self.message("ann", "still here"))

        stats = stream.analytics.chat_stats
        assert stats.total_messages == 3
        assert stats.unique_chatters == 2

    def test_message_length_is_capped(self):
        with pytest.raises(PydanticValidationError):
            ChatMessage(username="ann", message="x" * 501)


class TestViewers:

    def test_peak_only_rises(self):
        stream = session_in(S.LIVE)
        assert stream.update_viewer_count(10) == 10
        assert stream.update_viewer_count(4) == 10
        assert stream.update_viewer_count(25) == 25
        assert [s.count for s in stream.analytics.viewer_counts] == [10, 4, 25]


class TestStreamService:

    def setup_method(self):
        self.service = StreamService()

    @pytest.mark.asyncio
    async def test_only_owner_changes_status(self, store, make_user):
        host = make_user("host@example.com")
        viewer = make_user("viewer@example.com")
        stream = await self.service.create_stream(store, host, {"title": "Launch"})

        with pytest.raises(ForbiddenError):
            await self.service.change_status(store, viewer, stream.id, S.LIVE)

        event = await self.service.change_status(store, host, stream.id, S.LIVE)
        assert event.type == "stream_start"
        assert (await store.streams.find_by_id(stream.id)).status is S.LIVE

    @pytest.mark.asyncio
    async def test_refused_transition_is_not_persisted(self, store, make_user):
        host = make_user("host2@example.com")
        stream = await self.service.create_stream(store, host, {"title": "Later"})
        stamp = stream.updated_at

        with pytest.raises(InvalidTransitionError):
            await self.service.change_status(store, host, stream.id, S.ARCHIVED)

        stored = await store.streams.find_by_id(stream.id)
        assert stored.status is S.SCHEDULED
        assert stored.events == []
        assert stored.updated_at == stamp

    @pytest.mark.asyncio
    async def test_viewer_may_chat_on_public_live_stream(self, store, make_user):
        host = make_user("host3@example.com")
        fan = make_user("fan@example.com", display_name="Fan")
        stream = await self.service.create_stream(store, host, {"title": "Open"})
        await self.service.change_status(store, host, stream.id, S.LIVE)

        chat = await self.service.post_chat(store, fan, stream.id, "hello")

        assert chat.user_id == fan.id
        assert chat.username == "Fan"
        assert stream.analytics.chat_stats.unique_chatters == 1
