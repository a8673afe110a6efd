"""
Live-stream session document and its status state machine.

Transitions are driven only through `transition_to()`, which consults
STREAM_TRANSITIONS and refuses anything not listed there. A refused
transition raises InvalidTransitionError and leaves the session unchanged.

    scheduled ──► live ◄──► paused
        │          │          │
        ▼          ▼          ▼
    cancelled    ended ◄──────┘
                   │
                   ▼
                archived
"""

import enum
import math
from datetime import datetime
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, Field

from studio.exceptions import InvalidTransitionError, ValidationError
from studio.models.base import ChildRecord, OwnedDocument, utcnow

MAX_CHAT_MESSAGE_LENGTH = 500


class StreamStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    PAUSED = "paused"
    ENDED = "ended"
    ARCHIVED = "archived"
    CANCELLED = "cancelled"


STREAM_TRANSITIONS: Dict[StreamStatus, FrozenSet[StreamStatus]] = {
    StreamStatus.SCHEDULED: frozenset({StreamStatus.LIVE, StreamStatus.CANCELLED}),
    StreamStatus.LIVE: frozenset({StreamStatus.PAUSED, StreamStatus.ENDED}),
    StreamStatus.PAUSED: frozenset({StreamStatus.LIVE, StreamStatus.ENDED}),
    StreamStatus.ENDED: frozenset({StreamStatus.ARCHIVED}),
    StreamStatus.ARCHIVED: frozenset(),
    StreamStatus.CANCELLED: frozenset(),
}

# Chat is open while the stream is on air
CHAT_OPEN_STATES = frozenset({StreamStatus.LIVE, StreamStatus.PAUSED})

EventType = Literal[
    "stream_start", "stream_end", "stream_pause", "stream_resume",
    "viewer_join", "viewer_leave", "donation", "subscription",
    "milestone", "technical_issue", "custom",
]


def can_transition(current: StreamStatus, target: StreamStatus) -> bool:
    return target in STREAM_TRANSITIONS.get(current, frozenset())


class StreamEvent(ChildRecord):
    type: EventType
    timestamp: datetime = Field(default_factory=utcnow)
    description: Optional[str] = None


class ChatMessage(ChildRecord):
    user_id: Optional[str] = None
    username: str
    message: str = Field(min_length=1, max_length=MAX_CHAT_MESSAGE_LENGTH)
    type: Literal["text", "emote", "donation", "subscription", "system", "moderation"] = "text"
    is_highlighted: bool = False
    timestamp: datetime = Field(default_factory=utcnow)


class ChatSettings(BaseModel):
    enabled: bool = True
    slow_mode: bool = False
    slow_mode_interval: int = 5  # seconds
    followers_only: bool = False
    subscribers_only: bool = False
    moderation_level: Literal["none", "low", "medium", "high"] = "medium"


class ViewerSample(BaseModel):
    count: int = Field(ge=0)
    timestamp: datetime = Field(default_factory=utcnow)


class ChatStats(BaseModel):
    total_messages: int = 0
    unique_chatters: int = 0


class StreamAnalytics(BaseModel):
    viewer_counts: List[ViewerSample] = Field(default_factory=list)
    peak_viewers: int = 0
    total_views: int = 0
    chat_stats: ChatStats = Field(default_factory=ChatStats)


class StreamSession(OwnedDocument):
    title: str = Field(max_length=100)
    description: str = Field(default="", max_length=1000)
    is_public: bool = True
    is_recorded: bool = True
    category: Literal["music", "gaming", "art", "talk", "education", "technology", "other"] = "other"
    tags: List[str] = Field(default_factory=list)
    thumbnail_url: Optional[str] = None
    scheduled_start_time: Optional[datetime] = None
    actual_start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: int = 0  # seconds
    status: StreamStatus = StreamStatus.SCHEDULED
    chat_settings: ChatSettings = Field(default_factory=ChatSettings)
    analytics: StreamAnalytics = Field(default_factory=StreamAnalytics)
    events: List[StreamEvent] = Field(default_factory=list)
    chat: List[ChatMessage] = Field(default_factory=list)

    # ── State machine ──────────────────────────────────────────────────────

    def transition_to(self, target: StreamStatus) -> StreamEvent:
        """
        Move to `target` and append the matching event.

        Raises:
            InvalidTransitionError: target is not reachable from the current status
        """
        target = StreamStatus(target)
        current = self.status
        if not can_transition(current, target):
            raise InvalidTransitionError(current=current.value, target=target.value)

        now = utcnow()
        if target is StreamStatus.LIVE:
            if current is StreamStatus.SCHEDULED:
                event_type = "stream_start"
                self.actual_start_time = now
            else:
                event_type = "stream_resume"
        elif target is StreamStatus.PAUSED:
            event_type = "stream_pause"
        elif target is StreamStatus.ENDED:
            event_type = "stream_end"
            self.end_time = now
            if self.actual_start_time is not None:
                self.duration = math.floor((now - self.actual_start_time).total_seconds())
        else:
            event_type = "custom"

        self.status = target
        event = StreamEvent(
            type=event_type,
            timestamp=now,
            description=f"Stream {current.value} -> {target.value}",
        )
        self.events = [*self.events, event]
        self.touch()
        return event

    def start(self) -> StreamEvent:
        return self.transition_to(StreamStatus.LIVE)

    def pause(self) -> StreamEvent:
        return self.transition_to(StreamStatus.PAUSED)

    def end(self) -> StreamEvent:
        return self.transition_to(StreamStatus.ENDED)

    # ── Chat and analytics ─────────────────────────────────────────────────

    @property
    def chat_open(self) -> bool:
        return self.chat_settings.enabled and self.status in CHAT_OPEN_STATES

    def add_chat_message(self, message: ChatMessage) -> ChatMessage:
        if not self.chat_open:
            raise ValidationError(
                "Chat is not available for this stream",
                field="message",
                context={"status": self.status.value, "chat_enabled": self.chat_settings.enabled},
            )
        known = {m.user_id or m.username for m in self.chat}
        self.chat = [*self.chat, message]
        stats = self.analytics.chat_stats
        stats.total_messages += 1
        if (message.user_id or message.username) not in known:
            stats.unique_chatters += 1
        self.touch()
        return message

    def update_viewer_count(self, count: int) -> int:
        """Append a viewer sample. Returns the (possibly raised) peak."""
        analytics = self.analytics
        analytics.viewer_counts = [*analytics.viewer_counts, ViewerSample(count=count)]
        if count > analytics.peak_viewers:
            analytics.peak_viewers = count
        self.touch()
        return analytics.peak_viewers
