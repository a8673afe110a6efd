"""Request bodies for /api/stream."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from studio.models.stream import MAX_CHAT_MESSAGE_LENGTH, ChatSettings, StreamStatus

StreamCategory = Literal["music", "gaming", "art", "talk", "education", "technology", "other"]


class StreamCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=1000)
    category: StreamCategory = "other"
    tags: List[str] = Field(default_factory=list)
    is_public: bool = True
    is_recorded: bool = True
    scheduled_start_time: Optional[datetime] = None
    chat_settings: ChatSettings = Field(default_factory=ChatSettings)


class StreamUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    category: Optional[StreamCategory] = None
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None
    thumbnail_url: Optional[str] = None
    scheduled_start_time: Optional[datetime] = None
    chat_settings: Optional[ChatSettings] = None


class StatusChangeRequest(BaseModel):
    status: StreamStatus


class ChatMessageRequest(BaseModel):
    message: str = Field(min_length=1, max_length=MAX_CHAT_MESSAGE_LENGTH)
    type: Literal["text", "emote", "donation", "subscription", "system", "moderation"] = "text"


class ViewerCountRequest(BaseModel):
    count: int = Field(ge=0)


class ViewerCountResponse(BaseModel):
    count: int
    peak_viewers: int
