"""
User document.

Lifecycle:
    1. Created at registration (or by seed/dev-login)
    2. usage.ai_credits mutated on every metered AI invocation and purchase
    3. Never hard-deleted
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from studio.models.base import Document

Role = Literal["user", "creator", "admin"]
Plan = Literal["free", "basic", "pro", "enterprise"]


class Subscription(BaseModel):
    plan: Plan = "free"
    status: Literal["active", "inactive", "pending", "cancelled"] = "active"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class NotificationPreferences(BaseModel):
    email: bool = True
    push: bool = True
    marketing: bool = False


class Preferences(BaseModel):
    theme: Literal["light", "dark", "system"] = "system"
    language: str = "en"
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)
    audio_quality: Literal["standard", "high", "ultra"] = "high"
    video_quality: Literal["480p", "720p", "1080p", "4k"] = "1080p"


class StorageUsage(BaseModel):
    """Bytes used per media type."""

    audio: int = 0
    video: int = 0
    models: int = 0
    total: int = 0


class Usage(BaseModel):
    storage: StorageUsage = Field(default_factory=StorageUsage)
    ai_credits: int = 100
    last_login: Optional[datetime] = None
    login_count: int = 0


class User(Document):
    email: str
    password_hash: str
    display_name: str
    avatar: str = "default-avatar.png"
    role: Role = "user"
    is_verified: bool = False

    # One-time tokens are stored as SHA-256 hex digests, never in clear.
    verification_token: Optional[str] = None
    verification_expires: Optional[datetime] = None
    reset_password_token: Optional[str] = None
    reset_password_expires: Optional[datetime] = None

    subscription: Subscription = Field(default_factory=Subscription)
    preferences: Preferences = Field(default_factory=Preferences)
    usage: Usage = Field(default_factory=Usage)

    @property
    def plan(self) -> str:
        return self.subscription.plan or "free"

    def adjust_credits(self, amount: int) -> int:
        """Add (or, with a negative amount, subtract) AI credits. Returns the new balance."""
        self.usage.ai_credits += amount
        self.touch()
        return self.usage.ai_credits

    def add_storage(self, media_type: Literal["audio", "video", "models"], size: int) -> None:
        setattr(self.usage.storage, media_type, getattr(self.usage.storage, media_type) + size)
        self.usage.storage.total += size
        self.touch()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', plan='{self.plan}')>"
