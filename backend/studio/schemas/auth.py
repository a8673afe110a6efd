"""
EdAiVi Studio Backend: Authentication Schemas
=============================================

What:  Request bodies and the public user view for /api/auth.
How:   Email addresses are trimmed and lower-cased on the way in so that
       lookups by email are case-insensitive. Password and display-name
       length rules live here, not in the service.
"""

import re
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from studio.models.user import Preferences

EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")
MIN_PASSWORD_LENGTH = 8


def normalize_email(value: str) -> str:
    email = value.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Please provide a valid email address")
    return email


class _EmailBody(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(_EmailBody):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    display_name: str = Field(min_length=2, max_length=50)

    @field_validator("display_name")
    @classmethod
    def strip_display_name(cls, v: str) -> str:
        return v.strip()


class LoginRequest(_EmailBody):
    password: str = Field(min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Partial update. `preferences` is merged into the stored preferences."""

    display_name: Optional[str] = Field(default=None, min_length=2, max_length=50)
    avatar: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class ForgotPasswordRequest(_EmailBody):
    pass


class ResetPasswordRequest(BaseModel):
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class DevLoginRequest(BaseModel):
    email: str
    dev_key: str
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash or token hashes."""

    id: str
    email: str
    display_name: str
    role: str
    is_verified: bool
    avatar: str
    plan: str
    ai_credits: int
    preferences: Preferences
    is_developer: bool = False
    created_at: datetime

    @classmethod
    def from_user(cls, user, is_developer: bool = False) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            is_verified=user.is_verified,
            avatar=user.avatar,
            plan=user.plan,
            ai_credits=user.usage.ai_credits,
            preferences=user.preferences,
            is_developer=is_developer,
            created_at=user.created_at,
        )


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserResponse
    # Only populated outside production, where no mailer delivers it
    verification_token: Optional[str] = None


class ProfileResponse(BaseModel):
    message: Optional[str] = None
    user: UserResponse


class TokenMessageResponse(BaseModel):
    message: str
    token: Optional[str] = None
    # Only populated outside production
    reset_token: Optional[str] = None
