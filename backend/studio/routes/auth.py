"""
EdAiVi Studio Backend: Authentication Routes
============================================

What:  /api/auth: registration, login, profile, password flows, email
       verification, logout and developer login.
How:   Thin handlers; `auth_service` owns every rule. Tokens are stateless
       JWTs, so logout only tells the client to drop its token.

One-time tokens (email verification, password reset) would normally be
mailed. Outside production they are echoed in the response instead, since
no mailer is configured.
"""

import logging
from typing import Optional

from fastapi import APIRouter, status

from studio.config import settings
from studio.dependencies import CurrentUser, StoreDep
from studio.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    DevLoginRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenMessageResponse,
    UserResponse,
)
from studio.schemas.common import ErrorResponse, MessageResponse
from studio.services.auth_service import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

_AUTH_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Not authenticated", "model": ErrorResponse},
}


def _reveal(one_time_token: Optional[str]) -> Optional[str]:
    return None if settings.is_production else one_time_token


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: _AUTH_ERRORS[400]},
    summary="Create an account",
)
async def register(body: RegisterRequest, store: StoreDep) -> AuthResponse:
    result = await auth_service.register(store, body.email, body.password, body.display_name)
    return AuthResponse(
        message="User registered successfully",
        token=result.token,
        user=UserResponse.from_user(result.user),
        verification_token=_reveal(result.one_time_token),
    )


@router.post("/login", response_model=AuthResponse, responses=_AUTH_ERRORS, summary="Log in")
async def login(body: LoginRequest, store: StoreDep) -> AuthResponse:
    result = await auth_service.login(store, body.email, body.password)
    return AuthResponse(
        message="Login successful",
        token=result.token,
        user=UserResponse.from_user(result.user),
    )


@router.get("/profile", response_model=ProfileResponse, responses=_AUTH_ERRORS, summary="Current user")
async def get_profile(user: CurrentUser) -> ProfileResponse:
    return ProfileResponse(user=UserResponse.from_user(user))


@router.put("/profile", response_model=ProfileResponse, responses=_AUTH_ERRORS, summary="Update profile")
async def update_profile(body: ProfileUpdateRequest, user: CurrentUser, store: StoreDep) -> ProfileResponse:
    updated = await auth_service.update_profile(
        store,
        user,
        display_name=body.display_name,
        avatar=body.avatar,
        preferences=body.preferences,
    )
    return ProfileResponse(message="Profile updated", user=UserResponse.from_user(updated))


@router.put(
    "/change-password",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Change password",
)
async def change_password(body: ChangePasswordRequest, user: CurrentUser, store: StoreDep) -> MessageResponse:
    await auth_service.change_password(store, user, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")


@router.post(
    "/forgot-password",
    response_model=TokenMessageResponse,
    responses={404: {"description": "No account with that email", "model": ErrorResponse}},
    summary="Request a password reset token",
)
async def forgot_password(body: ForgotPasswordRequest, store: StoreDep) -> TokenMessageResponse:
    raw = await auth_service.forgot_password(store, body.email)
    return TokenMessageResponse(
        message="Password reset instructions have been sent",
        reset_token=_reveal(raw),
    )


@router.post(
    "/reset-password/{token}",
    response_model=TokenMessageResponse,
    responses={400: _AUTH_ERRORS[400]},
    summary="Set a new password with a reset token",
)
async def reset_password(token: str, body: ResetPasswordRequest, store: StoreDep) -> TokenMessageResponse:
    result = await auth_service.reset_password(store, token, body.password)
    return TokenMessageResponse(message="Password has been reset", token=result.token)


@router.get(
    "/verify-email/{token}",
    response_model=MessageResponse,
    responses={400: _AUTH_ERRORS[400]},
    summary="Confirm an email address",
)
async def verify_email(token: str, store: StoreDep) -> MessageResponse:
    await auth_service.verify_email(store, token)
    return MessageResponse(message="Email verified successfully")


@router.post("/logout", response_model=MessageResponse, summary="Log out")
async def logout() -> MessageResponse:
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/dev-login",
    response_model=AuthResponse,
    responses={
        401: {"description": "Email is not the owner's", "model": ErrorResponse},
        403: {"description": "Wrong developer key", "model": ErrorResponse},
    },
    summary="Owner-only developer login",
)
async def dev_login(body: DevLoginRequest, store: StoreDep) -> AuthResponse:
    result = await auth_service.dev_login(store, body.email, body.dev_key)
    logger.info("Developer login", extra={"user_id": result.user.id})
    return AuthResponse(
        message="Developer login successful",
        token=result.token,
        user=UserResponse.from_user(result.user, is_developer=True),
    )
