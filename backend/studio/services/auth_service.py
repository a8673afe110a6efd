"""
EdAiVi Studio Backend: Authentication Service
=============================================

What:  Registration, login, profile, password flows, email verification and
       developer login.
How:   Passwords and tokens come from `studio.security`; users live in
       `store.users`. Every failure is raised as a StudioError subclass.
Who:   Called by routes/auth.py.

Failure mapping:
    duplicate email on register          → ValidationError (400)
    unknown email or wrong password      → AuthenticationError (401), one message
    wrong current password               → AuthenticationError (401)
    unknown email on forgot-password     → NotFoundError (404)
    bad or expired one-time token        → ValidationError (400)
    developer key mismatch               → ForbiddenError (403)
    developer login with non-owner email → AuthenticationError (401)
"""

import hmac
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional

from studio.config import settings
from studio.database import Store
from studio.exceptions import AuthenticationError, ForbiddenError, NotFoundError, ValidationError
from studio.models import User, utcnow
from studio.models.user import Subscription, Usage
from studio.security import (
    create_access_token,
    hash_password,
    hash_token,
    new_one_time_token,
    verify_password,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass
class AuthResult:
    user: User
    token: str
    one_time_token: Optional[str] = None
    is_developer: bool = False


class AuthService:

    def issue_token(self, user: User) -> str:
        return create_access_token(user_id=user.id)

    async def register(self, store: Store, email: str, password: str, display_name: str) -> AuthResult:
        if await store.users.find_one(email=email) is not None:
            raise ValidationError("A user with this email is already registered", field="email")

        raw, hashed, expires = new_one_time_token(timedelta(hours=settings.verification_token_hours))
        user = User(
            email=email,
            password_hash=hash_password(password),
            display_name=display_name,
            verification_token=hashed,
            verification_expires=expires,
            usage=Usage(ai_credits=settings.default_ai_credits),
        )
        await store.users.insert(user)
        logger.info("User registered", extra={"user_id": user.id})
        return AuthResult(user=user, token=self.issue_token(user), one_time_token=raw)

    async def login(self, store: Store, email: str, password: str) -> AuthResult:
        user = await store.users.find_one(email=email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        user.usage.last_login = utcnow()
        user.usage.login_count += 1
        await store.users.update(user)
        return AuthResult(user=user, token=self.issue_token(user))

    async def update_profile(
        self,
        store: Store,
        user: User,
        display_name: Optional[str] = None,
        avatar: Optional[str] = None,
        preferences: Optional[Dict[str, Any]] = None,
    ) -> User:
        changes: Dict[str, Any] = {}
        if display_name:
            changes["display_name"] = display_name.strip()
        if avatar:
            changes["avatar"] = avatar
        if preferences:
            changes["preferences"] = {**user.preferences.model_dump(), **preferences}
        user.apply_changes(changes)
        return await store.users.update(user)

    async def change_password(self, store: Store, user: User, current_password: str, new_password: str) -> None:
        if not verify_password(current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")
        user.password_hash = hash_password(new_password)
        await store.users.update(user)

    async def forgot_password(self, store: Store, email: str) -> str:
        """Issue a reset token. Returns the raw token (normally emailed)."""
        user = await store.users.find_one(email=email)
        if user is None:
            raise NotFoundError("user", context={"email": email})

        raw, hashed, expires = new_one_time_token(timedelta(minutes=settings.reset_token_minutes))
        user.reset_password_token = hashed
        user.reset_password_expires = expires
        await store.users.update(user)
        return raw

    async def _find_by_one_time_token(self, store: Store, raw_token: str, field: str, expires_field: str) -> User:
        hashed = hash_token(raw_token)
        now = utcnow()
        users = await store.users.find(
            lambda u: getattr(u, field) == hashed
            and getattr(u, expires_field) is not None
            and getattr(u, expires_field) > now
        )
        if not users:
            raise ValidationError("Token is invalid or has expired", field="token")
        return users[0]

    async def reset_password(self, store: Store, raw_token: str, password: str) -> AuthResult:
        user = await self._find_by_one_time_token(
            store, raw_token, "reset_password_token", "reset_password_expires"
        )
        user.password_hash = hash_password(password)
        user.reset_password_token = None
        user.reset_password_expires = None
        await store.users.update(user)
        return AuthResult(user=user, token=self.issue_token(user))

    async def verify_email(self, store: Store, raw_token: str) -> User:
        user = await self._find_by_one_time_token(
            store, raw_token, "verification_token", "verification_expires"
        )
        user.is_verified = True
        user.verification_token = None
        user.verification_expires = None
        return await store.users.update(user)

    async def dev_login(self, store: Store, email: str, dev_key: str) -> AuthResult:
        """
        Owner-only developer login.

        Ensures an admin/enterprise account exists for the owner email and
        issues a short-lived token carrying `is_developer` and `role` claims.
        """
        expected_key = settings.dev_access_key
        if not expected_key or not hmac.compare_digest(dev_key.encode(), expected_key.encode()):
            logger.warning("Developer login rejected: bad key")
            raise ForbiddenError("Invalid developer key")

        if not settings.owner_email or email != settings.owner_email.strip().lower():
            logger.warning("Developer login rejected: non-owner email")
            raise AuthenticationError("Only the owner may log in as developer")

        user = await store.users.find_one(email=email)
        if user is None:
            user = User(
                email=email,
                # Unusable hash: the developer account only logs in through this path
                password_hash="!",
                display_name="Developer",
                role="admin",
                is_verified=True,
                subscription=Subscription(plan="enterprise"),
                usage=Usage(ai_credits=settings.default_ai_credits),
            )
            await store.users.insert(user)
            logger.info("Developer account created", extra={"user_id": user.id})

        user.usage.last_login = utcnow()
        user.usage.login_count += 1
        await store.users.update(user)

        token = create_access_token(
            user_id=user.id,
            expires_delta=timedelta(hours=settings.dev_token_expires_hours),
            extra_claims={"is_developer": True, "role": "admin"},
        )
        return AuthResult(user=user, token=token, is_developer=True)


auth_service = AuthService()
