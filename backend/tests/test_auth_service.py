"""
EdAiVi Studio Backend: Auth Service Unit Tests
==============================================

What:  Registration, login, one-time tokens and developer login.
How:   Real store and hashing; settings patched where a test needs a
       different developer configuration.
"""

from datetime import timedelta
from unittest.mock import patch

import jwt
import pytest

from studio.config import settings
from studio.exceptions import AuthenticationError, ForbiddenError, NotFoundError, ValidationError
from studio.models import utcnow
from studio.security import create_access_token, decode_access_token, hash_token
from studio.services.auth_service import AuthService

from conftest import TEST_PASSWORD


class TestRegisterAndLogin:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_register_creates_user_with_default_credits(self, store):
        result = await self.service.register(store, "new@example.com", "s3cret-pass", "Newbie")

        assert result.user.usage.ai_credits == settings.default_ai_credits
        assert result.user.password_hash != "s3cret-pass"
        assert result.user.verification_token == hash_token(result.one_time_token)
        assert decode_access_token(result.token)["sub"] == result.user.id

    @pytest.mark.asyncio
    async def test_duplicate_email_is_rejected(self, store, make_user):
        make_user("taken@example.com")
        with pytest.raises(ValidationError):
            await self.service.register(store, "taken@example.com", "another-pass", "Copy")

    @pytest.mark.asyncio
    async def test_login_stamps_usage(self, store, make_user):
        user = make_user("login@example.com")
        result = await self.service.login(store, "login@example.com", TEST_PASSWORD)
        assert result.user.id == user.id
        assert user.usage.login_count == 1
        assert user.usage.last_login is not None

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, store, make_user):
        make_user("real@example.com")
        with pytest.raises(AuthenticationError) as wrong_password:
            await self.service.login(store, "real@example.com", "not-the-password")
        with pytest.raises(AuthenticationError) as unknown_email:
            await self.service.login(store, "ghost@example.com", TEST_PASSWORD)
        assert wrong_password.value.message == unknown_email.value.message

    @pytest.mark.asyncio
    async def test_change_password_requires_current(self, store, make_user):
        user = make_user("change@example.com")
        with pytest.raises(AuthenticationError):
            await self.service.change_password(store, user, "wrong", "brand-new-pass")

        await self.service.change_password(store, user, TEST_PASSWORD, "brand-new-pass")
        result = await self.service.login(store, "change@example.com", "brand-new-pass")
        assert result.user.id == user.id

    @pytest.mark.asyncio
    async def test_profile_preferences_are_merged(self, store, make_user):
        user = make_user("prefs@example.com")
        await self.service.update_profile(store, user, preferences={"theme": "dark"})
        assert user.preferences.theme == "dark"
        assert user.preferences.language == "en"


class TestOneTimeTokens:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_reset_flow(self, store, make_user):
        make_user("forgot@example.com")
        raw = await self.service.forgot_password(store, "forgot@example.com")

        result = await self.service.reset_password(store, raw, "after-reset-pass")

        assert result.user.reset_password_token is None
        login = await self.service.login(store, "forgot@example.com", "after-reset-pass")
        assert login.user.id == result.user.id

    @pytest.mark.asyncio
    async def test_reset_token_is_single_use(self, store, make_user):
        make_user("once@example.com")
        raw = await self.service.forgot_password(store, "once@example.com")
        await self.service.reset_password(store, raw, "first-new-pass")
        with pytest.raises(ValidationError):
            await self.service.reset_password(store, raw, "second-new-pass")

    @pytest.mark.asyncio
    async def test_expired_token_is_rejected(self, store, make_user):
        user = make_user("late@example.com")
        raw = await self.service.forgot_password(store, "late@example.com")
        user.reset_password_expires = utcnow() - timedelta(seconds=1)
        with pytest.raises(ValidationError):
            await self.service.reset_password(store, raw, "too-late-pass")

    @pytest.mark.asyncio
    async def test_forgot_password_unknown_email(self, store):
        with pytest.raises(NotFoundError):
            await self.service.forgot_password(store, "nobody@example.com")

    @pytest.mark.asyncio
    async def test_verify_email(self, store):
        registered = await self.service.register(store, "verify@example.com", "verify-pass", "Vera")
        user = await self.service.verify_email(store, registered.one_time_token)
        assert user.is_verified is True
        assert user.verification_token is None


class TestDevLogin:

    def setup_method(self):
        self.service = AuthService()

    @pytest.mark.asyncio
    async def test_owner_with_key_gets_developer_token(self, store):
        result = await self.service.dev_login(store, settings.owner_email, settings.dev_access_key)

        claims = decode_access_token(result.token)
        assert claims["is_developer"] is True
        assert claims["role"] == "admin"
        assert result.user.role == "admin"
        assert result.user.plan == "enterprise"
        lifetime = claims["exp"] - claims["iat"]
        assert lifetime == settings.dev_token_expires_hours * 3600

    @pytest.mark.asyncio
    async def test_wrong_key_is_forbidden(self, store):
        with pytest.raises(ForbiddenError):
            await self.service.dev_login(store, settings.owner_email, "guess")
        assert await store.users.find_one(email=settings.owner_email) is None

    @pytest.mark.asyncio
    async def test_non_owner_email_is_unauthorized(self, store):
        with pytest.raises(AuthenticationError):
            await self.service.dev_login(store, "intruder@example.com", settings.dev_access_key)

    @pytest.mark.asyncio
    async def test_empty_configured_key_disables_dev_login(self, store):
        with patch.object(settings, "dev_access_key", ""):
            with pytest.raises(ForbiddenError):
                await self.service.dev_login(store, settings.owner_email, "")

    @pytest.mark.asyncio
    async def test_repeat_login_reuses_account(self, store):
        first = await self.service.dev_login(store, settings.owner_email, settings.dev_access_key)
        second = await self.service.dev_login(store, settings.owner_email, settings.dev_access_key)
        assert first.user.id == second.user.id
        assert second.user.usage.login_count == 2


class TestSessionTokens:

    def test_expired_token_raises(self):
        token = create_access_token(user_id="u1", expires_delta=timedelta(seconds=-5))
        with pytest.raises(jwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_token_signed_with_another_secret_is_invalid(self):
        token = create_access_token(user_id="u1", secret="some-other-secret")
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token(token)


class TestErrorContext:

    def test_caller_context_is_left_untouched(self):
        ctx = {"attempt": 1}
        err = ValidationError("Bad email", field="email", context=ctx)

        assert ctx == {"attempt": 1}
        assert err.context == {"attempt": 1, "field": "email"}

    def test_not_found_copies_context(self):
        ctx = {"email": "ghost@example.com"}
        err = NotFoundError("user", resource_id="u1", context=ctx)

        assert ctx == {"email": "ghost@example.com"}
        assert err.context["resource_id"] == "u1"
