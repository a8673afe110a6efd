"""
EdAiVi Studio Backend: Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the whole suite.
How:   Environment variables are set BEFORE any `studio` import so the
       settings singleton picks them up. Every test gets its own store and
       its own application instance; nothing is shared between tests
       except the password hash, which is slow to compute.

Fixture Hierarchy:
    Session-scoped:
    └── password_hash: pbkdf2 hash of TEST_PASSWORD

    Function-scoped:
    ├── store:        seeded in-memory document store
    ├── make_user:    factory inserting a user with a given plan/credits
    ├── auth_headers: factory building a Bearer header for a user
    ├── app:          create_app() bound to `store`
    └── test_client:  HTTPX AsyncClient over ASGITransport
"""

import os
import tempfile

os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["DEV_ACCESS_KEY"] = "test-dev-key"
os.environ["OWNER_EMAIL"] = "owner@example.com"
os.environ["SEED_DEMO_DATA"] = "true"
os.environ["STATIC_DIR"] = tempfile.mkdtemp(prefix="studio_static_")
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from studio.database import Store
from studio.models import User
from studio.models.user import Subscription, Usage
from studio.security import create_access_token, hash_password
from studio.seed import seed_store

TEST_PASSWORD = "password123"


@pytest.fixture(scope="session")
def password_hash() -> str:
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def store() -> Store:
    """A fresh store holding the demo seed (admin, model1..3, project1)."""
    fresh = Store()
    seed_store(fresh)
    return fresh


@pytest.fixture
def make_user(store, password_hash):
    """
    Factory inserting a user directly into the store.

    Usage:
        user = make_user("alice@example.com", plan="pro", credits=5)
    """

    def _make(email: str, plan: str = "free", credits: int = 100, display_name: str = "Test User") -> User:
        user = User(
            email=email,
            password_hash=password_hash,
            display_name=display_name,
            subscription=Subscription(plan=plan),
            usage=Usage(ai_credits=credits),
        )
        store.users.preload(user)
        return user

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id=user.id)}"}

    return _headers


@pytest.fixture
def app(store):
    from studio.main import create_app

    return create_app(store)


@pytest_asyncio.fixture
async def test_client(app):
    """
    Async HTTP client talking to a fresh application in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
