"""
EdAiVi Studio Backend: HTTP API Tests
=====================================

What:  End-to-end requests through the full middleware stack and exception
       handlers, against a fresh seeded store per test.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client).

What we test:
    ✅ Health, API index and status checks
    ✅ Unknown routes and invalid bodies answer with the JSON error shape
    ✅ Register → login → profile, and 401 without a token
    ✅ A metered generation charges the caller and reports the balance
    ✅ Audio project CRUD with tracks and collaborators
    ✅ Stream status changes, including a refused transition
    ✅ X-Request-ID is echoed or generated
"""

import pytest

from studio.config import settings
from studio.seed import ADMIN_CREDITS

from conftest import TEST_PASSWORD


def assert_error_shape(body: dict, error: str) -> None:
    assert body["error"] == error
    assert isinstance(body["message"], str)
    assert "timestamp" in body
    assert "details" in body


class TestServiceRoutes:

    @pytest.mark.asyncio
    async def test_health_reports_store_available(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["store"] == "available"

    @pytest.mark.asyncio
    async def test_api_index_lists_areas(self, test_client):
        response = await test_client.get("/api")
        assert response.status_code == 200
        assert "/api/stream" in response.json()["endpoints"]["streams"]

    @pytest.mark.asyncio
    async def test_status_counts_seed_documents(self, test_client):
        response = await test_client.get("/api/status")
        documents = response.json()["documents"]
        assert documents["ai_models"] == 3
        assert documents["audio_projects"] == 1

    @pytest.mark.asyncio
    async def test_unknown_route_is_json_404(self, test_client):
        response = await test_client.get("/api/nothing-here")
        assert response.status_code == 404
        body = response.json()
        assert_error_shape(body, "not_found")
        assert body["details"] == {"path": "/api/nothing-here", "method": "GET"}

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"

        generated = await test_client.get("/api")
        assert generated.headers["X-Request-ID"]


class TestAuthRoutes:

    @pytest.mark.asyncio
    async def test_register_login_profile(self, test_client):
        registered = await test_client.post(
            "/api/auth/register",
            json={"email": "Route@Example.com", "password": "route-pass-1", "display_name": "Route"},
        )
        assert registered.status_code == 201
        assert registered.json()["verification_token"]

        login = await test_client.post(
            "/api/auth/login", json={"email": "route@example.com", "password": "route-pass-1"}
        )
        assert login.status_code == 200
        token = login.json()["token"]

        profile = await test_client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})
        assert profile.status_code == 200
        assert profile.json()["user"]["email"] == "route@example.com"

    @pytest.mark.asyncio
    async def test_profile_without_token_is_401(self, test_client):
        response = await test_client.get("/api/auth/profile")
        assert response.status_code == 401
        assert_error_shape(response.json(), "unauthorized")

    @pytest.mark.asyncio
    async def test_garbage_token_is_401(self, test_client):
        response = await test_client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_bad_login_body_is_400(self, test_client):
        response = await test_client.post("/api/auth/login", json={"email": "x@example.com"})
        assert response.status_code == 400
        body = response.json()
        assert_error_shape(body, "validation_error")
        assert body["details"]["errors"]

    @pytest.mark.asyncio
    async def test_seed_admin_can_log_in(self, test_client):
        response = await test_client.post(
            "/api/auth/login",
            json={"email": settings.admin_email, "password": settings.admin_password},
        )
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["id"] == "admin"
        assert user["ai_credits"] == ADMIN_CREDITS

    @pytest.mark.asyncio
    async def test_wrong_password_is_401(self, test_client, make_user):
        make_user("careful@example.com")
        response = await test_client.post(
            "/api/auth/login", json={"email": "careful@example.com", "password": TEST_PASSWORD + "x"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"


class TestAIRoutes:

    @pytest.mark.asyncio
    async def test_generate_text_charges_one_credit(self, test_client, make_user, auth_headers):
        user = make_user("writer@example.com", credits=5)

        response = await test_client.post(
            "/api/ai/generate/text",
            json={"model_id": "model1", "prompt": "a haiku about tape"},
            headers=auth_headers(user),
        )

        assert response.status_code == 200
        body = response.json()
        assert "a haiku about tape" in body["text"]
        assert body["model"] == {"id": "model1", "name": "TextGen Basic"}
        assert body["credits_used"] == 1
        assert body["credits_remaining"] == 4
        assert user.usage.ai_credits == 4

    @pytest.mark.asyncio
    async def test_generate_without_credits_is_403(self, test_client, make_user, auth_headers):
        user = make_user("broke-route@example.com", credits=0)
        response = await test_client.post(
            "/api/ai/generate/text",
            json={"model_id": "model1", "prompt": "hello"},
            headers=auth_headers(user),
        )
        assert response.status_code == 403
        body = response.json()
        assert_error_shape(body, "insufficient_credits")
        assert body["details"] == {"required": 1, "available": 0}

    @pytest.mark.asyncio
    async def test_wrong_model_type_is_400(self, test_client, make_user, auth_headers):
        user = make_user("mixup@example.com")
        response = await test_client.post(
            "/api/ai/generate/image",
            json={"model_id": "model1", "prompt": "a cat"},
            headers=auth_headers(user),
        )
        assert response.status_code == 400
        assert user.usage.ai_credits == 100

    @pytest.mark.asyncio
    async def test_missing_prompt_is_400(self, test_client, make_user, auth_headers):
        user = make_user("silent@example.com")
        response = await test_client.post(
            "/api/ai/generate/text", json={"model_id": "model1"}, headers=auth_headers(user)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_model_is_404(self, test_client, make_user, auth_headers):
        user = make_user("lost-route@example.com")
        response = await test_client.get("/api/ai/models/does-not-exist", headers=auth_headers(user))
        assert response.status_code == 404
        assert_error_shape(response.json(), "not_found")

    @pytest.mark.asyncio
    async def test_purchase_credits(self, test_client, make_user, auth_headers):
        user = make_user("buyer@example.com", credits=2)

        bought = await test_client.post(
            "/api/ai/credits/purchase", json={"amount": 50}, headers=auth_headers(user)
        )
        assert bought.status_code == 200
        assert bought.json()["credits"] == 52

        refused = await test_client.post(
            "/api/ai/credits/purchase", json={"amount": 0}, headers=auth_headers(user)
        )
        assert refused.status_code == 400

        balance = await test_client.get("/api/ai/credits", headers=auth_headers(user))
        assert balance.json()["credits"] == 52

    @pytest.mark.asyncio
    async def test_catalog_lists_featured_first(self, test_client, make_user, auth_headers):
        user = make_user("browser@example.com")
        response = await test_client.get("/api/ai/models", headers=auth_headers(user))
        assert response.status_code == 200
        models = response.json()
        assert {m["id"] for m in models} == {"model1", "model2", "model3"}
        featured = [m["is_featured"] for m in models]
        assert featured == sorted(featured, reverse=True)


class TestAudioRoutes:

    @pytest.mark.asyncio
    async def test_project_lifecycle(self, test_client, make_user, auth_headers):
        owner = make_user("producer@example.com")
        headers = auth_headers(owner)

        created = await test_client.post("/api/audio", json={"title": "Demo"}, headers=headers)
        assert created.status_code == 201
        project_id = created.json()["id"]
        assert created.json()["owner_id"] == owner.id

        track = await test_client.post(
            f"/api/audio/{project_id}/tracks",
            json={"name": "Bass", "file_url": "https://cdn.test/bass.wav", "start_time": 4, "duration": 16},
            headers=headers,
        )
        assert track.status_code == 201

        project = await test_client.get(f"/api/audio/{project_id}", headers=headers)
        assert project.json()["duration"] == 20

        renamed = await test_client.put(f"/api/audio/{project_id}", json={"title": "Final"}, headers=headers)
        assert renamed.json()["title"] == "Final"
        assert renamed.json()["bpm"] == 120

        deleted = await test_client.delete(f"/api/audio/{project_id}", headers=headers)
        assert deleted.json() == {"message": "Audio project deleted", "id": project_id}

        gone = await test_client.get(f"/api/audio/{project_id}", headers=headers)
        assert gone.status_code == 404

    @pytest.mark.asyncio
    async def test_stranger_gets_403_on_private_project(self, test_client, make_user, auth_headers):
        owner = make_user("private@example.com")
        stranger = make_user("peeker@example.com")
        created = await test_client.post("/api/audio", json={"title": "Hidden"}, headers=auth_headers(owner))

        response = await test_client.get(f"/api/audio/{created.json()['id']}", headers=auth_headers(stranger))

        assert response.status_code == 403
        assert_error_shape(response.json(), "forbidden")

    @pytest.mark.asyncio
    async def test_collaborators(self, test_client, make_user, auth_headers):
        owner = make_user("leader@example.com")
        make_user("member@example.com", display_name="Member")
        headers = auth_headers(owner)
        project_id = (await test_client.post("/api/audio", json={"title": "Team"}, headers=headers)).json()["id"]

        unknown = await test_client.post(
            f"/api/audio/{project_id}/collaborators",
            json={"email": "nobody@example.com", "role": "editor"},
            headers=headers,
        )
        assert unknown.status_code == 404

        added = await test_client.post(
            f"/api/audio/{project_id}/collaborators",
            json={"email": "member@example.com", "role": "editor"},
            headers=headers,
        )
        assert added.status_code == 200
        assert added.json()["display_name"] == "Member"
        assert added.json()["collaborator"]["role"] == "editor"

        duplicate = await test_client.post(
            f"/api/audio/{project_id}/collaborators",
            json={"email": "member@example.com"},
            headers=headers,
        )
        assert duplicate.status_code == 400

    @pytest.mark.asyncio
    async def test_public_project_export_is_members_only(self, test_client, make_user, auth_headers):
        passerby = make_user("passerby@example.com")
        response = await test_client.post(
            "/api/audio/project1/export", json={"format": "mp3", "quality": "low"}, headers=auth_headers(passerby)
        )
        assert response.status_code == 403
        assert_error_shape(response.json(), "forbidden")

    @pytest.mark.asyncio
    async def test_collaborator_exports_seed_project(self, test_client, store, make_user, auth_headers):
        listener = make_user("listener@example.com")
        (await store.audio_projects.find_by_id("project1")).add_collaborator(listener.id, "viewer")

        response = await test_client.post(
            "/api/audio/project1/export", json={"format": "mp3", "quality": "low"}, headers=auth_headers(listener)
        )

        assert response.status_code == 200
        assert response.json()["file_size"] == 30 * 8000

    @pytest.mark.asyncio
    async def test_rejected_update_keeps_the_stored_project(self, test_client, make_user, auth_headers):
        owner = make_user("careful-owner@example.com")
        headers = auth_headers(owner)
        project_id = (await test_client.post("/api/audio", json={"title": "Original"}, headers=headers)).json()["id"]

        response = await test_client.put(
            f"/api/audio/{project_id}", json={"title": "Changed", "tags": None}, headers=headers
        )

        assert response.status_code == 400
        assert_error_shape(response.json(), "validation_error")
        stored = await test_client.get(f"/api/audio/{project_id}", headers=headers)
        assert stored.json()["title"] == "Original"


class TestStreamRoutes:

    @pytest.mark.asyncio
    async def test_status_changes_and_refused_transition(self, test_client, make_user, auth_headers):
        host = make_user("streamer@example.com")
        headers = auth_headers(host)
        stream_id = (await test_client.post("/api/stream", json={"title": "Live set"}, headers=headers)).json()["id"]

        live = await test_client.post(f"/api/stream/{stream_id}/status", json={"status": "live"}, headers=headers)
        assert live.status_code == 200
        assert live.json()["type"] == "stream_start"

        refused = await test_client.post(
            f"/api/stream/{stream_id}/status", json={"status": "archived"}, headers=headers
        )
        assert refused.status_code == 400
        assert_error_shape(refused.json(), "invalid_transition")

        stream = await test_client.get(f"/api/stream/{stream_id}", headers=headers)
        assert stream.json()["status"] == "live"
        assert len(stream.json()["events"]) == 1

    @pytest.mark.asyncio
    async def test_unknown_status_value_is_400(self, test_client, make_user, auth_headers):
        host = make_user("typo@example.com")
        headers = auth_headers(host)
        stream_id = (await test_client.post("/api/stream", json={"title": "Oops"}, headers=headers)).json()["id"]

        response = await test_client.post(
            f"/api/stream/{stream_id}/status", json={"status": "exploded"}, headers=headers
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_chat_and_viewers(self, test_client, make_user, auth_headers):
        host = make_user("dj@example.com")
        fan = make_user("crowd@example.com", display_name="Crowd")
        headers = auth_headers(host)
        stream_id = (await test_client.post("/api/stream", json={"title": "Party"}, headers=headers)).json()["id"]

        closed = await test_client.post(
            f"/api/stream/{stream_id}/chat", json={"message": "early"}, headers=auth_headers(fan)
        )
        assert closed.status_code == 400

        await test_client.post(f"/api/stream/{stream_id}/status", json={"status": "live"}, headers=headers)
        chat = await test_client.post(
            f"/api/stream/{stream_id}/chat", json={"message": "hey"}, headers=auth_headers(fan)
        )
        assert chat.status_code == 201
        assert chat.json()["username"] == "Crowd"

        viewers = await test_client.post(f"/api/stream/{stream_id}/viewers", json={"count": 12}, headers=headers)
        assert viewers.json() == {"count": 12, "peak_viewers": 12}
