"""
EdAiVi Studio Backend: Real-time Channel Tests
==============================================

What:  The /ws room relay: heartbeat, join/relay between two sockets,
       token handling and malformed frames.
How:   Starlette's synchronous TestClient, which speaks websockets to the
       app in-process. Room names are unique per test because the hub is a
       process-wide singleton.
"""

import uuid

import pytest
from starlette.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from studio.security import create_access_token


def unique_room(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def sync(ws) -> None:
    """Round-trip a ping so every earlier frame from `ws` has been handled."""
    ws.send_json({"type": "ping"})
    assert ws.receive_json() == {"type": "pong"}


@pytest.fixture
def client(app):
    # One shared portal, so every socket in a test lives on the same event loop.
    with TestClient(app) as test_client:
        yield test_client


class TestHeartbeatAndErrors:

    def test_ping_pong(self, client):
        with client.websocket_connect("/ws") as ws:
            sync(ws)

    def test_non_json_frame_gets_error_frame(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_text("not json")
            frame = ws.receive_json()
            assert frame["type"] == "error"
            sync(ws)

    def test_room_frame_without_room_is_refused(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join-room"})
            assert ws.receive_json() == {"type": "error", "message": "join-room requires a room"}

    def test_unknown_frame_type(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "teleport"})
            assert ws.receive_json()["message"] == "Unknown frame type: teleport"

    def test_non_string_room_gets_error_frame(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "join-room", "room": ["a"]})
            assert ws.receive_json() == {"type": "error", "message": "join-room room must be a string"}
            sync(ws)

    def test_non_string_stream_id_gets_error_frame(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": "stream-event", "stream_id": {"x": 1}})
            assert ws.receive_json()["type"] == "error"
            sync(ws)

    def test_non_string_type_gets_error_frame(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.send_json({"type": ["ping"]})
            assert ws.receive_json() == {"type": "error", "message": "Frames need a string type"}
            sync(ws)


class TestRooms:

    def test_join_and_relay_between_members(self, client):
        room = unique_room("project")
        with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as bob:
            alice.send_json({"type": "join-room", "room": room, "user_id": "alice"})
            sync(alice)

            bob.send_json({"type": "join-room", "room": room, "user_id": "bob"})
            assert alice.receive_json() == {"type": "user-connected", "room": room, "user_id": "bob"}

            bob.send_json({"type": "project-update", "room": room, "update": {"bpm": 128}})
            relayed = alice.receive_json()
            assert relayed == {"type": "project-update", "room": room, "update": {"bpm": 128}, "user_id": "bob"}

            # The sender never hears its own frame back.
            sync(bob)

    def test_leaving_is_announced(self, client):
        room = unique_room("jam")
        with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as bob:
            alice.send_json({"type": "join-room", "room": room, "user_id": "alice"})
            sync(alice)
            bob.send_json({"type": "join-room", "room": room, "user_id": "bob"})
            alice.receive_json()

            bob.send_json({"type": "leave-room", "room": room})
            assert alice.receive_json() == {"type": "user-disconnected", "room": room, "user_id": "bob"}

    def test_stream_events_fan_out_by_stream_id(self, client):
        stream_id = unique_room("stream")
        with client.websocket_connect("/ws") as host, client.websocket_connect("/ws") as viewer:
            viewer.send_json({"type": "join-room", "room": stream_id})
            sync(viewer)

            host.send_json({"type": "stream-event", "stream_id": stream_id, "event": {"kind": "cheer"}})
            frame = viewer.receive_json()
            assert frame["type"] == "stream-event"
            assert frame["stream_id"] == stream_id
            assert frame["event"] == {"kind": "cheer"}


class TestAuthentication:

    def test_invalid_token_is_closed_with_policy_violation(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws?token=not-a-jwt") as ws:
                ws.receive_json()
        assert exc_info.value.code == 1008

    def test_authenticated_socket_joins_as_itself(self, client, make_user):
        user = make_user("socket@example.com")
        token = create_access_token(user_id=user.id)
        room = unique_room("auth")

        with client.websocket_connect("/ws") as watcher, \
                client.websocket_connect(f"/ws?token={token}") as member:
            watcher.send_json({"type": "join-room", "room": room})
            sync(watcher)

            member.send_json({"type": "join-room", "room": room, "user_id": "someone-else"})
            assert watcher.receive_json()["user_id"] == user.id
