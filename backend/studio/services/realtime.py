"""
EdAiVi Studio Backend: Real-time Room Hub
=========================================

What:  Room membership and fan-out for the `/ws` channel.
How:   Sockets join named rooms (a project id, a stream id, ...). Frames
       received from one member are relayed to every OTHER member of the
       room. A socket that fails to receive is dropped from every room.
Who:   routes/realtime.py drives the hub; nothing else writes to it.

Client → server frames (JSON objects):
    {"type": "join-room",      "room": str, "user_id": str}
    {"type": "leave-room",     "room": str}
    {"type": "chat-message",   "room": str, "message": any}
    {"type": "project-update", "room": str, "update": any}
    {"type": "stream-event",   "stream_id": str, "event": any}
    {"type": "ping"}

Server → client frames:
    user-connected / user-disconnected     {room, user_id}
    chat-message / project-update          relayed payload plus {room, user_id}
    stream-event                           relayed payload plus {stream_id, user_id}
    pong, error {message}

Ordering: frames reach each receiver in the order the hub sent them; there
is no delivery guarantee beyond the transport.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

RELAYED_TYPES = {
    "chat-message": "message",
    "project-update": "update",
    "stream-event": "event",
}


class RoomHub:
    """
    Tracks which sockets are in which rooms.

    - `_rooms` maps room name → member sockets
    - `_members` maps socket → {room name: user id announced on join}
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, Set[WebSocket]] = {}
        self._members: Dict[WebSocket, Dict[str, Optional[str]]] = {}
        self._lock = asyncio.Lock()

    # ── Connection Lifecycle ─────────────────────────────────────────────

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        async with self._lock:
            self._members[ws] = {}
        logger.info("Realtime socket connected (total=%d)", len(self._members))

    async def disconnect(self, ws: WebSocket) -> None:
        """Leave every room (announcing it), then forget the socket."""
        for room in list(self._members.get(ws, {})):
            await self.leave(ws, room)
        async with self._lock:
            self._members.pop(ws, None)
        logger.info("Realtime socket disconnected (total=%d)", len(self._members))

    # ── Rooms ────────────────────────────────────────────────────────────

    async def join(self, ws: WebSocket, room: str, user_id: Optional[str]) -> None:
        async with self._lock:
            self._rooms.setdefault(room, set()).add(ws)
            self._members.setdefault(ws, {})[room] = user_id
        logger.debug("User %s joined room %s", user_id, room)
        await self.broadcast(room, {"type": "user-connected", "room": room, "user_id": user_id}, exclude=ws)

    async def leave(self, ws: WebSocket, room: str) -> None:
        async with self._lock:
            user_id = self._members.get(ws, {}).pop(room, None)
            members = self._rooms.get(room)
            if members is None or ws not in members:
                return
            members.discard(ws)
            if not members:
                del self._rooms[room]
        await self.broadcast(room, {"type": "user-disconnected", "room": room, "user_id": user_id}, exclude=ws)

    def room_members(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    def user_in(self, ws: WebSocket, room: str) -> Optional[str]:
        return self._members.get(ws, {}).get(room)

    # ── Fan-out ──────────────────────────────────────────────────────────

    async def broadcast(self, room: str, frame: Dict[str, Any], exclude: Optional[WebSocket] = None) -> int:
        """Send `frame` to every member of `room` except `exclude`. Returns the delivery count."""
        payload = json.dumps(frame, default=str)
        dead = []
        delivered = 0
        for ws in list(self._rooms.get(room, ())):
            if ws is exclude:
                continue
            try:
                await ws.send_text(payload)
                delivered += 1
            except Exception as e:
                logger.debug("Dropping unreachable socket from %s: %s", room, e)
                dead.append(ws)

        if dead:
            async with self._lock:
                for ws in dead:
                    for joined in self._members.pop(ws, {}):
                        members = self._rooms.get(joined)
                        if members is not None:
                            members.discard(ws)
                            if not members:
                                del self._rooms[joined]
        return delivered

    async def relay(self, ws: WebSocket, frame: Dict[str, Any], user_id: Optional[str]) -> int:
        """Relay a chat/project/stream frame from `ws` to the rest of its room."""
        frame_type = frame["type"]
        if frame_type == "stream-event":
            room = frame.get("stream_id")
            out = {"type": frame_type, "stream_id": room, "event": frame.get("event"), "user_id": user_id}
        else:
            room = frame.get("room")
            key = RELAYED_TYPES[frame_type]
            out = {"type": frame_type, "room": room, key: frame.get(key), "user_id": user_id}
        return await self.broadcast(room, out, exclude=ws)

    def get_stats(self) -> Dict[str, Any]:
        return {
            "active_connections": len(self._members),
            "rooms": {room: len(members) for room, members in self._rooms.items()},
        }


# Module-level singleton
room_hub = RoomHub()
