"""
EdAiVi Studio Backend: Real-time WebSocket Route
================================================

What:  `/ws`: room-based relay for collaborative editing and stream events.
How:   Authenticates the optional `token` query parameter, then loops over
       client frames and hands them to `room_hub`. Frame formats are listed
       in services/realtime.py.

A supplied token must be valid: otherwise the socket is closed with 1008
(policy violation) before it is accepted. Anonymous sockets may still join
rooms; authenticated sockets always join as their own user id.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from studio.database import get_store
from studio.dependencies import resolve_token
from studio.exceptions import AuthenticationError
from studio.services.realtime import RELAYED_TYPES, room_hub

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])


def _error(message: str) -> str:
    return json.dumps({"type": "error", "message": message})


async def _handle_frame(ws: WebSocket, frame: Dict[str, Any], user_id: Optional[str]) -> None:
    frame_type = frame.get("type")
    if not isinstance(frame_type, str):
        await ws.send_text(_error("Frames need a string type"))
        return

    if frame_type == "ping":
        await ws.send_text(json.dumps({"type": "pong"}))
        return

    if frame_type == "stream-event":
        if not isinstance(frame.get("stream_id"), str) or not frame["stream_id"]:
            await ws.send_text(_error("stream-event requires a stream_id string"))
            return
        await room_hub.relay(ws, frame, user_id)
        return

    room = frame.get("room")
    if frame_type in ("join-room", "leave-room") or frame_type in RELAYED_TYPES:
        if not room:
            await ws.send_text(_error(f"{frame_type} requires a room"))
            return
        if not isinstance(room, str):
            await ws.send_text(_error(f"{frame_type} room must be a string"))
            return

    if frame_type == "join-room":
        await room_hub.join(ws, room, user_id or frame.get("user_id"))
    elif frame_type == "leave-room":
        await room_hub.leave(ws, room)
    elif frame_type in RELAYED_TYPES:
        await room_hub.relay(ws, frame, user_id or room_hub.user_in(ws, room))
    else:
        await ws.send_text(_error(f"Unknown frame type: {frame_type}"))


@router.websocket("/ws")
async def realtime_websocket(ws: WebSocket, token: Optional[str] = Query(default=None)):
    user_id = None
    if token is not None:
        try:
            user = await resolve_token(token, get_store(ws))
        except AuthenticationError as e:
            logger.info("Realtime socket rejected: %s", e.message)
            await ws.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        user_id = user.id

    await room_hub.connect(ws)
    try:
        while True:
            data = await ws.receive_text()
            try:
                frame = json.loads(data)
            except json.JSONDecodeError:
                await ws.send_text(_error("Frames must be JSON objects"))
                continue
            if not isinstance(frame, dict):
                await ws.send_text(_error("Frames must be JSON objects"))
                continue
            await _handle_frame(ws, frame, user_id)
    except WebSocketDisconnect:
        pass
    finally:
        await room_hub.disconnect(ws)


@router.get("/ws/stats", summary="Realtime connection statistics")
async def realtime_stats() -> Dict[str, Any]:
    return room_hub.get_stats()
