"""
EdAiVi Studio Backend: Shared Response Schemas
==============================================

What:  Envelopes reused across routers: error body, plain message, service
       checks.
Who:   Global exception handlers and the rate limiter (ErrorResponse via
       `error_body`), health/status routes, and any route that only
       acknowledges an action (MessageResponse).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from studio.middleware.request_id import request_id_var
from studio.models.base import utcnow


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for ALL API errors.
    Who:   Returned by the global exception handlers in main.py.

    Example:
        {
            "error": "insufficient_credits",
            "message": "This model requires 2 credits. You have 1 credits.",
            "details": {"required": 2, "available": 1},
            "request_id": "550e8400-e29b-41d4-a716-446655440000",
            "timestamp": "2026-01-01T12:00:00+00:00"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
    timestamp: datetime = Field(description="When the error was produced (UTC)")


def error_body(
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """JSON-ready ErrorResponse body. The request id defaults to the current request's."""
    return jsonable_encoder(
        {
            "error": error,
            "message": message,
            "details": details,
            "request_id": request_id or request_id_var.get("") or None,
            "timestamp": utcnow(),
        }
    )


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = Field(description="Overall status: healthy or unhealthy")
    store: str = Field(description="Document store status")
    version: str
    uptime_seconds: float


class StatusResponse(BaseModel):
    status: str
    uptime_seconds: float
    environment: str
    timestamp: datetime
    documents: Dict[str, int] = Field(description="Document count per repository")


class ApiIndexResponse(BaseModel):
    name: str
    version: str
    endpoints: Dict[str, List[str]] = Field(description="Route prefixes grouped by area")
