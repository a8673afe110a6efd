"""
EdAiVi Studio Backend: Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for every error scenario the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into structured JSON error responses with the right HTTP status code.
Who:   Raised by services and dependencies; caught by the global handlers.

Exception Hierarchy:
    StudioError (base)                    → 500
    ├── ValidationError                   → 400 Bad Request
    │   └── InvalidTransitionError        → 400 (stream state machine)
    ├── AuthenticationError               → 401 Unauthorized
    ├── ForbiddenError                    → 403 Forbidden
    │   ├── ModelInactiveError            → 403
    │   ├── TierRequiredError             → 403
    │   └── InsufficientCreditsError      → 403
    ├── NotFoundError                     → 404 Not Found
    └── RateLimitExceededError            → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class StudioError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional structured details (returned as `details`)
    """

    status_code = 500
    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(StudioError):
    """
    Raised when client input fails a business rule.

    When:    Missing required fields, duplicate email, non-positive amount,
             wrong model type for an entry point, duplicate collaborator.
    HTTP:    400 Bad Request
    """

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = dict(context or {})
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidTransitionError(ValidationError):
    """
    Raised when a stream session is asked to move along an edge that is not
    in the transition table. The session is left untouched.
    """

    error_code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot change stream status from '{current}' to '{target}'",
            context={"current": current, "target": target},
        )
        self.current = current
        self.target = target


class AuthenticationError(StudioError):
    """
    Raised when the caller cannot be identified.

    When:    Missing, malformed or expired bearer token; unknown user;
             wrong email/password pair.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    status_code = 401
    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Please log in to continue",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(StudioError):
    """
    Raised when an identified caller is not allowed to perform an action.

    When:    Ownership/role checks, private projects, developer key mismatch,
             and the credit gate's rejections (see subclasses).
    HTTP:    403 Forbidden
    """

    status_code = 403
    error_code = "forbidden"

    def __init__(
        self,
        message: str = "You do not have access to this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ModelInactiveError(ForbiddenError):
    error_code = "model_unavailable"

    def __init__(self, model_id: str):
        super().__init__(
            message="This AI model is currently unavailable",
            context={"model_id": model_id},
        )


class TierRequiredError(ForbiddenError):
    """Subscription tier below the model's minimum level."""

    error_code = "tier_required"

    def __init__(self, required_tier: str, current_tier: str):
        super().__init__(
            message=f"This model requires a '{required_tier}' subscription or higher",
            context={"required_tier": required_tier, "current_tier": current_tier},
        )
        self.required_tier = required_tier


class InsufficientCreditsError(ForbiddenError):
    """Credit balance below the model's per-use price."""

    error_code = "insufficient_credits"

    def __init__(self, required: int, available: int):
        super().__init__(
            message=(
                f"This model requires {required} credits. "
                f"You have {available} credits."
            ),
            context={"required": required, "available": available},
        )
        self.required = required
        self.available = available


class NotFoundError(StudioError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    Repositories return None for missing records; services convert that
    into NotFoundError so routes stay free of None checks.
    """

    status_code = 404
    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = dict(context or {})
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(StudioError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with Retry-After)
    """

    status_code = 429
    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = dict(context or {})
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
