"""Errors returned to API clients.

Every error renders as ``{"error": {"code", "message", "details"?}}``.
Subclasses fix their ``code`` and HTTP status as class attributes.
Messages never include the submitted skill lists.
"""

from __future__ import annotations

from typing import Any


class DevShowcaseError(Exception):
    """Base for errors surfaced to clients."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def headers(self) -> dict[str, str]:
        """Extra response headers for this error."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = dict(self.details)
        return {"error": error}


class InternalError(DevShowcaseError):
    """Unexpected failure; carries no details."""

    def __init__(self) -> None:
        super().__init__("An unexpected error occurred.")


class ValidationError(DevShowcaseError):
    """Request passed schema validation but breaks a service limit."""

    code = "VALIDATION_ERROR"
    status_code = 422


class RateLimitError(DevShowcaseError):
    """Client exceeded its request budget."""

    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429

    def __init__(self, limit_type: str, retry_after: int = 60) -> None:
        super().__init__(
            f"Too many {limit_type} requests. Retry in {retry_after} seconds.",
            details={"retry_after_seconds": retry_after, "limit_type": limit_type},
        )
        self.retry_after = retry_after

    def headers(self) -> dict[str, str]:
        return {"Retry-After": str(self.retry_after)}
