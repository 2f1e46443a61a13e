"""Business-rule failures raised by the service layer.

Every failure is scoped to the single requested operation: the service
transaction is rolled back and the caller receives a human-readable message
plus a machine-readable ``code``. None of these are transient, so nothing
retries them.
"""

from __future__ import annotations

from fastapi import status


class StationError(Exception):
    """Base class for all station governance failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_code: str = "station_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def to_dict(self) -> dict[str, str]:
        """Return the error as an API payload."""
        return {"detail": self.message, "code": self.code}


class NotFoundError(StationError):
    """A referenced station, role, post, comment, invite or membership is missing."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "not_found"


class PermissionDeniedError(StationError):
    """The principal lacks a capability or attempts a protected action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "permission_denied"


class ConflictError(StationError):
    """Duplicate slug, already banned, already a member."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "conflict"


class InvalidStateError(StationError):
    """The target exists but is in a state that forbids the operation."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "invalid_state"


class ValidationError(StationError):
    """Malformed or missing required input."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "validation_error"


__all__ = [
    "StationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "InvalidStateError",
    "ValidationError",
]
