"""Error taxonomy shared by the record store, services and HTTP layer.

Services raise these; the global exception handlers in ``edule.main`` turn
them into the ``{success: false, message, ...}`` envelope with the matching
status code.
"""
from __future__ import annotations
from typing import Optional


class ServiceError(Exception):
    """Base class for failures that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error:
            body["error"] = self.error
        return body


class ValidationError(ServiceError):
    """Missing or malformed input."""

    status_code = 400


class Unauthorized(ServiceError):
    """Bad credentials or missing/expired session."""

    status_code = 401


class Forbidden(ServiceError):
    """Authenticated, but not allowed to act on the target."""

    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    """Duplicate unique key (email, enrollment pair)."""

    status_code = 409


class StoreUnavailable(ServiceError):
    """A collection document could not be read or written."""

    status_code = 500
