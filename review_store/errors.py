"""
Exception types shared by the storage layer and the HTTP surfaces.
"""

from __future__ import annotations

from typing import Optional


class ReviewStoreError(Exception):
    """Base class for every error raised by this package."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_body(self) -> dict:
        return {"error": self.error, "message": self.message}


class ValidationError(ReviewStoreError):
    """A required input field is absent or unusable."""

    status_code = 400
    error = "Validation error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class StoreFailure(ReviewStoreError):
    """Any backend or payload failure other than "document not found"."""


class ConcurrentUpdateError(StoreFailure):
    """The document changed between load and save (optimistic policy only)."""

    status_code = 409
    error = "Conflict"


class ObjectNotFoundError(Exception):
    """Raised by storage clients when the requested object does not exist."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path


class PreconditionFailedError(Exception):
    """Raised by storage clients when a conditional write is rejected."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path
