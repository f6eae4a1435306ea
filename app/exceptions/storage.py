# ruff: noqa: D107
"""Object storage exceptions."""

from typing import Any

from .base import UpstreamServiceError


class ObjectStorageError(UpstreamServiceError):
    """Exception raised when the object store rejects an operation."""

    def __init__(self, message: str = "Object storage error", details: Any | None = None):
        super().__init__(message=message, details=details)
