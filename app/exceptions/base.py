# ruff: noqa: D107
"""Base exception classes."""

from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Any | None = None,
    ):
        self.message = message
        self.details = details

        super().__init__(
            status_code=status_code,
            detail={"message": message, "details": details},
        )


class NotFoundError(BaseAppException):
    """Exception raised when a resource is not found or not owned by the caller."""

    def __init__(
        self,
        message: str = "Resource not found",
        details: Any | None = None,
    ):
        super().__init__(message=message, status_code=404, details=details)


class ValidationError(BaseAppException):
    """Exception raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Any | None = None,
    ):
        super().__init__(message=message, status_code=400, details=details)


class AuthenticationError(BaseAppException):
    """Exception raised when the bearer token is missing or invalid."""

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Any | None = None,
    ):
        super().__init__(message=message, status_code=401, details=details)


class UpstreamServiceError(BaseAppException):
    """Exception raised when an upstream dependency (storage, database) fails."""

    def __init__(
        self,
        message: str = "Upstream service error",
        details: Any | None = None,
    ):
        super().__init__(message=message, status_code=500, details=details)
