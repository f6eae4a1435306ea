# ruff: noqa: D107
"""File and folder exceptions."""

from typing import Any

from .base import NotFoundError, ValidationError


class FileRecordNotFoundError(NotFoundError):
    """Exception raised when a file is missing or owned by someone else."""

    def __init__(self, message: str = "File not found", details: Any | None = None):
        super().__init__(message=message, details=details)


class FolderNotFoundError(NotFoundError):
    """Exception raised when a folder is missing or owned by someone else."""

    def __init__(self, message: str = "Folder not found", details: Any | None = None):
        super().__init__(message=message, details=details)


class EmptyUploadError(ValidationError):
    """Exception raised when an upload request carries no file."""

    def __init__(self, message: str = "No file provided", details: Any | None = None):
        super().__init__(message=message, details=details)


class FileTooLargeError(ValidationError):
    """Exception raised when an uploaded file exceeds the size limit."""

    def __init__(self, file_name: str, max_size: int):
        super().__init__(
            message=f"File '{file_name}' exceeds the maximum size of {max_size} bytes",
            details={"file_name": file_name, "max_size": max_size},
        )


class TooManyFilesError(ValidationError):
    """Exception raised when a multi-upload carries too many files."""

    def __init__(self, count: int, max_files: int):
        super().__init__(
            message=f"Too many files: {count} (maximum {max_files})",
            details={"count": count, "max_files": max_files},
        )
