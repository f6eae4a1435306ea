"""
Unit tests for the exception hierarchy.
"""

from fastapi import HTTPException

from app.exceptions.ai import (
    AIConfigurationError,
    AIContentFilterError,
    AIEmptyResponseError,
    AIParsingError,
    AIServiceError,
    AITimeoutError,
)
from app.exceptions.base import (
    AuthenticationError,
    BaseAppException,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from app.exceptions.file import (
    EmptyUploadError,
    FileRecordNotFoundError,
    FileTooLargeError,
    FolderNotFoundError,
    TooManyFilesError,
)
from app.exceptions.storage import ObjectStorageError


class TestBaseExceptions:
    """Test cases for the HTTP-mapped exceptions."""

    def test_base_app_exception(self):
        exc = BaseAppException("Boom", status_code=418, details={"a": 1})

        assert isinstance(exc, HTTPException)
        assert exc.status_code == 418
        assert exc.message == "Boom"
        assert exc.detail == {"message": "Boom", "details": {"a": 1}}

    def test_status_codes(self):
        assert NotFoundError().status_code == 404
        assert ValidationError().status_code == 400
        assert AuthenticationError().status_code == 401
        assert UpstreamServiceError().status_code == 500

    def test_default_messages(self):
        assert NotFoundError().message == "Resource not found"
        assert AuthenticationError().message == "Authentication failed"


class TestFileExceptions:
    """Test cases for file and folder exceptions."""

    def test_not_found_errors(self):
        assert isinstance(FileRecordNotFoundError(), NotFoundError)
        assert FileRecordNotFoundError().message == "File not found"
        assert FolderNotFoundError().message == "Folder not found"
        assert FolderNotFoundError().status_code == 404

    def test_file_too_large(self):
        exc = FileTooLargeError("big.iso", 52428800)

        assert exc.status_code == 400
        assert "big.iso" in exc.message
        assert exc.details == {"file_name": "big.iso", "max_size": 52428800}

    def test_too_many_files(self):
        exc = TooManyFilesError(11, 10)

        assert exc.status_code == 400
        assert exc.details == {"count": 11, "max_files": 10}

    def test_empty_upload(self):
        assert EmptyUploadError().message == "No file provided"
        assert isinstance(EmptyUploadError(), ValidationError)

    def test_object_storage_error_is_upstream(self):
        exc = ObjectStorageError("bucket missing")

        assert isinstance(exc, UpstreamServiceError)
        assert exc.status_code == 500
        assert exc.message == "bucket missing"


class TestAIExceptions:
    """Test cases for tagging-internal exceptions."""

    def test_default_messages(self):
        assert AIServiceError().message == "AI service error occurred"
        assert AITimeoutError().message == "AI service request timed out"
        assert AIEmptyResponseError().message == "Empty response from AI service"

    def test_custom_message_and_details(self):
        exc = AIParsingError("bad json", details={"raw": "{"})

        assert str(exc) == "bad json"
        assert exc.details == {"raw": "{"}

    def test_hierarchy(self):
        for exc_class in (
            AIConfigurationError,
            AIContentFilterError,
            AIEmptyResponseError,
            AIParsingError,
            AITimeoutError,
        ):
            assert issubclass(exc_class, AIServiceError)
            assert not issubclass(exc_class, HTTPException)
