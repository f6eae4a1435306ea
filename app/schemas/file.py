"""File schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator

from .base import BaseSchema


class FileResponse(BaseSchema):
    """Schema for a stored file."""

    id: UUID
    original_name: str
    display_name: str
    file_type: str
    file_size: int
    storage_path: str
    tags: list[str] = []
    ai_generated: bool = False
    user_id: UUID
    folder_id: UUID | None = None
    uploaded_at: datetime | None = None
    # ORM attribute is file_metadata (File.metadata is the MetaData registry)
    file_metadata: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("file_metadata", "metadata"),
        serialization_alias="metadata",
    )

    @field_validator("file_metadata", mode="before")
    @classmethod
    def default_metadata(cls, v):
        return v if isinstance(v, dict) else {}


class TagsUpdate(BaseSchema):
    """Schema for replacing a file's tag set."""

    tags: list[str] = Field(..., description="New tag set; replaces the existing tags")

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, v: list[str]) -> list[str]:
        """Drop surrounding whitespace and blank tags."""
        return [tag.strip() for tag in v if tag and tag.strip()]


class ApplyToSimilarResponse(BaseSchema):
    """Result of copying a file's tags onto its similar files."""

    source_file: FileResponse
    updated_files: list[FileResponse]
    count: int
    similar_files_found: int


class DeleteResponse(BaseSchema):
    success: bool = True


class FileUrlResponse(BaseSchema):
    url: str


class StorageUsageResponse(BaseSchema):
    """Bytes used by the caller against the fixed quota."""

    used: int
    total: int


class SearchParams(BaseSchema):
    """Search filters; every filter is optional and they combine with AND."""

    q: str | None = None
    tag: str | None = None
    type: str | None = None
