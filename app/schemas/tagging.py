"""Tagging schemas for AI/fallback tagging results."""

from __future__ import annotations

from pydantic import Field, field_validator

from .base import BaseSchema


class FileTagging(BaseSchema):
    """Tags and organisation suggestions for a single file.

    Parses the model's camelCase JSON reply directly
    (``suggestedFolderName``, ``suggestedFileName``).
    """

    tags: list[str] = Field(..., min_length=1)
    suggested_folder_name: str | None = Field(None, max_length=255)
    suggested_file_name: str | None = Field(None, max_length=255)
    confidence: float = Field(..., ge=0.0, le=1.0)

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        """Lowercase tags and drop blanks."""
        tags = [str(tag).strip().lower() for tag in v if str(tag).strip()]
        if not tags:
            raise ValueError("At least one tag is required")
        return tags

    @field_validator("suggested_folder_name", "suggested_file_name")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class OrganizeResult(BaseSchema):
    """Report of an auto-organize run."""

    success: bool = True
    folders_created: int
    files_moved: int
    message: str
