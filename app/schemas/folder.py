"""Folder schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from .base import BaseSchema


class FolderCreate(BaseSchema):
    """Schema for creating a new folder."""

    name: str = Field(..., min_length=1, max_length=255)
    parent_id: UUID | None = None
    is_ai_generated: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the folder name."""
        v = v.strip()
        if not v:
            raise ValueError("Folder name cannot be empty or only whitespace")
        return v


class FolderResponse(BaseSchema):
    """Schema for folder response."""

    id: UUID
    name: str
    parent_id: UUID | None = None
    user_id: UUID
    is_ai_generated: bool = False
    created_at: datetime | None = None
