"""
File model for uploaded files.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, StringList, utcnow


class File(BaseModel):
    """
    Represents an uploaded file entity in the application.

    The bytes live in object storage under ``storage_path``; this row holds
    the descriptive fields, the tag set and the optional folder reference.
    """

    __tablename__ = "files"
    __table_args__ = (
        Index("idx_files_user_id", "user_id"),
        Index("idx_files_folder_id", "folder_id"),
        Index("idx_files_uploaded_at", "uploaded_at"),
    )

    original_name = Column(Text, nullable=False)
    display_name = Column(Text, nullable=False)
    file_type = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    storage_path = Column(Text, nullable=False)
    tags = Column(StringList(), nullable=False, default=list)
    ai_generated = Column(Boolean, nullable=False, default=False)
    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    folder_id = Column(UUID(), ForeignKey("folders.id", ondelete="SET NULL"))
    uploaded_at = Column(DateTime(timezone=True), default=utcnow)
    # "metadata" is reserved on declarative classes
    file_metadata = Column(
        "metadata", JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=dict
    )

    # Relationships
    user = relationship("User", back_populates="files")
    folder = relationship("Folder", back_populates="files")
