"""
Folder model for grouping files.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Folder(BaseModel):
    """
    Represents a folder owned by a user.

    Folders are self-referential through ``parent_id``. Deleting a folder
    deletes its children, and files inside it become unfoldered; the
    database enforces this where foreign keys are enforced and the folder
    service applies it explicitly everywhere else.
    """

    __tablename__ = "folders"
    __table_args__ = (
        Index("idx_folders_user_id", "user_id"),
        Index("idx_folders_parent_id", "parent_id"),
    )

    name = Column(Text, nullable=False)
    parent_id = Column(UUID(), ForeignKey("folders.id", ondelete="CASCADE"))
    user_id = Column(UUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_ai_generated = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", back_populates="folders")
    files = relationship("File", back_populates="folder", passive_deletes=True)
