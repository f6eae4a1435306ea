"""
Provides the User model for the application's database schema.

Users are owned by the external identity provider; this table mirrors the
provider's user ID so that files and folders can reference a local row.
The row is created on first sight of a valid token.

Attributes
----------
auth_user_id : sqlalchemy.Column
    Unique identifier for the user from the identity provider (token ``sub``).
email : sqlalchemy.Column
    The email address reported by the identity provider, if any.
username : sqlalchemy.Column
    The optional username.
is_active : sqlalchemy.Column
    A boolean indicating if the user is active. Defaults to `True`.
"""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar auth_user_id: Unique identifier for the user provided by the identity provider.
    :type auth_user_id: str
    :ivar email: Email address of the user.
    :type email: str
    :ivar username: Username of the user. This is optional.
    :type username: str
    :ivar is_active: Indicates whether the user account is active.
    :type is_active: bool
    """

    __tablename__ = "users"

    auth_user_id = Column(String(255), unique=True, nullable=False)
    email = Column(String(255))
    username = Column(String(100))
    is_active = Column(Boolean, default=True)

    # Relationships
    files = relationship("File", back_populates="user", cascade="all, delete-orphan")
    folders = relationship("Folder", back_populates="user", cascade="all, delete-orphan")
