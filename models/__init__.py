"""
Models package initialization.
"""

from .base import Base, BaseModel
from .file import File
from .folder import Folder
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "File",
    "Folder",
]
