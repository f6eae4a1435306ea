# ruff: noqa: F403, F401
"""Schemas package initialization."""

from .base import *
from .file import *
from .folder import *
from .tagging import *

# Rebuild models after all schemas are loaded
ApplyToSimilarResponse.model_rebuild()
