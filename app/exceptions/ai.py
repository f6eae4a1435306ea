# ruff: noqa: D107
"""AI service exceptions.

These never reach the caller: the tagging service catches every one of them
and degrades to rule-based tagging.
"""

from typing import Any


class AIServiceError(Exception):
    """Base exception for AI service errors."""

    default_message = "AI service error occurred"

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)


class AIConfigurationError(AIServiceError):
    """Exception raised when AI service is not properly configured."""

    default_message = "AI service is not properly configured"


class AITimeoutError(AIServiceError):
    """Exception raised when AI service request times out."""

    default_message = "AI service request timed out"


class AIEmptyResponseError(AIServiceError):
    """Exception raised when the AI service returns no usable text."""

    default_message = "Empty response from AI service"


class AIParsingError(AIServiceError):
    """Exception raised when AI response cannot be parsed."""

    default_message = "Failed to parse AI service response"


class AIContentFilterError(AIServiceError):
    """Exception raised when content is blocked by AI safety filters."""

    default_message = "Content was blocked by AI safety filters"
