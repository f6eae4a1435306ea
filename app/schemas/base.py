"""Base schemas for the application.

Every schema is snake_case in Python and camelCase on the wire; this is the
single mapping layer between ORM rows and the external JSON shape.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema class with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str
    details: list | dict | None = None
