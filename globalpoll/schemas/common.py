"""Common response schemas."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(APIModel):
    """Standard success response."""
    message: str


class ErrorResponse(APIModel):
    """Standard error body produced by the exception handlers."""
    message: str
