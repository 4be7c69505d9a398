from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema for all models.

    Fields are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class SuccessResponse(BaseSchema):
    """Base for every ``{"success": true, ...}`` envelope."""
    success: bool = True


class MessageResponse(SuccessResponse):
    message: str


class ErrorResponse(BaseSchema):
    success: bool = False
    message: str


def blank_to_none(value: Any) -> Any:
    """Treat falsy input (``""``, ``0``, ``False``) the same as an absent field."""
    if not value:
        return None
    return value
