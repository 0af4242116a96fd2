"""
Shared schema configuration, pagination and message responses.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema: reads ORM objects and strips surrounding whitespace."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def page_count(total: int, per_page: int) -> int:
    return (total + per_page - 1) // per_page if per_page > 0 else 0


class PageSchema(BaseSchema):
    """Pagination fields shared by every list response."""

    total: int
    page: int
    per_page: int
    pages: int


class MessageResponse(BaseSchema):
    message: str
    success: bool = True
