"""Shared schema building blocks."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Pagination metadata for list responses."""

    page: int = Field(..., description="1-based page number")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Total number of matching items")
    pages: int = Field(..., description="Total number of pages, ceil(total / limit)")


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str
