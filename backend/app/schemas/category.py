"""Category schemas."""

from datetime import datetime

from pydantic import Field

from backend.app.schemas.common import CamelModel

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryCreate(CamelModel):
    """Schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    icon_name: str | None = Field(default=None, max_length=50)
    color_hex: str | None = Field(default=None, pattern=HEX_COLOR)
    display_order: int = Field(default=0, ge=0)


class CategoryUpdate(CamelModel):
    """Schema for editing a category; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=1000)
    icon_name: str | None = Field(default=None, max_length=50)
    color_hex: str | None = Field(default=None, pattern=HEX_COLOR)
    display_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class CategoryResponse(CamelModel):
    """Schema for category data in responses."""

    id: int
    name: str
    description: str | None = None
    icon_name: str | None = None
    color_hex: str | None = None
    display_order: int
    is_active: bool
    created_at: datetime
