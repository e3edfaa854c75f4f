"""Issue categories. Flat list; deleting only deactivates."""

import logging
from datetime import datetime

from backend.app.core.exceptions import CategoryAlreadyExistsError, CategoryNotFoundError
from backend.app.models.category import Category
from backend.app.repositories.base import Store
from backend.app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[dict] = [
    {"name": "Infrastructure", "description": "Roads, bridges, streetlights and public buildings",
     "icon_name": "construction", "color_hex": "#F59E0B"},
    {"name": "Public Safety", "description": "Hazards, crime and emergency concerns",
     "icon_name": "shield", "color_hex": "#EF4444"},
    {"name": "Environment", "description": "Parks, pollution, trees and waterways",
     "icon_name": "leaf", "color_hex": "#10B981"},
    {"name": "Transportation", "description": "Public transit, traffic and parking",
     "icon_name": "bus", "color_hex": "#3B82F6"},
    {"name": "Health & Sanitation", "description": "Waste collection, sewage and public health",
     "icon_name": "trash", "color_hex": "#8B5CF6"},
    {"name": "Other", "description": "Anything that does not fit another category",
     "icon_name": "more-horizontal", "color_hex": "#6B7280"},
]


async def seed_default_categories(store: Store) -> int:
    """Create the default categories if there are none. Returns how many were created."""
    async with store.unit_of_work() as repos:
        if await repos.categories.count() > 0:
            return 0
        for order, values in enumerate(DEFAULT_CATEGORIES):
            await repos.categories.add(Category(display_order=order, is_active=True, **values))
    logger.info(f"[STARTUP] Seeded {len(DEFAULT_CATEGORIES)} default categories")
    return len(DEFAULT_CATEGORIES)


async def list_categories(store: Store, include_inactive: bool = False) -> list[CategoryResponse]:
    async with store.unit_of_work() as repos:
        categories = await repos.categories.list_all(include_inactive=include_inactive)
    return [CategoryResponse.model_validate(c) for c in categories]


async def get_category(store: Store, category_id: int) -> CategoryResponse:
    async with store.unit_of_work() as repos:
        category = await repos.categories.get(category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return CategoryResponse.model_validate(category)


async def create_category(store: Store, data: CategoryCreate) -> CategoryResponse:
    """
    Create a category.

    Raises:
        CategoryAlreadyExistsError: If the name is taken (case-insensitive)
    """
    name = data.name.strip()
    async with store.unit_of_work() as repos:
        if await repos.categories.get_by_name(name) is not None:
            raise CategoryAlreadyExistsError(name)
        category = await repos.categories.add(Category(
            name=name,
            description=data.description,
            icon_name=data.icon_name,
            color_hex=data.color_hex,
            display_order=data.display_order,
            is_active=True,
        ))
        logger.info(f"[CATEGORY] Created category {category.id} ({name})")
        return CategoryResponse.model_validate(category)


async def update_category(store: Store, category_id: int, data: CategoryUpdate) -> CategoryResponse:
    async with store.unit_of_work() as repos:
        category = await repos.categories.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)

        if data.name is not None:
            name = data.name.strip()
            clash = await repos.categories.get_by_name(name)
            if clash is not None and clash.id != category.id:
                raise CategoryAlreadyExistsError(name)
            category.name = name
        for attr in ("description", "icon_name", "color_hex", "display_order", "is_active"):
            value = getattr(data, attr)
            if value is not None:
                setattr(category, attr, value)
        category.updated_at = datetime.utcnow()

        await repos.categories.save(category)
        return CategoryResponse.model_validate(category)


async def delete_category(store: Store, category_id: int) -> None:
    """Deactivate a category; issues keep referring to it."""
    async with store.unit_of_work() as repos:
        category = await repos.categories.get(category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        category.is_active = False
        category.updated_at = datetime.utcnow()
        await repos.categories.save(category)
    logger.info(f"[CATEGORY] Deactivated category {category_id}")
