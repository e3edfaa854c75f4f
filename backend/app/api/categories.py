"""Category endpoints."""

from fastapi import APIRouter, Depends, Query, Response, status

from backend.app.api.deps import get_store, require_roles
from backend.app.models.user import ADMIN_ROLES, User
from backend.app.repositories.base import Store
from backend.app.schemas.category import CategoryCreate, CategoryResponse, CategoryUpdate
from backend.app.services import categories as category_service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    include_inactive: bool = Query(False, alias="includeInactive"),
    store: Store = Depends(get_store),
):
    """List categories in display order."""
    return await category_service.list_categories(store, include_inactive)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: int, store: Store = Depends(get_store)):
    return await category_service.get_category(store, category_id)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    user: User = Depends(require_roles(*ADMIN_ROLES)),
    store: Store = Depends(get_store),
):
    return await category_service.create_category(store, body)


@router.patch("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: int,
    body: CategoryUpdate,
    user: User = Depends(require_roles(*ADMIN_ROLES)),
    store: Store = Depends(get_store),
):
    return await category_service.update_category(store, category_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: int,
    user: User = Depends(require_roles(*ADMIN_ROLES)),
    store: Store = Depends(get_store),
):
    """Deactivate a category."""
    await category_service.delete_category(store, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
