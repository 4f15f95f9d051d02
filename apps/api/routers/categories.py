"""
Categories API Router
Public category listing plus admin CRUD. Admin writes go through the
CategoryStore so the AI category name cache is invalidated after each change.
"""
from typing import List

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.database import get_db_session
from packages.common.schemas.category import Category, CategoryCreate, CategoryUpdate
from packages.domain.categorization.category_store import CategoryStore, category_store
from packages.domain.categorization.errors import (
    CategoryConflictError,
    CategoryInUseError,
    CategoryNotFoundError,
)

logger = structlog.get_logger()
router = APIRouter()
admin_router = APIRouter()


def get_category_store() -> CategoryStore:
    return category_store


@router.get("", response_model=List[Category])
async def list_categories(
    db: AsyncSession = Depends(get_db_session),
    store: CategoryStore = Depends(get_category_store),
):
    """List all categories ordered by name"""
    return await store.list_categories(db)


@admin_router.get("", response_model=List[Category])
async def admin_list_categories(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    store: CategoryStore = Depends(get_category_store),
):
    logger.info("admin_view_categories", ip=request.headers.get("x-forwarded-for", "unknown"))
    return await store.list_categories(db)


@admin_router.post("", response_model=Category, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db_session),
    store: CategoryStore = Depends(get_category_store),
):
    """
    Create a category

    - **name**: display name offered to the AI classifier
    - **slug**: unique URL slug
    - **color**: hex color (defaults to blue)
    """
    try:
        return await store.add(payload.name, payload.slug, db, color=payload.color)
    except CategoryConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@admin_router.patch("/{category_id}", response_model=Category)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db_session),
    store: CategoryStore = Depends(get_category_store),
):
    changes = payload.changes()
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No changes supplied")

    try:
        return await store.update(category_id, changes, db)
    except CategoryNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    except CategoryConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@admin_router.delete("/{category_id}")
async def delete_category(
    category_id: str,
    db: AsyncSession = Depends(get_db_session),
    store: CategoryStore = Depends(get_category_store),
):
    try:
        deleted = await store.delete(category_id, db)
    except CategoryNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    except CategoryInUseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {"message": "Category deleted successfully", "category_id": deleted.id}


@admin_router.post("/sync-counts")
async def sync_category_counts(
    db: AsyncSession = Depends(get_db_session),
    store: CategoryStore = Depends(get_category_store),
):
    """Recount post counts for every category"""
    counts = await store.sync_post_counts(db)
    return {"message": "Category post counts synced", "counts": counts}
