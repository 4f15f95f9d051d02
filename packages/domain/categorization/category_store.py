"""
Category Store - Category reads/writes for the categorization pipeline

Write-through: every add/update/delete commits to the database first and then
invalidates the injected CategoryNameCache, so the next classification sees
fresh category names.

Usage:
    store = CategoryStore(cache=CategoryNameCache())
    names = await store.list_category_names(db)
    await store.add("Landscaping", "landscaping", db)   # cache invalidated
"""
from typing import Dict, List, Optional

import structlog
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.category_cache import CategoryNameCache, category_name_cache
from packages.common.category_repository import CategoryRepository, category_repository
from packages.common.schemas.category import (
    Category,
    CategoryAssignment,
    CategoryIdValidation,
    CategoryRef,
)
from packages.domain.categorization.errors import (
    CategoryConflictError,
    CategoryInUseError,
    CategoryNotFoundError,
    CategoryValidationError,
)

logger = structlog.get_logger()


class CategoryStore:

    def __init__(
        self,
        cache: Optional[CategoryNameCache] = None,
        repository: Optional[CategoryRepository] = None,
    ):
        self.cache = cache if cache is not None else category_name_cache
        self.repository = repository or category_repository

    # ---- Reads --------------------------------------------------------------------------

    async def list_category_names(self, db: AsyncSession) -> List[str]:
        """Category names for AI prompts, served from the cache when warm"""
        return await self.cache.get_or_load(lambda: self.repository.get_category_names(db))

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        return await self.repository.list_categories(db)

    async def validate_ids(self, category_ids: List[str], db: AsyncSession) -> CategoryIdValidation:
        return await self.repository.validate_ids(category_ids, db)

    async def get_ids_by_names(self, names: List[str], db: AsyncSession) -> List[CategoryRef]:
        return await self.repository.get_ids_by_names(names, db)

    async def assign_categories(self, category_ids: List[str], db: AsyncSession) -> CategoryAssignment:
        """
        Validate a post's category ids: 1-4 unique ids that all exist.

        Raises:
            CategoryValidationError: shape is wrong or some ids don't exist
        """
        try:
            assignment = CategoryAssignment(
                category_id=category_ids[0] if category_ids else "",
                category_ids=category_ids,
            )
        except ValidationError as e:
            raise CategoryValidationError(str(e)) from e

        check = await self.repository.validate_ids(assignment.category_ids, db)
        if check.invalid:
            raise CategoryValidationError(f"Categories not found: {', '.join(check.invalid)}")

        return assignment

    # ---- Mutations (write-through + invalidate) -----------------------------------------

    async def add(
        self,
        name: str,
        slug: str,
        db: AsyncSession,
        color: Optional[str] = None,
    ) -> Category:
        if await self.repository.find_by_slug(slug, db):
            raise CategoryConflictError(f"Category slug already exists: {slug}")

        category = await self.repository.create_category(name=name, slug=slug, color=color, db=db)
        await db.commit()
        self.cache.invalidate()

        logger.info("category_added", category_id=category.id, name=category.name)
        return category

    async def update(
        self,
        category_id: str,
        changes: Dict[str, str],
        db: AsyncSession,
    ) -> Category:
        slug = changes.get("slug")
        if slug and await self.repository.find_by_slug(slug, db, exclude_id=category_id):
            raise CategoryConflictError(f"Category slug already exists: {slug}")

        category = await self.repository.update_category(category_id, changes, db)
        if category is None:
            raise CategoryNotFoundError(category_id)

        await db.commit()
        self.cache.invalidate()

        logger.info("category_changed", category_id=category_id, name=category.name)
        return category

    async def delete(self, category_id: str, db: AsyncSession) -> Category:
        in_use = await self.repository.count_primary_posts(category_id, db)
        if in_use > 0:
            raise CategoryInUseError(category_id, in_use)

        category = await self.repository.delete_category(category_id, db)
        if category is None:
            raise CategoryNotFoundError(category_id)

        await db.commit()
        self.cache.invalidate()

        logger.info("category_removed", category_id=category_id, name=category.name)
        return category

    # ---- Post counts --------------------------------------------------------------------

    async def increment_post_counts(self, category_ids: List[str], db: AsyncSession, increment: int = 1) -> None:
        await self.repository.increment_post_counts(category_ids, db, increment=increment)

    async def handle_post_category_change(
        self,
        old_category_ids: List[str],
        new_category_ids: List[str],
        db: AsyncSession,
    ) -> None:
        """Decrement counts for the old categories, increment for the new ones"""
        if old_category_ids:
            await self.repository.increment_post_counts(old_category_ids, db, increment=-1)
        if new_category_ids:
            await self.repository.increment_post_counts(new_category_ids, db, increment=1)

        logger.info("post_category_change_counted",
                    removed=old_category_ids,
                    added=new_category_ids)

    async def sync_post_counts(self, db: AsyncSession) -> Dict[str, int]:
        """Recount every category's posts (periodic maintenance)"""
        categories = await self.repository.list_categories(db)
        logger.info("post_count_sync_started", category_count=len(categories))

        results = {}
        for category in categories:
            results[category.id] = await self.repository.recount_post_count(category.id, db)

        await db.commit()
        logger.info("post_count_sync_complete", category_count=len(results))
        return results

    async def current_post_counts(self, db: AsyncSession) -> Dict[str, int]:
        return await self.repository.current_post_counts(db)


# Singleton instance
category_store = CategoryStore()
