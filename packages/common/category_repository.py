"""
Category Repository - Database operations for forum categories

Categories are the source of truth for AI categorization: the category names
offered to the model are read from here, and admin mutations write here.

Post counts:
- post_count counts posts where the category is primary OR a secondary association
- Incremental updates on post create/change, full recount for periodic maintenance
"""

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

import structlog
from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.schemas.category import (
    Category,
    CategoryIdValidation,
    CategoryRef,
    DEFAULT_CATEGORY_COLOR,
)

logger = structlog.get_logger()

_CATEGORY_COLUMNS = "id, name, slug, color, post_count, created_at, updated_at"
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_category_id() -> str:
    """Generate a category id: cat_<unix millis>_<9 base36 chars>"""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"cat_{int(time.time() * 1000)}_{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CategoryRepository:
    """
    Repository for category table operations.

    Methods never commit; the caller owns the transaction.
    """

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        """All categories ordered by name"""
        result = await db.execute(text(f"""
            SELECT {_CATEGORY_COLUMNS}
            FROM categories
            ORDER BY name ASC
        """))
        rows = result.fetchall()

        logger.debug("categories_listed", count=len(rows))
        return [Category(**dict(row._mapping)) for row in rows]

    async def get_category_names(self, db: AsyncSession) -> List[str]:
        """
        Category names only (for AI categorization).

        Blank names are filtered out so they never reach the model prompt.
        """
        result = await db.execute(text("""
            SELECT name FROM categories ORDER BY name ASC
        """))
        names = [row.name for row in result.fetchall()]
        return [name for name in names if isinstance(name, str) and name.strip()]

    async def get_category(self, category_id: str, db: AsyncSession) -> Optional[Category]:
        result = await db.execute(
            text(f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE id = :id"),
            {"id": category_id},
        )
        row = result.fetchone()
        return Category(**dict(row._mapping)) if row else None

    async def find_by_slug(
        self,
        slug: str,
        db: AsyncSession,
        exclude_id: Optional[str] = None,
    ) -> Optional[Category]:
        """Look up a category by slug, optionally ignoring one id (for updates)"""
        query = f"SELECT {_CATEGORY_COLUMNS} FROM categories WHERE slug = :slug"
        params = {"slug": slug}
        if exclude_id:
            query += " AND id != :exclude_id"
            params["exclude_id"] = exclude_id

        result = await db.execute(text(query), params)
        row = result.fetchone()
        return Category(**dict(row._mapping)) if row else None

    async def validate_ids(self, category_ids: List[str], db: AsyncSession) -> CategoryIdValidation:
        """
        Split category ids into those that exist and those that don't.

        Input order is preserved in both lists.
        """
        if not category_ids:
            return CategoryIdValidation(valid=[], invalid=[])

        query = text("SELECT id FROM categories WHERE id IN :ids").bindparams(
            bindparam("ids", expanding=True)
        )
        result = await db.execute(query, {"ids": list(category_ids)})
        existing = {row.id for row in result.fetchall()}

        valid = [cid for cid in category_ids if cid in existing]
        invalid = [cid for cid in category_ids if cid not in existing]

        logger.debug("category_ids_validated", valid=valid, invalid=invalid)
        return CategoryIdValidation(valid=valid, invalid=invalid)

    async def get_ids_by_names(self, names: List[str], db: AsyncSession) -> List[CategoryRef]:
        """
        Convert category names to id/name pairs (case-insensitive).

        Results follow the order of the requested names.
        """
        if not names:
            return []

        lowered = [name.lower() for name in names]
        query = text("SELECT id, name FROM categories WHERE LOWER(name) IN :names").bindparams(
            bindparam("names", expanding=True)
        )
        result = await db.execute(query, {"names": lowered})
        by_name = {row.name.lower(): CategoryRef(id=row.id, name=row.name) for row in result.fetchall()}

        refs = []
        for name in lowered:
            ref = by_name.get(name)
            if ref and ref not in refs:
                refs.append(ref)
        return refs

    async def create_category(
        self,
        name: str,
        slug: str,
        db: AsyncSession,
        color: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> Category:
        now = _utcnow()
        params = {
            "id": category_id or generate_category_id(),
            "name": name,
            "slug": slug,
            "color": color or DEFAULT_CATEGORY_COLOR,
            "post_count": 0,
            "created_at": now,
            "updated_at": now,
        }
        await db.execute(text("""
            INSERT INTO categories (id, name, slug, color, post_count, created_at, updated_at)
            VALUES (:id, :name, :slug, :color, :post_count, :created_at, :updated_at)
        """), params)

        logger.info("category_created", category_id=params["id"], name=name, slug=slug)
        return Category(**params)

    async def update_category(
        self,
        category_id: str,
        changes: Dict[str, str],
        db: AsyncSession,
    ) -> Optional[Category]:
        """
        Apply a partial update (name/slug/color).

        Returns the updated row, or None when the id does not exist.
        """
        allowed = {k: v for k, v in changes.items() if k in {"name", "slug", "color"}}
        assignments = [f"{column} = :{column}" for column in allowed]
        assignments.append("updated_at = :updated_at")

        result = await db.execute(
            text(f"UPDATE categories SET {', '.join(assignments)} WHERE id = :id"),
            {**allowed, "updated_at": _utcnow(), "id": category_id},
        )
        if result.rowcount == 0:
            return None

        logger.info("category_updated", category_id=category_id, changes=allowed)
        return await self.get_category(category_id, db)

    async def delete_category(self, category_id: str, db: AsyncSession) -> Optional[Category]:
        existing = await self.get_category(category_id, db)
        if not existing:
            return None

        await db.execute(
            text("DELETE FROM post_categories WHERE category_id = :id"),
            {"id": category_id},
        )
        await db.execute(text("DELETE FROM categories WHERE id = :id"), {"id": category_id})

        logger.info("category_deleted", category_id=category_id, name=existing.name)
        return existing

    async def count_primary_posts(self, category_id: str, db: AsyncSession) -> int:
        """Number of posts using this category as their primary category"""
        result = await db.execute(
            text("SELECT COUNT(*) AS n FROM posts WHERE primary_category_id = :id"),
            {"id": category_id},
        )
        return int(result.scalar() or 0)

    # ---- Post counts --------------------------------------------------------------------

    async def increment_post_counts(
        self,
        category_ids: List[str],
        db: AsyncSession,
        increment: int = 1,
    ) -> None:
        """Add `increment` to post_count (negative to decrement) without recounting"""
        if not category_ids:
            return

        query = text("""
            UPDATE categories
            SET post_count = post_count + :increment
            WHERE id IN :ids
        """).bindparams(bindparam("ids", expanding=True))
        await db.execute(query, {"increment": increment, "ids": list(category_ids)})

        logger.info("post_counts_incremented", category_ids=category_ids, increment=increment)

    async def recount_post_count(self, category_id: str, db: AsyncSession) -> int:
        """Recount posts for one category (primary or secondary) and store it"""
        result = await db.execute(text("""
            SELECT COUNT(*) AS n FROM posts p
            WHERE p.primary_category_id = :id
               OR EXISTS (
                   SELECT 1 FROM post_categories pc
                   WHERE pc.post_id = p.id AND pc.category_id = :id
               )
        """), {"id": category_id})
        actual = int(result.scalar() or 0)

        await db.execute(
            text("UPDATE categories SET post_count = :count WHERE id = :id"),
            {"count": actual, "id": category_id},
        )

        logger.debug("post_count_recounted", category_id=category_id, post_count=actual)
        return actual

    async def current_post_counts(self, db: AsyncSession) -> Dict[str, int]:
        """Stored post counts keyed by category id (no recount)"""
        result = await db.execute(text("SELECT id, post_count FROM categories"))
        return {row.id: int(row.post_count) for row in result.fetchall()}


# Singleton instance
category_repository = CategoryRepository()
