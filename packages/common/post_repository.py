"""
Post Repository - Persist posts and their category associations

A post has one primary category (posts.primary_category_id) and 1-4 ordered
category associations (post_categories). The primary category is always the
first association.
"""

import json
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

import structlog
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class PostRepository:
    """Repository for posts and post_categories. Methods never commit."""

    async def insert_post(
        self,
        content: str,
        db: AsyncSession,
        original_language: str = "English",
        translated_content: Optional[str] = None,
        tags: Optional[List[str]] = None,
        ai_confidence: float = 0.0,
        post_id: Optional[str] = None,
    ) -> str:
        post_id = post_id or str(uuid4())
        now = datetime.now(timezone.utc)

        await db.execute(text("""
            INSERT INTO posts (
                id, content, primary_category_id, original_language,
                translated_content, tags, ai_confidence, created_at, updated_at
            ) VALUES (
                :id, :content, NULL, :original_language,
                :translated_content, :tags, :ai_confidence, :created_at, :updated_at
            )
        """), {
            "id": post_id,
            "content": content,
            "original_language": original_language,
            "translated_content": translated_content,
            "tags": json.dumps(tags or []),
            "ai_confidence": ai_confidence,
            "created_at": now,
            "updated_at": now,
        })

        logger.info("post_inserted", post_id=post_id, language=original_language)
        return post_id

    async def post_exists(self, post_id: str, db: AsyncSession) -> bool:
        result = await db.execute(
            text("SELECT 1 FROM posts WHERE id = :post_id"),
            {"post_id": post_id},
        )
        return result.fetchone() is not None

    async def get_post_category_ids(self, post_id: str, db: AsyncSession) -> List[str]:
        """Category ids for a post, primary first"""
        result = await db.execute(text("""
            SELECT category_id FROM post_categories
            WHERE post_id = :post_id
            ORDER BY position ASC
        """), {"post_id": post_id})
        return [row.category_id for row in result.fetchall()]

    async def replace_post_categories(
        self,
        post_id: str,
        category_ids: List[str],
        db: AsyncSession,
    ) -> bool:
        """
        Replace a post's category associations and primary category.

        Returns False when the post does not exist.
        """
        primary = category_ids[0] if category_ids else None
        result = await db.execute(text("""
            UPDATE posts
            SET primary_category_id = :primary, updated_at = :updated_at
            WHERE id = :post_id
        """), {
            "primary": primary,
            "updated_at": datetime.now(timezone.utc),
            "post_id": post_id,
        })
        if result.rowcount == 0:
            return False

        await db.execute(
            text("DELETE FROM post_categories WHERE post_id = :post_id"),
            {"post_id": post_id},
        )
        for position, category_id in enumerate(category_ids):
            await db.execute(text("""
                INSERT INTO post_categories (post_id, category_id, position)
                VALUES (:post_id, :category_id, :position)
            """), {"post_id": post_id, "category_id": category_id, "position": position})

        logger.info("post_categories_replaced", post_id=post_id, category_ids=category_ids)
        return True


# Singleton instance
post_repository = PostRepository()
