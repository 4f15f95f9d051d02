"""
Categorization Service - Orchestrates post categorization

Flow:
1. Normalize: detect language, translate to English (AI, fail-open)
2. Classify: model proposes 1-3 categories + tags + confidence (AI, fail-open)
3. Resolve: filter/repair suggestions against valid names, keyword and
   heuristic fallbacks, multi-category forcing (rules, no AI)

Example:
- Input: "මම නව ව්‍යාපාරයක් ආරම්භ කිරීමට සැලසුම් කරමි..." (Sinhala)
- Step 1: "I am planning to start a new business..." (Sinhala)
- Step 2: {"categories": ["business"], "confidence": 0.9}
- Step 3: ["Business"] (case-accurate name from the category list)

Never blocks content creation: every failure path still returns a usable
ClassificationResult.
"""
from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.config import get_settings
from packages.common.metrics import CLASSIFICATIONS
from packages.common.post_repository import PostRepository, post_repository
from packages.common.schemas.category import PostRecord
from packages.domain.categorization.category_classifier import CategoryClassifier
from packages.domain.categorization.category_resolver import CategoryResolver, other_bucket
from packages.domain.categorization.category_store import CategoryStore, category_store
from packages.domain.categorization.errors import CategoryValidationError
from packages.domain.categorization.language_normalizer import LanguageNormalizer
from packages.domain.categorization.model_client import ModelClient
from packages.domain.categorization.schemas import ClassificationResult, ResolutionTier

logger = structlog.get_logger()


class CategorizationService:
    """
    Usage:
        service = CategorizationService()
        result = await service.classify_post(
            content="Starting a construction company - budgeting tips?",
            available_categories=["Business", "Construction", "Other"],
        )
        print(result.categories, result.confidence)
    """

    def __init__(
        self,
        client: Optional[ModelClient] = None,
        store: Optional[CategoryStore] = None,
        posts: Optional[PostRepository] = None,
        normalizer: Optional[LanguageNormalizer] = None,
        classifier: Optional[CategoryClassifier] = None,
        resolver: Optional[CategoryResolver] = None,
    ):
        if normalizer is None or classifier is None:
            client = client or ModelClient()
        self.normalizer = normalizer or LanguageNormalizer(client)
        self.classifier = classifier or CategoryClassifier(client)
        self.resolver = resolver or CategoryResolver()
        self.store = store or category_store
        self.posts = posts or post_repository

    async def available_category_names(
        self,
        available_categories: Optional[List[str]],
        db: Optional[AsyncSession],
    ) -> List[str]:
        """
        Caller's list if non-empty, else database names, else configured defaults.
        """
        if available_categories:
            return list(available_categories)

        if db is not None:
            try:
                names = await self.store.list_category_names(db)
                if names:
                    return names
            except Exception as e:
                logger.error("category_names_unavailable", error=str(e), exc_info=True)

        return list(get_settings().default_categories)

    async def classify_post(
        self,
        content: str,
        available_categories: Optional[List[str]] = None,
        db: Optional[AsyncSession] = None,
    ) -> ClassificationResult:
        """
        Classify post content into 1-4 categories.

        Args:
            content: Raw post content, any language
            available_categories: Valid category names; None/empty → database/defaults
            db: Database session used to load category names when none are given

        Returns:
            ClassificationResult (never raises)
        """
        categories: List[str] = list(available_categories or [])

        try:
            categories = await self.available_category_names(available_categories, db)

            logger.info("classification_started",
                        content=content[:100],
                        category_count=len(categories))

            translation = await self.normalizer.normalize(content)
            outcome = await self.classifier.classify(translation.translated_text, categories)

            if not outcome.ok:
                logger.info("classification_fallback", reason=outcome.failure)

            result = self.resolver.resolve(
                outcome.suggestion,
                translation.translated_text,
                categories,
                original_language=translation.detected_language,
            )
        except Exception as e:
            logger.error("classification_failed", error=str(e), exc_info=True)
            result = ClassificationResult(
                categories=[other_bucket(categories)],
                tags=[],
                confidence=0.0,
                original_language="English",
                translated_content=content,
                tier=ResolutionTier.FAILURE,
            )

        CLASSIFICATIONS.labels(tier=result.tier.value).inc()

        logger.info("classification_complete",
                    categories=result.categories,
                    tags=result.tags,
                    confidence=result.confidence,
                    tier=result.tier.value,
                    original_language=result.original_language)

        return result

    async def create_categorized_post(
        self,
        content: str,
        db: AsyncSession,
        available_categories: Optional[List[str]] = None,
    ) -> PostRecord:
        """
        Create a post, classify it and attach its categories.

        Category names that don't exist in the database are dropped; if none
        survive the post falls back to the database's "Other" bucket.

        Raises:
            CategoryValidationError: no usable category exists in the database
        """
        result = await self.classify_post(content, available_categories, db)

        refs = await self.store.get_ids_by_names(result.categories, db)
        if not refs:
            names = await self.store.list_category_names(db)
            refs = await self.store.get_ids_by_names([other_bucket(names)], db) if names else []
        if not refs:
            raise CategoryValidationError("No categories available to assign")

        assignment = await self.store.assign_categories([ref.id for ref in refs], db)

        post_id = await self.posts.insert_post(
            content=content,
            db=db,
            original_language=result.original_language,
            translated_content=result.translated_content,
            tags=result.tags,
            ai_confidence=result.confidence,
        )
        await self.posts.replace_post_categories(post_id, assignment.category_ids, db)
        await self.store.increment_post_counts(assignment.category_ids, db)
        await db.commit()

        logger.info("post_created",
                    post_id=post_id,
                    primary_category_id=assignment.category_id,
                    category_ids=assignment.category_ids)

        return PostRecord(
            id=post_id,
            content=content,
            primary_category_id=assignment.category_id,
            category_ids=assignment.category_ids,
            categories=[ref.name for ref in refs],
            tags=result.tags,
            original_language=result.original_language,
            translated_content=result.translated_content,
            ai_confidence=result.confidence,
        )

    async def recategorize_post(
        self,
        post_id: str,
        content: str,
        db: AsyncSession,
    ) -> Optional[List[str]]:
        """
        Re-run classification for an existing post and move its post counts.

        Returns the new category ids, or None when the post doesn't exist.
        """
        if not await self.posts.post_exists(post_id, db):
            logger.warning("recategorize_post_not_found", post_id=post_id)
            return None

        result = await self.classify_post(content, None, db)
        old_ids = await self.posts.get_post_category_ids(post_id, db)

        refs = await self.store.get_ids_by_names(result.categories, db)
        if not refs:
            logger.warning("recategorize_no_matching_ids", post_id=post_id, categories=result.categories)
            return old_ids

        assignment = await self.store.assign_categories([ref.id for ref in refs], db)
        await self.posts.replace_post_categories(post_id, assignment.category_ids, db)

        removed = [cid for cid in old_ids if cid not in assignment.category_ids]
        added = [cid for cid in assignment.category_ids if cid not in old_ids]
        await self.store.handle_post_category_change(removed, added, db)
        await db.commit()

        return assignment.category_ids


# Singleton instance
categorization_service = CategorizationService()
