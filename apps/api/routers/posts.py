"""
Posts API Router
Post creation with AI categorization, and a classification preview endpoint.
"""
import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from packages.common.database import get_db_session
from packages.common.schemas.category import PostCreate, PostRecord
from packages.domain.categorization.categorization_service import (
    CategorizationService,
    categorization_service,
)
from packages.domain.categorization.errors import CategoryValidationError
from packages.domain.categorization.schemas import ClassificationRequest, ClassificationResult

logger = structlog.get_logger()
router = APIRouter()


def get_categorization_service() -> CategorizationService:
    return categorization_service


@router.post("/classify", response_model=ClassificationResult)
async def classify_content(
    payload: ClassificationRequest,
    db: AsyncSession = Depends(get_db_session),
    service: CategorizationService = Depends(get_categorization_service),
):
    """
    Preview categorization without creating a post

    Always returns a result: AI outages fall back to keyword rules/defaults.
    """
    return await service.classify_post(payload.content, payload.available_categories, db)


@router.post("", response_model=PostRecord, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    db: AsyncSession = Depends(get_db_session),
    service: CategorizationService = Depends(get_categorization_service),
):
    """
    Create a post and assign 1-4 categories via AI categorization
    """
    logger.info("post_create_requested", length=len(payload.content))

    try:
        return await service.create_categorized_post(
            payload.content,
            db,
            available_categories=payload.available_categories,
        )
    except CategoryValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
