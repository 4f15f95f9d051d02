"""
Category and post schemas (Pydantic models)
Shapes shared by the category repository, the categorization domain and the API
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_CATEGORY_COLOR = "#3B82F6"
MAX_CATEGORIES_PER_POST = 4


class Category(BaseModel):
    """Category row as stored in the categories table"""
    id: str
    name: str
    slug: str
    color: str = DEFAULT_CATEGORY_COLOR
    post_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "cat_1730000000000_k2j4h5g6f",
                "name": "Construction",
                "slug": "construction",
                "color": "#EAB308",
                "post_count": 42,
            }
        }


class CategoryCreate(BaseModel):
    """Admin request to create a category"""
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    color: Optional[str] = Field(None, description="Hex color, defaults to blue")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class CategoryUpdate(BaseModel):
    """Admin request to update a category (partial)"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    color: Optional[str] = None

    def changes(self) -> dict:
        """Only the fields that were actually provided"""
        return {k: v for k, v in self.model_dump().items() if v}


class CategoryIdValidation(BaseModel):
    """Result of checking category ids against the database"""
    valid: List[str] = Field(default_factory=list)
    invalid: List[str] = Field(default_factory=list)


class CategoryRef(BaseModel):
    """Minimal id/name pair"""
    id: str
    name: str


class CategoryAssignment(BaseModel):
    """
    Validated category assignment for a post.

    The primary category is always the first id in the list.
    """
    category_id: str
    category_ids: List[str] = Field(..., min_length=1, max_length=MAX_CATEGORIES_PER_POST)

    @field_validator("category_ids")
    @classmethod
    def unique_ids(cls, v):
        if len(set(v)) != len(v):
            raise ValueError("category_ids must be unique")
        return v


class PostCreate(BaseModel):
    """Request to create a post; categories are assigned by classification"""
    content: str = Field(..., min_length=1, max_length=10000)
    available_categories: Optional[List[str]] = None


class PostRecord(BaseModel):
    """Post as persisted after categorization"""
    id: str
    content: str
    primary_category_id: Optional[str]
    category_ids: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    original_language: str = "English"
    translated_content: Optional[str] = None
    ai_confidence: float = Field(0.0, ge=0.0, le=1.0)
