"""
Data schemas for categorization module
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ResolutionTier(str, Enum):
    """Which resolver strategy produced the base category set"""
    MODEL_MATCH = "model_match"          # Model suggestion matched a valid name
    KEYWORD = "keyword"                  # Keyword frequency scoring
    NOT_MEANINGFUL = "not_meaningful"    # Gibberish/spam heuristic → Other bucket
    PARTIAL_MATCH = "partial_match"      # Substring match on first model suggestion
    DEFAULT = "default"                  # Terminal default (Informative/Other)
    FAILURE = "failure"                  # Pipeline error, fail-open result


class TranslationResult(BaseModel):
    """Output of the language normalizer"""
    translated_text: str
    detected_language: str = "English"


class RawSuggestion(BaseModel):
    """
    Model output for categorization, validated strictly.

    Accepts the legacy single "category" field and promotes it to a list.
    Confidence is kept raw here; the resolver clamps it.
    """
    model_config = ConfigDict(extra="ignore")

    categories: List[str] = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    confidence: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def promote_single_category(cls, data):
        if isinstance(data, dict) and "categories" not in data and isinstance(data.get("category"), str):
            data = {**data, "categories": [data["category"]]}
        return data

    @field_validator("categories")
    @classmethod
    def strip_categories(cls, v):
        cleaned = [c.strip() for c in v if c.strip()]
        if not cleaned:
            raise ValueError("categories must contain at least one non-blank name")
        return cleaned

    @field_validator("tags", mode="before")
    @classmethod
    def keep_string_tags(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("tags must be a list")
        return [t.strip() for t in v if isinstance(t, str) and t.strip()]


class ClassifierOutcome(BaseModel):
    """
    Result-style return from the classifier.

    Exactly one of `suggestion` / `failure` is set: success carries the parsed
    suggestion, fallback carries the reason no suggestion is available.
    """
    suggestion: Optional[RawSuggestion] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.suggestion is not None

    @classmethod
    def success(cls, suggestion: RawSuggestion) -> "ClassifierOutcome":
        return cls(suggestion=suggestion)

    @classmethod
    def fallback(cls, reason: str) -> "ClassifierOutcome":
        return cls(failure=reason)


class ClassificationRequest(BaseModel):
    content: str
    available_categories: Optional[List[str]] = None


class ClassificationResult(BaseModel):
    """
    Final categorization handed to the post-creation flow.

    Every entry in `categories` is a case-accurate name from the caller's list.
    """
    categories: List[str] = Field(..., min_length=1, max_length=4)
    tags: List[str] = Field(default_factory=list)
    confidence: float = Field(..., ge=0.0, le=1.0)
    original_language: str = "English"
    translated_content: str = ""
    tier: ResolutionTier

    @property
    def category(self) -> str:
        """Primary category"""
        return self.categories[0]

    class Config:
        json_schema_extra = {
            "example": {
                "categories": ["Construction", "Business"],
                "tags": ["startup", "budgeting", "contractor"],
                "confidence": 0.9,
                "original_language": "Sinhala",
                "translated_content": "I am planning to start a construction company...",
                "tier": "model_match",
            }
        }
