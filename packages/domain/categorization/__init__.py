"""
Categorization Module - AI-assisted post categorization

Three stages:
1. Language Normalizer (AI): detect language, translate to English
2. Category Classifier (AI): propose 1-3 categories from the valid list
3. Category Resolver (Rules): keep only valid names, fall back to keyword
   scoring / gibberish check / substring match / default, then force
   co-occurring categories

Fail-open everywhere: no API key or a bad model response still yields a
usable result, so post creation never waits on AI availability.

Example flow:
- "starting a construction company and budgeting" → AI → ["Construction"]
  → forcing (construction + budgeting) → ["Construction", "Business"]
- "abc123 random text xyz hello" (AI down) → no keywords, not meaningful → ["Other"]
"""

from packages.domain.categorization.category_resolver import CategoryResolver
from packages.domain.categorization.categorization_service import CategorizationService
from packages.domain.categorization.category_store import CategoryStore
from packages.domain.categorization.schemas import (
    ClassificationResult,
    RawSuggestion,
    ResolutionTier,
)

__all__ = [
    'CategoryResolver',
    'CategorizationService',
    'CategoryStore',
    'ClassificationResult',
    'RawSuggestion',
    'ResolutionTier',
]
