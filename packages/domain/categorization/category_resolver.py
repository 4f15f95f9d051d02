"""
Category Resolver - Reconcile model suggestions with the valid category list

The model's output is untrusted: nothing it says reaches the result unless it
matches a caller-supplied category name. Tiers, first hit wins:

1. Model match     - suggested names matched case-insensitively (max 3)
2. Keyword scoring - highest nonzero keyword family from keyword_rules
3. Not meaningful  - gibberish/spam text goes to the "Other" bucket
4. Partial match   - first suggestion contained in a name (or vice versa)
5. Default         - "Informative", else the "Other" bucket

Then multi-category forcing adds co-occurring categories (never removes).

Confidence:
- Model-derived tiers (1, 4): model score clamped to [0, 1], 0.5 when absent
- Heuristic tiers use fixed scores (see TIER_CONFIDENCE)

Tiers 2-5 and forcing are pure functions of (text, categories).
"""
import math
from typing import Dict, List, Optional

import structlog

from packages.common.schemas.category import MAX_CATEGORIES_PER_POST
from packages.domain.categorization import keyword_rules
from packages.domain.categorization.schemas import (
    ClassificationResult,
    RawSuggestion,
    ResolutionTier,
)

logger = structlog.get_logger()

MAX_MODEL_CATEGORIES = 3
MAX_TAGS = 5
DEFAULT_MODEL_CONFIDENCE = 0.5
OTHER_CATEGORY = "Other"
INFORMATIVE_CATEGORY = "Informative"

TIER_CONFIDENCE = {
    ResolutionTier.KEYWORD: 0.4,
    ResolutionTier.NOT_MEANINGFUL: 0.0,
    ResolutionTier.DEFAULT: 0.2,
    ResolutionTier.FAILURE: 0.0,
}


def clamp_confidence(value: Optional[float]) -> float:
    """Clamp to [0, 1]; missing or non-finite (NaN, inf) scores get the default"""
    if value is None or not math.isfinite(value):
        return DEFAULT_MODEL_CONFIDENCE
    return min(max(float(value), 0.0), 1.0)


def other_bucket(available_categories: List[str]) -> str:
    """
    The generic bucket: caller's "Other" if present, else the first caller
    category, else the literal "Other" (empty list).
    """
    lookup = _lookup(available_categories)
    if OTHER_CATEGORY.lower() in lookup:
        return lookup[OTHER_CATEGORY.lower()]
    if available_categories:
        return available_categories[0]
    return OTHER_CATEGORY


def _lookup(available_categories: List[str]) -> Dict[str, str]:
    """lowercase name → caller's exact name (first occurrence wins)"""
    lookup: Dict[str, str] = {}
    for name in available_categories:
        lookup.setdefault(name.strip().lower(), name)
    return lookup


class CategoryResolver:

    def resolve(
        self,
        suggestion: Optional[RawSuggestion],
        text: str,
        available_categories: List[str],
        original_language: str = "English",
    ) -> ClassificationResult:
        """
        Resolve a final category set from a (possibly missing) model suggestion.

        Args:
            suggestion: Parsed model output, or None when the model was unavailable/failed
            text: Normalized (English) post content
            available_categories: Valid category names, exact casing
            original_language: Detected source language, passed through

        Returns:
            ClassificationResult whose categories all come from available_categories
        """
        tags = suggestion.tags[:MAX_TAGS] if suggestion else []

        if not available_categories:
            logger.warning("resolve_without_categories", message="No categories supplied, using Other")
            return ClassificationResult(
                categories=[OTHER_CATEGORY],
                tags=tags,
                confidence=0.0,
                original_language=original_language,
                translated_content=text,
                tier=ResolutionTier.DEFAULT,
            )

        base, tier = self._resolve_base(suggestion, text, available_categories)
        categories = self._apply_forcing(base, text, available_categories)

        if tier in (ResolutionTier.MODEL_MATCH, ResolutionTier.PARTIAL_MATCH):
            confidence = clamp_confidence(suggestion.confidence)
        else:
            confidence = TIER_CONFIDENCE[tier]

        logger.info("categories_resolved",
                    tier=tier.value,
                    base=base,
                    categories=categories,
                    confidence=confidence)

        return ClassificationResult(
            categories=categories,
            tags=tags,
            confidence=confidence,
            original_language=original_language,
            translated_content=text,
            tier=tier,
        )

    def _resolve_base(self, suggestion, text, available_categories):
        lookup = _lookup(available_categories)

        # Tier 1: model suggestions that name a valid category
        if suggestion:
            matched = self.match_suggestions(suggestion.categories, lookup)
            if matched:
                return matched, ResolutionTier.MODEL_MATCH
            logger.warning("no_valid_suggested_categories",
                           suggested=suggestion.categories,
                           available=available_categories)

        # Tier 2: keyword scoring over families the caller offers
        allowed = [family for family in keyword_rules.KEYWORD_TABLE if family.lower() in lookup]
        family = keyword_rules.best_keyword_family(text, allowed)
        if family:
            return [lookup[family.lower()]], ResolutionTier.KEYWORD

        # Tier 3: gibberish / spam
        if not keyword_rules.is_meaningful(text):
            return [other_bucket(available_categories)], ResolutionTier.NOT_MEANINGFUL

        # Tier 4: substring match on the first suggestion
        if suggestion:
            partial = self.partial_match(suggestion.categories[0], available_categories)
            if partial:
                return [partial], ResolutionTier.PARTIAL_MATCH

        # Tier 5: terminal default
        default = lookup.get(INFORMATIVE_CATEGORY.lower()) or other_bucket(available_categories)
        return [default], ResolutionTier.DEFAULT

    @staticmethod
    def match_suggestions(suggested: List[str], lookup: Dict[str, str]) -> List[str]:
        """Case-insensitive exact matches, deduplicated, in suggestion order"""
        matched: List[str] = []
        for name in suggested:
            hit = lookup.get(name.strip().lower())
            if hit and hit not in matched:
                matched.append(hit)
        return matched[:MAX_MODEL_CATEGORIES]

    @staticmethod
    def partial_match(first_suggestion: str, available_categories: List[str]) -> Optional[str]:
        needle = first_suggestion.strip().lower()
        if not needle:
            return None
        for name in available_categories:
            candidate = name.lower()
            if candidate and (needle in candidate or candidate in needle):
                return name
        return None

    @staticmethod
    def _apply_forcing(base: List[str], text: str, available_categories: List[str]) -> List[str]:
        """
        Add categories from co-occurrence rules, then cap at 4.

        When the cap bites, base categories are dropped from the end before any
        forced category is.
        """
        lookup = _lookup(available_categories)

        forced: List[str] = []
        for category_a, category_b in keyword_rules.forced_category_pairs(text):
            hit_a, hit_b = lookup.get(category_a.lower()), lookup.get(category_b.lower())
            if not (hit_a and hit_b):
                continue
            for hit in (hit_a, hit_b):
                if hit not in forced:
                    forced.append(hit)

        if forced:
            logger.debug("categories_forced", forced=forced)

        merged = list(base) + [c for c in forced if c not in base]
        protected = set(forced[:MAX_CATEGORIES_PER_POST])
        while len(merged) > MAX_CATEGORIES_PER_POST:
            drop = next(i for i in reversed(range(len(merged))) if merged[i] not in protected)
            del merged[drop]
        return merged


# Singleton instance
category_resolver = CategoryResolver()
