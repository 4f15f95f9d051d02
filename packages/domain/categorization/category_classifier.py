"""
Category Classifier - Ask the language model for 1-3 categories

The prompt embeds the caller's exact category names. The response is parsed as
JSON (fenced code blocks tolerated) and validated against RawSuggestion.

Returns a ClassifierOutcome instead of raising:
- success → parsed suggestion (still untrusted; the resolver filters it)
- fallback → reason string (ai_unavailable, malformed_response, request_failed)
"""
from typing import List, Optional

import structlog
from pydantic import ValidationError

from packages.common.metrics import MODEL_CALL_FAILURES
from packages.domain.categorization.errors import MalformedModelResponse
from packages.domain.categorization.model_client import ModelClient
from packages.domain.categorization.schemas import ClassifierOutcome, RawSuggestion

logger = structlog.get_logger()


class CategoryClassifier:

    def __init__(self, client: Optional[ModelClient] = None):
        self.client = client or ModelClient()

    async def classify(self, text: str, available_categories: List[str]) -> ClassifierOutcome:
        """
        Propose categories for normalized (English) text.

        Args:
            text: Post content after language normalization
            available_categories: Exact category names the model may choose from

        Returns:
            ClassifierOutcome with a suggestion, or a fallback reason
        """
        if not self.client.available:
            logger.info("classification_model_skipped", reason="ai_unavailable")
            return ClassifierOutcome.fallback("ai_unavailable")

        prompt = self._build_prompt(text, available_categories)

        try:
            data = await self.client.complete_json(prompt)
            suggestion = RawSuggestion.model_validate(data)
        except (MalformedModelResponse, ValidationError) as e:
            MODEL_CALL_FAILURES.labels(stage="classification", reason="malformed_response").inc()
            logger.warning("classification_response_invalid", error=str(e))
            return ClassifierOutcome.fallback("malformed_response")
        except Exception as e:
            MODEL_CALL_FAILURES.labels(stage="classification", reason="request_failed").inc()
            logger.error("classification_request_failed", error=str(e), exc_info=True)
            return ClassifierOutcome.fallback("request_failed")

        logger.info("classification_suggested",
                    categories=suggestion.categories,
                    tags=suggestion.tags,
                    confidence=suggestion.confidence)

        return ClassifierOutcome.success(suggestion)

    @staticmethod
    def _build_prompt(text: str, available_categories: List[str]) -> str:
        numbered = "\n".join(f"{i}. {name}" for i, name in enumerate(available_categories, 1))

        return f"""You are an expert content categorizer for a community forum about design, construction and professional life.

AVAILABLE CATEGORIES (choose 1-3 most relevant, spelled exactly as listed):
{numbered}

CONTENT TO ANALYZE:
"{text}"

CLASSIFICATION RULES:
1. Read the content carefully and identify ALL relevant topics
2. Select 1-3 categories that match the content themes; include several when the content clearly spans multiple domains
3. Categories must match the names in the list above exactly
4. Business: starting companies, budgeting, consulting, management
5. Construction: construction, engineering, building, architecture projects
6. Career: career advice, job seeking, professional development
7. Design: design, aesthetics, interiors, visual concepts
8. Academic: degrees, research, universities, study
9. Informative: tutorials, guides, informational content
10. If the content is gibberish, random characters, very short, or spam, use "Other"

EXAMPLES:
- "starting a construction company and budgeting" → ["Construction", "Business"]
- "career advice for civil engineers" → ["Career", "Construction"]
- "University degree in construction management" → ["Academic", "Construction"]
- "interior design concepts" → ["Design"]
- "Random text abc123" → ["Other"]

RESPONSE FORMAT (return ONLY this JSON, no other text):
{{
  "categories": ["Category1", "Category2"],
  "tags": ["keyword1", "keyword2", "keyword3"],
  "confidence": 0.85
}}

"tags" should be 3-5 relevant keywords from the content. "confidence" is between 0.1 and 1.0.
Always return categories as an array, even for a single category."""
