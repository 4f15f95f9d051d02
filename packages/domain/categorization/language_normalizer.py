"""
Language Normalizer - Detect language and translate post content to English

Categorization prompts and keyword rules work on English text, so non-English
posts (Sinhala, Tamil, Hindi, ...) are translated first.

Fail-open: no API key, SDK error or a malformed/incomplete response all return
the input unchanged with detected language "English". No retry.
"""
from typing import Optional

import structlog
from pydantic import BaseModel, Field, ValidationError

from packages.common.metrics import MODEL_CALL_FAILURES
from packages.domain.categorization.errors import MalformedModelResponse
from packages.domain.categorization.model_client import ModelClient
from packages.domain.categorization.schemas import TranslationResult

logger = structlog.get_logger()

DEFAULT_LANGUAGE = "English"


class _TranslationPayload(BaseModel):
    translatedText: str = Field(..., min_length=1)
    detectedLanguage: str = Field(..., min_length=1)


class LanguageNormalizer:

    def __init__(self, client: Optional[ModelClient] = None):
        self.client = client or ModelClient()

    async def normalize(self, text: str) -> TranslationResult:
        """Return English text plus the detected source language; never raises"""
        passthrough = TranslationResult(translated_text=text, detected_language=DEFAULT_LANGUAGE)

        if not self.client.available:
            logger.info("translation_skipped", reason="ai_unavailable")
            return passthrough

        try:
            data = await self.client.complete_json(self._build_prompt(text))
            payload = _TranslationPayload.model_validate(data)
        except (MalformedModelResponse, ValidationError) as e:
            MODEL_CALL_FAILURES.labels(stage="translation", reason="malformed_response").inc()
            logger.warning("translation_response_invalid", error=str(e))
            return passthrough
        except Exception as e:
            MODEL_CALL_FAILURES.labels(stage="translation", reason="request_failed").inc()
            logger.error("translation_failed", error=str(e), exc_info=True)
            return passthrough

        logger.info("translation_complete",
                    detected_language=payload.detectedLanguage,
                    original=text[:100],
                    translated=payload.translatedText[:100])

        return TranslationResult(
            translated_text=payload.translatedText,
            detected_language=payload.detectedLanguage,
        )

    @staticmethod
    def _build_prompt(text: str) -> str:
        return f"""Detect the language of the following text and translate it to English if it's not already in English. If the text is already in English, return the original text unchanged.

Text: "{text}"

Return ONLY this JSON object, no other text:
{{
  "translatedText": "the translated or original text",
  "detectedLanguage": "the detected language name in English"
}}"""
