"""
Model Client - Thin async wrapper around the Anthropic Messages API

Shared by the language normalizer and the category classifier:
- One prompt in, one text response out (no streaming)
- Timeouts and retries are left to the SDK (timeout / max_retries settings)
- JSON extraction tolerates responses wrapped in a fenced code block
"""
import json
import re
from typing import Any, Dict, Optional

import anthropic
import structlog

from packages.common.config import get_settings
from packages.domain.categorization.errors import MalformedModelResponse

logger = structlog.get_logger()

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def extract_json(response_text: str) -> Dict[str, Any]:
    """
    Parse a JSON object from model output.

    Tries the raw text first, then the first fenced block. Anything that is not
    a JSON object raises MalformedModelResponse.
    """
    candidates = [response_text.strip()]
    match = _FENCED_BLOCK.search(response_text)
    if match:
        candidates.append(match.group(1).strip())

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(data, dict):
            return data

    raise MalformedModelResponse("Invalid JSON response from AI", raw_response=response_text)


class ModelClient:
    """
    Async client for the hosted language model.

    With no API key configured, `available` is False and callers are expected
    to skip the call entirely (fail-open).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.anthropic_api_key
        self.model = model or settings.ai_model
        self.temperature = settings.ai_temperature
        self.max_tokens = settings.ai_max_tokens

        if client is not None:
            self.client = client
        elif self.api_key:
            self.client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=settings.ai_timeout_seconds,
                max_retries=settings.ai_max_retries,
            )
        else:
            logger.warning("anthropic_api_key_missing",
                           message="ANTHROPIC_API_KEY not set, AI categorization disabled")
            self.client = None

    @property
    def available(self) -> bool:
        return self.client is not None

    async def complete(self, prompt: str) -> str:
        """Send a single user prompt and return the first text block"""
        if not self.client:
            raise RuntimeError("Model client not configured")

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            messages=[
                {
                    "role": "user",
                    "content": prompt
                }
            ]
        )

        logger.debug("model_call_complete",
                     model=self.model,
                     input_tokens=response.usage.input_tokens,
                     output_tokens=response.usage.output_tokens)

        if not response.content:
            return ""
        return getattr(response.content[0], "text", "") or ""

    async def complete_json(self, prompt: str) -> Dict[str, Any]:
        """complete() followed by extract_json()"""
        return extract_json(await self.complete(prompt))
