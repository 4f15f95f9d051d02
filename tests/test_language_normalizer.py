"""Unit tests for LanguageNormalizer fail-open behaviour."""

import pytest

from packages.domain.categorization.errors import MalformedModelResponse
from packages.domain.categorization.language_normalizer import LanguageNormalizer

SINHALA = "මම නව ව්‍යාපාරයක් ආරම්භ කිරීමට සැලසුම් කරමි."


class TestLanguageNormalizer:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_translates_non_english(self, fake_client):
        fake_client.complete_json.return_value = {
            "translatedText": "I plan to start a new business.",
            "detectedLanguage": "Sinhala",
        }

        result = await LanguageNormalizer(fake_client).normalize(SINHALA)

        assert result.translated_text == "I plan to start a new business."
        assert result.detected_language == "Sinhala"
        prompt = fake_client.complete_json.await_args.args[0]
        assert SINHALA in prompt

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unavailable_client_passes_through(self, unavailable_client):
        result = await LanguageNormalizer(unavailable_client).normalize(SINHALA)

        assert result.translated_text == SINHALA
        assert result.detected_language == "English"
        unavailable_client.complete_json.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", [
        MalformedModelResponse("Invalid JSON response from AI", raw_response="nope"),
        TimeoutError("model timed out"),
        RuntimeError("connection reset"),
    ])
    async def test_model_errors_pass_through(self, fake_client, failure):
        fake_client.complete_json.side_effect = failure

        result = await LanguageNormalizer(fake_client).normalize(SINHALA)

        assert result.translated_text == SINHALA
        assert result.detected_language == "English"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [
        {"translatedText": "only half"},
        {"detectedLanguage": "Tamil"},
        {"translatedText": "", "detectedLanguage": "Tamil"},
        {"translatedText": 42, "detectedLanguage": "Tamil"},
    ])
    async def test_incomplete_payload_passes_through(self, fake_client, payload):
        fake_client.complete_json.return_value = payload

        result = await LanguageNormalizer(fake_client).normalize(SINHALA)

        assert result.translated_text == SINHALA
        assert result.detected_language == "English"
