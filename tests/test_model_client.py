"""Unit tests for the Anthropic model client wrapper and JSON extraction."""

import pytest

from packages.domain.categorization.errors import MalformedModelResponse
from packages.domain.categorization.model_client import ModelClient, extract_json


class TestExtractJson:

    @pytest.mark.unit
    def test_plain_json_object(self):
        assert extract_json('{"categories": ["Design"]}') == {"categories": ["Design"]}

    @pytest.mark.unit
    def test_fenced_json_block(self):
        text = 'Here you go:\n```json\n{"categories": ["Business"], "confidence": 0.8}\n```\nThanks'
        assert extract_json(text) == {"categories": ["Business"], "confidence": 0.8}

    @pytest.mark.unit
    def test_fenced_block_without_language(self):
        assert extract_json('```\n{"a": 1}\n```') == {"a": 1}

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        "I think this is about business.",
        '["Design", "Business"]',
        "```json\nnot json\n```",
        "",
    ])
    def test_non_object_raises_malformed(self, text):
        with pytest.raises(MalformedModelResponse) as exc_info:
            extract_json(text)
        assert exc_info.value.raw_response == text


class TestModelClient:

    @pytest.mark.unit
    def test_unavailable_without_api_key(self):
        client = ModelClient()
        assert client.available is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_without_client_raises(self):
        client = ModelClient()
        with pytest.raises(RuntimeError):
            await client.complete("hello")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_returns_first_text_block(self, mock_anthropic):
        mock_anthropic.messages.create.return_value = mock_anthropic.respond("plain answer")
        client = ModelClient(api_key="test-key", model="claude-test", client=mock_anthropic)

        assert client.available is True
        assert await client.complete("prompt text") == "plain answer"

        kwargs = mock_anthropic.messages.create.await_args.kwargs
        assert kwargs["model"] == "claude-test"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt text"}]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_complete_json_parses_fenced_response(self, mock_anthropic):
        mock_anthropic.messages.create.return_value = mock_anthropic.respond(
            '```json\n{"translatedText": "hello", "detectedLanguage": "Tamil"}\n```'
        )
        client = ModelClient(api_key="test-key", client=mock_anthropic)

        data = await client.complete_json("translate")

        assert data == {"translatedText": "hello", "detectedLanguage": "Tamil"}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_content_is_empty_string(self, mock_anthropic):
        response = mock_anthropic.respond("")
        response.content = []
        mock_anthropic.messages.create.return_value = response
        client = ModelClient(api_key="test-key", client=mock_anthropic)

        assert await client.complete("prompt") == ""
