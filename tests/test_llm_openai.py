"""Tests for reelnotes.llm.openai module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import RateLimitError

from reelnotes.exceptions import CompletionError
from reelnotes.llm.openai import CompletionClient
from reelnotes.llm.prompts import SYSTEM_PROMPT


def create_mock_response(content):
    """Create a mock chat completion response."""
    mock = MagicMock()
    mock.choices = [MagicMock(message=MagicMock(content=content))]
    return mock


class TestCompletionClient:
    """Tests for CompletionClient class."""

    @pytest.fixture
    def mock_openai(self):
        """Create mock AsyncOpenAI client."""
        mock = MagicMock()
        mock.chat.completions.create = AsyncMock()
        return mock

    @pytest.fixture
    def client(self, settings, mock_openai):
        """Create CompletionClient with mocked dependencies."""
        with patch("reelnotes.llm.openai.AsyncOpenAI", return_value=mock_openai):
            client = CompletionClient(settings)
            client.client = mock_openai
            return client

    def test_init(self, settings):
        """Client points at the configured endpoint with SDK retries disabled."""
        with patch("reelnotes.llm.openai.AsyncOpenAI") as mock_class:
            client = CompletionClient(settings)

            mock_class.assert_called_once_with(
                api_key=settings.llm_api_key,
                base_url=settings.llm_base_url,
                timeout=settings.request_timeout,
                max_retries=0,
            )
            assert client.model == settings.llm_model

    async def test_complete_returns_content(self, client, mock_openai):
        mock_openai.chat.completions.create.return_value = create_mock_response('{"title": "A"}')

        result = await client.complete("prompt text")

        assert result == '{"title": "A"}'
        mock_openai.chat.completions.create.assert_awaited_once()

    async def test_complete_sends_system_and_user_messages(self, client, mock_openai, settings):
        mock_openai.chat.completions.create.return_value = create_mock_response("{}")

        await client.complete("prompt text")

        call_kwargs = mock_openai.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == settings.llm_model
        assert call_kwargs["temperature"] == 0.7
        assert call_kwargs["max_tokens"] == 1024
        assert call_kwargs["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": "prompt text"},
        ]

    async def test_empty_message_raises(self, client, mock_openai):
        mock_openai.chat.completions.create.return_value = create_mock_response(None)

        with pytest.raises(CompletionError):
            await client.complete("prompt")

    async def test_no_choices_raises(self, client, mock_openai):
        response = MagicMock()
        response.choices = []
        mock_openai.chat.completions.create.return_value = response

        with pytest.raises(CompletionError):
            await client.complete("prompt")

    async def test_sdk_errors_propagate_without_retry(self, client, mock_openai):
        mock_openai.chat.completions.create.side_effect = RateLimitError(
            message="Rate limit",
            response=MagicMock(status_code=429),
            body={"error": {"message": "Rate limit"}},
        )

        with pytest.raises(RateLimitError):
            await client.complete("prompt")

        assert mock_openai.chat.completions.create.await_count == 1


class TestSystemPrompt:
    def test_system_prompt_requires_json(self):
        assert "JSON" in SYSTEM_PROMPT
