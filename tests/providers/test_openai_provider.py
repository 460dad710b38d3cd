"""Tests for OpenAI provider integration."""

from unittest.mock import AsyncMock, MagicMock, Mock, patch

import pytest
from openai import OpenAIError

from assessment_gen.error_classifier import ErrorCategory
from assessment_gen.providers.base import EmptyResponseError, TransportError
from assessment_gen.providers.openai_provider import (
    OpenAIProvider,
    build_chat_messages,
)


def _chat_response(content):
    mock_message = Mock()
    mock_message.content = content

    mock_choice = Mock()
    mock_choice.message = mock_message

    mock_response = Mock()
    mock_response.choices = [mock_choice]
    return mock_response


class TestBuildChatMessages:
    """Tests for build_chat_messages function."""

    def test_with_system_prompt(self):
        """Test the system message comes first."""
        messages = build_chat_messages("hi", "be brief")
        assert messages == [
            {"role": "system", "content": "be brief"},
            {"role": "user", "content": "hi"},
        ]

    def test_without_system_prompt(self):
        """Test only the user message is sent without a system prompt."""
        assert build_chat_messages("hi") == [{"role": "user", "content": "hi"}]


@patch("assessment_gen.providers.openai_provider.AsyncOpenAI")
@patch("assessment_gen.providers.openai_provider.OpenAI")
class TestOpenAIProvider:
    """Test suite for OpenAIProvider."""

    def test_initialization(self, mock_openai_class, mock_async_class, mock_api_key):
        """Test that provider initializes correctly."""
        provider = OpenAIProvider(api_key=mock_api_key, model="gpt-4o")

        assert provider.api_key == mock_api_key
        assert provider.model == "gpt-4o"
        assert provider.get_provider_name() == "openai"
        mock_openai_class.assert_called_once_with(
            api_key=mock_api_key, organization=None
        )

    def test_default_model(self, mock_openai_class, mock_async_class, mock_api_key):
        """Test that default model is set correctly."""
        provider = OpenAIProvider(api_key=mock_api_key)
        assert provider.model == "gpt-4o-mini"

    def test_generate_completion_success(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test successful text completion generation."""
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.return_value = _chat_response("[]")

        provider = OpenAIProvider(api_key=mock_api_key)
        result = provider.generate_completion(
            sample_prompt, system_prompt="sys", temperature=0.5, max_tokens=1000
        )

        assert result == "[]"
        mock_client.chat.completions.create.assert_called_once_with(
            model="gpt-4o-mini",
            messages=[
                {"role": "system", "content": "sys"},
                {"role": "user", "content": sample_prompt},
            ],
            temperature=0.5,
            max_tokens=1000,
        )

    def test_model_override(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test a per-call model replaces the default."""
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.return_value = _chat_response("ok")

        provider = OpenAIProvider(api_key=mock_api_key)
        provider.generate_completion(sample_prompt, model_override="gpt-4o")

        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-4o"

    def test_generate_completion_empty_content(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test an empty message raises EmptyResponseError."""
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.return_value = _chat_response(None)

        provider = OpenAIProvider(api_key=mock_api_key)

        with pytest.raises(EmptyResponseError) as exc_info:
            provider.generate_completion(sample_prompt)

        assert str(exc_info.value) == "No content received from openai"
        assert exc_info.value.classified_error.category == ErrorCategory.EMPTY_RESPONSE

    def test_generate_completion_no_choices(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test a response without choices counts as empty."""
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_response = Mock()
        mock_response.choices = []
        mock_client.chat.completions.create.return_value = mock_response

        provider = OpenAIProvider(api_key=mock_api_key)

        with pytest.raises(EmptyResponseError):
            provider.generate_completion(sample_prompt)

    def test_generate_completion_api_error(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test handling of API errors."""
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.side_effect = OpenAIError("API error")

        provider = OpenAIProvider(api_key=mock_api_key)

        with pytest.raises(TransportError) as exc_info:
            provider.generate_completion(sample_prompt)

        assert "openai API error" in str(exc_info.value)
        assert isinstance(exc_info.value.original_exception, OpenAIError)

    def test_generate_completion_rate_limited(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test rate limit errors are classified."""
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.side_effect = OpenAIError(
            "Error code: 429 - Rate limit reached"
        )

        provider = OpenAIProvider(api_key=mock_api_key)

        with pytest.raises(TransportError) as exc_info:
            provider.generate_completion(sample_prompt)

        assert exc_info.value.classified_error.category == ErrorCategory.RATE_LIMIT

    @pytest.mark.asyncio
    async def test_generate_completion_async(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test async completion uses the async client."""
        mock_async_client = MagicMock()
        mock_async_class.return_value = mock_async_client
        mock_async_client.chat.completions.create = AsyncMock(
            return_value=_chat_response("async content")
        )

        provider = OpenAIProvider(api_key=mock_api_key)
        result = await provider.generate_completion_async(sample_prompt)

        assert result == "async content"
        mock_async_client.chat.completions.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_generate_completion_async_api_error(
        self, mock_openai_class, mock_async_class, mock_api_key, sample_prompt
    ):
        """Test async API errors are wrapped."""
        mock_async_client = MagicMock()
        mock_async_class.return_value = mock_async_client
        mock_async_client.chat.completions.create = AsyncMock(
            side_effect=OpenAIError("Connection error.")
        )

        provider = OpenAIProvider(api_key=mock_api_key)

        with pytest.raises(TransportError) as exc_info:
            await provider.generate_completion_async(sample_prompt)

        assert exc_info.value.classified_error.category == ErrorCategory.NETWORK_ERROR
