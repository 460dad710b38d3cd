"""Anthropic LLM provider integration."""

import logging
from typing import Any, Optional

import anthropic
from anthropic import Anthropic, AsyncAnthropic

from .base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, BaseLLMProvider

logger = logging.getLogger(__name__)


class AnthropicProvider(BaseLLMProvider):
    """Anthropic API integration for question generation."""

    provider_name = "anthropic"

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-5-20250929"):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            model: Model to use (default: claude-sonnet-4-5-20250929)
        """
        super().__init__(api_key, model)
        self.client = Anthropic(api_key=api_key)
        self.async_client = AsyncAnthropic(api_key=api_key)

    def _request_params(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        max_tokens: int,
        model_override: Optional[str],
        **kwargs: Any,
    ) -> dict:
        params = {
            "model": model_override or self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
            **kwargs,
        }
        if system_prompt:
            params["system"] = system_prompt
        return params

    @staticmethod
    def _extract_text(response: Any) -> Optional[str]:
        # Text lives in the first content block
        if response.content and len(response.content) > 0:
            return response.content[0].text
        return None

    def generate_completion(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        model_override: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """
        Generate a text completion using Anthropic API.

        Args:
            prompt: The prompt to send to the model
            system_prompt: Optional system prompt
            temperature: Sampling temperature (0.0 to 1.0)
            max_tokens: Maximum tokens to generate (required by Anthropic)
            model_override: Optional model to use instead of the provider's default
            **kwargs: Additional Anthropic-specific parameters

        Returns:
            The generated text completion

        Raises:
            TransportError: If the API call fails or returns no text
        """
        try:
            response = self.client.messages.create(
                **self._request_params(
                    prompt, system_prompt, temperature, max_tokens, model_override, **kwargs
                )
            )
        except anthropic.AnthropicError as e:
            raise self._handle_api_error(e)

        content = self._extract_text(response)
        if content:
            logger.debug(f"Anthropic API response content: {content[:500]}")
        return self._require_text(content)

    async def generate_completion_async(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        model_override: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """Generate a text completion using Anthropic API asynchronously."""
        try:
            response = await self.async_client.messages.create(
                **self._request_params(
                    prompt, system_prompt, temperature, max_tokens, model_override, **kwargs
                )
            )
        except anthropic.AnthropicError as e:
            raise self._handle_api_error(e)

        return self._require_text(self._extract_text(response))
