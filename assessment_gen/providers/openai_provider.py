"""OpenAI LLM provider integration."""

import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI, OpenAI

from .base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, BaseLLMProvider

logger = logging.getLogger(__name__)


def build_chat_messages(
    prompt: str, system_prompt: Optional[str] = None
) -> List[Dict[str, str]]:
    """Build the chat message list for OpenAI-compatible APIs."""
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


class OpenAIProvider(BaseLLMProvider):
    """OpenAI API integration for question generation."""

    provider_name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        organization: Optional[str] = None,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model to use (default: gpt-4o-mini)
            organization: Optional organization ID
        """
        super().__init__(api_key, model)
        self.client = OpenAI(api_key=api_key, organization=organization)
        self.async_client = AsyncOpenAI(api_key=api_key, organization=organization)

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
        Generate a text completion using OpenAI API.

        Args:
            prompt: The prompt to send to the model
            system_prompt: Optional system message
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            model_override: Optional model to use instead of the provider's default
            **kwargs: Additional OpenAI-specific parameters

        Returns:
            The generated text completion

        Raises:
            TransportError: If the API call fails or returns no content
        """
        try:
            response = self.client.chat.completions.create(
                model=model_override or self.model,
                messages=build_chat_messages(prompt, system_prompt),
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except openai.OpenAIError as e:
            raise self._handle_api_error(e)

        return self._require_text(self._extract_content(response))

    async def generate_completion_async(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        model_override: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """Generate a text completion using OpenAI API asynchronously."""
        try:
            response = await self.async_client.chat.completions.create(
                model=model_override or self.model,
                messages=build_chat_messages(prompt, system_prompt),
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
        except openai.OpenAIError as e:
            raise self._handle_api_error(e)

        return self._require_text(self._extract_content(response))

    @staticmethod
    def _extract_content(response: Any) -> Optional[str]:
        """Pull the first choice's message text out of a chat completion."""
        if not response or not response.choices:
            return None
        message = response.choices[0].message
        return message.content if message else None
