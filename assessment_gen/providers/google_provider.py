"""Google Generative AI (Gemini) provider integration."""

import logging
from typing import Any, Optional

import google.generativeai as genai
from google.generativeai.types import GenerationConfig

from .base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, BaseLLMProvider

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 40
DEFAULT_TOP_P = 0.95


class GoogleProvider(BaseLLMProvider):
    """Google Generative AI integration for question generation."""

    provider_name = "google"

    def __init__(self, api_key: str, model: str = "gemini-2.0-flash-exp"):
        """
        Initialize Google provider.

        Args:
            api_key: Google API key
            model: Model to use (default: gemini-2.0-flash-exp)
        """
        super().__init__(api_key, model)
        genai.configure(api_key=api_key)
        self.client = genai.GenerativeModel(model)

    def _model_for(
        self, system_prompt: Optional[str], model_override: Optional[str]
    ) -> Any:
        """Return the model client for a call, building one if the call differs."""
        model = model_override or self.model
        if not system_prompt and model == self.model:
            return self.client
        return genai.GenerativeModel(model, system_instruction=system_prompt)

    @staticmethod
    def _generation_config(
        temperature: float, max_tokens: int, **kwargs: Any
    ) -> GenerationConfig:
        return GenerationConfig(
            temperature=temperature,
            top_k=kwargs.pop("top_k", DEFAULT_TOP_K),
            top_p=kwargs.pop("top_p", DEFAULT_TOP_P),
            max_output_tokens=max_tokens,
            **kwargs,
        )

    @staticmethod
    def _extract_text(response: Any) -> Optional[str]:
        """Return the response text, or None when no candidate carries text.

        ``response.text`` raises ValueError for blocked or empty candidates.
        """
        try:
            return response.text
        except ValueError as e:
            logger.warning(f"Gemini response has no text: {str(e)}")
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
        Generate a text completion using Google Generative AI API.

        Args:
            prompt: The prompt to send to the model
            system_prompt: Optional system instruction
            temperature: Sampling temperature (0.0 to 2.0)
            max_tokens: Maximum tokens to generate
            model_override: Optional model to use instead of the provider's default
            **kwargs: Additional Google-specific generation parameters

        Returns:
            The generated text completion

        Raises:
            TransportError: If the API call fails or returns no text
        """
        try:
            response = self._model_for(system_prompt, model_override).generate_content(
                prompt,
                generation_config=self._generation_config(
                    temperature, max_tokens, **kwargs
                ),
            )
        except Exception as e:
            raise self._handle_api_error(e)

        return self._require_text(self._extract_text(response))

    async def generate_completion_async(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        model_override: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """Generate a text completion using Google Generative AI API asynchronously."""
        try:
            model = self._model_for(system_prompt, model_override)
            response = await model.generate_content_async(
                prompt,
                generation_config=self._generation_config(
                    temperature, max_tokens, **kwargs
                ),
            )
        except Exception as e:
            raise self._handle_api_error(e)

        return self._require_text(self._extract_text(response))
