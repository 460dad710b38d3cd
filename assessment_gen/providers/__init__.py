"""LLM provider integrations."""

from .anthropic_provider import AnthropicProvider
from .base import BaseLLMProvider, EmptyResponseError, TransportError
from .google_provider import GoogleProvider
from .openai_provider import OpenAIProvider
from .openrouter_provider import OpenRouterProvider

__all__ = [
    "BaseLLMProvider",
    "TransportError",
    "EmptyResponseError",
    "OpenAIProvider",
    "GoogleProvider",
    "OpenRouterProvider",
    "AnthropicProvider",
]
