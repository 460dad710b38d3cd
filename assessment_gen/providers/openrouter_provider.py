"""OpenRouter LLM provider integration.

OpenRouter exposes an OpenAI-compatible chat completions API, so this
provider uses the OpenAI SDK with the OpenRouter base URL. It gives access to
DeepSeek R1 and the other models OpenRouter routes to.
"""

import logging
from typing import Dict, Optional

from openai import AsyncOpenAI, OpenAI

from .openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_APP_TITLE = "LMS Assessment Generator"


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter API integration for question generation.

    Uses OpenAI SDK with OpenRouter base URL for compatibility.
    """

    provider_name = "openrouter"

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek/deepseek-r1",
        app_url: Optional[str] = None,
        app_title: str = DEFAULT_APP_TITLE,
    ):
        """
        Initialize OpenRouter provider.

        Args:
            api_key: OpenRouter API key
            model: Model identifier (e.g., "deepseek/deepseek-r1")
            app_url: Optional site URL sent as HTTP-Referer for OpenRouter rankings
            app_title: Application name sent as X-Title
        """
        self.api_key = api_key
        self.model = model

        headers: Dict[str, str] = {"X-Title": app_title}
        if app_url:
            headers["HTTP-Referer"] = app_url

        self.client = OpenAI(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            default_headers=headers,
        )
        self.async_client = AsyncOpenAI(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            default_headers=headers,
        )

        logger.info(f"Initialized OpenRouter provider with model {model}")
