"""Assessment question generation.

:class:`QuestionGenerator` is the entry point used by the rest of the
application. It turns a :class:`GenerationRequest` into a prompt, sends it to
one LLM provider and decodes whatever comes back into question records.
Failures are reported in the returned :class:`GenerationResult`, never raised.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Type

from .config import DEFAULT_MODELS, ConfigurationError, ProviderConfig, Settings
from .distribution import calculate_question_distribution
from .models import GeneratedQuestion, GenerationRequest, GenerationResult
from .parsing import ParseContext, ResponseParser
from .prompts import SYSTEM_PROMPT, build_question_generation_prompt
from .providers.anthropic_provider import AnthropicProvider
from .providers.base import BaseLLMProvider, TransportError
from .providers.google_provider import GoogleProvider
from .providers.openai_provider import OpenAIProvider
from .providers.openrouter_provider import OpenRouterProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: Dict[str, Type[BaseLLMProvider]] = {
    "openai": OpenAIProvider,
    "google": GoogleProvider,
    "openrouter": OpenRouterProvider,
    "anthropic": AnthropicProvider,
}

# Backends that take the persona as a separate system message. Gemini gets
# the prompt alone; the persona is already its first paragraph.
SYSTEM_MESSAGE_PROVIDERS = {"openai", "openrouter", "anthropic"}

GENERIC_FAILURE_MESSAGE = (
    "Failed to generate questions. Please check your API key and try again."
)


class QuestionGenerator:
    """Generates assessment questions with one LLM provider.

    The provider client is created on first use from the current
    :class:`ProviderConfig`, and recreated after :meth:`set_api_key`.
    """

    def __init__(
        self,
        provider_name: str,
        config: Optional[ProviderConfig] = None,
        provider: Optional[BaseLLMProvider] = None,
        parser: Optional[ResponseParser] = None,
        provider_options: Optional[Dict[str, Any]] = None,
    ):
        """Initialize the generator.

        Args:
            provider_name: Provider to use (openai, google, openrouter, anthropic)
            config: API key, model and sampling settings (defaults: no key,
                the provider's default model)
            provider: Pre-built provider client, mainly for tests
            parser: Response parser (default: JSON, line scan, placeholder)
            provider_options: Extra keyword arguments for the provider class

        Raises:
            ValueError: If provider_name is not supported
        """
        if provider_name not in PROVIDER_CLASSES:
            raise ValueError(
                f"Provider '{provider_name}' not available. "
                f"Available: {list(PROVIDER_CLASSES.keys())}"
            )
        self.provider_name = provider_name
        self._config = config or ProviderConfig(model=DEFAULT_MODELS[provider_name])
        self._provider = provider
        self._parser = parser or ResponseParser()
        self._provider_options = provider_options or {}

    @property
    def config(self) -> ProviderConfig:
        return self._config

    def is_configured(self) -> bool:
        """Check if an API key is configured."""
        return self._config.is_configured

    def set_api_key(self, api_key: str) -> None:
        """Replace the API key; the provider client is rebuilt on next use."""
        self._config = self._config.model_copy(update={"api_key": api_key})
        self._provider = None

    def set_model(self, model: str) -> None:
        """Replace the default model."""
        self._config = self._config.model_copy(update={"model": model})

    def get_model(self) -> str:
        """Get the current default model."""
        return self._config.model

    def build_prompt(self, request: GenerationRequest) -> str:
        """Build the generation prompt for a request.

        Args:
            request: The generation request

        Returns:
            Prompt string with the request's question distribution
        """
        distribution = calculate_question_distribution(
            request.total_questions,
            request.selected_types,
            request.distribution_mode,
            request.manual_distribution,
            request.difficulty,
        )
        counts = {kind.value: count for kind, count in distribution.items()}
        logger.debug(f"Question distribution: {counts}")
        return build_question_generation_prompt(
            request.topic,
            request.difficulty,
            request.total_questions,
            request.assessment_type,
            distribution,
            request.include_explanations,
            request.focus_areas,
            request.time_limit_minutes,
        )

    def _get_provider(self) -> BaseLLMProvider:
        """Return the provider client, creating it if needed.

        Raises:
            ConfigurationError: If no API key is configured
        """
        api_key = self._config.require_api_key(self.provider_name)
        if self._provider is None:
            provider_class = PROVIDER_CLASSES[self.provider_name]
            self._provider = provider_class(
                api_key=api_key, model=self._config.model, **self._provider_options
            )
            logger.info(
                f"Initialized {self.provider_name} provider with model "
                f"{self._config.model}"
            )
        return self._provider

    def _completion_args(self, request: GenerationRequest) -> Dict[str, Any]:
        return {
            "prompt": self.build_prompt(request),
            "system_prompt": (
                SYSTEM_PROMPT if self.provider_name in SYSTEM_MESSAGE_PROVIDERS else None
            ),
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "model_override": request.model or self._config.model,
        }

    def _parse(
        self, content: str, request: GenerationRequest
    ) -> List[GeneratedQuestion]:
        context = ParseContext.from_request(request, id_prefix=self.provider_name)
        return self._parser.parse(content, context)

    def _success(
        self, questions: List[GeneratedQuestion], request: GenerationRequest
    ) -> GenerationResult:
        if len(questions) != request.total_questions:
            logger.warning(
                f"Requested {request.total_questions} questions, "
                f"{self.provider_name} response yielded {len(questions)}"
            )
        return GenerationResult(
            success=True,
            questions=questions,
            provider=self.provider_name,
            model=request.model or self._config.model,
        )

    def _failure(self, message: str, request: GenerationRequest) -> GenerationResult:
        return GenerationResult(
            success=False,
            questions=[],
            error=message,
            provider=self.provider_name,
            model=request.model or self._config.model,
        )

    def generate_questions(self, request: GenerationRequest) -> GenerationResult:
        """Generate questions for a request.

        Args:
            request: The generation request

        Returns:
            GenerationResult; ``success`` is False only for configuration and
            transport failures. Unparseable responses still succeed, with
            recovered or placeholder questions.
        """
        logger.info(
            f"Generating {request.total_questions} {request.difficulty.value} "
            f"questions about '{request.topic}' using {self.provider_name}"
        )
        start_time = time.perf_counter()

        try:
            provider = self._get_provider()
            content = provider.generate_completion(**self._completion_args(request))
        except ConfigurationError as e:
            logger.warning(str(e))
            return self._failure(e.message, request)
        except TransportError as e:
            logger.error(
                f"Error generating questions with {self.provider_name}: {str(e)}",
                extra={"provider": self.provider_name},
            )
            return self._failure(str(e), request)
        except Exception as e:
            logger.exception(f"Unexpected error from {self.provider_name}: {str(e)}")
            return self._failure(str(e) or GENERIC_FAILURE_MESSAGE, request)

        questions = self._parse(content, request)
        logger.info(
            f"Generated {len(questions)} questions with {self.provider_name} "
            f"in {time.perf_counter() - start_time:.2f}s"
        )
        return self._success(questions, request)

    async def generate_questions_async(
        self, request: GenerationRequest
    ) -> GenerationResult:
        """Async version of :meth:`generate_questions`."""
        logger.info(
            f"Generating {request.total_questions} {request.difficulty.value} "
            f"questions about '{request.topic}' using {self.provider_name} (async)"
        )
        start_time = time.perf_counter()

        try:
            provider = self._get_provider()
            content = await provider.generate_completion_async(
                **self._completion_args(request)
            )
        except ConfigurationError as e:
            logger.warning(str(e))
            return self._failure(e.message, request)
        except TransportError as e:
            logger.error(
                f"Error generating questions with {self.provider_name}: {str(e)}",
                extra={"provider": self.provider_name},
            )
            return self._failure(str(e), request)
        except Exception as e:
            logger.exception(f"Unexpected error from {self.provider_name}: {str(e)}")
            return self._failure(str(e) or GENERIC_FAILURE_MESSAGE, request)

        questions = self._parse(content, request)
        logger.info(
            f"Generated {len(questions)} questions with {self.provider_name} "
            f"in {time.perf_counter() - start_time:.2f}s"
        )
        return self._success(questions, request)


def create_generator(
    provider_name: Optional[str] = None, settings: Optional[Settings] = None
) -> QuestionGenerator:
    """Create a generator configured from environment settings.

    Args:
        provider_name: Provider to use (default: ``settings.default_provider``)
        settings: Settings to read (default: loaded from the environment)

    Returns:
        QuestionGenerator for the provider. It is returned even without an API
        key; generation then fails with a configuration error.

    Raises:
        ValueError: If the provider is not supported
    """
    settings = settings or Settings()
    provider_name = provider_name or settings.default_provider
    provider_options: Dict[str, Any] = {}
    if provider_name == "openrouter":
        provider_options = {
            "app_url": settings.openrouter_app_url,
            "app_title": settings.openrouter_app_title,
        }
    return QuestionGenerator(
        provider_name,
        config=settings.provider_config(provider_name),
        provider_options=provider_options,
    )
