"""Base class for LLM providers."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..error_classifier import ClassifiedError, ErrorCategory, ErrorClassifier

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4000


class TransportError(Exception):
    """Exception raised by LLM providers when a completion call fails.

    Attributes:
        classified_error: The classified error with category and message
        original_exception: The exception raised by the vendor SDK, if any
    """

    def __init__(
        self,
        classified_error: ClassifiedError,
        original_exception: Optional[Exception] = None,
    ):
        """Initialize transport error.

        Args:
            classified_error: The classified error
            original_exception: The original exception
        """
        self.classified_error = classified_error
        self.original_exception = original_exception
        super().__init__(classified_error.message)


class EmptyResponseError(TransportError):
    """The provider answered, but the response carried no generated text."""

    def __init__(self, provider: str):
        super().__init__(
            ClassifiedError(
                category=ErrorCategory.EMPTY_RESPONSE,
                provider=provider,
                original_error="EmptyResponse",
                message=f"No content received from {provider}",
            )
        )


class BaseLLMProvider(ABC):
    """Abstract base class for LLM provider integrations.

    A provider only moves text: it sends one prompt and returns the raw
    completion text, raising :class:`TransportError` on any failure.
    """

    provider_name: str = ""

    def __init__(self, api_key: str, model: str):
        """
        Initialize the LLM provider.

        Args:
            api_key: API key for the provider
            model: Model identifier to use
        """
        self.api_key = api_key
        self.model = model

    @abstractmethod
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
        Generate a completion from the LLM.

        Args:
            prompt: The prompt to send to the model
            system_prompt: Optional system message for chat-style APIs
            temperature: Sampling temperature
            max_tokens: Maximum number of tokens to generate
            model_override: Optional model to use instead of the provider's default
            **kwargs: Additional provider-specific parameters

        Returns:
            The generated text completion, never empty

        Raises:
            TransportError: If the API call fails or returns no text
        """

    @abstractmethod
    async def generate_completion_async(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        model_override: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """Async version of :meth:`generate_completion`."""

    def get_provider_name(self) -> str:
        """
        Get the name of this provider.

        Returns:
            Provider name (e.g., "openai", "google", "openrouter")
        """
        return self.provider_name or self.__class__.__name__.replace(
            "Provider", ""
        ).lower()

    def _require_text(self, content: Optional[str]) -> str:
        """Return ``content`` or raise if the response carried no text."""
        if not content:
            raise EmptyResponseError(self.get_provider_name())
        return content

    def _handle_api_error(self, error: Exception) -> TransportError:
        """Classify and wrap an API error.

        Args:
            error: The exception that was raised

        Returns:
            TransportError with classified error
        """
        classified = ErrorClassifier.classify_error(
            error=error,
            provider=self.get_provider_name(),
        )
        return TransportError(
            classified_error=classified,
            original_exception=error,
        )
