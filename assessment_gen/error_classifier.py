"""Error classification for LLM API failures.

Transport failures from the vendor SDKs are sorted into categories so the
failure message returned to callers says what went wrong (bad key, rate
limit, unknown model, ...) instead of echoing the raw SDK exception.
"""

import re
from enum import Enum
from typing import List, NamedTuple, Tuple


class ErrorCategory(Enum):
    """Categories of API errors."""

    BILLING_QUOTA = "billing_quota"  # Insufficient funds, quota exceeded
    RATE_LIMIT = "rate_limit"
    AUTHENTICATION = "authentication"  # API key invalid or expired
    MODEL_ERROR = "model_error"  # Model not found or unavailable
    SERVER_ERROR = "server_error"  # Provider 5xx
    NETWORK_ERROR = "network_error"  # Connection/timeout errors
    INVALID_REQUEST = "invalid_request"
    EMPTY_RESPONSE = "empty_response"  # Envelope without generated text
    UNKNOWN = "unknown"


class ClassifiedError:
    """A classified API error."""

    def __init__(
        self,
        category: ErrorCategory,
        provider: str,
        original_error: str,
        message: str,
        is_retryable: bool = False,
    ):
        """Initialize classified error.

        Args:
            category: Error category
            provider: Provider name (openai, google, openrouter, anthropic)
            original_error: Original exception type name
            message: Human-readable error message
            is_retryable: Whether the error is transient. Informational only,
                generation never retries.
        """
        self.category = category
        self.provider = provider
        self.original_error = original_error
        self.message = message
        self.is_retryable = is_retryable

    def __str__(self) -> str:
        return f"{self.provider}: {self.category.value} - {self.message}"

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "category": self.category.value,
            "provider": self.provider,
            "original_error": self.original_error,
            "message": self.message,
            "is_retryable": self.is_retryable,
        }


class ClassificationRule(NamedTuple):
    """Maps error text matching ``patterns`` to a category and message."""

    category: ErrorCategory
    patterns: Tuple[str, ...]
    message: str  # formatted with {provider} and {detail}
    is_retryable: bool = False


# Checked in order; the first rule with a matching pattern wins. Billing comes
# before rate limiting because quota errors are often reported as HTTP 429.
CLASSIFICATION_RULES: List[ClassificationRule] = [
    ClassificationRule(
        ErrorCategory.BILLING_QUOTA,
        (
            r"insufficient.*funds",
            r"quota.*exceeded",
            r"insufficient.*quota",
            r"credit.*balance",
            r"payment.*required",
            r"\b402\b",
        ),
        "Billing or quota issue detected. Please check your {provider} "
        "account balance and usage limits.",
    ),
    ClassificationRule(
        ErrorCategory.AUTHENTICATION,
        (
            r"invalid.*api.*key",
            r"api.*key.*not.*valid",
            r"authentication",
            r"unauthorized",
            r"permission.*denied",
            r"\b401\b",
            r"\b403\b",
        ),
        "Authentication failed. Please verify your {provider} API key "
        "is valid and has not expired.",
    ),
    ClassificationRule(
        ErrorCategory.RATE_LIMIT,
        (
            r"rate.*limit",
            r"too.*many.*requests",
            r"throttl",
            r"\b429\b",
            r"resource.*exhausted",
        ),
        "Rate limit exceeded for {provider}. Please wait and try again.",
        is_retryable=True,
    ),
    ClassificationRule(
        ErrorCategory.MODEL_ERROR,
        (
            r"model.*not.*found",
            r"invalid.*model",
            r"model.*unavailable",
            r"model.*deprecated",
            r"no.*endpoints.*found",  # OpenRouter wording for unknown models
        ),
        "Model configuration issue with {provider}. Verify the model name.",
    ),
    ClassificationRule(
        ErrorCategory.SERVER_ERROR,
        (
            r"internal.*server.*error",
            r"service.*unavailable",
            r"overloaded",
            r"\b50[0-9]\b",
            r"server.*error",
        ),
        "{provider} server error. This may be temporary.",
        is_retryable=True,
    ),
    ClassificationRule(
        ErrorCategory.NETWORK_ERROR,
        (
            r"connection.*(error|refused|reset)",
            r"timed?\s*out",
            r"timeout",
            r"network.*error",
        ),
        "Could not reach {provider}. Check your network connection.",
        is_retryable=True,
    ),
    ClassificationRule(
        ErrorCategory.INVALID_REQUEST,
        (
            r"invalid.*(request|parameter|argument|value)",
            r"bad.*request",
            r"\b400\b",
        ),
        "Invalid request to {provider}: {detail}",
    ),
]


class ErrorClassifier:
    """Classifies API errors from the supported LLM providers."""

    rules: List[ClassificationRule] = CLASSIFICATION_RULES

    @classmethod
    def classify_error(cls, error: Exception, provider: str) -> ClassifiedError:
        """Classify an API error.

        Args:
            error: The exception that was raised
            provider: Provider name

        Returns:
            ClassifiedError with a category and caller-facing message
        """
        error_str = str(error)
        detail = error_str[:200]

        for rule in cls.rules:
            if any(re.search(p, error_str, re.IGNORECASE) for p in rule.patterns):
                return ClassifiedError(
                    category=rule.category,
                    provider=provider,
                    original_error=type(error).__name__,
                    message=rule.message.format(provider=provider, detail=detail),
                    is_retryable=rule.is_retryable,
                )

        return ClassifiedError(
            category=ErrorCategory.UNKNOWN,
            provider=provider,
            original_error=type(error).__name__,
            message=f"{provider} API error: {detail}",
        )
