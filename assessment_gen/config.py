"""Configuration management for assessment question generation."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .providers.base import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE

# Default model per provider
DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "google": "gemini-2.0-flash-exp",
    "openrouter": "deepseek/deepseek-r1",
    "anthropic": "claude-sonnet-4-5-20250929",
}

# Environment variable holding each provider's API key
API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "google": "GOOGLE_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


class ConfigurationError(Exception):
    """Raised when a provider is used without the configuration it needs."""

    def __init__(self, message: str, provider: Optional[str] = None):
        self.message = message
        self.provider = provider
        super().__init__(message)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    env: str = "development"
    log_level: str = "INFO"
    log_file: str = "./logs/assessment_gen.log"

    # LLM API Keys
    openai_api_key: Optional[str] = None
    google_api_key: Optional[str] = None
    openrouter_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # Models
    openai_model: str = DEFAULT_MODELS["openai"]
    google_model: str = DEFAULT_MODELS["google"]
    openrouter_model: str = DEFAULT_MODELS["openrouter"]
    anthropic_model: str = DEFAULT_MODELS["anthropic"]

    # Generation Settings
    default_provider: str = "openai"
    generation_temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    generation_max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)

    # OpenRouter attribution headers
    openrouter_app_url: Optional[str] = None
    openrouter_app_title: str = "LMS Assessment Generator"

    def provider_config(self, provider_name: str) -> "ProviderConfig":
        """Build the configuration for one provider from these settings.

        Args:
            provider_name: One of the supported provider names

        Returns:
            ProviderConfig for the provider

        Raises:
            ValueError: If the provider name is not supported
        """
        if provider_name not in DEFAULT_MODELS:
            raise ValueError(
                f"Unknown provider: '{provider_name}'. "
                f"Valid providers: {list(DEFAULT_MODELS.keys())}"
            )
        api_key = getattr(self, f"{provider_name}_api_key") or None
        return ProviderConfig(
            api_key=api_key,
            model=getattr(self, f"{provider_name}_model"),
            temperature=self.generation_temperature,
            max_tokens=self.generation_max_tokens,
        )


class ProviderConfig(BaseModel):
    """Connection settings for one provider.

    Immutable; :meth:`model_copy` with ``update`` produces changed copies.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    api_key: Optional[str] = Field(default=None, repr=False)
    model: str
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def require_api_key(self, provider_name: str) -> str:
        """Return the API key, raising ConfigurationError if there is none."""
        if not self.api_key:
            env_var = API_KEY_ENV_VARS.get(provider_name, "the provider API key")
            raise ConfigurationError(
                f"{provider_name} API key is not configured. "
                f"Set {env_var} in your environment or .env file, "
                f"or provide it with set_api_key().",
                provider=provider_name,
            )
        return self.api_key


def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings()
