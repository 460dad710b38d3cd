"""Tests for configuration management."""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from assessment_gen.config import (
    API_KEY_ENV_VARS,
    DEFAULT_MODELS,
    ConfigurationError,
    ProviderConfig,
    Settings,
    get_settings,
)


class TestSettings:
    """Tests for Settings loaded from the environment."""

    @patch.dict("os.environ", {}, clear=True)
    def test_defaults(self):
        """Test default values without any environment."""
        settings = Settings(_env_file=None)

        assert settings.default_provider == "openai"
        assert settings.openai_api_key is None
        assert settings.openai_model == "gpt-4o-mini"
        assert settings.google_model == "gemini-2.0-flash-exp"
        assert settings.openrouter_model == "deepseek/deepseek-r1"
        assert settings.anthropic_model == "claude-sonnet-4-5-20250929"
        assert settings.generation_temperature == 0.7
        assert settings.generation_max_tokens == 4000
        assert settings.log_level == "INFO"

    @patch.dict(
        "os.environ",
        {
            "OPENAI_API_KEY": "sk-env",
            "OPENROUTER_MODEL": "openai/gpt-4o",
            "DEFAULT_PROVIDER": "openrouter",
            "GENERATION_TEMPERATURE": "0.2",
        },
        clear=True,
    )
    def test_reads_environment(self):
        """Test values are read from environment variables."""
        settings = Settings(_env_file=None)

        assert settings.openai_api_key == "sk-env"
        assert settings.openrouter_model == "openai/gpt-4o"
        assert settings.default_provider == "openrouter"
        assert settings.generation_temperature == 0.2

    @patch.dict("os.environ", {"GENERATION_TEMPERATURE": "3.5"}, clear=True)
    def test_temperature_out_of_range(self):
        """Test out-of-range temperatures are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @patch.dict("os.environ", {"GOOGLE_API_KEY": "g-key"}, clear=True)
    def test_provider_config(self):
        """Test a provider config carries the provider's key and model."""
        config = Settings(_env_file=None).provider_config("google")

        assert config.api_key == "g-key"
        assert config.model == "gemini-2.0-flash-exp"
        assert config.temperature == 0.7
        assert config.max_tokens == 4000
        assert config.is_configured is True

    @patch.dict("os.environ", {"ANTHROPIC_API_KEY": ""}, clear=True)
    def test_empty_key_is_unset(self):
        """Test an empty key counts as not configured."""
        config = Settings(_env_file=None).provider_config("anthropic")

        assert config.api_key is None
        assert config.is_configured is False

    @patch.dict("os.environ", {}, clear=True)
    def test_unknown_provider(self):
        """Test unsupported provider names are rejected."""
        with pytest.raises(ValueError) as exc_info:
            Settings(_env_file=None).provider_config("xai")

        assert "Unknown provider" in str(exc_info.value)

    @patch.dict("os.environ", {"OPENAI_API_KEY": "sk-fn"}, clear=True)
    def test_get_settings(self):
        """Test get_settings loads from the environment."""
        assert get_settings().openai_api_key == "sk-fn"


class TestProviderConfig:
    """Tests for ProviderConfig."""

    def test_every_provider_has_key_variable(self):
        """Test each provider names the variable holding its key."""
        assert set(API_KEY_ENV_VARS) == set(DEFAULT_MODELS)

    def test_require_api_key(self):
        """Test the key is returned when present."""
        config = ProviderConfig(api_key="sk-1", model="gpt-4o-mini")
        assert config.require_api_key("openai") == "sk-1"

    def test_require_api_key_missing(self):
        """Test a missing key raises ConfigurationError naming the variable."""
        config = ProviderConfig(model="gpt-4o-mini")

        with pytest.raises(ConfigurationError) as exc_info:
            config.require_api_key("openrouter")

        assert "OPENROUTER_API_KEY" in exc_info.value.message
        assert exc_info.value.provider == "openrouter"

    def test_api_key_hidden_from_repr(self):
        """Test the key does not leak into repr output."""
        config = ProviderConfig(api_key="sk-secret", model="m")
        assert "sk-secret" not in repr(config)

    def test_config_is_immutable(self):
        """Test configs are changed by copying."""
        config = ProviderConfig(api_key="a", model="m")

        with pytest.raises(ValidationError):
            config.model = "other"

        updated = config.model_copy(update={"model": "other"})
        assert updated.model == "other"
        assert config.model == "m"
