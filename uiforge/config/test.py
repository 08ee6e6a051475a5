"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_api_key,
    get_environment,
    get_environment_info,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("OPENROUTER_BASE_URL", raising=False)
        result = get_environment(EnvVar.OPENROUTER_BASE_URL)
        assert result == "https://openrouter.ai/api/v1"

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("API_KEY", "from-env")
        result = get_environment(EnvVar.API_KEY, override="from-override")
        assert result == "from-override"

    @pytest.mark.unit
    def test_env_var_overrides_default(self, monkeypatch):
        """Environment variable overrides default value."""
        monkeypatch.setenv("OPENROUTER_BASE_URL", "http://localhost:9999/v1")
        result = get_environment(EnvVar.OPENROUTER_BASE_URL)
        assert result == "http://localhost:9999/v1"

    @pytest.mark.unit
    def test_bool_type_conversion_true(self, monkeypatch):
        """Boolean type conversion for true values."""
        for value in ("true", "1", "yes", "TRUE", "Yes"):
            monkeypatch.setenv("UIFORGE_LOG_PROMPTS", value)
            assert get_environment(EnvVar.UIFORGE_LOG_PROMPTS) is True

    @pytest.mark.unit
    def test_bool_type_conversion_false(self, monkeypatch):
        """Boolean type conversion for false values."""
        for value in ("false", "0", "no", "FALSE", "No"):
            monkeypatch.setenv("UIFORGE_LOG_PROMPTS", value)
            assert get_environment(EnvVar.UIFORGE_LOG_PROMPTS) is False

    @pytest.mark.unit
    def test_invalid_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean value returns default."""
        monkeypatch.setenv("UIFORGE_LOG_PROMPTS", "maybe")
        assert get_environment(EnvVar.UIFORGE_LOG_PROMPTS) is False

    @pytest.mark.unit
    def test_none_default_for_api_key(self, monkeypatch):
        """API key defaults to None when not set."""
        monkeypatch.delenv("API_KEY", raising=False)
        assert get_environment(EnvVar.API_KEY) is None


class TestGetDefaultApiKey:
    """Tests for the default credential helper."""

    @pytest.mark.unit
    def test_missing_key_is_empty_string(self, monkeypatch):
        monkeypatch.delenv("API_KEY", raising=False)
        assert get_default_api_key() == ""

    @pytest.mark.unit
    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "env-key")
        assert get_default_api_key() == "env-key"

    @pytest.mark.unit
    def test_override_wins(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "env-key")
        assert get_default_api_key("explicit") == "explicit"


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.UIFORGE_LOG_PROMPTS)
        assert isinstance(info, EnvConfig)
        assert info.name == "UIFORGE_LOG_PROMPTS"
        assert info.default is False
        assert info.var_type is bool
        assert info.category == "logging"

    @pytest.mark.unit
    def test_description_present(self):
        """Description field is populated."""
        info = get_environment_info(EnvVar.API_KEY)
        assert "Gemini" in info.description


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_list_all(self):
        """No category returns every variable."""
        assert list_environment_variables() == list(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        """Category filter returns only matching variables."""
        llm_vars = list_environment_variables("llm")
        assert EnvVar.API_KEY in llm_vars
        assert EnvVar.UIFORGE_LOG_LEVEL not in llm_vars

    @pytest.mark.unit
    def test_unknown_category_is_empty(self):
        assert list_environment_variables("docker") == []
