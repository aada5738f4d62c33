"""Tests for settings loading."""

import pytest

from pwnedcheck.config import Settings, get_settings, reset_settings
from pwnedcheck.exceptions import ConfigurationError


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.user_agent == ""
        assert settings.max_retries == 2
        assert settings.timeout == 5.0
        assert settings.max_response_size == 512000
        assert settings.hide_client_version is True

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PWNEDCHECK_USER_AGENT", "Env App")
        monkeypatch.setenv("PWNEDCHECK_MAX_RETRIES", "4")
        monkeypatch.setenv("PWNEDCHECK_API_KEY", "env-key")

        config = Settings(_env_file=None).client_config()

        assert config.user_agent == "Env App"
        assert config.max_retries == 4
        assert config.api_key == "env-key"

    def test_empty_api_key_means_none(self) -> None:
        config = Settings(_env_file=None, user_agent="My App").client_config()
        assert config.api_key is None

    def test_overrides(self) -> None:
        settings = Settings(_env_file=None, user_agent="My App", max_retries=1)

        config = settings.client_config(max_retries=0, timeout=None, user_agent="CLI App")

        assert config.user_agent == "CLI App"
        assert config.max_retries == 0
        assert config.timeout == 5.0

    def test_missing_user_agent(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            Settings(_env_file=None).client_config()

        assert exc_info.value.context.get("env_var") == "PWNEDCHECK_USER_AGENT"

    def test_invalid_value(self) -> None:
        settings = Settings(_env_file=None, user_agent="My App", timeout=0)

        with pytest.raises(ConfigurationError) as exc_info:
            settings.client_config()

        assert "Invalid client configuration" in str(exc_info.value)

    def test_global_settings_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PWNEDCHECK_USER_AGENT", "First")
        first = get_settings()
        monkeypatch.setenv("PWNEDCHECK_USER_AGENT", "Second")

        assert get_settings() is first
        assert get_settings().user_agent == "First"

        reset_settings()
        assert get_settings().user_agent == "Second"
