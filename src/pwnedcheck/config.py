"""Configuration management for pwnedcheck.

Uses pydantic-settings to load configuration from environment variables
and .env files, then turns it into an immutable ClientConfig.
"""

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pwnedcheck.clients.pwned_passwords import DEFAULT_BASE_URL, ClientConfig
from pwnedcheck.exceptions import ConfigurationError


class Settings(BaseSettings):
    """pwnedcheck configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="PWNEDCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Pwned Passwords API
    user_agent: str = Field(default="")
    api_key: str = Field(default="")
    base_url: str = Field(default=DEFAULT_BASE_URL)
    hide_client_version: bool = Field(default=True)

    # Request behaviour
    max_retries: int = Field(default=2)
    timeout: float = Field(default=5.0)  # seconds
    max_wait: float = Field(default=2.0)  # seconds, advisory
    max_response_size: int = Field(default=512000)  # bytes

    def client_config(self, **overrides: object) -> ClientConfig:
        """Build a validated ClientConfig from these settings.

        Args:
            **overrides: Field values taking precedence over settings

        Raises:
            ConfigurationError: If user_agent is unset or a value is out of range
        """
        values: dict[str, object] = {
            "user_agent": self.user_agent,
            "api_key": self.api_key or None,
            "base_url": self.base_url,
            "hide_client_version": self.hide_client_version,
            "max_retries": self.max_retries,
            "timeout": self.timeout,
            "max_wait": self.max_wait,
            "max_response_size": self.max_response_size,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        if not values["user_agent"]:
            raise ConfigurationError(
                "A user agent identifying your application is required",
                env_var="PWNEDCHECK_USER_AGENT",
            )

        try:
            return ClientConfig(**values)
        except ValidationError as e:
            raise ConfigurationError("Invalid client configuration", detail=str(e)) from e


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None
