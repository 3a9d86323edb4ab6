"""Configuration management for the Render tools server.

Loads configuration from environment variables with sensible defaults.
Secrets are never logged or exposed in responses.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Render tools configuration settings.

    All settings can be overridden via environment variables.
    Prefix: None (uses exact variable names).
    """

    # Server settings
    server_port: int = Field(default=8080, description="Port for the HTTP server")
    server_host: str = Field(default="0.0.0.0", description="Host to bind to")
    log_level: str = Field(default="INFO", description="Logging level")

    # Render API settings
    render_api_key: Optional[str] = Field(
        default=None,
        description="Render API key used as bearer token (never logged)"
    )
    render_base_url: str = Field(
        default="https://api.render.com/v1",
        description="Render REST API base URL"
    )
    render_timeout: Optional[float] = Field(
        default=None,
        description="Timeout for Render API requests in seconds (httpx default when unset)"
    )
    render_page_size: int = Field(
        default=100,
        description="Page size used when returning all results"
    )

    # Webhook trigger settings
    webhook_base_url: Optional[str] = Field(
        default=None,
        description="Public URL of this server, used to build webhook callback URLs"
    )

    # Database settings
    database_url: Optional[str] = Field(
        default=None,
        description="Database URL (defaults to sqlite:///webhooks.db)"
    )

    # Encryption settings
    secret_encryption_key: Optional[str] = Field(
        default=None,
        description="Fernet encryption key for stored webhook secrets (required in production)"
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Environment: development or production"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore unknown environment variables
    }

    def get_safe_dict(self) -> dict:
        """Return config as dict with secrets masked.

        Use this for logging or debugging - never exposes secrets.
        """
        data = self.model_dump()
        for key in ("render_api_key", "secret_encryption_key"):
            if data.get(key):
                data[key] = "***MASKED***"
        return data


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Creates the instance on first call, then returns cached version.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment.

    Useful for testing or after environment changes.
    """
    global _settings
    _settings = None
    return get_settings()
