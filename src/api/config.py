"""Configuration for serving the API using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import ENV_FILE


class ApiConfig(BaseSettings):
    """Configuration for the HTTP server.

    All settings are loaded from environment variables with the BOARD_API_ prefix.

    :param host: Interface to bind.
    :param port: Port to listen on.
    :param access_log: Emit one uvicorn log line per request.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOARD_API_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=8000, ge=1, le=65535, description="Port to listen on")
    access_log: bool = Field(default=False, description="Log every request")


@lru_cache
def get_api_settings() -> ApiConfig:
    """Get cached API server settings.

    :returns: Configured ApiConfig instance.
    """
    return ApiConfig()
