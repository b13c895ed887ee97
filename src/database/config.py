"""Configuration for message storage using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.paths import DEFAULT_DATA_FILE, ENV_FILE


class StorageConfig(BaseSettings):
    """Configuration for the file-backed message store.

    All settings are loaded from environment variables with the BOARD_ prefix.

    :param data_file: Path to the JSON file holding every message.
    :param strict_reads: Raise on unreadable or malformed data instead of
        treating the board as empty.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOARD_",
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_file: Path = Field(
        default=DEFAULT_DATA_FILE,
        description="Path to the JSON message file",
    )
    strict_reads: bool = Field(
        default=False,
        description="Surface read failures instead of returning no messages",
    )


@lru_cache
def get_storage_settings() -> StorageConfig:
    """Get cached storage settings.

    :returns: Configured StorageConfig instance.
    """
    return StorageConfig()
