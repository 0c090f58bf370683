"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import CommandPrefixStr, QueueDisplayLimit


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    command_prefix: CommandPrefixStr = Field(
        default="!",
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )


class AudioSettings(BaseModel):
    """Audio resolution and playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    ytdlp_format: str = "bestaudio/best"
    ytdlp_binary: str = Field(
        default="yt-dlp",
        min_length=1,
        validation_alias=AliasChoices("ytdlp_binary", "ytdlp_path"),
    )
    playlist_timeout_seconds: float = Field(default=120.0, gt=0.0, le=3600.0)
    connect_timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)


class JukeboxSettings(BaseModel):
    """Queue and command handling configuration."""

    model_config = SettingsConfigDict(frozen=True)

    queue_display_limit: QueueDisplayLimit = 20
    serialize_commands: bool = True


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - DISCORD_TOKEN, ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__COMMAND_PREFIX (nested with ``__``)
    - AUDIO__YTDLP_BINARY, AUDIO__YTDLP_FORMAT, AUDIO__FFMPEG_OPTIONS, ...
    - JUKEBOX__QUEUE_DISPLAY_LIMIT, JUKEBOX__SERIALIZE_COMMANDS
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    discord_token: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("discord_token", "bot_token"),
    )
    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    jukebox: JukeboxSettings = Field(default_factory=JukeboxSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels))
        return v_upper

    @property
    def has_token(self) -> bool:
        return bool(self.discord_token.get_secret_value().strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
