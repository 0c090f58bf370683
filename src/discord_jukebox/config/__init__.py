"""Configuration: environment-backed settings and the dependency container."""

from discord_jukebox.config.settings import (
    AudioSettings,
    DiscordSettings,
    JukeboxSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "AudioSettings",
    "DiscordSettings",
    "JukeboxSettings",
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
