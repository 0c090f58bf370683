"""Discord adapters for the voice and chat ports."""

from discord_jukebox.infrastructure.discord.adapters.chat_adapter import DiscordChatGateway
from discord_jukebox.infrastructure.discord.adapters.voice_adapter import (
    DiscordTrackHandle,
    DiscordVoiceGateway,
    DiscordVoiceSession,
)

__all__ = [
    "DiscordChatGateway",
    "DiscordTrackHandle",
    "DiscordVoiceGateway",
    "DiscordVoiceSession",
]
