"""Port interfaces implemented by the infrastructure layer."""

from discord_jukebox.application.interfaces.audio_resolver import AudioResolver
from discord_jukebox.application.interfaces.chat_gateway import ChatGateway
from discord_jukebox.application.interfaces.voice_adapter import (
    TrackEndCallback,
    TrackHandle,
    VoiceGateway,
    VoiceSession,
)

__all__ = [
    "AudioResolver",
    "ChatGateway",
    "TrackEndCallback",
    "TrackHandle",
    "VoiceGateway",
    "VoiceSession",
]
