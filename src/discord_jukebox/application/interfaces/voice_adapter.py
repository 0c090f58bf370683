"""Port interfaces for the voice transport."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import AudioSource

TrackEndCallback = Callable[["TrackHandle", "Exception | None"], Awaitable[None]]
"""Coroutine called on the event loop once a handle stops rendering."""


class TrackHandle(ABC):
    """Opaque handle to the track a voice session is rendering."""

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def play(self) -> None:
        """Resume after pause."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop rendering; end callbacks fire once the transport lets go."""
        ...

    @abstractmethod
    def add_end_callback(self, callback: TrackEndCallback) -> None:
        """Register a callback for the end of this track.

        If the track already ended, the callback is still invoked exactly once.
        """
        ...


class VoiceSession(ABC):
    """A guild's connection to a voice channel."""

    @property
    @abstractmethod
    def channel_id(self) -> int | None:
        ...

    @abstractmethod
    async def deafen(self, deaf: bool) -> None:
        ...

    @abstractmethod
    def is_deaf(self) -> bool:
        ...

    @abstractmethod
    async def play_source(self, source: "AudioSource") -> TrackHandle:
        """Start rendering ``source``. Raises TransportError on failure."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop whatever is rendering, if anything."""
        ...


class VoiceGateway(ABC):
    """Interface for joining and leaving voice channels per guild."""

    @abstractmethod
    async def join(self, guild_id: int, channel_id: int) -> VoiceSession:
        """Connect to (or move to) a voice channel. Raises TransportError."""
        ...

    @abstractmethod
    def get(self, guild_id: int) -> VoiceSession | None:
        ...

    @abstractmethod
    async def remove(self, guild_id: int) -> bool:
        """Leave voice in a guild. Returns False when there was no session."""
        ...
