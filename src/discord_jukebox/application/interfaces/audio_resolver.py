"""Port interface for resolving audio tracks from queries and URLs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import AudioSource, Track


class AudioResolver(ABC):
    """Interface for turning user input into tracks and tracks into streams."""

    @abstractmethod
    async def resolve_single(self, query: str) -> "Track":
        """Resolve a URL, or the best search match for free text, to one track.

        Raises UserError when nothing matches and ResolverError on failure.
        """
        ...

    @abstractmethod
    async def resolve_playlist(self, url: str) -> list["Track"]:
        """Expand a playlist URL into its tracks, in order."""
        ...

    @abstractmethod
    async def resolve_source(self, track: "Track") -> "AudioSource":
        """Re-resolve a queued track into a fresh, playable stream."""
        ...

    @abstractmethod
    def is_url(self, query: str) -> bool:
        ...

    @abstractmethod
    def is_playlist(self, query: str) -> bool:
        ...
