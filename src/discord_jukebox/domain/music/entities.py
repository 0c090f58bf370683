"""Core domain entities for the music bounded context."""

from __future__ import annotations

import asyncio
import random
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, field_validator

from discord_jukebox.domain.music.value_objects import PlayerState
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.types import DurationSeconds, NonEmptyStr, TrackTitleStr

if TYPE_CHECKING:
    from discord_jukebox.application.interfaces.voice_adapter import TrackHandle


class Track(BaseModel):
    """Immutable value object representing a queued track.

    Only the page URL is kept; the playable stream is resolved right before
    the track starts because stream URLs expire.
    """

    model_config = ConfigDict(frozen=True)

    UNKNOWN_TITLE: ClassVar[str] = "UNKNOWN TRACK"
    MAX_TITLE_LENGTH: ClassVar[int] = 500

    title: TrackTitleStr = UNKNOWN_TITLE
    url: NonEmptyStr
    duration_seconds: DurationSeconds | None = None

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Any) -> Any:
        if v is None:
            return cls.UNKNOWN_TITLE
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return cls.UNKNOWN_TITLE
            return v[: cls.MAX_TITLE_LENGTH]
        return v

    @field_validator("url", mode="before")
    @classmethod
    def strip_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError(ErrorMessages.EMPTY_TRACK_URL)
        return v

    @property
    def duration_formatted(self) -> str:
        """Format duration as MM:SS or HH:MM:SS."""
        if self.duration_seconds is None:
            return "Unknown"

        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


class AudioSource(BaseModel):
    """A track paired with the direct stream URL the voice transport plays."""

    model_config = ConfigDict(frozen=True)

    track: Track
    stream_url: NonEmptyStr


class TrackQueue:
    """Ordered, duplicate-friendly queue of tracks. The front plays next."""

    def __init__(self, tracks: Iterable[Track] = ()) -> None:
        self._items: deque[Track] = deque(tracks)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Track]:
        return iter(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"TrackQueue({list(self._items)!r})"

    def push_back(self, track: Track) -> None:
        self._items.append(track)

    def push_front(self, track: Track) -> None:
        self._items.appendleft(track)

    def append(self, tracks: Iterable[Track]) -> None:
        self._items.extend(tracks)

    def pop_front(self) -> Track | None:
        if not self._items:
            return None
        return self._items.popleft()

    def clear(self) -> int:
        """Empty the queue and return how many tracks were removed."""
        count = len(self._items)
        self._items.clear()
        return count

    def shuffle(self) -> None:
        items = list(self._items)
        random.shuffle(items)
        self._items = deque(items)

    def take(self, n: int) -> list[Track]:
        """Return a copy of at most the first ``n`` tracks."""
        if n <= 0:
            return []
        return [track for _, track in zip(range(n), self._items)]

    def drop_front(self, position: int) -> bool:
        """Discard everything before the one-based ``position``.

        Leaves the track at ``position`` at the front. Out-of-range positions
        are a no-op and return False.
        """
        if position < 1 or position > len(self._items):
            return False
        for _ in range(position - 1):
            self._items.popleft()
        return True


@dataclass
class TenantState:
    """Mutable playback state of a single guild.

    Fields are only mutated while ``lock`` is held, and the lock is never held
    across an await.
    """

    tenant_id: int
    queue: TrackQueue = field(default_factory=TrackQueue)
    active: TrackHandle | None = None
    current: Track | None = None
    state: PlayerState = PlayerState.IDLE
    channel_id: int | None = None
    generation: int = 0
    pause_requested: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def is_idle(self) -> bool:
        return self.state.is_idle

    def transition_to(self, target: PlayerState) -> None:
        """Move to ``target``; invalid transitions are a programming error."""
        if target == self.state:
            return
        if not self.state.can_transition_to(target):
            raise RuntimeError(f"Invalid player transition {self.state.value} -> {target.value}")
        self.state = target

    def clear(self) -> int:
        """Drop the queue and the active track, returning to IDLE."""
        removed = self.queue.clear()
        self.active = None
        self.current = None
        self.state = PlayerState.IDLE
        self.generation += 1
        self.pause_requested = False
        return removed

    def abandon_start(self) -> None:
        """Give up the track being started, keeping the queue.

        The in-flight start sees the new ``generation`` and drops its handle.
        """
        self.current = None
        self.transition_to(PlayerState.IDLE)
        self.generation += 1
        self.pause_requested = False
