"""
Music Bounded Context

Domain logic for tracks, per-guild queues and the tenant registry.
"""

from discord_jukebox.domain.music.entities import AudioSource, TenantState, Track, TrackQueue
from discord_jukebox.domain.music.registry import TenantRegistry
from discord_jukebox.domain.music.value_objects import PlayerState

__all__ = [
    # Entities
    "Track",
    "AudioSource",
    "TrackQueue",
    "TenantState",
    # Value Objects
    "PlayerState",
    # Registry
    "TenantRegistry",
]
