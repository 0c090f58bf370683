"""Immutable value objects for the music bounded context."""

from __future__ import annotations

from enum import Enum


class PlayerState(Enum):
    """Per-guild player state.

    State transitions:
    - IDLE -> STARTING (a track was popped and is being resolved)
    - STARTING -> PLAYING (voice transport accepted the source)
    - STARTING -> IDLE (resolve or transport failure, or next / goto abandoned the start)
    - PLAYING <-> PAUSED (pause / unpause)
    - PLAYING/PAUSED -> DRAINING (next / goto asked the handle to stop)
    - PLAYING/PAUSED/DRAINING -> IDLE (end of track, stop or disconnect)
    """

    IDLE = "idle"
    STARTING = "starting"
    PLAYING = "playing"
    PAUSED = "paused"
    DRAINING = "draining"

    def can_transition_to(self, target: PlayerState) -> bool:
        """Check if transition to target state is valid."""
        valid_transitions = {
            PlayerState.IDLE: {PlayerState.STARTING},
            PlayerState.STARTING: {PlayerState.PLAYING, PlayerState.IDLE},
            PlayerState.PLAYING: {
                PlayerState.PAUSED,
                PlayerState.DRAINING,
                PlayerState.IDLE,
            },
            PlayerState.PAUSED: {
                PlayerState.PLAYING,
                PlayerState.DRAINING,
                PlayerState.IDLE,
            },
            PlayerState.DRAINING: {PlayerState.IDLE},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_idle(self) -> bool:
        return self == PlayerState.IDLE

    @property
    def has_handle(self) -> bool:
        """True in every state where an active track handle exists."""
        return self in {PlayerState.PLAYING, PlayerState.PAUSED, PlayerState.DRAINING}
