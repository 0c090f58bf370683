"""Application services: the per-guild player and the command dispatcher."""

from discord_jukebox.application.services.command_dispatcher import (
    CommandContext,
    CommandDispatcher,
)
from discord_jukebox.application.services.player import Player, QueueSnapshot

__all__ = [
    "CommandContext",
    "CommandDispatcher",
    "Player",
    "QueueSnapshot",
]
