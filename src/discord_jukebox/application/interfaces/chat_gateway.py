"""Port interface for chat replies and reactions."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ChatGateway(ABC):
    """Interface for writing to guild text channels."""

    @abstractmethod
    async def send_message(self, channel_id: int, content: str) -> None:
        ...

    @abstractmethod
    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        ...

    @abstractmethod
    async def remove_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        """Remove the bot's own ``emoji`` reaction from a message."""
        ...
