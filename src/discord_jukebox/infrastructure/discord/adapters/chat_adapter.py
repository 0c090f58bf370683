"""Discord chat adapter implementing ChatGateway."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.application.interfaces.chat_gateway import ChatGateway

logger = logging.getLogger(__name__)


class DiscordChatGateway(ChatGateway):
    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def _get_channel(self, channel_id: int) -> discord.abc.Messageable:
        channel = self._bot.get_channel(channel_id)
        if channel is None:
            channel = await self._bot.fetch_channel(channel_id)
        if not isinstance(channel, discord.abc.Messageable):
            raise TypeError(f"Channel {channel_id} does not accept messages")
        return channel

    async def _get_message(self, channel_id: int, message_id: int) -> discord.PartialMessage:
        channel = await self._get_channel(channel_id)
        get_partial_message = getattr(channel, "get_partial_message", None)
        if get_partial_message is None:
            raise TypeError(f"Channel {channel_id} does not support reactions")
        return get_partial_message(message_id)

    async def send_message(self, channel_id: int, content: str) -> None:
        channel = await self._get_channel(channel_id)
        await channel.send(content)

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        message = await self._get_message(channel_id, message_id)
        await message.add_reaction(emoji)

    async def remove_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        if self._bot.user is None:
            return
        message = await self._get_message(channel_id, message_id)
        await message.remove_reaction(emoji, self._bot.user)
