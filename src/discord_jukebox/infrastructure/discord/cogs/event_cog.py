"""Discord event listeners for connection, voice state and command errors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)

IGNORED_COMMAND_ERRORS: tuple[type[commands.CommandError], ...] = (
    commands.CommandNotFound,
    commands.NoPrivateMessage,
    commands.MissingRequiredArgument,
    commands.BadArgument,
    commands.TooManyArguments,
)


class EventCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_connect(self) -> None:
        logger.info(LogTemplates.BOT_WEBSOCKET_CONNECTED)

    @commands.Cog.listener()
    async def on_disconnect(self) -> None:
        logger.warning(LogTemplates.BOT_WEBSOCKET_DISCONNECTED)

    # ─────────────────────────────────────────────────────────────────
    # Voice Events
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_voice_state_update(
        self, member: discord.Member, before: discord.VoiceState, after: discord.VoiceState
    ) -> None:
        """Reset the guild's player when the bot itself is removed from voice."""
        bot_user = self.bot.user
        if bot_user is None or member.id != bot_user.id:
            return
        if before.channel is None or after.channel is not None:
            return

        await self.container.player.reset(member.guild.id)

    # ─────────────────────────────────────────────────────────────────
    # Command Error Handler
    # ─────────────────────────────────────────────────────────────────

    @commands.Cog.listener()
    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        command_name = getattr(ctx.command, "qualified_name", "<unknown>")

        if isinstance(error, IGNORED_COMMAND_ERRORS):
            logger.debug(LogTemplates.BOT_COMMAND_IGNORED, command_name, error)
            return

        original = getattr(error, "original", error)
        logger.error(LogTemplates.BOT_COMMAND_ERROR, command_name, exc_info=original)


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(EventCog(bot, container))
