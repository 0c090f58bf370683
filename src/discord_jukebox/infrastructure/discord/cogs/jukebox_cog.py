"""Prefix commands that drive the jukebox."""

from __future__ import annotations

from typing import TYPE_CHECKING

from discord.ext import commands

from discord_jukebox.application.services.command_dispatcher import CommandContext
from discord_jukebox.domain.shared.messages import ErrorMessages

if TYPE_CHECKING:
    from ....application.services.command_dispatcher import CommandDispatcher
    from ....config.container import Container


class JukeboxCog(commands.Cog):
    """Thin command surface: every command is delegated to the dispatcher."""

    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self.container.command_dispatcher

    @staticmethod
    def _context(ctx: commands.Context) -> CommandContext:
        voice = getattr(ctx.author, "voice", None)
        voice_channel = getattr(voice, "channel", None)
        return CommandContext(
            guild_id=ctx.guild.id,  # type: ignore[union-attr]
            channel_id=ctx.channel.id,
            message_id=ctx.message.id,
            author_voice_channel_id=voice_channel.id if voice_channel is not None else None,
        )

    @commands.command(name="play")
    @commands.guild_only()
    async def play(self, ctx: commands.Context, *, query: str) -> None:
        await self.dispatcher.play(self._context(ctx), query)

    @commands.command(name="pn")
    @commands.guild_only()
    async def play_next(self, ctx: commands.Context, *, query: str) -> None:
        await self.dispatcher.play_next(self._context(ctx), query)

    @commands.command(name="pause")
    @commands.guild_only()
    async def pause(self, ctx: commands.Context) -> None:
        await self.dispatcher.pause(self._context(ctx))

    @commands.command(name="unpause")
    @commands.guild_only()
    async def unpause(self, ctx: commands.Context) -> None:
        await self.dispatcher.unpause(self._context(ctx))

    @commands.command(name="next")
    @commands.guild_only()
    async def next_track(self, ctx: commands.Context) -> None:
        await self.dispatcher.next(self._context(ctx))

    @commands.command(name="stop")
    @commands.guild_only()
    async def stop(self, ctx: commands.Context) -> None:
        await self.dispatcher.stop(self._context(ctx))

    @commands.command(name="queue")
    @commands.guild_only()
    async def show_queue(self, ctx: commands.Context) -> None:
        await self.dispatcher.queue(self._context(ctx))

    @commands.command(name="shuffle")
    @commands.guild_only()
    async def shuffle(self, ctx: commands.Context) -> None:
        await self.dispatcher.shuffle(self._context(ctx))

    @commands.command(name="goto")
    @commands.guild_only()
    async def goto(self, ctx: commands.Context, index: str | None = None) -> None:
        await self.dispatcher.goto(self._context(ctx), index)

    @commands.command(name="help")
    @commands.guild_only()
    async def show_help(self, ctx: commands.Context) -> None:
        await self.dispatcher.help(self._context(ctx))

    @commands.command(name="ping")
    @commands.guild_only()
    async def ping(self, ctx: commands.Context) -> None:
        await self.dispatcher.ping(self._context(ctx))


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(JukeboxCog(bot, container))
