"""Command Dispatcher - turns chat commands into player operations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.shared.exceptions import DomainError, TransportError, UserError
from ...domain.shared.messages import DiscordUIMessages, Emojis, ErrorMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake
from ...utils.reply import parse_index, truncate

if TYPE_CHECKING:
    from ...domain.music.entities import Track
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.chat_gateway import ChatGateway
    from ..interfaces.voice_adapter import VoiceGateway, VoiceSession
    from .player import Player

logger = logging.getLogger(__name__)


class CommandContext(BaseModel):
    """Where a command came from, independent of the chat platform."""

    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake
    channel_id: DiscordSnowflake
    message_id: DiscordSnowflake | None = None
    author_voice_channel_id: DiscordSnowflake | None = None


class CommandDispatcher:
    """Executes jukebox commands for a guild.

    Domain errors become chat replies and failure reactions; unexpected
    errors are logged. Nothing raised by a command escapes to the caller.
    When ``serialize_commands`` is on, commands from one guild run one at a
    time in arrival order.
    """

    def __init__(
        self,
        *,
        player: Player,
        resolver: AudioResolver,
        voice: VoiceGateway,
        chat: ChatGateway,
        queue_display_limit: int = 20,
        serialize_commands: bool = True,
    ) -> None:
        self._player = player
        self._resolver = resolver
        self._voice = voice
        self._chat = chat
        self._queue_display_limit = queue_display_limit
        self._serialize_commands = serialize_commands
        self._command_locks: dict[int, asyncio.Lock] = {}

    # ── Commands ───────────────────────────────────────────────────

    async def play(self, ctx: CommandContext, query: str) -> bool:
        """Queue a URL, playlist or search result at the back and start playback."""
        return await self._with_reactions(
            "play", ctx, lambda: self._enqueue(ctx, query, front=False)
        )

    async def play_next(self, ctx: CommandContext, query: str) -> bool:
        """Queue a single track at the front and start playback."""
        return await self._with_reactions(
            "pn", ctx, lambda: self._enqueue(ctx, query, front=True)
        )

    async def pause(self, ctx: CommandContext) -> bool:
        async def _pause() -> None:
            if not await self._player.pause(ctx.guild_id):
                await self._reply(ctx, DiscordUIMessages.ALREADY_STOPPED)

        return await self._run("pause", ctx, _pause)

    async def unpause(self, ctx: CommandContext) -> bool:
        async def _unpause() -> None:
            if not await self._player.unpause(ctx.guild_id):
                await self._reply(ctx, DiscordUIMessages.ALREADY_STOPPED)

        return await self._run("unpause", ctx, _unpause)

    async def next(self, ctx: CommandContext) -> bool:
        async def _next() -> None:
            await self._player.skip(ctx.guild_id)

        return await self._run("next", ctx, _next)

    async def stop(self, ctx: CommandContext) -> bool:
        """Clear the queue, stop the active track and leave voice."""

        async def _stop() -> None:
            if not await self._player.stop(ctx.guild_id):
                await self._reply(ctx, DiscordUIMessages.ALREADY_STOPPED)

            try:
                left = await self._player.leave(ctx.guild_id)
            except TransportError as exc:
                await self._reply(ctx, DiscordUIMessages.LEAVE_FAILED.format(error=exc.message))
                left = True

            if left:
                await self._reply(ctx, DiscordUIMessages.LEFT_VOICE)
            else:
                await self._reply(ctx, ErrorMessages.NOT_IN_VOICE_CHANNEL)

        return await self._run("stop", ctx, _stop)

    async def queue(self, ctx: CommandContext) -> bool:
        async def _queue() -> None:
            await self._reply(ctx, await self.format_queue(ctx.guild_id))

        return await self._run("queue", ctx, _queue, serialize=False)

    async def shuffle(self, ctx: CommandContext) -> bool:
        async def _shuffle() -> None:
            await self._player.shuffle(ctx.guild_id)
            await self._react(ctx, Emojis.SUCCESS)

        return await self._run("shuffle", ctx, _shuffle)

    async def goto(self, ctx: CommandContext, raw_index: str | None) -> bool:
        """Jump to a one-based position of the displayed queue."""

        async def _goto() -> None:
            position = parse_index(raw_index)
            if position is None:
                raise UserError(ErrorMessages.INVALID_SONG_INDEX)
            await self._player.goto(ctx.guild_id, position)

        return await self._run("goto", ctx, _goto)

    async def help(self, ctx: CommandContext) -> bool:
        async def _help() -> None:
            await self._reply(ctx, DiscordUIMessages.HELP)

        return await self._run("help", ctx, _help, serialize=False)

    async def ping(self, ctx: CommandContext) -> bool:
        async def _ping() -> None:
            await self._reply(ctx, DiscordUIMessages.PONG)

        return await self._run("ping", ctx, _ping, serialize=False)

    # ── Building blocks ────────────────────────────────────────────

    async def format_queue(self, guild_id: int) -> str:
        snapshot = await self._player.snapshot(guild_id, self._queue_display_limit)
        if not snapshot.upcoming_tracks:
            return DiscordUIMessages.QUEUE_EMPTY

        lines = "\n".join(
            DiscordUIMessages.QUEUE_LINE.format(index=index, title=truncate(track.title))
            for index, track in enumerate(snapshot.upcoming_tracks, start=1)
        )
        return DiscordUIMessages.QUEUE_LISTING.format(lines=lines)

    async def _enqueue(self, ctx: CommandContext, query: str, *, front: bool) -> None:
        query = query.strip()
        if not query:
            raise UserError(ErrorMessages.EMPTY_QUERY)
        if ctx.author_voice_channel_id is None:
            raise UserError(ErrorMessages.NOT_IN_VOICE_CHANNEL)

        session = await self._voice.join(ctx.guild_id, ctx.author_voice_channel_id)
        await self._ensure_deafened(ctx.guild_id, session)

        tracks: list[Track]
        if not front and self._resolver.is_playlist(query):
            logger.info(LogTemplates.PLAYLIST_DETECTED, query)
            tracks = await self._resolver.resolve_playlist(query)
        else:
            tracks = [await self._resolver.resolve_single(query)]

        await self._player.enqueue(ctx.guild_id, tracks, front=front)
        await self._player.start_next(ctx.guild_id, ctx.channel_id)

    async def _ensure_deafened(self, guild_id: int, session: VoiceSession) -> None:
        if session.is_deaf():
            logger.debug(LogTemplates.VOICE_ALREADY_DEAF, guild_id)
            return
        try:
            await session.deafen(True)
        except Exception as exc:
            logger.warning(LogTemplates.VOICE_DEAFEN_FAILED, guild_id, exc)

    async def _with_reactions(
        self, name: str, ctx: CommandContext, action: Callable[[], Awaitable[None]]
    ) -> bool:
        await self._react(ctx, Emojis.LOADING)
        ok = await self._run(name, ctx, action)
        await self._unreact(ctx, Emojis.LOADING)
        await self._react(ctx, Emojis.SUCCESS if ok else Emojis.FAILURE)
        return ok

    async def _run(
        self,
        name: str,
        ctx: CommandContext,
        action: Callable[[], Awaitable[None]],
        *,
        serialize: bool = True,
    ) -> bool:
        logger.info(LogTemplates.COMMAND_RECEIVED, name, ctx.guild_id, ctx.message_id)
        try:
            if serialize:
                async with self._serialized(ctx.guild_id):
                    await action()
            else:
                await action()
            return True
        except DomainError as exc:
            logger.info(LogTemplates.COMMAND_FAILED, name, ctx.guild_id, exc.message)
            await self._reply(ctx, exc.message)
        except Exception:
            logger.exception(LogTemplates.COMMAND_CRASHED, name, ctx.guild_id)
        return False

    @asynccontextmanager
    async def _serialized(self, guild_id: int) -> AsyncIterator[None]:
        if not self._serialize_commands:
            yield
            return

        lock = self._command_locks.get(guild_id)
        if lock is None:
            lock = self._command_locks[guild_id] = asyncio.Lock()
        async with lock:
            yield

    # ── Chat output ───────────────────────────────────────────────

    async def _reply(self, ctx: CommandContext, content: str) -> None:
        try:
            await self._chat.send_message(ctx.channel_id, content)
        except Exception as exc:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, ctx.channel_id, exc)

    async def _react(self, ctx: CommandContext, emoji: str) -> None:
        if ctx.message_id is None:
            return
        try:
            await self._chat.add_reaction(ctx.channel_id, ctx.message_id, emoji)
        except Exception as exc:
            logger.warning(LogTemplates.REACTION_FAILED, emoji, ctx.message_id, exc)

    async def _unreact(self, ctx: CommandContext, emoji: str) -> None:
        if ctx.message_id is None:
            return
        try:
            await self._chat.remove_reaction(ctx.channel_id, ctx.message_id, emoji)
        except Exception as exc:
            logger.warning(LogTemplates.REACTION_FAILED, emoji, ctx.message_id, exc)
