"""Discord voice adapter implementing the voice ports on top of discord.py."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import discord

from discord_jukebox.application.interfaces.voice_adapter import (
    TrackEndCallback,
    TrackHandle,
    VoiceGateway,
    VoiceSession,
)
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import TransportError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import AudioSource

logger = logging.getLogger(__name__)


class DiscordTrackHandle(TrackHandle):
    """Controls one FFmpeg source on a voice client.

    discord.py calls ``after`` on its audio thread; the end is bridged onto the
    event loop with ``run_coroutine_threadsafe`` and callbacks run there.
    """

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        loop: asyncio.AbstractEventLoop,
        guild_id: int,
    ) -> None:
        self._vc = voice_client
        self._loop = loop
        self._guild_id = guild_id
        self._source: discord.AudioSource | None = None
        self._callbacks: list[TrackEndCallback] = []
        self._ended = False
        self._error: Exception | None = None

    @property
    def ended(self) -> bool:
        return self._ended

    def attach(self, source: discord.AudioSource) -> None:
        self._source = source

    def _is_current(self) -> bool:
        return not self._ended and self._source is not None and self._vc.source is self._source

    def pause(self) -> None:
        if self._is_current() and self._vc.is_playing():
            self._vc.pause()

    def play(self) -> None:
        if self._is_current() and self._vc.is_paused():
            self._vc.resume()

    def stop(self) -> None:
        if self._is_current():
            self._vc.stop()

    def add_end_callback(self, callback: TrackEndCallback) -> None:
        if self._ended:
            self._loop.create_task(self._run_callback(callback))
            return
        self._callbacks.append(callback)

    def after_callback(self, error: Exception | None = None) -> None:
        """``after`` hook for ``VoiceClient.play``; runs on the audio thread."""
        asyncio.run_coroutine_threadsafe(self._finish(error), self._loop)

    async def _finish(self, error: Exception | None) -> None:
        if self._ended:
            return
        self._ended = True
        self._error = error
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            await self._run_callback(callback)

    async def _run_callback(self, callback: TrackEndCallback) -> None:
        try:
            await callback(self, self._error)
        except Exception:
            logger.exception(LogTemplates.TRACK_END_CALLBACK_ERROR, self._guild_id)


class DiscordVoiceSession(VoiceSession):
    """A connected ``discord.VoiceClient`` seen through the voice port."""

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        guild: discord.Guild,
        settings: AudioSettings,
    ) -> None:
        self._vc = voice_client
        self._guild = guild
        self._settings = settings

    @property
    def channel_id(self) -> int | None:
        channel = self._vc.channel
        return channel.id if channel is not None else None

    def is_deaf(self) -> bool:
        me = self._guild.me
        voice = me.voice if me is not None else None
        return bool(voice is not None and voice.self_deaf)

    async def deafen(self, deaf: bool) -> None:
        await self._guild.change_voice_state(channel=self._vc.channel, self_deaf=deaf)

    async def play_source(self, source: AudioSource) -> TrackHandle:
        handle = DiscordTrackHandle(self._vc, asyncio.get_running_loop(), self._guild.id)

        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

        try:
            audio = discord.FFmpegPCMAudio(
                source.stream_url,
                before_options=self._settings.ffmpeg_options.get("before_options", ""),
                options=self._settings.ffmpeg_options.get("options", ""),
            )
            handle.attach(audio)
            self._vc.play(audio, after=handle.after_callback)
        except discord.ClientException as e:
            logger.error(LogTemplates.PLAYBACK_ERROR, self._guild.id, e)
            raise TransportError(ErrorMessages.VOICE_PLAY_FAILED.format(error=e), guild_id=self._guild.id) from e

        return handle

    def stop(self) -> None:
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()


class DiscordVoiceGateway(VoiceGateway):
    def __init__(self, bot: discord.Client, settings: AudioSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()

    def _get_guild(self, guild_id: int) -> discord.Guild | None:
        return self._bot.get_guild(guild_id)

    def _get_voice_client(self, guild_id: int) -> discord.VoiceClient | None:
        guild = self._get_guild(guild_id)
        if not guild:
            return None

        vc = guild.voice_client
        return vc if isinstance(vc, discord.VoiceClient) else None

    def get(self, guild_id: int) -> VoiceSession | None:
        vc = self._get_voice_client(guild_id)
        guild = self._get_guild(guild_id)
        if vc is None or guild is None or not vc.is_connected():
            return None
        return DiscordVoiceSession(vc, guild, self._settings)

    async def join(self, guild_id: int, channel_id: int) -> VoiceSession:
        """Connect to ``channel_id``, moving if already connected elsewhere."""
        guild = self._get_guild(guild_id)
        if not guild:
            raise TransportError(ErrorMessages.GUILD_NOT_FOUND.format(guild_id=guild_id), guild_id=guild_id)

        channel = guild.get_channel(channel_id)
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            raise TransportError(
                ErrorMessages.CHANNEL_NOT_VOICE.format(channel_id=channel_id), guild_id=guild_id
            )

        vc = self._get_voice_client(guild_id)
        if vc is not None and not vc.is_connected():
            await vc.disconnect(force=True)
            vc = None

        try:
            async with asyncio.timeout(self._settings.connect_timeout_seconds):
                if vc is None:
                    vc = await channel.connect(self_deaf=True)
                    logger.info(LogTemplates.VOICE_CONNECTED, channel_id, guild_id)
                elif vc.channel is None or vc.channel.id != channel_id:
                    await vc.move_to(channel)
                    logger.info(LogTemplates.VOICE_MOVED, channel_id, guild_id)
        except TimeoutError as e:
            raise TransportError(
                ErrorMessages.VOICE_CONNECT_TIMEOUT.format(channel_id=channel_id), guild_id=guild_id
            ) from e
        except (discord.ClientException, discord.HTTPException) as e:
            raise TransportError(
                ErrorMessages.VOICE_CONNECT_FAILED.format(channel_id=channel_id, error=e),
                guild_id=guild_id,
            ) from e

        return DiscordVoiceSession(vc, guild, self._settings)

    async def remove(self, guild_id: int) -> bool:
        vc = self._get_voice_client(guild_id)
        if vc is None:
            return False

        try:
            await vc.disconnect(force=True)
        except Exception as e:
            raise TransportError(
                ErrorMessages.VOICE_DISCONNECT_FAILED.format(guild_id=guild_id, error=e),
                guild_id=guild_id,
            ) from e

        logger.info(LogTemplates.VOICE_DISCONNECTED, guild_id)
        return True
