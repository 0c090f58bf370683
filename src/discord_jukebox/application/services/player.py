"""Player Application Service - couples a guild's queue to its voice session."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import AudioSource, TenantState, Track
from ...domain.music.value_objects import PlayerState
from ...domain.shared.exceptions import DomainError, TransportError, UserError
from ...domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from ...domain.shared.types import NonNegativeInt

if TYPE_CHECKING:
    from ...domain.music.registry import TenantRegistry
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.chat_gateway import ChatGateway
    from ..interfaces.voice_adapter import TrackHandle, VoiceGateway

logger = logging.getLogger(__name__)


class QueueSnapshot(BaseModel):
    """Read-only copy of a guild's queue taken under its lock."""

    model_config = ConfigDict(frozen=True)

    current_track: Track | None
    upcoming_tracks: list[Track]
    total_length: NonNegativeInt
    state: PlayerState


class Player:
    """Per-guild playback state machine.

    Every mutation happens under the guild's lock without awaiting; resolver,
    voice and chat calls happen with no lock held. A start that is overtaken
    by ``stop``, ``reset``, ``next`` or ``goto`` notices through
    ``TenantState.generation`` and abandons.
    """

    def __init__(
        self,
        *,
        registry: TenantRegistry,
        resolver: AudioResolver,
        voice: VoiceGateway,
        chat: ChatGateway,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._voice = voice
        self._chat = chat

    # ── Queue operations ───────────────────────────────────────────

    async def enqueue(self, guild_id: int, tracks: Sequence[Track], *, front: bool = False) -> int:
        """Add tracks to the back (or the front) of the queue; returns the new length."""
        async with self._registry.write(guild_id) as state:
            if front:
                for track in reversed(tracks):
                    state.queue.push_front(track)
            else:
                state.queue.append(tracks)
            length = len(state.queue)

        logger.debug(LogTemplates.QUEUE_ENQUEUED, len(tracks), guild_id, front)
        return length

    async def shuffle(self, guild_id: int) -> int:
        async with self._registry.existing(guild_id) as state:
            if state is None:
                return 0
            state.queue.shuffle()
            length = len(state.queue)

        logger.debug(LogTemplates.QUEUE_SHUFFLED, guild_id)
        return length

    async def snapshot(self, guild_id: int, limit: int) -> QueueSnapshot:
        def _copy(state: TenantState) -> QueueSnapshot:
            return QueueSnapshot(
                current_track=state.current,
                upcoming_tracks=state.queue.take(limit),
                total_length=len(state.queue),
                state=state.state,
            )

        empty = QueueSnapshot(
            current_track=None, upcoming_tracks=[], total_length=0, state=PlayerState.IDLE
        )
        return await self._registry.with_read(guild_id, _copy, empty)

    # ── Start-next loop ────────────────────────────────────────────

    async def start_next(self, guild_id: int, channel_id: int | None = None) -> Track | None:
        """Pop the front of the queue and start it.

        Returns the track that started, or None when something is already
        playing, the queue ran dry, or the start was abandoned. Tracks that
        fail to resolve or play are reported in chat and skipped; every
        attempt consumes one queued track so the loop ends.
        """
        while True:
            async with self._registry.write(guild_id) as state:
                if channel_id is not None:
                    state.channel_id = channel_id
                if not state.is_idle:
                    logger.debug(LogTemplates.PLAYBACK_ALREADY_ACTIVE, guild_id, state.state.value)
                    return None

                track = state.queue.pop_front()
                if track is None:
                    logger.debug(LogTemplates.QUEUE_EMPTY, guild_id)
                    return None

                state.current = track
                state.transition_to(PlayerState.STARTING)
                generation = state.generation
                notify_channel = state.channel_id

            logger.debug(LogTemplates.NEXT_TRACK, guild_id, track.title, track.url)

            if self._voice.get(guild_id) is None:
                await self._release_start(guild_id, generation)
                await self._notify(notify_channel, ErrorMessages.NOT_IN_VOICE_TO_PLAY)
                return None

            try:
                handle = await self._play(guild_id, track, generation)
            except Exception as exc:
                if isinstance(exc, DomainError):
                    error = exc.message
                    logger.warning(LogTemplates.PLAYBACK_START_FAILED, track.title, guild_id, error)
                else:
                    error = str(exc)
                    logger.exception(LogTemplates.PLAYBACK_START_FAILED, track.title, guild_id, error)

                if not await self._release_start(guild_id, generation):
                    return None
                await self._notify(
                    notify_channel,
                    DiscordUIMessages.COULD_NOT_PLAY.format(title=track.title, error=error),
                )
                continue

            if handle is None:
                logger.info(LogTemplates.PLAYBACK_ABANDONED, track.title, guild_id)
                return None

            handle.add_end_callback(
                lambda ended, error: self.on_track_end(guild_id, ended, error)
            )
            logger.info(LogTemplates.PLAYBACK_STARTED, track.title, guild_id)
            await self._notify(
                notify_channel,
                DiscordUIMessages.PLAYING_SONG.format(title=track.title, url=track.url),
            )
            return track

    async def _play(self, guild_id: int, track: Track, generation: int) -> TrackHandle | None:
        """Resolve and render ``track``; returns None if the start was overtaken."""
        source: AudioSource = await self._resolver.resolve_source(track)

        if not await self._still_starting(guild_id, generation):
            return None

        session = self._voice.get(guild_id)
        if session is None:
            raise TransportError(ErrorMessages.NOT_IN_VOICE_TO_PLAY, guild_id=guild_id)

        session.stop()
        handle = await session.play_source(source)

        async with self._registry.write(guild_id) as state:
            if state.generation != generation:
                handle.stop()
                return None
            state.active = handle
            state.transition_to(PlayerState.PLAYING)
            if state.pause_requested:
                state.pause_requested = False
                handle.pause()
                state.transition_to(PlayerState.PAUSED)
                logger.debug(LogTemplates.PLAYBACK_PAUSED, guild_id)
        return handle

    async def _still_starting(self, guild_id: int, generation: int) -> bool:
        async with self._registry.write(guild_id) as state:
            return state.generation == generation

    async def _release_start(self, guild_id: int, generation: int) -> bool:
        """Drop a failed STARTING reservation. False if a stop already did."""
        async with self._registry.write(guild_id) as state:
            if state.generation != generation:
                return False
            state.current = None
            state.transition_to(PlayerState.IDLE)
            state.pause_requested = False
            return True

    async def on_track_end(
        self, guild_id: int, handle: TrackHandle, error: Exception | None = None
    ) -> None:
        """Handle the end of ``handle`` and start whatever is queued next."""
        logger.debug(LogTemplates.TRACK_ENDED, guild_id, error)
        if error is not None:
            logger.warning(LogTemplates.PLAYBACK_ERROR, guild_id, error)

        async with self._registry.write(guild_id) as state:
            if state.active is not handle:
                logger.debug(LogTemplates.TRACK_END_STALE, guild_id)
                return
            state.active = None
            state.current = None
            state.transition_to(PlayerState.IDLE)

        try:
            await self.start_next(guild_id)
        except Exception:
            logger.exception(LogTemplates.TRACK_END_CALLBACK_ERROR, guild_id)

    # ── Transport control ─────────────────────────────────────────

    async def pause(self, guild_id: int) -> bool:
        """Pause the active track. False when nothing is active.

        A track that is still starting is paused as soon as it plays.
        """
        async with self._registry.existing(guild_id) as state:
            if state is None:
                return False
            if state.state is PlayerState.STARTING:
                state.pause_requested = True
                return True
            if state.active is None:
                return False
            if state.state is PlayerState.PLAYING:
                state.active.pause()
                state.transition_to(PlayerState.PAUSED)
                logger.debug(LogTemplates.PLAYBACK_PAUSED, guild_id)
            return True

    async def unpause(self, guild_id: int) -> bool:
        """Resume the active track. False when nothing is active."""
        async with self._registry.existing(guild_id) as state:
            if state is None:
                return False
            if state.state is PlayerState.STARTING:
                state.pause_requested = False
                return True
            if state.active is None:
                return False
            if state.state is PlayerState.PAUSED:
                state.active.play()
                state.transition_to(PlayerState.PLAYING)
                logger.debug(LogTemplates.PLAYBACK_RESUMED, guild_id)
            return True

    async def skip(self, guild_id: int) -> bool:
        """Move on to the next queued track.

        With an empty queue this is a no-op. With a queue but nothing active
        (every earlier start failed) the queue is started directly.
        """
        async with self._registry.existing(guild_id) as state:
            if state is None or not state.queue:
                return False
            handle = self._drain(state)

        logger.info(LogTemplates.PLAYBACK_SKIPPED, guild_id)
        if handle is None:
            await self.start_next(guild_id)
        return True

    async def goto(self, guild_id: int, position: int) -> None:
        """Jump to the one-based ``position`` of the queue.

        Raises UserError for positions outside ``1..len(queue)``.
        """
        async with self._registry.existing(guild_id) as state:
            if state is None or not state.queue.drop_front(position):
                raise UserError(ErrorMessages.INVALID_SONG_INDEX)
            handle = self._drain(state)

        logger.info(LogTemplates.QUEUE_JUMPED, position, guild_id)
        if handle is None:
            await self.start_next(guild_id)

    def _drain(self, state: TenantState) -> TrackHandle | None:
        """Stop the active handle; its end callback starts the next track.

        A track still starting is abandoned instead, leaving the state IDLE so
        the caller starts the next track itself.
        """
        handle = state.active
        if handle is None:
            if state.state is PlayerState.STARTING:
                state.abandon_start()
            return None
        if state.state in (PlayerState.PLAYING, PlayerState.PAUSED):
            state.transition_to(PlayerState.DRAINING)
        handle.stop()
        return handle

    async def stop(self, guild_id: int) -> bool:
        """Clear the queue and stop playback. True if something was playing."""
        was_playing = False
        removed = 0
        async with self._registry.existing(guild_id) as state:
            if state is not None:
                handle = state.active
                was_playing = handle is not None or state.state is PlayerState.STARTING
                removed = state.clear()
                if handle is not None:
                    handle.stop()

        session = self._voice.get(guild_id)
        if session is not None:
            session.stop()

        logger.info(LogTemplates.QUEUE_CLEARED, removed, guild_id)
        logger.info(LogTemplates.PLAYBACK_STOPPED, guild_id)
        return was_playing

    async def leave(self, guild_id: int) -> bool:
        """Leave the guild's voice channel. False if not connected."""
        return await self._voice.remove(guild_id)

    async def reset(self, guild_id: int) -> None:
        """Forget queue and active track after the bot was removed from voice."""
        async with self._registry.existing(guild_id) as state:
            if state is None:
                return
            handle = state.active
            state.clear()
            if handle is not None:
                handle.stop()

        logger.info(LogTemplates.VOICE_BOT_REMOVED, guild_id)

    # ── Helpers ───────────────────────────────────────────────────

    async def _notify(self, channel_id: int | None, content: str) -> None:
        if channel_id is None:
            return
        try:
            await self._chat.send_message(channel_id, content)
        except Exception as exc:
            logger.warning(LogTemplates.MESSAGE_SEND_FAILED, channel_id, exc)
