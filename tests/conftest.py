import asyncio

import pytest

from discord_jukebox.application.interfaces.audio_resolver import AudioResolver
from discord_jukebox.application.interfaces.chat_gateway import ChatGateway
from discord_jukebox.application.interfaces.voice_adapter import (
    TrackHandle,
    VoiceGateway,
    VoiceSession,
)
from discord_jukebox.application.services.command_dispatcher import (
    CommandContext,
    CommandDispatcher,
)
from discord_jukebox.application.services.player import Player
from discord_jukebox.domain.music.entities import AudioSource, Track
from discord_jukebox.domain.music.registry import TenantRegistry
from discord_jukebox.domain.shared.exceptions import ResolverError, TransportError, UserError
from discord_jukebox.domain.shared.messages import ErrorMessages

GUILD_ID = 111
TEXT_CHANNEL_ID = 222
VOICE_CHANNEL_ID = 333
MESSAGE_ID = 444


def make_track(title: str) -> Track:
    return Track(title=title, url=f"https://y/{title.lower()}")


# ============================================================================
# In-memory fakes for the ports
# ============================================================================


class FakeTrackHandle(TrackHandle):
    """Handle whose end is triggered explicitly with ``finish`` (or by ``stop``)."""

    def __init__(self, source: AudioSource, tasks: list[asyncio.Task]) -> None:
        self.source = source
        self.paused = False
        self.stopped = False
        self.ended = False
        self._tasks = tasks
        self._callbacks = []
        self._error = None

    @property
    def track(self) -> Track:
        return self.source.track

    def pause(self) -> None:
        self.paused = True

    def play(self) -> None:
        self.paused = False

    def stop(self) -> None:
        if self.stopped:
            return
        self.stopped = True
        self.finish()

    def finish(self, error: Exception | None = None) -> None:
        if self.ended:
            return
        self.ended = True
        self._error = error
        for callback in self._callbacks:
            self._tasks.append(asyncio.get_running_loop().create_task(callback(self, error)))
        self._callbacks.clear()

    def add_end_callback(self, callback) -> None:
        if self.ended:
            self._tasks.append(
                asyncio.get_running_loop().create_task(callback(self, self._error))
            )
            return
        self._callbacks.append(callback)


class FakeVoiceSession(VoiceSession):
    def __init__(self, channel_id: int, tasks: list[asyncio.Task]) -> None:
        self._channel_id = channel_id
        self._tasks = tasks
        self.deaf = False
        self.deafen_calls: list[bool] = []
        self.deafen_error: Exception | None = None
        self.handles: list[FakeTrackHandle] = []
        self.stop_calls = 0
        self.fail_urls: set[str] = set()

    @property
    def channel_id(self) -> int | None:
        return self._channel_id

    async def deafen(self, deaf: bool) -> None:
        self.deafen_calls.append(deaf)
        if self.deafen_error is not None:
            raise self.deafen_error
        self.deaf = deaf

    def is_deaf(self) -> bool:
        return self.deaf

    async def play_source(self, source: AudioSource) -> TrackHandle:
        if source.track.url in self.fail_urls:
            raise TransportError("boom")
        handle = FakeTrackHandle(source, self._tasks)
        self.handles.append(handle)
        return handle

    def stop(self) -> None:
        self.stop_calls += 1

    @property
    def played(self) -> list[Track]:
        return [handle.track for handle in self.handles]


class FakeVoiceGateway(VoiceGateway):
    def __init__(self) -> None:
        self.sessions: dict[int, FakeVoiceSession] = {}
        self.joins: list[tuple[int, int]] = []
        self.tasks: list[asyncio.Task] = []
        self.join_error: Exception | None = None

    def connect(self, guild_id: int = GUILD_ID, channel_id: int = VOICE_CHANNEL_ID) -> FakeVoiceSession:
        session = FakeVoiceSession(channel_id, self.tasks)
        self.sessions[guild_id] = session
        return session

    async def join(self, guild_id: int, channel_id: int) -> VoiceSession:
        self.joins.append((guild_id, channel_id))
        if self.join_error is not None:
            raise self.join_error
        session = self.sessions.get(guild_id)
        if session is None:
            session = self.connect(guild_id, channel_id)
        return session

    def get(self, guild_id: int) -> VoiceSession | None:
        return self.sessions.get(guild_id)

    async def remove(self, guild_id: int) -> bool:
        return self.sessions.pop(guild_id, None) is not None

    async def settle(self) -> None:
        """Wait until every scheduled end-of-track callback has run."""
        while True:
            pending = [task for task in self.tasks if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending)


class FakeChatGateway(ChatGateway):
    def __init__(self) -> None:
        self.messages: list[tuple[int, str]] = []
        self.reactions: list[tuple[str, int, int, str]] = []
        self.reaction_error: Exception | None = None

    async def send_message(self, channel_id: int, content: str) -> None:
        self.messages.append((channel_id, content))

    async def add_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        if self.reaction_error is not None:
            raise self.reaction_error
        self.reactions.append(("add", channel_id, message_id, emoji))

    async def remove_reaction(self, channel_id: int, message_id: int, emoji: str) -> None:
        if self.reaction_error is not None:
            raise self.reaction_error
        self.reactions.append(("remove", channel_id, message_id, emoji))

    @property
    def texts(self) -> list[str]:
        return [content for _, content in self.messages]


class FakeResolver(AudioResolver):
    def __init__(self) -> None:
        self.singles: dict[str, Track] = {}
        self.playlists: dict[str, list[Track]] = {}
        self.failing_sources: set[str] = set()
        self.source_calls: list[str] = []
        self.single_gates: dict[str, asyncio.Event] = {}
        self.source_gate: asyncio.Event | None = None
        self.single_error: Exception | None = None
        self.playlist_error: Exception | None = None

    async def resolve_single(self, query: str) -> Track:
        gate = self.single_gates.get(query)
        if gate is not None:
            await gate.wait()
        if self.single_error is not None:
            raise self.single_error
        if query not in self.singles:
            raise UserError(ErrorMessages.COULD_NOT_LOAD_SONG.format(query=query))
        return self.singles[query]

    async def resolve_playlist(self, url: str) -> list[Track]:
        if self.playlist_error is not None:
            raise self.playlist_error
        return list(self.playlists[url])

    async def resolve_source(self, track: Track) -> AudioSource:
        self.source_calls.append(track.url)
        if self.source_gate is not None:
            await self.source_gate.wait()
        if track.url in self.failing_sources:
            raise ResolverError("unavailable", query=track.url)
        return AudioSource(track=track, stream_url=f"{track.url}/stream")

    def is_url(self, query: str) -> bool:
        return query.startswith("http")

    def is_playlist(self, query: str) -> bool:
        return self.is_url(query) and ("&list=" in query or "?list=" in query)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def registry():
    return TenantRegistry()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def voice():
    return FakeVoiceGateway()


@pytest.fixture
def chat():
    return FakeChatGateway()


@pytest.fixture
def player(registry, resolver, voice, chat):
    return Player(registry=registry, resolver=resolver, voice=voice, chat=chat)


@pytest.fixture
def dispatcher(player, resolver, voice, chat):
    return CommandDispatcher(
        player=player,
        resolver=resolver,
        voice=voice,
        chat=chat,
        queue_display_limit=20,
        serialize_commands=True,
    )


@pytest.fixture
def ctx():
    return CommandContext(
        guild_id=GUILD_ID,
        channel_id=TEXT_CHANNEL_ID,
        message_id=MESSAGE_ID,
        author_voice_channel_id=VOICE_CHANNEL_ID,
    )


@pytest.fixture
def track_factory():
    return make_track
