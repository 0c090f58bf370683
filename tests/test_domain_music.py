"""
Unit Tests for Domain Music Layer

Tests for:
- Value Objects: PlayerState
- Entities: Track, AudioSource, TrackQueue, TenantState
"""

from collections import Counter

import pytest
from pydantic import ValidationError

from discord_jukebox.domain.music.entities import AudioSource, TenantState, Track, TrackQueue
from discord_jukebox.domain.music.value_objects import PlayerState


def _track(title: str) -> Track:
    return Track(title=title, url=f"https://example.com/{title}")


# =============================================================================
# Track Entity Tests
# =============================================================================


class TestTrack:
    """Unit tests for the Track value object."""

    def test_create_track(self):
        """Should keep title, url and duration."""
        track = Track(title="Song", url="https://youtu.be/abc", duration_seconds=215)
        assert track.title == "Song"
        assert track.url == "https://youtu.be/abc"
        assert track.duration_seconds == 215

    def test_missing_title_uses_placeholder(self):
        """A track without a title is shown as UNKNOWN TRACK."""
        assert Track(url="https://youtu.be/abc").title == "UNKNOWN TRACK"
        assert Track(title=None, url="https://youtu.be/abc").title == "UNKNOWN TRACK"
        assert Track(title="   ", url="https://youtu.be/abc").title == "UNKNOWN TRACK"

    def test_long_title_is_truncated(self):
        track = Track(title="x" * 800, url="https://youtu.be/abc")
        assert len(track.title) == Track.MAX_TITLE_LENGTH

    def test_empty_url_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            Track(title="Song", url="   ")

    def test_url_is_stripped(self):
        assert Track(url="  https://youtu.be/abc  ").url == "https://youtu.be/abc"

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            Track(url="https://youtu.be/abc", duration_seconds=-1)

    def test_track_is_frozen(self):
        track = _track("a")
        with pytest.raises(ValidationError):
            track.title = "b"

    def test_equal_tracks_compare_equal(self):
        """Duplicates are allowed in a queue, so equality is by value."""
        assert _track("a") == _track("a")

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(None, "Unknown"), (59, "0:59"), (215, "3:35"), (3725, "1:02:05")],
    )
    def test_duration_formatted(self, seconds, expected):
        track = Track(url="https://youtu.be/abc", duration_seconds=seconds)
        assert track.duration_formatted == expected

    def test_audio_source_pairs_track_with_stream(self):
        source = AudioSource(track=_track("a"), stream_url="https://cdn/a.webm")
        assert source.track.title == "a"
        assert source.stream_url == "https://cdn/a.webm"


# =============================================================================
# TrackQueue Tests
# =============================================================================


class TestTrackQueue:
    """Unit tests for the ordered track queue."""

    def test_push_and_pop_order(self):
        queue = TrackQueue()
        queue.push_back(_track("a"))
        queue.push_back(_track("b"))
        queue.push_front(_track("c"))

        assert [t.title for t in queue] == ["c", "a", "b"]
        assert queue.pop_front().title == "c"
        assert len(queue) == 2

    def test_pop_empty_returns_none(self):
        assert TrackQueue().pop_front() is None

    def test_append_keeps_order(self):
        queue = TrackQueue([_track("a")])
        queue.append([_track("b"), _track("c")])
        assert [t.title for t in queue] == ["a", "b", "c"]

    def test_bool_reflects_emptiness(self):
        assert not TrackQueue()
        assert TrackQueue([_track("a")])

    def test_clear_returns_count(self):
        queue = TrackQueue([_track("a"), _track("b")])
        assert queue.clear() == 2
        assert len(queue) == 0

    def test_take_returns_copy_of_prefix(self):
        queue = TrackQueue([_track(str(i)) for i in range(5)])

        head = queue.take(3)
        head.clear()

        assert [t.title for t in queue.take(3)] == ["0", "1", "2"]
        assert queue.take(10) == list(queue)
        assert queue.take(0) == []
        assert len(queue) == 5

    def test_shuffle_preserves_multiset(self):
        """Shuffling only reorders; duplicates survive."""
        tracks = [_track("a"), _track("a"), _track("b"), _track("c")]
        queue = TrackQueue(tracks)

        queue.shuffle()

        assert Counter(t.title for t in queue) == Counter(t.title for t in tracks)

    def test_shuffle_empty_and_single(self):
        empty = TrackQueue()
        empty.shuffle()
        assert len(empty) == 0

        single = TrackQueue([_track("a")])
        single.shuffle()
        assert [t.title for t in single] == ["a"]

    @pytest.mark.parametrize(("position", "remaining"), [(1, "abcd"), (3, "cd"), (4, "d")])
    def test_drop_front(self, position, remaining):
        queue = TrackQueue([_track(c) for c in "abcd"])
        assert queue.drop_front(position) is True
        assert "".join(t.title for t in queue) == remaining

    @pytest.mark.parametrize("position", [0, -1, 5, 100])
    def test_drop_front_out_of_range_is_noop(self, position):
        queue = TrackQueue([_track(c) for c in "abcd"])
        assert queue.drop_front(position) is False
        assert len(queue) == 4


# =============================================================================
# PlayerState / TenantState Tests
# =============================================================================


class TestPlayerState:
    def test_idle_only_moves_to_starting(self):
        assert PlayerState.IDLE.can_transition_to(PlayerState.STARTING)
        assert not PlayerState.IDLE.can_transition_to(PlayerState.PLAYING)

    def test_draining_only_moves_to_idle(self):
        assert PlayerState.DRAINING.can_transition_to(PlayerState.IDLE)
        assert not PlayerState.DRAINING.can_transition_to(PlayerState.PLAYING)

    def test_has_handle(self):
        assert not PlayerState.IDLE.has_handle
        assert not PlayerState.STARTING.has_handle
        assert PlayerState.PLAYING.has_handle
        assert PlayerState.PAUSED.has_handle
        assert PlayerState.DRAINING.has_handle


class TestTenantState:
    def test_new_state_is_idle(self):
        state = TenantState(tenant_id=1)
        assert state.is_idle
        assert state.active is None
        assert state.current is None
        assert len(state.queue) == 0

    def test_valid_transitions(self):
        state = TenantState(tenant_id=1)
        state.transition_to(PlayerState.STARTING)
        state.transition_to(PlayerState.PLAYING)
        state.transition_to(PlayerState.PAUSED)
        state.transition_to(PlayerState.DRAINING)
        state.transition_to(PlayerState.IDLE)
        assert state.is_idle

    def test_invalid_transition_raises(self):
        state = TenantState(tenant_id=1)
        with pytest.raises(RuntimeError, match="idle -> playing"):
            state.transition_to(PlayerState.PLAYING)

    def test_same_state_transition_is_noop(self):
        state = TenantState(tenant_id=1)
        state.transition_to(PlayerState.IDLE)
        assert state.is_idle

    def test_clear_resets_everything_and_bumps_generation(self):
        state = TenantState(tenant_id=1)
        state.queue.append([_track("a"), _track("b")])
        state.current = _track("c")
        state.transition_to(PlayerState.STARTING)

        removed = state.clear()

        assert removed == 2
        assert state.is_idle
        assert state.current is None
        assert state.active is None
        assert state.generation == 1

    def test_abandon_start_keeps_queue(self):
        state = TenantState(tenant_id=1)
        state.queue.append([_track("a"), _track("b")])
        state.current = _track("c")
        state.pause_requested = True
        state.transition_to(PlayerState.STARTING)

        state.abandon_start()

        assert [t.title for t in state.queue] == ["a", "b"]
        assert state.is_idle
        assert state.current is None
        assert state.pause_requested is False
        assert state.generation == 1
