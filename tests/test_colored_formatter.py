"""Tests for ColoredFormatter."""

import logging
from io import StringIO

import pytest

from discord_jukebox.utils.logging import ColoredFormatter

RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def _tty() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


@pytest.fixture(autouse=True)
def no_color_unset(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        """Should apply the correct ANSI color code for each level."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())
        output = fmt.format(_make_record(level))

        assert output.startswith(LEVEL_COLORS[level])
        assert RESET in output

    def test_no_color_when_no_color_env_set(self, monkeypatch):
        """Should not apply colors when NO_COLOR env var is set."""
        monkeypatch.setenv("NO_COLOR", "1")
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

        assert fmt.format(_make_record(logging.INFO)) == "INFO | test"

    def test_no_color_when_not_a_tty(self):
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        assert fmt.format(_make_record(logging.WARNING)) == "WARNING | test"

    def test_force_color_overrides_detection(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        fmt = ColoredFormatter("%(levelname)s", stream=StringIO(), force_color=True)

        assert fmt.format(_make_record(logging.ERROR)) == f"{LEVEL_COLORS[logging.ERROR]}ERROR{RESET}"

    def test_force_color_off(self):
        fmt = ColoredFormatter("%(levelname)s", stream=_tty(), force_color=False)

        assert fmt.format(_make_record(logging.ERROR)) == "ERROR"

    def test_original_record_untouched(self):
        """Other handlers sharing the record must still see the plain level name."""
        fmt = ColoredFormatter("%(levelname)s", force_color=True)
        record = _make_record(logging.INFO)

        fmt.format(record)

        assert record.levelname == "INFO"

    def test_dictconfig_style_construction(self):
        """Accepts the keyword arguments logging.config passes to a '()' factory."""
        fmt = ColoredFormatter(fmt="%(name)s %(message)s", datefmt="%H:%M", force_color=False)

        assert fmt.format(_make_record(logging.INFO, "hello")) == "test.logger hello"
