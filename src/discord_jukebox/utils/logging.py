"""Console logging formatter."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, TextIO


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI colour codes.

    Colour is off when ``NO_COLOR`` is set or the target stream is not a TTY,
    unless ``force_color`` says otherwise. Accepts the same arguments as
    ``logging.Formatter`` so it can be built from a ``dictConfig`` ``"()"``
    entry.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",  # cyan
        logging.INFO: "\033[32m",  # green
        logging.WARNING: "\033[33m",  # yellow
        logging.ERROR: "\033[31m",  # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: Any = "%",
        *,
        stream: TextIO | None = None,
        force_color: bool | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._stream = stream
        self._force_color = force_color

    def use_color(self) -> bool:
        if self._force_color is not None:
            return self._force_color
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stderr
        isatty = getattr(stream, "isatty", None)
        return bool(isatty and isatty())

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_color():
            return super().format(record)

        color = self.COLORS.get(record.levelno, "")
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)
