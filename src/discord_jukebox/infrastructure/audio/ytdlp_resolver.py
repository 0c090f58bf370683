"""AudioResolver implementation using yt-dlp for URL lookup, search and playlists."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any, Final, cast

from pydantic import ValidationError
from yt_dlp import YoutubeDL

from discord_jukebox.application.interfaces.audio_resolver import AudioResolver
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.music.entities import AudioSource, Track
from discord_jukebox.domain.shared.exceptions import ResolverError, UserError
from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.audio.models import (
    LOG_URL_TRUNCATE,
    AudioFormatInfo,
    PlaylistEntry,
    YtDlpOpts,
    YtDlpTrackInfo,
)

logger = logging.getLogger(__name__)

PLAYLIST_MARKERS: Final[tuple[str, ...]] = ("&list=", "?list=")


class YtDlpResolver(AudioResolver):
    """Resolves single tracks in-process and expands playlists with the yt-dlp CLI."""

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._opts = YtDlpOpts(format=self._settings.ytdlp_format or None)

    # ── Synchronous yt-dlp calls (run in a worker thread) ─────────────

    def _extract_info_sync(self, url: str) -> YtDlpTrackInfo | None:
        with YoutubeDL(params=cast(Any, self._opts.model_dump())) as ydl:
            data = ydl.extract_info(url, download=False)
            return YtDlpTrackInfo.model_validate(dict(data)) if isinstance(data, dict) else None

    def _search_sync(self, query: str, limit: int = 1) -> list[YtDlpTrackInfo]:
        search_query = f"ytsearch{limit}:{query}"
        with YoutubeDL(params=cast(Any, self._opts.model_dump())) as ydl:
            data = ydl.extract_info(search_query, download=False)

            if not isinstance(data, dict):
                return []

            entries = data.get("entries", [])
            if not isinstance(entries, list):
                return []

            return [YtDlpTrackInfo.model_validate(dict(e)) for e in entries if e]

    # ── AudioResolver ─────────────────────────────────────────────────

    async def resolve_single(self, query: str) -> Track:
        query = query.strip()
        try:
            if self.is_url(query):
                info = await asyncio.to_thread(self._extract_info_sync, query)
            else:
                results = await asyncio.to_thread(self._search_sync, query, 1)
                info = results[0] if results else None
        except Exception as exc:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, query[:LOG_URL_TRUNCATE])
            raise ResolverError(str(exc), query=query) from exc

        if info is None:
            raise UserError(ErrorMessages.COULD_NOT_LOAD_SONG.format(query=query))

        url = info.webpage_url or info.original_url or (query if self.is_url(query) else None)
        if url is None:
            raise UserError(ErrorMessages.COULD_NOT_LOAD_SONG.format(query=query))

        return Track(title=info.title, url=url, duration_seconds=info.duration)

    async def resolve_source(self, track: Track) -> AudioSource:
        try:
            info = await asyncio.to_thread(self._extract_info_sync, track.url)
        except Exception as exc:
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT_INFO, track.url[:LOG_URL_TRUNCATE])
            raise ResolverError(str(exc), query=track.url) from exc

        stream_url = self._extract_stream_url(info) if info is not None else None
        if not stream_url:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, track.title)
            raise ResolverError(ErrorMessages.NO_STREAM_URL.format(title=track.title), query=track.url)

        return AudioSource(track=track, stream_url=stream_url)

    async def resolve_playlist(self, url: str) -> list[Track]:
        """Expand a playlist with ``yt-dlp -j --flat-playlist <url>``."""
        binary = self._settings.ytdlp_binary
        logger.info(LogTemplates.YTDLP_PLAYLIST_EXPANDING, url)

        try:
            process = await asyncio.create_subprocess_exec(
                binary,
                "-j",
                "--flat-playlist",
                url,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ResolverError(
                ErrorMessages.PLAYLIST_TOOL_MISSING.format(binary=binary, error=exc), query=url
            ) from exc

        timeout = self._settings.playlist_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                stdout, stderr = await process.communicate()
        except TimeoutError as exc:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise ResolverError(ErrorMessages.PLAYLIST_TIMEOUT.format(timeout=timeout), query=url) from exc

        error_text = stderr.decode("utf-8", errors="replace").strip()
        if error_text:
            logger.debug(LogTemplates.YTDLP_PLAYLIST_STDERR, url, error_text)

        tracks = self.parse_playlist_output(stdout.decode("utf-8", errors="replace"))
        if not tracks:
            raise ResolverError(error_text or ErrorMessages.PLAYLIST_EMPTY.format(url=url), query=url)
        return tracks

    @staticmethod
    def parse_playlist_output(output: str) -> list[Track]:
        """Parse JSON-lines output, skipping (and logging) lines that do not validate."""
        lines = [line for line in output.splitlines() if line.strip()]
        tracks: list[Track] = []

        for number, line in enumerate(lines, start=1):
            try:
                entry = PlaylistEntry.model_validate_json(line)
                tracks.append(
                    Track(title=entry.title, url=entry.url, duration_seconds=entry.duration)
                )
            except ValidationError as exc:
                logger.warning(LogTemplates.YTDLP_PLAYLIST_LINE_SKIPPED, number, exc.error_count())

        if len(tracks) < len(lines):
            logger.warning(LogTemplates.YTDLP_PLAYLIST_PARTIAL, len(lines) - len(tracks), len(lines))

        return tracks

    def is_url(self, query: str) -> bool:
        return query.strip().startswith("http")

    def is_playlist(self, query: str) -> bool:
        return self.is_url(query) and any(marker in query for marker in PLAYLIST_MARKERS)

    # ── Helpers ───────────────────────────────────────────────────────

    def _extract_stream_url(self, info: YtDlpTrackInfo) -> str | None:
        if info.url:
            return info.url
        return self._extract_stream_from_formats(info.formats)

    @staticmethod
    def _extract_stream_from_formats(formats: list[AudioFormatInfo]) -> str | None:
        if not formats:
            return None
        audio_formats = [f for f in formats if f.acodec != "none" and f.url]
        if audio_formats:
            return audio_formats[-1].url
        return None
