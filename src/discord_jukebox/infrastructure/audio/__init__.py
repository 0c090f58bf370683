"""Audio infrastructure: yt-dlp resolver and its data models."""

from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = ["YtDlpResolver"]
