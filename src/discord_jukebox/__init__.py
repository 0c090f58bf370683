"""Discord Jukebox - a multi-guild, chat-driven audio jukebox."""

__version__ = "0.1.0"
