"""Centralized message constants for error messages, log templates and chat replies."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    EMPTY_TRACK_URL = "Track URL cannot be empty"

    # Command Errors
    NOT_IN_VOICE_CHANNEL = "Not in a voice channel"
    INVALID_SONG_INDEX = "Invalid song index. Check the queue to list the songs."
    EMPTY_QUERY = "Nothing to play: the query is empty"

    # Resolver Errors
    COULD_NOT_LOAD_SONG = "Could not load song for input {query}"
    NO_STREAM_URL = "No stream URL found for {title}"
    PLAYLIST_EMPTY = "Playlist {url} produced no tracks"
    PLAYLIST_TOOL_MISSING = "Media tool {binary!r} could not be started: {error}"
    PLAYLIST_TIMEOUT = "Playlist expansion timed out after {timeout}s"

    # Transport Errors
    NOT_IN_VOICE_TO_PLAY = "Not in a voice channel to play in"
    GUILD_NOT_FOUND = "Guild {guild_id} not found"
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel"
    VOICE_CONNECT_TIMEOUT = "Timed out connecting to voice channel {channel_id}"
    VOICE_CONNECT_FAILED = "Could not connect to voice channel {channel_id}: {error}"
    VOICE_PLAY_FAILED = "Could not start audio: {error}"
    VOICE_DISCONNECT_FAILED = "Could not leave voice in guild {guild_id}: {error}"

    # Configuration Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    DISCORD_TOKEN_REJECTED = "Discord rejected the login, check DISCORD_TOKEN"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Bot has no container attached"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting.
    """

    # Voice Operations
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_MOVED = "Moved to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_ALREADY_DEAF = "Already deafened in guild %s"
    VOICE_DEAFEN_FAILED = "Deafen failed in guild %s: %r"
    VOICE_BOT_REMOVED = "Bot was removed from voice in guild %s, resetting state"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_START_FAILED = "Could not start '%s' in guild %s: %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_STOPPED = "Stopped playback in guild %s"
    PLAYBACK_SKIPPED = "Skipping current track in guild %s"
    PLAYBACK_ABANDONED = "Start of '%s' in guild %s abandoned after stop"
    PLAYBACK_ALREADY_ACTIVE = "Guild %s already has a track active (%s)"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"

    # Track End
    TRACK_ENDED = "Track ended in guild %s (error: %s)"
    TRACK_END_STALE = "Ignoring end of stale track in guild %s"
    TRACK_END_CALLBACK_ERROR = "Error in track end callback for guild %s"

    # Queue Operations
    QUEUE_EMPTY = "Queue empty in guild %s"
    QUEUE_ENQUEUED = "Enqueued %s track(s) in guild %s (front=%s)"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"
    QUEUE_SHUFFLED = "Shuffled queue in guild %s"
    QUEUE_JUMPED = "Jumped to queue position %s in guild %s"
    NEXT_TRACK = "Next track in guild %s is '%s' (%s)"

    # Registry
    TENANT_CREATED = "Created state for guild %s"

    # Commands
    COMMAND_RECEIVED = "Command %s from guild %s: %r"
    COMMAND_FAILED = "Command %s failed in guild %s: %s"
    COMMAND_CRASHED = "Command %s crashed in guild %s"
    REACTION_FAILED = "Could not update reaction %s on message %s: %r"
    MESSAGE_SEND_FAILED = "Error sending message to channel %s: %r"
    PLAYLIST_DETECTED = "Detected playlist in %s"

    # Resolution
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_PLAYLIST_EXPANDING = "Getting songs from playlist %s"
    YTDLP_PLAYLIST_LINE_SKIPPED = "Skipping unparseable playlist line %d (%d validation errors)"
    YTDLP_PLAYLIST_PARTIAL = "Some songs have been skipped due to errors during parsing (%d of %d)"
    YTDLP_PLAYLIST_STDERR = "yt-dlp stderr for %s: %s"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord Jukebox in {environment} mode"
    BOT_JUKEBOX_CONFIG = "Command prefix %r, queue display limit %s, serialized commands %s"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "%s is connected! (id=%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"
    BOT_SHUTTING_DOWN = "Received shutdown signal, shutting down."
    BOT_SHUTDOWN_TIMEOUT = "Shutdown did not finish within %ss"
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COMMAND_ERROR = "Unhandled error in command '%s'"
    BOT_COMMAND_IGNORED = "Ignoring command error in '%s': %s"
    BOT_WEBSOCKET_CONNECTED = "WebSocket connected"
    BOT_WEBSOCKET_DISCONNECTED = "WebSocket disconnected"


class DiscordUIMessages:
    """User-facing chat replies."""

    PLAYING_SONG = "Playing song [{title}]({url})"
    COULD_NOT_PLAY = "Could not play {title} due to error {error}"
    ALREADY_STOPPED = "o_O Already stopped"
    QUEUE_EMPTY = "The queue is empty!"
    QUEUE_LISTING = "**Queue**:\n```{lines}```"
    QUEUE_LINE = "{index} - {title}"
    LEFT_VOICE = "Left voice channel"
    LEAVE_FAILED = "Failed: {error}"
    PONG = "Pong!"

    HELP = """
**Commands:**
    **play [URL|Title]** - Plays (or adds to the queue) new tracks given a URL or a video title (supports youtube playlists).
    **pause** - Pauses the current track.
    **unpause** - Unpauses the currently paused track.
    **stop** - Stops the current song and clears the queue.
    **pn [URL|Title]** - Adds track to the top of the queue to be played next.
    **next** - Plays next track.
    **queue** - Shows the queue of tracks.
    **goto [INDEX]** - Plays immediately the specific track of the queue (discards all previous tracks).
    **shuffle** - Reorders the queue randomly.
    """


class Emojis:
    """Reaction emoji used on command messages."""

    LOADING = "\u23f3"  # hourglass with flowing sand
    SUCCESS = "\U0001f44d"  # thumbs up
    FAILURE = "\U0001f480"  # skull
