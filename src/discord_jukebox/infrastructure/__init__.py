"""
Infrastructure Layer

Concrete adapters for the application ports:
- audio/: yt-dlp based media resolution
- discord/: discord.py bot, cogs, voice and chat adapters
"""
