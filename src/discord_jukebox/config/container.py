"""Dependency Injection Container

Manages the application's dependency graph with lazy initialization.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.chat_gateway import ChatGateway
    from ..application.interfaces.voice_adapter import VoiceGateway
    from ..application.services.command_dispatcher import CommandDispatcher
    from ..application.services.player import Player
    from ..domain.music.registry import TenantRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed. The Discord
    adapters need the bot, so ``set_bot`` must be called before touching them.
    """

    settings: Settings
    _bot: Bot | None = None

    # Domain
    _registry: TenantRegistry | None = None

    # Infrastructure adapters
    _audio_resolver: AudioResolver | None = None
    _voice_gateway: VoiceGateway | None = None
    _chat_gateway: ChatGateway | None = None

    # Application services
    _player: Player | None = None
    _command_dispatcher: CommandDispatcher | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Domain ===

    @property
    def registry(self) -> TenantRegistry:
        """Get the per-guild state registry."""
        if self._registry is None:
            from ..domain.music.registry import TenantRegistry

            self._registry = TenantRegistry()
        return self._registry

    # === Infrastructure Adapters ===

    @property
    def audio_resolver(self) -> AudioResolver:
        """Get the audio resolver."""
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(self.settings.audio)
        return self._audio_resolver

    @property
    def voice_gateway(self) -> VoiceGateway:
        """Get the voice gateway."""
        if self._voice_gateway is None:
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceGateway

            self._voice_gateway = DiscordVoiceGateway(self.bot, self.settings.audio)
        return self._voice_gateway

    @property
    def chat_gateway(self) -> ChatGateway:
        """Get the chat gateway."""
        if self._chat_gateway is None:
            from ..infrastructure.discord.adapters.chat_adapter import DiscordChatGateway

            self._chat_gateway = DiscordChatGateway(self.bot)
        return self._chat_gateway

    # === Application Services ===

    @property
    def player(self) -> Player:
        """Get the player service."""
        if self._player is None:
            from ..application.services.player import Player

            self._player = Player(
                registry=self.registry,
                resolver=self.audio_resolver,
                voice=self.voice_gateway,
                chat=self.chat_gateway,
            )
        return self._player

    @property
    def command_dispatcher(self) -> CommandDispatcher:
        """Get the command dispatcher."""
        if self._command_dispatcher is None:
            from ..application.services.command_dispatcher import CommandDispatcher

            self._command_dispatcher = CommandDispatcher(
                player=self.player,
                resolver=self.audio_resolver,
                voice=self.voice_gateway,
                chat=self.chat_gateway,
                queue_display_limit=self.settings.jukebox.queue_display_limit,
                serialize_commands=self.settings.jukebox.serialize_commands,
            )
        return self._command_dispatcher


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
