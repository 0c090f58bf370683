"""Exception hierarchy for jukebox errors.

``UserError`` covers anything the person typing the command got wrong,
``ResolverError`` failures turning input into playable audio, and
``TransportError`` failures of the voice connection itself.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class UserError(DomainError):
    """Raised for malformed commands, invalid indexes or missing preconditions."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="USER_ERROR")


class ResolverError(DomainError):
    """Raised when a query, URL or playlist cannot be resolved to audio."""

    def __init__(self, message: str, query: str | None = None) -> None:
        super().__init__(message, code="RESOLVER_ERROR")
        self.query = query


class TransportError(DomainError):
    """Raised when joining voice or starting playback fails."""

    def __init__(self, message: str, guild_id: int | None = None) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.guild_id = guild_id
