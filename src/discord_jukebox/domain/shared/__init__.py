"""
Shared Domain Kernel

Contains types, messages and exceptions shared across the jukebox.
"""

from discord_jukebox.domain.shared.exceptions import (
    DomainError,
    ResolverError,
    TransportError,
    UserError,
)

__all__ = [
    "DomainError",
    "UserError",
    "ResolverError",
    "TransportError",
]
