"""Process-wide registry of per-guild playback state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

from discord_jukebox.domain.music.entities import TenantState
from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TenantRegistry:
    """Maps guild ids to their ``TenantState``.

    States are created lazily and live until the process exits. Inserting
    into the map is serialised by a registry-wide lock; everything else is
    guarded by the state's own lock.
    """

    def __init__(self) -> None:
        self._states: dict[int, TenantState] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, tenant_id: object) -> bool:
        return tenant_id in self._states

    def get(self, tenant_id: int) -> TenantState | None:
        return self._states.get(tenant_id)

    async def get_or_create(self, tenant_id: int) -> TenantState:
        state = self._states.get(tenant_id)
        if state is not None:
            return state

        async with self._lock:
            state = self._states.get(tenant_id)
            if state is None:
                state = TenantState(tenant_id=tenant_id)
                self._states[tenant_id] = state
                logger.debug(LogTemplates.TENANT_CREATED, tenant_id)
            return state

    @asynccontextmanager
    async def write(self, tenant_id: int) -> AsyncIterator[TenantState]:
        """Yield the guild's state with its lock held.

        The body must not await anything other than the lock itself.
        """
        state = await self.get_or_create(tenant_id)
        async with state.lock:
            yield state

    @asynccontextmanager
    async def existing(self, tenant_id: int) -> AsyncIterator[TenantState | None]:
        """Like ``write`` but yields None for a guild that has no state yet."""
        state = self._states.get(tenant_id)
        if state is None:
            yield None
            return
        async with state.lock:
            yield state

    async def with_write(self, tenant_id: int, fn: Callable[[TenantState], T]) -> T:
        async with self.write(tenant_id) as state:
            return fn(state)

    async def with_read(self, tenant_id: int, fn: Callable[[TenantState], T], default: T) -> T:
        """Run ``fn`` against the state under its lock; ``fn`` should return a copy.

        Unknown guilds get ``default`` and no state is created.
        """
        state = self._states.get(tenant_id)
        if state is None:
            return default
        async with state.lock:
            return fn(state)

    def tenant_ids(self) -> list[int]:
        return list(self._states)
