"""Tests for the per-guild state registry."""

import asyncio

import pytest

from discord_jukebox.domain.music.entities import Track
from discord_jukebox.domain.music.registry import TenantRegistry


class TestTenantRegistry:
    @pytest.mark.asyncio
    async def test_get_returns_none_for_unknown_guild(self):
        registry = TenantRegistry()
        assert registry.get(1) is None
        assert 1 not in registry

    @pytest.mark.asyncio
    async def test_get_or_create_is_idempotent(self):
        registry = TenantRegistry()
        first = await registry.get_or_create(1)
        second = await registry.get_or_create(1)

        assert first is second
        assert len(registry) == 1
        assert registry.get(1) is first

    @pytest.mark.asyncio
    async def test_concurrent_creation_yields_one_state(self):
        registry = TenantRegistry()
        states = await asyncio.gather(*(registry.get_or_create(7) for _ in range(20)))

        assert len({id(s) for s in states}) == 1
        assert registry.tenant_ids() == [7]

    @pytest.mark.asyncio
    async def test_guilds_are_isolated(self):
        registry = TenantRegistry()
        async with registry.write(1) as state:
            state.queue.push_back(Track(title="a", url="https://y/a"))

        assert len(registry.get(1).queue) == 1
        assert len((await registry.get_or_create(2)).queue) == 0

    @pytest.mark.asyncio
    async def test_write_holds_the_guild_lock(self):
        registry = TenantRegistry()
        async with registry.write(1) as state:
            assert state.lock.locked()
        assert not state.lock.locked()

    @pytest.mark.asyncio
    async def test_with_write_and_with_read(self):
        registry = TenantRegistry()

        length = await registry.with_write(
            1, lambda s: (s.queue.push_back(Track(url="https://y/a")), len(s.queue))[1]
        )
        titles = await registry.with_read(1, lambda s: [t.title for t in s.queue], [])

        assert length == 1
        assert titles == ["UNKNOWN TRACK"]

    @pytest.mark.asyncio
    async def test_write_releases_lock_on_error(self):
        registry = TenantRegistry()
        with pytest.raises(ValueError):
            async with registry.write(1):
                raise ValueError("boom")
        assert not registry.get(1).lock.locked()

    @pytest.mark.asyncio
    async def test_with_read_on_unknown_guild_returns_default(self):
        registry = TenantRegistry()

        assert await registry.with_read(5, lambda s: len(s.queue), -1) == -1
        assert 5 not in registry

    @pytest.mark.asyncio
    async def test_existing_yields_none_without_creating(self):
        registry = TenantRegistry()
        async with registry.existing(5) as state:
            assert state is None
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_existing_holds_the_guild_lock(self):
        registry = TenantRegistry()
        created = await registry.get_or_create(5)
        async with registry.existing(5) as state:
            assert state is created
            assert state.lock.locked()
        assert not created.lock.locked()
