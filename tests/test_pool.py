import asyncio

import pytest

from tondilisten.pool import Pool, PoolError


class Conn:
    def __init__(self, name, live=True):
        self.name = name
        self.live = live

    def is_live(self):
        return self.live


@pytest.mark.asyncio
async def test_live_element_is_returned_without_refresh():
    calls = []

    def factory(meta):
        calls.append(meta)
        return Conn("new")

    initial = Conn("first")
    pool = Pool("ws://node", initial, factory)
    assert await pool.get() is initial
    assert calls == []


@pytest.mark.asyncio
async def test_dead_element_is_rebuilt_from_meta():
    calls = []

    async def factory(meta):
        calls.append(meta)
        return Conn("second")

    pool = Pool("ws://node", Conn("first", live=False), factory)
    got = await pool.get()
    assert got.name == "second"
    assert calls == ["ws://node"]


@pytest.mark.asyncio
async def test_rebuilt_element_is_reused_while_live():
    calls = []

    def factory(meta):
        calls.append(meta)
        return Conn("second")

    pool = Pool("meta", Conn("first", live=False), factory)
    first = await pool.get()
    again = await pool.get()
    assert first is again
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_pool_error_from_factory_propagates():
    def factory(meta):
        raise PoolError("Connect Failed: refused")

    pool = Pool("meta", Conn("first", live=False), factory)
    with pytest.raises(PoolError, match="Connect Failed: refused"):
        await pool.get()


@pytest.mark.asyncio
async def test_other_factory_errors_become_pool_errors():
    async def factory(meta):
        raise RuntimeError("boom")

    pool = Pool("meta", Conn("first", live=False), factory)
    with pytest.raises(PoolError, match="boom"):
        await pool.get()


@pytest.mark.asyncio
async def test_get_during_refresh_raises():
    entered = asyncio.Event()
    release = asyncio.Event()

    async def factory(meta):
        entered.set()
        await release.wait()
        return Conn("second")

    pool = Pool("meta", Conn("first", live=False), factory)
    task = asyncio.create_task(pool.get())
    await entered.wait()
    with pytest.raises(PoolError):
        await pool.get()
    release.set()
    result = await task
    assert result.name == "second"
    assert (await pool.get()) is result