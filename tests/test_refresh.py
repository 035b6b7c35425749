"""Tests for the background refresh loops."""
import asyncio
import logging
import pytest
from admin_cache.cache.store import CacheStore
from admin_cache.models.schemas import DataSetKey, DiscoveryResult
from admin_cache.services.refresh import RefreshManager


class CountingFetchers:
    """Fetchers returning one item holding the call count."""

    def __init__(self):
        self.calls = {key: 0 for key in DataSetKey}

    def fetcher_for(self, key):
        async def fetch():
            self.calls[key] += 1
            return DiscoveryResult.of([{"key": key.value, "call": self.calls[key]}])
        return fetch


async def wait_until(predicate, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached")
        await asyncio.sleep(0.005)


@pytest.mark.asyncio
async def test_start_publishes_every_data_set():
    store = CacheStore()
    fetchers = CountingFetchers()
    manager = RefreshManager(store, fetchers.fetcher_for, interval=30)

    manager.start()
    try:
        for key in DataSetKey:
            result = await asyncio.wait_for(store.get(key), 1)
            assert result.items[0]["key"] == key.value
    finally:
        await manager.stop()


@pytest.mark.asyncio
async def test_loop_refreshes_after_each_interval():
    store = CacheStore([DataSetKey.APPLICATIONS])
    fetchers = CountingFetchers()
    manager = RefreshManager(store, fetchers.fetcher_for, interval=0.01)

    manager.start()
    try:
        await wait_until(lambda: fetchers.calls[DataSetKey.APPLICATIONS] >= 3)
    finally:
        await manager.stop()

    assert store.peek(DataSetKey.APPLICATIONS).items[0]["call"] >= 2


@pytest.mark.asyncio
async def test_slow_data_set_does_not_delay_others():
    store = CacheStore()
    fetchers = CountingFetchers()
    never = asyncio.Event()

    def fetcher_for(key):
        if key == DataSetKey.USERS_CC_DEEP:
            async def stuck():
                await never.wait()
            return stuck
        return fetchers.fetcher_for(key)

    manager = RefreshManager(store, fetcher_for, interval=30)
    manager.start()
    try:
        assert (await asyncio.wait_for(store.get(DataSetKey.APPLICATIONS), 1)).connected
        assert (await asyncio.wait_for(store.get(DataSetKey.USERS_UAA), 1)).connected
        assert store.peek(DataSetKey.USERS_CC_DEEP) is None
    finally:
        await manager.stop()


@pytest.mark.asyncio
async def test_disconnected_result_is_published_and_retried():
    store = CacheStore([DataSetKey.SPACES])
    calls = []

    async def flaky():
        calls.append(1)
        if len(calls) == 1:
            return DiscoveryResult.of()
        return DiscoveryResult.of([{"guid": "space-1"}])

    manager = RefreshManager(store, lambda key: flaky, interval=0.01)
    manager.start()
    try:
        first = await asyncio.wait_for(store.get(DataSetKey.SPACES), 1)
        assert first == DiscoveryResult(connected=False, items=[])
        await wait_until(lambda: store.peek(DataSetKey.SPACES).connected)
    finally:
        await manager.stop()


@pytest.mark.asyncio
async def test_stop_cancels_all_tasks():
    store = CacheStore()
    manager = RefreshManager(store, CountingFetchers().fetcher_for, interval=30)
    manager.start()
    tasks = list(manager.tasks.values())

    await manager.stop()

    assert len(tasks) == len(DataSetKey)
    assert all(task.done() for task in tasks)
    assert manager.tasks == {}


@pytest.mark.asyncio
async def test_refresh_logs_start_and_publish(caplog):
    caplog.set_level(logging.DEBUG, logger="admin_cache.services.refresh")
    store = CacheStore([DataSetKey.ORGANIZATIONS])
    manager = RefreshManager(store, CountingFetchers().fetcher_for, interval=0.01)

    await manager.refresh(DataSetKey.ORGANIZATIONS)

    messages = [r.getMessage() for r in caplog.records]
    assert "[0.01 second interval] Starting CC organizations discovery..." in messages
    assert "Caching CC organizations data..." in messages
    assert store.peek(DataSetKey.ORGANIZATIONS).connected


@pytest.mark.asyncio
async def test_readers_get_previous_result_while_refetch_is_stuck():
    store = CacheStore([DataSetKey.APPLICATIONS])
    release = asyncio.Event()
    calls = []

    async def fetch():
        calls.append(1)
        if len(calls) > 1:
            await release.wait()
        return DiscoveryResult.of([{"call": len(calls)}])

    manager = RefreshManager(store, lambda key: fetch, interval=0.01)
    manager.start()
    try:
        await wait_until(lambda: len(calls) == 2)

        result = await asyncio.wait_for(store.get(DataSetKey.APPLICATIONS), 0.1)

        assert result == DiscoveryResult(connected=True, items=[{"call": 1}])
    finally:
        await manager.stop()
