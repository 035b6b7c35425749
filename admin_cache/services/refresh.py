"""Background refresh loops, one per cached data set."""
import asyncio
import logging
from typing import Callable, Dict, Optional
from admin_cache.cache.store import CacheStore
from admin_cache.config import settings
from admin_cache.models.schemas import DataSetKey
from admin_cache.services.discovery import Fetcher
from admin_cache.util.timing import timer

logger = logging.getLogger(__name__)


class RefreshManager:
    """
    Runs a perpetual discover-publish-wait loop for each data set.

    Each key gets its own task so a slow data set (the deep user
    roster) never delays the others.
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher_for: Callable[[DataSetKey], Fetcher],
        interval: Optional[float] = None,
    ):
        """
        Initialize refresh manager.

        Args:
            store: Cache the loops publish into
            fetcher_for: Returns the fetch coroutine function for a key
            interval: Seconds to wait between publishes (defaults to
                ``cloud_controller_discovery_interval``)
        """
        self.store = store
        self.fetcher_for = fetcher_for
        self.interval = settings.cloud_controller_discovery_interval if interval is None else interval
        self.tasks: Dict[DataSetKey, asyncio.Task] = {}

    def start(self):
        """Start one refresh task per key in the store."""
        for key in self.store.keys():
            if key in self.tasks:
                continue
            self.tasks[key] = asyncio.create_task(
                self._refresh_forever(key), name=f"refresh-{key.value}"
            )

    async def stop(self):
        """Cancel every refresh task and wait for them to finish."""
        tasks = list(self.tasks.values())
        self.tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _refresh_forever(self, key: DataSetKey):
        fetch = self.fetcher_for(key)
        while True:
            await self.refresh(key, fetch)

    async def refresh(self, key: DataSetKey, fetch: Optional[Fetcher] = None):
        """
        Run one cycle for a key: discover, publish, then wait.

        The fetch runs without holding the slot. Publishing wakes all
        readers, after which the slot is held for up to the interval.

        Args:
            key: Data set to refresh
            fetch: Fetch coroutine function (defaults to ``fetcher_for(key)``)
        """
        fetch = fetch or self.fetcher_for(key)

        logger.debug(
            "[%s second interval] Starting CC %s discovery...", self.interval, key.value
        )
        async with timer(f"discover {key.value}"):
            result = await fetch()

        logger.debug("Caching CC %s data...", key.value)
        await self.store.publish(key, result, hold=self.interval)
