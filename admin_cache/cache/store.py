"""In-memory cache of discovery results, one slot per data set."""
import asyncio
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional
from admin_cache.models.schemas import DataSetKey, DiscoveryResult


@dataclass
class CacheSlot:
    """Last published result for one data set plus its condition."""
    condition: asyncio.Condition = field(default_factory=asyncio.Condition)
    result: Optional[DiscoveryResult] = None


class CacheStore:
    """
    Single-writer, many-reader store of discovery results.

    Readers block in ``get`` until the slot has been published once.
    The refresh loop for a key is the only caller of ``publish`` for
    that key.
    """

    def __init__(self, keys: Iterable[DataSetKey] = DataSetKey):
        """Create one empty slot per key."""
        self._slots: Dict[DataSetKey, CacheSlot] = {key: CacheSlot() for key in keys}

    def keys(self) -> list[DataSetKey]:
        """Keys this store holds slots for."""
        return list(self._slots)

    async def get(self, key: DataSetKey) -> DiscoveryResult:
        """
        Return the latest result for a key.

        Waits, without timeout, until the first publish.

        Args:
            key: Data set to read

        Returns:
            The last published result (treat as read-only)
        """
        slot = self._slots[key]
        async with slot.condition:
            await slot.condition.wait_for(lambda: slot.result is not None)
            return slot.result

    def peek(self, key: DataSetKey) -> Optional[DiscoveryResult]:
        """Return the latest result, or None if never published. Never blocks."""
        return self._slots[key].result

    async def publish(self, key: DataSetKey, result: DiscoveryResult, hold: Optional[float] = None):
        """
        Replace the result for a key and wake every blocked reader.

        Args:
            key: Data set to write
            result: Complete result to store
            hold: If given, keep waiting on the slot for up to this many
                seconds (or until woken) before returning
        """
        slot = self._slots[key]
        async with slot.condition:
            slot.result = result
            slot.condition.notify_all()
            if hold is not None:
                await self._wait_locked(slot, hold)

    async def wake(self, key: DataSetKey):
        """Cut short a ``publish`` that is holding the slot."""
        slot = self._slots[key]
        async with slot.condition:
            slot.condition.notify_all()

    @staticmethod
    async def _wait_locked(slot: CacheSlot, timeout: float):
        try:
            await asyncio.wait_for(slot.condition.wait(), timeout)
        except asyncio.TimeoutError:
            pass
