"""Duration logging for discoveries and other awaited work."""
import logging
import time
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def timer(label: str):
    """
    Log how long the wrapped block took, at DEBUG.

    Uses the monotonic clock, so wall-clock adjustments do not skew it.

    Args:
        label: Name of the timed work, e.g. ``discover applications``
    """
    start = time.monotonic()
    try:
        yield
    finally:
        logger.debug("[TIMING] %s: %.3fs", label, time.monotonic() - start)
