"""
Background task that keeps subscribers of a SqliteSyncStore current.

Writes made through the store publish immediately; this loop picks up
writes from other processes (the CLI, a second server) by polling the
document version.
"""

import asyncio
import logging
from typing import Optional

from availmap.errors import StoreReadError
from availmap.store.sqlite import SqliteSyncStore

logger = logging.getLogger("availmap.store")


async def run_store_watcher(
    store: SqliteSyncStore,
    poll_interval: float = 2.0,
    stop_event: Optional[asyncio.Event] = None,
):
    """
    Poll the store until stop_event is set.

    Only polls while the store has subscribers. Read failures are passed
    to subscribers' error callbacks and polling continues.

    Args:
        store: Store to poll
        poll_interval: Seconds between polls
        stop_event: Event to signal shutdown
    """
    stop = stop_event or asyncio.Event()

    while not stop.is_set():
        if store.has_subscribers:
            try:
                await store.poll_once()
            except StoreReadError as exc:
                logger.warning("Store poll failed: %s", exc)
                await store.publish_error(exc)

        # Wait for poll_interval or until stopped
        try:
            await asyncio.wait_for(stop.wait(), timeout=poll_interval)
            break  # stop was set
        except asyncio.TimeoutError:
            pass  # Normal timeout, continue polling
