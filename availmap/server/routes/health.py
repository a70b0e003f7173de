"""Health check endpoint."""

import time
from fastapi import APIRouter, Depends

from availmap import __version__
from availmap.errors import StoreReadError
from availmap.server.dependencies import get_store
from availmap.store.sqlite import SqliteSyncStore

router = APIRouter(prefix="/api", tags=["health"])

_start_time = time.time()


@router.get("/health")
async def health_check(store: SqliteSyncStore = Depends(get_store)):
    """Health check: returns status, uptime, store health."""
    uptime = int(time.time() - _start_time)

    store_status = "ok"
    try:
        await store.version()
    except StoreReadError:
        store_status = "error"

    return {
        "status": "ok",
        "uptime_seconds": uptime,
        "store": store_status,
        "version": __version__,
    }
