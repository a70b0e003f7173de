"""Store package - shared participant document and its live feed."""

from .base import SyncStore
from .memory import MemorySyncStore
from .sqlite import SqliteSyncStore, open_database
from .watcher import run_store_watcher

__all__ = [
    "SyncStore",
    "MemorySyncStore",
    "SqliteSyncStore",
    "open_database",
    "run_store_watcher",
]
