"""
SQLite-backed document store.

Shares the application's aiosqlite connection. A version counter on the
document row lets the watcher notice writes made by other processes.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import aiosqlite

from availmap.errors import StoreReadError, StoreWriteError
from availmap.models.entities import DocumentSnapshot
from availmap.models.queries import (
    GET_DOCUMENT,
    GET_DOCUMENT_VERSION,
    REPLACE_DOCUMENT,
    decode_document,
    encode_document,
)
from availmap.models.schema import ensure_database, get_connection
from availmap.store.base import SyncStore

logger = logging.getLogger("availmap.store")


async def open_database(db_path: Path) -> aiosqlite.Connection:
    """Migrate the schema with a sync connection, then open the async one."""
    sync_conn = get_connection(db_path)
    ensure_database(sync_conn)
    sync_conn.close()

    db = await aiosqlite.connect(str(db_path))
    db.row_factory = aiosqlite.Row

    await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA synchronous=NORMAL")
    await db.execute("PRAGMA busy_timeout=5000")
    return db


class SqliteSyncStore(SyncStore):
    """Whole-document store on the schedule_document table."""

    def __init__(self, db: aiosqlite.Connection):
        super().__init__()
        self.db = db
        self._seen_version: Optional[int] = None

    async def snapshot(self) -> DocumentSnapshot:
        try:
            cursor = await self.db.execute(GET_DOCUMENT)
            row = await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as exc:
            raise StoreReadError(f"could not read schedule document: {exc}") from exc
        if row is None:
            return DocumentSnapshot()
        try:
            participants = decode_document(row[0])
        except ValueError as exc:
            raise StoreReadError(f"schedule document is corrupt: {exc}") from exc
        return DocumentSnapshot(participants=participants, version=int(row[1]), updated_at=row[2])

    async def read(self) -> Dict[str, List[Any]]:
        snapshot = await self.snapshot()
        self._seen_version = snapshot.version
        return snapshot.participants

    async def version(self) -> int:
        try:
            cursor = await self.db.execute(GET_DOCUMENT_VERSION)
            row = await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as exc:
            raise StoreReadError(f"could not read document version: {exc}") from exc
        return int(row[0]) if row else 0

    async def replace_all(self, mapping: Mapping[str, Any]) -> None:
        body = encode_document(mapping)
        try:
            await self.db.execute(REPLACE_DOCUMENT, (body,))
            await self.db.commit()
            self._seen_version = await self.version()
        except (aiosqlite.Error, ValueError, StoreReadError) as exc:
            logger.error("Schedule document write failed: %s", exc)
            raise StoreWriteError(f"could not write schedule document: {exc}") from exc
        await self.publish(json.loads(body))

    async def poll_once(self) -> bool:
        """
        Publish the document if its version moved since the last read or
        write through this store. Returns True when something was published.
        """
        current = await self.version()
        if current == self._seen_version:
            return False
        snapshot = await self.snapshot()
        self._seen_version = snapshot.version
        await self.publish(snapshot.participants)
        return True
