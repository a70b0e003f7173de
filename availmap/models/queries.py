"""
Named SQL queries for availmap.

Centralizes the document queries shared by the async store and the CLI.
"""

import json
import sqlite3
from datetime import date
from typing import Any, Dict, List, Mapping

GET_DOCUMENT = """
    SELECT body, version, updated_at FROM schedule_document WHERE id = 1
"""

GET_DOCUMENT_VERSION = """
    SELECT version FROM schedule_document WHERE id = 1
"""

REPLACE_DOCUMENT = """
    INSERT INTO schedule_document (id, body, version, updated_at)
    VALUES (1, ?, 1, datetime('now'))
    ON CONFLICT(id) DO UPDATE SET
        body = excluded.body,
        version = schedule_document.version + 1,
        updated_at = excluded.updated_at
"""


def encode_document(mapping: Mapping[str, Any]) -> str:
    """Serialize a participant mapping as sorted, de-duplicated ISO strings."""
    body: Dict[str, List[str]] = {}
    for name, values in mapping.items():
        body[str(name)] = sorted({v.isoformat() if isinstance(v, date) else str(v) for v in values})
    return json.dumps(body, ensure_ascii=False, separators=(",", ":"))


def decode_document(raw: str) -> Dict[str, List[Any]]:
    """Parse a stored body. Raises ValueError if it is not a JSON object."""
    decoded = json.loads(raw or "{}")
    if not isinstance(decoded, dict):
        raise ValueError("schedule document is not a JSON object")
    return {
        str(name): list(values) if isinstance(values, list) else []
        for name, values in decoded.items()
    }


def read_document(conn: sqlite3.Connection) -> Dict[str, List[Any]]:
    """Synchronous read used by the CLI."""
    row = conn.execute(GET_DOCUMENT).fetchone()
    if row is None:
        return {}
    return decode_document(row[0])


def write_document(conn: sqlite3.Connection, mapping: Mapping[str, Any]) -> None:
    """Synchronous whole-document replacement used by the CLI."""
    conn.execute(REPLACE_DOCUMENT, (encode_document(mapping),))
    conn.commit()
