"""
SQLite database schema definition, migrations, and connection management.

The shared schedule is stored as one JSON document row so every write is
a whole-document replacement. Versioned migrations use PRAGMA user_version.
"""

import sqlite3
from pathlib import Path

# Current schema version - increment when adding migrations
CURRENT_SCHEMA_VERSION = 1


def get_connection(db_path: Path) -> sqlite3.Connection:
    """
    Get a database connection with proper configuration.

    Configures:
    - WAL mode so the server can read while the CLI writes
    - NORMAL synchronous for balance of safety/speed
    - Row factory for dict-like access
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    conn.execute("PRAGMA busy_timeout=5000")

    return conn


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Get current schema version from PRAGMA user_version."""
    cursor = conn.execute("PRAGMA user_version")
    return cursor.fetchone()[0]


def set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    """Set schema version using PRAGMA user_version."""
    conn.execute(f"PRAGMA user_version = {version}")


def ensure_database(conn: sqlite3.Connection) -> None:
    """
    Ensure database has correct schema, running migrations if needed.
    """
    current_version = get_schema_version(conn)

    if current_version < 1:
        _create_initial_schema(conn)
        set_schema_version(conn, 1)
        conn.commit()


def _create_initial_schema(conn: sqlite3.Connection) -> None:
    """Create the initial schema (version 1)."""

    # Single-row document: participant name -> list of ISO dates
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schedule_document (
            id INTEGER PRIMARY KEY CHECK (id = 1),
            body TEXT NOT NULL DEFAULT '{}',
            version INTEGER NOT NULL DEFAULT 0,
            updated_at TEXT
        )
    """)

    conn.execute("""
        INSERT OR IGNORE INTO schedule_document (id, body, version)
        VALUES (1, '{}', 0)
    """)
