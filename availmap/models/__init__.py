"""Models package - database schema, entities, and queries."""

from .schema import get_connection, ensure_database, get_schema_version
from .entities import SubmitResult, DocumentSnapshot

__all__ = [
    "get_connection",
    "ensure_database",
    "get_schema_version",
    "SubmitResult",
    "DocumentSnapshot",
]
