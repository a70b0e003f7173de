"""In-process document store with the same contract as the SQLite one."""

import json
from typing import Any, Dict, List, Mapping

from availmap.models.queries import decode_document, encode_document
from availmap.store.base import SyncStore


class MemorySyncStore(SyncStore):
    """Holds the document as its JSON encoding so reads never alias writes."""

    def __init__(self, initial: Mapping[str, Any] = None):
        super().__init__()
        self._body = encode_document(initial or {})
        self.version = 0

    async def read(self) -> Dict[str, List[Any]]:
        return decode_document(self._body)

    async def replace_all(self, mapping: Mapping[str, Any]) -> None:
        self._body = encode_document(mapping)
        self.version += 1
        await self.publish(json.loads(self._body))
