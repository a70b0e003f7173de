"""Open /ws/live sockets and fan-out of schedule events."""

import asyncio
import json
import logging
from typing import Any, Dict, Set

from fastapi import WebSocket

logger = logging.getLogger("availmap.server")


def encode_event(event: Dict[str, Any]) -> str:
    # Dates go out as ISO strings, names unescaped
    return json.dumps(event, default=str, ensure_ascii=False)


class ConnectionManager:
    """Clients of the live schedule feed."""

    def __init__(self):
        self.clients: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        async with self._lock:
            self.clients.add(websocket)

    async def disconnect(self, websocket: WebSocket):
        async with self._lock:
            self.clients.discard(websocket)

    async def send(self, websocket: WebSocket, event: Dict[str, Any]):
        await websocket.send_text(encode_event(event))

    async def broadcast(self, event: Dict[str, Any]):
        """Push an event to every client; sockets that fail to send are dropped."""
        async with self._lock:
            if not self.clients:
                return
            data = encode_event(event)
            gone = set()
            for websocket in self.clients:
                try:
                    await websocket.send_text(data)
                except Exception as exc:
                    logger.debug("Live feed send failed: %s", exc)
                    gone.add(websocket)
            if gone:
                logger.info("Dropping %d closed live feed client(s)", len(gone))
                self.clients -= gone
