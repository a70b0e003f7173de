"""Tests for the WebSocket endpoint /ws/live.

Uses starlette.testclient.TestClient, which also runs the app lifespan
(database, store feed and watcher).
"""

import json

from starlette.testclient import TestClient

from availmap.models.queries import write_document
from availmap.models.schema import get_connection
from availmap.server.app import create_app


def receive_json(ws):
    return json.loads(ws.receive_text())


def receive_until(ws, predicate, limit=20):
    """Read messages until one matches; the watcher may interleave updates."""
    for _ in range(limit):
        message = receive_json(ws)
        if predicate(message):
            return message
    raise AssertionError("expected message never arrived")


class TestWebSocketEndpoint:
    """Tests for the /ws/live WebSocket endpoint."""

    def test_snapshot_sent_on_connect(self, server_config):
        with TestClient(create_app(config=server_config)) as client:
            with client.websocket_connect("/ws/live") as ws:
                snapshot = receive_json(ws)
                assert snapshot["type"] == "schedule_update"
                assert sorted(snapshot["participants"]) == ["Kim", "Lee", "Park"]
                assert snapshot["max_count"] == 2

    def test_ping_pong(self, server_config):
        with TestClient(create_app(config=server_config)) as client:
            with client.websocket_connect("/ws/live") as ws:
                receive_json(ws)
                for _ in range(3):
                    ws.send_text("ping")
                    assert receive_until(ws, lambda m: m["type"] == "pong")

    def test_submission_is_broadcast(self, server_config):
        with TestClient(create_app(config=server_config)) as client:
            with client.websocket_connect("/ws/live") as ws:
                receive_json(ws)
                resp = client.post("/api/submissions", json={"name": "Choi", "dates": ["2025-07-05"]})
                assert resp.status_code == 200

                update = receive_until(ws, lambda m: "Choi" in m.get("participants", {}))
                counts = {c["date"]: c["count"] for c in update["heatmap"]}
                assert counts["2025-07-05"] == 3

    def test_external_write_is_broadcast(self, server_config, populated_db):
        """A write by another process reaches clients through the watcher."""
        with TestClient(create_app(config=server_config)) as client:
            with client.websocket_connect("/ws/live") as ws:
                receive_json(ws)
                conn = get_connection(populated_db)
                try:
                    write_document(conn, {"Yoon": ["2025-08-30"]})
                finally:
                    conn.close()

                update = receive_until(ws, lambda m: "Yoon" in m.get("participants", {}))
                assert update["participants"] == {"Yoon": ["2025-08-30"]}

    def test_disconnect_cleans_up(self, server_config):
        app = create_app(config=server_config)
        with TestClient(app) as client:
            with client.websocket_connect("/ws/live") as ws:
                receive_json(ws)
                ws.send_text("ping")
                receive_until(ws, lambda m: m["type"] == "pong")

        assert not app.state.ws_manager.clients
