"""Test fixtures for server tests.

Creates a deterministic schedule database for testing API endpoints.
"""

import copy

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from availmap.config.loader import DEFAULT_CONFIG
from availmap.engine.calendar import CalendarUniverse
from availmap.models.queries import write_document
from availmap.models.schema import get_connection, ensure_database
from availmap.server.app import create_app
from availmap.server.websocket import ConnectionManager
from availmap.store.sqlite import SqliteSyncStore, open_database

# Lee's September date lies outside the July/August window and is ignored.
TEST_DOCUMENT = {
    "Kim": ["2025-07-04", "2025-07-05"],
    "Lee": ["2025-07-05", "2025-09-15"],
    "Park": ["2025-08-15"],
}


@pytest.fixture
def test_db_path(tmp_path):
    """Create a temporary database path."""
    return tmp_path / "test_server.db"


@pytest.fixture
def populated_db(test_db_path):
    """Create the schema and store the test document."""
    conn = get_connection(test_db_path)
    ensure_database(conn)
    write_document(conn, TEST_DOCUMENT)
    conn.close()
    return test_db_path


@pytest.fixture
def server_config(populated_db):
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["database_path"] = str(populated_db)
    config["store"]["poll_interval"] = 0.05
    return config


@pytest_asyncio.fixture
async def server_app(server_config, populated_db):
    """App with state set up by hand instead of through the lifespan."""
    app = create_app(config=server_config)

    db = await open_database(populated_db)
    app.state.db = db
    app.state.store = SqliteSyncStore(db)
    app.state.universe = CalendarUniverse.from_config(server_config)
    app.state.ws_manager = ConnectionManager()

    yield app

    await db.close()


@pytest_asyncio.fixture
async def client(server_app):
    """Create an async test client against the populated database."""
    transport = ASGITransport(app=server_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
