"""
FastAPI application factory for the availmap server.

Creates the app with all routes, lifespan management, and the live feed.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.responses import JSONResponse

from availmap import __version__
from availmap.config.loader import load_config, get_database_path
from availmap.engine.calendar import CalendarUniverse
from availmap.errors import StoreReadError, StoreWriteError
from availmap.server.models.common import ErrorResponse
from availmap.server.queries.schedule_queries import build_update_event
from availmap.server.websocket import ConnectionManager
from availmap.store.sqlite import SqliteSyncStore, open_database
from availmap.store.watcher import run_store_watcher

logger = logging.getLogger("availmap.server")


async def attach_live_feed(app: FastAPI) -> None:
    """Forward every store update to all websocket clients."""
    store = app.state.store
    universe = app.state.universe
    manager = app.state.ws_manager

    async def on_mapping(mapping):
        await manager.broadcast(build_update_event(mapping, universe))

    async def on_error(exc):
        await manager.broadcast({"type": "store_unavailable", "detail": str(exc)})

    app.state.unsubscribe = await store.subscribe(on_mapping, on_error)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage database connection and watcher lifecycle."""
    config = app.state.config if hasattr(app.state, "config") else load_config()
    app.state.config = config
    app.state.universe = CalendarUniverse.from_config(config)

    db = await open_database(get_database_path(config))
    app.state.db = db
    app.state.store = SqliteSyncStore(db)

    app.state.ws_manager = ConnectionManager()
    await attach_live_feed(app)

    stop_event = asyncio.Event()
    app.state.ws_stop_event = stop_event
    poll_interval = float(config.get("store", {}).get("poll_interval", 2.0))
    watcher_task = asyncio.create_task(
        run_store_watcher(app.state.store, poll_interval=poll_interval, stop_event=stop_event)
    )
    app.state.watcher_task = watcher_task

    yield

    # Shutdown
    stop_event.set()
    app.state.unsubscribe()
    watcher_task.cancel()
    try:
        await watcher_task
    except asyncio.CancelledError:
        pass
    await db.close()


def create_app(config: dict = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="availmap API",
        description="Shared availability calendar with a participant heatmap",
        version=__version__,
        lifespan=lifespan,
    )

    if config:
        app.state.config = config

    @app.exception_handler(StoreReadError)
    async def store_read_handler(request: Request, exc: StoreReadError):
        logger.warning("Store read failed on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="Schedule unavailable", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(StoreWriteError)
    async def store_write_handler(request: Request, exc: StoreWriteError):
        return JSONResponse(
            status_code=503,
            content=ErrorResponse(error="Could not save schedule, please retry", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Internal server error", detail=str(exc)).model_dump(),
        )

    # WebSocket endpoint: snapshot on connect, then broadcasts from the store feed
    @app.websocket("/ws/live")
    async def websocket_live(websocket: WebSocket):
        manager = websocket.app.state.ws_manager
        await manager.connect(websocket)
        try:
            store = websocket.app.state.store
            mapping = await store.read()
            await manager.send(websocket, build_update_event(mapping, websocket.app.state.universe))
            while True:
                data = await websocket.receive_text()
                if data == "ping":
                    await websocket.send_text('{"type":"pong"}')
        except WebSocketDisconnect:
            await manager.disconnect(websocket)
        except Exception:
            logger.exception("WebSocket connection failed")
            await manager.disconnect(websocket)

    from availmap.server.routes.health import router as health_router
    from availmap.server.routes.calendar import router as calendar_router
    from availmap.server.routes.schedule import router as schedule_router
    from availmap.server.routes.heatmap import router as heatmap_router

    app.include_router(health_router)
    app.include_router(calendar_router)
    app.include_router(schedule_router)
    app.include_router(heatmap_router)

    return app
