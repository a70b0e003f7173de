"""FastAPI dependency injection for the store, calendar and config."""

from fastapi import Request

from availmap.engine.calendar import CalendarUniverse
from availmap.store.sqlite import SqliteSyncStore


async def get_store(request: Request) -> SqliteSyncStore:
    """Get the shared document store from app state."""
    return request.app.state.store


def get_universe(request: Request) -> CalendarUniverse:
    """Get the calendar universe built from config at startup."""
    return request.app.state.universe


def get_config(request: Request) -> dict:
    """Get the loaded config from app state."""
    return request.app.state.config
