"""Server package - FastAPI app, routes and live websocket feed."""
