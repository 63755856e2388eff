"""API route modules."""

from fastapi import FastAPI

from session import EditorSession

from . import graph, pipeline, settings
from ..state import init_api_state


def register_routes(app: FastAPI, sio, editor_session: EditorSession):
    """Register all API routers. Call after app, sio, session are created."""
    init_api_state(sio, editor_session)

    app.include_router(graph.router, prefix="/api/graph", tags=["graph"])
    app.include_router(pipeline.router, prefix="/api/pipeline", tags=["pipeline"])
    app.include_router(settings.router, prefix="/api/settings", tags=["settings"])
