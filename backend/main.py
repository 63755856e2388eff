"""
Pipeline Editor Backend - FastAPI + Socket.io entry point.
Serves the editor session (graph, validation status, auto layout) to the canvas frontend.
Run with: uvicorn main:asgi_app
"""

from pathlib import Path

import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from api import register_routes
from api import state as api_state
from session import EditorSession

# Socket.io
sio = socketio.AsyncServer(async_mode="asgi", cors_allowed_origins="*")
app = FastAPI(title="Pipeline Editor Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One shared editor session per process
editor_session = EditorSession()

register_routes(app, sio, editor_session)

# Frontend static files
FRONTEND_DIR = Path(__file__).parent.parent / "frontend"

# Static file serving - MUST come after all API routes
if FRONTEND_DIR.exists():
    app.mount("/", StaticFiles(directory=str(FRONTEND_DIR), html=True), name="static")


# Socket.io events
@sio.event
async def connect(sid, environ, auth):
    logger.info("Client connected: {}", sid)
    await sio.emit("graph-update", api_state.state_payload(), to=sid)


@sio.event
def disconnect(sid):
    logger.info("Client disconnected: {}", sid)


# ASGI app for uvicorn (Socket.io + FastAPI)
asgi_app = socketio.ASGIApp(sio, app)
