"""
Shared API state - sio and the editor session.
Initialized by main.py after creating app and services.
"""

from typing import Any, Optional

from session import EditorSession

# Set by main.py
sio: Any = None
session: Optional[EditorSession] = None


def init_api_state(sio_instance, editor_session: EditorSession):
    global sio, session
    sio = sio_instance
    session = editor_session


def state_payload() -> dict:
    """Current graph, validation and counts, as sent to clients after every change."""
    current = session.state()
    return {
        "graph": current["graph"].model_dump(mode="json"),
        "validation": current["validation"].model_dump(mode="json"),
        "stats": current["stats"],
    }


async def emit_graph_update() -> None:
    if sio is None or session is None:
        return
    await sio.emit("graph-update", state_payload())
