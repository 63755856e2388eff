"""Graph API - the editor session: nodes, edges, delete, clear, auto layout."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from db import get_layout_config
from session import SessionError, UnknownEdgeError, UnknownNodeError

from .. import state as api_state
from ..schemas import AddNodeRequest, AutoLayoutRequest, ConnectRequest, DeleteRequest, MoveNodeRequest

router = APIRouter()


def _error_response(e: SessionError) -> JSONResponse:
    status = 404 if isinstance(e, (UnknownNodeError, UnknownEdgeError)) else 400
    return JSONResponse(status_code=status, content={"error": str(e)})


@router.get("")
async def get_graph():
    return api_state.state_payload()


@router.post("/nodes")
async def add_node(body: AddNodeRequest):
    try:
        node = api_state.session.add_node(body.label, body.position)
    except SessionError as e:
        return _error_response(e)
    await api_state.emit_graph_update()
    return {"node": node.model_dump(mode="json"), **_validation_and_stats()}


@router.patch("/nodes/{node_id}/position")
async def move_node(node_id: str, body: MoveNodeRequest):
    try:
        node = api_state.session.move_node(node_id, body.x, body.y)
    except SessionError as e:
        return _error_response(e)
    await api_state.emit_graph_update()
    return {"node": node.model_dump(mode="json")}


@router.delete("/nodes/{node_id}")
async def delete_node(node_id: str):
    try:
        removed = api_state.session.delete_node(node_id)
    except SessionError as e:
        return _error_response(e)
    await api_state.emit_graph_update()
    return {"success": True, **removed, **_validation_and_stats()}


@router.post("/edges")
async def connect(body: ConnectRequest):
    try:
        edge = api_state.session.connect(body.source, body.target)
    except SessionError as e:
        return _error_response(e)
    await api_state.emit_graph_update()
    return {"edge": edge.model_dump(mode="json"), **_validation_and_stats()}


@router.delete("/edges/{edge_id}")
async def delete_edge(edge_id: str):
    try:
        removed = api_state.session.delete_edge(edge_id)
    except SessionError as e:
        return _error_response(e)
    await api_state.emit_graph_update()
    return {"success": True, **removed, **_validation_and_stats()}


@router.post("/delete")
async def delete_selection(body: DeleteRequest):
    removed = api_state.session.delete(body.node_ids, body.edge_ids)
    if removed["nodeIds"] or removed["edgeIds"]:
        await api_state.emit_graph_update()
    return {"success": True, **removed, **_validation_and_stats()}


@router.post("/clear")
async def clear_graph():
    removed = api_state.session.clear()
    await api_state.emit_graph_update()
    return {"success": True, "removed": removed, **_validation_and_stats()}


@router.post("/layout")
async def auto_layout(body: AutoLayoutRequest):
    """Lay out the session graph with the saved layout settings; body.direction overrides the saved one."""
    try:
        layout_config = await get_layout_config()
        result = api_state.session.auto_layout(body.direction, layout_config)
    except Exception as e:
        logger.exception("Auto layout error")
        return JSONResponse(status_code=500, content={"error": str(e) or "Failed to compute layout"})
    await api_state.emit_graph_update()
    return {"layout": result.model_dump(mode="json"), "validation": api_state.session.validation.model_dump(mode="json")}


def _validation_and_stats() -> dict:
    current = api_state.session.state()
    return {"validation": current["validation"].model_dump(mode="json"), "stats": current["stats"]}
