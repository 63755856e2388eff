"""Pipeline API - stateless validate and layout over a posted graph snapshot."""

from fastapi import APIRouter

from layout import layout
from validator import validate

from ..schemas import GraphRequest, LayoutRequest

router = APIRouter()


@router.post("/validate")
async def validate_route(body: GraphRequest):
    result = validate(body.nodes, body.edges)
    return {"validation": result.model_dump(mode="json")}


@router.post("/layout")
async def layout_route(body: LayoutRequest):
    result = layout(body.nodes, body.edges, body.direction)
    return {"layout": result.model_dump(mode="json")}
