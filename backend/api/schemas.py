"""Pydantic request schemas for API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shared.models import Direction, Edge, Node, Position


class AddNodeRequest(BaseModel):
    label: str = Field(..., description="Stage name shown on the node")
    position: Optional[Position] = None


class MoveNodeRequest(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)
    x: float
    y: float


class ConnectRequest(BaseModel):
    source: str
    target: str


class DeleteRequest(BaseModel):
    """Selection to delete; nodes take their incident edges with them."""
    model_config = ConfigDict(populate_by_name=True)
    node_ids: List[str] = Field(default_factory=list, alias="nodeIds")
    edge_ids: List[str] = Field(default_factory=list, alias="edgeIds")


class AutoLayoutRequest(BaseModel):
    direction: Optional[Direction] = None


class GraphRequest(BaseModel):
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)


class LayoutRequest(GraphRequest):
    direction: Direction = "LR"
