"""Graph model shared by the validator, the layout engine and the editor session."""

from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field

Direction = Literal["LR", "RL", "TB", "BT"]


class Position(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)
    x: float = 0.0
    y: float = 0.0


class Node(BaseModel):
    """A pipeline stage. Positions are top-left corners."""
    model_config = ConfigDict(frozen=True)
    id: str
    label: str
    position: Position = Field(default_factory=Position)


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: str
    source: str
    target: str


class Graph(BaseModel):
    """Snapshot of the editor graph at one point in time."""
    model_config = ConfigDict(frozen=True)
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)


class LayoutResult(Graph):
    width: float = 0.0
    height: float = 0.0


class ValidationStatus(str, Enum):
    TOO_FEW_NODES = "too_few_nodes"
    DISCONNECTED = "disconnected"
    CYCLE = "cycle"
    VALID = "valid"


class ValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)
    valid: bool
    status: ValidationStatus
    message: str
