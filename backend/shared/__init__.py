"""Shared graph model and utilities for validator, layout and session."""

from .graph import build_adjacency, build_pipeline_graph, connected_node_ids, has_cycle, iter_back_edges
from .models import (
    Direction,
    Edge,
    Graph,
    LayoutResult,
    Node,
    Position,
    ValidationResult,
    ValidationStatus,
)

__all__ = [
    "Direction",
    "Edge",
    "Graph",
    "LayoutResult",
    "Node",
    "Position",
    "ValidationResult",
    "ValidationStatus",
    "build_adjacency",
    "build_pipeline_graph",
    "connected_node_ids",
    "has_cycle",
    "iter_back_edges",
]
