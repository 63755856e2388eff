"""Layout module - positions pipeline nodes with a layered (Sugiyama) layout."""

from typing import Sequence

from loguru import logger

from shared.models import Edge, LayoutResult, Node, Position

from .constants import (
    DEFAULT_DIRECTION,
    DEFAULT_NODE_H,
    DEFAULT_NODE_SEP,
    DEFAULT_NODE_W,
    DEFAULT_RANK_SEP,
    DIRECTIONS,
)
from .sugiyama import compute_layout


def layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    direction: str = DEFAULT_DIRECTION,
    node_w: float = DEFAULT_NODE_W,
    node_h: float = DEFAULT_NODE_H,
    node_sep: float = DEFAULT_NODE_SEP,
    rank_sep: float = DEFAULT_RANK_SEP,
) -> LayoutResult:
    """Return the same nodes with top-left positions replaced; edges are passed through unchanged."""
    nodes = list(nodes or [])
    edges = list(edges or [])

    result = compute_layout(nodes, edges, direction, node_w, node_h, node_sep, rank_sep)
    if result is None:
        return LayoutResult(nodes=[], edges=edges)

    placed = result["nodes"]
    layouted = [
        n.model_copy(update={"position": Position(x=placed[n.id]["x"], y=placed[n.id]["y"])})
        for n in nodes
    ]
    logger.debug("Laid out {} node(s) {} in {}x{}", len(layouted), direction, result["width"], result["height"])
    return LayoutResult(nodes=layouted, edges=edges, width=result["width"], height=result["height"])


__all__ = ["layout", "compute_layout", "DIRECTIONS"]
