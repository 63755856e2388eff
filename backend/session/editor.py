"""
Editor session - authoritative pipeline graph for one editor.
Mutations are serialised by a lock; validation and layout always run on a snapshot.
"""

import random
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from layout import layout
from shared.models import Edge, Graph, LayoutResult, Node, Position, ValidationResult
from validator import validate

from .errors import InvalidLabelError, SelfLoopError, UnknownEdgeError, UnknownNodeError

# New nodes without a position land in a 400 x 300 box at (100, 100)
DROP_ORIGIN = (100.0, 100.0)
DROP_SPAN = (400.0, 300.0)


def _new_id() -> str:
    return str(uuid.uuid4())


class EditorSession:
    """Holds nodes and edges, enforces model invariants and keeps validation current."""

    def __init__(self, layout_config: Optional[Dict[str, Any]] = None):
        self._lock = threading.RLock()
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        self.layout_config: Dict[str, Any] = dict(layout_config or {})
        self._validation = validate([], [])

    # ---- read ----

    def snapshot(self) -> Graph:
        with self._lock:
            return Graph(nodes=list(self._nodes), edges=list(self._edges))

    @property
    def validation(self) -> ValidationResult:
        return self._validation

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {"nodes": len(self._nodes), "edges": len(self._edges)}

    def state(self) -> Dict[str, Any]:
        """Graph, its validation and counts, read together so they always agree."""
        with self._lock:
            return {"graph": self.snapshot(), "validation": self._validation, "stats": self.stats()}

    def get_node(self, node_id: str) -> Node:
        with self._lock:
            return self._nodes[self._node_index(node_id)]

    # ---- mutate ----

    def add_node(self, label: str, position: Optional[Position] = None) -> Node:
        label = (label or "").strip()
        if not label:
            raise InvalidLabelError("Node label must not be empty")
        if position is None:
            position = Position(
                x=random.random() * DROP_SPAN[0] + DROP_ORIGIN[0],
                y=random.random() * DROP_SPAN[1] + DROP_ORIGIN[1],
            )
        node = Node(id=_new_id(), label=label, position=position)
        with self._lock:
            self._nodes.append(node)
            self._revalidate()
        logger.info("Added node {} ({})", node.id, label)
        return node

    def connect(self, source: str, target: str) -> Edge:
        if source == target:
            logger.warning("Rejected self-connection on node {}", source)
            raise SelfLoopError(source)
        with self._lock:
            ids = {n.id for n in self._nodes}
            for nid in (source, target):
                if nid not in ids:
                    raise UnknownNodeError(nid)
            edge = Edge(id=_new_id(), source=source, target=target)
            self._edges.append(edge)
            self._revalidate()
        logger.info("Connected {} -> {}", source, target)
        return edge

    def move_node(self, node_id: str, x: float, y: float) -> Node:
        with self._lock:
            idx = self._node_index(node_id)
            node = self._nodes[idx].model_copy(update={"position": Position(x=x, y=y)})
            self._nodes[idx] = node
        return node

    def delete(self, node_ids: Iterable[str] = (), edge_ids: Iterable[str] = ()) -> Dict[str, List[str]]:
        """Delete a selection. Edges touching a deleted node go with it; unknown ids are ignored."""
        node_ids = set(node_ids or ())
        edge_ids = set(edge_ids or ())
        with self._lock:
            removed_nodes = [n.id for n in self._nodes if n.id in node_ids]
            removed_edges = [
                e.id for e in self._edges
                if e.id in edge_ids or e.source in node_ids or e.target in node_ids
            ]
            if not removed_nodes and not removed_edges:
                return {"nodeIds": [], "edgeIds": []}
            gone = set(removed_edges)
            self._nodes = [n for n in self._nodes if n.id not in node_ids]
            self._edges = [e for e in self._edges if e.id not in gone]
            self._revalidate()
        logger.info("Deleted {} node(s), {} edge(s)", len(removed_nodes), len(removed_edges))
        return {"nodeIds": removed_nodes, "edgeIds": removed_edges}

    def delete_node(self, node_id: str) -> Dict[str, List[str]]:
        with self._lock:
            self._node_index(node_id)
            return self.delete(node_ids=[node_id])

    def delete_edge(self, edge_id: str) -> Dict[str, List[str]]:
        with self._lock:
            if not any(e.id == edge_id for e in self._edges):
                raise UnknownEdgeError(edge_id)
            return self.delete(edge_ids=[edge_id])

    def clear(self) -> Dict[str, int]:
        with self._lock:
            removed = {"nodes": len(self._nodes), "edges": len(self._edges)}
            self._nodes = []
            self._edges = []
            self._revalidate()
        logger.info("Cleared graph ({} nodes, {} edges)", removed["nodes"], removed["edges"])
        return removed

    def auto_layout(
        self, direction: Optional[str] = None, layout_config: Optional[Dict[str, Any]] = None
    ) -> LayoutResult:
        """Lay out the current graph and write the new positions back. direction overrides the config."""
        config = dict(self.layout_config if layout_config is None else layout_config)
        if direction is not None:
            config["direction"] = direction
        with self._lock:
            result = layout(self._nodes, self._edges, **config)
            self._nodes = list(result.nodes)
        logger.info("Auto layout {}: {} node(s)", config.get("direction", "default"), len(result.nodes))
        return result

    # ---- internals ----

    def _node_index(self, node_id: str) -> int:
        for i, n in enumerate(self._nodes):
            if n.id == node_id:
                return i
        raise UnknownNodeError(node_id)

    def _revalidate(self) -> None:
        self._validation = validate(self._nodes, self._edges)
