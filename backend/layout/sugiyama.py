"""
Sugiyama layered graph layout for pipeline graphs.

Implements the standard Sugiyama framework:
1. Cycle breaking (reverse DFS back edges)
2. Layer assignment (longest-path)
3. Dummy node insertion (for long edges)
4. Crossing minimization (barycenter heuristic, fixed number of passes)
5. Coordinate assignment (median-based with iterative refinement)
6. Orientation (LR / RL / TB / BT) and centre -> top-left conversion
"""

import itertools
import statistics
from typing import Any, Dict, Hashable, List, Optional, Sequence, Set, Tuple

import networkx as nx
from loguru import logger

from shared.graph import build_pipeline_graph, iter_back_edges
from shared.models import Edge, Node

from .constants import (
    ALIGN_PASSES,
    CROSSING_PASSES,
    DEFAULT_DIRECTION,
    DEFAULT_NODE_H,
    DEFAULT_NODE_SEP,
    DEFAULT_NODE_W,
    DEFAULT_RANK_SEP,
    DIRECTIONS,
)


def compute_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    direction: str = DEFAULT_DIRECTION,
    node_w: float = DEFAULT_NODE_W,
    node_h: float = DEFAULT_NODE_H,
    node_sep: float = DEFAULT_NODE_SEP,
    rank_sep: float = DEFAULT_RANK_SEP,
) -> Optional[Dict[str, Any]]:
    """
    Compute a layered layout for a pipeline graph.

    Returns {nodes: {id: {x, y, w, h}}, width, height} where (x, y) is the
    top-left corner and the drawing starts at (0, 0), or None if there are no nodes.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown layout direction: {direction!r}")

    G = build_pipeline_graph(nodes, edges)
    if G.number_of_nodes() == 0:
        return None

    real_ids = list(G.nodes())
    reversed_edges = _break_cycles(G)
    if reversed_edges:
        logger.debug("Reversed {} back edge(s) before ranking", len(reversed_edges))

    layers = _assign_layers(G)
    layers, dummy_nodes = _insert_dummy_nodes(G, layers)
    _minimize_crossings(G, layers)

    horizontal = direction in ("LR", "RL")
    # breadth: node extent inside a rank; depth: node extent along the rank axis
    breadth, depth = (node_h, node_w) if horizontal else (node_w, node_h)
    centers = _assign_coordinates(G, layers, dummy_nodes, breadth, depth, node_sep, rank_sep)

    corners: Dict[str, Tuple[float, float]] = {}
    for nid in real_ids:
        order_c, rank_c = centers[nid]
        cx, cy = _orient(direction, order_c, rank_c)
        corners[nid] = (cx - node_w / 2.0, cy - node_h / 2.0)

    min_x = min(x for x, _ in corners.values())
    min_y = min(y for _, y in corners.values())

    nodes_out: Dict[str, Dict[str, float]] = {}
    for nid, (x, y) in corners.items():
        nodes_out[nid] = {
            "x": round(x - min_x, 1),
            "y": round(y - min_y, 1),
            "w": node_w,
            "h": node_h,
        }

    width = round(max(p["x"] + p["w"] for p in nodes_out.values()), 1)
    height = round(max(p["y"] + p["h"] for p in nodes_out.values()), 1)

    return {"nodes": nodes_out, "width": width, "height": height}


def _orient(direction: str, order_c: float, rank_c: float) -> Tuple[float, float]:
    """Map (within-rank, rank) centre coordinates onto canvas (x, y)."""
    if direction == "LR":
        return rank_c, order_c
    if direction == "RL":
        return -rank_c, order_c
    if direction == "TB":
        return order_c, rank_c
    return order_c, -rank_c


# ---------------------------------------------------------------------------
# 1. Cycle breaking
# ---------------------------------------------------------------------------

def _break_cycles(G: nx.DiGraph) -> List[Tuple[str, str]]:
    """Reverse every DFS back edge (in node order) so the graph becomes acyclic."""
    adjacency = {n: list(G.successors(n)) for n in G.nodes()}
    back_edges = list(iter_back_edges(adjacency, list(G.nodes())))
    for u, v in back_edges:
        G.remove_edge(u, v)
        if not G.has_edge(v, u):
            G.add_edge(v, u)
    return back_edges


# ---------------------------------------------------------------------------
# 2. Layer assignment (longest path from sources)
# ---------------------------------------------------------------------------

def _assign_layers(G: nx.DiGraph) -> List[List[Hashable]]:
    """Assign each node to a layer using longest-path. Within a layer nodes keep input order."""
    node_layer: Dict[Hashable, int] = {}
    for n in nx.topological_sort(G):
        preds = list(G.predecessors(n))
        node_layer[n] = max(node_layer[p] for p in preds) + 1 if preds else 0

    max_layer = max(node_layer.values()) if node_layer else 0
    layers: List[List[Hashable]] = [[] for _ in range(max_layer + 1)]
    for n in G.nodes():
        layers[node_layer[n]].append(n)

    return layers


# ---------------------------------------------------------------------------
# 3. Dummy node insertion
# ---------------------------------------------------------------------------

def _insert_dummy_nodes(
    G: nx.DiGraph, layers: List[List[Hashable]]
) -> Tuple[List[List[Hashable]], Set[Hashable]]:
    """Insert dummy nodes for edges spanning more than one layer."""
    node_layer: Dict[Hashable, int] = {}
    for i, layer in enumerate(layers):
        for n in layer:
            node_layer[n] = i

    dummy_nodes: Set[Hashable] = set()
    counter = 0

    for u, v in list(G.edges()):
        lu, lv = node_layer[u], node_layer[v]
        if lv - lu <= 1:
            continue

        G.remove_edge(u, v)
        prev = u
        for step in range(1, lv - lu):
            counter += 1
            # tuple keys never collide with string node ids
            d = ("dummy", counter)
            dummy_nodes.add(d)
            G.add_edge(prev, d)
            layers[lu + step].append(d)
            node_layer[d] = lu + step
            prev = d
        G.add_edge(prev, v)

    return layers, dummy_nodes


# ---------------------------------------------------------------------------
# 4. Crossing minimization (barycenter heuristic)
# ---------------------------------------------------------------------------

def _count_crossings(G: nx.DiGraph, upper: List[Hashable], lower: List[Hashable]) -> int:
    """Count pairs of edges between two adjacent layers whose endpoints swap order."""
    lower_pos = {n: i for i, n in enumerate(lower)}
    ends = [
        (i, lower_pos[v])
        for i, u in enumerate(upper)
        for v in G.successors(u)
        if v in lower_pos
    ]
    return sum(
        1
        for (a_up, a_low), (b_up, b_low) in itertools.combinations(ends, 2)
        if (a_up - b_up) * (a_low - b_low) < 0
    )


def _total_crossings(G: nx.DiGraph, layers: List[List[Hashable]]) -> int:
    return sum(_count_crossings(G, upper, lower) for upper, lower in zip(layers, layers[1:]))


def _barycenter_sort(
    G: nx.DiGraph, fixed_layer: List[Hashable], free_layer: List[Hashable], downward: bool
) -> List[Hashable]:
    """
    Reorder free_layer by the mean position of its neighbours in fixed_layer.
    Ties keep their current order; nodes without neighbours keep their relative slot.
    """
    fixed_pos = {n: i for i, n in enumerate(fixed_layer)}
    current = {n: i for i, n in enumerate(free_layer)}

    anchored: List[Tuple[Hashable, float]] = []
    unanchored: List[Hashable] = []
    for n in free_layer:
        neighbors = G.predecessors(n) if downward else G.successors(n)
        relevant = [fixed_pos[nb] for nb in neighbors if nb in fixed_pos]
        if relevant:
            anchored.append((n, sum(relevant) / len(relevant)))
        else:
            unanchored.append(n)

    anchored.sort(key=lambda x: x[1])
    result = [n for n, _ in anchored]

    for u in unanchored:
        idx = current[u]
        best = len(result)
        for i, r in enumerate(result):
            if current[r] > idx:
                best = i
                break
        result.insert(best, u)

    return result


def _minimize_crossings(G: nx.DiGraph, layers: List[List[Hashable]], passes: int = CROSSING_PASSES) -> None:
    """Alternating down/up barycenter sweeps (in-place), keeping the best ordering seen."""
    if len(layers) <= 1:
        return

    best_order = [list(layer) for layer in layers]
    best_crossings = _total_crossings(G, layers)

    for iteration in range(passes):
        if best_crossings == 0:
            break
        if iteration % 2 == 0:
            for i in range(1, len(layers)):
                layers[i] = _barycenter_sort(G, layers[i - 1], layers[i], downward=True)
        else:
            for i in range(len(layers) - 2, -1, -1):
                layers[i] = _barycenter_sort(G, layers[i + 1], layers[i], downward=False)

        c = _total_crossings(G, layers)
        if c < best_crossings:
            best_crossings = c
            best_order = [list(layer) for layer in layers]

    for i in range(len(layers)):
        layers[i] = best_order[i]


# ---------------------------------------------------------------------------
# 5. Coordinate assignment (median-based, iterative)
# ---------------------------------------------------------------------------

def _slot_width(nid: Hashable, dummy_nodes: Set[Hashable], breadth: float) -> float:
    """Within-rank extent of a node; dummies are points."""
    return 0 if nid in dummy_nodes else breadth


def _assign_coordinates(
    G: nx.DiGraph,
    layers: List[List[Hashable]],
    dummy_nodes: Set[Hashable],
    breadth: float,
    depth: float,
    node_sep: float,
    rank_sep: float,
) -> Dict[Hashable, Tuple[float, float]]:
    """
    Assign centre coordinates (within-rank, rank) to every node.
    Rank coordinate comes from the layer index; within-rank coordinate starts
    from the slot index and is pulled toward the median of connected nodes.
    """
    positions: Dict[Hashable, Dict[str, float]] = {}
    for layer in layers:
        for slot, nid in enumerate(layer):
            positions[nid] = {"x": float(slot * (breadth + node_sep)), "w": _slot_width(nid, dummy_nodes, breadth)}

    sweep = list(range(1, len(layers))) + list(range(len(layers) - 2, -1, -1))
    for _ in range(ALIGN_PASSES):
        for layer_idx in sweep:
            _align_to_connected(G, layers[layer_idx], positions, node_sep)

    centers: Dict[Hashable, Tuple[float, float]] = {}
    for layer_idx, layer in enumerate(layers):
        rank_c = layer_idx * (depth + rank_sep) + depth / 2.0
        for nid in layer:
            centers[nid] = (_node_center(positions[nid]), rank_c)
    return centers


def _node_center(pos: Dict[str, float]) -> float:
    return pos["x"] + pos["w"] / 2.0


def _align_to_connected(
    G: nx.DiGraph,
    layer: List[Hashable],
    positions: Dict[Hashable, Dict[str, float]],
    node_sep: float,
) -> None:
    """Pull each node toward the median centre of its neighbours, then restore order and spacing."""
    ideal: Dict[Hashable, float] = {}
    for nid in layer:
        neighbor_centers = [
            _node_center(positions[nb])
            for nb in itertools.chain(G.predecessors(nid), G.successors(nid))
            if nb in positions
        ]
        if neighbor_centers:
            ideal[nid] = statistics.median(neighbor_centers) - positions[nid]["w"] / 2.0

    _place_with_order(layer, ideal, positions, node_sep)


def _place_with_order(
    layer: List[Hashable],
    ideal: Dict[Hashable, float],
    positions: Dict[Hashable, Dict[str, float]],
    node_sep: float,
) -> None:
    """Move nodes to their ideal offsets, then push neighbours apart so order and node_sep hold."""
    if not layer:
        return

    placed = [ideal.get(nid, positions[nid]["x"]) for nid in layer]
    widths = [positions[nid]["w"] for nid in layer]

    # no node starts before its left neighbour ends
    for i in range(1, len(layer)):
        placed[i] = max(placed[i], placed[i - 1] + widths[i - 1] + node_sep)
    # no node ends after its right neighbour starts
    for i in range(len(layer) - 2, -1, -1):
        placed[i] = min(placed[i], placed[i + 1] - node_sep - widths[i])

    for nid, x in zip(layer, placed):
        positions[nid]["x"] = x
