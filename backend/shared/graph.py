"""
Graph utilities for pipeline nodes and edges.
Shared by validation (cycle detection) and layout (cycle breaking, ranking).
"""

from typing import Dict, Iterable, Iterator, List, Sequence, Set, Tuple

import networkx as nx

from .models import Edge, Node


def build_adjacency(nodes: Sequence[Node], edges: Sequence[Edge]) -> Dict[str, List[str]]:
    """Adjacency list source -> targets in edge order. Edges with an unknown endpoint are skipped."""
    adjacency: Dict[str, List[str]] = {n.id: [] for n in nodes or []}
    for e in edges or []:
        if e.source in adjacency and e.target in adjacency:
            adjacency[e.source].append(e.target)
    return adjacency


def connected_node_ids(edges: Sequence[Edge]) -> Set[str]:
    """Ids that appear as source or target of at least one edge."""
    ids: Set[str] = set()
    for e in edges or []:
        ids.add(e.source)
        ids.add(e.target)
    return ids


def iter_back_edges(
    adjacency: Dict[str, List[str]], roots: Iterable[str]
) -> Iterator[Tuple[str, str]]:
    """
    Depth-first traversal from every unvisited root, yielding back edges
    (u, v) where v is on the current traversal path.

    Uses an explicit stack. A node leaves on_stack when all its successors
    are done but stays in visited, so cross edges are never reported.
    """
    visited: Set[str] = set()
    on_stack: Set[str] = set()

    for root in roots:
        if root in visited or root not in adjacency:
            continue
        visited.add(root)
        on_stack.add(root)
        stack = [(root, iter(adjacency[root]))]
        while stack:
            node, successors = stack[-1]
            for succ in successors:
                if succ in on_stack:
                    yield node, succ
                elif succ not in visited and succ in adjacency:
                    visited.add(succ)
                    on_stack.add(succ)
                    stack.append((succ, iter(adjacency[succ])))
                    break
            else:
                stack.pop()
                on_stack.discard(node)


def has_cycle(adjacency: Dict[str, List[str]], roots: Iterable[str]) -> bool:
    return next(iter_back_edges(adjacency, roots), None) is not None


def build_pipeline_graph(nodes: Sequence[Node], edges: Sequence[Edge]) -> nx.DiGraph:
    """
    Build a DiGraph keyed by node id, in node order (first occurrence wins).
    Parallel edges collapse; self-loops and edges with unknown endpoints are dropped.
    """
    G = nx.DiGraph()
    for n in nodes or []:
        if n.id not in G:
            G.add_node(n.id)
    for e in edges or []:
        if e.source == e.target:
            continue
        if e.source in G and e.target in G:
            G.add_edge(e.source, e.target)
    return G
