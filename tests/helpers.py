"""Graph builders shared by the test modules."""

from typing import List, Tuple

from shared.models import Edge, Node


def make_nodes(*labels: str) -> List[Node]:
    """Nodes whose id equals their label."""
    return [Node(id=label, label=label) for label in labels]


def make_edges(*pairs: Tuple[str, str]) -> List[Edge]:
    return [Edge(id=f"e{i}", source=src, target=tgt) for i, (src, tgt) in enumerate(pairs)]


def make_graph(labels: str, *pairs: Tuple[str, str]) -> Tuple[List[Node], List[Edge]]:
    """make_graph("ABC", ("A", "B")) -> nodes A, B, C and edge A->B."""
    return make_nodes(*labels), make_edges(*pairs)
