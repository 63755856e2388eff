"""
Validator module - pipeline validity of a graph snapshot.
Checks run in fixed priority; the first failing check is the only one reported:
too few nodes -> unconnected nodes -> cycle -> valid.
"""

from typing import Sequence

from shared.graph import build_adjacency, connected_node_ids, has_cycle
from shared.models import Edge, Node, ValidationResult, ValidationStatus

MIN_NODES = 2

MSG_TOO_FEW_NODES = f"Pipeline needs at least {MIN_NODES} nodes"
MSG_CYCLE = "Pipeline contains a cycle!"
MSG_VALID = "Valid DAG ✓"


def validate(nodes: Sequence[Node], edges: Sequence[Edge]) -> ValidationResult:
    """
    Classify (nodes, edges) as too_few_nodes | disconnected | cycle | valid.

    "Disconnected" only means some node touches no edge. Two separate
    sub-pipelines where every node has an edge still pass.
    """
    nodes = list(nodes or [])
    edges = list(edges or [])

    if len(nodes) < MIN_NODES:
        return ValidationResult(valid=False, status=ValidationStatus.TOO_FEW_NODES, message=MSG_TOO_FEW_NODES)

    connected = connected_node_ids(edges)
    unconnected = [n for n in nodes if n.id not in connected]
    if unconnected:
        return ValidationResult(
            valid=False,
            status=ValidationStatus.DISCONNECTED,
            message="Unconnected: " + ", ".join(n.label for n in unconnected),
        )

    adjacency = build_adjacency(nodes, edges)
    if has_cycle(adjacency, (n.id for n in nodes)):
        return ValidationResult(valid=False, status=ValidationStatus.CYCLE, message=MSG_CYCLE)

    return ValidationResult(valid=True, status=ValidationStatus.VALID, message=MSG_VALID)


__all__ = ["validate", "MIN_NODES"]
