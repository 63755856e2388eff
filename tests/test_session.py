"""Tests for the editor session: invariants at the edit boundary and live validation."""

import threading

import pytest

from session import (
    EditorSession,
    InvalidLabelError,
    SelfLoopError,
    SessionError,
    UnknownEdgeError,
    UnknownNodeError,
)
from shared.models import Position, ValidationStatus
from validator import validate


@pytest.fixture
def session() -> EditorSession:
    return EditorSession()


def _pipeline(session, *labels):
    nodes = [session.add_node(label) for label in labels]
    edges = [session.connect(a.id, b.id) for a, b in zip(nodes, nodes[1:])]
    return nodes, edges


class TestAddNode:
    def test_starts_empty_and_invalid(self, session):
        assert session.stats() == {"nodes": 0, "edges": 0}
        assert session.validation.status == ValidationStatus.TOO_FEW_NODES

    def test_label_is_stripped(self, session):
        node = session.add_node("  Extract ")
        assert node.label == "Extract"
        assert session.snapshot().nodes == [node]

    @pytest.mark.parametrize("label", ["", "   ", None])
    def test_empty_label_rejected(self, session, label):
        with pytest.raises(InvalidLabelError):
            session.add_node(label)
        assert session.stats()["nodes"] == 0

    def test_ids_are_unique(self, session):
        ids = {session.add_node("n").id for _ in range(50)}
        assert len(ids) == 50

    def test_random_drop_position(self, session):
        for _ in range(20):
            p = session.add_node("n").position
            assert 100 <= p.x < 500
            assert 100 <= p.y < 400

    def test_explicit_position(self, session):
        node = session.add_node("n", Position(x=1, y=2))
        assert node.position == Position(x=1, y=2)


class TestConnect:
    def test_self_loop_rejected(self, session):
        a = session.add_node("A")
        with pytest.raises(SelfLoopError) as exc:
            session.connect(a.id, a.id)
        assert str(exc.value) == "Self-connections are not allowed!"
        assert session.stats()["edges"] == 0

    def test_unknown_endpoint_rejected(self, session):
        a = session.add_node("A")
        with pytest.raises(UnknownNodeError):
            session.connect(a.id, "ghost")
        with pytest.raises(UnknownNodeError):
            session.connect("ghost", a.id)

    def test_errors_are_value_errors(self):
        assert issubclass(SessionError, ValueError)

    def test_parallel_edges_allowed(self, session):
        a, b = session.add_node("A"), session.add_node("B")
        e1 = session.connect(a.id, b.id)
        e2 = session.connect(a.id, b.id)
        assert e1.id != e2.id
        assert session.stats()["edges"] == 2
        assert session.validation.valid

    def test_validation_follows_edits(self, session):
        a, b = session.add_node("A"), session.add_node("B")
        assert session.validation.message == "Unconnected: A, B"
        session.connect(a.id, b.id)
        assert session.validation.valid
        session.connect(b.id, a.id)
        assert session.validation.status == ValidationStatus.CYCLE


class TestDelete:
    def test_node_delete_cascades_to_edges(self, session):
        (a, b, c), (ab, bc) = _pipeline(session, "A", "B", "C")
        removed = session.delete(node_ids=[b.id])
        assert removed == {"nodeIds": [b.id], "edgeIds": [ab.id, bc.id]}
        snap = session.snapshot()
        assert [n.id for n in snap.nodes] == [a.id, c.id]
        assert snap.edges == []
        assert session.validation.message == "Unconnected: A, C"

    def test_edge_delete_keeps_nodes(self, session):
        (a, b), (ab,) = _pipeline(session, "A", "B")
        session.delete(edge_ids=[ab.id])
        assert session.stats() == {"nodes": 2, "edges": 0}
        assert session.validation.status == ValidationStatus.DISCONNECTED

    def test_unknown_ids_ignored(self, session):
        _pipeline(session, "A", "B")
        assert session.delete(node_ids=["x"], edge_ids=["y"]) == {"nodeIds": [], "edgeIds": []}
        assert session.stats() == {"nodes": 2, "edges": 1}

    def test_single_deletes_raise_on_unknown(self, session):
        with pytest.raises(UnknownNodeError):
            session.delete_node("x")
        with pytest.raises(UnknownEdgeError):
            session.delete_edge("y")

    def test_single_deletes(self, session):
        (a, b, c), (ab, bc) = _pipeline(session, "A", "B", "C")
        assert session.delete_edge(bc.id) == {"nodeIds": [], "edgeIds": [bc.id]}
        assert session.delete_node(a.id) == {"nodeIds": [a.id], "edgeIds": [ab.id]}
        assert session.stats() == {"nodes": 2, "edges": 0}

    def test_clear(self, session):
        _pipeline(session, "A", "B", "C")
        assert session.clear() == {"nodes": 3, "edges": 2}
        assert session.stats() == {"nodes": 0, "edges": 0}
        assert session.validation.status == ValidationStatus.TOO_FEW_NODES


class TestMoveAndLayout:
    def test_move_node(self, session):
        a = session.add_node("A")
        moved = session.move_node(a.id, 10, 20)
        assert moved.id == a.id
        assert session.get_node(a.id).position == Position(x=10, y=20)

    def test_move_unknown(self, session):
        with pytest.raises(UnknownNodeError):
            session.move_node("ghost", 0, 0)

    def test_auto_layout_writes_positions(self, session):
        (a, b), _ = _pipeline(session, "A", "B")
        before = session.validation
        result = session.auto_layout()
        snap = session.snapshot()
        assert snap.nodes == result.nodes
        assert snap.nodes[0].position == Position(x=0, y=0)
        assert snap.nodes[1].position == Position(x=280, y=0)
        assert session.validation == before

    def test_auto_layout_direction_override(self, session):
        _pipeline(session, "A", "B")
        session.layout_config = {"direction": "LR", "node_w": 100, "node_h": 50, "node_sep": 10, "rank_sep": 20}
        session.auto_layout("TB")
        assert [n.position for n in session.snapshot().nodes] == [Position(x=0, y=0), Position(x=0, y=70)]

    def test_auto_layout_explicit_config(self, session):
        _pipeline(session, "A", "B")
        session.auto_layout(layout_config={"direction": "RL"})
        assert [n.position.x for n in session.snapshot().nodes] == [280, 0]

    def test_auto_layout_empty(self, session):
        result = session.auto_layout()
        assert result.nodes == [] and result.edges == []

    def test_snapshot_is_detached(self, session):
        _pipeline(session, "A", "B")
        snap = session.snapshot()
        session.clear()
        assert len(snap.nodes) == 2


class TestState:
    def test_state_matches_graph(self, session):
        _pipeline(session, "A", "B")
        current = session.state()
        assert current["graph"] == session.snapshot()
        assert current["validation"] == validate(current["graph"].nodes, current["graph"].edges)
        assert current["stats"] == {"nodes": 2, "edges": 1}

    def test_state_consistent_under_concurrent_edits(self, session):
        stop = threading.Event()

        def writer():
            while not stop.is_set():
                a, b = session.add_node("A"), session.add_node("B")
                session.connect(a.id, b.id)
                session.delete(node_ids=[a.id])

        thread = threading.Thread(target=writer)
        thread.start()
        try:
            for _ in range(300):
                current = session.state()
                graph = current["graph"]
                assert current["stats"] == {"nodes": len(graph.nodes), "edges": len(graph.edges)}
                assert current["validation"] == validate(graph.nodes, graph.edges)
        finally:
            stop.set()
            thread.join()

    def test_move_rejects_non_finite(self, session):
        a = session.add_node("A", Position(x=1, y=1))
        with pytest.raises(ValueError):
            session.move_node(a.id, float("nan"), 0)
        assert session.get_node(a.id).position == Position(x=1, y=1)
