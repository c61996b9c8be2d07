"""
Tests for the graph index.

Run with:
    python -m pytest lineage_explorer/tests/test_graph_index.py -v
"""

import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from lineage_explorer.models import Component, ComponentType, Edge, WarningKind
from lineage_explorer.processor import GraphIndex


def _components(*ids):
    return [Component(id=cid, type=ComponentType.TABLE) for cid in ids]


def test_adjacency_in_input_order():
    """Outgoing and incoming edges keep input order."""
    index = GraphIndex(
        _components("a", "b", "c"),
        [Edge("e1", "a", "b"), Edge("e2", "a", "c"), Edge("e3", "b", "c")],
    )

    assert [e.id for e in index.outgoing_edges("a")] == ["e1", "e2"]
    assert [e.id for e in index.incoming_edges("c")] == ["e2", "e3"]
    assert index.outgoing_edges("c") == (), "Sink should have no outgoing edges"
    assert index.incoming_edges("missing") == ()


def test_component_lookup():
    index = GraphIndex(_components("a", "b"), [])

    assert len(index) == 2
    assert "a" in index
    assert "z" not in index
    assert index.has_component("b")
    assert index.component_by_id("a").id == "a"
    assert index.component_by_id("z") is None


def test_duplicate_edges_keep_first():
    """A repeated edge id is ignored after its first occurrence."""
    index = GraphIndex(
        _components("a", "b", "c"),
        [Edge("e1", "a", "b"), Edge("e1", "a", "c")],
    )

    assert index.duplicate_edge_ids == ["e1"]
    assert index.edge_by_id("e1").target == "b", "First occurrence should win"
    assert len(index.edges) == 1
    assert index.incoming_edges("c") == (), "Duplicate should not reach adjacency"


def test_duplicate_components_keep_first():
    components = [
        Component(id="a", type=ComponentType.TABLE, name="First"),
        Component(id="a", type=ComponentType.VIEW, name="Second"),
    ]
    index = GraphIndex(components, [])

    assert len(index) == 1
    assert index.component_by_id("a").name == "First"
    assert index.duplicate_component_ids == ["a"]


def test_dangling_edges_recorded():
    """Edges to missing components are recorded but stay in adjacency."""
    index = GraphIndex(_components("a"), [Edge("e1", "a", "ghost")])

    assert index.dangling_edge_ids == ["e1"]
    assert index.is_dangling(index.edge_by_id("e1"))
    assert [e.id for e in index.outgoing_edges("a")] == ["e1"]

    kinds = [w.kind for w in index.warnings]
    assert kinds == [WarningKind.DANGLING_EDGE]


def test_incident_edge_count():
    """Each edge counts once per endpoint; self-loops count once."""
    index = GraphIndex(
        _components("a", "b"),
        [Edge("e1", "a", "b"), Edge("e2", "b", "b"), Edge("e3", "b", "ghost"), Edge("e1", "b", "a")],
    )

    assert index.incident_edge_count("a") == 1
    assert index.incident_edge_count("b") == 3
    assert index.incident_edge_count("ghost") == 1
    assert index.incident_edge_count("nobody") == 0


def test_warnings_cover_all_kinds():
    index = GraphIndex(
        _components("a", "a"),
        [Edge("e1", "a", "x"), Edge("e1", "a", "a")],
    )

    kinds = {w.kind for w in index.warnings}
    assert kinds == {
        WarningKind.DUPLICATE_COMPONENT,
        WarningKind.DUPLICATE_EDGE,
        WarningKind.DANGLING_EDGE,
    }
