"""
Test suite for lineage traversal.

Run with:
    python -m pytest lineage_explorer/tests/test_lineage_traversal.py -v

Or directly:
    python lineage_explorer/tests/test_lineage_traversal.py
"""

import sys
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from lineage_explorer.models import (
    Component,
    ComponentType,
    Direction,
    Edge,
    EdgeType,
    LineageQuery,
    WarningKind,
)
from lineage_explorer.processor import GraphIndex, compute_lineage
from lineage_explorer.processor.lineage_traversal import preferred_level


def _index(ids, edges):
    components = [Component(id=cid, type=ComponentType.TABLE) for cid in ids]
    return GraphIndex(components, [Edge(*e) for e in edges])


def _chain(length):
    """n0 -> n1 -> ... -> n{length-1}"""
    ids = [f"n{i}" for i in range(length)]
    edges = [(f"e{i}", ids[i], ids[i + 1]) for i in range(length - 1)]
    return _index(ids, edges)


def _assert_edge_closure(index, result):
    for edge_id in result.included_edge_ids:
        edge = index.edge_by_id(edge_id)
        assert edge.source in result.included_component_ids, f"{edge_id} source not included"
        assert edge.target in result.included_component_ids, f"{edge_id} target not included"


def test_two_node_cycle():
    """table_A <-> proc_B, both directions, depth 2."""
    index = GraphIndex(
        [Component("table_A", ComponentType.TABLE), Component("proc_B", ComponentType.STORED_PROCEDURE)],
        [
            Edge("e1", "table_A", "proc_B", "writes", EdgeType.WRITES),
            Edge("e2", "proc_B", "table_A", "reads", EdgeType.READS),
        ],
    )
    result = compute_lineage(index, LineageQuery("table_A", Direction.BOTH, 2))

    assert result.included_component_ids == {"table_A", "proc_B"}
    assert result.included_edge_ids == {"e1", "e2"}, "Both cycle edges should be included"
    assert result.level_of("table_A") == 0, "Root stays at level 0 inside a cycle"
    assert result.level_of("proc_B") == 1, "Equal distance both ways resolves downstream"

    print("test_two_node_cycle: PASSED")


def test_fan_out_depth_one():
    """db_1 feeding 50 tables, downstream, depth 1."""
    ids = ["db_1"] + [f"table_{i}" for i in range(50)]
    edges = [(f"e{i}", "db_1", f"table_{i}") for i in range(50)]
    index = _index(ids, edges)

    result = compute_lineage(index, LineageQuery("db_1", Direction.DOWNSTREAM, 1))

    assert len(result.included_component_ids) == 51
    assert len(result.included_edge_ids) == 50
    assert set(result.levels.values()) == {0, 1}

    print("test_fan_out_depth_one: PASSED")


def test_unknown_root():
    """Unknown root gives an empty result and a warning, not an exception."""
    index = _chain(3)
    result = compute_lineage(index, LineageQuery("does_not_exist", Direction.BOTH, 2))

    assert result.included_component_ids == set()
    assert result.included_edge_ids == set()
    assert result.is_empty
    assert [w.kind for w in result.warnings] == [WarningKind.UNKNOWN_ROOT]

    print("test_unknown_root: PASSED")


def test_no_root():
    result = compute_lineage(_chain(3), LineageQuery(None))

    assert result.is_empty
    assert result.warnings == [], "Absent root is not a warning"


def test_diamond_levels():
    """A -> B -> D and A -> C -> D, downstream depth 2."""
    index = _index(
        ["A", "B", "C", "D"],
        [("e1", "A", "B"), ("e2", "A", "C"), ("e3", "B", "D"), ("e4", "C", "D")],
    )
    result = compute_lineage(index, LineageQuery("A", Direction.DOWNSTREAM, 2))

    assert result.level_of("D") == 2
    assert result.level_of("B") == 1
    assert result.level_of("C") == 1
    assert result.included_edge_ids == {"e1", "e2", "e3", "e4"}

    print("test_diamond_levels: PASSED")


def test_depth_zero_clamped():
    """depth 0 behaves like depth 1 and is reported."""
    index = _chain(4)
    result = compute_lineage(index, LineageQuery("n0", Direction.DOWNSTREAM, 0))

    assert result.depth == 1
    assert result.included_component_ids == {"n0", "n1"}
    assert [w.kind for w in result.warnings] == [WarningKind.DEPTH_CLAMPED]

    negative = compute_lineage(index, LineageQuery("n0", Direction.DOWNSTREAM, -3))
    assert negative.included_component_ids == {"n0", "n1"}

    print("test_depth_zero_clamped: PASSED")


def test_non_integer_depth_rejected():
    index = _chain(2)

    with pytest.raises(TypeError):
        compute_lineage(index, LineageQuery("n0", Direction.BOTH, "2"))
    with pytest.raises(TypeError):
        compute_lineage(index, LineageQuery("n0", Direction.BOTH, 2.0))


def test_invalid_direction_rejected():
    with pytest.raises(ValueError):
        LineageQuery("n0", "sideways", 2)

    assert LineageQuery("n0", "UPSTREAM", 2).direction is Direction.UPSTREAM


def test_depth_bound():
    """No node farther than depth hops from the root."""
    index = _chain(10)

    for depth in (1, 3, 5):
        result = compute_lineage(index, LineageQuery("n0", Direction.DOWNSTREAM, depth))
        assert len(result.included_component_ids) == depth + 1
        assert max(abs(level) for level in result.levels.values()) == depth

    print("test_depth_bound: PASSED")


def test_direction_correctness():
    """Upstream only follows incoming edges, downstream only outgoing."""
    index = _chain(5)

    upstream = compute_lineage(index, LineageQuery("n2", Direction.UPSTREAM, 5))
    assert upstream.included_component_ids == {"n0", "n1", "n2"}
    assert all(level <= 0 for level in upstream.levels.values())
    assert upstream.level_of("n0") == -2

    downstream = compute_lineage(index, LineageQuery("n2", Direction.DOWNSTREAM, 5))
    assert downstream.included_component_ids == {"n2", "n3", "n4"}
    assert all(level >= 0 for level in downstream.levels.values())

    both = compute_lineage(index, LineageQuery("n2", Direction.BOTH, 5))
    assert both.included_component_ids == upstream.included_component_ids | downstream.included_component_ids

    print("test_direction_correctness: PASSED")


def test_cross_links_included():
    """Edges to already-visited nodes are kept once their source is expanded."""
    index = _index(["a", "b", "c"], [("e1", "a", "b"), ("e2", "a", "c"), ("e3", "b", "c")])

    shallow = compute_lineage(index, LineageQuery("a", Direction.DOWNSTREAM, 1))
    assert shallow.included_edge_ids == {"e1", "e2"}, "b is not expanded at depth 1"

    deep = compute_lineage(index, LineageQuery("a", Direction.DOWNSTREAM, 2))
    assert deep.included_edge_ids == {"e1", "e2", "e3"}
    assert deep.level_of("c") == 1, "Shortest distance wins"
    _assert_edge_closure(index, deep)


def test_cycle_terminates():
    """A 100-node ring terminates and respects depth."""
    ids = [f"r{i}" for i in range(100)]
    edges = [(f"e{i}", ids[i], ids[(i + 1) % 100]) for i in range(100)]
    index = _index(ids, edges)

    result = compute_lineage(index, LineageQuery("r0", Direction.BOTH, 5))

    assert len(result.included_component_ids) == 11
    assert result.level_of("r5") == 5
    assert result.level_of("r95") == -5
    _assert_edge_closure(index, result)

    everything = compute_lineage(index, LineageQuery("r0", Direction.BOTH, 500))
    assert len(everything.included_component_ids) == 100

    print("test_cycle_terminates: PASSED")


def test_dangling_edges_skipped():
    """Edges to missing components are skipped and reported once."""
    index = _index(["a", "b"], [("e1", "a", "b"), ("e2", "a", "ghost"), ("e3", "b", "a")])

    result = compute_lineage(index, LineageQuery("a", Direction.BOTH, 3))

    assert "ghost" not in result.included_component_ids
    assert "e2" not in result.included_edge_ids
    dangling = [w for w in result.warnings if w.kind == WarningKind.DANGLING_EDGE]
    assert len(dangling) == 1
    assert dangling[0].subject_id == "e2"
    _assert_edge_closure(index, result)


def test_self_loop():
    index = _index(["a"], [("e1", "a", "a")])
    result = compute_lineage(index, LineageQuery("a", Direction.BOTH, 2))

    assert result.included_component_ids == {"a"}
    assert result.included_edge_ids == {"e1"}
    assert result.level_of("a") == 0


def test_preferred_level():
    """Closest to the root wins; equal distance prefers downstream."""
    assert preferred_level(None, -3) == -3
    assert preferred_level(-1, 1) == 1
    assert preferred_level(1, -1) == 1
    assert preferred_level(2, -1) == -1
    assert preferred_level(-2, -3) == -2
    assert preferred_level(0, 2) == 0


def test_repeat_calls_independent():
    """Each call starts from fresh visited state."""
    index = _chain(6)
    query = LineageQuery("n3", Direction.BOTH, 2)

    first = compute_lineage(index, query)
    compute_lineage(index, LineageQuery("n0", Direction.DOWNSTREAM, 5))
    second = compute_lineage(index, query)

    assert first.included_component_ids == second.included_component_ids
    assert first.included_edge_ids == second.included_edge_ids
    assert first.levels == second.levels


def run_all_tests():
    """Run all tests."""
    print("=" * 60)
    print("Lineage Traversal Tests")
    print("=" * 60)
    print()

    tests = [
        test_two_node_cycle,
        test_fan_out_depth_one,
        test_unknown_root,
        test_no_root,
        test_diamond_levels,
        test_depth_zero_clamped,
        test_non_integer_depth_rejected,
        test_invalid_direction_rejected,
        test_depth_bound,
        test_direction_correctness,
        test_cross_links_included,
        test_cycle_terminates,
        test_dangling_edges_skipped,
        test_self_loop,
        test_preferred_level,
        test_repeat_calls_independent,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except AssertionError as e:
            print(f"{test.__name__}: FAILED - {e}")
            failed += 1
        except Exception as e:
            print(f"{test.__name__}: ERROR - {e}")
            failed += 1

    print()
    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
