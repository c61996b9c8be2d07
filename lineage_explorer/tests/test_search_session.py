"""
Tests for component search and the explorer session.

Run with:
    python -m pytest lineage_explorer/tests/test_search_session.py -v
"""

import sys
from pathlib import Path

import pytest

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from lineage_explorer.generate_mock_data import build_sample_dataset
from lineage_explorer.loader import DatasetLoader
from lineage_explorer.models import ComponentType, Direction, Environment, WarningKind
from lineage_explorer.processor import (
    GraphIndex,
    LineageSession,
    SearchFilters,
    build_lineage_view,
    search_components,
    split_by_failure,
    suggest_depth,
)


@pytest.fixture
def index():
    components, edges = DatasetLoader().load_records(build_sample_dataset())
    return GraphIndex(components, edges)


def _ids(components):
    return [c.id for c in components]


def test_search_term_matches_fields(index):
    """Term matches name, id, database, datatype or endpoint, case-insensitively."""
    matches = search_components(index.components, "billing")

    ids = _ids(matches)
    assert "db_billing_prod" in ids            # id
    assert "act_billing_etl" in ids            # name
    assert "tbl_users" in ids                  # database M365BillingSystem
    assert "pbi_revenue_card" not in ids
    assert _ids(search_components(index.components, "  BILLING ")) == ids

    assert _ids(search_components(index.components, "powerbi.com")) == [
        "pbi_revenue_card", "pbi_customer_table", "pbi_trend_visual"]
    assert _ids(search_components(index.components, "storedprocedure")) == [
        "sp_calculate_billing", "sp_update_metrics"]


def test_empty_search_returns_all_in_order(index):
    assert _ids(search_components(index.components)) == _ids(index.components)


def test_filters(index):
    charts = search_components(index.components, filters=SearchFilters(
        component_types=[ComponentType.POWER_BI_CHART]))
    assert len(charts) == 3

    failed = search_components(index.components, filters=SearchFilters(show_failed_only=True))
    assert _ids(failed) == ["tbl_billing_history", "act_billing_etl"]

    pre_prod = search_components(index.components, filters=SearchFilters(
        environments=[Environment.PRE_PRODUCTION]))
    assert _ids(pre_prod) == ["db_customer_test"]

    combined = SearchFilters(component_types=[ComponentType.TABLE], show_failed_only=True)
    assert combined.active_count == 2
    assert _ids(search_components(index.components, "history", combined)) == ["tbl_billing_history"]
    assert SearchFilters().active_count == 0


def test_split_by_failure(index):
    failed, healthy = split_by_failure(index.components)

    assert len(failed) == 2
    assert len(failed) + len(healthy) == len(index)
    assert all(c.has_failed for c in failed)
    assert not any(c.has_failed for c in healthy)


def test_suggest_depth(index):
    assert suggest_depth(index.component_by_id("pbi_revenue_card"), 2) == 3
    assert suggest_depth(index.component_by_id("tbl_users"), 2) == 2
    assert suggest_depth(index.component_by_id("tbl_users"), 5) == 5


def test_select_power_bi_chart_goes_deeper(index):
    session = LineageSession(index)
    view = session.select("pbi_revenue_card")

    assert session.current is view
    assert view.query.root_id == "pbi_revenue_card"
    assert view.query.depth == 3
    assert view.result.level_of("tbl_billing_history") == -3


def test_direction_and_depth_changes(index):
    session = LineageSession(index)
    session.select("view_customer_metrics")

    view = session.set_direction("upstream")
    assert view.query.root_id == "view_customer_metrics"
    assert view.query.direction is Direction.UPSTREAM
    assert view.result.downstream_ids() == set()

    view = session.set_depth(0)
    assert view.result.depth == 1
    assert [w.kind for w in view.result.warnings] == [WarningKind.DEPTH_CLAMPED]

    with pytest.raises(ValueError):
        session.set_direction("sideways")


def test_queries_are_stamped_in_order(index):
    session = LineageSession(index)
    first = session.next_query(root_id="tbl_users")
    second = session.next_query(depth=3)

    assert second.issued_at > first.issued_at
    assert second.root_id == "tbl_users", "Unchanged fields carry over"
    assert session.query is second


def test_stale_view_rejected(index):
    """A view for an older query never replaces a newer one."""
    session = LineageSession(index)
    older = session.next_query(root_id="tbl_users")
    newer = session.next_query(root_id="view_customer_metrics")

    newer_view = build_lineage_view(index, newer)
    older_view = build_lineage_view(index, older)

    assert session.accept(newer_view)
    assert not session.accept(older_view), "Late result for an older query must be discarded"
    assert session.current.query.root_id == "view_customer_metrics"


def test_clear_selection(index):
    session = LineageSession(index)
    session.select("tbl_users")
    view = session.select(None)

    assert view.is_empty
    assert view.positions == {}
