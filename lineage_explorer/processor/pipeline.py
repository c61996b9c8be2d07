"""Traversal followed by layout, for one query."""

from typing import Optional

from ..config import LayoutConfig
from ..models.dataclasses import LineageQuery, LineageView
from .graph_index import GraphIndex
from .hierarchical_layout import layout
from .lineage_traversal import compute_lineage


def build_lineage_view(index: GraphIndex, query: LineageQuery,
                       config: Optional[LayoutConfig] = None) -> LineageView:
    """Compute the lineage for a query and lay it out."""
    result = compute_lineage(index, query)
    if result.is_empty:
        return LineageView(result=result)

    positions = layout(
        result.included_component_ids,
        result.included_edge_ids,
        result.levels,
        index.edges,
        config,
    )
    return LineageView(result=result, positions=positions)
