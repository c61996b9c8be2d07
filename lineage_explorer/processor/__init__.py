"""Lineage traversal, layout and selection."""

from .graph_index import GraphIndex
from .lineage_traversal import compute_lineage
from .hierarchical_layout import layout
from .pipeline import build_lineage_view
from .search import SearchFilters, search_components, split_by_failure, suggest_depth
from .session import LineageSession

__all__ = [
    "GraphIndex",
    "compute_lineage",
    "layout",
    "build_lineage_view",
    "SearchFilters",
    "search_components",
    "split_by_failure",
    "suggest_depth",
    "LineageSession",
]
