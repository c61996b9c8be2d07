"""
Current-view state for an interactive lineage explorer.

Every query change is stamped with an increasing sequence number. A view is
only accepted when its query is at least as new as the one currently shown,
so results that arrive out of order never replace a newer view.
"""

import itertools
import logging
from dataclasses import replace
from typing import Optional

from ..config import DEFAULT_DEPTH, DEFAULT_DIRECTION, LayoutConfig
from ..models.dataclasses import LineageQuery, LineageView
from ..models.enums import Direction
from .graph_index import GraphIndex
from .pipeline import build_lineage_view
from .search import suggest_depth

logger = logging.getLogger(__name__)


class LineageSession:
    """Holds the query being explored and the view currently on screen."""

    def __init__(self, index: GraphIndex, config: Optional[LayoutConfig] = None,
                 direction: Direction = DEFAULT_DIRECTION, depth: int = DEFAULT_DEPTH):
        self.index = index
        self.config = config
        self._stamps = itertools.count(1)
        self._query = LineageQuery(root_id=None, direction=direction, depth=depth)
        self.current: Optional[LineageView] = None

    @property
    def query(self) -> LineageQuery:
        """Most recently issued query."""
        return self._query

    def next_query(self, **changes) -> LineageQuery:
        """Issue a new query from the latest one with the given fields changed."""
        self._query = replace(self._query, issued_at=float(next(self._stamps)), **changes)
        return self._query

    def select(self, component_id: Optional[str]) -> LineageView:
        """Focus the view on a component (list selection or node click)."""
        depth = self._query.depth
        component = self.index.component_by_id(component_id) if component_id else None
        if component is not None:
            depth = suggest_depth(component, depth)
        return self.submit(self.next_query(root_id=component_id, depth=depth))

    def set_direction(self, direction) -> LineageView:
        return self.submit(self.next_query(direction=Direction.parse(direction)))

    def set_depth(self, depth: int) -> LineageView:
        return self.submit(self.next_query(depth=depth))

    def submit(self, query: LineageQuery) -> LineageView:
        """Compute a view for the query and offer it to the session."""
        self.accept(build_lineage_view(self.index, query, self.config))
        return self.current

    def accept(self, view: LineageView) -> bool:
        """Make the view current unless a newer query's view is already shown."""
        if self.current is not None and view.query.issued_at < self.current.query.issued_at:
            logger.debug(
                f"Discarding stale view (query {view.query.issued_at} < "
                f"{self.current.query.issued_at})"
            )
            return False
        self.current = view
        return True
