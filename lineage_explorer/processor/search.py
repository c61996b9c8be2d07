"""Component search and filtering for the component list."""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..config import POWER_BI_SUGGESTED_DEPTH
from ..models.dataclasses import Component
from ..models.enums import ComponentType, Environment


@dataclass
class SearchFilters:
    """Filters applied on top of the search term. Empty lists do not restrict."""
    component_types: List[ComponentType] = field(default_factory=list)
    environments: List[Environment] = field(default_factory=list)
    show_failed_only: bool = False

    @property
    def active_count(self) -> int:
        return len(self.component_types) + len(self.environments) + int(self.show_failed_only)

    def matches(self, component: Component) -> bool:
        if self.component_types and component.type not in self.component_types:
            return False
        if self.environments and component.environment not in self.environments:
            return False
        if self.show_failed_only and not component.has_failed:
            return False
        return True


def search_components(components: Iterable[Component], term: str = "",
                      filters: Optional[SearchFilters] = None) -> List[Component]:
    """
    Return components matching the term and filters, in input order.

    The term is matched case-insensitively as a substring of name, id,
    database, datatype and endpoint.
    """
    needle = (term or "").strip().lower()
    filters = filters or SearchFilters()

    matched = []
    for component in components:
        if needle and not _matches_term(component, needle):
            continue
        if filters.matches(component):
            matched.append(component)
    return matched


def _matches_term(component: Component, needle: str) -> bool:
    haystack = (
        component.name,
        component.id,
        component.database,
        component.datatype,
        component.endpoint,
    )
    return any(value and needle in value.lower() for value in haystack)


def split_by_failure(components: Iterable[Component]) -> Tuple[List[Component], List[Component]]:
    """Split into (failed, healthy), failed first as the list shows them."""
    failed, healthy = [], []
    for component in components:
        (failed if component.has_failed else healthy).append(component)
    return failed, healthy


def suggest_depth(component: Component, current_depth: int) -> int:
    """Dashboard visuals default to a deeper view; everything else keeps the current depth."""
    if component.type == ComponentType.POWER_BI_CHART:
        return POWER_BI_SUGGESTED_DEPTH
    return current_depth
