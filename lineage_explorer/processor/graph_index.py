"""
Lookup structures over a full component/edge graph.

Built once per dataset load and read-only afterwards.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.dataclasses import Component, DataIntegrityWarning, Edge
from ..models.enums import WarningKind

logger = logging.getLogger(__name__)


class GraphIndex:
    """O(1) component lookup and adjacency lists by source and target."""

    def __init__(self, components: Iterable[Component], edges: Iterable[Edge]):
        self._components: Dict[str, Component] = {}
        self._edges: Dict[str, Edge] = {}
        self._outgoing: Dict[str, Tuple[Edge, ...]] = {}
        self._incoming: Dict[str, Tuple[Edge, ...]] = {}
        self._incident_counts: Dict[str, int] = defaultdict(int)

        self.duplicate_component_ids: List[str] = []
        self.duplicate_edge_ids: List[str] = []
        self.dangling_edge_ids: List[str] = []

        for component in components:
            if component.id in self._components:
                self.duplicate_component_ids.append(component.id)
                logger.warning(f"Duplicate component id {component.id!r} - keeping first occurrence")
                continue
            self._components[component.id] = component

        outgoing = defaultdict(list)
        incoming = defaultdict(list)

        for edge in edges:
            if edge.id in self._edges:
                self.duplicate_edge_ids.append(edge.id)
                logger.warning(f"Duplicate edge id {edge.id!r} - keeping first occurrence")
                continue
            self._edges[edge.id] = edge

            # Dangling edges stay in adjacency; traversal skips them per hop
            if edge.source not in self._components or edge.target not in self._components:
                self.dangling_edge_ids.append(edge.id)
                logger.warning(
                    f"Edge {edge.id!r} references missing component "
                    f"({edge.source!r} -> {edge.target!r})"
                )

            outgoing[edge.source].append(edge)
            incoming[edge.target].append(edge)

            self._incident_counts[edge.source] += 1
            if edge.target != edge.source:
                self._incident_counts[edge.target] += 1

        self._outgoing = {cid: tuple(es) for cid, es in outgoing.items()}
        self._incoming = {cid: tuple(es) for cid, es in incoming.items()}

        logger.debug(
            f"Indexed {len(self._components)} components and {len(self._edges)} edges"
        )

    def component_by_id(self, component_id: str) -> Optional[Component]:
        return self._components.get(component_id)

    def has_component(self, component_id: str) -> bool:
        return component_id in self._components

    def edge_by_id(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def outgoing_edges(self, component_id: str) -> Tuple[Edge, ...]:
        """Edges where this component is the source, in input order."""
        return self._outgoing.get(component_id, ())

    def incoming_edges(self, component_id: str) -> Tuple[Edge, ...]:
        """Edges where this component is the target, in input order."""
        return self._incoming.get(component_id, ())

    def incident_edge_count(self, component_id: str) -> int:
        return self._incident_counts.get(component_id, 0)

    @property
    def components(self) -> List[Component]:
        return list(self._components.values())

    @property
    def edges(self) -> List[Edge]:
        """Deduplicated edges in input order."""
        return list(self._edges.values())

    def is_dangling(self, edge: Edge) -> bool:
        return edge.source not in self._components or edge.target not in self._components

    @property
    def warnings(self) -> List[DataIntegrityWarning]:
        """Integrity problems found while indexing."""
        found = []
        for cid in self.duplicate_component_ids:
            found.append(DataIntegrityWarning(
                WarningKind.DUPLICATE_COMPONENT, cid, "duplicate component id ignored"))
        for eid in self.duplicate_edge_ids:
            found.append(DataIntegrityWarning(
                WarningKind.DUPLICATE_EDGE, eid, "duplicate edge id ignored"))
        for eid in self.dangling_edge_ids:
            edge = self._edges[eid]
            found.append(DataIntegrityWarning(
                WarningKind.DANGLING_EDGE, eid,
                f"references missing component ({edge.source} -> {edge.target})"))
        return found

    def __len__(self) -> int:
        return len(self._components)

    def __contains__(self, component_id: str) -> bool:
        return component_id in self._components
