"""
Select the lineage subgraph reachable from a root component.

Each requested direction is walked breadth-first from the root with an
explicit queue. A node is expanded at most once per travel direction, so
cyclic graphs terminate after O(depth x branching) steps, while a node can
still appear on both the upstream and the downstream side.
"""

import logging
from collections import deque
from typing import Dict, List, Optional, Set, Tuple

from ..models.dataclasses import DataIntegrityWarning, LineageQuery, LineageResult
from ..models.enums import TravelDirection, WarningKind
from .graph_index import GraphIndex

logger = logging.getLogger(__name__)


def compute_lineage(graph: GraphIndex, query: LineageQuery) -> LineageResult:
    """
    Compute included components, included edges and levels for a query.

    Args:
        graph: Index over the full dataset
        query: Root id, direction and depth

    Returns:
        LineageResult. Empty when the root is absent or unknown; never raises
        for malformed individual edges.

    Raises:
        TypeError: If depth is not an integer
    """
    depth, warnings = _effective_depth(query.depth)
    result = LineageResult(query=query, depth=depth, warnings=warnings)

    root_id = query.root_id
    if not root_id:
        return result

    if not graph.has_component(root_id):
        logger.warning(f"Root component {root_id!r} not found - nothing to display")
        result.warnings.append(DataIntegrityWarning(
            WarningKind.UNKNOWN_ROOT, root_id, "root component not found"))
        return result

    result.included_component_ids.add(root_id)
    result.levels[root_id] = 0

    visited: Set[Tuple[str, TravelDirection]] = set()
    reported: Set[str] = set()

    for travel in query.direction.travel_directions():
        _walk(graph, root_id, travel, depth, visited, reported, result)

    logger.debug(
        f"Lineage for {root_id} ({query.direction.value}, depth {depth}): "
        f"{len(result.included_component_ids)} components, "
        f"{len(result.included_edge_ids)} edges"
    )
    return result


def _walk(graph: GraphIndex, root_id: str, travel: TravelDirection, depth: int,
          visited: Set[Tuple[str, TravelDirection]], reported: Set[str],
          result: LineageResult) -> None:
    """Breadth-first walk from the root in one travel direction."""
    queue = deque([(root_id, 0)])

    while queue:
        node_id, distance = queue.popleft()
        marker = (node_id, travel)

        # Nodes at the depth limit are included but not expanded
        if distance >= depth or marker in visited:
            continue
        visited.add(marker)

        if travel is TravelDirection.UP:
            candidates = graph.incoming_edges(node_id)
        else:
            candidates = graph.outgoing_edges(node_id)

        for edge in candidates:
            next_id = edge.source if travel is TravelDirection.UP else edge.target

            if not graph.has_component(next_id):
                if edge.id not in reported:
                    reported.add(edge.id)
                    logger.warning(
                        f"Skipping edge {edge.id!r}: component {next_id!r} does not exist")
                    result.warnings.append(DataIntegrityWarning(
                        WarningKind.DANGLING_EDGE, edge.id,
                        f"references missing component {next_id}"))
                continue

            # Recorded even when next_id was already visited, to keep cross-links
            result.included_edge_ids.add(edge.id)
            result.included_component_ids.add(next_id)
            _assign_level(result.levels, next_id, travel.sign * (distance + 1))
            queue.append((next_id, distance + 1))


def _assign_level(levels: Dict[str, int], component_id: str, candidate: int) -> None:
    levels[component_id] = preferred_level(levels.get(component_id), candidate)


def preferred_level(current: Optional[int], candidate: int) -> int:
    """
    Pick between two levels a node was reached at.

    The level closest to the root wins; when both are equally far the
    downstream (larger) one wins.
    """
    if current is None:
        return candidate
    if abs(candidate) != abs(current):
        return candidate if abs(candidate) < abs(current) else current
    return max(current, candidate)


def _effective_depth(depth) -> Tuple[int, List[DataIntegrityWarning]]:
    """Clamp depth to at least 1."""
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError(f"depth must be an integer, got {type(depth).__name__}")

    if depth < 1:
        logger.info(f"Depth {depth} is below 1 - using 1")
        return 1, [DataIntegrityWarning(
            WarningKind.DEPTH_CLAMPED, str(depth), "depth below 1 clamped to 1")]

    return depth, []
