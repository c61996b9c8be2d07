"""
Left-to-right hierarchical layout for a lineage subgraph.

Levels become columns (upstream left of the root, downstream right of it).
Within a column the best-connected nodes sit nearest the vertical centre,
then a resolution pass pushes apart any nodes closer than the minimum gap.
The layout is a pure function of its inputs: no randomness, and every
ordering is broken by component id.
"""

import logging
import math
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..config import DEFAULT_LAYOUT, LayoutConfig
from ..models.dataclasses import Edge, Position

logger = logging.getLogger(__name__)

LevelLookup = Union[Mapping[str, int], Callable[[str], Optional[int]]]


def layout(included_component_ids: Iterable[str],
           included_edge_ids: Iterable[str],
           level_of: LevelLookup,
           edges: Iterable[Edge],
           config: Optional[LayoutConfig] = None) -> Dict[str, Position]:
    """
    Assign a position to every included component.

    Args:
        included_component_ids: Components to place
        included_edge_ids: Edges drawn between them
        level_of: Mapping or callable giving each component's signed level
        edges: Full edge list, used to rank nodes by connection count
        config: Spacing constants (defaults to DEFAULT_LAYOUT)

    Returns:
        Dict of component id -> Position, ordered by level then slot
    """
    config = config or DEFAULT_LAYOUT
    lookup = level_of.get if isinstance(level_of, Mapping) else level_of

    edges = list(edges)
    counts = _incident_counts(edges)
    included = set(included_component_ids)
    _check_edge_endpoints(included, set(included_edge_ids), edges)

    by_level: Dict[int, List[str]] = defaultdict(list)
    unplaced: List[str] = []
    for component_id in sorted(included):
        level = lookup(component_id)
        if level is None:
            unplaced.append(component_id)
        else:
            by_level[level].append(component_id)

    # [x, y] pairs, mutated by the overlap passes
    coords: Dict[str, List[float]] = {}

    for level in sorted(by_level):
        ranked = sorted(by_level[level], key=lambda cid: (-counts.get(cid, 0), cid))
        x = float(level * config.horizontal_spacing)
        for component_id, y in zip(ranked, _slot_offsets(len(ranked), config.vertical_spacing)):
            coords[component_id] = [x, y]

    for component_id in unplaced:
        logger.warning(f"Component {component_id!r} has no level - placing at origin")
        coords[component_id] = [0.0, 0.0]

    for _ in range(config.overlap_passes):
        resolve_overlaps(coords, config)

    return {cid: Position(x, y) for cid, (x, y) in coords.items()}


def resolve_overlaps(coords: Dict[str, List[float]], config: LayoutConfig) -> int:
    """
    Push nodes down until each column keeps min_vertical_gap between neighbours.

    Columns are re-derived from x so the pass stays correct for positions that
    did not come straight from a level. Returns the number of nodes moved.
    """
    columns: Dict[int, List[str]] = defaultdict(list)
    for component_id, (x, _) in coords.items():
        columns[round(x / config.horizontal_spacing)].append(component_id)

    moved = 0
    for column in columns.values():
        column.sort(key=lambda cid: (coords[cid][1], cid))
        for previous, current in zip(column, column[1:]):
            gap = coords[current][1] - coords[previous][1]
            if gap < config.min_vertical_gap:
                coords[current][1] = _clear_of(coords[previous][1], config.min_vertical_gap)
                moved += 1

    if moved:
        logger.debug(f"Overlap pass moved {moved} node(s)")
    return moved


def _clear_of(previous_y: float, min_gap: float) -> float:
    """previous_y + min_gap, nudged up until the float difference reaches min_gap."""
    y = previous_y + min_gap
    while y - previous_y < min_gap:
        y = math.nextafter(y, math.inf)
    return y


def _slot_offsets(count: int, spacing: float) -> List[float]:
    """
    Y offsets in rank order: rank 0 takes the centre slot, later ranks fan
    out alternately below and above it.
    """
    if count == 0:
        return []

    start = -(count - 1) * spacing / 2
    slots = [start + i * spacing for i in range(count)]

    middle = (count - 1) // 2
    order = [middle]
    step = 1
    while len(order) < count:
        if middle + step < count:
            order.append(middle + step)
        if middle - step >= 0:
            order.append(middle - step)
        step += 1

    return [slots[i] for i in order]


def _incident_counts(edges: List[Edge]) -> Dict[str, int]:
    """Connections per component over the full edge list (first id wins)."""
    counts: Dict[str, int] = defaultdict(int)
    seen = set()
    for edge in edges:
        if edge.id in seen:
            continue
        seen.add(edge.id)
        counts[edge.source] += 1
        if edge.target != edge.source:
            counts[edge.target] += 1
    return counts


def _check_edge_endpoints(included: set, edge_ids: set, edges: List[Edge]) -> None:
    """Log included edges with an endpoint that is not being laid out."""
    for edge in edges:
        if edge.id in edge_ids and (edge.source not in included or edge.target not in included):
            logger.warning(
                f"Edge {edge.id!r} has an endpoint outside the laid-out set")
