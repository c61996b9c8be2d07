"""
Map a laid-out lineage view into renderable node and edge records.

Node and edge records follow the shape a flow-diagram widget expects:
nodes carry a position and the component, edges carry endpoints and styling.
"""

import json
from pathlib import Path
from typing import Dict, List

from ..models.dataclasses import LineageView
from ..processor.graph_index import GraphIndex

# Display colours per component type and edge type
COMPONENT_COLORS = {
    "database": "#3B82F6",
    "table": "#10B981",
    "view": "#06B6D4",
    "stored_procedure": "#8B5CF6",
    "activity": "#EC4899",
    "power_bi_chart": "#F97316",
    "dataset": "#6B7280",
}
FAILED_COLOR = "#EF4444"

EDGE_COLORS = {
    "reads": "#10B981",
    "writes": "#F59E0B",
    "uses": "#8B5CF6",
    "references": "#6B7280",
}


def build_flow_elements(view: LineageView, index: GraphIndex) -> Dict[str, List[Dict]]:
    """
    Build node and edge records for the included part of the graph.

    Components missing from the index are dropped, as are edges that
    are not in the view.
    """
    root_id = view.query.root_id
    nodes = []
    for component_id, position in view.positions.items():
        component = index.component_by_id(component_id)
        if component is None:
            continue
        nodes.append({
            "id": component.id,
            "type": "custom",
            "position": position.to_dict(),
            "data": {
                "component": component.to_dict(),
                "level": view.result.level_of(component_id),
                "is_selected": component.id == root_id,
                "color": FAILED_COLOR if component.has_failed
                else COMPONENT_COLORS.get(component.type.value, "#6B7280"),
            },
        })

    included = view.result.included_edge_ids
    edges = []
    for edge in index.edges:
        if edge.id not in included:
            continue
        record = edge.to_dict()
        record["type"] = "custom"
        record["data"] = {"relationship": edge.type.value,
                          "color": EDGE_COLORS.get(edge.type.value, "#6B7280")}
        edges.append(record)

    return {"nodes": nodes, "edges": edges}


def build_graph_document(view: LineageView, index: GraphIndex) -> Dict:
    """Flow elements plus query, summary and warnings."""
    document = {
        "query": {
            "root_id": view.query.root_id,
            "direction": view.query.direction.value,
            "depth": view.result.depth,
        },
        "summary": view.summary(),
        "warnings": [
            {"kind": w.kind.value, "subject_id": w.subject_id, "message": w.message}
            for w in view.result.warnings
        ],
    }
    document.update(build_flow_elements(view, index))
    return document


def write_json(view: LineageView, index: GraphIndex, path: Path) -> Path:
    """Write the graph document as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_graph_document(view, index), f, indent=2)
    return path
