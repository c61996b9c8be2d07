"""
Excel writer for lineage views.

Produces Excel workbooks with:
- Lineage_nodes (component, level, position)
- Lineage_edges (included edges with endpoint levels)
- Lineage_summary
- Data_integrity_warnings
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pandas as pd

from ..models.dataclasses import DataIntegrityWarning, LineageView
from ..processor.graph_index import GraphIndex

logger = logging.getLogger(__name__)

NODE_COLUMNS = [
    "id", "name", "type", "environment", "level", "x", "y", "connections",
    "is_root", "has_failed", "pipeline_name", "failure_time", "failure_count",
    "datatype", "database", "endpoint", "dashboard_name", "page_name", "chart_type",
]

EDGE_COLUMNS = ["id", "source", "target", "label", "type", "source_level", "target_level"]

WARNING_COLUMNS = ["kind", "subject_id", "message"]


class ExcelWriter:
    """Write a lineage view to an Excel workbook."""

    def __init__(self, output_dir: Path):
        """
        Initialize the writer.

        Args:
            output_dir: Directory for output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write(self, view: LineageView, index: GraphIndex,
              filename: Optional[str] = None) -> Path:
        """
        Write lineage to Excel workbook.

        Args:
            view: Laid-out lineage view
            index: Index the view was computed from
            filename: Optional file name (default: timestamped from the query)

        Returns:
            Path to written file
        """
        output_path = self.output_dir / (filename or self._default_filename(view))

        nodes_df = self._build_nodes_df(view, index)
        edges_df = self._build_edges_df(view, index)
        summary_df = self._build_summary_df(view)
        warnings_df = self._build_warnings_df(index.warnings + view.result.warnings)

        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            nodes_df.to_excel(writer, sheet_name="Lineage_nodes", index=False)
            edges_df.to_excel(writer, sheet_name="Lineage_edges", index=False)
            summary_df.to_excel(writer, sheet_name="Lineage_summary", index=False)
            if not warnings_df.empty:
                warnings_df.to_excel(writer, sheet_name="Data_integrity_warnings", index=False)

        logger.info(f"Written: {output_path}")
        return output_path

    @staticmethod
    def _default_filename(view: LineageView) -> str:
        root = re.sub(r"[^A-Za-z0-9_.-]+", "_", view.query.root_id or "NO_ROOT")
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return f"{root}_lineage_{view.query.direction.value}_d{view.result.depth}_{timestamp}.xlsx"

    def _build_nodes_df(self, view: LineageView, index: GraphIndex) -> pd.DataFrame:
        """Build the Lineage_nodes DataFrame."""
        rows = []
        for component_id, position in view.positions.items():
            component = index.component_by_id(component_id)
            if component is None:
                continue
            failure = component.failure
            rows.append({
                "id": component.id,
                "name": component.name,
                "type": component.type.value,
                "environment": component.environment.value,
                "level": view.result.level_of(component_id),
                "x": position.x,
                "y": position.y,
                "connections": index.incident_edge_count(component_id),
                "is_root": "Y" if component_id == view.query.root_id else "N",
                "has_failed": "Y" if component.has_failed else "N",
                "pipeline_name": failure.pipeline_name if failure else "",
                "failure_time": failure.failure_time if failure else "",
                "failure_count": failure.failure_count if failure else "",
                "datatype": component.datatype or "",
                "database": component.database or "",
                "endpoint": component.endpoint or "",
                "dashboard_name": component.dashboard_name or "",
                "page_name": component.page_name or "",
                "chart_type": component.chart_type or "",
            })

        df = pd.DataFrame(rows, columns=NODE_COLUMNS)
        if df.empty:
            return df

        # Sort deterministically: left to right, top to bottom
        return df.sort_values(["level", "y", "id"]).reset_index(drop=True)

    def _build_edges_df(self, view: LineageView, index: GraphIndex) -> pd.DataFrame:
        """Build the Lineage_edges DataFrame."""
        rows = []
        for edge_id in view.result.included_edge_ids:
            edge = index.edge_by_id(edge_id)
            if edge is None:
                continue
            rows.append({
                "id": edge.id,
                "source": edge.source,
                "target": edge.target,
                "label": edge.label,
                "type": edge.type.value,
                "source_level": view.result.level_of(edge.source),
                "target_level": view.result.level_of(edge.target),
            })

        df = pd.DataFrame(rows, columns=EDGE_COLUMNS)
        if df.empty:
            return df

        return df.sort_values(["source_level", "target_level", "id"]).reset_index(drop=True)

    def _build_summary_df(self, view: LineageView) -> pd.DataFrame:
        """Build the Lineage_summary DataFrame."""
        summary = view.summary()
        rows = [
            {"metric": "Root", "value": summary["root_id"] or ""},
            {"metric": "Direction", "value": summary["direction"]},
            {"metric": "Depth", "value": summary["depth"]},
            {"metric": "", "value": ""},
            {"metric": "Components", "value": summary["components"]},
            {"metric": "Edges", "value": summary["edges"]},
            {"metric": "Upstream Components", "value": summary["upstream"]},
            {"metric": "Downstream Components", "value": summary["downstream"]},
            {"metric": "", "value": ""},
            {"metric": "Leftmost Level", "value": summary["min_level"]},
            {"metric": "Rightmost Level", "value": summary["max_level"]},
            {"metric": "Warnings", "value": summary["warnings"]},
        ]
        return pd.DataFrame(rows)

    def _build_warnings_df(self, warnings: List[DataIntegrityWarning]) -> pd.DataFrame:
        """Build the Data_integrity_warnings DataFrame (one row per distinct warning)."""
        rows = []
        seen = set()
        for warning in warnings:
            key = (warning.kind, warning.subject_id)
            if key in seen:
                continue
            seen.add(key)
            rows.append({
                "kind": warning.kind.value,
                "subject_id": warning.subject_id,
                "message": warning.message,
            })

        df = pd.DataFrame(rows, columns=WARNING_COLUMNS)
        if df.empty:
            return df
        return df.sort_values(["kind", "subject_id"]).reset_index(drop=True)
