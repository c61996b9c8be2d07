"""
Load lineage datasets (components + edges) from:
- JSON documents ({"components": [...], "edges": [...]}, camelCase or snake_case keys)
- Excel workbooks with a components sheet and an edges sheet
- Directories holding components.csv and edges.csv
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

import pandas as pd

from ..contracts.validator import (
    REQUIRED_COMPONENT_COLUMNS,
    REQUIRED_EDGE_COLUMNS,
    ValidationError,
    find_sheet,
    normalize_component_type,
    normalize_edge_type,
    normalize_environment,
    records_to_frame,
    validate_components_df,
    validate_edges_df,
    validate_records,
)
from ..models.dataclasses import Component, Edge, FailureDetails
from ..models.enums import ComponentType, EdgeType, Environment

logger = logging.getLogger(__name__)

TRUE_VALUES = {"true", "yes", "y", "1"}


def safe_str(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Safely convert any value to string, handling None/NaN/whitespace."""
    if value is None:
        return default
    if isinstance(value, float) and pd.isna(value):
        return default
    result = str(value).strip()
    if result == "" or result.lower() == "nan":
        return default
    return result


def parse_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    text = safe_str(value)
    if text is None:
        return default
    return text.lower() in TRUE_VALUES


def parse_int(value: Any, default: int = 0) -> int:
    text = safe_str(value)
    if text is None:
        return default
    try:
        return int(float(text))
    except ValueError:
        logger.warning(f"Not a number: {text!r} - using {default}")
        return default


class DatasetLoader:
    """Load and convert lineage datasets."""

    def __init__(self):
        self.components: List[Component] = []
        self.edges: List[Edge] = []
        self.source: Optional[Path] = None

    def load(self, path: Path, components_sheet: Optional[str] = None,
             edges_sheet: Optional[str] = None) -> Tuple[List[Component], List[Edge]]:
        """
        Load a dataset.

        Args:
            path: JSON file, Excel workbook, or CSV directory
            components_sheet: Sheet name pattern for components (Excel only)
            edges_sheet: Sheet name pattern for edges (Excel only)

        Returns:
            Tuple of (components, edges)

        Raises:
            ValidationError: If the input doesn't conform to the contract
        """
        path = Path(path)

        if not path.exists():
            raise ValidationError(f"Input not found: {path}")

        if path.is_dir():
            components_df, edges_df = self._load_csv_dir(path)
        elif path.suffix.lower() in (".xlsx", ".xls"):
            components_df, edges_df = self._load_excel(path, components_sheet, edges_sheet)
        elif path.suffix.lower() == ".json":
            components_df, edges_df = self._load_json(path)
        else:
            raise ValidationError(f"Unsupported file format: {path.suffix}")

        validate_components_df(components_df)
        validate_edges_df(edges_df)

        self.components = [self._to_component(row) for row in components_df.to_dict("records")]
        self.edges = [self._to_edge(row) for row in edges_df.to_dict("records")]
        self.source = path

        logger.info(f"Loaded {len(self.components)} components and {len(self.edges)} edges from {path}")
        return self.components, self.edges

    def load_records(self, data: dict) -> Tuple[List[Component], List[Edge]]:
        """Load from an already-parsed JSON document."""
        validate_records(data)
        components_df = records_to_frame(data["components"], REQUIRED_COMPONENT_COLUMNS)
        edges_df = records_to_frame(data["edges"], REQUIRED_EDGE_COLUMNS)
        validate_components_df(components_df)
        validate_edges_df(edges_df)

        self.components = [self._to_component(row) for row in components_df.to_dict("records")]
        self.edges = [self._to_edge(row) for row in edges_df.to_dict("records")]
        return self.components, self.edges

    def _load_json(self, path: Path) -> Tuple[pd.DataFrame, pd.DataFrame]:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"Cannot read JSON: {e}")

        validate_records(data)
        return (
            records_to_frame(data["components"], REQUIRED_COMPONENT_COLUMNS),
            records_to_frame(data["edges"], REQUIRED_EDGE_COLUMNS),
        )

    def _load_excel(self, path: Path, components_sheet: Optional[str],
                    edges_sheet: Optional[str]) -> Tuple[pd.DataFrame, pd.DataFrame]:
        xl = pd.ExcelFile(path)

        component_name = find_sheet(xl.sheet_names, ["component", "node"], components_sheet)
        edge_name = find_sheet(xl.sheet_names, ["edge", "relationship", "link"], edges_sheet)

        if component_name is None:
            raise ValidationError(f"No components sheet found in {path} (sheets: {xl.sheet_names})")
        if edge_name is None:
            raise ValidationError(f"No edges sheet found in {path} (sheets: {xl.sheet_names})")

        logger.debug(f"Reading sheets {component_name!r} and {edge_name!r} from {path}")
        return (
            pd.read_excel(xl, sheet_name=component_name, dtype=str),
            pd.read_excel(xl, sheet_name=edge_name, dtype=str),
        )

    def _load_csv_dir(self, path: Path) -> Tuple[pd.DataFrame, pd.DataFrame]:
        frames = []
        for name in ("components", "edges"):
            csv_path = path / f"{name}.csv"
            if not csv_path.exists():
                raise ValidationError(f"Missing {csv_path.name} in {path}")
            frames.append(pd.read_csv(csv_path, dtype=str))
        return frames[0], frames[1]

    def _to_component(self, row: dict) -> Component:
        """Convert a validated row into a Component."""
        failure = None
        pipeline_name = safe_str(row.get("pipeline_name"))
        failure_time = safe_str(row.get("failure_time"))
        if pipeline_name or failure_time:
            failure = FailureDetails(
                pipeline_name=pipeline_name or "",
                failure_time=failure_time or "",
                failure_count=parse_int(row.get("failure_count"), default=1),
                status=safe_str(row.get("failure_status"), "Failed"),
            )

        environment = safe_str(row.get("environment"))

        return Component(
            id=safe_str(row["id"]),
            type=ComponentType(normalize_component_type(row["type"])),
            environment=Environment(normalize_environment(environment)) if environment
            else Environment.PRODUCTION,
            name=safe_str(row.get("name"), ""),
            datatype=safe_str(row.get("datatype")),
            database=safe_str(row.get("database")),
            endpoint=safe_str(row.get("endpoint")),
            dashboard_name=safe_str(row.get("dashboard_name")),
            page_name=safe_str(row.get("page_name")),
            chart_type=safe_str(row.get("chart_type")),
            failed=parse_bool(row.get("has_failed")),
            failure=failure,
        )

    def _to_edge(self, row: dict) -> Edge:
        """Convert a validated row into an Edge."""
        edge_type = safe_str(row.get("type"))
        return Edge(
            id=safe_str(row["id"]),
            source=safe_str(row["source"]),
            target=safe_str(row["target"]),
            label=safe_str(row.get("label"), ""),
            type=EdgeType(normalize_edge_type(edge_type)) if edge_type else EdgeType.REFERENCES,
            animated=parse_bool(row.get("animated"), default=True),
        )
