"""
Validate lineage datasets against the contract.

This ensures any input (Excel, CSV, JSON) conforms to the expected format
before it is turned into components and edges. Dangling edge references are
not a contract violation: they are reported when lineage is computed.
"""

from pathlib import Path
import json
import re

import pandas as pd

from ..models.enums import ComponentType, EdgeType, Environment


class ValidationError(Exception):
    """Raised when input doesn't conform to the lineage contract."""
    pass


# Contract definition
REQUIRED_COMPONENT_COLUMNS = ["id", "type", "environment"]

OPTIONAL_COMPONENT_COLUMNS = [
    "name",
    "datatype",
    "database",
    "endpoint",
    "dashboard_name",
    "page_name",
    "chart_type",
    "has_failed",
    "pipeline_name",
    "failure_time",
    "failure_count",
    "failure_status",
]

REQUIRED_EDGE_COLUMNS = ["id", "source", "target"]

OPTIONAL_EDGE_COLUMNS = ["label", "type", "animated"]

VALID_COMPONENT_TYPES = {t.value for t in ComponentType}
VALID_ENVIRONMENTS = {e.value for e in Environment}
VALID_EDGE_TYPES = {t.value for t in EdgeType}

# Column name variants (after snake_casing) -> contract names
COMPONENT_COLUMN_MAPPING = {
    "component_id": "id",
    "componentid": "id",
    "component_name": "name",
    "component_type": "type",
    "componenttype": "type",
    "env": "environment",
    "failed": "has_failed",
    "hasfailed": "has_failed",
    "dashboard": "dashboard_name",
    "page": "page_name",
    "chart": "chart_type",
    "failure_details.pipeline_name": "pipeline_name",
    "failure_details.failure_time": "failure_time",
    "failure_details.failure_count": "failure_count",
    "failure_details.status": "failure_status",
    "failure.pipeline_name": "pipeline_name",
    "failure.failure_time": "failure_time",
    "failure.failure_count": "failure_count",
    "failure.status": "failure_status",
    "status": "failure_status",
}

EDGE_COLUMN_MAPPING = {
    "edge_id": "id",
    "edgeid": "id",
    "from": "source",
    "source_id": "source",
    "src": "source",
    "to": "target",
    "target_id": "target",
    "dest": "target",
    "destination": "target",
    "edge_type": "type",
    "relationship": "type",
    "relationship_type": "type",
}


def validate_input(path: Path) -> bool:
    """
    Validate a dataset conforms to the lineage contract.

    Args:
        path: Path to a JSON file, an Excel workbook, or a directory
              holding components.csv and edges.csv

    Raises:
        ValidationError: If input is invalid

    Returns:
        True if valid
    """
    path = Path(path)

    if not path.exists():
        raise ValidationError(f"Input not found: {path}")

    if path.is_dir():
        return _validate_csv_dir(path)

    suffix = path.suffix.lower()

    if suffix in (".xlsx", ".xls"):
        return _validate_excel(path)
    elif suffix == ".json":
        return _validate_json(path)
    else:
        raise ValidationError(f"Unsupported file format: {suffix}")


def _validate_excel(path: Path) -> bool:
    """Validate Excel workbook (components + edges sheets)."""
    try:
        xl = pd.ExcelFile(path)
        component_sheet = find_sheet(xl.sheet_names, ["component", "node"])
        edge_sheet = find_sheet(xl.sheet_names, ["edge", "relationship", "link"])
        if component_sheet is None or edge_sheet is None:
            raise ValidationError(
                f"Workbook needs a components sheet and an edges sheet, found: {xl.sheet_names}")
        components = pd.read_excel(xl, sheet_name=component_sheet, dtype=str)
        edges = pd.read_excel(xl, sheet_name=edge_sheet, dtype=str)
    except ValidationError:
        raise
    except Exception as e:
        raise ValidationError(f"Cannot read Excel: {e}")

    return validate_components_df(components) and validate_edges_df(edges)


def _validate_csv_dir(path: Path) -> bool:
    """Validate a directory of CSV files."""
    frames = {}
    for name in ("components", "edges"):
        csv_path = path / f"{name}.csv"
        if not csv_path.exists():
            raise ValidationError(f"Missing {csv_path.name} in {path}")
        try:
            frames[name] = pd.read_csv(csv_path, dtype=str)
        except Exception as e:
            raise ValidationError(f"Cannot read CSV: {e}")

    return validate_components_df(frames["components"]) and validate_edges_df(frames["edges"])


def _validate_json(path: Path) -> bool:
    """Validate JSON graph format."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except Exception as e:
        raise ValidationError(f"Cannot read JSON: {e}")

    return validate_records(data)


def validate_records(data) -> bool:
    """Validate a parsed JSON document ({"components": [...], "edges": [...]})."""
    if not isinstance(data, dict):
        raise ValidationError("JSON root must be an object")

    if "components" not in data or "edges" not in data:
        raise ValidationError("JSON missing 'components' or 'edges' key")

    for key in ("components", "edges"):
        if not isinstance(data[key], list):
            raise ValidationError(f"JSON '{key}' must be a list")
        for i, record in enumerate(data[key]):
            if not isinstance(record, dict):
                raise ValidationError(f"{key}[{i}] must be an object")

    validate_components_df(records_to_frame(data["components"], REQUIRED_COMPONENT_COLUMNS))
    validate_edges_df(records_to_frame(data["edges"], REQUIRED_EDGE_COLUMNS))
    return True


def records_to_frame(records: list, required: list) -> pd.DataFrame:
    """Flatten JSON records (nested objects become dotted columns)."""
    if not records:
        return pd.DataFrame(columns=required)
    return pd.json_normalize(records)


def snake_case(name: str) -> str:
    """'failureDetails.pipelineName' -> 'failure_details.pipeline_name'."""
    name = str(name).strip()
    name = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name)
    return re.sub(r"[\s\-]+", "_", name).lower()


def normalize_columns(df: pd.DataFrame, mapping: dict) -> pd.DataFrame:
    """Normalize column names in place (snake_case, then known variants)."""
    df.columns = [snake_case(c) for c in df.columns]

    # First variant in mapping order claims a target; later ones keep their names
    renames = {}
    for variant, target in mapping.items():
        if variant in df.columns and target not in df.columns and target not in renames.values():
            renames[variant] = target
    df.rename(columns=renames, inplace=True)
    return df


def normalize_component_type(value) -> str:
    return re.sub(r"[\s\-]+", "_", str(value).strip().lower())


def normalize_environment(value) -> str:
    value = re.sub(r"[\s_]+", "-", str(value).strip().lower())
    if value in ("preproduction", "pre-prod", "preprod"):
        return Environment.PRE_PRODUCTION.value
    if value == "prod":
        return Environment.PRODUCTION.value
    return value


def normalize_edge_type(value) -> str:
    return str(value).strip().lower()


def validate_components_df(df: pd.DataFrame) -> bool:
    """
    Validate components DataFrame has required columns and valid values.

    Raises:
        ValidationError: If DataFrame doesn't conform to contract

    Returns:
        True if valid
    """
    normalize_columns(df, COMPONENT_COLUMN_MAPPING)

    missing = set(REQUIRED_COMPONENT_COLUMNS) - set(df.columns)
    if missing:
        raise ValidationError(f"Components missing required columns: {sorted(missing)}")

    _check_not_blank(df, "id", "Components")
    _check_not_blank(df, "type", "Components")

    types = set(df["type"].dropna().map(normalize_component_type))
    invalid_types = types - VALID_COMPONENT_TYPES
    if invalid_types:
        raise ValidationError(f"Invalid component type values: {sorted(invalid_types)}")

    environments = set(df["environment"].dropna().map(normalize_environment))
    invalid_envs = environments - VALID_ENVIRONMENTS
    if invalid_envs:
        raise ValidationError(f"Invalid environment values: {sorted(invalid_envs)}")

    return True


def validate_edges_df(df: pd.DataFrame) -> bool:
    """
    Validate edges DataFrame has required columns and valid values.

    Raises:
        ValidationError: If DataFrame doesn't conform to contract

    Returns:
        True if valid
    """
    normalize_columns(df, EDGE_COLUMN_MAPPING)

    missing = set(REQUIRED_EDGE_COLUMNS) - set(df.columns)
    if missing:
        raise ValidationError(f"Edges missing required columns: {sorted(missing)}")

    for column in REQUIRED_EDGE_COLUMNS:
        _check_not_blank(df, column, "Edges")

    if "type" in df.columns:
        types = set(df["type"].dropna().map(normalize_edge_type)) - {""}
        invalid_types = types - VALID_EDGE_TYPES
        if invalid_types:
            raise ValidationError(f"Invalid edge type values: {sorted(invalid_types)}")

    return True


def _check_not_blank(df: pd.DataFrame, column: str, what: str) -> None:
    values = df[column]
    blank = values.isna() | (values.astype(str).str.strip() == "")
    if blank.any():
        raise ValidationError(f"{what} missing {column}: {int(blank.sum())} rows")


def find_sheet(sheet_names: list, hints: list, pattern: str = None):
    """Find the first sheet whose name contains the pattern or one of the hints."""
    candidates = [pattern.lower()] if pattern else hints
    for hint in candidates:
        for name in sheet_names:
            if hint in name.lower():
                return name
    return None


def get_column_order(kind: str) -> list:
    """Get the standard column order for components or edges output."""
    if kind == "components":
        return REQUIRED_COMPONENT_COLUMNS + OPTIONAL_COMPONENT_COLUMNS
    if kind == "edges":
        return REQUIRED_EDGE_COLUMNS + OPTIONAL_EDGE_COLUMNS
    raise ValueError(f"Unknown column order: {kind}")
