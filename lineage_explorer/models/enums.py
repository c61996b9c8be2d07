"""Enumerations for lineage graph data types."""

from enum import Enum


class ComponentType(str, Enum):
    """Kind of data-platform entity a component represents."""
    DATABASE = "database"
    TABLE = "table"
    VIEW = "view"
    STORED_PROCEDURE = "stored_procedure"
    ACTIVITY = "activity"                 # ETL / Data Factory activity
    POWER_BI_CHART = "power_bi_chart"     # Dashboard visual
    DATASET = "dataset"


class Environment(str, Enum):
    """Deployment environment of a component."""
    PRODUCTION = "production"
    PRE_PRODUCTION = "pre-production"


class EdgeType(str, Enum):
    """Relationship type between two components (display styling only)."""
    READS = "reads"
    WRITES = "writes"
    USES = "uses"
    REFERENCES = "references"


class Direction(str, Enum):
    """Which side of the root a lineage query explores."""
    UPSTREAM = "upstream"
    DOWNSTREAM = "downstream"
    BOTH = "both"

    @classmethod
    def parse(cls, value) -> "Direction":
        """Accept a Direction or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(d.value for d in cls)
            raise ValueError(f"Invalid direction {value!r} (expected one of: {valid})")

    def travel_directions(self) -> tuple:
        """Travel directions walked for this query direction, upstream first."""
        if self is Direction.UPSTREAM:
            return (TravelDirection.UP,)
        if self is Direction.DOWNSTREAM:
            return (TravelDirection.DOWN,)
        return (TravelDirection.UP, TravelDirection.DOWN)


class TravelDirection(str, Enum):
    """Direction of a single traversal walk."""
    UP = "up"       # Follow edges into the node (edge.target == node)
    DOWN = "down"   # Follow edges out of the node (edge.source == node)

    @property
    def sign(self) -> int:
        return -1 if self is TravelDirection.UP else 1


class WarningKind(str, Enum):
    """Non-fatal data-integrity conditions reported alongside results."""
    DANGLING_EDGE = "dangling_edge"               # Edge endpoint not in component set
    DUPLICATE_EDGE = "duplicate_edge"             # Edge id seen more than once
    DUPLICATE_COMPONENT = "duplicate_component"   # Component id seen more than once
    UNKNOWN_ROOT = "unknown_root"                 # Root id not in component set
    DEPTH_CLAMPED = "depth_clamped"               # depth < 1 raised to 1
