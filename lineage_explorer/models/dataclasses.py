"""Data classes for lineage graph structures."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from .enums import ComponentType, Direction, EdgeType, Environment, WarningKind


@dataclass(frozen=True)
class FailureDetails:
    """Most recent pipeline failure recorded against a component."""
    pipeline_name: str
    failure_time: str
    failure_count: int = 1
    status: str = "Failed"

    def to_dict(self) -> Dict:
        return {
            "pipeline_name": self.pipeline_name,
            "failure_time": self.failure_time,
            "failure_count": self.failure_count,
            "status": self.status,
        }


@dataclass(frozen=True)
class Component:
    """A node in the lineage graph (table, view, procedure, visual, ...)."""
    id: str
    type: ComponentType
    environment: Environment = Environment.PRODUCTION
    name: str = ""

    # Descriptive attributes, carried through for presentation
    datatype: Optional[str] = None
    database: Optional[str] = None
    endpoint: Optional[str] = None

    # Power BI specific
    dashboard_name: Optional[str] = None
    page_name: Optional[str] = None
    chart_type: Optional[str] = None

    # Failure annotation
    failed: bool = False
    failure: Optional[FailureDetails] = None

    def __post_init__(self):
        if not self.name:
            object.__setattr__(self, "name", self.id)

    @property
    def has_failed(self) -> bool:
        return self.failed or self.failure is not None

    def to_dict(self) -> Dict:
        """Convert to a plain dictionary (JSON / Excel friendly)."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "environment": self.environment.value,
            "datatype": self.datatype,
            "database": self.database,
            "endpoint": self.endpoint,
            "dashboard_name": self.dashboard_name,
            "page_name": self.page_name,
            "chart_type": self.chart_type,
            "has_failed": self.has_failed,
            "failure": self.failure.to_dict() if self.failure else None,
        }


@dataclass(frozen=True)
class Edge:
    """A directed relationship (source → target) between two components."""
    id: str
    source: str
    target: str
    label: str = ""
    type: EdgeType = EdgeType.REFERENCES
    animated: bool = True

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label,
            "type": self.type.value,
            "animated": self.animated,
        }


@dataclass(frozen=True)
class LineageQuery:
    """The current view parameters: which root, which way, how far."""
    root_id: Optional[str] = None
    direction: Direction = Direction.BOTH
    depth: int = 2
    issued_at: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, "direction", Direction.parse(self.direction))


@dataclass(frozen=True)
class DataIntegrityWarning:
    """A degraded condition found while computing lineage."""
    kind: WarningKind
    subject_id: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.subject_id}: {self.message}"


@dataclass(frozen=True)
class Position:
    """Computed diagram coordinate of a node."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class LineageResult:
    """Subgraph selected for a query, with signed levels relative to the root."""
    query: LineageQuery
    included_component_ids: Set[str] = field(default_factory=set)
    included_edge_ids: Set[str] = field(default_factory=set)
    levels: Dict[str, int] = field(default_factory=dict)
    warnings: List[DataIntegrityWarning] = field(default_factory=list)
    depth: int = 1  # Effective depth after clamping

    @property
    def is_empty(self) -> bool:
        return not self.included_component_ids

    def level_of(self, component_id: str) -> Optional[int]:
        """Signed distance from root: 0 root, negative upstream, positive downstream."""
        return self.levels.get(component_id)

    def upstream_ids(self) -> Set[str]:
        return {cid for cid, level in self.levels.items() if level < 0}

    def downstream_ids(self) -> Set[str]:
        return {cid for cid, level in self.levels.items() if level > 0}


@dataclass
class LineageView:
    """A lineage result together with its diagram positions."""
    result: LineageResult
    positions: Dict[str, Position] = field(default_factory=dict)

    @property
    def query(self) -> LineageQuery:
        return self.result.query

    @property
    def is_empty(self) -> bool:
        return self.result.is_empty

    def position_of(self, component_id: str) -> Optional[Position]:
        return self.positions.get(component_id)

    def summary(self) -> Dict[str, Any]:
        """Counts used by writers and the CLI report."""
        levels = self.result.levels.values()
        return {
            "root_id": self.query.root_id,
            "direction": self.query.direction.value,
            "depth": self.result.depth,
            "components": len(self.result.included_component_ids),
            "edges": len(self.result.included_edge_ids),
            "upstream": len(self.result.upstream_ids()),
            "downstream": len(self.result.downstream_ids()),
            "min_level": min(levels) if levels else 0,
            "max_level": max(levels) if levels else 0,
            "warnings": len(self.result.warnings),
        }
