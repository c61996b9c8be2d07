"""Data models and enums for the lineage explorer."""

from .enums import ComponentType, Environment, EdgeType, Direction, TravelDirection, WarningKind
from .dataclasses import (
    FailureDetails,
    Component,
    Edge,
    LineageQuery,
    DataIntegrityWarning,
    Position,
    LineageResult,
    LineageView,
)

__all__ = [
    "ComponentType",
    "Environment",
    "EdgeType",
    "Direction",
    "TravelDirection",
    "WarningKind",
    "FailureDetails",
    "Component",
    "Edge",
    "LineageQuery",
    "DataIntegrityWarning",
    "Position",
    "LineageResult",
    "LineageView",
]
