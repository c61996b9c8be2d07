"""
Configuration for lineage traversal and layout.

Layout constants are in diagram units (pixels at zoom 1.0).
"""

from dataclasses import dataclass

from .models.enums import Direction


# =============================================================================
# Query defaults
# =============================================================================

DEFAULT_DIRECTION = Direction.BOTH
DEFAULT_DEPTH = 2

# Depths offered by the depth selector
DEPTH_CHOICES = (1, 2, 3, 4, 5)

# Dashboard visuals sit at the end of long chains; start them deeper
POWER_BI_SUGGESTED_DEPTH = 3


# =============================================================================
# Layout
# =============================================================================

@dataclass(frozen=True)
class LayoutConfig:
    """Spacing used by the hierarchical layout."""
    horizontal_spacing: float = 500.0   # Distance between level columns
    vertical_spacing: float = 300.0     # Distance between slots within a column
    min_vertical_gap: float = 250.0     # Closest two nodes in a column may be
    overlap_passes: int = 2

    def __post_init__(self):
        if self.horizontal_spacing <= 0:
            raise ValueError("horizontal_spacing must be positive")
        if self.vertical_spacing < 0 or self.min_vertical_gap < 0:
            raise ValueError("vertical spacing and gap must not be negative")
        if self.overlap_passes < 1:
            raise ValueError("overlap_passes must be at least 1")


DEFAULT_LAYOUT = LayoutConfig()
