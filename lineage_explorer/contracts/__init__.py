"""Contract definitions and validation for lineage datasets."""

from .validator import (
    validate_input,
    validate_components_df,
    validate_edges_df,
    validate_records,
    ValidationError,
)

__all__ = [
    "validate_input",
    "validate_components_df",
    "validate_edges_df",
    "validate_records",
    "ValidationError",
]
