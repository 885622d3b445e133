"""Validation rules for canonical parts."""

from .part_schema import (
    POSITIVE_NUMERIC_FIELDS,
    MIN_QUANTITY,
    MAX_QUANTITY,
    VALID_GRAIN_MODES,
    VALID_EDGE_IDS,
    VALID_GROOVE_SIDES,
    REQUIRED_STRING_FIELDS,
    is_valid_edge_id,
    is_valid_grain,
)

__all__ = [
    "POSITIVE_NUMERIC_FIELDS",
    "MIN_QUANTITY",
    "MAX_QUANTITY",
    "VALID_GRAIN_MODES",
    "VALID_EDGE_IDS",
    "VALID_GROOVE_SIDES",
    "REQUIRED_STRING_FIELDS",
    "is_valid_edge_id",
    "is_valid_grain",
]
