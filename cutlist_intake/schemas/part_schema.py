"""Validation schema rules for canonical parts.

Defines value constraints for CutPart fields. Used by the validator to
check parts coming from the shorthand grammar or an external AI provider.
"""

from typing import Set

from ..models.part import EDGE_IDS, GrainMode


# Numeric fields that must be strictly positive (dotted path on CutPart)
POSITIVE_NUMERIC_FIELDS = ("size.L", "size.W", "thickness_mm")

# Quantity range (inclusive)
MIN_QUANTITY = 1
MAX_QUANTITY = 9999

# Valid grain modes
VALID_GRAIN_MODES: Set[str] = {g.value for g in GrainMode}

# Valid edge ids for edging ops and groove sides
VALID_EDGE_IDS: Set[str] = set(EDGE_IDS)
VALID_GROOVE_SIDES: Set[str] = set(EDGE_IDS)

# Fields that must be non-empty strings
REQUIRED_STRING_FIELDS = ("part_id", "material_id")


def is_valid_edge_id(edge_id: str) -> bool:
    """Check if an edge id is recognized."""
    return edge_id in VALID_EDGE_IDS


def is_valid_grain(grain) -> bool:
    """Check if a grain value (enum or string) is recognized."""
    value = grain.value if isinstance(grain, GrainMode) else grain
    return value in VALID_GRAIN_MODES
