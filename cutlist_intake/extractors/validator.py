"""Validation for canonical parts.

Rules:
- part_id and material_id must be non-empty strings
- L, W and thickness must be positive numbers
- qty must be an integer in [1, 9999]
- grain must be a known mode, and a grained part must not allow rotation
- edging and groove sides must be L1, L2, W1 or W2

Invalid parts NEVER raise -- they are reported with error messages so the
caller can decide what to surface.
"""

import math
from typing import Any, Dict, List, Tuple

from ..models.part import CutPart, GrainMode
from ..schemas.part_schema import (
    MAX_QUANTITY,
    MIN_QUANTITY,
    POSITIVE_NUMERIC_FIELDS,
    REQUIRED_STRING_FIELDS,
    VALID_GROOVE_SIDES,
    is_valid_edge_id,
    is_valid_grain,
)


def _resolve(part: CutPart, path: str) -> Any:
    value: Any = part
    for attr in path.split("."):
        value = getattr(value, attr, None)
    return value


def validate_part(part: CutPart) -> Tuple[bool, List[str]]:
    """
    Validate a single part.

    Args:
        part: Canonical part

    Returns:
        Tuple of (is_valid, errors) where errors is one message per rule broken
    """
    errors: List[str] = []

    for name in REQUIRED_STRING_FIELDS:
        value = getattr(part, name, None)
        if not isinstance(value, str) or not value.strip():
            errors.append(f"missing '{name}'")

    for path in POSITIVE_NUMERIC_FIELDS:
        value = _resolve(part, path)
        if not isinstance(value, (int, float)) or isinstance(value, bool) or math.isnan(value):
            errors.append(f"non-numeric value for '{path}': {value!r}")
        elif value <= 0:
            errors.append(f"non-positive value for '{path}': {value}")

    qty = part.qty
    if not isinstance(qty, int) or isinstance(qty, bool):
        errors.append(f"non-integer quantity: {qty!r}")
    elif not (MIN_QUANTITY <= qty <= MAX_QUANTITY):
        errors.append(f"quantity out of range: {qty}")

    if not is_valid_grain(part.grain):
        errors.append(f"unknown grain '{part.grain}'")
    elif part.grain != GrainMode.NONE and part.allow_rotation:
        errors.append("grained part must not allow rotation")

    for edge_id in part.ops.edging:
        if not is_valid_edge_id(edge_id):
            errors.append(f"unknown edge '{edge_id}'")

    for groove in part.ops.grooves:
        if groove.side not in VALID_GROOVE_SIDES:
            errors.append(f"unknown groove side '{groove.side}'")

    return not errors, errors


def validate_parts(parts: List[CutPart]) -> Tuple[List[CutPart], Dict[str, Any]]:
    """
    Validate a list of parts.

    Args:
        parts: Canonical parts

    Returns:
        Tuple of (valid_parts, stats)
        stats = {"valid": N, "invalid": N, "total": N, "errors": {"reason": count},
                 "invalid_ids": [part_id, ...]}
    """
    valid: List[CutPart] = []
    stats: Dict[str, Any] = {
        "valid": 0,
        "invalid": 0,
        "total": len(parts),
        "errors": {},
        "invalid_ids": [],
    }

    for part in parts:
        ok, errors = validate_part(part)
        if ok:
            valid.append(part)
            stats["valid"] += 1
        else:
            stats["invalid"] += 1
            stats["invalid_ids"].append(part.part_id)
            for e in errors:
                stats["errors"][e] = stats["errors"].get(e, 0) + 1

    return valid, stats
