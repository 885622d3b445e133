"""Per-field confidence estimation for parsed parts.

Heuristic and independent per field. The output is advisory: it never
mutates the part, never blocks saving, and only tells a reviewer which
fields to double-check.

Usage:
    from cutlist_intake.extractors.confidence import estimate_field_confidence

    conf = estimate_field_confidence(part, source_text="600 400 2 4e")
    conf[FieldName.EDGING].level   # ConfidenceLevel.HIGH
"""

import math
from typing import Dict, List, Optional

from ..config import Config, default_config
from ..models.confidence import ConfidenceLevel, FieldConfidence, FieldName
from ..models.part import CutPart, PartOps
from .patterns import EDGING_MARKERS, GROOVE_MARKERS, MATERIAL_MARKERS, QUANTITY_MARKERS, has_marker


REASON_SWAPPED = "Dimensions may be swapped (L < W)"
REASON_UNUSUAL = "Unusual dimensions detected"
REASON_QTY_INFERRED = "Quantity inferred as 1 (not explicitly stated)"
REASON_QTY_UNMARKED = "Quantity not explicitly marked"
REASON_MATERIAL_DEFAULT = "Default material used"
REASON_MATERIAL_UNMARKED = "Material not named in source text"
REASON_EDGING_UNMARKED = "Edgebanding detected but not explicitly marked"
REASON_GROOVE_UNMARKED = "Groove detected but not explicitly marked"
REASON_OPS_UNREADABLE = "Operations could not be read"
REASON_LABEL_MISSING = "No part name specified"
REASON_LABEL_SHORT = "Part name is very short"


def confidence_level(score: float, settings: Optional[Config] = None) -> ConfidenceLevel:
    """Map a score to a level: high >= 0.85, medium >= 0.5, low > 0."""
    settings = settings or default_config
    if score is None or math.isnan(score):
        return ConfidenceLevel.UNKNOWN
    if score >= settings.high_confidence_threshold:
        return ConfidenceLevel.HIGH
    if score >= settings.medium_confidence_threshold:
        return ConfidenceLevel.MEDIUM
    if score > 0:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.UNKNOWN


def _make(score: float, reason: Optional[str], settings: Config) -> FieldConfidence:
    """Clamp the score to [0, 1] and attach its level."""
    try:
        score = float(score)
    except (TypeError, ValueError):
        score = float("nan")
    if math.isnan(score):
        return FieldConfidence(level=ConfidenceLevel.UNKNOWN, score=0.0, reason=reason)
    score = min(1.0, max(0.0, score))
    return FieldConfidence(level=confidence_level(score, settings), score=score, reason=reason)


def _as_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _dimensions(part: CutPart, settings: Config) -> FieldConfidence:
    size = getattr(part, "size", None)
    length = _as_number(getattr(size, "L", None))
    width = _as_number(getattr(size, "W", None))

    if length is None or width is None or length <= 0 or width <= 0:
        return _make(0.3, REASON_UNUSUAL, settings)

    swapped = length < width
    in_range = length <= settings.max_panel_dimension_mm and width <= settings.max_panel_dimension_mm

    if in_range and not swapped:
        return _make(0.95, None, settings)
    return _make(0.7, REASON_SWAPPED if swapped else REASON_UNUSUAL, settings)


def _quantity(part: CutPart, text: str, settings: Config) -> FieldConfidence:
    if has_marker(text, QUANTITY_MARKERS):
        return _make(0.95, None, settings)
    qty = _as_number(getattr(part, "qty", None))
    return _make(0.6, REASON_QTY_INFERRED if qty in (None, 1) else REASON_QTY_UNMARKED, settings)


def _material(part: CutPart, text: str, settings: Config) -> FieldConfidence:
    if has_marker(text, MATERIAL_MARKERS):
        return _make(0.9, None, settings)
    material_id = getattr(part, "material_id", None)
    if isinstance(material_id, str) and material_id.strip():
        return _make(0.6, REASON_MATERIAL_UNMARKED, settings)
    return _make(0.4, REASON_MATERIAL_DEFAULT, settings)


def _edging(part: CutPart, text: str, settings: Config) -> FieldConfidence:
    ops = getattr(part, "ops", None)
    if not isinstance(ops, PartOps):
        return _make(0.3, REASON_OPS_UNREADABLE, settings)
    if not ops.edge_ids():
        return _make(0.8, None, settings)
    if has_marker(text, EDGING_MARKERS):
        return _make(0.9, None, settings)
    return _make(0.5, REASON_EDGING_UNMARKED, settings)


def _groove(part: CutPart, text: str, settings: Config) -> FieldConfidence:
    ops = getattr(part, "ops", None)
    if not isinstance(ops, PartOps):
        return _make(0.3, REASON_OPS_UNREADABLE, settings)
    if not ops.grooves:
        return _make(0.85, None, settings)
    if has_marker(text, GROOVE_MARKERS):
        return _make(0.9, None, settings)
    return _make(0.5, REASON_GROOVE_UNMARKED, settings)


def _label(part: CutPart, settings: Config) -> FieldConfidence:
    label = getattr(part, "label", None)
    label = label.strip() if isinstance(label, str) else ""
    if not label:
        return _make(0.5, REASON_LABEL_MISSING, settings)
    if len(label) > 2:
        return _make(0.9, None, settings)
    return _make(0.6, REASON_LABEL_SHORT, settings)


def estimate_field_confidence(
    part: CutPart,
    source_text: Optional[str] = None,
    settings: Optional[Config] = None,
) -> Dict[FieldName, FieldConfidence]:
    """
    Score every field of a part against the text it was parsed from.

    Args:
        part: Canonical part (never mutated)
        source_text: Raw text the part came from. Empty or None means the
            part was entered manually and is trusted at 1.0, except for
            dimension anomalies which are always flagged.
        settings: Thresholds (default_config when omitted)

    Returns:
        Dict mapping every FieldName to its FieldConfidence
    """
    settings = settings or default_config
    text = source_text.strip() if isinstance(source_text, str) else ""

    dimensions = _dimensions(part, settings)

    if not text:
        trusted = _make(1.0, None, settings)
        result = {name: trusted for name in FieldName}
        if dimensions.score < 0.95:
            result[FieldName.DIMENSIONS] = dimensions
        else:
            result[FieldName.DIMENSIONS] = trusted
        return result

    return {
        FieldName.DIMENSIONS: dimensions,
        FieldName.QUANTITY: _quantity(part, text, settings),
        FieldName.MATERIAL: _material(part, text, settings),
        FieldName.EDGING: _edging(part, text, settings),
        FieldName.GROOVE: _groove(part, text, settings),
        FieldName.LABEL: _label(part, settings),
    }


def overall_confidence(confidences: Dict[FieldName, FieldConfidence]) -> float:
    """Mean score across fields (0.0 for an empty map)."""
    if not confidences:
        return 0.0
    return sum(c.score for c in confidences.values()) / len(confidences)


def fields_needing_review(
    confidences: Dict[FieldName, FieldConfidence],
    threshold: Optional[float] = None,
) -> List[FieldName]:
    """Fields scoring below the review threshold, least confident first."""
    if threshold is None:
        threshold = default_config.review_threshold
    low = [(c.score, name) for name, c in confidences.items() if c.score < threshold]
    low.sort(key=lambda item: item[0])
    return [name for _, name in low]


def attach_confidence(part: CutPart, confidences: Dict[FieldName, FieldConfidence]) -> float:
    """
    Write the overall score into part.audit.confidence.

    This is the only place confidence touches a part; callers opt in.

    Raises:
        PartExportedError: if the part was already exported
    """
    score = overall_confidence(confidences)
    part.set_confidence(score)
    return part.audit.confidence
