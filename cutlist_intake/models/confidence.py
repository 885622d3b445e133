"""Per-field confidence model."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class FieldName(str, Enum):
    """Logical fields scored by the confidence estimator."""
    DIMENSIONS = "dimensions"
    QUANTITY = "quantity"
    MATERIAL = "material"
    EDGING = "edging"
    GROOVE = "groove"
    LABEL = "label"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


@dataclass
class FieldConfidence:
    """
    Trust estimate for one field of one part.

    Never persisted on its own; always recomputed from the current part
    and its original text.
    """
    level: ConfidenceLevel
    score: float
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"level": self.level.value, "score": self.score}
        if self.reason:
            d["reason"] = self.reason
        return d
