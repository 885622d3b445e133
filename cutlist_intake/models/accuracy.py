"""Accuracy metrics and the append-only accuracy sample."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional


# Per-field metric attribute -> report name
FIELD_METRICS = (
    ("dimension_accuracy", "dimensions"),
    ("material_accuracy", "materials"),
    ("edging_accuracy", "edging"),
    ("grooving_accuracy", "grooving"),
    ("quantity_accuracy", "quantities"),
    ("label_accuracy", "labels"),
)

_CAMEL_KEYS = {
    "total_parts": "totalParts",
    "correct_parts": "correctParts",
    "accuracy": "accuracy",
    "dimension_accuracy": "dimensionAccuracy",
    "material_accuracy": "materialAccuracy",
    "edging_accuracy": "edgingAccuracy",
    "grooving_accuracy": "groovingAccuracy",
    "quantity_accuracy": "quantityAccuracy",
    "label_accuracy": "labelAccuracy",
    "few_shot_examples_used": "fewShotExamplesUsed",
    "patterns_applied": "patternsApplied",
    "client_template_used": "clientTemplateUsed",
    "provider": "provider",
    "document_difficulty": "documentDifficulty",
    "session_id": "sessionId",
    "source_type": "sourceType",
    "client_name": "clientName",
}


@dataclass
class AccuracyMetrics:
    """
    Scalar accuracies for one candidate-vs-truth comparison.

    Per-field values are None when no pairs were matched ("no data"),
    which is different from 0.0 ("all wrong").
    """
    total_parts: int
    correct_parts: int
    matched_parts: int
    accuracy: float
    dimension_accuracy: Optional[float] = None
    material_accuracy: Optional[float] = None
    edging_accuracy: Optional[float] = None
    grooving_accuracy: Optional[float] = None
    quantity_accuracy: Optional[float] = None
    label_accuracy: Optional[float] = None

    def field_accuracies(self) -> Dict[str, Optional[float]]:
        return {name: getattr(self, attr) for attr, name in FIELD_METRICS}

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "totalParts": self.total_parts,
            "correctParts": self.correct_parts,
            "matchedParts": self.matched_parts,
            "accuracy": round(self.accuracy, 4),
        }
        for attr, _ in FIELD_METRICS:
            value = getattr(self, attr)
            d[_CAMEL_KEYS[attr]] = round(value, 4) if value is not None else None
        return d


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        ts = value
    else:
        ts = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class AccuracySample:
    """
    One finalized parse-and-correct session.

    Append-only: produced by AccuracySession.finalize() and consumed by the
    aggregator. Never mutated after creation.
    """
    total_parts: int
    correct_parts: int
    accuracy: float
    provider: str
    created_at: datetime
    dimension_accuracy: Optional[float] = None
    material_accuracy: Optional[float] = None
    edging_accuracy: Optional[float] = None
    grooving_accuracy: Optional[float] = None
    quantity_accuracy: Optional[float] = None
    label_accuracy: Optional[float] = None
    few_shot_examples_used: int = 0
    patterns_applied: int = 0
    client_template_used: bool = False
    document_difficulty: Optional[str] = None
    session_id: Optional[str] = None
    source_type: Optional[str] = None
    client_name: Optional[str] = None

    def __post_init__(self):
        # Naive timestamps are UTC; everything is stored as aware UTC
        object.__setattr__(self, "created_at", _parse_timestamp(self.created_at))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to camelCase dict for JSON serialization."""
        d = {camel: getattr(self, attr) for attr, camel in _CAMEL_KEYS.items()}
        d["createdAt"] = self.created_at.isoformat()
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AccuracySample":
        """Build a sample from camelCase or snake_case keys."""
        values: Dict[str, Any] = {}
        for attr, camel in _CAMEL_KEYS.items():
            if camel in data:
                values[attr] = data[camel]
            elif attr in data:
                values[attr] = data[attr]

        created = data.get("createdAt", data.get("created_at"))
        if created is None:
            raise ValueError("accuracy sample has no createdAt")
        values["created_at"] = _parse_timestamp(created)
        values.setdefault("provider", "unknown")

        for key in ("total_parts", "correct_parts", "accuracy"):
            if key not in values:
                raise ValueError(f"accuracy sample is missing '{key}'")
        return cls(**values)
