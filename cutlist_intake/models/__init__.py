"""Data models for the cutlist intake engine."""

from .part import (
    EDGE_IDS,
    GrainMode,
    IngestionMethod,
    PartSize,
    EdgeOp,
    GrooveOp,
    HoleOp,
    CncOp,
    PartOps,
    PartAudit,
    CutPart,
    new_part_id,
)
from .confidence import FieldName, ConfidenceLevel, FieldConfidence
from .accuracy import AccuracyMetrics, AccuracySample, FIELD_METRICS

__all__ = [
    "EDGE_IDS",
    "GrainMode",
    "IngestionMethod",
    "PartSize",
    "EdgeOp",
    "GrooveOp",
    "HoleOp",
    "CncOp",
    "PartOps",
    "PartAudit",
    "CutPart",
    "new_part_id",
    "FieldName",
    "ConfidenceLevel",
    "FieldConfidence",
    "AccuracyMetrics",
    "AccuracySample",
    "FIELD_METRICS",
]
