"""
Cutlist Intake v1.0

Parsing, confidence scoring and accuracy learning for cut-panel line items.

Components:
- Shorthand grammar: "600 400 2 4e gW h \"Shelf\"" -> canonical part
- Field confidence: per-field trust hints for human review
- Part matcher: greedy candidate-vs-truth pairing with field differences
- Accuracy: metrics, per-document sessions, windowed aggregation
"""

__version__ = "1.0.0"

from .config import Config, ShorthandConfig, Capabilities, default_config
from .errors import (
    ErrorCode,
    CutlistIntakeError,
    SessionError,
    SessionStateError,
    EmptySessionError,
    UnknownSessionError,
    PartExportedError,
)
from .models import (
    CutPart,
    PartSize,
    PartOps,
    PartAudit,
    EdgeOp,
    GrooveOp,
    HoleOp,
    CncOp,
    GrainMode,
    IngestionMethod,
    FieldName,
    ConfidenceLevel,
    FieldConfidence,
    AccuracyMetrics,
    AccuracySample,
)
from .extractors import (
    parse_shorthand,
    parse_shorthand_lines,
    estimate_field_confidence,
    validate_part,
    validate_parts,
)
from .comparison import PartMatcher, MatchResult, MatchedPair, FieldDifference, match_parts
from .evaluation import compute_accuracy, evaluate_parts, load_parts_file, load_samples_file
from .learning import (
    AccuracySession,
    AccuracySessionRegistry,
    SessionMetadata,
    SessionState,
    SamplePublisher,
    InMemorySampleStore,
    AccuracyReport,
    aggregate,
)

__all__ = [
    "__version__",
    "Config",
    "ShorthandConfig",
    "Capabilities",
    "default_config",
    "ErrorCode",
    "CutlistIntakeError",
    "SessionError",
    "SessionStateError",
    "EmptySessionError",
    "UnknownSessionError",
    "PartExportedError",
    "CutPart",
    "PartSize",
    "PartOps",
    "PartAudit",
    "EdgeOp",
    "GrooveOp",
    "HoleOp",
    "CncOp",
    "GrainMode",
    "IngestionMethod",
    "FieldName",
    "ConfidenceLevel",
    "FieldConfidence",
    "AccuracyMetrics",
    "AccuracySample",
    "parse_shorthand",
    "parse_shorthand_lines",
    "estimate_field_confidence",
    "validate_part",
    "validate_parts",
    "PartMatcher",
    "MatchResult",
    "MatchedPair",
    "FieldDifference",
    "match_parts",
    "compute_accuracy",
    "evaluate_parts",
    "load_parts_file",
    "load_samples_file",
    "AccuracySession",
    "AccuracySessionRegistry",
    "SessionMetadata",
    "SessionState",
    "SamplePublisher",
    "InMemorySampleStore",
    "AccuracyReport",
    "aggregate",
]
