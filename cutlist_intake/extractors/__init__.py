"""Text-to-part extraction: shorthand grammar, confidence, validation."""

from .canonicalize import canonicalize, canonicalize_lines, normalize_quotes, split_dimension_runs
from .patterns import EDGE_PATTERNS, GROOVE_SIDES, lookup_edges, lookup_groove_side
from .shorthand import parse_shorthand, parse_shorthand_lines, ShorthandBatchResult
from .confidence import (
    estimate_field_confidence,
    confidence_level,
    overall_confidence,
    fields_needing_review,
    attach_confidence,
)
from .validator import validate_part, validate_parts

__all__ = [
    "canonicalize",
    "canonicalize_lines",
    "split_dimension_runs",
    "normalize_quotes",
    "EDGE_PATTERNS",
    "GROOVE_SIDES",
    "lookup_edges",
    "lookup_groove_side",
    "parse_shorthand",
    "parse_shorthand_lines",
    "ShorthandBatchResult",
    "estimate_field_confidence",
    "confidence_level",
    "overall_confidence",
    "fields_needing_review",
    "attach_confidence",
    "validate_part",
    "validate_parts",
]
