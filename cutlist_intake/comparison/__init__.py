"""Comparison of parsed parts against ground truth."""

from .diff_result import FieldDifference, compute_differences, label_similarity
from .matcher import PartMatcher, MatchedPair, MatchResult, match_parts

__all__ = [
    "FieldDifference",
    "compute_differences",
    "label_similarity",
    "PartMatcher",
    "MatchedPair",
    "MatchResult",
    "match_parts",
]
