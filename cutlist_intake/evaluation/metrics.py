"""Accuracy metrics for a candidate-vs-truth comparison.

- correct_parts: matched pairs with zero differences
- accuracy: correct_parts / truth_count (misses count as wrong, never excluded)
- per-field accuracy: share of MATCHED pairs agreeing on that field
  (None when nothing matched)
"""

from typing import List, Optional, Tuple

from ..comparison.matcher import MatchResult, PartMatcher
from ..config import Config
from ..models.accuracy import FIELD_METRICS, AccuracyMetrics
from ..models.confidence import FieldName
from ..models.part import CutPart


# Metric attribute -> field whose difference counts against it
_METRIC_FIELDS = {
    "dimension_accuracy": FieldName.DIMENSIONS,
    "material_accuracy": FieldName.MATERIAL,
    "edging_accuracy": FieldName.EDGING,
    "grooving_accuracy": FieldName.GROOVE,
    "quantity_accuracy": FieldName.QUANTITY,
    "label_accuracy": FieldName.LABEL,
}


def compute_accuracy(match_result: MatchResult, truth_count: Optional[int] = None) -> AccuracyMetrics:
    """
    Compute accuracy metrics from a match result.

    Args:
        match_result: Output of PartMatcher.match()
        truth_count: Number of truth parts (defaults to matched + unmatched)

    Returns:
        AccuracyMetrics. accuracy is 1.0 for an empty truth list.
    """
    if truth_count is None:
        truth_count = match_result.truth_count

    matched = match_result.matched
    correct = sum(1 for pair in matched if not pair.differences)
    accuracy = correct / truth_count if truth_count > 0 else 1.0

    per_field = {}
    for attr, _ in FIELD_METRICS:
        if not matched:
            per_field[attr] = None
            continue
        field = _METRIC_FIELDS[attr]
        agree = sum(
            1 for pair in matched
            if not any(d.field == field for d in pair.differences)
        )
        per_field[attr] = agree / len(matched)

    return AccuracyMetrics(
        total_parts=truth_count,
        correct_parts=correct,
        matched_parts=len(matched),
        accuracy=accuracy,
        **per_field,
    )


def evaluate_parts(
    candidate: List[CutPart],
    truth: List[CutPart],
    settings: Optional[Config] = None,
) -> Tuple[MatchResult, AccuracyMetrics]:
    """Match candidate against truth and compute metrics in one call."""
    result = PartMatcher(settings=settings).match(candidate, truth)
    return result, compute_accuracy(result, len(truth))


def _fmt(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{value:.1%}"


def print_accuracy_table(metrics: AccuracyMetrics, match_result: Optional[MatchResult] = None) -> None:
    """Print a formatted accuracy summary table."""
    print("\n" + "=" * 60)
    print("PARSE ACCURACY")
    print("=" * 60)
    print(f"Truth parts:   {metrics.total_parts}")
    print(f"Matched parts: {metrics.matched_parts}")
    print(f"Correct parts: {metrics.correct_parts}")
    print(f"Accuracy:      {_fmt(metrics.accuracy)}")

    print(f"\n{'Field':<20} {'Accuracy':<10}")
    print("-" * 30)
    for name, value in metrics.field_accuracies().items():
        print(f"{name:<20} {_fmt(value):<10}")

    if match_result is not None:
        wrong = [p for p in match_result.matched if p.differences]
        if wrong:
            print("\nDifferences:")
            for pair in wrong:
                for diff in pair.differences:
                    print(f"  {pair.truth.part_id}: {diff.describe()}")
        if match_result.unmatched:
            print("\nUnmatched truth parts: " + ", ".join(p.part_id for p in match_result.unmatched))
        if match_result.extra:
            print("Extra candidate parts: " + ", ".join(p.part_id for p in match_result.extra))

    print("=" * 60)
