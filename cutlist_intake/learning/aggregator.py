"""Aggregate a window of accuracy samples into a report.

The caller supplies a bounded window (e.g. the last 100 samples); nothing
here reads storage. The report has three parts:

- summary:   overall accuracy, totals, trend, weakest/strongest field,
             few-shot effectiveness
- trends:    one bucket per UTC day
- breakdown: by provider, by document difficulty, weak areas

Usage:
    report = aggregate(store.window(100))
    print(report.summary.trend)        # "improving"
    print_aggregate_table(report)
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import timezone
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from ..config import Config, default_config
from ..models.accuracy import FIELD_METRICS, AccuracySample


TREND_IMPROVING = "improving"
TREND_STABLE = "stable"
TREND_DECLINING = "declining"


class FieldSuggestions(NamedTuple):
    """Remediation hints for a weak field (static, not learned)."""
    field: str
    suggestions: Tuple[str, ...]
    low_accuracy_suggestions: Tuple[str, ...] = ()


WEAK_FIELD_SUGGESTIONS: Tuple[FieldSuggestions, ...] = (
    FieldSuggestions(
        "dimensions",
        ("Add more training examples with varied dimension formats",
         "Check for L/W swaps: confirm which column is the grain (length) axis"),
        ("Check if dimension columns are being confused with other data",),
    ),
    FieldSuggestions(
        "materials",
        ("Add material mappings for commonly misidentified codes",
         "Consider adding more material alias patterns"),
    ),
    FieldSuggestions(
        "edging",
        ("Review edge notation patterns in client templates",
         "Add examples showing different edge marking systems"),
        ("Check if uppercase X vs lowercase x confusion is occurring",),
    ),
    FieldSuggestions(
        "grooving",
        ("Add more examples with groove notation",
         "Review GL/GW column detection patterns"),
    ),
    FieldSuggestions(
        "quantities",
        ("Check for quantity notation patterns like 'x2', '2pcs', '(2)'",),
    ),
    FieldSuggestions(
        "labels",
        ("Ensure label column is correctly identified",
         "Add training examples with varied label formats"),
    ),
)

_SUGGESTIONS_BY_FIELD = {s.field: s for s in WEAK_FIELD_SUGGESTIONS}


# ===========================================================================
# Report structures
# ===========================================================================

def _round(value: Optional[float]) -> Optional[float]:
    return round(value, 4) if value is not None else None


@dataclass
class FewShotEffectiveness:
    """Accuracy with vs. without few-shot examples."""
    with_examples_count: int = 0
    with_examples_accuracy: Optional[float] = None
    without_examples_count: int = 0
    without_examples_accuracy: Optional[float] = None

    @property
    def improvement(self) -> Optional[float]:
        if self.with_examples_accuracy is None or self.without_examples_accuracy is None:
            return None
        return self.with_examples_accuracy - self.without_examples_accuracy

    def to_dict(self) -> Dict[str, Any]:
        return {
            "withExamples": {
                "count": self.with_examples_count,
                "accuracy": _round(self.with_examples_accuracy),
            },
            "withoutExamples": {
                "count": self.without_examples_count,
                "accuracy": _round(self.without_examples_accuracy),
            },
            "improvement": _round(self.improvement),
        }


@dataclass
class AccuracySummary:
    overall_accuracy: float = 0.0
    total_parts_processed: int = 0
    correct_parts: int = 0
    total_documents: int = 0
    trend: str = TREND_STABLE
    weakest_field: str = "unknown"
    strongest_field: str = "unknown"
    field_accuracy: Dict[str, Optional[float]] = field(default_factory=dict)
    few_shot_effectiveness: FewShotEffectiveness = field(default_factory=FewShotEffectiveness)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallAccuracy": round(self.overall_accuracy, 4),
            "totalPartsProcessed": self.total_parts_processed,
            "correctParts": self.correct_parts,
            "totalDocuments": self.total_documents,
            "trend": self.trend,
            "weakestField": self.weakest_field,
            "strongestField": self.strongest_field,
            "fieldAccuracy": {k: _round(v) for k, v in self.field_accuracy.items()},
            "fewShotEffectiveness": self.few_shot_effectiveness.to_dict(),
        }


@dataclass
class DayTrend:
    """One UTC day of samples."""
    date: str
    accuracy: float
    parts_processed: int
    documents_processed: int
    avg_few_shot_examples: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "accuracy": round(self.accuracy, 4),
            "partsProcessed": self.parts_processed,
            "documentsProcessed": self.documents_processed,
            "avgFewShotExamples": round(self.avg_few_shot_examples, 2),
        }


@dataclass
class CategoryBreakdown:
    """Mean accuracy for one provider or difficulty."""
    category: str
    name: str
    count: int
    accuracy: float
    trend: str = TREND_STABLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "name": self.name,
            "count": self.count,
            "accuracy": round(self.accuracy, 4),
            "trend": self.trend,
        }


@dataclass
class WeakArea:
    field: str
    accuracy: float
    sample_size: int
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "accuracy": round(self.accuracy, 4),
            "sampleSize": self.sample_size,
            "suggestions": list(self.suggestions),
        }


@dataclass
class AccuracyBreakdown:
    by_provider: List[CategoryBreakdown] = field(default_factory=list)
    by_difficulty: List[CategoryBreakdown] = field(default_factory=list)
    weak_areas: List[WeakArea] = field(default_factory=list)
    field_accuracy: Dict[str, Optional[float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "byProvider": [b.to_dict() for b in self.by_provider],
            "byDifficulty": [b.to_dict() for b in self.by_difficulty],
            "weakAreas": [w.to_dict() for w in self.weak_areas],
            "fieldAccuracy": {k: _round(v) for k, v in self.field_accuracy.items()},
        }


@dataclass
class AccuracyReport:
    summary: AccuracySummary
    trends: List[DayTrend]
    breakdown: AccuracyBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "trends": [t.to_dict() for t in self.trends],
            "breakdown": self.breakdown.to_dict(),
        }


# ===========================================================================
# Building blocks
# ===========================================================================

def _mean(values: List[float]) -> Optional[float]:
    return sum(values) / len(values) if values else None


def _chronological(samples: List[AccuracySample]) -> List[AccuracySample]:
    return sorted(samples, key=lambda s: s.created_at)


def classify_trend(values: List[float], deadband: Optional[float] = None) -> str:
    """
    Compare the mean of the earlier half of values with the later half.

    The earlier half is values[:n//2]; with fewer than two values the
    trend is stable.
    """
    if deadband is None:
        deadband = default_config.trend_deadband
    if len(values) < 2:
        return TREND_STABLE
    mid = len(values) // 2
    earlier = _mean(values[:mid])
    later = _mean(values[mid:])
    if later > earlier + deadband:
        return TREND_IMPROVING
    if later < earlier - deadband:
        return TREND_DECLINING
    return TREND_STABLE


def field_averages(samples: List[AccuracySample]) -> Dict[str, Optional[float]]:
    """Mean of each per-field accuracy, ignoring samples without data."""
    averages: Dict[str, Optional[float]] = {}
    for attr, name in FIELD_METRICS:
        values = [getattr(s, attr) for s in samples if getattr(s, attr) is not None]
        averages[name] = _mean(values)
    return averages


def _field_sample_sizes(samples: List[AccuracySample]) -> Dict[str, int]:
    return {
        name: sum(1 for s in samples if getattr(s, attr) is not None)
        for attr, name in FIELD_METRICS
    }


def _few_shot(samples: List[AccuracySample]) -> FewShotEffectiveness:
    with_examples = [s.accuracy for s in samples if s.few_shot_examples_used > 0]
    without_examples = [s.accuracy for s in samples if s.few_shot_examples_used <= 0]
    return FewShotEffectiveness(
        with_examples_count=len(with_examples),
        with_examples_accuracy=_mean(with_examples),
        without_examples_count=len(without_examples),
        without_examples_accuracy=_mean(without_examples),
    )


def summarize(samples: List[AccuracySample], settings: Optional[Config] = None) -> AccuracySummary:
    """Overall numbers for a window of samples."""
    settings = settings or default_config
    ordered = _chronological(samples)
    if not ordered:
        return AccuracySummary(field_accuracy=field_averages([]))

    averages = field_averages(ordered)
    ranked = sorted(
        ((avg, name) for name, avg in averages.items() if avg is not None),
        key=lambda item: item[0],
    )

    return AccuracySummary(
        overall_accuracy=_mean([s.accuracy for s in ordered]),
        total_parts_processed=sum(s.total_parts for s in ordered),
        correct_parts=sum(s.correct_parts for s in ordered),
        total_documents=len(ordered),
        trend=classify_trend([s.accuracy for s in ordered], settings.trend_deadband),
        weakest_field=ranked[0][1] if ranked else "unknown",
        strongest_field=ranked[-1][1] if ranked else "unknown",
        field_accuracy=averages,
        few_shot_effectiveness=_few_shot(ordered),
    )


def daily_trends(samples: List[AccuracySample]) -> List[DayTrend]:
    """Bucket samples by UTC day, oldest day first."""
    buckets: "OrderedDict[str, List[AccuracySample]]" = OrderedDict()
    for s in _chronological(samples):
        day = s.created_at.astimezone(timezone.utc).date().isoformat()
        buckets.setdefault(day, []).append(s)

    return [
        DayTrend(
            date=day,
            accuracy=_mean([s.accuracy for s in bucket]),
            parts_processed=sum(s.total_parts for s in bucket),
            documents_processed=len(bucket),
            avg_few_shot_examples=_mean([s.few_shot_examples_used for s in bucket]),
        )
        for day, bucket in sorted(buckets.items())
    ]


def _group_by(
    samples: List[AccuracySample],
    category: str,
    key: Callable[[AccuracySample], Optional[str]],
    deadband: float,
) -> List[CategoryBreakdown]:
    groups: "OrderedDict[str, List[float]]" = OrderedDict()
    for s in samples:
        name = key(s)
        if name is None:
            continue
        groups.setdefault(name, []).append(s.accuracy)

    return [
        CategoryBreakdown(
            category=category,
            name=name,
            count=len(values),
            accuracy=_mean(values),
            trend=classify_trend(values, deadband),
        )
        for name, values in groups.items()
    ]


def suggestions_for(field_name: str, accuracy: float, settings: Optional[Config] = None) -> List[str]:
    """Static remediation hints for a weak field."""
    settings = settings or default_config
    entry = _SUGGESTIONS_BY_FIELD.get(field_name)
    if entry is None:
        return []
    suggestions = list(entry.suggestions)
    if accuracy < settings.low_accuracy_threshold:
        suggestions.extend(entry.low_accuracy_suggestions)
    return suggestions


def identify_weak_areas(samples: List[AccuracySample], settings: Optional[Config] = None) -> List[WeakArea]:
    """Fields averaging below the weak-field threshold, worst first."""
    settings = settings or default_config
    averages = field_averages(samples)
    sizes = _field_sample_sizes(samples)

    weak = [
        WeakArea(
            field=name,
            accuracy=avg,
            sample_size=sizes[name],
            suggestions=suggestions_for(name, avg, settings),
        )
        for name, avg in averages.items()
        if avg is not None and avg < settings.weak_field_threshold
    ]
    weak.sort(key=lambda w: w.accuracy)
    return weak


def breakdown(samples: List[AccuracySample], settings: Optional[Config] = None) -> AccuracyBreakdown:
    """Per-provider and per-difficulty means plus weak areas."""
    settings = settings or default_config
    ordered = _chronological(samples)
    return AccuracyBreakdown(
        by_provider=_group_by(ordered, "provider", lambda s: s.provider or "unknown", settings.trend_deadband),
        by_difficulty=_group_by(ordered, "difficulty", lambda s: s.document_difficulty, settings.trend_deadband),
        weak_areas=identify_weak_areas(ordered, settings),
        field_accuracy=field_averages(ordered),
    )


def aggregate(samples: List[AccuracySample], settings: Optional[Config] = None) -> AccuracyReport:
    """
    Build the full report for a window of samples.

    Args:
        samples: Bounded window of samples, in any order
        settings: Deadband and thresholds (default_config when omitted)

    Returns:
        AccuracyReport(summary, trends, breakdown)
    """
    samples = list(samples)
    return AccuracyReport(
        summary=summarize(samples, settings),
        trends=daily_trends(samples),
        breakdown=breakdown(samples, settings),
    )


def _pct(value: Optional[float]) -> str:
    return "N/A" if value is None else f"{value:.1%}"


def print_aggregate_table(report: AccuracyReport) -> None:
    """Print a formatted accuracy report."""
    s = report.summary
    print("\n" + "=" * 60)
    print("ACCURACY REPORT")
    print("=" * 60)

    if s.total_documents == 0:
        print("No samples to display")
        print("=" * 60)
        return

    print(f"Documents:        {s.total_documents}")
    print(f"Parts processed:  {s.total_parts_processed}")
    print(f"Overall accuracy: {_pct(s.overall_accuracy)}")
    print(f"Trend:            {s.trend}")
    print(f"Weakest field:    {s.weakest_field}")
    print(f"Strongest field:  {s.strongest_field}")

    fs = s.few_shot_effectiveness
    print(f"\n{'Few-shot':<20} {'Docs':<8} {'Accuracy':<10}")
    print("-" * 38)
    print(f"{'with examples':<20} {fs.with_examples_count:<8} {_pct(fs.with_examples_accuracy):<10}")
    print(f"{'without examples':<20} {fs.without_examples_count:<8} {_pct(fs.without_examples_accuracy):<10}")

    print(f"\n{'Field':<20} {'Accuracy':<10}")
    print("-" * 30)
    for name, value in s.field_accuracy.items():
        print(f"{name:<20} {_pct(value):<10}")

    for title, rows in (("Provider", report.breakdown.by_provider), ("Difficulty", report.breakdown.by_difficulty)):
        if not rows:
            continue
        print(f"\n{title:<20} {'Docs':<8} {'Accuracy':<10} {'Trend':<10}")
        print("-" * 48)
        for row in rows:
            print(f"{row.name:<20} {row.count:<8} {_pct(row.accuracy):<10} {row.trend:<10}")

    if report.breakdown.weak_areas:
        print("\nWeak areas:")
        for area in report.breakdown.weak_areas:
            print(f"  {area.field} ({_pct(area.accuracy)}, {area.sample_size} samples)")
            for hint in area.suggestions:
                print(f"    - {hint}")

    print("=" * 60)
