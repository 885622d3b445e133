"""Accuracy feedback loop: sessions, sample publishing and aggregation."""

from .session import (
    SessionState,
    SessionMetadata,
    AccuracySession,
    AccuracySessionRegistry,
)
from .publisher import SampleSink, SamplePublisher, InMemorySampleStore
from .aggregator import (
    WEAK_FIELD_SUGGESTIONS,
    AccuracyReport,
    AccuracySummary,
    AccuracyBreakdown,
    DayTrend,
    CategoryBreakdown,
    WeakArea,
    FewShotEffectiveness,
    aggregate,
    summarize,
    daily_trends,
    breakdown,
    identify_weak_areas,
    field_averages,
    classify_trend,
    suggestions_for,
    print_aggregate_table,
)

__all__ = [
    "SessionState",
    "SessionMetadata",
    "AccuracySession",
    "AccuracySessionRegistry",
    "SampleSink",
    "SamplePublisher",
    "InMemorySampleStore",
    "WEAK_FIELD_SUGGESTIONS",
    "AccuracyReport",
    "AccuracySummary",
    "AccuracyBreakdown",
    "DayTrend",
    "CategoryBreakdown",
    "WeakArea",
    "FewShotEffectiveness",
    "aggregate",
    "summarize",
    "daily_trends",
    "breakdown",
    "identify_weak_areas",
    "field_averages",
    "classify_trend",
    "suggestions_for",
    "print_aggregate_table",
]
