"""
Tests for accuracy metrics (evaluation/metrics.py).

Tests:
1.  Perfect match -> accuracy 1.0 and every field 1.0
2.  Empty truth -> accuracy 1.0, per-field "no data"
3.  Unmatched truth counts against accuracy only
4.  Per-field accuracy over matched pairs
5.  evaluate_parts / print_accuracy_table
"""

import pytest

from cutlist_intake.comparison import match_parts
from cutlist_intake.evaluation import compute_accuracy, evaluate_parts, print_accuracy_table

from conftest import make_part


def test_perfect_match(cabinet_parts):
    metrics = compute_accuracy(match_parts([p.copy() for p in cabinet_parts], cabinet_parts), len(cabinet_parts))
    assert metrics.accuracy == 1.0
    assert metrics.correct_parts == metrics.total_parts == 4
    assert all(v == 1.0 for v in metrics.field_accuracies().values())


def test_empty_truth():
    metrics = compute_accuracy(match_parts([make_part()], []), 0)
    assert metrics.accuracy == 1.0
    assert metrics.total_parts == 0
    assert all(v is None for v in metrics.field_accuracies().values())


def test_nothing_matched_is_no_data_not_zero(cabinet_parts):
    metrics = compute_accuracy(match_parts([], cabinet_parts))
    assert metrics.accuracy == 0.0
    assert metrics.total_parts == 4
    assert metrics.dimension_accuracy is None


def test_unmatched_only_penalizes_overall(cabinet_parts):
    candidate = [p.copy() for p in cabinet_parts[:2]]
    metrics = compute_accuracy(match_parts(candidate, cabinet_parts))
    assert metrics.matched_parts == 2
    assert metrics.correct_parts == 2
    assert metrics.accuracy == pytest.approx(0.5)
    assert metrics.dimension_accuracy == 1.0


def test_per_field_accuracy():
    truth = [
        make_part("T1", qty=2, label="Side", edges=("L1",)),
        make_part("T2", L=400, W=300, qty=1, label="Shelf"),
    ]
    candidate = [
        make_part("C1", qty=2, label="Side"),                  # missed edging
        make_part("C2", L=400, W=300, qty=1, label="Shelf", material_id="MAT-OAK"),
    ]
    metrics = compute_accuracy(match_parts(candidate, truth))
    assert metrics.correct_parts == 0
    assert metrics.accuracy == 0.0
    assert metrics.edging_accuracy == 0.5
    assert metrics.material_accuracy == 0.5
    assert metrics.dimension_accuracy == 1.0
    assert metrics.quantity_accuracy == 1.0
    assert metrics.label_accuracy == 1.0
    assert metrics.grooving_accuracy == 1.0


def test_explicit_truth_count_overrides():
    result = match_parts([make_part()], [make_part()])
    assert compute_accuracy(result, 4).accuracy == pytest.approx(0.25)


def test_metrics_to_dict():
    d = compute_accuracy(match_parts([], [])).to_dict()
    assert d["accuracy"] == 1.0
    assert d["dimensionAccuracy"] is None


def test_evaluate_parts(cabinet_parts):
    candidate = [p.copy() for p in cabinet_parts]
    candidate[0].qty = 3
    result, metrics = evaluate_parts(candidate, cabinet_parts)
    assert len(result.matched) == 4
    assert metrics.correct_parts == 3
    assert metrics.quantity_accuracy == pytest.approx(0.75)


def test_print_accuracy_table(cabinet_parts, capsys):
    candidate = [p.copy() for p in cabinet_parts[:3]]
    candidate[0].qty = 3
    result, metrics = evaluate_parts(candidate, cabinet_parts)
    print_accuracy_table(metrics, result)
    out = capsys.readouterr().out
    assert "PARSE ACCURACY" in out
    assert "quantity: 3 -> 2" in out
    assert "Unmatched truth parts: P004" in out
