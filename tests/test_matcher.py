"""
Tests for the part matcher and field differences (comparison/).

Tests:
1.  Empty candidate / empty truth lists
2.  Identical lists match one-to-one with no differences
3.  Similarity weights and tolerances
4.  Acceptance threshold is strict and configurable
5.  Greedy first-truth-first assignment and earliest-candidate ties
6.  Field differences for every checked field
7.  Label similarity
"""

import pytest

from cutlist_intake.comparison import (
    PartMatcher,
    compute_differences,
    label_similarity,
    match_parts,
)
from cutlist_intake.config import Config
from cutlist_intake.models import FieldName

from conftest import make_part


# --- Empty inputs ---

def test_empty_candidate_all_truth_unmatched(cabinet_parts):
    result = match_parts([], cabinet_parts)
    assert result.matched == []
    assert result.extra == []
    assert result.unmatched == cabinet_parts


def test_empty_truth_all_candidates_extra(cabinet_parts):
    result = match_parts(cabinet_parts, [])
    assert result.matched == []
    assert result.unmatched == []
    assert result.extra == cabinet_parts


def test_both_empty():
    result = match_parts([], [])
    assert result.summary == {"matched": 0, "unmatched": 0, "extra": 0, "correct": 0}


# --- Identical lists ---

def test_identical_lists_match_in_order(cabinet_parts):
    candidate = [p.copy() for p in cabinet_parts]
    result = match_parts(candidate, cabinet_parts)
    assert [(m.candidate.part_id, m.truth.part_id) for m in result.matched] == [
        ("P001", "P001"), ("P002", "P002"), ("P003", "P003"), ("P004", "P004"),
    ]
    assert all(m.differences == [] for m in result.matched)
    assert all(m.score == pytest.approx(1.0) for m in result.matched)


def test_order_does_not_matter_for_distinct_parts(cabinet_parts):
    candidate = list(reversed([p.copy() for p in cabinet_parts]))
    result = match_parts(candidate, cabinet_parts)
    assert all(m.candidate.part_id == m.truth.part_id for m in result.matched)
    assert result.unmatched == [] and result.extra == []


# --- Similarity ---

def test_similarity_components():
    matcher = PartMatcher()
    truth = make_part(L=720, W=560, qty=2, label="Side")
    assert matcher.similarity(make_part(L=721, W=559, qty=2, label="Side"), truth) == pytest.approx(1.0)
    # partial dimension credit within 10mm
    assert matcher.similarity(make_part(L=728, W=560, qty=2, label="Side"), truth) == pytest.approx(0.8)
    # no dimension credit beyond 10mm
    assert matcher.similarity(make_part(L=740, W=560, qty=2, label="Side"), truth) == pytest.approx(0.5)
    # quantity mismatch
    assert matcher.similarity(make_part(L=720, W=560, qty=3, label="Side"), truth) == pytest.approx(0.7)
    # one label missing
    assert matcher.similarity(make_part(L=720, W=560, qty=2, label=None), truth) == pytest.approx(0.8)


def test_weights_are_configurable():
    matcher = PartMatcher(label_weight=0.0, quantity_weight=0.0)
    a = make_part(qty=1, label="A")
    b = make_part(qty=9, label="Zzz")
    assert matcher.similarity(a, b) == pytest.approx(0.5)


def test_acceptance_is_strictly_greater_than_threshold():
    truth = [make_part("T", L=720, W=560, qty=2, label="Side")]
    # dimensions only: exactly 0.5
    candidate = [make_part("C", L=720, W=560, qty=5, label="Door")]
    result = match_parts(candidate, truth)
    assert result.matched == []
    assert [p.part_id for p in result.unmatched] == ["T"]
    assert [p.part_id for p in result.extra] == ["C"]


def test_threshold_override():
    truth = [make_part("T", qty=2, label="Side")]
    candidate = [make_part("C", qty=5, label="Door")]
    result = PartMatcher(acceptance_threshold=0.4).match(candidate, truth)
    assert len(result.matched) == 1


def test_threshold_from_settings():
    truth = [make_part("T", qty=2, label="Side")]
    candidate = [make_part("C", L=726, qty=2, label="Side")]  # 0.3 + 0.3 + 0.2
    assert len(match_parts(candidate, truth).matched) == 1
    assert match_parts(candidate, truth, Config(match_acceptance_threshold=0.85)).matched == []


# --- Greedy assignment ---

def test_ties_go_to_earliest_candidate():
    truth = [make_part("T", label="Shelf")]
    candidate = [make_part("C1", label="Shelf"), make_part("C2", label="Shelf")]
    result = match_parts(candidate, truth)
    assert result.matched[0].candidate.part_id == "C1"
    assert [p.part_id for p in result.extra] == ["C2"]


def test_first_truth_consumes_best_candidate():
    # T1 takes C2 (its best); T2 must settle for C1 even though C2 would be better
    truth = [make_part("T1", L=720, W=560, qty=1), make_part("T2", L=720, W=560, qty=2)]
    candidate = [make_part("C1", L=725, W=560, qty=2), make_part("C2", L=720, W=560, qty=2)]
    result = match_parts(candidate, truth)
    pairs = [(m.truth.part_id, m.candidate.part_id) for m in result.matched]
    assert pairs == [("T1", "C2"), ("T2", "C1")]


def test_result_to_dict(cabinet_parts):
    d = match_parts(cabinet_parts[:2], cabinet_parts[1:]).to_dict()
    assert d["summary"]["matched"] == 1
    assert d["unmatched"] == ["P003", "P004"]
    assert d["extra"] == ["P001"]


# --- Differences ---

def _fields(diffs):
    return [d.field for d in diffs]


def test_no_differences_within_tolerance():
    a = make_part(L=720, W=560, label="Side", edges=("L1",))
    b = make_part(L=722, W=558, label="side ", edges=("L1",))
    assert compute_differences(a, b) == []


def test_dimension_difference():
    diffs = compute_differences(make_part(L=723), make_part(L=720))
    assert _fields(diffs) == [FieldName.DIMENSIONS]
    assert diffs[0].delta == 3


def test_quantity_and_material_differences():
    diffs = compute_differences(make_part(qty=2, material_id="MAT-A"), make_part(qty=3, material_id="MAT-B"))
    assert _fields(diffs) == [FieldName.QUANTITY, FieldName.MATERIAL]
    assert diffs[0].describe() == "quantity: 2 -> 3"


def test_edging_compared_as_sorted_sets():
    assert compute_differences(make_part(edges=("W1", "L1")), make_part(edges=("L1", "W1"))) == []
    diffs = compute_differences(make_part(edges=("L1",)), make_part(edges=("L1", "L2")))
    assert _fields(diffs) == [FieldName.EDGING]
    assert diffs[0].truth_value == "L1,L2"


def test_groove_differences():
    assert _fields(compute_differences(make_part(groove_sides=("W1",)), make_part(groove_sides=("L1",)))) == [FieldName.GROOVE]
    assert _fields(compute_differences(make_part(groove_sides=("W1", "W1")), make_part(groove_sides=("W1",)))) == [FieldName.GROOVE]
    assert compute_differences(make_part(groove_sides=("W1",)), make_part(groove_sides=("W1",))) == []


def test_label_difference():
    diffs = compute_differences(make_part(label="Shelf"), make_part(label="Door"))
    assert _fields(diffs) == [FieldName.LABEL]
    assert compute_differences(make_part(label=None), make_part(label=None)) == []


def test_matched_pairs_carry_differences():
    result = match_parts([make_part("C", qty=2, label="Side")], [make_part("T", qty=2, label="Side", material_id="X")])
    assert _fields(result.matched[0].differences) == [FieldName.MATERIAL]
    assert not result.matched[0].is_correct


# --- Label similarity ---

@pytest.mark.parametrize("a,b,expected", [
    ("Shelf", "Shelf", 1.0),
    ("  SHELF ", "shelf", 1.0),
    (None, None, 1.0),
    ("", None, 1.0),
    ("Shelf", None, 0.0),
    (None, "Shelf", 0.0),
    ("Shelf", "Shelves", 4 / 7),
    ("abc", "xbc", 2 / 3),
    ("abc", "cab", 0.0),
])
def test_label_similarity(a, b, expected):
    assert label_similarity(a, b) == pytest.approx(expected)
