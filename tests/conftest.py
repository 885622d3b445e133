"""
Shared test fixtures: part factories, a fixed clock, a sample factory.
"""

from datetime import datetime, timedelta, timezone

import pytest

from cutlist_intake.models import (
    AccuracySample,
    CutPart,
    EdgeOp,
    GrooveOp,
    PartOps,
    PartSize,
)


def make_part(
    part_id="P001",
    L=720.0,
    W=560.0,
    qty=1,
    material_id="MAT-WHITE-18",
    label=None,
    edges=(),
    groove_sides=(),
    thickness_mm=18.0,
):
    """Build a canonical part with optional edging and grooves."""
    ops = PartOps(
        edging={e: EdgeOp(apply=True, edgeband_id="EB-WHITE-0.8") for e in edges},
        grooves=[GrooveOp(side=s) for s in groove_sides],
    )
    return CutPart(
        part_id=part_id,
        qty=qty,
        size=PartSize(L=L, W=W),
        thickness_mm=thickness_mm,
        material_id=material_id,
        label=label,
        ops=ops,
    )


BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_sample(
    accuracy,
    hours=0,
    provider="claude",
    total_parts=10,
    few_shot=0,
    difficulty=None,
    **fields,
):
    """Build an accuracy sample `hours` after BASE_TIME."""
    return AccuracySample(
        total_parts=total_parts,
        correct_parts=round(accuracy * total_parts),
        accuracy=accuracy,
        provider=provider,
        created_at=BASE_TIME + timedelta(hours=hours),
        few_shot_examples_used=few_shot,
        document_difficulty=difficulty,
        **fields,
    )


@pytest.fixture
def part_factory():
    return make_part


@pytest.fixture
def sample_factory():
    return make_sample


@pytest.fixture
def fixed_clock():
    """Clock that always returns BASE_TIME."""
    return lambda: BASE_TIME


@pytest.fixture
def cabinet_parts():
    """A small carcass: two sides, top/bottom, shelf, back."""
    return [
        make_part("P001", 720, 560, qty=2, label="Side panel", edges=("L1",), groove_sides=("L2",)),
        make_part("P002", 764, 560, qty=2, label="Top/Bottom", edges=("L1",)),
        make_part("P003", 760, 540, qty=1, label="Shelf", edges=("L1", "L2", "W1", "W2")),
        make_part("P004", 716, 780, qty=1, label="Back", thickness_mm=6.0, material_id="MAT-HDF-6"),
    ]
