"""
Tests for part validation (extractors/validator.py).
"""

from cutlist_intake.extractors import validate_part, validate_parts
from cutlist_intake.models import EdgeOp, GrainMode, GrooveOp

from conftest import make_part


def test_valid_part():
    assert validate_part(make_part(edges=("L1",), groove_sides=("W1",))) == (True, [])


def test_non_positive_and_missing_fields():
    part = make_part(L=-5, material_id="")
    ok, errors = validate_part(part)
    assert not ok
    assert "missing 'material_id'" in errors
    assert "non-positive value for 'size.L': -5" in errors


def test_quantity_range():
    ok, errors = validate_part(make_part(qty=0))
    assert errors == ["quantity out of range: 0"]
    assert validate_part(make_part(qty=10000))[0] is False


def test_grain_rotation_rule():
    part = make_part()
    part.grain = GrainMode.ALONG_W   # set after construction, bypassing __post_init__
    ok, errors = validate_part(part)
    assert errors == ["grained part must not allow rotation"]


def test_unknown_edge_and_groove_side():
    part = make_part()
    part.ops.edging["X1"] = EdgeOp()
    part.ops.grooves.append(GrooveOp(side="Z"))
    ok, errors = validate_part(part)
    assert "unknown edge 'X1'" in errors
    assert "unknown groove side 'Z'" in errors


def test_validate_parts_stats():
    parts = [make_part("A"), make_part("B", qty=0), make_part("C", qty=0, L=0)]
    valid, stats = validate_parts(parts)
    assert [p.part_id for p in valid] == ["A"]
    assert stats["valid"] == 1
    assert stats["invalid"] == 2
    assert stats["total"] == 3
    assert stats["invalid_ids"] == ["B", "C"]
    assert stats["errors"]["quantity out of range: 0"] == 2
