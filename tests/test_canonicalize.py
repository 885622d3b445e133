"""
Tests for text canonicalization (extractors/canonicalize.py).
"""

import pytest

from cutlist_intake.extractors import canonicalize, canonicalize_lines, split_dimension_runs


@pytest.mark.parametrize("raw,expected", [
    ("720×560", "720x560"),
    ("720 x 560 x 2", "720x560x2"),
    ("720X560", "720x560"),
    ("720 X 560", "720x560"),
    ("  720\t560   2 ", "720 560 2"),
    ("“Side panel”", '"Side panel"'),
    ("600 400", "600 400"),
    ("a – b", "a - b"),
])
def test_canonicalize(raw, expected):
    assert canonicalize(raw) == expected


def test_x_before_keyword_is_left_alone():
    # "2 x 4e" is qty 2 then an edge keyword, not a dimension
    assert canonicalize("600 400 2 x 4e") == "600 400 2 x 4e"


def test_uppercase_x_outside_numbers_is_left_alone():
    assert canonicalize("600 400 X2L") == "600 400 X2L"


def test_split_dimension_runs():
    assert split_dimension_runs("720x560x2 4e") == "720 560 2 4e"
    assert split_dimension_runs("559.5x380") == "559.5 380"
    assert split_dimension_runs("x2 h32") == "x2 h32"


def test_canonicalize_lines():
    assert canonicalize_lines("720 560\n\n  \n600 × 400\n") == ["720 560", "600x400"]
    assert canonicalize_lines("") == []
