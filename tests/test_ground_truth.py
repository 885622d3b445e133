"""
Tests for ground-truth and sample file loading (evaluation/ground_truth.py).
"""

import json

import pytest

from cutlist_intake.evaluation import load_parts_file, load_samples_file


PARTS_YAML = """
parts:
  - part_id: P001
    label: Side panel
    qty: 2
    size: {L: 720, W: 560}
    thickness_mm: 18
    material_id: MAT-WHITE-18
    ops:
      edging:
        edges:
          L1: {apply: true}
      grooves:
        - side: L2
  - part_id: P002
    qty: 1
    size: {L: 764, W: 560}
    material_id: MAT-WHITE-18
"""


def test_load_parts_yaml(tmp_path):
    path = tmp_path / "truth.yaml"
    path.write_text(PARTS_YAML, encoding="utf-8")
    parts = load_parts_file(path)
    assert [p.part_id for p in parts] == ["P001", "P002"]
    assert parts[0].ops.edge_ids() == ["L1"]
    assert parts[0].ops.grooves[0].side == "L2"
    assert parts[0].ops.grooves[0].width_mm == 4.0


def test_load_parts_json_list(tmp_path):
    path = tmp_path / "parts.json"
    path.write_text(json.dumps([{"part_id": "A", "size": {"L": 1, "W": 1}, "material_id": "M"}]))
    assert load_parts_file(path)[0].part_id == "A"


@pytest.mark.parametrize("content", [
    "parts: 3",
    "- just a string",
    "other: []",
    "parts: [{part_id: A}]",
    "parts: [unclosed",
])
def test_load_parts_rejects_malformed(tmp_path, content):
    path = tmp_path / "bad.yml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ValueError):
        load_parts_file(path)


def test_load_samples(tmp_path):
    path = tmp_path / "samples.yaml"
    path.write_text(
        "samples:\n"
        "  - {totalParts: 10, correctParts: 9, accuracy: 0.9, provider: claude, createdAt: '2026-03-01T09:00:00Z'}\n"
        "  - {total_parts: 5, correct_parts: 5, accuracy: 1.0, created_at: 2026-03-02T10:00:00Z}\n",
        encoding="utf-8",
    )
    samples = load_samples_file(path)
    assert [s.total_parts for s in samples] == [10, 5]
    assert samples[1].provider == "unknown"
    assert samples[1].created_at.day == 2
