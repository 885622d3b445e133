"""
Tests for the command-line entry point (cli.py).
"""

import json

from cutlist_intake.cli import main


def test_parse_command(tmp_path, capsys):
    path = tmp_path / "lines.txt"
    path.write_text('600 400 2 4e gW h "Shelf"\n720 560\nnonsense\n', encoding="utf-8")

    code = main(["parse", str(path), "--material", "MAT-OAK-19"])
    output = json.loads(capsys.readouterr().out)

    assert code == 1
    assert output["parsedCount"] == 2
    assert output["failed"] == [{"line": 3, "text": "nonsense"}]
    first = output["parts"][0]
    assert first["part_id"] == "P001"
    assert first["material_id"] == "MAT-OAK-19"
    assert first["confidence"]["edging"]["score"] == 0.9
    assert "quantity" in output["parts"][1]["needsReview"]


def test_parse_command_without_ops(tmp_path, capsys):
    path = tmp_path / "lines.txt"
    path.write_text("600 400 4e\n", encoding="utf-8")
    assert main(["parse", str(path), "--no-ops"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert "ops" not in output["parts"][0]


def test_evaluate_command(tmp_path, capsys):
    truth = tmp_path / "truth.json"
    parsed = tmp_path / "parsed.json"
    truth.write_text(json.dumps([
        {"part_id": "P001", "qty": 2, "size": {"L": 720, "W": 560}, "material_id": "M", "label": "Side"},
        {"part_id": "P002", "qty": 1, "size": {"L": 400, "W": 300}, "material_id": "M", "label": "Shelf"},
    ]))
    parsed.write_text(json.dumps([
        {"part_id": "P001", "qty": 3, "size": {"L": 720, "W": 560}, "material_id": "M", "label": "Side"},
    ]))

    assert main(["evaluate", str(parsed), str(truth), "--json"]) == 0
    output = json.loads(capsys.readouterr().out)
    assert output["metrics"]["accuracy"] == 0.0
    assert output["metrics"]["matchedParts"] == 1
    assert output["match"]["unmatched"] == ["P002"]


def test_report_command(tmp_path, capsys):
    path = tmp_path / "samples.json"
    path.write_text(json.dumps({"samples": [
        {"totalParts": 10, "correctParts": 7, "accuracy": 0.7, "createdAt": "2026-03-01T09:00:00Z"},
        {"totalParts": 10, "correctParts": 9, "accuracy": 0.9, "createdAt": "2026-03-02T09:00:00Z"},
    ]}))
    assert main(["report", str(path)]) == 0
    out = capsys.readouterr().out
    assert "ACCURACY REPORT" in out
    assert "improving" in out


def test_missing_file_is_reported(tmp_path, capsys):
    assert main(["evaluate", str(tmp_path / "nope.json"), str(tmp_path / "nope.json")]) == 2
    assert "error:" in capsys.readouterr().err
