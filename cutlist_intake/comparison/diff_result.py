"""Field differences between a matched candidate part and its ground truth.

Checked fields:
- dimensions: L or W beyond the dimension tolerance (+-2mm)
- quantity:   exact
- material:   exact id
- edging:     sorted applied-edge lists
- groove:     groove-side sets, or groove counts
- label:      label similarity at or below the label match threshold
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config import Config, default_config
from ..models.confidence import FieldName
from ..models.part import CutPart


def _normalize_label(label: Optional[str]) -> str:
    return label.strip().lower() if isinstance(label, str) else ""


def label_similarity(a: Optional[str], b: Optional[str]) -> float:
    """
    Character-position overlap between two labels.

    Counts equal characters at equal indices of the trimmed, lower-cased
    strings and divides by the longer length. Not an edit distance: an
    inserted character shifts everything after it.

    Returns:
        1.0 when both labels are empty, 0.0 when exactly one is
    """
    left = _normalize_label(a)
    right = _normalize_label(b)
    if not left and not right:
        return 1.0
    if not left or not right:
        return 0.0
    same = sum(1 for x, y in zip(left, right) if x == y)
    return same / max(len(left), len(right))


@dataclass
class FieldDifference:
    """
    One disagreement between a candidate part and its truth.

    Attributes:
        field: Which field disagrees
        candidate_value: Value on the candidate (parsed) part
        truth_value: Value on the ground-truth part
        delta: Numeric difference where meaningful (dimensions, quantity)
        notes: Extra detail
    """
    field: FieldName
    candidate_value: Any = None
    truth_value: Any = None
    delta: Optional[float] = None
    notes: str = ""

    def describe(self) -> str:
        """Human-readable one-liner, e.g. "quantity: 2 -> 3"."""
        text = f"{self.field.value}: {self.candidate_value} -> {self.truth_value}"
        if self.notes:
            text += f" ({self.notes})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "field": self.field.value,
            "candidateValue": self.candidate_value,
            "truthValue": self.truth_value,
            "notes": self.notes,
        }
        if self.delta is not None:
            d["delta"] = self.delta
        return d


def compute_differences(
    candidate: CutPart,
    truth: CutPart,
    settings: Optional[Config] = None,
) -> List[FieldDifference]:
    """
    List every field on which candidate disagrees with truth.

    Args:
        candidate: Parsed part
        truth: Ground-truth part it was matched to
        settings: Tolerances (default_config when omitted)

    Returns:
        Differences in field order; empty when the parts agree
    """
    settings = settings or default_config
    diffs: List[FieldDifference] = []

    dl = abs(candidate.size.L - truth.size.L)
    dw = abs(candidate.size.W - truth.size.W)
    if dl > settings.dimension_tolerance_mm or dw > settings.dimension_tolerance_mm:
        diffs.append(FieldDifference(
            field=FieldName.DIMENSIONS,
            candidate_value=f"{candidate.size.L:g}x{candidate.size.W:g}",
            truth_value=f"{truth.size.L:g}x{truth.size.W:g}",
            delta=max(dl, dw),
            notes=f"beyond +-{settings.dimension_tolerance_mm:g}mm",
        ))

    if candidate.qty != truth.qty:
        diffs.append(FieldDifference(
            field=FieldName.QUANTITY,
            candidate_value=candidate.qty,
            truth_value=truth.qty,
            delta=float(candidate.qty - truth.qty),
        ))

    if candidate.material_id != truth.material_id:
        diffs.append(FieldDifference(
            field=FieldName.MATERIAL,
            candidate_value=candidate.material_id,
            truth_value=truth.material_id,
        ))

    cand_edges = candidate.ops.edge_ids()
    truth_edges = truth.ops.edge_ids()
    if cand_edges != truth_edges:
        diffs.append(FieldDifference(
            field=FieldName.EDGING,
            candidate_value=",".join(cand_edges) or "none",
            truth_value=",".join(truth_edges) or "none",
        ))

    cand_sides = candidate.ops.groove_sides()
    truth_sides = truth.ops.groove_sides()
    if cand_sides != truth_sides or len(candidate.ops.grooves) != len(truth.ops.grooves):
        diffs.append(FieldDifference(
            field=FieldName.GROOVE,
            candidate_value=",".join(sorted(cand_sides)) or "none",
            truth_value=",".join(sorted(truth_sides)) or "none",
            notes=f"{len(candidate.ops.grooves)} vs {len(truth.ops.grooves)} grooves",
        ))

    similarity = label_similarity(candidate.label, truth.label)
    if similarity <= settings.label_match_threshold:
        diffs.append(FieldDifference(
            field=FieldName.LABEL,
            candidate_value=candidate.label,
            truth_value=truth.label,
            notes=f"similarity {similarity:.2f}",
        ))

    return diffs
