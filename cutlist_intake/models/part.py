"""Canonical cut part model.

Every parser (shorthand grammar, external AI provider, spreadsheet import)
produces CutPart instances. Confidence is attached post-hoc; human_verified
flips only on explicit confirmation; a part is frozen once exported.

JSON shape (snake_case, millimeters):
{
    "part_id": "P001",
    "label": "Side panel",
    "qty": 2,
    "size": {"L": 720, "W": 560},
    "thickness_mm": 18,
    "material_id": "MAT-WHITE-18",
    "grain": "none",
    "allow_rotation": true,
    "ops": {
        "edging": {"edges": {"L1": {"apply": true, "edgeband_id": "EB-WHITE-0.8"}}},
        "grooves": [{"side": "W1", "offset_mm": 10, "depth_mm": 10, "width_mm": 4}],
        "holes": [{"pattern_id": "SYS32", "face": "front", "notes": "h"}],
        "custom_cnc_ops": [{"op_type": "program", "payload": {"program_name": "HINGE"}}]
    },
    "audit": {"source_method": "paste_parser", "confidence": 1.0, "human_verified": false}
}
"""

import copy
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from ..errors import PartExportedError


EDGE_IDS = ("L1", "L2", "W1", "W2")


class GrainMode(str, Enum):
    """Grain direction. Anything other than NONE forbids rotation."""
    NONE = "none"
    ALONG_L = "along_L"
    ALONG_W = "along_W"


class IngestionMethod(str, Enum):
    """How a part was captured."""
    MANUAL = "manual"
    PASTE_PARSER = "paste_parser"
    EXCEL_TABLE = "excel_table"
    FILE_UPLOAD = "file_upload"
    OCR_TEMPLATE = "ocr_template"
    OCR_GENERIC = "ocr_generic"
    VOICE = "voice"
    API = "api"


def new_part_id() -> str:
    """Generate an opaque part identifier."""
    return f"p_{uuid.uuid4().hex[:12]}"


@dataclass
class PartSize:
    """Finished size. L is the grain/length axis, W the width axis."""
    L: float
    W: float

    def to_dict(self) -> Dict[str, float]:
        return {"L": self.L, "W": self.W}


@dataclass
class EdgeOp:
    apply: bool = True
    edgeband_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"apply": self.apply}
        if self.edgeband_id:
            d["edgeband_id"] = self.edgeband_id
        return d


@dataclass
class GrooveOp:
    side: str
    offset_mm: float = 10.0
    depth_mm: float = 10.0
    width_mm: float = 4.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "side": self.side,
            "offset_mm": self.offset_mm,
            "depth_mm": self.depth_mm,
            "width_mm": self.width_mm,
        }


@dataclass
class HoleOp:
    pattern_id: Optional[str] = None
    face: str = "front"
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"face": self.face}
        if self.pattern_id:
            d["pattern_id"] = self.pattern_id
        if self.notes:
            d["notes"] = self.notes
        return d


@dataclass
class CncOp:
    op_type: str
    payload: Dict[str, Any] = field(default_factory=dict)
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"op_type": self.op_type}
        if self.payload:
            d["payload"] = dict(self.payload)
        if self.notes:
            d["notes"] = self.notes
        return d


@dataclass
class PartOps:
    """
    Machining operations attached to a part.

    Attributes:
        edging: Edge id (L1, L2, W1, W2) -> EdgeOp
        grooves: Groove operations
        holes: Hole pattern operations
        custom_cnc_ops: CNC program references
    """
    edging: Dict[str, EdgeOp] = field(default_factory=dict)
    grooves: List[GrooveOp] = field(default_factory=list)
    holes: List[HoleOp] = field(default_factory=list)
    custom_cnc_ops: List[CncOp] = field(default_factory=list)

    def edge_ids(self) -> List[str]:
        """Sorted ids of edges that are actually applied."""
        return sorted(eid for eid, op in self.edging.items() if op.apply)

    def groove_sides(self) -> Set[str]:
        return {g.side for g in self.grooves}

    def is_empty(self) -> bool:
        return not (self.edge_ids() or self.grooves or self.holes or self.custom_cnc_ops)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.edging:
            d["edging"] = {"edges": {eid: op.to_dict() for eid, op in self.edging.items()}}
        if self.grooves:
            d["grooves"] = [g.to_dict() for g in self.grooves]
        if self.holes:
            d["holes"] = [h.to_dict() for h in self.holes]
        if self.custom_cnc_ops:
            d["custom_cnc_ops"] = [c.to_dict() for c in self.custom_cnc_ops]
        return d

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PartOps":
        if not data:
            return cls()

        edging_data = data.get("edging") or {}
        # Accept both {"edges": {...}} and a bare edge map
        edges = edging_data.get("edges", edging_data) if isinstance(edging_data, dict) else {}
        edging = {}
        for eid, op in edges.items():
            if isinstance(op, dict):
                edging[eid] = EdgeOp(apply=bool(op.get("apply", True)), edgeband_id=op.get("edgeband_id"))
            elif op:
                edging[eid] = EdgeOp(apply=True)

        grooves = [
            GrooveOp(
                side=g["side"],
                offset_mm=float(g.get("offset_mm", 10.0)),
                depth_mm=float(g.get("depth_mm", 10.0)),
                width_mm=float(g.get("width_mm", 4.0)),
            )
            for g in data.get("grooves") or []
        ]
        holes = [
            HoleOp(pattern_id=h.get("pattern_id"), face=h.get("face", "front"), notes=h.get("notes", ""))
            for h in data.get("holes") or []
        ]
        cnc = [
            CncOp(op_type=c.get("op_type", "program"), payload=dict(c.get("payload") or {}), notes=c.get("notes", ""))
            for c in data.get("custom_cnc_ops") or []
        ]
        return cls(edging=edging, grooves=grooves, holes=holes, custom_cnc_ops=cnc)


@dataclass
class PartAudit:
    """Provenance and trust for a part."""
    source_method: IngestionMethod = IngestionMethod.MANUAL
    confidence: Optional[float] = None
    human_verified: bool = False
    source_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "source_method": self.source_method.value,
            "human_verified": self.human_verified,
        }
        if self.confidence is not None:
            d["confidence"] = self.confidence
        if self.source_text:
            d["parsed_text_snippet"] = self.source_text
        return d


@dataclass
class CutPart:
    """
    The canonical unit: one cut panel.

    Attributes:
        part_id: Opaque identifier, unique within a cutlist
        qty: Number of pieces (>= 1)
        size: Finished L x W in mm (taken literally, never swapped)
        thickness_mm: Board thickness in mm
        material_id: Reference into the external material catalog
        label: Optional human name
        grain: Grain mode; anything but NONE disables rotation
        allow_rotation: Whether the optimizer may rotate the part
        group_id: Optional cabinet/assembly grouping key
        ops: Machining operations
        audit: Provenance and trust
        exported: Set once the part leaves the intake flow
    """

    part_id: str
    qty: int
    size: PartSize
    thickness_mm: float
    material_id: str
    label: Optional[str] = None
    grain: GrainMode = GrainMode.NONE
    allow_rotation: bool = True
    group_id: Optional[str] = None
    ops: PartOps = field(default_factory=PartOps)
    audit: PartAudit = field(default_factory=PartAudit)
    exported: bool = False

    def __post_init__(self):
        if self.grain != GrainMode.NONE:
            self.allow_rotation = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _ensure_mutable(self, action: str) -> None:
        if self.exported:
            raise PartExportedError(f"Cannot {action}: part {self.part_id} was already exported")

    def mark_human_verified(self) -> None:
        """Record explicit user confirmation or correction."""
        self._ensure_mutable("mark verified")
        self.audit.human_verified = True

    def set_confidence(self, score: float) -> None:
        """Attach an overall confidence score, clamped to [0, 1]."""
        self._ensure_mutable("set confidence")
        self.audit.confidence = min(1.0, max(0.0, float(score)))

    def mark_exported(self) -> None:
        self.exported = True

    def copy(self) -> "CutPart":
        """Deep copy (exported flag included)."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the canonical JSON shape."""
        d: Dict[str, Any] = {
            "part_id": self.part_id,
            "qty": self.qty,
            "size": self.size.to_dict(),
            "thickness_mm": self.thickness_mm,
            "material_id": self.material_id,
            "grain": self.grain.value,
            "allow_rotation": self.allow_rotation,
            "audit": self.audit.to_dict(),
        }
        if self.label:
            d["label"] = self.label
        if self.group_id:
            d["group_id"] = self.group_id
        ops = self.ops.to_dict()
        if ops:
            d["ops"] = ops
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CutPart":
        """
        Build a part from its canonical JSON shape.

        Raises:
            ValueError: if size is missing or a value cannot be coerced
        """
        size = data.get("size")
        if not isinstance(size, dict) or "L" not in size or "W" not in size:
            raise ValueError(f"part {data.get('part_id', '?')} has no size {{L, W}}")

        audit_data = data.get("audit") or {}
        try:
            audit = PartAudit(
                source_method=IngestionMethod(audit_data.get("source_method", "manual")),
                confidence=audit_data.get("confidence"),
                human_verified=bool(audit_data.get("human_verified", False)),
                source_text=audit_data.get("parsed_text_snippet"),
            )
            return cls(
                part_id=str(data.get("part_id") or new_part_id()),
                qty=int(data.get("qty", 1)),
                size=PartSize(L=float(size["L"]), W=float(size["W"])),
                thickness_mm=float(data.get("thickness_mm", 18.0)),
                material_id=str(data.get("material_id") or ""),
                label=data.get("label") or None,
                grain=GrainMode(data.get("grain", "none")),
                allow_rotation=bool(data.get("allow_rotation", True)),
                group_id=data.get("group_id"),
                ops=PartOps.from_dict(data.get("ops")),
                audit=audit,
            )
        except (TypeError, KeyError) as e:
            raise ValueError(f"part {data.get('part_id', '?')} is malformed: {e}") from e
