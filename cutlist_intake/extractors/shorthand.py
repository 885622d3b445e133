"""Deterministic shorthand grammar for fast manual entry.

Grammar (tokens after the first two are order-independent):

    L W [qty] [edges...] [gSIDE...] [h[NN|:pattern]] [c[:program]] ["label"]

Examples:
    720 560                      -> 720 x 560, qty 1
    720x560x2                    -> same as "720 560 2"
    600 400 2 4e gW h "Shelf"    -> qty 2, all edges, groove W1, SYS32 holes

The first two tokens are taken literally as L and W; a line that looks
swapped is NOT corrected here (the confidence estimator flags it instead).

Anything below the minimum grammar returns None -- never a partial part.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..config import Config, ShorthandConfig, default_config
from ..models.part import (
    CncOp,
    CutPart,
    EdgeOp,
    GrooveOp,
    HoleOp,
    IngestionMethod,
    PartAudit,
    PartOps,
    PartSize,
    new_part_id,
)
from .canonicalize import canonicalize, normalize_quotes, split_dimension_runs
from .patterns import (
    ALL_EDGES,
    CNC_TOKEN,
    HOLE_TOKEN,
    INTEGER_TOKEN,
    NUMBER_TOKEN,
    QUANTITY_TOKEN,
    TRAILING_LABEL,
    lookup_edges,
    lookup_groove_side,
)

logger = logging.getLogger(__name__)


@dataclass
class _Tokens:
    """Classified tokens of one line (before capability filtering)."""
    qty: Optional[int] = None
    label: Optional[str] = None
    edges: set = field(default_factory=set)
    groove_sides: List[str] = field(default_factory=list)
    holes: List[HoleOp] = field(default_factory=list)
    cnc: List[CncOp] = field(default_factory=list)


def _classify(tokens: List[str], label: Optional[str], settings: Config) -> _Tokens:
    """Classify tokens in priority order: qty, edges, groove, holes, CNC, label."""
    result = _Tokens(label=label)
    last = len(tokens) - 1

    for i, token in enumerate(tokens):
        if INTEGER_TOKEN.match(token):
            value = int(token)
            if result.qty is None and settings.min_quantity <= value <= settings.max_quantity:
                result.qty = value
            continue

        qm = QUANTITY_TOKEN.match(token)
        if qm:
            value = int(qm.group(1) or qm.group(2))
            if result.qty is None and settings.min_quantity <= value <= settings.max_quantity:
                result.qty = value
            continue

        edges = lookup_edges(token)
        if edges:
            result.edges.update(edges)
            continue

        side = lookup_groove_side(token)
        if side:
            if side not in result.groove_sides:
                result.groove_sides.append(side)
            continue

        hm = HOLE_TOKEN.match(token)
        if hm:
            digits, named = hm.group(1), hm.group(2)
            if named:
                pattern_id = named
            elif digits:
                pattern_id = f"SYS{digits}"
            else:
                pattern_id = settings.default_hole_pattern
            result.holes.append(HoleOp(
                pattern_id=pattern_id,
                face=settings.default_hole_face,
                notes=token,
            ))
            continue

        cm = CNC_TOKEN.match(token)
        if cm:
            program = cm.group(1)
            result.cnc.append(CncOp(
                op_type="program",
                payload={"program_name": program} if program else {},
                notes=f"CNC: {program}" if program else "CNC",
            ))
            continue

        if i == last and result.label is None and not NUMBER_TOKEN.match(token):
            result.label = token

    return result


def _build_ops(tokens: _Tokens, config: ShorthandConfig, settings: Config) -> PartOps:
    """Attach only the operations the shop has enabled."""
    caps = config.capabilities
    ops = PartOps()

    if caps.edging and tokens.edges:
        ops.edging = {
            eid: EdgeOp(apply=True, edgeband_id=config.edgeband_id)
            for eid in ALL_EDGES if eid in tokens.edges
        }
    if caps.grooves:
        ops.grooves = [
            GrooveOp(
                side=side,
                offset_mm=settings.default_groove_offset_mm,
                depth_mm=settings.default_groove_depth_mm,
                width_mm=settings.default_groove_width_mm,
            )
            for side in tokens.groove_sides
        ]
    if caps.holes:
        ops.holes = list(tokens.holes)
    if caps.cnc:
        ops.custom_cnc_ops = list(tokens.cnc)

    return ops


def parse_shorthand(
    line: str,
    config: Optional[ShorthandConfig] = None,
    *,
    part_id: Optional[str] = None,
    settings: Optional[Config] = None,
) -> Optional[CutPart]:
    """
    Parse one shorthand line into a canonical part.

    Args:
        line: Free-text line, e.g. '600 400 2 4e gW h "Shelf"'
        config: Material/thickness/edgeband defaults and capabilities
        part_id: Identifier to assign (generated when omitted)
        settings: Grammar constants (default_config when omitted)

    Returns:
        CutPart, or None if the line does not satisfy the minimum grammar
        (two positive numbers). None is not an error: fall back to AI or
        manual entry.
    """
    if not line or not line.strip():
        return None

    config = config or ShorthandConfig()
    settings = settings or default_config

    # The quoted label is taken as written; only the rest is canonicalized
    text = normalize_quotes(line)
    label = None
    m = TRAILING_LABEL.search(text)
    if m:
        label = m.group(1).strip() or None
        text = text[:m.start()]

    tokens = split_dimension_runs(canonicalize(text)).split()
    if len(tokens) < 2:
        return None
    if not (NUMBER_TOKEN.match(tokens[0]) and NUMBER_TOKEN.match(tokens[1])):
        return None

    length, width = float(tokens[0]), float(tokens[1])
    if length <= 0 or width <= 0:
        return None

    classified = _classify(tokens[2:], label, settings)

    return CutPart(
        part_id=part_id or new_part_id(),
        qty=classified.qty or 1,
        size=PartSize(L=length, W=width),
        thickness_mm=config.thickness_mm,
        material_id=config.material_id,
        label=classified.label,
        ops=_build_ops(classified, config, settings),
        audit=PartAudit(
            source_method=IngestionMethod.PASTE_PARSER,
            confidence=1.0,
            human_verified=False,
            source_text=line,
        ),
    )


@dataclass
class ShorthandBatchResult:
    """
    Result of parsing many shorthand lines.

    Attributes:
        parts: Parsed parts, in input order
        failed: (line_number, line) for every line that could not be parsed
    """
    parts: List[CutPart] = field(default_factory=list)
    failed: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def parsed_count(self) -> int:
        return len(self.parts)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parts": [p.to_dict() for p in self.parts],
            "failed": [{"line": n, "text": t} for n, t in self.failed],
            "parsedCount": self.parsed_count,
            "failedCount": self.failed_count,
        }


def parse_shorthand_lines(
    text: str,
    config: Optional[ShorthandConfig] = None,
    settings: Optional[Config] = None,
) -> ShorthandBatchResult:
    """
    Parse multi-line shorthand input.

    Parts get sequential ids (P001, P002, ...). Blank lines are skipped;
    unparseable lines are collected with their 1-based line number.
    """
    result = ShorthandBatchResult()

    for line_number, raw in enumerate((text or "").splitlines(), start=1):
        if not raw.strip():
            continue
        part = parse_shorthand(
            raw,
            config,
            part_id=f"P{result.parsed_count + 1:03d}",
            settings=settings,
        )
        if part is None:
            logger.debug("Shorthand line %d not parseable: %r", line_number, raw)
            result.failed.append((line_number, raw))
        else:
            result.parts.append(part)

    return result
