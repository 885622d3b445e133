"""Keyword tables and regex patterns for the shorthand grammar and the
confidence estimator.

The tables are immutable configuration data (tuples of records), not
branching logic, so a new notation is added by appending a record.

Usage:
    from cutlist_intake.extractors.patterns import lookup_edges, lookup_groove_side

    lookup_edges("2L")   # ("L1", "L2")
    lookup_groove_side("gW2")  # "W2"
"""

import re
from typing import Dict, NamedTuple, Optional, Tuple


ALL_EDGES = ("L1", "L2", "W1", "W2")


class EdgePattern(NamedTuple):
    """Edge-banding keywords (lower-case) and the edges they apply."""
    keywords: Tuple[str, ...]
    edges: Tuple[str, ...]
    description: str = ""


class GrooveSide(NamedTuple):
    """Groove token (lower-case) and its normalized side."""
    token: str
    side: str


# ===========================================================================
# Edge banding
# ===========================================================================
# Examples: "4e", "all", "2L", "2W", "L1", "3e", "2L1W"
EDGE_PATTERNS: Tuple[EdgePattern, ...] = (
    EdgePattern(("4e", "all", "4s", "2l2w"), ALL_EDGES, "All four edges"),
    EdgePattern(("3e", "2l1w", "2lw"), ("L1", "L2", "W1"), "Both long edges and one short"),
    EdgePattern(("1l2w", "l2w"), ("L1", "W1", "W2"), "One long edge and both short"),
    EdgePattern(("2l",), ("L1", "L2"), "Both long edges"),
    EdgePattern(("2w",), ("W1", "W2"), "Both short edges"),
    EdgePattern(("lw", "1l1w"), ("L1", "W1"), "One long and one short edge"),
    EdgePattern(("1e", "l1"), ("L1",), "First long edge"),
    EdgePattern(("l2",), ("L2",), "Second long edge"),
    EdgePattern(("w1",), ("W1",), "First short edge"),
    EdgePattern(("w2",), ("W2",), "Second short edge"),
)

# ===========================================================================
# Grooves
# ===========================================================================
# Examples: "gL" -> L1, "gL2" -> L2, "gW" -> W1, "gW2" -> W2
GROOVE_SIDES: Tuple[GrooveSide, ...] = (
    GrooveSide("gl", "L1"),
    GrooveSide("gl1", "L1"),
    GrooveSide("gl2", "L2"),
    GrooveSide("gw", "W1"),
    GrooveSide("gw1", "W1"),
    GrooveSide("gw2", "W2"),
)

# Flattened lookups built once from the tables above
_EDGE_LOOKUP: Dict[str, Tuple[str, ...]] = {
    kw: p.edges for p in EDGE_PATTERNS for kw in p.keywords
}
_GROOVE_LOOKUP: Dict[str, str] = {g.token: g.side for g in GROOVE_SIDES}


# ===========================================================================
# Token patterns
# ===========================================================================

# Positive number for L / W ("720", "559.5")
NUMBER_TOKEN = re.compile(r'^\d+(?:\.\d+)?$')

# Bare integer for quantity
INTEGER_TOKEN = re.compile(r'^\d+$')

# Marked quantity: "x2", "2x", "q2", "qty:2", "2pcs"
QUANTITY_TOKEN = re.compile(r'^(?:(?:x|q|qty:?)(\d+)|(\d+)(?:pcs?|x))$', re.IGNORECASE)

# Holes: "h", "h32", "h:hinge"
HOLE_TOKEN = re.compile(r'^h(?:(\d+)|:(\S+))?$', re.IGNORECASE)

# CNC: "c", "c:drawer-front"
CNC_TOKEN = re.compile(r'^c(?::(\S+))?$', re.IGNORECASE)

# Trailing quoted label: 720 560 "Side panel"
TRAILING_LABEL = re.compile(r'"([^"]*)"\s*$')


# ===========================================================================
# Source-text markers (confidence estimator)
# ===========================================================================

# Explicit quantity markers: "qty 2", "q2", "x2", "2x", "2pcs", "2 off"
QUANTITY_MARKERS = (
    re.compile(r'\b(?:qty|q|x|×)\s*(\d+)', re.IGNORECASE),
    re.compile(r'\b\d+\s*(?:pcs?|pieces?|off|ea)\b', re.IGNORECASE),
    re.compile(r'\b\d+x\b', re.IGNORECASE),
)

# Known material names
MATERIAL_MARKERS = (
    re.compile(r'\b(white|wm|w)\b', re.IGNORECASE),
    re.compile(r'\bply(?:wood)?\b', re.IGNORECASE),
    re.compile(r'\b(black|b)\b', re.IGNORECASE),
    re.compile(r'\bmdf\b', re.IGNORECASE),
    re.compile(r'\b(oak|walnut|maple|birch)\b', re.IGNORECASE),
    re.compile(r'\bmelamine\b', re.IGNORECASE),
)

# Edge-banding markers, including tick marks from scanned sheets.
# Keywords come from EDGE_PATTERNS, longest first.
_EDGE_KEYWORDS = sorted(_EDGE_LOOKUP, key=len, reverse=True)

EDGING_MARKERS = (
    re.compile(r'\b(eb|edge|band|all\s*edges?|' + '|'.join(map(re.escape, _EDGE_KEYWORDS)) + r')\b', re.IGNORECASE),
    re.compile(r'[✓√✔]'),
)

# Groove markers
GROOVE_MARKERS = (
    re.compile(r'\b(gr|grv|groove|dado|rabbet|gl\d?|gw\d?|bpg|back\s*panel)\b', re.IGNORECASE),
)


def lookup_edges(token: str) -> Optional[Tuple[str, ...]]:
    """Return the edges for an edge-banding keyword, or None."""
    return _EDGE_LOOKUP.get(token.lower())


def lookup_groove_side(token: str) -> Optional[str]:
    """Return the normalized side for a groove token, or None."""
    return _GROOVE_LOOKUP.get(token.lower())


def has_marker(text: str, patterns) -> bool:
    """Check whether any pattern occurs in text."""
    return any(p.search(text) for p in patterns)
