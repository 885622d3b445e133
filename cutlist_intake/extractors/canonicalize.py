"""Canonicalize raw cutlist text for consistent tokenizing.

Normalizes symbols and whitespace BEFORE shorthand parsing, so the grammar
only needs to handle canonical forms. Input may come from operator typing,
OCR, or voice transcripts, all of which introduce symbol variants.
"""

import re
from typing import Dict, List


# Symbol normalization map: variants -> canonical form
SYMBOL_MAP: Dict[str, str] = {
    # Multiplication
    '×': 'x',
    '✕': 'x',
    '✖': 'x',
    '⨯': 'x',

    # Quotes (labels are always double-quoted after canonicalize)
    '“': '"',
    '”': '"',
    '„': '"',
    '″': '"',  # Double prime (OCR reads it for quotes)
    "''": '"',

    # Dash variants
    '–': '-',  # En dash
    '—': '-',  # Em dash
    '−': '-',  # Minus sign

    # Whitespace
    '\u00a0': ' ',  # Non-breaking space
    '\t': ' ',
}

# A whole number follows (end of token, or another x separator)
_NUMBER_AHEAD = r'(?=\d+(?:\.\d+)?(?:[xX]|(?![\w.])))'

# Uppercase X between digits is the same separator as x ("720X560")
_UPPER_X_BETWEEN_DIGITS = re.compile(r'(?<=\d)\s*X\s*' + _NUMBER_AHEAD)

# Spaces around x between numbers ("720 x 560", "560 x2")
_SPACED_X_BETWEEN_DIGITS = re.compile(r'(?<=\d)(?:\s+x\s*|x\s+)' + _NUMBER_AHEAD)

# x-joined numeric run: "720x560" or "720x560x2" (decimals allowed)
DIMENSION_RUN = re.compile(r'(?<![\w.])\d+(?:\.\d+)?(?:x\d+(?:\.\d+)?)+(?![\w.])')

_WHITESPACE = re.compile(r'\s+')


def canonicalize(text: str) -> str:
    """
    Normalize symbols and whitespace in a single line of text.

    Args:
        text: Raw line

    Returns:
        Canonical line (may be empty)
    """
    if not text:
        return ""

    result = text
    for variant, canonical in SYMBOL_MAP.items():
        result = result.replace(variant, canonical)

    result = _UPPER_X_BETWEEN_DIGITS.sub('x', result)
    result = _SPACED_X_BETWEEN_DIGITS.sub('x', result)
    result = _WHITESPACE.sub(' ', result)
    return result.strip()


def normalize_quotes(text: str) -> str:
    """Map quote variants to a plain double quote and change nothing else."""
    if not text:
        return ""
    for variant, canonical in SYMBOL_MAP.items():
        if canonical == '"':
            text = text.replace(variant, canonical)
    return text


def split_dimension_runs(text: str) -> str:
    """Rewrite x-joined numeric runs as space-separated tokens.

    "720x560x2 4e" -> "720 560 2 4e"
    """
    return DIMENSION_RUN.sub(lambda m: m.group(0).replace('x', ' '), text)


def canonicalize_lines(text: str) -> List[str]:
    """Split multi-line text into non-empty canonical lines."""
    if not text:
        return []
    lines = []
    for raw in text.splitlines():
        line = canonicalize(raw)
        if line:
            lines.append(line)
    return lines
