"""
Selector syntax.

    #y-x            one cell, row first
    #y1-x1:y2-x2    a rectangular range

Recognition is purely syntactic: nothing here checks that the addressed
cells exist.
"""

from __future__ import annotations

import re
from typing import List, Tuple, Union

from tableref.dto.address import Address, CellRange
from tableref.errors import ParseError

BASIC_SELECTOR_RE = re.compile(r"#(\d+)-(\d+)")
RANGE_SELECTOR_RE = re.compile(r"#(\d+)-(\d+):(\d+)-(\d+)")

# Ranges first so "#0-0:1-1" is not read as the basic selector "#0-0".
SELECTORS_RE = re.compile(r"#(\d+)-(\d+):(\d+)-(\d+)|#(\d+)-(\d+)")

Selector = Union[Address, CellRange]


def is_range_selector(text: str) -> bool:
    return RANGE_SELECTOR_RE.search(text) is not None


def parse_basic(text: str) -> Address:
    """Parse ``#y-x`` into an Address."""
    m = BASIC_SELECTOR_RE.search(text)
    if not m:
        raise ParseError(f"not a cell selector: {text!r}")
    y, x = int(m.group(1)), int(m.group(2))
    return Address(x=x, y=y)


def parse_range(text: str) -> CellRange:
    """Parse ``#y1-x1:y2-x2`` into a CellRange (endpoints as written)."""
    m = RANGE_SELECTOR_RE.search(text)
    if not m:
        raise ParseError(f"not a range selector: {text!r}")
    y1, x1, y2, x2 = (int(g) for g in m.groups())
    return CellRange(start=Address(x=x1, y=y1), end=Address(x=x2, y=y2))


def find_selectors(text: str) -> List[Tuple[str, Selector]]:
    """
    Return ``(matched_text, selector)`` for every selector in *text*, in
    source order and without overlap.
    """
    found: List[Tuple[str, Selector]] = []
    for m in SELECTORS_RE.finditer(text):
        if m.group(1) is not None:
            found.append((m.group(0), parse_range(m.group(0))))
        else:
            found.append((m.group(0), parse_basic(m.group(0))))
    return found
