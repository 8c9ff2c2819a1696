from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SPLIT_RE = re.compile(r"[,\s]+")
_SINGLE_RE = re.compile(r"^\d+$")
_RANGE_RE = re.compile(r"^(\d+)-(\d+)$")


@dataclass(frozen=True)
class Selection:
    indices: Tuple[int, ...]
    rejected: Tuple[str, ...] = ()
    out_of_range: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.indices)


def parse_selection(text: str, *, limit: Optional[int] = None) -> Selection:
    """Parse "1,2 4-6" style input into sorted, de-duplicated 1-based indices.

    Tokens are separated by commas and/or whitespace. A token is either a
    non-negative integer or an inclusive ``start-end`` range. Descending ranges
    (start > end) and anything else unparseable end up in ``rejected``.

    With ``limit`` (the number of selectable items), indices are kept within
    1..limit. Ranges are clamped rather than expanded, and every token that
    reached outside the window is listed once in ``out_of_range``.
    """

    picked: set[int] = set()
    rejected: List[str] = []
    out_of_range: List[str] = []

    for token in _SPLIT_RE.split(text.strip()):
        if not token:
            continue
        if _SINGLE_RE.match(token):
            start = end = int(token)
        else:
            m = _RANGE_RE.match(token)
            if not m:
                rejected.append(token)
                continue
            start, end = int(m.group(1)), int(m.group(2))
            if start > end:
                rejected.append(token)
                continue

        if limit is not None:
            lo, hi = max(start, 1), min(end, limit)
            if (lo, hi) != (start, end):
                out_of_range.append(token)
            start, end = lo, hi
        picked.update(range(start, end + 1))

    if rejected:
        logger.info("Rejected selection tokens: %s", ", ".join(rejected))
    if out_of_range:
        logger.info("Out-of-range selection tokens: %s", ", ".join(out_of_range))
    return Selection(indices=tuple(sorted(picked)), rejected=tuple(rejected), out_of_range=tuple(out_of_range))


def resolve_selection(selection: Selection, items: Sequence[T]) -> Tuple[List[T], List[int]]:
    """Map 1-based indices back onto ``items``.

    Returns (chosen items in index order, out-of-range indices).
    """

    chosen: List[T] = []
    invalid: List[int] = []
    for index in selection.indices:
        if 0 < index <= len(items):
            chosen.append(items[index - 1])
        else:
            invalid.append(index)
    return chosen, invalid
