"""aacboard.core.ordinals

Turns position words ("first", "3rd", "last", "middle", "7") into numbers.

Resolution is two-step. `parse_ordinal` only classifies the token: a literal
1-based position, or one of the LAST / MIDDLE sentinels whose meaning depends
on the collection it is applied to. The caller then applies the class to a
concrete axis with `resolve_row` (grid rows) or `resolve_in_sequence`
(buttons within one row), since "last row" and "last button in that row" are
different collections.
"""

from __future__ import annotations

import math
import re
from typing import Optional


# Sentinels. Valid literal positions are always >= 1.
NOT_A_NUMBER = 0
LAST = -1
MIDDLE = -2


_ORDINAL_WORDS = {
    "first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5,
    "sixth": 6, "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10,
    "eleventh": 11, "twelfth": 12, "thirteenth": 13, "fourteenth": 14,
    "fifteenth": 15, "sixteenth": 16, "seventeenth": 17, "eighteenth": 18,
    "nineteenth": 19, "twentieth": 20,
}

_NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19, "twenty": 20,
}

# Spatial synonyms: top row / leftmost column are the start of their axis
_FIRST_WORDS = {"top", "topmost", "left", "leftmost", "start", "beginning"}
_LAST_WORDS = {"last", "final", "end", "bottom", "bottommost", "right", "rightmost"}
_MIDDLE_WORDS = {"middle", "center", "centre", "central"}

_SUFFIXED_RE = re.compile(r"^(\d+)(?:st|nd|rd|th)$")

# Every token parse_ordinal understands, for building grammar patterns
ORDINAL_TOKEN_PATTERN = (
    r"(?:\d+(?:st|nd|rd|th)?|"
    + "|".join(sorted(
        set(_ORDINAL_WORDS) | set(_NUMBER_WORDS) | _FIRST_WORDS | _LAST_WORDS | _MIDDLE_WORDS,
        key=len,
        reverse=True,
    ))
    + r")"
)


def parse_ordinal(token: str) -> int:
    """Classify a position token.

    Returns a literal 1-based position, LAST, MIDDLE, or NOT_A_NUMBER.
    """
    word = (token or "").strip().lower().rstrip(".,")
    if not word:
        return NOT_A_NUMBER
    if word in _LAST_WORDS:
        return LAST
    if word in _MIDDLE_WORDS:
        return MIDDLE
    if word in _FIRST_WORDS:
        return 1
    if word in _ORDINAL_WORDS:
        return _ORDINAL_WORDS[word]
    if word in _NUMBER_WORDS:
        return _NUMBER_WORDS[word]
    m = _SUFFIXED_RE.match(word)
    if m:
        word = m.group(1)
    if word.isdigit():
        value = int(word)
        return value if value >= 1 else NOT_A_NUMBER
    return NOT_A_NUMBER


def resolve_row(position: int, rows: int) -> Optional[int]:
    """Apply a position class to the grid's rows; returns a 1-based row or None.

    Literal numbers are returned as-is even when they exceed `rows`; the
    caller reports the empty row.
    """
    if position == LAST:
        return rows if rows >= 1 else None
    if position == MIDDLE:
        return math.ceil(rows / 2) if rows >= 1 else None
    if position >= 1:
        return position
    return None


def resolve_in_sequence(position: int, length: int) -> Optional[int]:
    """Apply a position class to a sequence; returns a 0-based index or None."""
    if length <= 0:
        return None
    if position == LAST:
        return length - 1
    if position == MIDDLE:
        return length // 2
    if 1 <= position <= length:
        return position - 1
    return None
