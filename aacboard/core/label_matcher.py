"""aacboard.core.label_matcher

Resolve a free-text fragment to one button on the board.

Two passes, in priority order:
1. case-insensitive exact equality with the label or the spoken text
2. bidirectional substring containment (button contains query, or query
   contains button), first in collection order

No scoring beyond that ordering. A substring hit is reported with
`exact=False` so the UI can signal lower confidence.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from aacboard.core.board import Button
from aacboard.core.logger import get_logger


@dataclass(frozen=True)
class LabelMatch:
    button: Button
    exact: bool


_LEADING_NOISE_RE = re.compile(r"^(?:the|a|an|my|this|that)\s+", re.IGNORECASE)
_TRAILING_NOISE_RE = re.compile(r"\s+(?:button|buttons|one|word|please)$", re.IGNORECASE)
_QUOTES_RE = re.compile(r"[\"“”‘’]")


def clean_query(text: str) -> str:
    """Strip quotes, articles and a trailing 'button' from a label fragment."""
    q = _QUOTES_RE.sub("", text or "").strip().strip("'").strip()
    q = q.rstrip(".!?,").strip()
    # Repeat: "the the water button please" style noise stacks up
    for _ in range(3):
        before = q
        q = _LEADING_NOISE_RE.sub("", q)
        q = _TRAILING_NOISE_RE.sub("", q).strip()
        if q == before:
            break
    return q


def _norm(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def find_exact(query: str, buttons: Iterable[Button]) -> Optional[Button]:
    """Exact, case-insensitive match on label or spoken text."""
    q = _norm(query)
    if not q:
        return None
    for button in buttons:
        if _norm(button.label) == q or _norm(button.text) == q:
            return button
    return None


def _contains_either_way(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


def match_label(query: str, buttons: Iterable[Button]) -> Optional[LabelMatch]:
    """Return at most one button for `query`, exact matches first."""
    logger = get_logger()
    q = _norm(clean_query(query))
    if not q:
        return None

    candidates = list(buttons)

    exact = find_exact(q, candidates)
    if exact is not None:
        logger.debug(f"[MATCH] exact '{q}' -> {exact.id} ({exact.label})")
        return LabelMatch(button=exact, exact=True)

    for button in candidates:
        if _contains_either_way(_norm(button.label), q) or _contains_either_way(_norm(button.text), q):
            logger.debug(f"[MATCH] substring '{q}' -> {button.id} ({button.label})")
            return LabelMatch(button=button, exact=False)

    logger.debug(f"[MATCH] no button for '{q}'")
    return None
