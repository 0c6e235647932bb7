"""aacboard.core.reference_resolver

Conversational coreference for button deletion.

Resolves vague deletes like:
- "delete it" / "remove that one"
- "delete the button you just made"
- "get rid of the last one"

to a concrete button on the board.

HARD RULES:
- NO LLM-based guessing
- Only assistant turns are scanned, newest first
- A conversational label is only accepted on exact label/text equality
- If the conversation gives nothing usable, fall back to the most recently
  added custom button (built-in buttons are never created on this path)
- Empty history or an empty board resolves to nothing; the grammar table then
  moves on to the next rule
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from aacboard.core.board import Button, ConversationTurn
from aacboard.core.label_matcher import find_exact
from aacboard.core.logger import get_logger


# ============================================================================
# REFERENCE PATTERNS
# ============================================================================

# "delete it", "remove that one", "delete the one you just made",
# "get rid of the last one", "delete the new button"
_CONTEXTUAL_DELETE_RE = re.compile(
    r"^(?:please\s+)?(?:can\s+you\s+)?"
    r"(?:delete|remove|get\s+rid\s+of|erase|take\s+away|trash)\s+"
    r"(?:"
    r"it|that|this|"
    r"(?:that|this)\s+(?:one|button)|"
    r"the\s+(?:one|button)\s+(?:you|i|we)\s+(?:just\s+)?(?:made|created|added)|"
    r"what\s+(?:you|i|we)\s+just\s+(?:made|created|added)|"
    r"the\s+(?:last|latest|newest|new)\s+(?:one|button)(?:\s+(?:you|i|we)\s+(?:just\s+)?(?:made|created|added))?"
    r")"
    r"(?:\s+(?:again|please|now))?$",
    re.IGNORECASE,
)

# Assistant confirmations carrying a quoted label:
#   Done! I made a button that says "I'm thirsty". You'll see it on the Talk page!
_MADE_BUTTON_QUOTED_RE = re.compile(
    r"\b(?:made|created|added)\b[^\"“]*?\bbutton\b[^\"“]*?[\"“]([^\"”]+)[\"”]",
    re.IGNORECASE,
)

# Unquoted variant: "I made a button for I'm thirsty."
_MADE_BUTTON_PLAIN_RE = re.compile(
    r"\b(?:made|created|added)\s+(?:you\s+)?(?:a|an|the)?\s*(?:new\s+)?button\s+"
    r"(?:for|that\s+says|saying|called|named|with)\s+"
    r"(.+?)(?:[.!?](?:\s|$)|$)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class RecentButton:
    button: Button
    source: Literal["conversation", "positional"]


def is_contextual_delete(text: str) -> bool:
    return bool(_CONTEXTUAL_DELETE_RE.match((text or "").strip()))


def extract_created_label(content: str) -> Optional[str]:
    """Pull the button label out of a "made/created/added a button ..." turn."""
    if not content:
        return None
    m = _MADE_BUTTON_QUOTED_RE.search(content)
    if m:
        return m.group(1).strip()
    m = _MADE_BUTTON_PLAIN_RE.search(content)
    if m:
        return m.group(1).strip().strip("'").strip()
    return None


def resolve_recent_button(
    history: Sequence[ConversationTurn],
    buttons: Sequence[Button],
    custom_buttons: Sequence[Button],
) -> Optional[RecentButton]:
    """
    Resolve "the button you just made" against the live board.

    Args:
        history: Conversation turns, oldest to newest
        buttons: Every button currently on the board
        custom_buttons: User-created buttons in creation order

    Returns:
        RecentButton, or None when nothing can be resolved
    """
    logger = get_logger()

    if not history or not buttons:
        logger.debug("[COREF] no history or no buttons; nothing to resolve")
        return None

    for turn in reversed(history):
        if turn.role != "assistant":
            continue
        label = extract_created_label(turn.content)
        if label is None:
            continue
        button = find_exact(label, buttons)
        if button is not None:
            logger.debug(f"[COREF] conversation label '{label}' -> {button.id}")
            return RecentButton(button=button, source="conversation")
        # Only the newest creation turn counts; an unresolved label means the
        # button is gone (or was renamed), so go positional
        logger.debug(f"[COREF] label '{label}' not on board; using positional fallback")
        break

    if custom_buttons:
        button = custom_buttons[-1]
        logger.debug(f"[COREF] positional fallback -> {button.id} ({button.label})")
        return RecentButton(button=button, source="positional")

    return None
