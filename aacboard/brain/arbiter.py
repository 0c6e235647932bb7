"""aacboard.brain.arbiter

Language-model arbiter for delete/update requests the grammar table could
not target ("remove the one next to water", "get rid of the hungry one").

The reply is parsed in an isolated step (`parse_arbiter_reply`) with a typed
result so malformed model output can be tested without a network call:

- ArbiterMatch:   buttonId names a button on the board
- ArbiterFailure: anything else (explicit "cannot determine", non-JSON,
                  missing fields, an id that is not on the board)

`Arbiter.resolve` never raises. Network errors, timeouts and parse errors
all come back as ArbiterFailure and are logged under [ARBITER].
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Union

from aacboard.brain.grid_prompt import describe_grid
from aacboard.brain.llm_engine import LLMEngine
from aacboard.core.board import BoardSnapshot, Button
from aacboard.core.commands import Command, CommandKind, delete_command
from aacboard.core.config import Config
from aacboard.core.logger import get_logger
from aacboard.core.phrases import normalize_icon


Mode = Literal["delete", "update"]


# ============================================================================
# LEXICAL TRIGGERS
# ============================================================================

_DELETE_WORDS_RE = re.compile(
    r"\b(?:delete|remove|get\s+rid\s+of|erase|take\s+away|trash|kill|destroy)\b",
    re.IGNORECASE,
)
_UPDATE_WORDS_RE = re.compile(r"\b(?:change|update|edit|modify)\b", re.IGNORECASE)
_BUTTON_WORD_RE = re.compile(r"\bbuttons?\b", re.IGNORECASE)


def looks_like_delete(text: str) -> bool:
    return bool(_DELETE_WORDS_RE.search(text or ""))


def looks_like_update(text: str) -> bool:
    t = text or ""
    return bool(_UPDATE_WORDS_RE.search(t)) and bool(_BUTTON_WORD_RE.search(t))


def arbiter_mode(text: str) -> Optional[Mode]:
    """Which arbiter request (if any) an unresolved utterance warrants."""
    if looks_like_delete(text):
        return "delete"
    if looks_like_update(text):
        return "update"
    return None


# ============================================================================
# RESOLUTION TYPES
# ============================================================================

@dataclass(frozen=True)
class ArbiterMatch:
    target_id: str
    target_label: str
    confidence: str = "medium"
    rationale: str = ""
    # update mode only: newLabel / newText / newIcon
    updates: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ArbiterFailure:
    error: str
    suggestions: List[str] = field(default_factory=list)


ArbiterResolution = Union[ArbiterMatch, ArbiterFailure]


# ============================================================================
# PROMPT
# ============================================================================

ARBITER_SYSTEM_PROMPT = (
    "You pick buttons on an AAC communication board. "
    "Reply with a single JSON object and nothing else."
)

_SPATIAL_RULES = """SPATIAL RULES:
- Row 1 is the TOP row; the highest row number is the BOTTOM row.
- Column 1 is the LEFTMOST button in a row.
- "next to" means the same row, one column left or right.
- "below" means the same column, one row down; "above" means one row up.
- "first"/"last" inside a row count left to right among the buttons actually in that row.
- "position N" counts across the whole board in reading order."""

_MATCHING_HINTS = """MATCHING HINTS:
- Users often describe a button by meaning rather than its exact label:
  "the hungry button" is the button about being hungry, "the drink one" may be "Water" or "Juice".
- Partial labels, misspellings and speech-recognition slips are common.
- Colours and categories listed above may be used to describe buttons.
- Only choose a button that appears in BUTTONS. Never invent an id."""

_DELETE_CONTRACT = """Which single button does the user want to DELETE?

If you can tell, reply:
{"buttonId": "<id from BUTTONS>", "buttonLabel": "<its label>", "confidence": "high" | "medium" | "low", "reason": "<short explanation>"}

If you cannot tell, reply:
{"buttonId": null, "error": "<why>", "suggestions": ["<label>", "<label>"]}"""

_UPDATE_CONTRACT = """Which single button does the user want to CHANGE, and what should change?

If you can tell, reply:
{"buttonId": "<id from BUTTONS>", "buttonLabel": "<its current label>", "confidence": "high" | "medium" | "low", "reason": "<short explanation>", "newLabel": "<new short label or null>", "newText": "<new spoken phrase or null>", "newIcon": "<new icon name or null>"}

If you cannot tell, reply:
{"buttonId": null, "error": "<why>", "suggestions": ["<label>", "<label>"]}"""


def build_arbiter_prompt(text: str, snapshot: BoardSnapshot, mode: Mode = "delete") -> str:
    contract = _UPDATE_CONTRACT if mode == "update" else _DELETE_CONTRACT
    return "\n\n".join([
        describe_grid(snapshot),
        _SPATIAL_RULES,
        _MATCHING_HINTS,
        f'USER SAID: "{text}"',
        contract,
    ])


# ============================================================================
# REPLY PARSING
# ============================================================================

def extract_json_object(text: str) -> Optional[str]:
    """First balanced {...} substring of `text`, skipping braces inside strings."""
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from here; try the next opening brace
        start = text.find("{", start + 1)
    return None


_UPDATE_FIELDS = ("newLabel", "newText", "newIcon")


def _clean_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_arbiter_reply(text: str, buttons: Sequence[Button]) -> ArbiterResolution:
    """
    Turn raw model output into a typed resolution.

    Args:
        text: Raw completion text
        buttons: Buttons the model was shown

    Returns:
        ArbiterMatch when the reply names a button on the board,
        ArbiterFailure otherwise
    """
    raw = extract_json_object(text)
    if raw is None:
        return ArbiterFailure(error="no JSON object in arbiter reply")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        return ArbiterFailure(error=f"invalid JSON in arbiter reply: {e.msg}")

    if not isinstance(data, dict):
        return ArbiterFailure(error="arbiter reply is not a JSON object")

    suggestions_raw = data.get("suggestions")
    suggestions = [_clean_str(s) for s in suggestions_raw if _clean_str(s)] if isinstance(suggestions_raw, list) else []

    button_id = data.get("buttonId")
    if button_id is None or _clean_str(button_id) == "":
        error = _clean_str(data.get("error"))
        if not error:
            return ArbiterFailure(error="arbiter reply has neither buttonId nor error")
        return ArbiterFailure(error=error, suggestions=suggestions)

    by_id = {b.id: b for b in buttons}
    button = by_id.get(_clean_str(button_id))
    if button is None:
        return ArbiterFailure(error=f"arbiter chose unknown button id '{button_id}'", suggestions=suggestions)

    updates: Dict[str, str] = {}
    for key in _UPDATE_FIELDS:
        value = _clean_str(data.get(key))
        if value and value.lower() != "null":
            updates[key] = value

    return ArbiterMatch(
        target_id=button.id,
        # The board's label is authoritative over what the model echoed back
        target_label=button.label,
        confidence=_clean_str(data.get("confidence")).lower() or "medium",
        rationale=_clean_str(data.get("reason")),
        updates=updates,
    )


# ============================================================================
# CLIENT
# ============================================================================

class Arbiter:
    """One bounded completion per unresolved delete/update request."""

    def __init__(
        self,
        llm: LLMEngine,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.logger = get_logger()
        self.llm = llm
        self.max_tokens = max_tokens if max_tokens is not None else Config.ARBITER_MAX_TOKENS
        self.temperature = temperature if temperature is not None else Config.ARBITER_TEMPERATURE

    def resolve(self, text: str, snapshot: BoardSnapshot, mode: Mode = "delete") -> ArbiterResolution:
        if not snapshot.buttons:
            return ArbiterFailure(error="there are no buttons on the board")

        prompt = build_arbiter_prompt(text, snapshot, mode)
        self.logger.debug(f"[PROMPT] arbiter {mode} prompt ({len(prompt)} chars)")

        try:
            reply = self.llm.complete(
                prompt,
                system=ARBITER_SYSTEM_PROMPT,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            # Network, timeout, model missing: no resolution, never a request error
            self.logger.warning(f"[ARBITER] completion failed: {e}")
            return ArbiterFailure(error=f"arbiter unavailable: {e}")

        resolution = parse_arbiter_reply(reply, snapshot.buttons)
        if isinstance(resolution, ArbiterMatch):
            self.logger.info(
                f"[ARBITER] {mode} '{text}' -> {resolution.target_id} ({resolution.target_label}), "
                f"confidence={resolution.confidence}"
            )
        else:
            self.logger.info(f"[ARBITER] no resolution for '{text}': {resolution.error}")
        return resolution

    @staticmethod
    def build_command(match: ArbiterMatch, mode: Mode = "delete") -> Optional[Command]:
        """Delete/update command for a successful resolution."""
        provenance = {
            "resolvedByArbiter": True,
            "confidence": match.confidence,
            "reason": match.rationale,
        }
        if mode == "delete":
            return delete_command(match.target_id, match.target_label, **provenance)

        payload: Dict[str, Any] = {"target": match.target_id, "buttonLabel": match.target_label}
        for key, value in match.updates.items():
            if key == "newIcon":
                icon = normalize_icon(value)
                if icon is None:
                    continue
                value = icon
            payload[key] = value
        if len(payload) == 2:
            # Nothing to change
            return None
        payload.update(provenance)
        return Command(CommandKind.UPDATE_BUTTON, payload)
