"""aacboard.core.grid_delete

Delete-by-grid-position sub-grammars.

Three surface forms, tried in this order:
- literal pair:   "delete the button at row 2, column 3"   (direct row/col lookup)
- ordinal pair:   "delete the second button in the last row" (ordinal resolution)
- linear index:   "delete the button in position 5"          (Button.index lookup)

Out-of-range requests produce a delete command with `target=None` and a
human-readable `error`; they are reported, never silently dropped.

Known quirk, kept on purpose: an ordinal-pair row descriptor that cannot be
parsed ("the blue row") falls back to the LAST row instead of failing. This
changes what the user asked for, so it is logged as a warning.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from aacboard.core.commands import Command, delete_command
from aacboard.core.grid_index import GridIndex, plural
from aacboard.core.logger import get_logger
from aacboard.core.ordinals import (
    LAST,
    MIDDLE,
    NOT_A_NUMBER,
    ORDINAL_TOKEN_PATTERN,
    parse_ordinal,
    resolve_in_sequence,
    resolve_row,
)


_DELETE_VERB = r"(?:delete|remove|get\s+rid\s+of|erase|take\s+away|trash)"
_POLITE = r"^(?:please\s+)?(?:(?:can|could|would)\s+you\s+(?:please\s+)?)?"
_TOK = ORDINAL_TOKEN_PATTERN
_ITEM = r"(?:\s+(?:button|one|item|square|spot|box))?"

# Anything that makes an utterance spatial; label-based deletion steps aside for these
GRID_VOCAB_RE = re.compile(r"\b(?:rows?|columns?|col|position|spot|slot)\b", re.IGNORECASE)

# "delete the button at row 2, column 3" / "remove row 1 column 2"
_ROW_COL_LITERAL_RE = re.compile(
    _POLITE + _DELETE_VERB + r"\b.*?\brow\s+(?:number\s+)?(?P<row>\d+)\s*,?\s*(?:and\s+)?(?:in\s+)?(?:column|col)\s+(?:number\s+)?(?P<col>\d+)\b",
    re.IGNORECASE,
)
_COL_ROW_LITERAL_RE = re.compile(
    _POLITE + _DELETE_VERB + r"\b.*?\b(?:column|col)\s+(?:number\s+)?(?P<col>\d+)\s*,?\s*(?:and\s+)?(?:in\s+)?row\s+(?:number\s+)?(?P<row>\d+)\b",
    re.IGNORECASE,
)

# "delete the second button in the last row" / "remove button 3 in row 1"
_ORDINAL_PAIR_RE = re.compile(
    _POLITE + _DELETE_VERB + r"\s+(?:the\s+)?(?:button\s+)?(?:number\s+)?(?P<col>" + _TOK + r")" + _ITEM
    + r"\s+(?:in|on|of|from|at)\s+(?:the\s+)?"
    r"(?:(?P<row>[\w']+)\s+row|row\s+(?:number\s+)?(?P<rownum>[\w']+))"
    r"(?:\s+please)?$",
    re.IGNORECASE,
)

# "in the top row, delete the first button"
_ROW_FIRST_PAIR_RE = re.compile(
    r"^(?:in|on|from)\s+(?:the\s+)?(?:(?P<row>[\w']+)\s+row|row\s+(?:number\s+)?(?P<rownum>[\w']+))\s*,?\s+"
    + _DELETE_VERB + r"\s+(?:the\s+)?(?:button\s+)?(?P<col>" + _TOK + r")" + _ITEM + r"(?:\s+please)?$",
    re.IGNORECASE,
)

# "delete the button in position 5" / "remove the last position"
_LINEAR_RE = re.compile(
    _POLITE + _DELETE_VERB + r"\s+(?:the\s+)?(?:button\s+)?(?:(?:in|at)\s+)?(?:the\s+)?"
    r"(?:(?:position|spot|slot)\s+(?:number\s+)?#?(?P<pos>" + _TOK + r")|(?P<posword>" + _TOK + r")\s+(?:position|spot|slot))"
    r"(?:\s+please)?$",
    re.IGNORECASE,
)


def extract_grid_slots(text: str) -> Optional[Dict[str, Any]]:
    """Structural match only: which sub-grammar fits and its raw descriptors."""
    t = (text or "").strip()
    for pattern in (_ROW_COL_LITERAL_RE, _COL_ROW_LITERAL_RE):
        m = pattern.search(t)
        if m:
            return {"form": "literal", "row": int(m.group("row")), "col": int(m.group("col"))}

    for pattern in (_ORDINAL_PAIR_RE, _ROW_FIRST_PAIR_RE):
        m = pattern.match(t)
        if m:
            row_desc = m.group("row") or m.group("rownum") or ""
            return {"form": "ordinal", "row_desc": row_desc.lower(), "col_desc": m.group("col").lower()}

    m = _LINEAR_RE.match(t)
    if m:
        return {"form": "linear", "pos_desc": (m.group("pos") or m.group("posword")).lower()}

    return None


def build_grid_delete(slots: Dict[str, Any], index: GridIndex) -> Optional[Command]:
    """Resolve extracted descriptors against the grid."""
    if not index.is_valid:
        return None
    form = slots.get("form")
    if form == "literal":
        return _resolve_literal(slots["row"], slots["col"], index)
    if form == "ordinal":
        return _resolve_ordinal(slots["row_desc"], slots["col_desc"], index)
    if form == "linear":
        return _resolve_linear(slots["pos_desc"], index)
    return None


def _resolve_literal(row: int, col: int, index: GridIndex) -> Command:
    button = index.at(row, col)
    if button is None:
        return delete_command(
            None,
            error=f"There's no button at row {row}, column {col}. " + index.row_count_text(with_columns=True),
            isGridPosition=True,
            row=row,
            column=col,
        )
    return delete_command(button.id, button.label, isGridPosition=True, row=row, column=col)


def _resolve_ordinal(row_desc: str, col_desc: str, index: GridIndex) -> Command:
    logger = get_logger()

    # Step 2: row descriptor -> concrete row number
    row_pos = parse_ordinal(row_desc)
    row = resolve_row(row_pos, index.rows)
    if row is None:
        logger.warning(
            f"[GRID] unrecognized row descriptor '{row_desc}'; defaulting to last row ({index.rows})"
        )
        row = index.rows

    # Step 3: buttons in that row, left to right
    row_buttons = index.row(row)
    if not row_buttons:
        return delete_command(
            None,
            error=f"There are no buttons in row {row}. {index.row_count_text()}",
            isGridPosition=True,
            row=row,
        )

    # Step 4: column descriptor against the row's own length, not the grid width
    col_pos = parse_ordinal(col_desc)
    position = resolve_in_sequence(col_pos, len(row_buttons))
    if position is None:
        return delete_command(
            None,
            error=(
                f"I couldn't find the {col_desc} button in row {row}. "
                f"Row {row} only has {plural(len(row_buttons), 'button')}."
            ),
            isGridPosition=True,
            row=row,
        )

    # Step 5
    button = row_buttons[position]
    logger.debug(f"[GRID] '{col_desc}' in '{row_desc}' row -> row {row}, column {position + 1}: {button.id}")
    return delete_command(button.id, button.label, isGridPosition=True, row=row, column=position + 1)


def _resolve_linear(pos_desc: str, index: GridIndex) -> Command:
    pos = parse_ordinal(pos_desc)
    if pos in (LAST, MIDDLE) and index.buttons:
        # Relative words pick from the occupied positions, in board order
        occupied = sorted(b.index for b in index.buttons)
        pos = occupied[resolve_in_sequence(pos, len(occupied))]
    button = index.by_index(pos) if pos != NOT_A_NUMBER else None
    if button is None:
        return delete_command(
            None,
            error=f"There's no button at position {pos_desc}. The board has {plural(index.total, 'button')}.",
            isGridPosition=True,
        )
    return delete_command(
        button.id,
        button.label,
        isGridPosition=True,
        position=button.index,
        row=button.row,
        column=button.col,
    )
