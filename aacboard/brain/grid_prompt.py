"""
Serialized board description shared by the arbiter and conversation prompts.

Layout:
    GRID: 2 rows x 3 columns, 6 buttons
    LAYOUT (left to right):
      Row 1: Hello | Water | Help
      Row 2: ...
    BUTTONS:
      - id=btn-1 "Hello" says "Hello there" row=1 col=1 position=1 color=#14b8a6 category=Social
"""
from typing import List

from aacboard.core.board import BoardSnapshot
from aacboard.core.grid_index import GridIndex


def describe_grid(snapshot: BoardSnapshot) -> str:
    """Counts, row-by-row layout (labels only) and per-button details."""
    index = GridIndex(snapshot.buttons, snapshot.grid)
    lines: List[str] = []

    if index.is_valid:
        lines.append(f"GRID: {index.rows} rows x {index.columns} columns, {index.total} buttons")
        lines.append("LAYOUT (left to right):")
        for row_number, row in enumerate(index.layout(), start=1):
            labels = " | ".join(b.label for b in row) if row else "(empty)"
            lines.append(f"  Row {row_number}: {labels}")
    else:
        lines.append(f"GRID: layout unknown, {len(index.buttons)} buttons")

    lines.append("BUTTONS:")
    if not index.buttons:
        lines.append("  (none)")
    for b in index.buttons:
        detail = f'  - id={b.id} "{b.label}" says "{b.text}" row={b.row} col={b.col} position={b.index}'
        if b.color:
            detail += f" color={b.color}"
        if b.category:
            detail += f" category={b.category}"
        if b.custom:
            detail += " custom"
        lines.append(detail)

    return "\n".join(lines)
