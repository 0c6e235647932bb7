"""aacboard.core.grid_index

Read-only spatial view over the buttons of one snapshot.

Row, column and linear index come from the caller and are never recomputed
here. Callers must check `is_valid` before attempting any grid-relative
resolution.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from aacboard.core.board import Button, GridInfo


def plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


class GridIndex:
    """Lookup by linear index (O(1)) and by row (O(n))."""

    def __init__(self, buttons: Iterable[Button], grid: Optional[GridInfo]):
        self.buttons: List[Button] = list(buttons)
        self.grid = grid
        self._by_index: Dict[int, Button] = {}
        for button in self.buttons:
            # First occurrence wins if the caller ever hands us duplicate indices
            self._by_index.setdefault(button.index, button)

    @property
    def is_valid(self) -> bool:
        return self.grid is not None and self.grid.is_valid

    @property
    def rows(self) -> int:
        return self.grid.rows if self.grid else 0

    @property
    def columns(self) -> int:
        return self.grid.columns if self.grid else 0

    @property
    def total(self) -> int:
        if self.grid and self.grid.total_buttons:
            return self.grid.total_buttons
        return len(self.buttons)

    def by_index(self, index: int) -> Optional[Button]:
        return self._by_index.get(index)

    def row(self, row: int) -> List[Button]:
        """Buttons in `row`, left to right."""
        return sorted((b for b in self.buttons if b.row == row), key=lambda b: b.col)

    def at(self, row: int, col: int) -> Optional[Button]:
        for button in self.buttons:
            if button.row == row and button.col == col:
                return button
        return None

    def row_count_text(self, with_columns: bool = False) -> str:
        """Grid size sentence used in spoken error replies."""
        text = f"The grid has {plural(self.rows, 'row')}"
        if with_columns:
            text += f" and {plural(self.columns, 'column')}"
        return text + "."

    def layout(self) -> List[List[Button]]:
        """Row-by-row layout, rows 1..N; empty rows are kept as empty lists."""
        return [self.row(r) for r in range(1, self.rows + 1)]
