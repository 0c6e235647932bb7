"""aacboard.core.board

Read-only snapshot of the board handed to the engine on every request.

The caller owns button state, settings and conversation history; the engine
only ever sees an immutable copy of them for the duration of one utterance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple


Role = Literal["user", "assistant"]


def _first(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass(frozen=True)
class Button:
    """A button on the board with 1-based grid coordinates."""
    id: str
    label: str
    text: str
    row: int
    col: int
    index: int
    color: Optional[str] = None
    category: Optional[str] = None
    icon: Optional[str] = None
    custom: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Button":
        label = str(_first(data, "label", "text", default=""))
        return cls(
            id=str(data["id"]),
            label=label,
            text=str(_first(data, "text", "label", default=label)),
            row=int(_first(data, "row", default=0)),
            col=int(_first(data, "col", "column", default=0)),
            index=int(_first(data, "index", "position", default=0)),
            color=_first(data, "color"),
            category=_first(data, "category"),
            icon=_first(data, "icon"),
            custom=bool(_first(data, "custom", "isCustom", default=False)),
        )


@dataclass(frozen=True)
class GridInfo:
    rows: int
    columns: int
    total_buttons: int = 0

    @property
    def is_valid(self) -> bool:
        return self.rows >= 1 and self.columns >= 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridInfo":
        return cls(
            rows=int(_first(data, "rows", default=0)),
            columns=int(_first(data, "columns", "cols", default=0)),
            total_buttons=int(_first(data, "totalButtons", "total_buttons", default=0)),
        )


@dataclass(frozen=True)
class ConversationTurn:
    role: Role
    content: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationTurn":
        role = str(data.get("role", "user")).lower()
        if role not in ("user", "assistant"):
            role = "user"
        return cls(role=role, content=str(data.get("content", "")))


@dataclass(frozen=True)
class BoardSnapshot:
    """Everything the engine may look at while resolving one utterance."""
    buttons: Tuple[Button, ...] = ()
    grid: Optional[GridInfo] = None
    history: Tuple[ConversationTurn, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so the snapshot stays frozen
        object.__setattr__(self, "buttons", tuple(self.buttons or ()))
        object.__setattr__(self, "history", tuple(self.history or ()))

    @property
    def custom_buttons(self) -> List[Button]:
        """User-created buttons in collection (creation) order."""
        return [b for b in self.buttons if b.custom]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoardSnapshot":
        """Build a snapshot from a request body in the UI wire shape."""
        buttons = [Button.from_dict(b) for b in (data.get("buttons") or [])]
        grid_data = _first(data, "gridInfo", "grid")
        grid = GridInfo.from_dict(grid_data) if isinstance(grid_data, dict) else None
        turns = _first(data, "conversation", "history", "messages", default=[]) or []
        history = [ConversationTurn.from_dict(t) for t in turns if isinstance(t, dict)]
        return cls(buttons=tuple(buttons), grid=grid, history=tuple(history))
