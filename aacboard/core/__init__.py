"""aacboard.core

Deterministic resolution: board model, grammar table, grid reasoning,
coreference and confirmation text.
"""

from aacboard.core.board import BoardSnapshot, Button, ConversationTurn, GridInfo
from aacboard.core.commands import Command, CommandKind

__all__ = [
    "BoardSnapshot",
    "Button",
    "ConversationTurn",
    "GridInfo",
    "Command",
    "CommandKind",
]
