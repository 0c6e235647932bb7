"""Shared fixtures for the aacboard test-suite."""
import os
import sys
from typing import List, Optional

import pytest

# Add aacboard to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from aacboard.core.board import BoardSnapshot, Button, ConversationTurn, GridInfo


def make_button(id, label, row, col, index, text=None, custom=False, **kwargs):
    return Button(
        id=id,
        label=label,
        text=text if text is not None else label,
        row=row,
        col=col,
        index=index,
        custom=custom,
        **kwargs,
    )


class StubLLM:
    """Completion backend double: canned replies, recorded calls."""

    def __init__(self, reply: str = "", error: Optional[Exception] = None):
        self.enabled = True
        self.reply = reply
        self.error = error
        self.calls: List[dict] = []

    def complete(self, prompt, system=None, max_tokens=150, temperature=0.7):
        self.calls.append({
            "prompt": prompt,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def abc_buttons():
    """2 rows x 3 columns: A B C / D E F."""
    return [
        make_button("A", "A", 1, 1, 1),
        make_button("B", "B", 1, 2, 2),
        make_button("C", "C", 1, 3, 3),
        make_button("D", "D", 2, 1, 4),
        make_button("E", "E", 2, 2, 5),
        make_button("F", "F", 2, 3, 6),
    ]


@pytest.fixture
def abc_board(abc_buttons):
    return BoardSnapshot(buttons=abc_buttons, grid=GridInfo(rows=2, columns=3, total_buttons=6))


@pytest.fixture
def word_buttons():
    """2 rows x 3 columns of real words; the last two were created by the user."""
    return [
        make_button("b1", "Hello", 1, 1, 1, text="Hello there", category="Social"),
        make_button("b2", "Water", 1, 2, 2, text="I want water", category="Requests"),
        make_button("b3", "Help", 1, 3, 3, text="I need help", category="Requests"),
        make_button("b4", "Stop", 2, 1, 4, text="Stop please", category="Commands"),
        make_button("c1", "Hungry", 2, 2, 5, text="I'm hungry", custom=True),
        make_button("c2", "Juice", 2, 3, 6, text="Can I have juice", custom=True),
    ]


@pytest.fixture
def word_board(word_buttons):
    return BoardSnapshot(buttons=word_buttons, grid=GridInfo(rows=2, columns=3, total_buttons=6))


@pytest.fixture
def thirsty_board(word_buttons):
    """Assistant said it made "I'm thirsty", but that button is no longer on the board."""
    history = [
        ConversationTurn("user", "make a button for I'm thirsty"),
        ConversationTurn("assistant", "I made a button for I'm thirsty"),
        ConversationTurn("user", "thanks"),
    ]
    return BoardSnapshot(
        buttons=word_buttons,
        grid=GridInfo(rows=2, columns=3, total_buttons=6),
        history=history,
    )
