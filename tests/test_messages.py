"""
Unit tests for the internal messages[] representation and the board
description that goes into completion prompts.

messages[] is internal only; transport to Ollama remains a single prompt
string plus an optional system prompt.
"""
import unittest

from aacboard.brain.grid_prompt import describe_grid
from aacboard.brain.messages import (
    flatten_messages,
    messages_from_history,
    msg_assistant,
    msg_system,
    msg_user,
)
from aacboard.core.board import BoardSnapshot, ConversationTurn

from conftest import make_button


class TestMessageConstruction(unittest.TestCase):
    """Test message construction helpers."""

    def test_roles(self):
        self.assertEqual(msg_system("Be kind."), {"role": "system", "content": "Be kind."})
        self.assertEqual(msg_user("hi"), {"role": "user", "content": "hi"})
        self.assertEqual(msg_assistant("hello"), {"role": "assistant", "content": "hello"})

    def test_history_keeps_most_recent_turns(self):
        history = [ConversationTurn("user", str(i)) for i in range(10)]
        history.append(ConversationTurn("assistant", "done"))

        messages = messages_from_history(history, limit=3)

        self.assertEqual([m["content"] for m in messages], ["8", "9", "done"])
        self.assertEqual(messages[-1]["role"], "assistant")

    def test_history_without_limit(self):
        history = [ConversationTurn("user", "a"), ConversationTurn("assistant", "b")]
        self.assertEqual(len(messages_from_history(history, limit=0)), 2)


class TestFlattenMessages(unittest.TestCase):
    """Test flatten_messages function."""

    def test_empty(self):
        self.assertEqual(flatten_messages([]), "")

    def test_plain_blocks_preserve_order(self):
        messages = [msg_user("first"), msg_assistant("second")]
        self.assertEqual(flatten_messages(messages), "first\n\nsecond")

    def test_role_headers(self):
        messages = [msg_assistant("I made a button."), msg_user("thanks")]
        self.assertEqual(
            flatten_messages(messages, include_role_headers=True),
            "Assistant:\nI made a button.\n\nUser:\nthanks",
        )

    def test_blank_messages_are_skipped(self):
        messages = [msg_user("  "), msg_user("hello  ")]
        self.assertEqual(flatten_messages(messages, block_separator="|"), "hello")


class TestDescribeGrid(unittest.TestCase):
    """Board serialization shared by the arbiter and conversation prompts."""

    def test_unknown_layout(self):
        board = BoardSnapshot(buttons=[make_button("x", "Yes", 0, 0, 1, custom=True)])
        text = describe_grid(board)
        self.assertTrue(text.startswith("GRID: layout unknown, 1 buttons"))
        self.assertIn('id=x "Yes" says "Yes"', text)
        self.assertTrue(text.rstrip().endswith("custom"))

    def test_empty_board(self):
        text = describe_grid(BoardSnapshot())
        self.assertIn("BUTTONS:\n  (none)", text)


if __name__ == "__main__":
    unittest.main()
