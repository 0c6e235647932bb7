"""
Tests for the language-model arbiter: triggers, prompt, reply parsing and
failure handling. No network: the completion backend is a stub.
"""
import pytest

from aacboard.brain.arbiter import (
    Arbiter,
    ArbiterFailure,
    ArbiterMatch,
    arbiter_mode,
    build_arbiter_prompt,
    extract_json_object,
    looks_like_delete,
    looks_like_update,
    parse_arbiter_reply,
)
from aacboard.core.board import BoardSnapshot
from aacboard.core.commands import CommandKind

from conftest import StubLLM


# ============================================================================
# TRIGGERS
# ============================================================================

@pytest.mark.parametrize("text", [
    "delete the thing next to water",
    "get rid of the drink one",
    "kill that button",
    "Destroy the blue one",
])
def test_delete_trigger(text):
    assert looks_like_delete(text)
    assert arbiter_mode(text) == "delete"


def test_update_needs_button_word():
    assert looks_like_update("change the drink button to juice")
    assert not looks_like_update("change the voice")
    assert arbiter_mode("edit the second button") == "update"
    assert arbiter_mode("tell me a joke") is None


# ============================================================================
# PROMPT
# ============================================================================

def test_prompt_describes_grid(word_board):
    prompt = build_arbiter_prompt("remove the one next to water", word_board, "delete")
    assert "GRID: 2 rows x 3 columns, 6 buttons" in prompt
    assert "Row 1: Hello | Water | Help" in prompt
    assert 'id=b2 "Water" says "I want water" row=1 col=2 position=2' in prompt
    assert "Row 1 is the TOP row" in prompt
    assert 'USER SAID: "remove the one next to water"' in prompt
    assert '"buttonId": null' in prompt


def test_update_prompt_asks_for_changes(word_board):
    prompt = build_arbiter_prompt("change the drink button", word_board, "update")
    assert "newLabel" in prompt
    assert "newIcon" in prompt


# ============================================================================
# PARSING
# ============================================================================

class TestExtractJsonObject:
    def test_surrounded_by_prose(self):
        text = 'Sure! Here you go: {"buttonId": "b2"} Hope that helps.'
        assert extract_json_object(text) == '{"buttonId": "b2"}'

    def test_nested_and_braces_in_strings(self):
        text = 'x {"a": {"b": 1}, "reason": "has } and { inside"} y {"second": 2}'
        assert extract_json_object(text) == '{"a": {"b": 1}, "reason": "has } and { inside"}'

    def test_escaped_quote_in_string(self):
        text = '{"reason": "say \\"hi}\\" now", "buttonId": "b1"}'
        assert extract_json_object(text) == text

    def test_unbalanced_then_balanced(self):
        assert extract_json_object('{ oops {"buttonId": "b1"}') == '{"buttonId": "b1"}'

    def test_none(self):
        assert extract_json_object("no json here") is None
        assert extract_json_object("") is None
        assert extract_json_object("{ never closed") is None


def test_parse_success(word_buttons):
    reply = '{"buttonId": "b2", "buttonLabel": "water", "confidence": "HIGH", "reason": "water is a drink"}'
    result = parse_arbiter_reply(reply, word_buttons)
    assert result == ArbiterMatch(
        target_id="b2",
        target_label="Water",
        confidence="high",
        rationale="water is a drink",
        updates={},
    )


def test_parse_update_fields(word_buttons):
    reply = '{"buttonId": "b2", "confidence": "medium", "newLabel": "Juice", "newText": null, "newIcon": "null"}'
    result = parse_arbiter_reply(reply, word_buttons)
    assert isinstance(result, ArbiterMatch)
    assert result.updates == {"newLabel": "Juice"}


def test_parse_explicit_failure(word_buttons):
    reply = '{"buttonId": null, "error": "two drinks on the board", "suggestions": ["Water", "Juice", ""]}'
    result = parse_arbiter_reply(reply, word_buttons)
    assert result == ArbiterFailure(error="two drinks on the board", suggestions=["Water", "Juice"])


@pytest.mark.parametrize("reply", [
    "I think you mean the water button.",
    '{"buttonId": "b2", "reason": "unterminated}',
    '{"buttonId": "b2",, }',
    '["b2"]',
    '{"confidence": "high"}',
    '{"buttonId": null}',
    '{"buttonId": "zzz", "buttonLabel": "Pizza"}',
    "",
])
def test_malformed_replies_are_failures(word_buttons, reply):
    result = parse_arbiter_reply(reply, word_buttons)
    assert isinstance(result, ArbiterFailure)
    assert result.suggestions == []


# ============================================================================
# CLIENT
# ============================================================================

def test_resolve_uses_bounded_completion(word_board):
    llm = StubLLM(reply='{"buttonId": "c1", "confidence": "low", "reason": "hungry"}')
    arbiter = Arbiter(llm, max_tokens=300, temperature=0.1)
    result = arbiter.resolve("get rid of the food one", word_board, "delete")
    assert isinstance(result, ArbiterMatch)
    assert result.target_id == "c1"
    assert len(llm.calls) == 1
    assert llm.calls[0]["max_tokens"] == 300
    assert llm.calls[0]["temperature"] == 0.1
    assert llm.calls[0]["system"]


@pytest.mark.parametrize("error", [
    ConnectionError("Cannot reach Ollama"),
    ValueError("Model 'x' not found"),
    TimeoutError("timed out"),
    RuntimeError("anything else"),
])
def test_resolve_swallows_exceptions(word_board, error):
    arbiter = Arbiter(StubLLM(error=error))
    result = arbiter.resolve("delete the drink one", word_board, "delete")
    assert isinstance(result, ArbiterFailure)


def test_resolve_empty_board_skips_call():
    llm = StubLLM(reply='{"buttonId": "b1"}')
    result = Arbiter(llm).resolve("delete the drink one", BoardSnapshot(), "delete")
    assert isinstance(result, ArbiterFailure)
    assert llm.calls == []


def test_build_delete_command():
    match = ArbiterMatch("b2", "Water", confidence="medium", rationale="drink")
    command = Arbiter.build_command(match, "delete")
    assert command.kind == CommandKind.DELETE_BUTTON
    assert command.payload == {
        "target": "b2",
        "buttonLabel": "Water",
        "resolvedByArbiter": True,
        "confidence": "medium",
        "reason": "drink",
    }


def test_build_update_command():
    match = ArbiterMatch("b2", "Water", updates={"newLabel": "Juice", "newIcon": "Thumbs Up"})
    command = Arbiter.build_command(match, "update")
    assert command.kind == CommandKind.UPDATE_BUTTON
    assert command.payload["newLabel"] == "Juice"
    assert command.payload["newIcon"] == "thumbs-up"
    assert command.payload["resolvedByArbiter"] is True


def test_build_update_without_changes_is_nothing():
    match = ArbiterMatch("b2", "Water", updates={"newIcon": "spaceship"})
    assert Arbiter.build_command(match, "update") is None
