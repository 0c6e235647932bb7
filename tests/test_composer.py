"""Tests for confirmation text."""
import pytest

from aacboard.core.commands import Command, CommandKind, delete_command
from aacboard.core.composer import GENERIC_APOLOGY, HELP_TEXT, compose, template_kind


# One representative command per variant
SAMPLES = [
    Command(CommandKind.CREATE_BUTTON, {"text": "I'm thirsty", "label": "I'm thirsty"}),
    delete_command("b2", "Water"),
    Command(CommandKind.UPDATE_BUTTON, {"target": "b2", "buttonLabel": "Water", "newLabel": "Juice"}),
    Command(CommandKind.NAVIGATE, {"path": "/communicate"}),
    Command(CommandKind.CHANGE_VOICE, {"gender": "female"}),
    Command(CommandKind.CHANGE_LANGUAGE, {"language": "es", "languageName": "Spanish"}),
    Command(CommandKind.CHANGE_ICON, {"target": "b3", "buttonLabel": "Help", "icon": "star"}),
    Command(CommandKind.FOCUS_LEARNING, {"words": ["help"]}),
    Command(CommandKind.RESTORE_BUTTONS),
    Command(CommandKind.SHOW_STORY, {"scenario": "dentist", "topic": "the dentist"}),
    Command(CommandKind.TOGGLE_WATCH_FIRST, {"enabled": True}),
    Command(CommandKind.TOGGLE_MODEL_MODE, {"enabled": False}),
    Command(CommandKind.SHOW_MODELING_STATS),
    Command(CommandKind.SHOW_ME_HOW, {"phrase": "help"}),
    Command(CommandKind.GET_MODELING_SUGGESTION),
    Command(CommandKind.HELP),
    Command(CommandKind.CONVERSATION),
]


def test_every_variant_has_a_sample():
    assert {c.kind for c in SAMPLES} == set(CommandKind)


@pytest.mark.parametrize("command", SAMPLES, ids=lambda c: c.kind.value)
def test_template_family_round_trip(command):
    assert template_kind(compose(command)) == command.kind


@pytest.mark.parametrize("command", [
    Command(CommandKind.CHANGE_VOICE, {"speed": "fast"}),
    Command(CommandKind.CHANGE_VOICE),
    Command(CommandKind.FOCUS_LEARNING, {"words": ["help", "water"]}),
    Command(CommandKind.TOGGLE_WATCH_FIRST, {"enabled": False}),
    Command(CommandKind.TOGGLE_MODEL_MODE, {"enabled": True}),
    Command(CommandKind.UPDATE_BUTTON, {"buttonLabel": "Water", "newText": "I want juice", "newIcon": "drink"}),
    delete_command(None, error="There's no button at position 9. The board has 6 buttons."),
    delete_command(None, error="I couldn't find the fifth button in row 1. Row 1 only has 3 buttons."),
])
def test_other_payload_shapes_round_trip(command):
    assert template_kind(compose(command)) == command.kind


def test_delete_provenance_does_not_change_wording():
    plain = compose(delete_command("b2", "Water"))
    assert plain == 'Okay, I removed the "Water" button for you.'
    assert compose(delete_command("b2", "Water", resolvedByArbiter=True, confidence="low")) == plain
    assert compose(delete_command("b2", "Water", fuzzyMatch=True)) == plain
    assert compose(delete_command("b2", "Water", isPositional=True)) == plain


def test_delete_error_is_spoken():
    error = "There are no buttons in row 4. The grid has 2 rows."
    assert compose(delete_command(None, error=error)) == error


def test_interpolation():
    assert compose(Command(CommandKind.CHANGE_VOICE, {"speed": "slow"})) == "Done! Made the voice slower."
    assert compose(Command(CommandKind.NAVIGATE, {"path": "/"})) == "Taking you to Home now!"
    assert "Spanish" in compose(Command(CommandKind.CHANGE_LANGUAGE, {"language": "es", "languageName": "Spanish"}))
    assert compose(Command(CommandKind.UPDATE_BUTTON, {"buttonLabel": "Water", "newText": "I want juice"})) == (
        'Done! I updated the "Water" button to say "I want juice".'
    )


def test_fixed_texts():
    assert compose(Command(CommandKind.HELP)) == HELP_TEXT
    assert compose(Command(CommandKind.CONVERSATION)) == GENERIC_APOLOGY
    assert template_kind("the weather is nice") is None
