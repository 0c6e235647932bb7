"""
Tests for the grammar table: dispatch order, payloads and fall-through.

Run with: python -m pytest tests/test_grammar_router.py -v
"""
import pytest

from aacboard.core.board import BoardSnapshot
from aacboard.core.commands import CommandKind
from aacboard.core.grammar_router import (
    GRAMMARS,
    clean_focus_words,
    normalize,
    route,
    story_scenario,
)


# ============================================================================
# TABLE SHAPE
# ============================================================================

def test_grammar_order_is_explicit():
    names = [g.name for g in GRAMMARS]
    assert names == [
        "watch_first_on",
        "watch_first_off",
        "model_mode_on",
        "model_mode_off",
        "modeling_stats",
        "show_me_how",
        "modeling_suggestion",
        "restore_buttons",
        "focus_learning",
        "show_story",
        "change_language",
        "create_button",
        "contextual_delete",
        "delete_by_label",
        "delete_by_grid_position",
        "change_icon",
        "update_button",
        "navigate",
        "change_voice",
        "help",
    ]


def test_normalize():
    assert normalize("  Delete   the WATER button!!  ") == "Delete the WATER button"
    assert normalize("“hello”?") == '"hello"'
    assert normalize("   ") == ""


# ============================================================================
# KIND DISPATCH
# ============================================================================

@pytest.mark.parametrize("text,kind", [
    ("turn on watch first mode", CommandKind.TOGGLE_WATCH_FIRST),
    ("stop watching first", CommandKind.TOGGLE_WATCH_FIRST),
    ("turn on modeling mode", CommandKind.TOGGLE_MODEL_MODE),
    ("turn off modeling mode", CommandKind.TOGGLE_MODEL_MODE),
    ("show my modeling stats", CommandKind.SHOW_MODELING_STATS),
    ("show me how to model help", CommandKind.SHOW_ME_HOW),
    ("what should I model today?", CommandKind.GET_MODELING_SUGGESTION),
    ("how should I model today", CommandKind.GET_MODELING_SUGGESTION),
    ("bring back my buttons", CommandKind.RESTORE_BUTTONS),
    ("show only help and water", CommandKind.FOCUS_LEARNING),
    ("show me a story about the dentist", CommandKind.SHOW_STORY),
    ("switch to Spanish", CommandKind.CHANGE_LANGUAGE),
    ("make a button for I'm thirsty", CommandKind.CREATE_BUTTON),
    ("delete the water button", CommandKind.DELETE_BUTTON),
    ("change the icon on help to a star", CommandKind.CHANGE_ICON),
    ("rename the water button to Juice", CommandKind.UPDATE_BUTTON),
    ("take me to settings", CommandKind.NAVIGATE),
    ("make the voice a girl", CommandKind.CHANGE_VOICE),
    ("what can you do", CommandKind.HELP),
])
def test_dispatch(word_board, text, kind):
    command = route(text, word_board)
    assert command is not None, text
    assert command.kind == kind


def test_watch_first_beats_help(word_board):
    command = route("turn on watch first mode to help me", word_board)
    assert command.kind == CommandKind.TOGGLE_WATCH_FIRST
    assert command.payload == {"enabled": True}


def test_toggle_payloads(word_board):
    assert route("turn off watch first", word_board).payload == {"enabled": False}
    assert route("modeling mode on", word_board).payload == {"enabled": True}
    assert route("back to normal speed", word_board).payload == {"enabled": False}


def test_nothing_matches(word_board):
    assert route("I like turtles", word_board) is None
    assert route("", word_board) is None


# ============================================================================
# PAYLOADS
# ============================================================================

def test_show_me_how_phrase(word_board):
    command = route('show me how to say "I need help"', word_board)
    assert command.payload == {"phrase": "I need help"}


def test_focus_words(word_board):
    assert route("show only help and water", word_board).payload == {"words": ["help", "water"]}


def test_clean_focus_words():
    assert clean_focus_words("the hay button") == ["hey"]
    assert clean_focus_words("good morning, bye") == ["good morning", "good", "morning", "bye"]
    assert clean_focus_words("candy and juice") == ["candy", "juice"]
    assert clean_focus_words("the button") == []


def test_story_payload(word_board):
    command = route("show me a story about the dentist", word_board)
    assert command.payload == {"scenario": "dentist", "topic": "the dentist"}


@pytest.mark.parametrize("topic,scenario", [
    ("going to the doctor", "doctor"),
    ("my birthday party", "birthday"),
    ("too much noise", "feelings-overwhelmed"),
    ("a change of plans", "schedule-change"),
    ("the zoo", "the zoo"),
])
def test_story_scenarios(topic, scenario):
    assert story_scenario(topic) == scenario


def test_nervous_about(word_board):
    command = route("I'm nervous about the doctor", word_board)
    assert command.kind == CommandKind.SHOW_STORY
    assert command.payload["scenario"] == "doctor"


@pytest.mark.parametrize("text,code,name", [
    ("switch to Spanish", "es", "Spanish"),
    ("change to español", "es", "Spanish"),
    ("english please", "en", "English"),
    ("go back to French", "fr", "French"),
    ("switch to de", "de", "German"),
])
def test_language(word_board, text, code, name):
    command = route(text, word_board)
    assert command.kind == CommandKind.CHANGE_LANGUAGE
    assert command.payload == {"language": code, "languageName": name}


def test_unknown_language_falls_through(word_board):
    assert route("switch to Klingon", word_board) is None


def test_it_is_not_italian(word_board):
    command = route("delete it please", word_board)
    assert command is None or command.kind != CommandKind.CHANGE_LANGUAGE


def test_create_payload(word_board):
    command = route("make a button for I'm thirsty", word_board)
    assert command.payload == {
        "text": "I'm thirsty",
        "label": "I'm thirsty",
        "category": "Requests",
        "color": "#f97316",
        "icon": "thirsty",
        "emotion": "neutral",
    }


def test_create_variants(word_board):
    assert route("add a button that says good night", word_board).payload["text"] == "good night"
    assert route("add pizza to the board", word_board).payload["text"] == "pizza"
    assert route('create "Where is my dog?"', word_board).payload["category"] == "Questions"


def test_voice_phrasing_is_not_a_new_button(word_board):
    command = route("make the voice faster", word_board)
    assert command.kind == CommandKind.CHANGE_VOICE
    assert command.payload == {"speed": "fast"}


@pytest.mark.parametrize("text,payload", [
    ("make the voice a girl", {"gender": "female"}),
    ("change the voice to a woman", {"gender": "female"}),
    ("switch the voice to a boy", {"gender": "male"}),
    ("make the voice slower", {"speed": "slow"}),
])
def test_voice(word_board, text, payload):
    assert route(text, word_board).payload == payload


@pytest.mark.parametrize("text,path", [
    ("go to home", "/"),
    ("take me to the talk page", "/communicate"),
    ("open my avatar", "/avatar"),
    ("open voice settings", "/settings"),
    ("go to stories", "/stories"),
    ("take me to progress", "/progress"),
])
def test_navigate(word_board, text, path):
    assert route(text, word_board).payload == {"path": path}


def test_delete_by_label_exact(word_board):
    command = route("delete the water button", word_board)
    assert command.target == "b2"
    assert command.payload["buttonLabel"] == "Water"
    assert "fuzzyMatch" not in command.payload


def test_delete_by_label_fuzzy(word_board):
    command = route("remove hung", word_board)
    assert command.target == "c1"
    assert command.payload["fuzzyMatch"] is True


def test_delete_unknown_label_falls_through(word_board):
    assert route("delete the pizza button", word_board) is None


def test_delete_it_uses_coreference(thirsty_board):
    command = route("delete it", thirsty_board)
    assert command.kind == CommandKind.DELETE_BUTTON
    assert command.target == "c2"
    assert command.payload["isPositional"] is True


def test_delete_it_from_conversation(word_buttons):
    from aacboard.core.board import ConversationTurn
    board = BoardSnapshot(
        buttons=word_buttons,
        history=[ConversationTurn("assistant", 'Done! I made a button that says "I\'m hungry".')],
    )
    command = route("get rid of the one you just made", board)
    assert command.target == "c1"
    assert command.payload["fromConversation"] is True


def test_delete_it_without_history_is_not_a_label(word_board):
    # "it" must never be substring-matched against labels
    assert route("delete it", word_board) is None


def test_change_icon_payload(word_board):
    command = route("change the icon on help to a star", word_board)
    assert command.payload == {"target": "b3", "buttonLabel": "Help", "icon": "star"}


def test_change_icon_unknown_icon(word_board):
    assert route("change the icon on water to a spaceship", word_board) is None


def test_update_label(word_board):
    command = route("rename the water button to Juice", word_board)
    assert command.payload == {"target": "b2", "buttonLabel": "Water", "newLabel": "Juice"}


def test_update_text(word_board):
    command = route("change the water button to say I want juice", word_board)
    assert command.kind == CommandKind.UPDATE_BUTTON
    assert command.payload["newText"] == "I want juice"
    assert command.payload["newLabel"] == "I want juice"


def test_update_unknown_button_falls_through(word_board):
    assert route("change the pizza button to say pasta", word_board) is None


@pytest.mark.parametrize("text", [
    "remove the one next to water",
    "delete the button below hello",
    "delete the button above stop",
    "get rid of the one left of juice",
    "erase the button before juice",
])
def test_relational_delete_is_left_to_arbiter(word_board, text):
    # The named button is a landmark; deleting it would hit the wrong target
    assert route(text, word_board) is None


def test_relational_update_and_icon_fall_through(word_board):
    assert route("change the button next to water to say I want milk", word_board) is None
    assert route("change the icon on the one below hello to a star", word_board) is None


def test_relational_words_in_new_text_are_fine(word_board):
    command = route("change the water button to say see you after school", word_board)
    assert command.kind == CommandKind.UPDATE_BUTTON
    assert command.payload["newText"] == "see you after school"
