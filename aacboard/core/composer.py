"""aacboard.core.composer

Confirmation text for resolved commands.

One template per CommandKind. Provenance flags (arbiter, fuzzy match,
conversation, grid position) never change the wording; a delete that carries
an `error` speaks the error instead.

`template_kind` maps a composed string back to its template family, so every
variant's wording stays distinguishable from the others.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional, Pattern, Tuple

from aacboard.core.commands import Command, CommandKind


GENERIC_APOLOGY = (
    "I'm here to help! You can ask me to make buttons, change the voice, "
    "show stories, change language, or just chat with me."
)

HELP_TEXT = (
    "I can make buttons, remove or change them, and help you practice words. "
    "Try \"make a button for I'm hungry\" or \"delete the last button in the top row\"."
)

_PAGE_NAMES: Dict[str, str] = {
    "/": "Home",
    "/communicate": "Talk",
    "/avatar": "Avatar",
    "/settings": "Voice",
    "/stories": "Stories",
    "/progress": "Progress",
}


def _create(p: dict) -> str:
    return f'Done! I made a button that says "{p.get("text", "")}". You\'ll see it on the Talk page!'


def _delete(p: dict) -> str:
    if p.get("error"):
        return str(p["error"])
    label = p.get("buttonLabel")
    if not label:
        return "Okay, I removed that button for you."
    return f'Okay, I removed the "{label}" button for you.'


def _update(p: dict) -> str:
    changes = []
    if p.get("newText"):
        changes.append(f'say "{p["newText"]}"')
    elif p.get("newLabel"):
        changes.append(f'read "{p["newLabel"]}"')
    if p.get("newIcon"):
        changes.append(f'show a {p["newIcon"]} icon')
    detail = f" to {' and '.join(changes)}" if changes else ""
    return f'Done! I updated the "{p.get("buttonLabel", "")}" button{detail}.'


def _navigate(p: dict) -> str:
    page = _PAGE_NAMES.get(p.get("path", ""), "Voice")
    return f"Taking you to {page} now!"


def _voice(p: dict) -> str:
    if p.get("gender"):
        return f"Done! Changed to a {p['gender']} voice."
    if p.get("speed"):
        return f"Done! Made the voice {p['speed']}er."
    return "Voice updated!"


def _language(p: dict) -> str:
    name = p.get("languageName") or p.get("language", "")
    return f"Switching everything to {name} now! Give me just a moment to translate all the buttons."


def _icon(p: dict) -> str:
    return f'Done! The "{p.get("buttonLabel", "")}" button now has a {p.get("icon", "")} icon.'


def _focus(p: dict) -> str:
    words: List[str] = list(p.get("words") or [])
    if len(words) == 1:
        return (
            f'Here\'s "{words[0]}". Tap it when you\'re ready to say it! '
            'Say "bring back my buttons" when you\'re done learning.'
        )
    if len(words) > 1:
        quoted = " and ".join(f'"{w}"' for w in words)
        return f'Okay, showing just {quoted}. Tap to practice! Say "bring back my buttons" when done.'
    return "Focused on that word for you!"


def _story(p: dict) -> str:
    topic = p.get("topic") or p.get("scenario", "")
    return f"Let me show you a calming story about {topic}! Taking you to Visual Stories now."


def _watch_first(p: dict) -> str:
    if p.get("enabled"):
        return (
            "Watch First mode is ON! Now when you tap a button, I'll say \"Watch me!\" "
            "and demonstrate first. Then you try!"
        )
    return "Watch First mode is OFF. Buttons will speak immediately when tapped."


def _model_mode(p: dict) -> str:
    if p.get("enabled"):
        return "Modeling Mode is ON! I'll speak slower and more clearly to help with learning."
    return "Modeling Mode is OFF. Back to normal speed!"


def _show_me_how(p: dict) -> str:
    return f'Let me show you how to model "{p.get("phrase", "")}"! Watch the button light up as I demonstrate.'


_TEMPLATES: Dict[CommandKind, Callable[[dict], str]] = {
    CommandKind.CREATE_BUTTON: _create,
    CommandKind.DELETE_BUTTON: _delete,
    CommandKind.UPDATE_BUTTON: _update,
    CommandKind.NAVIGATE: _navigate,
    CommandKind.CHANGE_VOICE: _voice,
    CommandKind.CHANGE_LANGUAGE: _language,
    CommandKind.CHANGE_ICON: _icon,
    CommandKind.FOCUS_LEARNING: _focus,
    CommandKind.RESTORE_BUTTONS: lambda p: "All your buttons are back! Great job practicing!",
    CommandKind.SHOW_STORY: _story,
    CommandKind.TOGGLE_WATCH_FIRST: _watch_first,
    CommandKind.TOGGLE_MODEL_MODE: _model_mode,
    CommandKind.SHOW_MODELING_STATS: lambda p: "Let me show you your modeling progress! Taking you to the Progress page.",
    CommandKind.SHOW_ME_HOW: _show_me_how,
    CommandKind.GET_MODELING_SUGGESTION: lambda p: "Getting a modeling suggestion for you based on the time of day!",
    CommandKind.HELP: lambda p: HELP_TEXT,
    CommandKind.CONVERSATION: lambda p: GENERIC_APOLOGY,
}


def compose(command: Command) -> str:
    """Confirmation string for `command`."""
    return _TEMPLATES[command.kind](command.payload or {})


# Template family recognizers (anchored on each template's fixed prefix)
_FAMILIES: List[Tuple[CommandKind, Pattern]] = [
    (CommandKind.CREATE_BUTTON, re.compile(r"^Done! I made a button that says ")),
    (CommandKind.DELETE_BUTTON, re.compile(
        r"^(?:Okay, I removed |There's no button at |There are no buttons in row |I couldn't find the )"
    )),
    (CommandKind.UPDATE_BUTTON, re.compile(r'^Done! I updated the "')),
    (CommandKind.NAVIGATE, re.compile(r"^Taking you to .+ now!$")),
    (CommandKind.CHANGE_VOICE, re.compile(r"^(?:Done! Changed to a .+ voice\.|Done! Made the voice |Voice updated!)")),
    (CommandKind.CHANGE_LANGUAGE, re.compile(r"^Switching everything to ")),
    (CommandKind.CHANGE_ICON, re.compile(r'^Done! The ".*" button now has a ')),
    (CommandKind.FOCUS_LEARNING, re.compile(r"^(?:Here's \"|Okay, showing just |Focused on that word)")),
    (CommandKind.RESTORE_BUTTONS, re.compile(r"^All your buttons are back!")),
    (CommandKind.SHOW_STORY, re.compile(r"^Let me show you a calming story about ")),
    (CommandKind.TOGGLE_WATCH_FIRST, re.compile(r"^Watch First mode is (?:ON|OFF)")),
    (CommandKind.TOGGLE_MODEL_MODE, re.compile(r"^Modeling Mode is (?:ON|OFF)")),
    (CommandKind.SHOW_MODELING_STATS, re.compile(r"^Let me show you your modeling progress!")),
    (CommandKind.SHOW_ME_HOW, re.compile(r'^Let me show you how to model "')),
    (CommandKind.GET_MODELING_SUGGESTION, re.compile(r"^Getting a modeling suggestion")),
    (CommandKind.HELP, re.compile(r"^I can make buttons, remove or change them")),
    (CommandKind.CONVERSATION, re.compile(r"^I'm here to help! You can ask me")),
]


def template_kind(text: str) -> Optional[CommandKind]:
    """Template family a composed confirmation belongs to, or None."""
    for kind, pattern in _FAMILIES:
        if pattern.search(text or ""):
            return kind
    return None
