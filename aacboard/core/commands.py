"""
Command representation for resolved utterances.

A Command is built once per utterance, never mutated, and handed to the
composer (confirmation text) and to the UI executor (as `to_dict()`).
Payload keys use the UI wire names (camelCase) because the executor reads
them verbatim.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class CommandKind(str, Enum):
    """Closed set of command variants (values are the wire `type` strings)."""
    CREATE_BUTTON = "create_button"
    DELETE_BUTTON = "delete_button"
    UPDATE_BUTTON = "update_button"
    NAVIGATE = "navigate"
    CHANGE_VOICE = "change_voice"
    CHANGE_LANGUAGE = "change_language"
    CHANGE_ICON = "change_icon"
    FOCUS_LEARNING = "focus_learning"
    RESTORE_BUTTONS = "restore_buttons"
    SHOW_STORY = "show_story"
    TOGGLE_WATCH_FIRST = "toggle_watch_first"
    TOGGLE_MODEL_MODE = "toggle_model_mode"
    SHOW_MODELING_STATS = "show_modeling_stats"
    SHOW_ME_HOW = "show_me_how"
    GET_MODELING_SUGGESTION = "get_modeling_suggestion"
    HELP = "help"
    CONVERSATION = "conversation"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def target(self) -> Optional[str]:
        return self.payload.get("target")

    @property
    def error(self) -> Optional[str]:
        return self.payload.get("error")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind.value}
        if self.payload:
            data["payload"] = dict(self.payload)
        return data


def delete_command(
    target: Optional[str],
    label: Optional[str] = None,
    error: Optional[str] = None,
    **flags: Any,
) -> Command:
    """
    Build a delete command.

    Args:
        target: Button id, or None for an explicit resolution error
        label: Button label for confirmation text
        error: Human-readable reason when target is None
        **flags: Provenance (resolvedByArbiter, isGridPosition, fuzzyMatch,
                 fromConversation, isPositional) and position details
    """
    payload: Dict[str, Any] = {"target": target}
    if label is not None:
        payload["buttonLabel"] = label
    if error is not None:
        payload["error"] = error
    payload.update(flags)
    return Command(CommandKind.DELETE_BUTTON, payload)
