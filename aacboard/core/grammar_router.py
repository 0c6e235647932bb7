"""aacboard.core.grammar_router

Deterministic grammar table for board commands.

Returns either:
- a Command (first grammar that structurally matches AND builds), OR
- None, meaning "no grammar applies; try the arbiter / conversation".

The table is an explicit ordered tuple (`GRAMMARS`). Each entry is a
predicate / extractor / builder triple:

- predicate(ctx)     cheap gate (grid validity, keyword presence)
- extract(ctx)       zero or more slot dicts, one per matching surface pattern
- build(slots, ctx)  the Command, or None when the slots don't resolve
                     (unknown language, label not on the board, ...)

A build returning None is a grammar miss, not an error: the next surface
pattern and then the next grammar are tried. Order matters, e.g. the mode
toggles must win over generic help phrasing that also says "help".
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Pattern, Tuple, Union

from aacboard.core.board import BoardSnapshot
from aacboard.core.commands import Command, CommandKind, delete_command
from aacboard.core.grid_delete import GRID_VOCAB_RE, build_grid_delete, extract_grid_slots
from aacboard.core.grid_index import GridIndex
from aacboard.core.label_matcher import match_label
from aacboard.core.languages import lookup_language
from aacboard.core.logger import get_logger
from aacboard.core.phrases import button_payload, normalize_icon, short_label
from aacboard.core.reference_resolver import is_contextual_delete, resolve_recent_button


Slots = Dict[str, Any]


@dataclass(frozen=True)
class RouteContext:
    text: str                # normalized, original casing
    lower: str
    snapshot: BoardSnapshot
    index: GridIndex


@dataclass(frozen=True)
class Grammar:
    name: str
    kind: CommandKind
    predicate: Callable[[RouteContext], bool]
    extract: Callable[[RouteContext], Iterable[Slots]]
    build: Callable[[Slots, RouteContext], Optional[Command]]


# ============================================================================
# NORMALIZATION
# ============================================================================

_QUOTE_MAP = str.maketrans({"“": '"', "”": '"', "‘": "'", "’": "'"})


def normalize(text: str) -> str:
    """Trim, collapse whitespace, straighten quotes, drop trailing punctuation."""
    t = (text or "").translate(_QUOTE_MAP)
    t = re.sub(r"\s+", " ", t).strip()
    return t.rstrip(".!?,;: ").strip()


def _strip_quotes(value: str) -> str:
    return re.sub(r"[\"']+$", "", re.sub(r"^[\"']+", "", (value or "").strip())).strip()


# ============================================================================
# EXTRACTOR HELPERS
# ============================================================================

_PatternEntry = Union[str, Tuple[str, Slots]]


def _patterns(*entries: _PatternEntry) -> Callable[[RouteContext], Iterator[Slots]]:
    """Extractor over alternative surface patterns (searched, case-insensitive).

    Each entry is a regex, or (regex, fixed_slots). Yields fixed slots merged
    with named groups; the first positional group is exposed as "value".
    """
    compiled: List[Tuple[Pattern, Slots]] = []
    for entry in entries:
        pattern, fixed = (entry, {}) if isinstance(entry, str) else entry
        compiled.append((re.compile(pattern, re.IGNORECASE), fixed))

    def extract(ctx: RouteContext) -> Iterator[Slots]:
        for regex, fixed in compiled:
            m = regex.search(ctx.text)
            if not m:
                continue
            slots: Slots = dict(fixed)
            slots.update({k: v for k, v in m.groupdict().items() if v is not None})
            if m.groups() and m.group(1) is not None:
                slots.setdefault("value", m.group(1))
            yield slots

    return extract


def _always(ctx: RouteContext) -> bool:
    return True


def _fixed(kind: CommandKind) -> Callable[[Slots, RouteContext], Command]:
    """Builder for commands whose payload is exactly the fixed slots."""
    def build(slots: Slots, ctx: RouteContext) -> Command:
        payload = {k: v for k, v in slots.items() if k != "value"}
        return Command(kind, payload)
    return build


# ============================================================================
# BUILDERS
# ============================================================================

_SUGGESTION_TAILS = {"today", "now", "next"}


def _build_show_me_how(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    phrase = _strip_quotes(slots.get("value", ""))
    # "how should i model today" is a suggestion request, not a phrase
    if not phrase or phrase.lower() in _SUGGESTION_TAILS:
        return None
    return Command(CommandKind.SHOW_ME_HOW, {"phrase": phrase})


_FILLER_WORDS = {
    "the", "a", "an", "button", "buttons", "word", "words", "for", "called",
    "named", "that", "says", "one", "only", "just", "please", "can", "you",
}

# Common speech-recognition slips
_CORRECTIONS = {
    "hay": "hey",
    "bye-bye": "bye",
    "by": "bye",
    "thankyou": "thank you",
    "goodmorning": "good morning",
    "im": "i'm",
    "dont": "don't",
    "cant": "can't",
    "wont": "won't",
}


def clean_focus_words(raw: str) -> List[str]:
    """Split a focus request into the words/short phrases to keep on screen."""
    cleaned = re.sub(r"[\"!?.]", "", (raw or "").lower())
    cleaned = cleaned.strip("'")
    for wrong, right in _CORRECTIONS.items():
        cleaned = re.sub(rf"\b{re.escape(wrong)}\b", right, cleaned)

    words: List[str] = []
    for phrase in re.split(r"\s*(?:\band\b|,)\s*", cleaned):
        parts = [w for w in phrase.split() if w not in _FILLER_WORDS]
        # Short phrases are kept whole as well as word by word
        if 1 < len(parts) <= 3:
            words.append(" ".join(parts))
        words.extend(parts)

    return list(dict.fromkeys(words))


def _build_focus(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    words = clean_focus_words(_strip_quotes(slots.get("value", "")))
    if not words:
        return None
    return Command(CommandKind.FOCUS_LEARNING, {"words": words})


# First match wins; checked against the lowercased topic
_STORY_SCENARIOS: List[Tuple[Tuple[str, ...], str]] = [
    (("dentist", "teeth"), "dentist"),
    (("doctor", "checkup"), "doctor"),
    (("school", "class"), "school"),
    (("playground", "park", "play"), "playground"),
    (("birthday", "party"), "birthday"),
    (("bed", "sleep", "night"), "bedtime"),
    (("eat", "food", "meal", "dinner"), "mealtime"),
    (("overwhelm", "too much", "calm"), "feelings-overwhelmed"),
    (("change", "plan", "different"), "schedule-change"),
    (("new", "meet", "friend"), "meeting-new-people"),
]


def story_scenario(topic: str) -> str:
    for keywords, scenario in _STORY_SCENARIOS:
        if any(k in topic for k in keywords):
            return scenario
    return topic


def _build_story(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    topic = _strip_quotes(slots.get("value", "")).lower()
    if not topic:
        return None
    return Command(CommandKind.SHOW_STORY, {"scenario": story_scenario(topic), "topic": topic})


def _build_language(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    found = lookup_language(slots.get("value", ""))
    if found is None:
        return None
    code, name = found
    return Command(CommandKind.CHANGE_LANGUAGE, {"language": code, "languageName": name})


# Phrases that belong to later grammars even though they start with make/add
_NOT_A_NEW_BUTTON_RE = re.compile(r"\b(?:voice|icon)\b", re.IGNORECASE)


def _build_create(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    phrase = _strip_quotes(slots.get("value", ""))
    if not phrase or len(phrase) >= 200:
        return None
    if _NOT_A_NEW_BUTTON_RE.search(phrase):
        return None
    return Command(CommandKind.CREATE_BUTTON, button_payload(phrase))


def _contextual_delete_predicate(ctx: RouteContext) -> bool:
    return is_contextual_delete(ctx.lower)


def _extract_nothing(ctx: RouteContext) -> Iterator[Slots]:
    yield {}


def _build_contextual_delete(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    snapshot = ctx.snapshot
    recent = resolve_recent_button(snapshot.history, snapshot.buttons, snapshot.custom_buttons)
    if recent is None:
        return None
    if recent.source == "conversation":
        return delete_command(recent.button.id, recent.button.label, fromConversation=True)
    return delete_command(recent.button.id, recent.button.label, isPositional=True)


# "the one next to water" names a landmark, not the target
RELATIONAL_RE = re.compile(
    r"\b(?:next to|besides?|below|beneath|under|above|over|left of|right of|after|before)\b",
    re.IGNORECASE,
)


def _label_delete_predicate(ctx: RouteContext) -> bool:
    # Spatial phrasing belongs to the grid grammar or the arbiter; "delete it" is never a label
    if not ctx.snapshot.buttons or is_contextual_delete(ctx.lower):
        return False
    return not (GRID_VOCAB_RE.search(ctx.lower) or RELATIONAL_RE.search(ctx.lower))


def _build_label_delete(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    match = match_label(slots.get("value", ""), ctx.snapshot.buttons)
    if match is None:
        return None
    if match.exact:
        return delete_command(match.button.id, match.button.label)
    return delete_command(match.button.id, match.button.label, fuzzyMatch=True)


def _grid_predicate(ctx: RouteContext) -> bool:
    return ctx.index.is_valid and bool(GRID_VOCAB_RE.search(ctx.lower))


def _extract_grid(ctx: RouteContext) -> Iterator[Slots]:
    slots = extract_grid_slots(ctx.lower)
    if slots is not None:
        yield slots


def _build_grid(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    return build_grid_delete(slots, ctx.index)


def _build_icon(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    icon = normalize_icon(slots.get("icon", ""))
    if icon is None:
        return None
    if RELATIONAL_RE.search(slots.get("label", "")):
        return None
    match = match_label(slots.get("label", ""), ctx.snapshot.buttons)
    if match is None:
        return None
    payload: Slots = {"target": match.button.id, "buttonLabel": match.button.label, "icon": icon}
    if not match.exact:
        payload["fuzzyMatch"] = True
    return Command(CommandKind.CHANGE_ICON, payload)


def _build_update(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    new_value = re.sub(r"\s+instead$", "", _strip_quotes(slots.get("new", "")), flags=re.IGNORECASE)
    if not new_value:
        return None
    if RELATIONAL_RE.search(slots.get("label", "")):
        return None
    match = match_label(slots.get("label", ""), ctx.snapshot.buttons)
    if match is None:
        return None
    payload: Slots = {"target": match.button.id, "buttonLabel": match.button.label}
    if slots.get("field") == "label":
        payload["newLabel"] = new_value
    else:
        payload["newText"] = new_value
        payload["newLabel"] = short_label(new_value)
    if not match.exact:
        payload["fuzzyMatch"] = True
    return Command(CommandKind.UPDATE_BUTTON, payload)


_NAV_TRIGGER_RE = re.compile(r"\b(?:go to|take me to|open)\b", re.IGNORECASE)

# First match wins
_NAV_TARGETS: List[Tuple[Tuple[str, ...], str]] = [
    (("home", "start"), "/"),
    (("talk", "speak", "communicate", "button"), "/communicate"),
    (("avatar", "face", "picture"), "/avatar"),
    (("voice", "setting", "sound"), "/settings"),
    (("story", "stories", "video"), "/stories"),
    (("progress", "stats", "modeling"), "/progress"),
]


def _nav_predicate(ctx: RouteContext) -> bool:
    return bool(_NAV_TRIGGER_RE.search(ctx.lower))


def _build_navigate(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    for keywords, path in _NAV_TARGETS:
        if any(k in ctx.lower for k in keywords):
            return Command(CommandKind.NAVIGATE, {"path": path})
    return None


def _voice_predicate(ctx: RouteContext) -> bool:
    tl = ctx.lower
    return "voice" in tl and any(k in tl for k in ("change", "make", "switch"))


# First match wins
_VOICE_CHANGES: List[Tuple[Tuple[str, ...], Slots]] = [
    (("boy", "male", "man"), {"gender": "male"}),
    (("girl", "female", "woman"), {"gender": "female"}),
    (("fast", "quick"), {"speed": "fast"}),
    (("slow",), {"speed": "slow"}),
]


def _build_voice(slots: Slots, ctx: RouteContext) -> Optional[Command]:
    words = set(re.findall(r"[a-z]+", ctx.lower))
    for keywords, payload in _VOICE_CHANGES:
        # Whole-word check first so "woman" is not read as "man"
        if any(k in words for k in keywords):
            return Command(CommandKind.CHANGE_VOICE, dict(payload))
    for keywords, payload in _VOICE_CHANGES:
        if any(k in ctx.lower for k in keywords):
            return Command(CommandKind.CHANGE_VOICE, dict(payload))
    return None


# ============================================================================
# GRAMMAR TABLE (priority order)
# ============================================================================

_Q = r"[\"']?"

GRAMMARS: Tuple[Grammar, ...] = (
    Grammar(
        "watch_first_on", CommandKind.TOGGLE_WATCH_FIRST, _always,
        _patterns(
            (r"\b(?:turn on|enable|start|activate) watch first\b", {"enabled": True}),
            (r"\bwatch first (?:mode )?on\b", {"enabled": True}),
            (r"\b(?:i want to|let me) watch first\b", {"enabled": True}),
        ),
        _fixed(CommandKind.TOGGLE_WATCH_FIRST),
    ),
    Grammar(
        "watch_first_off", CommandKind.TOGGLE_WATCH_FIRST, _always,
        _patterns(
            (r"\b(?:turn off|disable|stop|deactivate) watch first\b", {"enabled": False}),
            (r"\bwatch first (?:mode )?off\b", {"enabled": False}),
            (r"\b(?:no more|stop) watch(?:ing)? first\b", {"enabled": False}),
        ),
        _fixed(CommandKind.TOGGLE_WATCH_FIRST),
    ),
    Grammar(
        "model_mode_on", CommandKind.TOGGLE_MODEL_MODE, _always,
        _patterns(
            (r"\b(?:turn on|enable|start|activate) model(?:ing)? mode\b", {"enabled": True}),
            (r"\bmodel(?:ing)? mode on\b", {"enabled": True}),
            (r"\b(?:slow down|slower) (?:for )?(?:learning|modeling)\b", {"enabled": True}),
        ),
        _fixed(CommandKind.TOGGLE_MODEL_MODE),
    ),
    Grammar(
        "model_mode_off", CommandKind.TOGGLE_MODEL_MODE, _always,
        _patterns(
            (r"\b(?:turn off|disable|stop|deactivate) model(?:ing)? mode\b", {"enabled": False}),
            (r"\bmodel(?:ing)? mode off\b", {"enabled": False}),
            (r"\b(?:normal|regular) speed\b", {"enabled": False}),
        ),
        _fixed(CommandKind.TOGGLE_MODEL_MODE),
    ),
    Grammar(
        "modeling_stats", CommandKind.SHOW_MODELING_STATS, _always,
        _patterns(
            r"\b(?:show|display|what are|tell me) (?:my )?(?:modeling )?stats\b",
            r"\bhow (?:much|many) (?:have i|did i|did we) (?:model|practice)",
            r"\bmodeling (?:progress|tracker|dashboard)\b",
            r"\bhow am i doing\b",
        ),
        _fixed(CommandKind.SHOW_MODELING_STATS),
    ),
    Grammar(
        "show_me_how", CommandKind.SHOW_ME_HOW, _always,
        _patterns(
            r"\b(?:show me how|demonstrate|teach me)(?: to)?(?: model)?\s*(?:asking for |saying |the phrase |to say |say )?" + _Q + r"(.+?)" + _Q + r"$",
            r"\bhow (?:do i|should i|can i) (?:model|teach)\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:demonstrate|show)(?: me)? modeling (?:for|of)\s*" + _Q + r"(.+?)" + _Q + r"$",
        ),
        _build_show_me_how,
    ),
    Grammar(
        "modeling_suggestion", CommandKind.GET_MODELING_SUGGESTION, _always,
        _patterns(
            r"\b(?:what|how) should i model (?:today|now|next)\b",
            r"\b(?:give me|suggest)(?: a)? modeling (?:idea|suggestion|tip)\b",
            r"\bwhat (?:phrase|word|button) should i (?:model|practice|teach)\b",
        ),
        _fixed(CommandKind.GET_MODELING_SUGGESTION),
    ),
    Grammar(
        "restore_buttons", CommandKind.RESTORE_BUTTONS, _always,
        _patterns(
            r"\b(?:bring back|restore|show all|reset|put (?:my )?(?:words|buttons) back|"
            r"show (?:all )?(?:my )?buttons(?: again)?|clear focus|exit (?:focus|learn)|done (?:learning|practicing))",
        ),
        _fixed(CommandKind.RESTORE_BUTTONS),
    ),
    Grammar(
        "focus_learning", CommandKind.FOCUS_LEARNING, _always,
        _patterns(
            r"\b(?:remove|hide|clear) (?:all|everything)(?: (?:buttons?|words?))?(?: except| but| besides)(?: for)?\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:show|display|keep) (?:only|just)(?: the)?\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:only|just) (?:show|display|keep)(?: the)?\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:focus on|isolate|show me just|let me see only)\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:let'?s (?:learn|practice)|teach me|i (?:want to|need to) (?:learn|practice))\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:i just need|give me only|all i need is)\s*" + _Q + r"(.+?)" + _Q + r"$",
        ),
        _build_focus,
    ),
    Grammar(
        "show_story", CommandKind.SHOW_STORY, _always,
        _patterns(
            r"\b(?:show|play|tell)(?: me)?(?: a)? (?:story|video) (?:about|for|on)\s*(.+?)$",
            r"\b(?:i'm|i am|feeling) (?:nervous|scared|worried) about\s*(.+?)$",
            r"\b(?:help me understand|what happens at|what's it like at)\s*(.+?)$",
            r"\b(?:visual story|social story)(?: about| for)?\s*(.+?)$",
        ),
        _build_story,
    ),
    Grammar(
        "change_language", CommandKind.CHANGE_LANGUAGE, _always,
        _patterns(
            r"\b(?:switch|change|go|return)\s*back\s*(?:to)?\s*(\w+)$",
            r"\bback\s*to\s*(\w+)$",
            r"\b(?:switch|change)(?: (?:to|into))?\s*(\w+)$",
            r"\b(?:i (?:want|need|speak)|let's (?:use|try)|use)\s*(\w+)$",
            r"\b(?:convert|put)(?: everything)?(?: (?:to|into|in))?\s*(\w+)$",
            r"\b(?:make it|everything in|switch to)\s*(\w+)$",
            r"\b(\w+)\s*(?:language|mode|please)$",
        ),
        _build_language,
    ),
    Grammar(
        "create_button", CommandKind.CREATE_BUTTON, _always,
        _patterns(
            r"\b(?:make|create|add|new|give me|i need|we need|put)(?: a)?(?: new)? (?:button|word|phrase|thing)(?: (?:for|that says?|saying|called|named))?\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\b(?:make|create|add)(?: a)?(?: button)?(?: that says?| saying| for)\s*" + _Q + r"(.+?)" + _Q + r"$",
            r"\badd " + _Q + r"(.+?)" + _Q + r" (?:button|to (?:the )?(?:board|buttons))",
            r"\bi need(?: a button for)? " + _Q + r"(.+?)" + _Q + r"$",
            r"(?:can you |please )?\b(?:make|add|create) " + _Q + r"(.+?)" + _Q + r"$",
        ),
        _build_create,
    ),
    Grammar(
        "contextual_delete", CommandKind.DELETE_BUTTON, _contextual_delete_predicate,
        _extract_nothing,
        _build_contextual_delete,
    ),
    Grammar(
        "delete_by_label", CommandKind.DELETE_BUTTON, _label_delete_predicate,
        _patterns(
            r"\b(?:delete|remove|get rid of|take away|erase|trash)(?: the)?(?: button)?(?: (?:for|that says?|called|named))?\s+" + _Q + r"(.+?)" + _Q + r"(?:\s+button)?(?:\s+please)?$",
        ),
        _build_label_delete,
    ),
    Grammar(
        "delete_by_grid_position", CommandKind.DELETE_BUTTON, _grid_predicate,
        _extract_grid,
        _build_grid,
    ),
    Grammar(
        "change_icon", CommandKind.CHANGE_ICON, _always,
        _patterns(
            r"\b(?:change|set|make|switch|update)\s+(?:the\s+)?(?:icon|picture|image|symbol)\s+(?:on|for|of)\s+(?:the\s+)?(?P<label>.+?)(?:\s+button)?\s+(?:to|into)\s+(?P<icon>.+)$",
            r"\b(?:change|set|make|switch|update)\s+(?:the\s+)?(?P<label>.+?)(?:\s+button)?(?:'s)?\s+(?:icon|picture|image|symbol)\s+(?:to|into)\s+(?P<icon>.+)$",
            r"\buse\s+(?:an?\s+)?(?P<icon>[\w\- ]+?)\s+icon\s+(?:for|on)\s+(?:the\s+)?(?P<label>.+?)(?:\s+button)?$",
            r"\bgive\s+(?:the\s+)?(?P<label>.+?)(?:\s+button)?\s+(?:an?\s+)?(?P<icon>[\w\- ]+?)\s+icon$",
        ),
        _build_icon,
    ),
    Grammar(
        "update_button", CommandKind.UPDATE_BUTTON, _always,
        _patterns(
            (r"\brename\s+(?:the\s+)?(?P<label>.+?)(?:\s+button)?\s+(?:to|as)\s+(?P<new>.+)$", {"field": "label"}),
            (r"\b(?:change|update|edit|modify)\s+(?:the\s+)?(?P<label>.+?)(?:\s+button)?\s+to\s+say\s+(?P<new>.+)$", {"field": "text"}),
            (r"\b(?:change|update|edit|modify)\s+(?:the\s+)?(?P<label>.+?)\s+button\s+(?:to|into)\s+(?P<new>.+)$", {"field": "text"}),
        ),
        _build_update,
    ),
    Grammar(
        "navigate", CommandKind.NAVIGATE, _nav_predicate,
        _extract_nothing,
        _build_navigate,
    ),
    Grammar(
        "change_voice", CommandKind.CHANGE_VOICE, _voice_predicate,
        _extract_nothing,
        _build_voice,
    ),
    Grammar(
        "help", CommandKind.HELP, _always,
        _patterns(r"\bhelp\b", r"\bhow do\b", r"\bwhat can\b", r"\bstuck\b"),
        _fixed(CommandKind.HELP),
    ),
)


def route(text: str, snapshot: BoardSnapshot) -> Optional[Command]:
    """
    Resolve an utterance with the grammar table.

    Args:
        text: Raw utterance
        snapshot: Board state for this request

    Returns:
        The first Command any grammar builds, or None
    """
    logger = get_logger()
    normalized = normalize(text)
    if not normalized:
        return None

    ctx = RouteContext(
        text=normalized,
        lower=normalized.lower(),
        snapshot=snapshot,
        index=GridIndex(snapshot.buttons, snapshot.grid),
    )

    for grammar in GRAMMARS:
        if not grammar.predicate(ctx):
            continue
        for slots in grammar.extract(ctx):
            command = grammar.build(slots, ctx)
            if command is not None:
                logger.debug(f"[GRAMMAR] '{normalized}' -> {grammar.name} ({command.kind.value})")
                return command
        # Structural match without a buildable command: keep going

    logger.debug(f"[GRAMMAR] no grammar matched '{normalized}'")
    return None
