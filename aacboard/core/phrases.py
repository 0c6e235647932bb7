"""
Phrase categorization for new buttons.

Pure lookups used when composing a create-button payload: communicative
category, category colour, a suggested icon and a TTS emotion.
"""
import re
from typing import Dict, List, Optional


CATEGORY_COLORS: Dict[str, str] = {
    "Social": "#14b8a6",
    "Requests": "#f97316",
    "Commands": "#ef4444",
    "Refusals": "#8b5cf6",
    "Questions": "#3b82f6",
    "Feelings": "#ec4899",
}

CATEGORY_ICONS: Dict[str, str] = {
    "Social": "wave",
    "Requests": "please",
    "Commands": "stop",
    "Refusals": "no",
    "Questions": "what",
    "Feelings": "happy",
}

_CATEGORY_PATTERNS: Dict[str, List[str]] = {
    # Interrogative structures
    "Questions": [
        r"^(what|where|when|why|who|how|which)\b",
        r"\?$",
        r"^(is|are|was|were|do|does|did|can|could|will|would|should|have|has)\s+(it|this|that|there|you|we|they|he|she)\b",
        r"\bwhat('s| is| are)\b",
        r"\bwhere('s| is| are)\b",
        r"\bwhen('s| is| are)\b",
        r"\bhow (much|many|long|far|old)\b",
    ],
    # Declining or rejecting
    "Refusals": [
        r"^no\b",
        r"\bno thank(s| you)\b",
        r"\bdon'?t want\b",
        r"\bi'?m (done|finished|all done)\b",
        r"\bnot (now|yet|today|anymore)\b",
        r"\bstop (please|it)\b",
        r"\bleave me alone\b",
        r"\bi refuse\b",
        r"\bi won'?t\b",
        r"\bnot right now\b",
        r"\bmaybe later\b",
        r"\bneed a break\b",
        r"\btoo much\b",
    ],
    # Imperatives directed at others
    "Commands": [
        r"^(stop|wait|listen|look|come|go|sit|stand|get|put|give|take|bring|show|tell|help|watch|let|leave)\b",
        r"\bcome here\b",
        r"\blisten to me\b",
        r"\blook at (this|me|that)\b",
        r"\bget (out|away|up|down)\b",
        r"\bstop (it|that|doing)\b",
    ],
    # Asking for something
    "Requests": [
        r"\b(can|could|may|would) (i|you|we)\b",
        r"\bplease\b",
        r"\bi (want|need|would like)\b",
        r"\bget me\b",
        r"\bgive me\b",
        r"\bhelp me\b",
        r"\bi'?m (hungry|thirsty)\b",
        r"\bcan i have\b",
        r"\bfor me\b",
    ],
    # Emotional expressions
    "Feelings": [
        r"\bi'?m (feeling |so )?(happy|sad|angry|scared|tired|excited|bored|frustrated|annoyed|worried|nervous|calm|good|bad|great|fine|okay|ok)\b",
        r"\bi (feel|love|hate|like|miss)\b",
        r"\bfeeling\b",
        r"\blove you\b",
        r"\bhad a (good|bad|great|terrible) day\b",
    ],
    # Greetings and social niceties
    "Social": [
        r"^(hi|hello|hey|good morning|good afternoon|good evening|good night|goodbye|bye|thanks|thank you)\b",
        r"\bbye( bye)?\b",
        r"\bthank(s| you)\b",
        r"\bsorry\b",
        r"\bexcuse me\b",
        r"\bnice to (meet|see) you\b",
        r"\bhow are you\b",
        r"\bsee you (later|soon|tomorrow)\b",
        r"\bthis is (fun|great|awesome|cool)\b",
    ],
}

# Most specific first
_CATEGORY_PRIORITY = ["Questions", "Refusals", "Commands", "Requests", "Feelings", "Social"]

_COMPILED_CATEGORIES = {
    category: [re.compile(p, re.IGNORECASE) for p in patterns]
    for category, patterns in _CATEGORY_PATTERNS.items()
}

# First match wins
_ICON_HINTS = [
    (r"\bhungry\b", "hungry"),
    (r"\bthirsty\b", "thirsty"),
    (r"\bhelp\b", "help"),
    (r"\bstop\b", "stop"),
    (r"\bwait\b", "wait"),
    (r"\blisten\b", "listen"),
    (r"\blook\b", "eye"),
    (r"\bhappy\b", "happy"),
    (r"\bsad\b", "sad"),
    (r"\blove\b", "love"),
    (r"\btired\b", "wait"),
    (r"\b(?:bye|goodbye)\b", "bye"),
    (r"\bmorning\b", "sun"),
    (r"\bnight\b", "moon"),
    (r"\bwhat\b", "what"),
    (r"\bwhere\b", "where"),
    (r"\bwhen\b", "when"),
    (r"\bwhy\b", "why"),
    (r"\bno\b", "no"),
    (r"\b(?:done|finished)\b", "finished"),
    (r"\bcome here\b", "wave"),
    (r"\bplease\b", "please"),
    (r"\b(?:fun|great|amazing)\b", "smile"),
]

_EMOTION_HINTS = [
    (r"\b(?:happy|excited|fun|great|love|amazing|awesome)\b", "happy"),
    (r"\b(?:sad|upset|miss)\b", "sad"),
    (r"\b(?:angry|mad|frustrated|annoyed)\b", "frustrated"),
    (r"\b(?:tired|sleepy|calm|break)\b", "calm"),
    (r"\b(?:can't wait|wow)\b", "excited"),
    (r"\b(?:stop|no|don't)\b", "serious"),
]

_CATEGORY_EMOTIONS = {
    "Social": "happy",
    "Requests": "neutral",
    "Commands": "serious",
    "Refusals": "calm",
    "Questions": "neutral",
    "Feelings": "neutral",
}

# Every icon name a button may carry
KNOWN_ICONS = frozenset(
    list(CATEGORY_ICONS.values())
    + [icon for _, icon in _ICON_HINTS]
    + ["heart", "hand", "star", "home", "play", "sparkles", "thumbs-up", "music", "book", "food", "drink"]
)


def categorize_phrase(phrase: str) -> str:
    normalized = (phrase or "").strip().lower()
    for category in _CATEGORY_PRIORITY:
        for pattern in _COMPILED_CATEGORIES[category]:
            if pattern.search(normalized):
                return category
    return "Social"


def suggest_icon(phrase: str, category: Optional[str] = None) -> str:
    normalized = (phrase or "").lower()
    for pattern, icon in _ICON_HINTS:
        if re.search(pattern, normalized):
            return icon
    return CATEGORY_ICONS[category or categorize_phrase(phrase)]


def suggest_emotion(phrase: str, category: Optional[str] = None) -> str:
    normalized = (phrase or "").lower()
    for pattern, emotion in _EMOTION_HINTS:
        if re.search(pattern, normalized):
            return emotion
    return _CATEGORY_EMOTIONS[category or categorize_phrase(phrase)]


def short_label(phrase: str) -> str:
    """First four words of a phrase, with an ellipsis when truncated."""
    words = phrase.split()
    return phrase if len(words) <= 4 else " ".join(words[:4]) + "..."


def button_payload(phrase: str) -> Dict[str, str]:
    """Full create-button payload for a spoken phrase."""
    category = categorize_phrase(phrase)
    return {
        "text": phrase,
        "label": short_label(phrase),
        "category": category,
        "color": CATEGORY_COLORS[category],
        "icon": suggest_icon(phrase, category),
        "emotion": suggest_emotion(phrase, category),
    }


def normalize_icon(name: str) -> Optional[str]:
    """Map a spoken icon name ("thumbs up", "a star") to a known icon, or None."""
    n = re.sub(r"^(?:an?|the)\s+", "", (name or "").strip().lower())
    n = re.sub(r"\s+(?:icon|picture|image|symbol)$", "", n)
    n = re.sub(r"[\s_]+", "-", n)
    if n in KNOWN_ICONS:
        return n
    if n.endswith("s") and n[:-1] in KNOWN_ICONS:
        return n[:-1]
    return None
