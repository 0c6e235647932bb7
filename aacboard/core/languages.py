"""
Supported-language table for the change-language grammar.

An utterance token is accepted when it matches a language code or a display
name / alias, case-insensitively. Anything else is not a language.
"""
from typing import Dict, Optional, Tuple


# Language codes and display names
SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "zh": "Chinese (Simplified)",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "ru": "Russian",
    "vi": "Vietnamese",
    "tl": "Tagalog",
    "pl": "Polish",
    "uk": "Ukrainian",
    "nl": "Dutch",
    "sv": "Swedish",
    "he": "Hebrew",
    "th": "Thai",
}

# Spoken names (including native spellings) -> code
LANGUAGE_ALIASES: Dict[str, str] = {
    "english": "en",
    "spanish": "es",
    "espanol": "es",
    "español": "es",
    "french": "fr",
    "français": "fr",
    "francais": "fr",
    "german": "de",
    "deutsch": "de",
    "italian": "it",
    "italiano": "it",
    "portuguese": "pt",
    "português": "pt",
    "portugues": "pt",
    "chinese": "zh",
    "mandarin": "zh",
    "japanese": "ja",
    "korean": "ko",
    "arabic": "ar",
    "hindi": "hi",
    "russian": "ru",
    "vietnamese": "vi",
    "tagalog": "tl",
    "filipino": "tl",
    "polish": "pl",
    "ukrainian": "uk",
    "dutch": "nl",
    "swedish": "sv",
    "hebrew": "he",
    "thai": "th",
}


# Codes that are also everyday English words ("change it", "delete it please")
_AMBIGUOUS_CODES = {"it", "he", "hi"}


def lookup_language(token: str) -> Optional[Tuple[str, str]]:
    """Return (code, display name) for a spoken language token, or None."""
    t = (token or "").strip().lower()
    if not t:
        return None
    code = LANGUAGE_ALIASES.get(t)
    if code is None and t in SUPPORTED_LANGUAGES and t not in _AMBIGUOUS_CODES:
        code = t
    if code is None:
        # Display names that are not in the alias table ("chinese (simplified)")
        for c, name in SUPPORTED_LANGUAGES.items():
            if name.lower() == t:
                code = c
                break
    if code is None:
        return None
    return code, SUPPORTED_LANGUAGES[code]
