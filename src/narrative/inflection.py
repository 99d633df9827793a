"""Grammatical helpers for weaving user-entered fragments into first-person prose.

Entries are short, loosely punctuated notes ("led the OAuth 2.0 migration",
"Reduced login failures by 40%."). These helpers turn them into clauses that
read correctly after "I", inside a list, or at the start of a sentence.
"""

from __future__ import annotations

import re
from typing import Sequence

_MULTI_SPACE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")
_PUNCT_RUN = re.compile(r"([.!?]){2,}")
_DANGLING_COMMA = re.compile(r",\s*([.!?])")
_REPEATED_WORD_PATTERN = re.compile(r"\b(\w+)(\s+\1\b)+", re.IGNORECASE)
_TERMINAL = re.compile(r"[\s.;:!?,]+$")

# Past-tense verbs that do not end in "-ed"
IRREGULAR_PAST: frozenset[str] = frozenset(
    {
        "began", "brought", "built", "bought", "caught", "chose", "cut", "drew",
        "drove", "fed", "fought", "found", "gave", "got", "grew", "held", "hired",
        "kept", "laid", "led", "left", "lent", "made", "met", "overhauled", "paid",
        "put", "ran", "rebuilt", "reran", "rewrote", "rolled", "sent", "set", "shot",
        "sold", "sought", "spent", "split", "spun", "stood", "struck", "taught", "took",
        "told", "undertook", "won", "wrote",
    }
)

# "-ed" words that are nouns or adjectives when they open a note
_ED_NON_VERBS: frozenset[str] = frozenset({"bed", "red", "shed", "bred", "hundred", "sacred", "wicked"})


def lower_first(text: str) -> str:
    """Lowercase the first character unless the first word is an acronym.

    Examples:
        >>> lower_first("Reduced churn")
        "reduced churn"
        >>> lower_first("API latency dropped")
        "API latency dropped"
    """
    if not text:
        return text
    first_word = text.split(maxsplit=1)[0]
    if first_word == "I" or (len(first_word) > 1 and first_word[:2].isupper()):
        return text
    return text[0].lower() + text[1:]


def upper_first(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def strip_terminal(text: str) -> str:
    """Trim whitespace and any trailing punctuation from a user fragment."""
    return _TERMINAL.sub("", " ".join((text or "").split()))


def ensure_sentence(text: str) -> str:
    cleaned = _REPEATED_WORD_PATTERN.sub(lambda m: m.group(1), (text or "").strip())
    cleaned = _SPACE_BEFORE_PUNCT.sub(r"\1", cleaned)
    cleaned = _DANGLING_COMMA.sub(r"\1", cleaned)
    cleaned = _MULTI_SPACE.sub(" ", cleaned)
    cleaned = _PUNCT_RUN.sub(lambda m: m.group(1), cleaned).strip().rstrip(",;: ")
    if not cleaned:
        return ""
    cleaned = upper_first(cleaned)
    if cleaned[-1] not in ".!?":
        cleaned = f"{cleaned}."
    return cleaned


def join_series(items: Sequence[str]) -> str:
    """Join items as an English series with an Oxford comma.

    Examples:
        >>> join_series(["speed", "quality", "revenue"])
        "speed, quality, and revenue"
        >>> join_series(["speed", "quality"])
        "speed and quality"
    """
    values = [item for item in items if item]
    if not values:
        return ""
    if len(values) == 1:
        return values[0]
    if len(values) == 2:
        return f"{values[0]} and {values[1]}"
    return f"{', '.join(values[:-1])}, and {values[-1]}"


def starts_with_past_tense_verb(text: str) -> bool:
    words = strip_terminal(text).split()
    if not words:
        return False
    first = words[0].lower()
    if first in IRREGULAR_PAST:
        return True
    if first in _ED_NON_VERBS or first.endswith("eed"):
        return False
    return len(first) > 3 and first.endswith("ed") and first.isalpha()


def first_person_clause(text: str) -> str | None:
    """Turn a note into an "I ..." clause when it already reads as an action.

    Returns None when the note does not open with a past-tense verb, so callers
    can supply their own verb.

    Examples:
        >>> first_person_clause("Led the OAuth 2.0 migration.")
        "I led the OAuth 2.0 migration"
        >>> first_person_clause("OAuth migration") is None
        True
    """
    fragment = strip_terminal(text)
    if not fragment:
        return None
    if fragment.lower().startswith("i "):
        return "I " + fragment[2:].lstrip()
    if starts_with_past_tense_verb(fragment):
        return f"I {lower_first(fragment)}"
    return None


__all__ = [
    "IRREGULAR_PAST",
    "lower_first",
    "upper_first",
    "strip_terminal",
    "ensure_sentence",
    "join_series",
    "starts_with_past_tense_verb",
    "first_person_clause",
]
