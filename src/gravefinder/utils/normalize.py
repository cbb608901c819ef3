"""Normalization utilities for burial search queries.

Provides the canonical text forms the extractors work on:

- ``cased``: diacritics stripped, quotes/dashes unified, filler words removed,
  original capitalization kept (capitalized-name patterns need it)
- ``lowered``: ``cased`` folded to lower case with conversational prefixes
  ("can you", "pakihanap", "pwede mo ba") stripped
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass


@dataclass(frozen=True)
class NormalizedQuery:
    """A raw query and its canonical views."""

    original: str
    cased: str
    lowered: str

    @property
    def is_empty(self) -> bool:
        return not self.lowered


# Month name mappings (English and Filipino, with common abbreviations)
MONTH_NAMES: dict[str, int] = {
    # English
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
    # Filipino
    "enero": 1,
    "pebrero": 2,
    "marso": 3,
    "abril": 4,
    "mayo": 5,
    "hunyo": 6,
    "hulyo": 7,
    "agosto": 8,
    "setyembre": 9, "septiyembre": 9,
    "oktubre": 10,
    "nobyembre": 11,
    "disyembre": 12,
}

# Full month names only; abbreviations like "jun" double as nicknames
FULL_MONTH_NAMES = frozenset({
    "january", "february", "march", "april", "may", "june", "july", "august",
    "september", "october", "november", "december",
    "enero", "pebrero", "marso", "abril", "mayo", "hunyo", "hulyo", "agosto",
    "setyembre", "septiyembre", "oktubre", "nobyembre", "disyembre",
})

# Longest first so "september" wins over "sep"
MONTH_ALTERNATION = "|".join(sorted(MONTH_NAMES, key=len, reverse=True))

_SINGLE_QUOTES = re.compile(r"[‘’‛′‚`]")
_DOUBLE_QUOTES = re.compile(r"[“”„″]")
_DASHES = re.compile(r"[–—−‐‑]")

# Applied repeatedly so nested openers ("can you please hanap") fall away
CONVERSATIONAL_PREFIXES: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        # English conversational starters
        r"^(?:could you please|can you please|would you please|can you|could you|would you|will you|please)\s+",
        r"^(?:help me to|help me|i need to|i want to|i would like to|i'd like to|let me)\s+",
        r"^(?:do you know|can you tell me|could you show me)\s+",
        # Filipino conversational starters
        r"^(?:pwede mo ba|pwede mo|pwede|maaari mo ba|maaari mo|maaari)\s+",
        r"^(?:tulungan mo ako|tulungan|pakitulungan)\s+",
        r"^(?:gusto kong|gusto ko|nais kong|nais ko|kailangan kong|kailangan ko)\s+",
        r"^(?:magtanong|tanong|ask|question)\s+",
        # Filler openers
        r"^(?:um|uh|well|so|okay|ok|sige|oo|yes|yeah|yup)\s+",
    )
)

# Longer phrases first so "alam mo ba" is removed whole
FILLER_WORDS = re.compile(
    r"\b(?:alam mo ba|alam mo|you know|i think|i guess|di ba|diba|um|uh|hmm|kasi|eh"
    r"|yung|yun|nga|naman|lang|po|opo|ba|raw|talaga)\b",
    re.IGNORECASE,
)
# Particles that double as names ("Sana Reyes", "Ho Chi"): a capitalized one
# next to another capitalized word is kept
NAME_LIKE_FILLERS = re.compile(r"\b(?:ho|oho|sana|din|rin|daw|pala)\b", re.IGNORECASE)

_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Fold text for comparison: strip accents, unify punctuation, lower-case.

    Examples:
        normalize_text("Peñaflor") -> "penaflor"
        normalize_text("O’Brien") -> "o'brien"
    """
    if not text:
        return ""
    return canonicalize(text).lower()


def canonicalize(text: str) -> str:
    """Strip diacritics and unify quote/dash variants, keeping case."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text)
    result = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    result = _SINGLE_QUOTES.sub("'", result)
    result = _DOUBLE_QUOTES.sub('"', result)
    result = _DASHES.sub("-", result)
    return _WHITESPACE.sub(" ", result).strip()


def strip_conversational_prefixes(text: str, max_passes: int = 3) -> str:
    """Remove leading conversational scaffolding from lower-cased text.

    Runs up to ``max_passes`` sweeps over the prefix table and stops early
    once a sweep changes nothing.
    """
    result = text
    for _ in range(max_passes):
        changed = False
        for prefix in CONVERSATIONAL_PREFIXES:
            stripped = prefix.sub("", result)
            if stripped != result:
                result = stripped
                changed = True
        if not changed:
            break
    return result


def _drop_name_like_filler(match: re.Match[str]) -> str:
    word = match.group(0)
    if word.islower():
        return " "
    before = match.string[: match.start()].split()
    after = match.string[match.end():].split()
    neighbours = (before[-1] if before else "", after[0] if after else "")
    return word if any(n[:1].isupper() for n in neighbours) else " "


def remove_filler_words(text: str) -> str:
    """Remove scattered filler words ("um", "po", "alam mo ba") anywhere in text."""
    text = NAME_LIKE_FILLERS.sub(_drop_name_like_filler, FILLER_WORDS.sub(" ", text))
    return _WHITESPACE.sub(" ", text).strip()


def normalize_query(query: str | None) -> NormalizedQuery:
    """Build the canonical views of a raw query. Never raises."""
    original = query or ""
    cased = remove_filler_words(canonicalize(original))
    lowered = strip_conversational_prefixes(cased.lower())
    return NormalizedQuery(original=original, cased=cased, lowered=lowered.strip())


def normalize_name(name: str | None) -> str:
    """Normalize a personal name for comparison (folded, single-spaced)."""
    if not name:
        return ""
    return normalize_text(name)
