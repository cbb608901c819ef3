"""Single-purpose extractors for plot, place and relationship signals."""
from __future__ import annotations

import re
from dataclasses import dataclass

from ..utils.normalize import MONTH_NAMES
from .vocabulary import VOCABULARY, QueryVocabulary

# A plot identifier always carries at least one digit ("123", "A-12", "B7")
_PLOT_ID = r"([A-Za-z0-9\-]*\d[A-Za-z0-9\-]*)"

PLOT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        rf"\b(?:plot|grave|tomb|niche|lot|crypt|puntod|nitso|libingan)\s*(?:number|num|no\.?|blg\.?)?\s*#?\s*{_PLOT_ID}\b",
        re.IGNORECASE,
    ),
    re.compile(rf"\b(?!(?:19|20)\d{{2}}\b){_PLOT_ID}\s*(?:plot|grave)\b", re.IGNORECASE),
    re.compile(rf"#\s*{_PLOT_ID}\b"),
)

PLOT_TYPE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(p, re.IGNORECASE), kind)
    for p, kind in (
        (r"\b(?:family\s+(?:plot|grave|tomb|lot)|pampamilyang\s+(?:puntod|libingan))\b", "family"),
        (r"\b(?:single|individual|private)\s*(?:plot|grave|lot)\b", "single"),
        (r"\b(?:lawn|memorial\s+park)\b", "lawn"),
        (r"\b(?:mausoleum|columbarium|crypt)\b", "mausoleum"),
    )
)

RELATIONSHIP_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(p, re.IGNORECASE), kind)
    for p, kind in (
        (r"\b(?:grandfather|grandpa|lolo)\b", "grandfather"),
        (r"\b(?:grandmother|grandma|lola)\b", "grandmother"),
        (r"\b(?:father|dad|papa|tatay|itay|ama)\b", "father"),
        (r"\b(?:mother|mom|mama|nanay|inay|ina)\b", "mother"),
        (r"\b(?:son|anak\s+na\s+lalaki)\b", "son"),
        (r"\b(?:daughter|anak\s+na\s+babae)\b", "daughter"),
        (r"\b(?:brother|kuya|kapatid\s+na\s+lalaki)\b", "brother"),
        (r"\b(?:sister|ate|kapatid\s+na\s+babae)\b", "sister"),
        (r"\b(?:wife|asawa)\b", "wife"),
        (r"\bhusband\b", "husband"),
        (r"\b(?:family|pamilya|angkan|lahi)\b", "family"),
    )
)

_CAP_RUN = r"[A-Z][a-zA-Z'\-]+(?:\s+[A-Z][a-zA-Z'\-]+){0,3}"
_CEMETERY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"({_CAP_RUN})\s+(?i:cemetery|memorial\s+park|memorial\s+gardens?|memorial|park|sementeryo)\b"),
    re.compile(rf"\b(?i:sementeryo|cemetery)\s+(?i:ng|of)\s+({_CAP_RUN})"),
    re.compile(rf"\b(?i:buried\s+(?:at|in)|nailibing\s+sa|inilibing\s+sa)\s+({_CAP_RUN})"),
)
_LOCATION_PATTERN = re.compile(rf"\b(?i:in|at|near|from|sa|malapit\s+sa|taga)\s+({_CAP_RUN})")


@dataclass(frozen=True)
class PlaceFields:
    plot_number: str | None = None
    plot_type: str | None = None
    cemetery_name: str | None = None
    location: str | None = None
    relationship: str | None = None

    @property
    def claimed_phrases(self) -> tuple[str, ...]:
        """Place phrases that must not be read as a person's name."""
        return tuple(p for p in (self.cemetery_name, self.location) if p)


def extract_plot_number(text: str) -> str | None:
    """Plot identifier, upper-cased ("plot a-12" -> "A-12")."""
    for pattern in PLOT_PATTERNS:
        if match := pattern.search(text):
            return match.group(1).upper()
    return None


def extract_plot_type(text: str) -> str | None:
    for pattern, kind in PLOT_TYPE_PATTERNS:
        if pattern.search(text):
            return kind
    return None


def extract_relationship(text: str) -> str | None:
    for pattern, kind in RELATIONSHIP_PATTERNS:
        if pattern.search(text):
            return kind
    return None


def _place_words(phrase: str, vocab: QueryVocabulary) -> str | None:
    """Drop leading/trailing words that are not part of a place name."""
    words = phrase.split()

    def is_place_word(word: str) -> bool:
        return word.lower() not in MONTH_NAMES and vocab.is_likely_name(word)

    while words and not is_place_word(words[0]):
        words.pop(0)
    while words and not is_place_word(words[-1]):
        words.pop()
    return " ".join(words) or None


def extract_cemetery(text: str, vocab: QueryVocabulary = VOCABULARY) -> str | None:
    for pattern in _CEMETERY_PATTERNS:
        for match in pattern.finditer(text):
            name = _place_words(match.group(1), vocab)
            if name:
                return name
    return None


def extract_location(text: str, vocab: QueryVocabulary = VOCABULARY) -> str | None:
    for match in _LOCATION_PATTERN.finditer(text):
        name = _place_words(match.group(1), vocab)
        if name:
            return name
    return None


def extract_place_fields(cased: str, vocab: QueryVocabulary = VOCABULARY) -> PlaceFields:
    """Plot, cemetery, location and relationship signals of one query.

    Capitalization marks place names, so ``cased`` must keep the
    visitor's original casing. A location is only looked for when no
    cemetery was named.
    """
    cemetery = extract_cemetery(cased, vocab)
    return PlaceFields(
        plot_number=extract_plot_number(cased),
        plot_type=extract_plot_type(cased),
        cemetery_name=cemetery,
        location=None if cemetery else extract_location(cased, vocab),
        relationship=extract_relationship(cased),
    )
