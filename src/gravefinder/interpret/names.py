"""Person-name extraction from conversational English/Filipino queries.

Names are found by an ordered cascade of matchers; the first matcher that
yields a plausible name wins and the rest are skipped. When nothing fires,
a residual-token pass strips every known keyword and treats whatever is
left as the name.

Matcher order:
1. quoted literal ("find \"Maria Santos\"")
2. capitalized conversational ("find John Smith")
3. lowercase conversational, voice-to-text tolerant ("find jiro")
4. Filipino particle-aware ("hanap si Juan dela Cruz")
5. hybrid English + Filipino ("where si maria")
6. name followed by an action keyword ("John Smith died")
7. honorific-prefixed ("Dr. Maria Santos", "G. Jose Rizal")
8. name with a middle initial ("John M. Smith")
9. bare run of two or three capitalized words ("Maria Clara Santos")
"""
from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..utils.normalize import MONTH_NAMES
from .vocabulary import VOCABULARY, QueryVocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameParts:
    """Positional name fields recovered from a query."""

    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    strategy: str = ""

    @property
    def full_name(self) -> str | None:
        parts = [p for p in (self.first_name, self.middle_name, self.last_name) if p]
        return " ".join(parts).lower() if parts else None

    @property
    def is_single(self) -> bool:
        """Only one name token; it may be a first or a last name."""
        return bool(self.first_name) and not self.middle_name and not self.last_name


@dataclass(frozen=True)
class NameMatcher:
    """A named strategy in the extraction cascade."""

    name: str
    extract: Callable[[str, QueryVocabulary], NameParts | None]

    def __call__(self, text: str, vocab: QueryVocabulary = VOCABULARY) -> NameParts | None:
        return self.extract(text, vocab)


# Building blocks
_CAP = r"[A-Z][a-zA-Z'\-]+"
_WORD = r"[a-zA-Z][a-zA-Z'\-]+"
_PARTICLE = r"(?i:de\s+la|de\s+los|dela|delos|del|de|san|santa|sta\.?|sto\.?)"
_CAP_NAME = rf"{_CAP}(?:\s+(?:{_PARTICLE}\s+)?{_CAP}){{0,3}}"
_WORDS = rf"{_WORD}(?:\s+{_WORD}){{0,3}}"
_FIL_MARKER = r"(?i:si|ni|kay|ang|yung|ng|para\s+kay)"

_EN_KEYWORDS = (
    r"find|looking\s+for|where\s+is|where's|locate|search\s+for|show\s+me|who\s+is|who's"
    r"|tell\s+me\s+about|do\s+you\s+know|trying\s+to\s+find|searching\s+for"
    r"|someone\s+named|somebody\s+named|person\s+named|someone\s+called|person\s+called"
    r"|named|called|any\s+records?\s+of|records?\s+(?:of|for)"
    r"|grave\s+of|tomb\s+of|burial\s+of|plot\s+of"
)
_FIL_KEYWORDS = (
    r"pakihanap|hinahanap|hanapin|hanap|nasaan|nasan|asan|saan|sino|alin"
    r"|libingan|puntod|nitso|may\s+record|meron|mayroon"
)
_ACTION_KEYWORDS = r"died|buried|passed|deceased|namatay|pumanaw|yumaong|yumao|nailibing|born|ipinanganak"
_HONORIFIC = r"(?:\b(?i:mrs|mr|ms|dr|engr|atty|gng|bb)\.?|\bG\.)"


def _tokenize(phrase: str) -> list[str]:
    tokens = (re.sub(r"'s$", "", t.strip(".,;:!?\"()")) for t in phrase.split())
    return [t for t in tokens if t]


def _leading_name_run(tokens: Iterable[str], vocab: QueryVocabulary) -> list[str]:
    """Skip leading non-name words, then take tokens until the next non-name word."""
    run: list[str] = []
    for token in tokens:
        if vocab.is_surname_particle(token) and run:
            run.append(token)
        elif vocab.is_likely_name(token):
            run.append(token)
        elif run:
            break
    # A trailing particle belongs to nothing
    while run and vocab.is_surname_particle(run[-1]) and len(run) > 1:
        run.pop()
    return run


def group_surname_particles(tokens: list[str], vocab: QueryVocabulary = VOCABULARY) -> list[str]:
    """Glue surname particles onto the following token.

    ["Juan", "dela", "Cruz"] -> ["Juan", "dela Cruz"]
    ["Rosa", "de", "la", "Paz"] -> ["Rosa", "de la Paz"]
    """
    grouped: list[str] = []
    pending: list[str] = []
    for i, token in enumerate(tokens):
        is_last = i == len(tokens) - 1
        if vocab.is_surname_particle(token) and not is_last and (grouped or pending):
            pending.append(token)
            continue
        grouped.append(" ".join([*pending, token]))
        pending = []
    return grouped


def assign_positions(parts: list[str], strategy: str) -> NameParts | None:
    """Map grouped name parts onto first/middle/last.

    One part is an ambiguous single name kept in ``first_name``; more than
    three parts collapse the tail into a compound last name.
    """
    if not parts:
        return None
    if len(parts) == 1:
        return NameParts(first_name=parts[0], strategy=strategy)
    if len(parts) == 2:
        return NameParts(first_name=parts[0], last_name=parts[1], strategy=strategy)
    if len(parts) == 3:
        return NameParts(
            first_name=parts[0], middle_name=parts[1], last_name=parts[2], strategy=strategy
        )
    return NameParts(first_name=parts[0], last_name=" ".join(parts[1:]), strategy=strategy)


def parts_from_phrase(phrase: str, strategy: str, vocab: QueryVocabulary = VOCABULARY) -> NameParts | None:
    run = _leading_name_run(_tokenize(phrase), vocab)
    return assign_positions(group_surname_particles(run, vocab), strategy)


def _phrase_matcher(name: str, pattern: str, flags: int = 0) -> NameMatcher:
    """Matcher whose first non-empty capture group is a name phrase."""
    regex = re.compile(pattern, flags)

    def extract(text: str, vocab: QueryVocabulary) -> NameParts | None:
        for match in regex.finditer(text):
            phrase = next((g for g in match.groups() if g), None)
            if phrase:
                parts = parts_from_phrase(phrase, name, vocab)
                if parts:
                    return parts
        return None

    return NameMatcher(name, extract)


def _middle_initial(text: str, vocab: QueryVocabulary) -> NameParts | None:
    for match in re.finditer(rf"\b({_CAP})\s+([A-Z])\.?\s+({_CAP})\b", text):
        first, initial, last = match.groups()
        if vocab.is_likely_name(first) and vocab.is_likely_name(last):
            return NameParts(
                first_name=first, middle_name=initial, last_name=last, strategy="middle_initial"
            )
    return None


def _capitalized_run(text: str, vocab: QueryVocabulary) -> NameParts | None:
    """First run of 2-3 consecutive capitalized name words."""
    run: list[str] = []
    for token in [*_tokenize(text), ""]:
        capitalized = bool(re.fullmatch(_CAP, token)) and vocab.is_likely_name(token)
        if capitalized or (run and vocab.is_surname_particle(token)):
            run.append(token)
            continue
        while run and vocab.is_surname_particle(run[-1]):
            run.pop()
        grouped = group_surname_particles(run, vocab)
        if 2 <= len(grouped) <= 3:
            return assign_positions(grouped, "capitalized_run")
        run = []
    return None


NAME_MATCHERS: tuple[NameMatcher, ...] = (
    _phrase_matcher(
        "quoted",
        rf'"([^"]{{2,60}})"|\b(?i:{_EN_KEYWORDS}|{_FIL_KEYWORDS})\s+\'([^\']{{2,60}})\'',
    ),
    _phrase_matcher(
        "conversational",
        rf"\b(?i:{_EN_KEYWORDS})\s+((?:{_FIL_MARKER}\s+)?{_CAP_NAME})",
    ),
    _phrase_matcher(
        "conversational_lowercase",
        rf"\b(?:{_EN_KEYWORDS})\s+({_WORDS})",
        re.IGNORECASE,
    ),
    _phrase_matcher(
        "filipino",
        rf"\b(?i:{_FIL_KEYWORDS})\s+(?:(?i:ba|bang)\s+)?(?:{_FIL_MARKER}\s+)?({_CAP_NAME})"
        rf"|\b(?i:{_FIL_KEYWORDS})\s+(?:(?i:ba|bang)\s+)?(?:{_FIL_MARKER}\s+)?({_WORDS})",
    ),
    _phrase_matcher(
        "hybrid",
        rf"\b(?:where|find|locate|search|show|look\s+for)\s+(?:si|ni|kay|ang|yung)\s+({_WORDS})",
        re.IGNORECASE,
    ),
    _phrase_matcher(
        "name_action",
        rf"({_CAP_NAME})\s+(?i:{_ACTION_KEYWORDS})\b"
        rf"|\b({_WORD}(?:\s+{_WORD}){{0,2}})\s+(?i:{_ACTION_KEYWORDS}|bornd|about|around|aged?|mga)\b",
    ),
    _phrase_matcher("honorific", rf"{_HONORIFIC}\s+({_CAP_NAME})"),
    NameMatcher("middle_initial", _middle_initial),
    NameMatcher("capitalized_run", _capitalized_run),
)


_RESIDUAL_NOISE = (
    re.compile(r"'s\b"),  # possessives
    re.compile(r"\b(?:19|20)\d{2}s?\b"),  # years, decades
    re.compile(r"'?\b\d+(?:s|st|nd|rd|th)?\b"),  # ages, days, plot numbers
    re.compile(r"[^a-z'\-\s]"),
)


def residual_name(
    lowered: str,
    vocab: QueryVocabulary = VOCABULARY,
    exclude: Iterable[str] = (),
) -> NameParts | None:
    """Recover a name from run-on input by deleting everything known.

    ``exclude`` holds words already claimed by other fields (a cemetery
    name, say) so they are not mistaken for a person.
    """
    text = lowered
    for pattern in _RESIDUAL_NOISE:
        text = pattern.sub(" ", text)
    excluded = {w.lower() for w in exclude}
    tokens = [
        t.strip("'-")
        for t in text.split()
        if t.strip("'-") not in excluded and t.strip("'-") not in MONTH_NAMES
    ]
    tokens = [t for t in tokens if len(t) >= 2 and (vocab.is_likely_name(t) or vocab.is_surname_particle(t))]
    grouped = group_surname_particles(tokens, vocab)
    if not 1 <= len(grouped) <= 3:
        return None
    if len(grouped) == 1 and vocab.is_surname_particle(grouped[0]):
        return None
    return assign_positions(grouped, "residual")


def extract_name(
    cased: str,
    lowered: str,
    vocab: QueryVocabulary = VOCABULARY,
    exclude: Iterable[str] = (),
) -> NameParts | None:
    """Run the matcher cascade, then the residual fallback."""
    for matcher in NAME_MATCHERS:
        parts = matcher(cased, vocab)
        if parts is not None:
            logger.debug("name matched by %s: %s", matcher.name, parts.full_name)
            return parts
    return residual_name(lowered, vocab, exclude)
