"""Date, age and time-expression extraction for burial queries.

Handles:
- Year-only and month-only queries (short-circuit the whole parse)
- Full dates: ISO 2020-01-15, US 01/15/2020, UK 15/01/2020 or 15-01-2020,
  "15 January 2020", "January 15, 2020"
- Month ranges ("January to March", "enero hanggang marso") and "Month YYYY"
- Bare years, classified as birth or death by the nearest keyword
  (typo tolerant: "bornd" counts as "born"); two or more years form a range
- Year ranges ("between 1990 and 2000", "mula 1990 hanggang 2000")
- Relative expressions ("last year", "5 years ago", "3 taon na ang nakaraan")
- Decades ("the 90s", "1980s", "dekada nobenta")
- Ages ("about 20 age", "aged 25", "mga 30 taon") and age ranges
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from ..utils.name_variants import levenshtein_distance
from ..utils.normalize import MONTH_ALTERNATION, MONTH_NAMES
from .vocabulary import VOCABULARY, QueryVocabulary

_YEAR = r"(?:19|20)\d{2}"

YEAR_ONLY = re.compile(rf"^\s*({_YEAR})\s*$")
MONTH_ONLY = re.compile(rf"^\s*({MONTH_ALTERNATION})\.?\s*$", re.IGNORECASE)

_FULL_DATE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("iso", re.compile(rf"\b({_YEAR})-(0?[1-9]|1[0-2])-(0?[1-9]|[12]\d|3[01])\b")),
    ("us", re.compile(rf"\b(0?[1-9]|1[0-2])/(0?[1-9]|[12]\d|3[01])/({_YEAR})\b")),
    ("uk", re.compile(rf"\b(0?[1-9]|[12]\d|3[01])[/-](0?[1-9]|1[0-2])[/-]({_YEAR})\b")),
    (
        "day_month_year",
        re.compile(rf"\b(0?[1-9]|[12]\d|3[01])\s+({MONTH_ALTERNATION})\.?,?\s+({_YEAR})\b", re.IGNORECASE),
    ),
    (
        "month_day_year",
        re.compile(rf"\b({MONTH_ALTERNATION})\.?\s+(0?[1-9]|[12]\d|3[01]),?\s+({_YEAR})\b", re.IGNORECASE),
    ),
)

MONTH_RANGE = re.compile(
    rf"\b({MONTH_ALTERNATION})\.?(?:\s*-\s*|\s+(?:to|through|thru|until|hanggang|hasta)\s+)({MONTH_ALTERNATION})\b",
    re.IGNORECASE,
)
MONTH_YEAR = re.compile(rf"\b({MONTH_ALTERNATION})\.?,?\s+({_YEAR})\b", re.IGNORECASE)
BARE_YEAR = re.compile(rf"\b({_YEAR})\b")

YEAR_RANGE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        rf"\bbetween\s+({_YEAR})\s+(?:and|to|-)\s+({_YEAR})\b",
        rf"\bfrom\s+({_YEAR})\s+(?:to|until|through|-)\s+({_YEAR})\b",
        rf"\b(?:mula|noong|simula)\s+({_YEAR})\s+(?:hanggang|hasta)\s+({_YEAR})\b",
        rf"\bsa\s+pagitan\s+ng\s+({_YEAR})\s+(?:at|hanggang)\s+({_YEAR})\b",
        rf"\b({_YEAR})\s*(?:-|to|through)\s*({_YEAR})\b",
    )
)

_DEATH_MONTH_KEYWORD = re.compile(r"\b(?:died|death|passed|buried|namatay|pumanaw|yumao)\b", re.IGNORECASE)
_BIRTH_MONTH_KEYWORD = re.compile(r"\b(?:born|birth|ipinanganak|isinilang)\b", re.IGNORECASE)
_MONTH_WORD = re.compile(rf"\b({MONTH_ALTERNATION})\b", re.IGNORECASE)
# At most this many words between the keyword and the month ("died in early January")
_MONTH_KEYWORD_GAP = 3
# "may" is also a verb ("may be 20"); only read it as May next to a date word
_MAY_AFTER = re.compile(r"\b(?:in|of|noong|nung)\s+$", re.IGNORECASE)
_MAY_BEFORE = re.compile(
    rf"^\.?,?\s+(?:\d{{1,2}}(?:st|nd|rd|th)?(?!\d)(?!\s*(?:years?|yrs?|y\.?o|age|taon))|{_YEAR}\b)",
    re.IGNORECASE,
)

# Relative expressions are removed from the text once read so "5 years ago"
# is not mistaken for an age.
_LAST_YEAR = re.compile(r"\b(?:last|past|previous)\s+year\b|\bnakaraang\s+taon\b", re.IGNORECASE)
_THIS_YEAR = re.compile(r"\bthis\s+year\b|\bngayong\s+taon\b", re.IGNORECASE)
_YEARS_AGO = re.compile(
    r"\b(\d{1,3})\s+(?:years?|yrs?)\s+ago\b|\b(\d{1,3})\s+taon\s+na\s+(?:ang\s+)?nakaraan\b",
    re.IGNORECASE,
)
_LAST_MONTH = re.compile(r"\b(?:last|past|previous)\s+month\b|\bnakaraang\s+buwan\b", re.IGNORECASE)
_THIS_MONTH = re.compile(r"\bthis\s+month\b|\bngayong\s+buwan\b", re.IGNORECASE)
_RECENTLY = re.compile(r"\brecently\b|\bkamakailan(?:\s+lang)?\b", re.IGNORECASE)

_AGE_DECADE = re.compile(
    r"\b(?:in|nasa)\s+(?:his|her|their|kanyang)\s+(?:(?:mid|early|late)[\s-]+)?(\d)0'?s\b", re.IGNORECASE
)
_FULL_DECADE = re.compile(r"(?<!\d)((?:19|20)\d)0'?s\b", re.IGNORECASE)
_SHORT_DECADE = re.compile(r"(?:\b(?:the|in|noong)\s+'?|')(\d)0'?s\b", re.IGNORECASE)
_FILIPINO_DECADE = re.compile(
    r"\bdekada\s+(?:(\d)0|(bente|traynta|kuwarenta|singkwenta|sisenta|sitenta|otsenta|nobenta))\b",
    re.IGNORECASE,
)
_FILIPINO_TENS = {
    "bente": 2, "traynta": 3, "kuwarenta": 4, "singkwenta": 5,
    "sisenta": 6, "sitenta": 7, "otsenta": 8, "nobenta": 9,
}

_AGE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        # Hedged: "about 20 age", "around 25 years", "siguro 30", "mga 40 taon"
        r"\b(?:about|around|approximately|approx|roughly|maybe|probably|like|siguro|mga|halos)"
        r"\s+(\d{1,3})(?!\d)\s*(?:years?|yrs?|y\.?o\.?|age|taon|taong\s+gulang)?(?!\s*(?:-|/))",
        # "died at 80", "age 25", "aged 25", "edad 30", "gulang 40"
        r"\b(?:died\s+at(?:\s+age)?|age|aged|edad|gulang)\s+(\d{1,3})(?!\d)",
        # "was 20 years old", "is 45 yrs"
        r"\b(?:was|is)\s+(\d{1,3})(?!\d)\s*(?:years?|yrs?|y\.?o\.?)",
        # "20 years old", "30 taong gulang"
        r"\b(\d{1,3})(?!\d)\s*(?:years?|yrs?|taon|taong)[\s-]+(?:old|gulang)\b",
        # "20 age", "25 edad", "30 taon"
        r"\b(\d{1,3})(?!\d)\s+(?:age|edad|taon|gulang)\b",
    )
)
_AGE_RANGE = re.compile(
    r"\b(?:between|ages?|aged|edad)\s+(\d{1,3})(?!\d)\s*(?:and|to|-|at|hanggang)\s*(\d{1,3})(?!\d)",
    re.IGNORECASE,
)

_MAX_PLAUSIBLE_AGE = 130


@dataclass
class DateFields:
    """Mutable accumulator for the date/age part of a search context."""

    year_of_death: int | None = None
    year_of_birth: int | None = None
    birth_year_inferred: bool = False
    date_range: tuple[int, int] | None = None
    month_of_death: int | None = None
    month_of_birth: int | None = None
    month_range: tuple[int, int] | None = None
    day_of_month: int | None = None
    specific_date: date | None = None
    age_at_death: int | None = None
    age_range: tuple[int, int] | None = None

    @property
    def has_explicit_year(self) -> bool:
        return self.year_of_death is not None or (
            self.year_of_birth is not None and not self.birth_year_inferred
        )


def _month(name: str) -> int:
    return MONTH_NAMES[name.lower().rstrip(".")]


def _is_month_word(text: str, match: re.Match[str]) -> bool:
    if match.group(1).lower() != "may":
        return True
    return bool(_MAY_AFTER.search(text[: match.start()]) or _MAY_BEFORE.match(text[match.end():]))


def month_after_keyword(text: str, keyword: re.Pattern[str]) -> int | None:
    """Month named within a few words after a birth/death keyword.

    "died in January" and "namatay noong Marso" count; "died, may be 20"
    does not, nor does a month mentioned far from the keyword.
    """
    for kw in keyword.finditer(text):
        for match in _MONTH_WORD.finditer(text, kw.end()):
            if len(re.findall(r"\w+", text[kw.end(): match.start()])) > _MONTH_KEYWORD_GAP:
                break
            if _is_month_word(text, match):
                return _month(match.group(1))
    return None


def year_only(text: str) -> int | None:
    """The year when the query is nothing but a year in 1900-2099."""
    match = YEAR_ONLY.match(text or "")
    return int(match.group(1)) if match else None


def month_only(text: str) -> int | None:
    """The month number when the query is nothing but a month name."""
    match = MONTH_ONLY.match(text or "")
    return _month(match.group(1)) if match else None


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def extract_full_date(text: str) -> date | None:
    """First calendar-valid explicit date in the text.

    Day 31 in a 30-day month (and friends) makes that pattern yield nothing.
    """
    for kind, pattern in _FULL_DATE_PATTERNS:
        for match in pattern.finditer(text):
            a, b, c = match.groups()
            if kind == "iso":
                parsed = _safe_date(int(a), int(b), int(c))
            elif kind == "us":
                parsed = _safe_date(int(c), int(a), int(b))
            elif kind == "uk":
                parsed = _safe_date(int(c), int(b), int(a))
            elif kind == "day_month_year":
                parsed = _safe_date(int(c), _month(b), int(a))
            else:
                parsed = _safe_date(int(c), _month(a), int(b))
            if parsed is not None:
                return parsed
    return None


def _fuzzy_keyword(word: str, keywords: frozenset[str]) -> bool:
    if word in keywords:
        return True
    if len(word) < 4:
        return False
    return any(levenshtein_distance(word, kw) <= 1 for kw in keywords if len(kw) >= 4)


def classify_year_role(text: str, year: int | str, vocab: QueryVocabulary = VOCABULARY) -> str:
    """Decide whether a lone year is a birth or a death year.

    The closest birth/death keyword in front of the year wins ("born 1950
    died at 80"); failing that, the closest one after it. One typo is
    tolerated in keywords of four or more letters. With no keyword at all
    the year is taken as a death year.
    """
    tokens = re.findall(r"[a-z][a-z'\-]*|\d+", text.lower())
    target = str(year)
    positions = [i for i, t in enumerate(tokens) if t == target]
    if not positions:
        return "death"
    at = positions[0]

    best: tuple[int, int, str] | None = None
    for i, token in enumerate(tokens):
        if _fuzzy_keyword(token, vocab.birth_keywords):
            role = "birth"
        elif _fuzzy_keyword(token, vocab.death_keywords):
            role = "death"
        else:
            continue
        rank = (0 if i < at else 1, abs(i - at), role)
        if best is None or rank < best:
            best = rank
    return best[2] if best else "death"


def _relative_role(text: str, vocab: QueryVocabulary) -> str:
    words = re.findall(r"[a-z]+", text.lower())
    has_birth = any(_fuzzy_keyword(w, vocab.birth_keywords) for w in words)
    has_death = any(_fuzzy_keyword(w, vocab.death_keywords) for w in words)
    return "birth" if has_birth and not has_death else "death"


def _apply_relative(fields: DateFields, text: str, today: date, vocab: QueryVocabulary) -> str:
    """Read relative time expressions; returns text with them blanked out."""
    role = _relative_role(text, vocab)

    def set_year(year: int) -> None:
        if role == "birth":
            fields.year_of_birth = year
        else:
            fields.year_of_death = year

    def set_month(year: int, month: int) -> None:
        set_year(year)
        if role == "birth":
            fields.month_of_birth = month
        else:
            fields.month_of_death = month

    if match := _YEARS_AGO.search(text):
        set_year(today.year - int(match.group(1) or match.group(2)))
        text = text[: match.start()] + " " + text[match.end():]
    elif _LAST_YEAR.search(text):
        set_year(today.year - 1)
    elif _THIS_YEAR.search(text):
        set_year(today.year)
    elif _LAST_MONTH.search(text):
        previous = today.month - 1 or 12
        set_month(today.year if today.month > 1 else today.year - 1, previous)
    elif _THIS_MONTH.search(text):
        set_month(today.year, today.month)
    elif _RECENTLY.search(text):
        fields.date_range = (today.year - 1, today.year)
    return text


def _decade_start(tens: int, today: date) -> int:
    """Century for a two-digit decade: the most recent one not in the future."""
    start = 2000 + tens * 10
    return start if start <= today.year else 1900 + tens * 10


def _apply_decades(fields: DateFields, text: str, today: date) -> str:
    if match := _AGE_DECADE.search(text):
        tens = int(match.group(1)) * 10
        fields.age_range = (tens, tens + 9)
        text = text[: match.start()] + " " + text[match.end():]

    start: int | None = None
    if match := _FULL_DECADE.search(text):
        start = int(match.group(1)) * 10
    elif match := _SHORT_DECADE.search(text):
        start = _decade_start(int(match.group(1)), today)
    elif match := _FILIPINO_DECADE.search(text):
        tens = int(match.group(1)) if match.group(1) else _FILIPINO_TENS[match.group(2).lower()]
        start = _decade_start(tens, today)
    if start is not None and fields.date_range is None:
        fields.date_range = (start, start + 9)
    return text


def extract_age(text: str) -> int | None:
    for pattern in _AGE_PATTERNS:
        for match in pattern.finditer(text):
            age = int(match.group(1))
            if 0 < age <= _MAX_PLAUSIBLE_AGE:
                return age
    return None


def extract_age_range(text: str) -> tuple[int, int] | None:
    match = _AGE_RANGE.search(text)
    if not match:
        return None
    a, b = int(match.group(1)), int(match.group(2))
    return (min(a, b), max(a, b))


def extract_dates(
    cased: str,
    today: date | None = None,
    vocab: QueryVocabulary = VOCABULARY,
) -> DateFields:
    """Pull every date and age signal out of a (case-preserving) query.

    Explicit years are read before ages so an age can only ever fill in a
    birth year the query did not state.
    """
    today = today or date.today()
    fields = DateFields()
    text = cased

    # Full dates
    specific = extract_full_date(text)
    if specific is not None:
        fields.specific_date = specific
        fields.year_of_death = specific.year
        fields.month_of_death = specific.month
        fields.day_of_month = specific.day

    # Month ranges
    if match := MONTH_RANGE.search(text):
        a, b = _month(match.group(1)), _month(match.group(2))
        fields.month_range = (min(a, b), max(a, b))

    # Month + year
    if fields.specific_date is None and (match := MONTH_YEAR.search(text)):
        month, year = _month(match.group(1)), int(match.group(2))
        if classify_year_role(text, year, vocab) == "birth":
            fields.month_of_birth, fields.year_of_birth = month, year
        else:
            fields.month_of_death, fields.year_of_death = month, year

    # Year ranges
    for pattern in YEAR_RANGE_PATTERNS:
        if match := pattern.search(text):
            a, b = int(match.group(1)), int(match.group(2))
            fields.date_range = (min(a, b), max(a, b))
            break

    # Bare years
    if fields.year_of_death is None and fields.date_range is None:
        years = [int(y) for y in BARE_YEAR.findall(text)]
        if len(years) == 1:
            if classify_year_role(text, years[0], vocab) == "birth":
                fields.year_of_birth = years[0]
            else:
                fields.year_of_death = years[0]
        elif len(years) >= 2:
            fields.date_range = (min(years), max(years))

    # Month with a birth/death keyword in front of it
    if fields.month_of_death is None and fields.month_of_birth is None:
        fields.month_of_death = month_after_keyword(text, _DEATH_MONTH_KEYWORD)
        fields.month_of_birth = month_after_keyword(text, _BIRTH_MONTH_KEYWORD)

    # Relative time and decades only fill in what was not stated outright
    if not fields.has_explicit_year and fields.date_range is None:
        text = _apply_relative(fields, text, today, vocab)
        text = _apply_decades(fields, text, today)
    else:
        text = _YEARS_AGO.sub(" ", text)

    # Ages
    age_range = extract_age_range(text)
    if age_range is not None:
        fields.age_range = age_range
    elif fields.age_range is None:
        fields.age_at_death = extract_age(text)

    if fields.year_of_death is not None:
        if fields.age_at_death is not None and fields.year_of_birth is None:
            fields.year_of_birth = fields.year_of_death - fields.age_at_death
            fields.birth_year_inferred = True
        if fields.age_range is not None and fields.date_range is None:
            lo, hi = fields.age_range
            fields.date_range = (fields.year_of_death - hi, fields.year_of_death - lo)

    return fields
