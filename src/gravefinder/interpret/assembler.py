"""Context assembler: raw query in, immutable SearchContext out.

Usage:
    ctx = parse_query("hanap si Juan dela Cruz namatay 2019")
    ctx.first_name, ctx.last_name, ctx.year_of_death
    # ("Juan", "dela Cruz", 2019)
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date

from ..models.context import AgeRange, IntentType, MonthRange, SearchContext, YearRange
from ..utils.name_variants import expand_nicknames, soundex
from ..utils.normalize import normalize_query, normalize_text
from .dates import DateFields, extract_dates, month_only, year_only
from .fields import PlaceFields, extract_place_fields
from .names import NameParts, extract_name
from .vocabulary import VOCABULARY, QueryVocabulary

logger = logging.getLogger(__name__)

_MONTH_LABELS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def classify_intent(place: PlaceFields, has_name: bool) -> IntentType:
    """Pick the search intent.

    Precedence: plot number, then family (relationship or plot type),
    then cemetery/location, then any name, else general.
    """
    if place.plot_number:
        return IntentType.FIND_PLOT
    if place.relationship == "family" or place.plot_type == "family":
        return IntentType.FIND_FAMILY
    if place.cemetery_name or place.location:
        return IntentType.FIND_LOCATION
    if has_name:
        return IntentType.FIND_PERSON
    return IntentType.GENERAL


def _blank(text: str, phrases: Iterable[str]) -> str:
    for phrase in phrases:
        text = re.sub(re.escape(phrase), " ", text, flags=re.IGNORECASE)
    return re.sub(r"\s+", " ", text).strip()


def _possibly_reversed(names: NameParts, vocab: QueryVocabulary) -> bool:
    """Surname-first order ("dela Cruz Juan", "Santos Maria") is plausible."""
    if not (names.first_name and names.last_name) or names.middle_name:
        return False
    leading = (names.first_name.split()[0], names.last_name.split()[0])
    if any(vocab.is_surname_particle(word) for word in leading):
        return True
    return len(names.first_name) > len(names.last_name)


def _is_filipino(raw: str, vocab: QueryVocabulary) -> bool:
    tokens = set(re.findall(r"[a-z][a-z\-]*", normalize_text(raw)))
    return bool(tokens & vocab.filipino_hints)


def _name_fields(names: NameParts | None, vocab: QueryVocabulary) -> dict:
    if names is None:
        return {}
    fields: dict = {
        "first_name": names.first_name,
        "middle_name": names.middle_name,
        "last_name": names.last_name,
        "full_name": names.full_name,
    }
    if names.first_name:
        fields["first_name_variants"] = frozenset(expand_nicknames(names.first_name))
        fields["soundex_first_name"] = soundex(names.first_name) or None
    if names.last_name:
        fields["last_name_variants"] = frozenset(expand_nicknames(names.last_name))
        fields["soundex_last_name"] = soundex(names.last_name) or None
    fields["possibly_reversed"] = _possibly_reversed(names, vocab)
    return fields


def _date_fields(dates: DateFields) -> dict:
    return {
        "year_of_death": dates.year_of_death,
        "year_of_birth": dates.year_of_birth,
        "birth_year_inferred": dates.birth_year_inferred,
        "date_range": YearRange(start=dates.date_range[0], end=dates.date_range[1]) if dates.date_range else None,
        "month_of_death": dates.month_of_death,
        "month_of_birth": dates.month_of_birth,
        "month_range": MonthRange(start=dates.month_range[0], end=dates.month_range[1]) if dates.month_range else None,
        "day_of_month": dates.day_of_month,
        "specific_date": dates.specific_date,
        "age_at_death": dates.age_at_death,
        "age_range": AgeRange(min=dates.age_range[0], max=dates.age_range[1]) if dates.age_range else None,
    }


def _parse(raw: str, today: date | None, vocab: QueryVocabulary) -> SearchContext:
    query = normalize_query(raw)
    if query.is_empty:
        return SearchContext(raw_query=raw)

    filipino = _is_filipino(raw, vocab)

    # Date-only queries skip every other extractor
    if (year := year_only(query.cased)) is not None:
        return SearchContext(raw_query=raw, year_of_death=year, is_filipino_hint=filipino)
    if (month := month_only(query.cased)) is not None:
        return SearchContext(raw_query=raw, month_of_death=month, is_filipino_hint=filipino)

    place = extract_place_fields(query.cased, vocab)
    claimed = place.claimed_phrases
    names = extract_name(
        _blank(query.cased, claimed),
        _blank(query.lowered, claimed),
        vocab,
        exclude=[word for phrase in claimed for word in phrase.split()],
    )
    dates = extract_dates(query.cased, today=today, vocab=vocab)

    has_name = names is not None and bool(names.first_name or names.last_name)
    return SearchContext(
        raw_query=raw,
        **_name_fields(names, vocab),
        **_date_fields(dates),
        plot_number=place.plot_number,
        plot_type=place.plot_type,
        cemetery_name=place.cemetery_name,
        location=place.location,
        relationship=place.relationship,
        is_filipino_hint=filipino,
        intent_type=classify_intent(place, has_name),
    )


def parse_query(
    query: str | None,
    today: date | None = None,
    vocab: QueryVocabulary = VOCABULARY,
) -> SearchContext:
    """Interpret a free-text burial search query.

    Never raises: empty, ``None`` or unparseable input yields a context
    with only ``raw_query`` set and ``intent_type`` GENERAL.

    Args:
        query: Raw visitor input, English, Filipino or mixed
        today: Reference date for relative expressions ("last year")
        vocab: Keyword tables; the process-wide default unless testing
    """
    raw = query or ""
    try:
        return _parse(raw, today, vocab)
    except Exception as e:
        logger.warning("Query interpretation failed, returning empty context: %s", e, exc_info=True)
        return SearchContext(raw_query=raw)


def describe_context(ctx: SearchContext) -> str:
    """One-line, human-readable summary of what was understood."""
    parts: list[str] = []
    if ctx.full_name:
        parts.append(f'name "{ctx.full_name}"')
        if ctx.possibly_reversed:
            parts.append("(name order may be reversed)")
    if ctx.relationship:
        parts.append(f"relationship: {ctx.relationship}")
    if ctx.specific_date:
        parts.append(f"died on {ctx.specific_date.isoformat()}")
    else:
        if ctx.month_of_death:
            parts.append(f"died in {_MONTH_LABELS[ctx.month_of_death - 1]}")
        if ctx.year_of_death:
            parts.append(f"died {ctx.year_of_death}")
    if ctx.month_of_birth:
        parts.append(f"born in {_MONTH_LABELS[ctx.month_of_birth - 1]}")
    if ctx.year_of_birth:
        parts.append(f"born around {ctx.year_of_birth}" if ctx.birth_year_inferred else f"born {ctx.year_of_birth}")
    if ctx.date_range:
        parts.append(f"between {ctx.date_range.start} and {ctx.date_range.end}")
    if ctx.month_range:
        parts.append(
            f"{_MONTH_LABELS[ctx.month_range.start - 1]} to {_MONTH_LABELS[ctx.month_range.end - 1]}"
        )
    if ctx.age_at_death is not None:
        parts.append(f"about {ctx.age_at_death} years old")
    if ctx.age_range:
        parts.append(f"aged {ctx.age_range.min}-{ctx.age_range.max}")
    if ctx.plot_number:
        parts.append(f"plot {ctx.plot_number}")
    if ctx.plot_type:
        parts.append(f"{ctx.plot_type} plot")
    if ctx.cemetery_name:
        parts.append(f"at {ctx.cemetery_name}")
    elif ctx.location:
        parts.append(f"in {ctx.location}")

    if not parts:
        return "Showing all records"
    return f"Searching by {ctx.intent_type.value.replace('_', ' ')}: " + ", ".join(parts)
