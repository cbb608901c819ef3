"""Relevance scoring: base similarity plus field-match boosts.

score = (base_similarity + sum(boosts)) * intent_multiplier

Candidates are sorted by score (stable, so equal scores keep the store's
order), dropped below an intent-dependent threshold and capped.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from ..config import CONFIG, EngineConfig
from ..models.context import IntentType, SearchContext
from ..models.record import BurialRecord, ScoredCandidate
from ..utils.name_variants import levenshtein_distance, soundex
from .similarity import EmbeddingSimilarity, KeywordSimilarity, SimilarityProvider

logger = logging.getLogger(__name__)

# (exact, prefix, contains, one edit, two edits, soundex)
FIRST_NAME_WEIGHTS = (0.7, 0.4, 0.25, 0.3, 0.18, 0.18)
LAST_NAME_WEIGHTS = (0.8, 0.45, 0.3, 0.35, 0.2, 0.22)

FULL_NAME_BOOST = 1.0
PLOT_EXACT_BOOST = 1.5
PLOT_PARTIAL_BOOST = 0.8
CEMETERY_BOOST = 0.6
PLOT_TYPE_BOOST = 0.4
SPECIFIC_DATE_BOOST = 1.2
DEATH_YEAR_BOOST = 0.6
DATE_RANGE_BOOST = 0.4
DEATH_MONTH_BOOST = 0.5
MONTH_RANGE_BOOST = 0.35
DAY_BOOST = 0.3
BIRTH_YEAR_BOOST = 0.35
BIRTH_MONTH_BOOST = 0.3
AGE_EXACT_BOOST = 0.5
AGE_NEAR_BOOST = 0.25
AGE_RANGE_BOOST = 0.4
FAMILY_SURNAME_BOOST = 0.3

_KEYWORD = KeywordSimilarity()


def name_boost(wanted: str, actual: str, weights: tuple[float, ...], wanted_soundex: str | None) -> float:
    """Boost for one name field: the best spelling tier plus a phonetic bonus."""
    if not wanted or not actual:
        return 0.0
    exact, prefix, contains, one_edit, two_edits, phonetic = weights
    wanted, actual = wanted.lower(), actual.lower()
    if actual == wanted:
        boost = exact
    elif actual.startswith(wanted):
        boost = prefix
    elif wanted in actual:
        boost = contains
    else:
        distance = levenshtein_distance(actual, wanted)
        boost = one_edit if distance <= 1 else two_edits if distance == 2 else 0.0
    if wanted_soundex and soundex(actual) == wanted_soundex:
        boost += phonetic
    return boost


def field_boosts(ctx: SearchContext, record: BurialRecord) -> dict[str, float]:
    """Every boost that applies to ``record``, keyed by signal name.

    Only signals with a non-zero contribution appear in the result.
    """
    boosts: dict[str, float] = {}
    last_name = (record.last_name or "").lower()

    if ctx.full_name and record.full_name.lower() == ctx.full_name:
        boosts["full_name"] = FULL_NAME_BOOST

    if ctx.first_name:
        first = name_boost(ctx.first_name, record.first_name, FIRST_NAME_WEIGHTS, ctx.soundex_first_name)
        if not ctx.last_name:
            # A lone name may be either a given name or a surname
            as_last = name_boost(ctx.first_name, record.last_name, LAST_NAME_WEIGHTS, ctx.soundex_first_name)
            first = max(first, as_last)
        boosts["first_name"] = first
    if ctx.last_name:
        boosts["last_name"] = name_boost(ctx.last_name, record.last_name, LAST_NAME_WEIGHTS, ctx.soundex_last_name)

    if ctx.plot_number and record.plot_number:
        wanted, actual = ctx.plot_number.lower(), record.plot_number.lower()
        if actual == wanted:
            boosts["plot_number"] = PLOT_EXACT_BOOST
        elif wanted in actual or actual in wanted:
            boosts["plot_number"] = PLOT_PARTIAL_BOOST

    if ctx.cemetery_name and record.cemetery_name:
        wanted, actual = ctx.cemetery_name.lower(), record.cemetery_name.lower()
        if wanted in actual or actual in wanted:
            boosts["cemetery"] = CEMETERY_BOOST

    if ctx.plot_type and record.plot_type and record.plot_type.lower() == ctx.plot_type:
        boosts["plot_type"] = PLOT_TYPE_BOOST

    death = record.date_of_death
    if death is not None:
        if ctx.specific_date and death == ctx.specific_date:
            boosts["specific_date"] = SPECIFIC_DATE_BOOST
        if ctx.year_of_death and death.year == ctx.year_of_death:
            boosts["death_year"] = DEATH_YEAR_BOOST
        if ctx.date_range and death.year in ctx.date_range:
            boosts["date_range"] = DATE_RANGE_BOOST
        if ctx.month_of_death and death.month == ctx.month_of_death:
            boosts["death_month"] = DEATH_MONTH_BOOST
        if ctx.month_range and death.month in ctx.month_range:
            boosts["month_range"] = MONTH_RANGE_BOOST
        if ctx.day_of_month and death.day == ctx.day_of_month:
            boosts["day_of_month"] = DAY_BOOST

    birth = record.date_of_birth
    if birth is not None:
        if ctx.year_of_birth and birth.year == ctx.year_of_birth:
            boosts["birth_year"] = BIRTH_YEAR_BOOST
        if ctx.month_of_birth and birth.month == ctx.month_of_birth:
            boosts["birth_month"] = BIRTH_MONTH_BOOST

    age = record.age_at_death
    if age is not None:
        if ctx.age_at_death is not None:
            gap = abs(age - ctx.age_at_death)
            if gap == 0:
                boosts["age"] = AGE_EXACT_BOOST
            elif gap <= 2:
                boosts["age"] = AGE_NEAR_BOOST
        if ctx.age_range and age in ctx.age_range:
            boosts["age_range"] = AGE_RANGE_BOOST

    if ctx.intent_type is IntentType.FIND_FAMILY and ctx.last_name and ctx.last_name.lower() in last_name:
        boosts["family"] = FAMILY_SURNAME_BOOST

    return {k: v for k, v in boosts.items() if v}


def score_candidate(
    ctx: SearchContext,
    record: BurialRecord,
    base: float,
    config: EngineConfig = CONFIG,
) -> float:
    """Total score for one record given its base similarity."""
    score = base + sum(field_boosts(ctx, record).values())
    if ctx.intent_type is IntentType.FIND_PLOT and ctx.plot_number:
        score *= config.plot_intent_multiplier
    return max(score, 0.0)


def threshold_for(ctx: SearchContext, config: EngineConfig = CONFIG) -> float:
    return config.plot_threshold if ctx.intent_type is IntentType.FIND_PLOT else config.default_threshold


def apply_threshold(
    scored: Sequence[ScoredCandidate],
    ctx: SearchContext,
    config: EngineConfig = CONFIG,
) -> list[ScoredCandidate]:
    """Stable sort by score, drop those below the intent threshold, cap."""
    ranked = sorted(scored, key=lambda c: c.score, reverse=True)
    threshold = threshold_for(ctx, config)
    return [c for c in ranked if c.score >= threshold][: config.max_results]


def _score_all(
    ctx: SearchContext,
    records: Sequence[BurialRecord],
    bases: Sequence[float],
    config: EngineConfig,
) -> list[ScoredCandidate]:
    scored = [
        ScoredCandidate(record=record, score=score_candidate(ctx, record, base, config), context=ctx)
        for record, base in zip(records, bases)
    ]
    kept = apply_threshold(scored, ctx, config)
    logger.debug(
        "Ranked %d candidates, kept %d (intent=%s)", len(records), len(kept), ctx.intent_type.value
    )
    return kept


def rank_candidates(
    query: str,
    ctx: SearchContext,
    records: Sequence[BurialRecord],
    config: EngineConfig = CONFIG,
) -> list[ScoredCandidate]:
    """Score, sort, threshold and cap ``records`` with local keyword similarity."""
    q = (query or "").lower()
    bases = [_KEYWORD.score(q, record.searchable_text()) for record in records]
    return _score_all(ctx, records, bases, config)


async def rank_candidates_with_source(
    query: str,
    ctx: SearchContext,
    records: Sequence[BurialRecord],
    provider: SimilarityProvider | None = None,
    config: EngineConfig = CONFIG,
) -> tuple[list[ScoredCandidate], bool]:
    """``rank_candidates_async`` plus whether embeddings produced the base scores."""
    if not records:
        return [], False
    provider = provider or _KEYWORD
    q = (query or "").lower()
    texts = [record.searchable_text() for record in records]
    if isinstance(provider, EmbeddingSimilarity):
        bases, semantic = await provider.similarities_with_source(q, texts)
    else:
        bases, semantic = await provider.similarities(q, texts), False
    return _score_all(ctx, records, bases, config), semantic


async def rank_candidates_async(
    query: str,
    ctx: SearchContext,
    records: Sequence[BurialRecord],
    provider: SimilarityProvider | None = None,
    config: EngineConfig = CONFIG,
) -> list[ScoredCandidate]:
    """Like ``rank_candidates`` but with a pluggable base-similarity provider."""
    results, _ = await rank_candidates_with_source(query, ctx, records, provider, config)
    return results
