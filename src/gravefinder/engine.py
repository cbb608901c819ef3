"""Top-level entry points: interpret a query, rank candidates, suggest names.

Usage:
    from gravefinder.engine import autocomplete, interpret_and_rank, search

    response = interpret_and_rank("John Smith died 2020", records)
    response.context.year_of_death   # 2020
    response.results[0].record       # best match

    store = InMemoryBurialStore.load("burials.json")
    response = search("hanap si Juan dela Cruz", store, page=1)
    autocomplete("dela", store)      # ["Juan dela Cruz", ...]
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from .config import CONFIG, EngineConfig
from .interpret import describe_context, parse_query
from .logging import get_logger
from .models.context import SearchContext
from .models.record import BurialRecord, Page, ScoredCandidate, SearchResponse
from .ranking import (
    EmbeddingSimilarity,
    SimilarityProvider,
    rank_candidates,
    rank_candidates_with_source,
    suggest_names,
)
from .store import BurialStore, records_from
from .utils.normalize import canonicalize

log = get_logger(__name__)


def wants_suggestions(ctx: SearchContext) -> bool:
    """Did-you-mean applies to name searches and to free-text searches."""
    return ctx.has_name or not ctx.has_date


def _suggestions(
    ctx: SearchContext,
    results: list[ScoredCandidate],
    corpus: Iterable[tuple[str, str]],
    config: EngineConfig,
) -> list[str]:
    if results or not ctx.raw_query.strip() or not wants_suggestions(ctx):
        return []
    return suggest_names(ctx, corpus, config)


def _corpus_of(records: Sequence[BurialRecord]) -> list[tuple[str, str]]:
    return list(dict.fromkeys((r.first_name, r.last_name) for r in records))


def _response(
    ctx: SearchContext,
    results: list[ScoredCandidate],
    suggestions: list[str],
    pagination: Page | None = None,
    ai_enabled: bool = False,
) -> SearchResponse:
    return SearchResponse(
        context=ctx,
        results=results,
        suggestions=suggestions,
        interpretation=describe_context(ctx),
        pagination=pagination,
        ai_enabled=ai_enabled,
    )


def interpret_and_rank(
    query: str | None,
    candidates: Sequence[BurialRecord | dict],
    corpus: Iterable[tuple[str, str]] | None = None,
    today: date | None = None,
    config: EngineConfig = CONFIG,
) -> SearchResponse:
    """Parse ``query`` and rank ``candidates`` against it with keyword similarity.

    Pass the whole coarse-filtered candidate page; scoring needs every
    record's boost-eligible fields. ``corpus`` is the (first, last) name
    list used for suggestions when nothing ranks; it defaults to the
    candidates' own names.
    """
    ctx = parse_query(query, today=today)
    records = records_from(candidates)
    results = rank_candidates(ctx.raw_query, ctx, records, config)
    names = corpus if corpus is not None else _corpus_of(records)
    return _response(ctx, results, _suggestions(ctx, results, names, config))


async def interpret_and_rank_async(
    query: str | None,
    candidates: Sequence[BurialRecord | dict],
    provider: SimilarityProvider | None = None,
    corpus: Iterable[tuple[str, str]] | None = None,
    today: date | None = None,
    config: EngineConfig = CONFIG,
) -> SearchResponse:
    """``interpret_and_rank`` with an optional semantic similarity provider.

    With no provider, an ``EmbeddingSimilarity`` is used when embeddings
    are enabled in ``config``; its failures silently fall back to keyword
    similarity and only change ``ai_enabled`` in the response.
    """
    ctx = parse_query(query, today=today)
    records = records_from(candidates)

    owned: EmbeddingSimilarity | None = None
    if provider is None and config.embeddings_enabled:
        provider = owned = EmbeddingSimilarity(config)
    try:
        results, ai_enabled = await rank_candidates_with_source(ctx.raw_query, ctx, records, provider, config)
    finally:
        if owned is not None:
            await owned.close()

    names = corpus if corpus is not None else _corpus_of(records)
    return _response(ctx, results, _suggestions(ctx, results, names, config), ai_enabled=ai_enabled)


def search(
    query: str | None,
    store: BurialStore,
    page: int = 1,
    page_size: int | None = None,
    cemetery_id: str | None = None,
    today: date | None = None,
    rank: bool = True,
    config: EngineConfig = CONFIG,
) -> SearchResponse:
    """Full pipeline: parse, fetch one store page, rank it, suggest on empty.

    With ``rank=False``, or a blank query, the page is returned in store
    order with zero scores instead of being re-ranked.
    """
    ctx = parse_query(query, today=today)
    records, pagination = store.search(ctx, page=page, page_size=page_size, cemetery_id=cemetery_id)
    if rank and ctx.raw_query.strip():
        results = rank_candidates(ctx.raw_query, ctx, records, config)
    else:
        results = [ScoredCandidate(record=r, score=0.0, context=ctx) for r in records]
    suggestions = _suggestions(ctx, results, store.name_corpus(), config)
    log.debug(
        "search",
        page=pagination.page,
        candidates=len(records),
        results=len(results),
        suggestions=len(suggestions),
        intent=ctx.intent_type.value,
    )
    return _response(ctx, results, suggestions, pagination=pagination)


def autocomplete(
    prefix: str | None,
    store: BurialStore,
    cemetery_id: str | None = None,
    limit: int = 10,
) -> list[str]:
    """Name completions for a partially typed query."""
    names = store.autocomplete(canonicalize(prefix or ""), cemetery_id=cemetery_id, limit=limit)
    log.debug("autocomplete", prefix=prefix, suggestions=len(names))
    return names
