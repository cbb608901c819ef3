"""Did-you-mean suggestions for searches that found nothing."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from ..config import CONFIG, EngineConfig
from ..models.context import SearchContext
from ..utils.name_variants import levenshtein_distance

logger = logging.getLogger(__name__)


def search_name_for(ctx: SearchContext) -> str:
    """The name the visitor typed, or the raw query when no name was found."""
    return (ctx.full_name or ctx.first_name or ctx.last_name or ctx.raw_query or "").strip().lower()


def suggest_names(
    ctx: SearchContext,
    corpus: Iterable[tuple[str, str]],
    config: EngineConfig = CONFIG,
    distance: Callable[[str, str], int] = levenshtein_distance,
) -> list[str]:
    """Near-miss "First Last" names from ``corpus``, closest first.

    A corpus name qualifies when its first or last name is within
    ``suggestion_max_distance`` edits of the search name, or the whole
    name within ``suggestion_max_full_distance``. Search names shorter
    than ``suggestion_min_query_length`` get no suggestions. Failures are
    logged and produce an empty list.

    Example:
        "Jihn Smath" against a corpus holding ("John", "Smith") -> ["John Smith"]
    """
    wanted = search_name_for(ctx)
    if len(wanted) < config.suggestion_min_query_length:
        return []

    try:
        best: dict[str, int] = {}
        for first, last in corpus:
            first_l, last_l = (first or "").lower(), (last or "").lower()
            full_l = f"{first_l} {last_l}".strip()
            d_first = distance(first_l, wanted) if first_l else None
            d_last = distance(last_l, wanted) if last_l else None
            d_full = distance(full_l, wanted)
            qualifies = (
                (d_first is not None and d_first <= config.suggestion_max_distance)
                or (d_last is not None and d_last <= config.suggestion_max_distance)
                or d_full <= config.suggestion_max_full_distance
            )
            if not qualifies:
                continue
            label = f"{first or ''} {last or ''}".strip()
            score = min(d for d in (d_first, d_last, d_full) if d is not None)
            if label not in best or score < best[label]:
                best[label] = score
    except Exception as e:
        logger.warning("Suggestion generation failed: %s", e)
        return []

    ranked = sorted(best.items(), key=lambda item: (item[1], item[0]))
    return [label for label, _ in ranked[: config.max_suggestions]]
