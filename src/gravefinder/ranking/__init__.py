"""Relevance ranking of candidate burial records."""

from .scorer import (
    apply_threshold,
    field_boosts,
    name_boost,
    rank_candidates,
    rank_candidates_async,
    rank_candidates_with_source,
    score_candidate,
    threshold_for,
)
from .similarity import (
    EmbeddingSimilarity,
    KeywordSimilarity,
    SimilarityProvider,
    cosine_similarity,
)
from .suggestions import suggest_names

__all__ = [
    "field_boosts",
    "name_boost",
    "score_candidate",
    "apply_threshold",
    "threshold_for",
    "rank_candidates",
    "rank_candidates_async",
    "rank_candidates_with_source",
    "SimilarityProvider",
    "KeywordSimilarity",
    "EmbeddingSimilarity",
    "cosine_similarity",
    "suggest_names",
]
