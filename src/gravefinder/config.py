"""Engine configuration read from the environment.

Every field reads its environment variable when an ``EngineConfig`` is
constructed, so a ``.env`` file loaded beforehand is honoured. ``CONFIG``
is the instance built at import time; callers that need different
settings construct their own ``EngineConfig`` and pass it down.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field


def _f(name: str, default: float):
    def read() -> float:
        try:
            return float(os.getenv(name, default))
        except ValueError:
            return default

    return field(default_factory=read)


def _i(name: str, default: int):
    def read() -> int:
        try:
            return int(os.getenv(name, default))
        except ValueError:
            return default

    return field(default_factory=read)


def _b(name: str, default: bool):
    def read() -> bool:
        raw = os.getenv(name)
        if raw is None:
            return default
        return raw.strip().lower() in {"1", "true", "yes", "on"}

    return field(default_factory=read)


def _s(name: str, default: str | None):
    return field(default_factory=lambda: os.getenv(name, default))


@dataclass(frozen=True)
class EngineConfig:
    # Ranking
    default_threshold: float = _f("GRAVEFINDER_DEFAULT_THRESHOLD", 0.1)
    plot_threshold: float = _f("GRAVEFINDER_PLOT_THRESHOLD", 0.3)
    max_results: int = _i("GRAVEFINDER_MAX_RESULTS", 50)
    plot_intent_multiplier: float = _f("GRAVEFINDER_PLOT_INTENT_MULTIPLIER", 1.2)

    # Did-you-mean
    max_suggestions: int = _i("GRAVEFINDER_MAX_SUGGESTIONS", 5)
    suggestion_max_distance: int = _i("GRAVEFINDER_SUGGESTION_MAX_DISTANCE", 3)
    suggestion_max_full_distance: int = _i("GRAVEFINDER_SUGGESTION_MAX_FULL_DISTANCE", 4)
    suggestion_min_query_length: int = _i("GRAVEFINDER_SUGGESTION_MIN_QUERY", 3)

    # Age statements are imprecise; inferred birth years get a +/- band
    age_tolerance_years: int = _i("GRAVEFINDER_AGE_TOLERANCE", 2)

    # Optional embedding provider
    embeddings_enabled: bool = _b("GRAVEFINDER_EMBEDDINGS_ENABLED", False)
    embeddings_url: str = _s("GRAVEFINDER_EMBEDDINGS_URL", "https://api.x.ai/v1/embeddings")
    embeddings_model: str = _s("GRAVEFINDER_EMBEDDINGS_MODEL", "grok-1")
    embeddings_api_key: str | None = _s("XAI_API_KEY", None)
    embeddings_timeout: float = _f("GRAVEFINDER_EMBEDDINGS_TIMEOUT", 5.0)

    # Pagination (reference store)
    page_size: int = _i("GRAVEFINDER_PAGE_SIZE", 20)
    max_page_size: int = _i("GRAVEFINDER_MAX_PAGE_SIZE", 100)


CONFIG = EngineConfig()
