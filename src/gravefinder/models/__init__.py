"""Pydantic data models."""

from .context import AgeRange, IntentType, MonthRange, SearchContext, YearRange
from .record import BurialRecord, Page, ScoredCandidate, SearchResponse

__all__ = [
    "SearchContext",
    "IntentType",
    "YearRange",
    "MonthRange",
    "AgeRange",
    "BurialRecord",
    "ScoredCandidate",
    "SearchResponse",
    "Page",
]
