"""Exception hierarchy for gravefinder."""
from __future__ import annotations


class GravefinderError(Exception):
    """Base exception for all gravefinder errors."""


class EmbeddingError(GravefinderError):
    """The semantic-similarity provider failed (network, auth, rate limit, bad payload).

    Always caught inside the similarity layer; never reaches callers of the engine.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreError(GravefinderError):
    """A burial corpus could not be loaded."""
