"""Burial records supplied by the store and their scored wrappers."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from .context import SearchContext


class BurialRecord(BaseModel):
    """One deceased person and where they are buried, as returned by the store."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    first_name: str = ""
    last_name: str = ""
    middle_name: str | None = None
    date_of_birth: date | None = None
    date_of_death: date | None = None
    plot_number: str | None = None
    plot_type: str | None = None
    cemetery_name: str | None = None
    cemetery_id: str | None = None
    burial_id: str | None = None
    plot_id: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def age_at_death(self) -> int | None:
        """Whole-year difference between birth and death years."""
        if self.date_of_birth is None or self.date_of_death is None:
            return None
        return self.date_of_death.year - self.date_of_birth.year

    def searchable_text(self) -> str:
        """Text the base similarity compares the query against."""
        parts = [
            self.full_name.lower(),
            self.plot_number or "",
            self.cemetery_name or "",
            str(self.date_of_death.year) if self.date_of_death else "",
            str(self.date_of_birth.year) if self.date_of_birth else "",
        ]
        return " ".join(p for p in parts if p)


class ScoredCandidate(BaseModel):
    """A record annotated with its relevance score for one query."""

    model_config = ConfigDict(frozen=True)

    record: BurialRecord
    score: float = Field(ge=0.0)
    context: SearchContext


class Page(BaseModel):
    """Pagination metadata for one page of store results."""

    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_results: int = Field(ge=0)

    @property
    def total_pages(self) -> int:
        return -(-self.total_results // self.page_size)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    def summary(self) -> dict:
        return {
            "page": self.page,
            "page_size": self.page_size,
            "total_results": self.total_results,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
        }


class SearchResponse(BaseModel):
    """Everything the HTTP boundary needs to answer one search."""

    context: SearchContext
    results: list[ScoredCandidate] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    interpretation: str = ""
    pagination: Page | None = None
    ai_enabled: bool = False
