"""Structured interpretation of one free-text burial search query."""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class IntentType(str, Enum):
    """Coarse category of what the visitor is trying to find."""

    FIND_PERSON = "find_person"
    FIND_LOCATION = "find_location"
    FIND_PLOT = "find_plot"
    FIND_FAMILY = "find_family"
    GENERAL = "general"


class _Bounds(BaseModel):
    """Inclusive integer bounds, normalized so the lower bound comes first."""

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _order_bounds(cls, data):
        if isinstance(data, dict):
            keys = list(cls.model_fields)
            lo, hi = data.get(keys[0]), data.get(keys[1])
            if isinstance(lo, int) and isinstance(hi, int) and lo > hi:
                data = {**data, keys[0]: hi, keys[1]: lo}
        return data


class YearRange(_Bounds):
    start: int
    end: int

    def __contains__(self, year: object) -> bool:
        return isinstance(year, int) and self.start <= year <= self.end


class MonthRange(_Bounds):
    start: int = Field(ge=1, le=12)
    end: int = Field(ge=1, le=12)

    def __contains__(self, month: object) -> bool:
        return isinstance(month, int) and self.start <= month <= self.end


class AgeRange(_Bounds):
    min: int = Field(ge=0)
    max: int = Field(ge=0)

    def __contains__(self, age: object) -> bool:
        return isinstance(age, int) and self.min <= age <= self.max


class SearchContext(BaseModel):
    """Immutable search constraints extracted from a query.

    Produced once per query by the context assembler. Optional fields are
    ``None`` when the query said nothing about them.
    """

    model_config = ConfigDict(frozen=True)

    raw_query: str = Field(description="Query exactly as received")

    # Names
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    full_name: str | None = Field(default=None, description="Lower-cased, space-joined name parts")
    first_name_variants: frozenset[str] = Field(default_factory=frozenset)
    last_name_variants: frozenset[str] = Field(default_factory=frozenset)
    soundex_first_name: str | None = None
    soundex_last_name: str | None = None
    possibly_reversed: bool = Field(
        default=False, description="First/last may be in surname-first order"
    )

    # Dates
    year_of_death: int | None = None
    year_of_birth: int | None = None
    birth_year_inferred: bool = Field(
        default=False, description="year_of_birth derived from age, not stated"
    )
    date_range: YearRange | None = None
    month_of_death: int | None = Field(default=None, ge=1, le=12)
    month_of_birth: int | None = Field(default=None, ge=1, le=12)
    month_range: MonthRange | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)
    specific_date: date | None = None

    # Age
    age_at_death: int | None = Field(default=None, ge=0)
    age_range: AgeRange | None = None

    # Place
    plot_number: str | None = None
    plot_type: str | None = None
    cemetery_name: str | None = None
    location: str | None = None
    relationship: str | None = None

    is_filipino_hint: bool = False
    intent_type: IntentType = IntentType.GENERAL

    @property
    def has_name(self) -> bool:
        return bool(self.first_name or self.last_name or self.full_name)

    @property
    def has_date(self) -> bool:
        return any(
            value is not None
            for value in (
                self.year_of_death,
                self.year_of_birth,
                self.date_range,
                self.month_of_death,
                self.month_of_birth,
                self.month_range,
                self.specific_date,
            )
        )

    def birth_year_window(self, tolerance: int = 2) -> tuple[int, int] | None:
        """Birth-year bounds for filtering.

        A stated birth year is exact; an age-derived one gets +/- ``tolerance``.
        """
        if self.year_of_birth is None:
            return None
        if self.birth_year_inferred:
            return (self.year_of_birth - tolerance, self.year_of_birth + tolerance)
        return (self.year_of_birth, self.year_of_birth)
