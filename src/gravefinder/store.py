"""Reference burial store: coarse filtering, ordering and pagination.

The ranking engine only needs a candidate page per query; a production
deployment puts a database behind ``BurialStore``. ``InMemoryBurialStore``
applies the same coarse filters over records loaded from JSON or CSV, and
is what the CLI and tests run against.
"""
from __future__ import annotations

import csv
import json
import logging
import re
from collections.abc import Iterable, Sequence
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from .config import CONFIG, EngineConfig
from .exceptions import StoreError
from .interpret.vocabulary import VOCABULARY
from .models.context import SearchContext
from .models.record import BurialRecord, Page
from .utils.normalize import normalize_text

logger = logging.getLogger(__name__)


@runtime_checkable
class BurialStore(Protocol):
    """What the engine needs from a backing store."""

    def search(
        self,
        ctx: SearchContext,
        page: int = 1,
        page_size: int | None = None,
        cemetery_id: str | None = None,
    ) -> tuple[list[BurialRecord], Page]:
        """Return one page of coarse-filtered candidates and its metadata."""
        ...

    def name_corpus(self) -> list[tuple[str, str]]:
        """Every (first_name, last_name) pair, for did-you-mean suggestions."""
        ...

    def autocomplete(self, prefix: str | None, cemetery_id: str | None = None, limit: int = 10) -> list[str]:
        """Display names of people whose name starts with ``prefix``."""
        ...


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle.lower() in haystack.lower()


def _variants(base: str | None, variants: Iterable[str]) -> list[str]:
    if not base:
        return []
    return list(dict.fromkeys([base.lower(), *(v.lower() for v in variants)]))


@lru_cache(maxsize=256)
def cleaned_name_query(raw: str) -> str:
    """The raw query with every keyword, number and date word removed.

    "find Juan died 2020 po" -> "juan"
    """
    tokens = (t.strip(".,;:!?\"()'") for t in re.split(r"[\s\-/]+", normalize_text(raw)))
    return " ".join(
        t for t in tokens if t and (VOCABULARY.is_likely_name(t) or VOCABULARY.is_surname_particle(t))
    )


def matches_name(ctx: SearchContext, record: BurialRecord) -> bool:
    """Substring name match, widened by nickname variants and reversed order.

    Records missed by the extracted name parts still match when the
    cleaned query is part of their first, last or "first last" name.
    """
    if _matches_name_parts(ctx, record):
        return True
    clean = cleaned_name_query(ctx.raw_query)
    fn, ln = record.first_name, record.last_name
    return bool(clean) and any(_contains(value, clean) for value in (fn, ln, f"{fn} {ln}"))


def _matches_name_parts(ctx: SearchContext, record: BurialRecord) -> bool:
    fn, ln = record.first_name, record.last_name
    full = f"{fn} {record.middle_name or ''} {ln}"

    if ctx.first_name and ctx.last_name:
        firsts = _variants(ctx.first_name, ctx.first_name_variants)
        lasts = _variants(ctx.last_name, ctx.last_name_variants)
        if any(_contains(fn, f) and _contains(ln, ctx.last_name) for f in firsts):
            return True
        if any(_contains(fn, ctx.first_name) and _contains(ln, last) for last in lasts):
            return True
        # "Smith John", "dela Cruz Juan"
        if _contains(fn, ctx.last_name) and _contains(ln, ctx.first_name):
            return True
        # Middle name optional: "John Smith" finds "John Michael Smith"
        return _contains(full, ctx.first_name) and _contains(full, ctx.last_name)

    single = ctx.first_name or ctx.last_name
    if single:
        pool = ctx.first_name_variants if ctx.first_name else ctx.last_name_variants
        return any(
            _contains(fn, term) or _contains(ln, term) or _contains(f"{fn} {ln}", term)
            for term in _variants(single, pool)
        )
    return True


def _year_between(d: date | None, start: int, end: int) -> bool:
    return d is not None and start <= d.year <= end


def matches_dates(ctx: SearchContext, record: BurialRecord, tolerance: int = 2) -> bool:
    death, birth = record.date_of_death, record.date_of_birth

    if ctx.date_range:
        lo, hi = ctx.date_range.start, ctx.date_range.end
        if not (_year_between(death, lo, hi) or _year_between(birth, lo, hi)):
            return False
    elif ctx.year_of_death:
        if death is None or death.year != ctx.year_of_death:
            return False
    elif ctx.year_of_birth:
        lo, hi = ctx.birth_year_window(tolerance)
        if not _year_between(birth, lo, hi):
            return False

    if ctx.month_of_death and (death is None or death.month != ctx.month_of_death):
        return False
    if ctx.month_of_birth and (birth is None or birth.month != ctx.month_of_birth):
        return False
    if ctx.month_range and (death is None or death.month not in ctx.month_range):
        return False
    if ctx.day_of_month and (death is None or death.day != ctx.day_of_month):
        return False
    if ctx.specific_date and death != ctx.specific_date:
        return False
    return True


def matches_fallback(ctx: SearchContext, record: BurialRecord) -> bool:
    """Filter for queries with neither a name nor a date."""
    if ctx.plot_number:
        return _contains(record.plot_number, ctx.plot_number)
    if ctx.cemetery_name:
        return _contains(record.cemetery_name, ctx.cemetery_name)
    query = ctx.raw_query.strip()
    if not query:
        return True
    return any(
        _contains(value, query)
        for value in (record.first_name, record.last_name, record.full_name, record.plot_number)
    )


def match_quality(ctx: SearchContext, record: BurialRecord) -> int:
    """1 (exact full name) .. 9 (no name relation); lower sorts first."""
    first = (ctx.first_name or "").lower()
    last = (ctx.last_name or "").lower()
    wanted_full = f"{first} {last}".strip() if first and last else (first or last)
    fn, ln = record.first_name.lower(), record.last_name.lower()

    if wanted_full and record.full_name.lower() == wanted_full:
        return 1
    if first and last and fn == first and ln == last:
        return 2
    if first and fn == first:
        return 3
    if last and ln == last:
        return 4
    if first and fn.startswith(first):
        return 5
    if last and ln.startswith(last):
        return 6
    if first and first in fn:
        return 7
    if last and last in ln:
        return 8
    return 9


def _order_key(ctx: SearchContext, record: BurialRecord) -> tuple:
    death = record.date_of_death
    # Most recent death first, undated records last
    recency = -death.toordinal() if death else float("inf")
    quality = match_quality(ctx, record) if ctx.has_name else 0
    return (quality, recency, record.last_name.lower(), record.first_name.lower())


class InMemoryBurialStore:
    """Burial records held in memory."""

    def __init__(self, records: Iterable[BurialRecord] = (), config: EngineConfig = CONFIG) -> None:
        self.records: list[BurialRecord] = list(records)
        self.config = config

    def __len__(self) -> int:
        return len(self.records)

    @classmethod
    def from_rows(cls, rows: Iterable[dict], config: EngineConfig = CONFIG) -> InMemoryBurialStore:
        records: list[BurialRecord] = []
        for i, row in enumerate(rows, start=1):
            # CSV leaves missing values as ""
            cleaned = {k: (v if v != "" else None) for k, v in row.items() if k}
            try:
                records.append(BurialRecord.model_validate(cleaned))
            except ValidationError as e:
                raise StoreError(f"Invalid burial record #{i}: {e.errors()[0]['msg']}") from e
        return cls(records, config)

    @classmethod
    def load(cls, path: str | Path, config: EngineConfig = CONFIG) -> InMemoryBurialStore:
        """Load a corpus from a ``.json`` (list of objects) or ``.csv`` file."""
        path = Path(path)
        try:
            if path.suffix.lower() == ".csv":
                with open(path, newline="", encoding="utf-8") as f:
                    rows = list(csv.DictReader(f))
            elif path.suffix.lower() == ".json":
                with open(path, encoding="utf-8") as f:
                    rows = json.load(f)
            else:
                raise StoreError(f"Unsupported corpus format: {path.suffix or path.name}")
        except OSError as e:
            raise StoreError(f"Cannot read corpus {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise StoreError(f"Invalid JSON in {path}: {e}") from e

        if isinstance(rows, dict):
            rows = rows.get("records", [])
        if not isinstance(rows, list):
            raise StoreError(f"Corpus {path} must hold a list of records")
        store = cls.from_rows(rows, config)
        logger.info("Loaded %d burial records from %s", len(store), path)
        return store

    def clamp_paging(self, page: int, page_size: int | None) -> tuple[int, int]:
        size = self.config.page_size if page_size is None else page_size
        return max(1, page), min(max(1, size), self.config.max_page_size)

    def filter(self, ctx: SearchContext, cemetery_id: str | None = None) -> list[BurialRecord]:
        """Every record passing the coarse filters, in match-quality order."""
        if ctx.has_name:
            candidates = [r for r in self.records if matches_name(ctx, r)]
        elif not ctx.has_date:
            candidates = [r for r in self.records if matches_fallback(ctx, r)]
        else:
            candidates = list(self.records)

        tolerance = self.config.age_tolerance_years
        candidates = [r for r in candidates if matches_dates(ctx, r, tolerance)]
        if cemetery_id:
            candidates = [r for r in candidates if r.cemetery_id == cemetery_id]
        return sorted(candidates, key=lambda r: _order_key(ctx, r))

    def search(
        self,
        ctx: SearchContext,
        page: int = 1,
        page_size: int | None = None,
        cemetery_id: str | None = None,
    ) -> tuple[list[BurialRecord], Page]:
        page, page_size = self.clamp_paging(page, page_size)
        matched = self.filter(ctx, cemetery_id)
        offset = (page - 1) * page_size
        return (
            matched[offset : offset + page_size],
            Page(page=page, page_size=page_size, total_results=len(matched)),
        )

    def name_corpus(self) -> list[tuple[str, str]]:
        return list(dict.fromkeys((r.first_name, r.last_name) for r in self.records))

    def autocomplete(self, prefix: str | None, cemetery_id: str | None = None, limit: int = 10) -> list[str]:
        """Name completions for a search box.

        A person is offered when their first, last or "first last" name
        starts with ``prefix`` (case-insensitive). Each person appears once
        as "first middle last", ordered by last then first name. Prefixes
        shorter than two characters give nothing.
        """
        term = (prefix or "").strip().lower()
        if len(term) < 2:
            return []
        people = {
            (r.last_name, r.first_name, r.middle_name or "")
            for r in self.records
            if (not cemetery_id or r.cemetery_id == cemetery_id)
            and any(
                name.lower().startswith(term)
                for name in (r.first_name, r.last_name, f"{r.first_name} {r.last_name}")
            )
        }
        ordered = sorted(people, key=lambda p: (p[0].lower(), p[1].lower(), p[2].lower()))
        return [" ".join(part for part in (first, middle, last) if part) for last, first, middle in ordered[:limit]]


def records_from(items: Sequence[BurialRecord | dict]) -> list[BurialRecord]:
    """Accept plain dicts wherever records are expected."""
    return [item if isinstance(item, BurialRecord) else BurialRecord.model_validate(item) for item in items]
