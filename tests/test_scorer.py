"""Tests for relevance scoring, thresholds and ranking."""

from __future__ import annotations

from datetime import date

import pytest

from gravefinder.config import EngineConfig
from gravefinder.interpret import parse_query
from gravefinder.models.context import IntentType, SearchContext
from gravefinder.models.record import BurialRecord, ScoredCandidate
from gravefinder.ranking import (
    KeywordSimilarity,
    apply_threshold,
    field_boosts,
    name_boost,
    rank_candidates,
    rank_candidates_async,
    rank_candidates_with_source,
    score_candidate,
)
from gravefinder.ranking.scorer import FIRST_NAME_WEIGHTS, LAST_NAME_WEIGHTS


def record(**kwargs) -> BurialRecord:
    defaults = {"first_name": "John", "last_name": "Smith"}
    return BurialRecord(**{**defaults, **kwargs})


@pytest.fixture
def records():
    return [
        record(date_of_death=date(2020, 3, 4), date_of_birth=date(1940, 1, 1), plot_number="A-12"),
        record(first_name="Jon", last_name="Smyth", date_of_death=date(2019, 1, 1)),
        record(first_name="Maria", last_name="Santos", date_of_death=date(2001, 6, 1)),
    ]


class TestNameBoost:
    def test_tiers(self):
        assert name_boost("john", "John", FIRST_NAME_WEIGHTS, None) == 0.7
        assert name_boost("jo", "John", FIRST_NAME_WEIGHTS, None) == 0.4
        assert name_boost("mit", "Smith", LAST_NAME_WEIGHTS, None) == 0.3
        assert name_boost("smyth", "Smith", LAST_NAME_WEIGHTS, None) == 0.35
        assert name_boost("smoth", "Smith", LAST_NAME_WEIGHTS, None) == 0.35
        assert name_boost("xyz", "Smith", LAST_NAME_WEIGHTS, None) == 0.0

    def test_soundex_bonus(self):
        assert name_boost("smyth", "Smith", LAST_NAME_WEIGHTS, "S530") == pytest.approx(0.35 + 0.22)

    def test_missing_values(self):
        assert name_boost("", "Smith", LAST_NAME_WEIGHTS, None) == 0.0
        assert name_boost("smith", "", LAST_NAME_WEIGHTS, None) == 0.0


class TestFieldBoosts:
    def test_full_name_and_death_year(self):
        ctx = parse_query("John Smith died 2020")
        boosts = field_boosts(ctx, record(date_of_death=date(2020, 5, 1)))
        assert boosts["full_name"] == 1.0
        assert boosts["first_name"] == pytest.approx(0.7 + 0.18)
        assert boosts["last_name"] == pytest.approx(0.8 + 0.22)
        assert boosts["death_year"] == 0.6

    def test_only_nonzero_boosts_reported(self):
        ctx = parse_query("John Smith died 2020")
        boosts = field_boosts(ctx, record(first_name="Maria", last_name="Santos"))
        assert "full_name" not in boosts
        assert "death_year" not in boosts

    def test_single_name_matches_surname(self):
        ctx = SearchContext(raw_query="smith", first_name="smith", full_name="smith")
        boosts = field_boosts(ctx, record())
        assert boosts["first_name"] == 0.8

    def test_plot_exact_and_partial(self):
        ctx = SearchContext(raw_query="plot 12", plot_number="12", intent_type=IntentType.FIND_PLOT)
        assert field_boosts(ctx, record(plot_number="12"))["plot_number"] == 1.5
        assert field_boosts(ctx, record(plot_number="A-12"))["plot_number"] == 0.8

    def test_dates_and_ages(self):
        ctx = SearchContext(
            raw_query="q",
            specific_date=date(2020, 3, 4),
            month_of_death=3,
            day_of_month=4,
            year_of_birth=1940,
            age_at_death=79,
        )
        boosts = field_boosts(ctx, record(date_of_death=date(2020, 3, 4), date_of_birth=date(1940, 1, 1)))
        assert boosts["specific_date"] == 1.2
        assert boosts["death_month"] == 0.5
        assert boosts["day_of_month"] == 0.3
        assert boosts["birth_year"] == 0.35
        assert boosts["age"] == 0.25

    def test_family_surname(self):
        ctx = SearchContext(
            raw_query="Santos family plot",
            first_name="Maria",
            last_name="Santos",
            intent_type=IntentType.FIND_FAMILY,
        )
        boosts = field_boosts(ctx, record(first_name="Pedro", last_name="Santos"))
        assert boosts["family"] == 0.3


class TestScoreCandidate:
    def test_plot_intent_multiplier(self):
        ctx = SearchContext(raw_query="plot 12", plot_number="12", intent_type=IntentType.FIND_PLOT)
        assert score_candidate(ctx, record(plot_number="12"), 0.5) == pytest.approx((0.5 + 1.5) * 1.2)

    def test_extra_signal_strictly_increases_score(self):
        ctx = parse_query("John Smith plot 7")
        with_plot = score_candidate(ctx, record(plot_number="7"), 0.4)
        without_plot = score_candidate(ctx, record(plot_number="99"), 0.4)
        assert with_plot > without_plot


class TestThreshold:
    def candidate(self, ctx, score):
        return ScoredCandidate(record=record(), score=score, context=ctx)

    def test_generic_threshold_excludes_009(self):
        ctx = SearchContext(raw_query="something")
        assert apply_threshold([self.candidate(ctx, 0.09)], ctx) == []

    def test_plot_threshold_includes_031(self):
        ctx = SearchContext(raw_query="plot 1", plot_number="1", intent_type=IntentType.FIND_PLOT)
        kept = apply_threshold([self.candidate(ctx, 0.31), self.candidate(ctx, 0.29)], ctx)
        assert [c.score for c in kept] == [0.31]

    def test_cap_and_stable_order(self):
        ctx = SearchContext(raw_query="q")
        scored = [
            ScoredCandidate(record=record(first_name=f"P{i}"), score=0.5, context=ctx) for i in range(5)
        ]
        kept = apply_threshold(scored, ctx, EngineConfig(max_results=3))
        assert [c.record.first_name for c in kept] == ["P0", "P1", "P2"]


class TestRankCandidates:
    def test_best_match_first(self, records):
        ctx = parse_query("John Smith died 2020")
        ranked = rank_candidates(ctx.raw_query, ctx, records)
        assert ranked[0].record.first_name == "John"
        assert [c.score for c in ranked] == sorted((c.score for c in ranked), reverse=True)

    def test_deterministic(self, records):
        ctx = parse_query("John Smith died 2020")
        first = rank_candidates(ctx.raw_query, ctx, records)
        second = rank_candidates(ctx.raw_query, ctx, records)
        assert [(c.record, c.score) for c in first] == [(c.record, c.score) for c in second]

    def test_no_candidates(self):
        ctx = parse_query("John Smith")
        assert rank_candidates(ctx.raw_query, ctx, []) == []

    @pytest.mark.asyncio
    async def test_async_matches_sync_with_keyword_provider(self, records):
        ctx = parse_query("John Smith died 2020")
        sync = rank_candidates(ctx.raw_query, ctx, records)
        result = await rank_candidates_async(ctx.raw_query, ctx, records, KeywordSimilarity())
        assert [(c.record, c.score) for c in result] == [(c.record, c.score) for c in sync]

    @pytest.mark.asyncio
    async def test_keyword_provider_is_not_semantic(self, records):
        ctx = parse_query("John Smith")
        results, semantic = await rank_candidates_with_source(ctx.raw_query, ctx, records, KeywordSimilarity())
        assert results
        assert not semantic
        assert await rank_candidates_with_source(ctx.raw_query, ctx, []) == ([], False)
