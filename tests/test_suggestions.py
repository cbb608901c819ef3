"""Tests for did-you-mean suggestions."""

from __future__ import annotations

from gravefinder.config import EngineConfig
from gravefinder.interpret import parse_query
from gravefinder.models.context import SearchContext
from gravefinder.ranking import suggest_names
from gravefinder.ranking.suggestions import search_name_for

CORPUS = [
    ("John", "Smith"),
    ("Jane", "Smith"),
    ("Maria", "Santos"),
    ("Juan", "dela Cruz"),
    ("Pedro", "Penduko"),
]


class TestSearchName:
    def test_prefers_full_name(self):
        ctx = parse_query("find Jihn Smath")
        assert search_name_for(ctx) == "jihn smath"

    def test_falls_back_to_raw_query(self):
        assert search_name_for(SearchContext(raw_query="  Smth ")) == "smth"


class TestSuggestNames:
    def test_typo_in_both_names(self):
        ctx = parse_query("Jihn Smath")
        assert "John Smith" in suggest_names(ctx, CORPUS)

    def test_closest_first(self):
        ctx = SearchContext(raw_query="jon smith", first_name="jon", last_name="smith", full_name="jon smith")
        suggestions = suggest_names(ctx, CORPUS)
        assert suggestions[0] == "John Smith"
        assert "Maria Santos" not in suggestions

    def test_single_name(self):
        ctx = SearchContext(raw_query="santso", first_name="santso", full_name="santso")
        assert suggest_names(ctx, CORPUS) == ["Maria Santos"]

    def test_short_query_gets_nothing(self):
        ctx = SearchContext(raw_query="jo", first_name="jo", full_name="jo")
        assert suggest_names(ctx, CORPUS) == []

    def test_capped(self):
        corpus = [("John", f"Smith{i}") for i in range(10)]
        ctx = SearchContext(raw_query="john", first_name="john", full_name="john")
        assert len(suggest_names(ctx, corpus, EngineConfig(max_suggestions=3))) == 3

    def test_duplicates_collapsed(self):
        ctx = SearchContext(raw_query="jon smith", first_name="jon", last_name="smith", full_name="jon smith")
        assert suggest_names(ctx, [("John", "Smith"), ("John", "Smith")]).count("John Smith") == 1

    def test_distance_failure_degrades_to_empty(self):
        def broken(a: str, b: str) -> int:
            raise RuntimeError("no distance primitive")

        ctx = parse_query("Jihn Smath")
        assert suggest_names(ctx, CORPUS, distance=broken) == []
