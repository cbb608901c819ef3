"""Tests for plot, place and relationship extraction."""

from __future__ import annotations

import pytest

from gravefinder.interpret.fields import (
    extract_cemetery,
    extract_location,
    extract_place_fields,
    extract_plot_number,
    extract_plot_type,
    extract_relationship,
)


class TestPlotNumber:
    @pytest.mark.parametrize(
        "text,plot",
        [
            ("plot 123", "123"),
            ("Plot A-12", "A-12"),
            ("grave #45", "45"),
            ("lot no. 7", "7"),
            ("niche B7", "B7"),
            ("puntod 88", "88"),
            ("A-12 plot", "A-12"),
            ("# 9", "9"),
        ],
    )
    def test_formats(self, text, plot):
        assert extract_plot_number(text) == plot

    def test_needs_a_digit(self):
        assert extract_plot_number("grave of maria") is None
        assert extract_plot_number("family plot") is None

    def test_year_before_grave_is_not_a_plot(self):
        assert extract_plot_number("died 2020 grave") is None


class TestPlotType:
    @pytest.mark.parametrize(
        "text,kind",
        [
            ("Santos family plot", "family"),
            ("single grave", "single"),
            ("private plot", "single"),
            ("buried in the lawn area", "lawn"),
            ("mausoleum", "mausoleum"),
        ],
    )
    def test_types(self, text, kind):
        assert extract_plot_type(text) == kind

    def test_none(self):
        assert extract_plot_type("John Smith") is None


class TestRelationship:
    @pytest.mark.parametrize(
        "text,kind",
        [
            ("my father", "father"),
            ("nanay ko", "mother"),
            ("anak na babae", "daughter"),
            ("his wife", "wife"),
            ("pamilya Santos", "family"),
            ("lolo ko", "grandfather"),
        ],
    )
    def test_bilingual(self, text, kind):
        assert extract_relationship(text) == kind

    def test_none(self):
        assert extract_relationship("John Smith") is None


class TestPlaces:
    def test_cemetery_before_keyword(self):
        assert extract_cemetery("who is buried at Manila North Cemetery") == "Manila North"

    def test_cemetery_after_burial_phrase(self):
        assert extract_cemetery("nailibing sa Loyola") == "Loyola"

    def test_filipino_cemetery(self):
        assert extract_cemetery("Sementeryo ng Paco") == "Paco"

    def test_location(self):
        assert extract_location("find John Smith in Manila") == "Manila"
        assert extract_location("hanap si Juan sa Cebu") == "Cebu"

    def test_month_is_not_a_location(self):
        assert extract_location("died in January") is None

    def test_lowercase_is_not_a_place(self):
        assert extract_location("died in the morning") is None


class TestPlaceFields:
    def test_location_only_without_cemetery(self):
        fields = extract_place_fields("John Smith at Manila North Cemetery")
        assert fields.cemetery_name == "Manila North"
        assert fields.location is None
        assert fields.claimed_phrases == ("Manila North",)

    def test_everything(self):
        fields = extract_place_fields("my father in Quezon City, plot 12, family plot")
        assert fields.plot_number == "12"
        assert fields.plot_type == "family"
        assert fields.location == "Quezon City"
        assert fields.relationship == "father"
