"""Tests for date, age and time-expression extraction."""

from __future__ import annotations

from datetime import date

import pytest

from gravefinder.interpret.dates import (
    classify_year_role,
    extract_age,
    extract_dates,
    extract_full_date,
    month_only,
    year_only,
)

TODAY = date(2026, 10, 19)


def dates_of(text: str):
    return extract_dates(text, today=TODAY)


class TestShortCircuits:
    def test_year_only(self):
        assert year_only("2020") == 2020
        assert year_only(" 1955 ") == 1955

    def test_year_only_bounds(self):
        assert year_only("1899") is None
        assert year_only("2100") is None
        assert year_only("died 2020") is None

    def test_month_only(self):
        assert month_only("January") == 1
        assert month_only("disyembre") == 12
        assert month_only("Sept.") == 9
        assert month_only("January 2020") is None


class TestFullDates:
    @pytest.mark.parametrize(
        "text",
        [
            "died 2020-01-15",
            "died 01/15/2020",
            "died 15/01/2020",
            "died 15-01-2020",
            "died 15 January 2020",
            "died January 15, 2020",
            "namatay 15 Enero 2020",
        ],
    )
    def test_formats(self, text):
        fields = dates_of(text)
        assert fields.specific_date == date(2020, 1, 15)
        assert fields.year_of_death == 2020
        assert fields.month_of_death == 1
        assert fields.day_of_month == 15

    def test_invalid_calendar_date_yields_no_date(self):
        fields = dates_of("died 2021-02-30")
        assert fields.specific_date is None
        assert fields.day_of_month is None
        assert extract_full_date("30 February 2021") is None


class TestMonthsAndYears:
    def test_month_range_is_ordered(self):
        assert dates_of("January to March").month_range == (1, 3)
        assert dates_of("marso hanggang enero").month_range == (1, 3)

    def test_month_year(self):
        fields = dates_of("died March 2019")
        assert (fields.month_of_death, fields.year_of_death) == (3, 2019)

    def test_month_year_after_birth_keyword(self):
        fields = dates_of("born March 1950")
        assert (fields.month_of_birth, fields.year_of_birth) == (3, 1950)
        assert fields.year_of_death is None

    def test_context_month(self):
        assert dates_of("died in January").month_of_death == 1
        assert dates_of("born in March").month_of_birth == 3

    def test_name_starting_with_month_abbreviation_is_not_a_range(self):
        assert dates_of("Jan Tomar").month_range is None
        assert dates_of("Jan-Mar").month_range == (1, 3)
        assert dates_of("jan thru mar").month_range == (1, 3)

    def test_may_as_a_verb_is_not_a_month(self):
        fields = dates_of("jiro died, may be 20 years old")
        assert fields.month_of_death is None
        assert fields.age_at_death == 20
        assert dates_of("died, may 20 years old").month_of_death is None

    def test_may_next_to_a_date_word_is_a_month(self):
        assert dates_of("died in may").month_of_death == 5
        assert dates_of("died may 5").month_of_death == 5
        assert dates_of("namatay noong Mayo").month_of_death == 5

    def test_month_far_from_keyword_ignored(self):
        assert dates_of("born to a big family in the old town of march").month_of_birth is None

    def test_bare_year_defaults_to_death(self):
        assert dates_of("Maria Santos 2020").year_of_death == 2020

    def test_bare_year_birth_keyword(self):
        fields = dates_of("born 1950")
        assert fields.year_of_birth == 1950
        assert fields.year_of_death is None

    def test_bare_year_typo_keyword(self):
        assert dates_of("bornd 1950").year_of_birth == 1950
        assert dates_of("borm 1950").year_of_birth == 1950

    def test_two_years_form_a_range(self):
        fields = dates_of("born 1950 died 2020")
        assert fields.date_range == (1950, 2020)

    @pytest.mark.parametrize(
        "text",
        ["between 1990 and 2000", "from 1990 to 2000", "mula 1990 hanggang 2000", "1990-2000"],
    )
    def test_year_range_phrases(self, text):
        assert dates_of(text).date_range == (1990, 2000)

    def test_nearest_keyword_wins(self):
        text = "born in Manila, died 1990"
        assert classify_year_role(text, 1990) == "death"
        assert classify_year_role("died in Cebu, born 1990", 1990) == "birth"


class TestAges:
    @pytest.mark.parametrize(
        "text,age",
        [
            ("about 20 age", 20),
            ("around 25 years", 25),
            ("aged 25", 25),
            ("died at 80", 80),
            ("20 years old", 20),
            ("30 taong gulang", 30),
            ("mga 40 taon", 40),
            ("siguro 30", 30),
        ],
    )
    def test_age_phrases(self, text, age):
        assert extract_age(text) == age

    def test_plot_number_is_not_an_age(self):
        assert extract_age("plot 123") is None
        assert extract_age("the plot number is 45") is None

    def test_age_with_death_year_infers_birth_year(self):
        fields = dates_of("died 2020 aged 80")
        assert fields.year_of_death == 2020
        assert fields.age_at_death == 80
        assert fields.year_of_birth == 1940
        assert fields.birth_year_inferred

    def test_age_without_death_year_infers_nothing(self):
        fields = dates_of("about 20 age")
        assert fields.age_at_death == 20
        assert fields.year_of_birth is None

    def test_explicit_birth_year_not_overridden(self):
        fields = dates_of("born March 1950 died at 80")
        assert fields.year_of_birth == 1950
        assert not fields.birth_year_inferred

    def test_age_range(self):
        assert dates_of("between 20 and 30").age_range == (20, 30)
        assert dates_of("ages 40 to 35").age_range == (35, 40)

    def test_age_range_with_death_year_implies_birth_years(self):
        fields = dates_of("died 2020 aged 20 to 30")
        assert fields.age_range == (20, 30)
        assert fields.date_range == (1990, 2000)


class TestRelativeTime:
    def test_last_year(self):
        assert dates_of("died last year").year_of_death == 2025
        assert dates_of("namatay noong nakaraang taon").year_of_death == 2025

    def test_this_year(self):
        assert dates_of("this year").year_of_death == 2026

    def test_years_ago_is_not_an_age(self):
        fields = dates_of("died 5 years ago")
        assert fields.year_of_death == 2021
        assert fields.age_at_death is None

    def test_filipino_years_ago(self):
        fields = dates_of("3 taon na ang nakaraan")
        assert fields.year_of_death == 2023
        assert fields.age_at_death is None

    def test_born_last_year(self):
        fields = dates_of("born last year")
        assert fields.year_of_birth == 2025
        assert fields.year_of_death is None

    def test_last_month(self):
        fields = dates_of("died last month")
        assert (fields.year_of_death, fields.month_of_death) == (2026, 9)

    def test_recently(self):
        assert dates_of("recently").date_range == (2025, 2026)

    def test_explicit_year_wins(self):
        assert dates_of("died 2010, last year they moved").year_of_death == 2010


class TestDecades:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("died in the 90s", (1990, 1999)),
            ("the '80s", (1980, 1989)),
            ("1980s", (1980, 1989)),
            ("the 2000s", (2000, 2009)),
            ("the 20s", (2020, 2029)),
            ("dekada nobenta", (1990, 1999)),
            ("dekada 70", (1970, 1979)),
        ],
    )
    def test_decades(self, text, expected):
        assert dates_of(text).date_range == expected

    def test_age_decade(self):
        fields = dates_of("died in his 20s")
        assert fields.age_range == (20, 29)
        assert fields.date_range is None
