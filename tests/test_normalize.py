"""Tests for query normalization."""

from __future__ import annotations

from gravefinder.utils.normalize import (
    MONTH_NAMES,
    canonicalize,
    normalize_name,
    normalize_query,
    normalize_text,
    remove_filler_words,
    strip_conversational_prefixes,
)


class TestNormalizeText:
    """Accent folding and punctuation unification."""

    def test_strips_diacritics(self):
        assert normalize_text("Peñaflor") == "penaflor"
        assert normalize_text("José Rizal") == "jose rizal"

    def test_unifies_quotes_and_dashes(self):
        assert canonicalize("O’Brien") == "O'Brien"
        assert canonicalize("1990–2000") == "1990-2000"

    def test_collapses_whitespace(self):
        assert normalize_text("  Maria   Santos ") == "maria santos"

    def test_empty(self):
        assert normalize_text("") == ""
        assert normalize_name(None) == ""


class TestConversationalPrefixes:
    """Leading scaffolding is removed, nested forms included."""

    def test_single_prefix(self):
        assert strip_conversational_prefixes("can you find maria") == "find maria"

    def test_nested_prefixes(self):
        assert strip_conversational_prefixes("please can you find maria") == "find maria"
        assert strip_conversational_prefixes("can you please hanap si juan") == "hanap si juan"

    def test_filipino_prefix(self):
        assert strip_conversational_prefixes("pwede mo ba hanapin si jose") == "hanapin si jose"

    def test_unmatched_passes_through(self):
        assert strip_conversational_prefixes("john smith") == "john smith"


class TestFillerWords:
    def test_removes_scattered_fillers(self):
        assert remove_filler_words("um where po is yung lolo") == "where is lolo"

    def test_removes_multiword_filler(self):
        assert remove_filler_words("alam mo ba si Juan") == "si Juan"

    def test_keeps_name_containing_filler_letters(self):
        # "Pola" and "Rina" contain filler syllables but are whole words
        assert remove_filler_words("Pola Rina") == "Pola Rina"

    def test_name_like_particles(self):
        assert remove_filler_words("sana makita ko si Juan din") == "makita ko si Juan"
        assert remove_filler_words("Sana makita ko si Juan") == "makita ko si Juan"
        assert remove_filler_words("find Sana Reyes") == "find Sana Reyes"
        assert remove_filler_words("where is Ho Chi") == "where is Ho Chi"


class TestNormalizeQuery:
    """The two canonical views produced for the extractors."""

    def test_cased_and_lowered_views(self):
        q = normalize_query("Can you find Maria Santos po")
        assert q.original == "Can you find Maria Santos po"
        assert q.cased == "Can you find Maria Santos"
        assert q.lowered == "find maria santos"

    def test_none_is_empty(self):
        q = normalize_query(None)
        assert q.original == ""
        assert q.is_empty

    def test_whitespace_only_is_empty(self):
        assert normalize_query("   ").is_empty


def test_month_table_is_bilingual():
    assert MONTH_NAMES["january"] == 1
    assert MONTH_NAMES["hunyo"] == 6
    assert MONTH_NAMES["sept"] == 9
    assert MONTH_NAMES["disyembre"] == 12
