"""Tests for nickname expansion, Soundex and edit distance."""

from __future__ import annotations

import pytest

from gravefinder.utils.name_variants import (
    NICKNAME_TABLE,
    NicknameTable,
    edit_similarity,
    expand_nicknames,
    levenshtein_distance,
    soundex,
)


class TestSoundex:
    """American Soundex."""

    @pytest.mark.parametrize(
        "name,code",
        [
            ("Robert", "R163"),
            ("Rupert", "R163"),
            ("Smith", "S530"),
            ("Smyth", "S530"),
            ("Tymczak", "T522"),
            ("Ashcraft", "A261"),
            ("Lee", "L000"),
        ],
    )
    def test_known_codes(self, name, code):
        assert soundex(name) == code

    def test_case_insensitive(self):
        assert soundex("smith") == soundex("SMITH") == "S530"

    def test_always_four_characters(self):
        for name in ("A", "Robert", "Dela Cruz", "Bartholomew"):
            assert len(soundex(name)) == 4

    def test_no_letters(self):
        assert soundex("") == ""
        assert soundex("123") == ""

    def test_accents_folded(self):
        assert soundex("Peña") == soundex("Pena")


class TestLevenshtein:
    def test_classic_examples(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("bornd", "born") == 1
        assert levenshtein_distance("john", "jihn") == 1

    def test_empty_strings(self):
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3
        assert levenshtein_distance("", "") == 0

    def test_symmetric(self):
        assert levenshtein_distance("santos", "santo") == levenshtein_distance("santo", "santos")

    def test_edit_similarity(self):
        assert edit_similarity("abc", "abc") == 1.0
        assert edit_similarity("", "") == 1.0
        assert edit_similarity("abcd", "abcx") == pytest.approx(0.75)


class TestNicknameTable:
    """Bidirectional, read-only alias lookup."""

    def test_forward_lookup(self):
        assert NICKNAME_TABLE.formal_names("Pepe") == ("jose", "joseph")

    def test_reverse_lookup(self):
        assert "bob" in NICKNAME_TABLE.nicknames("robert")

    def test_contains(self):
        assert "bob" in NICKNAME_TABLE
        assert "Roberto" in NICKNAME_TABLE
        assert "zzz" not in NICKNAME_TABLE
        assert 42 not in NICKNAME_TABLE

    def test_read_only(self):
        table = NicknameTable({"al": ("albert",)})
        with pytest.raises(TypeError):
            table._forward["al"] = ("alfred",)


class TestExpandNicknames:
    def test_formal_name_expands_to_nicknames(self):
        assert expand_nicknames("Robert") == ["Robert", "robert", "Bob", "Roberto", "Bobby", "Rob"]

    def test_symmetric(self):
        assert "Bob" in expand_nicknames("Robert")
        assert "Robert" in expand_nicknames("Bob")

    def test_filipino_nickname(self):
        variants = expand_nicknames("pepe")
        assert "jose" in variants
        assert "joseph" in variants

    def test_unknown_name_keeps_original_and_normalized(self):
        assert expand_nicknames("Xyzzy") == ["Xyzzy", "xyzzy"]

    def test_deduplicated(self):
        variants = expand_nicknames("bob")
        assert len(variants) == len(set(variants))

    def test_blank(self):
        assert expand_nicknames("") == []
        assert expand_nicknames("   ") == []
