"""Gravefinder text utilities."""

from .name_variants import (
    NICKNAME_TABLE,
    NICKNAMES,
    NicknameTable,
    edit_similarity,
    expand_nicknames,
    levenshtein_distance,
    soundex,
)
from .normalize import (
    MONTH_NAMES,
    NormalizedQuery,
    canonicalize,
    normalize_name,
    normalize_query,
    normalize_text,
    remove_filler_words,
    strip_conversational_prefixes,
)

__all__ = [
    # Normalize utilities
    "MONTH_NAMES",
    "NormalizedQuery",
    "canonicalize",
    "normalize_name",
    "normalize_query",
    "normalize_text",
    "remove_filler_words",
    "strip_conversational_prefixes",
    # Name variant utilities
    "NICKNAME_TABLE",
    "NICKNAMES",
    "NicknameTable",
    "edit_similarity",
    "expand_nicknames",
    "levenshtein_distance",
    "soundex",
]
