"""Free-text query interpretation: normalized text in, SearchContext out."""

from .assembler import classify_intent, describe_context, parse_query
from .dates import DateFields, extract_dates
from .fields import PlaceFields, extract_place_fields
from .names import NAME_MATCHERS, NameParts, extract_name, residual_name
from .vocabulary import VOCABULARY, QueryVocabulary

__all__ = [
    "parse_query",
    "classify_intent",
    "describe_context",
    "extract_name",
    "residual_name",
    "extract_dates",
    "extract_place_fields",
    "NameParts",
    "DateFields",
    "PlaceFields",
    "NAME_MATCHERS",
    "QueryVocabulary",
    "VOCABULARY",
]
