"""Name variant generation for burial record search.

Provides nickname expansion, phonetic codes and edit distance used to
widen name matching beyond exact spelling.

Key features:
- Bidirectional nickname table (English and Filipino)
- Soundex algorithm for phonetic matching
- Levenshtein edit distance for typo tolerance
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from rapidfuzz.distance import Levenshtein

from .normalize import normalize_text


def soundex(name: str) -> str:
    """Generate Soundex code for a name.

    Soundex is a phonetic algorithm that indexes names by sound,
    as pronounced in English. Names that sound similar get the same code.

    Examples:
        soundex("Robert") -> "R163"
        soundex("Rupert") -> "R163"  # Same as Robert
        soundex("Smith") -> "S530"
        soundex("Smyth") -> "S530"  # Same as Smith
        soundex("Tymczak") -> "T522"

    Args:
        name: Name to encode

    Returns:
        4-character Soundex code (letter + 3 digits), or "" when the
        name has no letters
    """
    if not name:
        return ""

    # Convert to uppercase and remove non-alpha characters
    name = re.sub(r"[^A-Z]", "", normalize_text(name).upper())
    if not name:
        return ""

    soundex_map = {
        "B": "1", "F": "1", "P": "1", "V": "1",
        "C": "2", "G": "2", "J": "2", "K": "2", "Q": "2", "S": "2", "X": "2", "Z": "2",
        "D": "3", "T": "3",
        "L": "4",
        "M": "5", "N": "5",
        "R": "6",
        # A, E, I, O, U, Y separate codes; H and W do not
    }

    # Keep first letter
    code = name[0]
    prev_digit = soundex_map.get(name[0], "")

    for char in name[1:]:
        digit = soundex_map.get(char, "")
        if digit and digit != prev_digit:
            code += digit
        if char not in "HW":
            prev_digit = digit

    # Pad with zeros or truncate to length 4
    return (code + "000")[:4]


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance with unit cost for insert, delete and substitute.

    Examples:
        levenshtein_distance("kitten", "sitting") -> 3
        levenshtein_distance("bornd", "born") -> 1
    """
    return Levenshtein.distance(a, b)


def edit_similarity(a: str, b: str) -> float:
    """Edit distance scaled to 0..1 (1.0 = identical)."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(a, b) / longest


# Nickname -> formal names (English and Filipino)
NICKNAMES: dict[str, tuple[str, ...]] = {
    # English nicknames
    "bob": ("robert", "roberto"),
    "bobby": ("robert", "roberto"),
    "rob": ("robert", "roberto"),
    "mike": ("michael", "miguel"),
    "mikey": ("michael", "miguel"),
    "chris": ("christopher", "christian", "cristina", "christine"),
    "kris": ("christopher", "christian", "cristina", "kristine"),
    "alex": ("alexander", "alexandra", "alejandro", "alejandra"),
    "tony": ("antonio", "anthony", "antonia"),
    "joe": ("joseph", "jose", "josefa"),
    "joey": ("joseph", "jose"),
    "bill": ("william", "guillermo"),
    "billy": ("william", "guillermo"),
    "will": ("william", "guillermo"),
    "dick": ("richard", "ricardo"),
    "rick": ("richard", "ricardo"),
    "jim": ("james", "jaime"),
    "jimmy": ("james", "jaime"),
    "beth": ("elizabeth", "isabel", "isabela"),
    "liz": ("elizabeth", "elisabet"),
    "tom": ("thomas", "tomas"),
    "tommy": ("thomas", "tomas"),
    "dan": ("daniel", "danilo"),
    "danny": ("daniel", "danilo"),
    "sam": ("samuel", "samantha", "samson"),
    "max": ("maximilian", "maximo", "maxima"),
    "ben": ("benjamin", "benito", "benigno"),
    "benny": ("benjamin", "benito", "benigno"),
    "matt": ("matthew", "mateo"),
    "dave": ("david", "davina"),
    "ann": ("anna", "anne", "ana", "anita"),
    "annie": ("anna", "anne", "ana", "anita"),
    "sue": ("susan", "susana", "suzanne"),
    "kate": ("katherine", "catalina", "katrina"),
    "katie": ("katherine", "catalina", "katrina"),
    "meg": ("margaret", "margarita"),
    "maggie": ("margaret", "margarita"),
    "ed": ("edward", "eduardo"),
    "eddie": ("edward", "eduardo"),
    "ted": ("edward", "theodore", "teodoro"),
    "harry": ("henry", "harold", "enrique"),
    "larry": ("lawrence", "lorenzo"),
    "phil": ("phillip", "philip", "felipe"),
    "nick": ("nicholas", "nicolas"),
    "steve": ("stephen", "steven", "esteban"),
    "peggy": ("margaret", "margarita"),
    "molly": ("mary", "maria"),
    "polly": ("mary", "maria"),
    # Filipino nicknames
    "jun": ("junior", "jejomar", "antonio"),
    "boy": ("rogelio", "rodrigo", "roberto"),
    "dodong": ("rodolfo", "rodrigo"),
    "nene": ("irene", "nenita", "nena"),
    "baby": ("benigno", "benita"),
    "totoy": ("victor", "victorio"),
    "inday": ("linda", "rosalinda"),
    "lito": ("carlito", "angelito", "juanito"),
    "lita": ("carlita", "angelita"),
    "bing": ("benigno", "bienvenido"),
    "dong": ("armando", "eduardo", "fernando"),
    "dodo": ("teodoro", "rodolfo"),
    "pepe": ("jose", "joseph"),
    "peping": ("jose", "joseph"),
    "bong": ("bienvenido", "bonifacio"),
    "bongbong": ("ferdinand", "bonifacio"),
    "coring": ("socorro", "corazon"),
    "cora": ("corazon", "socorro"),
    "ditas": ("edita", "perdita"),
    "neneng": ("irene", "nenita"),
    "tita": ("teresita", "juanita"),
    "tito": ("teresito", "albertito"),
    "kikay": ("francisca", "francheska"),
    "kiko": ("francisco", "enrico"),
    "chito": ("jose", "francisco"),
    "nening": ("magdalena", "elena"),
    "ding": ("bernardino", "orlando"),
    "ping": ("josefina", "pilar"),
    "toto": ("arturo", "ernesto"),
    "carding": ("ricardo",),
    "ambo": ("ambrosio",),
    "pilo": ("porfirio",),
    "charing": ("rosario",),
    "menchu": ("carmencita", "carmen"),
}


class NicknameTable:
    """Read-only bidirectional nickname index.

    ``aliases_of(name)`` answers both directions: a nickname yields its
    formal names, and a formal name yields its nicknames plus the sibling
    formal names those nicknames stand for (robert -> bob, roberto, ...).
    """

    def __init__(self, nicknames: Mapping[str, tuple[str, ...]]) -> None:
        forward = {k.lower(): tuple(v.lower() for v in vs) for k, vs in nicknames.items()}
        reverse: dict[str, list[str]] = {}
        for nickname, formal_names in forward.items():
            for formal in formal_names:
                bucket = reverse.setdefault(formal, [])
                bucket.append(nickname)
                bucket.extend(f for f in formal_names if f != formal)
        self._forward: Mapping[str, tuple[str, ...]] = MappingProxyType(forward)
        self._reverse: Mapping[str, tuple[str, ...]] = MappingProxyType(
            {k: tuple(dict.fromkeys(v)) for k, v in reverse.items()}
        )

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = normalize_text(name)
        return key in self._forward or key in self._reverse

    def __len__(self) -> int:
        return len(self._forward)

    def formal_names(self, nickname: str) -> tuple[str, ...]:
        return self._forward.get(normalize_text(nickname), ())

    def nicknames(self, formal_name: str) -> tuple[str, ...]:
        return self._reverse.get(normalize_text(formal_name), ())

    def aliases_of(self, name: str) -> tuple[str, ...]:
        key = normalize_text(name)
        return tuple(dict.fromkeys(self._forward.get(key, ()) + self._reverse.get(key, ())))


NICKNAME_TABLE = NicknameTable(NICKNAMES)


def _match_case(template: str, word: str) -> str:
    """Render ``word`` in the capitalization style of ``template``."""
    if template.isupper() and len(template) > 1:
        return word.upper()
    if template[:1].isupper():
        return " ".join(part.capitalize() for part in word.split())
    return word


def expand_nicknames(name: str, table: NicknameTable = NICKNAME_TABLE) -> list[str]:
    """Expand a name with its nickname/formal-name aliases.

    Returns the de-duplicated union of the original token, its normalized
    form and every alias, aliases rendered in the original's capitalization.

    Examples:
        expand_nicknames("Robert") -> ["Robert", "robert", "Bob", "Roberto", "Bobby", "Rob"]
        expand_nicknames("bob") -> ["bob", "robert", "roberto"]
    """
    if not name or not name.strip():
        return []
    original = name.strip()
    normalized = normalize_text(original)
    variants = [original, normalized]
    variants.extend(_match_case(original, alias) for alias in table.aliases_of(normalized))
    return list(dict.fromkeys(variants))
