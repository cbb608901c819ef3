"""Keyword tables shared by the query extractors.

All tables live on one frozen ``QueryVocabulary`` built at import time;
``VOCABULARY`` is the process-wide instance passed to the extractors.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from ..utils.normalize import FULL_MONTH_NAMES


def _words(*groups: str) -> frozenset[str]:
    return frozenset(word for group in groups for word in group.split())


# Words that are never part of a person's name
_ENGLISH_FUNCTION_WORDS = """
    about around approximately roughly maybe probably possibly likely think
    was were been have has had the and or but from with for this that these those
    find search show tell help where who what when how which whose
    someone somebody person people named called name record records data info any
    could would should will can may might must please need want like know
    he she they his her hes shes him them their its it me we us you your my our i
    is are am be do does did not no yes at in on of to by up an if so a as
    looking searching trying locate get give see look
    im ive youre were theyre whats wheres whos thats theres lets
"""
_TEMPORAL_WORDS = """
    died die dies death dead born bornd birth buried burial passed deceased
    old years year yrs yr age aged ages ago last this recently recent decade
    between through till until since
"""
_PLACE_WORDS = """
    grave graves tomb plot lot niche crypt cemetery memorial park mausoleum columbarium
    family single individual private lawn section block row
"""
_RELATIONSHIP_WORDS = """
    father dad papa mother mom mama son daughter brother sister wife husband
    grandfather grandmother lolo lola tatay nanay ama ina anak kapatid asawa
    pamilya angkan lahi magulang ate kuya itay inay
"""
_TITLES_AND_SUFFIXES = """
    mr mrs ms miss dr engr atty g gng bb sir madam aling mang
    jr sr ii iii iv
"""
_FILIPINO_FUNCTION_WORDS = """
    namatay pumanaw yumao yumaong ipinanganak isinilang nailibing kamatayan patay libing
    siguro marahil halos parang
    hanap hanapin hinahanap nasaan sino ano alin saan kailan asan nasan ayan
    tao taong pangalan yung yun ang nga
    pwede maaari gusto nais kailangan lang naman
    kasi kung kapag pag para dahil
    si ni kay sa na ng ba po mga ko mo niya nila natin atin amin kanila
    meron mayroon may bang noong mula hanggang simula dati noon ngayon
    taon gulang edad buwan araw dekada nakaraan nakaraang ngayong kamakailan
    puntod libingan nitso sementeryo
"""

# Words whose presence suggests the visitor is writing in Filipino
_FILIPINO_HINTS = """
    hanap hanapin nasaan saan namatay pumanaw yumao
    ipinanganak libing libingan puntod nitso kamatayan
    nailibing pamilya angkan lahi kamag-anak yumaong
    hinahanap hinanap namayapa sumakabilang-buhay katawan patay
    bata matanda asawa anak ina ama magulang kapatid
    pwede maaari gusto nais kailangan tulungan pakihanap
    magtanong tanong sige kasi yung yun nga naman lang po
    sino alin ano paano bakit kailan magkano
    taong edad gulang taon buwan araw si ni kay
"""

_BIRTH_KEYWORDS = "born birth ipinanganak isinilang kapanganakan bornd"
_DEATH_KEYWORDS = (
    "died death passed buried deceased namatay pumanaw yumao yumaong nailibing kamatayan"
)

# Particles that glue onto the following token to form a compound surname
_SURNAME_PARTICLES = "dela de la delos de los del san santa sta sto santo di da van von"


@dataclass(frozen=True)
class QueryVocabulary:
    """Immutable keyword configuration for the extractors."""

    non_name_words: frozenset[str] = field(
        default_factory=lambda: _words(
            _ENGLISH_FUNCTION_WORDS,
            _TEMPORAL_WORDS,
            _PLACE_WORDS,
            _RELATIONSHIP_WORDS,
            _TITLES_AND_SUFFIXES,
            _FILIPINO_FUNCTION_WORDS,
        )
        | FULL_MONTH_NAMES
    )
    filipino_hints: frozenset[str] = field(default_factory=lambda: _words(_FILIPINO_HINTS))
    birth_keywords: frozenset[str] = field(default_factory=lambda: _words(_BIRTH_KEYWORDS))
    death_keywords: frozenset[str] = field(default_factory=lambda: _words(_DEATH_KEYWORDS))
    surname_particles: frozenset[str] = field(default_factory=lambda: _words(_SURNAME_PARTICLES))

    def is_likely_name(self, word: str) -> bool:
        """True when ``word`` could be part of a personal name."""
        token = word.strip(".,;:!?'\"()").lower()
        letters = token.replace("-", "").replace("'", "")
        return (
            len(letters) > 1
            and letters.isalpha()
            and token not in self.non_name_words
            and letters not in self.non_name_words
        )

    def is_surname_particle(self, word: str) -> bool:
        return word.lower() in self.surname_particles


VOCABULARY = QueryVocabulary()
