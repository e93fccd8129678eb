"""
Static Lookup Tables

Read-only reference data shared by the scalar parsers. Everything here is
immutable (tuples, frozensets, MappingProxyType) so it can be closed over by
parser functions and shared across workers without locking.
"""

from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Tuple


# Day zero of spreadsheet date serials (44937 -> 2023-01-11)
SERIAL_EPOCH = date(1899, 12, 30)


# Accented letters kept by normalize_text
DIACRITIC_ALLOW_LIST = frozenset(
    "ąćęłńóśźżĄĆĘŁŃÓŚŹŻ"
    "äöüßÄÖÜ"
    "áéíúýčďěňřšťůžÁÉÍÚÝČĎĚŇŘŠŤŮŽ"
    "àèìòùâêîôûëïçÀÈÌÒÙÂÊÎÔÛËÏÇ"
)


# (accented, ascii) pairs; targets are disjoint so order never matters
DIACRITIC_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("ą", "a"), ("ć", "c"), ("ę", "e"), ("ł", "l"), ("ń", "n"),
    ("ó", "o"), ("ś", "s"), ("ź", "z"), ("ż", "z"),
    ("Ą", "A"), ("Ć", "C"), ("Ę", "E"), ("Ł", "L"), ("Ń", "N"),
    ("Ó", "O"), ("Ś", "S"), ("Ź", "Z"), ("Ż", "Z"),
    ("ä", "a"), ("ö", "o"), ("ü", "u"), ("ß", "ss"),
    ("Ä", "A"), ("Ö", "O"), ("Ü", "U"),
    ("á", "a"), ("é", "e"), ("í", "i"), ("ú", "u"), ("ý", "y"),
    ("č", "c"), ("ď", "d"), ("ě", "e"), ("ň", "n"), ("ř", "r"),
    ("š", "s"), ("ť", "t"), ("ů", "u"), ("ž", "z"),
    ("Á", "A"), ("É", "E"), ("Í", "I"), ("Ú", "U"), ("Ý", "Y"),
    ("Č", "C"), ("Ď", "D"), ("Ě", "E"), ("Ň", "N"), ("Ř", "R"),
    ("Š", "S"), ("Ť", "T"), ("Ů", "U"), ("Ž", "Z"),
    ("à", "a"), ("è", "e"), ("ì", "i"), ("ò", "o"), ("ù", "u"),
    ("â", "a"), ("ê", "e"), ("î", "i"), ("ô", "o"), ("û", "u"),
    ("ë", "e"), ("ï", "i"), ("ç", "c"),
    ("À", "A"), ("È", "E"), ("Ì", "I"), ("Ò", "O"), ("Ù", "U"),
    ("Â", "A"), ("Ê", "E"), ("Î", "I"), ("Ô", "O"), ("Û", "U"),
    ("Ë", "E"), ("Ï", "I"), ("Ç", "C"),
)


def _alias_table(groups: Mapping[str, Tuple[str, ...]]) -> Mapping[str, str]:
    table = {}
    for canonical, aliases in groups.items():
        table[canonical.lower()] = canonical
        for alias in aliases:
            table[alias.lower()] = canonical
    return MappingProxyType(table)


# lower-cased alias -> canonical English country name
COUNTRY_ALIASES: Mapping[str, str] = _alias_table({
    "Poland": ("polska", "pl", "pol", "rzeczpospolita polska"),
    "Germany": ("deutschland", "niemcy", "de", "deu", "ger"),
    "Czech Republic": ("czechia", "česko", "cesko", "czechy", "cz", "cze"),
    "Slovakia": ("slovensko", "słowacja", "slowacja", "sk", "svk"),
    "Lithuania": ("lietuva", "litwa", "lt", "ltu"),
    "Ukraine": ("україна", "ukraina", "ua", "ukr"),
    "Austria": ("österreich", "osterreich", "austria", "at", "aut"),
    "France": ("francja", "fr", "fra"),
    "Italy": ("italia", "włochy", "wlochy", "it", "ita"),
    "Spain": ("españa", "espana", "hiszpania", "es", "esp"),
    "Netherlands": ("nederland", "holandia", "holland", "the netherlands", "nl", "nld"),
    "United Kingdom": ("uk", "gb", "gbr", "great britain", "england", "wielka brytania"),
    "United States": ("usa", "us", "united states of america", "stany zjednoczone"),
    "Sweden": ("sverige", "szwecja", "se", "swe"),
    "Denmark": ("danmark", "dania", "dk", "dnk"),
    "Hungary": ("magyarország", "magyarorszag", "węgry", "wegry", "hu", "hun"),
})


# unit symbol -> (canonical unit, divisor)
UNIT_CONVERSIONS: Mapping[str, Tuple[str, Decimal]] = MappingProxyType({
    "ml": ("L", Decimal(1000)),
    "g": ("kg", Decimal(1000)),
})


# Polish month names, nominative and genitive, plus common abbreviations
POLISH_MONTHS: Mapping[str, int] = MappingProxyType({
    "styczeń": 1, "stycznia": 1, "sty": 1,
    "luty": 2, "lutego": 2, "lut": 2,
    "marzec": 3, "marca": 3, "mar": 3,
    "kwiecień": 4, "kwietnia": 4, "kwi": 4,
    "maj": 5, "maja": 5,
    "czerwiec": 6, "czerwca": 6, "cze": 6,
    "lipiec": 7, "lipca": 7, "lip": 7,
    "sierpień": 8, "sierpnia": 8, "sie": 8,
    "wrzesień": 9, "września": 9, "wrz": 9,
    "październik": 10, "października": 10, "paź": 10,
    "listopad": 11, "listopada": 11, "lis": 11,
    "grudzień": 12, "grudnia": 12, "gru": 12,
})


LOGICAL_TRUE = frozenset({"YES", "Y", "TRUE", "1"})
LOGICAL_FALSE = frozenset({"NO", "N", "FALSE", "0"})
