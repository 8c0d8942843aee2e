"""
Preis- und Größen-Extraktion aus lokalisierten Texten.

Beide Funktionen normalisieren zuerst die Ziffern (siehe numerals.py) und
liefern bei nicht verwertbarem Text den Sentinel 0 statt einer Exception.
"""

import re
from dataclasses import dataclass
from typing import Optional

from .numerals import normalize_numerals
from .vocabulary import DEFAULT_VOCABULARY, GROUP_SEPARATORS, NUMBER_PATTERN, UnitVocabulary

# Größen-Basis: woher kommt der Wert?
LARGE_UNIT = "large_unit"
SMALL_UNIT = "small_unit"
HEURISTIC_LARGE = "heuristic_large"
HEURISTIC_SMALL = "heuristic_small"
ABSENT = "absent"

_NON_PRICE_CHARS = re.compile(r"[^0-9.]")
# wie parseFloat im Browser: nur das gültige Präfix zählt ("12.5.3" -> 12.5)
_FLOAT_PREFIX = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")
_DIGIT_RUN = re.compile(NUMBER_PATTERN)
_GROUP_SEPARATOR = re.compile("[" + GROUP_SEPARATORS + "]")


@dataclass(frozen=True)
class SizeReading:
    value: float
    basis: str

    @property
    def is_heuristic(self) -> bool:
        return self.basis in (HEURISTIC_LARGE, HEURISTIC_SMALL)

    @property
    def is_absent(self) -> bool:
        return self.basis == ABSENT


def _to_float(number: str) -> float:
    """'1,500' -> 1500.0"""
    return float(_GROUP_SEPARATOR.sub("", number))


def _parse_float_prefix(text: str) -> float:
    m = _FLOAT_PREFIX.match(text)
    if not m:
        return 0.0
    try:
        return float(m.group(0))
    except ValueError:
        return 0.0


# ----------------------------------------------------------
# PRICE
# ----------------------------------------------------------
def extract_price(text: Optional[str]) -> float:
    """
    '۱۲۰,۰۰۰ تومان' -> 120000.0

    Alles außer ASCII-Ziffern und Dezimalpunkt wird entfernt
    (Währungswörter, Tausendertrenner, Buchstaben). Auch das Minus –
    negative Preise gibt es deshalb nicht.
    """
    cleaned = _NON_PRICE_CHARS.sub("", normalize_numerals(text))
    return _parse_float_prefix(cleaned)


# ----------------------------------------------------------
# SIZE (immer in GB)
# ----------------------------------------------------------
def read_size(text: Optional[str], vocabulary: UnitVocabulary = DEFAULT_VOCABULARY) -> SizeReading:
    """
    Liefert die Größe in GB plus die Basis, auf der sie ermittelt wurde.

    Reihenfolge:
    1. Zahl + GB-Schreibweise  -> Wert direkt
    2. Zahl + MB-Schreibweise  -> Wert / 1024
    3. Fallback ohne Einheit: letzte Zahl im Text; > 100 gilt als MB,
       sonst als GB. Das ist eine bewusst verlustbehaftete Heuristik
       (Laufzeit steht meist vorne, Volumen hinten) und wird über
       basis=heuristic_* sichtbar gemacht.
    """
    t = normalize_numerals(text)
    if not t:
        return SizeReading(0.0, ABSENT)

    m = vocabulary.large_regex.search(t)
    if m:
        return SizeReading(_to_float(m.group(1)), LARGE_UNIT)

    m = vocabulary.small_regex.search(t)
    if m:
        return SizeReading(_to_float(m.group(1)) / vocabulary.small_per_large, SMALL_UNIT)

    runs = _DIGIT_RUN.findall(t)
    if not runs:
        return SizeReading(0.0, ABSENT)

    value = _to_float(runs[-1])
    if value > vocabulary.heuristic_threshold:
        return SizeReading(value / vocabulary.small_per_large, HEURISTIC_SMALL)
    return SizeReading(value, HEURISTIC_LARGE)


def extract_size(text: Optional[str], vocabulary: UnitVocabulary = DEFAULT_VOCABULARY) -> float:
    return read_size(text, vocabulary).value
