"""
Persische/arabische Ziffern -> ASCII-Ziffern.

Abgedeckt sind die beiden Unicode-Blöcke
- U+0660–U+0669 (Arabic-Indic, ٠..٩)
- U+06F0–U+06F9 (Extended Arabic-Indic / Farsi, ۰..۹)

Reine Zeichen-für-Zeichen-Ersetzung: Länge und Position aller anderen
Zeichen bleiben unverändert.
"""

from typing import Optional

_ARABIC_INDIC_ZERO = 0x0660
_FARSI_ZERO = 0x06F0

NUMERAL_TABLE = {
    **{_ARABIC_INDIC_ZERO + d: str(d) for d in range(10)},
    **{_FARSI_ZERO + d: str(d) for d in range(10)},
}


def normalize_numerals(text: Optional[str]) -> str:
    if not text:
        return ""
    return text.translate(NUMERAL_TABLE)
