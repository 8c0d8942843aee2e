"""
Einheiten-Vokabular und Pipeline-Konfiguration.

Selektoren, Einheiten-Schreibweisen und Umrechnungsfaktor werden als
unveränderliche Werte modelliert und beim Aufbau der Pipeline übergeben.
So lässt sich die Engine auch mit synthetischen Vokabularen testen.
"""

import re
from dataclasses import dataclass, field
from typing import Pattern, Tuple


# Zahl direkt vor der Einheit: "50", "1.5", "1,500" (nur ASCII-Ziffern, Normalisierung passiert vorher).
# Tausendertrenner: "," sowie arabisch U+066C und U+060C.
GROUP_SEPARATORS = ",\u066c\u060c"
NUMBER_PATTERN = (
    r"([0-9]{1,3}(?:[" + GROUP_SEPARATORS + r"][0-9]{3})+(?:\.[0-9]+)?"
    r"|[0-9]+(?:\.[0-9]+)?)"
)


def _unit_regex(tokens: Tuple[str, ...]) -> Pattern:
    # längste Schreibweise zuerst, sonst gewinnt "مگ" vor "مگابایت"
    ordered = sorted(set(tokens), key=len, reverse=True)
    alternation = "|".join(re.escape(t) for t in ordered)
    return re.compile(NUMBER_PATTERN + r"\s*(?:" + alternation + r")", re.IGNORECASE)


@dataclass(frozen=True)
class UnitVocabulary:
    large_tokens: Tuple[str, ...] = (
        "گیگابایت",
        "گیگا بایت",
        "گیگ",
        "gigabyte",
        "GB",
        "gig",
    )
    small_tokens: Tuple[str, ...] = (
        "مگابایت",
        "مگا بایت",
        "مگ",
        "megabyte",
        "MB",
    )
    small_per_large: float = 1024.0
    # Fallback ohne Einheit: Werte > threshold gelten als MB
    heuristic_threshold: float = 100.0

    large_regex: Pattern = field(init=False, repr=False, compare=False)
    small_regex: Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.large_tokens or not self.small_tokens:
            raise ValueError("UnitVocabulary needs at least one large and one small token")
        # frozen dataclass -> object.__setattr__ für die vorkompilierten Regexe
        object.__setattr__(self, "large_regex", _unit_regex(self.large_tokens))
        object.__setattr__(self, "small_regex", _unit_regex(self.small_tokens))


DEFAULT_VOCABULARY = UnitVocabulary()


@dataclass(frozen=True)
class Selectors:
    container: str = ".card-templ-wrapper"
    price: str = ".card-price .fa-number"
    size: str = ".card-description h6"
    # Einfügepunkt für das Fragment
    template: str = ".card-template"
    buy_credit: str = ".card-buy-credit"


@dataclass(frozen=True)
class RenderSettings:
    fragment_class: str = "price-per-gb-extension"
    style_id: str = "price-per-gb-style"
    metric_attribute: str = "data-price-per-gb"
    label: str = "ارزش هر گیگابایت:"
    currency: str = "تومان"
    sort_button_id: str = "price-per-gb-sort"
    sort_button_label: str = "مرتب‌سازی بر اساس ارزش هر گیگ"


@dataclass(frozen=True)
class PipelineConfig:
    selectors: Selectors = field(default_factory=Selectors)
    vocabulary: UnitVocabulary = field(default_factory=UnitVocabulary)
    render: RenderSettings = field(default_factory=RenderSettings)
