from .numerals import normalize_numerals
from .extract import (
    ABSENT,
    HEURISTIC_LARGE,
    HEURISTIC_SMALL,
    LARGE_UNIT,
    SMALL_UNIT,
    SizeReading,
    extract_price,
    extract_size,
    read_size,
)
from .metric import compute_metric, format_metric, round_metric
from .vocabulary import (
    DEFAULT_VOCABULARY,
    PipelineConfig,
    RenderSettings,
    Selectors,
    UnitVocabulary,
)

__all__ = [
    "normalize_numerals",
    "extract_price",
    "extract_size",
    "read_size",
    "SizeReading",
    "LARGE_UNIT",
    "SMALL_UNIT",
    "HEURISTIC_LARGE",
    "HEURISTIC_SMALL",
    "ABSENT",
    "compute_metric",
    "format_metric",
    "round_metric",
    "DEFAULT_VOCABULARY",
    "UnitVocabulary",
    "Selectors",
    "RenderSettings",
    "PipelineConfig",
]
