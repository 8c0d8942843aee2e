import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Optional


def compute_metric(price: float, size: float) -> Optional[float]:
    """
    Preis pro GB. Nur definiert, wenn beide Werte > 0 sind und das
    Ergebnis endlich ist – sonst None (nicht 0, nicht inf).
    """
    if price <= 0 or size <= 0:
        return None
    metric = price / size
    if not math.isfinite(metric):
        return None
    return metric


def round_metric(metric: float) -> int:
    # kaufmännisch runden, .5 weg von der Null; Präzision wächst mit der Zahl
    value = Decimal(metric)
    ctx = Context(prec=max(28, value.adjusted() + 2))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP, context=ctx))


def format_metric(metric: float) -> str:
    """1234.5 -> '1,235'"""
    return f"{round_metric(metric):,}"
