# dosecalc/services/weight_input.py
"""
Weight input policy for front ends (dial / manual field / CLI prompt).

Clamping lives here, *before* the engine is called. The engine itself
rejects out-of-range weights so its boundaries stay testable.
"""
from __future__ import annotations

from typing import Any, Optional, Tuple

from dosecalc.domain.models import Product, Route

DEFAULT_WEIGHT = 35.0
DEFAULT_ROUTE = Route.IV
MIN_DIAL_READING = 0.1   # a zero dial reading is shown as 0.1 kg


def dial_bounds(product: Optional[Product]) -> Tuple[float, float]:
    if product is not None and product.is_tablet:
        return product.min_weight, product.max_weight
    return MIN_DIAL_READING, 100.0


def parse_weight(raw: Any) -> Optional[float]:
    """'35', '35.5', '35,5 kg' → float; anything else → None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    s = str(raw).strip().lower().replace("kg", "").replace(",", ".").strip()
    if not s:
        return None
    try:
        return float(s)
    except ValueError:
        return None


def clamp_weight(weight: float, product: Optional[Product]) -> float:
    lo, hi = dial_bounds(product)
    return max(lo, min(hi, weight))
