"""
credit_platform/arithmetic.py
=============================
Total arithmetic primitives for the derivation engine.

None of these helpers raise on finite-or-missing input, and none of them
return NaN or infinity.
"""
from __future__ import annotations
import math
from typing import Optional


def finite(x: Optional[float]) -> float:
    """None / NaN / ±inf → 0.0; -0.0 → 0.0."""
    if x is None:
        return 0.0
    try:
        v = float(x)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(v) or v == 0:
        return 0.0
    return v


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> float:
    """numerator / denominator, or 0 when the quotient is undefined."""
    if denominator is None or numerator is None:
        return 0.0
    if not math.isfinite(denominator) or denominator == 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


def growth_safe_divide(numerator: Optional[float], previous: Optional[float]) -> float:
    """
    Growth-specific guard: divide by |previous|, or by 1 when previous is
    zero or missing. A first reading of 150 therefore reports 15000 % growth.
    """
    if previous is not None and math.isfinite(previous) and previous != 0:
        base = abs(previous)
    else:
        base = 1.0
    return safe_divide(numerator, base)


def average(current: float, previous: Optional[float]) -> float:
    """Two-point average; degrades to current when previous is absent or zero."""
    if previous is None or not math.isfinite(previous) or previous == 0:
        return current
    return (current + previous) / 2


def _round_half_away(x: float, decimals: int) -> float:
    factor = 10 ** decimals
    scaled = abs(x) * factor
    rounded = math.floor(scaled + 0.5 + 1e-9) / factor
    return math.copysign(rounded, x) if rounded else 0.0


def round_amount(x: Optional[float], decimals: int = 2) -> float:
    """Amounts and ratios: fixed decimals at the output boundary."""
    return finite(_round_half_away(finite(x), decimals))


def round_days(x: Optional[float]) -> float:
    """Day counts: nearest integer, half away from zero."""
    return finite(_round_half_away(finite(x), 0))
