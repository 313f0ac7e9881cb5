"""
credit_platform/formatting.py
=============================
Display helpers for derived metrics: 2-decimal amounts, percent and
multiple ratios, whole-day counts, and row highlight colours.
"""
from __future__ import annotations
from typing import Optional

from .metrics import PERCENT_METRICS, metric_kind


def format_number(value: Optional[float], decimals: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:,.{decimals}f}"


def format_percent(value: Optional[float], decimals: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:,.{decimals}f}%"


def format_ratio(value: Optional[float], decimals: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:.{decimals}f}x"


def format_days(value: Optional[float]) -> str:
    if value is None:
        return "—"
    return f"{value:,.0f}"


def format_metric(metric: str, value: Optional[float]) -> str:
    """Format a derived value according to the metric's kind."""
    kind = metric_kind(metric)
    if kind == "days":
        return format_days(value)
    if metric in PERCENT_METRICS:
        return format_percent(value)
    if kind == "ratio":
        return format_ratio(value)
    return format_number(value)


def metric_row_color(metric: str) -> str:
    """Background tint for a metric row ("" for none)."""
    if any(tok in metric for tok in ("Growth", "growth", "Margin", "Return")):
        return "#ecfdf5"
    if "Debt" in metric or "debt" in metric or "Interest" in metric:
        return "#fef2f2"
    if "EBITDA" in metric or "Profit" in metric:
        return "#eff6ff"
    return ""
