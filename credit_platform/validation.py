"""
credit_platform/validation.py
=============================
Validation gate for raw statement cells.

Monetary cells accept finite numbers within ±max_abs_value; percentage cells
accept finite numbers in [min_percent, max_percent]. Blank input means 0.
Rejected input never reaches the statement data.
"""
from __future__ import annotations
import math
from typing import Any, Optional

from .config import CreditAnalysisConfig, DEFAULT_CONFIG
from .parser import is_blank, to_numeric
from .schema import get_line_item, resolve_label
from .types import StatementType, ValidationResult


def _parse(raw: Any) -> Optional[float]:
    v = to_numeric(raw)
    if v is None or not math.isfinite(v):
        return None
    return v


def validate_amount(raw: Any, config: Optional[CreditAnalysisConfig] = None) -> ValidationResult:
    cfg = config or DEFAULT_CONFIG
    if is_blank(raw):
        return ValidationResult(True, 0.0)
    v = _parse(raw)
    if v is None:
        return ValidationResult(False, error="Value must be a finite number")
    if v < -cfg.max_abs_value:
        return ValidationResult(False, error="Value is too small")
    if v > cfg.max_abs_value:
        return ValidationResult(False, error="Value is too large")
    return ValidationResult(True, v + 0.0)


def validate_percentage(raw: Any, config: Optional[CreditAnalysisConfig] = None) -> ValidationResult:
    cfg = config or DEFAULT_CONFIG
    if is_blank(raw):
        return ValidationResult(True, 0.0)
    v = _parse(raw.rstrip('%') if isinstance(raw, str) else raw)
    if v is None:
        return ValidationResult(False, error="Percentage must be a finite number")
    if v < cfg.min_percent:
        return ValidationResult(False, error="Percentage cannot be negative")
    if v > cfg.max_percent:
        return ValidationResult(False, error="Percentage cannot exceed 100%")
    return ValidationResult(True, v + 0.0)


def validate_cell(
    statement: StatementType,
    label: str,
    raw: Any,
    config: Optional[CreditAnalysisConfig] = None,
) -> ValidationResult:
    """Resolve the label, then apply the amount or percentage rule by line kind."""
    resolved = resolve_label(statement, label)
    item = get_line_item(statement, resolved) if resolved else None
    if item is None:
        return ValidationResult(False, error=f"Unknown line item: {label}")
    if item.kind == "computed":
        return ValidationResult(False, error=f"{item.label} is calculated and cannot be entered")
    if item.kind == "percent":
        return validate_percentage(raw, config)
    return validate_amount(raw, config)
