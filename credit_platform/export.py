"""
credit_platform/export.py
=========================
Tabular renderings of derived metrics and statement templates.

Results CSV contract:
  Particulars,<year1>,<year2>,...
  one row per metric in presentation order (first occurrence wins), then any
  metric outside the layout; every value with exactly 2 decimals, a missing
  cell left empty.
"""
from __future__ import annotations
from typing import List, Optional, Sequence

import pandas as pd

from .metrics import OUTPUT_SECTIONS, export_metric_order
from .schema import get_schema
from .types import FinancialData, StatementType


def _cell(value: Optional[float]) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def _input_cell(value: Optional[float]) -> str:
    """Shortest text that reads back as the same float."""
    if value is None:
        return ""
    return repr(float(value))


def export_rows(results: FinancialData) -> List[str]:
    """Metric order for export: layout order, then unlisted metrics."""
    order = [m for m in export_metric_order() if m in results]
    listed = set(order)
    order.extend(m for m in results if m not in listed)
    return order


def results_to_csv(results: FinancialData, years: Sequence[str]) -> str:
    columns = ["Particulars", *years]
    rows = [
        [metric, *(_cell(results[metric].get(year)) for year in years)]
        for metric in export_rows(results)
    ]
    df = pd.DataFrame(rows, columns=columns)
    return df.to_csv(index=False, lineterminator="\n")


def results_to_frame(
    results: FinancialData,
    years: Sequence[str],
    metrics: Optional[Sequence[str]] = None,
) -> pd.DataFrame:
    """Metric × year frame; missing metrics/years come out as NaN."""
    names = list(metrics) if metrics is not None else export_rows(results)
    data = [[results.get(m, {}).get(y) for y in years] for m in names]
    df = pd.DataFrame(data, index=names, columns=list(years), dtype=float)
    df.index.name = "Particulars"
    return df


def section_frames(results: FinancialData, years: Sequence[str]) -> List[tuple]:
    """(title, subtitle, frame) per presentation section."""
    return [
        (title, subtitle, results_to_frame(results, years, metrics))
        for title, subtitle, metrics in OUTPUT_SECTIONS
    ]


def unlisted_metrics(results: FinancialData) -> List[str]:
    listed = set(export_metric_order())
    return [m for m in results if m not in listed]


def input_template_csv(
    statement: StatementType,
    years: Sequence[str],
    data: Optional[FinancialData] = None,
) -> str:
    """
    Blank (or pre-filled) input template: every input line of the statement.
    Stored values are written at full precision so the template re-imports
    unchanged.
    """
    data = data or {}
    rows = []
    for item in get_schema(statement):
        if not item.accepts_input:
            continue
        values = data.get(item.label, {})
        rows.append([item.label, *(_input_cell(values.get(y)) for y in years)])
    df = pd.DataFrame(rows, columns=["Particulars", *years])
    return df.to_csv(index=False, lineterminator="\n")
