"""
credit_platform/aligner.py
==========================
Flattens label → year → value statement data into per-year rows and pairs
each year with the row of the year before it.

Alignment is positional: the "previous" year of index i is index i-1 of the
years sequence, whatever its calendar value.
"""
from __future__ import annotations
from typing import List, Sequence, Tuple

from .arithmetic import finite
from .schema import LineItem, OPERATING_STATEMENT_SCHEMA, BALANCE_SHEET_SCHEMA
from .types import AlignedYear, FinancialData, Row


def empty_row(schema: Tuple[LineItem, ...]) -> Row:
    row: Row = {item.label: 0.0 for item in schema}
    return row


def build_row(data: FinancialData, year: str, schema: Tuple[LineItem, ...]) -> Row:
    """
    Full row for one statement at one year.

    Every schema label is present; missing or non-finite cells become 0.0.
    Computed lines are filled in schema order from their components, so a
    subtotal may reference another subtotal declared above it.
    """
    row = empty_row(schema)
    for item in schema:
        if item.kind == "computed":
            continue
        row[item.label] = finite(data.get(item.label, {}).get(year))
    for item in schema:
        if item.kind == "computed":
            row[item.label] = finite(sum(sign * row.get(label, 0.0) for label, sign in item.formula))
    return row


def align_years(
    years: Sequence[str],
    operating: FinancialData,
    balance: FinancialData,
) -> List[AlignedYear]:
    """(year, operating, balance, previous operating, previous balance) per index."""
    aligned: List[AlignedYear] = []
    prev_op = empty_row(OPERATING_STATEMENT_SCHEMA)
    prev_bs = empty_row(BALANCE_SHEET_SCHEMA)
    for year in years:
        op = build_row(operating, year, OPERATING_STATEMENT_SCHEMA)
        bs = build_row(balance, year, BALANCE_SHEET_SCHEMA)
        aligned.append(AlignedYear(year, op, bs, prev_op, prev_bs))
        prev_op, prev_bs = op, bs
    return aligned
