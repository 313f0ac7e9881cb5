"""
credit_platform/parser.py
=========================
Statement template parser. Handles:
  - CSV (.csv)
  - Excel (.xlsx) – first sheet whose header row carries "Particulars"

A template is one statement laid out as `Particulars, <year>, <year>, ...`
followed by one row per line item. Labels are resolved against the statement
schema (exact, alias, then normalized match) and every cell passes through
the validation gate before it reaches the returned data.
"""
from __future__ import annotations
import io
import math
import re
import zipfile
from typing import Any, List, Optional, Tuple

import pandas as pd

from .config import CreditAnalysisConfig, DEFAULT_CONFIG, LOGGER
from .errors import TemplateParseError
from .schema import get_line_item, resolve_label
from .types import StatementType, TemplateImport


# ─── Numeric Normalisation ────────────────────────────────────────────────────

def to_numeric(val: Any) -> Optional[float]:
    """Convert diverse string formats to float; None when not a number."""
    if val is None or val == "":
        return None
    if isinstance(val, bool):
        return None
    if isinstance(val, (int, float)):
        try:
            v = float(val)
        except OverflowError:
            return None
        return None if math.isnan(v) else v
    s = str(val).strip()
    # Parenthetical negatives: (1234) → -1234
    if s.startswith('(') and s.endswith(')'):
        s = '-' + s[1:-1]
    # Strip currency & separators
    s = (s.replace(',', '').replace('₹', '').replace('$', '')
         .replace('Rs.', '').replace('Rs', '')
         .replace('CR', '').replace('Cr', '').replace('crore', '')
         .strip())
    if s in ('', '-', '--', 'N/A', 'NA', 'n/a', 'nan', 'None'):
        return None
    if s.lower() == 'nil':
        return 0.0
    try:
        return float(s)
    except ValueError:
        return None


def is_blank(val: Any) -> bool:
    """Empty cell: None, '', whitespace or a NaN placeholder from pandas."""
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return isinstance(val, str) and val.strip() in ('', 'nan', 'None')


def normalize_year(value: Any) -> Optional[str]:
    """Header cell → year token ("2024", "2024.0", "FY2024" → "2024")."""
    if is_blank(value):
        return None
    m = re.search(r'(19\d{2}|20\d{2})', str(value))
    return m.group(1) if m else None


# ─── Frame Parsing ────────────────────────────────────────────────────────────

def _find_header_row(df: pd.DataFrame) -> int:
    """Row whose first cell reads "Particulars"; row 0 otherwise."""
    for i in range(min(20, len(df))):
        first = df.iloc[i, 0]
        if not is_blank(first) and str(first).strip().lower() == 'particulars':
            return i
    return 0


def _year_columns(df: pd.DataFrame, header_idx: int) -> List[Tuple[int, str]]:
    cols: List[Tuple[int, str]] = []
    seen = set()
    for j in range(1, df.shape[1]):
        yr = normalize_year(df.iloc[header_idx, j])
        if yr and yr not in seen:
            cols.append((j, yr))
            seen.add(yr)
    return cols


def _parse_statement_frame(
    df: pd.DataFrame,
    statement: StatementType,
    config: CreditAnalysisConfig,
) -> TemplateImport:
    # local import: validation imports to_numeric from this module
    from .validation import validate_cell

    if df.empty or df.shape[1] < 2:
        raise TemplateParseError("Template has no year columns.")
    header_idx = _find_header_row(df)
    year_cols = _year_columns(df, header_idx)
    if not year_cols:
        raise TemplateParseError("No fiscal-year columns found in the template header.")

    result = TemplateImport(statement=statement, years=[yr for _, yr in year_cols])
    for i in range(header_idx + 1, len(df)):
        raw_label = df.iloc[i, 0]
        if is_blank(raw_label):
            continue
        text = str(raw_label)
        label = resolve_label(statement, text)
        if label is None:
            result.unknown_labels.append(text.strip())
            continue
        item = get_line_item(statement, label)
        if item is not None and not item.accepts_input:
            # computed lines are re-derived, exported values are ignored
            continue
        for col_idx, year in year_cols:
            cell = df.iloc[i, col_idx]
            if is_blank(cell):
                continue
            check = validate_cell(statement, label, cell, config)
            if not check.is_valid:
                result.rejected_cells.append(f"{label} [{year}]: {check.error}")
                continue
            result.data.setdefault(label, {})[year] = check.parsed_value

    if result.unknown_labels:
        LOGGER.warning("Template import: %d unresolved labels (%s)",
                       len(result.unknown_labels), ", ".join(result.unknown_labels[:5]))
    if result.rejected_cells:
        LOGGER.warning("Template import: %d rejected cells", len(result.rejected_cells))
    return result


# ─── Main Parse Entry Point ───────────────────────────────────────────────────

def _has_header(df: pd.DataFrame) -> bool:
    if df.empty or df.shape[1] < 2:
        return False
    return bool(_year_columns(df, _find_header_row(df)))


def _read_frame(file_bytes: bytes, filename: str) -> pd.DataFrame:
    fn_lower = filename.lower()
    try:
        if fn_lower.endswith('.csv'):
            return pd.read_csv(io.BytesIO(file_bytes), header=None, dtype=str)
        if fn_lower.endswith('.xlsx'):
            xl = pd.ExcelFile(io.BytesIO(file_bytes), engine='openpyxl')
            frames = [xl.parse(name, header=None, dtype=str) for name in xl.sheet_names]
            for df in frames:
                if _has_header(df):
                    return df
            return frames[0] if frames else pd.DataFrame()
    except (ValueError, OSError, KeyError, zipfile.BadZipFile) as exc:
        raise TemplateParseError(f"Could not read {filename}: {exc}") from exc
    raise TemplateParseError(f"Unsupported template format: {filename}")


def parse_statement_file(
    file_bytes: bytes,
    filename: str,
    statement: StatementType,
    config: Optional[CreditAnalysisConfig] = None,
) -> TemplateImport:
    """
    Parse an uploaded statement template (CSV / XLSX).
    Raises TemplateParseError when no header or year columns can be found.
    """
    df = _read_frame(file_bytes, filename)
    result = _parse_statement_frame(df, statement, config or DEFAULT_CONFIG)
    LOGGER.info("Template import %s: %d labels over %d years",
                filename, len(result.data), len(result.years))
    return result
