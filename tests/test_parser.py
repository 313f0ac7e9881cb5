"""
tests/test_parser.py
====================
Numeric normalisation and statement template import (CSV / XLSX).
"""
import io

import pandas as pd
import pytest

from credit_platform.errors import TemplateParseError
from credit_platform.export import input_template_csv
from credit_platform.parser import normalize_year, parse_statement_file, to_numeric
from credit_platform.types import BALANCE, OPERATING


def _csv(text: str) -> bytes:
    return text.encode("utf-8")


# ─── to_numeric ──────────────────────────────────────────────────────────────

class TestToNumeric:
    def test_integer_input(self):
        assert to_numeric(1234) == 1234.0

    def test_float_input(self):
        assert to_numeric(3.14) == pytest.approx(3.14)

    def test_comma_separated_string(self):
        assert to_numeric("1,23,456") == 123456.0

    def test_parenthetical_negative(self):
        assert to_numeric("(1,23,456)") == -123456.0

    def test_currency_markers(self):
        assert to_numeric("₹1,500") == 1500.0
        assert to_numeric("Rs. 2500") == 2500.0
        assert to_numeric("150Cr") == 150.0

    def test_nil_zero(self):
        assert to_numeric("Nil") == 0.0

    def test_placeholders_are_none(self):
        for val in (None, "", "-", "--", "N/A", "nan"):
            assert to_numeric(val) is None

    def test_nan_float_is_none(self):
        assert to_numeric(float("nan")) is None

    def test_integer_beyond_float_range_is_none(self):
        assert to_numeric(10 ** 400) is None

    def test_bool_is_not_a_number(self):
        assert to_numeric(True) is None

    def test_text_is_none(self):
        assert to_numeric("abc") is None


class TestNormalizeYear:
    def test_variants(self):
        assert normalize_year("2024") == "2024"
        assert normalize_year("2024.0") == "2024"
        assert normalize_year("FY2024") == "2024"

    def test_not_a_year(self):
        assert normalize_year("Particulars") is None
        assert normalize_year(None) is None


# ─── Template import ─────────────────────────────────────────────────────────

class TestCsvTemplate:
    def test_basic_import(self):
        body = _csv(
            "Particulars,2019,2020\n"
            "1. Gross Sales - Total,1000,1200\n"
            "Cost of Goods Sold,600,\n"
        )
        result = parse_statement_file(body, "op.csv", OPERATING)
        assert result.statement == OPERATING
        assert result.years == ["2019", "2020"]
        assert result.data["1. Gross Sales - Total"] == {"2019": 1000.0, "2020": 1200.0}
        assert result.data["Cost of Goods Sold"] == {"2019": 600.0}
        assert result.unknown_labels == []
        assert result.rejected_cells == []

    def test_alias_and_unknown_labels(self):
        body = _csv(
            "Particulars,2019\n"
            "SBLC,25\n"
            "Mystery line,10\n"
        )
        result = parse_statement_file(body, "bs.csv", BALANCE)
        assert result.data == {"# SBLC": {"2019": 25.0}}
        assert result.unknown_labels == ["Mystery line"]

    def test_out_of_range_percentage_rejected(self):
        body = _csv(
            "Particulars,2019,2020\n"
            "Effective Tax rate,150,10\n"
        )
        result = parse_statement_file(body, "op.csv", OPERATING)
        assert result.data == {"Effective Tax rate": {"2020": 10.0}}
        assert len(result.rejected_cells) == 1
        assert "Percentage cannot exceed 100%" in result.rejected_cells[0]

    def test_computed_rows_ignored(self):
        body = _csv(
            "Particulars,2019\n"
            "3. Net Sales (1-2),999\n"
            "1. Gross Sales - Total,100\n"
        )
        result = parse_statement_file(body, "op.csv", OPERATING)
        assert "3. Net Sales (1-2)" not in result.data
        assert result.unknown_labels == []

    def test_title_rows_above_header(self):
        body = _csv(
            "Form III - Balance Sheet,,\n"
            ",,\n"
            "Particulars,FY2019,FY2020\n"
            "29. Inventory:,90,110\n"
        )
        result = parse_statement_file(body, "bs.csv", BALANCE)
        assert result.years == ["2019", "2020"]
        assert result.data["29. Inventory:"] == {"2019": 90.0, "2020": 110.0}

    def test_no_year_columns(self):
        with pytest.raises(TemplateParseError):
            parse_statement_file(_csv("Particulars,Notes\nA,1\n"), "x.csv", OPERATING)

    def test_single_column(self):
        with pytest.raises(TemplateParseError):
            parse_statement_file(_csv("Particulars\nA\n"), "x.csv", OPERATING)

    def test_unsupported_extension(self):
        with pytest.raises(TemplateParseError):
            parse_statement_file(b"%PDF", "statement.pdf", OPERATING)


class TestXlsxTemplate:
    def test_xlsx_import(self):
        df = pd.DataFrame([
            ["Particulars", "2019", "2020"],
            ["1. Gross Sales - Total", 1000, 1200],
            ["10. Finance Charges", 30, 35],
        ])
        buf = io.BytesIO()
        df.to_excel(buf, index=False, header=False, engine="openpyxl")
        result = parse_statement_file(buf.getvalue(), "op.xlsx", OPERATING)
        assert result.years == ["2019", "2020"]
        assert result.data["1. Gross Sales - Total"] == {"2019": 1000.0, "2020": 1200.0}
        assert result.data["10. Finance Charges"]["2020"] == 35.0


class TestTemplateRoundTrip:
    def test_exported_template_reimports_unchanged(self):
        data = {
            "Cost of Goods Sold": {"2019": 1234.567, "2020": 0.1 + 0.2},
            "10. Finance Charges": {"2020": -42.125},
            "Effective Tax rate": {"2019": 25.175},
        }
        body = input_template_csv(OPERATING, ["2019", "2020"], data).encode("utf-8")
        result = parse_statement_file(body, "op.csv", OPERATING)
        assert result.data == data
        assert result.rejected_cells == []
        assert result.unknown_labels == []
