"""
tests/test_formatting.py
========================
Display formatting of derived metrics.
"""
from credit_platform.formatting import (
    format_days,
    format_metric,
    format_number,
    format_percent,
    format_ratio,
    metric_row_color,
)


class TestFormatters:
    def test_number(self):
        assert format_number(1234.5) == "1,234.50"
        assert format_number(-2) == "-2.00"

    def test_percent(self):
        assert format_percent(12.5) == "12.50%"

    def test_ratio(self):
        assert format_ratio(2) == "2.00x"

    def test_days(self):
        assert format_days(45.0) == "45"

    def test_missing(self):
        for fn in (format_number, format_percent, format_ratio, format_days):
            assert fn(None) == "—"


class TestFormatMetric:
    def test_by_kind(self):
        assert format_metric("Debtor (days)", 33.0) == "33"
        assert format_metric("Sales growth", 20.0) == "20.00%"
        assert format_metric("Current Ratio", 2.0) == "2.00x"
        assert format_metric("EBITDA", 1500.0) == "1,500.00"


class TestRowColor:
    def test_tints(self):
        assert metric_row_color("EBITDA Margin") == "#ecfdf5"
        assert metric_row_color("Term Debt") == "#fef2f2"
        assert metric_row_color("EBITDA") == "#eff6ff"
        assert metric_row_color("Current Ratio") == ""
