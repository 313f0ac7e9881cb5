"""
tests/test_export.py
====================
Results CSV contract, display frames and input templates.
"""
import math

from credit_platform.derivation import compute_credit_analysis
from credit_platform.export import (
    export_rows,
    input_template_csv,
    results_to_csv,
    results_to_frame,
    section_frames,
    unlisted_metrics,
)
from credit_platform.metrics import DERIVED_METRICS, OUTPUT_SECTIONS
from credit_platform.types import BALANCE, OPERATING

YEARS = ["2019", "2020"]


class TestResultsCsv:
    def test_header(self):
        assert results_to_csv({}, YEARS).splitlines() == ["Particulars,2019,2020"]

    def test_two_decimal_cells(self):
        csv_text = results_to_csv({"EBITDA": {"2019": 1.5, "2020": -2.0}}, YEARS)
        assert csv_text.splitlines()[1] == "EBITDA,1.50,-2.00"

    def test_missing_cell_is_empty(self):
        csv_text = results_to_csv({"EBITDA": {"2019": 1.5}}, YEARS)
        assert csv_text.splitlines()[1] == "EBITDA,1.50,"

    def test_year_order_follows_input(self):
        csv_text = results_to_csv({"EBITDA": {"2019": 1.0, "2020": 2.0}}, ["2020", "2019"])
        assert csv_text.splitlines() == ["Particulars,2020,2019", "EBITDA,2.00,1.00"]

    def test_layout_order_then_unlisted(self):
        results = {
            "Custom metric": {"2019": 3.0},
            "EBITDA": {"2019": 2.0},
            "Total Operating Income": {"2019": 1.0},
        }
        assert export_rows(results) == ["Total Operating Income", "EBITDA", "Custom metric"]

    def test_full_results_every_metric_once(self, operating_data, balance_data):
        results = compute_credit_analysis(YEARS, operating_data, balance_data)
        lines = results_to_csv(results, YEARS).splitlines()
        names = [line.rsplit(",", 2)[0] for line in lines[1:]]
        assert len(names) == len(set(names)) == len(DERIVED_METRICS)
        for line in lines[1:]:
            cells = line.rsplit(",", 2)[1:]
            assert all(len(c.split(".")[1]) == 2 for c in cells), line

    def test_unix_line_endings(self):
        assert "\r" not in results_to_csv({"EBITDA": {"2019": 1.0}}, YEARS)


class TestFrames:
    def test_results_to_frame(self):
        df = results_to_frame({"EBITDA": {"2019": 1.0}}, YEARS)
        assert list(df.columns) == YEARS
        assert df.loc["EBITDA", "2019"] == 1.0
        assert math.isnan(df.loc["EBITDA", "2020"])

    def test_section_frames_follow_layout(self, operating_data, balance_data):
        results = compute_credit_analysis(YEARS, operating_data, balance_data)
        frames = section_frames(results, YEARS)
        assert [t for t, _, _ in frames] == [t for t, _, _ in OUTPUT_SECTIONS]
        assert list(frames[0][2].index)[:2] == ["Total Operating Income", "EBITDA"]

    def test_unlisted_metrics(self):
        assert unlisted_metrics({"EBITDA": {}, "Custom": {}}) == ["Custom"]


class TestInputTemplate:
    def test_blank_template_lists_input_lines(self):
        lines = input_template_csv(OPERATING, YEARS).splitlines()
        assert lines[0] == "Particulars,2019,2020"
        assert lines[1] == "1. Gross Sales,,"
        assert not any(line.startswith("3. Net Sales (1-2)") for line in lines)

    def test_prefilled_values(self):
        csv_text = input_template_csv(BALANCE, YEARS, {"# SBLC": {"2020": 4.0}})
        assert "# SBLC,,4.0" in csv_text.splitlines()

    def test_values_keep_full_precision(self):
        csv_text = input_template_csv(OPERATING, YEARS, {"Cost of Goods Sold": {"2019": 1234.567}})
        assert "Cost of Goods Sold,1234.567," in csv_text.splitlines()

    def test_labels_with_commas_are_quoted(self):
        csv_text = input_template_csv(OPERATING, YEARS)
        assert '"7. Selling, general and Admin exp",,' in csv_text.splitlines()
