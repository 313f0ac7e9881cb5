"""
tests/test_schema.py
====================
Schema integrity, canonical key space and label resolution.
"""
import pytest

from credit_platform.schema import (
    BALANCE_FIELDS,
    BALANCE_SHEET_SCHEMA,
    LABEL_ALIASES,
    OPERATING_FIELDS,
    OPERATING_STATEMENT_SCHEMA,
    SCHEMAS,
    get_line_item,
    get_schema,
    input_labels,
    normalize_label,
    resolve_label,
    sections,
)
from credit_platform.types import BALANCE, OPERATING


class TestSchemaIntegrity:
    @pytest.mark.parametrize("statement", [OPERATING, BALANCE])
    def test_labels_unique(self, statement):
        labels = [item.label for item in get_schema(statement)]
        assert len(labels) == len(set(labels))

    def test_canonical_keys_point_at_schema_labels(self):
        op_labels = {item.label for item in OPERATING_STATEMENT_SCHEMA}
        bs_labels = {item.label for item in BALANCE_SHEET_SCHEMA}
        assert set(OPERATING_FIELDS.values()) <= op_labels
        assert set(BALANCE_FIELDS.values()) <= bs_labels

    @pytest.mark.parametrize("statement", [OPERATING, BALANCE])
    def test_alias_targets_are_schema_labels(self, statement):
        labels = {item.label for item in get_schema(statement)}
        for alias, target in LABEL_ALIASES[statement].items():
            assert target in labels, alias

    @pytest.mark.parametrize("statement", [OPERATING, BALANCE])
    def test_formulas_reference_schema_labels(self, statement):
        labels = {item.label for item in get_schema(statement)}
        for item in get_schema(statement):
            for component, sign in item.formula:
                assert component in labels
                assert sign in (1, -1)

    def test_computed_lines(self):
        computed = {i.label for s in SCHEMAS.values() for i in s if i.kind == "computed"}
        assert "3. Net Sales (1-2)" in computed
        assert "5. Net Operating Income (3+4)" in computed
        assert "8. Sub-total (6+7) Cost of sales" in computed
        assert "Difference Asset & Liabilities" in computed

    def test_percent_lines(self):
        for label in ("Material consumed % of sales", "Effective Tax rate", "Amor % of Intangibles"):
            assert get_line_item(OPERATING, label).kind == "percent"

    def test_debt_servicing_lines_present(self):
        section = dict(sections(BALANCE))["DEBT SERVICING SCHEDULE"]
        assert [i.label for i in section] == [
            "D. Repayment of TL",
            "E. Repayment of Vehicle loans",
            "F. Repayment of WCTL",
            "G. Internal accruals applied (funded from internal accruals)",
        ]

    def test_section_headers_are_not_line_items(self):
        assert get_line_item(BALANCE, "CURRENT LIABILITIES") is None

    def test_input_labels_exclude_computed(self):
        labels = input_labels(OPERATING)
        assert "3. Net Sales (1-2)" not in labels
        assert "1. Gross Sales - Total" in labels

    def test_unknown_statement(self):
        with pytest.raises(ValueError):
            get_schema("CashFlow")


class TestResolveLabel:
    def test_exact(self):
        assert resolve_label(BALANCE, "29. Inventory:") == "29. Inventory:"

    def test_alias(self):
        assert resolve_label(BALANCE, "SBLC") == "# SBLC"
        assert resolve_label(BALANCE, "Inventory") == "29. Inventory:"
        assert resolve_label(OPERATING, "12. Finance Charges") == "10. Finance Charges"
        assert resolve_label(OPERATING, "11. Operating Profit before Interest (5-10)") == \
            "9. Operating Profit before Interest (5-8)"

    def test_normalized_match(self):
        assert resolve_label(BALANCE, "9C Vehicle Loans") == "9C. Vehicle loans"
        assert resolve_label(BALANCE, "repayment of tl") == "D. Repayment of TL"

    def test_ambiguous_normalized_form_unresolved(self):
        assert resolve_label(BALANCE, "Others") is None

    def test_expense_side_other_lines_distinct(self):
        income = "12. ix. Other (Pls specify)"
        expense = "12. ix. Other (Pls specify) (Expenses)"
        assert resolve_label(OPERATING, income) == income
        assert resolve_label(OPERATING, expense) == expense
        assert resolve_label(OPERATING, "12. xiii. Other (Pls specify) ") == "12. xiii. Other (Pls specify) (Expenses)"

    def test_no_labels_differ_only_by_whitespace(self):
        for statement in (OPERATING, BALANCE):
            labels = [item.label for item in get_schema(statement)]
            assert all(label == label.strip() for label in labels)
            assert len({label.strip() for label in labels}) == len(labels)

    def test_unknown(self):
        assert resolve_label(OPERATING, "Goodwill impairment") is None
        assert resolve_label(OPERATING, "") is None

    def test_statement_scoped(self):
        assert resolve_label(OPERATING, "SBLC") is None


class TestNormalizeLabel:
    def test_strips_numbering(self):
        assert normalize_label("6. xi. Depreciation") == "depreciation"
        assert normalize_label("A. ii. as Short Term Loans") == "as short term loans"

    def test_strips_symbols(self):
        assert normalize_label("$ BG (EPC)") == "bg epc"
