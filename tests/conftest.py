"""
tests/conftest.py
=================
Shared pytest fixtures for the Credit Analysis Workbench test suite.
"""
import sys
import os

# Ensure the project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from credit_platform.schema import BALANCE_FIELDS, OPERATING_FIELDS


def statement_data(fields, values):
    """{engine_key: {year: value}} → {schema label: {year: value}}."""
    return {fields[key]: dict(series) for key, series in values.items()}


@pytest.fixture
def operating_data():
    """Two-year operating statement keyed by canonical labels."""
    return statement_data(OPERATING_FIELDS, {
        "gross_sales_total": {"2019": 1000.0, "2020": 1200.0},
        "excise_duty": {"2019": 0.0, "2020": 0.0},
        "other_operating_income_total": {"2019": 0.0, "2020": 0.0},
        "cost_of_goods_sold": {"2019": 600.0, "2020": 700.0},
        "sga_total": {"2019": 200.0, "2020": 230.0},
        "depreciation": {"2019": 40.0, "2020": 50.0},
        "amortisation": {"2019": 10.0, "2020": 10.0},
        "finance_charges": {"2019": 30.0, "2020": 35.0},
        "non_operating_income": {"2019": 5.0, "2020": 8.0},
        "non_operating_expenses": {"2019": 2.0, "2020": 3.0},
        "provision_for_taxes": {"2019": 40.0, "2020": 50.0},
        "deferred_tax": {"2019": 3.0, "2020": 4.0},
        "previous_year_tax_adjustments": {"2019": 1.0, "2020": 0.0},
    })


@pytest.fixture
def balance_data():
    """Two-year balance sheet keyed by canonical labels."""
    return statement_data(BALANCE_FIELDS, {
        "adjusted_tnw": {"2019": 500.0, "2020": 600.0},
        "share_capital": {"2019": 100.0, "2020": 100.0},
        "bank_finance_subtotal": {"2019": 150.0, "2020": 180.0},
        "term_loans": {"2019": 200.0, "2020": 220.0},
        "capex_term_loan_instalments": {"2019": 40.0, "2020": 40.0},
        "total_current_assets": {"2019": 500.0, "2020": 560.0},
        "total_current_liabilities": {"2019": 250.0, "2020": 280.0},
        "debtors_under_six_months": {"2019": 100.0, "2020": 120.0},
        "inventory": {"2019": 90.0, "2020": 110.0},
        "sundry_creditors": {"2019": 80.0, "2020": 90.0},
        "net_block": {"2019": 400.0, "2020": 450.0},
        "repayment_term_loans": {"2019": 30.0, "2020": 40.0},
    })
