"""
credit_platform/metrics.py
==========================
Output vocabulary of the derivation engine: metric kinds, the presentation
layout (sections in display order) and the export order derived from it.
"""
from __future__ import annotations
from typing import Dict, List, Tuple

from .types import MetricKind


# ─── Debt Roll-Forward Labels ─────────────────────────────────────────────────

ROLL_FORWARD_STEPS = ("Opening debt", "Add: Debt availed-other", "Less: Repayments", "Closing debt")


def roll_forward_labels(prefix: str = "") -> Tuple[str, ...]:
    """Term debt uses the bare labels; vehicle loans and WCTL are prefixed."""
    if not prefix:
        return ROLL_FORWARD_STEPS
    return tuple(f"{prefix}: {step}" for step in ROLL_FORWARD_STEPS)


TERM_DEBT_ROLL = roll_forward_labels()
VEHICLE_LOAN_ROLL = roll_forward_labels("Vehicle loans")
WCTL_ROLL = roll_forward_labels("WCTL")


# ─── Presentation Layout ──────────────────────────────────────────────────────
# (title, subtitle, metrics). A metric may appear in more than one section.

OUTPUT_SECTIONS: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    ("FINANCIAL PERFORMANCE", "(Amount in Cr.)", (
        "Total Operating Income",
        "EBITDA",
        "Depreciation",
        "Interest",
        "Other Income",
        "Other expense",
        "Profit before tax",
        "Current Tax",
        "Deferred Tax",
        "Profit after tax",
        "Cash Profits (GCA)",
        "CFOA",
    )),
    ("CAPITAL STRUCTURE", "", (
        "Share Capital",
        "Tangible Net Worth (TNW)",
        "Unsecured loan (Quasi eq.)",
        "Total debt",
        "Term debt",
        "WCTL",
        "Working capital debt",
        "Vehicle loans",
        "Unsecured loans",
        "SBLC/BG",
        "Capital employed",
        "Liquidity (Unencumbered)",
        "Liquidity (Encumbered)",
        "Investments",
        "Group companies",
        "Others",
        "Total outside liabilities (TOL)",
    )),
    ("KEY RATIOS", "GROWTH RATIOS", (
        "Sales growth",
        "EBITDA growth",
        "PBT growth",
        "PAT growth",
    )),
    ("PROFITABILITY RATIOS", "", (
        "EBITDA Margin",
        "PBT Margin",
        "PAT Margin",
    )),
    ("RETURN RATIOS", "", (
        "Return on Capital Employed",
        "Return on Equity",
    )),
    ("SOLVENCY RATIOS/COVERAGE RATIOS", "", (
        "Average cost of borrowing",
        "Cash Profits/Debt Repay",
        "Debt Equity ratio",
        "Overall gearing",
        "TOL/TNW",
        "Interest Coverage Ratio",
        "Debt Service Coverage Ratio",
        "Total debt/Cash Profits",
        "Term debt/Cash Profits",
        "Total debt/EBITDA (Lev.)",
    )),
    ("LIQUIDITY RATIOS / TURNOVER RATIOS", "", (
        "Sales/WC debt",
        "Current Ratio",
        "Debtor (days)",
        "Inventory (days)",
        "Payable (days)",
        "Operating cycle (days)",
        "Adj. Debtor (days) (incl adv to supp)",
        "Inventory (days)",
        "Adj. payable (days) (incl adv from cust)",
        "Adj. operating cycle (days)",
        "Gross Current Asset (days)",
        "Fixed Assets Turnover Ratio",
    )),
    ("OTHER DETAILS", "(Amount in Cr.)", (
        "Total current assets",
        "TCA except free liquidity",
        "Total current liabilities",
        "TCL except fin liab",
        "Net WC",
        "Gross Debtors",
        "Advance to Suppliers",
        "Inventory",
        "Creditors",
        "Advance from Customers",
        "Cost of goods sold",
        "Cost of sales",
        "A Gross FA incl CWIP",
        "B Capex advance",
        "C Creditors for capex",
        "Capex (A1+B1+C1-A0-B0-C0)",
        "Gross Debt availed",
        "Net block of Fixed Assets",
        "Repayment of TL",
        "Repayment of Vehicle loans",
        "Repayment of WCTL",
    )),
    ("DSCR", "(Amount in Cr.)", (
        "Cash Profits (GCA)",
        "Add: Interest",
        "Less: Internal Accruals",
        "Cash available for debt servicing (A)",
        "Interest payment",
        "Principal repayment",
        "Total debt servicing (B)",
        "DSCR (A/B)",
    )),
    ("CAPEX AND ITS FINANCING", "(Amount in Cr.)", (
        "FATR to compare with capex",
        "% TL to capex",
        "Incremental capex",
        "Total term debt availed",
        "Funded from term debt",
        "Funded from unsec. loan",
        "Funded from Internal Accruals",
    )),
    ("DETAILS OF TERM DEBT", "(Amount in Cr.)", TERM_DEBT_ROLL),
    ("DETAILS OF VEHICLE LOANS", "(Amount in Cr.)", VEHICLE_LOAN_ROLL),
    ("DETAILS OF WCTL", "(Amount in Cr.)", WCTL_ROLL),
)


def export_metric_order() -> List[str]:
    """Layout metrics in section order, first occurrence wins."""
    seen: Dict[str, None] = {}
    for _, _, metrics in OUTPUT_SECTIONS:
        for metric in metrics:
            seen.setdefault(metric, None)
    return list(seen)


# Every metric the engine emits for every year.
DERIVED_METRICS: Tuple[str, ...] = tuple(export_metric_order())


# ─── Metric Kinds ─────────────────────────────────────────────────────────────

DAY_METRICS = frozenset({
    "Debtor (days)",
    "Inventory (days)",
    "Payable (days)",
    "Operating cycle (days)",
    "Adj. Debtor (days) (incl adv to supp)",
    "Adj. payable (days) (incl adv from cust)",
    "Adj. operating cycle (days)",
    "Gross Current Asset (days)",
})

RATIO_METRICS = frozenset({
    "Sales growth", "EBITDA growth", "PBT growth", "PAT growth",
    "EBITDA Margin", "PBT Margin", "PAT Margin",
    "Return on Capital Employed", "Return on Equity",
    "Average cost of borrowing", "Cash Profits/Debt Repay",
    "Debt Equity ratio", "Overall gearing", "TOL/TNW",
    "Interest Coverage Ratio", "Debt Service Coverage Ratio", "DSCR (A/B)",
    "Total debt/Cash Profits", "Term debt/Cash Profits", "Total debt/EBITDA (Lev.)",
    "Sales/WC debt", "Current Ratio",
    "Fixed Assets Turnover Ratio", "FATR to compare with capex", "% TL to capex",
})

# Ratios expressed in percent, shown with a % suffix
PERCENT_METRICS = frozenset({
    "Sales growth", "EBITDA growth", "PBT growth", "PAT growth",
    "EBITDA Margin", "PBT Margin", "PAT Margin",
    "Return on Capital Employed", "Return on Equity",
    "Average cost of borrowing", "% TL to capex",
})


def metric_kind(metric: str) -> MetricKind:
    if metric in DAY_METRICS:
        return "days"
    if metric in RATIO_METRICS:
        return "ratio"
    return "amount"


METRIC_KINDS: Dict[str, MetricKind] = {m: metric_kind(m) for m in DERIVED_METRICS}
