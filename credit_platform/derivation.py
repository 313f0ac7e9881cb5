"""
credit_platform/derivation.py
=============================
Financial Ratio Derivation Engine.

Turns the Form II (Operating Statement) and Form III (Balance Sheet) time
series into the derived credit-analysis metrics, one complete record per
fiscal year.

Each year is derived from its own two rows and the two rows of the year
before it (by position). The derivation is an ordered tuple of phases over
a per-year accumulator:

  1. Financial performance        5. Return ratios
  2. Capital structure/positions  6. Solvency / coverage / DSCR
  3. Growth ratios                7. Liquidity / turnover / day counts
  4. Profitability margins        8. Capex and debt roll-forward

Phases 1-2 are also applied to the previous year's rows to give the prior
base record that growth, averages and roll-forwards compare against.
Day counts are whole days as soon as they are derived, so cycles add up
from the displayed parts; everything else is rounded when the record is
emitted.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Tuple

from .aligner import align_years
from .arithmetic import average, finite, growth_safe_divide, round_amount, round_days, safe_divide
from .config import CreditAnalysisConfig, DEFAULT_CONFIG
from .metrics import DERIVED_METRICS, TERM_DEBT_ROLL, VEHICLE_LOAN_ROLL, WCTL_ROLL, metric_kind
from .schema import BALANCE_FIELDS, OPERATING_FIELDS
from .types import FinancialData, Row


# ─── Per-Year Context ─────────────────────────────────────────────────────────

@dataclass
class _YearContext:
    year: str
    op: Row
    bs: Row
    prev_op: Row
    prev_bs: Row
    config: CreditAnalysisConfig
    prior: Dict[str, float] = field(default_factory=dict)
    acc: Dict[str, float] = field(default_factory=dict)

    def op_value(self, key: str) -> float:
        return self.op.get(OPERATING_FIELDS[key], 0.0)

    def bs_value(self, key: str) -> float:
        return self.bs.get(BALANCE_FIELDS[key], 0.0)

    def prev_bs_value(self, key: str) -> float:
        return self.prev_bs.get(BALANCE_FIELDS[key], 0.0)

    def prior_value(self, metric: str) -> float:
        return self.prior.get(metric, 0.0)


Phase = Callable[[_YearContext], None]


# ─── Phase 1: Financial Performance ───────────────────────────────────────────

def _financial_performance(ctx: _YearContext) -> None:
    a = ctx.acc
    dep = ctx.op_value("depreciation")
    amort = ctx.op_value("amortisation")

    a["Total Operating Income"] = ctx.op_value("net_operating_income")
    a["EBITDA"] = ctx.op_value("operating_profit_before_interest") + dep + amort
    a["Depreciation"] = dep + amort
    a["Interest"] = ctx.op_value("finance_charges")
    a["Other Income"] = ctx.op_value("non_operating_income")
    a["Other expense"] = ctx.op_value("non_operating_expenses")
    a["Profit before tax"] = (a["EBITDA"] - a["Depreciation"] - a["Interest"]
                              + a["Other Income"] - a["Other expense"])
    a["Current Tax"] = ctx.op_value("provision_for_taxes") + ctx.op_value("previous_year_tax_adjustments")
    a["Deferred Tax"] = ctx.op_value("deferred_tax")
    a["Profit after tax"] = a["Profit before tax"] - a["Current Tax"] - a["Deferred Tax"]
    a["Cash Profits (GCA)"] = a["Profit after tax"] + a["Deferred Tax"] + a["Depreciation"]


# ─── Phase 2: Capital Structure & Balance Positions ───────────────────────────

def _capital_structure(ctx: _YearContext) -> None:
    a = ctx.acc
    b = ctx.bs_value

    a["Share Capital"] = b("share_capital")
    a["Tangible Net Worth (TNW)"] = b("adjusted_tnw")
    a["Unsecured loan (Quasi eq.)"] = b("qe_eligible_unsecured_loans")
    a["Term debt"] = b("capex_term_loan_instalments") + b("term_loans")
    a["WCTL"] = b("wctl_instalments") + b("deferred_payment_credits")
    a["Working capital debt"] = b("bank_finance_subtotal")
    a["Vehicle loans"] = b("vehicle_loan_instalments") + b("vehicle_loans")
    # QE-eligible portion already counted in TNW
    a["Unsecured loans"] = b("unsecured_loans") - b("qe_eligible_unsecured_loans")
    a["Total debt"] = (a["Term debt"] + a["Working capital debt"]
                       + a["Vehicle loans"] + a["Unsecured loans"])
    a["SBLC/BG"] = b("sblc") + b("bank_guarantee")
    a["Capital employed"] = a["Tangible Net Worth (TNW)"] + a["Working capital debt"]
    a["Liquidity (Unencumbered)"] = (b("cash_unencumbered")
                                     + b("cash_pending_strategic_investment")
                                     + b("govt_securities_short_term"))
    a["Liquidity (Encumbered)"] = b("encumbered_investments") + b("margin_money_deposits")
    a["Group companies"] = b("group_company_investments")
    a["Others"] = b("investment_in_new_business") + b("non_current_investment")
    a["Investments"] = a["Group companies"] + a["Others"]
    a["Total outside liabilities (TOL)"] = b("total_outside_liabilities")

    a["Total current assets"] = b("total_current_assets")
    a["TCA except free liquidity"] = a["Total current assets"] - a["Liquidity (Unencumbered)"]
    a["Total current liabilities"] = b("total_current_liabilities")
    a["TCL except fin liab"] = b("other_current_liabilities_subtotal")
    a["Net WC"] = a["TCA except free liquidity"] - a["TCL except fin liab"]
    a["Gross Debtors"] = b("debtors_under_six_months") + b("debtors_over_six_months")
    a["Advance to Suppliers"] = b("advances_to_suppliers")
    a["Inventory"] = b("inventory")
    a["Creditors"] = b("sundry_creditors")
    a["Advance from Customers"] = b("advance_from_customers")
    a["Cost of goods sold"] = ctx.op_value("cost_of_goods_sold")
    a["Cost of sales"] = ctx.op_value("cost_of_sales_subtotal") - a["Depreciation"]
    a["Net block of Fixed Assets"] = b("net_block")
    a["A Gross FA incl CWIP"] = b("gross_block_closing") + b("capital_work_in_process")
    a["B Capex advance"] = b("capex_advances")
    a["C Creditors for capex"] = b("creditors_for_capex")
    a["Repayment of TL"] = b("repayment_term_loans")
    a["Repayment of Vehicle loans"] = b("repayment_vehicle_loans")
    a["Repayment of WCTL"] = b("repayment_wctl")


# ─── Phase 3: Growth ──────────────────────────────────────────────────────────

_GROWTH_BASES: Tuple[Tuple[str, str], ...] = (
    ("Sales growth", "Total Operating Income"),
    ("EBITDA growth", "EBITDA"),
    ("PBT growth", "Profit before tax"),
    ("PAT growth", "Profit after tax"),
)


def _growth(ctx: _YearContext) -> None:
    for metric, base in _GROWTH_BASES:
        cur = ctx.acc[base]
        prev = ctx.prior_value(base)
        ctx.acc[metric] = growth_safe_divide(cur - prev, prev) * 100


# ─── Phase 4: Profitability ───────────────────────────────────────────────────

def _profitability(ctx: _YearContext) -> None:
    a = ctx.acc
    toi = a["Total Operating Income"]
    a["EBITDA Margin"] = safe_divide(a["EBITDA"], toi) * 100
    a["PBT Margin"] = safe_divide(a["Profit before tax"], toi) * 100
    a["PAT Margin"] = safe_divide(a["Profit after tax"], toi) * 100


# ─── Phase 5: Returns ─────────────────────────────────────────────────────────

def _returns(ctx: _YearContext) -> None:
    a = ctx.acc
    avg_ce = average(a["Capital employed"], ctx.prior_value("Capital employed"))
    avg_tnw = average(a["Tangible Net Worth (TNW)"], ctx.prior_value("Tangible Net Worth (TNW)"))
    pbit = a["Profit before tax"] + a["Interest"]
    a["Return on Capital Employed"] = safe_divide(pbit, avg_ce) * 100
    a["Return on Equity"] = safe_divide(a["Profit after tax"], avg_tnw) * 100


# ─── Phase 6: Solvency, Coverage & DSCR ───────────────────────────────────────

def _solvency(ctx: _YearContext) -> None:
    a = ctx.acc
    interest = a["Interest"]
    gca = a["Cash Profits (GCA)"]
    tnw = a["Tangible Net Worth (TNW)"]
    wc_debt = a["Working capital debt"]
    repayments = a["Repayment of TL"] + a["Repayment of Vehicle loans"] + a["Repayment of WCTL"]

    a["Average cost of borrowing"] = safe_divide(
        interest, average(wc_debt, ctx.prior_value("Working capital debt"))) * 100
    # share of cash profits in cash profits plus scheduled repayments
    a["Cash Profits/Debt Repay"] = safe_divide(gca, gca + repayments)
    a["Debt Equity ratio"] = safe_divide(a["Term debt"], tnw)
    a["Overall gearing"] = safe_divide(wc_debt, tnw)
    a["TOL/TNW"] = safe_divide(a["Total outside liabilities (TOL)"], tnw)
    a["Interest Coverage Ratio"] = safe_divide(a["EBITDA"], interest)

    internal_accruals = max(0.0, ctx.bs_value("internal_accruals"))
    a["Add: Interest"] = interest
    a["Less: Internal Accruals"] = internal_accruals
    a["Cash available for debt servicing (A)"] = gca + interest - internal_accruals
    a["Interest payment"] = interest
    a["Principal repayment"] = repayments
    a["Total debt servicing (B)"] = interest + repayments
    dscr = safe_divide(a["Cash available for debt servicing (A)"], a["Total debt servicing (B)"])
    a["DSCR (A/B)"] = dscr
    a["Debt Service Coverage Ratio"] = dscr

    # "Total debt" ratios are measured on working capital debt
    a["Total debt/Cash Profits"] = safe_divide(wc_debt, gca)
    a["Term debt/Cash Profits"] = safe_divide(a["Term debt"], gca)
    a["Total debt/EBITDA (Lev.)"] = safe_divide(wc_debt, a["EBITDA"])


# ─── Phase 7: Liquidity & Turnover ────────────────────────────────────────────

def _days(flow: float, avg_balance: float, days_in_year: int) -> float:
    """Whole days: days_in_year / (flow / average balance); 0 when either side is 0."""
    if not flow or not avg_balance:
        return 0.0
    return round_days(safe_divide(days_in_year, safe_divide(flow, avg_balance)))


def _liquidity(ctx: _YearContext) -> None:
    a = ctx.acc
    p = ctx.prior_value
    n = ctx.config.days_in_year
    toi = a["Total Operating Income"]
    cogs = a["Cost of goods sold"]
    cos = a["Cost of sales"]

    a["Sales/WC debt"] = safe_divide(toi, a["Working capital debt"])
    a["Current Ratio"] = safe_divide(a["Total current assets"], a["Total current liabilities"])

    a["Debtor (days)"] = _days(toi, average(a["Gross Debtors"], p("Gross Debtors")), n)
    a["Inventory (days)"] = _days(cogs, average(a["Inventory"], p("Inventory")), n)
    a["Payable (days)"] = _days(cos, average(a["Creditors"], p("Creditors")), n)
    a["Operating cycle (days)"] = a["Debtor (days)"] + a["Inventory (days)"] - a["Payable (days)"]

    adj_debtors = average(a["Gross Debtors"] + a["Advance to Suppliers"],
                          p("Gross Debtors") + p("Advance to Suppliers"))
    adj_creditors = average(a["Creditors"] + a["Advance from Customers"],
                            p("Creditors") + p("Advance from Customers"))
    a["Adj. Debtor (days) (incl adv to supp)"] = _days(toi, adj_debtors, n)
    a["Adj. payable (days) (incl adv from cust)"] = _days(cos, adj_creditors, n)
    a["Adj. operating cycle (days)"] = (a["Adj. Debtor (days) (incl adv to supp)"]
                                        + a["Inventory (days)"]
                                        - a["Adj. payable (days) (incl adv from cust)"])

    avg_tca = average(a["TCA except free liquidity"], p("TCA except free liquidity"))
    a["Gross Current Asset (days)"] = _days(toi, avg_tca, n)

    avg_net_block = average(a["Net block of Fixed Assets"], p("Net block of Fixed Assets"))
    a["Fixed Assets Turnover Ratio"] = safe_divide(toi, avg_net_block)


# ─── Phase 8: Capex & Debt Roll-Forward ───────────────────────────────────────

def _roll_forward(ctx: _YearContext, labels: Tuple[str, ...], metric: str, repayment: str) -> float:
    opening = ctx.prior_value(metric)
    closing = ctx.acc[metric]
    repaid = ctx.acc[repayment]
    availed = closing + repaid - opening
    for label, value in zip(labels, (opening, availed, repaid, closing)):
        ctx.acc[label] = value
    return availed


def _capex_and_debt(ctx: _YearContext) -> None:
    a = ctx.acc
    p = ctx.prior_value

    capex = ((a["A Gross FA incl CWIP"] + a["B Capex advance"] - a["C Creditors for capex"])
             - (p("A Gross FA incl CWIP") + p("B Capex advance") - p("C Creditors for capex")))
    a["Capex (A1+B1+C1-A0-B0-C0)"] = capex
    a["Incremental capex"] = capex

    term_availed = _roll_forward(ctx, TERM_DEBT_ROLL, "Term debt", "Repayment of TL")
    _roll_forward(ctx, VEHICLE_LOAN_ROLL, "Vehicle loans", "Repayment of Vehicle loans")
    _roll_forward(ctx, WCTL_ROLL, "WCTL", "Repayment of WCTL")

    a["Gross Debt availed"] = term_availed
    a["Total term debt availed"] = term_availed
    a["Funded from term debt"] = term_availed
    a["Funded from unsec. loan"] = ctx.bs_value("unsecured_loans") - ctx.prev_bs_value("unsecured_loans")
    a["Funded from Internal Accruals"] = capex - term_availed - a["Funded from unsec. loan"]
    a["% TL to capex"] = safe_divide(term_availed, capex) * 100
    a["FATR to compare with capex"] = a["Fixed Assets Turnover Ratio"]

    a["CFOA"] = a["Cash Profits (GCA)"] - (a["Net WC"] - p("Net WC"))


PHASES: Tuple[Phase, ...] = (
    _financial_performance,
    _capital_structure,
    _growth,
    _profitability,
    _returns,
    _solvency,
    _liquidity,
    _capex_and_debt,
)

BASE_PHASES: Tuple[Phase, ...] = PHASES[:2]


# ─── Record Assembly ──────────────────────────────────────────────────────────

def _round_metric(metric: str, value: float, decimals: int) -> float:
    if metric_kind(metric) == "days":
        return round_days(value)
    return round_amount(value, decimals)


def _prior_record(prev_op: Row, prev_bs: Row, config: CreditAnalysisConfig) -> Dict[str, float]:
    ctx = _YearContext("", prev_op, prev_bs, {}, {}, config)
    for phase in BASE_PHASES:
        phase(ctx)
    return ctx.acc


def derive_year(
    year: str,
    operating: Row,
    balance: Row,
    prev_operating: Row,
    prev_balance: Row,
    config: Optional[CreditAnalysisConfig] = None,
) -> Dict[str, float]:
    """Complete, rounded metric record for one year."""
    cfg = config or DEFAULT_CONFIG
    ctx = _YearContext(year, operating, balance, prev_operating, prev_balance, cfg)
    ctx.prior = _prior_record(prev_operating, prev_balance, cfg)
    for phase in PHASES:
        phase(ctx)
    return {
        metric: _round_metric(metric, finite(ctx.acc.get(metric)), cfg.decimals)
        for metric in DERIVED_METRICS
    }


def compute_credit_analysis(
    years: Sequence[str],
    operating: FinancialData,
    balance: FinancialData,
    config: Optional[CreditAnalysisConfig] = None,
) -> FinancialData:
    """
    Derive every metric for every year.

    Returns {metric: {year: value}} with every metric present for every
    year. Never raises for finite inputs; undefined ratios come out as 0.
    """
    cfg = config or DEFAULT_CONFIG
    results: FinancialData = {metric: {} for metric in DERIVED_METRICS}
    for aligned in align_years(years, operating, balance):
        record = derive_year(aligned.year, aligned.operating, aligned.balance,
                             aligned.prev_operating, aligned.prev_balance, cfg)
        for metric, value in record.items():
            results[metric][aligned.year] = value
    return results
