"""
credit_platform/schema.py
=========================
Canonical line-item schema for Form II (Operating Statement) and
Form III (Balance Sheet).

Each statement is an ordered tuple of sections; every line carries a kind:
  - amount   : monetary input cell
  - percent  : percentage input cell, bounded to [0, 100]
  - computed : subtotal derived from other lines, never accepted as input

The derivation engine never addresses a line by its display label directly.
It goes through OPERATING_FIELDS / BALANCE_FIELDS (engine key → label), and
legacy or shortened spellings are resolved through LABEL_ALIASES.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .types import StatementType, LineKind, OPERATING, BALANCE

Formula = Tuple[Tuple[str, int], ...]


@dataclass(frozen=True)
class LineItem:
    label: str
    section: str
    kind: LineKind = "amount"
    formula: Formula = ()

    @property
    def accepts_input(self) -> bool:
        return self.kind != "computed"


@dataclass(frozen=True)
class _Spec:
    label: str
    kind: LineKind
    formula: Formula = ()


def _pct(label: str) -> _Spec:
    return _Spec(label, "percent")


def _calc(label: str, *components: Tuple[str, int]) -> _Spec:
    return _Spec(label, "computed", tuple(components))


def _build(sections: Tuple[Tuple[str, Tuple[Union[str, _Spec], ...]], ...]) -> Tuple[LineItem, ...]:
    items: List[LineItem] = []
    for section, lines in sections:
        for line in lines:
            if isinstance(line, _Spec):
                items.append(LineItem(line.label, section, line.kind, line.formula))
            else:
                items.append(LineItem(line, section))
    return tuple(items)


# ─── Form II: Operating Statement ─────────────────────────────────────────────

_OPERATING_SECTIONS = (
    ("SALES", (
        "1. Gross Sales",
        "1. Gross Sales - i. Export Sales",
        "1. Gross Sales - ii. Domestic Sales",
        "1. Gross Sales - iii. Services Sales",
        "1. Gross Sales - i. Services Sales",
        "1. Gross Sales - Total",
        "2. Less Deductions",
        "2. Less Excise Duty/cess if any",
        _calc("3. Net Sales (1-2)",
              ("1. Gross Sales - Total", 1),
              ("2. Less Excise Duty/cess if any", -1)),
    )),
    ("OTHER OPERATING INCOME", (
        "4. Other operating/revenue income",
        "4. Other operating/revenue income - i. Rental Income",
        "4. Other operating/revenue income - ii. Other Operating Income (Pls specify)",
        "4. Other operating/revenue income - iii. Other Operating Income (Pls specify)",
        "4. Other operating/revenue income - Total",
        _calc("5. Net Operating Income (3+4)",
              ("3. Net Sales (1-2)", 1),
              ("4. Other operating/revenue income - Total", 1)),
    )),
    ("COST OF SALES", (
        "6. Cost of Sales",
        _pct("Material consumed % of sales"),
        "6. i. Raw materials CONSUMED",
        "6. i. Raw materials CONSUMED - Imported",
        "6. i. Raw materials CONSUMED - Indigenous",
        "Opening stock",
        "Opening stock - Imported",
        "Opening stock - Indigenous",
        "Purchase",
        "Purchase - Raw Material",
        "Purchase - Trading Purchases",
        "Closing stock",
        "Closing stock - Imported",
        "Closing stock - Indigenous",
        "6. ii. Other Stores & Spares CONSUMED",
        "6. ii. Other Stores & Spares CONSUMED - Imported",
        "6. ii. Other Stores & Spares CONSUMED - Indigenous",
        _pct("Power and fuel % of manufacturing sales"),
        "6. iii. Power and Fuel",
        _pct("Labour % of manufacturing sales"),
        "6. iv. Direct Labour (Factory wages)",
        "6. v. Other manufacturing expenses",
        "6. vi. Repairs/maintenance/replacement etc.",
        "6. vii. Other (Pls specify)",
        "6. viii. Other (Pls specify)",
        "6. ix. Other (Pls specify)",
        "6. x. Other Mfg exp not covered above",
        _pct("Dep % of GFA excl CWIP and Intangibles"),
        "6. xi. Depreciation",
        _pct("Amor % of Intangibles"),
        "6. xii. Amortisation",
        "Total Mfg Exp (i to ix)",
        "6. i. Opening Stock-in-process",
        "6. ii. Closing Stock-in-process",
        "Change in Stock-in-process/trade",
        "Cost of Production",
        "6. i. Opening Stock of finished goods",
        "6. ii. Closing Stock of finished goods",
        "Change in finished goods stock",
        "Cost of Goods Sold",
    )),
    ("SELLING, GENERAL AND ADMIN EXPENSES", (
        "7. Selling, general and Admin exp",
        _pct("Oth expenses % of sales"),
        "7. i. Salary and staff expenses, director fee",
        "7. ii. Rent, Rates and Taxes",
        "7. iii. Bad Debts",
        "7. iv. Advertisements and Sales Promotions",
        "7. v. Freight Outward & Transportation Exp",
        "7. vi. General & Admin. Expenses",
        "7. vii. C&F Commission",
        "7. viii. Other exp- Research & development",
        "7. ix. Other exp- Royalty on sales",
        "7. x. Other (Pls specify)",
        "7. xi. Other (Pls specify)",
        "7. xii. Other (Pls specify)",
        "7. xiii. Other (Pls specify)",
        "7. xiv. Other operating exp",
        "Total Selling Gen & Admin Exp",
    )),
    ("OPERATING PROFIT", (
        _calc("8. Sub-total (6+7) Cost of sales",
              ("Cost of Goods Sold", 1),
              ("Total Selling Gen & Admin Exp", 1)),
        _calc("9. Operating Profit before Interest (5-8)",
              ("5. Net Operating Income (3+4)", 1),
              ("8. Sub-total (6+7) Cost of sales", -1)),
    )),
    ("FINANCE CHARGES", (
        "10. Finance Charges",
        "10. i. Interest on Term Loans(Link from Repay Sch)",
        "10. ii. Interest on WCTL and DLOD",
        "10. iii. Interest on CC",
        "10. iv. Interest on vehicle loans",
        "10. v. Bank Charges/Others",
        "10. vi. Other (Pls specify)",
        "10. vii. Other (Pls specify)",
        _calc("11. Operating Profit after Dep & Interest (9-10)",
              ("9. Operating Profit before Interest (5-8)", 1),
              ("10. Finance Charges", -1)),
    )),
    ("NON-OPERATING ITEMS", (
        "12. Other non-operating Income",
        "12. i. Dividends received",
        "12. ii. Extraordinary gains",
        "12. iii. Profit on sale of fixed assets / Investments",
        "12. iv. Gain on Exchange Fluctuations",
        "12. v. Misc. income/ Write backs etc",
        "12. vi. Interest from subsidiary",
        "12. vii. Interest from others",
        "12. viii. Rental Income",
        "12. ix. Other (Pls specify)",
        "12. x. Other (Pls specify)",
        "12. xi. Other (Pls specify)",
        "12. xii. Other (Pls specify)",
        "12. xiii. Other (Pls specify)",
        "12. Sub-total (Income)",
        "12. Other non-operating expenses",
        "12. i. Prior Period Items",
        "12. ii. Extraordinary Losses",
        "12. iii. Loss on sale of fixed assets",
        "12. iv. Loss on Exchange Fluctuations",
        "12. v. Write Offs/ Misc expenses write offs",
        "12. vi. Stock Writeoff on account of Covid",
        "12. vii. Exceptional Items",
        "12. viii. Others (Pls specify)",
        "12. ix. Other (Pls specify) (Expenses)",
        "12. x. Other (Pls specify) (Expenses)",
        "12. xi. Other (Pls specify) (Expenses)",
        "12. xii. Other (Pls specify) (Expenses)",
        "12. xiii. Other (Pls specify) (Expenses)",
        "12. Sub-total (Expenses)",
        _calc("12. Net of other non-operating income/ Exp",
              ("12. Sub-total (Income)", 1),
              ("12. Sub-total (Expenses)", -1)),
    )),
    ("PROFIT BEFORE TAX", (
        _calc("13. Profit before tax/loss (11+12)",
              ("11. Operating Profit after Dep & Interest (9-10)", 1),
              ("12. Net of other non-operating income/ Exp", 1)),
    )),
    ("TAX", (
        "14. Tax",
        _pct("Effective Tax rate"),
        "14. i. Provision for taxes",
        "14. ii. Deferred Tax",
        "14. iii. Previous year adjustments",
        _calc("14. Sub Total- Tax",
              ("14. i. Provision for taxes", 1),
              ("14. ii. Deferred Tax", 1),
              ("14. iii. Previous year adjustments", 1)),
    )),
    ("NET PROFIT", (
        _calc("15. Net Profit / Loss (13-14)",
              ("13. Profit before tax/loss (11+12)", 1),
              ("14. Sub Total- Tax", -1)),
    )),
    ("APPROPRIATIONS", (
        "16. Dividend Appropriations",
        "16. i. Interim Dividend",
        "16. ii. Proposed Dividend (Provision)",
        "16. iii. Tax on dividend",
        "16. Total Dividend Appropriation",
        "17. Retained Profit- P&L carried to Balance Sheet",
    )),
    ("OPERATING LEVERAGE INPUTS", (
        "18. Inputs for Computing Operating Leverage",
        "18. Variable Expenses (to be entered manually)",
        "18. Fixed Cost",
        "18. Contribution",
    )),
)


# ─── Form III: Balance Sheet ──────────────────────────────────────────────────

_BALANCE_SECTIONS = (
    ("CURRENT LIABILITIES", (
        "# SBLC",
        "$ BG (EPC)",
        "1. Short-term finance from banks (including bills purchased, discounted & excess borrowing and short term loans, placed on repayment basis) CC and OD",
        "1. i. From Axis Bank",
        "1. ii. From IDFC Bank",
        "1. iii. From HDFC Bank",
        "1. iv. From Yes Bank",
        "1. v. Other Banks",
        "1. Sub-total [i + iii] (A)",
        "2. Short term borrowings from others/Commercial paper",
        "3. Sundry Creditors (Trade)",
        "4. Advance payments from customers /deposits from dealers",
        "5A. Instalments of Vehicle loans (due within 1 yr) (including lease liability) (Linked to Repayment schedules)",
        "5B. Instalments of WCTL and DLOD (due within 1 yr) (including lease liability) (Linked to Repayment schedules)",
        "5C. Instalments of CAPEX linked Term Loans/ Debentures/ Preference Shares/ Deposits/ Other debts (due within 1 yr) (including lease liability) (Linked to Repayment schedules)",
        "6. Other current liabilities & provisions (due within 1 year)",
        "6. i. Tax/ Statutory deferred liabilities (due within 1 yr)",
        "6. ii. Interest accrued (including both due & not due)",
        "6. iii. Others dues- Rent & Dealership deposits",
        "6. iv. Dividend Payable",
        "6. v. Dues to Directors",
        "6. vi. Other Liabilities",
        "6. vii. Provisions- Dividend including tax",
        "6. viii. Provisions- Others",
        "6. ix. Preoperative expenses",
        "6. x. Handling charges payable",
        "6. xi. Rents payable",
        "6. xii. Others (specify)",
        "6. xiii. Others (specify)",
        "6. xiv. Others (specify)",
        "6. xv. Others (specify)",
        "Sub total-Other Current Liabilities other than Bank Finance [2to6] (B)",
        "7. Total current liabilities [A + B]",
    )),
    ("TERM LIABILITIES", (
        "8. Creditors for Capex",
        "9A. Term Loans (excluding instalments payable within 1 year and WCTL)",
        "9B. WCTL and DLOD",
        "9C. Vehicle loans",
        "10. Preference Shares >1 Year but < 5 Years",
        "11. Unsecured loans",
        "12. Other term liabilities",
        "12. i. Deferred Payment Credits (excluding instalments due within 1 year)",
        "12. ii. Others - Corporate Loan",
        "12. iii. Provisions",
        "12. iv. Provisions",
        "13. Total Term Liabilities (8+9+10+11+12)",
        "14. Total Outside Liabilities [7+13]",
    )),
    ("NET WORTH", (
        "15. Ordinary Share Capital (including premium)",
        "16. Share Warrants",
        "17. Share Premium: Opening",
        "17. Adjustments (please specify)",
        "17. Closing",
        "18. General Reserve: Opening",
        "18. Adjustments (please specify)",
        "18. Closing",
        "19. Capital Reserve: Opening",
        "19. Adjustments (please specify)",
        "19. Closing",
        "20. Other Reserves (Ind AS Adjustment)",
        "21. Surplus (+) or deficit (-) in Profit & Loss a/c",
        "22. Deferred Tax Liability (Net)",
        "23. Others",
        "23. i. Capital Subsidy",
        "23. ii. Share Application Money",
        "23. iii. Share Suspense",
        "23. iv. Revaluation Reserve- not part of TNW",
        "23. v. Others specify",
        "23. vi. Others specify",
        "23. vii. Others specify",
        "23. viii. Others specify",
        "23. ix. Others specify",
        "24. Net Worth (15 to 23)",
        "25. TOTAL LIABILITIES (14+24)",
        _calc("Difference Asset & Liabilities",
              ("38. Total Assets (31+35+36+37)", 1),
              ("25. TOTAL LIABILITIES (14+24)", -1)),
    )),
    ("CURRENT ASSETS", (
        "26. Cash and Bank Balances (unencumbered)",
        "27. Investments (other than long term)",
        "27. i. Govt. and other trustee securities- short term",
        "27. ii. Encumbered",
        "27. iii. Cash at Bank (Pending for strategic investment)",
        "28. Sundry Debtors- LESS THAN 6 MONTHS OLD",
        "28. i. Domestic receivables other than deferred & exports (incldg. bills discounted by banks)",
        "28. ii. Export receivables (incldg. Bills discounted by banks)",
        "29. Inventory:",
        "29. i. Raw materials",
        "29. i. Imported",
        "29. i. Indigenous",
        "29. ii. Stocks-in-process/trade",
        "29. iii. Finished goods",
        "29. iv. Other consumable stores/spares/packing mat.",
        "29. iv. Imported",
        "29. iv. Indigenous",
        "30. Other current assets (specify major items)",
        "30. i. Advances to suppliers of raw material/spares",
        "30. ii. Advance payment of taxes (net of provisions)",
        "30. iii. Other advances- considered good",
        "30. iv. Accured interest income",
        "30. v. Others- Current dues from Directors",
        "30. vi. Prepaid Expenses",
        "30. vii. Instalments of deferred receivables (due within 1 year)",
        "30. viii. Others (Godown and Office Rents)",
        "30. ix. Inter croporate Deposit",
        "30. x. Others (pls specify)",
        "30. xi. Others (pls specify)",
        "30. xii. Others (pls specify)",
        "30. xiii. Others (pls specify)",
        "30. xiv. Others (pls specify)",
        "30. xv. Others (pls specify)",
        "31. Total Current Assets (26 to 30)",
    )),
    ("FIXED ASSETS", (
        "32. Gross Block (land, building, machinery, WIP) Opening",
        "32. Capex",
        "32. Closing",
        "33. Capital work in process",
        "34. Accumulated Depreciation till date",
        "35. Net Block (32+33-34)",
    )),
    ("OTHER NON-CURRENT ASSETS", (
        "36. Investments/book debts/advances/ deposits which are not current assets",
        "36. i. Investment in New Business",
        "36. ii. Loans & Investments in Group companies/ subsidiaries",
        "36. iii. Non current Investment",
        "36. iv. Advances for capital goods/ contractors",
        "36. v. Debtors More Than 6 Months (net of provisions)",
        "36. vi. Deferred receivables (maturity > 1 year)",
        "36. vii. Others- FD lodged with authorities/ margin money",
        "36. viii. Other",
        "36. ix. Others- Security depo, Disputed IT refund receivable",
        "36. x. Misc expenditures not written off",
        "36. xi. long term loans and advances",
        "36. xii. Others (MAT CREDIT ENTITLEMENT)",
        "36. xiii. Others (pls specify)",
        "36. xiv. Others (pls specify)",
        "36. xv. Others (pls specify)",
        "36. xvi. Others (pls specify)",
        "Total Other Non-current Assets (35+36)",
    )),
    ("INTANGIBLES AND NET WORTH ADJUSTMENTS", (
        "37. Intangible Assets",
        "37. Goodwill",
        "37. Others",
        "37. Accumulated amortization",
        "38. Total Assets (31+35+36+37)",
        "39. Tangible Net Worth (24-37)",
        "40. Adjusted TNW (TNW+Quasi equity)",
        "40. Unsecured Loans",
        "40. Unsecured Loans eligible for QE classification",
        "41. Net Working Capital (31-7)",
    )),
    ("ADDITIONAL INFORMATION", (
        "A. Break-up of Unsecured Loans",
        "A. i. as Long Term Loans",
        "A. ii. as Short Term Loans",
        "B. Arrears of depreciation",
        "C. Contingent Liabilities: (mention details from Balance Sheet)",
        "C. i. Arrears of cumulative dividends",
        "C. ii. Gratuity liability not provided for",
        "C. iii. Disputed excise / customs /tax liabilities",
        "C. iv. Bank guarantee / Letter of credit outstanding",
        "C. v. Other liabilities not provided for",
        "C. vi. Others (pls specify)",
        "C. vii. Others (pls specify)",
        "C. viii. Others (pls specify)",
        "C. ix. Others (pls specify)",
        "C. x. Others (pls specify)",
    )),
    ("DEBT SERVICING SCHEDULE", (
        "D. Repayment of TL",
        "E. Repayment of Vehicle loans",
        "F. Repayment of WCTL",
        "G. Internal accruals applied (funded from internal accruals)",
    )),
)


OPERATING_STATEMENT_SCHEMA: Tuple[LineItem, ...] = _build(_OPERATING_SECTIONS)
BALANCE_SHEET_SCHEMA: Tuple[LineItem, ...] = _build(_BALANCE_SECTIONS)

SCHEMAS: Dict[StatementType, Tuple[LineItem, ...]] = {
    OPERATING: OPERATING_STATEMENT_SCHEMA,
    BALANCE: BALANCE_SHEET_SCHEMA,
}

STATEMENT_TITLES: Dict[StatementType, str] = {
    OPERATING: "Form II - Operating Statement",
    BALANCE: "Form III - Balance Sheet",
}


# ─── Canonical Engine Keys ────────────────────────────────────────────────────

OPERATING_FIELDS: Dict[str, str] = {
    "gross_sales_total": "1. Gross Sales - Total",
    "excise_duty": "2. Less Excise Duty/cess if any",
    "net_sales": "3. Net Sales (1-2)",
    "other_operating_income_total": "4. Other operating/revenue income - Total",
    "net_operating_income": "5. Net Operating Income (3+4)",
    "depreciation": "6. xi. Depreciation",
    "amortisation": "6. xii. Amortisation",
    "cost_of_goods_sold": "Cost of Goods Sold",
    "sga_total": "Total Selling Gen & Admin Exp",
    "cost_of_sales_subtotal": "8. Sub-total (6+7) Cost of sales",
    "operating_profit_before_interest": "9. Operating Profit before Interest (5-8)",
    "finance_charges": "10. Finance Charges",
    "non_operating_income": "12. Sub-total (Income)",
    "non_operating_expenses": "12. Sub-total (Expenses)",
    "provision_for_taxes": "14. i. Provision for taxes",
    "deferred_tax": "14. ii. Deferred Tax",
    "previous_year_tax_adjustments": "14. iii. Previous year adjustments",
}

BALANCE_FIELDS: Dict[str, str] = {
    "sblc": "# SBLC",
    "bank_guarantee": "$ BG (EPC)",
    "bank_finance_subtotal": "1. Sub-total [i + iii] (A)",
    "sundry_creditors": "3. Sundry Creditors (Trade)",
    "advance_from_customers": "4. Advance payments from customers /deposits from dealers",
    "vehicle_loan_instalments": "5A. Instalments of Vehicle loans (due within 1 yr) (including lease liability) (Linked to Repayment schedules)",
    "wctl_instalments": "5B. Instalments of WCTL and DLOD (due within 1 yr) (including lease liability) (Linked to Repayment schedules)",
    "capex_term_loan_instalments": "5C. Instalments of CAPEX linked Term Loans/ Debentures/ Preference Shares/ Deposits/ Other debts (due within 1 yr) (including lease liability) (Linked to Repayment schedules)",
    "other_current_liabilities_subtotal": "Sub total-Other Current Liabilities other than Bank Finance [2to6] (B)",
    "total_current_liabilities": "7. Total current liabilities [A + B]",
    "creditors_for_capex": "8. Creditors for Capex",
    "term_loans": "9A. Term Loans (excluding instalments payable within 1 year and WCTL)",
    "deferred_payment_credits": "12. i. Deferred Payment Credits (excluding instalments due within 1 year)",
    "vehicle_loans": "9C. Vehicle loans",
    "unsecured_loans": "11. Unsecured loans",
    "total_outside_liabilities": "14. Total Outside Liabilities [7+13]",
    "share_capital": "15. Ordinary Share Capital (including premium)",
    "cash_unencumbered": "26. Cash and Bank Balances (unencumbered)",
    "govt_securities_short_term": "27. i. Govt. and other trustee securities- short term",
    "encumbered_investments": "27. ii. Encumbered",
    "cash_pending_strategic_investment": "27. iii. Cash at Bank (Pending for strategic investment)",
    "debtors_under_six_months": "28. Sundry Debtors- LESS THAN 6 MONTHS OLD",
    "inventory": "29. Inventory:",
    "advances_to_suppliers": "30. i. Advances to suppliers of raw material/spares",
    "total_current_assets": "31. Total Current Assets (26 to 30)",
    "gross_block_closing": "32. Closing",
    "capital_work_in_process": "33. Capital work in process",
    "net_block": "35. Net Block (32+33-34)",
    "investment_in_new_business": "36. i. Investment in New Business",
    "group_company_investments": "36. ii. Loans & Investments in Group companies/ subsidiaries",
    "non_current_investment": "36. iii. Non current Investment",
    "capex_advances": "36. iv. Advances for capital goods/ contractors",
    "debtors_over_six_months": "36. v. Debtors More Than 6 Months (net of provisions)",
    "margin_money_deposits": "36. vii. Others- FD lodged with authorities/ margin money",
    "adjusted_tnw": "40. Adjusted TNW (TNW+Quasi equity)",
    "qe_eligible_unsecured_loans": "40. Unsecured Loans eligible for QE classification",
    "repayment_term_loans": "D. Repayment of TL",
    "repayment_vehicle_loans": "E. Repayment of Vehicle loans",
    "repayment_wctl": "F. Repayment of WCTL",
    "internal_accruals": "G. Internal accruals applied (funded from internal accruals)",
}

FIELDS: Dict[StatementType, Dict[str, str]] = {
    OPERATING: OPERATING_FIELDS,
    BALANCE: BALANCE_FIELDS,
}


# ─── Alias Table ──────────────────────────────────────────────────────────────
# Short and drifted spellings found in legacy workbooks and formula sheets.
# Ambiguous short forms ("Closing", "Others") are deliberately absent.

LABEL_ALIASES: Dict[StatementType, Dict[str, str]] = {
    OPERATING: {
        "Net Operating Income": "5. Net Operating Income (3+4)",
        "Total Operating Income": "5. Net Operating Income (3+4)",
        "Net Sales": "3. Net Sales (1-2)",
        "11. Operating Profit before Interest (5-10)": "9. Operating Profit before Interest (5-8)",
        "Operating Profit before Interest": "9. Operating Profit before Interest (5-8)",
        "9. i. Depreciation": "6. xi. Depreciation",
        "9. ii. Amortisation": "6. xii. Amortisation",
        "Depreciation": "6. xi. Depreciation",
        "Amortisation": "6. xii. Amortisation",
        "12. Finance Charges": "10. Finance Charges",
        "Finance Charges": "10. Finance Charges",
        "13. Total Finance Cost (11+12)": "10. Finance Charges",
        "Sub-total (Income)": "12. Sub-total (Income)",
        "Sub-total (Expenses)": "12. Sub-total (Expenses)",
        "Previous year adjustments": "14. iii. Previous year adjustments",
        "Provision for taxes": "14. i. Provision for taxes",
        "Deferred Tax": "14. ii. Deferred Tax",
        "Sub-total (6+7) Cost of sales": "8. Sub-total (6+7) Cost of sales",
        "14. Profit/(Loss) before Tax (11-13)": "13. Profit before tax/loss (11+12)",
        "16. Profit/(Loss) after Tax (14-15)": "15. Net Profit / Loss (13-14)",
        # form spelling: a trailing space marks the expense-side lines
        **{f"12. {n}. Other (Pls specify) ": f"12. {n}. Other (Pls specify) (Expenses)"
           for n in ("ix", "x", "xi", "xii", "xiii")},
    },
    BALANCE: {
        "SBLC": "# SBLC",
        "BG": "$ BG (EPC)",
        "Sub-total [i + iii] (A)": "1. Sub-total [i + iii] (A)",
        "Sundry Creditors (Trade)": "3. Sundry Creditors (Trade)",
        "Advance payments from customers /deposits from dealers": "4. Advance payments from customers /deposits from dealers",
        "Instalments of Vehicle loans due within 1 yr": BALANCE_FIELDS["vehicle_loan_instalments"],
        "Instalments of WCTL and DLOD due within 1 yr": BALANCE_FIELDS["wctl_instalments"],
        "Instalments of CAPEX linked Term Loans due within 1 yr": BALANCE_FIELDS["capex_term_loan_instalments"],
        "Total current liabilities [A + B]": "7. Total current liabilities [A + B]",
        "Creditors for Capex": "8. Creditors for Capex",
        "Term Loans (excluding instalments payable within 1 year and WCTL)": BALANCE_FIELDS["term_loans"],
        "WCTL and DLOD": "9B. WCTL and DLOD",
        "Vehicle loans": "9C. Vehicle loans",
        "Unsecured loans": "11. Unsecured loans",
        "Deferred Payment Credits (excluding instalments due within 1 year)": "12. i. Deferred Payment Credits (excluding instalments due within 1 year)",
        "Total Outside Liabilities [7+13]": "14. Total Outside Liabilities [7+13]",
        "Ordinary Share Capital (including premium)": "15. Ordinary Share Capital (including premium)",
        "Cash and Bank Balances (unencumbered)": "26. Cash and Bank Balances (unencumbered)",
        "Govt. and other trustee securities- short term": "27. i. Govt. and other trustee securities- short term",
        "Encumbered": "27. ii. Encumbered",
        "Cash at Bank (Pending for strategic investment)": "27. iii. Cash at Bank (Pending for strategic investment)",
        "Sundry Debtors- LESS THAN 6 MONTHS OLD": "28. Sundry Debtors- LESS THAN 6 MONTHS OLD",
        "Inventory": "29. Inventory:",
        "Advances to suppliers of raw material/spares": "30. i. Advances to suppliers of raw material/spares",
        "Total Current Assets (26 to 30)": "31. Total Current Assets (26 to 30)",
        "Capital work in process": "33. Capital work in process",
        "Net Block (32+33-34)": "35. Net Block (32+33-34)",
        "Investment in New Business": "36. i. Investment in New Business",
        "Loans & Investments in Group companies/ subsidiaries": "36. ii. Loans & Investments in Group companies/ subsidiaries",
        "Non current Investment": "36. iii. Non current Investment",
        "Advances for capital goods/ contractors": "36. iv. Advances for capital goods/ contractors",
        "Debtors More Than 6 Months (net of provisions)": "36. v. Debtors More Than 6 Months (net of provisions)",
        "Others- FD lodged with authorities/ margin money": "36. vii. Others- FD lodged with authorities/ margin money",
        "Adjusted TNW (TNW+Quasi equity)": "40. Adjusted TNW (TNW+Quasi equity)",
        "Unsecured Loans eligible for QE classification": "40. Unsecured Loans eligible for QE classification",
        "Repayment of TL": "D. Repayment of TL",
        "Repayment of Vehicle loans": "E. Repayment of Vehicle loans",
        "Repayment of WCTL": "F. Repayment of WCTL",
        "Funded from Internal Accruals": "G. Internal accruals applied (funded from internal accruals)",
    },
}


# ─── Lookup Helpers ───────────────────────────────────────────────────────────

_ROMAN_OR_INDEX = re.compile(r"^(\d+[a-z]?|[ivx]+|[a-z])$")


def _normalize_text(s: str) -> str:
    """Lower-case, collapse punctuation/spacing."""
    s = s.lower().strip()
    s = re.sub(r"[^a-z0-9%]+", " ", s)
    return re.sub(r"\s+", " ", s).strip()


def normalize_label(label: str) -> str:
    """Normalized form with leading numbering ("9C.", "6. xi.", "A. ii.") stripped."""
    tokens = _normalize_text(label).split(" ")
    while len(tokens) > 1 and _ROMAN_OR_INDEX.match(tokens[0]):
        tokens = tokens[1:]
    return " ".join(tokens)


def _build_normalized_index(schema: Tuple[LineItem, ...]) -> Dict[str, str]:
    counts: Dict[str, int] = {}
    first: Dict[str, str] = {}
    for item in schema:
        key = normalize_label(item.label)
        counts[key] = counts.get(key, 0) + 1
        first.setdefault(key, item.label)
    return {k: first[k] for k, n in counts.items() if n == 1}


_ITEMS_BY_LABEL: Dict[StatementType, Dict[str, LineItem]] = {
    st: {item.label: item for item in schema} for st, schema in SCHEMAS.items()
}
_NORMALIZED_INDEX: Dict[StatementType, Dict[str, str]] = {
    st: _build_normalized_index(schema) for st, schema in SCHEMAS.items()
}


def get_schema(statement: StatementType) -> Tuple[LineItem, ...]:
    try:
        return SCHEMAS[statement]
    except KeyError:
        raise ValueError(f"Unknown statement: {statement!r}") from None


def get_line_item(statement: StatementType, label: str) -> Optional[LineItem]:
    return _ITEMS_BY_LABEL.get(statement, {}).get(label)


def resolve_label(statement: StatementType, text: str) -> Optional[str]:
    """
    Map free text to a canonical schema label.
    Order: exact label → exact alias → stripped label or alias → unique
    normalized match.
    """
    if not text:
        return None
    items = _ITEMS_BY_LABEL.get(statement, {})
    aliases = LABEL_ALIASES.get(statement, {})
    if text in items:
        return text
    if text in aliases:
        return aliases[text]
    stripped = text.strip()
    if stripped in items:
        return stripped
    if stripped in aliases:
        return aliases[stripped]
    return _NORMALIZED_INDEX.get(statement, {}).get(normalize_label(stripped))


def field_label(statement: StatementType, key: str) -> str:
    """Schema label for an engine key."""
    return FIELDS[statement][key]


def input_labels(statement: StatementType) -> List[str]:
    return [item.label for item in get_schema(statement) if item.accepts_input]


def computed_items(statement: StatementType) -> List[LineItem]:
    return [item for item in get_schema(statement) if item.kind == "computed"]


def sections(statement: StatementType) -> List[Tuple[str, List[LineItem]]]:
    """Schema grouped by section, in display order."""
    grouped: List[Tuple[str, List[LineItem]]] = []
    for item in get_schema(statement):
        if not grouped or grouped[-1][0] != item.section:
            grouped.append((item.section, []))
        grouped[-1][1].append(item)
    return grouped
