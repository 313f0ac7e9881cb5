"""
credit_platform/types.py
========================
Type aliases and result containers shared across the credit analysis engine.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Mapping, NamedTuple, Optional, Tuple

# ─── Core Data Types ──────────────────────────────────────────────────────────

# FinancialData: {label: {year: value}}
# Used for both raw statement inputs and derived metric outputs.
FinancialData = Dict[str, Dict[str, float]]

# Row: {label: value} for one statement at one fiscal year
Row = Dict[str, float]

# Read-only view of FinancialData, as held by snapshots and published results
ReadOnlyData = Mapping[str, Mapping[str, float]]

StatementType = Literal["OperatingStatement", "BalanceSheet"]
LineKind = Literal["amount", "percent", "computed"]
MetricKind = Literal["amount", "ratio", "days"]

OPERATING: StatementType = "OperatingStatement"
BALANCE: StatementType = "BalanceSheet"
STATEMENTS: Tuple[StatementType, ...] = (OPERATING, BALANCE)


class AlignedYear(NamedTuple):
    """Current and previous rows of both statements for one year index."""
    year: str
    operating: Row
    balance: Row
    prev_operating: Row
    prev_balance: Row


@dataclass
class ValidationResult:
    is_valid: bool
    parsed_value: float = 0.0
    error: Optional[str] = None


@dataclass
class RecomputeOutcome:
    ok: bool
    message: str
    generation: int
    results: Optional[ReadOnlyData] = None
    published: bool = False


@dataclass
class TemplateImport:
    statement: StatementType
    years: List[str]
    data: FinancialData = field(default_factory=dict)
    unknown_labels: List[str] = field(default_factory=list)
    rejected_cells: List[str] = field(default_factory=list)
