"""
credit_platform/session.py
==========================
Analysis session: immutable input snapshots, gated cell updates, recompute
with last-writer-wins publication, and atomic reset.

Every write produces a new StatementSnapshot, and every path into a snapshot
held by the session passes through the validation gate. A recompute takes a
generation number and the current snapshot under the lock, derives outside
the lock, and publishes only if no newer recompute or reset was issued in the
meantime. Snapshots and published results are read-only mappings.
"""
from __future__ import annotations
import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import CreditAnalysisConfig, DEFAULT_CONFIG, DEFAULT_YEARS, LOGGER, setup_logger
from .derivation import compute_credit_analysis
from .errors import InputRejectedError, NoInputDataError
from .export import results_to_csv
from .parser import is_blank
from .schema import resolve_label
from .types import (
    BALANCE, OPERATING, FinancialData, ReadOnlyData, RecomputeOutcome, StatementType,
    ValidationResult,
)
from .validation import validate_cell

MSG_SUCCESS = "Output calculated successfully!"
MSG_FAILURE = "Error calculating output. Please check your input data."


def read_only(data: Mapping[str, Mapping[str, float]]) -> ReadOnlyData:
    """Two-level read-only copy of {label: {year: value}}."""
    return MappingProxyType({label: MappingProxyType(dict(values)) for label, values in data.items()})


def _writable(data: Mapping[str, Mapping[str, float]]) -> FinancialData:
    return {label: dict(values) for label, values in data.items()}


# ─── Snapshot ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class StatementSnapshot:
    years: Tuple[str, ...]
    operating: ReadOnlyData = field(default_factory=dict)
    balance: ReadOnlyData = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "years", tuple(self.years))
        object.__setattr__(self, "operating", read_only(self.operating))
        object.__setattr__(self, "balance", read_only(self.balance))

    @classmethod
    def empty(cls, years: Sequence[str] = DEFAULT_YEARS) -> "StatementSnapshot":
        return cls(tuple(years))

    def statement(self, statement: StatementType) -> ReadOnlyData:
        return self.operating if statement == OPERATING else self.balance

    def is_empty(self) -> bool:
        return not any(self.operating.values()) and not any(self.balance.values())

    def get(self, statement: StatementType, label: str, year: str) -> float:
        return self.statement(statement).get(label, {}).get(year, 0.0)

    def with_value(self, statement: StatementType, label: str, year: str, value: float) -> "StatementSnapshot":
        data = _writable(self.statement(statement))
        data.setdefault(label, {})[year] = value
        if statement == OPERATING:
            return StatementSnapshot(self.years, data, self.balance)
        return StatementSnapshot(self.years, self.operating, data)

    def with_statement(self, statement: StatementType, data: Mapping[str, Mapping[str, float]]) -> "StatementSnapshot":
        """Merge imported data over the current statement."""
        merged = _writable(self.statement(statement))
        for label, values in data.items():
            merged.setdefault(label, {}).update(values)
        if statement == OPERATING:
            return StatementSnapshot(self.years, merged, self.balance)
        return StatementSnapshot(self.years, self.operating, merged)


def checked_value(
    statement: StatementType,
    label: str,
    year: str,
    raw: Any,
    years: Sequence[str],
    config: Optional[CreditAnalysisConfig] = None,
) -> Tuple[str, float]:
    """(canonical label, parsed value) or InputRejectedError."""
    if year not in years:
        raise InputRejectedError(label, year, "Unknown fiscal year")
    check = validate_cell(statement, label, raw, config)
    if not check.is_valid:
        raise InputRejectedError(label, year, check.error or "Invalid value")
    return resolve_label(statement, label) or label, check.parsed_value


def checked_statement(
    statement: StatementType,
    data: Mapping[str, Mapping[str, Any]],
    years: Sequence[str],
    config: Optional[CreditAnalysisConfig] = None,
) -> Tuple[FinancialData, List[str]]:
    """
    Gate every cell of a {label: {year: raw}} mapping.
    Returns (accepted data under canonical labels, rejection messages); blank
    cells are skipped.
    """
    accepted: FinancialData = {}
    rejected: List[str] = []
    for label, values in data.items():
        for year, raw in values.items():
            if is_blank(raw):
                continue
            try:
                canonical, value = checked_value(statement, label, year, raw, years, config)
            except InputRejectedError as exc:
                rejected.append(str(exc))
                continue
            accepted.setdefault(canonical, {})[year] = value
    return accepted, rejected


# ─── Session ──────────────────────────────────────────────────────────────────

class CreditAnalysisSession:
    """Single-analyst workspace over the two statements."""

    def __init__(self, years: Sequence[str] = DEFAULT_YEARS,
                 config: Optional[CreditAnalysisConfig] = None):
        self.config = config or DEFAULT_CONFIG
        setup_logger(self.config.log_level)
        self._lock = threading.Lock()
        self._generation = 0
        self._snapshot = StatementSnapshot.empty(years)
        self._results: ReadOnlyData = read_only({})

    # ── State accessors ──

    @property
    def years(self) -> Tuple[str, ...]:
        return self._snapshot.years

    @property
    def snapshot(self) -> StatementSnapshot:
        return self._snapshot

    @property
    def results(self) -> ReadOnlyData:
        return self._results

    @property
    def generation(self) -> int:
        return self._generation

    # ── Writes ──

    def set_cell(self, statement: StatementType, label: str, year: str, raw: Any) -> float:
        """Strict update: raises InputRejectedError, stores nothing on failure."""
        canonical, value = checked_value(statement, label, year, raw, self.years, self.config)
        with self._lock:
            self._snapshot = self._snapshot.with_value(statement, canonical, year, value)
        return value

    def update_cell(self, statement: StatementType, label: str, year: str, raw: Any) -> ValidationResult:
        try:
            value = self.set_cell(statement, label, year, raw)
        except InputRejectedError as exc:
            LOGGER.warning("Rejected input %s", exc)
            return ValidationResult(False, error=exc.reason)
        return ValidationResult(True, value)

    def load_statement(self, statement: StatementType, data: Mapping[str, Mapping[str, Any]]) -> List[str]:
        """
        Merge statement data (e.g. a template import) over the current inputs.
        Every cell passes the validation gate; rejected cells, including years
        outside the session's axis, are left out and reported.
        """
        accepted, rejected = checked_statement(statement, data, self.years, self.config)
        with self._lock:
            self._snapshot = self._snapshot.with_statement(statement, accepted)
        if rejected:
            LOGGER.warning("Load %s: %d cells rejected", statement, len(rejected))
        return rejected

    def load_snapshot(self, snapshot: StatementSnapshot) -> List[str]:
        """Replace both statements with the gated contents of a snapshot."""
        operating, rejected = checked_statement(OPERATING, snapshot.operating, self.years, self.config)
        balance, rejected_bs = checked_statement(BALANCE, snapshot.balance, self.years, self.config)
        rejected += rejected_bs
        with self._lock:
            self._snapshot = StatementSnapshot(self.years, operating, balance)
        if rejected:
            LOGGER.warning("Load snapshot: %d cells rejected", len(rejected))
        return rejected

    # ── Recompute ──

    def begin_recompute(self) -> Tuple[int, StatementSnapshot]:
        with self._lock:
            self._generation += 1
            return self._generation, self._snapshot

    def publish(self, generation: int, results: Mapping[str, Mapping[str, float]]) -> bool:
        """Swap in results unless a newer recompute or reset superseded them."""
        frozen = read_only(results)
        with self._lock:
            if generation != self._generation:
                LOGGER.debug("Dropping stale results for generation %d (current %d)",
                             generation, self._generation)
                return False
            self._results = frozen
            return True

    def recompute(self) -> RecomputeOutcome:
        generation, snapshot = self.begin_recompute()
        try:
            if snapshot.is_empty():
                raise NoInputDataError()
            LOGGER.info("Recompute #%d over %d years", generation, len(snapshot.years))
            results = compute_credit_analysis(snapshot.years, snapshot.operating,
                                              snapshot.balance, self.config)
        except NoInputDataError as exc:
            return RecomputeOutcome(False, str(exc), generation)
        except Exception:
            LOGGER.exception("Recompute #%d failed", generation)
            return RecomputeOutcome(False, MSG_FAILURE, generation)

        published = self.publish(generation, results)
        LOGGER.info("Recompute #%d finished: %d metrics%s", generation, len(results),
                    "" if published else " (superseded)")
        return RecomputeOutcome(True, MSG_SUCCESS, generation, read_only(results), published)

    # ── Reset & export ──

    def clear(self) -> None:
        """Empty both statements and drop results in one step."""
        with self._lock:
            self._generation += 1
            self._snapshot = StatementSnapshot.empty(self._snapshot.years)
            self._results = read_only({})
        LOGGER.info("Session cleared")

    def export_csv(self) -> str:
        return results_to_csv(self._results, self.years)

    def input_counts(self) -> Dict[StatementType, int]:
        snap = self._snapshot
        return {
            OPERATING: sum(len(v) for v in snap.operating.values()),
            BALANCE: sum(len(v) for v in snap.balance.values()),
        }
