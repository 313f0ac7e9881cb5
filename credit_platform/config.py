"""
credit_platform/config.py
=========================
Engine configuration, default fiscal-year axis and logger setup.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Tuple, Union


# ─── Fiscal Years ─────────────────────────────────────────────────────────────

DEFAULT_YEARS: Tuple[str, ...] = tuple(str(y) for y in range(2019, 2030))


# ─── Engine Configuration ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class CreditAnalysisConfig:
    max_abs_value: float = 9_999_999_999
    min_percent: float = 0.0
    max_percent: float = 100.0
    days_in_year: int = 365
    decimals: int = 2
    log_level: str = "INFO"


DEFAULT_CONFIG = CreditAnalysisConfig()


# ─── Logging ──────────────────────────────────────────────────────────────────

LOGGER_NAME = "credit_platform"
LOG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def setup_logger(level: Union[int, str] = DEFAULT_CONFIG.log_level) -> logging.Logger:
    """
    Package logger. The stderr handler is attached on first use only; later
    calls just move the level (a session applies its config's log_level).
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    return logger


LOGGER = setup_logger()
