"""
credit_platform/errors.py
=========================
Exception taxonomy for the credit analysis session and template import.
"""
from __future__ import annotations
from typing import Optional


class CreditAnalysisError(Exception):
    """Base class for all recoverable credit-analysis failures."""


class InputRejectedError(CreditAnalysisError):
    """A raw cell failed the validation gate; nothing was written."""

    def __init__(self, label: str, year: Optional[str], reason: str):
        self.label = label
        self.year = year
        self.reason = reason
        where = f"{label} [{year}]" if year else label
        super().__init__(f"{where}: {reason}")


class NoInputDataError(CreditAnalysisError):
    """Recompute requested while both statements are empty."""

    def __init__(self, message: str = "Please enter some data in the forms first."):
        super().__init__(message)


class TemplateParseError(CreditAnalysisError):
    """An uploaded statement template could not be read."""
