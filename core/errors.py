"""Exceptions raised at the boundaries around the budget engine.

The engine itself never raises; these are used by the adapters that must
refuse a request outright (the JSON API)."""
from __future__ import annotations


class BudgetError(Exception):
    """Base class for budget application errors."""


class InvalidRequestError(BudgetError):
    """A request cannot be turned into a calculation at all."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
