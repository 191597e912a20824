"""Pydantic domain models for the expense report."""

from .constants import (
    EXPENSE_CATEGORIES,
    ExpenseCategory,
    ExpenseStatus,
    FILTER_ALL,
)  # re-export
from .expense import (
    Expense,
    ExpenseCreateIn,
    ExpenseFilter,
    ExpenseOut,
    ExpenseUpdateIn,
    Receipt,
)
from .preferences import Preferences

__all__ = [
    "EXPENSE_CATEGORIES",
    "ExpenseCategory",
    "ExpenseStatus",
    "FILTER_ALL",
    "Expense",
    "ExpenseCreateIn",
    "ExpenseFilter",
    "ExpenseOut",
    "ExpenseUpdateIn",
    "Receipt",
    "Preferences",
]
