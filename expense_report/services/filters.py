"""Filter stage of the analytics pipeline.

Pure functions: the input sequence is never modified and the result keeps
the input order. Every active predicate must match (logical AND).
"""

from __future__ import annotations
from typing import Iterable, List

from expense_report.models import Expense, ExpenseFilter, FILTER_ALL


def matches_search(expense: Expense, term: str) -> bool:
    """Case-insensitive substring match on description, invoice number, receipt name."""
    if not term:
        return True
    needle = term.lower()
    haystacks = [expense.description, expense.invoice_number]
    if expense.receipt is not None:
        haystacks.append(expense.receipt.name)
    return any(h and needle in h.lower() for h in haystacks)


def matches_date_range(
    expense: Expense, start_date: str | None, end_date: str | None
) -> bool:
    # ISO dates are fixed width, so string comparison is chronological.
    if start_date and expense.date < start_date:
        return False
    if end_date and expense.date > end_date:
        return False
    return True


def matches(expense: Expense, spec: ExpenseFilter) -> bool:
    if spec.category != FILTER_ALL and expense.category.value != spec.category:
        return False
    if spec.status != FILTER_ALL and expense.status.value != spec.status:
        return False
    if not matches_date_range(expense, spec.start_date, spec.end_date):
        return False
    return matches_search(expense, spec.search_term)


def filter_expenses(
    expenses: Iterable[Expense], spec: ExpenseFilter | None = None
) -> List[Expense]:
    if spec is None:
        return list(expenses)
    return [e for e in expenses if matches(e, spec)]
