from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Literal, Sequence, Tuple

from expense_report.models import Expense, ExpenseStatus
from expense_report.services.money import round2

"""Analytics helper utilities.

Scopes implemented:
    - Table summary total (sum over the filtered collection)
    - Dashboard KPIs (approved / pending totals, receipt coverage, top N)
    - Category breakdown (approved only)
    - Monthly totals + month-over-month trend tag (approved only)
    - Linear projection of the next months from the recent monthly totals

Design notes:
    Everything here is a pure function over a sequence of expenses; callers
    apply the filter stage first and pass the result in. The projection is a
    first-difference extrapolation (mean of month-over-month deltas), not a
    regression or seasonal model.
"""

Trend = Literal["increase", "decrease", "same"]
Direction = Literal["increase", "decrease", "stable"]


def approved_only(expenses: Iterable[Expense]) -> List[Expense]:
    return [e for e in expenses if e.status == ExpenseStatus.APPROVED]


def total_amount(expenses: Iterable[Expense]) -> float:
    return sum(e.amount for e in expenses)


# ---------------- Dashboard KPIs -----------------
@dataclass(frozen=True)
class DashboardSummary:
    total_approved: float
    total_pending: float
    expense_count: int
    receipt_count: int
    receipt_percentage: float
    without_receipt: int
    top_expenses: List[Expense] = field(default_factory=list)


def compute_dashboard_summary(
    expenses: Sequence[Expense], top_n: int = 5
) -> DashboardSummary:
    """KPIs for the dashboard view.

    Receipt coverage and the top-N list consider every status; the two totals
    are split by status. Empty input yields zeros (no division by zero).
    """
    total_approved = total_amount(approved_only(expenses))
    total_pending = total_amount(
        e for e in expenses if e.status == ExpenseStatus.PENDING
    )
    receipt_count = sum(1 for e in expenses if e.receipt is not None)
    count = len(expenses)
    pct = round2(receipt_count / count * 100) if count else 0.0
    # sorted() is stable, so ties keep collection order.
    top = sorted(expenses, key=lambda e: e.amount, reverse=True)[:top_n]
    return DashboardSummary(
        total_approved=total_approved,
        total_pending=total_pending,
        expense_count=count,
        receipt_count=receipt_count,
        receipt_percentage=pct,
        without_receipt=count - receipt_count,
        top_expenses=top,
    )


# ---------------- Category Breakdown -----------------
@dataclass(frozen=True)
class CategoryBreakdownItem:
    category: str
    amount: float
    percent: float


def compute_category_totals(expenses: Iterable[Expense]) -> Dict[str, float]:
    """Sum of approved amounts per category; categories with no match are absent."""
    totals: Dict[str, float] = {}
    for e in approved_only(expenses):
        key = e.category.value
        totals[key] = totals.get(key, 0.0) + e.amount
    return totals


def compute_category_breakdown(
    expenses: Iterable[Expense],
) -> List[CategoryBreakdownItem]:
    """Category totals with percent of the grand total, largest first."""
    totals = compute_category_totals(expenses)
    grand = sum(totals.values())
    ordered = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)
    return [
        CategoryBreakdownItem(
            category=category,
            amount=amount,
            percent=round2(amount / grand * 100) if grand > 0 else 0.0,
        )
        for category, amount in ordered
    ]


# ---------------- Monthly Totals & Trend -----------------
@dataclass(frozen=True)
class MonthlyTrendPoint:
    month: str
    amount: float
    trend: Trend


def compute_monthly_totals(expenses: Iterable[Expense]) -> Dict[str, float]:
    """Approved amounts per ``YYYY-MM``, keys in ascending order."""
    totals: Dict[str, float] = {}
    for e in approved_only(expenses):
        totals[e.month] = totals.get(e.month, 0.0) + e.amount
    return {month: totals[month] for month in sorted(totals)}


def compute_monthly_trend(expenses: Iterable[Expense]) -> List[MonthlyTrendPoint]:
    """Monthly totals tagged against the previous month (first month is ``same``)."""
    points: List[MonthlyTrendPoint] = []
    previous: float | None = None
    for month, amount in compute_monthly_totals(expenses).items():
        trend: Trend = "same"
        if previous is not None:
            if amount > previous:
                trend = "increase"
            elif amount < previous:
                trend = "decrease"
        points.append(MonthlyTrendPoint(month=month, amount=amount, trend=trend))
        previous = amount
    return points


# ---------------- Projection -----------------
@dataclass(frozen=True)
class ProjectionPoint:
    month: str
    amount: float
    kind: Literal["historical", "projected"]
    over_budget: bool = False


@dataclass(frozen=True)
class ProjectionResult:
    available: bool
    historical: List[ProjectionPoint]
    projected: List[ProjectionPoint]
    average_monthly_spend: float
    average_change: float
    direction: Direction
    total_projected: float
    budget: float


def add_months(month: str, count: int) -> str:
    """Shift a ``YYYY-MM`` key by ``count`` months, wrapping years."""
    year, mon = (int(p) for p in month.split("-"))
    index = year * 12 + (mon - 1) + count
    new_year, new_mon = divmod(index, 12)
    return f"{new_year:04d}-{new_mon + 1:02d}"


def _direction(change: float) -> Direction:
    if change > 0:
        return "increase"
    if change < 0:
        return "decrease"
    return "stable"


def project_monthly_totals(
    history: Sequence[Tuple[str, float]], horizon: int = 3, budget: float = 0.0
) -> ProjectionResult:
    """Extrapolate ``horizon`` months from ordered ``(month, amount)`` history.

    Edge Cases:
        - Fewer than 2 months -> ``available=False``, nothing projected.
        - Projected values are floored at 0; ``average_change`` keeps its sign.
        - ``over_budget`` flags only apply when ``budget > 0``.
    """

    def over(amount: float) -> bool:
        return budget > 0 and amount > budget

    historical = [
        ProjectionPoint(month=m, amount=a, kind="historical", over_budget=over(a))
        for m, a in history
    ]
    average_spend = (
        sum(a for _, a in history) / len(history) if history else 0.0
    )
    if len(history) < 2:
        return ProjectionResult(
            available=False,
            historical=historical,
            projected=[],
            average_monthly_spend=average_spend,
            average_change=0.0,
            direction="stable",
            total_projected=0.0,
            budget=budget,
        )

    deltas = [history[i][1] - history[i - 1][1] for i in range(1, len(history))]
    average_change = sum(deltas) / len(deltas)

    last_month, current = history[-1]
    projected: List[ProjectionPoint] = []
    for step in range(1, horizon + 1):
        # The running value is not clamped; only the reported amount is.
        current += average_change
        amount = max(0.0, current)
        projected.append(
            ProjectionPoint(
                month=add_months(last_month, step),
                amount=amount,
                kind="projected",
                over_budget=over(amount),
            )
        )

    return ProjectionResult(
        available=True,
        historical=historical,
        projected=projected,
        average_monthly_spend=average_spend,
        average_change=average_change,
        direction=_direction(average_change),
        total_projected=sum(p.amount for p in projected),
        budget=budget,
    )


def compute_projection(
    expenses: Iterable[Expense],
    window: int = 6,
    horizon: int = 3,
    budget: float = 0.0,
) -> ProjectionResult:
    """Projection over the most recent ``window`` months of approved spend."""
    monthly = list(compute_monthly_totals(expenses).items())[-window:]
    return project_monthly_totals(monthly, horizon=horizon, budget=budget)
