from __future__ import annotations

from typing import Dict, List, Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from expense_report.core.config import Settings
from expense_report.db.dal import Database
from expense_report.models import ExpenseFilter, ExpenseOut
from expense_report.routers.deps import (
    get_current_language,
    get_db,
    get_expense_filter,
    get_settings_dep,
    get_store,
)
from expense_report.services.analytics_utils import (
    compute_category_breakdown,
    compute_category_totals,
    compute_dashboard_summary,
    compute_monthly_trend,
    compute_projection,
)
from expense_report.services.filters import filter_expenses
from expense_report.services.i18n import month_label, translate
from expense_report.services.money import format_currency
from expense_report.services.preferences import get_monthly_budget
from expense_report.services.store import ExpenseStore

router = APIRouter(prefix="/analytics", tags=["analytics"])


class DashboardSummaryOut(BaseModel):
    total_approved: float
    total_pending: float
    expense_count: int
    receipt_count: int
    receipt_percentage: float
    without_receipt: int
    top_expenses: List[ExpenseOut]
    total_approved_display: str
    total_pending_display: str


class CategoryBreakdownItem(BaseModel):
    category: str
    label: str
    amount: float
    percent: float


class CategoryBreakdownOut(BaseModel):
    totals: Dict[str, float]
    items: List[CategoryBreakdownItem]


class MonthlyTrendPoint(BaseModel):
    month: str
    label: str
    amount: float
    trend: Literal["increase", "decrease", "same"]


class ProjectionPoint(BaseModel):
    month: str
    label: str
    amount: float
    kind: Literal["historical", "projected"]
    over_budget: bool


class ProjectionOut(BaseModel):
    available: bool
    message: str | None
    historical: List[ProjectionPoint]
    projected: List[ProjectionPoint]
    average_monthly_spend: float
    average_change: float
    direction: Literal["increase", "decrease", "stable"]
    direction_label: str
    total_projected: float
    budget: float


@router.get(
    "/summary",
    response_model=DashboardSummaryOut,
    summary="Dashboard KPIs over the filtered expenses",
)
async def summary_endpoint(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
    language: str = Depends(get_current_language),
):
    """Approved / pending totals, receipt coverage and the top expenses by amount.

    Receipt coverage counts every status; empty input returns zeros.
    """
    expenses = filter_expenses(store.list_expenses(), spec)
    s = compute_dashboard_summary(expenses, top_n=settings.top_expenses_count)
    return DashboardSummaryOut(
        total_approved=s.total_approved,
        total_pending=s.total_pending,
        expense_count=s.expense_count,
        receipt_count=s.receipt_count,
        receipt_percentage=s.receipt_percentage,
        without_receipt=s.without_receipt,
        top_expenses=[ExpenseOut.from_expense(e) for e in s.top_expenses],
        total_approved_display=format_currency(s.total_approved, language),
        total_pending_display=format_currency(s.total_pending, language),
    )


@router.get(
    "/category-breakdown",
    response_model=CategoryBreakdownOut,
    summary="Approved totals per category with percent of total",
)
async def category_breakdown_endpoint(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    """Categories without approved expenses are omitted rather than reported as 0."""
    expenses = filter_expenses(store.list_expenses(), spec)
    items = compute_category_breakdown(expenses)
    return CategoryBreakdownOut(
        totals=compute_category_totals(expenses),
        items=[
            CategoryBreakdownItem(
                category=i.category,
                label=translate(f"categories.{i.category}", language),
                amount=i.amount,
                percent=i.percent,
            )
            for i in items
        ],
    )


@router.get(
    "/monthly-trend",
    response_model=List[MonthlyTrendPoint],
    summary="Approved totals per month with trend vs previous month",
)
async def monthly_trend_endpoint(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    expenses = filter_expenses(store.list_expenses(), spec)
    return [
        MonthlyTrendPoint(
            month=p.month,
            label=month_label(p.month, language),
            amount=p.amount,
            trend=p.trend,
        )
        for p in compute_monthly_trend(expenses)
    ]


@router.get(
    "/projection",
    response_model=ProjectionOut,
    summary="Linear projection of the next months of approved spend",
)
async def projection_endpoint(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
    language: str = Depends(get_current_language),
):
    """Project from the mean month-over-month change of the recent history.

    Needs at least two months of approved spend; otherwise ``available`` is
    false and nothing is projected. Projected amounts never go below zero.
    """
    expenses = filter_expenses(store.list_expenses(), spec)
    result = compute_projection(
        expenses,
        window=settings.projection_window_months,
        horizon=settings.projection_horizon_months,
        budget=get_monthly_budget(db, settings),
    )

    def point(p) -> ProjectionPoint:
        return ProjectionPoint(
            month=p.month,
            label=month_label(p.month, language),
            amount=p.amount,
            kind=p.kind,
            over_budget=p.over_budget,
        )

    return ProjectionOut(
        available=result.available,
        message=None
        if result.available
        else translate("projection.insufficientData", language),
        historical=[point(p) for p in result.historical],
        projected=[point(p) for p in result.projected],
        average_monthly_spend=result.average_monthly_spend,
        average_change=result.average_change,
        direction=result.direction,
        direction_label=translate(f"projection.{result.direction}", language),
        total_projected=result.total_projected,
        budget=result.budget,
    )
