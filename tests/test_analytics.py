import pytest

from expense_report.services.analytics_utils import (
    add_months,
    compute_category_breakdown,
    compute_category_totals,
    compute_dashboard_summary,
    compute_monthly_totals,
    compute_monthly_trend,
    compute_projection,
    project_monthly_totals,
    total_amount,
)
from tests.factories import PNG_RECEIPT, make_expense


@pytest.fixture
def expenses():
    return [
        make_expense(date="2024-01-03", amount=100, category="Meals"),
        make_expense(date="2024-01-20", amount=50, category="Meals"),
        make_expense(date="2024-01-22", amount=300, category="Travel"),
        make_expense(date="2024-02-10", amount=999, category="Lodging", status="Pending"),
        make_expense(date="2024-02-11", amount=200, category="Travel"),
        make_expense(date="2023-12-31", amount=75, category="Supplies", status="Rejected"),
        make_expense(date="2024-03-05", amount=200, category="Transport", receipt=PNG_RECEIPT),
    ]


def test_category_totals_only_approved_and_absent_when_empty(expenses):
    totals = compute_category_totals(expenses)
    assert totals == {"Meals": 150.0, "Travel": 500.0, "Transport": 200.0}
    assert "Lodging" not in totals
    assert "Supplies" not in totals
    assert "Other" not in totals


def test_category_breakdown_ordered_with_percent(expenses):
    items = compute_category_breakdown(expenses)
    assert [i.category for i in items] == ["Travel", "Transport", "Meals"]
    assert items[0].percent == pytest.approx(58.82)
    assert sum(i.percent for i in items) == pytest.approx(100, abs=0.05)
    assert compute_category_breakdown([]) == []


def test_monthly_totals_sorted_and_approved_only(expenses):
    monthly = compute_monthly_totals(expenses)
    assert list(monthly) == ["2024-01", "2024-02", "2024-03"]
    assert monthly == {"2024-01": 450.0, "2024-02": 200.0, "2024-03": 200.0}


def test_monthly_trend_tags(expenses):
    points = compute_monthly_trend(expenses + [make_expense(date="2024-04-01", amount=900)])
    assert [(p.month, p.trend) for p in points] == [
        ("2024-01", "same"),
        ("2024-02", "decrease"),
        ("2024-03", "same"),
        ("2024-04", "increase"),
    ]


def test_total_amount_counts_every_status(expenses):
    assert total_amount(expenses) == pytest.approx(1924)
    assert total_amount([]) == 0


def test_dashboard_summary(expenses):
    s = compute_dashboard_summary(expenses, top_n=3)
    assert s.total_approved == pytest.approx(850)
    assert s.total_pending == pytest.approx(999)
    assert s.expense_count == 7
    assert s.receipt_count == 1
    assert s.without_receipt == 6
    assert s.receipt_percentage == pytest.approx(14.29)
    assert [e.amount for e in s.top_expenses] == [999, 300, 200]


def test_dashboard_summary_empty():
    s = compute_dashboard_summary([])
    assert s.receipt_percentage == 0.0
    assert s.top_expenses == []
    assert s.total_approved == 0


def test_projection_linear_from_average_change():
    result = project_monthly_totals(
        [("2024-01", 1000.0), ("2024-02", 1200.0), ("2024-03", 1100.0)]
    )
    assert result.available
    assert result.average_change == pytest.approx(50)
    assert result.direction == "increase"
    assert [(p.month, p.amount) for p in result.projected] == [
        ("2024-04", 1150.0),
        ("2024-05", 1200.0),
        ("2024-06", 1250.0),
    ]
    assert result.total_projected == pytest.approx(3600)
    assert result.average_monthly_spend == pytest.approx(1100)


def test_projection_needs_two_months():
    result = project_monthly_totals([("2024-01", 1000.0)])
    assert not result.available
    assert result.projected == []
    assert len(result.historical) == 1
    empty = project_monthly_totals([])
    assert not empty.available
    assert empty.average_monthly_spend == 0.0


def test_projection_floored_at_zero():
    result = project_monthly_totals([("2024-01", 500.0), ("2024-02", 100.0)])
    assert result.average_change == pytest.approx(-400)
    assert result.direction == "decrease"
    assert [p.amount for p in result.projected] == [0.0, 0.0, 0.0]
    assert result.total_projected == 0.0


def test_projection_wraps_year():
    result = project_monthly_totals([("2024-10", 10.0), ("2024-11", 10.0)])
    assert [p.month for p in result.projected] == ["2024-12", "2025-01", "2025-02"]
    assert result.direction == "stable"
    assert add_months("2024-12", 1) == "2025-01"
    assert add_months("2025-01", -1) == "2024-12"


def test_projection_uses_last_six_months_of_approved_spend():
    expenses = [
        make_expense(date=f"2024-{m:02d}-10", amount=amount)
        for m, amount in zip(range(1, 9), [9000, 9000, 100, 200, 300, 400, 500, 600])
    ]
    expenses.append(make_expense(date="2024-08-20", amount=5000, status="Pending"))
    result = compute_projection(expenses, window=6, horizon=3)
    assert [p.month for p in result.historical] == [
        "2024-03", "2024-04", "2024-05", "2024-06", "2024-07", "2024-08",
    ]
    assert result.average_change == pytest.approx(100)
    assert [p.amount for p in result.projected] == [700, 800, 900]


def test_projection_budget_flags():
    result = project_monthly_totals(
        [("2024-01", 1000.0), ("2024-02", 1200.0)], budget=1250.0
    )
    assert [p.over_budget for p in result.historical] == [False, False]
    assert [p.over_budget for p in result.projected] == [True, True, True]
    no_budget = project_monthly_totals([("2024-01", 1000.0), ("2024-02", 1200.0)])
    assert not any(p.over_budget for p in no_budget.projected)
