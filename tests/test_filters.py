import random

import pytest

from expense_report.models import (
    EXPENSE_CATEGORIES,
    ExpenseFilter,
    ExpenseStatus,
    FILTER_ALL,
)
from expense_report.services.filters import filter_expenses, matches_search
from tests.factories import PNG_RECEIPT, make_expense


@pytest.fixture
def expenses():
    return [
        make_expense(id="a", date="2024-01-05", description="Hotel Lisbon", category="Lodging", invoice_number="INV-100"),
        make_expense(id="b", date="2024-01-20", description="Client dinner", category="Meals", status="Pending"),
        make_expense(id="c", date="2024-02-01", description="Cab", category="Transport", receipt=PNG_RECEIPT),
        make_expense(id="d", date="2024-02-15", description="", category="Other", other_category_detail="Software", status="Rejected"),
        make_expense(id="e", date="2024-03-01", description="Printer paper", category="Supplies", invoice_number="inv-200"),
    ]


def ids(result):
    return [e.id for e in result]


def test_no_filter_returns_everything_in_order(expenses):
    assert ids(filter_expenses(expenses, ExpenseFilter())) == ["a", "b", "c", "d", "e"]
    assert ids(filter_expenses(expenses)) == ["a", "b", "c", "d", "e"]


def test_search_is_case_insensitive_across_fields(expenses):
    assert ids(filter_expenses(expenses, ExpenseFilter(search_term="hotel"))) == ["a"]
    # invoice number
    assert ids(filter_expenses(expenses, ExpenseFilter(search_term="INV-"))) == ["a", "e"]
    # receipt file name
    assert ids(filter_expenses(expenses, ExpenseFilter(search_term="taxi-receipt"))) == ["c"]
    assert filter_expenses(expenses, ExpenseFilter(search_term="nothing matches")) == []


def test_search_ignores_missing_optional_fields():
    e = make_expense(description="Lunch", invoice_number=None, receipt=None)
    assert matches_search(e, "lun")
    assert not matches_search(e, "inv")


def test_category_and_status_exact_or_all(expenses):
    assert ids(filter_expenses(expenses, ExpenseFilter(category="Meals"))) == ["b"]
    assert ids(filter_expenses(expenses, ExpenseFilter(status="Rejected"))) == ["d"]
    assert ids(filter_expenses(expenses, ExpenseFilter(category=FILTER_ALL, status=FILTER_ALL))) == [
        "a", "b", "c", "d", "e",
    ]
    assert filter_expenses(expenses, ExpenseFilter(category="Meals", status="Approved")) == []


def test_date_range_inclusive_and_one_sided(expenses):
    both = ExpenseFilter(start_date="2024-01-20", end_date="2024-02-15")
    assert ids(filter_expenses(expenses, both)) == ["b", "c", "d"]
    assert ids(filter_expenses(expenses, ExpenseFilter(start_date="2024-02-15"))) == ["d", "e"]
    assert ids(filter_expenses(expenses, ExpenseFilter(end_date="2024-01-20"))) == ["a", "b"]


def test_inverted_range_matches_nothing(expenses):
    spec = ExpenseFilter(start_date="2024-03-01", end_date="2024-01-01")
    assert filter_expenses(expenses, spec) == []


def test_invalid_filter_values_rejected():
    with pytest.raises(ValueError):
        ExpenseFilter(category="Groceries")
    with pytest.raises(ValueError):
        ExpenseFilter(status="Paid")
    with pytest.raises(ValueError):
        ExpenseFilter(start_date="2024-1-5")


def test_random_filters_keep_order_and_satisfy_every_predicate():
    rng = random.Random(1234)
    words = ["taxi", "hotel", "lunch", "paper", "flight", ""]
    statuses = list(ExpenseStatus)
    pool = [
        make_expense(
            date=f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
            description=f"{rng.choice(words)} {rng.choice(words)}".strip(),
            category=rng.choice(EXPENSE_CATEGORIES),
            status=rng.choice(statuses),
            invoice_number=rng.choice([None, "INV-1", "inv-22"]),
            receipt=rng.choice([None, PNG_RECEIPT]),
            amount=rng.randint(0, 5000),
        )
        for _ in range(80)
    ]
    for _ in range(200):
        start = rng.choice([None, f"2024-{rng.randint(1, 12):02d}-01"])
        end = rng.choice([None, f"2024-{rng.randint(1, 12):02d}-28"])
        spec = ExpenseFilter(
            search_term=rng.choice(words + ["INV", "RECEIPT"]),
            category=rng.choice([FILTER_ALL] + [c.value for c in EXPENSE_CATEGORIES]),
            status=rng.choice([FILTER_ALL] + [s.value for s in statuses]),
            start_date=start,
            end_date=end,
        )
        result = filter_expenses(pool, spec)
        positions = [pool.index(e) for e in result]
        assert positions == sorted(positions)
        for e in result:
            assert spec.category == FILTER_ALL or e.category.value == spec.category
            assert spec.status == FILTER_ALL or e.status.value == spec.status
            assert start is None or e.date >= start
            assert end is None or e.date <= end
            assert matches_search(e, spec.search_term)
        excluded = [e for e in pool if e not in result]
        for e in excluded:
            assert not (
                (spec.category == FILTER_ALL or e.category.value == spec.category)
                and (spec.status == FILTER_ALL or e.status.value == spec.status)
                and (start is None or e.date >= start)
                and (end is None or e.date <= end)
                and matches_search(e, spec.search_term)
            )
