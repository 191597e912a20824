import json
import sqlite3
from datetime import date

import pytest

from expense_report.core.errors import PersistenceError
from expense_report.db.dal import EXPENSES_KEY, Database
from expense_report.db.seed import relative_date, seed_expenses
from expense_report.services import preferences
from expense_report.services.analytics_utils import compute_projection
from expense_report.services.persistence import load_expenses, save_expenses
from tests.factories import PNG_RECEIPT, make_expense

TODAY = date(2025, 3, 15)


class BrokenWriteDatabase(Database):
    def set_value(self, key, value):
        raise sqlite3.OperationalError("disk I/O error")


class BrokenReadDatabase(Database):
    def get_value(self, key):
        raise sqlite3.OperationalError("database is locked")


def test_missing_key_falls_back_to_seed(db):
    expenses, from_seed = load_expenses(db, today=TODAY)
    assert from_seed
    assert len(expenses) == 12
    assert len({e.id for e in expenses}) == 12


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        json.dumps({"id": "x"}),
        json.dumps([{"id": "x", "date": "yesterday"}]),
        json.dumps([{"id": "x", "category": "Groceries"}]),
        "[]",
        json.dumps([{"id": "x"}, {"id": "x"}]),
    ],
)
def test_unreadable_saved_report_falls_back_to_seed(db, raw):
    db.set_value(EXPENSES_KEY, raw)
    expenses, from_seed = load_expenses(db, today=TODAY)
    assert from_seed
    assert len(expenses) == 12


def test_storage_error_on_read_falls_back_to_seed(settings, db):
    broken = BrokenReadDatabase(settings.db_path)
    expenses, from_seed = load_expenses(broken, today=TODAY)
    assert from_seed
    assert expenses


def test_saved_report_loads_back(db):
    original = [
        make_expense(id="a", receipt=PNG_RECEIPT, invoice_number="INV-1"),
        make_expense(id="b", category="Other", other_category_detail="Gift", status="Rejected"),
    ]
    save_expenses(db, original)
    loaded, from_seed = load_expenses(db)
    assert not from_seed
    assert loaded == original


def test_legacy_record_without_status_defaults_to_pending(db):
    db.set_value(
        EXPENSES_KEY,
        json.dumps([{"id": "old", "date": "2024-01-01", "description": "x", "amount": 5, "category": "Meals"}]),
    )
    loaded, _ = load_expenses(db)
    assert loaded[0].status.value == "Pending"


def test_write_failure_raises_persistence_error(settings, db):
    broken = BrokenWriteDatabase(settings.db_path)
    with pytest.raises(PersistenceError):
        save_expenses(broken, [make_expense()])


def test_seed_dates_are_relative_and_cover_six_months():
    expenses = seed_expenses(TODAY)
    months = {e.date[:7] for e in expenses}
    assert months == {"2024-10", "2024-11", "2024-12", "2025-01", "2025-02", "2025-03"}
    assert compute_projection(expenses).available


def test_relative_date_clamps_day_and_wraps_year():
    assert relative_date(1, 31, date(2025, 3, 10)) == "2025-02-28"
    assert relative_date(3, 5, date(2025, 2, 1)) == "2024-11-05"


# Preferences -------------------------------------------------------


def test_preference_defaults(db, settings):
    prefs = preferences.get_preferences(db, settings)
    assert prefs.monthly_budget == 10000.0
    assert prefs.language == "es"
    assert prefs.theme == "light"


def test_preferences_persist(db, settings):
    preferences.set_monthly_budget(db, 2500)
    preferences.set_language(db, "en")
    assert preferences.toggle_theme(db, settings) == "dark"
    assert preferences.toggle_theme(db, settings) == "light"
    prefs = preferences.get_preferences(db, settings)
    assert (prefs.monthly_budget, prefs.language, prefs.theme) == (2500.0, "en", "light")


def test_invalid_stored_preferences_fall_back(db, settings):
    db.set_value("monthly_budget", "not a number")
    db.set_value("language", "fr")
    db.set_value("theme", "sepia")
    prefs = preferences.get_preferences(db, settings)
    assert (prefs.monthly_budget, prefs.language, prefs.theme) == (10000.0, "es", "light")


def test_invalid_preference_writes_rejected(db):
    with pytest.raises(ValueError):
        preferences.set_monthly_budget(db, -1)
    with pytest.raises(ValueError):
        preferences.set_language(db, "fr")
    with pytest.raises(ValueError):
        preferences.set_theme(db, "sepia")


def test_seed_descriptions_are_spanish():
    descriptions = [e.description for e in seed_expenses(TODAY)]
    assert descriptions[0] == "Vuelos a conferencia"
    assert descriptions[-1] == "Reporte pendiente"
    assert "Software de diseño" in descriptions


@pytest.mark.parametrize("amount", [float("inf"), float("nan")])
def test_non_finite_budget_rejected(db, amount):
    with pytest.raises(ValueError):
        preferences.set_monthly_budget(db, amount)


def test_non_finite_stored_budget_falls_back(db, settings):
    db.set_value("monthly_budget", "Infinity")
    assert preferences.get_monthly_budget(db, settings) == 10000.0
