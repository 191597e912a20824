"""Load and save the expense collection.

The collection is stored as one JSON array under a single key. It is read
once at startup and written only when the user saves explicitly.

Read failures of any kind (missing key, storage error, corrupted JSON,
records that fail validation, an empty list) fall back to the built-in seed
dataset. Write failures raise ``PersistenceError``; the in-memory store is
left untouched so nothing is lost from the session.
"""

from __future__ import annotations
import logging
import sqlite3
from datetime import date
from typing import List, Optional, Sequence, Tuple

from pydantic import TypeAdapter, ValidationError

from expense_report.core.errors import PersistenceError
from expense_report.db.dal import EXPENSES_KEY, Database
from expense_report.db.seed import seed_expenses
from expense_report.models import Expense

logger = logging.getLogger("expense_report.persistence")

_expense_list = TypeAdapter(List[Expense])


def load_expenses(
    db: Database, today: Optional[date] = None
) -> Tuple[List[Expense], bool]:
    """Return ``(expenses, from_seed)``."""
    try:
        raw = db.get_value(EXPENSES_KEY)
    except sqlite3.Error:
        logger.warning("expense storage unavailable; using seed data", exc_info=True)
        return seed_expenses(today), True
    if raw is None:
        logger.info("no saved expense report; using seed data")
        return seed_expenses(today), True
    try:
        expenses = _expense_list.validate_json(raw)
    except ValidationError as exc:
        logger.warning(
            "saved expense report unreadable (%d errors); using seed data",
            exc.error_count(),
        )
        return seed_expenses(today), True
    if not expenses:
        return seed_expenses(today), True
    if len({e.id for e in expenses}) != len(expenses):
        logger.warning("saved expense report has duplicate ids; using seed data")
        return seed_expenses(today), True
    logger.info("loaded %d saved expenses", len(expenses))
    return expenses, False


def dump_expenses(expenses: Sequence[Expense]) -> str:
    return _expense_list.dump_json(list(expenses)).decode("utf-8")


def save_expenses(db: Database, expenses: Sequence[Expense]) -> None:
    payload = dump_expenses(expenses)
    try:
        db.set_value(EXPENSES_KEY, payload)
    except sqlite3.Error as exc:
        logger.exception("failed to save expense report")
        raise PersistenceError("failed to write expense report") from exc
    logger.info("saved %d expenses (%d bytes)", len(expenses), len(payload))
