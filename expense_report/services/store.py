"""In-memory owner of the expense collection.

The collection is an immutable tuple that every mutation replaces
wholesale, bumping ``version``. Readers take a snapshot
(``list_expenses()``) and hand it to the pure analytics functions, which
never see the store itself.

Selection state for the bulk actions lives here too: bulk approve, reject,
and delete act on the selected ids only and always clear the selection.

Persistence is explicit: ``mark_saved`` records the version that was last
written so ``dirty`` can report unsaved edits. Nothing here writes to disk.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from expense_report.models import Expense, ExpenseCategory, ExpenseStatus, Receipt

logger = logging.getLogger("expense_report.store")


class ExpenseStore:
    def __init__(self, expenses: Iterable[Expense] = ()):
        self._expenses: Tuple[Expense, ...] = ()
        self._selected: Tuple[str, ...] = ()
        self.version = 0
        self._saved_version = 0
        self._replace(tuple(expenses))
        self._saved_version = self.version

    # ------------------------------------------------------------------
    # Internal helpers
    def _replace(self, expenses: Tuple[Expense, ...]) -> None:
        ids = [e.id for e in expenses]
        if len(ids) != len(set(ids)):
            raise ValueError("expense ids must be unique within the collection")
        self._expenses = expenses
        # Drop selections that point at removed expenses.
        live = set(ids)
        self._selected = tuple(i for i in self._selected if i in live)
        self.version += 1

    def _map(self, ids: Set[str], patch: Dict[str, Any]) -> int:
        changed = 0
        updated: List[Expense] = []
        for e in self._expenses:
            if e.id in ids:
                updated.append(_apply_patch(e, patch))
                changed += 1
            else:
                updated.append(e)
        if changed:
            self._replace(tuple(updated))
        return changed

    # ------------------------------------------------------------------
    # Reads
    def list_expenses(self) -> List[Expense]:
        return list(self._expenses)

    def get(self, expense_id: str) -> Optional[Expense]:
        for e in self._expenses:
            if e.id == expense_id:
                return e
        return None

    def __len__(self) -> int:
        return len(self._expenses)

    def __contains__(self, expense_id: object) -> bool:
        return any(e.id == expense_id for e in self._expenses)

    @property
    def dirty(self) -> bool:
        return self.version != self._saved_version

    def mark_saved(self, version: Optional[int] = None) -> None:
        self._saved_version = self.version if version is None else version

    # ------------------------------------------------------------------
    # Single-expense mutations
    def add(self, **fields: Any) -> Expense:
        """Append a new expense built from defaults plus ``fields``.

        A caller-supplied ``id`` is ignored; ids are always fresh.
        """
        fields.pop("id", None)
        fields = {k: v for k, v in fields.items() if v is not None}
        expense = Expense(**fields)
        self._replace(self._expenses + (expense,))
        logger.debug("expense added id=%s", expense.id)
        return expense

    def update(self, expense_id: str, patch: Dict[str, Any]) -> Optional[Expense]:
        """Apply a field patch; returns the new expense or None if the id is unknown."""
        if expense_id not in self:
            return None
        self._map({expense_id}, patch)
        return self.get(expense_id)

    def delete(self, expense_id: str) -> bool:
        remaining = tuple(e for e in self._expenses if e.id != expense_id)
        if len(remaining) == len(self._expenses):
            return False
        self._replace(remaining)
        logger.debug("expense deleted id=%s", expense_id)
        return True

    def replace(self, expenses: Iterable[Expense]) -> None:
        self._replace(tuple(expenses))

    def attach_receipt(self, expense_id: str, receipt: Receipt) -> Optional[Expense]:
        """Set the receipt; a no-op returning None when the expense is gone."""
        if expense_id not in self:
            logger.info("receipt for missing expense ignored id=%s", expense_id)
            return None
        return self.update(expense_id, {"receipt": receipt})

    def remove_receipt(self, expense_id: str) -> Optional[Expense]:
        return self.update(expense_id, {"receipt": None})

    # ------------------------------------------------------------------
    # Selection
    @property
    def selected_ids(self) -> List[str]:
        return list(self._selected)

    def toggle_select(self, expense_id: str) -> bool:
        """Flip selection of one id; returns the new selected state."""
        if expense_id in self._selected:
            self._selected = tuple(i for i in self._selected if i != expense_id)
            return False
        if expense_id not in self:
            raise KeyError(expense_id)
        self._selected = self._selected + (expense_id,)
        return True

    def toggle_select_all(self, ids: Iterable[str]) -> List[str]:
        """Select every id in ``ids``, or deselect them all if they already are.

        ``ids`` is normally the currently filtered view; selections outside it
        are left alone.
        """
        visible = [i for i in ids if i in self]
        if visible and all(i in self._selected for i in visible):
            drop = set(visible)
            self._selected = tuple(i for i in self._selected if i not in drop)
        else:
            merged = list(self._selected)
            for i in visible:
                if i not in merged:
                    merged.append(i)
            self._selected = tuple(merged)
        return self.selected_ids

    def clear_selection(self) -> None:
        self._selected = ()

    # ------------------------------------------------------------------
    # Bulk actions
    def bulk_set_status(self, status: ExpenseStatus) -> int:
        ids = set(self._selected)
        try:
            return self._map(ids, {"status": status}) if ids else 0
        finally:
            self.clear_selection()

    def bulk_approve(self) -> int:
        return self.bulk_set_status(ExpenseStatus.APPROVED)

    def bulk_reject(self) -> int:
        return self.bulk_set_status(ExpenseStatus.REJECTED)

    def bulk_delete(self) -> int:
        ids = set(self._selected)
        try:
            if not ids:
                return 0
            remaining = tuple(e for e in self._expenses if e.id not in ids)
            removed = len(self._expenses) - len(remaining)
            self._replace(remaining)
            return removed
        finally:
            self.clear_selection()


def _apply_patch(expense: Expense, patch: Dict[str, Any]) -> Expense:
    """Return a re-validated copy of ``expense`` with ``patch`` applied.

    Moving the category away from Other drops the free-text detail, since it
    is only meaningful for that category.
    """
    data = expense.model_dump()
    data.update(patch)
    data["id"] = expense.id
    if "category" in patch and "other_category_detail" not in patch:
        if data["category"] != ExpenseCategory.OTHER:
            data["other_category_detail"] = None
    return Expense.model_validate(data)
