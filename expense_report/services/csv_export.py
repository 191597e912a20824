"""CSV export of the (filtered) expense collection.

Column order is fixed: date, description, category, invoice number, amount,
status, receipt attached. Only the description is quoted (embedded quotes
doubled); other fields are written as-is, so this is not a full RFC-4180
writer. Lines are joined with ``\\n`` without a trailing newline.
"""

from __future__ import annotations
from typing import Iterable, List

from expense_report.models import Expense, ExpenseCategory
from expense_report.services.i18n import translate

CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

HEADER_KEYS = (
    "csv.date",
    "csv.description",
    "csv.category",
    "csv.invoiceNumber",
    "csv.amount",
    "csv.status",
    "csv.receiptAttached",
)


def category_label(expense: Expense, language: str) -> str:
    label = translate(f"categories.{expense.category.value}", language)
    if expense.category == ExpenseCategory.OTHER and expense.other_category_detail:
        return f"{label} ({expense.other_category_detail})"
    return label


def quote_description(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def expense_row(expense: Expense, language: str) -> List[str]:
    return [
        expense.date,
        quote_description(expense.description),
        category_label(expense, language),
        expense.invoice_number or "",
        f"{expense.amount:.2f}",
        translate(f"statuses.{expense.status.value}", language),
        translate("csv.yes" if expense.receipt else "csv.no", language),
    ]


def build_csv(expenses: Iterable[Expense], language: str = "es") -> str:
    header = [translate(k, language) for k in HEADER_KEYS]
    lines = [",".join(header)]
    lines.extend(",".join(expense_row(e, language)) for e in expenses)
    return "\n".join(lines)
