"""Built-in seed dataset.

Used whenever the saved collection cannot be read (first run, corrupted
JSON, storage error). Dates are relative to ``today`` so the dashboards and
projection have roughly six months of approved history to work with.
"""

from __future__ import annotations
import calendar
from datetime import date
from typing import List, Optional

from expense_report.models import Expense, ExpenseCategory, ExpenseStatus


def relative_date(months_ago: int, day: int, today: Optional[date] = None) -> str:
    """ISO date ``months_ago`` calendar months before ``today`` on ``day``.

    ``day`` is clamped to the length of the target month.
    """
    today = today or date.today()
    month_index = today.year * 12 + (today.month - 1) - months_ago
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day)).isoformat()


def seed_expenses(today: Optional[date] = None) -> List[Expense]:
    today = today or date.today()
    approved = ExpenseStatus.APPROVED

    def d(months_ago: int, day: int) -> str:
        return relative_date(months_ago, day, today)

    return [
        Expense(date=d(5, 15), description="Vuelos a conferencia", category=ExpenseCategory.TRAVEL, amount=4500.00, status=approved, invoice_number="INV-001"),
        Expense(date=d(5, 20), description="Comida con equipo de ventas", category=ExpenseCategory.MEALS, amount=1250.50, status=approved, invoice_number="INV-002"),
        Expense(date=d(4, 10), description="Suministros de Oficina", category=ExpenseCategory.SUPPLIES, amount=800.00, status=approved, invoice_number="INV-003"),
        Expense(date=d(4, 22), description="Transporte Aeropuerto", category=ExpenseCategory.TRANSPORT, amount=600.00, status=approved),
        Expense(date=d(3, 5), description="Hotel para viaje de negocios", category=ExpenseCategory.LODGING, amount=6200.00, status=approved, invoice_number="INV-004"),
        Expense(date=d(3, 18), description="Cena con cliente potencial", category=ExpenseCategory.MEALS, amount=1800.00, status=approved, invoice_number="INV-005"),
        Expense(date=d(2, 1), description="Software de diseño", category=ExpenseCategory.OTHER, other_category_detail="Software", amount=3000.00, status=approved),
        Expense(date=d(2, 25), description="Alquiler de coche", category=ExpenseCategory.TRANSPORT, amount=2500.00, status=approved, invoice_number="INV-006"),
        Expense(date=d(1, 12), description="Billetes de tren", category=ExpenseCategory.TRAVEL, amount=1500.00, status=approved, invoice_number="INV-007"),
        Expense(date=d(1, 28), description="Gastos de internet", category=ExpenseCategory.SUPPLIES, amount=750.00, status=approved),
        Expense(date=d(0, 7), description="Almuerzo de equipo", category=ExpenseCategory.MEALS, amount=2100.00, status=approved, invoice_number="INV-008"),
        Expense(date=today.isoformat(), description="Reporte pendiente", category=ExpenseCategory.OTHER, amount=500.00, status=ExpenseStatus.PENDING),
    ]
