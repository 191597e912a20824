"""Domain constants and enumerations for validation.

Category and status are closed sets; the string values double as the
translation keys under ``categories.*`` and ``statuses.*``.
"""

from enum import Enum
from typing import Set


class ExpenseCategory(str, Enum):
    TRAVEL = "Travel"
    MEALS = "Meals"
    SUPPLIES = "Supplies"
    TRANSPORT = "Transport"
    LODGING = "Lodging"
    OTHER = "Other"


class ExpenseStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


# Display order used by filter dropdowns and the dashboard legend.
EXPENSE_CATEGORIES = [
    ExpenseCategory.TRAVEL,
    ExpenseCategory.MEALS,
    ExpenseCategory.SUPPLIES,
    ExpenseCategory.TRANSPORT,
    ExpenseCategory.LODGING,
    ExpenseCategory.OTHER,
]

# Sentinel accepted by the category / status filters meaning "no constraint".
FILTER_ALL = "all"

ALLOWED_RECEIPT_TYPES: Set[str] = {"image/jpeg", "image/png", "application/pdf"}
MAX_RECEIPT_BYTES = 5 * 1024 * 1024

LANGUAGES: Set[str] = {"es", "en"}
THEMES: Set[str] = {"light", "dark"}
