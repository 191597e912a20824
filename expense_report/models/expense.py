from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from .constants import (
    ALLOWED_RECEIPT_TYPES,
    FILTER_ALL,
    ExpenseCategory,
    ExpenseStatus,
)

ISO_DATE_FORMAT = "%Y-%m-%d"


def new_expense_id() -> str:
    return uuid4().hex


def today_iso() -> str:
    return date.today().isoformat()


def _coerce_iso_date(v):
    """Accept ``date`` objects or ``YYYY-MM-DD`` strings; return the string form."""
    if isinstance(v, datetime):
        v = v.date()
    if isinstance(v, date):
        return v.isoformat()
    if not isinstance(v, str):
        raise ValueError("date must be an ISO YYYY-MM-DD string")
    try:
        datetime.strptime(v, ISO_DATE_FORMAT)
    except ValueError:
        raise ValueError("date must be an ISO YYYY-MM-DD string") from None
    # strptime tolerates unpadded fields; lexical ordering needs fixed width.
    if len(v) != 10:
        raise ValueError("date must be an ISO YYYY-MM-DD string")
    return v


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


class Receipt(BaseModel):
    """Attached file, inlined as a base64 data URL."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str
    data: str

    @field_validator("type")
    @classmethod
    def valid_type(cls, v: str) -> str:
        if v not in ALLOWED_RECEIPT_TYPES:
            raise ValueError("unsupported receipt type")
        return v

    @field_validator("data")
    @classmethod
    def data_url(cls, v: str) -> str:
        if not v.startswith("data:"):
            raise ValueError("receipt data must be a data URL")
        return v


class Expense(BaseModel):
    """A single expense line item.

    Instances are immutable; edits produce a new validated instance (see
    ``ExpenseStore.update``) so the category / detail pairing is enforced on
    every construction.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_expense_id)
    date: str = Field(default_factory=today_iso)
    description: str = ""
    amount: float = Field(0.0, ge=0, allow_inf_nan=False)
    category: ExpenseCategory = ExpenseCategory.TRAVEL
    other_category_detail: Optional[str] = None
    status: ExpenseStatus = ExpenseStatus.PENDING
    invoice_number: Optional[str] = None
    receipt: Optional[Receipt] = None

    @field_validator("date", mode="before")
    @classmethod
    def iso_date(cls, v):
        return _coerce_iso_date(v)

    @field_validator("other_category_detail", "invoice_number")
    @classmethod
    def strip_optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def detail_only_for_other(self) -> "Expense":
        if (
            self.other_category_detail is not None
            and self.category != ExpenseCategory.OTHER
        ):
            raise ValueError("other_category_detail is only valid for category Other")
        return self

    @property
    def month(self) -> str:
        return self.date[:7]


def display_issues(expense: Expense) -> List[str]:
    """Fields failing the display checks; saving is never blocked by these."""
    invalid = []
    if not expense.description.strip():
        invalid.append("description")
    if expense.amount <= 0:
        invalid.append("amount")
    return invalid


class ExpenseOut(Expense):
    @computed_field  # type: ignore[prop-decorator]
    @property
    def invalid_fields(self) -> List[str]:
        return display_issues(self)

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseOut":
        return cls.model_validate(expense.model_dump())


class ExpenseFields(BaseModel):
    """Optional editable fields shared by create and update payloads."""

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    category: Optional[ExpenseCategory] = None
    other_category_detail: Optional[str] = None
    status: Optional[ExpenseStatus] = None
    invoice_number: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def iso_date(cls, v):
        if v is None:
            return v
        return _coerce_iso_date(v)

    @field_validator("date", "description", "amount", "category", "status")
    @classmethod
    def not_null(cls, v):
        # Omit a field to leave it unchanged; only the optional text fields accept null.
        if v is None:
            raise ValueError("may be omitted but not null")
        return v

    def changes(self) -> dict:
        """Only the fields the caller actually sent (explicit nulls included)."""
        return self.model_dump(exclude_unset=True)


class ExpenseCreateIn(ExpenseFields):
    pass


class ExpenseUpdateIn(ExpenseFields):
    """Partial update model. ``id`` and ``receipt`` are not editable here."""

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided for update")
        return self


class ExpenseFilter(BaseModel):
    search_term: str = ""
    category: str = FILTER_ALL
    status: str = FILTER_ALL
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("search_term", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or ""

    @field_validator("category")
    @classmethod
    def valid_category(cls, v: str) -> str:
        if v != FILTER_ALL and v not in {c.value for c in ExpenseCategory}:
            raise ValueError("unsupported category")
        return v

    @field_validator("status")
    @classmethod
    def valid_status(cls, v: str) -> str:
        if v != FILTER_ALL and v not in {s.value for s in ExpenseStatus}:
            raise ValueError("unsupported status")
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def optional_iso_date(cls, v):
        if v in (None, ""):
            return None
        return _coerce_iso_date(v)
