from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, HTTPException, UploadFile
from pydantic import ValidationError

from expense_report.core.config import Settings
from expense_report.core.errors import ReceiptReadError
from expense_report.models import (
    ExpenseCreateIn,
    ExpenseFilter,
    ExpenseOut,
    ExpenseUpdateIn,
)
from expense_report.routers.deps import get_expense_filter, get_settings_dep, get_store
from expense_report.services.filters import filter_expenses
from expense_report.services.receipts import build_receipt
from expense_report.services.store import ExpenseStore

router = APIRouter(prefix="/expenses", tags=["expenses"])


# Helpers ----------------------------------------------------------


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="expense not found")


def _invalid(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail=[
            {"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()
        ],
    )


# Routes -----------------------------------------------------------
@router.get(
    "/", response_model=List[ExpenseOut], summary="List expenses with optional filters"
)
async def list_expenses_endpoint(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
):
    return [ExpenseOut.from_expense(e) for e in filter_expenses(store.list_expenses(), spec)]


@router.post(
    "/", response_model=ExpenseOut, status_code=201, summary="Add an expense"
)
async def create_expense(
    payload: Optional[ExpenseCreateIn] = Body(None),
    store: ExpenseStore = Depends(get_store),
):
    """Append a new expense.

    With no body the expense gets the defaults: today's date, empty
    description, zero amount, Travel, Pending.
    """
    fields = payload.changes() if payload is not None else {}
    try:
        expense = store.add(**fields)
    except ValidationError as e:
        raise _invalid(e) from e
    return ExpenseOut.from_expense(expense)


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Get one expense")
async def get_expense(expense_id: str, store: ExpenseStore = Depends(get_store)):
    expense = store.get(expense_id)
    if expense is None:
        raise _not_found()
    return ExpenseOut.from_expense(expense)


@router.patch(
    "/{expense_id}", response_model=ExpenseOut, summary="Edit an expense (partial)"
)
async def patch_expense(
    expense_id: str,
    payload: ExpenseUpdateIn,
    store: ExpenseStore = Depends(get_store),
):
    try:
        updated = store.update(expense_id, payload.changes())
    except ValidationError as e:
        raise _invalid(e) from e
    if updated is None:
        raise _not_found()
    return ExpenseOut.from_expense(updated)


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(expense_id: str, store: ExpenseStore = Depends(get_store)):
    if not store.delete(expense_id):
        raise _not_found()
    return None


# Receipts ---------------------------------------------------------
@router.put(
    "/{expense_id}/receipt",
    response_model=ExpenseOut,
    summary="Attach a receipt (JPEG, PNG or PDF, max 5MB)",
)
async def upload_receipt(
    expense_id: str,
    file: UploadFile = File(...),
    store: ExpenseStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
):
    if expense_id not in store:
        raise _not_found()
    try:
        # Read one byte past the limit so oversize files fail without loading everything.
        payload = await file.read(settings.max_receipt_bytes + 1)
    except OSError as e:
        raise ReceiptReadError(str(e)) from e
    finally:
        await file.close()
    receipt = build_receipt(
        file.filename,
        file.content_type,
        payload,
        max_bytes=settings.max_receipt_bytes,
    )
    # The expense may have been deleted while the upload was read.
    updated = store.attach_receipt(expense_id, receipt)
    if updated is None:
        raise _not_found()
    return ExpenseOut.from_expense(updated)


@router.delete(
    "/{expense_id}/receipt", response_model=ExpenseOut, summary="Remove the receipt"
)
async def delete_receipt(expense_id: str, store: ExpenseStore = Depends(get_store)):
    updated = store.remove_receipt(expense_id)
    if updated is None:
        raise _not_found()
    return ExpenseOut.from_expense(updated)
