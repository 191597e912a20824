from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from expense_report.models import ExpenseFilter
from expense_report.routers.deps import (
    get_current_language,
    get_expense_filter,
    get_store,
)
from expense_report.services.filters import filter_expenses
from expense_report.services.i18n import translate
from expense_report.services.store import ExpenseStore

router = APIRouter(prefix="/selection", tags=["selection"])


class SelectionOut(BaseModel):
    selected_ids: List[str]
    count: int
    label: str


class BulkResult(BaseModel):
    action: str
    affected: int
    selected_ids: List[str]


def _selection_out(store: ExpenseStore, language: str) -> SelectionOut:
    ids = store.selected_ids
    return SelectionOut(
        selected_ids=ids,
        count=len(ids),
        label=translate("bulkActions.selected", language, count=len(ids)),
    )


@router.get("/", response_model=SelectionOut, summary="Currently selected expenses")
async def get_selection(
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    return _selection_out(store, language)


@router.post(
    "/toggle/{expense_id}", response_model=SelectionOut, summary="Select / deselect one"
)
async def toggle_one(
    expense_id: str,
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    try:
        store.toggle_select(expense_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="expense not found")
    return _selection_out(store, language)


@router.post(
    "/toggle-all",
    response_model=SelectionOut,
    summary="Select every filtered expense, or deselect them if all are selected",
)
async def toggle_all(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    visible = filter_expenses(store.list_expenses(), spec)
    store.toggle_select_all(e.id for e in visible)
    return _selection_out(store, language)


@router.delete("/", response_model=SelectionOut, summary="Clear the selection")
async def clear_selection(
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    store.clear_selection()
    return _selection_out(store, language)


# Bulk actions -----------------------------------------------------
@router.post("/approve", response_model=BulkResult, summary="Approve selected")
async def bulk_approve(store: ExpenseStore = Depends(get_store)):
    affected = store.bulk_approve()
    return BulkResult(action="approve", affected=affected, selected_ids=store.selected_ids)


@router.post("/reject", response_model=BulkResult, summary="Reject selected")
async def bulk_reject(store: ExpenseStore = Depends(get_store)):
    affected = store.bulk_reject()
    return BulkResult(action="reject", affected=affected, selected_ids=store.selected_ids)


@router.post("/delete", response_model=BulkResult, summary="Delete selected")
async def bulk_delete(store: ExpenseStore = Depends(get_store)):
    affected = store.bulk_delete()
    return BulkResult(action="delete", affected=affected, selected_ids=store.selected_ids)
