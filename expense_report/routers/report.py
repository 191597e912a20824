import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel

from expense_report.core.config import Settings
from expense_report.db.dal import Database
from expense_report.models import ExpenseFilter
from expense_report.routers.deps import (
    get_current_language,
    get_db,
    get_expense_filter,
    get_settings_dep,
    get_store,
)
from expense_report.services.analytics_utils import total_amount
from expense_report.services.csv_export import CSV_MEDIA_TYPE, build_csv
from expense_report.services.filters import filter_expenses
from expense_report.services.i18n import translate
from expense_report.services.money import format_currency
from expense_report.services.persistence import save_expenses
from expense_report.services.store import ExpenseStore

router = APIRouter(prefix="/report", tags=["report"])
logger = logging.getLogger("expense_report.report")


class ReportStatus(BaseModel):
    version: int
    dirty: bool
    expense_count: int
    filtered_count: int
    filtered_total: float
    filtered_total_display: str


class SaveResult(BaseModel):
    version: int
    saved_count: int
    message_key: str
    message: str


@router.get("/", response_model=ReportStatus, summary="Report state and filtered total")
async def report_status(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    language: str = Depends(get_current_language),
):
    filtered = filter_expenses(store.list_expenses(), spec)
    total = total_amount(filtered)
    return ReportStatus(
        version=store.version,
        dirty=store.dirty,
        expense_count=len(store),
        filtered_count=len(filtered),
        filtered_total=total,
        filtered_total_display=format_currency(total, language),
    )


@router.post("/save", response_model=SaveResult, summary="Save the report locally")
async def save_report(
    store: ExpenseStore = Depends(get_store),
    db: Database = Depends(get_db),
    language: str = Depends(get_current_language),
):
    """Write the whole collection to local storage.

    On failure a ``save_failed`` error is returned and the in-memory report
    keeps every unsaved change.
    """
    version = store.version
    expenses = store.list_expenses()
    save_expenses(db, expenses)
    store.mark_saved(version)
    return SaveResult(
        version=version,
        saved_count=len(expenses),
        message_key="notifications.saveSuccess",
        message=translate("notifications.saveSuccess", language),
    )


@router.get("/export.csv", summary="Download the filtered expenses as CSV")
async def export_csv(
    spec: ExpenseFilter = Depends(get_expense_filter),
    store: ExpenseStore = Depends(get_store),
    settings: Settings = Depends(get_settings_dep),
    language: str = Depends(get_current_language),
):
    filtered = filter_expenses(store.list_expenses(), spec)
    content = build_csv(filtered, language)
    logger.info("exported %d expenses to csv", len(filtered))
    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{settings.export_filename}"'
        },
    )
