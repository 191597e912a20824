"""Shared route dependencies.

The app factory attaches the settings, database and the single expense
store to ``app.state``; routes pull them from there so tests can inject an
isolated instance through ``create_app(settings_override=...)``.
"""

from datetime import date
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request

from expense_report.core.config import Settings
from expense_report.db.dal import Database
from expense_report.models import ExpenseFilter, FILTER_ALL
from expense_report.services.preferences import get_language
from expense_report.services.store import ExpenseStore


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_store(request: Request) -> ExpenseStore:
    return request.app.state.store


def get_current_language(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings_dep)
) -> str:
    return get_language(db, settings)


def get_expense_filter(
    search_term: str = Query("", description="Substring of description, invoice # or receipt name"),
    category: str = Query(FILTER_ALL, description="Category or 'all'"),
    status: str = Query(FILTER_ALL, description="Status or 'all'"),
    start_date: Optional[date] = Query(None, description="Filter: start date inclusive"),
    end_date: Optional[date] = Query(None, description="Filter: end date inclusive"),
) -> ExpenseFilter:
    try:
        return ExpenseFilter(
            search_term=search_term,
            category=category,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
