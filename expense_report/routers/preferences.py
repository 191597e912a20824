from fastapi import APIRouter, Depends

from expense_report.core.config import Settings
from expense_report.db.dal import Database
from expense_report.models import Preferences
from expense_report.models.preferences import (
    BudgetUpdateIn,
    LanguageUpdateIn,
    ThemeUpdateIn,
)
from expense_report.routers.deps import get_db, get_settings_dep
from expense_report.services.preferences import (
    get_preferences,
    set_language,
    set_monthly_budget,
    set_theme,
    toggle_theme,
)

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/", response_model=Preferences, summary="Budget, language and theme")
async def read_preferences(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings_dep)
):
    return get_preferences(db, settings)


@router.put("/budget", response_model=Preferences, summary="Set the monthly budget")
async def update_budget(
    payload: BudgetUpdateIn,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    set_monthly_budget(db, payload.monthly_budget)
    return get_preferences(db, settings)


@router.put("/language", response_model=Preferences, summary="Set the UI language")
async def update_language(
    payload: LanguageUpdateIn,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    set_language(db, payload.language)
    return get_preferences(db, settings)


@router.put("/theme", response_model=Preferences, summary="Set the UI theme")
async def update_theme(
    payload: ThemeUpdateIn,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    set_theme(db, payload.theme)
    return get_preferences(db, settings)


@router.post(
    "/theme/toggle", response_model=Preferences, summary="Switch between light and dark"
)
async def switch_theme(
    db: Database = Depends(get_db), settings: Settings = Depends(get_settings_dep)
):
    toggle_theme(db, settings)
    return get_preferences(db, settings)
