"""User preferences backed by the metadata table.

Each preference lives under its own key and is written as soon as it
changes. Accessors are resilient: a missing or invalid stored value falls
back to the configured default.

Metadata keys:
  - monthly_budget: float >= 0 (stored as JSON number)
  - language: str in {es, en}
  - theme: str in {light, dark}
"""

from __future__ import annotations
import json
import logging
import math
import sqlite3
from typing import Optional

from expense_report.core.config import Settings, get_settings
from expense_report.db.dal import BUDGET_KEY, LANGUAGE_KEY, THEME_KEY, Database
from expense_report.models.constants import LANGUAGES, THEMES
from expense_report.models.preferences import Preferences

logger = logging.getLogger("expense_report.preferences")


def _get(db: Database, key: str) -> Optional[str]:
    try:
        return db.get_value(key)
    except sqlite3.Error:
        logger.warning("could not read preference %s", key, exc_info=True)
        return None


def _defaults(settings: Optional[Settings]) -> Settings:
    return settings or get_settings()


# ------------- Monthly budget -------------------


def get_monthly_budget(db: Database, settings: Optional[Settings] = None) -> float:
    default = _defaults(settings).default_monthly_budget
    val = _get(db, BUDGET_KEY)
    if val is None:
        return default
    try:
        budget = float(json.loads(val))
    except (ValueError, TypeError):
        return default
    return budget if math.isfinite(budget) and budget >= 0 else default


def set_monthly_budget(db: Database, amount: float) -> float:
    if not math.isfinite(amount) or amount < 0:
        raise ValueError("Monthly budget must be a finite non-negative number")
    db.set_value(BUDGET_KEY, json.dumps(float(amount)))
    return float(amount)


# ------------- Language -------------------


def get_language(db: Database, settings: Optional[Settings] = None) -> str:
    language = _get(db, LANGUAGE_KEY)
    return language if language in LANGUAGES else _defaults(settings).default_language


def set_language(db: Database, language: str) -> str:
    if language not in LANGUAGES:
        raise ValueError("Invalid language")
    db.set_value(LANGUAGE_KEY, language)
    return language


# ------------- Theme -------------------


def get_theme(db: Database, settings: Optional[Settings] = None) -> str:
    theme = _get(db, THEME_KEY)
    return theme if theme in THEMES else _defaults(settings).default_theme


def set_theme(db: Database, theme: str) -> str:
    if theme not in THEMES:
        raise ValueError("Invalid theme")
    db.set_value(THEME_KEY, theme)
    return theme


def toggle_theme(db: Database, settings: Optional[Settings] = None) -> str:
    current = get_theme(db, settings)
    return set_theme(db, "dark" if current == "light" else "light")


def get_preferences(db: Database, settings: Optional[Settings] = None) -> Preferences:
    return Preferences(
        monthly_budget=get_monthly_budget(db, settings),
        language=get_language(db, settings),
        theme=get_theme(db, settings),
    )


__all__ = [
    "get_monthly_budget",
    "set_monthly_budget",
    "get_language",
    "set_language",
    "get_theme",
    "set_theme",
    "toggle_theme",
    "get_preferences",
]
