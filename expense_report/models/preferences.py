from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from .constants import LANGUAGES, THEMES


class Preferences(BaseModel):
    monthly_budget: float = Field(..., ge=0, allow_inf_nan=False)
    language: str
    theme: str

    @field_validator("language")
    @classmethod
    def valid_language(cls, v: str) -> str:
        if v not in LANGUAGES:
            raise ValueError("unsupported language")
        return v

    @field_validator("theme")
    @classmethod
    def valid_theme(cls, v: str) -> str:
        if v not in THEMES:
            raise ValueError("unsupported theme")
        return v


class BudgetUpdateIn(BaseModel):
    monthly_budget: float = Field(
        ..., ge=0, allow_inf_nan=False, description="Monthly budget shown against projections"
    )


class LanguageUpdateIn(BaseModel):
    language: str

    @field_validator("language")
    @classmethod
    def valid_language(cls, v: str) -> str:
        if v not in LANGUAGES:
            raise ValueError("unsupported language")
        return v


class ThemeUpdateIn(BaseModel):
    theme: str

    @field_validator("theme")
    @classmethod
    def valid_theme(cls, v: str) -> str:
        if v not in THEMES:
            raise ValueError("unsupported theme")
        return v
