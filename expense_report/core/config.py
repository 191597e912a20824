from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, DEFAULT_MONTHLY_BUDGET, MAX_RECEIPT_BYTES).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Expense Report"
    debug: bool = False
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "expense_report.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Preference defaults used until the user changes them
    default_monthly_budget: float = 10000.0
    default_language: str = "es"
    default_theme: str = "light"

    # Attachments
    max_receipt_bytes: int = 5 * 1024 * 1024

    # Analytics
    projection_window_months: int = 6
    projection_horizon_months: int = 3
    top_expenses_count: int = 5

    # Export
    export_filename: str = "informe_de_gastos.csv"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        if self.default_language not in {"es", "en"}:
            raise ValueError(
                f"Unsupported default_language '{self.default_language}'. Allowed: es, en"
            )
        if self.default_theme not in {"light", "dark"}:
            raise ValueError(
                f"Unsupported default_theme '{self.default_theme}'. Allowed: light, dark"
            )
        if self.projection_window_months < 2:
            raise ValueError("projection_window_months must be at least 2")


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
