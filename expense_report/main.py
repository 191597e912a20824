import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import Database
from .db.schema import init_db
from .routers import analytics, expenses, health, preferences, report, selection
from .services.persistence import load_expenses
from .services.store import ExpenseStore


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    init_logging(debug=settings.debug)
    logger = logging.getLogger("expense_report")

    try:
        init_db(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        # Without the key/value table nothing can be saved; fail fast.
        logger.exception("failed to initialize local storage on startup")
        raise

    db = Database(settings.db_path)  # type: ignore[arg-type]
    # The saved report is read exactly once, here.
    initial, from_seed = load_expenses(db)
    store = ExpenseStore(initial)
    logger.info(
        "expense store ready count=%d source=%s",
        len(store),
        "seed" if from_seed else "saved",
    )

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings
    app.state.db = db
    app.state.store = store

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(errors.ExpenseReportError, errors.expense_report_error_handler)
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(expenses.router)
    app.include_router(selection.router)
    app.include_router(analytics.router)
    app.include_router(report.router)
    app.include_router(preferences.router)

    @app.get("/")
    async def root():
        return {"message": "Expense Report API", "version": settings.version}

    return app
