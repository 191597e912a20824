from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

from expense_report.services.i18n import translate
from expense_report.services.preferences import get_language

logger = logging.getLogger("expense_report.errors")


class ExpenseReportError(Exception):
    """Base class for failures surfaced to the user as a transient notification.

    ``message_key`` points into the translation catalog so the handler can
    render the message in the user's language.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error = "expense_report_error"
    message_key = "notifications.genericError"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.error)
        self.detail = detail


class PersistenceError(ExpenseReportError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "save_failed"
    message_key = "notifications.saveError"


class ReceiptError(ExpenseReportError):
    error = "receipt_invalid"
    message_key = "notifications.fileReadError"


class ReceiptTooLargeError(ReceiptError):
    status_code = 413
    error = "receipt_too_large"
    message_key = "notifications.fileSizeError"


class ReceiptTypeError(ReceiptError):
    status_code = 415
    error = "receipt_type_not_allowed"
    message_key = "notifications.fileTypeError"


class ReceiptReadError(ReceiptError):
    error = "receipt_unreadable"
    message_key = "notifications.fileReadError"


def _request_language(request: Request) -> str:
    db = getattr(request.app.state, "db", None)
    settings = getattr(request.app.state, "settings", None)
    if db is None or settings is None:
        return "es"
    try:
        return get_language(db, settings)
    except Exception:  # pragma: no cover - storage unavailable while reporting an error
        logger.warning("could not resolve language for error response", exc_info=True)
        return "es"


def expense_report_error_handler(request: Request, exc: ExpenseReportError):  # type: ignore
    language = _request_language(request)
    if exc.status_code >= 500:
        logger.error("%s: %s", exc.error, exc.detail or "-")
    else:
        logger.info("%s: %s", exc.error, exc.detail or "-")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.error,
            "detail": exc.detail,
            "message_key": exc.message_key,
            "message": translate(exc.message_key, language),
        },
    )


def not_found_handler(request: Request, exc):  # type: ignore
    if exc.status_code != status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": "http_error", "detail": exc.detail},
        )
    detail = exc.detail
    if detail in (None, "Not Found"):
        detail = f"No route for {request.method} {request.url.path}"
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "not_found",
            "detail": detail,
        },
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
