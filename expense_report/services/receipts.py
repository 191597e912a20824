"""Receipt attachment validation and inlining.

A receipt is stored inline on the expense as a base64 data URL. Validation
happens before anything touches the expense, so a rejected upload leaves the
existing receipt as it was.
"""

from __future__ import annotations
import base64
import logging
from typing import Optional

from expense_report.core.errors import (
    ReceiptReadError,
    ReceiptTooLargeError,
    ReceiptTypeError,
)
from expense_report.models import Receipt
from expense_report.models.constants import ALLOWED_RECEIPT_TYPES, MAX_RECEIPT_BYTES

logger = logging.getLogger("expense_report.receipts")


def validate_receipt_upload(
    content_type: Optional[str], size: int, max_bytes: int = MAX_RECEIPT_BYTES
) -> None:
    if size > max_bytes:
        raise ReceiptTooLargeError(f"{size} bytes exceeds limit of {max_bytes}")
    if content_type not in ALLOWED_RECEIPT_TYPES:
        raise ReceiptTypeError(f"content type {content_type!r} not allowed")


def to_data_url(content_type: str, payload: bytes) -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def build_receipt(
    filename: Optional[str],
    content_type: Optional[str],
    payload: Optional[bytes],
    max_bytes: int = MAX_RECEIPT_BYTES,
) -> Receipt:
    if payload is None:
        raise ReceiptReadError("no file content")
    validate_receipt_upload(content_type, len(payload), max_bytes=max_bytes)
    if not payload:
        raise ReceiptReadError("empty file")
    name = (filename or "").strip()
    if not name:
        raise ReceiptReadError("missing file name")
    receipt = Receipt(name=name, type=content_type, data=to_data_url(content_type, payload))
    logger.debug("receipt built name=%s type=%s bytes=%d", name, content_type, len(payload))
    return receipt
