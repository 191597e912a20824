"""Money / rounding helpers.

Centralized so analytics, CSV export, and API responses use identical
rounding and display semantics.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP


def round2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_currency(amount: float, language: str = "es", decimals: int = 2) -> str:
    """Render ``amount`` as ``$1,234.56``.

    es-MX pesos and en-US dollars both display with a bare ``$``, commas for
    thousands and a dot for decimals, so ``language`` does not change the
    output today.
    """
    quant = Decimal(1).scaleb(-decimals) if decimals > 0 else Decimal(1)
    value = Decimal(str(amount)).quantize(quant, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"
