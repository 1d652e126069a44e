from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from src.domain.currency import format_currency

DEFAULT_CURRENCY = "INR"


def present_priced_row(
    row: Mapping[str, Any],
    price_fields: Iterable[str],
    *,
    can_see_pricing: bool,
    currency: str | None,
    display_fields: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Copy of a row with monetary fields redacted or formatted for display.

    ``display_fields`` maps a price column to the key that receives its
    formatted value, e.g. ``{"amount": "amount_display"}``.
    """
    presented = dict(row)
    display_fields = display_fields or {}
    for field in price_fields:
        display_key = display_fields.get(field)
        if not can_see_pricing:
            presented[field] = None
            if display_key:
                presented[display_key] = None
            continue
        value = presented.get(field)
        if display_key:
            presented[display_key] = (
                format_currency(value, currency or DEFAULT_CURRENCY) if value is not None else None
            )
    return presented
