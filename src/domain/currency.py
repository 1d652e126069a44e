from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Final

from babel import Locale
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import get_currency_symbol

# Display locale per organization currency; anything else renders as en_US.
LOCALE_MAP: Final[dict[str, str]] = {
    "INR": "en_IN",
    "USD": "en_US",
    "EUR": "de_DE",
    "GBP": "en_GB",
    "AED": "ar_AE",
    "SGD": "en_SG",
    "AUD": "en_AU",
    "JPY": "ja_JP",
    "CHF": "de_CH",
}
DEFAULT_LOCALE: Final[str] = "en_US"

LAKH: Final[int] = 100_000

_FRACTION = re.compile(r"\.[0#]+")


def _whole_unit_pattern(locale: str) -> str:
    pattern = Locale.parse(locale).currency_formats["standard"].pattern
    return _FRACTION.sub("", pattern)


def format_currency(amount: float | int | Decimal, currency: str) -> str:
    """Whole-unit amount in the currency's display locale, e.g. ``₹12,34,567`` or ``12.500 €``.

    Halves round away from zero.
    """
    code = (currency or "USD").upper()
    locale = LOCALE_MAP.get(code, DEFAULT_LOCALE)
    rounded = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return babel_format_currency(
        rounded,
        code,
        format=_whole_unit_pattern(locale),
        locale=locale,
        currency_digits=False,
    )


def format_currency_compact(amount: float | int | Decimal, currency: str) -> str:
    """Like format_currency, but INR amounts of a lakh or more render as ``₹1.5L``."""
    code = (currency or "").upper()
    if code == "INR" and amount >= LAKH:
        lakhs = (Decimal(str(amount)) / LAKH).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        return f"{get_currency_symbol('INR', locale=LOCALE_MAP['INR'])}{lakhs}L"
    return format_currency(amount, currency)
