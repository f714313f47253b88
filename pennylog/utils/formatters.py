"""Helpers for rendering amounts and dates in insight text."""
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from pennylog.core.config import settings

Number = Union[int, float, Decimal]

# Fixed English names, independent of the process locale
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

_CRORE = Decimal("10000000")
_LAKH = Decimal("100000")
_THOUSAND = Decimal("1000")


def _to_decimal(amount: Number) -> Decimal:
    return amount if isinstance(amount, Decimal) else Decimal(str(amount))


def to_amount(amount: Optional[Number]) -> Optional[float]:
    """JSON-friendly amount rounded to two places."""
    if amount is None:
        return None
    return round(float(amount), 2)


def round_whole(amount: Number) -> int:
    """Round half away from zero to a whole unit."""
    return int(_to_decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: Number, symbol: Optional[str] = None, decimals: int = 0) -> str:
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    if decimals <= 0:
        return f"{symbol}{round_whole(amount):,}"
    exponent = Decimal(1).scaleb(-decimals)
    value = _to_decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)
    return f"{symbol}{value:,}"


def format_amount_indian(amount: Number, symbol: Optional[str] = None) -> str:
    """Compact notation using the Indian number system (K, L, Cr)."""
    symbol = settings.CURRENCY_SYMBOL if symbol is None else symbol
    value = _to_decimal(amount)
    one_place = Decimal("0.1")
    if value >= _CRORE:
        return f"{symbol}{(value / _CRORE).quantize(one_place, rounding=ROUND_HALF_UP)}Cr"
    if value >= _LAKH:
        return f"{symbol}{(value / _LAKH).quantize(one_place, rounding=ROUND_HALF_UP)}L"
    if value >= _THOUSAND:
        return f"{symbol}{(value / _THOUSAND).quantize(one_place, rounding=ROUND_HALF_UP)}K"
    return f"{symbol}{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)}"


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]
