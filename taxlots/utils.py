"""
Utility functions used by taxlots modules
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import datetime
from typing import Union


def to_decimal(number: Union[int, float, str, Decimal]) -> Decimal:
    """Convert to Decimal, routing floats through str() so 0.1 stays 0.1.

    Raises:
        ValueError: if `number` can't be interpreted as a finite Decimal.
    """
    if isinstance(number, Decimal):
        d = number
    elif isinstance(number, bool):
        raise ValueError(f"Not a number: {number!r}")
    elif isinstance(number, (int, float, str)):
        try:
            d = Decimal(str(number).strip())
        except InvalidOperation:
            raise ValueError(f"Not a number: {number!r}")
    else:
        raise ValueError(f"Not a number: {number!r}")

    if not d.is_finite():
        raise ValueError(f"Not a finite number: {number!r}")
    return d


def round_decimal(number: Union[int, Decimal], power: int = -4) -> Decimal:
    """Convert to Decimal; round to units if possible, else round to desired exponent.
    """
    d = Decimal(number)
    return (
        d.quantize(Decimal(1))
        if d == d.to_integral_value()
        else d.quantize(Decimal("10") ** power, rounding=ROUND_HALF_UP)
    )


def quantize_cents(number: Decimal) -> Decimal:
    return number.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def normalize_datetime(
    value: Union[datetime.date, datetime.datetime, str]
) -> datetime.datetime:
    """Coerce to a naive datetime.datetime on the UTC clock.

    Dates become midnight; aware datetimes are converted to UTC and stripped of
    tzinfo; strings are parsed as ISO-8601.

    Raises:
        ValueError: if `value` can't be interpreted as a date/time.
    """
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.datetime.fromisoformat(text)

    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    raise ValueError(f"Not a date/time: {value!r}")


def holding_days(
    opendt: datetime.datetime, closedt: datetime.datetime
) -> int:
    """Whole days elapsed between opening and closing date/time (rounded down)."""
    return (closedt - opendt).days


def realize_longterm(days: int, threshold: int = 365) -> bool:
    """Returns True if a holding period is eligible for long-term treatment.

    This is a simplified elapsed-days rule: strictly more than `threshold` days.
    Calendar-month counting per IRS Pub 550 isn't applied.

    Args:
        days: elapsed days between acquisition and sale.
        threshold: maximum number of days that still counts as short-term.
    """
    return days > threshold
