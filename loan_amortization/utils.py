"""Utility functions for the amortization engine.

This module provides helpers for parsing user input into Python data types,
for calendar month arithmetic and for rounding money. All rounding in the
package goes through :func:`round_money` so that it happens in exactly one
place and only at summary or display time.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, getcontext
from typing import Union

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` or ``YYYY-MM`` string into a ``date``.

    When the day component is missing the first day of the month is used.

    Raises
    ------
    ValueError
        If the string is not a valid date.
    """
    try:
        parts = value.strip().split("-")
        if len(parts) not in (2, 3):
            raise ValueError
        year = int(parts[0])
        month = int(parts[1])
        day = int(parts[2]) if len(parts) == 3 else 1
        return date(year, month, day)
    except Exception as exc:
        raise ValueError(f"Invalid date string: {value}") from exc


def add_months(dt: date, months: int) -> date:
    """Return ``dt`` advanced by ``months`` calendar months.

    The month field is incremented and a day that does not exist in the
    target month rolls over into the following month, e.g. adding one month
    to 2023-01-31 yields 2023-03-03 and to 2024-01-31 yields 2024-03-02.
    """
    year = dt.year + (dt.month - 1 + months) // 12
    month = (dt.month - 1 + months) % 12 + 1
    return date(year, month, 1) + timedelta(days=dt.day - 1)


def to_decimal(value: Number) -> Decimal:
    """Convert a number or numeric string into a finite ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion. Commas in strings are stripped.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, str):
            result = Decimal(value.strip().replace(",", ""))
        else:
            result = Decimal(str(value))
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"Invalid numeric value: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")
    return result


def round_money(value: Decimal) -> Decimal:
    """Round an amount to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
