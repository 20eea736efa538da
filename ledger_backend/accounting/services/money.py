# accounting/services/money.py

"""
Decimal money helpers shared by posting and reporting.

All arithmetic stays in Decimal; conversion to JSON numbers happens
only at the response edge.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value, *, places: Decimal | None = TWOPLACES) -> Decimal:
    """
    Parse a client/DB value into Decimal. Raises ValueError on garbage.
    """
    if value is None or value == "":
        amount = Decimal("0")
    elif isinstance(value, Decimal):
        amount = value
    elif isinstance(value, bool):
        raise ValueError(f"Invalid decimal value: {value!r}")
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValueError(f"Invalid decimal value: {value!r}") from exc

    if not amount.is_finite():
        raise ValueError(f"Invalid decimal value: {value!r}")

    if places is None:
        return amount
    try:
        return amount.quantize(places, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        # more digits than the decimal context can hold
        raise ValueError(f"Decimal value out of range: {value!r}") from exc


def q2(amount) -> Decimal:
    return (amount or ZERO).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def to_major_number(amount) -> float:
    return float(q2(amount))


def to_minor_int(amount) -> int:
    return int((q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))
