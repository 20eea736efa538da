# accounting/services/aggregates.py

"""
Reusable ORM aggregate expressions over ledger lines.

Every expression coalesces to 0.00 so empty groups never yield NULL.
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce

from vouchers.models import CREDIT, DEBIT

MONEY_FIELD = DecimalField(max_digits=16, decimal_places=2)


def money_sum(expression: str = "amount", *, filter: Q | None = None) -> Coalesce:
    return Coalesce(
        Sum(expression, filter=filter),
        Value(Decimal("0.00")),
        output_field=MONEY_FIELD,
    )


def debit_sum(prefix: str = "", *, extra: Q | None = None) -> Coalesce:
    """
    Sum of debit amounts. `prefix` walks a relation, e.g. "entries__".
    """
    condition = Q(**{f"{prefix}entry_type": DEBIT})
    if extra is not None:
        condition &= extra
    return money_sum(f"{prefix}amount", filter=condition)


def credit_sum(prefix: str = "", *, extra: Q | None = None) -> Coalesce:
    condition = Q(**{f"{prefix}entry_type": CREDIT})
    if extra is not None:
        condition &= extra
    return money_sum(f"{prefix}amount", filter=condition)
