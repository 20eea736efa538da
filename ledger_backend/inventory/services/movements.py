# inventory/services/movements.py

"""
======================================================
PATH: inventory/services/movements.py
======================================================
STOCK MOVEMENT COLLECTOR

Stock on hand is never stored. Every stock report replays posted item
lines from the movement-bearing voucher tables:

- TradeInvoiceItem   purchase -> inward, sales -> outward
- NoteItem           credit-note (sales return) -> inward,
                     debit-note (purchase return) -> outward
- StockJournalEntry  debit (destination) -> inward,
                     credit (source) -> outward
- DeliveryEntry      outward

Orders do not move stock and are never read here.
One query per source table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from vouchers.models import (
    DEBIT,
    DeliveryEntry,
    NoteItem,
    StockJournalEntry,
    TradeInvoiceItem,
)

from inventory.services.exceptions import StockReportParameterError

INWARD = "in"
OUTWARD = "out"
DIRECTIONS = (INWARD, OUTWARD)

DIRECTION_ALIASES = {
    "in": INWARD,
    "inward": INWARD,
    "out": OUTWARD,
    "outward": OUTWARD,
}

QTY_PLACES = Decimal("0.001")
QTY_ZERO = Decimal("0.000")

VOUCHER_LABELS = {
    "purchase": "Purchase Invoice",
    "sales": "Sales Invoice",
    "credit-note": "Credit Note",
    "debit-note": "Debit Note",
    "stock-journal": "Stock Journal",
    "delivery": "Delivery Note",
}


def qty_number(value) -> float:
    return float((value or QTY_ZERO).quantize(QTY_PLACES, rounding=ROUND_HALF_UP))


def parse_direction(value) -> str | None:
    raw = str(value or "").strip().lower()
    if not raw:
        return None
    try:
        return DIRECTION_ALIASES[raw]
    except KeyError as exc:
        raise StockReportParameterError(
            f"Invalid direction '{value}'. Expected 'in' or 'out'", field="direction"
        ) from exc


@dataclass(frozen=True)
class MovementSource:
    key: str
    line_model: type
    direction: Callable[[dict], str]
    extra_fields: tuple[str, ...] = ()


def _inward_for_types(*voucher_types: str) -> Callable[[dict], str]:
    def direction(row: dict) -> str:
        return INWARD if row["voucher__voucher_type"] in voucher_types else OUTWARD

    return direction


def _by_entry_type(row: dict) -> str:
    return INWARD if row["entry_type"] == DEBIT else OUTWARD


def _always_outward(row: dict) -> str:
    return OUTWARD


MOVEMENT_SOURCES = (
    MovementSource("trade-invoice", TradeInvoiceItem, _inward_for_types("purchase")),
    MovementSource("note", NoteItem, _inward_for_types("credit-note")),
    MovementSource(
        "stock-journal",
        StockJournalEntry,
        _by_entry_type,
        extra_fields=("entry_type", "batch_number"),
    ),
    MovementSource("delivery", DeliveryEntry, _always_outward),
)


@dataclass(frozen=True)
class Movement:
    source: str
    line_id: int
    voucher_id: int
    date: date
    voucher_type: str
    voucher_number: str
    item_id: int
    item_name: str
    godown_id: int | None
    godown_name: str
    direction: str
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    batch_number: str = ""

    @property
    def signed_quantity(self) -> Decimal:
        return self.quantity if self.direction == INWARD else -self.quantity

    def as_dict(self) -> dict:
        return {
            "id": f"{self.source}:{self.line_id}",
            "voucherId": self.voucher_id,
            "date": self.date.isoformat(),
            "voucherType": self.voucher_type,
            "voucherLabel": VOUCHER_LABELS.get(self.voucher_type, self.voucher_type),
            "voucherNumber": self.voucher_number,
            "itemId": self.item_id,
            "itemName": self.item_name,
            "godownId": self.godown_id,
            "godownName": self.godown_name,
            "direction": self.direction,
            "quantity": qty_number(self.quantity),
            "rate": float(self.rate),
            "amount": float(self.amount),
            "batchNumber": self.batch_number,
        }


BASE_FIELDS = (
    "id",
    "voucher_id",
    "voucher__date",
    "voucher__voucher_type",
    "voucher__number",
    "item_id",
    "item__name",
    "godown_id",
    "godown__name",
    "quantity",
    "rate",
    "amount",
)


def collect_movements(
    *,
    from_date: date | None = None,
    to_date: date | None = None,
    item_ids=None,
    stock_group_id=None,
    godown_id=None,
    direction: str | None = None,
) -> list[Movement]:
    """
    Movements ordered by (date, voucher id, source, line id).
    `item_ids=None` means every item; an empty collection means none.
    """
    if item_ids is not None:
        item_ids = list(item_ids)
        if not item_ids:
            return []

    movements: list[Movement] = []
    for source in MOVEMENT_SOURCES:
        qs = source.line_model.objects.all()
        if from_date is not None:
            qs = qs.filter(voucher__date__gte=from_date)
        if to_date is not None:
            qs = qs.filter(voucher__date__lte=to_date)
        if item_ids is not None:
            qs = qs.filter(item_id__in=item_ids)
        if stock_group_id not in (None, ""):
            qs = qs.filter(item__stock_group_id=stock_group_id)
        if godown_id not in (None, ""):
            qs = qs.filter(godown_id=godown_id)

        for row in qs.values(*BASE_FIELDS, *source.extra_fields).order_by("voucher__date", "voucher_id", "id"):
            row_direction = source.direction(row)
            if direction and row_direction != direction:
                continue
            movements.append(
                Movement(
                    source=source.key,
                    line_id=row["id"],
                    voucher_id=row["voucher_id"],
                    date=row["voucher__date"],
                    voucher_type=row["voucher__voucher_type"],
                    voucher_number=row["voucher__number"],
                    item_id=row["item_id"],
                    item_name=row["item__name"],
                    godown_id=row["godown_id"],
                    godown_name=row["godown__name"] or "",
                    direction=row_direction,
                    quantity=row["quantity"],
                    rate=row["rate"],
                    amount=row["amount"],
                    batch_number=row.get("batch_number", ""),
                )
            )

    source_order = {s.key: i for i, s in enumerate(MOVEMENT_SOURCES)}
    movements.sort(key=lambda m: (m.date, m.voucher_id, source_order[m.source], m.line_id))
    return movements
