# inventory/services/stock_ageing_service.py

"""
STOCK AGEING (FIFO LOTS)

Remaining stock at to_date is aged by the date it came in:
- inward lots: the opening balance (dated at item creation, left out
  when the item was created after to_date) and every inward movement
  up to to_date
- outward quantity consumes lots oldest-first
- what is left of each lot is bucketed by (to_date - lot date)

Values: Quantity basis uses the lot rate (FIFO cost), Cost the
standard purchase rate, Value the standard sale rate. Rounding follows
ValuationSettings.rounding_precision.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from accounting.services.ageing import EXTENDED_BUCKETS, bucket_for
from inventory.models import StockItem, ValuationSettings
from inventory.services.exceptions import StockReportParameterError
from inventory.services.movements import INWARD, QTY_ZERO, collect_movements, qty_number
from inventory.services.stock_report_service import (
    BASIS_COST,
    BASIS_QUANTITY,
    BASIS_VALUE,
    parse_basis,
)

logger = logging.getLogger(__name__)


@dataclass
class StockLot:
    date: date
    quantity: Decimal
    rate: Decimal


def _lots_for(item: StockItem, movements, to_date: date) -> tuple[list[StockLot], Decimal]:
    """
    FIFO-consume outward quantity; returns (remaining lots, shortfall).
    """
    lots: list[StockLot] = []
    opened_on = item.created_at.date()
    if item.opening_balance and item.opening_balance > 0 and opened_on <= to_date:
        lots.append(
            StockLot(
                date=opened_on,
                quantity=item.opening_balance,
                rate=item.opening_rate or item.standard_purchase_rate,
            )
        )

    consumed = QTY_ZERO
    for m in movements:
        if m.direction == INWARD:
            lots.append(StockLot(date=m.date, quantity=m.quantity, rate=m.rate or item.standard_purchase_rate))
        else:
            consumed += m.quantity

    lots.sort(key=lambda lot: lot.date)

    for lot in lots:
        if consumed <= 0:
            break
        take = min(lot.quantity, consumed)
        lot.quantity -= take
        consumed -= take

    return [lot for lot in lots if lot.quantity > 0], consumed


def build_stock_ageing(
    *,
    to_date: date | None,
    basis: str = BASIS_QUANTITY,
    stock_item_id=None,
    stock_group_id=None,
) -> dict:
    if to_date is None:
        raise StockReportParameterError("toDate is required", field="toDate")
    basis = parse_basis(basis)

    config = ValuationSettings.current()
    precision = Decimal(1).scaleb(-int(config.rounding_precision))

    def rounded(value: Decimal) -> float:
        return float(value.quantize(precision, rounding=ROUND_HALF_UP))

    qs = StockItem.objects.order_by("name", "id")
    if stock_item_id not in (None, ""):
        qs = qs.filter(id=stock_item_id)
    if stock_group_id not in (None, ""):
        qs = qs.filter(stock_group_id=stock_group_id)
    items = list(qs)

    by_item: dict[int, list] = {}
    for m in collect_movements(to_date=to_date, item_ids=[i.id for i in items]):
        by_item.setdefault(m.item_id, []).append(m)

    labels = [b.label for b in EXTENDED_BUCKETS]
    rows = []
    for item in items:
        lots, shortfall = _lots_for(item, by_item.get(item.id, []), to_date)
        if not lots and shortfall <= 0:
            continue
        if shortfall > 0:
            logger.warning(
                "Outward quantity exceeds available lots",
                extra={"item_id": item.id, "shortfall": str(shortfall), "to_date": to_date.isoformat()},
            )

        qty = {label: QTY_ZERO for label in labels}
        value = {label: Decimal("0") for label in labels}
        for lot in lots:
            label = bucket_for((to_date - lot.date).days, EXTENDED_BUCKETS).label
            if basis == BASIS_COST:
                rate = item.standard_purchase_rate
            elif basis == BASIS_VALUE:
                rate = item.standard_sale_rate
            else:
                rate = lot.rate
            qty[label] += lot.quantity
            value[label] += lot.quantity * (rate or 0)

        expired = bool(
            config.consider_expiry
            and item.batch_expiry_date
            and item.batch_expiry_date <= to_date
        )
        rows.append(
            {
                "item": {
                    "id": item.id,
                    "name": item.name,
                    "unit": item.unit,
                    "batchNumber": item.batch_number,
                    "batchExpiryDate": item.batch_expiry_date.isoformat() if item.batch_expiry_date else None,
                    "expired": expired,
                },
                "ageing": [
                    {"label": label, "qty": qty_number(qty[label]), "value": rounded(value[label])}
                    for label in labels
                ],
                "totalQty": qty_number(sum(qty.values(), QTY_ZERO)),
                "totalValue": rounded(sum(value.values(), Decimal("0"))),
                "shortfallQty": qty_number(max(shortfall, QTY_ZERO)),
            }
        )

    return {
        "toDate": to_date.isoformat(),
        "basis": basis,
        "buckets": labels,
        "items": rows,
    }
