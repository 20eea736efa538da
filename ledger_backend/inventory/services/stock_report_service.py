# inventory/services/stock_report_service.py

"""
======================================================
PATH: inventory/services/stock_report_service.py
======================================================
STOCK SUMMARY / MOVEMENT ANALYSIS / GODOWN SUMMARY

Quantities:
- opening  = item opening balance + net movements before from_date
             (with a godown filter: that godown's allocated quantity
             instead of the item-wide opening balance)
- closing  = opening + inward - outward

Valuation basis (closing value and profit):
- Quantity -> no valuation (value 0)
- Cost     -> standard purchase rate
- Value    -> standard sale rate

READ-ONLY. Decimal internally, floats only at the JSON edge.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from accounting.services.money import ZERO, to_major_number
from inventory.models import GodownAllocation, StockItem
from inventory.services.exceptions import StockReportParameterError
from inventory.services.movements import (
    INWARD,
    OUTWARD,
    QTY_ZERO,
    collect_movements,
    parse_direction,
    qty_number,
)

BASIS_QUANTITY = "Quantity"
BASIS_VALUE = "Value"
BASIS_COST = "Cost"
BASES = (BASIS_QUANTITY, BASIS_VALUE, BASIS_COST)


def parse_basis(value, *, default: str = BASIS_QUANTITY) -> str:
    raw = str(value or "").strip()
    if not raw:
        return default
    for basis in BASES:
        if basis.lower() == raw.lower():
            return basis
    raise StockReportParameterError(
        f"Invalid basis '{value}'. Expected one of: {', '.join(BASES)}",
        field="basis",
    )


def valuation_rate(item: StockItem, basis: str) -> Decimal:
    if basis == BASIS_COST:
        return item.standard_purchase_rate or ZERO
    if basis == BASIS_VALUE:
        return item.standard_sale_rate or ZERO
    return ZERO


def _check_window(from_date: date | None, to_date: date | None) -> None:
    if from_date and to_date and from_date > to_date:
        raise StockReportParameterError("fromDate must be on or before toDate", field="fromDate")


def _items(*, stock_item_id=None, stock_group_id=None):
    qs = StockItem.objects.select_related("stock_group").order_by("name", "id")
    if stock_item_id not in (None, ""):
        qs = qs.filter(id=stock_item_id)
    if stock_group_id not in (None, ""):
        qs = qs.filter(stock_group_id=stock_group_id)
    return list(qs)


# =====================================================
# STOCK SUMMARY
# =====================================================

def build_stock_summary(
    *,
    from_date: date | None = None,
    to_date: date | None = None,
    stock_group_id=None,
    stock_item_id=None,
    godown_id=None,
    basis: str = BASIS_QUANTITY,
    show_profit: bool = False,
) -> dict:
    _check_window(from_date, to_date)
    basis = parse_basis(basis)

    items = _items(stock_item_id=stock_item_id, stock_group_id=stock_group_id)
    movements = collect_movements(
        to_date=to_date,
        item_ids=[i.id for i in items],
        godown_id=godown_id,
    )

    base_opening = {item.id: item.opening_balance or QTY_ZERO for item in items}
    if godown_id not in (None, ""):
        allocated = dict(
            GodownAllocation.objects.filter(
                godown_id=godown_id, stock_item_id__in=list(base_opening)
            ).values_list("stock_item_id", "quantity")
        )
        base_opening = {item_id: allocated.get(item_id, QTY_ZERO) for item_id in base_opening}

    carried: dict[int, Decimal] = {}
    inward: dict[int, Decimal] = {}
    outward: dict[int, Decimal] = {}
    for m in movements:
        if from_date and m.date < from_date:
            carried[m.item_id] = carried.get(m.item_id, QTY_ZERO) + m.signed_quantity
        elif m.direction == INWARD:
            inward[m.item_id] = inward.get(m.item_id, QTY_ZERO) + m.quantity
        else:
            outward[m.item_id] = outward.get(m.item_id, QTY_ZERO) + m.quantity

    rows = []
    total_value = ZERO
    total_profit = ZERO
    for item in items:
        opening = base_opening[item.id] + carried.get(item.id, QTY_ZERO)
        qty_in = inward.get(item.id, QTY_ZERO)
        qty_out = outward.get(item.id, QTY_ZERO)
        closing = opening + qty_in - qty_out

        rate = valuation_rate(item, basis)
        closing_value = closing * rate
        total_value += closing_value

        row = {
            "itemId": item.id,
            "name": item.name,
            "unit": item.unit,
            "stockGroupId": item.stock_group_id,
            "stockGroupName": item.stock_group.name if item.stock_group_id else "",
            "openingQty": qty_number(opening),
            "inwardQty": qty_number(qty_in),
            "outwardQty": qty_number(qty_out),
            "closingQty": qty_number(closing),
            "rate": to_major_number(rate),
            "closingValue": to_major_number(closing_value),
        }
        if show_profit:
            margin = (item.standard_sale_rate or ZERO) - (item.standard_purchase_rate or ZERO)
            profit = margin * qty_out
            total_profit += profit
            row["profit"] = to_major_number(profit)
        rows.append(row)

    totals = {"closingValue": to_major_number(total_value)}
    if show_profit:
        totals["profit"] = to_major_number(total_profit)

    return {
        "fromDate": from_date.isoformat() if from_date else None,
        "toDate": to_date.isoformat() if to_date else None,
        "basis": basis,
        "showProfit": bool(show_profit),
        "items": rows,
        "totals": totals,
    }


# =====================================================
# MOVEMENT ANALYSIS
# =====================================================

def build_movement_analysis(
    *,
    from_date: date | None,
    to_date: date | None,
    stock_item_id=None,
    direction=None,
) -> dict:
    if from_date is None or to_date is None:
        raise StockReportParameterError("fromDate and toDate are required", field="fromDate")
    _check_window(from_date, to_date)
    wanted = parse_direction(direction)

    item_ids = None if stock_item_id in (None, "") else [stock_item_id]
    movements = collect_movements(
        from_date=from_date,
        to_date=to_date,
        item_ids=item_ids,
        direction=wanted,
    )

    qty = {INWARD: QTY_ZERO, OUTWARD: QTY_ZERO}
    value = {INWARD: ZERO, OUTWARD: ZERO}
    for m in movements:
        qty[m.direction] += m.quantity
        value[m.direction] += m.amount

    return {
        "fromDate": from_date.isoformat(),
        "toDate": to_date.isoformat(),
        "direction": wanted,
        "movements": [m.as_dict() for m in movements],
        "count": len(movements),
        "totals": {
            "inwardQty": qty_number(qty[INWARD]),
            "outwardQty": qty_number(qty[OUTWARD]),
            "netQty": qty_number(qty[INWARD] - qty[OUTWARD]),
            "inwardValue": to_major_number(value[INWARD]),
            "outwardValue": to_major_number(value[OUTWARD]),
        },
    }


# =====================================================
# GODOWN SUMMARY
# =====================================================

def build_godown_summary(*, godown_id=None) -> dict:
    """
    Allocated quantities per godown, valued at standard purchase rate.
    """
    qs = GodownAllocation.objects.select_related("godown", "stock_item").order_by(
        "godown__name", "godown_id", "stock_item__name", "stock_item_id"
    )
    if godown_id not in (None, ""):
        qs = qs.filter(godown_id=godown_id)

    godowns: dict[int, dict] = {}
    grand_total = ZERO
    for alloc in qs:
        item = alloc.stock_item
        rate = item.standard_purchase_rate or ZERO
        value = alloc.quantity * rate
        grand_total += value

        entry = godowns.setdefault(
            alloc.godown_id,
            {
                "godownId": alloc.godown_id,
                "godownName": alloc.godown.name,
                "items": [],
                "_qty": QTY_ZERO,
                "_value": ZERO,
            },
        )
        entry["items"].append(
            {
                "itemId": item.id,
                "itemName": item.name,
                "unit": item.unit,
                "quantity": qty_number(alloc.quantity),
                "rate": to_major_number(rate),
                "value": to_major_number(value),
            }
        )
        entry["_qty"] += alloc.quantity
        entry["_value"] += value

    result = []
    for entry in godowns.values():
        entry["totalQuantity"] = qty_number(entry.pop("_qty"))
        entry["totalValue"] = to_major_number(entry.pop("_value"))
        result.append(entry)

    return {"godowns": result, "totalValue": to_major_number(grand_total)}
