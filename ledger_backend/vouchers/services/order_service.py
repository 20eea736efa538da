# vouchers/services/order_service.py

"""
ORDER STATUS SERVICE

Orders are the one voucher family with a mutable column (status).
Everything else on an order stays immutable after posting.
"""

from __future__ import annotations

import logging

from django.db import transaction

from vouchers.models import TradeOrder
from vouchers.services.exceptions import OrderStatusError, VoucherNotFoundError

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "pending": {"confirmed", "partially_received", "completed", "cancelled"},
    "confirmed": {"partially_received", "completed", "cancelled"},
    "partially_received": {"partially_received", "completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

VALID_STATUSES = [value for value, _ in TradeOrder.Status.choices]


@transaction.atomic
def change_order_status(*, order_type: str, order_id, status: str) -> TradeOrder:
    new_status = str(status or "").strip().lower()
    if new_status not in VALID_STATUSES:
        raise OrderStatusError(
            f"Invalid status. Must be one of: {', '.join(VALID_STATUSES)}"
        )

    try:
        order = TradeOrder.objects.select_for_update().get(
            pk=int(order_id), voucher_type=order_type
        )
    except (TradeOrder.DoesNotExist, TypeError, ValueError) as exc:
        raise VoucherNotFoundError("Order not found") from exc

    current = str(order.status)
    if new_status == current and current != "partially_received":
        return order

    if new_status not in ALLOWED_TRANSITIONS.get(current, set()):
        raise OrderStatusError(
            f"Cannot change order status from {current} to {new_status}"
        )

    order.status = new_status
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order status changed",
        extra={"order_id": order.pk, "order_type": order_type, "from": current, "to": new_status},
    )
    return order
