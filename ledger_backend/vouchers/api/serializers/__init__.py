# vouchers/api/serializers/__init__.py

from vouchers.api.serializers.payload import VoucherPayload, parse_voucher_payload
from vouchers.api.serializers.queries import DayBookQuerySerializer, OrderStatusSerializer

__all__ = [
    "VoucherPayload",
    "parse_voucher_payload",
    "DayBookQuerySerializer",
    "OrderStatusSerializer",
]
