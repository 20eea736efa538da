# vouchers/api/views/__init__.py

from vouchers.api.views.orders import PurchaseOrderStatusView, SalesOrderStatusView
from vouchers.api.views.posting import (
    CreditNoteVoucherView,
    DebitNoteVoucherView,
    DeliveryItemView,
    GenericVoucherView,
    PurchaseOrderView,
    PurchaseVoucherView,
    SalesOrderView,
    SalesVoucherView,
    StockJournalView,
)
from vouchers.api.views.queries import DayBookView, VoucherDetailView

__all__ = [
    "GenericVoucherView",
    "SalesVoucherView",
    "PurchaseVoucherView",
    "CreditNoteVoucherView",
    "DebitNoteVoucherView",
    "StockJournalView",
    "DeliveryItemView",
    "SalesOrderView",
    "PurchaseOrderView",
    "SalesOrderStatusView",
    "PurchaseOrderStatusView",
    "VoucherDetailView",
    "DayBookView",
]
