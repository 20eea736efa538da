# vouchers/api/urls.py

from django.urls import path

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

urlpatterns = [
    # Posting (paths kept as existing clients call them)
    path("vouchers", GenericVoucherView.as_view(), name="vouchers"),
    path("sale-vouchers/vouchers", SalesVoucherView.as_view(), name="sale-vouchers"),
    path("purchase-vouchers", PurchaseVoucherView.as_view(), name="purchase-vouchers"),
    path("CreditNotevoucher", CreditNoteVoucherView.as_view(), name="credit-note-voucher"),
    path("DebitNoteVoucher", DebitNoteVoucherView.as_view(), name="debit-note-voucher"),
    path("StockJournal", StockJournalView.as_view(), name="stock-journal"),
    path("DeliveryItem", DeliveryItemView.as_view(), name="delivery-item"),
    path("sales-orders", SalesOrderView.as_view(), name="sales-orders"),
    path("purchase-orders", PurchaseOrderView.as_view(), name="purchase-orders"),
    # Orders
    path(
        "sales-orders/<int:order_id>/status",
        SalesOrderStatusView.as_view(),
        name="sales-order-status",
    ),
    path(
        "purchase-orders/<int:order_id>/status",
        PurchaseOrderStatusView.as_view(),
        name="purchase-order-status",
    ),
    # Read side
    path("vouchers/<int:voucher_id>", VoucherDetailView.as_view(), name="voucher-detail"),
    path("daybook", DayBookView.as_view(), name="daybook"),
]
