# vouchers/models/headers.py

"""
VOUCHER HEADER TABLES

One table per header shape:
- Voucher       generic double-entry header (payment, receipt, contra, journal,
                accounting-mode sales/purchase)
- TradeInvoice  item-mode sales/purchase invoice with tax totals
- NoteVoucher   credit/debit notes
- StockJournal  stock transfers between items/godowns
- DeliveryNote  outward delivery of goods
- TradeOrder    sales/purchase orders (status is the only mutable column)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from accounting.models.ledger import Ledger
from vouchers.models.base import VoucherHeaderBase


def _money_field():
    return models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))


class Voucher(VoucherHeaderBase):
    due_date = models.DateField(null=True, blank=True)
    supplier_invoice_date = models.DateField(null=True, blank=True)

    party = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta(VoucherHeaderBase.Meta):
        verbose_name = "Voucher"
        verbose_name_plural = "Vouchers"
        indexes = [
            models.Index(fields=["voucher_type", "date"]),
        ]


class TradeInvoice(VoucherHeaderBase):
    """
    Item-mode sales/purchase invoice.

    Ledger lines live on the linked generic voucher so every ledger-based
    report sees them; this table keeps the item and tax view.
    """

    ledger_voucher = models.OneToOneField(
        Voucher,
        on_delete=models.PROTECT,
        related_name="trade_invoice",
    )
    party = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        related_name="+",
    )
    posting_ledger = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
        help_text="Sales or purchase ledger the invoice is booked against",
    )

    due_date = models.DateField(null=True, blank=True)
    supplier_invoice_date = models.DateField(null=True, blank=True)

    dispatch_doc_no = models.CharField(max_length=64, blank=True, default="")
    dispatch_through = models.CharField(max_length=120, blank=True, default="")
    destination = models.CharField(max_length=120, blank=True, default="")

    subtotal = _money_field()
    cgst_total = _money_field()
    sgst_total = _money_field()
    igst_total = _money_field()
    discount_total = _money_field()
    total = _money_field()

    class Meta(VoucherHeaderBase.Meta):
        verbose_name = "Trade Invoice"
        verbose_name_plural = "Trade Invoices"
        indexes = [
            models.Index(fields=["voucher_type", "date"]),
        ]

    def clean(self):
        super().clean()
        if self.voucher_type not in ("sales", "purchase"):
            raise ValidationError("Trade invoices are either sales or purchase")


class NoteVoucher(VoucherHeaderBase):
    party = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    posting_ledger = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )
    employee_id = models.CharField(max_length=64, blank=True, default="")

    class Meta(VoucherHeaderBase.Meta):
        verbose_name = "Credit/Debit Note"
        verbose_name_plural = "Credit/Debit Notes"

    def clean(self):
        super().clean()
        if self.voucher_type not in ("credit-note", "debit-note"):
            raise ValidationError("Notes are either credit-note or debit-note")


class StockJournal(VoucherHeaderBase):
    class Meta(VoucherHeaderBase.Meta):
        verbose_name = "Stock Journal"
        verbose_name_plural = "Stock Journals"


class DeliveryNote(VoucherHeaderBase):
    party = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta(VoucherHeaderBase.Meta):
        verbose_name = "Delivery Note"
        verbose_name_plural = "Delivery Notes"


class TradeOrder(VoucherHeaderBase):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        PARTIALLY_RECEIVED = "partially_received", "Partially Received"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    TERMINAL_STATUSES = frozenset({"completed", "cancelled"})

    MUTABLE_FIELDS = frozenset({"status", "updated_at"})

    party = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        related_name="+",
    )
    posting_ledger = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )

    expected_delivery_date = models.DateField(null=True, blank=True)
    terms_of_delivery = models.CharField(max_length=255, blank=True, default="")
    remarks = models.TextField(blank=True, default="")

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta(VoucherHeaderBase.Meta):
        verbose_name = "Trade Order"
        verbose_name_plural = "Trade Orders"

    def clean(self):
        super().clean()
        if self.voucher_type not in ("sales-order", "purchase-order"):
            raise ValidationError("Orders are either sales-order or purchase-order")
