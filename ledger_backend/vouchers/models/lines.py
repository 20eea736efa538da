# vouchers/models/lines.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from vouchers.models.base import (
    CREDIT,
    DEBIT,
    ENTRY_TYPES,
    ItemLineBase,
    LedgerLineBase,
    PostedRecord,
)
from vouchers.models.headers import (
    DeliveryNote,
    NoteVoucher,
    StockJournal,
    TradeInvoice,
    TradeOrder,
    Voucher,
)


def _rate_field():
    return models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))


class VoucherEntry(LedgerLineBase):
    """
    Generic double-entry line on a Voucher.
    """

    voucher = models.ForeignKey(
        Voucher,
        on_delete=models.PROTECT,
        related_name="entries",
    )

    bank_name = models.CharField(max_length=120, blank=True, default="")
    cheque_number = models.CharField(max_length=64, blank=True, default="")
    cost_centre_id = models.PositiveIntegerField(null=True, blank=True)

    class Meta(LedgerLineBase.Meta):
        verbose_name = "Voucher Entry"
        verbose_name_plural = "Voucher Entries"
        indexes = [
            models.Index(fields=["voucher"]),
            models.Index(fields=["ledger", "entry_type"]),
        ]


class TradeInvoiceItem(ItemLineBase):
    voucher = models.ForeignKey(
        TradeInvoice,
        on_delete=models.PROTECT,
        related_name="items",
    )

    cgst_rate = _rate_field()
    sgst_rate = _rate_field()
    igst_rate = _rate_field()

    class Meta(ItemLineBase.Meta):
        indexes = [models.Index(fields=["item"])]


class NoteItem(ItemLineBase):
    voucher = models.ForeignKey(
        NoteVoucher,
        on_delete=models.PROTECT,
        related_name="items",
    )

    hsn_code = models.CharField(max_length=20, blank=True, default="")
    unit = models.CharField(max_length=30, blank=True, default="")

    class Meta(ItemLineBase.Meta):
        indexes = [models.Index(fields=["item"])]


class NoteLedgerEntry(LedgerLineBase):
    voucher = models.ForeignKey(
        NoteVoucher,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    rate = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)


class StockJournalEntry(ItemLineBase):
    """
    Debit lines are the destination (inward), credit lines the source (outward).
    """

    voucher = models.ForeignKey(
        StockJournal,
        on_delete=models.PROTECT,
        related_name="entries",
    )

    entry_type = models.CharField(max_length=6, choices=ENTRY_TYPES)
    batch_number = models.CharField(max_length=64, blank=True, default="")

    class Meta(ItemLineBase.Meta):
        indexes = [models.Index(fields=["item"])]

    def clean(self):
        super().clean()
        if self.entry_type not in (DEBIT, CREDIT):
            raise ValidationError("Invalid entry_type")


class DeliveryEntry(ItemLineBase):
    voucher = models.ForeignKey(
        DeliveryNote,
        on_delete=models.PROTECT,
        related_name="entries",
    )

    class Meta(ItemLineBase.Meta):
        indexes = [models.Index(fields=["item"])]


class TradeOrderItem(ItemLineBase):
    voucher = models.ForeignKey(
        TradeOrder,
        on_delete=models.PROTECT,
        related_name="items",
    )

    hsn_code = models.CharField(max_length=20, blank=True, default="")


class BillAllocation(PostedRecord):
    """
    Explicit mapping of a settlement voucher (receipt/payment) to a bill voucher.
    """

    settlement = models.ForeignKey(
        Voucher,
        on_delete=models.PROTECT,
        related_name="allocations",
    )
    bill = models.ForeignKey(
        Voucher,
        on_delete=models.PROTECT,
        related_name="settlement_allocations",
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["bill"]),
            models.Index(fields=["settlement"]),
        ]

    def __str__(self):
        return f"{self.settlement_id} → {self.bill_id}: {self.amount}"

    def clean(self):
        if self.amount is None or self.amount <= 0:
            raise ValidationError("Allocation amount must be > 0")
        if self.settlement_id and self.settlement_id == self.bill_id:
            raise ValidationError("A voucher cannot settle itself")
