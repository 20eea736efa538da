# vouchers/models/base.py

"""
======================================================
PATH: vouchers/models/base.py
======================================================
POSTED RECORD BASES

Guarantees:
- Headers and lines are immutable once written (no updates, no deletes)
- Only columns listed in MUTABLE_FIELDS may change after creation,
  and only through save(update_fields=[...])
- Line amounts are positive; direction is carried by entry_type
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from accounting.models.ledger import Ledger
from inventory.models.godown import Godown
from inventory.models.stock_item import StockItem


DEBIT = "debit"
CREDIT = "credit"

ENTRY_TYPES = [
    (DEBIT, "Debit"),
    (CREDIT, "Credit"),
]


class PostedRecord(models.Model):
    MUTABLE_FIELDS: frozenset[str] = frozenset()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            update_fields = kwargs.get("update_fields")
            if not update_fields or not set(update_fields) <= self.MUTABLE_FIELDS:
                raise ValidationError(
                    f"{type(self).__name__} records are immutable and cannot be modified"
                )

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            f"{type(self).__name__} records are immutable and cannot be deleted"
        )


class VoucherHeaderBase(PostedRecord):
    """
    Columns shared by every voucher header table.
    """

    voucher_type = models.CharField(max_length=30, db_index=True)
    mode = models.CharField(max_length=30, blank=True, default="")

    # Human-assigned, not guaranteed unique
    number = models.CharField(max_length=64, blank=True, default="")
    date = models.DateField(db_index=True)
    narration = models.TextField(blank=True, default="")
    reference_no = models.CharField(max_length=64, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True
        ordering = ["date", "id"]

    def __str__(self):
        return f"{self.voucher_type} {self.number or self.pk} ({self.date})"

    def clean(self):
        self.voucher_type = (self.voucher_type or "").strip().lower()
        if not self.voucher_type:
            raise ValidationError("voucher_type is required")


class LedgerLineBase(PostedRecord):
    ledger = models.ForeignKey(
        Ledger,
        on_delete=models.PROTECT,
        related_name="+",
    )

    entry_type = models.CharField(max_length=6, choices=ENTRY_TYPES)

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Positive monetary value",
    )

    narration = models.TextField(blank=True, default="")

    class Meta:
        abstract = True
        ordering = ["id"]

    def __str__(self):
        return f"{self.entry_type} {self.amount} → {self.ledger_id}"

    def clean(self):
        if self.entry_type not in (DEBIT, CREDIT):
            raise ValidationError("Invalid entry_type")

        if self.amount is None or self.amount <= 0:
            raise ValidationError("Line amount must be > 0")


class ItemLineBase(PostedRecord):
    item = models.ForeignKey(
        StockItem,
        on_delete=models.PROTECT,
        related_name="+",
    )

    godown = models.ForeignKey(
        Godown,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="+",
    )

    quantity = models.DecimalField(max_digits=14, decimal_places=3)
    rate = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    discount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    class Meta:
        abstract = True
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.item_id} @ {self.rate}"

    def clean(self):
        if self.quantity is None or self.quantity <= 0:
            raise ValidationError("Line quantity must be > 0")

        if self.rate is None or self.rate < 0:
            raise ValidationError("Line rate cannot be negative")

        if self.discount is None or self.discount < 0:
            raise ValidationError("Line discount cannot be negative")

        if self.amount is None or self.amount < 0:
            raise ValidationError("Line amount cannot be negative")
