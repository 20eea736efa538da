# accounting/models/ledger.py

"""
======================================================
PATH: accounting/models/ledger.py
======================================================
LEDGER (ACCOUNT MASTER)

Guarantees:
- Opening balance is positive on the balance_type side
- Ledgers are referenced (never mutated) by posted voucher lines
- Master data is maintained through the admin, not the posting engine
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from accounting.models.ledger_group import LedgerGroup


class Ledger(models.Model):
    DEBIT = "debit"
    CREDIT = "credit"

    BALANCE_TYPES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    name = models.CharField(max_length=150)

    group = models.ForeignKey(
        LedgerGroup,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="ledgers",
    )

    opening_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    balance_type = models.CharField(
        max_length=6,
        choices=BALANCE_TYPES,
        default=DEBIT,
    )

    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    gst_number = models.CharField(max_length=20, blank=True, default="")
    pan_number = models.CharField(max_length=20, blank=True, default="")

    # Party-specific override of the default credit period
    credit_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        verbose_name = "Ledger"
        verbose_name_plural = "Ledgers"
        indexes = [
            models.Index(fields=["name"]),
            models.Index(fields=["group"]),
            models.Index(fields=["is_active"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_ledger_name_not_blank",
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def signed_opening(self) -> Decimal:
        """
        Opening balance on the debit-positive axis.
        """
        amount = self.opening_balance or Decimal("0.00")
        return amount if self.balance_type == self.DEBIT else -amount

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Ledger name is required")

        if self.balance_type not in (self.DEBIT, self.CREDIT):
            raise ValidationError("Invalid balance_type")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
