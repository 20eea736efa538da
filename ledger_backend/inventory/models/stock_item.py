# inventory/models/stock_item.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Q


class StockGroup(models.Model):
    name = models.CharField(max_length=150, unique=True)

    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class StockItem(models.Model):
    """
    Stock item master.

    STOCK MODEL (IMPORTANT):
    - The item row never stores a running quantity
    - Quantity on hand is derived by replaying posted item lines
      on top of the opening balance
    """

    name = models.CharField(max_length=255, db_index=True)

    stock_group = models.ForeignKey(
        StockGroup,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="items",
    )

    unit = models.CharField(max_length=30, blank=True, default="")

    # Opening position (quantity + valuation)
    opening_balance = models.DecimalField(
        max_digits=14, decimal_places=3, default=Decimal("0")
    )
    opening_rate = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    opening_value = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    hsn_code = models.CharField(max_length=20, blank=True, default="")
    gst_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
    )
    tax_type = models.CharField(max_length=30, blank=True, default="")

    standard_purchase_rate = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    standard_sale_rate = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    enable_batch_tracking = models.BooleanField(default=False)
    allow_negative_stock = models.BooleanField(default=False)

    batch_number = models.CharField(max_length=64, blank=True, default="")
    batch_expiry_date = models.DateField(null=True, blank=True)
    batch_manufacturing_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["stock_group"]),
            models.Index(fields=["hsn_code"]),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_stock_item_name_not_blank",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Stock item name is required")

        if self.standard_purchase_rate is not None and self.standard_purchase_rate < 0:
            raise ValidationError("standard_purchase_rate cannot be negative")
        if self.standard_sale_rate is not None and self.standard_sale_rate < 0:
            raise ValidationError("standard_sale_rate cannot be negative")

        if (
            self.batch_expiry_date
            and self.batch_manufacturing_date
            and self.batch_expiry_date < self.batch_manufacturing_date
        ):
            raise ValidationError("Batch expiry cannot be earlier than manufacturing date")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
