# inventory/models/godown.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from inventory.models.stock_item import StockItem


class Godown(models.Model):
    name = models.CharField(max_length=150, unique=True)
    address = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class GodownAllocation(models.Model):
    """
    Quantity of a stock item held at a godown (master-data allocation).
    """

    stock_item = models.ForeignKey(
        StockItem,
        on_delete=models.CASCADE,
        related_name="godown_allocations",
    )
    godown = models.ForeignKey(
        Godown,
        on_delete=models.PROTECT,
        related_name="allocations",
    )
    quantity = models.DecimalField(
        max_digits=14, decimal_places=3, default=Decimal("0")
    )

    class Meta:
        ordering = ["godown__name", "stock_item__name", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["stock_item", "godown"],
                name="uniq_godown_allocation_item_godown",
            ),
        ]

    def __str__(self):
        return f"{self.stock_item} @ {self.godown}: {self.quantity}"

    def clean(self):
        if self.quantity is None or self.quantity < 0:
            raise ValidationError("Allocated quantity cannot be negative")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
