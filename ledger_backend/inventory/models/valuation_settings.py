# inventory/models/valuation_settings.py

"""
PATH: inventory/models/valuation_settings.py

FIFO VALUATION SETTINGS (DURABLE)

A single database row holds the valuation configuration so every worker
process reads the same settings on each request.
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class ValuationSettings(models.Model):
    SINGLETON_ID = 1

    class CalculationMethod(models.TextChoices):
        STRICT_FIFO = "strict_fifo", "Strict FIFO"
        WEIGHTED_FIFO = "weighted_fifo", "Weighted FIFO"
        MOVING_AVERAGE = "moving_average", "Moving Average"

    class ZeroStockPolicy(models.TextChoices):
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        ALLOW = "allow", "Allow"

    enable_fifo_for_all_items = models.BooleanField(default=False)
    calculation_method = models.CharField(
        max_length=20,
        choices=CalculationMethod.choices,
        default=CalculationMethod.STRICT_FIFO,
    )
    rounding_precision = models.PositiveSmallIntegerField(
        default=2,
        validators=[MinValueValidator(0), MaxValueValidator(6)],
    )
    treat_zero_stock_as = models.CharField(
        max_length=10,
        choices=ZeroStockPolicy.choices,
        default=ZeroStockPolicy.WARNING,
    )
    consider_expiry = models.BooleanField(default=False)
    auto_adjust_negative_stock = models.BooleanField(default=False)
    track_batch_wise_fifo = models.BooleanField(default=False)

    enable_fifo_categories = models.JSONField(default=list, blank=True)
    enable_fifo_items = models.JSONField(default=list, blank=True)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Valuation Settings"
        verbose_name_plural = "Valuation Settings"

    def __str__(self):
        return f"Valuation settings ({self.calculation_method})"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_ID
        self.full_clean()
        return super().save(*args, **kwargs)

    @classmethod
    def load(cls) -> "ValuationSettings":
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_ID)
        return obj

    @classmethod
    def current(cls) -> "ValuationSettings":
        """Stored row, or unsaved defaults when none exists yet (read paths)."""
        return cls.objects.filter(pk=cls.SINGLETON_ID).first() or cls(pk=cls.SINGLETON_ID)
