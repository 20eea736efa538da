# inventory/services/valuation_settings_service.py

"""
Durable FIFO valuation settings.

Updates are partial: only the fields supplied change. The singleton row
is locked for the duration of the update.
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction

from inventory.models import ValuationSettings
from inventory.services.exceptions import InventoryServiceError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "enable_fifo_for_all_items",
    "calculation_method",
    "rounding_precision",
    "treat_zero_stock_as",
    "consider_expiry",
    "auto_adjust_negative_stock",
    "track_batch_wise_fifo",
    "enable_fifo_categories",
    "enable_fifo_items",
)


@transaction.atomic
def update_valuation_settings(changes: dict) -> ValuationSettings:
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise InventoryServiceError(f"Unknown settings: {', '.join(sorted(unknown))}")

    ValuationSettings.load()
    current = ValuationSettings.objects.select_for_update().get(pk=ValuationSettings.SINGLETON_ID)

    for name, value in changes.items():
        setattr(current, name, value)

    try:
        current.save()
    except DjangoValidationError as exc:
        raise InventoryServiceError("; ".join(exc.messages)) from exc

    logger.info(
        "Valuation settings updated",
        extra={"fields": sorted(changes), "calculation_method": current.calculation_method},
    )
    return current
