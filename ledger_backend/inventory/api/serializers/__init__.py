# inventory/api/serializers/__init__.py

from inventory.api.serializers.registry import GodownSerializer, StockItemSerializer
from inventory.api.serializers.reports import (
    GodownSummaryQuerySerializer,
    MovementQuerySerializer,
    StockAgeingQuerySerializer,
    StockSummaryQuerySerializer,
)
from inventory.api.serializers.settings import ValuationSettingsSerializer

__all__ = [
    "StockItemSerializer",
    "GodownSerializer",
    "StockSummaryQuerySerializer",
    "MovementQuerySerializer",
    "StockAgeingQuerySerializer",
    "GodownSummaryQuerySerializer",
    "ValuationSettingsSerializer",
]
