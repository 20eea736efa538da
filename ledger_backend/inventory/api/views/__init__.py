# inventory/api/views/__init__.py

from inventory.api.views.registry import GodownListView, StockItemListView
from inventory.api.views.reports import (
    GodownSummaryView,
    MovementAnalysisView,
    StockAgeingView,
    StockSummaryView,
)
from inventory.api.views.settings import ValuationSettingsView

__all__ = [
    "StockItemListView",
    "GodownListView",
    "StockSummaryView",
    "MovementAnalysisView",
    "StockAgeingView",
    "GodownSummaryView",
    "ValuationSettingsView",
]
