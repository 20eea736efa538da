# inventory/api/urls.py

from django.urls import path

from inventory.api.views.registry import GodownListView, StockItemListView
from inventory.api.views.reports import (
    GodownSummaryView,
    MovementAnalysisView,
    StockAgeingView,
    StockSummaryView,
)
from inventory.api.views.settings import ValuationSettingsView

urlpatterns = [
    path("stock-items", StockItemListView.as_view(), name="stock-items"),
    path("godowns", GodownListView.as_view(), name="godowns"),
    path("stock-summary", StockSummaryView.as_view(), name="stock-summary"),
    path("movement-analysis", MovementAnalysisView.as_view(), name="movement-analysis"),
    path("ageing-analysis", StockAgeingView.as_view(), name="ageing-analysis"),
    path("godown-summary", GodownSummaryView.as_view(), name="godown-summary"),
    path("fifo/settings", ValuationSettingsView.as_view(), name="fifo-settings"),
]
