"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .godown import Godown, GodownAllocation
from .stock_item import StockGroup, StockItem
from .valuation_settings import ValuationSettings

__all__ = [
    "StockGroup",
    "StockItem",
    "Godown",
    "GodownAllocation",
    "ValuationSettings",
]
