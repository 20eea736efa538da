# inventory/services/exceptions.py

"""
INVENTORY SERVICE ERRORS
"""


class InventoryServiceError(Exception):
    """Base exception for inventory service failures."""


class StockReportParameterError(InventoryServiceError):
    """Raised when a stock report parameter is missing or malformed."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field
