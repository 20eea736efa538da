# accounting/services/exceptions.py

"""
ACCOUNTING SERVICE ERRORS

Centralized domain errors for registry lookups and ledger-side reports.
"""


class AccountingServiceError(Exception):
    """Base exception for all accounting service failures."""


class LedgerNotFoundError(AccountingServiceError):
    """Raised when a report is requested for a ledger that does not exist."""


class ReportParameterError(AccountingServiceError):
    """Raised when a report parameter is missing or malformed."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class UnknownPartyRoleError(AccountingServiceError):
    """Raised when an outstanding report is asked for an unsupported party role."""
