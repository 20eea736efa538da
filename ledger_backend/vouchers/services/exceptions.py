# vouchers/services/exceptions.py

"""
VOUCHER SERVICE ERRORS

Raised by the posting engine and order services; views map them to
HTTP responses at a single boundary.
"""

from __future__ import annotations


class VoucherServiceError(Exception):
    """Base exception for all voucher service failures."""


class VoucherValidationError(VoucherServiceError):
    """
    Raised before any write when a voucher request is structurally invalid.
    `fields` maps the failing field (or entry path) to a message.
    """

    def __init__(self, message: str, *, fields: dict | None = None):
        super().__init__(message)
        self.fields = fields or {}


class UnbalancedVoucherError(VoucherValidationError):
    """Raised when debit and credit totals of a balanced voucher type differ."""


class UnknownReferenceError(VoucherServiceError):
    """
    Raised when referenced ledgers/items/godowns/bills do not exist.
    `missing` maps a reference kind to the sorted list of unknown ids.
    """

    def __init__(self, missing: dict[str, list[int]]):
        self.missing = {kind: sorted(ids) for kind, ids in missing.items() if ids}
        detail = ", ".join(
            f"{kind}: {', '.join(str(i) for i in ids)}"
            for kind, ids in sorted(self.missing.items())
        )
        super().__init__(f"Unknown reference ({detail})")


class VoucherPostingError(VoucherServiceError):
    """Raised when the write transaction fails; the transaction is rolled back."""


class VoucherNotFoundError(VoucherServiceError):
    """Raised when a voucher or order id does not exist."""


class OrderStatusError(VoucherServiceError):
    """Raised on an invalid order status or a disallowed transition."""
