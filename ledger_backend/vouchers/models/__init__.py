# vouchers/models/__init__.py

"""
VOUCHER MODELS PACKAGE EXPORTS

Keep this file imports-only.
"""

from vouchers.models.base import CREDIT, DEBIT
from vouchers.models.headers import (
    DeliveryNote,
    NoteVoucher,
    StockJournal,
    TradeInvoice,
    TradeOrder,
    Voucher,
)
from vouchers.models.lines import (
    BillAllocation,
    DeliveryEntry,
    NoteItem,
    NoteLedgerEntry,
    StockJournalEntry,
    TradeInvoiceItem,
    TradeOrderItem,
    VoucherEntry,
)

__all__ = [
    "DEBIT",
    "CREDIT",
    "Voucher",
    "TradeInvoice",
    "NoteVoucher",
    "StockJournal",
    "DeliveryNote",
    "TradeOrder",
    "VoucherEntry",
    "TradeInvoiceItem",
    "NoteItem",
    "NoteLedgerEntry",
    "StockJournalEntry",
    "DeliveryEntry",
    "TradeOrderItem",
    "BillAllocation",
]
