# vouchers/services/kinds.py

"""
======================================================
PATH: vouchers/services/kinds.py
======================================================
VOUCHER-TYPE DESCRIPTORS

Every postable (type, mode) pair is described by one VoucherKind:
- which header table receives the header row
- which line tables receive item lines and ledger lines
- which header/line fields are required
- whether debit == credit is enforced over the ledger lines

The posting engine is generic over this table; adding a voucher type is
a new descriptor, not a new handler.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

from vouchers.models import (
    CREDIT,
    DEBIT,
    DeliveryEntry,
    DeliveryNote,
    NoteItem,
    NoteLedgerEntry,
    NoteVoucher,
    StockJournal,
    StockJournalEntry,
    TradeInvoice,
    TradeInvoiceItem,
    TradeOrder,
    TradeOrderItem,
    Voucher,
    VoucherEntry,
)
from vouchers.services.exceptions import VoucherValidationError

# Modes
ACCOUNTING = "accounting"
ITEM_INVOICE = "item-invoice"
ACCOUNTING_INVOICE = "accounting-invoice"
AS_VOUCHER = "as-voucher"

GENERIC_TYPES = ("payment", "receipt", "contra", "journal")
SETTLEMENT_TYPES = ("payment", "receipt")

LEDGER_LINE_FIELDS = ("ledger_id", "entry_type", "amount")
ITEM_LINE_FIELDS = ("item_id", "quantity")


@dataclass(frozen=True)
class VoucherKind:
    voucher_type: str
    header_model: type
    mode: str = ""
    item_line_model: type | None = None
    ledger_line_model: type | None = None
    required_header_fields: tuple[str, ...] = ("date",)
    required_item_fields: tuple[str, ...] = ITEM_LINE_FIELDS
    required_ledger_fields: tuple[str, ...] = LEDGER_LINE_FIELDS
    # entry_type applied to ledger lines that omit it
    default_entry_type: str | None = None
    enforce_balance: bool = False
    allows_bill_allocations: bool = False

    @property
    def key(self) -> str:
        return f"{self.voucher_type}:{self.mode}" if self.mode else self.voucher_type

    @property
    def label(self) -> str:
        return self.voucher_type.replace("-", " ").title()

    @property
    def balance_enforced(self) -> bool:
        exempt = {
            str(t).strip().lower()
            for t in getattr(settings, "VOUCHER_BALANCE_EXEMPT_TYPES", ())
        }
        return self.enforce_balance and self.voucher_type not in exempt

    @property
    def links_ledger_voucher(self) -> bool:
        """Ledger lines hang on a generic Voucher row linked to the header."""
        return self.header_model is not Voucher and self.ledger_line_model is VoucherEntry


def _build_registry() -> dict[tuple[str, str], VoucherKind]:
    kinds: list[VoucherKind] = []

    for voucher_type in GENERIC_TYPES:
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                header_model=Voucher,
                ledger_line_model=VoucherEntry,
                enforce_balance=True,
                allows_bill_allocations=voucher_type in SETTLEMENT_TYPES,
            )
        )

    for voucher_type in ("sales", "purchase"):
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                mode=ACCOUNTING,
                header_model=Voucher,
                ledger_line_model=VoucherEntry,
                enforce_balance=True,
            )
        )
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                mode=ITEM_INVOICE,
                header_model=TradeInvoice,
                item_line_model=TradeInvoiceItem,
                ledger_line_model=VoucherEntry,
                required_header_fields=("date", "party_id"),
            )
        )

    # Credit note: sales return (goods come back, sales side is debited).
    # Debit note: purchase return (goods go out, purchase side is credited).
    for voucher_type, account_side in (("credit-note", DEBIT), ("debit-note", CREDIT)):
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                mode=ITEM_INVOICE,
                header_model=NoteVoucher,
                item_line_model=NoteItem,
                ledger_line_model=NoteLedgerEntry,
                required_header_fields=("date", "party_id"),
                default_entry_type=account_side,
            )
        )
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                mode=ACCOUNTING_INVOICE,
                header_model=NoteVoucher,
                ledger_line_model=NoteLedgerEntry,
                required_header_fields=("date", "party_id"),
                required_ledger_fields=("ledger_id", "amount"),
                default_entry_type=account_side,
            )
        )
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                mode=AS_VOUCHER,
                header_model=NoteVoucher,
                ledger_line_model=NoteLedgerEntry,
                enforce_balance=True,
            )
        )

    kinds.append(
        VoucherKind(
            voucher_type="stock-journal",
            header_model=StockJournal,
            item_line_model=StockJournalEntry,
            required_item_fields=("item_id", "entry_type", "quantity"),
        )
    )
    kinds.append(
        VoucherKind(
            voucher_type="delivery",
            header_model=DeliveryNote,
            item_line_model=DeliveryEntry,
        )
    )

    for voucher_type in ("sales-order", "purchase-order"):
        kinds.append(
            VoucherKind(
                voucher_type=voucher_type,
                header_model=TradeOrder,
                item_line_model=TradeOrderItem,
                required_header_fields=("date", "party_id"),
            )
        )

    return {(k.voucher_type, k.mode): k for k in kinds}


VOUCHER_KINDS: dict[tuple[str, str], VoucherKind] = _build_registry()

# Spellings seen in client payloads
TYPE_ALIASES = {
    "sale": "sales",
    "creditnote": "credit-note",
    "credit_note": "credit-note",
    "debitnote": "debit-note",
    "debit_note": "debit-note",
    "stockjournal": "stock-journal",
    "stock_journal": "stock-journal",
    "delivery-item": "delivery",
    "delivery-note": "delivery",
    "salesorder": "sales-order",
    "sales_order": "sales-order",
    "purchaseorder": "purchase-order",
    "purchase_order": "purchase-order",
}

MODE_ALIASES = {
    "item": ITEM_INVOICE,
    "item_invoice": ITEM_INVOICE,
    "iteminvoice": ITEM_INVOICE,
    "accounting-voucher": ACCOUNTING,
    "accounting_voucher": ACCOUNTING,
    "accounting_invoice": ACCOUNTING_INVOICE,
    "as_voucher": AS_VOUCHER,
}


def normalize_type(voucher_type) -> str:
    raw = str(voucher_type or "").strip().lower().replace(" ", "-")
    return TYPE_ALIASES.get(raw, raw)


def normalize_mode(mode) -> str:
    raw = str(mode or "").strip().lower().replace(" ", "-")
    return MODE_ALIASES.get(raw, raw)


def modes_for(voucher_type: str) -> list[str]:
    return sorted(mode for (t, mode) in VOUCHER_KINDS if t == voucher_type)


def infer_mode(voucher_type: str, entries) -> str:
    """
    Mode to use when the request does not name one.
    """
    modes = modes_for(voucher_type)
    if modes == [""]:
        return ""

    has_items = any(isinstance(e, dict) and e.get("item_id") for e in entries or [])
    if voucher_type in ("sales", "purchase"):
        return ITEM_INVOICE if has_items else ACCOUNTING
    if voucher_type in ("credit-note", "debit-note"):
        return ITEM_INVOICE if has_items else AS_VOUCHER
    return modes[0]


def resolve_kind(voucher_type, mode=None, *, entries=None) -> VoucherKind:
    vtype = normalize_type(voucher_type)
    if not vtype:
        raise VoucherValidationError(
            "Missing required fields", fields={"type": "This field is required."}
        )

    if not any(t == vtype for (t, _) in VOUCHER_KINDS):
        raise VoucherValidationError(
            f"Unknown voucher type: {voucher_type}",
            fields={"type": f"Unknown voucher type '{voucher_type}'."},
        )

    vmode = normalize_mode(mode) if mode else infer_mode(vtype, entries)
    kind = VOUCHER_KINDS.get((vtype, vmode))
    if kind is None:
        allowed = ", ".join(m or "(none)" for m in modes_for(vtype))
        raise VoucherValidationError(
            f"Unsupported mode '{mode}' for {vtype} vouchers",
            fields={"mode": f"Expected one of: {allowed}."},
        )
    return kind
