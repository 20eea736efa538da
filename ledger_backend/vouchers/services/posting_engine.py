# vouchers/services/posting_engine.py

"""
======================================================
PATH: vouchers/services/posting_engine.py
======================================================
VOUCHER POSTING ENGINE

This module is the ONLY writer of voucher headers and lines.

Pipeline (one contract for every voucher type, driven by VoucherKind):
1) Validate required header fields and a non-empty entries list
2) Partition entries: item reference -> item-line table,
   ledger reference -> ledger-line table
3) Normalize decimals; compute/verify item amounts (qty * rate - discount)
4) Enforce debit == credit where the descriptor requires it
5) Resolve every referenced ledger/item/godown/bill in batch lookups
6) Write header + lines (+ bill allocations) inside one transaction

Item invoices also write a generic Voucher row linked to the invoice;
their ledger lines are VoucherEntry rows on it, so ledger reports,
outstanding and cash flow read them like any other voucher.

Steps 1-5 run before the transaction opens. Any failure in step 6 rolls
the whole voucher back: a header is never visible without its lines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, models, transaction

from accounting.services.money import TWOPLACES, ZERO, to_decimal
from accounting.services.registry import fetch_ledgers
from inventory.services.registry import fetch_godowns, fetch_stock_items
from vouchers.models import CREDIT, DEBIT, BillAllocation, TradeInvoice, Voucher
from vouchers.services.exceptions import (
    UnbalancedVoucherError,
    UnknownReferenceError,
    VoucherPostingError,
    VoucherValidationError,
)
from vouchers.services.kinds import VoucherKind

logger = logging.getLogger(__name__)

QTY_PLACES = Decimal("0.001")
AMOUNT_TOLERANCE = Decimal("0.01")
HUNDRED = Decimal("100")

TAX_RATE_FIELDS = ("cgst_rate", "sgst_rate", "igst_rate")
INVOICE_TOTAL_FIELDS = (
    "subtotal",
    "discount_total",
    "cgst_total",
    "sgst_total",
    "igst_total",
    "total",
)

ENTRY_TYPE_ALIASES = {
    "debit": DEBIT,
    "dr": DEBIT,
    "credit": CREDIT,
    "cr": CREDIT,
}

# Foreign keys are checked by the batch lookups, not per row
_REFERENCE_FIELDS = (
    "voucher",
    "ledger",
    "item",
    "godown",
    "party",
    "posting_ledger",
    "ledger_voucher",
)

# Header columns copied onto the generic voucher that carries an
# item invoice's ledger lines
_LEDGER_VOUCHER_FIELDS = (
    "voucher_type",
    "mode",
    "number",
    "date",
    "narration",
    "reference_no",
    "due_date",
    "supplier_invoice_date",
    "party_id",
)


@dataclass
class PostedVoucher:
    kind: VoucherKind
    header: models.Model
    item_lines: list = field(default_factory=list)
    ledger_lines: list = field(default_factory=list)
    allocations: list = field(default_factory=list)
    # generic voucher carrying the ledger lines of an item invoice
    ledger_voucher: models.Model | None = None

    @property
    def id(self):
        return self.header.pk

    @property
    def ledger_voucher_id(self):
        """Voucher id that ledger reports and bill allocations refer to."""
        if self.ledger_voucher is not None:
            return self.ledger_voucher.pk
        return self.header.pk if isinstance(self.header, Voucher) else None


@lru_cache(maxsize=None)
def _field_names(model) -> frozenset[str]:
    """
    Concrete column attribute names (FKs as `<name>_id`).
    """
    return frozenset(
        f.attname for f in model._meta.concrete_fields if not f.primary_key
    )


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _entry_type(value) -> str | None:
    if _is_blank(value):
        return None
    return ENTRY_TYPE_ALIASES.get(str(value).strip().lower())


def _coerce_id(row: dict, name: str, prefix: str, errors: dict) -> None:
    value = row.get(name)
    if _is_blank(value):
        return
    try:
        row[name] = int(value)
    except (TypeError, ValueError):
        errors[f"{prefix}{name}"] = "A valid integer is required."


def _error_fields(exc: DjangoValidationError, prefix: str) -> dict:
    if hasattr(exc, "error_dict"):
        return {
            f"{prefix}{name}": "; ".join(str(m) for e in errors for m in e.messages)
            for name, errors in exc.error_dict.items()
        }
    return {prefix.rstrip(".") or "non_field_errors": "; ".join(exc.messages)}


# ============================================================
# STEP 1: HEADER
# ============================================================

def _validate_header(kind: VoucherKind, header: dict, entries) -> dict:
    errors: dict[str, str] = {}

    for name in kind.required_header_fields:
        if _is_blank(header.get(name)):
            errors[name] = "This field is required."

    if not isinstance(entries, (list, tuple)) or not entries:
        errors["entries"] = "At least one entry is required."

    values = dict(header)
    for name in ("party_id", "posting_ledger_id"):
        _coerce_id(values, name, "", errors)

    if errors:
        raise VoucherValidationError("Missing required fields", fields=errors)

    columns = _field_names(kind.header_model) - {"ledger_voucher_id"}
    values = {k: v for k, v in values.items() if k in columns and v is not None}
    values["voucher_type"] = kind.voucher_type
    values["mode"] = kind.mode
    return values


# ============================================================
# STEP 2-3: ENTRIES
# ============================================================

def _normalize_item_row(kind: VoucherKind, idx: int, row: dict, errors: dict) -> dict:
    prefix = f"entries[{idx}]."
    for name in kind.required_item_fields:
        if _is_blank(row.get(name)):
            errors[f"{prefix}{name}"] = "This field is required."

    out = dict(row)
    for name in ("item_id", "godown_id"):
        _coerce_id(out, name, prefix, errors)

    parsed = {}
    for name, places in (("quantity", QTY_PLACES), ("rate", TWOPLACES), ("discount", TWOPLACES)):
        try:
            parsed[name] = to_decimal(row.get(name), places=places)
        except ValueError as exc:
            errors[f"{prefix}{name}"] = str(exc)
    if len(parsed) < 3:
        return out
    quantity, rate, discount = parsed["quantity"], parsed["rate"], parsed["discount"]

    for name in TAX_RATE_FIELDS:
        if _is_blank(row.get(name)):
            out.pop(name, None)
            continue
        try:
            tax_rate = to_decimal(row.get(name))
        except ValueError as exc:
            errors[f"{prefix}{name}"] = str(exc)
            continue
        if not ZERO <= tax_rate <= HUNDRED:
            errors[f"{prefix}{name}"] = "Tax rate must be between 0 and 100."
        out[name] = tax_rate

    if quantity <= 0:
        errors[f"{prefix}quantity"] = "Quantity must be > 0."
    if rate < 0:
        errors[f"{prefix}rate"] = "Rate cannot be negative."
    if discount < 0:
        errors[f"{prefix}discount"] = "Discount cannot be negative."

    try:
        computed = (quantity * rate - discount).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        errors[f"{prefix}amount"] = "Quantity * rate is out of range."
        return out

    if _is_blank(row.get("amount")):
        amount = computed
    else:
        try:
            amount = to_decimal(row.get("amount"))
        except ValueError as exc:
            errors[f"{prefix}amount"] = str(exc)
            return out

        verify = getattr(settings, "VOUCHER_VERIFY_LINE_AMOUNTS", True)
        if verify and not _is_blank(row.get("rate")):
            if abs(amount - computed) > AMOUNT_TOLERANCE:
                errors[f"{prefix}amount"] = (
                    f"Amount {amount} does not match quantity * rate - discount ({computed})."
                )

    if "entry_type" in kind.required_item_fields:
        entry_type = _entry_type(row.get("entry_type"))
        if row.get("entry_type") and entry_type is None:
            errors[f"{prefix}entry_type"] = "Expected 'debit' or 'credit'."
        out["entry_type"] = entry_type

    out.update(quantity=quantity, rate=rate, discount=discount, amount=amount)
    return out


def _normalize_ledger_row(kind: VoucherKind, idx: int, row: dict, errors: dict) -> dict:
    prefix = f"entries[{idx}]."
    out = dict(row)
    _coerce_id(out, "ledger_id", prefix, errors)

    entry_type = _entry_type(row.get("entry_type"))
    if row.get("entry_type") and entry_type is None:
        errors[f"{prefix}entry_type"] = "Expected 'debit' or 'credit'."
    if entry_type is None:
        entry_type = kind.default_entry_type
    out["entry_type"] = entry_type

    for name in kind.required_ledger_fields:
        value = out.get(name)
        if _is_blank(value):
            errors[f"{prefix}{name}"] = "This field is required."

    try:
        amount = to_decimal(row.get("amount"))
    except ValueError as exc:
        errors[f"{prefix}amount"] = str(exc)
        return out

    if amount <= 0 and f"{prefix}amount" not in errors:
        errors[f"{prefix}amount"] = "Amount must be > 0."
    out["amount"] = amount

    if not _is_blank(row.get("rate")):
        try:
            out["rate"] = to_decimal(row.get("rate"))
        except ValueError as exc:
            errors[f"{prefix}rate"] = str(exc)

    return out


def _partition_entries(kind: VoucherKind, entries) -> tuple[list[dict], list[dict]]:
    errors: dict[str, str] = {}
    item_rows: list[dict] = []
    ledger_rows: list[dict] = []

    for idx, raw in enumerate(entries):
        if not isinstance(raw, dict):
            errors[f"entries[{idx}]"] = "Each entry must be an object."
            continue

        if not _is_blank(raw.get("item_id")):
            if kind.item_line_model is None:
                errors[f"entries[{idx}].item_id"] = (
                    f"{kind.label} vouchers do not accept item lines."
                )
                continue
            item_rows.append(_normalize_item_row(kind, idx, raw, errors))
        elif not _is_blank(raw.get("ledger_id")):
            if kind.ledger_line_model is None:
                errors[f"entries[{idx}].ledger_id"] = (
                    f"{kind.label} vouchers do not accept ledger lines."
                )
                continue
            ledger_rows.append(_normalize_ledger_row(kind, idx, raw, errors))
        else:
            errors[f"entries[{idx}]"] = "Each entry must reference a ledger or an item."

    if errors:
        raise VoucherValidationError("Invalid voucher entries", fields=errors)

    return item_rows, ledger_rows


def _fill_invoice_totals(header: dict, item_rows: list[dict]) -> None:
    """
    Derive invoice totals from item lines when the client omitted them.
    Client-supplied totals are parsed like any other amount.
    """
    errors: dict[str, str] = {}
    for name in INVOICE_TOTAL_FIELDS:
        if _is_blank(header.get(name)):
            header.pop(name, None)
            continue
        try:
            header[name] = to_decimal(header[name])
        except ValueError as exc:
            errors[name] = str(exc)
            continue
        if header[name] < 0:
            errors[name] = "Totals cannot be negative."
    if errors:
        raise VoucherValidationError("Invalid invoice totals", fields=errors)

    subtotal = sum((r["amount"] for r in item_rows), ZERO)
    discount_total = sum((r["discount"] for r in item_rows), ZERO)

    taxes = {}
    for tax in ("cgst", "sgst", "igst"):
        total = ZERO
        for r in item_rows:
            total += r["amount"] * r.get(f"{tax}_rate", ZERO) / HUNDRED
        taxes[f"{tax}_total"] = total.quantize(TWOPLACES, rounding=ROUND_HALF_UP)

    header.setdefault("subtotal", subtotal)
    header.setdefault("discount_total", discount_total)
    for name, value in taxes.items():
        header.setdefault(name, value)
    header.setdefault(
        "total",
        header["subtotal"] + header["cgst_total"] + header["sgst_total"] + header["igst_total"],
    )


# ============================================================
# STEP 4: BALANCE
# ============================================================

def _check_balance(kind: VoucherKind, ledger_rows: list[dict]) -> None:
    if not kind.balance_enforced:
        return

    debits = sum((r["amount"] for r in ledger_rows if r["entry_type"] == DEBIT), ZERO)
    credits = sum((r["amount"] for r in ledger_rows if r["entry_type"] == CREDIT), ZERO)

    if debits != credits:
        raise UnbalancedVoucherError(
            f"Voucher not balanced: debits={debits} credits={credits}",
            fields={"entries": f"Debit total {debits} must equal credit total {credits}."},
        )


# ============================================================
# STEP 5: REFERENCES
# ============================================================

def _normalize_allocations(kind: VoucherKind, allocations, ledger_rows) -> list[dict]:
    if not allocations:
        return []

    if not kind.allows_bill_allocations:
        raise VoucherValidationError(
            "Bill allocations are only accepted on receipt/payment vouchers",
            fields={"billAllocations": f"Not supported for {kind.label} vouchers."},
        )

    errors: dict[str, str] = {}
    rows: list[dict] = []
    for idx, raw in enumerate(allocations):
        prefix = f"billAllocations[{idx}]."
        if not isinstance(raw, dict):
            errors[f"billAllocations[{idx}]"] = "Each allocation must be an object."
            continue
        raw = dict(raw)
        if _is_blank(raw.get("bill_id")):
            errors[f"{prefix}bill_id"] = "This field is required."
            continue
        _coerce_id(raw, "bill_id", prefix, errors)
        if f"{prefix}bill_id" in errors:
            continue
        try:
            amount = to_decimal(raw.get("amount"))
        except ValueError as exc:
            errors[f"{prefix}amount"] = str(exc)
            continue
        if amount <= 0:
            errors[f"{prefix}amount"] = "Amount must be > 0."
            continue
        rows.append({"bill_id": raw["bill_id"], "amount": amount})

    voucher_total = sum((r["amount"] for r in ledger_rows if r["entry_type"] == DEBIT), ZERO)
    allocated = sum((r["amount"] for r in rows), ZERO)
    if not errors and allocated > voucher_total:
        errors["billAllocations"] = (
            f"Allocated {allocated} exceeds the voucher amount {voucher_total}."
        )

    if errors:
        raise VoucherValidationError("Invalid bill allocations", fields=errors)
    return rows


def _resolve_references(header: dict, item_rows, ledger_rows, allocations) -> None:
    ledger_ids = {int(r["ledger_id"]) for r in ledger_rows}
    for name in ("party_id", "posting_ledger_id"):
        if not _is_blank(header.get(name)):
            ledger_ids.add(int(header[name]))

    item_ids = {int(r["item_id"]) for r in item_rows}
    godown_ids = {int(r["godown_id"]) for r in item_rows if not _is_blank(r.get("godown_id"))}
    bill_ids = {r["bill_id"] for r in allocations}

    ledgers = fetch_ledgers(ledger_ids)
    items = fetch_stock_items(item_ids)
    godowns = fetch_godowns(godown_ids)
    bills = (
        {
            v.id: v
            for v in Voucher.objects.filter(id__in=bill_ids).only("id", "voucher_type")
        }
        if bill_ids
        else {}
    )

    missing = {
        "ledgers": list(ledger_ids - set(ledgers)),
        "items": list(item_ids - set(items)),
        "godowns": list(godown_ids - set(godowns)),
        "bills": list(bill_ids - set(bills)),
    }
    if any(missing.values()):
        raise UnknownReferenceError(missing)

    inactive = sorted(lid for lid, ledger in ledgers.items() if not ledger.is_active)
    if inactive:
        raise VoucherValidationError(
            "Inactive ledger referenced",
            fields={"ledgers": f"Ledger(s) {', '.join(map(str, inactive))} are inactive."},
        )

    not_bills = sorted(
        bid
        for bid, bill in bills.items()
        if "sale" not in bill.voucher_type and "purchase" not in bill.voucher_type
    )
    if not_bills:
        raise VoucherValidationError(
            "Allocations must target sales or purchase vouchers",
            fields={"billAllocations": f"Voucher(s) {', '.join(map(str, not_bills))} are not bills."},
        )


# ============================================================
# OBJECT BUILDING (validated before the transaction)
# ============================================================

def _build(model, values: dict, prefix: str):
    columns = _field_names(model)
    obj = model(**{k: v for k, v in values.items() if k in columns and v is not None})
    try:
        obj.clean_fields(exclude=list(_REFERENCE_FIELDS))
        obj.clean()
    except DjangoValidationError as exc:
        raise VoucherValidationError(
            "Invalid voucher data", fields=_error_fields(exc, prefix)
        ) from exc
    return obj


# ============================================================
# PUBLIC API
# ============================================================

def post_voucher(
    *,
    kind: VoucherKind,
    header: dict,
    entries: list,
    allocations: list | None = None,
) -> PostedVoucher:
    header_values = _validate_header(kind, header, entries)
    item_rows, ledger_rows = _partition_entries(kind, entries)

    _check_balance(kind, ledger_rows)
    allocation_rows = _normalize_allocations(kind, allocations, ledger_rows)
    _resolve_references(header_values, item_rows, ledger_rows, allocation_rows)

    item_objs = [
        _build(kind.item_line_model, row, f"entries[{idx}].")
        for idx, row in enumerate(item_rows)
    ]
    ledger_objs = [
        _build(kind.ledger_line_model, row, f"entries[{idx}].")
        for idx, row in enumerate(ledger_rows)
    ]

    if kind.header_model is TradeInvoice:
        _fill_invoice_totals(header_values, item_rows)
    header_obj = _build(kind.header_model, header_values, "")

    ledger_voucher = None
    if kind.links_ledger_voucher:
        ledger_voucher = _build(
            Voucher,
            {k: header_values[k] for k in _LEDGER_VOUCHER_FIELDS if k in header_values},
            "",
        )

    try:
        with transaction.atomic():
            if ledger_voucher is not None:
                ledger_voucher.save()
                header_obj.ledger_voucher = ledger_voucher
            header_obj.save()

            for line in item_objs:
                line.voucher = header_obj
            for line in ledger_objs:
                line.voucher = ledger_voucher or header_obj

            if item_objs:
                kind.item_line_model.objects.bulk_create(item_objs)
            if ledger_objs:
                kind.ledger_line_model.objects.bulk_create(ledger_objs)

            allocation_objs = [
                BillAllocation(settlement=header_obj, bill_id=row["bill_id"], amount=row["amount"])
                for row in allocation_rows
            ]
            if allocation_objs:
                BillAllocation.objects.bulk_create(allocation_objs)
    except (DatabaseError, DjangoValidationError) as exc:
        logger.exception(
            "Voucher posting failed; transaction rolled back",
            extra={
                "voucher_type": kind.voucher_type,
                "mode": kind.mode,
                "item_lines": len(item_objs),
                "ledger_lines": len(ledger_objs),
            },
        )
        raise VoucherPostingError(f"Failed to save voucher: {exc}") from exc

    logger.info(
        "Voucher posted",
        extra={
            "voucher_type": kind.voucher_type,
            "mode": kind.mode,
            "voucher_id": header_obj.pk,
            "ledger_voucher_id": ledger_voucher.pk if ledger_voucher else None,
            "item_lines": len(item_objs),
            "ledger_lines": len(ledger_objs),
            "allocations": len(allocation_objs),
        },
    )

    return PostedVoucher(
        kind=kind,
        header=header_obj,
        item_lines=item_objs,
        ledger_lines=ledger_objs,
        allocations=allocation_objs,
        ledger_voucher=ledger_voucher,
    )
