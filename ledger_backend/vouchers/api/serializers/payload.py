# vouchers/api/serializers/payload.py

"""
======================================================
PATH: vouchers/api/serializers/payload.py
======================================================
VOUCHER REQUEST PAYLOAD

Clients post camelCase JSON:

    {
      "type": "receipt", "mode": "...", "date": "2024-04-01",
      "number": "R-1", "narration": "...", "referenceNo": "...",
      "partyId": 3, "dueDate": "...",
      "entries": [{"ledgerId": 1, "type": "debit", "amount": 500}, ...],
      "billAllocations": [{"billId": 12, "amount": 500}]
    }

This module only renames keys into the engine's snake_case vocabulary.
Required fields, decimals and references are validated by the posting
engine so every voucher type reports errors in the same shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from vouchers.services.exceptions import VoucherValidationError

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")

# Keys that never reach a header row
_ENVELOPE_KEYS = {"type", "voucherType", "mode", "entries", "billAllocations", "allocations"}
_READ_ONLY_KEYS = {"id", "created_at", "updated_at", "voucher_type"}

HEADER_ALIASES = {
    "voucherNumber": "number",
    "voucherNo": "number",
    "partyLedgerId": "party_id",
    "customerId": "party_id",
    "supplierId": "party_id",
    "salesLedgerId": "posting_ledger_id",
    "purchaseLedgerId": "posting_ledger_id",
}

ENTRY_ALIASES = {
    "type": "entry_type",
    "stockItemId": "item_id",
    "chequeNo": "cheque_number",
    "hsn": "hsn_code",
}

ALLOCATION_ALIASES = {
    "voucherId": "bill_id",
    "billVoucherId": "bill_id",
}


def to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", str(key)).lower()


def _rename(row: dict, aliases: dict) -> dict:
    out = {}
    for key, value in row.items():
        name = aliases.get(key) or to_snake(key)
        out[name] = value
    return out


def _rows(value, aliases: dict, name: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise VoucherValidationError(
            f"{name} must be a list", fields={name: "Expected a list of objects."}
        )
    return [_rename(row, aliases) if isinstance(row, dict) else row for row in value]


@dataclass
class VoucherPayload:
    voucher_type: str
    mode: str
    header: dict
    entries: list = field(default_factory=list)
    allocations: list = field(default_factory=list)


def parse_voucher_payload(data) -> VoucherPayload:
    if not isinstance(data, dict):
        raise VoucherValidationError(
            "Request body must be a JSON object",
            fields={"non_field_errors": "Expected a JSON object."},
        )

    header = {
        name: value
        for name, value in _rename(
            {k: v for k, v in data.items() if k not in _ENVELOPE_KEYS}, HEADER_ALIASES
        ).items()
        if name not in _READ_ONLY_KEYS
    }

    entries = data.get("entries")
    return VoucherPayload(
        voucher_type=str(data.get("type") or data.get("voucherType") or ""),
        mode=str(data.get("mode") or ""),
        header=header,
        # Missing or empty entries are reported by the engine
        entries=_rows(entries, ENTRY_ALIASES, "entries") if entries else [],
        allocations=_rows(
            data.get("billAllocations", data.get("allocations")),
            ALLOCATION_ALIASES,
            "billAllocations",
        ),
    )
