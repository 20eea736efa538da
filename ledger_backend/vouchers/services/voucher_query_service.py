# vouchers/services/voucher_query_service.py

"""
READ-SIDE VOUCHER QUERIES

- voucher detail (header + lines + allocations) for the generic header table
- day book: posted vouchers in a window with per-voucher debit/credit totals
"""

from __future__ import annotations

from datetime import date

from django.db.models import Count

from accounting.services.aggregates import credit_sum, debit_sum
from accounting.services.money import ZERO, to_major_number
from vouchers.models import NoteVoucher, Voucher
from vouchers.services.exceptions import VoucherNotFoundError
from vouchers.services.kinds import normalize_type

# (header model, ledger-line related name, source label)
# Item invoices appear through their linked generic voucher
DAYBOOK_SOURCES = (
    (Voucher, "entries", "voucher"),
    (NoteVoucher, "ledger_entries", "note"),
)


def get_voucher_detail(voucher_id) -> dict:
    try:
        voucher = (
            Voucher.objects.select_related("party")
            .prefetch_related("entries__ledger", "allocations")
            .get(pk=int(voucher_id))
        )
    except (Voucher.DoesNotExist, TypeError, ValueError) as exc:
        raise VoucherNotFoundError("Voucher not found") from exc

    return {
        "id": voucher.id,
        "voucherType": voucher.voucher_type,
        "mode": voucher.mode,
        "voucherNumber": voucher.number,
        "date": voucher.date.isoformat(),
        "dueDate": voucher.due_date.isoformat() if voucher.due_date else None,
        "narration": voucher.narration,
        "referenceNo": voucher.reference_no,
        "partyId": voucher.party_id,
        "entries": [
            {
                "id": e.id,
                "ledgerId": e.ledger_id,
                "ledgerName": e.ledger.name,
                "type": e.entry_type,
                "amount": to_major_number(e.amount),
                "narration": e.narration,
                "bankName": e.bank_name,
                "chequeNumber": e.cheque_number,
                "costCentreId": e.cost_centre_id,
            }
            for e in voucher.entries.all()
        ],
        "billAllocations": [
            {"billId": a.bill_id, "amount": to_major_number(a.amount)}
            for a in voucher.allocations.all()
        ],
    }


def build_day_book(
    *,
    from_date: date | None = None,
    to_date: date | None = None,
    voucher_type: str | None = None,
) -> dict:
    rows: list[dict] = []

    for model, lines, source in DAYBOOK_SOURCES:
        qs = model.objects.all()
        if from_date:
            qs = qs.filter(date__gte=from_date)
        if to_date:
            qs = qs.filter(date__lte=to_date)
        if voucher_type:
            qs = qs.filter(voucher_type=normalize_type(voucher_type))

        qs = qs.annotate(
            entries_count=Count(lines),
            total_debit=debit_sum(f"{lines}__"),
            total_credit=credit_sum(f"{lines}__"),
        ).values(
            "id", "voucher_type", "number", "date", "entries_count",
            "total_debit", "total_credit",
        )

        for row in qs:
            rows.append({**row, "source": source})

    rows.sort(key=lambda r: (r["date"], r["voucher_type"], r["number"], r["source"], r["id"]))

    total_debit = sum((r["total_debit"] for r in rows), ZERO)
    total_credit = sum((r["total_credit"] for r in rows), ZERO)

    return {
        "vouchers": [
            {
                "voucherId": r["id"],
                "source": r["source"],
                "voucherNo": r["number"],
                "voucherType": r["voucher_type"],
                "date": r["date"].isoformat(),
                "entriesCount": r["entries_count"],
                "totalDebit": to_major_number(r["total_debit"]),
                "totalCredit": to_major_number(r["total_credit"]),
            }
            for r in rows
        ],
        "totalDebit": to_major_number(total_debit),
        "totalCredit": to_major_number(total_credit),
        "netDifference": to_major_number(total_debit - total_credit),
        "voucherCount": len(rows),
    }
