# accounting/services/ledger_report_service.py

"""
======================================================
PATH: accounting/services/ledger_report_service.py
======================================================
LEDGER REPORT (BALANCE RECONSTRUCTION)

Rebuilds a ledger statement from posted lines on every request.
No running balance is ever stored.

Rules:
- Opening = static opening balance combined with every line dated
  strictly before from_date, signed by the ledger's balance_type
- Window lines are replayed in (date, voucher id, line id) order
- Running balance applies `balance += debit - credit` to every line
- Decimal throughout; floats only at the JSON edge
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from accounting.models.ledger import Ledger
from accounting.services.aggregates import credit_sum, debit_sum
from accounting.services.exceptions import ReportParameterError
from accounting.services.money import ZERO, to_major_number
from accounting.services.registry import get_ledger
from vouchers.models import CREDIT, DEBIT, VoucherEntry


@dataclass
class LedgerMovement:
    id: int | None
    date: date | None
    voucher_type: str
    voucher_no: str
    particulars: str
    debit: Decimal
    credit: Decimal
    balance: Decimal
    narration: str = ""
    cheque_no: str = ""
    bank_name: str = ""
    is_opening: bool = False
    is_closing: bool = False

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "voucherType": self.voucher_type,
            "voucherNo": self.voucher_no,
            "particulars": self.particulars,
            "debit": to_major_number(self.debit),
            "credit": to_major_number(self.credit),
            "balance": to_major_number(self.balance),
            "narration": self.narration,
            "chequeNo": self.cheque_no,
            "bankName": self.bank_name,
            "isOpening": self.is_opening,
            "isClosing": self.is_closing,
        }


@dataclass
class LedgerStatement:
    ledger: Ledger
    opening_balance: Decimal
    closing_balance: Decimal
    total_debit: Decimal
    total_credit: Decimal
    transaction_count: int
    rows: list[LedgerMovement] = field(default_factory=list)

    def as_dict(self) -> dict:
        ledger = self.ledger
        return {
            "ledger": {
                "id": ledger.id,
                "name": ledger.name,
                "groupName": ledger.group.name if ledger.group_id else "",
                "openingBalance": to_major_number(ledger.opening_balance),
                "balanceType": ledger.balance_type,
                "address": ledger.address,
                "phone": ledger.phone,
                "email": ledger.email,
                "gstNumber": ledger.gst_number,
                "panNumber": ledger.pan_number,
            },
            "transactions": [row.as_dict() for row in self.rows],
            "summary": {
                "openingBalance": to_major_number(self.opening_balance),
                "closingBalance": to_major_number(self.closing_balance),
                "totalDebit": to_major_number(self.total_debit),
                "totalCredit": to_major_number(self.total_credit),
                "transactionCount": self.transaction_count,
            },
        }


def opening_balance_for(ledger: Ledger, *, before: date) -> Decimal:
    """
    Balance carried into a window that starts at `before`.
    """
    pre = VoucherEntry.objects.filter(ledger=ledger, voucher__date__lt=before).aggregate(
        debit=debit_sum(),
        credit=credit_sum(),
    )
    static = ledger.opening_balance or ZERO

    if ledger.balance_type == Ledger.CREDIT:
        return static + (pre["credit"] - pre["debit"])
    return static + (pre["debit"] - pre["credit"])


def _particulars_by_voucher(voucher_ids: set[int], ledger_id: int) -> dict[int, str]:
    """
    Contra ledger names per voucher (every other ledger on the voucher).
    """
    names: dict[int, list[str]] = {}
    contra = (
        VoucherEntry.objects.filter(voucher_id__in=voucher_ids)
        .exclude(ledger_id=ledger_id)
        .values_list("voucher_id", "ledger__name")
        .order_by("voucher_id", "id")
    )
    for voucher_id, name in contra:
        bucket = names.setdefault(voucher_id, [])
        if name not in bucket:
            bucket.append(name)
    return {vid: ", ".join(v) for vid, v in names.items()}


def build_ledger_report(
    *,
    ledger_id,
    from_date: date,
    to_date: date,
    include_opening: bool = True,
    include_closing: bool = True,
) -> LedgerStatement:
    if from_date is None or to_date is None:
        raise ReportParameterError("fromDate and toDate are required", field="fromDate")
    if from_date > to_date:
        raise ReportParameterError("fromDate must be on or before toDate", field="fromDate")

    ledger = get_ledger(ledger_id)
    opening = opening_balance_for(ledger, before=from_date)

    entries = list(
        VoucherEntry.objects.filter(
            ledger=ledger,
            voucher__date__gte=from_date,
            voucher__date__lte=to_date,
        )
        .select_related("voucher")
        .order_by("voucher__date", "voucher_id", "id")
    )
    particulars = _particulars_by_voucher({e.voucher_id for e in entries}, ledger.id)

    rows: list[LedgerMovement] = []
    if include_opening:
        debit_side = ledger.balance_type == Ledger.DEBIT
        rows.append(
            LedgerMovement(
                id=None,
                date=from_date,
                voucher_type="",
                voucher_no="",
                particulars="Opening Balance",
                debit=abs(opening) if debit_side else ZERO,
                credit=ZERO if debit_side else abs(opening),
                balance=opening,
                is_opening=True,
            )
        )

    balance = opening
    total_debit = ZERO
    total_credit = ZERO

    for entry in entries:
        debit = entry.amount if entry.entry_type == DEBIT else ZERO
        credit = entry.amount if entry.entry_type == CREDIT else ZERO
        balance += debit - credit
        total_debit += debit
        total_credit += credit

        voucher = entry.voucher
        rows.append(
            LedgerMovement(
                id=entry.id,
                date=voucher.date,
                voucher_type=voucher.voucher_type,
                voucher_no=voucher.number,
                particulars=particulars.get(voucher.id, ""),
                debit=debit,
                credit=credit,
                balance=balance,
                narration=entry.narration or voucher.narration,
                cheque_no=entry.cheque_number,
                bank_name=entry.bank_name,
            )
        )

    if include_closing:
        # Balancing figure on the opposite side, as in a ruled-off ledger
        rows.append(
            LedgerMovement(
                id=None,
                date=to_date,
                voucher_type="",
                voucher_no="",
                particulars="Closing Balance",
                debit=abs(balance) if balance < 0 else ZERO,
                credit=balance if balance > 0 else ZERO,
                balance=balance,
                is_closing=True,
            )
        )

    return LedgerStatement(
        ledger=ledger,
        opening_balance=opening,
        closing_balance=balance,
        total_debit=total_debit,
        total_credit=total_credit,
        transaction_count=len(entries),
        rows=rows,
    )
