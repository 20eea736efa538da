# accounting/services/financial_statement_service.py

"""
FINANCIAL STATEMENT SERVICE (SHARED POSITIONS)

Every statement (trial balance, P&L, balance sheet, group summary) is
built from one list of ledger positions.

Modes:
- "static":        opening balances only (the historical behaviour of
                   the statements; posted vouchers are ignored)
- "transactions":  opening balances + every posted line dated on or
                   before as_of (today when omitted)

RULES:
- READ-ONLY (never writes)
- One aggregate query for all ledgers (no N+1)
- Positions are on the debit-positive axis
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from django.utils import timezone

from accounting.models.ledger import Ledger
from accounting.models.ledger_group import LedgerGroup, group_type_map
from accounting.services.aggregates import credit_sum, debit_sum
from accounting.services.exceptions import ReportParameterError
from accounting.services.money import ZERO, to_major_number, to_minor_int
from vouchers.models import VoucherEntry

MODE_STATIC = "static"
MODE_TRANSACTIONS = "transactions"
MODES = (MODE_STATIC, MODE_TRANSACTIONS)

UNCLASSIFIED = "Unclassified"

# Display order of group types in every statement
TYPE_ORDER = [
    LedgerGroup.ASSET,
    LedgerGroup.CASH,
    LedgerGroup.BANK,
    LedgerGroup.LIABILITY,
    LedgerGroup.CAPITAL,
    LedgerGroup.INCOME,
    LedgerGroup.EXPENSE,
    UNCLASSIFIED,
]


@dataclass(frozen=True)
class LedgerPosition:
    ledger_id: int
    name: str
    group_id: int | None
    group_name: str
    group_type: str
    net: Decimal  # debit-positive

    @property
    def debit(self) -> Decimal:
        return self.net if self.net > 0 else ZERO

    @property
    def credit(self) -> Decimal:
        return -self.net if self.net < 0 else ZERO

    def as_row(self, *, amount: Decimal | None = None) -> dict:
        row = {
            "id": self.ledger_id,
            "name": self.name,
            "groupId": self.group_id,
            "groupName": self.group_name,
            "debit": to_major_number(self.debit),
            "credit": to_major_number(self.credit),
        }
        if amount is not None:
            row["amount"] = to_major_number(amount)
        return row


def parse_mode(value) -> str:
    mode = str(value or MODE_STATIC).strip().lower()
    if mode not in MODES:
        raise ReportParameterError(
            f"Invalid mode '{value}'. Expected one of: {', '.join(MODES)}",
            field="mode",
        )
    return mode


def ledger_positions(*, mode: str = MODE_STATIC, as_of: date | None = None) -> list[LedgerPosition]:
    mode = parse_mode(mode)
    types = group_type_map()

    ledgers = list(
        Ledger.objects.select_related("group")
        .filter(is_active=True)
        .order_by("name", "id")
    )

    movements: dict[int, Decimal] = {}
    if mode == MODE_TRANSACTIONS:
        cutoff = as_of or timezone.localdate()
        rows = (
            VoucherEntry.objects.filter(voucher__date__lte=cutoff)
            .values("ledger_id")
            .annotate(debit=debit_sum(), credit=credit_sum())
            .order_by("ledger_id")
        )
        movements = {r["ledger_id"]: r["debit"] - r["credit"] for r in rows}

    positions = []
    for ledger in ledgers:
        group_type = types.get(ledger.group_id, "") if ledger.group_id else ""
        positions.append(
            LedgerPosition(
                ledger_id=ledger.id,
                name=ledger.name,
                group_id=ledger.group_id,
                group_name=ledger.group.name if ledger.group_id else "",
                group_type=group_type or UNCLASSIFIED,
                net=ledger.signed_opening + movements.get(ledger.id, ZERO),
            )
        )
    return positions


def section(positions: list[LedgerPosition], *, sign: int = 1) -> dict:
    """
    Group positions by ledger group; `sign` flips credit-normal sections
    so their balances read positive.
    """
    groups: dict[tuple, dict] = {}
    total = ZERO

    for p in positions:
        key = (p.group_name, p.group_id)
        group = groups.setdefault(
            key,
            {"groupId": p.group_id, "groupName": p.group_name or UNCLASSIFIED, "ledgers": [], "_total": ZERO},
        )
        amount = p.net * sign
        group["ledgers"].append(p.as_row(amount=amount))
        group["_total"] += amount
        total += amount

    ordered = []
    for key in sorted(groups, key=lambda k: (k[0], k[1] or 0)):
        group = groups[key]
        group["total"] = to_major_number(group.pop("_total"))
        ordered.append(group)

    return {
        "groups": ordered,
        "total": to_major_number(total),
        "totalMinor": to_minor_int(total),
        "_total": total,
    }


def build_group_summary(*, group_type: str | None = None, mode: str = MODE_STATIC, as_of: date | None = None) -> dict:
    positions = ledger_positions(mode=mode, as_of=as_of)

    wanted = (group_type or "").strip()
    if wanted:
        valid = {t for t, _ in LedgerGroup.GROUP_TYPES} | {UNCLASSIFIED}
        match = next((t for t in valid if t.lower() == wanted.lower()), None)
        if match is None:
            raise ReportParameterError(f"Invalid groupType '{group_type}'", field="groupType")
        positions = [p for p in positions if p.group_type == match]

    summary = []
    for gtype in TYPE_ORDER:
        members = [p for p in positions if p.group_type == gtype]
        if not members:
            continue
        data = section(members)
        data.pop("_total")
        summary.append(
            {
                "groupType": gtype,
                **data,
                "totalDebit": to_major_number(sum((p.debit for p in members), ZERO)),
                "totalCredit": to_major_number(sum((p.credit for p in members), ZERO)),
            }
        )

    return {
        "mode": parse_mode(mode),
        "asOf": as_of.isoformat() if as_of else None,
        "groupType": wanted or None,
        "groups": summary,
    }
