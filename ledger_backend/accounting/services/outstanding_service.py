# accounting/services/outstanding_service.py

"""
======================================================
PATH: accounting/services/outstanding_service.py
======================================================
OUTSTANDING & AGEING ENGINE

Party roles:
- receivable: bills are vouchers whose type matches "sale";
              bill amount = debit - credit on the party ledger,
              settlements = credit lines on receipt/payment vouchers
- payable:    bills match "purchase"; credit - debit,
              settlements = debit lines on receipt/payment vouchers

Two settlement views:
- per party: settlements are summed per party and subtracted in
  aggregate from the party's billed total
- per bill:  only explicit BillAllocation rows (plus offsets on the
  bill voucher itself) reduce a bill

Due date = voucher due date, else bill date + party credit days
(falling back to LEDGER_DEFAULT_CREDIT_DAYS).

READ-ONLY. Bills, settlements and allocations are each one query.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from django.utils import timezone

from accounting.models.ledger import Ledger
from accounting.services.ageing import (
    RISK_TIERS,
    STANDARD_BUCKETS,
    bucket_for,
    bucket_labels,
    default_credit_days,
    overdue_days,
    resolve_due_date,
    risk_rank,
    risk_table_for,
)
from accounting.services.aggregates import credit_sum, debit_sum, money_sum
from accounting.services.exceptions import ReportParameterError, UnknownPartyRoleError
from accounting.services.money import ZERO, to_major_number, to_minor_int
from accounting.services.registry import search_ledgers
from vouchers.models import CREDIT, DEBIT, BillAllocation, VoucherEntry
from vouchers.services.kinds import SETTLEMENT_TYPES


@dataclass(frozen=True)
class PartyRole:
    key: str
    party_label: str
    bill_pattern: str
    bill_side: str
    settlement_side: str

    @property
    def name_key(self) -> str:
        return f"{self.party_label}Name"


RECEIVABLE = PartyRole("receivable", "customer", "sale", DEBIT, CREDIT)
PAYABLE = PartyRole("payable", "supplier", "purchase", CREDIT, DEBIT)

PARTY_ROLES = {r.key: r for r in (RECEIVABLE, PAYABLE)}

SORT_ORDERS = ("asc", "desc")


def get_role(role) -> PartyRole:
    if isinstance(role, PartyRole):
        return role
    try:
        return PARTY_ROLES[str(role)]
    except KeyError as exc:
        raise UnknownPartyRoleError(f"Unknown party role: {role}") from exc


# =====================================================
# BILLS
# =====================================================

@dataclass
class Bill:
    voucher_id: int
    party: Ledger
    number: str
    voucher_type: str
    bill_date: date
    reference: str
    narration: str
    gross: Decimal
    offset: Decimal
    credit_days: int
    due_date: date
    overdue_days: int
    allocated: Decimal = ZERO

    @property
    def amount(self) -> Decimal:
        """Bill amount net of offsets on the bill voucher itself."""
        return self.gross - self.offset

    @property
    def settled(self) -> Decimal:
        return self.offset + self.allocated

    @property
    def outstanding(self) -> Decimal:
        return self.gross - self.settled


def _credit_days_for(party: Ledger) -> int:
    if party.credit_days is not None:
        return party.credit_days
    return default_credit_days()


def _load_bills(role: PartyRole, parties: dict[int, Ledger], *, today: date) -> list[Bill]:
    if not parties:
        return []

    rows = (
        VoucherEntry.objects.filter(
            voucher__voucher_type__icontains=role.bill_pattern,
            ledger_id__in=list(parties),
        )
        .values(
            "voucher_id",
            "ledger_id",
            "voucher__number",
            "voucher__voucher_type",
            "voucher__date",
            "voucher__due_date",
            "voucher__reference_no",
            "voucher__narration",
        )
        .annotate(debit=debit_sum(), credit=credit_sum())
        .order_by("voucher__date", "voucher_id", "ledger_id")
    )

    bills: list[Bill] = []
    for row in rows:
        if role.bill_side == DEBIT:
            gross, offset = row["debit"], row["credit"]
        else:
            gross, offset = row["credit"], row["debit"]

        # a party line on the wrong side is not a bill
        if gross - offset <= 0:
            continue

        party = parties[row["ledger_id"]]
        credit_days = _credit_days_for(party)
        due = resolve_due_date(row["voucher__date"], row["voucher__due_date"], credit_days)

        bills.append(
            Bill(
                voucher_id=row["voucher_id"],
                party=party,
                number=row["voucher__number"],
                voucher_type=row["voucher__voucher_type"],
                bill_date=row["voucher__date"],
                reference=row["voucher__reference_no"],
                narration=row["voucher__narration"],
                gross=gross,
                offset=offset,
                credit_days=credit_days,
                due_date=due,
                overdue_days=overdue_days(due, today),
            )
        )
    return bills


def _apply_allocations(bills: list[Bill]) -> None:
    if not bills:
        return

    allocated = dict(
        BillAllocation.objects.filter(bill_id__in={b.voucher_id for b in bills})
        .values("bill_id")
        .annotate(total=money_sum())
        .order_by("bill_id")
        .values_list("bill_id", "total")
    )
    # an allocation targets the voucher; the first party line on it takes it
    for bill in bills:
        amount = allocated.pop(bill.voucher_id, None)
        if amount is not None:
            bill.allocated = amount


# =====================================================
# SETTLEMENTS (PER PARTY, AGGREGATE)
# =====================================================

@dataclass
class PartySettlements:
    total: Decimal = ZERO
    last_date: date | None = None
    last_amount: Decimal = ZERO


def _load_settlements(role: PartyRole, party_ids) -> dict[int, PartySettlements]:
    party_ids = list(party_ids)
    if not party_ids:
        return {}

    rows = (
        VoucherEntry.objects.filter(
            voucher__voucher_type__in=SETTLEMENT_TYPES,
            entry_type=role.settlement_side,
            ledger_id__in=party_ids,
        )
        .values("ledger_id", "voucher_id", "voucher__date")
        .annotate(amount=money_sum())
        .order_by("ledger_id", "voucher__date", "voucher_id")
    )

    settlements: dict[int, PartySettlements] = {}
    for row in rows:
        s = settlements.setdefault(row["ledger_id"], PartySettlements())
        s.total += row["amount"]
        s.last_date = row["voucher__date"]
        s.last_amount = row["amount"]
    return settlements


# =====================================================
# PER-PARTY VIEW
# =====================================================

@dataclass
class PartyOutstanding:
    party: Ledger
    bills: list[Bill]
    settlements: PartySettlements
    risk_category: str = ""
    ageing: dict[str, Decimal] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.party.name

    @property
    def total_billed(self) -> Decimal:
        return sum((b.amount for b in self.bills), ZERO)

    @property
    def total_outstanding(self) -> Decimal:
        return self.total_billed - self.settlements.total

    @property
    def current_due(self) -> Decimal:
        return sum((b.amount for b in self.bills if b.overdue_days == 0), ZERO)

    @property
    def overdue(self) -> Decimal:
        return sum((b.amount for b in self.bills if b.overdue_days > 0), ZERO)

    @property
    def max_overdue_days(self) -> int:
        return max((b.overdue_days for b in self.bills), default=0)

    def as_dict(self, role: PartyRole) -> dict:
        party = self.party
        label = role.party_label
        last = self.settlements
        oldest = min((b.bill_date for b in self.bills), default=None)

        return {
            "id": party.id,
            role.name_key: party.name,
            f"{label}Group": party.group.name if party.group_id else "",
            "address": party.address,
            "phone": party.phone,
            "email": party.email,
            "gstNumber": party.gst_number,
            "panNumber": party.pan_number,
            "creditDays": _credit_days_for(party),
            "totalBilled": to_major_number(self.total_billed),
            "totalSettled": to_major_number(last.total),
            "totalOutstanding": to_major_number(self.total_outstanding),
            "totalOutstandingMinor": to_minor_int(self.total_outstanding),
            "currentDue": to_major_number(self.current_due),
            "overdue": to_major_number(self.overdue),
            "maxOverdueDays": self.max_overdue_days,
            "ageingBreakdown": {k: to_major_number(v) for k, v in self.ageing.items()},
            "lastPayment": (
                {"date": last.last_date.isoformat(), "amount": to_major_number(last.last_amount)}
                if last.last_date
                else None
            ),
            "oldestBillDate": oldest.isoformat() if oldest else None,
            "totalBills": len(self.bills),
            "riskCategory": self.risk_category,
        }


def _party_positions(role: PartyRole, *, search_term="", group_name="", today: date) -> list[PartyOutstanding]:
    parties = {p.id: p for p in search_ledgers(search=search_term, group_name=group_name)}
    bills = _load_bills(role, parties, today=today)

    by_party: dict[int, list[Bill]] = {}
    for bill in bills:
        by_party.setdefault(bill.party.id, []).append(bill)

    settlements = _load_settlements(role, by_party)
    table = risk_table_for(role.key)

    positions = []
    for party_id, party_bills in by_party.items():
        position = PartyOutstanding(
            party=parties[party_id],
            bills=party_bills,
            settlements=settlements.get(party_id, PartySettlements()),
        )
        ageing = {label: ZERO for label in bucket_labels(STANDARD_BUCKETS)}
        for bill in party_bills:
            ageing[bucket_for(bill.overdue_days, STANDARD_BUCKETS).label] += bill.amount
        position.ageing = ageing
        position.risk_category = table.classify(
            max(position.total_outstanding, ZERO), position.max_overdue_days
        )
        positions.append(position)

    positions.sort(key=lambda p: p.party.id)
    return positions


def _parse_risk(value) -> str:
    wanted = str(value or "").strip()
    if not wanted:
        return ""
    for tier in RISK_TIERS:
        if tier.lower() == wanted.lower():
            return tier
    raise ReportParameterError(
        f"Invalid risk category '{value}'. Expected one of: {', '.join(RISK_TIERS)}",
        field="riskCategory",
    )


def _sorted_page(items: list, *, sort_keys: dict, sort_by, sort_order, limit, offset) -> list:
    sort_by = str(sort_by or "amount").strip()
    if sort_by not in sort_keys:
        raise ReportParameterError(
            f"Invalid sortBy '{sort_by}'. Expected one of: {', '.join(sort_keys)}",
            field="sortBy",
        )

    sort_order = str(sort_order or "desc").strip().lower()
    if sort_order not in SORT_ORDERS:
        raise ReportParameterError("sortOrder must be 'asc' or 'desc'", field="sortOrder")

    # stable sort: ties keep the id order the items arrived in
    ordered = sorted(items, key=sort_keys[sort_by], reverse=sort_order == "desc")

    offset = max(0, int(offset or 0))
    if limit is None:
        return ordered[offset:]
    return ordered[offset : offset + max(0, int(limit))]


def party_outstanding(
    role,
    *,
    search_term: str = "",
    group_name: str = "",
    risk_category: str = "",
    sort_by: str = "amount",
    sort_order: str = "desc",
    limit: int | None = 100,
    offset: int = 0,
    today: date | None = None,
) -> list[dict]:
    role = get_role(role)
    today = today or timezone.localdate()
    risk = _parse_risk(risk_category)

    positions = _party_positions(role, search_term=search_term, group_name=group_name, today=today)
    if risk:
        positions = [p for p in positions if p.risk_category == risk]

    name_key = lambda p: (p.name.casefold(), p.party.id)  # noqa: E731
    sort_keys = {
        "amount": lambda p: p.total_outstanding,
        "overdue": lambda p: (p.overdue, p.max_overdue_days),
        "party": name_key,
        role.party_label: name_key,
        "risk": lambda p: (risk_rank(p.risk_category), p.total_outstanding),
    }
    page = _sorted_page(
        positions,
        sort_keys=sort_keys,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    return [p.as_dict(role) for p in page]


# =====================================================
# PER-BILL VIEW
# =====================================================

def _bill_dict(role: PartyRole, bill: Bill, risk_category: str) -> dict:
    party = bill.party
    return {
        "id": bill.voucher_id,
        "billNo": bill.number,
        "billDate": bill.bill_date.isoformat(),
        "dueDate": bill.due_date.isoformat(),
        "voucherType": bill.voucher_type,
        "reference": bill.reference,
        "narration": bill.narration,
        "partyId": party.id,
        role.name_key: party.name,
        "partyGroup": party.group.name if party.group_id else "",
        "partyAddress": party.address,
        "partyPhone": party.phone,
        "partyGstNumber": party.gst_number,
        "billAmount": to_major_number(bill.gross),
        "settledAmount": to_major_number(bill.settled),
        "allocatedAmount": to_major_number(bill.allocated),
        "outstandingAmount": to_major_number(bill.outstanding),
        "outstandingAmountMinor": to_minor_int(bill.outstanding),
        "creditDays": bill.credit_days,
        "overdueDays": bill.overdue_days,
        "ageingBucket": bucket_for(bill.overdue_days, STANDARD_BUCKETS).label,
        "riskCategory": risk_category,
    }


def _open_bills(role: PartyRole, *, search_term="", today: date) -> list[Bill]:
    parties = {p.id: p for p in search_ledgers(search=search_term)}
    bills = _load_bills(role, parties, today=today)
    _apply_allocations(bills)
    return [b for b in bills if b.outstanding > 0]


def billwise_outstanding(
    role,
    *,
    search_term: str = "",
    party_name: str = "",
    ageing_bucket: str = "",
    risk_category: str = "",
    sort_by: str = "amount",
    sort_order: str = "desc",
    limit: int | None = None,
    offset: int = 0,
    today: date | None = None,
) -> list[dict]:
    role = get_role(role)
    today = today or timezone.localdate()
    risk = _parse_risk(risk_category)

    bucket = str(ageing_bucket or "").strip()
    if bucket and bucket not in bucket_labels(STANDARD_BUCKETS):
        raise ReportParameterError(
            f"Invalid ageing bucket '{ageing_bucket}'. "
            f"Expected one of: {', '.join(bucket_labels(STANDARD_BUCKETS))}",
            field="selectedAgeingBucket",
        )

    table = risk_table_for(role.key)
    rated = [
        (bill, table.classify(bill.outstanding, bill.overdue_days))
        for bill in _open_bills(role, search_term=search_term, today=today)
    ]

    party_name = str(party_name or "").strip().casefold()
    if party_name:
        rated = [r for r in rated if r[0].party.name.casefold() == party_name]
    if bucket:
        rated = [r for r in rated if bucket_for(r[0].overdue_days, STANDARD_BUCKETS).label == bucket]
    if risk:
        rated = [r for r in rated if r[1] == risk]

    name_key = lambda r: (r[0].party.name.casefold(), r[0].bill_date, r[0].voucher_id)  # noqa: E731
    sort_keys = {
        "amount": lambda r: r[0].outstanding,
        "overdue": lambda r: r[0].overdue_days,
        "party": name_key,
        role.party_label: name_key,
        "date": lambda r: (r[0].bill_date, r[0].voucher_id),
        "risk": lambda r: (risk_rank(r[1]), r[0].outstanding),
    }
    page = _sorted_page(
        rated,
        sort_keys=sort_keys,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )
    return [_bill_dict(role, bill, risk) for bill, risk in page]


# =====================================================
# SUMMARY & OUTSTANDING LEDGER
# =====================================================

def outstanding_summary(*, today: date | None = None) -> dict:
    today = today or timezone.localdate()

    result = {"asOf": today.isoformat()}
    totals = {}
    for role, prefix in ((RECEIVABLE, "Receivables"), (PAYABLE, "Payables")):
        positions = _party_positions(role, today=today)
        total = sum((p.total_outstanding for p in positions), ZERO)
        overdue = sum((p.overdue for p in positions), ZERO)
        totals[role.key] = total

        result[f"total{prefix}"] = to_major_number(total)
        result[f"total{prefix}Minor"] = to_minor_int(total)
        result[f"overdue{prefix}"] = to_major_number(overdue)
        result[f"{role.party_label}Count"] = len(positions)

    net = totals[RECEIVABLE.key] - totals[PAYABLE.key]
    result["netOutstanding"] = to_major_number(net)
    result["netOutstandingMinor"] = to_minor_int(net)
    return result


def outstanding_ledger(
    *,
    ledger_name: str = "",
    search_term: str = "",
    from_date: date | None = None,
    to_date: date | None = None,
    today: date | None = None,
) -> list[dict]:
    """
    Open bills (both roles) grouped per party ledger.
    """
    today = today or timezone.localdate()
    if from_date and to_date and from_date > to_date:
        raise ReportParameterError("from must be on or before to", field="from")

    ledger_name = str(ledger_name or "").strip().casefold()
    term = str(search_term or "").strip().casefold()

    grouped: dict[int, dict] = {}
    for role in (RECEIVABLE, PAYABLE):
        for bill in _open_bills(role, today=today):
            if ledger_name and bill.party.name.casefold() != ledger_name:
                continue
            if from_date and bill.bill_date < from_date:
                continue
            if to_date and bill.bill_date > to_date:
                continue
            if term and not any(
                term in (text or "").casefold()
                for text in (bill.number, bill.voucher_type, bill.party.name)
            ):
                continue

            group = grouped.setdefault(
                bill.party.id,
                {"id": bill.party.id, "ledgerName": bill.party.name, "entries": [], "_pending": ZERO},
            )
            group["_pending"] += bill.outstanding
            group["entries"].append(
                {
                    "id": bill.voucher_id,
                    "role": role.key,
                    "date": bill.bill_date.isoformat(),
                    "refNo": bill.number,
                    "particular": bill.voucher_type,
                    "openingAmount": to_major_number(bill.gross),
                    "pendingAmount": to_major_number(bill.outstanding),
                    "dueOn": bill.due_date.isoformat(),
                    "overdueByDays": bill.overdue_days,
                }
            )

    result = []
    for group in sorted(grouped.values(), key=lambda g: (g["ledgerName"].casefold(), g["id"])):
        group["entries"].sort(key=lambda e: (e["date"], e["id"]), reverse=True)
        group["totalPending"] = to_major_number(group.pop("_pending"))
        result.append(group)
    return result
