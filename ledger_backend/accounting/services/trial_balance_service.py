# accounting/services/trial_balance_service.py

from __future__ import annotations

from datetime import date

from accounting.services.financial_statement_service import (
    TYPE_ORDER,
    ledger_positions,
    parse_mode,
)
from accounting.services.money import ZERO, to_major_number, to_minor_int


class TrialBalanceService:
    """
    Trial Balance computation service.

    Guarantees:
    - Every active ledger appears exactly once, on its debit or credit side
    - Ledgers are grouped by group type, then by ledger group
    - Returns JSON-safe numeric values (no Decimals)
    """

    def __init__(self, positions_provider=ledger_positions):
        self.positions_provider = positions_provider

    def generate(self, *, mode: str = "static", as_of: date | None = None) -> dict:
        mode = parse_mode(mode)
        positions = self.positions_provider(mode=mode, as_of=as_of)

        grouped: dict[str, dict] = {}
        total_debit = ZERO
        total_credit = ZERO

        for gtype in TYPE_ORDER:
            members = [p for p in positions if p.group_type == gtype]
            if not members:
                continue

            groups: dict[tuple, dict] = {}
            type_debit = ZERO
            type_credit = ZERO

            for p in members:
                group = groups.setdefault(
                    (p.group_name, p.group_id),
                    {
                        "groupId": p.group_id,
                        "groupName": p.group_name or gtype,
                        "ledgers": [],
                        "_debit": ZERO,
                        "_credit": ZERO,
                    },
                )
                group["ledgers"].append(p.as_row())
                group["_debit"] += p.debit
                group["_credit"] += p.credit
                type_debit += p.debit
                type_credit += p.credit

            ordered = []
            for key in sorted(groups, key=lambda k: (k[0], k[1] or 0)):
                group = groups[key]
                group["totalDebit"] = to_major_number(group.pop("_debit"))
                group["totalCredit"] = to_major_number(group.pop("_credit"))
                ordered.append(group)

            grouped[gtype] = {
                "groupType": gtype,
                "groups": ordered,
                "totalDebit": to_major_number(type_debit),
                "totalCredit": to_major_number(type_credit),
            }
            total_debit += type_debit
            total_credit += type_credit

        return {
            "mode": mode,
            "asOf": as_of.isoformat() if as_of else None,
            "groupedData": grouped,
            "totalDebit": to_major_number(total_debit),
            "totalCredit": to_major_number(total_credit),
            "totalDebitMinor": to_minor_int(total_debit),
            "totalCreditMinor": to_minor_int(total_credit),
            "difference": to_major_number(total_debit - total_credit),
            "balanced": total_debit == total_credit,
        }
