# accounting/services/balance_sheet_service.py

"""
BALANCE SHEET SERVICE

Sections:
- assets       Asset, Cash and Bank groups (debit-normal)
- liabilities  Liability groups (credit-normal)
- capital      Capital groups (credit-normal) + Current Period Earnings

Opening balances alone need not balance, so an imbalance is reported
through `difference` / `balanced` rather than raised.
"""

from __future__ import annotations

from datetime import date

from accounting.models.ledger_group import LedgerGroup
from accounting.services.financial_statement_service import (
    ledger_positions,
    parse_mode,
    section,
)
from accounting.services.money import to_major_number, to_minor_int
from accounting.services.profit_and_loss_service import compute_net_profit

ASSET_TYPES = (LedgerGroup.ASSET, LedgerGroup.CASH, LedgerGroup.BANK)


def get_balance_sheet(*, mode: str = "static", as_of: date | None = None) -> dict:
    mode = parse_mode(mode)
    positions = ledger_positions(mode=mode, as_of=as_of)

    assets = section([p for p in positions if p.group_type in ASSET_TYPES])
    liabilities = section(
        [p for p in positions if p.group_type == LedgerGroup.LIABILITY], sign=-1
    )
    capital = section(
        [p for p in positions if p.group_type == LedgerGroup.CAPITAL], sign=-1
    )

    _, _, earnings = compute_net_profit(positions)

    capital_total = capital["_total"] + earnings
    capital["currentPeriodEarnings"] = to_major_number(earnings)
    capital["total"] = to_major_number(capital_total)
    capital["totalMinor"] = to_minor_int(capital_total)

    total_assets = assets.pop("_total")
    total_liabilities = liabilities.pop("_total")
    capital.pop("_total")
    total_claims = total_liabilities + capital_total

    return {
        "mode": mode,
        "asOf": as_of.isoformat() if as_of else None,
        "assets": assets,
        "liabilities": liabilities,
        "capital": capital,
        "totals": {
            "assets": to_major_number(total_assets),
            "liabilitiesAndCapital": to_major_number(total_claims),
            "difference": to_major_number(total_assets - total_claims),
            "balanced": total_assets == total_claims,
        },
    }
