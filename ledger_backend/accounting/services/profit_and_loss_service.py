# accounting/services/profit_and_loss_service.py

"""
PROFIT & LOSS SERVICE (INCOME STATEMENT)

Income ledgers are credit-normal, expense ledgers debit-normal:
- income   = credits - debits
- expenses = debits - credits
- net profit = income - expenses
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from accounting.models.ledger_group import LedgerGroup
from accounting.services.financial_statement_service import (
    ledger_positions,
    parse_mode,
    section,
)
from accounting.services.money import to_major_number, to_minor_int


def compute_net_profit(positions) -> tuple[dict, dict, Decimal]:
    income = section([p for p in positions if p.group_type == LedgerGroup.INCOME], sign=-1)
    expenses = section([p for p in positions if p.group_type == LedgerGroup.EXPENSE])
    return income, expenses, income["_total"] - expenses["_total"]


def get_profit_and_loss(*, mode: str = "static", as_of: date | None = None) -> dict:
    mode = parse_mode(mode)
    positions = ledger_positions(mode=mode, as_of=as_of)

    income, expenses, net_profit = compute_net_profit(positions)
    income.pop("_total")
    expenses.pop("_total")

    return {
        "mode": mode,
        "asOf": as_of.isoformat() if as_of else None,
        "income": income,
        "expenses": expenses,
        "totalIncome": income["total"],
        "totalExpenses": expenses["total"],
        "netProfit": to_major_number(net_profit),
        "netProfitMinor": to_minor_int(net_profit),
        "isProfit": net_profit >= 0,
    }
