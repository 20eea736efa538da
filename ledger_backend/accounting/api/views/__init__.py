# accounting/api/views/__init__.py

"""
accounting.api.views package

Do NOT import accounting.api.urls from here to avoid circular imports.
"""

from accounting.api.views.balance_sheet import BalanceSheetView
from accounting.api.views.cash_flow import CashFlowMonthSummaryView, CashFlowView
from accounting.api.views.group_summary import GroupSummaryView
from accounting.api.views.ledger_report import LedgerReportView
from accounting.api.views.outstanding import (
    BillwisePayablesView,
    BillwiseReceivablesView,
    OutstandingLedgerView,
    OutstandingPayablesView,
    OutstandingReceivablesView,
    OutstandingSummaryView,
)
from accounting.api.views.profit_and_loss import ProfitAndLossView
from accounting.api.views.registry import (
    CashBankLedgerListView,
    LedgerDetailView,
    LedgerGroupListView,
    LedgerListView,
)
from accounting.api.views.trial_balance import TrialBalanceView

__all__ = [
    "LedgerListView",
    "LedgerDetailView",
    "CashBankLedgerListView",
    "LedgerGroupListView",
    "LedgerReportView",
    "TrialBalanceView",
    "ProfitAndLossView",
    "BalanceSheetView",
    "GroupSummaryView",
    "OutstandingReceivablesView",
    "OutstandingPayablesView",
    "BillwiseReceivablesView",
    "BillwisePayablesView",
    "OutstandingSummaryView",
    "OutstandingLedgerView",
    "CashFlowView",
    "CashFlowMonthSummaryView",
]
