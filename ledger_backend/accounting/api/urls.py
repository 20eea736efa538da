# accounting/api/urls.py

from django.urls import path

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

urlpatterns = [
    # Master data (read-only)
    path("ledger", LedgerListView.as_view(), name="ledger-list"),
    path("ledger/cash-bank", CashBankLedgerListView.as_view(), name="ledger-cash-bank"),
    path("ledger/<int:ledger_id>", LedgerDetailView.as_view(), name="ledger-detail"),
    path("ledger-groups", LedgerGroupListView.as_view(), name="ledger-groups"),
    # Ledger statement
    path("ledger-report/report", LedgerReportView.as_view(), name="ledger-report"),
    # Statements
    path("trial-balance", TrialBalanceView.as_view(), name="trial-balance"),
    path("profit-loss", ProfitAndLossView.as_view(), name="profit-loss"),
    path("balance-sheet", BalanceSheetView.as_view(), name="balance-sheet"),
    path("group-summary", GroupSummaryView.as_view(), name="group-summary"),
    # Outstanding
    path("outstanding-receivables", OutstandingReceivablesView.as_view(), name="outstanding-receivables"),
    path("outstanding-payables", OutstandingPayablesView.as_view(), name="outstanding-payables"),
    path("billwise-receivables", BillwiseReceivablesView.as_view(), name="billwise-receivables"),
    path("billwise-payables", BillwisePayablesView.as_view(), name="billwise-payables"),
    path("outstanding-summary", OutstandingSummaryView.as_view(), name="outstanding-summary"),
    path("outstanding-ledger", OutstandingLedgerView.as_view(), name="outstanding-ledger"),
    # Cash flow
    path("cash-flow", CashFlowView.as_view(), name="cash-flow"),
    path(
        "cash-flow/summary/<str:month_code>",
        CashFlowMonthSummaryView.as_view(),
        name="cash-flow-month-summary",
    ),
]
