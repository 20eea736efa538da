# accounting/tests/test_statements.py

from datetime import date

from django.test import TestCase

from accounting.models import Ledger, LedgerGroup
from accounting.services.balance_sheet_service import get_balance_sheet
from accounting.services.exceptions import ReportParameterError
from accounting.services.financial_statement_service import UNCLASSIFIED, parse_mode
from accounting.services.profit_and_loss_service import get_profit_and_loss
from accounting.services.trial_balance_service import TrialBalanceService
from accounting.tests.factories import (
    api_client_for,
    line,
    make_group,
    make_ledger,
    make_user,
    post,
)
from permissions.roles import ROLE_ACCOUNTANT


class FinancialStatementTests(TestCase):
    """
    Trial balance, P&L and balance sheet from one set of positions.

    GUARANTEES:
    - Static mode reads opening balances only
    - Transactions mode adds every posted line up to asOf
    - The balance sheet balances once current earnings join capital
    """

    def setUp(self):
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        capital_group = make_group("Capital Account", LedgerGroup.CAPITAL)
        income = make_group("Sales Accounts", LedgerGroup.INCOME)
        expense = make_group("Indirect Expenses", LedgerGroup.EXPENSE)

        self.cash = make_ledger("Cash", group=cash_group, opening="1000")
        self.capital = make_ledger(
            "Owner Capital", group=capital_group, opening="1000", balance_type=Ledger.CREDIT
        )
        self.sales = make_ledger("Sales", group=income, balance_type=Ledger.CREDIT)
        self.rent = make_ledger("Rent", group=expense)

        post(
            "journal",
            date(2024, 4, 2),
            [line(self.cash, "debit", 300), line(self.sales, "credit", 300)],
        )
        post(
            "payment",
            date(2024, 4, 20),
            [line(self.rent, "debit", 100), line(self.cash, "credit", 100)],
        )

    # --------------------------------------------------
    # Trial balance
    # --------------------------------------------------

    def test_static_trial_balance_ignores_vouchers(self):
        data = TrialBalanceService().generate(mode="static")

        self.assertEqual(data["totalDebit"], 1000.0)
        self.assertEqual(data["totalCredit"], 1000.0)
        self.assertTrue(data["balanced"])
        self.assertEqual(set(data["groupedData"]), {"Cash", "Capital", "Income", "Expense"})

    def test_transactions_trial_balance_includes_posted_lines(self):
        data = TrialBalanceService().generate(mode="transactions")

        # cash 1200 + rent 100 = capital 1000 + sales 300
        self.assertEqual(data["totalDebit"], 1300.0)
        self.assertEqual(data["totalCredit"], 1300.0)
        self.assertEqual(data["totalDebitMinor"], 130000)
        self.assertEqual(data["difference"], 0.0)
        self.assertTrue(data["balanced"])

    def test_as_of_cuts_off_later_vouchers(self):
        data = TrialBalanceService().generate(mode="transactions", as_of=date(2024, 4, 10))

        self.assertEqual(data["totalDebit"], 1300.0)
        cash_rows = data["groupedData"]["Cash"]["groups"][0]["ledgers"]
        self.assertEqual(cash_rows[0]["debit"], 1300.0)
        self.assertEqual(data["asOf"], "2024-04-10")

    def test_each_ledger_appears_once(self):
        data = TrialBalanceService().generate(mode="transactions")

        ids = [
            row["id"]
            for section in data["groupedData"].values()
            for group in section["groups"]
            for row in group["ledgers"]
        ]
        self.assertEqual(sorted(ids), sorted([self.cash.id, self.capital.id, self.sales.id, self.rent.id]))

    def test_ungrouped_and_inactive_ledgers(self):
        make_ledger("Suspense", opening="50")
        make_ledger("Closed Bank", opening="75", is_active=False)

        data = TrialBalanceService().generate(mode="static")

        self.assertIn(UNCLASSIFIED, data["groupedData"])
        self.assertEqual(data["groupedData"][UNCLASSIFIED]["totalDebit"], 50.0)
        self.assertFalse(data["balanced"])
        self.assertEqual(data["difference"], 50.0)

    # --------------------------------------------------
    # P&L and balance sheet
    # --------------------------------------------------

    def test_profit_and_loss(self):
        data = get_profit_and_loss(mode="transactions")

        self.assertEqual(data["totalIncome"], 300.0)
        self.assertEqual(data["totalExpenses"], 100.0)
        self.assertEqual(data["netProfit"], 200.0)
        self.assertEqual(data["netProfitMinor"], 20000)
        self.assertTrue(data["isProfit"])

    def test_static_profit_and_loss_is_flat(self):
        data = get_profit_and_loss(mode="static")

        self.assertEqual(data["netProfit"], 0.0)
        self.assertTrue(data["isProfit"])

    def test_balance_sheet_balances_with_current_earnings(self):
        data = get_balance_sheet(mode="transactions")

        self.assertEqual(data["assets"]["total"], 1200.0)
        self.assertEqual(data["capital"]["currentPeriodEarnings"], 200.0)
        self.assertEqual(data["capital"]["total"], 1200.0)
        self.assertEqual(data["totals"]["assets"], 1200.0)
        self.assertEqual(data["totals"]["liabilitiesAndCapital"], 1200.0)
        self.assertTrue(data["totals"]["balanced"])

    def test_unknown_mode(self):
        with self.assertRaises(ReportParameterError):
            parse_mode("ledger")

    def test_repeated_reads_are_identical(self):
        client = api_client_for(make_user("acct", roles=[ROLE_ACCOUNTANT]))
        params = {"mode": "transactions", "asOf": "2024-04-30"}

        for url in ("/api/trial-balance", "/api/balance-sheet"):
            first = client.get(url, params)
            second = client.get(url, params)
            self.assertEqual(first.status_code, 200, url)
            self.assertEqual(first.content, second.content, url)


class StatementApiTests(TestCase):
    def setUp(self):
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        income = make_group("Sales Accounts", LedgerGroup.INCOME)
        make_ledger("Cash", group=cash_group, opening="500")
        make_ledger("Sales", group=income, opening="500", balance_type=Ledger.CREDIT)

        self.client = api_client_for(make_user("acct", roles=[ROLE_ACCOUNTANT]))

    def test_endpoints_return_200(self):
        for url in ("/api/trial-balance", "/api/profit-loss", "/api/balance-sheet", "/api/group-summary"):
            res = self.client.get(url, {"mode": "transactions", "asOf": "2024-04-30"})
            self.assertEqual(res.status_code, 200, url)
            self.assertEqual(res.data["mode"], "transactions")

    def test_trial_balance_default_mode_is_static(self):
        res = self.client.get("/api/trial-balance")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["mode"], "static")
        self.assertTrue(res.data["balanced"])

    def test_invalid_mode_is_400(self):
        res = self.client.get("/api/trial-balance", {"mode": "bogus"})
        self.assertEqual(res.status_code, 400)

    def test_group_summary_filters_by_type(self):
        res = self.client.get("/api/group-summary", {"groupType": "income"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual([g["groupType"] for g in res.data["groups"]], ["Income"])

    def test_group_summary_rejects_unknown_type(self):
        res = self.client.get("/api/group-summary", {"groupType": "Receivables"})

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["field"], "groupType")
