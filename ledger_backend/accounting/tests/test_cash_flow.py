# accounting/tests/test_cash_flow.py

from datetime import date

from django.test import SimpleTestCase, TestCase

from accounting.models import LedgerGroup
from accounting.services.cash_flow_service import (
    build_cash_flow,
    current_financial_year,
    parse_financial_year,
    parse_month_code,
)
from accounting.services.exceptions import ReportParameterError
from accounting.tests.factories import (
    api_client_for,
    line,
    make_group,
    make_ledger,
    make_user,
    post,
)


class FinancialYearParsingTests(SimpleTestCase):
    def test_short_and_long_forms(self):
        self.assertEqual(parse_financial_year("2024-25"), (date(2024, 4, 1), date(2025, 3, 31)))
        self.assertEqual(parse_financial_year("2024-2025"), (date(2024, 4, 1), date(2025, 3, 31)))
        self.assertEqual(parse_financial_year("1999-00"), (date(1999, 4, 1), date(2000, 3, 31)))

    def test_invalid_years(self):
        for value in ("2024", "2024-26", "24-25", "abcd-ef", ""):
            with self.assertRaises(ReportParameterError):
                parse_financial_year(value)

    def test_current_financial_year_turns_in_april(self):
        self.assertEqual(current_financial_year(date(2025, 3, 31)), "2024-25")
        self.assertEqual(current_financial_year(date(2025, 4, 1)), "2025-26")

    def test_month_codes(self):
        self.assertEqual(parse_month_code("Feb-24"), (date(2024, 2, 1), date(2024, 2, 29)))
        with self.assertRaises(ReportParameterError):
            parse_month_code("Foo-24")


class CashFlowTests(TestCase):
    """
    GUARANTEES:
    - Always 12 months, April to March
    - Inflow = debit lines on inflow voucher types
    - Outflow = credit lines on outflow voucher types
    """

    def setUp(self):
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        debtors = make_group("Sundry Debtors", LedgerGroup.ASSET)
        expense = make_group("Indirect Expenses", LedgerGroup.EXPENSE)

        self.cash = make_ledger("Cash", group=cash_group)
        self.party = make_ledger("Acme Traders", group=debtors)
        self.rent = make_ledger("Rent", group=expense)

        self.client = api_client_for(make_user("admin", superuser=True))

    def test_empty_year_has_twelve_zero_months(self):
        data = build_cash_flow(financial_year="2024-25")

        months = data["cashFlowData"]
        self.assertEqual(len(months), 12)
        self.assertEqual(months[0]["monthCode"], "Apr-24")
        self.assertEqual(months[-1]["monthCode"], "Mar-25")
        self.assertTrue(all(m["inflow"] == 0 and m["outflow"] == 0 for m in months))
        self.assertEqual(data["totalNetFlow"], 0.0)

    def test_inflow_and_outflow_by_month(self):
        post(
            "receipt",
            date(2024, 5, 10),
            [line(self.cash, "debit", 1000), line(self.party, "credit", 1000)],
        )
        post(
            "payment",
            date(2025, 1, 15),
            [line(self.rent, "debit", 400), line(self.cash, "credit", 400)],
        )
        # outside the year
        post(
            "receipt",
            date(2025, 4, 1),
            [line(self.cash, "debit", 999), line(self.party, "credit", 999)],
        )

        data = build_cash_flow(financial_year="2024-25")
        by_code = {m["monthCode"]: m for m in data["cashFlowData"]}

        self.assertEqual(by_code["May-24"]["inflow"], 1000.0)
        self.assertEqual(by_code["May-24"]["outflow"], 0.0)
        self.assertEqual(by_code["Jan-25"]["outflow"], 400.0)
        self.assertEqual(data["totalInflow"], 1000.0)
        self.assertEqual(data["totalOutflow"], 400.0)
        self.assertEqual(data["totalNetFlow"], 600.0)
        self.assertEqual(data["totalNetFlowMinor"], 60000)

    def test_api(self):
        post(
            "receipt",
            date(2024, 5, 10),
            [line(self.cash, "debit", 1000), line(self.party, "credit", 1000)],
        )

        res = self.client.get("/api/cash-flow", {"financialYear": "2024-25"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["cashFlowData"]), 12)

        res = self.client.get("/api/cash-flow/summary/May-24")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["totalInflow"], 1000.0)
        self.assertEqual(res.data["inflow"][0]["name"], "Cash")

    def test_api_defaults_to_current_year(self):
        res = self.client.get("/api/cash-flow")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data["cashFlowData"]), 12)

    def test_api_rejects_bad_parameters(self):
        res = self.client.get("/api/cash-flow", {"financialYear": "2024-26"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["field"], "financialYear")

        res = self.client.get("/api/cash-flow/summary/Foo-24")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["field"], "monthCode")
