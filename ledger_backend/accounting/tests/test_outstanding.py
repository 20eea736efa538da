# accounting/tests/test_outstanding.py

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from accounting.models import Ledger, LedgerGroup
from accounting.services.ageing import HIGH, LOW
from accounting.services.exceptions import ReportParameterError, UnknownPartyRoleError
from accounting.services.outstanding_service import (
    PAYABLE,
    RECEIVABLE,
    billwise_outstanding,
    outstanding_summary,
    party_outstanding,
)
from accounting.tests.factories import (
    api_client_for,
    line,
    make_group,
    make_ledger,
    make_user,
    post,
)
from permissions.roles import ROLE_AUDITOR


class OutstandingTests(TestCase):
    """
    Receivables from sales vouchers, reduced by receipts.

    GUARANTEES:
    - Per party: settlements are netted in aggregate against billed totals
    - Per bill: only explicit allocations reduce a bill
    - Fully settled bills drop out of the bill-wise view
    - Zero matching parties is an empty list, never an error
    """

    def setUp(self):
        self.today = timezone.localdate()

        debtors = make_group("Sundry Debtors", LedgerGroup.ASSET)
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        income = make_group("Sales Accounts", LedgerGroup.INCOME)

        self.acme = make_ledger("Acme Traders", group=debtors, credit_days=30, phone="98450")
        self.beta = make_ledger("Beta Stores", group=debtors, credit_days=30)
        self.cash = make_ledger("Cash", group=cash_group)
        self.sales = make_ledger("Sales", group=income, balance_type=Ledger.CREDIT)

        # due 70 days ago
        self.acme_bill = post(
            "sales",
            self.today - timedelta(days=100),
            [line(self.acme, "debit", 60000), line(self.sales, "credit", 60000)],
            mode="accounting",
            number="S-1",
            party_id=self.acme.id,
        )
        # not yet due
        self.beta_bill = post(
            "sales",
            self.today - timedelta(days=5),
            [line(self.beta, "debit", 5000), line(self.sales, "credit", 5000)],
            mode="accounting",
            number="S-2",
            party_id=self.beta.id,
        )
        post(
            "receipt",
            self.today - timedelta(days=10),
            [line(self.cash, "debit", 20000), line(self.acme, "credit", 20000)],
            allocations=[{"bill_id": self.acme_bill.id, "amount": "20000"}],
        )

    # --------------------------------------------------
    # Per party
    # --------------------------------------------------

    def test_party_totals_and_risk(self):
        rows = party_outstanding(RECEIVABLE, today=self.today)

        self.assertEqual([r["customerName"] for r in rows], ["Acme Traders", "Beta Stores"])
        acme = rows[0]
        self.assertEqual(acme["totalBilled"], 60000.0)
        self.assertEqual(acme["totalSettled"], 20000.0)
        self.assertEqual(acme["totalOutstanding"], 40000.0)
        self.assertEqual(acme["totalOutstandingMinor"], 4000000)
        self.assertEqual(acme["maxOverdueDays"], 70)
        self.assertEqual(acme["ageingBreakdown"]["61-90"], 60000.0)
        self.assertEqual(acme["overdue"], 60000.0)
        self.assertEqual(acme["currentDue"], 0.0)
        self.assertEqual(acme["riskCategory"], HIGH)
        self.assertEqual(acme["customerGroup"], "Sundry Debtors")
        self.assertIsNotNone(acme["lastPayment"])

        beta = rows[1]
        self.assertEqual(beta["totalOutstanding"], 5000.0)
        self.assertEqual(beta["currentDue"], 5000.0)
        self.assertEqual(beta["riskCategory"], LOW)
        self.assertIsNone(beta["lastPayment"])

    def test_sorting_and_paging(self):
        rows = party_outstanding(RECEIVABLE, sort_by="amount", sort_order="asc", today=self.today)
        self.assertEqual([r["id"] for r in rows], [self.beta.id, self.acme.id])

        rows = party_outstanding(RECEIVABLE, limit=1, offset=1, today=self.today)
        self.assertEqual([r["id"] for r in rows], [self.beta.id])

    def test_risk_filter(self):
        rows = party_outstanding(RECEIVABLE, risk_category="high", today=self.today)
        self.assertEqual([r["id"] for r in rows], [self.acme.id])

    def test_no_matching_party_is_empty(self):
        self.assertEqual(party_outstanding(RECEIVABLE, search_term="zzz", today=self.today), [])
        self.assertEqual(party_outstanding(PAYABLE, today=self.today), [])

    def test_bad_sort_key_is_rejected(self):
        with self.assertRaises(ReportParameterError) as ctx:
            party_outstanding(RECEIVABLE, sort_by="balance", today=self.today)
        self.assertEqual(ctx.exception.field, "sortBy")

    def test_unknown_role_is_rejected(self):
        with self.assertRaises(UnknownPartyRoleError):
            party_outstanding("vendor", today=self.today)

    # --------------------------------------------------
    # Per bill
    # --------------------------------------------------

    def test_billwise_uses_allocations(self):
        rows = billwise_outstanding(RECEIVABLE, today=self.today)

        self.assertEqual([r["billNo"] for r in rows], ["S-1", "S-2"])
        bill = rows[0]
        self.assertEqual(bill["billAmount"], 60000.0)
        self.assertEqual(bill["allocatedAmount"], 20000.0)
        self.assertEqual(bill["outstandingAmount"], 40000.0)
        self.assertEqual(bill["overdueDays"], 70)
        self.assertEqual(bill["ageingBucket"], "61-90")
        self.assertEqual(bill["riskCategory"], HIGH)
        self.assertEqual(bill["partyPhone"], "98450")

    def test_settled_bill_drops_out(self):
        post(
            "receipt",
            self.today,
            [line(self.cash, "debit", 5000), line(self.beta, "credit", 5000)],
            allocations=[{"bill_id": self.beta_bill.id, "amount": "5000"}],
        )

        rows = billwise_outstanding(RECEIVABLE, today=self.today)
        self.assertEqual([r["billNo"] for r in rows], ["S-1"])

    def test_billwise_filters(self):
        rows = billwise_outstanding(RECEIVABLE, ageing_bucket="0-30", today=self.today)
        self.assertEqual([r["billNo"] for r in rows], ["S-2"])

        rows = billwise_outstanding(RECEIVABLE, party_name="acme traders", today=self.today)
        self.assertEqual([r["billNo"] for r in rows], ["S-1"])

        with self.assertRaises(ReportParameterError):
            billwise_outstanding(RECEIVABLE, ageing_bucket="120+", today=self.today)

    def test_summary(self):
        data = outstanding_summary(today=self.today)

        self.assertEqual(data["totalReceivables"], 45000.0)
        self.assertEqual(data["totalPayables"], 0.0)
        self.assertEqual(data["customerCount"], 2)
        self.assertEqual(data["supplierCount"], 0)
        self.assertEqual(data["netOutstanding"], 45000.0)

    # --------------------------------------------------
    # API
    # --------------------------------------------------

    def test_api_endpoints(self):
        client = api_client_for(make_user("auditor", roles=[ROLE_AUDITOR]))

        res = client.get("/api/outstanding-receivables", {"customerGroup": "Sundry Debtors"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 2)

        res = client.get("/api/outstanding-receivables", {"searchTerm": "nobody"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, [])

        res = client.get("/api/outstanding-payables")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, [])

        res = client.get("/api/billwise-receivables", {"selectedCustomer": "Beta Stores"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["billNo"] for r in res.data], ["S-2"])

        res = client.get("/api/outstanding-summary")
        self.assertEqual(res.status_code, 200)

        res = client.get("/api/outstanding-ledger", {"ledgerName": "Acme Traders"})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 1)
        self.assertEqual(res.data[0]["totalPending"], 40000.0)

    def test_api_parameter_errors(self):
        client = api_client_for(make_user("auditor", roles=[ROLE_AUDITOR]))

        res = client.get("/api/outstanding-receivables", {"sortBy": "balance"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["field"], "sortBy")

        res = client.get("/api/billwise-receivables", {"selectedRiskCategory": "Severe"})
        self.assertEqual(res.status_code, 400)

        res = client.get("/api/outstanding-receivables", {"sortOrder": "sideways"})
        self.assertEqual(res.status_code, 400)
