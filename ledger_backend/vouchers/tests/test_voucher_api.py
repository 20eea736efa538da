# vouchers/tests/test_voucher_api.py

from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from accounting.models import Ledger, LedgerGroup
from accounting.tests.factories import (
    api_client_for,
    make_group,
    make_item,
    make_ledger,
    make_user,
)
from permissions.roles import ROLE_ACCOUNTANT, ROLE_AUDITOR, ROLE_STOREKEEPER
from vouchers.models import NoteVoucher, TradeInvoice, TradeInvoiceItem, Voucher, VoucherEntry


class VoucherPostingApiTests(TestCase):
    """
    HTTP contract of the posting endpoints.

    GUARANTEES:
    - 201 with the stored id on success
    - 400 with per-field messages on validation failures
    - 400 listing missing ids on unknown references
    - 500 with a generic message when the write itself fails
    """

    def setUp(self):
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        debtors = make_group("Sundry Debtors", LedgerGroup.ASSET)
        income = make_group("Sales Accounts", LedgerGroup.INCOME)

        self.cash = make_ledger("Cash", group=cash_group)
        self.customer = make_ledger("Acme Traders", group=debtors)
        self.sales = make_ledger("Sales", group=income, balance_type=Ledger.CREDIT)
        self.soap = make_item("Soap", sale_rate="50")

        self.client = api_client_for(make_user("acct", roles=[ROLE_ACCOUNTANT]))

    def _receipt(self, **overrides):
        body = {
            "type": "receipt",
            "date": "2024-04-15",
            "voucherNumber": "R-7",
            "narration": "Against INV-1",
            "entries": [
                {"ledgerId": self.cash.id, "type": "debit", "amount": 750, "chequeNo": "000123"},
                {"ledgerId": self.customer.id, "type": "credit", "amount": 750},
            ],
        }
        body.update(overrides)
        return body

    # --------------------------------------------------
    # /api/vouchers
    # --------------------------------------------------

    def test_post_receipt(self):
        res = self.client.post("/api/vouchers", self._receipt(), format="json")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["message"], "Receipt voucher saved successfully")
        self.assertEqual(res.data["ledgerLines"], 2)

        voucher = Voucher.objects.get(pk=res.data["id"])
        self.assertEqual(voucher.number, "R-7")
        entry = VoucherEntry.objects.get(voucher=voucher, ledger=self.cash)
        self.assertEqual(entry.cheque_number, "000123")

    def test_missing_fields(self):
        res = self.client.post("/api/vouchers", self._receipt(date=""), format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("date", res.data["fields"])

    def test_unbalanced(self):
        body = self._receipt()
        body["entries"][1]["amount"] = 700
        res = self.client.post("/api/vouchers", body, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("entries", res.data["fields"])
        self.assertEqual(Voucher.objects.count(), 0)

    def test_unknown_ledger(self):
        body = self._receipt()
        body["entries"][0]["ledgerId"] = 424242
        res = self.client.post("/api/vouchers", body, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["missing"]["ledgers"], [424242])

    def test_unknown_type(self):
        res = self.client.post("/api/vouchers", self._receipt(type="gift"), format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("type", res.data["fields"])

    def test_item_invoice_needs_its_own_endpoint(self):
        body = {
            "type": "sales",
            "date": "2024-04-15",
            "partyId": self.customer.id,
            "entries": [{"stockItemId": self.soap.id, "quantity": 1, "rate": 50}],
        }
        res = self.client.post("/api/vouchers", body, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("type", res.data["fields"])
        self.assertEqual(TradeInvoice.objects.count(), 0)

    def test_malformed_bodies(self):
        res = self.client.post("/api/vouchers", [1, 2], format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.post("/api/vouchers", self._receipt(entries="cash"), format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("entries", res.data["fields"])

    def test_write_failure_is_500(self):
        with mock.patch.object(VoucherEntry.objects, "bulk_create", side_effect=DatabaseError("disk full")):
            res = self.client.post("/api/vouchers", self._receipt(), format="json")

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.data, {"detail": "Failed to save voucher"})
        self.assertEqual(Voucher.objects.count(), 0)

    # --------------------------------------------------
    # Dedicated endpoints
    # --------------------------------------------------

    def test_sales_item_invoice(self):
        body = {
            "date": "2024-04-15",
            "voucherNo": "INV-1",
            "customerId": self.customer.id,
            "salesLedgerId": self.sales.id,
            "entries": [
                {"stockItemId": self.soap.id, "quantity": 4, "rate": 50, "cgstRate": 9, "sgstRate": 9},
                {"stockItemId": self.soap.id, "quantity": 1, "rate": 50, "discount": 5},
            ],
        }
        res = self.client.post("/api/sale-vouchers/vouchers", body, format="json")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["voucherType"], "sales")
        self.assertEqual(res.data["mode"], "item-invoice")
        self.assertEqual(res.data["itemLines"], 2)

        invoice = TradeInvoice.objects.get(pk=res.data["id"])
        self.assertEqual(invoice.party_id, self.customer.id)
        self.assertEqual(invoice.posting_ledger_id, self.sales.id)
        self.assertEqual(TradeInvoiceItem.objects.filter(voucher=invoice).count(), 2)
        self.assertEqual(res.data["ledgerVoucherId"], invoice.ledger_voucher_id)

    def test_item_invoice_ledger_lines_reach_reports(self):
        body = {
            "date": "2024-04-15",
            "voucherNo": "INV-9",
            "customerId": self.customer.id,
            "entries": [
                {"stockItemId": self.soap.id, "quantity": 2, "rate": 50},
                {"ledgerId": self.customer.id, "type": "debit", "amount": 100},
                {"ledgerId": self.sales.id, "type": "credit", "amount": 100},
            ],
        }
        res = self.client.post("/api/sale-vouchers/vouchers", body, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["ledgerLines"], 2)

        res = self.client.get("/api/outstanding-receivables")
        self.assertEqual(res.status_code, 200)
        self.assertEqual([r["customerName"] for r in res.data], ["Acme Traders"])
        self.assertEqual(res.data[0]["totalOutstanding"], 100.0)

        res = self.client.get("/api/billwise-receivables")
        self.assertEqual([r["billNo"] for r in res.data], ["INV-9"])

        res = self.client.get(
            "/api/ledger-report/report",
            {"ledgerId": self.customer.id, "fromDate": "2024-04-01", "toDate": "2024-04-30"},
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["summary"]["totalDebit"], 100.0)
        self.assertEqual(res.data["summary"]["closingBalance"], 100.0)

    def test_bad_invoice_numbers_are_400(self):
        body = {
            "date": "2024-04-15",
            "customerId": self.customer.id,
            "subtotal": "lots",
            "entries": [{"stockItemId": self.soap.id, "quantity": 1, "rate": 50, "cgstRate": "abc"}],
        }
        res = self.client.post("/api/sale-vouchers/vouchers", body, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("entries[0].cgst_rate", res.data["fields"])

        del body["entries"][0]["cgstRate"]
        res = self.client.post("/api/sale-vouchers/vouchers", body, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("subtotal", res.data["fields"])
        self.assertEqual(TradeInvoice.objects.count(), 0)

    def test_out_of_range_amount_is_400(self):
        body = self._receipt()
        body["entries"][0]["amount"] = "1e30"
        body["entries"][1]["amount"] = "1e30"
        res = self.client.post("/api/vouchers", body, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertIn("entries[0].amount", res.data["fields"])

    def test_credit_note(self):
        body = {
            "date": "2024-04-20",
            "mode": "item-invoice",
            "partyId": self.customer.id,
            "entries": [{"stockItemId": self.soap.id, "quantity": 1, "rate": 50}],
        }
        res = self.client.post("/api/CreditNotevoucher", body, format="json")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["message"], "Credit Note voucher saved successfully")
        self.assertEqual(NoteVoucher.objects.get().voucher_type, "credit-note")

    def test_delivery_and_stock_journal(self):
        res = self.client.post(
            "/api/DeliveryItem",
            {"date": "2024-04-20", "entries": [{"stockItemId": self.soap.id, "quantity": 2}]},
            format="json",
        )
        self.assertEqual(res.status_code, 201)

        res = self.client.post(
            "/api/StockJournal",
            {
                "date": "2024-04-20",
                "entries": [{"stockItemId": self.soap.id, "quantity": 2, "type": "debit"}],
            },
            format="json",
        )
        self.assertEqual(res.status_code, 201)

    # --------------------------------------------------
    # Permissions
    # --------------------------------------------------

    def test_roles_without_posting_rights(self):
        for role in (ROLE_STOREKEEPER, ROLE_AUDITOR):
            client = api_client_for(make_user(role, roles=[role]))
            res = client.post("/api/vouchers", self._receipt(), format="json")
            self.assertEqual(res.status_code, 403, role)


class VoucherReadApiTests(TestCase):
    def setUp(self):
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        self.cash = make_ledger("Cash", group=cash_group)
        self.customer = make_ledger("Acme Traders")
        self.soap = make_item("Soap")

        self.poster = api_client_for(make_user("acct", roles=[ROLE_ACCOUNTANT]))
        self.reader = api_client_for(make_user("auditor", roles=[ROLE_AUDITOR]))

        res = self.poster.post(
            "/api/vouchers",
            {
                "type": "receipt",
                "date": "2024-04-15",
                "number": "R-1",
                "partyId": self.customer.id,
                "entries": [
                    {"ledgerId": self.cash.id, "type": "debit", "amount": "1000.50"},
                    {"ledgerId": self.customer.id, "type": "credit", "amount": "1000.50"},
                ],
            },
            format="json",
        )
        self.receipt_id = res.data["id"]

        self.poster.post(
            "/api/sale-vouchers/vouchers",
            {
                "date": "2024-04-16",
                "partyId": self.customer.id,
                "entries": [{"stockItemId": self.soap.id, "quantity": 1, "rate": 10}],
            },
            format="json",
        )

    def test_voucher_detail(self):
        res = self.reader.get(f"/api/vouchers/{self.receipt_id}")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["voucherNumber"], "R-1")
        self.assertEqual(res.data["partyId"], self.customer.id)
        self.assertEqual([e["ledgerName"] for e in res.data["entries"]], ["Cash", "Acme Traders"])
        self.assertEqual(res.data["entries"][0]["amount"], 1000.5)

    def test_voucher_detail_404(self):
        res = self.reader.get("/api/vouchers/999999")
        self.assertEqual(res.status_code, 404)

    def test_day_book(self):
        res = self.reader.get("/api/daybook", {"fromDate": "2024-04-01", "toDate": "2024-04-30"})

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["voucherCount"], 2)
        self.assertEqual([v["voucherType"] for v in res.data["vouchers"]], ["receipt", "sales"])
        self.assertEqual(res.data["totalDebit"], 1000.5)
        self.assertEqual(res.data["totalCredit"], 1000.5)
        self.assertEqual(res.data["netDifference"], 0.0)

    def test_day_book_filters(self):
        res = self.reader.get("/api/daybook", {"voucherType": "Receipt"})
        self.assertEqual(res.data["voucherCount"], 1)

        res = self.reader.get("/api/daybook", {"fromDate": "2024-05-01"})
        self.assertEqual(res.data["voucherCount"], 0)

        res = self.reader.get("/api/daybook", {"fromDate": "2024-05-01", "toDate": "2024-04-01"})
        self.assertEqual(res.status_code, 400)
