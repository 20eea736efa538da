# vouchers/tests/test_posting_engine.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase, override_settings

from accounting.models import Ledger, LedgerGroup
from accounting.tests.factories import (
    item_line,
    line,
    make_group,
    make_item,
    make_ledger,
    post,
)
from vouchers.models import (
    BillAllocation,
    NoteLedgerEntry,
    StockJournalEntry,
    TradeInvoice,
    TradeInvoiceItem,
    Voucher,
    VoucherEntry,
)
from vouchers.services.exceptions import (
    UnbalancedVoucherError,
    UnknownReferenceError,
    VoucherPostingError,
    VoucherValidationError,
)
from vouchers.services.kinds import ACCOUNTING, ITEM_INVOICE, resolve_kind

ON = date(2024, 4, 15)


class VoucherKindResolutionTests(TestCase):
    def test_generic_types_have_no_mode(self):
        kind = resolve_kind("Receipt")
        self.assertEqual(kind.voucher_type, "receipt")
        self.assertEqual(kind.mode, "")
        self.assertIs(kind.header_model, Voucher)

    def test_sales_mode_follows_entries(self):
        self.assertEqual(resolve_kind("sales", entries=[{"item_id": 1}]).mode, ITEM_INVOICE)
        self.assertEqual(resolve_kind("sale", entries=[{"ledger_id": 1}]).mode, ACCOUNTING)

    def test_aliases(self):
        self.assertEqual(resolve_kind("CreditNote", "item").key, "credit-note:item-invoice")
        self.assertEqual(resolve_kind("stock_journal").voucher_type, "stock-journal")

    def test_unknown_type_and_mode(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            resolve_kind("invoice")
        self.assertIn("type", ctx.exception.fields)

        with self.assertRaises(VoucherValidationError) as ctx:
            resolve_kind("sales", "as-voucher")
        self.assertIn("mode", ctx.exception.fields)


class PostingEngineTests(TestCase):
    """
    Voucher posting engine.

    GUARANTEES:
    - A header is never written without its lines
    - Generic vouchers must balance
    - Every referenced ledger/item must exist before anything is written
    - Posted rows are immutable
    """

    def setUp(self):
        cash_group = make_group("Cash-in-Hand", LedgerGroup.CASH)
        debtors = make_group("Sundry Debtors", LedgerGroup.ASSET)
        income = make_group("Sales Accounts", LedgerGroup.INCOME)

        self.cash = make_ledger("Cash", group=cash_group)
        self.customer = make_ledger("Acme Traders", group=debtors)
        self.sales = make_ledger("Sales", group=income, balance_type=Ledger.CREDIT)

        self.soap = make_item("Soap", purchase_rate="40", sale_rate="50")
        self.rice = make_item("Rice 25kg", purchase_rate="900", sale_rate="1100")

    # --------------------------------------------------
    # Happy paths
    # --------------------------------------------------

    def test_receipt_writes_header_and_lines(self):
        posted = post(
            "receipt",
            ON,
            [line(self.cash, "debit", "1500.00"), line(self.customer, "credit", "1500.00")],
            number="R-1",
            narration="Part payment",
        )

        voucher = Voucher.objects.get(pk=posted.id)
        self.assertEqual(voucher.voucher_type, "receipt")
        self.assertEqual(voucher.number, "R-1")
        self.assertEqual(VoucherEntry.objects.filter(voucher=voucher).count(), 2)

    def test_sales_item_invoice(self):
        posted = post(
            "sales",
            ON,
            [item_line(self.soap, 10, 50), item_line(self.rice, 2, 1100, cgst_rate="2.5", sgst_rate="2.5")],
            party_id=self.customer.id,
            number="INV-1",
        )

        self.assertEqual(posted.kind.mode, ITEM_INVOICE)
        self.assertEqual(TradeInvoice.objects.count(), 1)
        self.assertEqual(TradeInvoiceItem.objects.filter(voucher_id=posted.id).count(), 2)
        self.assertEqual(VoucherEntry.objects.count(), 0)

        invoice = TradeInvoice.objects.get(pk=posted.id)
        self.assertEqual(invoice.ledger_voucher.mode, ITEM_INVOICE)
        self.assertEqual(invoice.ledger_voucher.number, "INV-1")
        self.assertEqual(invoice.subtotal, Decimal("2700.00"))
        self.assertEqual(invoice.cgst_total, Decimal("55.00"))
        self.assertEqual(invoice.total, Decimal("2810.00"))

    def test_item_invoice_ledger_lines_land_on_generic_voucher(self):
        posted = post(
            "sales",
            ON,
            [
                item_line(self.soap, 2, 50),
                line(self.customer, "debit", 100),
                line(self.sales, "credit", 100),
            ],
            party_id=self.customer.id,
            number="INV-2",
            due_date=date(2024, 5, 15),
        )

        invoice = TradeInvoice.objects.get(pk=posted.id)
        voucher = invoice.ledger_voucher
        self.assertEqual(posted.ledger_voucher_id, voucher.id)
        self.assertEqual(voucher.voucher_type, "sales")
        self.assertEqual(voucher.party_id, self.customer.id)
        self.assertEqual(voucher.due_date, date(2024, 5, 15))
        self.assertEqual(
            sorted(VoucherEntry.objects.filter(voucher=voucher).values_list("entry_type", flat=True)),
            ["credit", "debit"],
        )
        self.assertEqual(TradeInvoiceItem.objects.filter(voucher=invoice).count(), 1)

    def test_item_invoice_rolls_back_linked_voucher(self):
        with mock.patch.object(
            TradeInvoiceItem.objects, "bulk_create", side_effect=DatabaseError("boom")
        ):
            with self.assertRaises(VoucherPostingError):
                post(
                    "sales",
                    ON,
                    [item_line(self.soap, 2, 50), line(self.customer, "debit", 100)],
                    party_id=self.customer.id,
                )

        self.assertEqual(TradeInvoice.objects.count(), 0)
        self.assertEqual(Voucher.objects.count(), 0)
        self.assertEqual(VoucherEntry.objects.count(), 0)

    def test_client_invoice_totals_are_parsed(self):
        posted = post(
            "sales",
            ON,
            [item_line(self.soap, 2, 50)],
            party_id=self.customer.id,
            subtotal="100",
            total="105.00",
            cgst_total="",
        )

        invoice = TradeInvoice.objects.get(pk=posted.id)
        self.assertEqual(invoice.subtotal, Decimal("100.00"))
        self.assertEqual(invoice.total, Decimal("105.00"))
        self.assertEqual(invoice.cgst_total, Decimal("0.00"))

    def test_bad_invoice_totals(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post(
                "sales",
                ON,
                [item_line(self.soap, 2, 50)],
                party_id=self.customer.id,
                subtotal="lots",
                total="-5",
            )

        self.assertEqual(set(ctx.exception.fields), {"subtotal", "total"})
        self.assertEqual(TradeInvoice.objects.count(), 0)

    def test_bad_tax_rates(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post(
                "sales",
                ON,
                [
                    item_line(self.soap, 2, 50, cgst_rate="abc"),
                    item_line(self.rice, 1, 1100, igst_rate="150"),
                ],
                party_id=self.customer.id,
            )

        self.assertIn("entries[0].cgst_rate", ctx.exception.fields)
        self.assertIn("entries[1].igst_rate", ctx.exception.fields)

    def test_out_of_range_amounts(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post(
                "receipt",
                ON,
                [line(self.cash, "debit", "1e30"), line(self.customer, "credit", "1e30")],
            )
        self.assertIn("entries[0].amount", ctx.exception.fields)

        with self.assertRaises(VoucherValidationError) as ctx:
            post(
                "sales",
                ON,
                [item_line(self.soap, "1e20", "1e20")],
                party_id=self.customer.id,
            )
        self.assertIn("entries[0].amount", ctx.exception.fields)
        self.assertEqual(Voucher.objects.count(), 0)

    def test_item_amount_is_derived(self):
        posted = post(
            "sales",
            ON,
            [item_line(self.soap, 3, 50, discount="10")],
            party_id=self.customer.id,
        )
        self.assertEqual(posted.item_lines[0].amount, Decimal("140.00"))

    def test_credit_note_defaults_to_debit_side(self):
        posted = post(
            "credit-note",
            ON,
            [{"ledger_id": self.sales.id, "amount": "250"}],
            mode="accounting-invoice",
            party_id=self.customer.id,
        )
        entry = NoteLedgerEntry.objects.get(voucher_id=posted.id)
        self.assertEqual(entry.entry_type, "debit")

    def test_stock_journal_requires_direction(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post("stock-journal", ON, [item_line(self.soap, 5, 40)])
        self.assertIn("entries[0].entry_type", ctx.exception.fields)

        post(
            "stock-journal",
            ON,
            [
                item_line(self.soap, 5, 40, entry_type="credit"),
                item_line(self.rice, 1, 900, entry_type="debit"),
            ],
        )
        self.assertEqual(StockJournalEntry.objects.count(), 2)

    # --------------------------------------------------
    # Validation
    # --------------------------------------------------

    def test_missing_header_fields(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post("sales", None, [item_line(self.soap, 1, 50)])

        self.assertEqual(set(ctx.exception.fields), {"date", "party_id"})
        self.assertEqual(TradeInvoice.objects.count(), 0)

    def test_empty_entries(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post("journal", ON, [])
        self.assertIn("entries", ctx.exception.fields)

    def test_unbalanced_voucher(self):
        with self.assertRaises(UnbalancedVoucherError):
            post(
                "journal",
                ON,
                [line(self.cash, "debit", 100), line(self.sales, "credit", 90)],
            )
        self.assertEqual(Voucher.objects.count(), 0)

    @override_settings(VOUCHER_BALANCE_EXEMPT_TYPES=["journal"])
    def test_balance_exempt_types(self):
        post("journal", ON, [line(self.cash, "debit", 100), line(self.sales, "credit", 90)])
        self.assertEqual(Voucher.objects.count(), 1)

    def test_unknown_references(self):
        with self.assertRaises(UnknownReferenceError) as ctx:
            post(
                "payment",
                ON,
                [{"ledger_id": 999999, "entry_type": "debit", "amount": "10"}, line(self.cash, "credit", 10)],
            )

        self.assertEqual(ctx.exception.missing["ledgers"], [999999])
        self.assertEqual(Voucher.objects.count(), 0)

    def test_inactive_ledger(self):
        closed = make_ledger("Old Bank", is_active=False)
        with self.assertRaises(VoucherValidationError):
            post("contra", ON, [line(closed, "debit", 10), line(self.cash, "credit", 10)])

    def test_amount_must_match_quantity_times_rate(self):
        row = item_line(self.soap, 2, 50, amount="120")
        with self.assertRaises(VoucherValidationError) as ctx:
            post("sales", ON, [row], party_id=self.customer.id)
        self.assertIn("entries[0].amount", ctx.exception.fields)

        with override_settings(VOUCHER_VERIFY_LINE_AMOUNTS=False):
            posted = post("sales", ON, [row], party_id=self.customer.id)
        self.assertEqual(posted.item_lines[0].amount, Decimal("120.00"))

    def test_bad_values(self):
        with self.assertRaises(VoucherValidationError) as ctx:
            post(
                "journal",
                ON,
                [
                    {"ledger_id": self.cash.id, "entry_type": "sideways", "amount": "10"},
                    {"ledger_id": self.sales.id, "entry_type": "credit", "amount": "-5"},
                    {"narration": "neither ledger nor item"},
                ],
            )
        fields = ctx.exception.fields
        self.assertIn("entries[0].entry_type", fields)
        self.assertIn("entries[1].amount", fields)
        self.assertIn("entries[2]", fields)

    # --------------------------------------------------
    # Bill allocations
    # --------------------------------------------------

    def _bill(self, amount=1000):
        return post(
            "sales",
            ON,
            [line(self.customer, "debit", amount), line(self.sales, "credit", amount)],
            mode="accounting",
            party_id=self.customer.id,
        )

    def test_receipt_allocations(self):
        bill = self._bill()
        receipt = post(
            "receipt",
            ON,
            [line(self.cash, "debit", 600), line(self.customer, "credit", 600)],
            allocations=[{"bill_id": bill.id, "amount": "600"}],
        )

        allocation = BillAllocation.objects.get()
        self.assertEqual(allocation.settlement_id, receipt.id)
        self.assertEqual(allocation.bill_id, bill.id)

    def test_over_allocation(self):
        bill = self._bill()
        with self.assertRaises(VoucherValidationError) as ctx:
            post(
                "receipt",
                ON,
                [line(self.cash, "debit", 600), line(self.customer, "credit", 600)],
                allocations=[{"bill_id": bill.id, "amount": "700"}],
            )
        self.assertIn("billAllocations", ctx.exception.fields)

    def test_allocations_only_on_settlements(self):
        bill = self._bill()
        with self.assertRaises(VoucherValidationError):
            post(
                "journal",
                ON,
                [line(self.cash, "debit", 10), line(self.customer, "credit", 10)],
                allocations=[{"bill_id": bill.id, "amount": "10"}],
            )

    def test_allocation_target_must_be_a_bill(self):
        other = post("contra", ON, [line(self.cash, "debit", 10), line(self.sales, "credit", 10)])
        with self.assertRaises(VoucherValidationError):
            post(
                "receipt",
                ON,
                [line(self.cash, "debit", 10), line(self.customer, "credit", 10)],
                allocations=[{"bill_id": other.id, "amount": "10"}],
            )

    # --------------------------------------------------
    # Atomicity & immutability
    # --------------------------------------------------

    def test_failed_line_write_rolls_back_header(self):
        with mock.patch.object(
            VoucherEntry.objects, "bulk_create", side_effect=DatabaseError("boom")
        ):
            with self.assertRaises(VoucherPostingError):
                post(
                    "receipt",
                    ON,
                    [line(self.cash, "debit", 100), line(self.customer, "credit", 100)],
                )

        self.assertEqual(Voucher.objects.count(), 0)
        self.assertEqual(VoucherEntry.objects.count(), 0)

    def test_posted_rows_are_immutable(self):
        posted = post("receipt", ON, [line(self.cash, "debit", 5), line(self.customer, "credit", 5)])
        voucher = Voucher.objects.get(pk=posted.id)

        voucher.narration = "edited"
        with self.assertRaises(ValidationError):
            voucher.save()
        with self.assertRaises(ValidationError):
            voucher.delete()
        with self.assertRaises(ValidationError):
            VoucherEntry.objects.filter(voucher=voucher).first().delete()
