# vouchers/tests/test_orders.py

from datetime import date

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.tests.factories import (
    api_client_for,
    item_line,
    make_item,
    make_ledger,
    make_user,
    post,
)
from permissions.roles import ROLE_ACCOUNTANT
from vouchers.models import TradeOrder, TradeOrderItem
from vouchers.services.exceptions import OrderStatusError, VoucherNotFoundError
from vouchers.services.order_service import change_order_status


class OrderStatusTests(TestCase):
    """
    GUARANTEES:
    - Orders start pending
    - Status is the only column that changes after posting
    - completed / cancelled are terminal
    """

    def setUp(self):
        self.customer = make_ledger("Acme Traders")
        self.soap = make_item("Soap")
        self.order = post(
            "sales-order",
            date(2024, 4, 1),
            [item_line(self.soap, 10, 50)],
            party_id=self.customer.id,
            number="SO-1",
        )
        self.client = api_client_for(make_user("acct", roles=[ROLE_ACCOUNTANT]))

    def _url(self, order_id=None, kind="sales-orders"):
        return f"/api/{kind}/{order_id or self.order.id}/status"

    def test_new_order_is_pending(self):
        order = TradeOrder.objects.get(pk=self.order.id)
        self.assertEqual(order.status, TradeOrder.Status.PENDING)
        self.assertEqual(TradeOrderItem.objects.filter(voucher=order).count(), 1)

    def test_forward_transitions(self):
        change_order_status(order_type="sales-order", order_id=self.order.id, status="confirmed")
        order = change_order_status(order_type="sales-order", order_id=self.order.id, status="Completed")
        self.assertEqual(order.status, "completed")

    def test_terminal_states(self):
        change_order_status(order_type="sales-order", order_id=self.order.id, status="cancelled")
        with self.assertRaises(OrderStatusError):
            change_order_status(order_type="sales-order", order_id=self.order.id, status="confirmed")

    def test_unknown_status_and_order(self):
        with self.assertRaises(OrderStatusError):
            change_order_status(order_type="sales-order", order_id=self.order.id, status="shipped")
        with self.assertRaises(VoucherNotFoundError):
            change_order_status(order_type="purchase-order", order_id=self.order.id, status="confirmed")

    def test_other_columns_stay_immutable(self):
        order = TradeOrder.objects.get(pk=self.order.id)
        order.remarks = "rush"
        with self.assertRaises(ValidationError):
            order.save(update_fields=["remarks"])

    # --------------------------------------------------
    # API
    # --------------------------------------------------

    def test_status_endpoint(self):
        res = self.client.put(self._url(), {"status": "confirmed"}, format="json")

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["message"], "Order status updated successfully")
        self.assertEqual(res.data["status"], "confirmed")

    def test_status_endpoint_errors(self):
        res = self.client.put(self._url(), {"status": "shipped"}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.put(self._url(), {}, format="json")
        self.assertEqual(res.status_code, 400)

        res = self.client.put(self._url(order_id=999999), {"status": "confirmed"}, format="json")
        self.assertEqual(res.status_code, 404)

        res = self.client.put(self._url(kind="purchase-orders"), {"status": "confirmed"}, format="json")
        self.assertEqual(res.status_code, 404)

    def test_purchase_order_endpoint(self):
        res = self.client.post(
            "/api/purchase-orders",
            {
                "date": "2024-04-02",
                "supplierId": self.customer.id,
                "expectedDeliveryDate": "2024-04-30",
                "entries": [{"stockItemId": self.soap.id, "quantity": 5, "rate": 40}],
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201)
        order = TradeOrder.objects.get(pk=res.data["id"])
        self.assertEqual(order.voucher_type, "purchase-order")
        self.assertEqual(order.expected_delivery_date, date(2024, 4, 30))
