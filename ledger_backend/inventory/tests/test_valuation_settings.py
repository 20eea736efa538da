# inventory/tests/test_valuation_settings.py

from django.test import TestCase

from accounting.tests.factories import api_client_for, make_user
from inventory.models import ValuationSettings
from inventory.services.exceptions import InventoryServiceError
from inventory.services.valuation_settings_service import update_valuation_settings
from permissions.roles import ROLE_AUDITOR, ROLE_STOREKEEPER

URL = "/api/fifo/settings"


class ValuationSettingsTests(TestCase):
    """
    GUARANTEES:
    - Reads never create the settings row
    - Updates are partial and persist in a single row
    - Only roles holding inventory.settings may update
    """

    def setUp(self):
        self.storekeeper = api_client_for(make_user("store", roles=[ROLE_STOREKEEPER]))
        self.auditor = api_client_for(make_user("audit", roles=[ROLE_AUDITOR]))

    def test_defaults_before_first_save(self):
        res = self.auditor.get(URL)

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["calculationMethod"], "strict_fifo")
        self.assertEqual(res.data["roundingPrecision"], 2)
        self.assertEqual(res.data["treatZeroStockAs"], "warning")
        self.assertEqual(res.data["enableFifoItems"], [])
        self.assertFalse(ValuationSettings.objects.exists())

    def test_partial_update(self):
        res = self.storekeeper.post(
            URL, {"roundingPrecision": 3, "enableFifoItems": [4, 9]}, format="json"
        )

        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["message"], "FIFO settings saved successfully")
        self.assertEqual(res.data["settings"]["roundingPrecision"], 3)
        self.assertEqual(res.data["settings"]["calculationMethod"], "strict_fifo")

        res = self.storekeeper.post(URL, {"calculationMethod": "moving_average"}, format="json")
        self.assertEqual(res.status_code, 200)

        stored = ValuationSettings.objects.get()
        self.assertEqual(stored.pk, ValuationSettings.SINGLETON_ID)
        self.assertEqual(stored.rounding_precision, 3)
        self.assertEqual(stored.enable_fifo_items, [4, 9])
        self.assertEqual(stored.calculation_method, "moving_average")

        self.assertEqual(self.auditor.get(URL).data["roundingPrecision"], 3)

    def test_invalid_values_rejected(self):
        res = self.storekeeper.post(URL, {"calculationMethod": "lifo"}, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn("calculationMethod", res.data)

        res = self.storekeeper.post(URL, {"roundingPrecision": 9}, format="json")
        self.assertEqual(res.status_code, 400)

        self.assertFalse(ValuationSettings.objects.exists())

    def test_read_only_roles_cannot_update(self):
        res = self.auditor.post(URL, {"roundingPrecision": 4}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_service_rejects_unknown_fields(self):
        with self.assertRaises(InventoryServiceError):
            update_valuation_settings({"costing": "lifo"})
