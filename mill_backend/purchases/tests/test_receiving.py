from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from inventory.models import RawMaterialLot, StockMovement
from inventory.services.exceptions import LedgerError
from inventory.services.ledger import balance_as_of, movements_by_reference
from purchases.models import Purchase, Supplier
from purchases.services.receiving_service import (
    PurchaseReceivingError,
    SupplierNotFoundError,
    receive_purchase,
)

User = get_user_model()


class ReceivePurchaseTests(TestCase):
    """
    Weighbridge receipt of a paddy delivery.

    GUARANTEES:
    - net = gross - tare, total = net * price + transport + unloading
    - A raw-material lot RM-<po> holds the net weight
    - The ledger balance for the lot equals the lot quantity
    - The purchase survives a failed ledger write
    - A receipt cannot be dated in the future
    """

    def setUp(self):
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.supplier = Supplier.objects.create(name="Perera Farms")

    def _receive(self, **overrides):
        params = dict(
            supplier_id=self.supplier.pk,
            paddy_type="nadu",
            quality_grade="standard",
            gross_weight_kg=Decimal("5100.00"),
            tare_kg=Decimal("100.00"),
            price_per_kg=Decimal("100.00"),
            transport_cost=Decimal("2500.00"),
            unloading_cost=Decimal("500.00"),
            user=self.user,
        )
        params.update(overrides)
        return receive_purchase(**params)

    def test_weights_and_total(self):
        result = self._receive()
        purchase = result.purchase

        self.assertEqual(purchase.net_weight_kg, Decimal("5000.00"))
        self.assertEqual(purchase.total_amount, Decimal("503000.00"))
        self.assertEqual(purchase.status, Purchase.STATUS_RECEIVED)
        self.assertIsNotNone(purchase.received_at)

    def test_po_numbers_follow_the_year(self):
        first = self._receive().purchase
        second = self._receive().purchase

        year = timezone.localdate().year
        self.assertEqual(first.po_number, f"PO-{year}-0001")
        self.assertEqual(second.po_number, f"PO-{year}-0002")

    def test_raw_material_lot_and_movement(self):
        result = self._receive()
        lot = result.raw_material

        self.assertEqual(lot.sku, f"RM-{result.purchase.po_number}")
        self.assertEqual(lot.name, "Nadu Paddy - standard")
        self.assertEqual(lot.quantity_kg, Decimal("5000.00"))
        self.assertEqual(lot.cost_per_unit, Decimal("100.00"))
        self.assertEqual(lot.status, RawMaterialLot.Status.AVAILABLE)

        self.assertEqual(result.movement.movement_type, StockMovement.MovementType.IN)
        self.assertEqual(result.movement.total_cost, Decimal("500000.00"))
        self.assertEqual(balance_as_of(lot.sku), lot.quantity_kg)
        self.assertEqual(len(movements_by_reference("purchase", result.purchase.pk)), 1)

    def test_missing_supplier(self):
        self.supplier.is_active = False
        self.supplier.save()

        with self.assertRaises(SupplierNotFoundError):
            self._receive()
        self.assertFalse(Purchase.objects.exists())

    def test_future_receipt_is_rejected(self):
        with self.assertRaisesMessage(PurchaseReceivingError, "cannot be in the future"):
            self._receive(received_at=timezone.now() + timedelta(days=2))

        self.assertFalse(Purchase.objects.exists())
        self.assertFalse(RawMaterialLot.objects.exists())

    def test_backdated_receipt_keeps_ledger_and_lot_in_step(self):
        result = self._receive(received_at=timezone.now() - timedelta(days=3))

        lot = result.raw_material
        self.assertEqual(balance_as_of(lot.sku), lot.quantity_kg)
        self.assertEqual(
            balance_as_of(lot.sku, as_of=timezone.now() - timedelta(days=4)),
            Decimal("0.00"),
        )

    def test_ledger_failure_keeps_purchase(self):
        with mock.patch(
            "purchases.services.receiving_service.record_movement",
            side_effect=LedgerError("ledger unavailable"),
        ):
            with self.assertLogs("core.services.side_effects", level="ERROR"):
                result = self._receive()

        self.assertIsNone(result.movement)
        self.assertIsNotNone(result.raw_material)
        self.assertTrue(Purchase.objects.filter(pk=result.purchase.pk).exists())
        self.assertFalse(StockMovement.objects.exists())


class PurchaseApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="clerk", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.supplier = Supplier.objects.create(name="Silva Traders")

    def test_receive_with_camel_case_payload(self):
        response = self.client.post(
            "/api/purchases/",
            {
                "supplierId": str(self.supplier.pk),
                "paddyType": "samba",
                "qualityGrade": "premium",
                "grossWeightKg": "1020",
                "tareKg": "20",
                "pricePerKg": "120",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["purchase"]["net_weight_kg"], "1000.00")
        self.assertEqual(response.data["purchase"]["total_amount"], "120000.00")
        self.assertTrue(response.data["raw_material"]["sku"].startswith("RM-PO-"))

    def test_tare_must_be_below_gross(self):
        response = self.client.post(
            "/api/purchases/",
            {
                "supplier_id": str(self.supplier.pk),
                "paddy_type": "nadu",
                "quality_grade": "basic",
                "gross_weight_kg": "100",
                "tare_kg": "100",
                "price_per_kg": "90",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_unknown_supplier(self):
        response = self.client.post(
            "/api/purchases/",
            {
                "supplier_id": "00000000-0000-0000-0000-000000000000",
                "paddy_type": "nadu",
                "quality_grade": "basic",
                "gross_weight_kg": "100",
                "price_per_kg": "90",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_future_received_at_is_rejected(self):
        response = self.client.post(
            "/api/purchases/",
            {
                "supplierId": str(self.supplier.pk),
                "paddyType": "nadu",
                "qualityGrade": "basic",
                "grossWeightKg": "100",
                "pricePerKg": "90",
                "receivedAt": (timezone.now() + timedelta(days=2)).isoformat(),
            },
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("received_at", response.data)
        self.assertFalse(Purchase.objects.exists())
