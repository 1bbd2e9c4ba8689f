from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement, StorageBin
from inventory.services.exceptions import StockAdjustmentError
from inventory.services.ledger import balance_as_of, record_movement
from inventory.services.stock_adjustments import adjust_stock, transfer_stock

User = get_user_model()


class StockAdjustmentTests(TestCase):
    """
    Manual corrections after a physical count.

    GUARANTEES:
    - Positive delta -> ADJUST movement for the full delta
    - Negative delta -> OUT movement for what was actually removed
    - Lots never go below zero
    """

    def setUp(self):
        self.user = User.objects.create_user(username="storekeeper", password="pass")
        self.raw = RawMaterialLot.objects.create(
            sku="RM-PO-2025-0001",
            name="Samba Paddy - premium",
            paddy_type="samba",
            quantity_kg=Decimal("100.00"),
        )
        record_movement(
            movement_type=StockMovement.MovementType.IN,
            product_sku=self.raw.sku,
            quantity_kg=Decimal("100.00"),
            reference_kind=StockMovement.ReferenceKind.PURCHASE,
            reference_id="po-1",
        )

    def test_positive_adjustment(self):
        result = adjust_stock(sku=self.raw.sku, delta_kg="25", reason="Recount", user=self.user)

        self.assertEqual(result.applied_delta_kg, Decimal("25.00"))
        self.assertEqual(result.movement.movement_type, StockMovement.MovementType.ADJUST)
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("125.00"))
        self.assertEqual(balance_as_of(self.raw.sku), self.raw.quantity_kg)

    def test_negative_adjustment_floors_at_zero(self):
        result = adjust_stock(sku=self.raw.sku, delta_kg="-130", reason="Water damage")

        self.assertEqual(result.applied_delta_kg, Decimal("-100.00"))
        self.assertEqual(result.movement.movement_type, StockMovement.MovementType.OUT)
        self.assertEqual(result.movement.quantity_kg, Decimal("100.00"))
        self.assertEqual(result.movement.reference_kind, StockMovement.ReferenceKind.ADJUSTMENT)

        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("0.00"))
        self.assertEqual(self.raw.status, RawMaterialLot.Status.USED)
        self.assertEqual(balance_as_of(self.raw.sku), Decimal("0.00"))

    def test_restocking_an_empty_lot_makes_it_available(self):
        adjust_stock(sku=self.raw.sku, delta_kg="-100", reason="Spoiled")
        adjust_stock(sku=self.raw.sku, delta_kg="10", reason="Found a bag")

        self.raw.refresh_from_db()
        self.assertEqual(self.raw.status, RawMaterialLot.Status.AVAILABLE)

    def test_zero_delta_is_rejected(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock(sku=self.raw.sku, delta_kg="0", reason="Nothing")

    def test_reason_is_required(self):
        with self.assertRaises(StockAdjustmentError):
            adjust_stock(sku=self.raw.sku, delta_kg="5", reason="  ")

    def test_transfer_moves_lot_without_changing_balance(self):
        silo_a = StorageBin.objects.create(code="SILO-A", name="Silo A")
        silo_b = StorageBin.objects.create(code="SILO-B", name="Silo B")
        self.raw.storage_bin = silo_a
        self.raw.save()

        movements = transfer_stock(sku=self.raw.sku, destination_bin=silo_b)

        self.assertEqual([m.movement_type for m in movements], ["OUT", "IN"])
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.storage_bin, silo_b)
        self.assertEqual(balance_as_of(self.raw.sku), Decimal("100.00"))

    def test_transfer_to_same_bin_is_rejected(self):
        silo_a = StorageBin.objects.create(code="SILO-A", name="Silo A")
        self.raw.storage_bin = silo_a
        self.raw.save()

        with self.assertRaises(StockAdjustmentError):
            transfer_stock(sku=self.raw.sku, destination_bin=silo_a)


class InventoryApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="manager", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

        self.rice = FinishedGoodsLot.objects.create(
            sku="FG-BATCH-2025-0001",
            paddy_type="nadu",
            weight_kg=Decimal("650.00"),
            expiry_date=timezone.localdate() + timedelta(days=180),
        )
        record_movement(
            movement_type=StockMovement.MovementType.IN,
            product_sku=self.rice.sku,
            quantity_kg=Decimal("650.00"),
            reference_kind=StockMovement.ReferenceKind.PRODUCTION,
            reference_id="batch-1",
        )

    def test_requires_authentication(self):
        anonymous = APIClient()
        response = anonymous.get(f"/api/inventory/ledger/{self.rice.sku}/balance/")
        self.assertEqual(response.status_code, 401)

    def test_balance_matches_lot(self):
        response = self.client.get(f"/api/inventory/ledger/{self.rice.sku}/balance/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["balance_kg"], "650.00")
        self.assertEqual(response.data["lot_quantity_kg"], "650.00")

    def test_balance_rejects_bad_as_of(self):
        response = self.client.get(
            f"/api/inventory/ledger/{self.rice.sku}/balance/", {"as_of": "yesterday"}
        )
        self.assertEqual(response.status_code, 400)

    def test_history_lists_movements(self):
        response = self.client.get(f"/api/inventory/ledger/{self.rice.sku}/history/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["movement_type"], "IN")

    def test_history_filters_by_movement_type(self):
        response = self.client.get(
            f"/api/inventory/ledger/{self.rice.sku}/history/", {"movement_type": "OUT"}
        )
        self.assertEqual(response.data["count"], 0)

    def test_movements_by_reference(self):
        response = self.client.get("/api/inventory/ledger/by-reference/production/batch-1/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)

    def test_movements_by_unknown_reference_kind(self):
        response = self.client.get("/api/inventory/ledger/by-reference/gift/x/")
        self.assertEqual(response.status_code, 400)

    def test_adjustment_endpoint_accepts_camel_case(self):
        response = self.client.post(
            "/api/inventory/adjustments/",
            {"sku": self.rice.sku, "deltaKg": "-50", "reason": "Torn bags"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["quantity_kg"], "600.00")
        self.assertEqual(response.data["movement"]["movement_type"], "OUT")

    def test_adjustment_unknown_sku(self):
        response = self.client.post(
            "/api/inventory/adjustments/",
            {"sku": "FG-NOPE", "delta_kg": "5", "reason": "Recount"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)
