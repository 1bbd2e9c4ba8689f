import uuid
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from core.services.notifications import production_completed
from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement
from inventory.services.ledger import balance_as_of, movements_by_reference, record_movement
from production.models import ByProduct, ProductionBatch
from production.services.batch_service import (
    BatchOutput,
    cancel_batch,
    complete_batch,
    start_batch,
)
from production.services.by_products import record_by_product_sale
from production.services.exceptions import (
    BatchAlreadyCompletedError,
    ByProductSaleError,
    InsufficientRawMaterialError,
    InvalidBatchTransitionError,
    MassBalanceError,
    ProductionError,
    RawMaterialNotFoundError,
)

User = get_user_model()


def _paddy_lot(quantity="5000.00", paddy_type="nadu"):
    lot = RawMaterialLot.objects.create(
        sku="RM-PO-2025-0001",
        name="Nadu Paddy - standard",
        paddy_type=paddy_type,
        quantity_kg=Decimal(quantity),
        cost_per_unit=Decimal("100.00"),
    )
    record_movement(
        movement_type=StockMovement.MovementType.IN,
        product_sku=lot.sku,
        quantity_kg=lot.quantity_kg,
        reference_kind=StockMovement.ReferenceKind.PURCHASE,
        reference_id="po-1",
    )
    return lot


class BatchStartTests(TestCase):
    """
    Loading paddy into the mill.

    GUARANTEES:
    - Paddy is taken from the lot and written to the ledger as OUT
    - A refused reservation leaves no batch behind
    """

    def setUp(self):
        self.user = User.objects.create_user(username="operator", password="pass")
        self.lot = _paddy_lot()

    def test_start_reduces_lot_and_writes_out_movement(self):
        batch = start_batch(
            raw_material_id=self.lot.pk, input_quantity_kg="2000", user=self.user
        )

        self.assertEqual(batch.status, ProductionBatch.Status.IN_PROGRESS)
        self.assertTrue(batch.batch_number.startswith("BATCH-"))
        self.assertEqual(batch.paddy_type, "nadu")
        self.assertEqual(batch.paddy_nadu_kg, Decimal("2000.00"))

        self.lot.refresh_from_db()
        self.assertEqual(self.lot.quantity_kg, Decimal("3000.00"))
        self.assertEqual(balance_as_of(self.lot.sku), Decimal("3000.00"))

        movements = list(movements_by_reference("production", batch.pk))
        self.assertEqual(len(movements), 1)
        self.assertEqual(movements[0].movement_type, StockMovement.MovementType.OUT)
        self.assertEqual(movements[0].quantity_kg, Decimal("2000.00"))

    def test_explicit_breakdown_makes_mixed_batch(self):
        batch = start_batch(
            raw_material_id=self.lot.pk,
            input_quantity_kg="1000",
            paddy_nadu_kg="600",
            paddy_samba_kg="400",
        )
        self.assertEqual(batch.paddy_type, ProductionBatch.PaddyType.MIXED)

    def test_unknown_lot(self):
        with self.assertRaises(RawMaterialNotFoundError):
            start_batch(raw_material_id=uuid.uuid4(), input_quantity_kg="10")

        self.assertFalse(ProductionBatch.objects.exists())

    def test_insufficient_paddy(self):
        with self.assertRaises(InsufficientRawMaterialError):
            start_batch(raw_material_id=self.lot.pk, input_quantity_kg="5000.01")

        self.assertFalse(ProductionBatch.objects.exists())
        self.lot.refresh_from_db()
        self.assertEqual(self.lot.quantity_kg, Decimal("5000.00"))

    def test_refused_reservation_removes_the_batch(self):
        with mock.patch(
            "production.services.batch_service.reserve_raw_material", return_value=False
        ):
            with self.assertRaisesMessage(
                InsufficientRawMaterialError,
                "Insufficient raw material quantity or material not found. "
                "Batch creation cancelled.",
            ):
                start_batch(raw_material_id=self.lot.pk, input_quantity_kg="100")

        self.assertFalse(ProductionBatch.objects.exists())
        self.assertEqual(balance_as_of(self.lot.sku), Decimal("5000.00"))


class BatchCompletionTests(TestCase):
    """
    Recording milling output.

    GUARANTEES:
    - Output may not exceed input by more than the tolerance (5%)
    - The rice becomes a finished-goods lot FG-<batch number> with an IN movement
    - Completion is one-shot
    """

    def setUp(self):
        self.lot = _paddy_lot()
        self.batch = start_batch(raw_material_id=self.lot.pk, input_quantity_kg="1000")

    def test_output_over_tolerance_is_rejected(self):
        output = BatchOutput.of(rice_kg="700", bran_kg="100", husk_kg="260")

        with self.assertRaises(MassBalanceError):
            complete_batch(batch_id=self.batch.pk, output=output)

        self.batch.refresh_from_db()
        self.assertEqual(self.batch.status, ProductionBatch.Status.IN_PROGRESS)
        self.assertFalse(FinishedGoodsLot.objects.exists())

    def test_output_within_tolerance_is_accepted(self):
        output = BatchOutput.of(rice_kg="700", bran_kg="100", husk_kg="240")

        result = complete_batch(batch_id=self.batch.pk, output=output)

        self.assertEqual(result.batch.status, ProductionBatch.Status.COMPLETED)
        self.assertEqual(output.total_kg, Decimal("1040.00"))

    def test_completion_creates_finished_goods(self):
        output = BatchOutput.of(rice_kg="650", broken_kg="30", bran_kg="80", husk_kg="220")

        with self.captureOnCommitCallbacks(execute=True):
            result = complete_batch(
                batch_id=self.batch.pk,
                output=output,
                rice_grade="premium",
                bag_weight_kg="25",
                price_per_kg="110",
            )

        self.assertEqual(result.batch.yield_percentage, Decimal("65.00"))
        self.assertIsNotNone(result.batch.ended_at)

        lot = result.finished_goods
        self.assertEqual(lot.sku, f"FG-{self.batch.batch_number}")
        self.assertEqual(lot.weight_kg, Decimal("650.00"))
        self.assertEqual(lot.bag_count, 26)
        self.assertEqual(lot.rice_grade, "premium")
        self.assertEqual(lot.paddy_type, "nadu")
        self.assertIsNotNone(lot.expiry_date)

        self.assertEqual(len(result.movements), 1)
        self.assertEqual(result.movements[0].movement_type, StockMovement.MovementType.IN)
        self.assertEqual(balance_as_of(lot.sku), Decimal("650.00"))

    def test_unsupported_bag_size_is_rejected(self):
        with self.assertRaisesMessage(ProductionError, "bag_weight_kg must be one of"):
            complete_batch(
                batch_id=self.batch.pk,
                output=BatchOutput.of(rice_kg="600"),
                bag_weight_kg="30",
            )

        self.batch.refresh_from_db()
        self.assertEqual(self.batch.status, ProductionBatch.Status.IN_PROGRESS)
        self.assertFalse(FinishedGoodsLot.objects.exists())

    def test_completion_uses_configured_defaults(self):
        result = complete_batch(batch_id=self.batch.pk, output=BatchOutput.of(rice_kg="620"))

        self.assertEqual(result.finished_goods.bag_weight_kg, Decimal("50.00"))
        self.assertEqual(result.finished_goods.bag_count, 12)
        self.assertEqual(result.finished_goods.rice_grade, "standard")

    def test_completion_notifies(self):
        handler = mock.Mock()
        production_completed.connect(handler, dispatch_uid="batch-test-handler")
        self.addCleanup(production_completed.disconnect, dispatch_uid="batch-test-handler")

        with self.captureOnCommitCallbacks(execute=True):
            complete_batch(batch_id=self.batch.pk, output=BatchOutput.of(rice_kg="650"))

        handler.assert_called_once()
        payload = handler.call_args.kwargs
        self.assertEqual(payload["batch_number"], self.batch.batch_number)
        self.assertEqual(payload["yield_kg"], "650.00")

    def test_already_completed(self):
        complete_batch(batch_id=self.batch.pk, output=BatchOutput.of(rice_kg="650"))

        with self.assertRaises(BatchAlreadyCompletedError):
            complete_batch(batch_id=self.batch.pk, output=BatchOutput.of(rice_kg="650"))

        self.assertEqual(FinishedGoodsLot.objects.count(), 1)

    def test_cancel_keeps_paddy_consumed(self):
        batch = cancel_batch(batch_id=self.batch.pk, reason="Power cut")

        self.assertEqual(batch.status, ProductionBatch.Status.CANCELLED)
        self.assertEqual(batch.cancel_reason, "Power cut")
        self.lot.refresh_from_db()
        self.assertEqual(self.lot.quantity_kg, Decimal("4000.00"))

        with self.assertRaises(InvalidBatchTransitionError):
            complete_batch(batch_id=self.batch.pk, output=BatchOutput.of(rice_kg="10"))


class ByProductSaleTests(TestCase):
    def setUp(self):
        self.item = ByProduct.objects.create(
            product_type=ByProduct.ProductType.BRAN,
            quantity_kg=Decimal("100.00"),
            selling_price_per_kg=Decimal("20.00"),
        )

    def test_partial_then_full_sale(self):
        record_by_product_sale(by_product_id=self.item.pk, quantity_kg="40")
        item = record_by_product_sale(
            by_product_id=self.item.pk, quantity_kg="60", price_per_kg="25"
        )

        self.assertEqual(item.sold_quantity_kg, Decimal("100.00"))
        self.assertEqual(item.sold_revenue, Decimal("2300.00"))
        self.assertEqual(item.status, ByProduct.Status.SOLD_OUT)

    def test_cannot_oversell(self):
        with self.assertRaises(ByProductSaleError):
            record_by_product_sale(by_product_id=self.item.pk, quantity_kg="100.01")


class ProductionApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="supervisor", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.lot = _paddy_lot()

    def test_start_batch(self):
        response = self.client.post(
            "/api/production/batches/start/",
            {"rawMaterialId": str(self.lot.pk), "inputPaddyKg": "1500"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "in_progress")
        self.assertEqual(response.data["raw_material_sku"], self.lot.sku)

    def test_start_batch_unknown_lot(self):
        response = self.client.post(
            "/api/production/batches/start/",
            {
                "raw_material_id": "00000000-0000-0000-0000-000000000000",
                "input_quantity_kg": "10",
            },
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_start_batch_insufficient_paddy(self):
        response = self.client.post(
            "/api/production/batches/start/",
            {"raw_material_id": str(self.lot.pk), "input_quantity_kg": "9000"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_complete_batch(self):
        batch = start_batch(raw_material_id=self.lot.pk, input_quantity_kg="1000")

        response = self.client.post(
            f"/api/production/batches/{batch.pk}/complete/",
            {"riceWeightKg": "660", "branKg": "90", "huskKg": "230"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["batch"]["status"], "completed")
        self.assertEqual(response.data["finished_goods"]["sku"], f"FG-{batch.batch_number}")

    def test_complete_batch_mass_balance_error(self):
        batch = start_batch(raw_material_id=self.lot.pk, input_quantity_kg="1000")

        response = self.client.post(
            f"/api/production/batches/{batch.pk}/complete/",
            {"rice_kg": "1100"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)

    def test_complete_batch_unsupported_bag_size(self):
        batch = start_batch(raw_material_id=self.lot.pk, input_quantity_kg="1000")

        response = self.client.post(
            f"/api/production/batches/{batch.pk}/complete/",
            {"riceWeightKg": "600", "bagWeightKg": "30"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn("bag_weight_kg", response.data)
        batch.refresh_from_db()
        self.assertEqual(batch.status, ProductionBatch.Status.IN_PROGRESS)
        self.assertFalse(FinishedGoodsLot.objects.exists())
