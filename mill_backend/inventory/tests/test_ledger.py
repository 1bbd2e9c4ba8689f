from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase
from django.utils import timezone

from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement
from inventory.services.exceptions import LedgerError, LotNotFoundError
from inventory.services.ledger import (
    balance_as_of,
    history_for,
    movements_by_reference,
    record_movement,
)
from inventory.services.lots import deduct_finished_goods, reserve_raw_material

IN = StockMovement.MovementType.IN
OUT = StockMovement.MovementType.OUT
ADJUST = StockMovement.MovementType.ADJUST
Kind = StockMovement.ReferenceKind


class StockLedgerTests(TestCase):
    """
    Append-only stock ledger.

    GUARANTEES:
    - balance = sum(IN + ADJUST) - sum(OUT) up to the as-of time
    - Movements are immutable once written
    - History is chronological and filterable by range
    """

    def _move(self, movement_type, qty, *, minutes_ago=0, kind=Kind.PURCHASE, ref="ref-1", **extra):
        return record_movement(
            movement_type=movement_type,
            product_sku="RM-PO-2025-0001",
            quantity_kg=Decimal(qty),
            reference_kind=kind,
            reference_id=ref,
            created_at=timezone.now() - timedelta(minutes=minutes_ago),
            **extra,
        )

    def test_balance_is_zero_without_movements(self):
        self.assertEqual(balance_as_of("RM-UNKNOWN"), Decimal("0.00"))

    def test_balance_sums_in_and_adjust_minus_out(self):
        self._move(IN, "5000.00", minutes_ago=30)
        self._move(OUT, "2000.00", minutes_ago=20, kind=Kind.PRODUCTION, ref="batch-1")
        self._move(ADJUST, "15.50", minutes_ago=10, kind=Kind.ADJUSTMENT, ref="lot-1")

        self.assertEqual(balance_as_of("RM-PO-2025-0001"), Decimal("3015.50"))

    def test_balance_ignores_later_movements(self):
        self._move(IN, "5000.00", minutes_ago=30)
        self._move(OUT, "2000.00", minutes_ago=5, kind=Kind.PRODUCTION, ref="batch-1")

        as_of = timezone.now() - timedelta(minutes=15)
        self.assertEqual(balance_as_of("RM-PO-2025-0001", as_of), Decimal("5000.00"))

    def test_total_cost_is_unit_cost_times_quantity(self):
        movement = self._move(IN, "1000.00", unit_cost=Decimal("85.50"))
        self.assertEqual(movement.total_cost, Decimal("85500.00"))

    def test_total_cost_is_empty_without_unit_cost(self):
        movement = self._move(IN, "10.00")
        self.assertIsNone(movement.total_cost)

    def test_movements_are_immutable(self):
        movement = self._move(IN, "100.00")
        movement.quantity_kg = Decimal("1.00")

        with self.assertRaises(ValidationError):
            movement.save()
        with self.assertRaises(ValidationError):
            movement.delete()

    def test_zero_quantity_is_rejected(self):
        with self.assertRaises(LedgerError):
            self._move(IN, "0.00")

    def test_history_is_chronological_and_ranged(self):
        first = self._move(IN, "100.00", minutes_ago=30)
        second = self._move(OUT, "40.00", minutes_ago=20, kind=Kind.SALE, ref="inv-1")
        third = self._move(OUT, "10.00", minutes_ago=10, kind=Kind.SALE, ref="inv-2")

        self.assertEqual(
            list(history_for("RM-PO-2025-0001")), [first, second, third]
        )

        window = history_for(
            "RM-PO-2025-0001",
            start=timezone.now() - timedelta(minutes=25),
            end=timezone.now() - timedelta(minutes=15),
        )
        self.assertEqual(list(window), [second])

    def test_movements_by_reference(self):
        self._move(IN, "100.00", ref="purchase-1")
        self._move(IN, "50.00", ref="purchase-2")

        rows = movements_by_reference(Kind.PURCHASE, "purchase-1")
        self.assertEqual(rows.count(), 1)
        self.assertEqual(rows[0].quantity_kg, Decimal("100.00"))


class LotMutationTests(TestCase):
    """
    GUARANTEES:
    - Raw material reservation never drives a lot negative
    - A lot reserved down to zero is marked used
    - Finished goods deductions floor at zero and report the cap
    """

    def setUp(self):
        self.raw = RawMaterialLot.objects.create(
            sku="RM-PO-2025-0001",
            name="Nadu Paddy - standard",
            paddy_type="nadu",
            quantity_kg=Decimal("1000.00"),
            cost_per_unit=Decimal("100.00"),
        )
        self.rice = FinishedGoodsLot.objects.create(
            sku="FG-BATCH-2025-0001",
            paddy_type="nadu",
            weight_kg=Decimal("300.00"),
            expiry_date=timezone.localdate() + timedelta(days=180),
            price_per_kg=Decimal("210.00"),
        )

    def test_reserve_decrements_quantity(self):
        self.assertTrue(reserve_raw_material(lot_id=self.raw.pk, quantity_kg="400"))
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("600.00"))
        self.assertEqual(self.raw.status, RawMaterialLot.Status.AVAILABLE)

    def test_reserve_refuses_more_than_available(self):
        self.assertFalse(reserve_raw_material(lot_id=self.raw.pk, quantity_kg="1000.01"))
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("1000.00"))

    def test_reserve_to_zero_marks_lot_used(self):
        self.assertTrue(reserve_raw_material(lot_id=self.raw.pk, quantity_kg="1000"))
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("0.00"))
        self.assertEqual(self.raw.status, RawMaterialLot.Status.USED)

    def test_second_reservation_cannot_overdraw(self):
        self.assertTrue(reserve_raw_material(lot_id=self.raw.pk, quantity_kg="700"))
        self.assertFalse(reserve_raw_material(lot_id=self.raw.pk, quantity_kg="700"))
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("300.00"))

    def test_reserve_refuses_damaged_lot(self):
        RawMaterialLot.objects.filter(pk=self.raw.pk).update(
            status=RawMaterialLot.Status.DAMAGED
        )

        self.assertFalse(reserve_raw_material(lot_id=self.raw.pk, quantity_kg="100"))
        self.raw.refresh_from_db()
        self.assertEqual(self.raw.quantity_kg, Decimal("1000.00"))
        self.assertEqual(self.raw.status, RawMaterialLot.Status.DAMAGED)

    def test_deduct_finished_goods(self):
        result = deduct_finished_goods(sku=self.rice.sku, quantity_kg="120")

        self.assertFalse(result.capped)
        self.assertEqual(result.new_weight_kg, Decimal("180.00"))
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.weight_kg, Decimal("180.00"))

    def test_deduct_finished_goods_caps_at_zero(self):
        with self.assertLogs("inventory.services.lots", level="WARNING"):
            result = deduct_finished_goods(sku=self.rice.sku, quantity_kg="500")

        self.assertTrue(result.capped)
        self.assertEqual(result.reduced_kg, Decimal("300.00"))
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.weight_kg, Decimal("0.00"))
        self.assertEqual(self.rice.status, FinishedGoodsLot.Status.SOLD)

    def test_deduct_unknown_sku(self):
        with self.assertRaises(LotNotFoundError):
            deduct_finished_goods(sku="FG-NOPE", quantity_kg="1")
