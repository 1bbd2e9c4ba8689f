# production/services/batch_service.py

"""
======================================================
PATH: production/services/batch_service.py
======================================================
PRODUCTION BATCH SERVICE

start_batch():
  1) Validate the raw-material lot exists and holds enough paddy
  2) Issue a batch number, create the batch (in_progress)
  3) Reserve the paddy with a conditional decrement
     -> refused: compensate (delete the batch) and raise
  4) Ledger OUT for the raw material (best-effort)

complete_batch():
  1) Lock batch, reject completed / cancelled
  2) Enforce mass balance (output <= input * (1 + tolerance)), bag size
  3) Record output + yield, mark completed
  4) Create the finished-goods lot FG-<batch number>
  5) Ledger IN for the rice (best-effort), production_completed event

cancel_batch():
  queued / in_progress -> cancelled. Loaded paddy is not returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from django.db import transaction
from django.utils import timezone

from core.decimals import TWOPLACES, kg, money
from core.models import DocumentSequence
from core.services.compensation import CompensatingSteps
from core.services.mill_config import MillConfig, load_mill_config
from core.services.notifications import notify
from core.services.numbering import next_document_number
from core.services.side_effects import best_effort
from inventory.models import FinishedGoodsLot, RawMaterialLot, StockMovement
from inventory.models.finished_goods_lot import ALLOWED_BAG_WEIGHTS_KG
from inventory.services.ledger import record_movement
from inventory.services.lots import reserve_raw_material
from production.models import ProductionBatch
from production.services.batch_lifecycle import validate_mass_balance, validate_transition
from production.services.exceptions import (
    BatchAlreadyCompletedError,
    BatchNotFoundError,
    InsufficientRawMaterialError,
    ProductionError,
    RawMaterialNotFoundError,
)

logger = logging.getLogger(__name__)

PaddyType = ProductionBatch.PaddyType


@dataclass(frozen=True)
class BatchOutput:
    rice_kg: Decimal = Decimal("0.00")
    broken_kg: Decimal = Decimal("0.00")
    bran_kg: Decimal = Decimal("0.00")
    husk_kg: Decimal = Decimal("0.00")
    impurity_kg: Decimal = Decimal("0.00")

    @classmethod
    def of(cls, **values) -> "BatchOutput":
        return cls(**{name: kg(value) for name, value in values.items() if value is not None})

    @property
    def total_kg(self) -> Decimal:
        return kg(self.rice_kg + self.broken_kg + self.bran_kg + self.husk_kg + self.impurity_kg)

    def as_fields(self) -> dict:
        return {
            "rice_kg": kg(self.rice_kg),
            "broken_kg": kg(self.broken_kg),
            "bran_kg": kg(self.bran_kg),
            "husk_kg": kg(self.husk_kg),
            "impurity_kg": kg(self.impurity_kg),
        }


@dataclass(frozen=True)
class CompletionResult:
    batch: ProductionBatch
    finished_goods: FinishedGoodsLot
    movements: list = field(default_factory=list)


# ============================================================
# HELPERS
# ============================================================


def resolve_paddy_mix(*, paddy_type, nadu_kg, samba_kg, input_kg, lot: RawMaterialLot):
    """
    Returns (paddy_type, nadu_kg, samba_kg).

    - An explicit breakdown wins; the type follows it unless given.
    - A single type puts the whole input on that side.
    - With neither, the lot's paddy type is used (mixed if it has none).
    """
    nadu = kg(nadu_kg)
    samba = kg(samba_kg)

    if nadu > 0 or samba > 0:
        if not paddy_type:
            if nadu > 0 and samba > 0:
                paddy_type = PaddyType.MIXED
            else:
                paddy_type = PaddyType.NADU if nadu > 0 else PaddyType.SAMBA
        return paddy_type, nadu, samba

    if not paddy_type and lot.paddy_type in {PaddyType.NADU, PaddyType.SAMBA}:
        paddy_type = lot.paddy_type
    paddy_type = paddy_type or PaddyType.MIXED

    if paddy_type == PaddyType.NADU:
        return paddy_type, kg(input_kg), kg(0)
    if paddy_type == PaddyType.SAMBA:
        return paddy_type, kg(0), kg(input_kg)
    return paddy_type, kg(0), kg(0)


def _yield_percentage(rice_kg: Decimal, input_kg: Decimal) -> Decimal:
    if not input_kg:
        return Decimal("0.00")
    return (Decimal(rice_kg) / Decimal(input_kg) * 100).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _bag_count(rice_kg: Decimal, bag_weight_kg: Decimal) -> int:
    if not bag_weight_kg:
        return 0
    return int((Decimal(rice_kg) / Decimal(bag_weight_kg)).to_integral_value(rounding=ROUND_DOWN))


def _discard_batch(batch: ProductionBatch) -> None:
    batch.delete()
    logger.warning(
        "Batch creation rolled back",
        extra={"batch_number": batch.batch_number},
    )


# ============================================================
# START
# ============================================================


@transaction.atomic
def start_batch(
    *,
    raw_material_id,
    input_quantity_kg,
    paddy_type: str | None = None,
    paddy_nadu_kg=None,
    paddy_samba_kg=None,
    operators=(),
    machines=(),
    storage_bin=None,
    notes: str = "",
    user=None,
    config: MillConfig | None = None,
) -> ProductionBatch:
    config = config or load_mill_config()

    qty = kg(input_quantity_kg)
    if qty <= 0:
        raise ProductionError("input_quantity_kg must be greater than zero")

    lot = RawMaterialLot.objects.filter(pk=raw_material_id).first()
    if lot is None:
        raise RawMaterialNotFoundError("Raw material not found")

    if lot.status != RawMaterialLot.Status.AVAILABLE or lot.quantity_kg < qty:
        raise InsufficientRawMaterialError("Insufficient raw material quantity")

    paddy_type, nadu, samba = resolve_paddy_mix(
        paddy_type=paddy_type,
        nadu_kg=paddy_nadu_kg,
        samba_kg=paddy_samba_kg,
        input_kg=qty,
        lot=lot,
    )

    batch_number = next_document_number(
        document_type=DocumentSequence.DocumentType.BATCH,
        config=config,
    )

    steps = CompensatingSteps(f"batch-start:{batch_number}")
    batch = steps.run(
        lambda: ProductionBatch.objects.create(
            batch_number=batch_number,
            paddy_type=paddy_type,
            paddy_nadu_kg=nadu,
            paddy_samba_kg=samba,
            input_quantity_kg=qty,
            raw_material=lot,
            storage_bin=storage_bin,
            status=ProductionBatch.Status.IN_PROGRESS,
            started_at=timezone.now(),
            notes=notes or "",
            created_by=user,
        ),
        compensate=_discard_batch,
    )

    if not reserve_raw_material(lot_id=lot.pk, quantity_kg=qty):
        steps.compensate()
        raise InsufficientRawMaterialError(
            "Insufficient raw material quantity or material not found. Batch creation cancelled."
        )

    if operators:
        batch.operators.set(operators)
    if machines:
        batch.machines.set(machines)

    best_effort(
        "ledger:production-start",
        record_movement,
        movement_type=StockMovement.MovementType.OUT,
        product_sku=lot.sku,
        quantity_kg=qty,
        reference_kind=StockMovement.ReferenceKind.PRODUCTION,
        reference_id=batch.pk,
        source_bin=storage_bin or lot.storage_bin,
        reason="Production batch started",
        unit_cost=lot.cost_per_unit,
        created_by=user,
    )

    logger.info(
        "Production batch started",
        extra={
            "batch_number": batch.batch_number,
            "raw_material_sku": lot.sku,
            "input_kg": str(qty),
        },
    )
    return batch


# ============================================================
# COMPLETE
# ============================================================


@transaction.atomic
def complete_batch(
    *,
    batch_id,
    output: BatchOutput,
    rice_grade: str | None = None,
    bag_weight_kg=None,
    bag_count: int | None = None,
    expiry_date=None,
    price_per_kg=None,
    storage_bin=None,
    notes: str = "",
    user=None,
    config: MillConfig | None = None,
) -> CompletionResult:
    config = config or load_mill_config()

    batch = (
        ProductionBatch.objects.select_for_update()
        .select_related("raw_material")
        .filter(pk=batch_id)
        .first()
    )
    if batch is None:
        raise BatchNotFoundError("Batch not found")

    if batch.status == ProductionBatch.Status.COMPLETED:
        raise BatchAlreadyCompletedError("Batch is already completed")

    validate_transition(batch=batch, target_status=ProductionBatch.Status.COMPLETED)

    for name, value in output.as_fields().items():
        if value < 0:
            raise ProductionError(f"{name} cannot be negative")

    validate_mass_balance(
        input_kg=batch.input_quantity_kg,
        total_output_kg=output.total_kg,
        tolerance_pct=config.production_tolerance_pct,
    )

    bag_weight = kg(bag_weight_kg or config.default_bag_weight_kg)
    if bag_weight not in ALLOWED_BAG_WEIGHTS_KG:
        raise ProductionError("bag_weight_kg must be one of 1, 5, 10, 25, 50")

    now = timezone.now()
    for name, value in output.as_fields().items():
        setattr(batch, name, value)
    batch.yield_percentage = _yield_percentage(output.rice_kg, batch.input_quantity_kg)
    batch.status = ProductionBatch.Status.COMPLETED
    batch.ended_at = now
    if notes:
        batch.notes = notes
    batch.save()

    rice_kg = kg(output.rice_kg)
    finished = FinishedGoodsLot.objects.create(
        sku=f"FG-{batch.batch_number}",
        batch=batch,
        paddy_type=batch.paddy_type,
        rice_grade=rice_grade or config.default_rice_grade,
        weight_kg=rice_kg,
        bag_weight_kg=bag_weight,
        bag_count=bag_count if bag_count is not None else _bag_count(rice_kg, bag_weight),
        expiry_date=expiry_date or (timezone.localdate() + timedelta(days=config.default_expiry_days)),
        price_per_kg=money(price_per_kg),
        storage_bin=storage_bin,
        produced_at=now,
    )

    movements = []
    if rice_kg > 0:
        movement = best_effort(
            "ledger:production-output",
            record_movement,
            movement_type=StockMovement.MovementType.IN,
            product_sku=finished.sku,
            quantity_kg=rice_kg,
            reference_kind=StockMovement.ReferenceKind.PRODUCTION,
            reference_id=batch.pk,
            destination_bin=storage_bin,
            reason="Production output - Rice",
            unit_cost=finished.price_per_kg if finished.price_per_kg > 0 else None,
            created_by=user,
        )
        if movement is not None:
            movements.append(movement)

    notify(
        "production_completed",
        batch_number=batch.batch_number,
        yield_kg=str(rice_kg),
        yield_percentage=str(batch.yield_percentage),
    )

    logger.info(
        "Production batch completed",
        extra={
            "batch_number": batch.batch_number,
            "rice_kg": str(rice_kg),
            "total_output_kg": str(output.total_kg),
            "yield_percentage": str(batch.yield_percentage),
        },
    )
    return CompletionResult(batch=batch, finished_goods=finished, movements=movements)


# ============================================================
# CANCEL
# ============================================================


@transaction.atomic
def cancel_batch(*, batch_id, reason: str = "", user=None) -> ProductionBatch:
    batch = ProductionBatch.objects.select_for_update().filter(pk=batch_id).first()
    if batch is None:
        raise BatchNotFoundError("Batch not found")

    validate_transition(batch=batch, target_status=ProductionBatch.Status.CANCELLED)

    batch.status = ProductionBatch.Status.CANCELLED
    batch.ended_at = timezone.now()
    batch.cancel_reason = (reason or "Cancelled")[:255]
    batch.save()

    logger.info(
        "Production batch cancelled",
        extra={"batch_number": batch.batch_number, "reason": batch.cancel_reason},
    )
    return batch
