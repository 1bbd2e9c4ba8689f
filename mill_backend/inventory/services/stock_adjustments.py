# inventory/services/stock_adjustments.py

"""
STOCK ADJUSTMENTS SERVICE

Purpose:
- Correct a lot's quantity after a physical count.
- Move a lot between storage bins.
- Keep lot quantities and the ledger in step (same transaction).

Rules:
- delta_kg must be non-zero; reason is required
- positive delta -> ADJUST movement for the full delta
- negative delta -> OUT movement (reference_kind=adjustment) for what was
  actually removed; the lot floors at zero
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import transaction

from core.decimals import kg
from inventory.models import RawMaterialLot, StockMovement, StorageBin
from inventory.services.exceptions import StockAdjustmentError
from inventory.services.ledger import record_movement
from inventory.services.lots import find_lot


@dataclass(frozen=True)
class AdjustmentResult:
    lot: object
    movement: StockMovement | None
    requested_delta_kg: Decimal
    applied_delta_kg: Decimal


def _quantity_field(lot) -> str:
    return "quantity_kg" if isinstance(lot, RawMaterialLot) else "weight_kg"


def _unit_cost(lot):
    if isinstance(lot, RawMaterialLot):
        return lot.cost_per_unit
    return lot.price_per_kg


def _to_delta(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise StockAdjustmentError("delta_kg is required")
    delta = kg(value)
    if delta == 0:
        raise StockAdjustmentError("delta_kg must be a non-zero number")
    return delta


@transaction.atomic
def adjust_stock(
    *,
    sku: str,
    delta_kg,
    reason: str,
    user=None,
) -> AdjustmentResult:
    """
    Adjust a raw-material or finished-goods lot by `delta_kg`.
    """
    delta = _to_delta(delta_kg)
    reason = (reason or "").strip()
    if not reason:
        raise StockAdjustmentError("reason is required for stock adjustments")

    lot = find_lot(sku, for_update=True)
    field = _quantity_field(lot)
    current = kg(getattr(lot, field))

    if delta > 0:
        applied = delta
        movement_type = StockMovement.MovementType.ADJUST
    else:
        applied = -min(current, abs(delta))
        movement_type = StockMovement.MovementType.OUT

    setattr(lot, field, kg(current + applied))
    try:
        lot.save()
    except ValidationError as exc:
        raise StockAdjustmentError(str(exc)) from exc

    movement = None
    if applied != 0:
        movement = record_movement(
            movement_type=movement_type,
            product_sku=lot.sku,
            quantity_kg=abs(applied),
            reference_kind=StockMovement.ReferenceKind.ADJUSTMENT,
            reference_id=lot.pk,
            reason=reason,
            unit_cost=_unit_cost(lot),
            created_by=user,
        )

    return AdjustmentResult(
        lot=lot,
        movement=movement,
        requested_delta_kg=delta,
        applied_delta_kg=applied,
    )


@transaction.atomic
def transfer_stock(
    *,
    sku: str,
    destination_bin: StorageBin,
    user=None,
    reason: str = "",
) -> list[StockMovement]:
    """
    Move a whole lot to another bin: OUT of the old bin, IN to the new one.
    The SKU balance is unchanged.
    """
    lot = find_lot(sku, for_update=True)
    source_bin = lot.storage_bin
    if source_bin is None:
        raise StockAdjustmentError("Lot has no current storage bin to transfer from")
    if destination_bin is None or destination_bin.pk == source_bin.pk:
        raise StockAdjustmentError("destination_bin must differ from the current bin")

    quantity = kg(getattr(lot, _quantity_field(lot)))
    if quantity <= 0:
        raise StockAdjustmentError("Cannot transfer an empty lot")

    movements = [
        record_movement(
            movement_type=movement_type,
            product_sku=lot.sku,
            quantity_kg=quantity,
            reference_kind=StockMovement.ReferenceKind.TRANSFER,
            reference_id=lot.pk,
            source_bin=source_bin,
            destination_bin=destination_bin,
            reason=reason or f"Transfer {source_bin.code} -> {destination_bin.code}",
            created_by=user,
        )
        for movement_type in (StockMovement.MovementType.OUT, StockMovement.MovementType.IN)
    ]

    lot.storage_bin = destination_bin
    lot.save()
    return movements
