# inventory/services/lots.py

"""
======================================================
PATH: inventory/services/lots.py
======================================================
LOT QUANTITY MUTATIONS

Rules:
- reserve_raw_material() is a single conditional UPDATE
  (quantity_kg >= requested), so two batch starts racing on one lot can
  never both succeed or drive it negative.
- deduct_finished_goods() floors at zero and reports whether it capped.
- Ledger rows are written by the calling pipeline, not here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.decimals import kg
from inventory.models import FinishedGoodsLot, RawMaterialLot
from inventory.services.exceptions import LotNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeductionResult:
    lot: FinishedGoodsLot
    requested_kg: Decimal
    old_weight_kg: Decimal
    new_weight_kg: Decimal
    reduced_kg: Decimal

    @property
    def capped(self) -> bool:
        return self.reduced_kg < self.requested_kg

    def as_dict(self) -> dict:
        return {
            "sku": self.lot.sku,
            "product_name": self.lot.product_name,
            "old_stock_kg": str(self.old_weight_kg),
            "new_stock_kg": str(self.new_weight_kg),
            "reduced_kg": str(self.reduced_kg),
            "capped": self.capped,
        }


def find_lot(sku: str, *, for_update: bool = False):
    """
    Resolve a SKU to its raw-material or finished-goods lot.
    """
    sku = (sku or "").strip()
    for model in (RawMaterialLot, FinishedGoodsLot):
        qs = model.objects.select_for_update() if for_update else model.objects
        lot = qs.filter(sku=sku).first()
        if lot is not None:
            return lot
    raise LotNotFoundError(f"No stock lot with sku={sku!r}")


def reserve_raw_material(*, lot_id, quantity_kg) -> bool:
    """
    Atomically take `quantity_kg` from a raw-material lot.
    Returns False (and changes nothing) when the lot is no longer available
    or no longer holds enough.
    """
    qty = kg(quantity_kg)
    updated = RawMaterialLot.objects.filter(
        pk=lot_id,
        status=RawMaterialLot.Status.AVAILABLE,
        quantity_kg__gte=qty,
    ).update(
        quantity_kg=F("quantity_kg") - qty,
        updated_at=timezone.now(),
    )
    if not updated:
        logger.warning(
            "Raw material reservation refused",
            extra={"lot_id": str(lot_id), "quantity_kg": str(qty)},
        )
        return False

    RawMaterialLot.objects.filter(
        pk=lot_id,
        quantity_kg=Decimal("0.00"),
        status=RawMaterialLot.Status.AVAILABLE,
    ).update(status=RawMaterialLot.Status.USED)
    return True


@transaction.atomic
def deduct_finished_goods(*, sku: str, quantity_kg) -> DeductionResult:
    """
    Reduce a finished-goods lot by up to `quantity_kg`, never below zero.
    """
    requested = kg(quantity_kg)
    lot = FinishedGoodsLot.objects.select_for_update().filter(sku=sku).first()
    if lot is None:
        raise LotNotFoundError(f"Finished goods not found: {sku}")

    old_weight = kg(lot.weight_kg)
    reduced = min(old_weight, requested)
    lot.weight_kg = kg(old_weight - reduced)
    lot.save()

    result = DeductionResult(
        lot=lot,
        requested_kg=requested,
        old_weight_kg=old_weight,
        new_weight_kg=lot.weight_kg,
        reduced_kg=reduced,
    )
    if result.capped:
        logger.warning(
            "Finished goods deduction capped at zero",
            extra={
                "sku": sku,
                "requested_kg": str(requested),
                "available_kg": str(old_weight),
            },
        )
    return result
