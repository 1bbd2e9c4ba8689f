# inventory/services/ledger.py

"""
======================================================
PATH: inventory/services/ledger.py
======================================================
STOCK LEDGER SERVICE

Operations:
- record_movement(): append one immutable movement
- balance_as_of(): sum(IN + ADJUST) - sum(OUT) up to a point in time
- history_for(): chronological movements for a SKU, optional range
- movements_by_reference(): everything one transaction caused

Callers in the purchase / production / sales pipelines wrap
record_movement() in core.services.side_effects.best_effort(); direct
callers (adjustments, tests) get LedgerError on failure.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Case, DecimalField, F, Sum, When
from django.utils import timezone

from inventory.models import StockMovement
from inventory.services.exceptions import LedgerError

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


def record_movement(
    *,
    movement_type: str,
    product_sku: str,
    quantity_kg,
    reference_kind: str,
    reference_id="",
    source_bin=None,
    destination_bin=None,
    reason: str = "",
    unit_cost=None,
    created_by=None,
    created_at: datetime | None = None,
) -> StockMovement:
    movement = StockMovement(
        movement_type=movement_type,
        product_sku=product_sku,
        quantity_kg=quantity_kg,
        reference_kind=reference_kind,
        reference_id=str(reference_id or ""),
        source_bin=source_bin,
        destination_bin=destination_bin,
        reason=(reason or "")[:255],
        unit_cost=unit_cost,
        created_by=created_by,
    )
    if created_at is not None:
        movement.created_at = created_at

    try:
        movement.save()
    except ValidationError as exc:
        raise LedgerError(f"Invalid stock movement for {product_sku}: {exc}") from exc

    logger.info(
        "Stock movement recorded",
        extra={
            "sku": movement.product_sku,
            "movement_type": movement.movement_type,
            "quantity_kg": str(movement.quantity_kg),
            "reference_kind": movement.reference_kind,
            "reference_id": movement.reference_id,
        },
    )
    return movement


def balance_as_of(product_sku: str, as_of: datetime | None = None) -> Decimal:
    as_of = as_of or timezone.now()
    signed = Case(
        When(movement_type=StockMovement.MovementType.OUT, then=-F("quantity_kg")),
        default=F("quantity_kg"),
        output_field=DecimalField(max_digits=16, decimal_places=2),
    )
    total = (
        StockMovement.objects.filter(product_sku=product_sku, created_at__lte=as_of)
        .aggregate(balance=Sum(signed))
        .get("balance")
    )
    return Decimal(total or ZERO).quantize(Decimal("0.01"))


def history_for(
    product_sku: str,
    start: datetime | None = None,
    end: datetime | None = None,
):
    qs = StockMovement.objects.filter(product_sku=product_sku)
    if start is not None:
        qs = qs.filter(created_at__gte=start)
    if end is not None:
        qs = qs.filter(created_at__lte=end)
    return qs.select_related("source_bin", "destination_bin", "created_by").order_by(
        "created_at", "id"
    )


def movements_by_reference(reference_kind: str, reference_id):
    return (
        StockMovement.objects.filter(
            reference_kind=reference_kind,
            reference_id=str(reference_id),
        )
        .select_related("source_bin", "destination_bin")
        .order_by("created_at", "id")
    )
