# purchases/services/receiving_service.py

"""
======================================================
PATH: purchases/services/receiving_service.py
======================================================
PURCHASE RECEIVING SERVICE

receive_purchase() books a weighed paddy delivery (auto-receive):

1) Reject a future receipt time, resolve supplier
2) Issue PO number (PO-<year>-<seq>) from the atomic counter
3) Create Purchase (status=received): net + total derived on save
4) Seed RawMaterialLot RM-<po> with the net weight      (best-effort)
5) Ledger IN for the lot, unit_cost = price per kg       (best-effort)
6) purchase_received event after commit

The purchase row is authoritative. Steps 4 and 5 run in their own
savepoints: a failure there is logged and the purchase still stands.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.models import DocumentSequence
from core.services.mill_config import MillConfig, load_mill_config
from core.services.notifications import notify
from core.services.numbering import next_document_number
from core.services.side_effects import best_effort
from inventory.models import RawMaterialLot, StockMovement
from inventory.services.ledger import record_movement
from purchases.models import PaddyType, Purchase, Supplier

logger = logging.getLogger(__name__)


class PurchaseReceivingError(ValueError):
    pass


class SupplierNotFoundError(PurchaseReceivingError):
    pass


@dataclass(frozen=True)
class ReceivingResult:
    purchase: Purchase
    raw_material: RawMaterialLot | None
    movement: StockMovement | None


def raw_material_name(*, paddy_type: str, quality_grade: str) -> str:
    label = PaddyType(paddy_type).label if paddy_type in PaddyType.values else paddy_type
    return f"{label} Paddy - {quality_grade}"


def _create_lot(*, purchase: Purchase, storage_bin, config: MillConfig) -> RawMaterialLot:
    return RawMaterialLot.objects.create(
        sku=f"RM-{purchase.po_number}",
        name=raw_material_name(
            paddy_type=purchase.paddy_type, quality_grade=purchase.quality_grade
        ),
        category=RawMaterialLot.Category.PADDY,
        paddy_type=purchase.paddy_type,
        quality_grade=purchase.quality_grade,
        quantity_kg=purchase.net_weight_kg,
        minimum_stock_kg=Decimal(config.raw_material_minimum_stock_kg).quantize(Decimal("0.01")),
        cost_per_unit=purchase.price_per_kg,
        supplier=purchase.supplier,
        purchase=purchase,
        storage_bin=storage_bin,
        received_at=purchase.received_at,
    )


@transaction.atomic
def receive_purchase(
    *,
    supplier_id,
    paddy_type: str,
    quality_grade: str,
    gross_weight_kg,
    price_per_kg,
    tare_kg=None,
    moisture_percent=None,
    transport_cost=None,
    unloading_cost=None,
    storage_bin=None,
    received_at=None,
    notes: str = "",
    user=None,
    config: MillConfig | None = None,
) -> ReceivingResult:
    config = config or load_mill_config()

    now = timezone.now()
    if received_at is not None and received_at > now:
        raise PurchaseReceivingError("received_at cannot be in the future")

    supplier = Supplier.objects.filter(pk=supplier_id, is_active=True).first()
    if supplier is None:
        raise SupplierNotFoundError("Supplier not found")

    po_number = next_document_number(
        document_type=DocumentSequence.DocumentType.PURCHASE,
        config=config,
    )

    purchase = Purchase.objects.create(
        po_number=po_number,
        supplier=supplier,
        paddy_type=paddy_type,
        quality_grade=quality_grade,
        moisture_percent=moisture_percent,
        gross_weight_kg=gross_weight_kg,
        tare_kg=tare_kg if tare_kg is not None else Decimal("0.00"),
        price_per_kg=price_per_kg,
        transport_cost=transport_cost if transport_cost is not None else Decimal("0.00"),
        unloading_cost=unloading_cost if unloading_cost is not None else Decimal("0.00"),
        status=Purchase.STATUS_RECEIVED,
        received_at=received_at or now,
        notes=notes or "",
        created_by=user,
    )

    lot = best_effort(
        "inventory:raw-material-lot",
        _create_lot,
        purchase=purchase,
        storage_bin=storage_bin,
        config=config,
    )

    movement = None
    if lot is not None:
        movement = best_effort(
            "ledger:purchase-receipt",
            record_movement,
            movement_type=StockMovement.MovementType.IN,
            product_sku=lot.sku,
            quantity_kg=purchase.net_weight_kg,
            reference_kind=StockMovement.ReferenceKind.PURCHASE,
            reference_id=purchase.pk,
            destination_bin=storage_bin,
            reason=f"Purchase received {purchase.po_number}",
            unit_cost=purchase.price_per_kg,
            created_by=user,
            created_at=purchase.received_at,
        )

    notify(
        "purchase_received",
        po_number=purchase.po_number,
        supplier=supplier.name,
        net_weight_kg=str(purchase.net_weight_kg),
        total_amount=str(purchase.total_amount),
    )

    logger.info(
        "Purchase received",
        extra={
            "po_number": purchase.po_number,
            "supplier_id": str(supplier.pk),
            "net_weight_kg": str(purchase.net_weight_kg),
            "total_amount": str(purchase.total_amount),
            "raw_material_sku": getattr(lot, "sku", None),
        },
    )
    return ReceivingResult(purchase=purchase, raw_material=lot, movement=movement)
