# inventory/models/stock_movement.py

"""
STOCK LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity_kg is a positive magnitude; direction comes from movement_type
- balance(sku, T) = sum(IN + ADJUST) - sum(OUT) over rows with created_at <= T
- total_cost is fixed at write time as unit_cost * quantity_kg

The ledger is the audit trail. Current quantities live on the lot rows;
the pipelines keep both in step.
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        IN = "IN", "Stock In"
        OUT = "OUT", "Stock Out"
        ADJUST = "ADJUST", "Adjustment"

    class ReferenceKind(models.TextChoices):
        PURCHASE = "purchase", "Purchase"
        PRODUCTION = "production", "Production"
        SALE = "sale", "Sale"
        ADJUSTMENT = "adjustment", "Adjustment"
        TRANSFER = "transfer", "Transfer"

    INBOUND_TYPES = {MovementType.IN, MovementType.ADJUST}

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    movement_type = models.CharField(max_length=6, choices=MovementType.choices)
    product_sku = models.CharField(max_length=64)
    quantity_kg = models.DecimalField(max_digits=14, decimal_places=2)

    source_bin = models.ForeignKey(
        "inventory.StorageBin",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="outgoing_movements",
    )
    destination_bin = models.ForeignKey(
        "inventory.StorageBin",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="incoming_movements",
    )

    reference_kind = models.CharField(max_length=20, choices=ReferenceKind.choices)
    reference_id = models.CharField(max_length=64, blank=True, default="")
    reason = models.CharField(max_length=255, blank=True, default="")

    unit_cost = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True, default=None
    )
    total_cost = models.DecimalField(
        max_digits=16, decimal_places=2, null=True, blank=True, default=None
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="stock_movements",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_kg__gt=Decimal("0.00")),
                name="stock_movement_quantity_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["product_sku", "created_at"], name="movement_sku_created_idx"),
            models.Index(fields=["reference_kind", "reference_id"], name="movement_reference_idx"),
            models.Index(fields=["movement_type"], name="movement_type_idx"),
            models.Index(fields=["created_at"], name="movement_created_idx"),
        ]

    def clean(self):
        if not (self.product_sku or "").strip():
            raise ValidationError({"product_sku": "product_sku is required"})

        if self.quantity_kg is None or self.quantity_kg <= 0:
            raise ValidationError({"quantity_kg": "quantity_kg must be greater than zero"})

        if self.unit_cost is not None and self.unit_cost < 0:
            raise ValidationError({"unit_cost": "unit_cost cannot be negative"})

        if (
            self.movement_type == self.MovementType.ADJUST
            and self.reference_kind != self.ReferenceKind.ADJUSTMENT
        ):
            raise ValidationError(
                {"reference_kind": "ADJUST movements must use reference_kind=adjustment"}
            )

        if self.reference_kind == self.ReferenceKind.TRANSFER and not (
            self.source_bin_id and self.destination_bin_id
        ):
            raise ValidationError("Transfers require both source_bin and destination_bin")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        if self.product_sku is not None:
            self.product_sku = self.product_sku.strip()

        if self.unit_cost is not None and self.quantity_kg is not None:
            self.total_cost = (Decimal(self.unit_cost) * Decimal(self.quantity_kg)).quantize(
                TWOPLACES, rounding=ROUND_HALF_UP
            )

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def signed_quantity_kg(self) -> Decimal:
        qty = Decimal(self.quantity_kg or 0)
        return qty if self.movement_type in self.INBOUND_TYPES else -qty

    def __str__(self):
        return f"{self.product_sku} | {self.movement_type} | {self.quantity_kg} kg"
