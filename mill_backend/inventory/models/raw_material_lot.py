# inventory/models/raw_material_lot.py

"""
RAW MATERIAL LOT

One received quantity of input material (paddy, packaging, chemicals).

RULES:
- quantity_kg is service-managed: purchase receiving seeds it, batch start
  decrements it with a conditional UPDATE, adjustments go through
  inventory.services.stock_adjustments. Every change writes a StockMovement
  against `sku`.
- quantity_kg >= 0 always.
- status follows quantity: 0 -> used, > 0 -> available
  (damaged / expired are set by hand and left alone).
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from purchases.models import PaddyType

TWOPLACES = Decimal("0.01")


class RawMaterialLot(models.Model):
    class Category(models.TextChoices):
        PADDY = "paddy", "Paddy"
        PACKAGING = "packaging", "Packaging"
        CHEMICAL = "chemical", "Chemical"
        OTHER = "other", "Other"

    class Status(models.TextChoices):
        AVAILABLE = "available", "Available"
        USED = "used", "Used"
        DAMAGED = "damaged", "Damaged"
        EXPIRED = "expired", "Expired"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=64, unique=True)
    name = models.CharField(max_length=200)
    category = models.CharField(
        max_length=20, choices=Category.choices, default=Category.PADDY
    )
    paddy_type = models.CharField(
        max_length=10, choices=PaddyType.choices, blank=True, default=""
    )
    quality_grade = models.CharField(max_length=20, blank=True, default="")

    quantity_kg = models.DecimalField(max_digits=14, decimal_places=2)
    minimum_stock_kg = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    cost_per_unit = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    supplier = models.ForeignKey(
        "purchases.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="raw_material_lots",
    )
    purchase = models.ForeignKey(
        "purchases.Purchase",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="raw_material_lots",
    )
    storage_bin = models.ForeignKey(
        "inventory.StorageBin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="raw_material_lots",
    )

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.AVAILABLE
    )
    received_at = models.DateTimeField(default=timezone.now)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["received_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_kg__gte=Decimal("0.00")),
                name="raw_material_quantity_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["category", "status"], name="raw_lot_category_status_idx"),
            models.Index(fields=["purchase"], name="raw_lot_purchase_idx"),
            models.Index(fields=["received_at"], name="raw_lot_received_idx"),
        ]

    def clean(self):
        if not (self.sku or "").strip():
            raise ValidationError({"sku": "sku is required"})

        if self.quantity_kg is not None and self.quantity_kg < 0:
            raise ValidationError({"quantity_kg": "quantity_kg cannot be negative"})

        if self.cost_per_unit is not None and self.cost_per_unit < 0:
            raise ValidationError({"cost_per_unit": "cost_per_unit cannot be negative"})

    def sync_status(self) -> None:
        if self.status not in {self.Status.AVAILABLE, self.Status.USED}:
            return
        if self.quantity_kg is None:
            return
        self.status = self.Status.USED if self.quantity_kg == 0 else self.Status.AVAILABLE

    def save(self, *args, **kwargs):
        if self.sku is not None:
            self.sku = self.sku.strip()
        self.sync_status()
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        from inventory.models.stock_movement import StockMovement

        if StockMovement.objects.filter(product_sku=self.sku).exists():
            raise ValidationError(
                "Cannot delete a raw material lot with stock movements (audit trail)."
            )
        return super().delete(*args, **kwargs)

    @property
    def total_cost(self) -> Decimal:
        return (Decimal(self.quantity_kg or 0) * Decimal(self.cost_per_unit or 0)).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )

    @property
    def is_low_stock(self) -> bool:
        return Decimal(self.quantity_kg or 0) <= Decimal(self.minimum_stock_kg or 0)

    def __str__(self):
        return f"{self.sku} ({self.quantity_kg} kg, {self.status})"
