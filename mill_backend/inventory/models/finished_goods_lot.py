# inventory/models/finished_goods_lot.py

"""
FINISHED GOODS LOT

Packaged rice produced by one completed batch.

RULES:
- weight_kg is service-managed (batch completion seeds it, invoicing and
  adjustments change it), each change mirrored by a StockMovement on `sku`.
- weight_kg >= 0 always; deductions floor at zero.
- status follows weight: 0 -> sold, > 0 -> in_stock
  (damaged / expired are set by hand and left alone).
"""

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")

ALLOWED_BAG_WEIGHTS_KG = {Decimal("1"), Decimal("5"), Decimal("10"), Decimal("25"), Decimal("50")}


class FinishedGoodsLot(models.Model):
    class PaddyType(models.TextChoices):
        NADU = "nadu", "Nadu"
        SAMBA = "samba", "Samba"
        MIXED = "mixed", "Mixed"

    class RiceGrade(models.TextChoices):
        PREMIUM = "premium", "Premium"
        STANDARD = "standard", "Standard"
        BROKEN = "broken", "Broken"

    class Status(models.TextChoices):
        IN_STOCK = "in_stock", "In stock"
        SOLD = "sold", "Sold"
        DAMAGED = "damaged", "Damaged"
        EXPIRED = "expired", "Expired"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    sku = models.CharField(max_length=64, unique=True)
    batch = models.ForeignKey(
        "production.ProductionBatch",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="finished_goods",
    )

    paddy_type = models.CharField(max_length=10, choices=PaddyType.choices)
    rice_grade = models.CharField(
        max_length=10, choices=RiceGrade.choices, default=RiceGrade.STANDARD
    )

    weight_kg = models.DecimalField(max_digits=14, decimal_places=2)
    bag_count = models.PositiveIntegerField(default=0)
    bag_weight_kg = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("50.00")
    )

    expiry_date = models.DateField()
    price_per_kg = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    storage_bin = models.ForeignKey(
        "inventory.StorageBin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="finished_goods_lots",
    )

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.IN_STOCK
    )
    produced_at = models.DateTimeField(default=timezone.now)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["expiry_date", "produced_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(weight_kg__gte=Decimal("0.00")),
                name="finished_goods_weight_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "paddy_type"], name="fg_lot_status_paddy_idx"),
            models.Index(fields=["batch"], name="fg_lot_batch_idx"),
            models.Index(fields=["expiry_date"], name="fg_lot_expiry_idx"),
        ]

    def clean(self):
        if not (self.sku or "").strip():
            raise ValidationError({"sku": "sku is required"})

        if self.weight_kg is not None and self.weight_kg < 0:
            raise ValidationError({"weight_kg": "weight_kg cannot be negative"})

        if self.bag_weight_kg is not None and Decimal(self.bag_weight_kg) not in ALLOWED_BAG_WEIGHTS_KG:
            raise ValidationError(
                {"bag_weight_kg": "bag_weight_kg must be one of 1, 5, 10, 25, 50"}
            )

        if self.price_per_kg is not None and self.price_per_kg < 0:
            raise ValidationError({"price_per_kg": "price_per_kg cannot be negative"})

    def sync_status(self) -> None:
        if self.status not in {self.Status.IN_STOCK, self.Status.SOLD}:
            return
        if self.weight_kg is None:
            return
        self.status = self.Status.SOLD if self.weight_kg == 0 else self.Status.IN_STOCK

    def save(self, *args, **kwargs):
        if self.sku is not None:
            self.sku = self.sku.strip()
        self.sync_status()
        self.full_clean()
        return super().save(*args, **kwargs)

    @property
    def product_name(self) -> str:
        return f"{self.get_paddy_type_display()} Rice - {self.rice_grade}"

    @property
    def total_value(self) -> Decimal:
        return (Decimal(self.price_per_kg or 0) * Decimal(self.weight_kg or 0)).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )

    def __str__(self):
        return f"{self.sku} ({self.weight_kg} kg, {self.status})"
