# production/models/by_product.py

"""
BY-PRODUCT STOCK (husk, bran, broken rice)

Recorded and sold through its own manual workflow; batch completion keeps
the by-product weights on the batch and does not create these rows.
"""

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class ByProduct(models.Model):
    class ProductType(models.TextChoices):
        HUSK = "husk", "Husk"
        BRAN = "bran", "Bran"
        BROKEN_RICE = "broken_rice", "Broken rice"

    class Status(models.TextChoices):
        IN_STOCK = "in_stock", "In stock"
        PARTIALLY_SOLD = "partially_sold", "Partially sold"
        SOLD_OUT = "sold_out", "Sold out"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(
        "production.ProductionBatch",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="by_products",
    )
    product_type = models.CharField(max_length=20, choices=ProductType.choices)
    quantity_kg = models.DecimalField(max_digits=14, decimal_places=2)
    selling_price_per_kg = models.DecimalField(max_digits=12, decimal_places=2)

    sold_quantity_kg = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    sold_revenue = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    production_date = models.DateField(default=timezone.localdate)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.IN_STOCK
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-production_date"]
        indexes = [
            models.Index(fields=["production_date", "product_type"], name="by_product_date_type_idx")
        ]

    @property
    def stock_balance_kg(self) -> Decimal:
        return Decimal(self.quantity_kg or 0) - Decimal(self.sold_quantity_kg or 0)

    def clean(self):
        if self.quantity_kg is not None and self.quantity_kg < 0:
            raise ValidationError({"quantity_kg": "quantity_kg cannot be negative"})
        if self.sold_quantity_kg is not None and self.quantity_kg is not None:
            if self.sold_quantity_kg > self.quantity_kg:
                raise ValidationError(
                    {"sold_quantity_kg": "Cannot sell more than the recorded quantity"}
                )

    def save(self, *args, **kwargs):
        sold = Decimal(self.sold_quantity_kg or 0)
        if sold <= 0:
            self.status = self.Status.IN_STOCK
        elif sold >= Decimal(self.quantity_kg or 0):
            self.status = self.Status.SOLD_OUT
        else:
            self.status = self.Status.PARTIALLY_SOLD
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_type} {self.quantity_kg} kg ({self.status})"
