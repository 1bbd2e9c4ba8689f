# sales/models/sales_order.py

"""
SALES ORDER

Lifecycle (see sales.services.order_lifecycle):
    draft -> confirmed -> invoiced -> shipped -> delivered
    confirmed -> shipped (invoice raised later)
    draft | confirmed | invoiced -> cancelled

RULES:
- total_amount = sum(item.total_price), derived by order_service
- An order has at most one Invoice (Invoice.order is one-to-one)
- Shipped / delivered orders cannot be cancelled
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class SalesOrder(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        CONFIRMED = "confirmed", "Confirmed"
        INVOICED = "invoiced", "Invoiced"
        SHIPPED = "shipped", "Shipped"
        DELIVERED = "delivered", "Delivered"
        CANCELLED = "cancelled", "Cancelled"

    class PaymentTerms(models.TextChoices):
        CASH = "cash", "Cash"
        CREDIT_7 = "credit_7", "Credit 7 days"
        CREDIT_15 = "credit_15", "Credit 15 days"
        CREDIT_30 = "credit_30", "Credit 30 days"

    class DeliveryMethod(models.TextChoices):
        PICKUP = "pickup", "Customer pickup"
        DELIVERY = "delivery", "Mill delivery"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(max_length=32, unique=True)

    customer_name = models.CharField(max_length=200)
    customer_phone = models.CharField(max_length=50, blank=True, default="")
    customer_address = models.TextField(blank=True, default="")
    shipping_address = models.TextField(blank=True, default="")

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    payment_terms = models.CharField(
        max_length=20, choices=PaymentTerms.choices, default=PaymentTerms.CASH
    )
    delivery_method = models.CharField(
        max_length=20, choices=DeliveryMethod.choices, default=DeliveryMethod.PICKUP
    )
    delivery_date = models.DateField(null=True, blank=True)
    driver = models.ForeignKey(
        "accounting.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="deliveries",
    )
    notes = models.TextField(blank=True, default="")

    confirmed_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales_orders_created",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="sales_order_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="sales_order_status_idx"),
            models.Index(fields=["customer_name"], name="sales_order_customer_idx"),
        ]

    @property
    def has_invoice(self) -> bool:
        return hasattr(self, "invoice")

    def clean(self):
        if not (self.customer_name or "").strip():
            raise ValidationError({"customer_name": "customer_name is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.order_number} ({self.status})"


class SalesOrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        SalesOrder, on_delete=models.CASCADE, related_name="items"
    )
    sku = models.CharField(max_length=64)
    product_name = models.CharField(max_length=200)
    quantity_kg = models.DecimalField(max_digits=14, decimal_places=2)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["sku"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity_kg__gt=Decimal("0.00")),
                name="sales_order_item_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.sku} x {self.quantity_kg} kg"
