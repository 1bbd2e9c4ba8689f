# sales/models/invoice.py

"""
INVOICE

Raised once per confirmed SalesOrder by sales.services.invoice_service.

Totals (rounded half-up to 2dp at each step):
    discount_amount = subtotal * discount_percent / 100
    taxable_amount  = subtotal - discount_amount
    tax_amount      = taxable_amount * tax_percent / 100
    total_amount    = taxable_amount + tax_amount

payment_status follows sum(payments) vs total_amount.
Paid invoices are locked: no edits, no cancellation.
Cancellation is a soft terminal state, never a delete.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Invoice(models.Model):
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        CANCELLED = "cancelled", "Cancelled"

    class PaymentStatus(models.TextChoices):
        UNPAID = "unpaid", "Unpaid"
        PARTIALLY_PAID = "partially_paid", "Partially paid"
        PAID = "paid", "Paid"
        OVERDUE = "overdue", "Overdue"
        CANCELLED = "cancelled", "Cancelled"

    OPEN_PAYMENT_STATUSES = {
        PaymentStatus.UNPAID,
        PaymentStatus.PARTIALLY_PAID,
        PaymentStatus.OVERDUE,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice_number = models.CharField(max_length=32, unique=True)
    order = models.OneToOneField(
        "sales.SalesOrder",
        on_delete=models.PROTECT,
        related_name="invoice",
    )
    customer_name = models.CharField(max_length=200)

    invoice_date = models.DateTimeField(default=timezone.now)
    due_date = models.DateField()

    subtotal = models.DecimalField(max_digits=14, decimal_places=2)
    discount_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    discount_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    tax_percent = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(max_digits=14, decimal_places=2)
    paid_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    payment_status = models.CharField(
        max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    notes = models.TextField(blank=True, default="")

    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices_cancelled",
    )
    cancel_reason = models.CharField(max_length=255, blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices_created",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-invoice_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="invoice_total_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=Decimal("0.00")),
                name="invoice_paid_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["invoice_date"], name="invoice_date_idx"),
            models.Index(fields=["payment_status"], name="invoice_payment_status_idx"),
            models.Index(fields=["status", "due_date"], name="invoice_status_due_idx"),
        ]

    @property
    def balance_due(self) -> Decimal:
        return Decimal(self.total_amount or 0) - Decimal(self.paid_amount or 0)

    @property
    def is_locked(self) -> bool:
        return (
            self.payment_status == self.PaymentStatus.PAID
            or self.status == self.Status.CANCELLED
        )

    def clean(self):
        for field in ("discount_percent", "tax_percent"):
            value = getattr(self, field)
            if value is not None and not (Decimal("0") <= value <= Decimal("100")):
                raise ValidationError({field: f"{field} must be between 0 and 100"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.invoice_number} ({self.payment_status})"


class InvoiceItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice = models.ForeignKey(
        Invoice, on_delete=models.CASCADE, related_name="items"
    )
    sku = models.CharField(max_length=64)
    product_name = models.CharField(max_length=200)
    quantity_kg = models.DecimalField(max_digits=14, decimal_places=2)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["sku"]

    def __str__(self):
        return f"{self.sku} x {self.quantity_kg} kg"


class InvoicePayment(models.Model):
    """
    One payment against an invoice. Append-only.
    """

    class Method(models.TextChoices):
        CASH = "cash", "Cash"
        CHEQUE = "cheque", "Cheque"
        BANK_TRANSFER = "bank_transfer", "Bank transfer"
        ONLINE = "online", "Online"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    invoice = models.ForeignKey(
        Invoice, on_delete=models.PROTECT, related_name="payments"
    )
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    method = models.CharField(max_length=20, choices=Method.choices)
    paid_on = models.DateField(default=timezone.localdate)
    processor = models.CharField(max_length=100, blank=True, default="")
    reference = models.CharField(max_length=100, blank=True, default="")
    notes = models.CharField(max_length=255, blank=True, default="")

    recorded_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoice_payments_recorded",
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["paid_on", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=Decimal("0.00")),
                name="invoice_payment_amount_positive",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("InvoicePayment records are immutable")
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("InvoicePayment records are immutable and cannot be deleted")

    def __str__(self):
        return f"{self.invoice.invoice_number}: {self.amount} ({self.method})"
