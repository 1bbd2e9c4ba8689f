# purchases/models.py

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


User = settings.AUTH_USER_MODEL


class PaddyType(models.TextChoices):
    NADU = "nadu", "Nadu"
    SAMBA = "samba", "Samba"
    OTHER = "other", "Other"


class Supplier(models.Model):
    """
    Paddy supplier (farmer, collector or trader).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    address = models.TextField(blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="supplier_name_idx"),
            models.Index(fields=["is_active"], name="supplier_active_idx"),
        ]

    def __str__(self):
        return self.name


class Purchase(models.Model):
    """
    A weighed paddy delivery.

    net_weight_kg and total_amount are derived on save:
        net   = gross - tare
        total = net * price_per_kg + transport + unloading

    Receiving (raw-material lot + IN movement) is done by
    purchases.services.receiving_service.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    STATUS_DRAFT = "draft"
    STATUS_CONFIRMED = "confirmed"
    STATUS_RECEIVED = "received"
    STATUS_CANCELLED = "cancelled"

    STATUSES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_RECEIVED, "Received"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    GRADE_PREMIUM = "premium"
    GRADE_STANDARD = "standard"
    GRADE_BASIC = "basic"

    GRADES = [
        (GRADE_PREMIUM, "Premium"),
        (GRADE_STANDARD, "Standard"),
        (GRADE_BASIC, "Basic"),
    ]

    po_number = models.CharField(max_length=32, unique=True)

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        related_name="purchases",
    )

    paddy_type = models.CharField(max_length=10, choices=PaddyType.choices)
    quality_grade = models.CharField(max_length=10, choices=GRADES)
    moisture_percent = models.DecimalField(
        max_digits=5, decimal_places=2, null=True, blank=True
    )

    gross_weight_kg = models.DecimalField(max_digits=14, decimal_places=2)
    tare_kg = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    net_weight_kg = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    price_per_kg = models.DecimalField(max_digits=12, decimal_places=2)
    transport_cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    unloading_cost = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_DRAFT)
    received_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchases_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(net_weight_kg__gte=Decimal("0.00")),
                name="purchase_net_weight_nonnegative",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="purchase_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "received_at"], name="purchase_status_received_idx"),
            models.Index(fields=["paddy_type", "received_at"], name="purchase_paddy_received_idx"),
            models.Index(fields=["supplier", "created_at"], name="purchase_supplier_created_idx"),
        ]

    @staticmethod
    def compute_net_weight(gross_weight_kg, tare_kg) -> Decimal:
        return _money(_money(gross_weight_kg) - _money(tare_kg))

    @staticmethod
    def compute_total(*, net_weight_kg, price_per_kg, transport_cost, unloading_cost) -> Decimal:
        paddy_cost = _money(_money(net_weight_kg) * _money(price_per_kg))
        return _money(paddy_cost + _money(transport_cost) + _money(unloading_cost))

    def recalculate(self) -> None:
        self.net_weight_kg = self.compute_net_weight(self.gross_weight_kg, self.tare_kg)
        self.total_amount = self.compute_total(
            net_weight_kg=self.net_weight_kg,
            price_per_kg=self.price_per_kg,
            transport_cost=self.transport_cost,
            unloading_cost=self.unloading_cost,
        )

    def clean(self):
        if self.gross_weight_kg is not None and self.gross_weight_kg <= 0:
            raise ValidationError({"gross_weight_kg": "gross_weight_kg must be > 0"})

        if self.tare_kg is not None and self.tare_kg < 0:
            raise ValidationError({"tare_kg": "tare_kg cannot be negative"})

        if (
            self.gross_weight_kg is not None
            and self.tare_kg is not None
            and self.tare_kg >= self.gross_weight_kg
        ):
            raise ValidationError({"tare_kg": "tare_kg must be less than gross_weight_kg"})

        if self.price_per_kg is not None and self.price_per_kg < 0:
            raise ValidationError({"price_per_kg": "price_per_kg cannot be negative"})

        for field in ("transport_cost", "unloading_cost"):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValidationError({field: f"{field} cannot be negative"})

        if self.moisture_percent is not None and not (
            Decimal("0") <= self.moisture_percent <= Decimal("100")
        ):
            raise ValidationError(
                {"moisture_percent": "moisture_percent must be between 0 and 100"}
            )

        if self.status == self.STATUS_RECEIVED and not self.received_at:
            raise ValidationError(
                {"received_at": "received_at is required when status is received"}
            )

    def save(self, *args, **kwargs):
        self.recalculate()
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.po_number} ({self.supplier.name})"
