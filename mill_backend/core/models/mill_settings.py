# core/models/mill_settings.py

"""
MILL SETTINGS (SINGLETON)

One row for the whole mill (pk=1), seeded from settings.MILL_DEFAULTS the
first time it is read. Services never read this model directly: they take
a MillConfig snapshot (core.services.mill_config) passed in by the caller.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

SINGLETON_PK = 1


def _rate_field(default: str, **kwargs):
    return models.DecimalField(
        max_digits=6,
        decimal_places=4,
        default=Decimal(default),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
        **kwargs,
    )


class MillSettings(models.Model):
    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_PK)

    # Milling + profit
    milling_recovery_rate = _rate_field("0.6700")
    owner_salary_pct = _rate_field("0.2500")
    target_profit_margin = _rate_field("0.1500")
    gst_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("5.00"),
        help_text="Percent applied to invoices when no tax percent is given.",
    )

    # Production + stock
    production_tolerance_pct = _rate_field("0.0500")
    low_stock_threshold_kg = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("50.00")
    )
    default_bag_weight_kg = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("50.00")
    )
    default_expiry_days = models.PositiveIntegerField(default=180)
    default_rice_grade = models.CharField(max_length=20, default="standard")
    raw_material_minimum_stock_kg = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("1000.00")
    )

    # Invoicing
    invoice_due_days = models.PositiveIntegerField(default=30)
    currency = models.CharField(max_length=8, default="LKR")

    # Depreciation assumptions
    depreciation_scrap_pct = _rate_field("0.1000")
    depreciation_useful_life_years = models.PositiveIntegerField(default=10)

    # Auto-numbering
    purchase_prefix = models.CharField(max_length=10, default="PO")
    invoice_prefix = models.CharField(max_length=10, default="INV")
    batch_prefix = models.CharField(max_length=10, default="BATCH")
    order_prefix = models.CharField(max_length=10, default="SO")
    number_width = models.PositiveSmallIntegerField(
        default=4, validators=[MinValueValidator(1), MaxValueValidator(10)]
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Mill settings"
        verbose_name_plural = "Mill settings"

    def __str__(self):
        return "Mill settings"

    def clean(self):
        if self.milling_recovery_rate is not None and self.milling_recovery_rate <= 0:
            raise ValidationError(
                {"milling_recovery_rate": "milling_recovery_rate must be > 0"}
            )
        for field in ("purchase_prefix", "invoice_prefix", "batch_prefix", "order_prefix"):
            if not (getattr(self, field) or "").strip():
                raise ValidationError({field: f"{field} cannot be blank"})

    def save(self, *args, **kwargs):
        self.id = SINGLETON_PK
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Mill settings cannot be deleted")

    @classmethod
    def seed_values(cls) -> dict:
        """
        Field values from settings.MILL_DEFAULTS, as model-ready types.
        """
        raw = getattr(settings, "MILL_DEFAULTS", {}) or {}
        values = {}
        for name, value in raw.items():
            field = cls._meta.get_field(name)
            if isinstance(field, models.DecimalField):
                value = Decimal(str(value)).quantize(
                    Decimal(1).scaleb(-field.decimal_places)
                )
            values[name] = value
        return values

    @classmethod
    def load(cls) -> "MillSettings":
        obj = cls.objects.filter(pk=SINGLETON_PK).first()
        if obj is None:
            obj = cls(id=SINGLETON_PK, **cls.seed_values())
            obj.save()
        return obj
