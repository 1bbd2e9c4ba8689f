# production/models/production_batch.py

"""
PRODUCTION BATCH (one milling run)

Lifecycle (see production.services.batch_lifecycle):
    queued -> in_progress -> completed
    queued | in_progress -> cancelled

RULES:
- Created in_progress by batch_service.start_batch() once the raw
  material has been reserved.
- Output fields + yield_percentage are written once, on completion.
- Completed and cancelled batches are immutable.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

OUTPUT_FIELDS = ("rice_kg", "broken_kg", "bran_kg", "husk_kg", "impurity_kg")


def _kg_field():
    return models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))


class ProductionBatch(models.Model):
    class PaddyType(models.TextChoices):
        NADU = "nadu", "Nadu"
        SAMBA = "samba", "Samba"
        MIXED = "mixed", "Mixed"

    class Status(models.TextChoices):
        QUEUED = "queued", "Queued"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    FROZEN_STATUSES = {Status.COMPLETED, Status.CANCELLED}

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch_number = models.CharField(max_length=32, unique=True)

    paddy_type = models.CharField(max_length=10, choices=PaddyType.choices)
    paddy_nadu_kg = _kg_field()
    paddy_samba_kg = _kg_field()

    input_quantity_kg = models.DecimalField(max_digits=14, decimal_places=2)
    raw_material = models.ForeignKey(
        "inventory.RawMaterialLot",
        on_delete=models.PROTECT,
        related_name="production_batches",
    )
    storage_bin = models.ForeignKey(
        "inventory.StorageBin",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="production_batches",
    )

    operators = models.ManyToManyField(
        "accounting.Employee", blank=True, related_name="production_batches"
    )
    machines = models.ManyToManyField(
        "production.Machine", blank=True, related_name="production_batches"
    )

    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.IN_PROGRESS
    )

    rice_kg = _kg_field()
    broken_kg = _kg_field()
    bran_kg = _kg_field()
    husk_kg = _kg_field()
    impurity_kg = _kg_field()
    yield_percentage = models.DecimalField(
        max_digits=6, decimal_places=2, default=Decimal("0.00")
    )

    started_at = models.DateTimeField(default=timezone.now)
    ended_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True, default="")
    cancel_reason = models.CharField(max_length=255, blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="production_batches_created",
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(input_quantity_kg__gt=Decimal("0.00")),
                name="production_batch_input_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "created_at"], name="batch_status_created_idx"),
            models.Index(fields=["paddy_type"], name="batch_paddy_type_idx"),
            models.Index(fields=["raw_material"], name="batch_raw_material_idx"),
        ]

    @property
    def total_output_kg(self) -> Decimal:
        return sum((Decimal(getattr(self, f) or 0) for f in OUTPUT_FIELDS), Decimal("0.00"))

    def clean(self):
        if self.input_quantity_kg is not None and self.input_quantity_kg <= 0:
            raise ValidationError({"input_quantity_kg": "input_quantity_kg must be > 0"})

        for field in OUTPUT_FIELDS + ("paddy_nadu_kg", "paddy_samba_kg"):
            value = getattr(self, field)
            if value is not None and value < 0:
                raise ValidationError({field: f"{field} cannot be negative"})

        if self.status == self.Status.COMPLETED and not self.ended_at:
            raise ValidationError({"ended_at": "ended_at is required when completed"})

    def save(self, *args, **kwargs):
        if not self._state.adding:
            persisted = (
                type(self).objects.filter(pk=self.pk).values_list("status", flat=True).first()
            )
            if persisted in self.FROZEN_STATUSES:
                raise ValidationError(f"Batch {self.batch_number} is {persisted} and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.batch_number} ({self.status})"
