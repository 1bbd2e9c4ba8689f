# production/models/machine.py

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Machine(models.Model):
    """
    Mill equipment. purchase_cost feeds straight-line depreciation in the
    economics report.
    """

    class MachineType(models.TextChoices):
        MILL = "mill", "Mill"
        DRYER = "dryer", "Dryer"
        CLEANER = "cleaner", "Cleaner"
        GRADER = "grader", "Grader"
        PACKAGING = "packaging", "Packaging"
        GENERATOR = "generator", "Generator"
        CONVEYOR = "conveyor", "Conveyor"
        OTHER = "other", "Other"

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        MAINTENANCE = "maintenance", "Under maintenance"
        RETIRED = "retired", "Retired"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=150)
    serial_number = models.CharField(max_length=100, unique=True)
    machine_type = models.CharField(max_length=20, choices=MachineType.choices)
    purchase_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    installed_on = models.DateField(null=True, blank=True)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.ACTIVE
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.serial_number})"
