# inventory/models/storage_bin.py

import uuid
from decimal import Decimal

from django.db import models


class StorageBin(models.Model):
    """
    A physical storage location (silo, bay, warehouse corner).
    Movements reference bins as optional source / destination.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=120)
    capacity_kg = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"
