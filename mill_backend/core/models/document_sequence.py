# core/models/document_sequence.py

"""
DOCUMENT SEQUENCE COUNTER

One row per (document_type, year). The numbering service locks the row and
increments last_value with an F() expression, so two concurrent creates
can never be handed the same number.
"""

from django.db import models


class DocumentSequence(models.Model):
    class DocumentType(models.TextChoices):
        PURCHASE = "purchase", "Purchase"
        INVOICE = "invoice", "Invoice"
        BATCH = "batch", "Production batch"
        ORDER = "order", "Sales order"

    document_type = models.CharField(max_length=20, choices=DocumentType.choices)
    year = models.PositiveIntegerField()
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["document_type", "year"]
        constraints = [
            models.UniqueConstraint(
                fields=["document_type", "year"],
                name="uniq_document_sequence_type_year",
            ),
        ]

    def __str__(self):
        return f"{self.document_type}/{self.year}: {self.last_value}"
