# core/services/mill_config.py

"""
======================================================
PATH: core/services/mill_config.py
======================================================
MILL CONFIG (INJECTED SNAPSHOT)

Rules:
- Pipelines and the economics aggregator take `config: MillConfig`.
- Callers load it once per request (views) and pass it down.
- Tests build fixture configs with MillConfig.defaults().replace(...).
- Nothing here mutates MillSettings; that belongs to the admin.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from django.conf import settings

from core.models import DocumentSequence, MillSettings


@dataclass(frozen=True)
class MillConfig:
    milling_recovery_rate: Decimal = Decimal("0.67")
    owner_salary_pct: Decimal = Decimal("0.25")
    target_profit_margin: Decimal = Decimal("0.15")
    gst_rate: Decimal = Decimal("5")
    production_tolerance_pct: Decimal = Decimal("0.05")
    low_stock_threshold_kg: Decimal = Decimal("50")
    default_bag_weight_kg: Decimal = Decimal("50")
    default_expiry_days: int = 180
    default_rice_grade: str = "standard"
    raw_material_minimum_stock_kg: Decimal = Decimal("1000")
    invoice_due_days: int = 30
    currency: str = "LKR"
    depreciation_scrap_pct: Decimal = Decimal("0.10")
    depreciation_useful_life_years: int = 10
    purchase_prefix: str = "PO"
    invoice_prefix: str = "INV"
    batch_prefix: str = "BATCH"
    order_prefix: str = "SO"
    number_width: int = 4

    @classmethod
    def defaults(cls) -> "MillConfig":
        """
        Config from settings.MILL_DEFAULTS without touching the database.
        """
        raw = getattr(settings, "MILL_DEFAULTS", {}) or {}
        values = {}
        for name, value in raw.items():
            current = getattr(cls, name, None)
            if isinstance(current, Decimal):
                value = Decimal(str(value))
            values[name] = value
        return cls(**values)

    @classmethod
    def from_model(cls, obj: MillSettings) -> "MillConfig":
        names = cls.__dataclass_fields__.keys()
        return cls(**{name: getattr(obj, name) for name in names})

    def replace(self, **changes) -> "MillConfig":
        return replace(self, **changes)

    def prefix_for(self, document_type: str) -> str:
        prefixes = {
            DocumentSequence.DocumentType.PURCHASE: self.purchase_prefix,
            DocumentSequence.DocumentType.INVOICE: self.invoice_prefix,
            DocumentSequence.DocumentType.BATCH: self.batch_prefix,
            DocumentSequence.DocumentType.ORDER: self.order_prefix,
        }
        try:
            return prefixes[document_type]
        except KeyError as exc:
            raise ValueError(f"Unknown document type: {document_type!r}") from exc


def load_mill_config() -> MillConfig:
    return MillConfig.from_model(MillSettings.load())
