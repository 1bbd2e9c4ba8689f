from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def _kg(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=14, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("purchases", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="StorageBin",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=32, unique=True)),
                ("name", models.CharField(max_length=120)),
                ("capacity_kg", _kg(default=Decimal("0.00"))),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["code"]},
        ),
        migrations.CreateModel(
            name="RawMaterialLot",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sku", models.CharField(max_length=64, unique=True)),
                ("name", models.CharField(max_length=200)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("paddy", "Paddy"),
                            ("packaging", "Packaging"),
                            ("chemical", "Chemical"),
                            ("other", "Other"),
                        ],
                        default="paddy",
                        max_length=20,
                    ),
                ),
                (
                    "paddy_type",
                    models.CharField(
                        blank=True,
                        choices=[("nadu", "Nadu"), ("samba", "Samba"), ("other", "Other")],
                        default="",
                        max_length=10,
                    ),
                ),
                ("quality_grade", models.CharField(blank=True, default="", max_length=20)),
                ("quantity_kg", _kg()),
                ("minimum_stock_kg", _kg(default=Decimal("0.00"))),
                ("cost_per_unit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("used", "Used"),
                            ("damaged", "Damaged"),
                            ("expired", "Expired"),
                        ],
                        default="available",
                        max_length=20,
                    ),
                ),
                ("received_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "purchase",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="raw_material_lots",
                        to="purchases.purchase",
                    ),
                ),
                (
                    "storage_bin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="raw_material_lots",
                        to="inventory.storagebin",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="raw_material_lots",
                        to="purchases.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["received_at"],
                "indexes": [
                    models.Index(fields=["category", "status"], name="raw_lot_category_status_idx"),
                    models.Index(fields=["purchase"], name="raw_lot_purchase_idx"),
                    models.Index(fields=["received_at"], name="raw_lot_received_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_kg__gte", Decimal("0.00"))),
                        name="raw_material_quantity_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="FinishedGoodsLot",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("sku", models.CharField(max_length=64, unique=True)),
                (
                    "paddy_type",
                    models.CharField(
                        choices=[("nadu", "Nadu"), ("samba", "Samba"), ("mixed", "Mixed")],
                        max_length=10,
                    ),
                ),
                (
                    "rice_grade",
                    models.CharField(
                        choices=[("premium", "Premium"), ("standard", "Standard"), ("broken", "Broken")],
                        default="standard",
                        max_length=10,
                    ),
                ),
                ("weight_kg", _kg()),
                ("bag_count", models.PositiveIntegerField(default=0)),
                ("bag_weight_kg", models.DecimalField(decimal_places=2, default=Decimal("50.00"), max_digits=6)),
                ("expiry_date", models.DateField()),
                ("price_per_kg", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("in_stock", "In stock"),
                            ("sold", "Sold"),
                            ("damaged", "Damaged"),
                            ("expired", "Expired"),
                        ],
                        default="in_stock",
                        max_length=20,
                    ),
                ),
                ("produced_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "storage_bin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="finished_goods_lots",
                        to="inventory.storagebin",
                    ),
                ),
            ],
            options={
                "ordering": ["expiry_date", "produced_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("weight_kg__gte", Decimal("0.00"))),
                        name="finished_goods_weight_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "movement_type",
                    models.CharField(
                        choices=[("IN", "Stock In"), ("OUT", "Stock Out"), ("ADJUST", "Adjustment")],
                        max_length=6,
                    ),
                ),
                ("product_sku", models.CharField(max_length=64)),
                ("quantity_kg", _kg()),
                (
                    "reference_kind",
                    models.CharField(
                        choices=[
                            ("purchase", "Purchase"),
                            ("production", "Production"),
                            ("sale", "Sale"),
                            ("adjustment", "Adjustment"),
                            ("transfer", "Transfer"),
                        ],
                        max_length=20,
                    ),
                ),
                ("reference_id", models.CharField(blank=True, default="", max_length=64)),
                ("reason", models.CharField(blank=True, default="", max_length=255)),
                ("unit_cost", models.DecimalField(blank=True, decimal_places=2, default=None, max_digits=12, null=True)),
                ("total_cost", models.DecimalField(blank=True, decimal_places=2, default=None, max_digits=16, null=True)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stock_movements",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "destination_bin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incoming_movements",
                        to="inventory.storagebin",
                    ),
                ),
                (
                    "source_bin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="outgoing_movements",
                        to="inventory.storagebin",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["product_sku", "created_at"], name="movement_sku_created_idx"),
                    models.Index(fields=["reference_kind", "reference_id"], name="movement_reference_idx"),
                    models.Index(fields=["movement_type"], name="movement_type_idx"),
                    models.Index(fields=["created_at"], name="movement_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_kg__gt", Decimal("0.00"))),
                        name="stock_movement_quantity_positive",
                    ),
                ],
            },
        ),
    ]
