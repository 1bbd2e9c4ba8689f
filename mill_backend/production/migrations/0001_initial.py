from __future__ import annotations

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def _kg(**kwargs):
    kwargs.setdefault("default", Decimal("0.00"))
    return models.DecimalField(decimal_places=2, max_digits=14, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        ("inventory", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Machine",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150)),
                ("serial_number", models.CharField(max_length=100, unique=True)),
                (
                    "machine_type",
                    models.CharField(
                        choices=[
                            ("mill", "Mill"),
                            ("dryer", "Dryer"),
                            ("cleaner", "Cleaner"),
                            ("grader", "Grader"),
                            ("packaging", "Packaging"),
                            ("generator", "Generator"),
                            ("conveyor", "Conveyor"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "purchase_cost",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("installed_on", models.DateField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("maintenance", "Under maintenance"),
                            ("retired", "Retired"),
                        ],
                        default="active",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["name"]},
        ),
        migrations.CreateModel(
            name="ProductionBatch",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("batch_number", models.CharField(max_length=32, unique=True)),
                (
                    "paddy_type",
                    models.CharField(
                        choices=[("nadu", "Nadu"), ("samba", "Samba"), ("mixed", "Mixed")],
                        max_length=10,
                    ),
                ),
                ("paddy_nadu_kg", _kg()),
                ("paddy_samba_kg", _kg()),
                ("input_quantity_kg", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("queued", "Queued"),
                            ("in_progress", "In progress"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="in_progress",
                        max_length=20,
                    ),
                ),
                ("rice_kg", _kg()),
                ("broken_kg", _kg()),
                ("bran_kg", _kg()),
                ("husk_kg", _kg()),
                ("impurity_kg", _kg()),
                ("yield_percentage", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=6)),
                ("started_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("cancel_reason", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="production_batches_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "machines",
                    models.ManyToManyField(blank=True, related_name="production_batches", to="production.machine"),
                ),
                (
                    "operators",
                    models.ManyToManyField(blank=True, related_name="production_batches", to="accounting.employee"),
                ),
                (
                    "raw_material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_batches",
                        to="inventory.rawmateriallot",
                    ),
                ),
                (
                    "storage_bin",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="production_batches",
                        to="inventory.storagebin",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="batch_status_created_idx"),
                    models.Index(fields=["paddy_type"], name="batch_paddy_type_idx"),
                    models.Index(fields=["raw_material"], name="batch_raw_material_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("input_quantity_kg__gt", Decimal("0.00"))),
                        name="production_batch_input_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ByProduct",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "product_type",
                    models.CharField(
                        choices=[("husk", "Husk"), ("bran", "Bran"), ("broken_rice", "Broken rice")],
                        max_length=20,
                    ),
                ),
                ("quantity_kg", models.DecimalField(decimal_places=2, max_digits=14)),
                ("selling_price_per_kg", models.DecimalField(decimal_places=2, max_digits=12)),
                ("sold_quantity_kg", _kg()),
                ("sold_revenue", _kg()),
                ("production_date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("in_stock", "In stock"),
                            ("partially_sold", "Partially sold"),
                            ("sold_out", "Sold out"),
                        ],
                        default="in_stock",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "batch",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="by_products",
                        to="production.productionbatch",
                    ),
                ),
            ],
            options={
                "ordering": ["-production_date"],
                "indexes": [
                    models.Index(fields=["production_date", "product_type"], name="by_product_date_type_idx"),
                ],
            },
        ),
    ]
