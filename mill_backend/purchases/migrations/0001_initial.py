from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _money(**kwargs):
    return models.DecimalField(decimal_places=2, max_digits=14, **kwargs)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Supplier",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=200)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("address", models.TextField(blank=True, default="")),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [
                    models.Index(fields=["name"], name="supplier_name_idx"),
                    models.Index(fields=["is_active"], name="supplier_active_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("po_number", models.CharField(max_length=32, unique=True)),
                (
                    "paddy_type",
                    models.CharField(
                        choices=[("nadu", "Nadu"), ("samba", "Samba"), ("other", "Other")],
                        max_length=10,
                    ),
                ),
                (
                    "quality_grade",
                    models.CharField(
                        choices=[("premium", "Premium"), ("standard", "Standard"), ("basic", "Basic")],
                        max_length=10,
                    ),
                ),
                ("moisture_percent", models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ("gross_weight_kg", _money()),
                ("tare_kg", _money(default=Decimal("0.00"))),
                ("net_weight_kg", _money(default=Decimal("0.00"))),
                ("price_per_kg", models.DecimalField(decimal_places=2, max_digits=12)),
                ("transport_cost", _money(default=Decimal("0.00"))),
                ("unloading_cost", _money(default=Decimal("0.00"))),
                ("total_amount", _money(default=Decimal("0.00"))),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("draft", "Draft"),
                            ("confirmed", "Confirmed"),
                            ("received", "Received"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="draft",
                        max_length=20,
                    ),
                ),
                ("received_at", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="purchases_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchases",
                        to="purchases.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "received_at"], name="purchase_status_received_idx"),
                    models.Index(fields=["paddy_type", "received_at"], name="purchase_paddy_received_idx"),
                    models.Index(fields=["supplier", "created_at"], name="purchase_supplier_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("net_weight_kg__gte", Decimal("0.00"))),
                        name="purchase_net_weight_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gte", Decimal("0.00"))),
                        name="purchase_total_nonnegative",
                    ),
                ],
            },
        ),
    ]
