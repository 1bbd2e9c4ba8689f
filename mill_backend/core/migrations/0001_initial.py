from decimal import Decimal

import django.core.validators
from django.db import migrations, models


def _rate(default):
    return models.DecimalField(
        decimal_places=4,
        default=Decimal(default),
        max_digits=6,
        validators=[
            django.core.validators.MinValueValidator(Decimal("0")),
            django.core.validators.MaxValueValidator(Decimal("1")),
        ],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DocumentSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("purchase", "Purchase"),
                            ("invoice", "Invoice"),
                            ("batch", "Production batch"),
                            ("order", "Sales order"),
                        ],
                        max_length=20,
                    ),
                ),
                ("year", models.PositiveIntegerField()),
                ("last_value", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["document_type", "year"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("document_type", "year"),
                        name="uniq_document_sequence_type_year",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="MillSettings",
            fields=[
                ("id", models.PositiveSmallIntegerField(default=1, primary_key=True, serialize=False)),
                ("milling_recovery_rate", _rate("0.6700")),
                ("owner_salary_pct", _rate("0.2500")),
                ("target_profit_margin", _rate("0.1500")),
                (
                    "gst_rate",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("5.00"),
                        help_text="Percent applied to invoices when no tax percent is given.",
                        max_digits=5,
                    ),
                ),
                ("production_tolerance_pct", _rate("0.0500")),
                ("low_stock_threshold_kg", models.DecimalField(decimal_places=2, default=Decimal("50.00"), max_digits=12)),
                ("default_bag_weight_kg", models.DecimalField(decimal_places=2, default=Decimal("50.00"), max_digits=6)),
                ("default_expiry_days", models.PositiveIntegerField(default=180)),
                ("default_rice_grade", models.CharField(default="standard", max_length=20)),
                ("raw_material_minimum_stock_kg", models.DecimalField(decimal_places=2, default=Decimal("1000.00"), max_digits=12)),
                ("invoice_due_days", models.PositiveIntegerField(default=30)),
                ("currency", models.CharField(default="LKR", max_length=8)),
                ("depreciation_scrap_pct", _rate("0.1000")),
                ("depreciation_useful_life_years", models.PositiveIntegerField(default=10)),
                ("purchase_prefix", models.CharField(default="PO", max_length=10)),
                ("invoice_prefix", models.CharField(default="INV", max_length=10)),
                ("batch_prefix", models.CharField(default="BATCH", max_length=10)),
                ("order_prefix", models.CharField(default="SO", max_length=10)),
                (
                    "number_width",
                    models.PositiveSmallIntegerField(
                        default=4,
                        validators=[
                            django.core.validators.MinValueValidator(1),
                            django.core.validators.MaxValueValidator(10),
                        ],
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Mill settings",
                "verbose_name_plural": "Mill settings",
            },
        ),
    ]
