from __future__ import annotations

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=150)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("admin", "Admin"),
                            ("accountant", "Accountant"),
                            ("sales_manager", "Sales manager"),
                            ("warehouse_manager", "Warehouse manager"),
                            ("operator", "Operator"),
                            ("driver", "Driver"),
                            ("labour", "Labour"),
                        ],
                        max_length=20,
                    ),
                ),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="employee",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["role", "is_active"], name="employee_role_active_idx")],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("expense_date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "expense_type",
                    models.CharField(
                        choices=[
                            ("fuel", "Fuel"),
                            ("utilities", "Utilities"),
                            ("repair", "Repair"),
                            ("maintenance", "Maintenance"),
                            ("salary", "Salary"),
                            ("supplies", "Supplies"),
                            ("transport", "Transport"),
                            ("insurance", "Insurance"),
                            ("taxes", "Taxes"),
                            ("loan_payment", "Loan payment"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("operational", "Operational"),
                            ("maintenance", "Maintenance"),
                            ("administrative", "Administrative"),
                            ("production", "Production"),
                            ("marketing", "Marketing"),
                        ],
                        default="operational",
                        max_length=20,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("paid", "Paid"), ("reimbursed", "Reimbursed")],
                        default="pending",
                        max_length=12,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("cash", "Cash"), ("bank", "Bank"), ("credit", "Credit (Payables)")],
                        default="cash",
                        max_length=10,
                    ),
                ),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("vendor", models.CharField(blank=True, default="", max_length=150)),
                ("narration", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="expenses_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Expense",
                "verbose_name_plural": "Expenses",
                "ordering": ["-expense_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["expense_date", "payment_status"], name="expense_date_status_idx"),
                    models.Index(fields=["expense_type"], name="expense_type_idx"),
                    models.Index(fields=["payment_status"], name="expense_payment_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payslip",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("period_start", models.DateField()),
                ("period_end", models.DateField()),
                ("gross_earnings", models.DecimalField(decimal_places=2, max_digits=14)),
                ("total_deductions", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("net_salary", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                (
                    "payment_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("approved", "Approved"), ("paid", "Paid")],
                        default="pending",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payslips",
                        to="accounting.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-period_end", "employee__name"],
                "indexes": [models.Index(fields=["created_at"], name="payslip_created_idx")],
            },
        ),
        migrations.CreateModel(
            name="Attendance",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("present", "Present"),
                            ("absent", "Absent"),
                            ("leave", "Leave"),
                            ("half_day", "Half day"),
                            ("holiday", "Holiday"),
                        ],
                        max_length=10,
                    ),
                ),
                ("overtime_hours", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendance",
                        to="accounting.employee",
                    ),
                ),
            ],
            options={
                "ordering": ["-date"],
                "indexes": [models.Index(fields=["date"], name="attendance_date_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("employee", "date"), name="uniq_attendance_employee_date")
                ],
            },
        ),
    ]
