# accounting/models/payroll.py

"""
PAYROLL INPUTS

Employees, their payslips and daily attendance. Salary computation and
approval happen outside this backend; the economics report only sums
net salaries by role and counts labour attendance.
"""

from __future__ import annotations

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

TWOPLACES = Decimal("0.01")


class Employee(models.Model):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        ACCOUNTANT = "accountant", "Accountant"
        SALES_MANAGER = "sales_manager", "Sales manager"
        WAREHOUSE_MANAGER = "warehouse_manager", "Warehouse manager"
        OPERATOR = "operator", "Operator"
        DRIVER = "driver", "Driver"
        LABOUR = "labour", "Labour"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="employee",
    )
    name = models.CharField(max_length=150)
    role = models.CharField(max_length=20, choices=Role.choices)
    phone = models.CharField(max_length=50, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        indexes = [models.Index(fields=["role", "is_active"], name="employee_role_active_idx")]

    def __str__(self):
        return f"{self.name} ({self.role})"


class Payslip(models.Model):
    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        APPROVED = "approved", "Approved"
        PAID = "paid", "Paid"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee = models.ForeignKey(
        Employee, on_delete=models.PROTECT, related_name="payslips"
    )
    period_start = models.DateField()
    period_end = models.DateField()

    gross_earnings = models.DecimalField(max_digits=14, decimal_places=2)
    total_deductions = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    net_salary = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    payment_status = models.CharField(
        max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-period_end", "employee__name"]
        indexes = [models.Index(fields=["created_at"], name="payslip_created_idx")]

    def clean(self):
        if self.period_start and self.period_end and self.period_start > self.period_end:
            raise ValidationError({"period_end": "period_end must be on or after period_start"})
        if self.total_deductions is not None and self.total_deductions < 0:
            raise ValidationError({"total_deductions": "total_deductions cannot be negative"})

    def save(self, *args, **kwargs):
        self.net_salary = (
            Decimal(self.gross_earnings or 0) - Decimal(self.total_deductions or 0)
        ).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.employee.name} {self.period_start}..{self.period_end}: {self.net_salary}"


class Attendance(models.Model):
    class Status(models.TextChoices):
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        LEAVE = "leave", "Leave"
        HALF_DAY = "half_day", "Half day"
        HOLIDAY = "holiday", "Holiday"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    employee = models.ForeignKey(
        Employee, on_delete=models.CASCADE, related_name="attendance"
    )
    date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=10, choices=Status.choices)
    overtime_hours = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal("0.00")
    )

    class Meta:
        ordering = ["-date"]
        constraints = [
            models.UniqueConstraint(
                fields=["employee", "date"], name="uniq_attendance_employee_date"
            ),
        ]
        indexes = [models.Index(fields=["date"], name="attendance_date_idx")]

    def __str__(self):
        return f"{self.employee.name} {self.date}: {self.status}"
