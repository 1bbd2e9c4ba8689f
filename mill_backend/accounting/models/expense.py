# accounting/models/expense.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Expense(models.Model):
    """
    Operating expense of the mill (fuel, power, repairs, loan instalments ...).

    Rule:
    - Only `paid` expenses count as OPEX in the economics report
    - Anything not yet paid counts as accounts payable
    - paid_at is stamped the first time the expense becomes paid
    """

    class ExpenseType(models.TextChoices):
        FUEL = "fuel", "Fuel"
        UTILITIES = "utilities", "Utilities"
        REPAIR = "repair", "Repair"
        MAINTENANCE = "maintenance", "Maintenance"
        SALARY = "salary", "Salary"
        SUPPLIES = "supplies", "Supplies"
        TRANSPORT = "transport", "Transport"
        INSURANCE = "insurance", "Insurance"
        TAXES = "taxes", "Taxes"
        LOAN_PAYMENT = "loan_payment", "Loan payment"
        OTHER = "other", "Other"

    class Category(models.TextChoices):
        OPERATIONAL = "operational", "Operational"
        MAINTENANCE = "maintenance", "Maintenance"
        ADMINISTRATIVE = "administrative", "Administrative"
        PRODUCTION = "production", "Production"
        MARKETING = "marketing", "Marketing"

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", "Pending"
        PAID = "paid", "Paid"
        REIMBURSED = "reimbursed", "Reimbursed"

    PAYMENT_CASH = "cash"
    PAYMENT_BANK = "bank"
    PAYMENT_CREDIT = "credit"

    PAYMENT_METHODS = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_BANK, "Bank"),
        (PAYMENT_CREDIT, "Credit (Payables)"),
    ]

    # Expense types treated as fixed costs for break-even.
    FIXED_COST_TYPES = (
        ExpenseType.LOAN_PAYMENT,
        ExpenseType.UTILITIES,
        ExpenseType.MAINTENANCE,
        ExpenseType.SALARY,
        ExpenseType.INSURANCE,
        ExpenseType.TAXES,
    )

    expense_date = models.DateField(default=timezone.localdate)

    expense_type = models.CharField(max_length=20, choices=ExpenseType.choices)
    category = models.CharField(
        max_length=20, choices=Category.choices, default=Category.OPERATIONAL
    )

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    payment_status = models.CharField(
        max_length=12,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_method = models.CharField(
        max_length=10,
        choices=PAYMENT_METHODS,
        default=PAYMENT_CASH,
    )
    paid_at = models.DateTimeField(null=True, blank=True)

    vendor = models.CharField(max_length=150, blank=True, default="")
    narration = models.CharField(max_length=255, blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="expenses_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        verbose_name = "Expense"
        verbose_name_plural = "Expenses"
        indexes = [
            models.Index(fields=["expense_date", "payment_status"], name="expense_date_status_idx"),
            models.Index(fields=["expense_type"], name="expense_type_idx"),
            models.Index(fields=["payment_status"], name="expense_payment_status_idx"),
        ]

    def __str__(self):
        return f"Expense #{self.pk} - {self.expense_type} {self.amount} ({self.expense_date})"

    def save(self, *args, **kwargs):
        if self.payment_status == self.PaymentStatus.PAID and self.paid_at is None:
            self.paid_at = timezone.now()
        self.full_clean()
        super().save(*args, **kwargs)
