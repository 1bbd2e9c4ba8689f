from datetime import date
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.models import Employee, Expense, Payslip


class ExpenseTests(TestCase):
    def test_paid_expense_is_stamped(self):
        expense = Expense.objects.create(
            expense_type=Expense.ExpenseType.UTILITIES,
            amount=Decimal("4500.00"),
            payment_status=Expense.PaymentStatus.PAID,
        )
        self.assertIsNotNone(expense.paid_at)

    def test_pending_expense_has_no_paid_at(self):
        expense = Expense.objects.create(
            expense_type=Expense.ExpenseType.FUEL, amount=Decimal("1200.00")
        )
        self.assertIsNone(expense.paid_at)
        self.assertEqual(expense.payment_status, Expense.PaymentStatus.PENDING)

    def test_amount_must_be_positive(self):
        with self.assertRaises(ValidationError):
            Expense.objects.create(expense_type=Expense.ExpenseType.REPAIR, amount=Decimal("0"))


class PayslipTests(TestCase):
    def setUp(self):
        self.employee = Employee.objects.create(name="Sunil", role=Employee.Role.DRIVER)

    def test_net_salary_is_derived(self):
        payslip = Payslip.objects.create(
            employee=self.employee,
            period_start=date(2025, 1, 1),
            period_end=date(2025, 1, 31),
            gross_earnings=Decimal("45000.00"),
            total_deductions=Decimal("2500.50"),
        )
        self.assertEqual(payslip.net_salary, Decimal("42499.50"))

    def test_period_must_be_ordered(self):
        with self.assertRaises(ValidationError):
            Payslip.objects.create(
                employee=self.employee,
                period_start=date(2025, 2, 1),
                period_end=date(2025, 1, 31),
                gross_earnings=Decimal("1.00"),
            )
