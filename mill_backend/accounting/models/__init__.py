# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- These records are read-only inputs to the mill economics report.
"""

from accounting.models.expense import Expense
from accounting.models.payroll import Attendance, Employee, Payslip

__all__ = [
    "Attendance",
    "Employee",
    "Expense",
    "Payslip",
]
