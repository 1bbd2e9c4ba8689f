# accounting/admin.py

from django.contrib import admin

from accounting.models import Attendance, Employee, Expense, Payslip

# ============================================================
# EXPENSES
# ============================================================


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = (
        "expense_date",
        "expense_type",
        "category",
        "amount",
        "payment_status",
        "vendor",
    )
    list_filter = ("expense_type", "category", "payment_status")
    search_fields = ("vendor", "narration")
    readonly_fields = ("paid_at", "created_at")
    date_hierarchy = "expense_date"


# ============================================================
# PAYROLL
# ============================================================


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ("name", "role", "phone", "is_active")
    list_filter = ("role", "is_active")
    search_fields = ("name", "phone")


@admin.register(Payslip)
class PayslipAdmin(admin.ModelAdmin):
    list_display = (
        "employee",
        "period_start",
        "period_end",
        "gross_earnings",
        "total_deductions",
        "net_salary",
        "payment_status",
    )
    list_filter = ("payment_status", "employee__role")
    readonly_fields = ("net_salary",)


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("employee", "date", "status", "overtime_hours")
    list_filter = ("status", "employee__role")
    date_hierarchy = "date"
