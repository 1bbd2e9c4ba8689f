# economics/services/mill_economics.py

"""
======================================================
PATH: economics/services/mill_economics.py
======================================================
MILL ECONOMICS REPORT

Read-only aggregation over one reporting window:
- purchases by paddy type, production totals, invoice revenue
- paid / pending expenses, payroll by role, labour attendance
- finished-goods and paddy stock, by-product sales, machines
Everything is reduced through economics.services.formulas.

Rules:
- The window is validated before any query runs (InvalidReportRangeError)
- Any failure afterwards raises ReportCompilationError; no partial report
- Invoice revenue is split by product name: "nadu" / "samba" / "broken",
  anything else is "other"
- Batch valuation spreads paid expenses evenly over the window's batches;
  mixed batches are costed at the nadu/samba weighted average price
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal

from django.db.models import (
    Avg,
    Case,
    CharField,
    Count,
    DecimalField,
    ExpressionWrapper,
    F,
    Q,
    Sum,
    Value,
    When,
)
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from accounting.models import Attendance, Employee, Expense, Payslip
from core.decimals import ZERO, money, to_decimal
from core.services.mill_config import MillConfig, load_mill_config
from economics.services import formulas
from economics.services.exceptions import (
    EconomicsReportError,
    InvalidReportRangeError,
    ReportCompilationError,
)
from inventory.models import FinishedGoodsLot, RawMaterialLot
from production.models import ByProduct, Machine, ProductionBatch
from purchases.models import PaddyType, Purchase
from sales.models import Invoice, InvoiceItem

logger = logging.getLogger(__name__)

RECENT_BATCH_LIMIT = 5
DEFAULT_MARGIN_PER_KG = Decimal("5")

REVENUE_CLASSES = ("nadu", "samba", "broken")

SALARY_ACCESS_RULES = [
    {"role": Employee.Role.ADMIN, "access": "create|approve|view"},
    {"role": Employee.Role.ACCOUNTANT, "access": "create|edit|calculate"},
    {"role": Employee.Role.SALES_MANAGER, "access": "view"},
    {"role": Employee.Role.WAREHOUSE_MANAGER, "access": "view_own"},
    {"role": Employee.Role.OPERATOR, "access": "view_own"},
    {"role": Employee.Role.DRIVER, "access": "view_own"},
    {"role": Employee.Role.LABOUR, "access": "view_own"},
]


# ============================================================
# INPUTS
# ============================================================

def _as_aware(dt: datetime) -> datetime:
    if timezone.is_naive(dt):
        return timezone.make_aware(dt, timezone.get_current_timezone())
    return dt


def _parse_bound(value, *, end_of_day: bool):
    s = str(value).strip()
    try:
        dt = parse_datetime(s)
        d = None if dt else parse_date(s)
    except ValueError:
        dt = d = None

    if dt is None:
        if d is None:
            raise InvalidReportRangeError("Invalid startDate or endDate")
        dt = datetime.combine(d, time.max if end_of_day else time.min)
    elif end_of_day:
        dt = datetime.combine(dt.date(), time.max, tzinfo=dt.tzinfo)
    return _as_aware(dt)


@dataclass(frozen=True)
class ReportWindow:
    start: datetime
    end: datetime

    @classmethod
    def parse(cls, start=None, end=None, *, now: datetime | None = None) -> "ReportWindow":
        """
        Defaults: first day of the current month .. today.
        The end bound always covers the whole of its day.
        """
        now = timezone.localtime(now or timezone.now())

        if start in (None, ""):
            start_dt = _as_aware(datetime.combine(now.date().replace(day=1), time.min))
        else:
            start_dt = _parse_bound(start, end_of_day=False)

        if end in (None, ""):
            end_dt = _as_aware(datetime.combine(now.date(), time.max))
        else:
            end_dt = _parse_bound(end, end_of_day=True)

        if start_dt > end_dt:
            raise InvalidReportRangeError("startDate must be before endDate")
        return cls(start=start_dt, end=end_dt)

    @property
    def start_date(self):
        return timezone.localtime(self.start).date()

    @property
    def end_date(self):
        return timezone.localtime(self.end).date()


@dataclass(frozen=True)
class ReportOptions:
    target_rice_kg: Decimal | None
    desired_margin_per_kg: Decimal
    recovery_rate: Decimal
    owner_salary_pct: Decimal
    scrap_pct: Decimal
    useful_life_years: Decimal

    @classmethod
    def build(
        cls,
        *,
        config: MillConfig,
        target_rice_kg=None,
        desired_margin_per_kg=None,
        recovery_rate=None,
        owner_salary_pct=None,
        scrap_pct=None,
        useful_life_years=None,
    ) -> "ReportOptions":
        """
        Zero, blank or unparsable options fall back to the mill config.
        """
        margin_default = (
            to_decimal(config.target_profit_margin) * 100 or DEFAULT_MARGIN_PER_KG
        )
        return cls(
            target_rice_kg=to_decimal(target_rice_kg) or None,
            desired_margin_per_kg=to_decimal(desired_margin_per_kg) or margin_default,
            recovery_rate=(
                to_decimal(recovery_rate)
                or to_decimal(config.milling_recovery_rate)
                or formulas.DEFAULT_RECOVERY_RATE
            ),
            owner_salary_pct=(
                to_decimal(owner_salary_pct)
                or to_decimal(config.owner_salary_pct)
                or formulas.DEFAULT_OWNER_SALARY_PCT
            ),
            scrap_pct=to_decimal(scrap_pct) or to_decimal(config.depreciation_scrap_pct),
            useful_life_years=(
                to_decimal(useful_life_years)
                or to_decimal(config.depreciation_useful_life_years)
            ),
        )


# ============================================================
# AGGREGATIONS
# ============================================================

def _sum(value) -> Decimal:
    return to_decimal(value)


def _purchases_by_type(window: ReportWindow) -> list[dict]:
    rows = (
        Purchase.objects.filter(received_at__gte=window.start, received_at__lte=window.end)
        .exclude(status=Purchase.STATUS_CANCELLED)
        .values("paddy_type")
        .annotate(
            total_qty_kg=Sum("net_weight_kg"),
            total_cost=Sum("total_amount"),
            avg_price_per_kg=Avg("price_per_kg"),
        )
        .order_by("paddy_type")
    )
    breakdown = []
    for row in rows:
        qty = _sum(row["total_qty_kg"])
        cost = _sum(row["total_cost"])
        breakdown.append(
            {
                "type": row["paddy_type"] or PaddyType.OTHER,
                "qty_kg": qty,
                "total_cost": cost,
                "avg_price_per_kg": (
                    to_decimal(row["avg_price_per_kg"]) or formulas.safe_divide(cost, qty)
                ),
            }
        )
    return breakdown


def _production_totals(window: ReportWindow) -> dict:
    totals = ProductionBatch.objects.filter(
        created_at__gte=window.start, created_at__lte=window.end
    ).aggregate(
        total_input=Sum("input_quantity_kg"),
        total_rice=Sum("rice_kg"),
        total_broken=Sum("broken_kg"),
        total_bran=Sum("bran_kg"),
        total_husk=Sum("husk_kg"),
        batch_count=Count("id"),
    )
    return {
        "input_kg": _sum(totals["total_input"]),
        "rice_kg": _sum(totals["total_rice"]),
        "broken_kg": _sum(totals["total_broken"]),
        "bran_kg": _sum(totals["total_bran"]),
        "husk_kg": _sum(totals["total_husk"]),
        "batch_count": totals["batch_count"] or 0,
    }


def _active_invoices(window: ReportWindow):
    return Invoice.objects.filter(
        invoice_date__gte=window.start,
        invoice_date__lte=window.end,
        status=Invoice.Status.ACTIVE,
    )


def _invoice_totals(window: ReportWindow) -> dict:
    totals = _active_invoices(window).aggregate(
        revenue=Sum("total_amount"),
        paid=Sum("paid_amount"),
        outstanding=Sum(
            ExpressionWrapper(
                F("total_amount") - F("paid_amount"),
                output_field=DecimalField(max_digits=14, decimal_places=2),
            )
        ),
    )
    return {
        "revenue": _sum(totals["revenue"]),
        "paid": _sum(totals["paid"]),
        "outstanding": _sum(totals["outstanding"]),
    }


def _revenue_class():
    whens = [
        When(product_name__icontains=label, then=Value(label)) for label in REVENUE_CLASSES
    ]
    return Case(*whens, default=Value("other"), output_field=CharField())


def _revenue_by_type(window: ReportWindow) -> list[dict]:
    rows = (
        InvoiceItem.objects.filter(invoice__in=_active_invoices(window))
        .annotate(revenue_class=_revenue_class())
        .values("revenue_class")
        .annotate(
            total_qty_kg=Sum("quantity_kg"),
            total_revenue=Sum("total_price"),
            avg_price_per_kg=Avg("unit_price"),
        )
        .order_by("revenue_class")
    )
    breakdown = []
    for row in rows:
        qty = _sum(row["total_qty_kg"])
        revenue = _sum(row["total_revenue"])
        breakdown.append(
            {
                "type": row["revenue_class"],
                "qty_kg": qty,
                "revenue": revenue,
                "avg_price_per_kg": (
                    to_decimal(row["avg_price_per_kg"]) or formulas.safe_divide(revenue, qty)
                ),
            }
        )
    return breakdown


def _paid_expenses_by_type(window: ReportWindow) -> dict[str, Decimal]:
    rows = (
        Expense.objects.filter(
            expense_date__gte=window.start_date,
            expense_date__lte=window.end_date,
            payment_status=Expense.PaymentStatus.PAID,
        )
        .values("expense_type")
        .annotate(total=Sum("amount"))
        .order_by("expense_type")
    )
    return {row["expense_type"] or Expense.ExpenseType.OTHER: _sum(row["total"]) for row in rows}


def _pending_expenses_total() -> Decimal:
    # Payables are not windowed: everything still unpaid is owed today.
    totals = Expense.objects.exclude(payment_status=Expense.PaymentStatus.PAID).aggregate(
        total=Sum("amount")
    )
    return _sum(totals["total"])


def _finished_goods_stock() -> dict:
    rows = (
        FinishedGoodsLot.objects.filter(status=FinishedGoodsLot.Status.IN_STOCK)
        .values("paddy_type")
        .annotate(
            total_weight=Sum("weight_kg"),
            total_value=Sum(
                ExpressionWrapper(
                    F("weight_kg") * F("price_per_kg"),
                    output_field=DecimalField(max_digits=20, decimal_places=4),
                )
            ),
        )
    )
    weight = ZERO
    value = ZERO
    for row in rows:
        weight += _sum(row["total_weight"])
        value += _sum(row["total_value"])
    return {"weight_kg": weight, "value": value}


def _paddy_stock_kg() -> Decimal:
    totals = RawMaterialLot.objects.filter(
        status=RawMaterialLot.Status.AVAILABLE,
        category=RawMaterialLot.Category.PADDY,
    ).aggregate(total=Sum("quantity_kg"))
    return _sum(totals["total"])


def _payroll_by_role(window: ReportWindow) -> dict[str, dict]:
    rows = (
        Payslip.objects.filter(created_at__gte=window.start, created_at__lte=window.end)
        .values("employee__role")
        .annotate(net_salary=Sum("net_salary"), count=Count("id"))
        .order_by("employee__role")
    )
    return {
        row["employee__role"] or "unassigned": {
            "net_salary": _sum(row["net_salary"]),
            "employee_count": row["count"] or 0,
        }
        for row in rows
    }


def _labour_attendance(window: ReportWindow) -> list[dict]:
    return list(
        Attendance.objects.filter(
            date__gte=window.start_date,
            date__lte=window.end_date,
            employee__role=Employee.Role.LABOUR,
        )
        .values("employee")
        .annotate(
            present_days=Count("id", filter=Q(status=Attendance.Status.PRESENT)),
            overtime_hours=Sum("overtime_hours"),
        )
        .order_by("employee")
    )


def _by_product_sales(window: ReportWindow) -> dict[str, dict]:
    rows = (
        ByProduct.objects.filter(
            production_date__gte=window.start_date,
            production_date__lte=window.end_date,
        )
        .values("product_type")
        .annotate(sold_qty=Sum("sold_quantity_kg"), sold_revenue=Sum("sold_revenue"))
        .order_by("product_type")
    )
    return {
        row["product_type"]: {
            "type": row["product_type"],
            "quantity_kg": _sum(row["sold_qty"]),
            "revenue": _sum(row["sold_revenue"]),
        }
        for row in rows
    }


def _recent_batches(window: ReportWindow) -> list[ProductionBatch]:
    return list(
        ProductionBatch.objects.filter(
            created_at__gte=window.start, created_at__lte=window.end
        ).order_by("-created_at")[:RECENT_BATCH_LIMIT]
    )


# ============================================================
# REDUCTIONS
# ============================================================

def _paddy_cost_per_kg(batch: ProductionBatch, avg_by_type: dict, fallback: Decimal) -> Decimal:
    """
    Average purchase price for the batch's paddy. Mixed batches use the
    nadu/samba prices weighted by the batch breakdown; a type with no
    purchases in the window falls back to the overall average.
    """
    if batch.paddy_type in avg_by_type:
        return avg_by_type[batch.paddy_type] or fallback

    if batch.paddy_type == ProductionBatch.PaddyType.MIXED:
        nadu = to_decimal(batch.paddy_nadu_kg)
        samba = to_decimal(batch.paddy_samba_kg)
        if nadu + samba > 0:
            nadu_cost = avg_by_type.get(PaddyType.NADU) or fallback
            samba_cost = avg_by_type.get(PaddyType.SAMBA) or fallback
            return formulas.safe_divide(nadu * nadu_cost + samba * samba_cost, nadu + samba)

    return fallback


def _batch_valuations(batches, *, avg_by_type, avg_paddy_cost, per_batch_overhead) -> list[dict]:
    valuations = []
    for batch in batches:
        input_kg = to_decimal(batch.input_quantity_kg)
        output_kg = to_decimal(batch.rice_kg)
        cost = input_kg * _paddy_cost_per_kg(batch, avg_by_type, avg_paddy_cost) + per_batch_overhead
        valuations.append(
            {
                "batch_number": batch.batch_number,
                "paddy_type": batch.paddy_type or ProductionBatch.PaddyType.MIXED,
                "input_kg": input_kg,
                "output_kg": output_kg,
                "estimated_cost": money(cost),
                "cost_per_kg": formulas.cogs_per_kg(cost, output_kg or input_kg),
                "started_at": batch.started_at,
            }
        )
    return valuations


def _salary_workflow(labourers_count: int, labour_work_days: int) -> dict:
    return {
        "attendance": {
            "types": ["present", "absent", "half_day", "overtime", "leave", "holiday"],
            "modules": ["self-entry for labour/driver/operator", "admin overrides"],
            "labour_attendance": {
                "labourers_count": labourers_count,
                "labour_work_days": labour_work_days,
            },
        },
        "calculations": {
            "labour_formula": "Monthly Salary = (Present Days x Daily Rate) + OT - Penalties - Advances",
            "monthly_fixed": "Base Salary + Incentives - Deductions",
            "ot_rule": "OT Pay = OT Hours x OT Rate",
        },
        "approval_flow": [
            "System auto-calculates salaries from attendance + payslips",
            "Accountant reviews & validates",
            "Admin/Owner approves and releases payments",
            "System issues payslips with digital signature slot",
        ],
        "payment_methods": ["cash", "bank_transfer", "cheque", "mobile_money"],
        "reporting": {
            "key_metrics": [
                "Total Salary Paid",
                "Total OT Paid",
                "Bonuses vs Deductions",
                "Role-wise payroll cost",
                "Salary vs Income ratio",
            ],
            "monthly_summary_available": True,
        },
        "access_control": [
            {"role": str(rule["role"]), "access": rule["access"]} for rule in SALARY_ACCESS_RULES
        ],
    }


def _compile(window: ReportWindow, options: ReportOptions) -> dict:
    purchases = _purchases_by_type(window)
    production = _production_totals(window)
    invoices = _invoice_totals(window)
    revenue_rows = _revenue_by_type(window)
    expense_map = _paid_expenses_by_type(window)
    pending_expenses = _pending_expenses_total()
    finished = _finished_goods_stock()
    paddy_stock_kg = _paddy_stock_kg()
    payroll_by_role = _payroll_by_role(window)
    attendance = _labour_attendance(window)
    by_products = _by_product_sales(window)
    machines = list(Machine.objects.values_list("purchase_cost", flat=True))
    recent_batches = _recent_batches(window)

    # Conversion
    total_paddy_cost = sum((row["total_cost"] for row in purchases), ZERO)
    total_purchased_kg = sum((row["qty_kg"] for row in purchases), ZERO)
    avg_paddy_cost = formulas.safe_divide(total_paddy_cost, total_purchased_kg)
    avg_by_type = {row["type"]: row["avg_price_per_kg"] for row in purchases}

    input_kg = production["input_kg"]
    rice_kg = production["rice_kg"]
    rice_sold_kg = sum((row["qty_kg"] for row in revenue_rows), ZERO)

    actual_recovery = formulas.safe_divide(rice_kg, input_kg) if input_kg else None
    effective_recovery = options.recovery_rate or actual_recovery or formulas.DEFAULT_RECOVERY_RATE
    target_rice_kg = options.target_rice_kg or rice_kg or rice_sold_kg
    paddy_needed = formulas.paddy_requirement(target_rice_kg, effective_recovery)

    # Margins
    cogs_per_kg = formulas.cogs_per_kg(total_paddy_cost, rice_kg or rice_sold_kg)
    revenue_per_kg = formulas.revenue_per_kg(invoices["revenue"], rice_sold_kg or rice_kg)
    gross = formulas.gross_profit(invoices["revenue"], total_paddy_cost)
    gross_per_kg = formulas.gross_profit_per_kg(revenue_per_kg, cogs_per_kg)

    # OPEX and profit
    expenses_paid = sum(expense_map.values(), ZERO)
    payroll_total = sum((row["net_salary"] for row in payroll_by_role.values()), ZERO)
    total_opex = expenses_paid + payroll_total
    net_before_owner = formulas.net_profit_before_owner(gross, total_opex)
    owner_share = formulas.owner_salary(net_before_owner, options.owner_salary_pct)
    final_net = formulas.final_net_profit(net_before_owner, owner_share)

    # Labour
    labour_cost = payroll_by_role.get(Employee.Role.LABOUR, {}).get("net_salary", ZERO)
    labourers = len(attendance)
    work_days = sum(row["present_days"] or 0 for row in attendance)
    daily_rate = money(labour_cost / work_days) if work_days else ZERO
    monthly_labour = money(
        daily_rate * labourers * (Decimal(work_days) / max(labourers, 1))
    )
    driver_salary = payroll_by_role.get(Employee.Role.DRIVER, {}).get("net_salary", ZERO)

    # Stock and working capital
    opening_stock = money(paddy_stock_kg + input_kg - total_purchased_kg)
    inventory_value = money(finished["value"])
    receivables = money(invoices["outstanding"])
    payables = money(pending_expenses)
    working_capital = money(inventory_value + receivables - payables)

    # By-products and cash
    by_product_revenue = sum((row["revenue"] for row in by_products.values()), ZERO)
    cash_in = money(invoices["paid"] + by_product_revenue)
    cash_out = money(total_paddy_cost + expenses_paid + payroll_total)

    # Break-even, pricing, depreciation
    fixed_costs = money(
        sum((expense_map.get(t, ZERO) for t in Expense.FIXED_COST_TYPES), ZERO)
    )
    depreciation = formulas.fleet_depreciation(
        machines, options.scrap_pct, options.useful_life_years
    )

    batch_count = production["batch_count"]
    per_batch_overhead = (
        formulas.safe_divide(expenses_paid, batch_count) if batch_count else ZERO
    )

    return {
        "filters": {
            "start_date": window.start,
            "end_date": window.end,
            "target_rice_kg": target_rice_kg,
            "desired_margin_per_kg": options.desired_margin_per_kg,
            "owner_salary_pct": options.owner_salary_pct,
            "recovery_rate": effective_recovery,
        },
        "economics": {
            "conversion": {
                "actual_recovery_rate": money(
                    actual_recovery if actual_recovery is not None else effective_recovery
                ),
                "effective_recovery_rate": effective_recovery,
                "target_rice_kg": target_rice_kg,
                "paddy_needed_kg": paddy_needed,
                "total_input_paddy_kg": input_kg,
                "total_rice_output_kg": rice_kg,
                "total_broken_rice_kg": production["broken_kg"],
                "total_bran_kg": production["bran_kg"],
                "total_husk_kg": production["husk_kg"],
                "batch_count": batch_count,
            },
            "cogs": {
                "total_paddy_cost": money(total_paddy_cost),
                "cogs_per_kg": cogs_per_kg,
                "purchase_breakdown": [
                    {**row, "avg_price_per_kg": money(row["avg_price_per_kg"])}
                    for row in purchases
                ],
            },
            "revenue": {
                "total_revenue": money(invoices["revenue"]),
                "revenue_per_kg": revenue_per_kg,
                "rice_sold_kg": rice_sold_kg,
                "breakdown": [
                    {**row, "avg_price_per_kg": money(row["avg_price_per_kg"])}
                    for row in revenue_rows
                ],
            },
            "gross_profit": {"amount": gross, "per_kg": gross_per_kg},
            "labour_and_salaries": {
                "labour_cost": labour_cost,
                "labourers_count": labourers,
                "labour_work_days": work_days,
                "labour_daily_rate_estimate": daily_rate,
                "labour_formula_monthly": monthly_labour,
                "driver_salary": driver_salary,
                "payroll_by_role": payroll_by_role,
                "owner_salary_amount": owner_share,
            },
            "opex": {
                "total_opex": money(total_opex),
                "expenses_paid_total": money(expenses_paid),
                "payroll_net_total": money(payroll_total),
                "expense_breakdown": expense_map,
            },
            "net_profit": {
                "net_profit_before_owner": net_before_owner,
                "owner_salary_amount": owner_share,
                "final_net_profit": final_net,
            },
            "inventory": {
                "raw_material_stock_kg": paddy_stock_kg,
                "opening_stock_estimate": opening_stock,
                "purchases_kg": total_purchased_kg,
                "paddy_used_kg": input_kg,
                "finished_goods_weight_kg": finished["weight_kg"],
                "finished_goods_value": inventory_value,
                "formula": "Current = Opening + Purchases - Used",
            },
            "batch_valuation": {
                "per_batch_overhead": money(per_batch_overhead),
                "batches": _batch_valuations(
                    recent_batches,
                    avg_by_type=avg_by_type,
                    avg_paddy_cost=avg_paddy_cost,
                    per_batch_overhead=per_batch_overhead,
                ),
            },
            "depreciation": {
                "annual": depreciation.annual,
                "monthly": depreciation.monthly,
                "assumptions": {
                    "scrap_pct": options.scrap_pct,
                    "useful_life_years": options.useful_life_years,
                },
            },
            "working_capital": {
                "inventory_value": inventory_value,
                "accounts_receivable": receivables,
                "accounts_payable": payables,
                "working_capital": working_capital,
            },
            "by_products": {
                "total_revenue": money(by_product_revenue),
                "breakdown": by_products,
                "total_profit_including_by_products": money(final_net + by_product_revenue),
            },
            "cash_flow": {
                "cash_in": cash_in,
                "cash_out": cash_out,
                "net_cash_flow": money(cash_in - cash_out),
                "inflow_sources": ["Rice sales collections", "By-product sales", "Debtor payments"],
                "outflow_uses": ["Paddy purchases", "Salaries", "Expenses", "Loan servicing"],
            },
            "break_even": {
                "fixed_costs": fixed_costs,
                "profit_per_kg": gross_per_kg,
                "break_even_kg": formulas.break_even_kg(fixed_costs, gross_per_kg),
            },
            "price_setting": {
                "cogs_per_kg": cogs_per_kg,
                "desired_margin_per_kg": options.desired_margin_per_kg,
                "recommended_price_per_kg": formulas.recommended_price(
                    cogs_per_kg, options.desired_margin_per_kg
                ),
            },
        },
        "salary_workflow": _salary_workflow(labourers, work_days),
    }


# ============================================================
# ENTRYPOINT
# ============================================================

def compile_mill_economics(
    *,
    start=None,
    end=None,
    options: dict | None = None,
    config: MillConfig | None = None,
    now: datetime | None = None,
) -> dict:
    """
    Build the mill economics report for [start, end].

    `start` / `end` may be dates, datetimes or ISO strings. `options` holds
    the optional overrides (target_rice_kg, desired_margin_per_kg,
    recovery_rate, owner_salary_pct, scrap_pct, useful_life_years).
    """
    window = ReportWindow.parse(start, end, now=now)

    try:
        config = config or load_mill_config()
        report_options = ReportOptions.build(config=config, **(options or {}))
        return _compile(window, report_options)
    except EconomicsReportError:
        raise
    except Exception as exc:
        logger.exception(
            "Error compiling mill economics report",
            extra={"report_start": window.start.isoformat(), "report_end": window.end.isoformat()},
        )
        raise ReportCompilationError("Failed to compile mill economics report") from exc
