from datetime import datetime, timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from accounting.models import Attendance, Employee, Expense, Payslip
from economics.services.exceptions import InvalidReportRangeError, ReportCompilationError
from economics.services.mill_economics import ReportWindow, compile_mill_economics
from production.models import ByProduct, Machine
from production.services.batch_service import BatchOutput, complete_batch, start_batch
from purchases.models import Supplier
from purchases.services.receiving_service import receive_purchase
from sales.models import SalesOrder
from sales.services.invoice_service import generate_invoice
from sales.services.order_service import create_order, transition_order
from sales.services.payment_service import record_payment

User = get_user_model()


class ReportWindowTests(TestCase):
    def test_defaults_to_current_month(self):
        now = timezone.make_aware(datetime(2025, 3, 17, 10, 30))
        window = ReportWindow.parse(now=now)

        self.assertEqual(str(window.start_date), "2025-03-01")
        self.assertEqual(str(window.end_date), "2025-03-17")

    def test_end_covers_the_whole_day(self):
        window = ReportWindow.parse("2025-01-01", "2025-01-31")
        local_end = timezone.localtime(window.end)

        self.assertEqual((local_end.hour, local_end.minute), (23, 59))

    def test_unparsable_dates(self):
        with self.assertRaisesMessage(InvalidReportRangeError, "Invalid startDate or endDate"):
            ReportWindow.parse("last tuesday", "2025-01-31")

    def test_reversed_range(self):
        with self.assertRaisesMessage(InvalidReportRangeError, "startDate must be before endDate"):
            ReportWindow.parse("2025-02-01", "2025-01-01")


class MillEconomicsReportTests(TestCase):
    """
    One month of mill activity reduced to the economics report.

    Scenario:
    - nadu 5000 kg @ 100, samba 1000 kg @ 120 (620000 paddy cost)
    - one nadu batch: 2000 kg in, 1300 kg rice out
    - one invoice: 500 kg @ 100 + 5% tax = 52500, 20000 collected
    - utilities 10000 paid, fuel 3000 pending, labour payslip 20000
    - one machine costing 1,000,000
    """

    @classmethod
    def setUpTestData(cls):
        supplier = Supplier.objects.create(name="Perera Farms")
        nadu = receive_purchase(
            supplier_id=supplier.pk,
            paddy_type="nadu",
            quality_grade="standard",
            gross_weight_kg=Decimal("5000.00"),
            price_per_kg=Decimal("100.00"),
        )
        receive_purchase(
            supplier_id=supplier.pk,
            paddy_type="samba",
            quality_grade="premium",
            gross_weight_kg=Decimal("1000.00"),
            price_per_kg=Decimal("120.00"),
        )

        batch = start_batch(raw_material_id=nadu.raw_material.pk, input_quantity_kg="2000")
        cls.batch = complete_batch(
            batch_id=batch.pk,
            output=BatchOutput.of(rice_kg="1300", bran_kg="160", husk_kg="440"),
            price_per_kg="100",
        ).batch

        order = create_order(
            customer_name="Lanka Foods",
            items=[
                {"sku": f"FG-{batch.batch_number}", "quantity_kg": "500", "unit_price": "100"}
            ],
        )
        transition_order(order_id=order.pk, target_status=SalesOrder.Status.CONFIRMED)
        invoice = generate_invoice(order_id=order.pk).invoice
        record_payment(invoice_id=invoice.pk, amount="20000", method="cash")

        Expense.objects.create(
            expense_type=Expense.ExpenseType.UTILITIES,
            amount=Decimal("10000.00"),
            payment_status=Expense.PaymentStatus.PAID,
        )
        Expense.objects.create(
            expense_type=Expense.ExpenseType.FUEL,
            amount=Decimal("3000.00"),
        )

        today = timezone.localdate()
        labourer = Employee.objects.create(name="Nimal", role=Employee.Role.LABOUR)
        Payslip.objects.create(
            employee=labourer,
            period_start=today - timedelta(days=30),
            period_end=today,
            gross_earnings=Decimal("21000.00"),
            total_deductions=Decimal("1000.00"),
        )
        for offset in (1, 2):
            Attendance.objects.create(
                employee=labourer,
                date=today - timedelta(days=offset),
                status=Attendance.Status.PRESENT,
            )

        Machine.objects.create(
            name="Rubber roll huller",
            serial_number="HUL-001",
            machine_type=Machine.MachineType.MILL,
            purchase_cost=Decimal("1000000.00"),
        )
        ByProduct.objects.create(
            batch=cls.batch,
            product_type=ByProduct.ProductType.BRAN,
            quantity_kg=Decimal("160.00"),
            selling_price_per_kg=Decimal("25.00"),
            sold_quantity_kg=Decimal("40.00"),
            sold_revenue=Decimal("1000.00"),
        )

    def _report(self, **options):
        today = timezone.localdate()
        return compile_mill_economics(
            start=today - timedelta(days=30), end=today, options=options
        )

    def test_conversion_and_margins(self):
        economics = self._report()["economics"]

        conversion = economics["conversion"]
        self.assertEqual(conversion["total_input_paddy_kg"], Decimal("2000.00"))
        self.assertEqual(conversion["total_rice_output_kg"], Decimal("1300.00"))
        self.assertEqual(conversion["actual_recovery_rate"], Decimal("0.65"))
        self.assertEqual(conversion["paddy_needed_kg"], Decimal("1940.30"))
        self.assertEqual(conversion["batch_count"], 1)

        self.assertEqual(economics["cogs"]["total_paddy_cost"], Decimal("620000.00"))
        self.assertEqual(economics["cogs"]["cogs_per_kg"], Decimal("476.92"))
        self.assertEqual(economics["revenue"]["total_revenue"], Decimal("52500.00"))
        self.assertEqual(economics["revenue"]["revenue_per_kg"], Decimal("105.00"))
        self.assertEqual(economics["revenue"]["breakdown"][0]["type"], "nadu")
        self.assertEqual(economics["gross_profit"]["amount"], Decimal("-567500.00"))

    def test_profit_after_opex(self):
        economics = self._report()["economics"]

        self.assertEqual(economics["opex"]["total_opex"], Decimal("30000.00"))
        self.assertEqual(economics["opex"]["expenses_paid_total"], Decimal("10000.00"))
        self.assertEqual(economics["net_profit"]["net_profit_before_owner"], Decimal("-597500.00"))
        self.assertEqual(economics["net_profit"]["owner_salary_amount"], Decimal("0.00"))
        self.assertEqual(economics["net_profit"]["final_net_profit"], Decimal("-597500.00"))

    def test_labour(self):
        labour = self._report()["economics"]["labour_and_salaries"]

        self.assertEqual(labour["labour_cost"], Decimal("20000.00"))
        self.assertEqual(labour["labourers_count"], 1)
        self.assertEqual(labour["labour_work_days"], 2)
        self.assertEqual(labour["labour_daily_rate_estimate"], Decimal("10000.00"))

    def test_working_capital_and_cash(self):
        economics = self._report()["economics"]

        capital = economics["working_capital"]
        self.assertEqual(capital["inventory_value"], Decimal("80000.00"))
        self.assertEqual(capital["accounts_receivable"], Decimal("32500.00"))
        self.assertEqual(capital["accounts_payable"], Decimal("3000.00"))
        self.assertEqual(capital["working_capital"], Decimal("109500.00"))

        cash = economics["cash_flow"]
        self.assertEqual(cash["cash_in"], Decimal("21000.00"))
        self.assertEqual(cash["cash_out"], Decimal("650000.00"))
        self.assertEqual(economics["by_products"]["total_revenue"], Decimal("1000.00"))

    def test_break_even_and_pricing(self):
        economics = self._report()["economics"]

        self.assertEqual(economics["break_even"]["fixed_costs"], Decimal("10000.00"))
        self.assertEqual(
            economics["price_setting"]["recommended_price_per_kg"], Decimal("491.92")
        )

    def test_overrides(self):
        economics = self._report(
            desired_margin_per_kg="20", target_rice_kg="670", recovery_rate="0.67"
        )["economics"]

        self.assertEqual(economics["conversion"]["paddy_needed_kg"], Decimal("1000.00"))
        self.assertEqual(
            economics["price_setting"]["recommended_price_per_kg"], Decimal("496.92")
        )

    def test_batch_valuation_and_depreciation(self):
        economics = self._report()["economics"]

        valuation = economics["batch_valuation"]
        self.assertEqual(valuation["per_batch_overhead"], Decimal("10000.00"))
        batch = valuation["batches"][0]
        self.assertEqual(batch["batch_number"], self.batch.batch_number)
        self.assertEqual(batch["estimated_cost"], Decimal("210000.00"))
        self.assertEqual(batch["cost_per_kg"], Decimal("161.54"))

        self.assertEqual(economics["depreciation"]["annual"], Decimal("90000.00"))
        self.assertEqual(economics["depreciation"]["monthly"], Decimal("7500.00"))

    def test_empty_window_reports_zeros(self):
        report = compile_mill_economics(start="2001-01-01", end="2001-01-31")
        economics = report["economics"]

        self.assertEqual(economics["conversion"]["total_input_paddy_kg"], Decimal("0"))
        self.assertEqual(economics["cogs"]["cogs_per_kg"], Decimal("0.00"))
        self.assertEqual(economics["revenue"]["total_revenue"], Decimal("0.00"))
        self.assertIsNone(economics["break_even"]["break_even_kg"])

    def test_salary_workflow_is_included(self):
        workflow = self._report()["salary_workflow"]
        self.assertEqual(workflow["attendance"]["labour_attendance"]["labour_work_days"], 2)
        self.assertIn({"role": "admin", "access": "create|approve|view"}, workflow["access_control"])

    def test_query_failure_raises_compilation_error(self):
        with mock.patch(
            "economics.services.mill_economics._invoice_totals",
            side_effect=RuntimeError("database went away"),
        ):
            with self.assertLogs("economics.services.mill_economics", level="ERROR"):
                with self.assertRaisesMessage(
                    ReportCompilationError, "Failed to compile mill economics report"
                ):
                    self._report()


class MillEconomicsApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="owner", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_report(self):
        response = self.client.get(
            "/api/economics/mill-economics/",
            {"startDate": "2025-01-01", "endDate": "2025-01-31", "targetRiceKg": "1000"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["filters"]["target_rice_kg"], Decimal("1000"))
        self.assertEqual(
            response.data["economics"]["conversion"]["paddy_needed_kg"], Decimal("1492.54")
        )

    def test_invalid_range(self):
        response = self.client.get(
            "/api/economics/mill-economics/",
            {"startDate": "2025-02-01", "endDate": "2025-01-01"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "startDate must be before endDate")

    def test_compilation_failure(self):
        with mock.patch(
            "economics.services.mill_economics._production_totals",
            side_effect=RuntimeError("boom"),
        ):
            with self.assertLogs("economics.services.mill_economics", level="ERROR"):
                response = self.client.get("/api/economics/mill-economics/")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.data["detail"], "Failed to compile mill economics report")

    def test_requires_authentication(self):
        response = APIClient().get("/api/economics/mill-economics/")
        self.assertEqual(response.status_code, 401)
