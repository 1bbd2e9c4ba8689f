from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from inventory.models import FinishedGoodsLot, StockMovement
from inventory.services.ledger import balance_as_of, movements_by_reference
from inventory.services.stock_adjustments import adjust_stock
from production.services.batch_service import BatchOutput, complete_batch, start_batch
from purchases.models import Supplier
from purchases.services.receiving_service import receive_purchase
from sales.models import Invoice, SalesOrder
from sales.services.exceptions import (
    InsufficientFinishedGoodsError,
    InvalidOrderTransitionError,
    InvoiceLockedError,
    InvoicePaymentError,
    OrderAlreadyInvoicedError,
    OrderNotConfirmedError,
    ProductNotFoundError,
)
from sales.services.invoice_service import compute_invoice_totals, generate_invoice
from sales.services.order_service import create_order, transition_order
from sales.services.payment_service import (
    cancel_invoice,
    record_payment,
    refresh_overdue_invoices,
    update_invoice_terms,
)

User = get_user_model()


def _mill_rice(user=None):
    """
    Receive 5000 kg of nadu paddy, mill 2000 kg of it into 1300 kg of rice.
    Returns (raw material lot, finished goods lot).
    """
    supplier = Supplier.objects.create(name="Perera Farms")
    received = receive_purchase(
        supplier_id=supplier.pk,
        paddy_type="nadu",
        quality_grade="standard",
        gross_weight_kg=Decimal("5000.00"),
        price_per_kg=Decimal("100.00"),
        user=user,
    )
    batch = start_batch(
        raw_material_id=received.raw_material.pk, input_quantity_kg="2000", user=user
    )
    completed = complete_batch(
        batch_id=batch.pk,
        output=BatchOutput.of(rice_kg="1300", bran_kg="160", husk_kg="440"),
        price_per_kg="100",
        user=user,
    )
    return received.raw_material, completed.finished_goods


def _confirmed_order(sku, quantity="500", unit_price="100", **kwargs):
    order = create_order(
        customer_name="Lanka Foods",
        items=[{"sku": sku, "quantity_kg": quantity, "unit_price": unit_price}],
        **kwargs,
    )
    return transition_order(order_id=order.pk, target_status=SalesOrder.Status.CONFIRMED)


class InvoiceTotalsTests(TestCase):
    def test_discount_then_tax(self):
        totals = compute_invoice_totals(
            subtotal=Decimal("1000"), discount_percent=Decimal("10"), tax_percent=Decimal("5")
        )

        self.assertEqual(totals.discount_amount, Decimal("100.00"))
        self.assertEqual(totals.taxable_amount, Decimal("900.00"))
        self.assertEqual(totals.tax_amount, Decimal("45.00"))
        self.assertEqual(totals.total_amount, Decimal("945.00"))

    def test_missing_percentages_are_zero(self):
        totals = compute_invoice_totals(subtotal="250.50")
        self.assertEqual(totals.total_amount, Decimal("250.50"))


class PaddyToInvoiceFlowTests(TestCase):
    """
    Stock follows the paddy from the weighbridge to the invoice.

    GUARANTEES:
    - Lots and the ledger agree at every step
    - Invoicing deducts finished goods and writes a SALE movement
    - One invoice per order, confirmed orders only
    """

    def setUp(self):
        self.user = User.objects.create_user(username="manager", password="pass")
        self.raw, self.rice = _mill_rice(self.user)

    def test_end_to_end_balances(self):
        order = _confirmed_order(self.rice.sku)

        with self.captureOnCommitCallbacks(execute=True):
            result = generate_invoice(order_id=order.pk, user=self.user)

        invoice = result.invoice
        self.assertTrue(invoice.invoice_number.startswith("INV-"))
        self.assertEqual(invoice.subtotal, Decimal("50000.00"))
        self.assertEqual(invoice.tax_percent, Decimal("5.00"))
        self.assertEqual(invoice.total_amount, Decimal("52500.00"))
        self.assertEqual(invoice.payment_status, Invoice.PaymentStatus.UNPAID)
        self.assertEqual(invoice.due_date, timezone.localdate() + timedelta(days=30))

        self.assertEqual(len(result.stock_updates), 1)
        self.assertEqual(result.stock_updates[0]["new_stock_kg"], "800.00")
        self.assertFalse(result.stock_updates[0]["capped"])

        self.rice.refresh_from_db()
        self.raw.refresh_from_db()
        self.assertEqual(self.rice.weight_kg, Decimal("800.00"))
        self.assertEqual(balance_as_of(self.rice.sku), Decimal("800.00"))
        self.assertEqual(self.raw.quantity_kg, Decimal("3000.00"))
        self.assertEqual(balance_as_of(self.raw.sku), Decimal("3000.00"))

        sale_movements = movements_by_reference(StockMovement.ReferenceKind.SALE, invoice.pk)
        self.assertEqual([m.quantity_kg for m in sale_movements], [Decimal("500.00")])

        order.refresh_from_db()
        self.assertEqual(order.status, SalesOrder.Status.INVOICED)

    def test_second_invoice_is_rejected(self):
        order = _confirmed_order(self.rice.sku)
        generate_invoice(order_id=order.pk)

        with self.assertRaises(OrderAlreadyInvoicedError):
            generate_invoice(order_id=order.pk)

        self.assertEqual(Invoice.objects.count(), 1)

    def test_draft_order_cannot_be_invoiced(self):
        order = create_order(
            customer_name="Lanka Foods",
            items=[{"sku": self.rice.sku, "quantity_kg": "10", "unit_price": "100"}],
        )

        with self.assertRaises(OrderNotConfirmedError):
            generate_invoice(order_id=order.pk)

    def test_deduction_is_capped_at_available_stock(self):
        order = _confirmed_order(self.rice.sku)
        adjust_stock(sku=self.rice.sku, delta_kg="-1000", reason="Damaged in storage")

        with self.assertLogs("inventory.services.lots", level="WARNING"):
            result = generate_invoice(order_id=order.pk)

        update = result.stock_updates[0]
        self.assertTrue(update["capped"])
        self.assertEqual(update["reduced_kg"], "300.00")

        self.rice.refresh_from_db()
        self.assertEqual(self.rice.weight_kg, Decimal("0.00"))
        self.assertEqual(self.rice.status, FinishedGoodsLot.Status.SOLD)
        self.assertEqual(balance_as_of(self.rice.sku), Decimal("0.00"))


class SalesOrderTests(TestCase):
    def setUp(self):
        self.rice = FinishedGoodsLot.objects.create(
            sku="FG-BATCH-2025-0001",
            paddy_type="samba",
            rice_grade="premium",
            weight_kg=Decimal("400.00"),
            expiry_date=timezone.localdate() + timedelta(days=180),
        )

    def test_order_lines_are_priced_from_the_lot(self):
        order = create_order(
            customer_name="Kandy Stores",
            items=[
                {"sku": self.rice.sku, "quantity_kg": "100", "unit_price": "150"},
                {"sku": self.rice.sku, "quantity_kg": "50.5", "unit_price": "150"},
            ],
        )

        self.assertEqual(order.status, SalesOrder.Status.DRAFT)
        self.assertTrue(order.order_number.startswith("SO-"))
        self.assertEqual(order.total_amount, Decimal("22575.00"))
        self.assertEqual(order.items.first().product_name, "Samba Rice - premium")

    def test_unknown_sku(self):
        with self.assertRaises(ProductNotFoundError):
            create_order(
                customer_name="Kandy Stores",
                items=[{"sku": "FG-NOPE", "quantity_kg": "1", "unit_price": "1"}],
            )

    def test_insufficient_stock(self):
        with self.assertRaisesMessage(InsufficientFinishedGoodsError, "Available: 400.00kg"):
            create_order(
                customer_name="Kandy Stores",
                items=[{"sku": self.rice.sku, "quantity_kg": "400.01", "unit_price": "1"}],
            )

    def test_lifecycle(self):
        order = _confirmed_order(self.rice.sku, quantity="10")
        self.assertIsNotNone(order.confirmed_at)

        order = transition_order(order_id=order.pk, target_status=SalesOrder.Status.SHIPPED)
        self.assertIsNotNone(order.shipped_at)

        with self.assertRaises(InvalidOrderTransitionError):
            transition_order(order_id=order.pk, target_status=SalesOrder.Status.CANCELLED)

        order = transition_order(order_id=order.pk, target_status=SalesOrder.Status.DELIVERED)
        self.assertIsNotNone(order.delivered_at)

    def test_invoiced_is_not_a_manual_transition(self):
        order = _confirmed_order(self.rice.sku, quantity="10")

        with self.assertRaises(InvalidOrderTransitionError):
            transition_order(order_id=order.pk, target_status=SalesOrder.Status.INVOICED)


class InvoicePaymentTests(TestCase):
    """
    GUARANTEES:
    - paid_amount is the sum of recorded payments
    - Paid and cancelled invoices are locked
    - Cancelling an invoice does not put stock back
    """

    def setUp(self):
        self.rice = FinishedGoodsLot.objects.create(
            sku="FG-BATCH-2025-0001",
            paddy_type="nadu",
            weight_kg=Decimal("1000.00"),
            expiry_date=timezone.localdate() + timedelta(days=180),
        )
        order = _confirmed_order(self.rice.sku)
        self.invoice = generate_invoice(order_id=order.pk).invoice

    def test_partial_then_full_payment(self):
        invoice = record_payment(invoice_id=self.invoice.pk, amount="20000", method="cash")
        self.assertEqual(invoice.paid_amount, Decimal("20000.00"))
        self.assertEqual(invoice.payment_status, Invoice.PaymentStatus.PARTIALLY_PAID)
        self.assertEqual(invoice.balance_due, Decimal("32500.00"))

        invoice = record_payment(
            invoice_id=self.invoice.pk, amount="32500", method="bank_transfer"
        )
        self.assertEqual(invoice.payment_status, Invoice.PaymentStatus.PAID)

        with self.assertRaises(InvoicePaymentError):
            record_payment(invoice_id=self.invoice.pk, amount="1", method="cash")

        with self.assertRaises(InvoiceLockedError):
            update_invoice_terms(invoice_id=self.invoice.pk, discount_percent="5")

    def test_overpayment_marks_paid(self):
        invoice = record_payment(invoice_id=self.invoice.pk, amount="60000", method="cheque")

        self.assertEqual(invoice.paid_amount, Decimal("60000.00"))
        self.assertEqual(invoice.payment_status, Invoice.PaymentStatus.PAID)

    def test_unknown_method(self):
        with self.assertRaises(InvoicePaymentError):
            record_payment(invoice_id=self.invoice.pk, amount="10", method="barter")

    def test_update_terms_recomputes_totals(self):
        invoice = update_invoice_terms(
            invoice_id=self.invoice.pk, discount_percent="10", tax_percent="5"
        )
        self.assertEqual(invoice.total_amount, Decimal("47250.00"))

    def test_cancel_does_not_restore_stock(self):
        invoice = cancel_invoice(invoice_id=self.invoice.pk, reason="Customer refused")

        self.assertEqual(invoice.status, Invoice.Status.CANCELLED)
        self.assertEqual(invoice.payment_status, Invoice.PaymentStatus.CANCELLED)
        self.rice.refresh_from_db()
        self.assertEqual(self.rice.weight_kg, Decimal("500.00"))

        with self.assertRaises(InvoiceLockedError):
            record_payment(invoice_id=self.invoice.pk, amount="10", method="cash")

    def test_refresh_overdue(self):
        record_payment(invoice_id=self.invoice.pk, amount="100", method="cash")

        updated = refresh_overdue_invoices(today=timezone.localdate() + timedelta(days=31))

        self.assertEqual(updated, 1)
        self.invoice.refresh_from_db()
        self.assertEqual(self.invoice.payment_status, Invoice.PaymentStatus.OVERDUE)


class SalesApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="cashier", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)
        self.rice = FinishedGoodsLot.objects.create(
            sku="FG-BATCH-2025-0001",
            paddy_type="nadu",
            weight_kg=Decimal("1000.00"),
            expiry_date=timezone.localdate() + timedelta(days=180),
        )

    def test_order_to_invoice(self):
        response = self.client.post(
            "/api/sales/orders/",
            {
                "customerName": "Galle Traders",
                "items": [{"sku": self.rice.sku, "qtyKg": "200", "unitPrice": "100"}],
            },
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        order_id = response.data["id"]

        response = self.client.post(
            f"/api/sales/orders/{order_id}/status/", {"status": "confirmed"}, format="json"
        )
        self.assertEqual(response.status_code, 200)

        response = self.client.post(
            "/api/sales/invoices/",
            {"orderId": order_id, "discountPercent": "10", "taxPercent": "5"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["invoice"]["total_amount"], "18900.00")
        self.assertEqual(response.data["stock_updates"][0]["new_stock_kg"], "800.00")

        response = self.client.post(
            "/api/sales/invoices/", {"order_id": order_id}, format="json"
        )
        self.assertEqual(response.status_code, 400)

    def test_invoice_for_unknown_order(self):
        response = self.client.post(
            "/api/sales/invoices/",
            {"order_id": "00000000-0000-0000-0000-000000000000"},
            format="json",
        )
        self.assertEqual(response.status_code, 404)

    def test_payment_endpoint(self):
        order = _confirmed_order(self.rice.sku, quantity="100")
        invoice = generate_invoice(order_id=order.pk).invoice

        response = self.client.post(
            f"/api/sales/invoices/{invoice.pk}/payments/",
            {"amount": "5000", "paymentMethod": "cash"},
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["payment_status"], "partially_paid")
        self.assertEqual(response.data["paid_amount"], "5000.00")
