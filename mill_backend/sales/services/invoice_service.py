# sales/services/invoice_service.py

"""
======================================================
PATH: sales/services/invoice_service.py
======================================================
INVOICE GENERATION SERVICE

generate_invoice():
  1) Lock the order
  2) Reject a second invoice (checked before status), then non-confirmed
  3) Totals from the order total: discount, taxable, tax, total
     (tax percent defaults to the configured GST rate)
  4) Invoice INV-<year>-<seq>, due = today + invoice_due_days
  5) Per line, in order: deduct finished goods (floor at zero) and
     write an OUT movement for what was actually removed.
     Each line is best-effort on its own; a failed line is logged and
     the rest still run.
  6) Order -> invoiced, events: low_stock, invoice_generated,
     delivery_dispatched (when a driver is assigned)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.decimals import money
from core.models import DocumentSequence
from core.services.mill_config import MillConfig, load_mill_config
from core.services.notifications import notify
from core.services.numbering import next_document_number
from core.services.side_effects import best_effort
from inventory.models import StockMovement
from inventory.services.ledger import record_movement
from inventory.services.lots import deduct_finished_goods
from sales.models import Invoice, InvoiceItem, SalesOrder
from sales.services.exceptions import (
    OrderAlreadyInvoicedError,
    OrderNotConfirmedError,
    OrderNotFoundError,
)
from sales.services.order_lifecycle import validate_transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_percent: Decimal
    tax_amount: Decimal
    total_amount: Decimal

    def as_fields(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount_percent": self.discount_percent,
            "discount_amount": self.discount_amount,
            "tax_percent": self.tax_percent,
            "tax_amount": self.tax_amount,
            "total_amount": self.total_amount,
        }


@dataclass(frozen=True)
class InvoiceResult:
    invoice: Invoice
    stock_updates: list = field(default_factory=list)


def compute_invoice_totals(*, subtotal, discount_percent=None, tax_percent=None) -> InvoiceTotals:
    """
    subtotal=1000, discount 10%, tax 5% -> 100 / 900 / 45 / 945
    """
    subtotal = money(subtotal)
    discount_percent = money(discount_percent)
    tax_percent = money(tax_percent)

    discount_amount = money(subtotal * discount_percent / 100)
    taxable_amount = money(subtotal - discount_amount)
    tax_amount = money(taxable_amount * tax_percent / 100)
    total_amount = money(taxable_amount + tax_amount)

    return InvoiceTotals(
        subtotal=subtotal,
        discount_percent=discount_percent,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_percent=tax_percent,
        tax_amount=tax_amount,
        total_amount=total_amount,
    )


def _deduct_line(*, item, invoice: Invoice, user, config: MillConfig):
    result = best_effort(
        f"stock:invoice-deduction:{item.sku}",
        deduct_finished_goods,
        sku=item.sku,
        quantity_kg=item.quantity_kg,
    )
    if result is None:
        return None

    if result.reduced_kg > 0:
        best_effort(
            f"ledger:sale:{item.sku}",
            record_movement,
            movement_type=StockMovement.MovementType.OUT,
            product_sku=item.sku,
            quantity_kg=result.reduced_kg,
            reference_kind=StockMovement.ReferenceKind.SALE,
            reference_id=invoice.pk,
            source_bin=result.lot.storage_bin,
            reason=f"Invoice {invoice.invoice_number}",
            unit_cost=item.unit_price,
            created_by=user,
        )

    if result.new_weight_kg <= config.low_stock_threshold_kg:
        notify(
            "low_stock",
            sku=item.sku,
            product_name=result.lot.product_name,
            remaining_kg=str(result.new_weight_kg),
        )

    return result


@transaction.atomic
def generate_invoice(
    *,
    order_id,
    discount_percent=None,
    tax_percent=None,
    notes: str = "",
    user=None,
    config: MillConfig | None = None,
) -> InvoiceResult:
    config = config or load_mill_config()

    order = (
        SalesOrder.objects.select_for_update()
        .select_related("driver")
        .filter(pk=order_id)
        .first()
    )
    if order is None:
        raise OrderNotFoundError("Sales order not found")

    if Invoice.objects.filter(order=order).exists():
        raise OrderAlreadyInvoicedError("Order already has an invoice")

    if order.status != SalesOrder.Status.CONFIRMED:
        raise OrderNotConfirmedError("Only confirmed orders can be invoiced")

    totals = compute_invoice_totals(
        subtotal=order.total_amount,
        discount_percent=discount_percent,
        tax_percent=tax_percent if tax_percent is not None else config.gst_rate,
    )

    invoice = Invoice.objects.create(
        invoice_number=next_document_number(
            document_type=DocumentSequence.DocumentType.INVOICE,
            config=config,
        ),
        order=order,
        customer_name=order.customer_name,
        due_date=timezone.localdate() + timedelta(days=config.invoice_due_days),
        notes=notes or "",
        created_by=user,
        **totals.as_fields(),
    )

    items = list(order.items.all())
    InvoiceItem.objects.bulk_create(
        [
            InvoiceItem(
                invoice=invoice,
                sku=item.sku,
                product_name=item.product_name,
                quantity_kg=item.quantity_kg,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in items
        ]
    )

    stock_updates = []
    for item in items:
        result = _deduct_line(item=item, invoice=invoice, user=user, config=config)
        if result is not None:
            stock_updates.append(result.as_dict())

    validate_transition(order=order, target_status=SalesOrder.Status.INVOICED, via_invoice=True)
    order.status = SalesOrder.Status.INVOICED
    order.save()

    notify(
        "invoice_generated",
        invoice_number=invoice.invoice_number,
        order_number=order.order_number,
        customer_name=order.customer_name,
        total_amount=str(invoice.total_amount),
    )
    if order.driver_id:
        notify(
            "delivery_dispatched",
            order_number=order.order_number,
            driver_id=str(order.driver_id),
            driver_name=order.driver.name,
            customer_name=order.customer_name,
        )

    logger.info(
        "Invoice generated",
        extra={
            "invoice_number": invoice.invoice_number,
            "order_number": order.order_number,
            "total_amount": str(invoice.total_amount),
            "lines_deducted": len(stock_updates),
            "lines_total": len(items),
        },
    )
    return InvoiceResult(invoice=invoice, stock_updates=stock_updates)
