# sales/services/payment_service.py

"""
======================================================
PATH: sales/services/payment_service.py
======================================================
INVOICE PAYMENTS & MAINTENANCE

- record_payment(): append a payment, recompute paid_amount / status
- update_invoice_terms(): change discount / tax / due date / notes
- cancel_invoice(): soft terminal state, stock is NOT restored
- refresh_overdue_invoices(): flag open invoices past their due date

Paid and cancelled invoices are locked.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from core.decimals import money
from core.services.notifications import notify
from sales.models import Invoice, InvoicePayment
from sales.services.exceptions import (
    InvoiceLockedError,
    InvoiceNotFoundError,
    InvoicePaymentError,
)
from sales.services.invoice_service import compute_invoice_totals

logger = logging.getLogger(__name__)

PaymentStatus = Invoice.PaymentStatus


def payment_status_for(*, paid_amount: Decimal, total_amount: Decimal, due_date=None, today=None) -> str:
    paid = money(paid_amount)
    total = money(total_amount)

    if paid >= total and (paid > 0 or total == 0):
        return PaymentStatus.PAID

    today = today or timezone.localdate()
    if due_date is not None and today > due_date:
        return PaymentStatus.OVERDUE

    if paid > 0:
        return PaymentStatus.PARTIALLY_PAID
    return PaymentStatus.UNPAID


def _lock_invoice(invoice_id) -> Invoice:
    invoice = Invoice.objects.select_for_update().filter(pk=invoice_id).first()
    if invoice is None:
        raise InvoiceNotFoundError("Invoice not found")
    return invoice


@transaction.atomic
def record_payment(
    *,
    invoice_id,
    amount,
    method: str,
    paid_on=None,
    processor: str = "",
    reference: str = "",
    notes: str = "",
    user=None,
) -> Invoice:
    invoice = _lock_invoice(invoice_id)

    if invoice.status == Invoice.Status.CANCELLED:
        raise InvoiceLockedError("Cannot record a payment on a cancelled invoice")
    if invoice.payment_status == PaymentStatus.PAID:
        raise InvoicePaymentError("Invoice is already fully paid")

    amount = money(amount)
    if amount <= 0:
        raise InvoicePaymentError("Payment amount must be greater than zero")
    if method not in InvoicePayment.Method.values:
        raise InvoicePaymentError(f"Unsupported payment method: {method}")

    payment = InvoicePayment.objects.create(
        invoice=invoice,
        amount=amount,
        method=method,
        paid_on=paid_on or timezone.localdate(),
        processor=processor or "",
        reference=reference or "",
        notes=notes or "",
        recorded_by=user,
    )

    paid = invoice.payments.aggregate(total=Sum("amount"))["total"] or Decimal("0.00")
    invoice.paid_amount = money(paid)
    invoice.payment_status = payment_status_for(
        paid_amount=invoice.paid_amount,
        total_amount=invoice.total_amount,
        due_date=invoice.due_date,
    )
    invoice.save()

    notify(
        "payment_received",
        invoice_number=invoice.invoice_number,
        amount=str(payment.amount),
        method=payment.method,
        payment_status=invoice.payment_status,
    )

    logger.info(
        "Invoice payment recorded",
        extra={
            "invoice_number": invoice.invoice_number,
            "amount": str(payment.amount),
            "paid_amount": str(invoice.paid_amount),
            "payment_status": invoice.payment_status,
        },
    )
    return invoice


@transaction.atomic
def update_invoice_terms(
    *,
    invoice_id,
    discount_percent=None,
    tax_percent=None,
    due_date=None,
    notes: str | None = None,
) -> Invoice:
    invoice = _lock_invoice(invoice_id)

    if invoice.is_locked:
        raise InvoiceLockedError(
            f"Invoice {invoice.invoice_number} is {invoice.payment_status} and cannot be edited"
        )

    totals = compute_invoice_totals(
        subtotal=invoice.subtotal,
        discount_percent=(
            discount_percent if discount_percent is not None else invoice.discount_percent
        ),
        tax_percent=tax_percent if tax_percent is not None else invoice.tax_percent,
    )
    for name, value in totals.as_fields().items():
        setattr(invoice, name, value)

    if due_date is not None:
        invoice.due_date = due_date
    if notes is not None:
        invoice.notes = notes

    invoice.payment_status = payment_status_for(
        paid_amount=invoice.paid_amount,
        total_amount=invoice.total_amount,
        due_date=invoice.due_date,
    )
    invoice.save()

    logger.info(
        "Invoice terms updated",
        extra={
            "invoice_number": invoice.invoice_number,
            "total_amount": str(invoice.total_amount),
        },
    )
    return invoice


@transaction.atomic
def cancel_invoice(*, invoice_id, reason: str = "", user=None) -> Invoice:
    invoice = _lock_invoice(invoice_id)

    if invoice.status == Invoice.Status.CANCELLED:
        raise InvoiceLockedError(f"Invoice {invoice.invoice_number} is already cancelled")
    if invoice.payment_status == PaymentStatus.PAID:
        raise InvoiceLockedError("Paid invoices cannot be cancelled")

    invoice.status = Invoice.Status.CANCELLED
    invoice.payment_status = PaymentStatus.CANCELLED
    invoice.cancelled_at = timezone.now()
    invoice.cancelled_by = user
    invoice.cancel_reason = (reason or "")[:255]
    invoice.save()

    logger.info(
        "Invoice cancelled",
        extra={"invoice_number": invoice.invoice_number, "reason": invoice.cancel_reason},
    )
    return invoice


@transaction.atomic
def refresh_overdue_invoices(*, today=None) -> int:
    today = today or timezone.localdate()
    updated = Invoice.objects.filter(
        status=Invoice.Status.ACTIVE,
        payment_status__in=[PaymentStatus.UNPAID, PaymentStatus.PARTIALLY_PAID],
        due_date__lt=today,
    ).update(payment_status=PaymentStatus.OVERDUE, updated_at=timezone.now())

    if updated:
        logger.info("Invoices marked overdue", extra={"count": updated, "as_of": str(today)})
    return updated
