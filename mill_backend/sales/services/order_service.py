# sales/services/order_service.py

"""
======================================================
PATH: sales/services/order_service.py
======================================================
SALES ORDER SERVICE

create_order():
  - every line must name an in-stock finished-goods SKU holding enough
    weight at order time
  - product_name is taken from the lot; line total = qty * unit price
  - order total = sum of line totals; status draft; number SO-<year>-<seq>

transition_order():
  - moves an order along order_lifecycle, stamping the matching timestamp
  - `invoiced` is refused here (invoice_service owns it)
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from core.decimals import kg, money
from core.models import DocumentSequence
from core.services.mill_config import MillConfig, load_mill_config
from core.services.numbering import next_document_number
from inventory.models import FinishedGoodsLot
from sales.models import SalesOrder, SalesOrderItem
from sales.services.exceptions import (
    InsufficientFinishedGoodsError,
    OrderNotFoundError,
    ProductNotFoundError,
    SalesError,
)
from sales.services.order_lifecycle import validate_transition

logger = logging.getLogger(__name__)

Status = SalesOrder.Status

TIMESTAMP_FIELDS = {
    Status.CONFIRMED: "confirmed_at",
    Status.SHIPPED: "shipped_at",
    Status.DELIVERED: "delivered_at",
    Status.CANCELLED: "cancelled_at",
}


def _price_line(item: dict) -> dict:
    sku = (item.get("sku") or "").strip()
    if not sku:
        raise SalesError("Each item needs a sku")

    qty = kg(item.get("quantity_kg"))
    if qty <= 0:
        raise SalesError(f"quantity_kg must be greater than zero for {sku}")

    unit_price = money(item.get("unit_price"))
    if unit_price < 0:
        raise SalesError(f"unit_price cannot be negative for {sku}")

    lot = FinishedGoodsLot.objects.filter(sku=sku).first()
    if lot is None or lot.status != FinishedGoodsLot.Status.IN_STOCK:
        raise ProductNotFoundError(f"Product not found: {sku}")

    if lot.weight_kg < qty:
        raise InsufficientFinishedGoodsError(
            f"Insufficient stock for {sku}. Available: {lot.weight_kg}kg"
        )

    return {
        "sku": sku,
        "product_name": lot.product_name,
        "quantity_kg": qty,
        "unit_price": unit_price,
        "total_price": money(qty * unit_price),
    }


@transaction.atomic
def create_order(
    *,
    customer_name: str,
    items,
    customer_phone: str = "",
    customer_address: str = "",
    shipping_address: str = "",
    payment_terms: str = SalesOrder.PaymentTerms.CASH,
    delivery_method: str = SalesOrder.DeliveryMethod.PICKUP,
    delivery_date=None,
    driver=None,
    notes: str = "",
    user=None,
    config: MillConfig | None = None,
) -> SalesOrder:
    config = config or load_mill_config()

    if not items:
        raise SalesError("An order needs at least one item")

    lines = [_price_line(item) for item in items]
    total = money(sum((line["total_price"] for line in lines), money(0)))

    order = SalesOrder.objects.create(
        order_number=next_document_number(
            document_type=DocumentSequence.DocumentType.ORDER,
            config=config,
        ),
        customer_name=customer_name,
        customer_phone=customer_phone or "",
        customer_address=customer_address or "",
        shipping_address=shipping_address or "",
        payment_terms=payment_terms,
        delivery_method=delivery_method,
        delivery_date=delivery_date,
        driver=driver,
        notes=notes or "",
        total_amount=total,
        status=Status.DRAFT,
        created_by=user,
    )
    SalesOrderItem.objects.bulk_create(
        [SalesOrderItem(order=order, **line) for line in lines]
    )

    logger.info(
        "Sales order created",
        extra={
            "order_number": order.order_number,
            "line_count": len(lines),
            "total_amount": str(total),
        },
    )
    return order


@transaction.atomic
def transition_order(*, order_id, target_status: str, user=None) -> SalesOrder:
    order = SalesOrder.objects.select_for_update().filter(pk=order_id).first()
    if order is None:
        raise OrderNotFoundError("Sales order not found")

    validate_transition(order=order, target_status=target_status)

    previous = order.status
    order.status = target_status
    stamp = TIMESTAMP_FIELDS.get(target_status)
    if stamp:
        setattr(order, stamp, timezone.now())
    order.save()

    logger.info(
        "Sales order status changed",
        extra={
            "order_number": order.order_number,
            "from_status": previous,
            "to_status": target_status,
        },
    )
    return order
