"""
SALES ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for SalesOrder entities.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth

`invoiced` is reachable only through invoice generation.
"""

from sales.models import SalesOrder
from sales.services.exceptions import InvalidOrderTransitionError

Status = SalesOrder.Status

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Status.DELIVERED,
    Status.CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Status.DRAFT: {
        Status.CONFIRMED,
        Status.CANCELLED,
    },
    Status.CONFIRMED: {
        Status.INVOICED,
        Status.SHIPPED,
        Status.CANCELLED,
    },
    Status.INVOICED: {
        Status.SHIPPED,
        Status.CANCELLED,
    },
    Status.SHIPPED: {
        Status.DELIVERED,
    },
}

INVOICE_ONLY_TARGETS = {Status.INVOICED}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: SalesOrder, target_status: str, via_invoice: bool = False):
    if target_status in INVOICE_ONLY_TARGETS and not via_invoice:
        raise InvalidOrderTransitionError(
            "Orders are marked invoiced by generating an invoice"
        )

    if order.status == target_status == Status.CANCELLED:
        raise InvalidOrderTransitionError(f"Order {order.order_number} is already cancelled")

    if target_status == Status.CANCELLED and order.status in {Status.SHIPPED, Status.DELIVERED}:
        raise InvalidOrderTransitionError(
            f"Cannot cancel order {order.order_number} once it is {order.status}"
        )

    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidOrderTransitionError(
            f"Order {order.order_number} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )
