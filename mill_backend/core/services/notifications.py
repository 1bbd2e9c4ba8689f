# core/services/notifications.py

"""
======================================================
PATH: core/services/notifications.py
======================================================
NOTIFICATION SIGNALS

Delivery lives outside this backend; the core only fires events.

Rules:
- notify() dispatches after the surrounding transaction commits.
- Receivers run through send_robust(); their errors are logged, never raised.
- A rolled-back business write never emits its event.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

production_completed = Signal()
purchase_received = Signal()
invoice_generated = Signal()
low_stock = Signal()
delivery_dispatched = Signal()
payment_received = Signal()

SIGNALS = {
    "production_completed": production_completed,
    "purchase_received": purchase_received,
    "invoice_generated": invoice_generated,
    "low_stock": low_stock,
    "delivery_dispatched": delivery_dispatched,
    "payment_received": payment_received,
}


def _dispatch(event: str, payload: dict) -> None:
    signal = SIGNALS[event]
    for receiver, response in signal.send_robust(sender=event, **payload):
        if isinstance(response, Exception):
            logger.error(
                "Notification receiver failed",
                exc_info=response,
                extra={"event": event, "receiver": getattr(receiver, "__name__", str(receiver))},
            )


def notify(event: str, **payload) -> None:
    if event not in SIGNALS:
        raise ValueError(f"Unknown notification event: {event!r}")
    transaction.on_commit(lambda: _dispatch(event, payload))
