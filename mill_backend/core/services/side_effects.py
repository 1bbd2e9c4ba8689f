# core/services/side_effects.py

"""
======================================================
PATH: core/services/side_effects.py
======================================================
BEST-EFFORT SIDE EFFECTS

Primary business writes (purchase, batch, invoice) are called directly and
their errors propagate. Secondary writes (ledger rows, notifications) go
through best_effort(): the call runs inside its own savepoint, so a failed
write cannot poison the surrounding transaction, and any error is logged
and swallowed.
"""

from __future__ import annotations

import logging

from django.db import transaction

logger = logging.getLogger(__name__)


def best_effort(label: str, func, *args, **kwargs):
    """
    Run `func(*args, **kwargs)` as a non-critical side effect.
    Returns its result, or None when it failed.
    """
    try:
        with transaction.atomic():
            return func(*args, **kwargs)
    except Exception:
        logger.exception(
            "Best-effort side effect failed: %s",
            label,
            extra={"side_effect": label},
        )
        return None
