"""
PRODUCTION BATCH LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for ProductionBatch entities, plus the mass-balance rule that guards
completion.

DESIGN PRINCIPLES:
- No database writes
- No stock mutation
- No side effects
- Single source of truth
"""

from __future__ import annotations

from decimal import Decimal

from production.models import ProductionBatch
from production.services.exceptions import InvalidBatchTransitionError, MassBalanceError

Status = ProductionBatch.Status

# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Status.COMPLETED,
    Status.CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Status.QUEUED: {
        Status.IN_PROGRESS,
        Status.CANCELLED,
    },
    Status.IN_PROGRESS: {
        Status.COMPLETED,
        Status.CANCELLED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, batch: ProductionBatch, target_status: str):
    if not can_transition(
        from_status=batch.status,
        to_status=target_status,
    ):
        raise InvalidBatchTransitionError(
            f"Batch {batch.batch_number} cannot transition from "
            f"'{batch.status}' to '{target_status}'"
        )


def max_allowed_output(input_kg, tolerance_pct) -> Decimal:
    return Decimal(input_kg) * (Decimal("1") + Decimal(tolerance_pct))


def validate_mass_balance(*, input_kg, total_output_kg, tolerance_pct):
    """
    total output <= input * (1 + tolerance), else MassBalanceError naming
    the overage.
    """
    total = Decimal(total_output_kg)
    if total > max_allowed_output(input_kg, tolerance_pct):
        pct = (Decimal(tolerance_pct) * 100).normalize()
        raise MassBalanceError(
            f"Total output ({total:.2f}kg) exceeds input ({Decimal(input_kg).normalize():f}kg) "
            f"by more than {pct:f}%"
        )
