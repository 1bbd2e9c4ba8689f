# core/services/compensation.py

"""
======================================================
PATH: core/services/compensation.py
======================================================
COMPENSATING STEPS

Multi-step writes that cannot rely on one database transaction record an
undo action for each completed step. When a later step fails the caller
runs compensate(), which undoes the completed steps newest first.

Usage:
    steps = CompensatingSteps("batch-start")
    batch = steps.run(create_batch, compensate=lambda b: b.delete())
    if not reserve():
        steps.compensate()
        raise InsufficientRawMaterialError(...)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class CompensatingSteps:
    def __init__(self, name: str):
        self.name = name
        self._undo: list = []

    def run(self, action, *, compensate=None):
        result = action()
        if compensate is not None:
            self._undo.append((compensate, result))
        return result

    def compensate(self) -> int:
        """
        Undo completed steps in reverse order. Returns how many were undone.
        A failing undo is logged and the remaining ones still run.
        """
        undone = 0
        while self._undo:
            undo, result = self._undo.pop()
            try:
                undo(result)
                undone += 1
            except Exception:
                logger.exception(
                    "Compensating step failed",
                    extra={"steps": self.name},
                )
        logger.info(
            "Compensated %s step(s)",
            undone,
            extra={"steps": self.name},
        )
        return undone
