from unittest import mock

from django.db import IntegrityError
from django.test import TestCase

from core.decimals import money, to_decimal
from core.models import DocumentSequence
from core.services.compensation import CompensatingSteps
from core.services.notifications import SIGNALS, notify, production_completed
from core.services.side_effects import best_effort


class BestEffortTests(TestCase):
    """
    Secondary writes never fail the primary one.

    GUARANTEES:
    - The result is returned on success
    - Errors are logged and swallowed (None returned)
    - A failed database write does not break the outer transaction
    """

    def test_returns_result_on_success(self):
        self.assertEqual(best_effort("add", lambda a, b: a + b, 2, 3), 5)

    def test_swallows_and_logs_errors(self):
        def boom():
            raise RuntimeError("ledger down")

        with self.assertLogs("core.services.side_effects", level="ERROR") as logs:
            result = best_effort("ledger:test", boom)

        self.assertIsNone(result)
        self.assertIn("ledger:test", logs.output[0])

    def test_failed_write_does_not_poison_transaction(self):
        DocumentSequence.objects.create(document_type="purchase", year=2025)

        with self.assertLogs("core.services.side_effects", level="ERROR"):
            result = best_effort(
                "duplicate-sequence",
                DocumentSequence.objects.create,
                document_type="purchase",
                year=2025,
            )

        self.assertIsNone(result)
        # Still usable after the IntegrityError inside the savepoint.
        self.assertEqual(DocumentSequence.objects.count(), 1)

    def test_integrity_error_is_not_raised(self):
        DocumentSequence.objects.create(document_type="batch", year=2025)
        try:
            with self.assertLogs("core.services.side_effects", level="ERROR"):
                best_effort(
                    "dup",
                    DocumentSequence.objects.create,
                    document_type="batch",
                    year=2025,
                )
        except IntegrityError:
            self.fail("best_effort leaked IntegrityError")


class CompensatingStepsTests(TestCase):
    def test_compensates_newest_first(self):
        undone = []
        steps = CompensatingSteps("test")
        steps.run(lambda: "a", compensate=undone.append)
        steps.run(lambda: "b", compensate=undone.append)

        self.assertEqual(steps.compensate(), 2)
        self.assertEqual(undone, ["b", "a"])

    def test_failing_undo_does_not_stop_the_rest(self):
        undone = []

        def broken_undo(_):
            raise RuntimeError("cannot undo")

        steps = CompensatingSteps("test")
        steps.run(lambda: "first", compensate=undone.append)
        steps.run(lambda: "second", compensate=broken_undo)

        with self.assertLogs("core.services.compensation", level="ERROR"):
            count = steps.compensate()

        self.assertEqual(count, 1)
        self.assertEqual(undone, ["first"])

    def test_steps_without_undo_are_not_compensated(self):
        steps = CompensatingSteps("test")
        self.assertEqual(steps.run(lambda: 7), 7)
        self.assertEqual(steps.compensate(), 0)


class NotificationTests(TestCase):
    """
    GUARANTEES:
    - Events fire only after commit
    - A failing receiver never propagates
    """

    def test_event_fires_on_commit(self):
        handler = mock.Mock()
        production_completed.connect(handler, dispatch_uid="test-handler")
        self.addCleanup(production_completed.disconnect, dispatch_uid="test-handler")

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            notify("production_completed", batch_number="BATCH-2025-0001", yield_kg="650.00")
            handler.assert_not_called()

        self.assertEqual(len(callbacks), 1)
        handler.assert_called_once()
        self.assertEqual(handler.call_args.kwargs["batch_number"], "BATCH-2025-0001")

    def test_failing_receiver_is_logged_not_raised(self):
        def broken(sender, **payload):
            raise RuntimeError("sms gateway down")

        production_completed.connect(broken, dispatch_uid="broken-handler")
        self.addCleanup(production_completed.disconnect, dispatch_uid="broken-handler")

        with self.assertLogs("core.services.notifications", level="ERROR"):
            with self.captureOnCommitCallbacks(execute=True):
                notify("production_completed", batch_number="BATCH-2025-0002", yield_kg="1")

    def test_unknown_event_is_rejected(self):
        with self.assertRaises(ValueError):
            notify("stock_exploded")

    def test_every_event_has_a_signal(self):
        self.assertEqual(
            set(SIGNALS),
            {
                "production_completed",
                "purchase_received",
                "invoice_generated",
                "low_stock",
                "delivery_dispatched",
                "payment_received",
            },
        )


class DecimalHelperTests(TestCase):
    def test_bad_numbers_become_zero(self):
        for value in (None, "", "abc", float("nan"), float("inf"), "Infinity"):
            self.assertEqual(to_decimal(value), 0)

    def test_money_rounds_half_up(self):
        self.assertEqual(str(money("2.345")), "2.35")
        self.assertEqual(str(money("2.344")), "2.34")
        self.assertEqual(str(money(10)), "10.00")
