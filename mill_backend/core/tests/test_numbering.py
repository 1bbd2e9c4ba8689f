from dataclasses import FrozenInstanceError

from django.test import TestCase

from core.models import DocumentSequence, MillSettings
from core.services.mill_config import MillConfig, load_mill_config
from core.services.numbering import format_document_number, next_document_number

DocType = DocumentSequence.DocumentType


class DocumentNumberingTests(TestCase):
    """
    Document numbering.

    GUARANTEES:
    - <PREFIX>-<YEAR>-<4 digit sequence>
    - One counter per (document type, year)
    - Numbers are never reused
    """

    def setUp(self):
        self.config = MillConfig.defaults()

    def test_first_number_of_the_year(self):
        number = next_document_number(
            document_type=DocType.PURCHASE, config=self.config, year=2025
        )
        self.assertEqual(number, "PO-2025-0001")

    def test_sequence_increments(self):
        numbers = [
            next_document_number(document_type=DocType.PURCHASE, config=self.config, year=2025)
            for _ in range(11)
        ]
        self.assertEqual(numbers[-1], "PO-2025-0011")
        self.assertEqual(len(set(numbers)), 11)

    def test_sequence_restarts_each_year(self):
        next_document_number(document_type=DocType.INVOICE, config=self.config, year=2025)
        next_document_number(document_type=DocType.INVOICE, config=self.config, year=2025)

        number = next_document_number(document_type=DocType.INVOICE, config=self.config, year=2026)
        self.assertEqual(number, "INV-2026-0001")

    def test_document_types_have_separate_counters(self):
        next_document_number(document_type=DocType.PURCHASE, config=self.config, year=2025)

        self.assertEqual(
            next_document_number(document_type=DocType.BATCH, config=self.config, year=2025),
            "BATCH-2025-0001",
        )
        self.assertEqual(
            next_document_number(document_type=DocType.ORDER, config=self.config, year=2025),
            "SO-2025-0001",
        )

    def test_prefix_and_width_come_from_config(self):
        config = self.config.replace(purchase_prefix="GRN", number_width=6)
        number = next_document_number(document_type=DocType.PURCHASE, config=config, year=2025)
        self.assertEqual(number, "GRN-2025-000001")

    def test_format_document_number(self):
        self.assertEqual(
            format_document_number(prefix="PO", year=2025, sequence=42), "PO-2025-0042"
        )

    def test_unknown_document_type_is_rejected(self):
        with self.assertRaises(ValueError):
            next_document_number(document_type="receipt", config=self.config, year=2025)


class MillConfigTests(TestCase):
    def test_settings_row_is_seeded_on_first_load(self):
        self.assertFalse(MillSettings.objects.exists())

        config = load_mill_config()

        self.assertTrue(MillSettings.objects.filter(pk=1).exists())
        self.assertEqual(config.milling_recovery_rate, MillConfig.defaults().milling_recovery_rate)
        self.assertEqual(config.purchase_prefix, "PO")

    def test_config_reflects_admin_changes(self):
        row = MillSettings.load()
        row.gst_rate = "8.00"
        row.save()

        self.assertEqual(str(load_mill_config().gst_rate), "8.00")

    def test_config_is_immutable(self):
        config = MillConfig.defaults()
        with self.assertRaises(FrozenInstanceError):
            config.gst_rate = 10
