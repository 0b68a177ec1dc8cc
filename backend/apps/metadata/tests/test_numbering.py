import datetime

from django.test import SimpleTestCase, TestCase

from apps.metadata.models import AutoNumberSequence
from apps.metadata.services.numbering import (
    SequenceError,
    format_number,
    generate_number,
    get_tenant_sequence_stats,
    initialize_sequence,
    is_auto_numbered,
    number_field_for,
    reset_sequence,
    update_sequence_config,
)
from apps.records.services.record_service import DynamicRecordService
from apps.tenants.models import Tenant


class FormatNumberTests(SimpleTestCase):
    when = datetime.date(2026, 3, 9)

    def test_padded_tokens(self):
        self.assertEqual(format_number("{prefix}-{padded:5}", "QT", 42, when=self.when), "QT-00042")

    def test_date_tokens(self):
        self.assertEqual(format_number("{prefix}/{year}/{month}/{padded:2}", "INV", 7, when=self.when), "INV/2026/03/07")
        self.assertEqual(format_number("{prefix}{year}{padded:4}", "PO", 12, when=self.when), "PO20260012")

    def test_plain_number_uses_padding(self):
        self.assertEqual(format_number("{prefix}-{number}", "LD", 1000, padding=5), "LD-01000")
        self.assertEqual(format_number("{prefix}-{number}", "LD", 1000), "LD-1000")

    def test_number_fields_and_defaults(self):
        self.assertEqual(number_field_for("Quotations"), "quotationNumber")
        self.assertEqual(number_field_for("Leads", {"autoNumbering": {"field": "leadId"}}), "leadId")
        self.assertTrue(is_auto_numbered("Invoices"))
        self.assertFalse(is_auto_numbered("Leads"))
        self.assertFalse(is_auto_numbered("Invoices", {"autoNumbering": {"enabled": False}}))


class SequenceTests(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")

    def test_lead_numbers_follow_module_settings(self):
        self.assertEqual(generate_number(self.tenant, "Leads"), "LD-01000")
        self.assertEqual(generate_number(self.tenant, "Leads"), "LD-01001")

    def test_invoices_use_year_based_format(self):
        number = generate_number(self.tenant, "Invoices", when=datetime.date(2026, 1, 5))
        self.assertEqual(number, "INV/2026/001")

    def test_unconfigured_module_uses_name_prefix(self):
        self.assertEqual(generate_number(self.tenant, "Expenses"), "EXP-00001")

    def test_sequences_are_per_tenant(self):
        other = Tenant.objects.create(name="Other Co", slug="other")
        generate_number(self.tenant, "Orders")
        generate_number(self.tenant, "Orders")
        self.assertEqual(generate_number(other, "Orders"), "ORD-00001")

    def test_initialisation_continues_after_existing_records(self):
        DynamicRecordService.create_record(self.tenant, "Quotations", {"quotationNumber": "QT-00042", "subtotal": 10})
        self.assertEqual(generate_number(self.tenant, "Quotations"), "QT-00043")

    def test_initialisation_uses_trailing_digits_of_foreign_numbers(self):
        DynamicRecordService.create_record(self.tenant, "Quotations", {"quotationNumber": "QT-2025-0042", "subtotal": 10})
        self.assertEqual(generate_number(self.tenant, "Quotations"), "QT-00043")

    def test_initialisation_ignores_numbers_without_digits(self):
        DynamicRecordService.create_record(self.tenant, "Orders", {"orderNumber": "MANUAL", "subtotal": 10})
        self.assertEqual(generate_number(self.tenant, "Orders"), "ORD-00001")

    def test_initialise_returns_existing_sequence(self):
        first = initialize_sequence(self.tenant, "Orders", start=50)
        second = initialize_sequence(self.tenant, "Orders", start=900)
        self.assertEqual(first.pk, second.pk)
        self.assertEqual(second.next_number, 50)

    def test_reset(self):
        generate_number(self.tenant, "Orders")
        reset_sequence(self.tenant, "Orders", 10)
        self.assertEqual(generate_number(self.tenant, "Orders"), "ORD-00010")
        with self.assertRaises(SequenceError):
            reset_sequence(self.tenant, "Orders", 0)

    def test_update_config_validates_format(self):
        sequence = update_sequence_config(self.tenant, "Orders", format="YEAR_SEQUENCE", prefix="SO")
        self.assertEqual(sequence.format, "{prefix}{year}{padded:4}")
        with self.assertRaises(SequenceError):
            update_sequence_config(self.tenant, "Orders", format="{prefix}-{year}")

    def test_stats(self):
        generate_number(self.tenant, "Orders")
        stats = get_tenant_sequence_stats(self.tenant)
        self.assertEqual(len(stats), 1)
        self.assertEqual(stats[0]["nextNumber"], 2)
        self.assertEqual(stats[0]["preview"], "ORD-00002")
        self.assertEqual(AutoNumberSequence.objects.filter(tenant=self.tenant).count(), 1)
