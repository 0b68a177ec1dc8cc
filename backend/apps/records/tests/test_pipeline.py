from __future__ import annotations

from django.test import TestCase

from apps.audit.models import AuditLog
from apps.metadata.services import update_module_settings
from apps.records.exceptions import DuplicateRecordError
from apps.records.services.pipeline import submit_record, submit_update
from apps.records.services.record_service import DynamicRecordService
from apps.sales.models import Lead
from apps.tenants.models import Tenant
from apps.users.models import User


class SubmitRecordTests(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.admin = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant, role="admin")

    def enable(self, **settings):
        update_module_settings(self.tenant, "Leads", settings, user=self.admin)

    def test_leads_are_numbered(self):
        first = submit_record(self.tenant, "Leads", {"name": "Asha"}, user=self.admin)
        second = submit_record(self.tenant, "Leads", {"name": "Vikram"}, user=self.admin)
        self.assertEqual(first["leadNumber"], "LD-01000")
        self.assertEqual(second["leadNumber"], "LD-01001")
        self.assertEqual(Lead.objects.get(pk=first["id"]).lead_number, "LD-01000")

    def test_supplied_number_is_kept(self):
        record = submit_record(self.tenant, "Leads", {"name": "Asha", "leadId": "LD-LEGACY"})
        self.assertEqual(record["leadNumber"], "LD-LEGACY")

    def test_duplicates_are_returned_as_warning(self):
        submit_record(self.tenant, "Leads", {"name": "Asha", "email": "asha@example.com"})
        record = submit_record(self.tenant, "Leads", {"name": "Asha R", "email": "asha@example.com"})
        self.assertEqual(len(record["_duplicates"]), 1)
        self.assertEqual(Lead.objects.filter(tenant=self.tenant).count(), 2)

    def test_blocked_duplicate_is_not_saved_or_numbered(self):
        self.enable(duplicateCheck={"enabled": True, "checkFields": ["email"], "action": "block"})
        submit_record(self.tenant, "Leads", {"name": "Asha", "email": "asha@example.com"})
        with self.assertRaises(DuplicateRecordError):
            submit_record(self.tenant, "Leads", {"name": "Asha R", "email": "asha@example.com"})
        self.assertEqual(Lead.objects.filter(tenant=self.tenant).count(), 1)
        self.assertEqual(submit_record(self.tenant, "Leads", {"name": "Other"})["leadNumber"], "LD-01001")

    def test_scoring_sets_score_and_priority(self):
        self.enable(scoring={
            "enabled": True,
            "criteria": [
                {"field": "source", "weights": {"referral": 30}},
                {"field": "expectedValue", "ranges": [{"min": 100000, "score": 40}, {"min": 0, "score": 5}]},
            ],
            "thresholds": {"hot": 61, "warm": 31},
        })
        record = submit_record(self.tenant, "Leads", {"name": "Asha", "source": "referral", "expectedValue": 200000})
        self.assertEqual(record["leadScore"], 70)
        self.assertEqual(record["priority"], "Hot")

        updated = submit_update(self.tenant, "Leads", record["id"], {"expectedValue": 1000})
        self.assertEqual(updated["leadScore"], 35)
        self.assertEqual(updated["priority"], "Warm")

    def test_round_robin_assignment(self):
        rep_a = User.objects.create_user(username="rep_a", password="pass123", tenant=self.tenant, role="staff")
        rep_b = User.objects.create_user(username="rep_b", password="pass123", tenant=self.tenant, role="staff")
        self.enable(assignment={"enabled": True, "defaultRule": "round_robin"})
        first = submit_record(self.tenant, "Leads", {"name": "One"})
        second = submit_record(self.tenant, "Leads", {"name": "Two"})
        manual = submit_record(self.tenant, "Leads", {"name": "Three", "assignedTo": rep_a.pk})
        self.assertEqual(first["assignedTo"], rep_a.pk)
        self.assertEqual(second["assignedTo"], rep_b.pk)
        self.assertEqual(manual["assignedTo"], rep_a.pk)

    def test_load_based_assignment(self):
        rep_a = User.objects.create_user(username="rep_a", password="pass123", tenant=self.tenant, role="staff")
        rep_b = User.objects.create_user(username="rep_b", password="pass123", tenant=self.tenant, role="staff")
        DynamicRecordService.create_record(self.tenant, "Leads", {"name": "Busy", "assignedTo": rep_a.pk})
        self.enable(assignment={"enabled": True, "defaultRule": "load_based"})
        self.assertEqual(submit_record(self.tenant, "Leads", {"name": "New"})["assignedTo"], rep_b.pk)


class PaymentSettlementTests(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.user = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant, role="admin")
        self.invoice = submit_record(self.tenant, "Invoices", {"clientName": "Bright Solar", "totalAmount": 1000})

    def test_partial_then_full_payment(self):
        payment = submit_record(
            self.tenant, "Payments", {"invoiceId": self.invoice["id"], "amount": 400}, user=self.user
        )
        self.assertTrue(payment["paymentNumber"].startswith("TXN-"))
        self.assertEqual(payment["transactionId"], payment["paymentNumber"])

        invoice = DynamicRecordService.get_record(self.tenant, "Invoices", self.invoice["id"])
        self.assertEqual(invoice["paidAmount"], 400.0)
        self.assertEqual(invoice["balanceAmount"], 600.0)
        self.assertEqual(invoice["paymentStatus"], "Partial")

        submit_record(self.tenant, "Payments", {"invoiceId": self.invoice["id"], "amount": 600}, user=self.user)
        invoice = DynamicRecordService.get_record(self.tenant, "Invoices", self.invoice["id"])
        self.assertEqual(invoice["balanceAmount"], 0.0)
        self.assertEqual(invoice["status"], "Paid")
        self.assertEqual(invoice["paymentStatus"], "Paid")
        self.assertIsNotNone(invoice["paidDate"])
        self.assertEqual(AuditLog.objects.filter(action="payment_received", entity_id=self.invoice["id"]).count(), 2)

    def test_missing_invoice_does_not_fail_payment(self):
        payment = submit_record(
            self.tenant, "Payments", {"invoiceId": "7d1f3c8e-0000-4000-8000-000000000000", "amount": 50}
        )
        self.assertEqual(payment["amount"], 50.0)
        self.assertIsNotNone(DynamicRecordService.get_record(self.tenant, "Payments", payment["id"]))
