import datetime
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.utils import timezone

from apps.records.models import DynamicRecord
from apps.sales.models import Client, Lead
from apps.tenants.models import Tenant
from apps.users.models import User


class MigrateToHybridTests(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.user = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant)
        self.lead = DynamicRecord.objects.create(
            tenant=self.tenant,
            module_name="Leads",
            data={"name": "Asha", "email": "asha@example.com", "expectedValue": 5000, "favouriteColour": "teal"},
            created_by=self.user,
        )
        self.client_row = DynamicRecord.objects.create(
            tenant=self.tenant, module_name="Clients", data={"name": "Bright Solar", "gstNumber": "27AAPFU0939F1ZV"}
        )
        DynamicRecord.objects.create(
            tenant=self.tenant, module_name="Leads", data={"name": "Deleted"}, status=DynamicRecord.Status.DELETED
        )
        self.created_at = timezone.now() - datetime.timedelta(days=90)
        DynamicRecord.objects.filter(pk=self.lead.pk).update(created_at=self.created_at)

    def run_command(self, *args):
        out = StringIO()
        call_command("migrate_to_hybrid", *args, stdout=out)
        return out.getvalue()

    def test_copies_active_records_with_ids_and_extra_keys(self):
        output = self.run_command()
        self.assertIn("2 records migrated", output)

        lead = Lead.objects.get(pk=self.lead.pk)
        self.assertEqual(lead.email, "asha@example.com")
        self.assertEqual(lead.custom_data, {"favouriteColour": "teal"})
        self.assertEqual(lead.created_by, self.user)
        self.assertEqual(lead.created_at, self.created_at)
        self.assertEqual(Lead.objects.count(), 1)

        client = Client.objects.get(pk=self.client_row.pk)
        self.assertEqual(client.client_name, "Bright Solar")
        self.assertEqual(client.gstin, "27AAPFU0939F1ZV")

    def test_second_run_skips_migrated_records(self):
        self.run_command("--module", "Leads")
        output = self.run_command("--module", "Leads")
        self.assertIn("0 records migrated, 1 skipped", output)
        self.assertEqual(Lead.objects.count(), 1)
        self.assertFalse(Client.objects.exists())

    def test_dry_run_writes_nothing(self):
        output = self.run_command("--dry-run", "--tenant", "acme")
        self.assertIn("[dry run] 2 records migrated", output)
        self.assertFalse(Lead.objects.exists())

    def test_unknown_tenant(self):
        with self.assertRaises(CommandError):
            self.run_command("--tenant", "nope")
