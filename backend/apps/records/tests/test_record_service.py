from __future__ import annotations

import uuid

from django.test import TestCase

from apps.audit.models import AuditLog
from apps.metadata.services import update_module_settings
from apps.records.exceptions import DuplicateRecordError, RecordNotFound
from apps.records.models import DynamicRecord
from apps.records.services.duplicates import check_duplicates, find_duplicates
from apps.records.services.record_service import DynamicRecordService
from apps.sales.models import Client, Lead
from apps.tenants.models import Tenant
from apps.users.models import User


class RecordServiceTestCase(TestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.other_tenant = Tenant.objects.create(name="Globex", slug="globex")
        self.admin = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant, role="admin")


class TypedRecordTests(RecordServiceTestCase):
    def test_create_lead_uses_typed_table(self):
        record = DynamicRecordService.create_record(
            self.tenant,
            "Leads",
            {"name": "Asha Rao", "email": "asha@example.com", "expectedValue": "25000", "linkedinUrl": "in/asha"},
            user=self.admin,
        )
        lead = Lead.objects.get(pk=record["id"])
        self.assertEqual(lead.name, "Asha Rao")
        self.assertEqual(str(lead.expected_value), "25000.00")
        self.assertEqual(lead.custom_data, {"linkedinUrl": "in/asha"})
        self.assertFalse(DynamicRecord.objects.exists())

        self.assertEqual(record["expectedValue"], 25000.0)
        self.assertEqual(record["linkedinUrl"], "in/asha")
        self.assertEqual(record["createdBy"], self.admin.pk)
        self.assertNotIn("record_status", record)

    def test_aliases_map_to_columns_and_are_echoed(self):
        record = DynamicRecordService.create_record(
            self.tenant, "Clients", {"name": "Bright Solar", "gstNumber": "27AAPFU0939F1ZV"}
        )
        client = Client.objects.get(pk=record["id"])
        self.assertEqual(client.client_name, "Bright Solar")
        self.assertEqual(client.gstin, "27AAPFU0939F1ZV")
        self.assertEqual(client.custom_data, {})
        self.assertEqual(record["clientName"], "Bright Solar")
        self.assertEqual(record["name"], "Bright Solar")
        self.assertEqual(record["gstNumber"], "27AAPFU0939F1ZV")

    def test_reserved_keys_are_ignored(self):
        forced = str(uuid.uuid4())
        record = DynamicRecordService.create_record(
            self.tenant, "Leads", {"id": forced, "createdBy": 999, "name": "X", "_duplicates": []}
        )
        self.assertNotEqual(record["id"], forced)
        self.assertIsNone(record["createdBy"])
        self.assertNotIn("_duplicates", Lead.objects.get(pk=record["id"]).custom_data)

    def test_invalid_typed_value_raises(self):
        with self.assertRaises(ValueError):
            DynamicRecordService.create_record(self.tenant, "Leads", {"name": "X", "expectedValue": "lots"})

    def test_assignee_must_belong_to_tenant(self):
        outsider = User.objects.create_user(username="outsider", password="pass123", tenant=self.other_tenant, role="staff")
        with self.assertRaisesMessage(ValueError, "Invalid value for assignedTo"):
            DynamicRecordService.create_record(self.tenant, "Leads", {"name": "X", "assignedTo": outsider.pk})
        with self.assertRaisesMessage(ValueError, "Invalid value for assignedTo"):
            DynamicRecordService.create_record(self.tenant, "Leads", {"name": "X", "assignedTo": 987654})
        self.assertFalse(Lead.objects.exists())

        record = DynamicRecordService.create_record(self.tenant, "Leads", {"name": "X", "assignedTo": str(self.admin.pk)})
        self.assertEqual(record["assignedTo"], self.admin.pk)

    def test_update_merges_and_audits(self):
        record = DynamicRecordService.create_record(self.tenant, "Leads", {"name": "Asha", "status": "New", "tier": "gold"})
        updated = DynamicRecordService.update_record(
            self.tenant, "Leads", record["id"], {"status": "Contacted", "region": "west"}, user=self.admin
        )
        self.assertEqual(updated["status"], "Contacted")
        self.assertEqual(updated["tier"], "gold")
        self.assertEqual(updated["region"], "west")
        self.assertEqual(updated["updatedBy"], self.admin.pk)

        log = AuditLog.objects.get(action="update", entity="Leads", entity_id=record["id"])
        self.assertEqual(log.changes["status"], {"before": "New", "after": "Contacted"})
        self.assertNotIn("updatedAt", log.changes)

    def test_soft_delete_hides_record(self):
        record = DynamicRecordService.create_record(self.tenant, "Clients", {"clientName": "Gone"})
        self.assertTrue(DynamicRecordService.delete_record(self.tenant, "Clients", record["id"], user=self.admin))
        self.assertIsNone(DynamicRecordService.get_record(self.tenant, "Clients", record["id"]))
        self.assertEqual(DynamicRecordService.get_records(self.tenant, "Clients"), [])
        self.assertEqual(Client.objects.get(pk=record["id"]).record_status, "deleted")
        # still counts as the latest record for numbering
        self.assertEqual(DynamicRecordService.get_latest_record(self.tenant, "Clients")["id"], record["id"])
        with self.assertRaises(RecordNotFound):
            DynamicRecordService.delete_record(self.tenant, "Clients", record["id"])


class DynamicRecordTests(RecordServiceTestCase):
    def test_eav_round_trip(self):
        record = DynamicRecordService.create_record(
            self.tenant, "Vendors", {"vendorName": "Shree Packaging", "rating": 4.5}, user=self.admin
        )
        row = DynamicRecord.objects.get(pk=record["id"])
        self.assertEqual(row.module_name, "Vendors")
        self.assertEqual(row.data, {"vendorName": "Shree Packaging", "rating": 4.5})
        self.assertEqual(DynamicRecordService.get_record(self.tenant, "Vendors", record["id"])["vendorName"], "Shree Packaging")

        updated = DynamicRecordService.update_record(self.tenant, "Vendors", record["id"], {"rating": 5})
        self.assertEqual(updated["rating"], 5)
        self.assertEqual(updated["vendorName"], "Shree Packaging")

    def test_records_are_isolated_per_tenant(self):
        record = DynamicRecordService.create_record(self.tenant, "Vendors", {"vendorName": "Mine"})
        DynamicRecordService.create_record(self.other_tenant, "Vendors", {"vendorName": "Theirs"})
        self.assertIsNone(DynamicRecordService.get_record(self.other_tenant, "Vendors", record["id"]))
        self.assertEqual([r["vendorName"] for r in DynamicRecordService.get_records(self.tenant, "Vendors")], ["Mine"])
        with self.assertRaises(RecordNotFound):
            DynamicRecordService.update_record(self.other_tenant, "Vendors", record["id"], {"vendorName": "Stolen"})

    def test_bad_id_is_not_found(self):
        self.assertIsNone(DynamicRecordService.get_record(self.tenant, "Vendors", "not-a-uuid"))
        self.assertIsNone(DynamicRecordService.get_record(self.tenant, "Leads", "42"))

    def test_filtered_listing(self):
        for name, city in (("Alpha", "Pune"), ("Beta", "Delhi"), ("Gamma", "Pune")):
            DynamicRecordService.create_record(self.tenant, "Vendors", {"vendorName": name, "city": city})
        result = DynamicRecordService.get_records_with_filters(
            self.tenant,
            "Vendors",
            filters=[{"field": "city", "operator": "equals", "value": "pune"}],
            sort_by="vendorName",
            sort_order="asc",
            page=1,
            page_size=1,
        )
        self.assertEqual([r["vendorName"] for r in result["data"]], ["Alpha"])
        self.assertEqual(result["pagination"]["total"], 2)
        self.assertEqual(result["pagination"]["totalPages"], 2)

        result = DynamicRecordService.get_records_with_filters(
            self.tenant, "Vendors", search="gam", search_fields=["vendorName"]
        )
        self.assertEqual([r["vendorName"] for r in result["data"]], ["Gamma"])


class DuplicateCheckTests(RecordServiceTestCase):
    def setUp(self):
        super().setUp()
        self.existing = DynamicRecordService.create_record(
            self.tenant, "Leads", {"name": "Asha", "email": "asha@example.com", "phone": "9820012345"}
        )
        self.settings = {"duplicateCheck": {"enabled": True, "checkFields": ["email", "phone"], "matchCriteria": "exact", "action": "warn"}}

    def test_warn_returns_matches(self):
        duplicates = check_duplicates(self.tenant, "Leads", {"email": "ASHA@example.com"}, self.settings)
        self.assertEqual(duplicates, [{"recordId": self.existing["id"], "field": "email", "value": "asha@example.com"}])

    def test_block_raises(self):
        self.settings["duplicateCheck"]["action"] = "block"
        with self.assertRaises(DuplicateRecordError) as ctx:
            check_duplicates(self.tenant, "Leads", {"phone": "9820012345"}, self.settings)
        self.assertEqual(ctx.exception.duplicates[0]["field"], "phone")

    def test_disabled_or_excluded(self):
        self.assertEqual(find_duplicates(self.tenant, "Leads", {"email": "asha@example.com"}, {}), [])
        self.assertEqual(
            find_duplicates(self.tenant, "Leads", {"email": "asha@example.com"}, self.settings, exclude_id=self.existing["id"]),
            [],
        )


class VisibilityTests(RecordServiceTestCase):
    def setUp(self):
        super().setUp()
        self.manager = User.objects.create_user(username="mgr", password="pass123", tenant=self.tenant, role="manager")
        self.rep = User.objects.create_user(username="rep", password="pass123", tenant=self.tenant, role="staff", manager=self.manager)
        self.other_rep = User.objects.create_user(username="rep2", password="pass123", tenant=self.tenant, role="staff")
        for owner in (self.rep, self.other_rep, self.manager):
            DynamicRecordService.create_record(self.tenant, "Leads", {"name": f"Lead of {owner.username}", "assignedTo": owner.pk})

    def names(self, user):
        result = DynamicRecordService.get_records_with_filters(self.tenant, "Leads", user=user, sort_by="name", sort_order="asc")
        return [record["name"] for record in result["data"]]

    def test_everyone_sees_everything_while_assignment_is_disabled(self):
        self.assertEqual(len(self.names(self.rep)), 3)

    def test_role_rules_apply_when_assignment_is_enabled(self):
        update_module_settings(self.tenant, "Leads", {"assignment": {
            "enabled": True,
            "defaultRule": "manual",
            "visibilityRules": {"staff": "assigned_only", "manager": "team_and_own", "admin": "all"},
        }}, user=self.admin)
        self.assertEqual(self.names(self.rep), ["Lead of rep"])
        self.assertEqual(self.names(self.manager), ["Lead of mgr", "Lead of rep"])
        self.assertEqual(len(self.names(self.admin)), 3)

    def test_admins_and_owners_ignore_rules(self):
        owner = User.objects.create_user(username="owner", password="pass123", tenant=self.tenant, role="owner")
        update_module_settings(self.tenant, "Leads", {"assignment": {
            "enabled": True,
            "visibilityRules": {"staff": "assigned_only", "owner": "assigned_only", "admin": "assigned_only"},
        }}, user=self.admin)
        self.assertEqual(len(self.names(owner)), 3)
        self.assertEqual(len(self.names(self.admin)), 3)

    def test_visible_record_lookup(self):
        update_module_settings(self.tenant, "Leads", {"assignment": {
            "enabled": True,
            "visibilityRules": {"staff": "assigned_only"},
        }}, user=self.admin)
        others = Lead.objects.get(name="Lead of rep2")
        self.assertIsNone(DynamicRecordService.get_visible_record(self.tenant, "Leads", others.pk, self.rep))
        self.assertEqual(
            DynamicRecordService.get_visible_record(self.tenant, "Leads", others.pk, self.other_rep)["id"],
            str(others.pk),
        )
