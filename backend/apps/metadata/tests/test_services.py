from __future__ import annotations

import datetime

from django.test import TestCase, override_settings
from rest_framework.exceptions import PermissionDenied

from apps.metadata.models import ModuleConfiguration
from apps.metadata.services import (
    ModuleConfigError,
    activate_module_config,
    get_active_module_config,
    get_all_modules,
    get_field,
    get_module_settings,
    save_module_config,
    seed_metadata_library,
    submit_for_review,
    update_module_settings,
    validate_field_definition,
)
from apps.metadata.services.defaults import DEFAULT_MODULES, seed_default_modules
from apps.tenants.models import Tenant
from apps.users.models import User


class MetadataLibraryTests(TestCase):
    def setUp(self):
        seed_metadata_library()

    def test_seed_is_idempotent(self):
        first = seed_metadata_library()
        second = seed_metadata_library()
        self.assertEqual(first, second)

    def test_valid_field_passes(self):
        field = {"name": "email", "dataType": "string", "uiType": "email", "validation": [{"type": "email"}]}
        self.assertEqual(validate_field_definition(field), [])

    def test_unknown_types_are_reported(self):
        errors = validate_field_definition({"name": "x", "dataType": "blob", "uiType": "slider", "validation": [{"type": "luhn"}]})
        self.assertEqual(len(errors), 3)
        self.assertIn("x: Invalid data type: blob", errors)


class ModuleConfigurationTests(TestCase):
    def setUp(self):
        seed_metadata_library()
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.admin = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant, role="admin")
        self.staff = User.objects.create_user(username="staff", password="pass123", tenant=self.tenant, role="staff")

    def test_new_tenant_gets_default_modules(self):
        names = list(get_all_modules(self.tenant).values_list("module_name", flat=True))
        self.assertEqual(names, [definition["module_name"] for definition in DEFAULT_MODULES])
        self.assertIn("GoodsReceipts", names)

    def test_seed_default_modules_is_idempotent(self):
        self.assertEqual(seed_default_modules(self.tenant), [])
        self.assertEqual(ModuleConfiguration.objects.filter(tenant=self.tenant, module_name="Leads").count(), 1)

    def test_lead_defaults(self):
        settings = get_module_settings(self.tenant, "Leads")
        self.assertEqual(settings["autoNumbering"]["prefix"], "LD")
        self.assertEqual(settings["autoNumbering"]["startFrom"], 1000)
        self.assertEqual(settings["duplicateCheck"]["checkFields"], ["email", "phone"])
        self.assertEqual(settings["duplicateCheck"]["action"], "warn")
        self.assertEqual(settings["assignment"]["defaultRule"], "manual")
        self.assertEqual(get_field(self.tenant, "Leads", "email")["uiType"], "email")

    def test_save_creates_next_draft_version(self):
        config = save_module_config(
            self.tenant,
            {"moduleName": "Leads", "fields": [{"name": "name", "dataType": "string", "uiType": "text"}]},
            user=self.admin,
        )
        self.assertEqual(config.version, 2)
        self.assertEqual(config.status, ModuleConfiguration.Status.DRAFT)
        # settings carried over from the active version
        self.assertEqual(config.module_settings["autoNumbering"]["prefix"], "LD")
        self.assertEqual(get_active_module_config(self.tenant, "Leads").version, 1)

    def test_save_rejects_invalid_fields_with_all_errors(self):
        with self.assertRaises(ModuleConfigError) as ctx:
            save_module_config(
                self.tenant,
                {
                    "moduleName": "Leads",
                    "fields": [
                        {"name": "a", "dataType": "blob", "uiType": "text"},
                        {"name": "b", "dataType": "string", "uiType": "slider"},
                    ],
                },
                user=self.admin,
            )
        self.assertEqual(len(ctx.exception.errors), 2)

    def test_activation_archives_previous_version(self):
        config = save_module_config(
            self.tenant,
            {"moduleName": "Leads", "fields": [{"name": "name", "dataType": "string", "uiType": "text"}]},
            user=self.admin,
        )
        submit_for_review(config, user=self.admin)
        activate_module_config(config, user=self.admin)

        statuses = dict(
            ModuleConfiguration.objects.filter(tenant=self.tenant, module_name="Leads").values_list("version", "status")
        )
        self.assertEqual(statuses, {1: "archived", 2: "active"})
        config.refresh_from_db()
        self.assertEqual(config.approved_by, self.admin)
        self.assertIsNotNone(config.approved_at)

    def test_submit_for_review_requires_draft(self):
        config = get_active_module_config(self.tenant, "Clients")
        with self.assertRaises(ModuleConfigError):
            submit_for_review(config)

    def test_update_settings_is_shallow_merge(self):
        merged = update_module_settings(
            self.tenant, "Leads", {"scoring": {"enabled": True, "criteria": []}}, user=self.admin
        )
        self.assertEqual(merged["scoring"], {"enabled": True, "criteria": []})
        self.assertEqual(merged["autoNumbering"]["prefix"], "LD")
        self.assertTrue(get_module_settings(self.tenant, "Leads")["scoring"]["enabled"])

    def test_update_settings_requires_admin(self):
        with self.assertRaises(PermissionDenied):
            update_module_settings(self.tenant, "Leads", {"features": {}}, user=self.staff)


@override_settings(TENANT_SEED_DEFAULT_MODULES=False)
class TenantWithoutDefaultsTests(TestCase):
    def test_signal_respects_setting(self):
        tenant = Tenant.objects.create(name="Bare Co")
        self.assertFalse(ModuleConfiguration.objects.filter(tenant=tenant).exists())
        self.assertEqual(get_module_settings(tenant, "Leads"), {})
