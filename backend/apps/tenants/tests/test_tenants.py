from django.test import TestCase, override_settings

from apps.metadata.models import ModuleConfiguration
from apps.metadata.services.defaults import DEFAULT_MODULES
from apps.tenants.models import Tenant


class TenantTests(TestCase):
    def test_slug_generated_from_name(self):
        tenant = Tenant.objects.create(name="Bright Solar Pvt Ltd")
        self.assertEqual(tenant.slug, "bright-solar-pvt-ltd")
        self.assertTrue(tenant.is_active)

    def test_new_tenant_gets_default_modules(self):
        tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        active = ModuleConfiguration.objects.filter(tenant=tenant, status=ModuleConfiguration.Status.ACTIVE)
        self.assertEqual(active.count(), len(DEFAULT_MODULES))
        self.assertEqual(set(active.values_list("version", flat=True)), {1})

    def test_saving_again_does_not_reseed(self):
        tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        tenant.state = "Maharashtra"
        tenant.save()
        self.assertEqual(ModuleConfiguration.objects.filter(tenant=tenant).count(), len(DEFAULT_MODULES))

    @override_settings(TENANT_SEED_DEFAULT_MODULES=False)
    def test_seeding_can_be_disabled(self):
        tenant = Tenant.objects.create(name="Bare Co", slug="bare")
        self.assertFalse(ModuleConfiguration.objects.filter(tenant=tenant).exists())

    def test_suspended_tenant_is_inactive(self):
        tenant = Tenant.objects.create(name="Old Co", slug="old", status=Tenant.Status.SUSPENDED)
        self.assertFalse(tenant.is_active)
