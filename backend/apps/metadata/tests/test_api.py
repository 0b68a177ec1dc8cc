from rest_framework import status
from rest_framework.test import APITestCase

from apps.metadata.models import ModuleConfiguration
from apps.metadata.services import seed_metadata_library
from apps.tenants.models import Tenant
from apps.users.models import User


class ModuleApiTests(APITestCase):
    def setUp(self):
        seed_metadata_library()
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.admin = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant, role="admin")
        self.staff = User.objects.create_user(username="staff", password="pass123", tenant=self.tenant, role="staff")
        self.client.force_authenticate(self.admin)

    def test_list_modules(self):
        response = self.client.get('/api/v1/modules/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]["moduleName"], "Leads")

    def test_get_config(self):
        response = self.client.get('/api/v1/modules/Clients/config/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["version"], 1)
        self.assertEqual(response.data["status"], "active")

    def test_unknown_module_config_is_404(self):
        response = self.client.get('/api/v1/modules/Spaceships/config/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_save_and_activate_config(self):
        payload = {"fields": [{"name": "name", "label": "Name", "dataType": "string", "uiType": "text"}]}
        response = self.client.post('/api/v1/modules/Leads/config/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["version"], 2)

        response = self.client.post(f'/api/v1/modules/Leads/config/{response.data["id"]}/activate/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "active")

    def test_save_config_reports_errors(self):
        payload = {"fields": [{"name": "name", "dataType": "blob", "uiType": "text"}]}
        response = self.client.post('/api/v1/modules/Leads/config/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"], ["name: Invalid data type: blob"])

    def test_staff_cannot_save_config(self):
        self.client.force_authenticate(self.staff)
        payload = {"fields": [{"name": "name", "dataType": "string", "uiType": "text"}]}
        response = self.client.post('/api/v1/modules/Leads/config/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_settings(self):
        response = self.client.put(
            '/api/v1/modules/Leads/settings/',
            {"settings": {"assignment": {"enabled": True, "defaultRule": "round_robin"}}},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["settings"]["assignment"]["defaultRule"], "round_robin")
        self.assertIn("autoNumbering", response.data["settings"])

    def test_staff_cannot_update_settings(self):
        self.client.force_authenticate(self.staff)
        response = self.client.put('/api/v1/modules/Leads/settings/', {"settings": {"features": {}}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        config = ModuleConfiguration.objects.get(tenant=self.tenant, module_name="Leads")
        self.assertTrue(config.module_settings["features"]["notes"])

    def test_sequence_preview_and_reset(self):
        response = self.client.get('/api/v1/modules/Leads/sequence/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["preview"], "LD-01000")

        response = self.client.post('/api/v1/modules/Leads/sequence/reset/', {"start": 5000}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["nextNumber"], 5000)

    def test_library(self):
        response = self.client.get('/api/v1/metadata/library/?category=validation_types')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("gstin", [item["name"] for item in response.data])

    def test_user_without_tenant_gets_400(self):
        orphan = User.objects.create_user(username="orphan", password="pass123")
        self.client.force_authenticate(orphan)
        response = self.client.get('/api/v1/modules/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
