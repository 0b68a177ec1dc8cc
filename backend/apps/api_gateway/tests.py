from rest_framework import status
from rest_framework.test import APITestCase

from apps.tenants.models import Tenant
from apps.users.models import User


class ApiGatewayTests(APITestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.user = User.objects.create_user(username="testuser", password="testpass123", tenant=self.tenant)

    def test_api_root_lists_endpoints(self):
        response = self.client.get('/api/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("modules", response.json()["endpoints"])

    def test_health_is_public(self):
        response = self.client.get('/api/v1/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "ok")

    def test_records_require_authentication(self):
        response = self.client.get('/api/v1/modules/Leads/records/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
