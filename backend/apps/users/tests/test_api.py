from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLog
from apps.tenants.models import Tenant
from apps.users.models import User


class TenantUserApiTests(APITestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.admin = User.objects.create_user(username="admin", password="pass12345", tenant=self.tenant, role="admin")
        self.staff = User.objects.create_user(
            username="asha", password="pass12345", tenant=self.tenant, role="staff", manager=self.admin
        )
        other = Tenant.objects.create(name="Other Co", slug="other")
        self.outsider = User.objects.create_user(username="outsider", password="pass12345", tenant=other)

    def test_list_is_tenant_scoped(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.data["results"] if isinstance(response.data, dict) else response.data
        self.assertEqual(sorted(row["username"] for row in rows), ["admin", "asha"])

    def test_admin_creates_user(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            '/api/v1/users/',
            {"username": "ravi", "password": "secret-pass", "role": "staff", "manager": self.admin.pk},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        user = User.objects.get(username="ravi")
        self.assertEqual(user.tenant, self.tenant)
        self.assertTrue(user.check_password("secret-pass"))
        self.assertTrue(AuditLog.objects.filter(action="create_user", entity_id=str(user.pk)).exists())

    def test_staff_cannot_create_users(self):
        self.client.force_authenticate(self.staff)
        response = self.client.post('/api/v1/users/', {"username": "x", "password": "secret-pass"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_owner_creates_owner(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            '/api/v1/users/', {"username": "boss", "password": "secret-pass", "role": "owner"}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("role", response.data)

    def test_status_toggle(self):
        self.client.force_authenticate(self.admin)
        response = self.client.patch(f'/api/v1/users/{self.staff.pk}/status/', {"is_active": False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.staff.refresh_from_db()
        self.assertFalse(self.staff.is_active)
        log = AuditLog.objects.get(action="update_user_status")
        self.assertEqual(log.changes, {"is_active": {"before": True, "after": False}})

        response = self.client.patch(f'/api/v1/users/{self.admin.pk}/status/', {"is_active": False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.patch(f'/api/v1/users/{self.outsider.pk}/status/', {"is_active": False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_profile_and_password(self):
        self.client.force_authenticate(self.staff)
        response = self.client.get('/api/v1/users/me/')
        self.assertEqual(response.data["tenant_name"], "Acme Traders")
        self.assertEqual(response.data["manager"], self.admin.pk)

        response = self.client.post(
            '/api/v1/users/change-password/', {"old_password": "wrong", "new_password": "new-pass-1"}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.post(
            '/api/v1/users/change-password/', {"old_password": "pass12345", "new_password": "new-pass-1"}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.staff.refresh_from_db()
        self.assertTrue(self.staff.check_password("new-pass-1"))

    def test_team_ids_include_reports(self):
        self.assertEqual(sorted(self.admin.team_ids()), sorted([self.admin.pk, self.staff.pk]))
