from rest_framework import status
from rest_framework.test import APITestCase

from apps.records.services.pipeline import submit_record
from apps.tenants.models import Tenant
from apps.users.models import User


class ConversionApiTests(APITestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme", gstin="27AAPFU0939F1ZV")
        self.user = User.objects.create_user(username="admin", password="pass123", tenant=self.tenant, role="admin")
        self.client.force_authenticate(self.user)

    def test_full_sales_flow(self):
        lead = submit_record(self.tenant, "Leads", {"name": "Priya Sharma", "email": "priya@example.com"})

        response = self.client.post('/api/v1/conversions/lead-to-client/', {"leadId": lead["id"]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["success"])
        client_id = response.data["clientId"]
        self.assertEqual(response.data["client"]["clientName"], "Priya Sharma")

        response = self.client.post('/api/v1/conversions/lead-to-client/', {"leadId": lead["id"]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("already", response.data["detail"])

        quotation = submit_record(self.tenant, "Quotations", {
            "clientId": client_id, "clientName": "Priya Sharma", "subtotal": 1000, "totalAmount": 1180,
        })
        response = self.client.post(
            '/api/v1/conversions/quotation-to-order/', {"quotationId": quotation["id"]}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order_id = response.data["orderId"]

        response = self.client.post('/api/v1/conversions/order-to-invoice/', {"orderId": order_id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["invoice"]["balanceAmount"], 1180.0)
        self.assertEqual(response.data["invoice"]["orderId"], order_id)

    def test_missing_id_and_unknown_record(self):
        response = self.client.post('/api/v1/conversions/order-to-invoice/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            '/api/v1/conversions/order-to-invoice/', {"orderId": "0b7a4d3e-0000-4000-8000-000000000000"}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.post('/api/v1/conversions/lead-to-client/', {"leadId": "x"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class GSTApiTests(APITestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme", gstin="27AAPFU0939F1ZV")
        self.user = User.objects.create_user(username="staff", password="pass123", tenant=self.tenant, role="staff")
        self.client.force_authenticate(self.user)

    def test_calculate_uses_tenant_gstin(self):
        response = self.client.post(
            '/api/v1/gst/calculate/',
            {"subtotal": "10000", "gstPercentage": 18, "clientGstin": "27AAACB1234C1Z5"},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        calculation = response.data["calculation"]
        self.assertEqual(calculation["gstType"], "CGST+SGST")
        self.assertEqual(calculation["cgstAmount"], 900.0)
        self.assertEqual(calculation["totalAfterGST"], 11800.0)
        self.assertEqual(response.data["summary"][-1], "Total Amount: ₹11,800.00")

    def test_calculate_from_items_inter_state(self):
        response = self.client.post(
            '/api/v1/gst/calculate/',
            {
                "items": [{"quantity": 2, "unitPrice": 500}, {"quantity": 1, "rate": 250}],
                "gstPercentage": 12,
                "clientGstin": "29AAACR5055K1Z5",
            },
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        calculation = response.data["calculation"]
        self.assertEqual(calculation["subtotal"], 1250.0)
        self.assertEqual(calculation["gstType"], "IGST")
        self.assertEqual(calculation["igstAmount"], 150.0)

    def test_calculate_validation(self):
        response = self.client.post('/api/v1/gst/calculate/', {"subtotal": "100", "gstPercentage": 7}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("gstPercentage", response.data)

        response = self.client.post('/api/v1/gst/calculate/', {"gstPercentage": 18}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rates(self):
        response = self.client.get('/api/v1/gst/rates/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([rate["value"] for rate in response.data["rates"]], [0, 5, 12, 18, 28])
