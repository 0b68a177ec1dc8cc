from rest_framework import status
from rest_framework.test import APITestCase

from apps.records.services.pipeline import submit_record
from apps.records.services.record_service import DynamicRecordService
from apps.tenants.models import Tenant
from apps.users.models import User


class ProcurementApiTests(APITestCase):
    def setUp(self):
        self.tenant = Tenant.objects.create(name="Acme Traders", slug="acme")
        self.user = User.objects.create_user(username="buyer", password="pass123", tenant=self.tenant, role="manager")
        self.client.force_authenticate(self.user)
        self.vendor = submit_record(self.tenant, "Vendors", {"vendorName": "Shree Packaging", "rating": 4.5})
        DynamicRecordService.create_record(
            self.tenant, "RateCatalogs", {"vendorId": self.vendor["id"], "itemCode": "BOX-A4", "rate": 18, "moq": 50}
        )

    def create_po(self):
        pr = submit_record(self.tenant, "PurchaseRequests", {
            "status": "approved",
            "items": [{"itemCode": "BOX-A4", "quantity": 100, "estimatedRate": 18}],
        })
        response = self.client.post(
            '/api/v1/conversions/pr-to-po/', {"prId": pr["id"], "vendorId": self.vendor["id"]}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        return response.data

    def test_suggested_vendors(self):
        response = self.client.get('/api/v1/procurement/suggested-vendors/', {"itemCode": "BOX-A4", "quantity": 60})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([v["vendorId"] for v in response.data["vendors"]], [self.vendor["id"]])

        response = self.client.get('/api/v1/procurement/suggested-vendors/', {"itemCode": "BOX-A4", "quantity": 10})
        self.assertEqual(response.data["vendors"], [])

        response = self.client.get('/api/v1/procurement/suggested-vendors/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_pr_to_po(self):
        data = self.create_po()
        self.assertTrue(data["success"])
        self.assertEqual(data["message"], f"Purchase Order {data['purchaseOrder']['poNumber']} created successfully")
        self.assertEqual(data["purchaseOrder"]["totalAmount"], 1800.0)

        response = self.client.post('/api/v1/conversions/pr-to-po/', {"prId": data["poId"]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_goods_receipt(self):
        po_id = self.create_po()["poId"]
        payload = {"poId": po_id, "items": [{"itemCode": "BOX-A4", "receivedQty": 40, "acceptedQty": 40}]}

        response = self.client.post('/api/v1/procurement/grn/validate/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"isValid": True, "errors": [], "warnings": []})

        response = self.client.post('/api/v1/procurement/grn/', {**payload, "receivedBy": "Stores"}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["grn"]["receivedBy"], "Stores")
        self.assertEqual(response.data["grn"]["poId"], po_id)

        payload["items"][0].update(receivedQty=70, acceptedQty=70)
        response = self.client.post('/api/v1/procurement/grn/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("exceeds PO quantity", response.data["detail"])

    def test_goods_receipt_payload_validation(self):
        response = self.client.post(
            '/api/v1/procurement/grn/validate/',
            {"poId": "x", "items": [{"itemCode": "BOX-A4", "receivedQty": -1, "acceptedQty": 1}]},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post(
            '/api/v1/procurement/grn/validate/',
            {"poId": "0b7a4d3e-0000-4000-8000-000000000000", "items": [{"itemCode": "A", "receivedQty": 1, "acceptedQty": 1}]},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_post_bill(self):
        bill = submit_record(self.tenant, "VendorBills", {"billNumber": "SP/1", "totalAmount": 1000, "status": "approved"})

        response = self.client.post(f'/api/v1/procurement/bills/{bill["id"]}/post/')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["expense"]["netAmount"], 1000.0)

        response = self.client.post(f'/api/v1/procurement/bills/{bill["id"]}/post/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.post('/api/v1/procurement/bills/not-a-bill/post/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
