from django.db import models

from .base import TypedRecord


class Client(TypedRecord):
    client_number = models.CharField(max_length=50, blank=True, db_index=True)
    client_name = models.CharField(max_length=255)
    email = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    company = models.CharField(max_length=255, blank=True)
    gstin = models.CharField(max_length=15, blank=True)
    billing_address = models.TextField(blank=True)
    shipping_address = models.TextField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default="India")
    source_lead_id = models.UUIDField(null=True, blank=True)
    status = models.CharField(max_length=20, default="active")

    FIELD_MAP = {
        "clientNumber": "client_number",
        "clientName": "client_name",
        "email": "email",
        "phone": "phone",
        "company": "company",
        "gstin": "gstin",
        "billingAddress": "billing_address",
        "shippingAddress": "shipping_address",
        "city": "city",
        "state": "state",
        "country": "country",
        "sourceLeadId": "source_lead_id",
        "status": "status",
    }
    ALIASES = {"name": "clientName", "gstNumber": "gstin", "address": "billingAddress"}
    ECHOED_ALIASES = ("name", "gstNumber")

    class Meta:
        db_table = "sales_clients"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "record_status", "status"], name="sales_client_status_idx"),
            models.Index(fields=["tenant", "gstin"], name="sales_client_gstin_idx"),
        ]

    def __str__(self) -> str:
        return self.client_name
