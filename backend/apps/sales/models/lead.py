from django.conf import settings
from django.db import models

from .base import TypedRecord


class Lead(TypedRecord):
    lead_number = models.CharField(max_length=50, blank=True, db_index=True)
    name = models.CharField(max_length=255)
    email = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    company = models.CharField(max_length=255, blank=True)
    source = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=50, default="New")
    priority = models.CharField(max_length=20, blank=True)
    lead_score = models.IntegerField(null=True, blank=True)
    expected_value = models.DecimalField(max_digits=20, decimal_places=2, null=True, blank=True)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assigned_leads",
    )
    next_follow_up_at = models.DateTimeField(null=True, blank=True)
    converted_to_client_id = models.UUIDField(null=True, blank=True)
    converted_date = models.DateTimeField(null=True, blank=True)

    FIELD_MAP = {
        "leadNumber": "lead_number",
        "name": "name",
        "email": "email",
        "phone": "phone",
        "company": "company",
        "source": "source",
        "status": "status",
        "priority": "priority",
        "leadScore": "lead_score",
        "expectedValue": "expected_value",
        "assignedTo": "assigned_to",
        "nextFollowUpAt": "next_follow_up_at",
        "convertedToClientId": "converted_to_client_id",
        "convertedDate": "converted_date",
    }
    ALIASES = {"estimatedValue": "expectedValue", "leadId": "leadNumber"}

    class Meta:
        db_table = "sales_leads"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "record_status", "status"], name="sales_lead_status_idx"),
            models.Index(fields=["tenant", "assigned_to"], name="sales_lead_owner_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.lead_number or self.pk} {self.name}"
