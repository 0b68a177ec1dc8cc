from django.db import models

from .base import TypedRecord


class Payment(TypedRecord):
    payment_number = models.CharField(max_length=50, blank=True, db_index=True)
    invoice_id = models.UUIDField(null=True, blank=True)
    client_id = models.UUIDField(null=True, blank=True)
    amount = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    payment_date = models.DateField(null=True, blank=True)
    payment_method = models.CharField(max_length=50, blank=True)
    reference_number = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, default="Completed")

    FIELD_MAP = {
        "paymentNumber": "payment_number",
        "invoiceId": "invoice_id",
        "clientId": "client_id",
        "amount": "amount",
        "paymentDate": "payment_date",
        "paymentMethod": "payment_method",
        "referenceNumber": "reference_number",
        "status": "status",
    }
    ALIASES = {"transactionId": "paymentNumber", "method": "paymentMethod"}
    ECHOED_ALIASES = ("transactionId",)

    class Meta:
        db_table = "sales_payments"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "record_status"], name="sales_payment_status_idx"),
            models.Index(fields=["tenant", "invoice_id"], name="sales_payment_invoice_idx"),
        ]

    def __str__(self) -> str:
        return self.payment_number or str(self.pk)
