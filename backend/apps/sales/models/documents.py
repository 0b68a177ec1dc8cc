"""Quotations, orders and invoices share the same line-item and amount columns."""
from decimal import Decimal

from django.db import models

from .base import TypedRecord

AMOUNT_KEYS = {
    "clientId": "client_id",
    "clientName": "client_name",
    "items": "items",
    "subtotal": "subtotal",
    "taxAmount": "tax_amount",
    "discountAmount": "discount_amount",
    "totalAmount": "total_amount",
    "status": "status",
}
AMOUNT_ALIASES = {"tax": "taxAmount", "discount": "discountAmount", "total": "totalAmount"}


class SalesDocument(TypedRecord):
    client_id = models.UUIDField(null=True, blank=True)
    client_name = models.CharField(max_length=255, blank=True)
    items = models.JSONField(default=list, blank=True)
    subtotal = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=20, decimal_places=2, default=0)

    ALIASES = AMOUNT_ALIASES

    class Meta:
        abstract = True


class Quotation(SalesDocument):
    quotation_number = models.CharField(max_length=50, blank=True, db_index=True)
    quotation_date = models.DateField(null=True, blank=True)
    valid_until = models.DateField(null=True, blank=True)
    gst_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    status = models.CharField(max_length=20, default="Draft")
    converted_to_order_id = models.UUIDField(null=True, blank=True)

    FIELD_MAP = {
        **AMOUNT_KEYS,
        "quotationNumber": "quotation_number",
        "quotationDate": "quotation_date",
        "validUntil": "valid_until",
        "gstPercentage": "gst_percentage",
        "convertedToOrderId": "converted_to_order_id",
    }

    class Meta:
        db_table = "sales_quotations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "record_status", "status"], name="sales_quote_status_idx"),
            models.Index(fields=["tenant", "client_id"], name="sales_quote_client_idx"),
        ]

    def __str__(self) -> str:
        return self.quotation_number or str(self.pk)


class Order(SalesDocument):
    order_number = models.CharField(max_length=50, blank=True, db_index=True)
    quotation_id = models.UUIDField(null=True, blank=True)
    order_date = models.DateField(null=True, blank=True)
    delivery_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=20, default="Pending")
    payment_status = models.CharField(max_length=20, default="Unpaid")
    converted_to_invoice_id = models.UUIDField(null=True, blank=True)

    FIELD_MAP = {
        **AMOUNT_KEYS,
        "orderNumber": "order_number",
        "quotationId": "quotation_id",
        "orderDate": "order_date",
        "deliveryDate": "delivery_date",
        "paymentStatus": "payment_status",
        "convertedToInvoiceId": "converted_to_invoice_id",
    }

    class Meta:
        db_table = "sales_orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "record_status", "status"], name="sales_order_status_idx"),
            models.Index(fields=["tenant", "client_id"], name="sales_order_client_idx"),
        ]

    def __str__(self) -> str:
        return self.order_number or str(self.pk)


class Invoice(SalesDocument):
    invoice_number = models.CharField(max_length=50, blank=True, db_index=True)
    order_id = models.UUIDField(null=True, blank=True)
    invoice_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(null=True, blank=True)
    paid_amount = models.DecimalField(max_digits=20, decimal_places=2, default=0)
    balance_amount = models.DecimalField(max_digits=20, decimal_places=2, null=True, blank=True)
    status = models.CharField(max_length=20, default="Draft")
    payment_status = models.CharField(max_length=20, default="Unpaid")
    paid_date = models.DateField(null=True, blank=True)

    FIELD_MAP = {
        **AMOUNT_KEYS,
        "invoiceNumber": "invoice_number",
        "orderId": "order_id",
        "invoiceDate": "invoice_date",
        "dueDate": "due_date",
        "paidAmount": "paid_amount",
        "balanceAmount": "balance_amount",
        "paymentStatus": "payment_status",
        "paidDate": "paid_date",
    }

    class Meta:
        db_table = "sales_invoices"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "record_status", "status"], name="sales_invoice_status_idx"),
            models.Index(fields=["tenant", "client_id"], name="sales_invoice_client_idx"),
        ]

    def __str__(self) -> str:
        return self.invoice_number or str(self.pk)

    def save(self, *args, **kwargs):
        if self.balance_amount is None:
            self.balance_amount = Decimal(self.total_amount or 0) - Decimal(self.paid_amount or 0)
        super().save(*args, **kwargs)
