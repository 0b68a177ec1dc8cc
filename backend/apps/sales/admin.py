from django.contrib import admin

from .models import Client, Invoice, Lead, Order, Payment, Quotation


class TypedRecordAdmin(admin.ModelAdmin):
    list_filter = ("record_status",)
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(Lead)
class LeadAdmin(TypedRecordAdmin):
    list_display = ("lead_number", "name", "email", "status", "priority", "lead_score", "tenant")
    list_filter = ("record_status", "status", "priority", "source")
    search_fields = ("lead_number", "name", "email", "phone", "company")


@admin.register(Client)
class ClientAdmin(TypedRecordAdmin):
    list_display = ("client_number", "client_name", "email", "gstin", "status", "tenant")
    search_fields = ("client_number", "client_name", "email", "gstin")


@admin.register(Quotation)
class QuotationAdmin(TypedRecordAdmin):
    list_display = ("quotation_number", "client_name", "quotation_date", "total_amount", "status", "tenant")
    search_fields = ("quotation_number", "client_name")


@admin.register(Order)
class OrderAdmin(TypedRecordAdmin):
    list_display = ("order_number", "client_name", "order_date", "total_amount", "status", "payment_status", "tenant")
    search_fields = ("order_number", "client_name")


@admin.register(Invoice)
class InvoiceAdmin(TypedRecordAdmin):
    list_display = ("invoice_number", "client_name", "invoice_date", "due_date", "total_amount", "balance_amount", "status", "tenant")
    search_fields = ("invoice_number", "client_name")


@admin.register(Payment)
class PaymentAdmin(TypedRecordAdmin):
    list_display = ("payment_number", "amount", "payment_date", "payment_method", "status", "tenant")
    search_fields = ("payment_number", "reference_number")
