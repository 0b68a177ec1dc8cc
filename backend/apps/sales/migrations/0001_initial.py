import uuid

import django.core.serializers.json

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


def common_fields():
    return [
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
        ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ("record_status", models.CharField(choices=[("active", "Active"), ("deleted", "Deleted")], default="active", max_length=20)),
        ("custom_data", models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
        ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
        ("tenant", models.ForeignKey(help_text="Tenant this record belongs to", on_delete=django.db.models.deletion.PROTECT, related_name="+", to="tenants.tenant")),
        ("updated_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
    ]


def document_fields():
    return [
        ("client_id", models.UUIDField(blank=True, null=True)),
        ("client_name", models.CharField(blank=True, max_length=255)),
        ("items", models.JSONField(blank=True, default=list)),
        ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
        ("tax_amount", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
        ("discount_amount", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
        ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Lead",
            fields=common_fields() + [
                ("lead_number", models.CharField(blank=True, db_index=True, max_length=50)),
                ("name", models.CharField(max_length=255)),
                ("email", models.CharField(blank=True, max_length=255)),
                ("phone", models.CharField(blank=True, max_length=50)),
                ("company", models.CharField(blank=True, max_length=255)),
                ("source", models.CharField(blank=True, max_length=50)),
                ("status", models.CharField(default="New", max_length=50)),
                ("priority", models.CharField(blank=True, max_length=20)),
                ("lead_score", models.IntegerField(blank=True, null=True)),
                ("expected_value", models.DecimalField(blank=True, decimal_places=2, max_digits=20, null=True)),
                ("next_follow_up_at", models.DateTimeField(blank=True, null=True)),
                ("converted_to_client_id", models.UUIDField(blank=True, null=True)),
                ("converted_date", models.DateTimeField(blank=True, null=True)),
                ("assigned_to", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="assigned_leads", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "sales_leads",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "record_status", "status"], name="sales_lead_status_idx"),
                    models.Index(fields=["tenant", "assigned_to"], name="sales_lead_owner_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Client",
            fields=common_fields() + [
                ("client_number", models.CharField(blank=True, db_index=True, max_length=50)),
                ("client_name", models.CharField(max_length=255)),
                ("email", models.CharField(blank=True, max_length=255)),
                ("phone", models.CharField(blank=True, max_length=50)),
                ("company", models.CharField(blank=True, max_length=255)),
                ("gstin", models.CharField(blank=True, max_length=15)),
                ("billing_address", models.TextField(blank=True)),
                ("shipping_address", models.TextField(blank=True)),
                ("city", models.CharField(blank=True, max_length=100)),
                ("state", models.CharField(blank=True, max_length=100)),
                ("country", models.CharField(default="India", max_length=100)),
                ("source_lead_id", models.UUIDField(blank=True, null=True)),
                ("status", models.CharField(default="active", max_length=20)),
            ],
            options={
                "db_table": "sales_clients",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "record_status", "status"], name="sales_client_status_idx"),
                    models.Index(fields=["tenant", "gstin"], name="sales_client_gstin_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Quotation",
            fields=common_fields() + document_fields() + [
                ("quotation_number", models.CharField(blank=True, db_index=True, max_length=50)),
                ("quotation_date", models.DateField(blank=True, null=True)),
                ("valid_until", models.DateField(blank=True, null=True)),
                ("gst_percentage", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("status", models.CharField(default="Draft", max_length=20)),
                ("converted_to_order_id", models.UUIDField(blank=True, null=True)),
            ],
            options={
                "db_table": "sales_quotations",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "record_status", "status"], name="sales_quote_status_idx"),
                    models.Index(fields=["tenant", "client_id"], name="sales_quote_client_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=common_fields() + document_fields() + [
                ("order_number", models.CharField(blank=True, db_index=True, max_length=50)),
                ("quotation_id", models.UUIDField(blank=True, null=True)),
                ("order_date", models.DateField(blank=True, null=True)),
                ("delivery_date", models.DateField(blank=True, null=True)),
                ("status", models.CharField(default="Pending", max_length=20)),
                ("payment_status", models.CharField(default="Unpaid", max_length=20)),
                ("converted_to_invoice_id", models.UUIDField(blank=True, null=True)),
            ],
            options={
                "db_table": "sales_orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "record_status", "status"], name="sales_order_status_idx"),
                    models.Index(fields=["tenant", "client_id"], name="sales_order_client_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Invoice",
            fields=common_fields() + document_fields() + [
                ("invoice_number", models.CharField(blank=True, db_index=True, max_length=50)),
                ("order_id", models.UUIDField(blank=True, null=True)),
                ("invoice_date", models.DateField(blank=True, null=True)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("paid_amount", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
                ("balance_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=20, null=True)),
                ("status", models.CharField(default="Draft", max_length=20)),
                ("payment_status", models.CharField(default="Unpaid", max_length=20)),
                ("paid_date", models.DateField(blank=True, null=True)),
            ],
            options={
                "db_table": "sales_invoices",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "record_status", "status"], name="sales_invoice_status_idx"),
                    models.Index(fields=["tenant", "client_id"], name="sales_invoice_client_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Payment",
            fields=common_fields() + [
                ("payment_number", models.CharField(blank=True, db_index=True, max_length=50)),
                ("invoice_id", models.UUIDField(blank=True, null=True)),
                ("client_id", models.UUIDField(blank=True, null=True)),
                ("amount", models.DecimalField(decimal_places=2, default=0, max_digits=20)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("payment_method", models.CharField(blank=True, max_length=50)),
                ("reference_number", models.CharField(blank=True, max_length=100)),
                ("status", models.CharField(default="Completed", max_length=20)),
            ],
            options={
                "db_table": "sales_payments",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "record_status"], name="sales_payment_status_idx"),
                    models.Index(fields=["tenant", "invoice_id"], name="sales_payment_invoice_idx"),
                ],
            },
        ),
    ]
