from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("timestamp", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("action", models.CharField(max_length=100)),
                ("entity", models.CharField(help_text="Module or model affected (e.g., 'Leads', 'Invoices')", max_length=100)),
                ("entity_id", models.CharField(help_text="ID of the record affected", max_length=64)),
                ("description", models.TextField(blank=True)),
                ("changes", models.JSONField(blank=True, help_text="Per-field {before, after} values", null=True)),
                ("metadata", models.JSONField(blank=True, null=True)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, max_length=512)),
                ("tenant", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="audit_logs", to="tenants.tenant")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Audit Log",
                "verbose_name_plural": "Audit Logs",
                "ordering": ["-timestamp", "-id"],
                "indexes": [
                    models.Index(fields=["tenant", "entity", "entity_id"], name="audit_tenant_entity_idx"),
                    models.Index(fields=["tenant", "action"], name="audit_tenant_action_idx"),
                ],
            },
        ),
    ]
