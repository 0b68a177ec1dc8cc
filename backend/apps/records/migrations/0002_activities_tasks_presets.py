import django.core.serializers.json

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


def _tenant_fields():
    return [
        ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
        ("tenant", models.ForeignKey(help_text="Tenant this record belongs to", on_delete=django.db.models.deletion.PROTECT, related_name="+", to="tenants.tenant")),
    ]


class Migration(migrations.Migration):

    dependencies = [
        ("tenants", "0001_initial"),
        ("records", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="RecordActivity",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("module_name", models.CharField(max_length=100)),
                ("record_id", models.CharField(max_length=64)),
                ("activity_type", models.CharField(choices=[("call", "Call"), ("email", "Email"), ("meeting", "Meeting"), ("note", "Note"), ("status_change", "Status change"), ("other", "Other")], default="other", max_length=30)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("metadata", models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                *_tenant_fields(),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "verbose_name_plural": "record activities",
                "indexes": [models.Index(fields=["tenant", "module_name", "record_id"], name="records_activity_lookup_idx")],
            },
        ),
        migrations.CreateModel(
            name="RecordTask",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("module_name", models.CharField(max_length=100)),
                ("record_id", models.CharField(max_length=64)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("task_type", models.CharField(default="follow_up", max_length=50)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("due_time", models.CharField(blank=True, max_length=10)),
                ("priority", models.CharField(choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("urgent", "Urgent")], default="medium", max_length=20)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("in_progress", "In progress"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="pending", max_length=20)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("assigned_to", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="record_tasks", to=settings.AUTH_USER_MODEL)),
                *_tenant_fields(),
            ],
            options={
                "ordering": ["due_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["tenant", "module_name", "record_id"], name="records_task_lookup_idx"),
                    models.Index(fields=["tenant", "assigned_to", "status"], name="records_task_owner_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="FilterPreset",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("module_name", models.CharField(max_length=100)),
                ("name", models.CharField(max_length=150)),
                ("filters", models.JSONField(blank=True, default=list)),
                ("is_public", models.BooleanField(default=False)),
                *_tenant_fields(),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [models.Index(fields=["tenant", "module_name"], name="records_preset_module_idx")],
            },
        ),
    ]
