import apps.tenants.models
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(blank=True, max_length=100, unique=True)),
                ("subdomain", models.CharField(blank=True, max_length=100, null=True, unique=True)),
                ("plan", models.CharField(choices=[("free", "Free"), ("starter", "Starter"), ("professional", "Professional"), ("enterprise", "Enterprise")], default="free", max_length=20)),
                ("status", models.CharField(choices=[("active", "Active"), ("suspended", "Suspended")], default="active", max_length=20)),
                ("gstin", models.CharField(blank=True, max_length=15, validators=[apps.tenants.models.gstin_validator])),
                ("state", models.CharField(blank=True, max_length=100)),
                ("settings", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
                "indexes": [models.Index(fields=["status"], name="tenants_ten_status_6f1a2e_idx")],
            },
        ),
        migrations.CreateModel(
            name="Branch",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("code", models.CharField(max_length=20)),
                ("gstin", models.CharField(blank=True, max_length=15, validators=[apps.tenants.models.gstin_validator])),
                ("address", models.TextField(blank=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="branches", to="tenants.tenant")),
            ],
            options={
                "ordering": ["tenant", "code"],
                "unique_together": {("tenant", "code")},
            },
        ),
    ]
