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
            name="MetadataLibraryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("category", models.CharField(choices=[("field_types", "Field Types"), ("ui_components", "UI Components"), ("validation_types", "Validation Types"), ("data_sources", "Data Sources"), ("layout_templates", "Layout Templates")], max_length=30)),
                ("name", models.CharField(max_length=100)),
                ("label", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("config", models.JSONField(blank=True, default=dict)),
                ("is_system", models.BooleanField(default=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("review", "In Review"), ("inactive", "Inactive")], default="active", max_length=20)),
            ],
            options={
                "ordering": ["category", "label"],
                "unique_together": {("category", "name")},
            },
        ),
        migrations.CreateModel(
            name="AutoNumberSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("module_name", models.CharField(max_length=100)),
                ("prefix", models.CharField(max_length=20)),
                ("format", models.CharField(help_text="Template, e.g. {prefix}-{padded:5} or {prefix}/{year}/{padded:3}", max_length=100)),
                ("padding", models.PositiveSmallIntegerField(default=0, help_text="Zero padding applied to {number}")),
                ("next_number", models.PositiveIntegerField(default=1)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="number_sequences", to="tenants.tenant")),
            ],
            options={
                "unique_together": {("tenant", "module_name")},
            },
        ),
        migrations.CreateModel(
            name="ModuleConfiguration",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("module_name", models.CharField(max_length=100)),
                ("display_name", models.CharField(max_length=255)),
                ("icon", models.CharField(blank=True, max_length=50)),
                ("description", models.TextField(blank=True)),
                ("workflow_category", models.CharField(blank=True, max_length=50)),
                ("position", models.PositiveIntegerField(default=0)),
                ("show_in_nav", models.BooleanField(default=True)),
                ("is_custom_module", models.BooleanField(default=False)),
                ("fields", models.JSONField(default=list, help_text="Ordered list of field definitions.")),
                ("layouts", models.JSONField(blank=True, default=dict)),
                ("validations", models.JSONField(blank=True, default=list)),
                ("module_settings", models.JSONField(blank=True, default=dict)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("review", "In Review"), ("active", "Active"), ("archived", "Archived")], default="draft", max_length=20)),
                ("version", models.PositiveIntegerField(default=1)),
                ("approved_at", models.DateTimeField(blank=True, null=True)),
                ("approved_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="approved_module_configs", to=settings.AUTH_USER_MODEL)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("tenant", models.ForeignKey(help_text="Tenant this record belongs to", on_delete=django.db.models.deletion.PROTECT, related_name="+", to="tenants.tenant")),
            ],
            options={
                "ordering": ["position", "module_name", "-version"],
                "unique_together": {("tenant", "module_name", "version")},
                "indexes": [models.Index(fields=["tenant", "module_name", "status"], name="metadata_mod_status_idx")],
            },
        ),
    ]
