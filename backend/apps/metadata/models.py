from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from shared.models import TenantAwareModel


class ModuleConfiguration(TenantAwareModel):
    """Versioned shape of a tenant module: fields, layouts, validations and behaviour settings."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        REVIEW = "review", "In Review"
        ACTIVE = "active", "Active"
        ARCHIVED = "archived", "Archived"

    module_name = models.CharField(max_length=100)
    display_name = models.CharField(max_length=255)
    icon = models.CharField(max_length=50, blank=True)
    description = models.TextField(blank=True)
    workflow_category = models.CharField(max_length=50, blank=True)
    position = models.PositiveIntegerField(default=0)
    show_in_nav = models.BooleanField(default=True)
    is_custom_module = models.BooleanField(default=False)
    fields = models.JSONField(default=list, help_text="Ordered list of field definitions.")
    layouts = models.JSONField(default=dict, blank=True)
    validations = models.JSONField(default=list, blank=True)
    module_settings = models.JSONField(default=dict, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    version = models.PositiveIntegerField(default=1)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="approved_module_configs",
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["position", "module_name", "-version"]
        unique_together = ("tenant", "module_name", "version")
        indexes = [
            models.Index(fields=["tenant", "module_name", "status"], name="metadata_mod_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.module_name} v{self.version} ({self.status})"

    def activate(self, *, user=None) -> None:
        """Mark this version as active and archive the other active versions."""
        if self.status == self.Status.ACTIVE:
            return
        ModuleConfiguration.objects.filter(
            tenant=self.tenant,
            module_name=self.module_name,
            status=self.Status.ACTIVE,
        ).exclude(pk=self.pk).update(status=self.Status.ARCHIVED)
        self.status = self.Status.ACTIVE
        self.approved_at = timezone.now()
        if user is not None:
            self.approved_by = user
        self.save(update_fields=["status", "approved_at", "approved_by", "updated_at"])

    @classmethod
    def next_version(cls, *, tenant, module_name: str) -> int:
        latest = cls.objects.filter(tenant=tenant, module_name=module_name).order_by("-version").first()
        return (latest.version + 1) if latest else 1

    def get_field(self, name: str):
        return next((field for field in self.fields if field.get("name") == name), None)

    @property
    def searchable_fields(self):
        return [field["name"] for field in self.fields if field.get("searchable")]


class MetadataLibraryItem(models.Model):
    """Catalogue of building blocks a module field may use."""

    class Category(models.TextChoices):
        FIELD_TYPES = "field_types", "Field Types"
        UI_COMPONENTS = "ui_components", "UI Components"
        VALIDATION_TYPES = "validation_types", "Validation Types"
        DATA_SOURCES = "data_sources", "Data Sources"
        LAYOUT_TEMPLATES = "layout_templates", "Layout Templates"

    STATUS_CHOICES = [
        ("active", "Active"),
        ("review", "In Review"),
        ("inactive", "Inactive"),
    ]

    category = models.CharField(max_length=30, choices=Category.choices)
    name = models.CharField(max_length=100)
    label = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    config = models.JSONField(default=dict, blank=True)
    is_system = models.BooleanField(default=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")

    class Meta:
        ordering = ["category", "label"]
        unique_together = ("category", "name")

    def __str__(self) -> str:
        return f"{self.category}:{self.name}"


class AutoNumberSequence(models.Model):
    """Per tenant and module counter behind generated record numbers."""

    tenant = models.ForeignKey("tenants.Tenant", on_delete=models.CASCADE, related_name="number_sequences")
    module_name = models.CharField(max_length=100)
    prefix = models.CharField(max_length=20)
    format = models.CharField(max_length=100, help_text="Template, e.g. {prefix}-{padded:5} or {prefix}/{year}/{padded:3}")
    padding = models.PositiveSmallIntegerField(default=0, help_text="Zero padding applied to {number}")
    next_number = models.PositiveIntegerField(default=1)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("tenant", "module_name")

    def __str__(self) -> str:
        return f"{self.module_name}: {self.prefix} next={self.next_number}"
