from __future__ import annotations

import uuid

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from shared.models import TenantAwareModel


class DynamicRecord(TenantAwareModel):
    """Schemaless record of any module that has no typed table."""

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        DELETED = "deleted", "Deleted"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    module_name = models.CharField(max_length=100)
    data = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["tenant", "module_name", "status"], name="records_tenant_module_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.module_name}:{self.pk}"


class RecordNote(TenantAwareModel):
    module_name = models.CharField(max_length=100)
    record_id = models.CharField(max_length=64)
    content = models.TextField()
    is_pinned = models.BooleanField(default=False)
    mentions = models.JSONField(default=list, blank=True, help_text="User ids mentioned in the note")

    class Meta:
        ordering = ["-is_pinned", "-created_at"]
        indexes = [
            models.Index(fields=["tenant", "module_name", "record_id"], name="records_note_lookup_idx"),
        ]

    def __str__(self) -> str:
        return f"Note on {self.module_name}:{self.record_id}"


class RecordActivity(TenantAwareModel):
    """Timeline entry on a record: a call, meeting, email or status change."""

    class ActivityType(models.TextChoices):
        CALL = "call", "Call"
        EMAIL = "email", "Email"
        MEETING = "meeting", "Meeting"
        NOTE = "note", "Note"
        STATUS_CHANGE = "status_change", "Status change"
        OTHER = "other", "Other"

    module_name = models.CharField(max_length=100)
    record_id = models.CharField(max_length=64)
    activity_type = models.CharField(max_length=30, choices=ActivityType.choices, default=ActivityType.OTHER)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name_plural = "record activities"
        indexes = [
            models.Index(fields=["tenant", "module_name", "record_id"], name="records_activity_lookup_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.get_activity_type_display()}: {self.title}"


class RecordTask(TenantAwareModel):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        IN_PROGRESS = "in_progress", "In progress"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    class Priority(models.TextChoices):
        LOW = "low", "Low"
        MEDIUM = "medium", "Medium"
        HIGH = "high", "High"
        URGENT = "urgent", "Urgent"

    module_name = models.CharField(max_length=100)
    record_id = models.CharField(max_length=64)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    task_type = models.CharField(max_length=50, default="follow_up")
    due_date = models.DateField(null=True, blank=True)
    due_time = models.CharField(max_length=10, blank=True)
    priority = models.CharField(max_length=20, choices=Priority.choices, default=Priority.MEDIUM)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="record_tasks",
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["due_date", "-created_at"]
        indexes = [
            models.Index(fields=["tenant", "module_name", "record_id"], name="records_task_lookup_idx"),
            models.Index(fields=["tenant", "assigned_to", "status"], name="records_task_owner_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class FilterPreset(TenantAwareModel):
    """Saved list filters; the creator always sees them, everyone sees public ones."""

    module_name = models.CharField(max_length=100)
    name = models.CharField(max_length=150)
    filters = models.JSONField(default=list, blank=True)
    is_public = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["tenant", "module_name"], name="records_preset_module_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.module_name}: {self.name}"
