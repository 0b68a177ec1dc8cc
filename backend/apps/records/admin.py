from django.contrib import admin

from .models import DynamicRecord, FilterPreset, RecordActivity, RecordNote, RecordTask


@admin.register(DynamicRecord)
class DynamicRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "module_name", "tenant", "status", "created_at", "updated_at")
    list_filter = ("module_name", "status")
    search_fields = ("id", "module_name", "tenant__name")
    readonly_fields = ("created_at", "updated_at")


@admin.register(RecordNote)
class RecordNoteAdmin(admin.ModelAdmin):
    list_display = ("module_name", "record_id", "tenant", "is_pinned", "created_by", "created_at")
    list_filter = ("module_name", "is_pinned")
    search_fields = ("record_id", "content")


@admin.register(RecordActivity)
class RecordActivityAdmin(admin.ModelAdmin):
    list_display = ("title", "activity_type", "module_name", "record_id", "tenant", "created_at")
    list_filter = ("activity_type", "module_name")
    search_fields = ("record_id", "title")


@admin.register(RecordTask)
class RecordTaskAdmin(admin.ModelAdmin):
    list_display = ("title", "module_name", "record_id", "status", "priority", "due_date", "assigned_to")
    list_filter = ("status", "priority", "module_name")
    search_fields = ("record_id", "title")


@admin.register(FilterPreset)
class FilterPresetAdmin(admin.ModelAdmin):
    list_display = ("name", "module_name", "tenant", "is_public", "created_by")
    list_filter = ("module_name", "is_public")
