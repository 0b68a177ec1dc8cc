from django.contrib import admin

from .models import AutoNumberSequence, MetadataLibraryItem, ModuleConfiguration


@admin.register(ModuleConfiguration)
class ModuleConfigurationAdmin(admin.ModelAdmin):
    list_display = ("module_name", "tenant", "version", "status", "workflow_category", "updated_at")
    list_filter = ("status", "workflow_category", "is_custom_module")
    search_fields = ("module_name", "display_name", "tenant__name")
    readonly_fields = ("created_at", "updated_at", "approved_at")


@admin.register(MetadataLibraryItem)
class MetadataLibraryItemAdmin(admin.ModelAdmin):
    list_display = ("category", "name", "label", "is_system", "status")
    list_filter = ("category", "status", "is_system")
    search_fields = ("name", "label")


@admin.register(AutoNumberSequence)
class AutoNumberSequenceAdmin(admin.ModelAdmin):
    list_display = ("module_name", "tenant", "prefix", "format", "next_number", "updated_at")
    search_fields = ("module_name", "tenant__name")
