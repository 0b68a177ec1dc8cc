from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user", "tenant", "action", "entity", "entity_id")
    list_filter = ("action", "entity", "tenant")
    search_fields = ("entity", "entity_id", "description", "user__username", "user__email")
    readonly_fields = [field.name for field in AuditLog._meta.fields]
