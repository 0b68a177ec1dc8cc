from django.contrib import admin

from .models import Branch, Tenant


class BranchInline(admin.TabularInline):
    model = Branch
    extra = 0


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "plan", "status", "gstin", "created_at")
    list_filter = ("plan", "status")
    search_fields = ("name", "slug", "subdomain", "gstin")
    inlines = [BranchInline]


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "tenant", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name", "code", "tenant__name")
