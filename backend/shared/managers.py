from django.db import models


class TenantQuerySet(models.QuerySet):
    def for_tenant(self, tenant):
        """Filter by tenant (instance or primary key)."""
        tenant_id = getattr(tenant, "pk", tenant)
        return self.filter(tenant_id=tenant_id)


class TenantManager(models.Manager.from_queryset(TenantQuerySet)):
    pass
