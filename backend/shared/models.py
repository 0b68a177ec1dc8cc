from django.conf import settings
from django.db import models

from .managers import TenantManager


class TenantAwareModel(models.Model):
    """
    Abstract base model that scopes a row to a single tenant.
    Every business table inherits from it so that queries can be
    filtered with ``Model.objects.for_tenant(tenant)``.
    """
    tenant = models.ForeignKey(
        'tenants.Tenant',
        on_delete=models.PROTECT,
        db_index=True,
        related_name='+',
        help_text="Tenant this record belongs to"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    objects = TenantManager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self.tenant_id:
            raise ValueError("Tenant must be specified")
        super().save(*args, **kwargs)
