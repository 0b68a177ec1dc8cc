from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    """
    Append-only trail of changes made to tenant data.

    ``action`` is free text (``create``, ``update``, ``delete``,
    ``convert_lead_to_client``, ``payment_received`` ...). ``entity`` is the
    module name and ``entity_id`` the record id.
    """
    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    tenant = models.ForeignKey('tenants.Tenant', on_delete=models.CASCADE, null=True, blank=True, related_name='audit_logs')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=100)
    entity = models.CharField(max_length=100, help_text="Module or model affected (e.g., 'Leads', 'Invoices')")
    entity_id = models.CharField(max_length=64, help_text="ID of the record affected")
    description = models.TextField(blank=True)
    changes = models.JSONField(null=True, blank=True, help_text="Per-field {before, after} values")
    metadata = models.JSONField(null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=512, blank=True)

    class Meta:
        ordering = ['-timestamp', '-id']
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        indexes = [
            models.Index(fields=['tenant', 'entity', 'entity_id'], name='audit_tenant_entity_idx'),
            models.Index(fields=['tenant', 'action'], name='audit_tenant_action_idx'),
        ]

    def __str__(self):
        return f"{self.timestamp}: {self.user} {self.action} {self.entity}:{self.entity_id}"
