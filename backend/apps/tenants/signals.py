"""
Signal handlers for tenants app.
"""
import logging

from django.conf import settings
from django.db import DatabaseError
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Tenant

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Tenant)
def seed_default_modules_on_tenant_creation(sender, instance, created, **kwargs):
    """
    Give every new tenant the standard module configurations
    (Leads, Clients, Quotations, ... VendorPayments).
    """
    if not created or not settings.TENANT_SEED_DEFAULT_MODULES:
        return

    from apps.metadata.services.defaults import seed_default_modules

    try:
        modules = seed_default_modules(instance)
    except DatabaseError as e:
        logger.error(f"Failed to seed default modules for tenant {instance.slug}: {e}", exc_info=True)
        # Tenant creation succeeds even when seeding fails
        return
    logger.info(f"Seeded {len(modules)} default modules for tenant {instance.slug}")
