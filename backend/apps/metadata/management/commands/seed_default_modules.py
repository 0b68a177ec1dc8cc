from django.core.management.base import BaseCommand, CommandError

from apps.metadata.services.defaults import seed_default_modules
from apps.tenants.models import Tenant


class Command(BaseCommand):
    help = "Create the default module configurations for one tenant, or for every tenant."

    def add_arguments(self, parser):
        parser.add_argument('--tenant', help='Tenant slug or id. All active tenants when omitted.')

    def handle(self, *args, **options):
        tenants = Tenant.objects.filter(status=Tenant.Status.ACTIVE)
        ref = options.get('tenant')
        if ref:
            lookup = {'pk': int(ref)} if ref.isdigit() else {'slug': ref}
            tenants = Tenant.objects.filter(**lookup)
            if not tenants.exists():
                raise CommandError(f"Tenant '{ref}' not found.")

        for tenant in tenants:
            created = seed_default_modules(tenant)
            names = ", ".join(config.module_name for config in created) or "nothing new"
            self.stdout.write(f"{tenant.slug}: {names}")
        self.stdout.write(self.style.SUCCESS('Default modules seeded.'))
