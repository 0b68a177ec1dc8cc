import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import DatabaseError, transaction

from apps.records.models import DynamicRecord
from apps.sales.models import TYPED_MODELS
from apps.tenants.models import Tenant

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = (
        "Copy active DynamicRecord rows of typed modules into their dedicated tables. "
        "Ids are preserved and the DynamicRecord rows are left in place."
    )

    def add_arguments(self, parser):
        parser.add_argument('--tenant', help='Tenant slug or id. All tenants when omitted.')
        parser.add_argument('--module', choices=sorted(TYPED_MODELS), help='Only migrate this module.')
        parser.add_argument('--dry-run', action='store_true', help='Report what would be migrated without writing.')

    def handle(self, *args, **options):
        tenant = self._resolve_tenant(options.get('tenant'))
        modules = [options['module']] if options.get('module') else list(TYPED_MODELS)
        dry_run = options['dry_run']

        totals = {'migrated': 0, 'skipped': 0, 'failed': 0}
        for module_name in modules:
            counts = self._migrate_module(module_name, tenant, dry_run)
            for key, value in counts.items():
                totals[key] += value
            self.stdout.write(
                f"{module_name}: {counts['migrated']} migrated, {counts['skipped']} already present, {counts['failed']} failed"
            )

        prefix = '[dry run] ' if dry_run else ''
        summary = f"{prefix}{totals['migrated']} records migrated, {totals['skipped']} skipped, {totals['failed']} failed."
        if totals['failed']:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))

    def _resolve_tenant(self, ref):
        if not ref:
            return None
        lookup = {'pk': int(ref)} if ref.isdigit() else {'slug': ref}
        tenant = Tenant.objects.filter(**lookup).first()
        if tenant is None:
            raise CommandError(f"Tenant '{ref}' not found.")
        return tenant

    def _migrate_module(self, module_name, tenant, dry_run):
        model = TYPED_MODELS[module_name]
        records = DynamicRecord.objects.filter(module_name=module_name, status=DynamicRecord.Status.ACTIVE)
        if tenant is not None:
            records = records.filter(tenant=tenant)
        existing = set(model.objects.filter(pk__in=records.values('pk')).values_list('pk', flat=True))

        counts = {'migrated': 0, 'skipped': 0, 'failed': 0}
        for record in records.order_by('created_at').iterator():
            if record.pk in existing:
                counts['skipped'] += 1
                continue
            if dry_run:
                counts['migrated'] += 1
                continue
            try:
                with transaction.atomic():
                    self._copy(model, record)
            except (ValueError, DatabaseError) as exc:
                counts['failed'] += 1
                logger.error(f"Failed to migrate {module_name} record {record.pk}: {exc}")
                continue
            counts['migrated'] += 1
        if counts['migrated'] and not dry_run:
            logger.info(f"Migrated {counts['migrated']} {module_name} records to {model._meta.db_table}")
        return counts

    def _copy(self, model, record):
        instance = model(
            id=record.pk,
            tenant_id=record.tenant_id,
            created_by_id=record.created_by_id,
            updated_by_id=record.updated_by_id,
        )
        instance.apply_data(record.data or {})
        instance.save(force_insert=True)
        # auto_now fields were reset by save()
        model.objects.filter(pk=instance.pk).update(created_at=record.created_at, updated_at=record.updated_at)
