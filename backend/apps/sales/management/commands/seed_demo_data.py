import datetime

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from apps.metadata.services.library import seed_metadata_library
from apps.records.services.pipeline import submit_record
from apps.records.services.record_service import DynamicRecordService
from apps.sales.services.conversion import convert_lead_to_client
from apps.sales.services.gst import calculate_from_line_items
from apps.tenants.models import Tenant

DEMO_GSTIN = '27AAPFU0939F1ZV'

DEMO_LEADS = [
    {'name': 'Priya Sharma', 'email': 'priya@brightsolar.in', 'phone': '9820012345', 'company': 'Bright Solar',
     'source': 'Referral', 'status': 'Qualified', 'expectedValue': 450000},
    {'name': 'Rahul Mehta', 'email': 'rahul@mehtatextiles.com', 'phone': '9898011122', 'company': 'Mehta Textiles',
     'source': 'Google Ads', 'status': 'Contacted', 'expectedValue': 120000},
    {'name': 'Ananya Iyer', 'email': 'ananya@greenleaf.co.in', 'phone': '9445566778', 'company': 'Greenleaf Foods',
     'source': 'Website', 'status': 'New', 'expectedValue': 35000},
]

DEMO_VENDORS = [
    {'vendorName': 'Shree Packaging', 'email': 'sales@shreepack.in', 'paymentTerms': 'Net 30', 'rating': 4.5},
    {'vendorName': 'Delta Components', 'email': 'orders@deltacomp.com', 'paymentTerms': 'Net 45', 'rating': 3.8},
]


class Command(BaseCommand):
    help = "Create a demo tenant with users and sample CRM and purchase records."

    def add_arguments(self, parser):
        parser.add_argument('--slug', default='demo', help='Slug of the demo tenant.')
        parser.add_argument('--password', default='Demo@123', help='Password for the demo users.')

    def handle(self, *args, **options):
        seed_metadata_library()
        with transaction.atomic():
            tenant, created = Tenant.objects.get_or_create(
                slug=options['slug'],
                defaults={'name': 'Demo Company', 'gstin': DEMO_GSTIN, 'state': 'Maharashtra'},
            )
            if not tenant.is_active:
                raise CommandError(f"Tenant '{tenant.slug}' is suspended.")
            if not created and DynamicRecordService.get_records(tenant, 'Leads'):
                self.stdout.write(self.style.WARNING(f"Tenant '{tenant.slug}' already has demo data. Nothing to do."))
                return

            admin = self._user(tenant, f'{tenant.slug}_admin', 'admin', options['password'])
            self._user(tenant, f'{tenant.slug}_sales', 'staff', options['password'], manager=admin)

            leads = [submit_record(tenant, 'Leads', data, user=admin) for data in DEMO_LEADS]
            client = convert_lead_to_client(tenant, leads[0]['id'], user=admin)['client']
            self._quotation(tenant, client, admin)

            today = timezone.localdate()
            for vendor in DEMO_VENDORS:
                record = submit_record(tenant, 'Vendors', {**vendor, 'status': 'active'}, user=admin)
                submit_record(
                    tenant,
                    'RateCatalogs',
                    {
                        'vendorId': record['id'],
                        'itemCode': 'BOX-A4',
                        'itemName': 'A4 corrugated box',
                        'rate': 18 if vendor['rating'] > 4 else 16.5,
                        'uom': 'PCS',
                        'validFrom': (today - datetime.timedelta(days=30)).isoformat(),
                        'validTo': (today + datetime.timedelta(days=335)).isoformat(),
                        'moq': 100,
                        'leadTime': 5,
                        'status': 'active',
                    },
                    user=admin,
                )

        self.stdout.write(self.style.SUCCESS(
            f"Demo tenant '{tenant.slug}' ready with {len(leads)} leads, 1 client and {len(DEMO_VENDORS)} vendors."
        ))

    def _user(self, tenant, username, role, password, manager=None):
        User = get_user_model()
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'tenant': tenant, 'role': role, 'email': f'{username}@example.com', 'manager': manager},
        )
        if created:
            user.set_password(password)
            user.save(update_fields=['password'])
            self.stdout.write(f"Created user {username} ({role})")
        return user

    def _quotation(self, tenant, client, user):
        items = [
            {'description': 'Rooftop solar panel 540W', 'quantity': 20, 'unitPrice': 14500},
            {'description': 'Installation and commissioning', 'quantity': 1, 'unitPrice': 35000},
        ]
        for item in items:
            item['amount'] = item['quantity'] * item['unitPrice']
        gst = calculate_from_line_items(items, 18, tenant.gstin, client.get('gstNumber'))
        return submit_record(
            tenant,
            'Quotations',
            {
                'clientId': client['id'],
                'clientName': client.get('clientName', ''),
                'quotationDate': timezone.localdate().isoformat(),
                'items': items,
                'subtotal': float(gst.subtotal),
                'gstPercentage': 18,
                'taxAmount': float(gst.total_gst_amount),
                'totalAmount': float(gst.total_after_gst),
                'status': 'Sent',
            },
            user=user,
        )
