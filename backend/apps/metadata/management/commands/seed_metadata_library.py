from django.core.management.base import BaseCommand

from apps.metadata.services.library import seed_metadata_library


class Command(BaseCommand):
    help = "Load the system field types, UI components, validation types and layout templates."

    def handle(self, *args, **options):
        count = seed_metadata_library()
        self.stdout.write(self.style.SUCCESS(f"Metadata library ready ({count} system items)."))
