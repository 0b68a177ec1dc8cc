from django.apps import AppConfig


class MetadataConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.metadata'
    verbose_name = 'Module Metadata'
