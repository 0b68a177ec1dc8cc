from __future__ import annotations

import re

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist
from django.core.management import BaseCommand, CommandError
from django.db import connections, transaction
from django.db.models import JSONField

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

INTEGER_TYPES = {"INTEGER", "INT", "BIGINT", "SMALLINT"}
NUMERIC_TYPES = {"NUMERIC", "DECIMAL", "FLOAT", "REAL", "DOUBLE PRECISION"}


class Command(BaseCommand):
    help = "Promote a key of a typed table's custom_data JSON into a dedicated database column."

    def add_arguments(self, parser):
        parser.add_argument('--model', required=True, help='Target model in the form app_label.ModelName, e.g. sales.Lead')
        parser.add_argument('--attribute', required=True, help='Key within the JSON object to promote')
        parser.add_argument('--column', help='Column name to create (defaults to the attribute)')
        parser.add_argument('--json-field', default='custom_data', help='Name of the JSONField holding the key')
        parser.add_argument('--column-type', default='TEXT', help='SQL column type for the new field (default: TEXT)')
        parser.add_argument('--database', default='default', help='Database alias to run against')
        parser.add_argument('--drop-json', action='store_true', help='Remove the promoted key from the JSON document')

    def handle(self, *args, **options):
        model = self._resolve_model(options['model'])
        json_field_name = options['json_field']
        attribute = options['attribute']
        column_name = options['column'] or attribute
        column_type = options['column_type'].upper()
        database = options['database']

        for name in (json_field_name, column_name):
            if not _IDENTIFIER.match(name):
                raise CommandError(f"'{name}' is not a valid column name.")
        if not re.match(r"^[A-Z ]+(\(\d+(,\s*\d+)?\))?$", column_type):
            raise CommandError(f"Unsupported column type '{column_type}'.")

        try:
            json_field = model._meta.get_field(json_field_name)
        except FieldDoesNotExist as exc:
            raise CommandError(f"Model '{model.__name__}' has no field named '{json_field_name}'.") from exc
        if not isinstance(json_field, JSONField):
            raise CommandError(f"Field '{json_field_name}' on {model.__name__} is not a JSONField.")

        connection = connections[database]
        vendor = connection.vendor
        if vendor not in ("postgresql", "sqlite"):
            raise CommandError(f"Database backend '{vendor}' is not supported.")
        table = model._meta.db_table

        with transaction.atomic(using=database), connection.cursor() as cursor:
            self.stdout.write(self.style.NOTICE(f"Adding column '{column_name}' to {table}"))
            if vendor == "postgresql":
                cursor.execute(f'ALTER TABLE "{table}" ADD COLUMN IF NOT EXISTS "{column_name}" {column_type};')
            else:
                existing = {col.name for col in connection.introspection.get_table_description(cursor, table)}
                if column_name not in existing:
                    cursor.execute(f'ALTER TABLE "{table}" ADD COLUMN "{column_name}" {column_type};')

            self.stdout.write(self.style.NOTICE(f"Populating column '{column_name}' from JSON attribute '{attribute}'"))
            extract_expression = self._extract_expression(vendor, json_field_name, column_type)
            cursor.execute(f'UPDATE "{table}" SET "{column_name}" = {extract_expression}', [self._json_key(vendor, attribute)])
            updated = cursor.rowcount

            if options['drop_json']:
                if vendor == "postgresql":
                    cursor.execute(
                        f'UPDATE "{table}" SET "{json_field_name}" = "{json_field_name}" - %s', [attribute]
                    )
                else:
                    cursor.execute(
                        f'UPDATE "{table}" SET "{json_field_name}" = json_remove("{json_field_name}", %s)',
                        [self._json_key(vendor, attribute)],
                    )

        self.stdout.write(self.style.SUCCESS(f"Field promotion completed ({updated} rows)."))

    def _resolve_model(self, label: str):
        try:
            app_label, model_name = label.split('.')
        except ValueError as exc:
            raise CommandError("Model must be specified as 'app_label.ModelName'.") from exc
        try:
            return apps.get_model(app_label, model_name)
        except LookupError as exc:
            raise CommandError(f"Unable to locate model '{label}'.") from exc

    def _json_key(self, vendor: str, attribute: str) -> str:
        return attribute if vendor == "postgresql" else f'$."{attribute}"'

    def _extract_expression(self, vendor: str, json_field: str, column_type: str) -> str:
        if vendor == "sqlite":
            return f'json_extract("{json_field}", %s)'
        if column_type in INTEGER_TYPES:
            return f'(("{json_field}" ->> %s)::INTEGER)'
        if column_type in NUMERIC_TYPES:
            return f'(("{json_field}" ->> %s)::NUMERIC)'
        return f'"{json_field}" ->> %s'
