"""
Base class for modules stored in dedicated tables.

Each typed table maps the camelCase keys used by the API onto real
columns. Keys without a column are kept in ``custom_data`` so tenants can
carry their own fields without a schema change.
"""
from __future__ import annotations

import datetime
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Tuple

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from shared.models import TenantAwareModel

# Keys describing the record itself; never written from client data
RESERVED_KEYS = ("id", "createdAt", "updatedAt", "createdBy", "updatedBy", "_duplicates")


def to_primitive(value: Any) -> Any:
    """Make a column value JSON friendly."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


class TypedRecord(TenantAwareModel):
    class RecordStatus(models.TextChoices):
        ACTIVE = "active", "Active"
        DELETED = "deleted", "Deleted"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    record_status = models.CharField(max_length=20, choices=RecordStatus.choices, default=RecordStatus.ACTIVE)
    custom_data = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    # camelCase key -> column name
    FIELD_MAP: Dict[str, str] = {}
    # alternative key -> camelCase key
    ALIASES: Dict[str, str] = {}
    # aliases repeated in the flattened record
    ECHOED_ALIASES: Tuple[str, ...] = ()

    class Meta:
        abstract = True

    @classmethod
    def column_for(cls, key: str):
        return cls.FIELD_MAP.get(cls.ALIASES.get(key, key))

    def apply_data(self, data: Dict[str, Any]) -> None:
        """Write known keys to their columns and the rest into ``custom_data``."""
        extra = {}
        for key, value in data.items():
            if key in RESERVED_KEYS:
                continue
            column = self.column_for(key)
            if column is None:
                extra[key] = value
                continue
            field = self._meta.get_field(column)
            setattr(self, field.attname, self._coerce(field, key, value))
        if extra:
            self.custom_data = {**(self.custom_data or {}), **extra}

    def _coerce(self, field, key: str, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            if field.null:
                return None
            if field.has_default():
                return field.get_default()
            return "" if isinstance(field, (models.CharField, models.TextField)) else None
        try:
            if isinstance(field, models.DecimalField):
                return Decimal(str(value).replace(",", "").strip())
            if isinstance(field, models.IntegerField):
                return int(Decimal(str(value).strip()))
            if isinstance(field, models.DateTimeField):
                return self._to_datetime(value)
            if isinstance(field, models.DateField):
                return self._to_date(value)
            if isinstance(field, models.UUIDField):
                return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
            if isinstance(field, models.ForeignKey):
                pk = int(value)
        except (InvalidOperation, TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {key}: {value!r}") from exc
        if isinstance(field, models.ForeignKey):
            return self._related_pk(field, key, pk)
        if isinstance(field, models.JSONField):
            return value
        return str(value)

    def _related_pk(self, field, key: str, pk: int) -> int:
        """Reject references to rows that are missing or belong to another tenant."""
        related = field.related_model._default_manager.filter(pk=pk)
        if any(f.name == "tenant" for f in field.related_model._meta.get_fields()):
            related = related.filter(tenant_id=self.tenant_id)
        if not related.exists():
            raise ValueError(f"Invalid value for {key}: no such {field.related_model._meta.verbose_name} {pk}")
        return pk

    @staticmethod
    def _to_date(value) -> datetime.date:
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        parsed = parse_date(str(value)[:10])
        if parsed is None:
            raise ValueError(value)
        return parsed

    @staticmethod
    def _to_datetime(value) -> datetime.datetime:
        if isinstance(value, datetime.datetime):
            parsed = value
        elif isinstance(value, datetime.date):
            parsed = datetime.datetime.combine(value, datetime.time.min)
        else:
            parsed = parse_datetime(str(value).replace("Z", "+00:00"))
            if parsed is None:
                parsed = datetime.datetime.combine(TypedRecord._to_date(value), datetime.time.min)
        if timezone.is_naive(parsed):
            parsed = timezone.make_aware(parsed)
        return parsed

    def to_record(self) -> Dict[str, Any]:
        record = dict(self.custom_data or {})
        for key, column in self.FIELD_MAP.items():
            field = self._meta.get_field(column)
            record[key] = to_primitive(getattr(self, field.attname))
        for alias in self.ECHOED_ALIASES:
            record[alias] = record.get(self.ALIASES[alias])
        record.update(
            id=str(self.pk),
            createdAt=to_primitive(self.created_at),
            updatedAt=to_primitive(self.updated_at),
            createdBy=self.created_by_id,
            updatedBy=self.updated_by_id,
        )
        return record
