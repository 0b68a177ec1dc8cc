"""
Hybrid record storage.

Modules with a dedicated table (see ``apps.sales.models.TYPED_MODELS``) are
read and written through their typed model. Every other module is stored as
JSON in ``DynamicRecord``. Both paths return the same flattened dict:
custom fields merged into the top level, ``id`` as a string and the
soft-delete status hidden.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings
from django.db import transaction

from apps.audit.utils import create_change_diff, log_audit_event
from apps.sales.models import TYPED_MODELS, TypedRecord, to_primitive
from apps.sales.models.base import RESERVED_KEYS
from ..exceptions import RecordNotFound
from ..models import DynamicRecord
from . import filters as record_filters

logger = logging.getLogger(__name__)


def _clean(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {key: value for key, value in (data or {}).items() if key not in RESERVED_KEYS}


def _parse_id(record_id) -> Optional[uuid.UUID]:
    if isinstance(record_id, uuid.UUID):
        return record_id
    try:
        return uuid.UUID(str(record_id))
    except (TypeError, ValueError, AttributeError):
        return None


class DynamicRecordService:
    TYPED_MODULES = tuple(TYPED_MODELS)

    @staticmethod
    def uses_typed_table(module_name: str) -> bool:
        return module_name in TYPED_MODELS

    @staticmethod
    def typed_model(module_name: str):
        return TYPED_MODELS.get(module_name)

    @staticmethod
    def flatten(instance) -> Dict[str, Any]:
        if isinstance(instance, TypedRecord):
            return instance.to_record()
        record = dict(instance.data or {})
        record.update(
            id=str(instance.pk),
            createdAt=to_primitive(instance.created_at),
            updatedAt=to_primitive(instance.updated_at),
            createdBy=instance.created_by_id,
            updatedBy=instance.updated_by_id,
        )
        return record

    @classmethod
    def _queryset(cls, tenant, module_name: str, *, active_only: bool = True):
        model = cls.typed_model(module_name)
        if model is not None:
            qs = model.objects.for_tenant(tenant)
            return qs.filter(record_status=model.RecordStatus.ACTIVE) if active_only else qs
        qs = DynamicRecord.objects.for_tenant(tenant).filter(module_name=module_name)
        return qs.filter(status=DynamicRecord.Status.ACTIVE) if active_only else qs

    @classmethod
    def _get_instance(cls, tenant, module_name: str, record_id, *, for_update: bool = False):
        pk = _parse_id(record_id)
        if pk is None:
            return None
        qs = cls._queryset(tenant, module_name)
        if for_update:
            qs = qs.select_for_update()
        return qs.filter(pk=pk).first()

    @classmethod
    @transaction.atomic
    def create_record(cls, tenant, module_name: str, data: Dict[str, Any], user=None) -> Dict[str, Any]:
        payload = _clean(data)
        model = cls.typed_model(module_name)
        if model is not None:
            instance = model(tenant=tenant, created_by=user, updated_by=user)
            instance.apply_data(payload)
            instance.save()
            instance.refresh_from_db()
        else:
            instance = DynamicRecord.objects.create(
                tenant=tenant,
                module_name=module_name,
                data=payload,
                status=DynamicRecord.Status.ACTIVE,
                created_by=user,
                updated_by=user,
            )
        record = cls.flatten(instance)
        if user is not None:
            log_audit_event(
                tenant=tenant,
                user=user,
                action="create",
                entity=module_name,
                entity_id=record["id"],
                metadata={"typed": model is not None},
            )
        logger.debug(f"Created {module_name} record {record['id']} for tenant {tenant.pk}")
        return record

    @classmethod
    def get_records(cls, tenant, module_name: str) -> List[Dict[str, Any]]:
        """Active records of a module, newest first."""
        qs = cls._queryset(tenant, module_name).order_by("-created_at")
        return [cls.flatten(instance) for instance in qs]

    @classmethod
    def get_latest_record(cls, tenant, module_name: str) -> Optional[Dict[str, Any]]:
        """Most recently created record, deleted ones included."""
        instance = cls._queryset(tenant, module_name, active_only=False).order_by("-created_at").first()
        return cls.flatten(instance) if instance is not None else None

    @classmethod
    def get_record(cls, tenant, module_name: str, record_id) -> Optional[Dict[str, Any]]:
        instance = cls._get_instance(tenant, module_name, record_id)
        return cls.flatten(instance) if instance is not None else None

    @classmethod
    @transaction.atomic
    def update_record(cls, tenant, module_name: str, record_id, data: Dict[str, Any], user=None) -> Dict[str, Any]:
        instance = cls._get_instance(tenant, module_name, record_id, for_update=True)
        if instance is None:
            raise RecordNotFound(module_name, record_id)
        before = cls.flatten(instance)
        payload = _clean(data)
        if isinstance(instance, TypedRecord):
            instance.apply_data(payload)
        else:
            instance.data = {**(instance.data or {}), **payload}
        if user is not None:
            instance.updated_by = user
        instance.save()
        instance.refresh_from_db()
        after = cls.flatten(instance)
        if user is not None:
            changes = create_change_diff(_clean(before), _clean(after))
            log_audit_event(
                tenant=tenant,
                user=user,
                action="update",
                entity=module_name,
                entity_id=after["id"],
                changes=changes,
            )
        return after

    @classmethod
    @transaction.atomic
    def delete_record(cls, tenant, module_name: str, record_id, user=None) -> bool:
        instance = cls._get_instance(tenant, module_name, record_id, for_update=True)
        if instance is None:
            raise RecordNotFound(module_name, record_id)
        if isinstance(instance, TypedRecord):
            instance.record_status = instance.RecordStatus.DELETED
        else:
            instance.status = DynamicRecord.Status.DELETED
        if user is not None:
            instance.updated_by = user
        instance.save()
        if user is not None:
            log_audit_event(
                tenant=tenant,
                user=user,
                action="delete",
                entity=module_name,
                entity_id=str(instance.pk),
            )
        return True

    @classmethod
    def search_records(cls, tenant, module_name: str, term: str, fields: Sequence[str]) -> List[Dict[str, Any]]:
        return record_filters.search_records(cls.get_records(tenant, module_name), term, fields)

    @staticmethod
    def default_search_fields(tenant, module_name: str) -> List[str]:
        from apps.metadata.services import get_active_module_config

        config = get_active_module_config(tenant, module_name)
        if config is not None and config.searchable_fields:
            return config.searchable_fields
        return list(settings.RECORDS_DEFAULT_SEARCH_FIELDS)

    @classmethod
    def get_records_with_filters(
        cls,
        tenant,
        module_name: str,
        filters: Sequence[Dict[str, Any]] = (),
        search: Optional[str] = None,
        search_fields: Sequence[str] = (),
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
        page: int = 1,
        page_size: int = 50,
        user=None,
    ) -> Dict[str, Any]:
        """
        Search, filter, sort and paginate a module's records.

        When ``user`` is given and the module has assignment enabled, the
        role visibility rules are applied before anything else.
        """
        records = cls.get_records(tenant, module_name)
        if user is not None:
            records = cls.apply_visibility(tenant, module_name, records, user)
        if search:
            records = record_filters.search_records(
                records, search, search_fields or cls.default_search_fields(tenant, module_name)
            )
        records = record_filters.apply_filters(records, filters)
        records = record_filters.sort_records(records, sort_by, sort_order)
        page_size = min(max(int(page_size or settings.RECORDS_DEFAULT_PAGE_SIZE), 1), settings.RECORDS_MAX_PAGE_SIZE)
        return record_filters.paginate(records, page, page_size)

    @classmethod
    def get_visible_record(cls, tenant, module_name: str, record_id, user) -> Optional[Dict[str, Any]]:
        """``get_record`` that also hides records the user may not see."""
        record = cls.get_record(tenant, module_name, record_id)
        if record is None or not cls.apply_visibility(tenant, module_name, [record], user):
            return None
        return record

    @staticmethod
    def apply_visibility(tenant, module_name: str, records, user):
        from apps.metadata.services import get_module_settings
        from .assignment import visible_records

        assignment = get_module_settings(tenant, module_name).get("assignment") or {}
        if not assignment.get("enabled") or not assignment.get("visibilityRules"):
            return records
        return visible_records(records, user, assignment["visibilityRules"])
