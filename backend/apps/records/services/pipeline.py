"""
Create/update flow used by the records API.

``submit_record`` runs the module's configured behaviour around a plain
``create_record``: duplicate check, auto-numbering, lead scoring, owner
assignment and, for payments, invoice settlement.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from django.db import DatabaseError, transaction

from apps.metadata.services import get_module_settings
from apps.metadata.services.numbering import generate_number, is_auto_numbered, number_field_for
from ..exceptions import RecordNotFound
from .assignment import assign_owner
from .duplicates import check_duplicates
from .record_service import DynamicRecordService
from .scoring import apply_scoring

logger = logging.getLogger(__name__)


def _has_number(module_name: str, data: Dict[str, Any], field: str) -> bool:
    model = DynamicRecordService.typed_model(module_name)
    if model is None:
        return data.get(field) not in (None, "")
    column = model.column_for(field)
    return any(value not in (None, "") and model.column_for(key) == column for key, value in data.items())


def fill_record_number(tenant, module_name: str, data: Dict[str, Any], settings: Dict[str, Any]) -> Dict[str, Any]:
    if not is_auto_numbered(module_name, settings):
        return data
    field = number_field_for(module_name, settings)
    if _has_number(module_name, data, field):
        return data
    return {**data, field: generate_number(tenant, module_name)}


def settle_payment_safely(tenant, payment: Dict[str, Any], *, user=None) -> None:
    from apps.sales.services.settlement import settle_payment

    try:
        with transaction.atomic():
            settle_payment(tenant, payment, user=user)
    except (ValueError, DatabaseError) as exc:
        logger.warning(f"Payment {payment.get('id')} saved but invoice {payment.get('invoiceId')} was not updated: {exc}")


@transaction.atomic
def submit_record(tenant, module_name: str, data: Dict[str, Any], user=None) -> Dict[str, Any]:
    settings = get_module_settings(tenant, module_name)
    payload = dict(data or {})
    duplicates = check_duplicates(tenant, module_name, payload, settings)
    payload = fill_record_number(tenant, module_name, payload, settings)
    payload = apply_scoring(payload, settings)
    payload = assign_owner(tenant, module_name, payload, settings)

    record = DynamicRecordService.create_record(tenant, module_name, payload, user=user)
    if module_name == "Payments" and record.get("invoiceId"):
        settle_payment_safely(tenant, record, user=user)
    if duplicates:
        record["_duplicates"] = duplicates
    return record


@transaction.atomic
def submit_update(tenant, module_name: str, record_id, data: Dict[str, Any], user=None) -> Dict[str, Any]:
    settings = get_module_settings(tenant, module_name)
    payload = dict(data or {})
    if (settings.get("scoring") or {}).get("enabled"):
        existing = DynamicRecordService.get_record(tenant, module_name, record_id)
        if existing is None:
            raise RecordNotFound(module_name, record_id)
        scored = apply_scoring({**existing, **payload}, settings)
        payload.update(leadScore=scored["leadScore"], priority=scored["priority"])
    return DynamicRecordService.update_record(tenant, module_name, record_id, payload, user=user)
