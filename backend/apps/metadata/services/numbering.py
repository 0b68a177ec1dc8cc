"""
Record number generation.

Each tenant/module pair owns one ``AutoNumberSequence``. Templates support
``{prefix}``, ``{number}``, ``{padded:N}``, ``{year}``, ``{month}`` and
``{day}``.
"""
from __future__ import annotations

import datetime
import logging
import re
from typing import Dict, Optional

from django.db import transaction
from django.utils import timezone

from ..models import AutoNumberSequence
from .module_config import get_module_settings

logger = logging.getLogger(__name__)

FORMATS = {
    "SIMPLE": "{prefix}-{padded:5}",
    "YEAR_BASED": "{prefix}/{year}/{padded:3}",
    "YEAR_MONTH": "{prefix}/{year}/{month}/{padded:2}",
    "YEAR_SEQUENCE": "{prefix}{year}{padded:4}",
}

DEFAULT_PREFIXES = {
    "Leads": "LD",
    "Clients": "CL",
    "Quotations": "QT",
    "Orders": "ORD",
    "Invoices": "INV",
    "Payments": "TXN",
    "Finance": "FIN",
}

MODULE_FORMATS = {
    "Invoices": FORMATS["YEAR_BASED"],
}

# Field that receives the generated number when a record is created
NUMBER_FIELDS = {
    "Leads": "leadNumber",
    "Clients": "clientNumber",
    "Quotations": "quotationNumber",
    "Orders": "orderNumber",
    "Invoices": "invoiceNumber",
    "Payments": "transactionId",
    "Vendors": "vendorNumber",
    "PurchaseRequests": "requestNumber",
    "PurchaseOrders": "poNumber",
    "GoodsReceipts": "grnNumber",
    "VendorBills": "billNumber",
    "VendorPayments": "paymentNumber",
    "Expenses": "expenseNumber",
}

# Modules numbered on every create, whether or not their settings ask for it
ALWAYS_NUMBERED = ("Quotations", "Orders", "Invoices", "Payments")

_TOKEN = re.compile(r"\{(prefix|number|year|month|day|padded:(\d+))\}")
_TRAILING_DIGITS = re.compile(r"(\d+)\D*$")


class SequenceError(ValueError):
    pass


def format_number(template: str, prefix: str, number: int, *, when: Optional[datetime.date] = None, padding: int = 0) -> str:
    when = when or timezone.localdate()

    def replace(match):
        token = match.group(1)
        if token == "prefix":
            return prefix
        if token == "number":
            return str(number).zfill(padding)
        if token == "year":
            return f"{when:%Y}"
        if token == "month":
            return f"{when:%m}"
        if token == "day":
            return f"{when:%d}"
        return str(number).zfill(int(match.group(2)))

    return _TOKEN.sub(replace, template)


def _number_pattern(template: str, prefix: str) -> re.Pattern:
    """Regex matching numbers produced by ``template``; the counter is group 1."""
    parts = []
    position = 0
    counter_seen = False
    for match in _TOKEN.finditer(template):
        parts.append(re.escape(template[position:match.start()]))
        token = match.group(1)
        if token == "prefix":
            parts.append(re.escape(prefix))
        elif token == "year":
            parts.append(r"\d{4}")
        elif token in ("month", "day"):
            parts.append(r"\d{2}")
        elif not counter_seen:
            parts.append(r"(\d+)")
            counter_seen = True
        else:
            parts.append(r"\d+")
        position = match.end()
    parts.append(re.escape(template[position:]))
    return re.compile("^" + "".join(parts) + "$")


def number_field_for(module_name: str, settings: Optional[Dict] = None) -> str:
    auto = (settings or {}).get("autoNumbering") or {}
    return auto.get("field") or NUMBER_FIELDS.get(module_name) or "recordNumber"


def is_auto_numbered(module_name: str, settings: Optional[Dict] = None) -> bool:
    auto = (settings or {}).get("autoNumbering") or {}
    if "enabled" in auto:
        return bool(auto["enabled"])
    return module_name in ALWAYS_NUMBERED


def _next_after_last_record(tenant, module_name: str, template: str, prefix: str, field: str) -> Optional[int]:
    from apps.records.services.record_service import DynamicRecordService

    record = DynamicRecordService.get_latest_record(tenant, module_name)
    if not record:
        return None
    value = record.get(field)
    if value is None and module_name == "Payments":
        value = record.get("paymentNumber")
    value = str(value or "")
    match = _number_pattern(template, prefix).match(value) or _TRAILING_DIGITS.search(value)
    if not match:
        return None
    return int(match.group(1)) + 1


@transaction.atomic
def initialize_sequence(
    tenant,
    module_name: str,
    *,
    prefix: Optional[str] = None,
    format: Optional[str] = None,
    start: Optional[int] = None,
) -> AutoNumberSequence:
    """
    Create the sequence for a module, or return the existing one.

    The counter starts after the highest of: the last record's number,
    ``start`` and the module's ``autoNumbering.startFrom`` setting.
    """
    existing = AutoNumberSequence.objects.select_for_update().filter(tenant=tenant, module_name=module_name).first()
    if existing is not None:
        return existing

    settings = get_module_settings(tenant, module_name)
    auto = settings.get("autoNumbering") or {}
    prefix = prefix or auto.get("prefix") or DEFAULT_PREFIXES.get(module_name) or module_name[:3].upper()
    template = format or auto.get("format") or MODULE_FORMATS.get(module_name) or FORMATS["SIMPLE"]
    padding = int(auto.get("padding") or 0)
    first = max(int(start or 0), int(auto.get("startFrom") or 0), 1)
    derived = _next_after_last_record(tenant, module_name, template, prefix, number_field_for(module_name, settings))
    if derived is not None:
        first = max(first, derived)

    sequence = AutoNumberSequence.objects.create(
        tenant=tenant,
        module_name=module_name,
        prefix=prefix,
        format=template,
        padding=padding,
        next_number=first,
    )
    logger.info(f"Initialised {module_name} numbering for tenant {tenant.pk} at {first}")
    return sequence


@transaction.atomic
def generate_number(tenant, module_name: str, *, when: Optional[datetime.date] = None) -> str:
    initialize_sequence(tenant, module_name)
    sequence = AutoNumberSequence.objects.select_for_update().get(tenant=tenant, module_name=module_name)
    number = sequence.next_number
    sequence.next_number = number + 1
    sequence.save(update_fields=["next_number", "updated_at"])
    return format_number(sequence.format, sequence.prefix, number, when=when, padding=sequence.padding)


def preview_next_number(sequence: AutoNumberSequence, *, when: Optional[datetime.date] = None) -> str:
    return format_number(sequence.format, sequence.prefix, sequence.next_number, when=when, padding=sequence.padding)


@transaction.atomic
def update_sequence_config(
    tenant,
    module_name: str,
    *,
    prefix: Optional[str] = None,
    format: Optional[str] = None,
    padding: Optional[int] = None,
) -> AutoNumberSequence:
    sequence = initialize_sequence(tenant, module_name)
    if format is not None:
        format = FORMATS.get(format, format)
        if "{padded:" not in format and "{number}" not in format:
            raise SequenceError("Format must contain {number} or {padded:N}")
        sequence.format = format
    if prefix is not None:
        sequence.prefix = prefix
    if padding is not None:
        sequence.padding = padding
    sequence.save()
    return sequence


@transaction.atomic
def reset_sequence(tenant, module_name: str, start: int = 1) -> AutoNumberSequence:
    if start < 1:
        raise SequenceError("Sequence start must be a positive number")
    sequence = initialize_sequence(tenant, module_name)
    sequence.next_number = start
    sequence.save(update_fields=["next_number", "updated_at"])
    logger.warning(f"Reset {module_name} numbering for tenant {tenant.pk} to {start}")
    return sequence


def get_tenant_sequence_stats(tenant):
    return [
        {
            "moduleName": sequence.module_name,
            "prefix": sequence.prefix,
            "format": sequence.format,
            "nextNumber": sequence.next_number,
            "preview": preview_next_number(sequence),
            "updatedAt": sequence.updated_at.isoformat(),
        }
        for sequence in AutoNumberSequence.objects.filter(tenant=tenant).order_by("module_name")
    ]
