"""Lead → Client → Quotation → Order → Invoice conversions."""
from __future__ import annotations

import datetime
import logging
from typing import Any, Dict

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.audit.utils import log_audit_event
from apps.metadata.services import get_module_settings
from apps.metadata.services.numbering import generate_number, number_field_for
from apps.records.exceptions import RecordNotFound
from apps.records.services.record_service import DynamicRecordService

logger = logging.getLogger(__name__)


class ConversionError(ValueError):
    pass


def _load(tenant, module_name: str, record_id) -> Dict[str, Any]:
    record = DynamicRecordService.get_record(tenant, module_name, record_id)
    if record is None:
        raise RecordNotFound(module_name, record_id)
    return record


def _create_numbered(tenant, module_name: str, data: Dict[str, Any], user) -> Dict[str, Any]:
    field = number_field_for(module_name, get_module_settings(tenant, module_name))
    if not data.get(field):
        data[field] = generate_number(tenant, module_name)
    return DynamicRecordService.create_record(tenant, module_name, data, user=user)


@transaction.atomic
def convert_lead_to_client(tenant, lead_id, user=None) -> Dict[str, Any]:
    lead = _load(tenant, "Leads", lead_id)
    if lead.get("convertedToClientId") or lead.get("status") == "Converted":
        raise ConversionError("Lead has already been converted to a client")

    client = _create_numbered(
        tenant,
        "Clients",
        {
            "clientName": lead.get("name") or lead.get("clientName") or "",
            "email": lead.get("email") or "",
            "phone": lead.get("phone") or "",
            "company": lead.get("company") or "",
            "gstNumber": lead.get("gstNumber") or lead.get("gst") or lead.get("gstin") or "",
            "sourceLeadId": lead["id"],
            "status": "active",
        },
        user,
    )
    DynamicRecordService.update_record(
        tenant,
        "Leads",
        lead["id"],
        {"status": "Converted", "convertedToClientId": client["id"], "convertedDate": timezone.now().isoformat()},
        user=user,
    )
    log_audit_event(
        tenant=tenant,
        user=user,
        action="convert_lead_to_client",
        entity="Leads",
        entity_id=lead["id"],
        metadata={"leadId": lead["id"], "clientId": client["id"], "clientName": client.get("clientName")},
    )
    logger.info(f"Lead {lead['id']} converted to client {client['id']} for tenant {tenant.pk}")
    return {"success": True, "clientId": client["id"], "client": client}


@transaction.atomic
def convert_quotation_to_order(tenant, quotation_id, user=None) -> Dict[str, Any]:
    quotation = _load(tenant, "Quotations", quotation_id)
    if quotation.get("convertedToOrderId") or quotation.get("status") == "Converted":
        raise ConversionError("Quotation has already been converted to an order")

    order_data = {
        "clientId": quotation.get("clientId"),
        "clientName": quotation.get("clientName") or "",
        "quotationId": quotation["id"],
        "items": quotation.get("items") or [],
        "subtotal": quotation.get("subtotal") or 0,
        "discountAmount": quotation.get("discountAmount") or 0,
        "gstPercentage": quotation.get("gstPercentage") or 0,
        "taxAmount": quotation.get("taxAmount") or 0,
        "totalAmount": quotation.get("totalAmount") or 0,
        "orderDate": timezone.localdate().isoformat(),
        "status": "Pending",
    }
    if quotation.get("notes"):
        order_data["notes"] = quotation["notes"]
    order = _create_numbered(tenant, "Orders", order_data, user)
    DynamicRecordService.update_record(
        tenant,
        "Quotations",
        quotation["id"],
        {"status": "Converted", "convertedToOrderId": order["id"], "convertedDate": timezone.now().isoformat()},
        user=user,
    )
    log_audit_event(
        tenant=tenant,
        user=user,
        action="convert_quotation_to_order",
        entity="Quotations",
        entity_id=quotation["id"],
        metadata={"quotationId": quotation["id"], "orderId": order["id"], "itemCount": len(order_data["items"])},
    )
    logger.info(f"Quotation {quotation['id']} converted to order {order['id']} for tenant {tenant.pk}")
    return {"success": True, "orderId": order["id"], "order": order}


@transaction.atomic
def convert_order_to_invoice(tenant, order_id, user=None) -> Dict[str, Any]:
    order = _load(tenant, "Orders", order_id)
    if order.get("convertedToInvoiceId") or order.get("status") == "Invoiced":
        raise ConversionError("Order has already been invoiced")

    today = timezone.localdate()
    invoice_data = {
        "clientId": order.get("clientId"),
        "clientName": order.get("clientName") or "",
        "orderId": order["id"],
        "items": order.get("items") or [],
        "subtotal": order.get("subtotal") or 0,
        "discountAmount": order.get("discountAmount") or 0,
        "gstPercentage": order.get("gstPercentage") or 0,
        "taxAmount": order.get("taxAmount") or 0,
        "totalAmount": order.get("totalAmount") or 0,
        "paidAmount": 0,
        "balanceAmount": order.get("totalAmount") or 0,
        "invoiceDate": today.isoformat(),
        "dueDate": (today + datetime.timedelta(days=settings.INVOICE_DUE_DAYS)).isoformat(),
    }
    if order.get("notes"):
        invoice_data["notes"] = order["notes"]
    invoice = _create_numbered(tenant, "Invoices", invoice_data, user)
    DynamicRecordService.update_record(
        tenant,
        "Orders",
        order["id"],
        {"status": "Invoiced", "convertedToInvoiceId": invoice["id"], "convertedDate": timezone.now().isoformat()},
        user=user,
    )
    log_audit_event(
        tenant=tenant,
        user=user,
        action="convert_order_to_invoice",
        entity="Orders",
        entity_id=order["id"],
        metadata={"orderId": order["id"], "invoiceId": invoice["id"], "itemCount": len(invoice_data["items"])},
    )
    logger.info(f"Order {order['id']} converted to invoice {invoice['id']} for tenant {tenant.pk}")
    return {"success": True, "invoiceId": invoice["id"], "invoice": invoice}
