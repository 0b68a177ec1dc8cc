from __future__ import annotations

import logging
from typing import Any, Dict

from django.utils import timezone

from apps.audit.utils import log_audit_event
from apps.records.exceptions import RecordNotFound
from apps.records.services.record_service import DynamicRecordService
from .gst import round_money, to_decimal

logger = logging.getLogger(__name__)


def settle_payment(tenant, payment: Dict[str, Any], *, user=None) -> Dict[str, Any]:
    """
    Apply a payment to its invoice.

    ``paidAmount`` grows by the payment amount and ``balanceAmount`` is
    recomputed from the invoice total. A balance of zero or less marks the
    invoice paid; anything else marks it partially paid.
    """
    invoice_id = payment.get("invoiceId")
    invoice = DynamicRecordService.get_record(tenant, "Invoices", invoice_id)
    if invoice is None:
        raise RecordNotFound("Invoices", invoice_id)

    amount = to_decimal(payment.get("amount"))
    total = to_decimal(invoice.get("totalAmount", invoice.get("total")))
    paid = round_money(to_decimal(invoice.get("paidAmount")) + amount)
    balance = round_money(total - paid)

    changes: Dict[str, Any] = {"paidAmount": float(paid), "balanceAmount": float(balance)}
    if balance <= 0:
        changes.update(status="Paid", paymentStatus="Paid", paidDate=timezone.localdate().isoformat())
    else:
        changes["paymentStatus"] = "Partial"

    updated = DynamicRecordService.update_record(tenant, "Invoices", invoice["id"], changes)
    log_audit_event(
        tenant=tenant,
        user=user,
        action="payment_received",
        entity="Invoices",
        entity_id=invoice["id"],
        changes={
            "paidAmount": {"before": invoice.get("paidAmount"), "after": float(paid)},
            "balanceAmount": {"before": invoice.get("balanceAmount"), "after": float(balance)},
        },
        metadata={"paymentId": payment.get("id"), "amount": float(amount)},
    )
    logger.info(f"Payment {payment.get('id')} applied to invoice {invoice['id']}, balance {balance}")
    return updated
