"""
Purchase flow over EAV modules.

Vendors, rate catalogs, purchase requests and orders, goods receipts,
vendor bills and expenses are all plain ``DynamicRecord`` modules; these
helpers only move data between them.
"""
from __future__ import annotations

import datetime
import logging
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.audit.utils import log_audit_event
from apps.metadata.services import get_module_settings
from apps.records.exceptions import RecordNotFound
from apps.records.services.filters import to_date, to_number
from apps.records.services.pipeline import fill_record_number
from apps.records.services.record_service import DynamicRecordService

logger = logging.getLogger(__name__)


class PurchaseFlowError(ValueError):
    pass


def _num(value, default: float = 0) -> float:
    number = to_number(value)
    return default if number is None else number


def _load(tenant, module_name: str, record_id) -> Dict[str, Any]:
    record = DynamicRecordService.get_record(tenant, module_name, record_id)
    if record is None:
        raise RecordNotFound(module_name, record_id)
    return record


def _create(tenant, module_name: str, data: Dict[str, Any], user) -> Dict[str, Any]:
    data = fill_record_number(tenant, module_name, data, get_module_settings(tenant, module_name))
    return DynamicRecordService.create_record(tenant, module_name, data, user=user)


def get_suggested_vendors(tenant, item_code: str, quantity: float = 1) -> List[Dict[str, Any]]:
    """Vendors with a valid rate for the item, cheapest first and best rated on ties."""
    today = timezone.localdate()
    quantity = _num(quantity, 1)
    suggestions = []
    for catalog in DynamicRecordService.get_records(tenant, "RateCatalogs"):
        if str(catalog.get("itemCode") or "").lower() != str(item_code).lower():
            continue
        if catalog.get("status") not in (None, "", "active"):
            continue
        valid_from = to_date(catalog.get("validFrom"))
        valid_to = to_date(catalog.get("validTo"))
        if (valid_from and valid_from > today) or (valid_to and valid_to < today):
            continue
        moq = _num(catalog.get("moq"), 1) or 1
        if quantity < moq:
            continue
        vendor = DynamicRecordService.get_record(tenant, "Vendors", catalog.get("vendorId"))
        if vendor is None:
            continue

        rate = _num(catalog.get("rate"))
        discount = _num(catalog.get("discount"))
        discount_type = catalog.get("discountType") or "percentage"
        if discount_type == "flat":
            final_rate = rate - discount
        else:
            final_rate = rate * (1 - discount / 100)
        lead_time = int(_num(catalog.get("leadTime"), 0) or settings.PO_DEFAULT_LEAD_DAYS)

        suggestions.append({
            "vendorId": vendor["id"],
            "vendorName": vendor.get("vendorName"),
            "vendorCode": vendor.get("vendorCode") or vendor.get("vendorNumber"),
            "rating": _num(vendor.get("rating")),
            "rate": rate,
            "discount": discount,
            "discountType": discount_type,
            "finalRate": round(final_rate, 2),
            "moq": moq,
            "leadTime": lead_time,
            "estimatedDelivery": (today + datetime.timedelta(days=lead_time)).isoformat(),
        })

    suggestions.sort(key=lambda item: (item["finalRate"], -item["rating"]))
    return suggestions


@transaction.atomic
def convert_pr_to_po(
    tenant,
    pr_id,
    vendor_id,
    user=None,
    *,
    delivery_date: Optional[str] = None,
    payment_terms: Optional[str] = None,
    shipping_address: Any = None,
    billing_address: Any = None,
) -> Dict[str, Any]:
    pr = _load(tenant, "PurchaseRequests", pr_id)
    if pr.get("status") != "approved":
        raise PurchaseFlowError("Purchase Request must be approved before conversion")
    vendor = _load(tenant, "Vendors", vendor_id)

    subtotal = 0.0
    tax_amount = 0.0
    lines = []
    for item in pr.get("items") or []:
        quantity = _num(item.get("quantity"))
        rate = _num(item.get("estimatedRate", item.get("rate")))
        amount = quantity * rate
        tax = amount * _num(item.get("taxRate")) / 100
        subtotal += amount
        tax_amount += tax
        lines.append({
            **item,
            "rate": rate,
            "amount": round(amount + tax, 2),
            "pendingQuantity": quantity,
            "receivedQuantity": 0,
        })

    today = timezone.localdate()
    po_data = {
        "prId": pr["id"],
        "prNumber": pr.get("requestNumber") or pr.get("prNumber"),
        "vendorId": vendor["id"],
        "vendorName": vendor.get("vendorName"),
        "orderDate": today.isoformat(),
        "deliveryDate": delivery_date or (today + datetime.timedelta(days=settings.PO_DEFAULT_LEAD_DAYS)).isoformat(),
        "items": lines,
        "subtotal": round(subtotal, 2),
        "taxAmount": round(tax_amount, 2),
        "totalAmount": round(subtotal + tax_amount, 2),
        "receivedQuantity": 0,
        "pendingQuantity": sum(line["pendingQuantity"] for line in lines),
        "paymentTerms": payment_terms or vendor.get("paymentTerms") or "Net 30",
        "status": "draft",
    }
    if shipping_address:
        po_data["shippingAddress"] = shipping_address
    if billing_address:
        po_data["billingAddress"] = billing_address

    po = _create(tenant, "PurchaseOrders", po_data, user)
    DynamicRecordService.update_record(
        tenant,
        "PurchaseRequests",
        pr["id"],
        {"status": "converted_to_po", "convertedToPO": True, "poId": po["id"]},
        user=user,
    )
    log_audit_event(
        tenant=tenant,
        user=user,
        action="convert_pr_to_po",
        entity="PurchaseRequests",
        entity_id=pr["id"],
        metadata={"prId": pr["id"], "poId": po["id"], "vendorId": vendor["id"]},
    )
    logger.info(f"Purchase request {pr['id']} converted to PO {po['id']} for tenant {tenant.pk}")
    return po


def _received_so_far(tenant, po_id: str) -> Dict[str, float]:
    received: Dict[str, float] = {}
    for grn in DynamicRecordService.get_records(tenant, "GoodsReceipts"):
        if str(grn.get("poId")) != str(po_id) or grn.get("status") == "cancelled":
            continue
        for item in grn.get("items") or []:
            code = item.get("itemCode")
            received[code] = received.get(code, 0) + _num(item.get("acceptedQty"))
    return received


def _quantities_by_code(lines, field: str) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for line in lines or []:
        code = line.get("itemCode")
        totals[code] = totals.get(code, 0) + _num(line.get(field))
    return totals


def validate_grn(tenant, po_id, items: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    po = _load(tenant, "PurchaseOrders", po_id)
    items = list(items or [])
    ordered = _quantities_by_code(po.get("items"), "quantity")
    received = _received_so_far(tenant, po["id"])

    errors: List[str] = []
    warnings: List[str] = []
    for item in items:
        code = item.get("itemCode")
        if code not in ordered:
            continue
        accepted = _num(item.get("acceptedQty"))
        received_qty = _num(item.get("receivedQty"))
        if received_qty != accepted:
            warnings.append(f"Item {code}: Received qty ({received_qty:g}) differs from accepted qty ({accepted:g})")

    # repeated lines for one item count together
    for code, accepted in _quantities_by_code(items, "acceptedQty").items():
        if code not in ordered:
            errors.append(f"Item {code} not found in PO")
            continue
        total = received.get(code, 0) + accepted
        if total > ordered[code]:
            errors.append(f"Item {code}: Total received ({total:g}) exceeds PO quantity ({ordered[code]:g})")

    return {"isValid": not errors, "errors": errors, "warnings": warnings}


@transaction.atomic
def create_grn(tenant, po_id, data: Dict[str, Any], user=None) -> Dict[str, Any]:
    items = data.get("items") or []
    validation = validate_grn(tenant, po_id, items)
    if not validation["isValid"]:
        raise PurchaseFlowError(f"GRN validation failed: {', '.join(validation['errors'])}")

    po = _load(tenant, "PurchaseOrders", po_id)
    grn = _create(
        tenant,
        "GoodsReceipts",
        {
            **data,
            "poId": po["id"],
            "poNumber": po.get("poNumber"),
            "vendorId": po.get("vendorId"),
            "vendorName": po.get("vendorName"),
            "hasDiscrepancy": bool(validation["warnings"]),
            "discrepancyNote": "; ".join(validation["warnings"]),
            "status": "received",
        },
        user,
    )

    accepted = _quantities_by_code(items, "acceptedQty")
    po_lines = po.get("items") or []
    last_index = {line.get("itemCode"): index for index, line in enumerate(po_lines)}
    lines = []
    for index, line in enumerate(po_lines):
        code = line.get("itemCode")
        quantity = _num(line.get("quantity"))
        already = _num(line.get("receivedQuantity"))
        # fill lines of the same item in order; the last one takes any remainder
        take = accepted.get(code, 0)
        if index != last_index[code]:
            take = min(take, max(quantity - already, 0))
        accepted[code] = accepted.get(code, 0) - take
        received = already + take
        lines.append({**line, "receivedQuantity": received, "pendingQuantity": max(quantity - received, 0)})

    total_ordered = sum(_num(line.get("quantity")) for line in lines)
    total_received = sum(line["receivedQuantity"] for line in lines)
    changes = {
        "items": lines,
        "receivedQuantity": total_received,
        "pendingQuantity": max(total_ordered - total_received, 0),
    }
    if total_received >= total_ordered:
        changes["status"] = "fully_received"
    elif total_received > 0:
        changes["status"] = "partially_received"
    DynamicRecordService.update_record(tenant, "PurchaseOrders", po["id"], changes, user=user)

    logger.info(f"GRN {grn['id']} recorded against PO {po['id']} for tenant {tenant.pk}")
    return {"grn": grn, "validation": validation}


@transaction.atomic
def post_bill_to_expense(tenant, bill_id, user=None) -> Dict[str, Any]:
    bill = _load(tenant, "VendorBills", bill_id)
    if bill.get("postedToExpense"):
        raise PurchaseFlowError("Bill already posted to expense")
    if bill.get("status") != "approved":
        raise PurchaseFlowError("Bill must be approved before posting")

    total = _num(bill.get("totalAmount"))
    tds = _num(bill.get("tds"))
    expense = _create(
        tenant,
        "Expenses",
        {
            "expenseType": "vendor_bill",
            "billId": bill["id"],
            "billNumber": bill.get("billNumber"),
            "vendorId": bill.get("vendorId"),
            "vendorName": bill.get("vendorName"),
            "date": bill.get("vendorInvoiceDate") or timezone.localdate().isoformat(),
            "amount": total,
            "tdsAmount": tds,
            "netAmount": round(total - tds, 2),
            "status": "posted",
            "paymentStatus": "paid" if _num(bill.get("paidAmount")) >= total else "pending",
        },
        user,
    )
    DynamicRecordService.update_record(
        tenant,
        "VendorBills",
        bill["id"],
        {"status": "posted", "postedToExpense": True, "expensePostingId": expense["id"]},
        user=user,
    )
    log_audit_event(
        tenant=tenant,
        user=user,
        action="post_bill_to_expense",
        entity="VendorBills",
        entity_id=bill["id"],
        metadata={"billId": bill["id"], "expenseId": expense["id"], "amount": total},
    )
    logger.info(f"Vendor bill {bill['id']} posted to expense {expense['id']} for tenant {tenant.pk}")
    return expense
