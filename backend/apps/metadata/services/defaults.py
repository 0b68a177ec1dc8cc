"""Standard modules every tenant starts with."""
from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List

from django.db import transaction

from ..models import ModuleConfiguration

logger = logging.getLogger(__name__)

PAYMENT_METHODS = ["Cash", "Bank Transfer", "Cheque", "UPI", "Credit Card", "Debit Card"]
GST_RATE_OPTIONS = [0, 5, 12, 18, 28]


def _field(name: str, label: str, data_type: str = "string", ui_type: str = "text", **extra) -> Dict[str, Any]:
    field = {"name": name, "label": label, "dataType": data_type, "uiType": ui_type}
    field.update(extra)
    return field


def _options(*values) -> Dict[str, Any]:
    return {"options": [{"label": value, "value": value} if isinstance(value, str) else value for value in values]}


def _lookup(module: str, display: str, *search) -> Dict[str, Any]:
    return {"targetModule": module, "displayField": display, "searchFields": list(search) or [display]}


LINE_ITEM_COLUMNS = [
    {"name": "description", "label": "Description", "type": "text"},
    {"name": "quantity", "label": "Quantity", "type": "number"},
    {"name": "unitPrice", "label": "Rate", "type": "currency"},
    {"name": "amount", "label": "Amount", "type": "currency", "formula": "quantity * unitPrice"},
]

LEAD_SETTINGS = {
    "autoNumbering": {
        "enabled": True,
        "prefix": "LD",
        "startFrom": 1000,
        "padding": 5,
        "format": "{prefix}-{number}",
    },
    "duplicateCheck": {
        "enabled": True,
        "checkFields": ["email", "phone"],
        "matchCriteria": "exact",
        "action": "warn",
    },
    "assignment": {
        "enabled": False,
        "defaultRule": "manual",
        "visibilityRules": {
            "staff": "assigned_only",
            "manager": "team_and_own",
            "owner": "all",
            "admin": "all",
        },
    },
    "scoring": {
        "enabled": False,
        "criteria": [
            {"field": "source", "weights": {"website": 20, "referral": 30, "google_ads": 25}},
            {"field": "expectedValue", "ranges": [{"min": 100000, "score": 30}, {"min": 50000, "score": 20}, {"min": 0, "score": 10}]},
        ],
        "thresholds": {"hot": 61, "warm": 31, "cold": 0},
    },
    "pipeline": {
        "enabled": True,
        "stages": ["New", "Follow-up", "Contacted", "Qualified", "Proposal", "Negotiation", "Converted", "Lost", "Unqualified", "Unreachable"],
        "defaultView": "list",
    },
    "features": {"activities": True, "notes": True, "tasks": True},
}

DEFAULT_MODULES: List[Dict[str, Any]] = [
    {
        "module_name": "Leads",
        "display_name": "Leads",
        "icon": "FiUser",
        "description": "Manage potential customers and opportunities",
        "workflow_category": "Sales",
        "fields": [
            _field("leadNumber", "Lead ID", isReadOnly=True, searchable=True, helpText="Auto-generated unique identifier"),
            _field("name", "Lead Name", isRequired=True, searchable=True),
            _field("email", "Email", ui_type="email", searchable=True, validation=[{"type": "email", "message": "Invalid email format"}]),
            _field("phone", "Phone", ui_type="phone", searchable=True),
            _field("company", "Company", searchable=True),
            _field("source", "Lead Source", ui_type="dropdown", config=_options(
                {"label": "Website", "value": "website"},
                {"label": "Referral", "value": "referral"},
                {"label": "Social Media", "value": "social_media"},
                {"label": "Cold Call", "value": "cold_call"},
                {"label": "Event", "value": "event"},
                {"label": "Google Ads", "value": "google_ads"},
                {"label": "LinkedIn", "value": "linkedin"},
                {"label": "Other", "value": "other"},
            )),
            _field("status", "Lead Status", ui_type="dropdown", isRequired=True, defaultValue="New",
                   config=_options(*LEAD_SETTINGS["pipeline"]["stages"])),
            _field("priority", "Priority", ui_type="dropdown", config=_options("Hot", "Warm", "Cold")),
            _field("leadScore", "Lead Score", data_type="number", ui_type="number", isReadOnly=True),
            _field("expectedValue", "Estimated Value", data_type="decimal", ui_type="currency", config={"currency": "INR", "decimals": 2}),
            _field("assignedTo", "Assigned To", data_type="reference", ui_type="lookup", config=_lookup("Users", "name", "name", "email")),
            _field("nextFollowUpAt", "Next Follow-up", data_type="datetime", ui_type="datetime"),
            _field("notes", "Notes", data_type="text", ui_type="textarea"),
        ],
        "module_settings": LEAD_SETTINGS,
    },
    {
        "module_name": "Clients",
        "display_name": "Clients",
        "icon": "FiUsers",
        "description": "Customers you bill",
        "workflow_category": "Sales",
        "fields": [
            _field("clientNumber", "Client Number", searchable=True, isReadOnly=True),
            _field("clientName", "Name", isRequired=True, searchable=True),
            _field("email", "Email", ui_type="email", searchable=True, validation=[{"type": "email"}]),
            _field("phone", "Phone", ui_type="phone", searchable=True),
            _field("company", "Company", searchable=True),
            _field("gstin", "GST Number", validation=[{"type": "gstin"}]),
            _field("billingAddress", "Billing Address", data_type="text", ui_type="textarea"),
            _field("shippingAddress", "Shipping Address", data_type="text", ui_type="textarea"),
            _field("state", "State"),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="active", config=_options("active", "inactive")),
        ],
        "module_settings": {
            "duplicateCheck": {"enabled": True, "checkFields": ["email", "gstin"], "matchCriteria": "exact", "action": "warn"},
        },
    },
    {
        "module_name": "Quotations",
        "display_name": "Quotations",
        "icon": "FiFileText",
        "description": "Price offers sent to clients",
        "workflow_category": "Sales",
        "fields": [
            _field("quotationNumber", "Quotation Number", searchable=True, isReadOnly=True),
            _field("clientId", "Client", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("Clients", "clientName", "clientName", "email")),
            _field("quotationDate", "Quotation Date", data_type="date", ui_type="date", isRequired=True),
            _field("validUntil", "Valid Until", data_type="date", ui_type="date"),
            _field("items", "Line Items", data_type="table", ui_type="table", isRequired=True, config={"columns": LINE_ITEM_COLUMNS}),
            _field("subtotal", "Subtotal", data_type="decimal", ui_type="currency", isRequired=True),
            _field("gstPercentage", "GST %", data_type="number", ui_type="dropdown", config=_options(*[{"label": f"{r}%", "value": r} for r in GST_RATE_OPTIONS])),
            _field("taxAmount", "Tax", data_type="decimal", ui_type="currency"),
            _field("totalAmount", "Total", data_type="decimal", ui_type="currency", isRequired=True),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="Draft",
                   config=_options("Draft", "Sent", "Accepted", "Rejected", "Expired", "Converted")),
        ],
        "module_settings": {},
    },
    {
        "module_name": "Orders",
        "display_name": "Orders",
        "icon": "FiShoppingCart",
        "description": "Confirmed client orders",
        "workflow_category": "Sales",
        "fields": [
            _field("orderNumber", "Order Number", searchable=True, isReadOnly=True),
            _field("clientId", "Client", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("Clients", "clientName", "clientName", "email")),
            _field("orderDate", "Order Date", data_type="date", ui_type="date", isRequired=True),
            _field("deliveryDate", "Expected Delivery", data_type="date", ui_type="date"),
            _field("items", "Line Items", data_type="table", ui_type="table", isRequired=True, config={"columns": LINE_ITEM_COLUMNS}),
            _field("subtotal", "Subtotal", data_type="decimal", ui_type="currency", isRequired=True),
            _field("taxAmount", "Tax", data_type="decimal", ui_type="currency"),
            _field("totalAmount", "Total", data_type="decimal", ui_type="currency", isRequired=True),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="Pending",
                   config=_options("Pending", "Confirmed", "Processing", "Shipped", "Delivered", "Cancelled", "Invoiced")),
        ],
        "module_settings": {},
    },
    {
        "module_name": "Invoices",
        "display_name": "Invoices",
        "icon": "FiFile",
        "description": "Bills raised against orders",
        "workflow_category": "Finance",
        "fields": [
            _field("invoiceNumber", "Invoice Number", searchable=True, isReadOnly=True),
            _field("clientId", "Client", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("Clients", "clientName", "clientName", "email")),
            _field("invoiceDate", "Invoice Date", data_type="date", ui_type="date", isRequired=True),
            _field("dueDate", "Due Date", data_type="date", ui_type="date", isRequired=True),
            _field("items", "Line Items", data_type="table", ui_type="table", isRequired=True, config={"columns": LINE_ITEM_COLUMNS}),
            _field("subtotal", "Subtotal", data_type="decimal", ui_type="currency", isRequired=True),
            _field("taxAmount", "Tax", data_type="decimal", ui_type="currency"),
            _field("totalAmount", "Total", data_type="decimal", ui_type="currency", isRequired=True),
            _field("paidAmount", "Paid", data_type="decimal", ui_type="currency", isReadOnly=True),
            _field("balanceAmount", "Balance", data_type="decimal", ui_type="currency", isReadOnly=True),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="Draft",
                   config=_options("Draft", "Sent", "Paid", "Overdue", "Cancelled")),
        ],
        "module_settings": {},
    },
    {
        "module_name": "Payments",
        "display_name": "Payments",
        "icon": "FiDollarSign",
        "description": "Money received from clients",
        "workflow_category": "Finance",
        "fields": [
            _field("paymentNumber", "Payment Number", searchable=True, isReadOnly=True),
            _field("invoiceId", "Invoice", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("Invoices", "invoiceNumber")),
            _field("paymentDate", "Payment Date", data_type="date", ui_type="date", isRequired=True),
            _field("amount", "Amount", data_type="decimal", ui_type="currency", isRequired=True),
            _field("paymentMethod", "Payment Method", ui_type="dropdown", isRequired=True, config=_options(*PAYMENT_METHODS)),
            _field("referenceNumber", "Reference Number"),
            _field("notes", "Notes", data_type="text", ui_type="textarea"),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="Completed", config=_options("Pending", "Completed", "Failed")),
        ],
        "module_settings": {},
    },
    {
        "module_name": "Vendors",
        "display_name": "Vendors",
        "icon": "FiTruck",
        "description": "Suppliers of goods and services",
        "workflow_category": "Purchase",
        "fields": [
            _field("vendorNumber", "Vendor Number", searchable=True),
            _field("vendorName", "Vendor Name", isRequired=True, searchable=True),
            _field("email", "Email", ui_type="email", searchable=True),
            _field("phone", "Phone", ui_type="phone", searchable=True),
            _field("company", "Company", searchable=True),
            _field("gstNumber", "GST Number", validation=[{"type": "gstin"}]),
            _field("address", "Address", data_type="text", ui_type="textarea"),
            _field("rating", "Rating", data_type="number", ui_type="number", validation=[{"type": "min", "config": {"value": 0}}, {"type": "max", "config": {"value": 5}}]),
            _field("paymentTerms", "Payment Terms", ui_type="dropdown", config=_options("Net 15", "Net 30", "Net 45", "Net 60", "Due on Receipt", "Custom")),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="active", config=_options("active", "inactive")),
        ],
        "module_settings": {
            "autoNumbering": {"enabled": True, "prefix": "VEN", "format": "{prefix}-{padded:4}"},
        },
    },
    {
        "module_name": "PurchaseRequests",
        "display_name": "Purchase Requests",
        "icon": "FiClipboard",
        "description": "Internal requests to buy",
        "workflow_category": "Purchase",
        "fields": [
            _field("requestNumber", "Request Number", searchable=True),
            _field("requestedBy", "Requested By", isRequired=True),
            _field("requestDate", "Request Date", data_type="date", ui_type="date", isRequired=True),
            _field("requiredBy", "Required By", data_type="date", ui_type="date"),
            _field("items", "Items", data_type="table", ui_type="table", isRequired=True, config={"columns": [
                {"name": "itemCode", "label": "Item Code", "type": "text"},
                {"name": "description", "label": "Description", "type": "text"},
                {"name": "quantity", "label": "Quantity", "type": "number"},
                {"name": "estimatedRate", "label": "Est. Rate", "type": "currency"},
            ]}),
            _field("justification", "Justification", data_type="text", ui_type="textarea"),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="draft",
                   config=_options("draft", "pending_approval", "approved", "rejected", "converted_to_po")),
        ],
        "module_settings": {
            "autoNumbering": {"enabled": True, "prefix": "PR", "format": "{prefix}/{year}/{padded:4}"},
        },
    },
    {
        "module_name": "PurchaseOrders",
        "display_name": "Purchase Orders",
        "icon": "FiPackage",
        "description": "Orders placed with vendors",
        "workflow_category": "Purchase",
        "fields": [
            _field("poNumber", "PO Number", searchable=True),
            _field("vendorId", "Vendor", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("Vendors", "vendorName", "vendorName", "email")),
            _field("orderDate", "Order Date", data_type="date", ui_type="date", isRequired=True),
            _field("deliveryDate", "Expected Delivery", data_type="date", ui_type="date"),
            _field("items", "Line Items", data_type="table", ui_type="table", isRequired=True),
            _field("subtotal", "Subtotal", data_type="decimal", ui_type="currency", isRequired=True),
            _field("taxAmount", "Tax", data_type="decimal", ui_type="currency"),
            _field("totalAmount", "Total", data_type="decimal", ui_type="currency", isRequired=True),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="draft",
                   config=_options("draft", "sent", "confirmed", "partially_received", "fully_received", "cancelled")),
        ],
        "module_settings": {
            "autoNumbering": {"enabled": True, "prefix": "PO", "format": "{prefix}/{year}/{padded:4}"},
        },
    },
    {
        "module_name": "GoodsReceipts",
        "display_name": "Goods Receipts",
        "icon": "FiInbox",
        "description": "Goods received against purchase orders",
        "workflow_category": "Purchase",
        "fields": [
            _field("grnNumber", "GRN Number", searchable=True),
            _field("poId", "Purchase Order", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("PurchaseOrders", "poNumber")),
            _field("receiptDate", "Receipt Date", data_type="date", ui_type="date", isRequired=True),
            _field("receivedBy", "Received By", isRequired=True),
            _field("items", "Items Received", data_type="table", ui_type="table", isRequired=True, config={"columns": [
                {"name": "itemCode", "label": "Item Code", "type": "text"},
                {"name": "receivedQty", "label": "Received Qty", "type": "number"},
                {"name": "acceptedQty", "label": "Accepted Qty", "type": "number"},
                {"name": "rejectedQty", "label": "Rejected Qty", "type": "number"},
            ]}),
            _field("notes", "Notes", data_type="text", ui_type="textarea"),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="received", config=_options("received", "cancelled")),
        ],
        "module_settings": {
            "autoNumbering": {"enabled": True, "prefix": "GRN", "format": "{prefix}/{year}/{padded:4}"},
        },
    },
    {
        "module_name": "VendorBills",
        "display_name": "Vendor Bills",
        "icon": "FiFileMinus",
        "description": "Bills received from vendors",
        "workflow_category": "Purchase",
        "fields": [
            _field("billNumber", "Bill Number", isRequired=True, searchable=True),
            _field("vendorId", "Vendor", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("Vendors", "vendorName", "vendorName", "email")),
            _field("poId", "Purchase Order", data_type="reference", ui_type="lookup", config=_lookup("PurchaseOrders", "poNumber")),
            _field("billDate", "Bill Date", data_type="date", ui_type="date", isRequired=True),
            _field("dueDate", "Due Date", data_type="date", ui_type="date", isRequired=True),
            _field("totalAmount", "Total", data_type="decimal", ui_type="currency", isRequired=True),
            _field("tds", "TDS", data_type="decimal", ui_type="currency"),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="pending",
                   config=_options("pending", "approved", "posted", "paid", "cancelled")),
        ],
        "module_settings": {},
    },
    {
        "module_name": "VendorPayments",
        "display_name": "Vendor Payments",
        "icon": "FiCreditCard",
        "description": "Payments made to vendors",
        "workflow_category": "Purchase",
        "fields": [
            _field("paymentNumber", "Payment Number", searchable=True),
            _field("billId", "Vendor Bill", data_type="reference", ui_type="lookup", isRequired=True, config=_lookup("VendorBills", "billNumber")),
            _field("paymentDate", "Payment Date", data_type="date", ui_type="date", isRequired=True),
            _field("amount", "Amount", data_type="decimal", ui_type="currency", isRequired=True),
            _field("paymentMethod", "Payment Method", ui_type="dropdown", isRequired=True, config=_options(*PAYMENT_METHODS)),
            _field("referenceNumber", "Reference Number"),
            _field("notes", "Notes", data_type="text", ui_type="textarea"),
            _field("status", "Status", ui_type="dropdown", isRequired=True, defaultValue="completed", config=_options("pending", "completed", "failed")),
        ],
        "module_settings": {
            "autoNumbering": {"enabled": True, "prefix": "VP", "format": "{prefix}-{padded:5}"},
        },
    },
]


@transaction.atomic
def seed_default_modules(tenant, user=None) -> List[ModuleConfiguration]:
    """Create the active v1 configuration of each default module the tenant is missing."""
    existing = set(
        ModuleConfiguration.objects.filter(tenant=tenant).values_list("module_name", flat=True)
    )
    created = []
    for position, definition in enumerate(DEFAULT_MODULES, start=1):
        if definition["module_name"] in existing:
            continue
        attrs = copy.deepcopy(definition)
        created.append(
            ModuleConfiguration.objects.create(
                tenant=tenant,
                position=position,
                status=ModuleConfiguration.Status.ACTIVE,
                version=1,
                created_by=user,
                **attrs,
            )
        )
    if created:
        logger.info(f"Created {len(created)} default modules for tenant {tenant.pk}")
    return created
