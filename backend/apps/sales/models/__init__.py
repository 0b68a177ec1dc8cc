from .base import TypedRecord, to_primitive  # noqa: F401
from .client import Client
from .documents import Invoice, Order, Quotation
from .lead import Lead
from .payment import Payment

# Modules whose records live in dedicated tables
TYPED_MODELS = {
    "Leads": Lead,
    "Clients": Client,
    "Quotations": Quotation,
    "Orders": Order,
    "Invoices": Invoice,
    "Payments": Payment,
}

__all__ = ["TypedRecord", "Lead", "Client", "Quotation", "Order", "Invoice", "Payment", "TYPED_MODELS"]
