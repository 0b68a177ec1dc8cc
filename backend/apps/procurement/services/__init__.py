from .purchase_flow import (
    PurchaseFlowError,
    convert_pr_to_po,
    create_grn,
    get_suggested_vendors,
    post_bill_to_expense,
    validate_grn,
)

__all__ = [
    "PurchaseFlowError",
    "convert_pr_to_po",
    "create_grn",
    "get_suggested_vendors",
    "post_bill_to_expense",
    "validate_grn",
]
