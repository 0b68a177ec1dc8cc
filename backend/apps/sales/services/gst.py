"""
Indian GST calculation.

Intra-state supplies (business and client GSTIN in the same state) split
the rate equally into CGST and SGST. Everything else, including missing or
invalid GSTINs, is treated as inter-state IGST.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional

GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$")

GST_TYPE_NONE = "NONE"
GST_TYPE_IGST = "IGST"
GST_TYPE_INTRA = "CGST+SGST"

VALID_GST_RATES = (0, 5, 12, 18, 28)

STATE_CODES = {
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "25": "Daman and Diu",
    "26": "Dadra and Nagar Haveli",
    "27": "Maharashtra",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
}

CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


def round_money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class GSTCalculation:
    subtotal: Decimal
    gst_type: str
    gst_percentage: Decimal
    cgst_percentage: Decimal = Decimal("0")
    cgst_amount: Decimal = Decimal("0")
    sgst_percentage: Decimal = Decimal("0")
    sgst_amount: Decimal = Decimal("0")
    igst_percentage: Decimal = Decimal("0")
    igst_amount: Decimal = Decimal("0")
    total_gst_amount: Decimal = Decimal("0")
    total_after_gst: Decimal = Decimal("0")
    business_state: Optional[str] = None
    client_state: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase representation with amounts as floats."""
        data = asdict(self)
        keys = {
            "subtotal": "subtotal",
            "gst_type": "gstType",
            "gst_percentage": "gstPercentage",
            "cgst_percentage": "cgstPercentage",
            "cgst_amount": "cgstAmount",
            "sgst_percentage": "sgstPercentage",
            "sgst_amount": "sgstAmount",
            "igst_percentage": "igstPercentage",
            "igst_amount": "igstAmount",
            "total_gst_amount": "totalGSTAmount",
            "total_after_gst": "totalAfterGST",
            "business_state": "businessState",
            "client_state": "clientState",
        }
        return {
            keys[name]: float(value) if isinstance(value, Decimal) else value
            for name, value in data.items()
        }


def validate_gstin(gstin: Optional[str]) -> bool:
    if not gstin or len(gstin) != 15:
        return False
    return bool(GSTIN_PATTERN.match(gstin.upper()))


def get_state_code(gstin: Optional[str]) -> Optional[str]:
    if not validate_gstin(gstin):
        return None
    return gstin[:2]


def get_state_name(state_code: Optional[str]) -> str:
    return STATE_CODES.get(state_code or "", "Unknown State")


def determine_gst_type(business_gstin: Optional[str], client_gstin: Optional[str]) -> str:
    business_state = get_state_code(business_gstin)
    client_state = get_state_code(client_gstin)
    if business_state and client_state and business_state == client_state:
        return GST_TYPE_INTRA
    return GST_TYPE_IGST


def calculate_gst(
    subtotal,
    gst_percentage,
    business_gstin: Optional[str] = None,
    client_gstin: Optional[str] = None,
    apply_gst: bool = True,
) -> GSTCalculation:
    subtotal = to_decimal(subtotal)
    rate = to_decimal(gst_percentage)
    result = GSTCalculation(subtotal=subtotal, gst_type=GST_TYPE_NONE, gst_percentage=rate, total_after_gst=subtotal)
    if not apply_gst or rate == 0 or subtotal <= 0:
        return result

    result.gst_type = determine_gst_type(business_gstin, client_gstin)
    result.business_state = get_state_code(business_gstin)
    result.client_state = get_state_code(client_gstin)

    if result.gst_type == GST_TYPE_INTRA:
        half = rate / 2
        result.cgst_percentage = half
        result.sgst_percentage = half
        result.cgst_amount = round_money(subtotal * half / 100)
        result.sgst_amount = round_money(subtotal * half / 100)
        result.total_gst_amount = result.cgst_amount + result.sgst_amount
    else:
        result.igst_percentage = rate
        result.igst_amount = round_money(subtotal * rate / 100)
        result.total_gst_amount = result.igst_amount

    result.total_after_gst = round_money(subtotal + result.total_gst_amount)
    return result


def line_items_subtotal(items: Iterable[Dict[str, Any]]) -> Decimal:
    total = Decimal("0")
    for item in items or []:
        price = item.get("unitPrice", item.get("rate"))
        total += to_decimal(item.get("quantity")) * to_decimal(price)
    return total


def calculate_from_line_items(
    items: Iterable[Dict[str, Any]],
    gst_percentage,
    business_gstin: Optional[str] = None,
    client_gstin: Optional[str] = None,
    apply_gst: bool = True,
) -> GSTCalculation:
    return calculate_gst(line_items_subtotal(items), gst_percentage, business_gstin, client_gstin, apply_gst)


def is_valid_rate(rate) -> bool:
    try:
        return to_decimal(rate) in {Decimal(value) for value in VALID_GST_RATES}
    except ValueError:
        return False


def get_available_rates() -> List[Dict[str, Any]]:
    return [{"value": rate, "label": f"{rate}% GST"} for rate in VALID_GST_RATES]


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount) -> str:
    """Format as rupees with Indian digit grouping, e.g. ``₹1,23,456.78``."""
    value = round_money(to_decimal(amount))
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    return f"{sign}₹{_group_indian(whole)}.{fraction}"


def _rate_label(rate: Decimal) -> str:
    return f"{rate.normalize():f}"


def generate_gst_summary(result: GSTCalculation) -> List[str]:
    lines = [f"Subtotal: {format_currency(result.subtotal)}"]
    if result.gst_type == GST_TYPE_INTRA:
        lines.append(f"CGST ({_rate_label(result.cgst_percentage)}%): {format_currency(result.cgst_amount)}")
        lines.append(f"SGST ({_rate_label(result.sgst_percentage)}%): {format_currency(result.sgst_amount)}")
    elif result.gst_type == GST_TYPE_IGST:
        lines.append(f"IGST ({_rate_label(result.igst_percentage)}%): {format_currency(result.igst_amount)}")
    lines.append(f"Total GST: {format_currency(result.total_gst_amount)}")
    lines.append(f"Total Amount: {format_currency(result.total_after_gst)}")
    return lines
