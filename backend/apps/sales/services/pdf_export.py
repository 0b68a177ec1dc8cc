"""Quotation and invoice PDFs rendered with reportlab."""
from __future__ import annotations

import io
import logging
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.utils.html import escape
from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .gst import calculate_gst, format_currency, get_state_code, get_state_name, to_decimal

logger = logging.getLogger(__name__)

DOCUMENTS = {
    "Quotations": ("QUOTATION", "quotationNumber", "quotationDate", "validUntil", "Valid Until"),
    "Invoices": ("TAX INVOICE", "invoiceNumber", "invoiceDate", "dueDate", "Due Date"),
}

HEADER_COLOR = colors.HexColor("#366092")
_FONT_NAME = "DocumentSans"


def _document_font() -> Optional[str]:
    """Register the configured TTF font once; None means the built-in Helvetica is used."""
    if _FONT_NAME in pdfmetrics.getRegisteredFontNames():
        return _FONT_NAME
    path = getattr(settings, "PDF_FONT_PATH", "")
    if not path:
        return None
    try:
        pdfmetrics.registerFont(TTFont(_FONT_NAME, path))
    except (TTFError, OSError) as exc:
        logger.warning(f"Could not load PDF font {path}: {exc}; falling back to Helvetica")
        return None
    return _FONT_NAME


def _money(value, unicode_font: bool) -> str:
    text = format_currency(value)
    # Helvetica has no rupee glyph
    return text if unicode_font else text.replace("₹", "Rs. ")


def _line_rows(items: List[Dict[str, Any]], unicode_font: bool) -> List[List[str]]:
    rows = [["#", "Description", "Qty", "Rate", "Amount"]]
    for index, item in enumerate(items or [], 1):
        quantity = to_decimal(item.get("quantity"))
        rate = to_decimal(item.get("unitPrice", item.get("rate")))
        amount = item.get("amount")
        amount = to_decimal(amount) if amount not in (None, "") else quantity * rate
        rows.append([
            str(index),
            str(item.get("description") or item.get("name") or item.get("itemCode") or ""),
            f"{quantity.normalize():f}",
            _money(rate, unicode_font),
            _money(amount, unicode_font),
        ])
    return rows


def _totals_rows(record: Dict[str, Any], business_gstin: str, client_gstin: str, unicode_font: bool) -> List[List[str]]:
    subtotal = to_decimal(record.get("subtotal"))
    rows = [["Subtotal", _money(subtotal, unicode_font)]]
    discount = to_decimal(record.get("discountAmount"))
    if discount:
        rows.append(["Discount", "-" + _money(discount, unicode_font)])

    rate = to_decimal(record.get("gstPercentage"))
    if rate:
        gst = calculate_gst(subtotal - discount, rate, business_gstin, client_gstin)
        if gst.gst_type == "CGST+SGST":
            rows.append([f"CGST ({gst.cgst_percentage.normalize():f}%)", _money(gst.cgst_amount, unicode_font)])
            rows.append([f"SGST ({gst.sgst_percentage.normalize():f}%)", _money(gst.sgst_amount, unicode_font)])
        elif gst.gst_type == "IGST":
            rows.append([f"IGST ({gst.igst_percentage.normalize():f}%)", _money(gst.igst_amount, unicode_font)])
    elif record.get("taxAmount"):
        rows.append(["Tax", _money(record.get("taxAmount"), unicode_font)])

    rows.append(["Total", _money(record.get("totalAmount"), unicode_font)])
    if "balanceAmount" in record and record.get("paidAmount"):
        rows.append(["Paid", _money(record.get("paidAmount"), unicode_font)])
        rows.append(["Balance Due", _money(record.get("balanceAmount"), unicode_font)])
    return rows


def render_document_pdf(
    record: Dict[str, Any],
    kind: str,
    *,
    business: Optional[Dict[str, Any]] = None,
    client: Optional[Dict[str, Any]] = None,
) -> bytes:
    """
    Render a quotation or invoice record to PDF bytes.

    ``business`` carries the seller's name, GSTIN and address; ``client`` is
    the flattened client record, when one is linked.
    """
    if kind not in DOCUMENTS:
        raise ValueError(f"PDF export is not available for {kind}")
    title, number_key, date_key, second_date_key, second_date_label = DOCUMENTS[kind]
    business = business or {}
    client = client or {}
    font = _document_font()
    unicode_font = font is not None

    styles = getSampleStyleSheet()
    if font:
        for style in styles.byName.values():
            style.fontName = font
    right = ParagraphStyle("Right", parent=styles["Normal"], alignment=TA_RIGHT)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=f"{title} {record.get(number_key) or ''}".strip())
    elements = []

    header = Table(
        [[
            Paragraph(f"<b>{escape(business.get('name') or '')}</b><br/>{escape(business.get('address') or '')}"
                      f"<br/>GSTIN: {escape(business.get('gstin') or '-')}", styles["Normal"]),
            Paragraph(f"<b>{title}</b><br/>No: {escape(record.get(number_key) or '-')}"
                      f"<br/>Date: {escape(record.get(date_key) or '-')}"
                      f"<br/>{second_date_label}: {escape(record.get(second_date_key) or '-')}", right),
        ]],
        colWidths=[3.5 * inch, 3.0 * inch],
    )
    elements.append(header)
    elements.append(Spacer(1, 0.3 * inch))

    client_gstin = client.get("gstin") or client.get("gstNumber") or ""
    state_code = get_state_code(client_gstin)
    party = [
        f"<b>Bill To:</b> {escape(client.get('clientName') or record.get('clientName') or '-')}",
        escape(client.get("billingAddress") or ""),
        f"GSTIN: {client_gstin or '-'}",
    ]
    if state_code:
        party.append(f"State: {get_state_name(state_code)} ({state_code})")
    elements.append(Paragraph("<br/>".join(line for line in party if line), styles["Normal"]))
    elements.append(Spacer(1, 0.3 * inch))

    items = Table(_line_rows(record.get("items"), unicode_font), colWidths=[0.4 * inch, 3.1 * inch, 0.7 * inch, 1.1 * inch, 1.2 * inch], repeatRows=1)
    items.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("FONTNAME", (0, 0), (-1, 0), font or "Helvetica-Bold"),
        ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
    ]))
    elements.append(items)
    elements.append(Spacer(1, 0.2 * inch))

    totals = Table(
        _totals_rows(record, business.get("gstin") or "", client_gstin, unicode_font),
        colWidths=[1.6 * inch, 1.4 * inch],
        hAlign="RIGHT",
    )
    totals.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
        ("FONTNAME", (0, -1), (-1, -1), font or "Helvetica-Bold"),
    ]))
    elements.append(totals)

    if record.get("notes"):
        elements.append(Spacer(1, 0.3 * inch))
        elements.append(Paragraph(f"<b>Notes:</b> {escape(record['notes'])}", styles["Normal"]))

    if font:
        totals.setStyle(TableStyle([("FONTNAME", (0, 0), (-1, -1), font)]))
        items.setStyle(TableStyle([("FONTNAME", (0, 1), (-1, -1), font)]))

    doc.build(elements)
    return buffer.getvalue()
