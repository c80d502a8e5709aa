"""
Invoice documents: PDF (reportlab) and HTML (jinja2).

Both renderings are driven off the same context built by ``invoice_context``
so the numbers shown in a downloaded PDF, the e-mailed attachment and the
browser view always agree.
"""
import io
import logging
import os
from datetime import datetime
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, select_autoescape
from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from invoicepro.core.config import settings
from invoicepro.models.customer import Customer
from invoicepro.models.invoice import Invoice

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)

# ─── PDF LAYOUT ───
W, H = A4
MARGIN = 56
HEADER_BLUE = Color(66 / 255, 139 / 255, 202 / 255)
STRIPE = HexColor("#F3F4F6")
TEXT_MUTED = HexColor("#4B5563")
ROW_HEIGHT = 18
# (title, x offset from left margin, right-aligned)
COLUMNS = [
    ("Product", 0, False),
    ("SKU", 170, False),
    ("Qty", 290, True),
    ("Price", 360, True),
    ("Discount", 420, True),
    ("Total", W - 2 * MARGIN, True),
]


def format_money(value: Any) -> str:
    return f"{settings.CURRENCY_SYMBOL}{float(value):.2f}"


def format_percent(value: float) -> str:
    return f"{value:g}%"


def display_date(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d")
    except (AttributeError, ValueError):
        return str(value)[:10]


def invoice_context(invoice: Invoice, customer: Customer) -> Dict[str, Any]:
    return {
        "company": {
            "name": settings.COMPANY_NAME,
            "address_lines": settings.COMPANY_ADDRESS_LINES,
            "email": settings.COMPANY_EMAIL,
            "phone": settings.COMPANY_PHONE,
        },
        "invoice": {
            "number": invoice.invoiceNumber,
            "date": display_date(invoice.createdAt),
            "due_date": display_date(invoice.dueDate),
            "status": invoice.status,
            "payment_status": invoice.paymentStatus,
        },
        "customer": {
            "name": customer.name,
            "address": customer.address,
            "email": customer.email,
            "phone": customer.phone,
            "gst_id": customer.gstId,
        },
        "items": [
            {
                "product": item.productName,
                "sku": item.sku,
                "quantity": str(item.quantity),
                "price": format_money(item.price),
                "discount": format_percent(item.discount),
                "total": format_money(item.total),
            }
            for item in invoice.items
        ],
        "totals": {
            "subtotal": format_money(invoice.subtotal),
            "discount": format_money(invoice.discountAmount),
            "tax": format_money(invoice.taxAmount),
            "total": format_money(invoice.total),
        },
        "payment_terms": settings.PAYMENT_TERMS,
    }


def render_invoice_html(invoice: Invoice, customer: Customer) -> str:
    return _env.get_template("invoice.html").render(**invoice_context(invoice, customer))


def render_invoice_email_html(invoice: Invoice, customer: Customer) -> str:
    return _env.get_template("invoice_email.html").render(**invoice_context(invoice, customer))


class InvoicePDF:
    """Draws one invoice onto an A4 canvas, breaking the items table across pages as needed."""

    def __init__(self, context: Dict[str, Any]):
        self.ctx = context
        self.buffer = io.BytesIO()
        self.c = canvas.Canvas(self.buffer, pagesize=A4)
        self.c.setTitle(f"Invoice {context['invoice']['number']}")
        self.c.setAuthor(context["company"]["name"])
        self.y = H - MARGIN

    def render(self) -> bytes:
        self._header()
        self._bill_to()
        self._items_table()
        self._totals()
        self._terms()
        self.c.showPage()
        self.c.save()
        return self.buffer.getvalue()

    def _text(self, x, y, text, font="Helvetica", size=10, align="left", color=None):
        self.c.setFont(font, size)
        self.c.setFillColor(color or HexColor("#111827"))
        if align == "right":
            self.c.drawRightString(x, y, text)
        else:
            self.c.drawString(x, y, text)

    def _header(self):
        company, invoice = self.ctx["company"], self.ctx["invoice"]
        right = W - MARGIN
        self._text(MARGIN, self.y, company["name"], "Helvetica-Bold", 18)
        self._text(right, self.y, "INVOICE", "Helvetica-Bold", 24, align="right")

        y = self.y - 16
        for line in company["address_lines"] + [company["email"], company["phone"]]:
            self._text(MARGIN, y, line, color=TEXT_MUTED)
            y -= 13

        dy = self.y - 22
        for label, value in (("Invoice #", invoice["number"]), ("Date", invoice["date"]), ("Due Date", invoice["due_date"])):
            self._text(right, dy, f"{label}: {value}", align="right", color=TEXT_MUTED)
            dy -= 13
        self.y = min(y, dy) - 20

    def _bill_to(self):
        customer = self.ctx["customer"]
        self._text(MARGIN, self.y, "Bill To:", "Helvetica-Bold", 12)
        self.y -= 16
        lines = [(customer["name"], "Helvetica-Bold")]
        if customer["address"]:
            lines.append((customer["address"], "Helvetica"))
        lines.append((customer["email"], "Helvetica"))
        if customer["phone"]:
            lines.append((customer["phone"], "Helvetica"))
        if customer["gst_id"]:
            lines.append((f"GST ID: {customer['gst_id']}", "Helvetica"))
        for text, font in lines:
            self._text(MARGIN, self.y, text, font, color=TEXT_MUTED)
            self.y -= 13
        self.y -= 16

    def _table_header(self):
        self.c.setFillColor(HEADER_BLUE)
        self.c.rect(MARGIN - 4, self.y - 5, W - 2 * MARGIN + 8, ROW_HEIGHT, fill=1, stroke=0)
        for title, offset, right in COLUMNS:
            self._text(MARGIN + offset, self.y, title, "Helvetica-Bold", 9,
                       align="right" if right else "left", color=HexColor("#FFFFFF"))
        self.y -= ROW_HEIGHT

    def _new_page(self):
        self.c.showPage()
        self.y = H - MARGIN

    def _items_table(self):
        self._table_header()
        for index, item in enumerate(self.ctx["items"]):
            if self.y < MARGIN + ROW_HEIGHT:
                self._new_page()
                self._table_header()
            if index % 2:
                self.c.setFillColor(STRIPE)
                self.c.rect(MARGIN - 4, self.y - 5, W - 2 * MARGIN + 8, ROW_HEIGHT, fill=1, stroke=0)
            values = [item["product"][:34], item["sku"][:20], item["quantity"],
                      item["price"], item["discount"], item["total"]]
            for (title, offset, right), value in zip(COLUMNS, values):
                self._text(MARGIN + offset, self.y, value, size=9, align="right" if right else "left")
            self.y -= ROW_HEIGHT
        self.y -= 10

    def _totals(self):
        if self.y < MARGIN + 80:
            self._new_page()
        totals = self.ctx["totals"]
        label_x, value_x = W - MARGIN - 150, W - MARGIN
        for label, key in (("Subtotal", "subtotal"), ("Discount", "discount"), ("Tax", "tax")):
            self._text(label_x, self.y, f"{label}:", color=TEXT_MUTED)
            self._text(value_x, self.y, totals[key], align="right")
            self.y -= 14
        self.c.setStrokeColor(HexColor("#D1D5DB"))
        self.c.line(label_x, self.y + 8, value_x, self.y + 8)
        self.y -= 6
        self._text(label_x, self.y, "Total:", "Helvetica-Bold", 12)
        self._text(value_x, self.y, totals["total"], "Helvetica-Bold", 12, align="right")
        self.y -= 36

    def _terms(self):
        if self.y < MARGIN + 50:
            self._new_page()
        self._text(MARGIN, self.y, "Payment Terms:", "Helvetica-Bold", 9)
        self._text(MARGIN, self.y - 13, self.ctx["payment_terms"], size=9, color=TEXT_MUTED)
        self._text(MARGIN, self.y - 32, "Thank you for your business!", size=9, color=TEXT_MUTED)


def render_invoice_pdf(invoice: Invoice, customer: Customer) -> bytes:
    pdf = InvoicePDF(invoice_context(invoice, customer)).render()
    logger.info(f"Rendered PDF for invoice {invoice.invoiceNumber} ({len(pdf)} bytes)")
    return pdf
