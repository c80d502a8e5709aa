"""
Tests for PDF and HTML invoice rendering.
"""
import re

import pytest

from invoicepro.models.customer import CustomerCreate
from invoicepro.models.invoice import InvoiceCreate, InvoiceItemInput
from invoicepro.services.document_service import (
    display_date,
    invoice_context,
    render_invoice_email_html,
    render_invoice_html,
    render_invoice_pdf,
)
from invoicepro.services.invoice_service import InvoiceService


@pytest.fixture
def invoice(repos, customer, product, due_date):
    return InvoiceService(repos).create_invoice(InvoiceCreate(
        customerId=customer.id,
        dueDate=due_date,
        items=[InvoiceItemInput(productId=product.id, quantity=2, discount=10)],
    ))


def test_context_formats_amounts(invoice, customer):
    ctx = invoice_context(invoice, customer)
    assert ctx["totals"] == {"subtotal": "$200.00", "discount": "$20.00", "tax": "$32.40", "total": "$212.40"}
    assert ctx["items"][0]["discount"] == "10%"
    assert ctx["items"][0]["total"] == "$180.00"
    assert ctx["customer"]["gst_id"] == "27AAECG1234F1Z5"


def test_display_date():
    assert display_date("2025-01-31T10:00:00+00:00") == "2025-01-31"
    assert display_date("2025-01-31") == "2025-01-31"
    assert display_date("2025-01-31T10:00:00.000Z") == "2025-01-31"


def test_pdf_is_a_pdf(invoice, customer):
    pdf = render_invoice_pdf(invoice, customer)
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 1000


def test_pdf_with_many_items_spans_pages(repos, customer, product, due_date):
    invoice = InvoiceService(repos).create_invoice(InvoiceCreate(
        customerId=customer.id,
        dueDate=due_date,
        items=[InvoiceItemInput(productId=product.id, quantity=1) for _ in range(80)],
    ))
    pdf = render_invoice_pdf(invoice, customer)
    page_count = max(int(n) for n in re.findall(rb"/Count (\d+)", pdf))
    assert page_count >= 2


def test_html_view(invoice, customer):
    html = render_invoice_html(invoice, customer)
    assert invoice.invoiceNumber in html
    assert "Acme Corporation" in html
    assert "GST ID: 27AAECG1234F1Z5" in html
    assert "$212.40" in html
    assert "WID-001" in html


def test_html_escapes_customer_input(repos, invoice):
    hostile = repos.customers.create(CustomerCreate(name="<script>alert(1)</script>", email="x@example.com"))
    html = render_invoice_html(invoice, hostile)
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_email_body(invoice, customer):
    html = render_invoice_email_html(invoice, customer)
    assert "Dear Acme Corporation" in html
    assert invoice.invoiceNumber in html
