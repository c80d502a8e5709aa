import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from invoicepro.api.deps import get_email_service, get_invoice_service
from invoicepro.core.exceptions import CustomerNotFoundError, ProductNotFoundError, RecordNotFoundError
from invoicepro.models.invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceDetail,
    InvoiceListItem,
    InvoiceUpdate,
    MessageResponse,
    NextInvoiceNumber,
)
from invoicepro.services.document_service import render_invoice_email_html, render_invoice_html, render_invoice_pdf
from invoicepro.services.email_service import EmailService
from invoicepro.services.invoice_service import InvoiceService

router = APIRouter()
logger = logging.getLogger(__name__)


def _load_for_document(service: InvoiceService, invoice_id: str):
    try:
        return service.get_with_customer(invoice_id)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")


@router.get("", response_model=List[InvoiceListItem])
async def list_invoices(
    search: Optional[str] = Query(None, description="Match on number, customer, product name/SKU or date"),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Invoices enriched with customerName and customerEmail."""
    try:
        return service.list_invoices(search)
    except Exception as exc:
        logger.error(f"Error fetching invoices: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch invoices")


@router.get("/next-number", response_model=NextInvoiceNumber)
async def next_invoice_number(service: InvoiceService = Depends(get_invoice_service)):
    """Preview of the number the next invoice will get. Nothing is reserved."""
    try:
        return NextInvoiceNumber(invoiceNumber=service.generate_invoice_number())
    except Exception as exc:
        logger.error(f"Error generating invoice number: {exc}")
        raise HTTPException(status_code=500, detail="Failed to generate invoice number")


@router.post("", response_model=Invoice, status_code=201)
async def create_invoice(payload: InvoiceCreate, service: InvoiceService = Depends(get_invoice_service)):
    try:
        return service.create_invoice(payload)
    except (ProductNotFoundError, CustomerNotFoundError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except Exception as exc:
        logger.error(f"Invoice creation error: {exc}")
        raise HTTPException(status_code=400, detail="Failed to create invoice")


@router.get("/{invoice_id}", response_model=InvoiceDetail)
async def get_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    try:
        invoice = service.get_detail(invoice_id)
    except Exception as exc:
        logger.error(f"Error fetching invoice {invoice_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch invoice")
    if invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.put("/{invoice_id}", response_model=Invoice)
async def update_invoice(invoice_id: str, payload: InvoiceUpdate, service: InvoiceService = Depends(get_invoice_service)):
    try:
        return service.update_invoice(invoice_id, payload)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Invoice not found")
    except Exception as exc:
        logger.error(f"Error updating invoice {invoice_id}: {exc}")
        raise HTTPException(status_code=400, detail="Failed to update invoice")


@router.delete("/{invoice_id}", response_model=MessageResponse)
async def delete_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    try:
        deleted = service.repos.invoices.delete(invoice_id)
    except Exception as exc:
        logger.error(f"Error deleting invoice {invoice_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to delete invoice")
    if not deleted:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return MessageResponse(message="Invoice deleted successfully")


@router.get("/{invoice_id}/pdf")
async def download_invoice_pdf(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    invoice, customer = _load_for_document(service, invoice_id)
    try:
        pdf = render_invoice_pdf(invoice, customer)
    except Exception as exc:
        logger.error(f"PDF generation error for invoice {invoice_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to generate PDF")
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="invoice-{invoice.invoiceNumber}.pdf"'},
    )


@router.get("/{invoice_id}/view", response_class=HTMLResponse)
async def view_invoice(invoice_id: str, service: InvoiceService = Depends(get_invoice_service)):
    invoice, customer = _load_for_document(service, invoice_id)
    try:
        return HTMLResponse(render_invoice_html(invoice, customer))
    except Exception as exc:
        logger.error(f"HTML rendering error for invoice {invoice_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to render invoice")


@router.post("/{invoice_id}/email", response_model=MessageResponse)
async def email_invoice(
    invoice_id: str,
    service: InvoiceService = Depends(get_invoice_service),
    mailer: EmailService = Depends(get_email_service),
):
    invoice, customer = _load_for_document(service, invoice_id)
    try:
        sent = await mailer.send_invoice_email(
            customer.email,
            invoice.invoiceNumber,
            html=render_invoice_email_html(invoice, customer),
            pdf=render_invoice_pdf(invoice, customer),
        )
    except Exception as exc:
        logger.error(f"Email sending error for invoice {invoice_id}: {exc}")
        sent = False
    if not sent:
        raise HTTPException(status_code=500, detail="Failed to send email")
    return MessageResponse(message="Invoice emailed successfully")
