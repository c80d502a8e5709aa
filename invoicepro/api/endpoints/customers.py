import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from invoicepro.api.deps import get_invoice_service, get_repos
from invoicepro.core.exceptions import CustomerNotFoundError, RecordNotFoundError
from invoicepro.models.customer import Customer, CustomerCreate, CustomerUpdate
from invoicepro.models.invoice import InvoiceListItem, MessageResponse
from invoicepro.repositories.registry import Repositories
from invoicepro.services.invoice_service import InvoiceService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[Customer])
async def list_customers(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, email or phone"),
    repos: Repositories = Depends(get_repos),
):
    try:
        if search:
            return repos.customers.search(search)
        return repos.customers.list()
    except Exception as exc:
        logger.error(f"Error fetching customers: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch customers")


@router.post("", response_model=Customer, status_code=201)
async def create_customer(payload: CustomerCreate, repos: Repositories = Depends(get_repos)):
    try:
        customer = repos.customers.create(payload)
        logger.info(f"Created customer {customer.id} ({customer.name})")
        return customer
    except Exception as exc:
        logger.error(f"Error creating customer: {exc}")
        raise HTTPException(status_code=400, detail="Failed to create customer")


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(customer_id: str, repos: Repositories = Depends(get_repos)):
    customer = repos.customers.get(customer_id)
    if customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.get("/{customer_id}/invoices", response_model=List[InvoiceListItem])
async def list_customer_invoices(customer_id: str, service: InvoiceService = Depends(get_invoice_service)):
    try:
        return service.list_for_customer(customer_id)
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")


@router.put("/{customer_id}", response_model=Customer)
async def update_customer(customer_id: str, payload: CustomerUpdate, repos: Repositories = Depends(get_repos)):
    try:
        return repos.customers.update(customer_id, payload)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
    except Exception as exc:
        logger.error(f"Error updating customer {customer_id}: {exc}")
        raise HTTPException(status_code=400, detail="Failed to update customer")


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(customer_id: str, repos: Repositories = Depends(get_repos)):
    # Invoices referencing this customer are left in place
    try:
        deleted = repos.customers.delete(customer_id)
    except Exception as exc:
        logger.error(f"Error deleting customer {customer_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to delete customer")
    if not deleted:
        raise HTTPException(status_code=404, detail="Customer not found")
    return MessageResponse(message="Customer deleted successfully")
