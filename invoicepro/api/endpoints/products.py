import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from invoicepro.api.deps import get_repos
from invoicepro.core.exceptions import RecordNotFoundError
from invoicepro.models.invoice import MessageResponse
from invoicepro.models.product import Product, ProductCreate, ProductUpdate
from invoicepro.repositories.registry import Repositories

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=List[Product])
async def list_products(
    search: Optional[str] = Query(None, description="Case-insensitive match on name, SKU or description"),
    repos: Repositories = Depends(get_repos),
):
    try:
        if search:
            return repos.products.search(search)
        return repos.products.list()
    except Exception as exc:
        logger.error(f"Error fetching products: {exc}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")


@router.post("", response_model=Product, status_code=201)
async def create_product(payload: ProductCreate, repos: Repositories = Depends(get_repos)):
    try:
        product = repos.products.create(payload)
        logger.info(f"Created product {product.id} ({product.sku})")
        return product
    except Exception as exc:
        logger.error(f"Error creating product: {exc}")
        raise HTTPException(status_code=400, detail="Failed to create product")


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, repos: Repositories = Depends(get_repos)):
    product = repos.products.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.put("/{product_id}", response_model=Product)
async def update_product(product_id: str, payload: ProductUpdate, repos: Repositories = Depends(get_repos)):
    # Existing invoices keep their snapshot of name, SKU and price
    try:
        return repos.products.update(product_id, payload)
    except RecordNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except Exception as exc:
        logger.error(f"Error updating product {product_id}: {exc}")
        raise HTTPException(status_code=400, detail="Failed to update product")


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(product_id: str, repos: Repositories = Depends(get_repos)):
    try:
        deleted = repos.products.delete(product_id)
    except Exception as exc:
        logger.error(f"Error deleting product {product_id}: {exc}")
        raise HTTPException(status_code=500, detail="Failed to delete product")
    if not deleted:
        raise HTTPException(status_code=404, detail="Product not found")
    return MessageResponse(message="Product deleted successfully")
