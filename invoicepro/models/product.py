from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator


def _decimal_string(value: Union[str, int, float]) -> str:
    """Accept a number or numeric string and return it as a non-negative decimal string."""
    text = str(value).strip()
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"'{value}' is not a valid decimal amount")
    if not parsed.is_finite() or parsed < 0:
        raise ValueError(f"'{value}' must be a non-negative amount")
    return text


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    price: str
    taxRate: str = "18"
    description: Optional[str] = None
    isActive: bool = True

    @field_validator("price", "taxRate", mode="before")
    @classmethod
    def _check_amount(cls, value):
        return _decimal_string(value)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = Field(None, min_length=1)
    price: Optional[str] = None
    taxRate: Optional[str] = None
    description: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("price", "taxRate", mode="before")
    @classmethod
    def _check_amount(cls, value):
        if value is None:
            return value
        return _decimal_string(value)


class Product(ProductCreate):
    id: str
    createdAt: str
