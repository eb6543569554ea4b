"""
Product schemas for request/response validation
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal
import uuid


class ProductBase(BaseModel):
    """Base schema for products"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0, max_digits=18, decimal_places=2)
    sale_price: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    is_on_sale: bool = False
    stock_quantity: int = Field(0, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)
    category_id: uuid.UUID


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    """Partial product update; omitted fields are unchanged"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    sale_price: Optional[Decimal] = Field(None, ge=0, max_digits=18, decimal_places=2)
    is_on_sale: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)
    category_id: Optional[uuid.UUID] = None


class ProductResponse(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    effective_price: Decimal
    rating: Decimal
    created_at: datetime
    updated_at: datetime


class WishlistStatusResponse(BaseModel):
    is_in_wishlist: bool
