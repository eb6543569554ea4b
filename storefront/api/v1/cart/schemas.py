"""
Cart schemas
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import uuid


class CartItemCreate(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(1, gt=0, le=1000)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., gt=0, le=1000)


class CartItemResponse(BaseModel):
    """Cart line priced at the product's current effective price"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    image_url: Optional[str] = None
    unit_price: Decimal
    quantity: int
    subtotal: Decimal
    stock_quantity: int
    created_at: datetime


class CartResponse(BaseModel):
    items: List[CartItemResponse]
    total_items: int
    total_quantity: int
    total: Decimal
