"""
Order schemas for request/response validation
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
import uuid

from storefront.models.order import OrderStatus


class OrderCreate(BaseModel):
    """Checkout request; items and total come from the server-side cart"""
    shipping_address_id: uuid.UUID
    payment_method: str = Field(..., min_length=1, max_length=50)
    payment_id: Optional[str] = Field(None, max_length=200)


class OrderItemResponse(BaseModel):
    """Schema for order item response"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderResponse(BaseModel):
    """Schema for order response"""
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    shipping_address_id: Optional[uuid.UUID]
    status: OrderStatus
    total_amount: Decimal
    payment_method: str
    payment_id: Optional[str]
    is_paid: bool
    paid_date: Optional[datetime]
    order_date: datetime
    shipped_date: Optional[datetime]
    delivered_date: Optional[datetime]
    tracking_number: Optional[str]
    items: List[OrderItemResponse]
