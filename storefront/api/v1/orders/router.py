"""
Order API routes
"""

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional, List
import uuid

from storefront.core.database import get_db
from storefront.core.security import get_current_user, require_admin, is_admin
from storefront.models.order import OrderStatus
from .schemas import OrderCreate, OrderResponse
from .services import OrderService

router = APIRouter()


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create order",
    description="Place an order from the current user's cart"
)
async def create_order(
    order_data: OrderCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    order = await service.create_order(
        user_id=uuid.UUID(current_user["id"]),
        data=order_data
    )
    return OrderResponse.model_validate(order)


@router.get(
    "/my-orders",
    response_model=List[OrderResponse],
    summary="List my orders",
    description="Orders of the current user, newest first"
)
async def list_my_orders(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    return await service.list_user_orders(uuid.UUID(current_user["id"]))


@router.get(
    "",
    response_model=List[OrderResponse],
    summary="List orders",
    description="All orders (admin only)"
)
async def list_orders(
    status: Optional[OrderStatus] = Query(None),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    return await service.list_orders(status=status)


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order details",
    description="Visible to the owner and to admins"
)
async def get_order(
    order_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    owner_id = None if is_admin(current_user) else uuid.UUID(current_user["id"])
    return await service.get_order(order_id, user_id=owner_id)


@router.put(
    "/{order_id}/status",
    response_model=OrderResponse,
    summary="Update order status",
    description="Set any status (admin only); body is the integer status value"
)
async def update_order_status(
    order_id: uuid.UUID,
    new_status: OrderStatus = Body(...),
    tracking_number: Optional[str] = Query(None, max_length=100),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    return await service.update_order_status(order_id, new_status, tracking_number=tracking_number)


@router.delete(
    "/{order_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete order",
    description="Delete an order and its items (admin only)"
)
async def delete_order(
    order_id: uuid.UUID,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    service = OrderService(db)
    await service.delete_order(order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
