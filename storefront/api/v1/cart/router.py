"""
Cart API routes
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from storefront.core.database import get_db
from storefront.core.security import get_current_user
from .schemas import CartItemCreate, CartItemUpdate, CartItemResponse, CartResponse
from .services import CartService

router = APIRouter()


@router.get("", response_model=CartResponse, summary="Get cart")
async def get_cart(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    return await service.get_cart(uuid.UUID(current_user["id"]))


@router.post(
    "",
    response_model=CartItemResponse,
    summary="Add to cart",
    description="Add a product; repeated adds increase the quantity"
)
async def add_to_cart(
    item_data: CartItemCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    return await service.add_to_cart(uuid.UUID(current_user["id"]), item_data)


@router.put("/{item_id}", response_model=CartItemResponse, summary="Update cart item quantity")
async def update_cart_item(
    item_id: uuid.UUID,
    update_data: CartItemUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    return await service.update_cart_item(uuid.UUID(current_user["id"]), item_id, update_data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Remove cart item")
async def remove_from_cart(
    item_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    await service.remove_from_cart(uuid.UUID(current_user["id"]), item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear cart")
async def clear_cart(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = CartService(db)
    await service.clear_cart(uuid.UUID(current_user["id"]))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
