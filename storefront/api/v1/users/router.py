"""User profile, address and wishlist endpoints"""

from typing import List
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from storefront.core.database import get_db
from storefront.core.security import get_current_user, require_admin
from storefront.api.v1.auth.schemas import UserResponse
from .schemas import ProfileUpdate, AddressCreate, AddressUpdate, AddressResponse, WishlistItemResponse
from .services import UserService, AddressService, WishlistService

router = APIRouter()


@router.get("", response_model=List[UserResponse], summary="List users (admin)")
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).list_users(skip=skip, limit=limit)


@router.get("/profile", response_model=UserResponse, summary="Get my profile")
async def get_profile(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).get_user(uuid.UUID(current_user["id"]))


@router.put("/profile", response_model=UserResponse, summary="Update my profile")
async def update_profile(
    data: ProfileUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await UserService(db).update_profile(uuid.UUID(current_user["id"]), data)


# Addresses
@router.get("/addresses", response_model=List[AddressResponse], summary="List my addresses")
async def list_addresses(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AddressService(db).list_addresses(uuid.UUID(current_user["id"]))


@router.get("/addresses/{address_id}", response_model=AddressResponse, summary="Get address")
async def get_address(
    address_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AddressService(db).get_address(uuid.UUID(current_user["id"]), address_id)


@router.post(
    "/addresses",
    response_model=AddressResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add address",
    description="A new default address replaces the previous default"
)
async def create_address(
    data: AddressCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AddressService(db).create_address(uuid.UUID(current_user["id"]), data)


@router.put("/addresses/{address_id}", response_model=AddressResponse, summary="Update address")
async def update_address(
    address_id: uuid.UUID,
    data: AddressUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await AddressService(db).update_address(uuid.UUID(current_user["id"]), address_id, data)


@router.delete("/addresses/{address_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete address")
async def delete_address(
    address_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await AddressService(db).delete_address(uuid.UUID(current_user["id"]), address_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/wishlist", response_model=List[WishlistItemResponse], summary="Get my wishlist")
async def get_wishlist(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await WishlistService(db).list_wishlist(uuid.UUID(current_user["id"]))
