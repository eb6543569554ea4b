"""Products API router"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from storefront.core.database import get_db
from storefront.core.security import get_current_user, require_admin
from storefront.api.v1.reviews.schemas import ReviewCreate, ReviewResponse
from storefront.api.v1.reviews.services import ReviewService
from storefront.api.v1.users.services import WishlistService
from .schemas import ProductCreate, ProductUpdate, ProductResponse, WishlistStatusResponse
from .services import ProductService

router = APIRouter()


@router.get("", response_model=List[ProductResponse], summary="List products")
async def list_products(
    skip: int = Query(0, ge=0, description="Number of items to skip"),
    limit: int = Query(100, ge=1, le=1000, description="Number of items to return"),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService(db).list_products(skip=skip, limit=limit)


@router.get(
    "/featured",
    response_model=List[ProductResponse],
    summary="Featured products",
    description="Best rated products above the featured rating threshold"
)
async def get_featured_products(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService(db).get_featured(limit)


@router.get("/on-sale", response_model=List[ProductResponse], summary="Products on sale")
async def get_on_sale_products(db: AsyncSession = Depends(get_db)):
    return await ProductService(db).get_on_sale()


@router.get("/search", response_model=List[ProductResponse], summary="Search products")
async def search_products(
    term: Optional[str] = Query(None, max_length=200),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService(db).search(term)


@router.get("/category/{category_id}", response_model=List[ProductResponse], summary="Products in category")
async def get_products_by_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await ProductService(db).get_by_category(category_id)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get product")
async def get_product(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await ProductService(db).get_product(product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product"
)
async def create_product(
    data: ProductCreate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService(db).create_product(data)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update product",
    description="Price changes never affect existing orders"
)
async def update_product(
    product_id: uuid.UUID,
    data: ProductUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await ProductService(db).update_product(product_id, data)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete product")
async def delete_product(
    product_id: uuid.UUID,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await ProductService(db).delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Reviews
@router.get("/{product_id}/reviews", response_model=List[ReviewResponse], summary="List product reviews")
async def list_product_reviews(product_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await ReviewService(db).list_product_reviews(product_id)


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Review product",
    description="Only buyers of the product may review it, once"
)
async def create_review(
    product_id: uuid.UUID,
    data: ReviewCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    return await ReviewService(db).create_review(uuid.UUID(current_user["id"]), product_id, data)


# Wishlist
@router.get("/{product_id}/wishlist", response_model=WishlistStatusResponse, summary="Is product in my wishlist")
async def get_wishlist_status(
    product_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    found = await WishlistService(db).is_in_wishlist(uuid.UUID(current_user["id"]), product_id)
    return WishlistStatusResponse(is_in_wishlist=found)


@router.post("/{product_id}/wishlist", response_model=WishlistStatusResponse, summary="Add to wishlist")
async def add_to_wishlist(
    product_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await WishlistService(db).add(uuid.UUID(current_user["id"]), product_id)
    return WishlistStatusResponse(is_in_wishlist=True)


@router.delete("/{product_id}/wishlist", status_code=status.HTTP_204_NO_CONTENT, summary="Remove from wishlist")
async def remove_from_wishlist(
    product_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await WishlistService(db).remove(uuid.UUID(current_user["id"]), product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
