"""
Review API routes
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from storefront.core.database import get_db
from storefront.core.security import get_current_user, is_admin
from .schemas import ReviewUpdate, ReviewResponse
from .services import ReviewService

router = APIRouter()


@router.get("/my-reviews", response_model=List[ReviewResponse], summary="List my reviews")
async def list_my_reviews(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ReviewService(db)
    return await service.list_user_reviews(uuid.UUID(current_user["id"]))


@router.get("/{review_id}", response_model=ReviewResponse, summary="Get review")
async def get_review(review_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    service = ReviewService(db)
    return await service.get_review(review_id)


@router.put(
    "/{review_id}",
    response_model=ReviewResponse,
    summary="Update review",
    description="Owner or admin only"
)
async def update_review(
    review_id: uuid.UUID,
    data: ReviewUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ReviewService(db)
    return await service.update_review(
        review_id,
        uuid.UUID(current_user["id"]),
        data,
        is_admin=is_admin(current_user)
    )


@router.delete(
    "/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete review",
    description="Owner or admin only"
)
async def delete_review(
    review_id: uuid.UUID,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ReviewService(db)
    await service.delete_review(review_id, uuid.UUID(current_user["id"]), is_admin=is_admin(current_user))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
