"""
Category API routes
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from storefront.core.database import get_db
from storefront.core.security import require_admin
from .schemas import CategoryCreate, CategoryUpdate, CategoryResponse
from . import crud

router = APIRouter()


@router.get("", response_model=List[CategoryResponse], summary="List categories")
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await crud.list_categories(db)


@router.get("/{category_id}", response_model=CategoryResponse, summary="Get category")
async def get_category(category_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await crud.get_category_by_id(db, category_id)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category"
)
async def create_category(
    data: CategoryCreate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await crud.create_category(db, data)


@router.put("/{category_id}", response_model=CategoryResponse, summary="Update category")
async def update_category(
    category_id: uuid.UUID,
    data: CategoryUpdate,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    return await crud.update_category(db, category_id, data)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete category",
    description="Fails with 409 while products reference the category"
)
async def delete_category(
    category_id: uuid.UUID,
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    await crud.delete_category(db, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
