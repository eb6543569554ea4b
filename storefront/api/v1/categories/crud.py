"""
Category CRUD operations
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List
import logging
import uuid

from storefront.models import Category, Product
from storefront.core.exceptions import ConflictException, NotFoundException
from .schemas import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


async def get_category_by_id(db: AsyncSession, category_id: uuid.UUID) -> Category:
    """Get category by ID or raise 404"""
    category = await db.get(Category, category_id)
    if not category:
        raise NotFoundException("Category not found")
    return category


async def list_categories(db: AsyncSession) -> List[Category]:
    result = await db.execute(select(Category).order_by(Category.name))
    return list(result.scalars().all())


async def create_category(db: AsyncSession, data: CategoryCreate) -> Category:
    category = Category(**data.model_dump())
    db.add(category)
    await db.flush()

    logger.info(f"Category {category.id} created")
    return category


async def update_category(db: AsyncSession, category_id: uuid.UUID, data: CategoryUpdate) -> Category:
    category = await get_category_by_id(db, category_id)
    category.update_from_dict(data.model_dump(exclude_unset=True))
    await db.flush()
    return category


async def count_products(db: AsyncSession, category_id: uuid.UUID) -> int:
    return await db.scalar(
        select(func.count()).select_from(Product).where(Product.category_id == category_id)
    ) or 0


async def delete_category(db: AsyncSession, category_id: uuid.UUID) -> None:
    """
    Delete a category

    Raises:
        NotFoundException: If category not found
        ConflictException: While products still reference it
    """
    category = await get_category_by_id(db, category_id)

    if await count_products(db, category_id):
        raise ConflictException(
            "Category has products and cannot be deleted",
            error_code="CATEGORY_IN_USE"
        )

    await db.delete(category)
    await db.flush()
    logger.info(f"Category {category_id} deleted")
