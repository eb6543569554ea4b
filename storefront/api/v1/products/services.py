"""
Product service layer
Catalog queries and admin maintenance
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_
import logging
import uuid

from storefront.models import Product, Category, CartItem, OrderItem, WishlistItem, Review
from storefront.core.config import settings
from storefront.core.exceptions import NotFoundException, ConflictException
from storefront.middleware.security import InputSanitizer
from .schemas import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Fields an update may clear by sending null
NULLABLE_FIELDS = {"description", "sale_price", "image_url"}


class ProductService:
    """Product service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _list(self, query) -> List[Product]:
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_products(self, skip: int = 0, limit: int = 100) -> List[Product]:
        return await self._list(
            select(Product).order_by(Product.created_at.desc()).offset(skip).limit(limit)
        )

    async def get_featured(self, limit: Optional[int] = None) -> List[Product]:
        """Highest rated products at or above the featured threshold"""
        return await self._list(
            select(Product)
            .where(Product.rating >= settings.FEATURED_MIN_RATING)
            .order_by(Product.rating.desc(), Product.created_at.desc())
            .limit(limit or settings.FEATURED_LIMIT)
        )

    async def get_on_sale(self) -> List[Product]:
        return await self._list(
            select(Product)
            .where(Product.is_on_sale.is_(True), Product.sale_price.is_not(None))
            .order_by(Product.created_at.desc())
        )

    async def search(self, term: Optional[str]) -> List[Product]:
        """Case-insensitive substring match on name and description"""
        query = select(Product).order_by(Product.name)

        term = (term or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
            )

        return await self._list(query)

    async def get_by_category(self, category_id: uuid.UUID) -> List[Product]:
        if not await self.db.get(Category, category_id):
            raise NotFoundException("Category not found")

        return await self._list(
            select(Product).where(Product.category_id == category_id).order_by(Product.name)
        )

    async def get_product(self, product_id: uuid.UUID) -> Product:
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def _ensure_category(self, category_id: uuid.UUID) -> None:
        if not await self.db.get(Category, category_id):
            raise NotFoundException("Category not found")

    async def create_product(self, data: ProductCreate) -> Product:
        await self._ensure_category(data.category_id)

        product = Product(**InputSanitizer.sanitize_product_data(data.model_dump()))
        self.db.add(product)
        await self.db.flush()

        logger.info(f"Product {product.id} created")
        return product

    async def update_product(self, product_id: uuid.UUID, data: ProductUpdate) -> Product:
        product = await self.get_product(product_id)

        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        changes = InputSanitizer.sanitize_product_data(changes)
        if changes.get("category_id"):
            await self._ensure_category(changes["category_id"])

        product.update_from_dict(changes)
        await self.db.flush()

        # Existing order items keep their captured unit price
        logger.info(f"Product {product.id} updated: {sorted(changes)}")
        return product

    async def delete_product(self, product_id: uuid.UUID) -> None:
        """
        Delete a product with its cart, wishlist and review rows

        Raises:
            NotFoundException: If product not found
            ConflictException: If the product appears in an order
        """
        product = await self.get_product(product_id)

        ordered = await self.db.scalar(
            select(func.count()).select_from(OrderItem).where(OrderItem.product_id == product_id)
        )
        if ordered:
            raise ConflictException(
                "Product has been ordered and cannot be deleted",
                error_code="PRODUCT_IN_USE"
            )

        for model in (CartItem, WishlistItem, Review):
            await self.db.execute(delete(model).where(model.product_id == product_id))

        await self.db.delete(product)
        await self.db.flush()
        logger.info(f"Product {product_id} deleted")
