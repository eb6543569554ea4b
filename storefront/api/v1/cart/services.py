"""
Cart service layer
Handles shopping cart business logic
"""

from typing import Optional, Tuple
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from storefront.models import CartItem, Product
from storefront.core.exceptions import NotFoundException, InsufficientStockException
from .schemas import CartItemCreate, CartItemUpdate, CartItemResponse, CartResponse

logger = logging.getLogger(__name__)


class CartService:
    """Shopping cart service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _to_response(item: CartItem, product: Product) -> CartItemResponse:
        unit_price = product.effective_price
        return CartItemResponse(
            id=item.id,
            product_id=product.id,
            product_name=product.name,
            image_url=product.image_url,
            unit_price=unit_price,
            quantity=item.quantity,
            subtotal=unit_price * item.quantity,
            stock_quantity=product.stock_quantity,
            created_at=item.created_at,
        )

    async def get_cart(self, user_id: uuid.UUID) -> CartResponse:
        """
        Get the user's cart

        Lines are priced at the product's current effective price; the
        price is only fixed once an order is placed.
        """
        result = await self.db.execute(
            select(CartItem, Product)
            .join(Product, Product.id == CartItem.product_id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        items = [self._to_response(item, product) for item, product in result.all()]

        return CartResponse(
            items=items,
            total_items=len(items),
            total_quantity=sum(item.quantity for item in items),
            total=sum((item.subtotal for item in items), Decimal("0")),
        )

    async def _get_product(self, product_id: uuid.UUID) -> Product:
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def _get_item(self, user_id: uuid.UUID, item_id: uuid.UUID) -> Tuple[CartItem, Product]:
        item = await self.db.get(CartItem, item_id)
        if not item or item.user_id != user_id:
            raise NotFoundException("Cart item not found")
        return item, await self._get_product(item.product_id)

    async def _find_line(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Optional[CartItem]:
        result = await self.db.execute(
            select(CartItem).where(
                CartItem.user_id == user_id,
                CartItem.product_id == product_id
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _merged_quantity(product: Product, item: Optional[CartItem], added: int) -> int:
        quantity = added + (item.quantity if item else 0)
        if quantity > product.stock_quantity:
            raise InsufficientStockException(product.name, product.stock_quantity)
        return quantity

    async def add_to_cart(self, user_id: uuid.UUID, item_data: CartItemCreate) -> CartItemResponse:
        """
        Add item to cart, merging with an existing line

        A line inserted concurrently for the same product is merged into
        instead of failing on the unique (user, product) constraint.

        Raises:
            NotFoundException: If product not found
            InsufficientStockException: If the merged quantity exceeds stock
        """
        product = await self._get_product(item_data.product_id)

        item = await self._find_line(user_id, product.id)
        quantity = self._merged_quantity(product, item, item_data.quantity)

        if item:
            item.quantity = quantity
            await self.db.flush()
        else:
            item = CartItem(user_id=user_id, product_id=product.id, quantity=quantity)
            try:
                async with self.db.begin_nested():
                    self.db.add(item)
            except IntegrityError:
                logger.info(f"User {user_id} cart: concurrent line for {product.id}, merging")
                item = await self._find_line(user_id, product.id)
                if item is None:
                    raise
                quantity = self._merged_quantity(product, item, item_data.quantity)
                item.quantity = quantity
                await self.db.flush()

        logger.info(f"User {user_id} cart: {product.id} x{quantity}")
        return self._to_response(item, product)

    async def update_cart_item(
        self,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        update_data: CartItemUpdate
    ) -> CartItemResponse:
        item, product = await self._get_item(user_id, item_id)

        if update_data.quantity > product.stock_quantity:
            raise InsufficientStockException(product.name, product.stock_quantity)

        item.quantity = update_data.quantity
        await self.db.flush()
        return self._to_response(item, product)

    async def remove_from_cart(self, user_id: uuid.UUID, item_id: uuid.UUID) -> None:
        item = await self.db.get(CartItem, item_id)
        if not item or item.user_id != user_id:
            raise NotFoundException("Cart item not found")

        await self.db.delete(item)
        await self.db.flush()

    async def clear_cart(self, user_id: uuid.UUID) -> None:
        await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
