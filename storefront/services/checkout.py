"""
Checkout: turns a user's cart into an order

``place_order`` validates the cart, address and stock, then in one
transaction decrements stock, persists the order with its lines and empties
the cart. It only talks to a ``CheckoutStore``, so it runs the same against
the SQLAlchemy store below and against in-memory fakes.
"""

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncIterator, List, NamedTuple, Optional, Protocol
import logging
import uuid

from sqlalchemy import delete, select, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.exceptions import (
    EmptyCartException,
    InsufficientStockException,
    InvalidAddressException,
    OrderConflictException,
)
from storefront.models import Address, CartItem, Order, OrderItem, OrderStatus, Product
from storefront.models.base import utcnow

logger = logging.getLogger(__name__)

# PostgreSQL serialization failure / deadlock
PG_CONFLICT_CODES = {"40001", "40P01"}
CONFLICT_MESSAGES = ("deadlock detected", "could not serialize access", "database is locked")


class CartLine(NamedTuple):
    product_id: uuid.UUID
    quantity: int


class CheckoutStore(Protocol):
    """Persistence operations checkout needs, all inside ``transaction()``"""

    def transaction(self) -> AsyncIterator[None]: ...

    async def get_cart_lines(self, user_id: uuid.UUID) -> List[CartLine]: ...

    async def get_product(self, product_id: uuid.UUID) -> Optional[Product]: ...

    async def decrement_stock(self, product_id: uuid.UUID, quantity: int) -> bool: ...

    async def get_address(self, address_id: uuid.UUID) -> Optional[Address]: ...

    async def clear_cart(self, user_id: uuid.UUID) -> None: ...

    async def add_order(self, order: Order) -> None: ...


class SqlCheckoutStore:
    """CheckoutStore over an AsyncSession"""

    def __init__(self, session: AsyncSession):
        self.session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

    async def get_cart_lines(self, user_id: uuid.UUID) -> List[CartLine]:
        result = await self.session.execute(
            select(CartItem.product_id, CartItem.quantity)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at)
        )
        return [CartLine(product_id, quantity) for product_id, quantity in result.all()]

    async def get_product(self, product_id: uuid.UUID) -> Optional[Product]:
        return await self.session.get(Product, product_id)

    async def decrement_stock(self, product_id: uuid.UUID, quantity: int) -> bool:
        # Re-checks stock at write time; a concurrent order may have taken it
        result = await self.session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock_quantity >= quantity)
            .values(stock_quantity=Product.stock_quantity - quantity, updated_at=utcnow())
        )
        return result.rowcount == 1

    async def get_address(self, address_id: uuid.UUID) -> Optional[Address]:
        return await self.session.get(Address, address_id)

    async def clear_cart(self, user_id: uuid.UUID) -> None:
        await self.session.execute(delete(CartItem).where(CartItem.user_id == user_id))

    async def add_order(self, order: Order) -> None:
        self.session.add(order)
        await self.session.flush()


def is_conflict_error(exc: BaseException) -> bool:
    """True for serialization failures, deadlocks and lock timeouts"""
    candidates = [exc, getattr(exc, "orig", None)]
    candidates.append(getattr(candidates[-1], "__cause__", None))

    for candidate in candidates:
        if candidate is None:
            continue
        code = getattr(candidate, "pgcode", None) or getattr(candidate, "sqlstate", None)
        if code in PG_CONFLICT_CODES:
            return True

    message = str(exc).lower()
    return any(fragment in message for fragment in CONFLICT_MESSAGES)


async def place_order(
    store: CheckoutStore,
    user_id: uuid.UUID,
    shipping_address_id: uuid.UUID,
    payment_method: str,
    payment_id: Optional[str] = None,
) -> Order:
    """
    Create an order from the user's cart

    Args:
        store: Persistence for carts, products, addresses and orders
        user_id: Buyer user ID
        shipping_address_id: One of the buyer's addresses
        payment_method: Free-form payment method label
        payment_id: Gateway payment reference; marks the order paid when set

    Returns:
        The created order with its items

    Raises:
        EmptyCartException: If the cart has no lines
        InvalidAddressException: If the address is missing or not the buyer's
        InsufficientStockException: If any product lacks stock
        OrderConflictException: If a concurrent order took the stock first
    """
    payment_id = payment_id or None

    try:
        async with store.transaction():
            lines = await store.get_cart_lines(user_id)
            if not lines:
                logger.info(f"Checkout rejected for user {user_id}: empty cart")
                raise EmptyCartException()

            address = await store.get_address(shipping_address_id)
            if address is None or address.user_id != user_id:
                logger.info(f"Checkout rejected for user {user_id}: invalid address {shipping_address_id}")
                raise InvalidAddressException()

            # Lock rows in a stable order across concurrent checkouts
            lines = sorted(lines, key=lambda line: line.product_id)

            priced = []
            for line in lines:
                product = await store.get_product(line.product_id)
                if product is None or product.stock_quantity < line.quantity:
                    name = product.name if product is not None else str(line.product_id)
                    available = product.stock_quantity if product is not None else 0
                    logger.info(f"Checkout rejected for user {user_id}: insufficient stock for {name}")
                    raise InsufficientStockException(name, available)
                priced.append((line, Decimal(product.effective_price)))

            now = utcnow()
            order = Order(
                id=uuid.uuid4(),
                user_id=user_id,
                shipping_address_id=shipping_address_id,
                payment_method=payment_method,
                payment_id=payment_id,
                is_paid=payment_id is not None,
                paid_date=now if payment_id is not None else None,
                status=OrderStatus.PENDING,
                order_date=now,
                items=[
                    OrderItem(
                        id=uuid.uuid4(),
                        product_id=line.product_id,
                        quantity=line.quantity,
                        unit_price=unit_price,
                        subtotal=unit_price * line.quantity,
                    )
                    for line, unit_price in priced
                ],
            )
            order.total_amount = sum((item.subtotal for item in order.items), Decimal("0"))

            for line in lines:
                if not await store.decrement_stock(line.product_id, line.quantity):
                    logger.warning(
                        f"Checkout conflict for user {user_id}: stock for {line.product_id} taken concurrently"
                    )
                    raise OrderConflictException()

            await store.add_order(order)
            await store.clear_cart(user_id)
    except DBAPIError as exc:
        if is_conflict_error(exc):
            logger.warning(f"Checkout conflict for user {user_id}: {exc.__class__.__name__}")
            raise OrderConflictException() from exc
        raise

    logger.info(
        f"Order {order.id} placed for user {user_id}: "
        f"{len(order.items)} items, total {order.total_amount}"
    )
    return order
