"""
Order service layer
Handles order placement, queries and status management
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from storefront.models import Order, OrderStatus
from storefront.core.exceptions import NotFoundException, ForbiddenException
from storefront.services.checkout import SqlCheckoutStore, place_order
from .schemas import OrderCreate
from .state_machine import OrderStateMachine

logger = logging.getLogger(__name__)


class OrderService:
    """Order service for business logic"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.state_machine = OrderStateMachine()

    async def create_order(self, user_id: uuid.UUID, data: OrderCreate) -> Order:
        """
        Place an order from the user's cart

        Runs in its own transaction, so it must be the first database work
        done with this session.
        """
        return await place_order(
            SqlCheckoutStore(self.db),
            user_id=user_id,
            shipping_address_id=data.shipping_address_id,
            payment_method=data.payment_method,
            payment_id=data.payment_id,
        )

    async def get_order(
        self,
        order_id: uuid.UUID,
        user_id: Optional[uuid.UUID] = None
    ) -> Order:
        """
        Get order details

        Args:
            order_id: Order ID
            user_id: Restrict access to this owner; None skips the check

        Returns:
            Order with its items

        Raises:
            NotFoundException: If order not found
            ForbiddenException: If user doesn't own the order
        """
        order = await self.db.get(Order, order_id)

        if not order:
            raise NotFoundException("Order not found")

        if user_id is not None and order.user_id != user_id:
            raise ForbiddenException("You don't have access to this order")

        return order

    async def list_user_orders(self, user_id: uuid.UUID) -> List[Order]:
        """Orders of one user, newest first"""
        result = await self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.order_date.desc())
        )
        return list(result.scalars().all())

    async def list_orders(self, status: Optional[OrderStatus] = None) -> List[Order]:
        """All orders, newest first, optionally filtered by status"""
        query = select(Order).order_by(Order.order_date.desc())
        if status is not None:
            query = query.where(Order.status == status)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_order_status(
        self,
        order_id: uuid.UUID,
        new_status: OrderStatus,
        tracking_number: Optional[str] = None
    ) -> Order:
        """
        Update order status

        Raises:
            NotFoundException: If order not found
        """
        order = await self.get_order(order_id)
        previous = order.status

        self.state_machine.apply(order, new_status, tracking_number=tracking_number)
        await self.db.flush()

        logger.info(f"Order {order.id} status changed from {previous.name} to {order.status.name}")
        return order

    async def delete_order(self, order_id: uuid.UUID) -> None:
        """Delete an order together with its items"""
        order = await self.get_order(order_id)

        await self.db.delete(order)
        await self.db.flush()

        logger.info(f"Order {order_id} deleted")
