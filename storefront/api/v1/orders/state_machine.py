"""
Order status changes and their side effects
"""

from datetime import datetime
from typing import Optional

from storefront.models.base import utcnow
from storefront.models.order import Order, OrderStatus


class OrderStateMachine:
    """
    Applies admin status updates to an order

    Any status may follow any other; only the fulfilment dates react.
    Status changes never touch stock or carts.
    """

    def apply(
        self,
        order: Order,
        new_status: OrderStatus,
        tracking_number: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Order:
        """
        Set ``new_status`` on ``order``

        Args:
            order: Order to update
            new_status: Target status
            tracking_number: Carrier tracking number, kept when omitted
            now: Timestamp for the fulfilment dates

        Returns:
            The same order
        """
        now = now or utcnow()
        order.status = OrderStatus(new_status)

        if order.status == OrderStatus.SHIPPED and order.shipped_date is None:
            order.shipped_date = now
        elif order.status == OrderStatus.DELIVERED and order.delivered_date is None:
            order.delivered_date = now

        if tracking_number:
            order.tracking_number = tracking_number

        return order
