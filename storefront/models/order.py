"""Order aggregate: an order and the lines it owns"""

from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, Uuid, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum

from .base import BaseModel, TimestampedModel, UUIDModel, IntEnumType, utcnow


class OrderStatus(enum.IntEnum):
    PENDING = 0
    PROCESSING = 1
    SHIPPED = 2
    DELIVERED = 3
    CANCELLED = 4
    RETURNED = 5


class Order(BaseModel, TimestampedModel, UUIDModel):
    """Customer order"""

    __tablename__ = "orders"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    shipping_address_id = Column(Uuid(as_uuid=True), ForeignKey("addresses.id"), nullable=True)

    status = Column(IntEnumType(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    total_amount = Column(Numeric(18, 2), nullable=False)

    # Payment
    payment_method = Column(String(50), nullable=False)
    payment_id = Column(String(200), nullable=True)
    is_paid = Column(Boolean, default=False, nullable=False)
    paid_date = Column(DateTime(timezone=True), nullable=True)

    # Fulfilment
    order_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    shipped_date = Column(DateTime(timezone=True), nullable=True)
    delivered_date = Column(DateTime(timezone=True), nullable=True)
    tracking_number = Column(String(100), nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="[OrderItem.created_at, OrderItem.product_id]",
    )

    __table_args__ = (
        Index("idx_orders_user_date", "user_id", "order_date"),
    )


class OrderItem(BaseModel, TimestampedModel, UUIDModel):
    """Order line with the unit price captured at checkout"""

    __tablename__ = "order_items"

    order_id = Column(Uuid(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)

    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(18, 2), nullable=False)
    subtotal = Column(Numeric(18, 2), nullable=False)

    order = relationship("Order", back_populates="items")
