"""
Shopping cart model
One row per (user, product)
"""

from sqlalchemy import Column, Integer, Uuid, ForeignKey, UniqueConstraint, CheckConstraint

from .base import BaseModel, TimestampedModel, UUIDModel


class CartItem(BaseModel, TimestampedModel, UUIDModel):
    """Shopping cart items"""

    __tablename__ = "cart_items"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_cart_user_product"),
        CheckConstraint("quantity > 0", name="check_positive_cart_quantity"),
    )
