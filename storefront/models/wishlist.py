"""
Wishlist model for saved products
"""

from sqlalchemy import Column, Uuid, ForeignKey, UniqueConstraint

from .base import BaseModel, TimestampedModel, UUIDModel


class WishlistItem(BaseModel, TimestampedModel, UUIDModel):
    """User wishlist items; ``created_at`` is when the product was added"""

    __tablename__ = "wishlist_items"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_wishlist"),
    )
