"""
Product review and rating model
"""

from sqlalchemy import Column, Integer, Text, Uuid, ForeignKey, Index, UniqueConstraint, CheckConstraint

from .base import BaseModel, TimestampedModel, UUIDModel


class Review(BaseModel, TimestampedModel, UUIDModel):
    """Product reviews and ratings"""

    __tablename__ = "reviews"

    product_id = Column(Uuid(as_uuid=True), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="uq_product_user_review"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_rating_range"),
        Index("idx_reviews_user", "user_id"),
    )
