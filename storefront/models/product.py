"""Product model using base mixins"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, Uuid, ForeignKey, Index, CheckConstraint
from decimal import Decimal

from .base import BaseModel, TimestampedModel, UUIDModel


class Product(BaseModel, TimestampedModel, UUIDModel):
    """Catalog product; ``stock_quantity`` is decremented by checkout"""

    __tablename__ = "products"

    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)

    category_id = Column(Uuid(as_uuid=True), ForeignKey("categories.id"), nullable=False, index=True)

    # Pricing
    price = Column(Numeric(18, 2), nullable=False)
    sale_price = Column(Numeric(18, 2), nullable=True)
    is_on_sale = Column(Boolean, default=False, nullable=False)

    # Inventory
    stock_quantity = Column(Integer, default=0, nullable=False)

    rating = Column(Numeric(3, 2), default=0, nullable=False)
    image_url = Column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="check_non_negative_price"),
        CheckConstraint("stock_quantity >= 0", name="check_non_negative_stock"),
        Index("idx_products_on_sale", "is_on_sale"),
        Index("idx_products_rating", "rating"),
    )

    @property
    def effective_price(self) -> Decimal:
        """Sale price while on sale, otherwise the list price"""
        if self.is_on_sale and self.sale_price is not None:
            return self.sale_price
        return self.price
