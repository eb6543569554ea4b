"""
Address model for shipping
"""

from sqlalchemy import Column, String, Boolean, Uuid, ForeignKey

from .base import BaseModel, TimestampedModel, UUIDModel


class Address(BaseModel, TimestampedModel, UUIDModel):
    """User shipping addresses; at most one default per user"""

    __tablename__ = "addresses"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    full_name = Column(String(255), nullable=False)
    address_line1 = Column(String(500), nullable=False)
    address_line2 = Column(String(500), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=False)

    is_default = Column(Boolean, default=False, nullable=False)
