"""
Category model for product categorization
"""

from sqlalchemy import Column, String, Text

from .base import BaseModel, TimestampedModel, UUIDModel


class Category(BaseModel, TimestampedModel, UUIDModel):
    """Product category"""

    __tablename__ = "categories"

    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
