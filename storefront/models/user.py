"""
User model
Handles user authentication and profile information
"""

from sqlalchemy import Column, String, Boolean, DateTime, Enum
import enum

from .base import BaseModel, TimestampedModel, UUIDModel


class UserRole(str, enum.Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"


class User(BaseModel, TimestampedModel, UUIDModel):
    """Registered storefront user; ``created_at`` is the registration date"""

    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=True)
    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles], native_enum=False),
        default=UserRole.CUSTOMER,
        nullable=False
    )

    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
