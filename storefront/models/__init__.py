"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .category import Category
from .product import Product
from .cart import CartItem
from .address import Address
from .order import Order, OrderItem, OrderStatus
from .review import Review
from .wishlist import WishlistItem

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Category",
    "Product",
    "CartItem",
    "Address",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Review",
    "WishlistItem",
]
