"""
User services
Profiles, shipping addresses and wishlists
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
import logging
import uuid

from storefront.models import User, Address, Order, WishlistItem, Product
from storefront.core.exceptions import ConflictException, NotFoundException
from .schemas import ProfileUpdate, AddressCreate, AddressUpdate, WishlistItemResponse

logger = logging.getLogger(__name__)


class UserService:
    """User profile service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self, skip: int = 0, limit: int = 100) -> List[User]:
        result = await self.db.execute(
            select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    async def update_profile(self, user_id: uuid.UUID, data: ProfileUpdate) -> User:
        user = await self.get_user(user_id)

        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        user.update_from_dict(changes)
        await self.db.flush()
        return user


class AddressService:
    """
    Shipping address service

    Addresses of other users answer 404 so their existence is not revealed.
    At most one address per user is the default.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_addresses(self, user_id: uuid.UUID) -> List[Address]:
        result = await self.db.execute(
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at)
        )
        return list(result.scalars().all())

    async def get_address(self, user_id: uuid.UUID, address_id: uuid.UUID) -> Address:
        address = await self.db.get(Address, address_id)
        if not address or address.user_id != user_id:
            raise NotFoundException("Address not found")
        return address

    async def _unset_defaults(self, user_id: uuid.UUID) -> None:
        await self.db.execute(
            update(Address)
            .where(Address.user_id == user_id, Address.is_default.is_(True))
            .values(is_default=False)
        )

    async def create_address(self, user_id: uuid.UUID, data: AddressCreate) -> Address:
        if data.is_default:
            await self._unset_defaults(user_id)

        address = Address(user_id=user_id, **data.model_dump())
        self.db.add(address)
        await self.db.flush()

        logger.info(f"Address {address.id} added for user {user_id}")
        return address

    async def update_address(self, user_id: uuid.UUID, address_id: uuid.UUID, data: AddressUpdate) -> Address:
        address = await self.get_address(user_id, address_id)

        changes = data.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None or k == "address_line2"}

        if changes.get("is_default") and not address.is_default:
            await self._unset_defaults(user_id)

        address.update_from_dict(changes)
        await self.db.flush()
        return address

    async def delete_address(self, user_id: uuid.UUID, address_id: uuid.UUID) -> None:
        """
        Delete an address

        Raises:
            NotFoundException: If the address is missing or foreign
            ConflictException: While an order ships to it
        """
        address = await self.get_address(user_id, address_id)

        shipped_to = await self.db.scalar(
            select(func.count()).select_from(Order).where(Order.shipping_address_id == address_id)
        )
        if shipped_to:
            raise ConflictException(
                "Address is used by an order and cannot be deleted",
                error_code="ADDRESS_IN_USE"
            )

        await self.db.delete(address)
        await self.db.flush()
        logger.info(f"Address {address_id} deleted for user {user_id}")


class WishlistService:
    """Wishlist service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_product(self, product_id: uuid.UUID) -> Product:
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def _find(self, user_id: uuid.UUID, product_id: uuid.UUID):
        result = await self.db.execute(
            select(WishlistItem).where(
                WishlistItem.user_id == user_id,
                WishlistItem.product_id == product_id
            )
        )
        return result.scalar_one_or_none()

    async def list_wishlist(self, user_id: uuid.UUID) -> List[WishlistItemResponse]:
        result = await self.db.execute(
            select(WishlistItem, Product)
            .join(Product, Product.id == WishlistItem.product_id)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return [
            WishlistItemResponse(
                id=item.id,
                product_id=product.id,
                product_name=product.name,
                image_url=product.image_url,
                price=product.price,
                effective_price=product.effective_price,
                stock_quantity=product.stock_quantity,
                added_at=item.created_at,
            )
            for item, product in result.all()
        ]

    async def is_in_wishlist(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        return await self._find(user_id, product_id) is not None

    async def add(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        """Add a product; adding it twice is a no-op"""
        await self._get_product(product_id)

        if await self._find(user_id, product_id):
            return

        self.db.add(WishlistItem(user_id=user_id, product_id=product_id))
        await self.db.flush()

    async def remove(self, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        item = await self._find(user_id, product_id)
        if not item:
            raise NotFoundException("Product is not in wishlist")

        await self.db.delete(item)
        await self.db.flush()
