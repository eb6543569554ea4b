"""
Review service layer
Reviews are limited to buyers and keep the product rating current
"""

from typing import List, Optional
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
import logging
import uuid

from storefront.models import Review, Product, User, Order, OrderItem, OrderStatus
from storefront.core.exceptions import (
    NotFoundException,
    ForbiddenException,
    AlreadyReviewedException,
    NotPurchasedException
)
from storefront.middleware.security import InputSanitizer
from .schemas import ReviewCreate, ReviewUpdate, ReviewResponse

logger = logging.getLogger(__name__)


class ReviewService:
    """Product review service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _query(self):
        return (
            select(Review, Product.name, User.first_name, User.last_name)
            .join(Product, Product.id == Review.product_id)
            .join(User, User.id == Review.user_id)
        )

    @staticmethod
    def _to_response(row) -> ReviewResponse:
        review, product_name, first_name, last_name = row
        return ReviewResponse(
            id=review.id,
            product_id=review.product_id,
            product_name=product_name,
            user_id=review.user_id,
            user_name=f"{first_name} {last_name}",
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )

    async def _get_product(self, product_id: uuid.UUID) -> Product:
        product = await self.db.get(Product, product_id)
        if not product:
            raise NotFoundException("Product not found")
        return product

    async def _get_review(self, review_id: uuid.UUID) -> Review:
        review = await self.db.get(Review, review_id)
        if not review:
            raise NotFoundException("Review not found")
        return review

    async def _get_owned_review(self, review_id: uuid.UUID, user_id: uuid.UUID, is_admin: bool) -> Review:
        review = await self._get_review(review_id)
        if not is_admin and review.user_id != user_id:
            raise ForbiddenException("You can only modify your own reviews")
        return review

    async def _find_review_id(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Optional[uuid.UUID]:
        return await self.db.scalar(
            select(Review.id).where(Review.user_id == user_id, Review.product_id == product_id)
        )

    async def get_review(self, review_id: uuid.UUID) -> ReviewResponse:
        result = await self.db.execute(self._query().where(Review.id == review_id))
        row = result.first()
        if row is None:
            raise NotFoundException("Review not found")
        return self._to_response(row)

    async def list_product_reviews(self, product_id: uuid.UUID) -> List[ReviewResponse]:
        await self._get_product(product_id)

        result = await self.db.execute(
            self._query()
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return [self._to_response(row) for row in result.all()]

    async def list_user_reviews(self, user_id: uuid.UUID) -> List[ReviewResponse]:
        result = await self.db.execute(
            self._query()
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc())
        )
        return [self._to_response(row) for row in result.all()]

    async def has_purchased(self, user_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        """True when a non-cancelled order of the user contains the product"""
        count = await self.db.scalar(
            select(func.count())
            .select_from(OrderItem)
            .join(Order, Order.id == OrderItem.order_id)
            .where(
                Order.user_id == user_id,
                Order.status != OrderStatus.CANCELLED,
                OrderItem.product_id == product_id
            )
        )
        return bool(count)

    async def create_review(
        self,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        data: ReviewCreate
    ) -> ReviewResponse:
        """
        Create a review for a purchased product

        Raises:
            NotFoundException: If product not found
            NotPurchasedException: If the user never bought the product
            AlreadyReviewedException: If the user already reviewed it
        """
        product = await self._get_product(product_id)

        if not await self.has_purchased(user_id, product_id):
            raise NotPurchasedException()

        if await self._find_review_id(user_id, product_id):
            raise AlreadyReviewedException()

        payload = InputSanitizer.sanitize_review(data.model_dump())
        review = Review(user_id=user_id, product_id=product_id, **payload)
        try:
            async with self.db.begin_nested():
                self.db.add(review)
        except IntegrityError as exc:
            # A concurrent request from the same user inserted first
            raise AlreadyReviewedException() from exc

        await self.recalculate_rating(product)
        logger.info(f"Review {review.id} created for product {product_id}")
        return await self.get_review(review.id)

    async def update_review(
        self,
        review_id: uuid.UUID,
        user_id: uuid.UUID,
        data: ReviewUpdate,
        is_admin: bool = False
    ) -> ReviewResponse:
        review = await self._get_owned_review(review_id, user_id, is_admin)

        changes = InputSanitizer.sanitize_review(data.model_dump(exclude_unset=True))
        if changes.get("rating") is None:
            changes.pop("rating", None)
        review.update_from_dict(changes)
        await self.db.flush()

        await self.recalculate_rating(await self._get_product(review.product_id))
        return await self.get_review(review.id)

    async def delete_review(self, review_id: uuid.UUID, user_id: uuid.UUID, is_admin: bool = False) -> None:
        review = await self._get_owned_review(review_id, user_id, is_admin)
        product_id = review.product_id

        await self.db.delete(review)
        await self.db.flush()

        await self.recalculate_rating(await self._get_product(product_id))
        logger.info(f"Review {review_id} deleted")

    async def recalculate_rating(self, product: Product) -> Decimal:
        """Set the product rating to the mean review rating, 0 without reviews"""
        average: Optional[float] = await self.db.scalar(
            select(func.avg(Review.rating)).where(Review.product_id == product.id)
        )
        product.rating = Decimal(str(average or 0)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        await self.db.flush()
        return product.rating
