"""
Authentication service
Handles registration, login and password changes
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
import uuid

from storefront.models import User, UserRole
from storefront.models.base import utcnow
from storefront.core.config import settings
from storefront.core.security import SecurityUtils
from storefront.core.exceptions import (
    BadRequestException,
    DuplicateResourceException,
    NotFoundException,
    UnauthorizedException
)
from .schemas import RegisterRequest, LoginRequest, ChangePasswordRequest, AuthResponse, UserResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def _check_password_strength(password: str) -> None:
        is_valid, message = SecurityUtils.validate_password(password)
        if not is_valid:
            raise BadRequestException(message, error_code="WEAK_PASSWORD")

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register(self, request: RegisterRequest) -> User:
        """
        Register new customer account

        Raises:
            BadRequestException: If the password is too weak
            DuplicateResourceException: If the email is taken
        """
        self._check_password_strength(request.password)

        if await self.get_by_email(request.email):
            raise DuplicateResourceException("User", "email", request.email)

        user = User(
            email=request.email.lower(),
            password_hash=SecurityUtils.hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone_number=request.phone_number,
            role=UserRole.CUSTOMER,
            is_active=True,
            last_login=utcnow()
        )

        self.db.add(user)
        await self.db.flush()

        logger.info(f"Registered user {user.id}")
        return user

    async def login(self, request: LoginRequest) -> User:
        """
        Verify credentials and record the login

        Raises:
            UnauthorizedException: If credentials are wrong or the user is inactive
        """
        user = await self.get_by_email(request.email)

        if not user or not SecurityUtils.verify_password(request.password, user.password_hash):
            logger.info(f"Failed login for {request.email}")
            raise UnauthorizedException("Invalid email or password")

        if not user.is_active:
            raise UnauthorizedException("Account is disabled")

        user.last_login = utcnow()
        await self.db.flush()

        return user

    async def get_user(self, user_id: uuid.UUID) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundException("User not found")
        return user

    async def change_password(self, user_id: uuid.UUID, request: ChangePasswordRequest) -> None:
        user = await self.get_user(user_id)

        if not SecurityUtils.verify_password(request.current_password, user.password_hash):
            raise BadRequestException("Current password is incorrect", error_code="INVALID_PASSWORD")

        self._check_password_strength(request.new_password)

        user.password_hash = SecurityUtils.hash_password(request.new_password)
        await self.db.flush()

        logger.info(f"Password changed for user {user.id}")

    def generate_token(self, user: User) -> AuthResponse:
        """Issue an access token for ``user``"""
        token_data = {
            "sub": str(user.id),
            "email": user.email,
            "role": UserRole(user.role).value,
        }

        return AuthResponse(
            access_token=SecurityUtils.create_access_token(token_data),
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user)
        )
