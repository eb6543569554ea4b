"""
Authentication API routes
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from storefront.core.database import get_db
from storefront.core.security import get_current_user
from storefront.middleware.rate_limit import auth_limiter
from .schemas import RegisterRequest, LoginRequest, ChangePasswordRequest, AuthResponse, UserResponse
from .services import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a customer account and return an access token"
)
@auth_limiter
async def register(
    request: Request,
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.register(payload)
    return service.generate_token(user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login user",
    description="Login with email and password"
)
@auth_limiter
async def login(
    request: Request,
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    user = await service.login(payload)
    return service.generate_token(user)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def get_me(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    return await service.get_user(uuid.UUID(current_user["id"]))


@router.post("/change-password", summary="Change password")
async def change_password(
    payload: ChangePasswordRequest,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = AuthService(db)
    await service.change_password(uuid.UUID(current_user["id"]), payload)
    return {"message": "Password changed successfully"}
