"""
Storefront error types and the JSON error envelope
Every error leaves the API as {"error": {"code", "message", "request_id"}}
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

from .config import settings

logger = logging.getLogger(__name__)


class StorefrontException(HTTPException):
    """Base exception class for the storefront application"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class BadRequestException(StorefrontException):
    """400 Bad Request"""

    def __init__(self, detail: str, error_code: str = "BAD_REQUEST"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code
        )


class UnauthorizedException(StorefrontException):
    """401 Unauthorized"""

    def __init__(self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenException(StorefrontException):
    """403 Forbidden"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code=error_code
        )


class NotFoundException(StorefrontException):
    """404 Not Found"""

    def __init__(self, detail: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code=error_code
        )


class ConflictException(StorefrontException):
    """409 Conflict"""

    def __init__(self, detail: str, error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code=error_code
        )


# Business logic exceptions
class EmptyCartException(BadRequestException):
    """Checkout attempted with no cart lines"""

    def __init__(self, detail: str = "Cart is empty"):
        super().__init__(detail=detail, error_code="EMPTY_CART")


class InvalidAddressException(BadRequestException):
    """Shipping address missing or owned by another user"""

    def __init__(self, detail: str = "Invalid shipping address"):
        super().__init__(detail=detail, error_code="INVALID_ADDRESS")


class InsufficientStockException(BadRequestException):
    """Product stock insufficient"""

    def __init__(self, product_name: str, available: int):
        super().__init__(
            detail=f"Insufficient stock for {product_name}. Only {available} available.",
            error_code="INSUFFICIENT_STOCK"
        )
        self.product_name = product_name
        self.available = available


class OrderConflictException(ConflictException):
    """A concurrent checkout won the race for the same stock; safe to retry"""

    retryable = True

    def __init__(self, detail: str = "Order conflicted with a concurrent order. Please retry."):
        super().__init__(detail=detail, error_code="ORDER_CONFLICT")


class DuplicateResourceException(ConflictException):
    """Resource already exists"""

    def __init__(self, resource: str, field: str, value: str):
        super().__init__(
            detail=f"{resource} with {field} '{value}' already exists",
            error_code="DUPLICATE_RESOURCE"
        )


class AlreadyReviewedException(BadRequestException):
    def __init__(self, detail: str = "You have already reviewed this product"):
        super().__init__(detail=detail, error_code="ALREADY_REVIEWED")


class NotPurchasedException(BadRequestException):
    def __init__(self, detail: str = "You can only review products you have purchased"):
        super().__init__(detail=detail, error_code="NOT_PURCHASED")


def _error_body(request: Request, code: Optional[str], message: Any) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "request_id": getattr(request.state, "request_id", None)
        }
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Render application errors in the common error envelope"""

    @app.exception_handler(StorefrontException)
    async def storefront_exception_handler(request: Request, exc: StorefrontException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.error_code, exc.detail),
            headers=exc.headers
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {str(exc)}")

        # Don't expose internal errors in production
        if settings.DEBUG:
            detail = str(exc)
        else:
            detail = "An unexpected error occurred"

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(request, "INTERNAL_ERROR", detail)
        )
