"""
Authentication for the storefront API

Password hashing, bearer access tokens and the ``current user`` / admin
dependencies used by the routers.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import re

from .config import settings
from .exceptions import UnauthorizedException, ForbiddenException

# pbkdf2 avoids passlib's broken bcrypt backend detection
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# auto_error off: a missing header is reported by get_current_user as 401
security = HTTPBearer(auto_error=False)

PASSWORD_RULES = (
    (r"[A-Z]", "Password must contain at least one uppercase letter"),
    (r"[a-z]", "Password must contain at least one lowercase letter"),
    (r"\d", "Password must contain at least one digit"),
)


class SecurityUtils:
    """Password and token helpers"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        return pwd_context.verify(plain_password, hashed_password)

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def validate_password(password: str) -> tuple[bool, str]:
        """
        Check a new password against the strength rules

        Returns:
            (True, "") or (False, reason of the first failed rule)
        """
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            return False, f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"

        for pattern, message in PASSWORD_RULES:
            if not re.search(pattern, password):
                return False, message

        return True, ""

    @staticmethod
    def create_access_token(claims: Dict[str, Any]) -> str:
        """Sign ``claims`` as an access token valid for ACCESS_TOKEN_EXPIRE_MINUTES"""
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        payload = {**claims, "exp": expires_at, "type": "access"}
        return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """Verify signature and expiry; raises 401 on any failure"""
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            raise UnauthorizedException("Invalid authentication credentials")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Dict[str, Any]:
    """Identity from the bearer token: ``{"id", "role", "email"}``"""
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    claims = SecurityUtils.decode_token(credentials.credentials)
    if claims.get("type") != "access" or not claims.get("sub"):
        raise UnauthorizedException("Invalid token type")

    return {"id": claims["sub"], "role": claims.get("role"), "email": claims.get("email")}


def require_role(allowed_roles: list[str]):
    """Dependency factory: 403 unless the caller has one of ``allowed_roles``"""
    async def check_role(current_user: dict = Depends(get_current_user)):
        if current_user.get("role") not in allowed_roles:
            raise ForbiddenException("Insufficient permissions")
        return current_user
    return check_role


require_admin = require_role(["admin"])


def is_admin(current_user: Dict[str, Any]) -> bool:
    return current_user.get("role") == "admin"
