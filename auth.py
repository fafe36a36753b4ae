"""
Admin Authentication Module

FastAPI dependency guarding the form administration endpoints.
Tokens are verified with python-jose; issuing them is left to the
identity provider that shares SECRET_KEY/ALGORITHM with this service.

Outside production every request is admitted as the system administrator
so the admin UI can be used locally without a token.

Usage:
    from auth import require_admin

    @router.post("/forms")
    async def create_form(admin_id: str = Depends(require_admin)):
        ...
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config.settings import settings
from utils.exceptions import AuthenticationError, AuthorizationError
from utils.logging import get_logger

logger = get_logger(__name__)

# Bearer token extraction; missing headers are handled below, not by FastAPI
bearer_scheme = HTTPBearer(auto_error=False)

DEVELOPMENT_ADMIN_ID = "admin-user-id"
ADMIN_ROLE = "admin"


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decode and validate a JWT access token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload, or None if invalid
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"JWT decode failed: {e}")
        return None


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """
    FastAPI dependency returning the acting administrator's id.

    Raises:
        AuthenticationError: 401 if the token is missing or invalid
        AuthorizationError: 403 if the token lacks the admin role
    """
    if not settings.is_production:
        return DEVELOPMENT_ADMIN_ID

    if credentials is None:
        raise AuthenticationError()

    payload = decode_access_token(credentials.credentials)
    if payload is None or not payload.get("sub"):
        raise AuthenticationError("Could not validate credentials")

    if payload.get("role") != ADMIN_ROLE:
        logger.warning(f"Non-admin token rejected for subject: {payload.get('sub')}")
        raise AuthorizationError("Admin role required")

    return str(payload["sub"])
