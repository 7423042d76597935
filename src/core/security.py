from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Request

from src.core.configs import settings
from src.core.exceptions import AuthenticationError
from src.models.user import User
from src.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_COOKIE_NAME = "token"


def create_access_token(
    user: User, expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token for a user.

    Args:
        user: The user the token identifies
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.jwt_expiration_hours)
    )
    payload = {
        "sub": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role_value,
        "exp": expire,
    }
    return jwt.encode(
        payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm
    )


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and validate a JWT access token.

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected access token: {e}")
        return None


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get(TOKEN_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None


async def get_current_user(request: Request) -> User:
    """FastAPI dependency resolving the authenticated user of a request."""
    token = _extract_token(request)
    if not token:
        raise AuthenticationError()

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    try:
        return User(
            id=payload["sub"],
            email=payload.get("email") or "",
            name=payload.get("name") or "",
            role=payload["role"],
        )
    except (KeyError, ValueError) as e:
        logger.warning(f"Malformed token payload: {e}")
        raise AuthenticationError("Invalid or expired token")
