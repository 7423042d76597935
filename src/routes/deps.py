from typing import Iterable, Optional

from fastapi import Depends, Request

from src.core.configs import settings
from src.core.exceptions import PermissionDeniedError
from src.core.security import get_current_user
from src.domain.permissions import require_permission
from src.models.user import User
from src.services.resources import Actor
from src.services.store import Stores, build_stores
from src.utils.logging import get_logger

logger = get_logger(__name__)

_stores: Optional[Stores] = None


def get_stores() -> Stores:
    """Process-wide store registry, built on first use."""
    global _stores
    if _stores is None:
        _stores = build_stores(settings.storage_backend)
    return _stores


def require_roles(roles: Iterable[str]):
    """Dependency resolving the current user and rejecting roles outside ``roles``."""
    roles = frozenset(roles)

    async def dependency(user: User = Depends(get_current_user)) -> User:
        try:
            require_permission(user, roles)
        except PermissionDeniedError:
            logger.warning(f"User {user.id} with role {user.role_value} denied")
            raise
        return user

    return dependency


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def actor_for(request: Request, user: User) -> Actor:
    return Actor(user, client_ip(request))
