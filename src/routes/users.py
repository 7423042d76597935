from typing import Optional

from fastapi import APIRouter, Depends

from src.core.security import get_current_user
from src.domain.permissions import CARETAKER, USER_ADMIN
from src.models.user import User
from src.routes.deps import get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.resources import ResourceService, field_equals
from src.services.store import Document, Stores

router = APIRouter(tags=["Users"])

PRIVATE_FIELDS = ("password", "passwordHash")


def user_service(stores: Stores = Depends(get_stores)) -> ResourceService:
    return ResourceService(stores["users"], "User")


def public_profile(document: Document) -> Document:
    return {k: v for k, v in document.items() if k not in PRIVATE_FIELDS}


@router.get("/api/users")
@handle_route_errors("Failed to fetch users")
async def list_users(
    role: Optional[str] = None,
    user: User = Depends(require_roles(USER_ADMIN)),
    service: ResourceService = Depends(user_service),
):
    predicates = [field_equals("role", role)] if role else []
    users = [public_profile(u) for u in service.list(predicates)]
    return envelope("Users retrieved successfully", count=len(users), users=users)


@router.get("/api/caretakers")
@handle_route_errors("Failed to fetch caretakers")
async def list_caretakers(
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(user_service),
):
    caretakers = [
        public_profile(u) for u in service.list([field_equals("role", CARETAKER)])
    ]
    return envelope(
        "Caretakers retrieved successfully", count=len(caretakers), caretakers=caretakers
    )


@router.get("/api/auth/me")
@handle_route_errors("Failed to fetch current user")
async def get_me(user: User = Depends(get_current_user)):
    return envelope(
        "User retrieved successfully",
        user=user.model_dump(by_alias=True, exclude_none=True, mode="json"),
    )
