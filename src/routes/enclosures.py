from fastapi import APIRouter, Depends, Request

from src.core.security import get_current_user
from src.domain.permissions import ENCLOSURE_DELETE, ENCLOSURE_WRITE
from src.models.enclosure import EnclosureCreate, EnclosureUpdate
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.resources import ResourceService
from src.services.store import Stores

router = APIRouter(prefix="/api/enclosures", tags=["Enclosures"])


def enclosure_service(stores: Stores = Depends(get_stores)) -> ResourceService:
    return ResourceService(stores["enclosures"], "Enclosure", stores["audit-logs"])


@router.get("")
@handle_route_errors("Failed to fetch enclosures")
async def list_enclosures(
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(enclosure_service),
):
    enclosures = service.list()
    return envelope(
        "Enclosures retrieved successfully", count=len(enclosures), enclosures=enclosures
    )


@router.post("")
@handle_route_errors("Failed to create enclosure")
async def create_enclosure(
    payload: EnclosureCreate,
    request: Request,
    user: User = Depends(require_roles(ENCLOSURE_WRITE)),
    service: ResourceService = Depends(enclosure_service),
):
    document = payload.to_create_document()
    document.setdefault("currentOccupancy", 0)
    enclosure = service.create(document, actor_for(request, user))
    return envelope("Enclosure created successfully", enclosure=enclosure)


@router.get("/{enclosure_id}")
@handle_route_errors("Failed to fetch enclosure")
async def get_enclosure(
    enclosure_id: str,
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(enclosure_service),
):
    return envelope("Enclosure retrieved successfully", enclosure=service.get(enclosure_id))


@router.put("/{enclosure_id}")
@handle_route_errors("Failed to update enclosure")
async def update_enclosure(
    enclosure_id: str,
    payload: EnclosureUpdate,
    request: Request,
    user: User = Depends(require_roles(ENCLOSURE_WRITE)),
    service: ResourceService = Depends(enclosure_service),
):
    enclosure = service.update(
        enclosure_id, payload.to_update_document(), actor_for(request, user)
    )
    return envelope("Enclosure updated successfully", enclosure=enclosure)


@router.delete("/{enclosure_id}")
@handle_route_errors("Failed to delete enclosure")
async def delete_enclosure(
    enclosure_id: str,
    request: Request,
    user: User = Depends(require_roles(ENCLOSURE_DELETE)),
    service: ResourceService = Depends(enclosure_service),
):
    service.delete(enclosure_id, actor_for(request, user))
    return envelope("Enclosure deleted successfully")
