from fastapi import APIRouter, Depends, Request

from src.core.security import get_current_user
from src.domain.permissions import SPECIES_WRITE
from src.models.species import SpeciesCreate, SpeciesUpdate
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.resources import ResourceService
from src.services.store import Stores

router = APIRouter(prefix="/api/species", tags=["Species"])


def species_service(stores: Stores = Depends(get_stores)) -> ResourceService:
    return ResourceService(stores["species"], "Species", stores["audit-logs"])


@router.get("")
@handle_route_errors("Failed to fetch species")
async def list_species(
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(species_service),
):
    species = sorted(service.list(), key=lambda s: (s.get("commonName") or "").lower())
    return envelope("Species retrieved successfully", count=len(species), species=species)


@router.post("")
@handle_route_errors("Failed to create species")
async def create_species(
    payload: SpeciesCreate,
    request: Request,
    user: User = Depends(require_roles(SPECIES_WRITE)),
    service: ResourceService = Depends(species_service),
):
    species = service.create(payload.to_create_document(), actor_for(request, user))
    return envelope("Species created successfully", species=species)


@router.get("/{species_id}")
@handle_route_errors("Failed to fetch species")
async def get_species(
    species_id: str,
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(species_service),
):
    return envelope("Species retrieved successfully", species=service.get(species_id))


@router.put("/{species_id}")
@handle_route_errors("Failed to update species")
async def update_species(
    species_id: str,
    payload: SpeciesUpdate,
    request: Request,
    user: User = Depends(require_roles(SPECIES_WRITE)),
    service: ResourceService = Depends(species_service),
):
    species = service.update(
        species_id, payload.to_update_document(), actor_for(request, user)
    )
    return envelope("Species updated successfully", species=species)


@router.delete("/{species_id}")
@handle_route_errors("Failed to delete species")
async def delete_species(
    species_id: str,
    request: Request,
    user: User = Depends(require_roles(SPECIES_WRITE)),
    service: ResourceService = Depends(species_service),
):
    service.delete(species_id, actor_for(request, user))
    return envelope("Species deleted successfully")
