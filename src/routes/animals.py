from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.core.security import get_current_user
from src.domain.derivations import search_animals
from src.domain.permissions import ANIMAL_DELETE, ANIMAL_WRITE
from src.domain.refs import ref_id
from src.models.animal import AnimalCreate, AnimalUpdate
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.resources import ResourceService
from src.services.store import Stores

router = APIRouter(prefix="/api/animals", tags=["Animals"])


def animal_service(stores: Stores = Depends(get_stores)) -> ResourceService:
    return ResourceService(stores["animals"], "Animal", stores["audit-logs"])


@router.get("")
@handle_route_errors("Failed to fetch animals")
async def list_animals(
    category: Optional[str] = None,
    status: Optional[str] = None,
    enclosure_id: Optional[str] = Query(None, alias="enclosureId"),
    search: Optional[str] = None,
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(animal_service),
):
    predicates = []
    if enclosure_id:
        predicates.append(lambda a: ref_id(a.get("enclosureId")) == enclosure_id)
    animals = search_animals(
        service.list(predicates), term=search, category=category, status=status
    )
    return envelope("Animals retrieved successfully", count=len(animals), animals=animals)


@router.post("")
@handle_route_errors("Failed to create animal")
async def create_animal(
    payload: AnimalCreate,
    request: Request,
    user: User = Depends(require_roles(ANIMAL_WRITE)),
    service: ResourceService = Depends(animal_service),
):
    animal = service.create(payload.to_create_document(), actor_for(request, user))
    return envelope("Animal created successfully", animal=animal)


@router.get("/{animal_id}")
@handle_route_errors("Failed to fetch animal")
async def get_animal(
    animal_id: str,
    user: User = Depends(get_current_user),
    service: ResourceService = Depends(animal_service),
):
    return envelope("Animal retrieved successfully", animal=service.get(animal_id))


@router.put("/{animal_id}")
@handle_route_errors("Failed to update animal")
async def update_animal(
    animal_id: str,
    payload: AnimalUpdate,
    request: Request,
    user: User = Depends(require_roles(ANIMAL_WRITE)),
    service: ResourceService = Depends(animal_service),
):
    animal = service.update(
        animal_id, payload.to_update_document(), actor_for(request, user)
    )
    return envelope("Animal updated successfully", animal=animal)


@router.delete("/{animal_id}")
@handle_route_errors("Failed to delete animal")
async def delete_animal(
    animal_id: str,
    request: Request,
    user: User = Depends(require_roles(ANIMAL_DELETE)),
    service: ResourceService = Depends(animal_service),
):
    service.delete(animal_id, actor_for(request, user))
    return envelope("Animal deleted successfully")
