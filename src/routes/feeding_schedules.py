from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.core.security import get_current_user
from src.domain.derivations import sort_feeding_schedules
from src.domain.permissions import FEEDING_WRITE
from src.models.feeding_schedule import (
    FeedingCompletion,
    FeedingScheduleCreate,
    FeedingScheduleUpdate,
)
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.feeding import FeedingScheduleService
from src.services.store import Stores

router = APIRouter(prefix="/api/feeding-schedules", tags=["Feeding Schedules"])


def feeding_service(stores: Stores = Depends(get_stores)) -> FeedingScheduleService:
    return FeedingScheduleService(stores["feeding-schedules"], stores["audit-logs"])


@router.get("")
@handle_route_errors("Failed to fetch feeding schedules")
async def list_feeding_schedules(
    animal_id: Optional[str] = Query(None, alias="animalId"),
    caretaker_id: Optional[str] = Query(None, alias="caretakerId"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    is_overdue: Optional[bool] = Query(None, alias="isOverdue"),
    user: User = Depends(get_current_user),
    service: FeedingScheduleService = Depends(feeding_service),
):
    schedules = service.search(
        animal_id=animal_id,
        caretaker_id=caretaker_id,
        is_active=is_active,
        is_overdue=is_overdue,
    )
    schedules = sort_feeding_schedules(schedules, overdue_first=bool(is_overdue))
    return envelope(
        "Feeding schedules retrieved successfully",
        count=len(schedules),
        feedingSchedules=schedules,
    )


@router.post("")
@handle_route_errors("Failed to create feeding schedule")
async def create_feeding_schedule(
    payload: FeedingScheduleCreate,
    request: Request,
    user: User = Depends(require_roles(FEEDING_WRITE)),
    service: FeedingScheduleService = Depends(feeding_service),
):
    schedule = service.add_schedule(
        payload.to_create_document(), actor_for(request, user)
    )
    return envelope("Feeding schedule created successfully", feedingSchedule=schedule)


@router.get("/overdue")
@handle_route_errors("Failed to fetch overdue feedings")
async def list_overdue_feedings(
    user: User = Depends(get_current_user),
    service: FeedingScheduleService = Depends(feeding_service),
):
    schedules = service.overdue()
    return envelope(
        "Feeding schedules retrieved successfully",
        count=len(schedules),
        feedingSchedules=schedules,
    )


@router.get("/animal/{animal_id}")
@handle_route_errors("Failed to fetch feeding schedules for animal")
async def list_animal_feeding_schedules(
    animal_id: str,
    user: User = Depends(get_current_user),
    service: FeedingScheduleService = Depends(feeding_service),
):
    schedules = sort_feeding_schedules(service.search(animal_id=animal_id))
    return envelope(
        "Feeding schedules retrieved successfully",
        count=len(schedules),
        feedingSchedules=schedules,
    )


@router.get("/{schedule_id}")
@handle_route_errors("Failed to fetch feeding schedule")
async def get_feeding_schedule(
    schedule_id: str,
    user: User = Depends(get_current_user),
    service: FeedingScheduleService = Depends(feeding_service),
):
    return envelope(
        "Feeding schedule retrieved successfully", feedingSchedule=service.fetch(schedule_id)
    )


@router.put("/{schedule_id}")
@handle_route_errors("Failed to update feeding schedule")
async def update_feeding_schedule(
    schedule_id: str,
    payload: FeedingScheduleUpdate,
    request: Request,
    user: User = Depends(require_roles(FEEDING_WRITE)),
    service: FeedingScheduleService = Depends(feeding_service),
):
    schedule = service.save(
        schedule_id, payload.to_update_document(), actor_for(request, user)
    )
    return envelope("Feeding schedule updated successfully", feedingSchedule=schedule)


@router.patch("/{schedule_id}/complete")
@handle_route_errors("Failed to complete feeding")
async def complete_feeding(
    schedule_id: str,
    request: Request,
    payload: Optional[FeedingCompletion] = None,
    user: User = Depends(require_roles(FEEDING_WRITE)),
    service: FeedingScheduleService = Depends(feeding_service),
):
    notes = payload.notes if payload else None
    schedule = service.complete(schedule_id, notes, actor_for(request, user))
    return envelope("Feeding completed successfully", feedingSchedule=schedule)


@router.delete("/{schedule_id}")
@handle_route_errors("Failed to delete feeding schedule")
async def delete_feeding_schedule(
    schedule_id: str,
    request: Request,
    user: User = Depends(require_roles(FEEDING_WRITE)),
    service: FeedingScheduleService = Depends(feeding_service),
):
    service.delete(schedule_id, actor_for(request, user))
    return envelope("Feeding schedule deleted successfully")
