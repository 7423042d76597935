from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.domain.permissions import MEDICAL_READ, MEDICAL_WRITE
from src.models.medical_record import MedicalRecordCreate, MedicalRecordUpdate
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.medical import MedicalRecordService
from src.services.resources import paginate
from src.services.store import Stores

router = APIRouter(prefix="/api/medical-records", tags=["Medical Records"])


def medical_service(stores: Stores = Depends(get_stores)) -> MedicalRecordService:
    return MedicalRecordService(stores["medical-records"], stores["audit-logs"])


@router.get("")
@handle_route_errors("Failed to fetch medical records")
async def list_medical_records(
    animal_id: Optional[str] = Query(None, alias="animalId"),
    doctor_id: Optional[str] = Query(None, alias="doctorId"),
    type: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    user: User = Depends(require_roles(MEDICAL_READ)),
    service: MedicalRecordService = Depends(medical_service),
):
    records = service.search(animal_id=animal_id, doctor_id=doctor_id, type=type)
    records = sorted(records, key=lambda r: r.get("date") or "", reverse=True)
    items, pagination = paginate(records, page, limit)
    return envelope(
        "Medical records retrieved successfully", medicalRecords=items, pagination=pagination
    )


@router.post("")
@handle_route_errors("Failed to create medical record")
async def create_medical_record(
    payload: MedicalRecordCreate,
    request: Request,
    user: User = Depends(require_roles(MEDICAL_WRITE)),
    service: MedicalRecordService = Depends(medical_service),
):
    record = service.create(payload.to_create_document(), actor_for(request, user))
    return envelope("Medical record created successfully", medicalRecord=record)


@router.get("/animal/{animal_id}")
@handle_route_errors("Failed to fetch medical history")
async def get_animal_medical_history(
    animal_id: str,
    user: User = Depends(require_roles(MEDICAL_READ)),
    service: MedicalRecordService = Depends(medical_service),
):
    history = service.history(animal_id)
    return envelope(
        "Medical history retrieved successfully", count=len(history), medicalHistory=history
    )


@router.get("/{record_id}")
@handle_route_errors("Failed to fetch medical record")
async def get_medical_record(
    record_id: str,
    user: User = Depends(require_roles(MEDICAL_READ)),
    service: MedicalRecordService = Depends(medical_service),
):
    return envelope("Medical record retrieved successfully", medicalRecord=service.get(record_id))


@router.put("/{record_id}")
@handle_route_errors("Failed to update medical record")
async def update_medical_record(
    record_id: str,
    payload: MedicalRecordUpdate,
    request: Request,
    user: User = Depends(require_roles(MEDICAL_WRITE)),
    service: MedicalRecordService = Depends(medical_service),
):
    record = service.update(
        record_id, payload.to_update_document(), actor_for(request, user)
    )
    return envelope("Medical record updated successfully", medicalRecord=record)


@router.delete("/{record_id}")
@handle_route_errors("Failed to delete medical record")
async def delete_medical_record(
    record_id: str,
    request: Request,
    user: User = Depends(require_roles(MEDICAL_WRITE)),
    service: MedicalRecordService = Depends(medical_service),
):
    service.delete(record_id, actor_for(request, user))
    return envelope("Medical record deleted successfully")
