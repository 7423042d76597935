from datetime import datetime
from typing import Optional

from src.models.common import ApiModel, MedicalRecordType, Reference


class MedicalRecordCreate(ApiModel):
    animal_id: Reference
    doctor_id: Reference
    date: datetime
    type: MedicalRecordType
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    medications: Optional[list[str]] = None
    notes: Optional[str] = None
    next_checkup: Optional[datetime] = None


class MedicalRecordUpdate(ApiModel):
    non_nullable = ("animal_id", "doctor_id", "date", "type")

    animal_id: Optional[Reference] = None
    doctor_id: Optional[Reference] = None
    date: Optional[datetime] = None
    type: Optional[MedicalRecordType] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    medications: Optional[list[str]] = None
    notes: Optional[str] = None
    next_checkup: Optional[datetime] = None
