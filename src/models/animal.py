from datetime import datetime
from typing import Annotated, Optional

from pydantic import AliasChoices, BeforeValidator, Field

from src.models.common import AnimalCategory, ApiModel, HealthStatus, Reference, Sex


def _normalize_sex(value):
    # Older clients send lowercase "male"/"female"
    if isinstance(value, str):
        return value.strip().capitalize()
    return value


SexInput = Annotated[Sex, BeforeValidator(_normalize_sex)]


class AnimalCreate(ApiModel):
    name: str = Field(min_length=1)
    species: Optional[str] = None
    species_id: Optional[Reference] = None
    category: Optional[AnimalCategory] = None
    age: Optional[float] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    sex: SexInput = Field(validation_alias=AliasChoices("sex", "gender"))
    status: HealthStatus
    enclosure_id: Reference
    caretaker_id: Optional[Reference] = None
    doctor_id: Optional[Reference] = None
    dob: datetime
    arrival_date: datetime
    last_checkup: Optional[datetime] = None
    info: Optional[str] = None
    description: Optional[str] = None
    img_url: Optional[str] = None
    images: Optional[list[str]] = None


class AnimalUpdate(ApiModel):
    non_nullable = ("name", "sex", "status", "enclosure_id", "dob", "arrival_date")

    name: Optional[str] = Field(default=None, min_length=1)
    species: Optional[str] = None
    species_id: Optional[Reference] = None
    category: Optional[AnimalCategory] = None
    age: Optional[float] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    sex: Optional[SexInput] = Field(
        default=None, validation_alias=AliasChoices("sex", "gender")
    )
    status: Optional[HealthStatus] = None
    enclosure_id: Optional[Reference] = None
    caretaker_id: Optional[Reference] = None
    doctor_id: Optional[Reference] = None
    dob: Optional[datetime] = None
    arrival_date: Optional[datetime] = None
    last_checkup: Optional[datetime] = None
    info: Optional[str] = None
    description: Optional[str] = None
    img_url: Optional[str] = None
    images: Optional[list[str]] = None
