from datetime import datetime
from typing import Optional

from pydantic import Field

from src.models.common import ApiModel, Reference


class EnclosureCreate(ApiModel):
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    capacity: int = Field(gt=0)
    current_occupancy: Optional[int] = Field(default=None, ge=0)
    location: str = Field(min_length=1)
    temperature: Optional[float] = Field(default=None, ge=-50, le=60)
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    last_cleaned: Optional[datetime] = None
    caretaker_id: Optional[Reference] = None


class EnclosureUpdate(ApiModel):
    non_nullable = ("name", "type", "capacity", "location")

    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[str] = Field(default=None, min_length=1)
    capacity: Optional[int] = Field(default=None, gt=0)
    current_occupancy: Optional[int] = Field(default=None, ge=0)
    location: Optional[str] = Field(default=None, min_length=1)
    temperature: Optional[float] = Field(default=None, ge=-50, le=60)
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    last_cleaned: Optional[datetime] = None
    caretaker_id: Optional[Reference] = None
