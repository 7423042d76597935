from datetime import datetime
from typing import Optional

from pydantic import Field

from src.models.common import ApiModel, Reference

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class FeedingScheduleCreate(ApiModel):
    animal_id: Reference
    item: Reference
    food_type: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    frequency: str = Field(min_length=1)
    time: str = Field(pattern=TIME_PATTERN)
    caretaker_id: Reference
    last_fed: Optional[datetime] = None
    notes: Optional[str] = None
    is_active: bool = True


class FeedingScheduleUpdate(ApiModel):
    non_nullable = (
        "animal_id",
        "item",
        "food_type",
        "quantity",
        "frequency",
        "time",
        "caretaker_id",
        "is_active",
    )

    animal_id: Optional[Reference] = None
    item: Optional[Reference] = None
    food_type: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[float] = Field(default=None, gt=0)
    frequency: Optional[str] = Field(default=None, min_length=1)
    time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    caretaker_id: Optional[Reference] = None
    last_fed: Optional[datetime] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class FeedingCompletion(ApiModel):
    notes: Optional[str] = None
