from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# A foreign key arrives either as a bare id or as a populated document
Reference = Union[str, dict[str, Any]]


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )

    # Fields an update may omit but never clear
    non_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_cleared_fields(self):
        for name in self.non_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null")
        return self

    def to_create_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_update_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class Role(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    CARETAKER = "caretaker"


class AnimalCategory(str, Enum):
    MAMMALS = "mammals"
    REPTILES = "reptiles"
    BIRDS = "birds"
    AMPHIBIANS = "amphibians"
    FISH = "fish"
    INSECTS = "insects"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    SICK = "sick"
    INJURED = "injured"
    RECOVERING = "recovering"
    QUARANTINE = "quarantine"
    DECEASED = "deceased"


class Sex(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    UNKNOWN = "Unknown"


class InventoryCategory(str, Enum):
    FOOD = "food"
    MEDICINE = "medicine"
    SUPPLIES = "supplies"
    EQUIPMENT = "equipment"


class MedicalRecordType(str, Enum):
    CHECKUP = "checkup"
    VACCINATION = "vaccination"
    TREATMENT = "treatment"
    SURGERY = "surgery"
    EMERGENCY = "emergency"


class NotificationType(str, Enum):
    LOW_INVENTORY = "low_inventory"
    MEDICAL_CHECKUP = "medical_checkup"
    FEEDING_DUE = "feeding_due"
    ALERT = "alert"
    HEALTH_ALERT = "health_alert"
    MAINTENANCE = "maintenance"
    GENERAL = "general"
    SYSTEM = "system"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
