"""
Derived views over the in-memory collections.

Every function here is pure: it reads JSON-shaped records (camelCase keys, as
returned by the API) and recomputes its result on each call.
"""

import math
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.domain.refs import ref_id, species_name

Record = Mapping[str, Any]

DEFAULT_MIN_THRESHOLD = 10
DEFAULT_MAX_THRESHOLD = 100
EXPIRY_WARNING = timedelta(days=30)
CHECKUP_STALENESS_DAYS = 30

SICK_STATUSES = ("sick", "injured")
ALERT_STATUSES = ("sick", "injured", "quarantine")

FEEDING_INTERVALS = {
    "daily": timedelta(hours=24),
    "twice-daily": timedelta(hours=12),
    "weekly": timedelta(days=7),
    "bi-weekly": timedelta(days=14),
}


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an API timestamp into an aware UTC datetime."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _number(value: Any, default: float) -> float:
    # Absent or zero thresholds fall back to the defaults, as the UI always did
    return value if isinstance(value, (int, float)) and value else default


# Inventory


def is_low_stock(item: Record) -> bool:
    quantity = item.get("quantity") or 0
    return quantity <= _number(item.get("minThreshold"), DEFAULT_MIN_THRESHOLD)


def stock_status(item: Record) -> str:
    """Classify an item as exactly one of ``low``, ``overstocked`` or ``normal``."""
    quantity = item.get("quantity") or 0
    if quantity <= _number(item.get("minThreshold"), DEFAULT_MIN_THRESHOLD):
        return "low"
    if quantity > _number(item.get("maxThreshold"), DEFAULT_MAX_THRESHOLD):
        return "overstocked"
    return "normal"


def stock_percentage(item: Record) -> float:
    max_threshold = _number(item.get("maxThreshold"), DEFAULT_MAX_THRESHOLD)
    return min((item.get("quantity") or 0) / max_threshold * 100, 100)


def low_stock_items(inventory: Iterable[Record]) -> list[Record]:
    return [item for item in inventory if is_low_stock(item)]


def is_expiring_soon(
    item: Record, now: Optional[datetime] = None, window: timedelta = EXPIRY_WARNING
) -> bool:
    """Expiry is less than ``window`` away; already expired items count too."""
    expiry = parse_datetime(item.get("expiryDate"))
    if expiry is None:
        return False
    return expiry - (now or utcnow()) < window


def is_expired(item: Record, now: Optional[datetime] = None) -> bool:
    expiry = parse_datetime(item.get("expiryDate"))
    return expiry is not None and expiry < (now or utcnow())


def inventory_value(item: Record) -> float:
    return (item.get("quantity") or 0) * (item.get("cost") or 0)


# Enclosures


def occupancy_percentage(enclosure: Record) -> int:
    capacity = enclosure.get("capacity") or 0
    if capacity <= 0:
        return 0
    current = enclosure.get("currentOccupancy") or 0
    # half-up, matching the percentages the dashboard has always shown
    return math.floor(current / capacity * 100 + 0.5)


def occupancy_display_percentage(enclosure: Record) -> int:
    return min(occupancy_percentage(enclosure), 100)


def occupancy_level(enclosure: Record) -> str:
    percentage = occupancy_percentage(enclosure)
    if percentage >= 90:
        return "full"
    if percentage >= 75:
        return "high"
    if percentage >= 50:
        return "medium"
    return "low"


# Feeding


def feeding_interval(frequency: Optional[str]) -> timedelta:
    return FEEDING_INTERVALS.get((frequency or "").lower(), FEEDING_INTERVALS["daily"])


def is_feeding_overdue(schedule: Record, now: Optional[datetime] = None) -> bool:
    """An active schedule is overdue once its interval has elapsed since the last feeding."""
    if schedule.get("isActive") is False:
        return False
    reference = parse_datetime(schedule.get("lastFed")) or parse_datetime(
        schedule.get("createdAt")
    )
    if reference is None:
        return False
    return (now or utcnow()) - reference > feeding_interval(schedule.get("frequency"))


def next_feeding_at(schedule: Record) -> Optional[datetime]:
    reference = parse_datetime(schedule.get("lastFed")) or parse_datetime(
        schedule.get("createdAt")
    )
    if reference is None:
        return None
    return reference + feeding_interval(schedule.get("frequency"))


def sort_feeding_schedules(
    schedules: Iterable[Record], overdue_first: bool = False
) -> list[Record]:
    """Overdue view: least recently fed first. Otherwise by time of day."""
    if overdue_first:
        epoch = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(
            schedules,
            key=lambda s: parse_datetime(s.get("lastFed")) or epoch,
        )
    return sorted(schedules, key=lambda s: s.get("time") or "")


# Animals


def needs_checkup(
    animal: Record,
    now: Optional[datetime] = None,
    staleness_days: int = CHECKUP_STALENESS_DAYS,
) -> bool:
    last_checkup = parse_datetime(animal.get("lastCheckup"))
    if last_checkup is None:
        return True
    return (now or utcnow()) - last_checkup > timedelta(days=staleness_days)


def count_by(records: Iterable[Record], field: str) -> dict[str, int]:
    return dict(Counter(r[field] for r in records if r.get(field)))


class HealthAlerts(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    needs_attention: list[dict[str, Any]]
    needs_checkup: list[dict[str, Any]]
    recovering: list[dict[str, Any]]
    total_alerts: int


def health_alerts(
    animals: Iterable[Record],
    now: Optional[datetime] = None,
    staleness_days: int = CHECKUP_STALENESS_DAYS,
) -> HealthAlerts:
    animals = list(animals)
    attention = [dict(a) for a in animals if a.get("status") in ALERT_STATUSES]
    checkup = [dict(a) for a in animals if needs_checkup(a, now, staleness_days)]
    return HealthAlerts(
        needs_attention=attention,
        needs_checkup=checkup,
        recovering=[dict(a) for a in animals if a.get("status") == "recovering"],
        total_alerts=len(attention) + len(checkup),
    )


# Dashboard


class DashboardStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_animals: int
    healthy_animals: int
    sick_animals: int
    low_inventory_items: int
    upcoming_checkups: int
    feedings_due: int
    overdue_feedings: int
    active_feeding_schedules: int
    category_counts: dict[str, int]
    inventory_by_category: dict[str, int]


def dashboard_stats(
    animals: Iterable[Record],
    inventory: Iterable[Record],
    feeding_schedules: Iterable[Record] = (),
    now: Optional[datetime] = None,
    staleness_days: int = CHECKUP_STALENESS_DAYS,
) -> DashboardStats:
    animals = list(animals)
    inventory = list(inventory)
    feeding_schedules = list(feeding_schedules)

    # isOverdue comes from the server; it is displayed, not recomputed
    overdue = sum(1 for s in feeding_schedules if s.get("isOverdue"))

    return DashboardStats(
        total_animals=len(animals),
        healthy_animals=sum(1 for a in animals if a.get("status") == "healthy"),
        sick_animals=sum(1 for a in animals if a.get("status") in SICK_STATUSES),
        low_inventory_items=sum(1 for i in inventory if stock_status(i) == "low"),
        upcoming_checkups=sum(
            1
            for a in animals
            if a.get("status") != "deceased" and needs_checkup(a, now, staleness_days)
        ),
        feedings_due=overdue,
        overdue_feedings=overdue,
        active_feeding_schedules=sum(
            1 for s in feeding_schedules if s.get("isActive", True)
        ),
        category_counts=count_by(animals, "category"),
        inventory_by_category=count_by(inventory, "category"),
    )


# List page filters


def _contains(value: Any, term: str) -> bool:
    return bool(value) and term in str(value).lower()


def search_animals(
    animals: Iterable[Record],
    term: Optional[str] = "",
    category: Optional[str] = None,
    status: Optional[str] = None,
) -> list[Record]:
    term = (term or "").strip().lower()
    results = []
    for animal in animals:
        if term and not (
            _contains(animal.get("name"), term) or _contains(species_name(animal), term)
        ):
            continue
        if category and category != "all" and animal.get("category") != category:
            continue
        if status and status != "all" and animal.get("status") != status:
            continue
        results.append(animal)
    return results


def search_inventory(
    inventory: Iterable[Record], term: Optional[str] = "", category: Optional[str] = None
) -> list[Record]:
    term = (term or "").strip().lower()
    return [
        item
        for item in inventory
        if (not term or _contains(item.get("name"), term) or _contains(item.get("supplier"), term))
        and (not category or category == "all" or item.get("category") == category)
    ]


def filter_audit_logs(
    logs: Iterable[Record], term: Optional[str] = "", action: Optional[str] = None
) -> list[Record]:
    term = (term or "").strip().lower()
    return [
        log
        for log in logs
        if (
            not term
            or _contains(log.get("resource"), term)
            or _contains(log.get("action"), term)
            or _contains(log.get("userId"), term)
        )
        and (not action or action == "all" or log.get("action") == action)
    ]


def records_for_animal(records: Iterable[Record], animal_id: str) -> list[Record]:
    return [r for r in records if ref_id(r.get("animalId")) == animal_id]
