"""
Client-side aggregate store.

Holds one list per entity collection, applies mutations only after the API
confirmed them, and answers every dashboard question from the lists it holds.
Derived values are recomputed on each call.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from src.client.repositories import ZooApi
from src.core.exceptions import ApiError, PermissionDeniedError
from src.domain import derivations
from src.domain.permissions import (
    ALL_ROLES,
    ANIMAL_DELETE,
    ANIMAL_WRITE,
    AUDIT_READ,
    ENCLOSURE_DELETE,
    ENCLOSURE_WRITE,
    FEEDING_WRITE,
    INVENTORY_WRITE,
    MEDICAL_READ,
    MEDICAL_WRITE,
    NOTIFICATION_ADMIN,
    SPECIES_WRITE,
    has_permission,
)
from src.domain.refs import matches_id
from src.utils.logging import get_logger

logger = get_logger(__name__)

Entity = dict[str, Any]


class CollectionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


# collection -> (read, create, update, delete roles); None means the API has no such route
COLLECTION_ROLES = {
    "animals": (ALL_ROLES, ANIMAL_WRITE, ANIMAL_WRITE, ANIMAL_DELETE),
    "enclosures": (ALL_ROLES, ENCLOSURE_WRITE, ENCLOSURE_WRITE, ENCLOSURE_DELETE),
    "inventory": (ALL_ROLES, INVENTORY_WRITE, INVENTORY_WRITE, INVENTORY_WRITE),
    "medical_records": (MEDICAL_READ, MEDICAL_WRITE, MEDICAL_WRITE, MEDICAL_WRITE),
    "feeding_schedules": (ALL_ROLES, FEEDING_WRITE, FEEDING_WRITE, FEEDING_WRITE),
    "notifications": (ALL_ROLES, NOTIFICATION_ADMIN, None, NOTIFICATION_ADMIN),
    "species": (ALL_ROLES, SPECIES_WRITE, SPECIES_WRITE, SPECIES_WRITE),
    "audit_logs": (AUDIT_READ, None, None, None),
}


class AggregateStore:
    def __init__(self, api: Optional[ZooApi] = None, user: Any = None):
        self.api = api or ZooApi()
        self.user = user

        self.animals: list[Entity] = []
        self.enclosures: list[Entity] = []
        self.inventory: list[Entity] = []
        self.medical_records: list[Entity] = []
        self.feeding_schedules: list[Entity] = []
        self.notifications: list[Entity] = []
        self.audit_logs: list[Entity] = []
        self.species: list[Entity] = []
        self.unread_count = 0

        self.states = {name: CollectionState.IDLE for name in COLLECTION_ROLES}
        self.errors: dict[str, Optional[str]] = {name: None for name in COLLECTION_ROLES}

    # Mutations

    def _items(self, collection: str) -> list[Entity]:
        if collection not in COLLECTION_ROLES:
            raise KeyError(f"Unknown collection '{collection}'")
        return getattr(self, collection)

    def add(self, collection: str, entity: Entity) -> None:
        items = self._items(collection)
        items.append(dict(entity))
        self.states[collection] = CollectionState.READY

    def update(self, collection: str, entity_id: str, partial: Mapping[str, Any]) -> None:
        """Merge ``partial`` into the entity with ``entity_id``; no-op when absent."""
        items = self._items(collection)
        index = next((i for i, e in enumerate(items) if e.get("id") == entity_id), None)
        if index is None:
            index = next((i for i, e in enumerate(items) if e.get("_id") == entity_id), None)
        if index is None:
            return
        items[index] = {**items[index], **partial}

    def remove(self, collection: str, entity_id: str) -> None:
        items = self._items(collection)
        items[:] = [e for e in items if not matches_id(e, entity_id)]
        if not items and self.states[collection] == CollectionState.READY:
            self.states[collection] = CollectionState.EMPTY

    def state(self, collection: str) -> CollectionState:
        return self.states[collection]

    # Actions

    def _check(self, collection: str, roles) -> None:
        if roles is None or not has_permission(self.user, roles):
            logger.warning(f"Blocked action on {collection} for current user")
            raise PermissionDeniedError()

    def _call(self, collection: str, call: Callable[[], Any]) -> Any:
        try:
            result = call()
        except ApiError as e:
            self.states[collection] = CollectionState.ERROR
            self.errors[collection] = e.message
            logger.error(f"Request for {collection} failed: {e.message}")
            raise
        self.errors[collection] = None
        if self.states[collection] == CollectionState.ERROR:
            self.states[collection] = (
                CollectionState.READY if self._items(collection) else CollectionState.EMPTY
            )
        return result

    def fetch(self, collection: str, filters: Optional[Mapping[str, Any]] = None) -> list[Entity]:
        self._check(collection, COLLECTION_ROLES[collection][0])
        repository = getattr(self.api, collection)
        self.states[collection] = CollectionState.LOADING
        envelope = self._call(collection, lambda: repository.list(filters))
        items = repository.items(envelope)
        setattr(self, collection, items)
        self.states[collection] = CollectionState.READY if items else CollectionState.EMPTY
        return items

    def fetch_animals(self, filters=None):
        return self.fetch("animals", filters)

    def fetch_enclosures(self, filters=None):
        return self.fetch("enclosures", filters)

    def fetch_inventory(self, filters=None):
        return self.fetch("inventory", filters)

    def fetch_medical_records(self, filters=None):
        return self.fetch("medical_records", filters)

    def fetch_feeding_schedules(self, filters=None):
        return self.fetch("feeding_schedules", filters)

    def fetch_species(self, filters=None):
        return self.fetch("species", filters)

    def fetch_audit_logs(self, filters=None):
        return self.fetch("audit_logs", filters)

    def fetch_notifications(self, filters=None):
        items = self.fetch("notifications", filters)
        self.refresh_unread_count()
        return items

    def create(self, collection: str, data: Mapping[str, Any]) -> Entity:
        self._check(collection, COLLECTION_ROLES[collection][1])
        repository = getattr(self.api, collection)
        envelope = self._call(collection, lambda: repository.create(data))
        entity = repository.item(envelope)
        self.add(collection, entity)
        if collection == "notifications" and not entity.get("read"):
            self.unread_count += 1
        return entity

    def save(self, collection: str, entity_id: str, changes: Mapping[str, Any]) -> Entity:
        self._check(collection, COLLECTION_ROLES[collection][2])
        repository = getattr(self.api, collection)
        envelope = self._call(collection, lambda: repository.update(entity_id, changes))
        entity = repository.item(envelope)
        self.update(collection, entity_id, entity)
        return entity

    def delete(self, collection: str, entity_id: str) -> None:
        self._check(collection, COLLECTION_ROLES[collection][3])
        repository = getattr(self.api, collection)
        was_unread = any(
            matches_id(n, entity_id) and not n.get("read")
            for n in self.notifications
        )
        self._call(collection, lambda: repository.delete(entity_id))
        self.remove(collection, entity_id)
        if collection == "notifications" and was_unread:
            self.unread_count = max(0, self.unread_count - 1)

    def restock(self, item_id: str, quantity: int) -> Entity:
        self._check("inventory", INVENTORY_WRITE)
        envelope = self._call(
            "inventory", lambda: self.api.inventory.restock(item_id, quantity)
        )
        item = self.api.inventory.item(envelope)
        self.update("inventory", item_id, item)
        return item

    def complete_feeding(self, schedule_id: str, notes: Optional[str] = None) -> Entity:
        self._check("feeding_schedules", FEEDING_WRITE)
        envelope = self._call(
            "feeding_schedules",
            lambda: self.api.feeding_schedules.complete(schedule_id, notes),
        )
        schedule = self.api.feeding_schedules.item(envelope)
        self.update("feeding_schedules", schedule_id, schedule)
        return schedule

    def mark_notification_read(self, notification_id: str) -> None:
        self._check("notifications", ALL_ROLES)
        self._call(
            "notifications", lambda: self.api.notifications.mark_read(notification_id)
        )
        self.update("notifications", notification_id, {"read": True})
        self.unread_count = max(0, self.unread_count - 1)

    def mark_all_notifications_read(self) -> None:
        self._check("notifications", ALL_ROLES)
        self._call("notifications", self.api.notifications.mark_all_read)
        self.notifications = [{**n, "read": True} for n in self.notifications]
        self.unread_count = 0

    def delete_notification(self, notification_id: str) -> None:
        self.delete("notifications", notification_id)

    def refresh_unread_count(self) -> int:
        self._check("notifications", ALL_ROLES)
        self.unread_count = self._call("notifications", self.api.notifications.unread_count)
        return self.unread_count

    # Derived reads

    def low_stock_items(self) -> list[Entity]:
        return derivations.low_stock_items(self.inventory)

    def stock_status(self, item: Mapping[str, Any]) -> str:
        return derivations.stock_status(item)

    def expiring_soon_items(self, now: Optional[datetime] = None) -> list[Entity]:
        return [i for i in self.inventory if derivations.is_expiring_soon(i, now)]

    def occupancy(self, enclosure: Mapping[str, Any]) -> int:
        return derivations.occupancy_percentage(enclosure)

    def dashboard_stats(self, now: Optional[datetime] = None) -> derivations.DashboardStats:
        return derivations.dashboard_stats(
            self.animals, self.inventory, self.feeding_schedules, now=now
        )

    def animals_by_category(self, category: str) -> list[Entity]:
        return [a for a in self.animals if a.get("category") == category]

    def medical_records_by_animal(self, animal_id: str) -> list[Entity]:
        return derivations.records_for_animal(self.medical_records, animal_id)

    def feeding_schedules_by_animal(self, animal_id: str) -> list[Entity]:
        return derivations.records_for_animal(self.feeding_schedules, animal_id)

    def unread_notifications(self) -> list[Entity]:
        return [n for n in self.notifications if not n.get("read")]

    def search_animals(self, term: str = "", category=None, status=None) -> list[Entity]:
        return derivations.search_animals(self.animals, term, category, status)

    def search_inventory(self, term: str = "", category=None) -> list[Entity]:
        return derivations.search_inventory(self.inventory, term, category)

    def filter_audit_logs(self, term: str = "", action=None) -> list[Entity]:
        return derivations.filter_audit_logs(self.audit_logs, term, action)
