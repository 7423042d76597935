from datetime import datetime
from typing import Optional

from src.domain.derivations import is_feeding_overdue, sort_feeding_schedules, utcnow
from src.domain.refs import ref_id
from src.services.resources import Actor, ResourceService, timestamp
from src.services.store import Document, RecordStore


class FeedingScheduleService(ResourceService):
    """
    Feeding schedules with a server-computed ``isOverdue``.

    The flag is derived from ``lastFed``/``createdAt`` and ``frequency`` on
    every read and never written to the store.
    """

    def __init__(self, store: RecordStore, audit_store: Optional[RecordStore] = None):
        super().__init__(store, "Feeding schedule", audit_store)

    @staticmethod
    def with_overdue(schedule: Document, now: Optional[datetime] = None) -> Document:
        return {**schedule, "isOverdue": is_feeding_overdue(schedule, now)}

    def search(
        self,
        animal_id: Optional[str] = None,
        caretaker_id: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_overdue: Optional[bool] = None,
        now: Optional[datetime] = None,
    ) -> list[Document]:
        now = now or utcnow()
        schedules = [self.with_overdue(s, now) for s in self.list()]
        if animal_id:
            schedules = [s for s in schedules if ref_id(s.get("animalId")) == animal_id]
        if caretaker_id:
            schedules = [
                s for s in schedules if ref_id(s.get("caretakerId")) == caretaker_id
            ]
        if is_active is not None:
            schedules = [s for s in schedules if s.get("isActive", True) == is_active]
        if is_overdue is not None:
            schedules = [s for s in schedules if s["isOverdue"] == is_overdue]
        return schedules

    def overdue(self, now: Optional[datetime] = None) -> list[Document]:
        return sort_feeding_schedules(self.search(is_overdue=True, now=now), overdue_first=True)

    def fetch(self, record_id: str) -> Document:
        return self.with_overdue(self.get(record_id))

    def add_schedule(self, data: Document, actor: Optional[Actor] = None) -> Document:
        data = {key: value for key, value in data.items() if key != "isOverdue"}
        return self.with_overdue(self.create(data, actor))

    def save(self, record_id: str, changes: Document, actor: Optional[Actor] = None) -> Document:
        changes = {key: value for key, value in changes.items() if key != "isOverdue"}
        return self.with_overdue(self.update(record_id, changes, actor))

    def complete(
        self, record_id: str, notes: Optional[str] = None, actor: Optional[Actor] = None
    ) -> Document:
        changes: Document = {"lastFed": timestamp()}
        if notes:
            changes["notes"] = notes
        return self.with_overdue(self.update(record_id, changes, actor))
