from typing import Optional

from src.domain.refs import ref_id
from src.services.resources import ResourceService
from src.services.store import Document, RecordStore


class MedicalRecordService(ResourceService):
    def __init__(self, store: RecordStore, audit_store: Optional[RecordStore] = None):
        super().__init__(store, "Medical record", audit_store)

    def search(
        self,
        animal_id: Optional[str] = None,
        doctor_id: Optional[str] = None,
        type: Optional[str] = None,
    ) -> list[Document]:
        predicates = []
        if animal_id:
            predicates.append(lambda r: ref_id(r.get("animalId")) == animal_id)
        if doctor_id:
            predicates.append(lambda r: ref_id(r.get("doctorId")) == doctor_id)
        if type:
            predicates.append(lambda r: r.get("type") == type)
        return self.list(predicates)

    def history(self, animal_id: str) -> list[Document]:
        """All records of an animal, most recent first."""
        records = self.search(animal_id=animal_id)
        return sorted(records, key=lambda r: r.get("date") or "", reverse=True)
