"""
Per-entity repositories over the zoo API.

Each repository is stateless: it maps CRUD calls onto a resource path and
returns the response envelope unchanged. Failures surface as ``ApiError``.
"""

from typing import Any, List, Mapping, Optional

from src.client.http import ApiClient

Envelope = dict[str, Any]


class ResourceRepository:
    def __init__(self, client: ApiClient, path: str, item_key: str, collection_key: str):
        self.client = client
        self.path = path
        self.item_key = item_key
        self.collection_key = collection_key

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> Envelope:
        return self.client.get(self.path, params=filters)

    def get(self, record_id: str) -> Envelope:
        return self.client.get(f"{self.path}/{record_id}")

    def create(self, data: Mapping[str, Any]) -> Envelope:
        return self.client.post(self.path, json=dict(data))

    def update(self, record_id: str, partial: Mapping[str, Any]) -> Envelope:
        return self.client.put(f"{self.path}/{record_id}", json=dict(partial))

    def delete(self, record_id: str) -> Envelope:
        return self.client.delete(f"{self.path}/{record_id}")

    def items(self, envelope: Envelope) -> List[dict]:
        return list(envelope.get(self.collection_key) or [])

    def item(self, envelope: Envelope) -> dict:
        return envelope[self.item_key]


class InventoryRepository(ResourceRepository):
    def __init__(self, client: ApiClient):
        super().__init__(client, "/api/inventory", "inventoryItem", "inventoryItems")

    def restock(self, record_id: str, quantity: int) -> Envelope:
        return self.client.put(f"{self.path}/{record_id}/restock", json={"quantity": quantity})

    def use(self, record_id: str, quantity: int) -> Envelope:
        return self.client.put(f"{self.path}/{record_id}/use", json={"quantity": quantity})


class FeedingScheduleRepository(ResourceRepository):
    def __init__(self, client: ApiClient):
        super().__init__(
            client, "/api/feeding-schedules", "feedingSchedule", "feedingSchedules"
        )

    def complete(self, record_id: str, notes: Optional[str] = None) -> Envelope:
        body = {"notes": notes} if notes else {}
        return self.client.patch(f"{self.path}/{record_id}/complete", json=body)

    def overdue(self) -> Envelope:
        return self.client.get(f"{self.path}/overdue")

    def by_animal(self, animal_id: str) -> Envelope:
        return self.client.get(f"{self.path}/animal/{animal_id}")


class MedicalRecordRepository(ResourceRepository):
    def __init__(self, client: ApiClient):
        super().__init__(client, "/api/medical-records", "medicalRecord", "medicalRecords")

    def animal_history(self, animal_id: str) -> Envelope:
        return self.client.get(f"{self.path}/animal/{animal_id}")


class NotificationRepository(ResourceRepository):
    def __init__(self, client: ApiClient):
        super().__init__(client, "/api/notifications", "data", "data")

    def unread_count(self) -> int:
        envelope = self.client.get(f"{self.path}/unread-count")
        return int(envelope["data"]["unreadCount"])

    def mark_read(self, record_id: str) -> Envelope:
        return self.client.patch(f"{self.path}/{record_id}/read")

    def mark_all_read(self) -> Envelope:
        return self.client.patch(f"{self.path}/mark-all-read")

    def stats(self) -> Envelope:
        return self.client.get(f"{self.path}/stats")


class ImageRepository:
    """Image uploads go to the external image host behind ``/api/cloudinary``."""

    path = "/api/cloudinary"

    def __init__(self, client: ApiClient):
        self.client = client

    def upload(
        self, filename: str, content: bytes, content_type: str = "application/octet-stream"
    ) -> Envelope:
        return self.client.post(
            f"{self.path}/upload", files={"image": (filename, content, content_type)}
        )

    def delete(self, public_id: str) -> Envelope:
        return self.client.delete(f"{self.path}/{public_id}")


class ReadOnlyRepository:
    def __init__(self, client: ApiClient, path: str, collection_key: str):
        self.client = client
        self.path = path
        self.collection_key = collection_key

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> Envelope:
        return self.client.get(self.path, params=filters)

    def items(self, envelope: Envelope) -> List[dict]:
        return list(envelope.get(self.collection_key) or [])


class DashboardRepository:
    def __init__(self, client: ApiClient):
        self.client = client

    def stats(self) -> dict:
        return self.client.get("/api/dashboard/stats")["stats"]

    def analytics(self) -> dict:
        return self.client.get("/api/dashboard/analytics")["analytics"]

    def health_alerts(self) -> dict:
        return self.client.get("/api/dashboard/health-alerts")["alerts"]


class ZooApi:
    """Every repository bound to one client."""

    def __init__(self, client: Optional[ApiClient] = None):
        self.client = client or ApiClient()
        self.animals = ResourceRepository(self.client, "/api/animals", "animal", "animals")
        self.enclosures = ResourceRepository(
            self.client, "/api/enclosures", "enclosure", "enclosures"
        )
        self.species = ResourceRepository(self.client, "/api/species", "species", "species")
        self.inventory = InventoryRepository(self.client)
        self.medical_records = MedicalRecordRepository(self.client)
        self.feeding_schedules = FeedingScheduleRepository(self.client)
        self.notifications = NotificationRepository(self.client)
        self.images = ImageRepository(self.client)
        self.users = ReadOnlyRepository(self.client, "/api/users", "users")
        self.caretakers = ReadOnlyRepository(self.client, "/api/caretakers", "caretakers")
        self.audit_logs = ReadOnlyRepository(self.client, "/api/audit-logs", "auditLogs")
        self.dashboard = DashboardRepository(self.client)
