from datetime import datetime, timedelta, timezone

import pytest
import requests
from fastapi.testclient import TestClient

from src.client.http import ApiClient, serialize_filters
from src.client.repositories import ZooApi
from src.client.store import AggregateStore, CollectionState
from src.client.validation import validate_enclosure, validate_inventory_item
from src.core.exceptions import ApiError, PermissionDeniedError
from src.core.security import create_access_token
from src.main import app


@pytest.fixture
def session(stores):
    """A test client of its own, so its token cookie does not leak into other requests."""
    return TestClient(app)


@pytest.fixture
def make_store(stores, users):
    """Aggregate store talking to the app through a test client."""

    def factory(role: str) -> AggregateStore:
        api_client = ApiClient(
            base_url="http://testserver",
            session=TestClient(app),
            token=create_access_token(users[role]),
        )
        return AggregateStore(api=ZooApi(api_client), user=users[role])

    return factory


class RefusingSession:
    def __init__(self):
        self.cookies = requests.cookies.RequestsCookieJar()
        self.calls = 0

    def request(self, *args, **kwargs):
        self.calls += 1
        raise requests.ConnectionError("Connection refused")


def test_serialize_filters():
    assert serialize_filters({"lowStock": True, "expired": False, "category": None, "page": 2}) == {
        "lowStock": "true",
        "expired": "false",
        "page": "2",
    }
    assert serialize_filters(None) == {}


def test_error_message_comes_from_the_body(session, users):
    api = ZooApi(ApiClient("http://testserver", session=session, token=create_access_token(users["admin"])))
    with pytest.raises(ApiError) as excinfo:
        api.inventory.restock("missing", 3)
    assert excinfo.value.message == "Inventory item not found"
    assert excinfo.value.is_not_found


def test_error_message_falls_back_to_status(session, users):
    api_client = ApiClient("http://testserver", session=session, token=create_access_token(users["admin"]))
    with pytest.raises(ApiError) as excinfo:
        api_client.get("/api/nowhere")
    assert excinfo.value.message == "HTTP error! status: 404"


def test_transport_failures_become_api_errors():
    api_client = ApiClient("http://zoo.invalid", session=RefusingSession())
    with pytest.raises(ApiError) as excinfo:
        api_client.get("/api/animals")
    assert excinfo.value.status_code is None
    assert "Connection refused" in excinfo.value.message


def test_fetch_sets_ready_and_empty_states(make_store, food_item):
    store = make_store("admin")
    assert store.state("inventory") == CollectionState.IDLE

    assert store.fetch_inventory() == []
    assert store.state("inventory") == CollectionState.EMPTY

    store.create("inventory", food_item)
    store.fetch_inventory()
    assert store.state("inventory") == CollectionState.READY
    assert store.inventory[0]["name"] == "Test Food"


def test_failed_request_keeps_previous_data(make_store, food_item):
    store = make_store("admin")
    store.create("inventory", food_item)
    before = list(store.inventory)

    with pytest.raises(ApiError):
        store.restock("missing", 5)
    assert store.state("inventory") == CollectionState.ERROR
    assert store.errors["inventory"] == "Inventory item not found"
    assert store.inventory == before

    store.restock(before[0]["id"], 1)
    assert store.state("inventory") == CollectionState.READY
    assert store.errors["inventory"] is None


def test_restock_updates_the_local_collection(make_store, food_item):
    store = make_store("admin")
    item = store.create("inventory", {**food_item, "quantity": 15})
    store.restock(item["id"], 10)
    store.restock(item["id"], 5)
    assert store.inventory[0]["quantity"] == 30
    assert store.low_stock_items() == []


def test_permission_gate_blocks_before_the_network(food_item):
    session = RefusingSession()
    store = AggregateStore(
        api=ZooApi(ApiClient("http://zoo.invalid", session=session)),
        user={"role": "doctor"},
    )
    with pytest.raises(PermissionDeniedError):
        store.create("inventory", food_item)
    with pytest.raises(PermissionDeniedError):
        store.fetch_audit_logs()
    assert session.calls == 0

    admin = AggregateStore(
        api=ZooApi(ApiClient("http://zoo.invalid", session=session)),
        user={"role": "admin"},
    )
    with pytest.raises(PermissionDeniedError):
        admin.save("notifications", "n1", {"read": True})
    assert session.calls == 0

    anonymous = AggregateStore(api=ZooApi(ApiClient("http://zoo.invalid", session=session)))
    with pytest.raises(PermissionDeniedError):
        anonymous.fetch_animals()
    assert session.calls == 0


def test_feeding_and_notification_flow(make_store, client, headers_for):
    caretaker = make_store("caretaker")
    last_fed = (datetime.now(timezone.utc) - timedelta(hours=30)).isoformat()
    schedule = caretaker.create(
        "feeding_schedules",
        {
            "animalId": "a1",
            "item": "inv1",
            "foodType": "Fish",
            "quantity": 2,
            "frequency": "daily",
            "time": "09:00",
            "caretakerId": "user-caretaker",
            "lastFed": last_fed,
        },
    )
    assert caretaker.dashboard_stats().overdue_feedings == 1
    caretaker.complete_feeding(schedule["id"], "done")
    assert caretaker.dashboard_stats().overdue_feedings == 0
    assert caretaker.feeding_schedules_by_animal("a1")[0]["notes"] == "done"

    for title in ("One", "Two"):
        client.post(
            "/api/notifications",
            json={"type": "alert", "title": title, "message": "m"},
            headers=headers_for("admin"),
        )
    caretaker.fetch_notifications()
    assert caretaker.unread_count == 2

    caretaker.mark_notification_read(caretaker.notifications[0]["id"])
    assert caretaker.unread_count == 1
    assert len(caretaker.unread_notifications()) == 1

    caretaker.mark_all_notifications_read()
    assert caretaker.unread_count == 0
    assert caretaker.unread_notifications() == []

    with pytest.raises(PermissionDeniedError):
        caretaker.delete_notification(caretaker.notifications[0]["id"])


def test_admin_deletes_unread_notification(make_store):
    admin = make_store("admin")
    created = admin.create("notifications", {"type": "system", "title": "t", "message": "m"})
    assert admin.unread_count == 1
    admin.delete_notification(created["id"])
    assert admin.unread_count == 0
    assert admin.notifications == []


def test_local_mutations():
    store = AggregateStore(api=ZooApi(ApiClient("http://zoo.invalid", session=RefusingSession())))
    store.add("animals", {"_id": "a1", "name": "Leo", "category": "mammals"})
    store.add("animals", {"id": "a2", "name": "Kaa", "category": "reptiles"})

    store.update("animals", "a1", {"status": "sick"})
    store.update("animals", "ghost", {"status": "sick"})
    assert store.animals[0]["status"] == "sick"
    assert "status" not in store.animals[1]

    assert [a["name"] for a in store.animals_by_category("reptiles")] == ["Kaa"]
    assert [a["name"] for a in store.search_animals("le")] == ["Leo"]

    store.remove("animals", "a1")
    store.remove("animals", "a2")
    assert store.animals == []
    assert store.state("animals") == CollectionState.EMPTY

    store.add("enclosures", {"id": "e1", "capacity": 0, "currentOccupancy": 3})
    assert store.occupancy(store.enclosures[0]) == 0


def test_form_validation():
    errors = validate_inventory_item(
        {"name": " ", "quantity": "5", "unit": "kg", "cost": "2", "minThreshold": 20, "maxThreshold": 10}
    )
    assert set(errors) == {"name", "minThreshold"}

    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    assert "expiryDate" in validate_inventory_item(
        {"name": "x", "quantity": 0, "unit": "kg", "cost": 0, "expiryDate": past}
    )

    errors = validate_enclosure(
        {"name": "Pond", "type": "Aquatic", "capacity": 0, "location": "B", "humidity": 140}
    )
    assert set(errors) == {"capacity", "humidity"}
    assert validate_enclosure(
        {"name": "Pond", "type": "Aquatic", "capacity": 4, "location": "B", "temperature": "18"}
    ) == {}
