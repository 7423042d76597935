from datetime import datetime, timedelta, timezone

import pytest


def create_item(client, headers, payload):
    response = client.post("/api/inventory", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["inventoryItem"]


def test_create_then_fetch_round_trip(client, admin_headers, food_item):
    created = create_item(client, admin_headers, food_item)
    assert created["id"]
    assert created["createdAt"] == created["updatedAt"]

    response = client.get(f"/api/inventory/{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Inventory item retrieved successfully"
    fetched = body["inventoryItem"]
    for field, value in food_item.items():
        assert fetched[field] == value
    assert fetched["createdAt"] == fetched["updatedAt"]
    assert fetched["lastRestocked"]


def test_ids_are_unique_under_rapid_creation(client, admin_headers, food_item):
    ids = {create_item(client, admin_headers, food_item)["id"] for _ in range(20)}
    assert len(ids) == 20


def test_restocks_accumulate(client, admin_headers, food_item):
    first = create_item(client, admin_headers, {**food_item, "quantity": 15})
    second = create_item(client, admin_headers, {**food_item, "quantity": 15})

    for quantity in (10, 5):
        client.put(
            f"/api/inventory/{first['id']}/restock",
            json={"quantity": quantity},
            headers=admin_headers,
        )
    response = client.put(
        f"/api/inventory/{second['id']}/restock", json={"quantity": 15}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["inventoryItem"]["quantity"] == 30
    assert response.json()["message"] == "Successfully restocked 15 kg. New total: 30 kg"
    fetched = client.get(f"/api/inventory/{first['id']}", headers=admin_headers).json()
    assert fetched["inventoryItem"]["quantity"] == 30


@pytest.mark.parametrize("body", [{"quantity": 0}, {"quantity": -4}, {}])
def test_restock_rejects_invalid_quantity(client, admin_headers, food_item, body):
    item = create_item(client, admin_headers, food_item)
    response = client.put(
        f"/api/inventory/{item['id']}/restock", json=body, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Invalid quantity provided"}


def test_restock_unknown_item(client, admin_headers):
    response = client.put(
        "/api/inventory/missing/restock", json={"quantity": 3}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Inventory item not found"


def test_delete_then_get_is_not_found(client, admin_headers, food_item):
    item = create_item(client, admin_headers, food_item)
    assert client.delete(f"/api/inventory/{item['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/inventory/{item['id']}", headers=admin_headers).status_code == 404
    assert client.delete(f"/api/inventory/{item['id']}", headers=admin_headers).status_code == 404


def test_update_merges_partial_changes(client, admin_headers, food_item):
    item = create_item(client, admin_headers, food_item)
    response = client.put(
        f"/api/inventory/{item['id']}", json={"supplier": "Hay Co."}, headers=admin_headers
    )
    updated = response.json()["inventoryItem"]
    assert updated["supplier"] == "Hay Co."
    assert updated["name"] == food_item["name"]
    assert updated["updatedAt"] >= updated["createdAt"]


def test_update_unknown_item(client, admin_headers):
    response = client.put("/api/inventory/nope", json={"name": "x"}, headers=admin_headers)
    assert response.status_code == 404


def test_list_filters(client, admin_headers, food_item):
    soon = (datetime.now(timezone.utc) - timedelta(days=2)).isoformat()
    create_item(client, admin_headers, {**food_item, "quantity": 50})
    create_item(
        client,
        admin_headers,
        {**food_item, "name": "Bandages", "category": "medicine", "expiryDate": soon},
    )

    everything = client.get("/api/inventory", headers=admin_headers).json()
    assert everything["count"] == 2
    assert everything["message"] == "Inventory items retrieved successfully"

    medicine = client.get("/api/inventory?category=medicine", headers=admin_headers).json()
    assert [i["name"] for i in medicine["inventoryItems"]] == ["Bandages"]

    low = client.get("/api/inventory?lowStock=true", headers=admin_headers).json()
    assert [i["name"] for i in low["inventoryItems"]] == ["Bandages"]

    expired = client.get("/api/inventory?expired=true", headers=admin_headers).json()
    assert [i["name"] for i in expired["inventoryItems"]] == ["Bandages"]


def test_validation_errors_are_bad_requests(client, admin_headers, food_item):
    response = client.post(
        "/api/inventory", json={**food_item, "quantity": -1}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "quantity" in response.json()["message"]

    response = client.post("/api/inventory", json={"name": "x"}, headers=admin_headers)
    assert response.status_code == 400


def test_malformed_json_is_a_server_error(client, admin_headers):
    response = client.post(
        "/api/inventory",
        content=b"{not json",
        headers={**admin_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "error" in body


def test_use_draws_stock_and_raises_low_stock_notification(
    client, stores, admin_headers, caretaker_headers, food_item
):
    item = create_item(client, admin_headers, {**food_item, "quantity": 14, "minThreshold": 10})

    response = client.put(
        f"/api/inventory/{item['id']}/use", json={"quantity": 4}, headers=caretaker_headers
    )
    assert response.status_code == 200
    assert response.json()["inventoryItem"]["quantity"] == 10

    notifications = stores["notifications"].list()
    assert len(notifications) == 1
    assert notifications[0]["type"] == "low_inventory"
    assert notifications[0]["relatedId"] == item["id"]

    # already low: no second notification
    client.put(f"/api/inventory/{item['id']}/use", json={"quantity": 1}, headers=caretaker_headers)
    assert len(stores["notifications"].list()) == 1


def test_use_rejects_more_than_available(client, admin_headers, food_item):
    item = create_item(client, admin_headers, food_item)
    response = client.put(
        f"/api/inventory/{item['id']}/use", json={"quantity": 6}, headers=admin_headers
    )
    assert response.status_code == 400
    assert "Insufficient stock" in response.json()["message"]


def test_writes_are_audited(client, stores, admin_headers, food_item):
    item = create_item(client, admin_headers, food_item)
    client.put(f"/api/inventory/{item['id']}/restock", json={"quantity": 2}, headers=admin_headers)

    logs = stores["audit-logs"].list()
    assert [log["action"] for log in logs] == ["CREATE", "UPDATE"]
    assert logs[1]["oldData"]["quantity"] == 5
    assert logs[1]["newData"]["quantity"] == 7
    assert logs[0]["userId"] == "user-admin"
    assert logs[0]["resource"] == "inventory"


def test_create_answers_with_the_created_record(client, admin_headers, food_item):
    response = client.post("/api/inventory", json=food_item, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Inventory item created successfully"
    assert body["inventoryItem"]["name"] == food_item["name"]


@pytest.mark.parametrize("field", ["quantity", "name", "category", "unit", "cost"])
def test_required_fields_cannot_be_cleared(client, admin_headers, food_item, field):
    item = create_item(client, admin_headers, food_item)
    response = client.put(
        f"/api/inventory/{item['id']}", json={field: None}, headers=admin_headers
    )
    assert response.status_code == 400
    assert "cannot be null" in response.json()["message"]

    fetched = client.get(f"/api/inventory/{item['id']}", headers=admin_headers).json()
    assert fetched["inventoryItem"][field] == food_item[field]


def test_reads_survive_a_rejected_null_quantity(client, admin_headers, food_item):
    item = create_item(client, admin_headers, food_item)
    client.put(f"/api/inventory/{item['id']}", json={"quantity": None}, headers=admin_headers)

    assert client.get("/api/inventory?lowStock=true", headers=admin_headers).status_code == 200
    assert client.get("/api/dashboard/stats", headers=admin_headers).status_code == 200
    response = client.put(
        f"/api/inventory/{item['id']}/restock", json={"quantity": 5}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["inventoryItem"]["quantity"] == food_item["quantity"] + 5


def test_optional_fields_can_be_cleared(client, admin_headers, food_item):
    item = create_item(client, admin_headers, {**food_item, "supplier": "Hay Co."})
    response = client.put(
        f"/api/inventory/{item['id']}", json={"supplier": None}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["inventoryItem"]["supplier"] is None
