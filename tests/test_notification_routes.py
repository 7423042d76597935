def notify(client, headers, **overrides):
    payload = {"type": "alert", "title": "Gate open", "message": "Check gate 4"}
    payload.update(overrides)
    response = client.post("/api/notifications", json=payload, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


def test_only_admins_create_notifications(client, caretaker_headers):
    response = client.post(
        "/api/notifications",
        json={"type": "alert", "title": "x", "message": "y"},
        headers=caretaker_headers,
    )
    assert response.status_code == 403


def test_listing_is_paginated_and_scoped(client, admin_headers, caretaker_headers):
    for index in range(3):
        notify(client, admin_headers, title=f"Broadcast {index}")
    notify(client, admin_headers, title="Private", userId="user-admin")

    body = client.get("/api/notifications?limit=2", headers=caretaker_headers).json()
    assert body["success"] is True
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
    assert len(body["data"]) == 2

    admin_view = client.get("/api/notifications", headers=admin_headers).json()
    assert admin_view["pagination"]["total"] == 4


def test_unread_count_and_mark_read(client, admin_headers, caretaker_headers):
    first = notify(client, admin_headers)
    notify(client, admin_headers, priority="high")

    count = client.get("/api/notifications/unread-count", headers=caretaker_headers).json()
    assert count["data"] == {"unreadCount": 2}

    response = client.patch(f"/api/notifications/{first['id']}/read", headers=caretaker_headers)
    assert response.status_code == 200
    assert response.json()["data"]["read"] is True

    count = client.get("/api/notifications/unread-count", headers=caretaker_headers).json()
    assert count["data"]["unreadCount"] == 1

    unread = client.get("/api/notifications?read=false", headers=caretaker_headers).json()
    assert [n["priority"] for n in unread["data"]] == ["high"]


def test_mark_all_read(client, admin_headers, caretaker_headers):
    notify(client, admin_headers)
    notify(client, admin_headers)

    response = client.patch("/api/notifications/mark-all-read", headers=caretaker_headers)
    assert response.json()["data"] == {"modifiedCount": 2}
    count = client.get("/api/notifications/unread-count", headers=caretaker_headers).json()
    assert count["data"]["unreadCount"] == 0


def test_cannot_read_someone_elses_notification(client, admin_headers, caretaker_headers):
    private = notify(client, admin_headers, userId="user-admin")
    response = client.patch(f"/api/notifications/{private['id']}/read", headers=caretaker_headers)
    assert response.status_code == 404


def test_stats_and_delete(client, admin_headers, caretaker_headers):
    first = notify(client, admin_headers)
    notify(client, admin_headers, type="maintenance")
    client.patch(f"/api/notifications/{first['id']}/read", headers=admin_headers)

    assert client.get("/api/notifications/stats", headers=caretaker_headers).status_code == 403
    stats = client.get("/api/notifications/stats", headers=admin_headers).json()["data"]
    assert stats["total"] == 2
    assert stats["unread"] == 1
    assert stats["typeBreakdown"] == {"alert": 1, "maintenance": 1}

    assert client.delete(f"/api/notifications/{first['id']}", headers=caretaker_headers).status_code == 403
    assert client.delete(f"/api/notifications/{first['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/notifications/{first['id']}", headers=admin_headers).status_code == 404
