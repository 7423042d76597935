import asyncio
import json
from datetime import timedelta

import pytest

from src.core.exceptions import NotFoundError
from src.core.security import TOKEN_COOKIE_NAME, create_access_token, decode_access_token
from src.routes.errors import handle_route_errors

PROTECTED = [
    ("get", "/api/inventory"),
    ("get", "/api/animals"),
    ("get", "/api/enclosures"),
    ("get", "/api/species"),
    ("get", "/api/medical-records"),
    ("get", "/api/feeding-schedules"),
    ("get", "/api/notifications"),
    ("get", "/api/dashboard/stats"),
    ("get", "/api/auth/me"),
]


@pytest.mark.parametrize("method, path", PROTECTED)
def test_requests_without_token_are_unauthorized(client, method, path):
    response = getattr(client, method)(path)
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Authentication required"}


def test_token_cookie_is_accepted(client, users):
    client.cookies.set(TOKEN_COOKIE_NAME, create_access_token(users["doctor"]))
    assert client.get("/api/inventory").status_code == 200


def test_expired_or_forged_tokens_are_rejected(client, users):
    expired = create_access_token(users["admin"], expires_delta=timedelta(seconds=-5))
    response = client.get("/api/inventory", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401

    response = client.get("/api/inventory", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired token"


def test_token_round_trip(users):
    payload = decode_access_token(create_access_token(users["caretaker"]))
    assert payload["sub"] == "user-caretaker"
    assert payload["role"] == "caretaker"


@pytest.mark.parametrize(
    "role, status",
    [("admin", 200), ("doctor", 403), ("caretaker", 403)],
)
def test_inventory_writes_require_admin(client, headers_for, food_item, role, status):
    response = client.post("/api/inventory", json=food_item, headers=headers_for(role))
    assert response.status_code == status


def test_unexpected_errors_become_server_error_envelopes():
    @handle_route_errors("Failed to explode")
    async def boom():
        raise RuntimeError("kaboom")

    response = asyncio.run(boom())
    assert response.status_code == 500
    assert json.loads(response.body) == {
        "success": False,
        "message": "Failed to explode",
        "error": "kaboom",
    }


def test_domain_errors_pass_through_the_wrapper():
    @handle_route_errors("Failed to fetch")
    async def missing():
        raise NotFoundError("Animal not found")

    with pytest.raises(NotFoundError):
        asyncio.run(missing())


def test_probes(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert "version" in client.get("/").json()
