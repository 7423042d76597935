"""
Shared fixtures for the API and client tests.

The environment is configured before the application is imported so that
import-time settings use in-memory storage and a test signing key.
"""

import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient

from src.core.security import create_access_token
from src.main import app
from src.models.user import User
from src.routes.deps import get_stores
from src.services.store import Stores

USERS = {
    "admin": User(id="user-admin", email="admin@zoo.test", name="Ada Admin", role="admin"),
    "doctor": User(id="user-doctor", email="vet@zoo.test", name="Dan Doctor", role="doctor"),
    "caretaker": User(
        id="user-caretaker", email="keeper@zoo.test", name="Cam Caretaker", role="caretaker"
    ),
}


def auth_headers(role: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(USERS[role])}"}


@pytest.fixture
def stores():
    registry = Stores.memory()
    app.dependency_overrides[get_stores] = lambda: registry
    yield registry
    app.dependency_overrides.clear()


@pytest.fixture
def client(stores):
    return TestClient(app)


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def users():
    return USERS


@pytest.fixture
def admin_headers():
    return auth_headers("admin")


@pytest.fixture
def doctor_headers():
    return auth_headers("doctor")


@pytest.fixture
def caretaker_headers():
    return auth_headers("caretaker")


@pytest.fixture
def food_item():
    return {
        "name": "Test Food",
        "category": "food",
        "quantity": 5,
        "unit": "kg",
        "cost": 1.5,
    }
