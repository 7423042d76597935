from datetime import datetime, timedelta, timezone

from src.services.dashboard.analytics import build_analytics
from src.services.seed import DEMO_ENCLOSURES, DEMO_INVENTORY, seed_demo_data
from src.services.store import Stores

NOW = datetime(2025, 3, 1, tzinfo=timezone.utc)


def seed_animals(stores):
    animals = stores["animals"]
    animals.create(
        {"name": "Leo", "status": "healthy", "category": "mammals", "sex": "Male",
         "age": 6, "weight": 190, "lastCheckup": datetime.now(timezone.utc).isoformat()}
    )
    animals.create(
        {"name": "Nala", "status": "sick", "category": "mammals", "sex": "Female",
         "age": 4, "weight": 130}
    )
    animals.create({"name": "Kaa", "status": "quarantine", "category": "reptiles", "sex": "Male"})


def test_dashboard_stats_endpoint(client, stores, caretaker_headers):
    seed_animals(stores)
    seed_demo_data(stores)
    stores["feeding-schedules"].create(
        {"frequency": "daily", "isActive": True,
         "lastFed": (datetime.now(timezone.utc) - timedelta(days=2)).isoformat()}
    )

    response = client.get("/api/dashboard/stats", headers=caretaker_headers)
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["totalAnimals"] == 3
    assert stats["healthyAnimals"] == 1
    assert stats["sickAnimals"] == 1
    # inv2 sits exactly on its minimum threshold
    assert stats["lowInventoryItems"] == 1
    assert stats["upcomingCheckups"] == 2
    assert stats["overdueFeedings"] == 1
    assert stats["categoryCounts"] == {"mammals": 2, "reptiles": 1}


def test_health_alerts_endpoint(client, stores, doctor_headers):
    seed_animals(stores)
    alerts = client.get("/api/dashboard/health-alerts", headers=doctor_headers).json()["alerts"]
    assert {a["name"] for a in alerts["needsAttention"]} == {"Nala", "Kaa"}
    assert alerts["totalAlerts"] == 4


def test_analytics_is_admin_only(client, stores, admin_headers, doctor_headers):
    seed_animals(stores)
    assert client.get("/api/dashboard/analytics", headers=doctor_headers).status_code == 403

    analytics = client.get("/api/dashboard/analytics", headers=admin_headers).json()["analytics"]
    assert analytics["totalAnimals"] == 3
    assert analytics["sexRatio"] == {"male": 2, "female": 1}


def test_build_analytics():
    animals = [
        {"status": "healthy", "sex": "male", "age": 2, "weight": 10},
        {"status": "healthy", "sex": "Female", "age": 4},
        {"status": "sick"},
    ]
    inventory = [
        {"category": "food", "quantity": 10, "cost": 2.5},
        {"category": "food", "quantity": 4, "cost": 1},
        {"category": "medicine", "quantity": 2, "cost": 45.5, "expiryDate": "2025-03-10T00:00:00Z"},
    ]
    analytics = build_analytics(animals, inventory, now=NOW)
    assert analytics["healthDistribution"] == {"healthy": 2, "sick": 1}
    assert analytics["sexRatio"] == {"male": 1, "female": 1}
    assert analytics["averageAge"] == 3.0
    assert analytics["averageWeight"] == 10.0
    assert analytics["inventoryValueByCategory"] == {"food": 29.0, "medicine": 91.0}
    assert analytics["totalInventoryValue"] == 120.0
    assert analytics["lowStockCount"] == 3
    assert analytics["expiringSoonCount"] == 1


def test_build_analytics_on_empty_collections():
    analytics = build_analytics([], [], now=NOW)
    assert analytics["totalAnimals"] == 0
    assert analytics["sexRatio"] == {"male": 0, "female": 0}
    assert analytics["averageAge"] is None
    assert analytics["inventoryValueByCategory"] == {}
    assert analytics["totalInventoryValue"] == 0.0


def test_seeding_is_idempotent():
    stores = Stores.memory()
    assert seed_demo_data(stores) == len(DEMO_INVENTORY) + len(DEMO_ENCLOSURES)
    assert seed_demo_data(stores) == 0
    assert stores["inventory"].get("inv1")["name"] == "Premium Fish Food"
