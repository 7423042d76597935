from src.services.store import Stores
from src.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_INVENTORY = [
    {
        "id": "inv1",
        "name": "Premium Fish Food",
        "category": "food",
        "quantity": 15,
        "unit": "kg",
        "cost": 25.99,
        "supplier": "Aquatic Nutrition Co.",
        "minThreshold": 10,
        "maxThreshold": 100,
        "lastRestocked": "2024-01-15T10:00:00Z",
        "expiryDate": "2024-12-31T23:59:59Z",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-15T10:00:00Z",
    },
    {
        "id": "inv2",
        "name": "Antibiotics",
        "category": "medicine",
        "quantity": 5,
        "unit": "bottles",
        "cost": 45.5,
        "supplier": "VetMed Solutions",
        "minThreshold": 5,
        "maxThreshold": 20,
        "lastRestocked": "2024-01-10T14:30:00Z",
        "expiryDate": "2025-06-30T23:59:59Z",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-10T14:30:00Z",
    },
    {
        "id": "inv3",
        "name": "Cleaning Supplies",
        "category": "supplies",
        "quantity": 30,
        "unit": "units",
        "cost": 12.75,
        "supplier": "CleanTech Industries",
        "minThreshold": 15,
        "maxThreshold": 50,
        "lastRestocked": "2024-01-20T09:15:00Z",
        "createdAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-20T09:15:00Z",
    },
]

DEMO_ENCLOSURES = [
    {
        "id": "enc1",
        "name": "Lion Pride Habitat",
        "type": "Large Mammal",
        "capacity": 6,
        "currentOccupancy": 1,
        "location": "Section A",
        "temperature": 24,
        "humidity": 65,
        "lastCleaned": "2024-01-13T00:00:00Z",
    },
    {
        "id": "enc2",
        "name": "Tiger Territory",
        "type": "Large Mammal",
        "capacity": 2,
        "currentOccupancy": 1,
        "location": "Section B",
        "temperature": 22,
        "humidity": 70,
        "lastCleaned": "2024-01-13T00:00:00Z",
    },
    {
        "id": "enc3",
        "name": "Reptile House",
        "type": "Reptile",
        "capacity": 20,
        "currentOccupancy": 1,
        "location": "Section C",
        "temperature": 28,
        "humidity": 80,
        "lastCleaned": "2024-01-12T00:00:00Z",
    },
]


def seed_demo_data(stores: Stores) -> int:
    """Insert the demo inventory and enclosures unless already present."""
    created = 0
    for resource, documents in (
        ("inventory", DEMO_INVENTORY),
        ("enclosures", DEMO_ENCLOSURES),
    ):
        store = stores[resource]
        for document in documents:
            if store.get(document["id"]) is None:
                store.create(document)
                created += 1
    logger.info(f"Seeded {created} demo records")
    return created
