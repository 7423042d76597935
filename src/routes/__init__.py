from src.routes.animals import router as animals_router
from src.routes.audit_logs import router as audit_logs_router
from src.routes.dashboard import router as dashboard_router
from src.routes.enclosures import router as enclosures_router
from src.routes.feeding_schedules import router as feeding_schedules_router
from src.routes.inventory import router as inventory_router
from src.routes.medical_records import router as medical_records_router
from src.routes.notifications import router as notifications_router
from src.routes.species import router as species_router
from src.routes.users import router as users_router

__all__ = [
    "animals_router",
    "audit_logs_router",
    "dashboard_router",
    "enclosures_router",
    "feeding_schedules_router",
    "inventory_router",
    "medical_records_router",
    "notifications_router",
    "species_router",
    "users_router",
]
