from fastapi import APIRouter, Depends

from src.core.security import get_current_user
from src.domain.permissions import ANALYTICS_READ
from src.models.user import User
from src.routes.deps import get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.dashboard.analytics import build_analytics
from src.services.dashboard.stats import compute_dashboard_stats, compute_health_alerts
from src.services.store import Stores


router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/stats")
@handle_route_errors("Failed to fetch dashboard stats")
async def dashboard_stats(
    user: User = Depends(get_current_user),
    stores: Stores = Depends(get_stores),
):
    stats = compute_dashboard_stats(stores)
    return envelope(
        "Dashboard stats retrieved successfully", stats=stats.model_dump(by_alias=True)
    )


@router.get("/health-alerts")
@handle_route_errors("Failed to fetch health alerts")
async def health_alerts(
    user: User = Depends(get_current_user),
    stores: Stores = Depends(get_stores),
):
    alerts = compute_health_alerts(stores)
    return envelope(
        "Health alerts retrieved successfully", alerts=alerts.model_dump(by_alias=True)
    )


@router.get("/analytics")
@handle_route_errors("Failed to fetch analytics")
async def analytics(
    user: User = Depends(require_roles(ANALYTICS_READ)),
    stores: Stores = Depends(get_stores),
):
    return envelope(
        "Analytics retrieved successfully",
        analytics=build_analytics(stores["animals"].list(), stores["inventory"].list()),
    )
