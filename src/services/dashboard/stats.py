from datetime import datetime
from typing import Optional

from src.core.configs import settings
from src.domain.derivations import DashboardStats, dashboard_stats, health_alerts, utcnow
from src.services.feeding import FeedingScheduleService
from src.services.store import Stores


def compute_dashboard_stats(stores: Stores, now: Optional[datetime] = None) -> DashboardStats:
    """Dashboard statistics over the current contents of the stores."""
    now = now or utcnow()
    schedules = FeedingScheduleService(stores["feeding-schedules"]).search(now=now)
    return dashboard_stats(
        stores["animals"].list(),
        stores["inventory"].list(),
        schedules,
        now=now,
        staleness_days=settings.checkup_staleness_days,
    )


def compute_health_alerts(stores: Stores, now: Optional[datetime] = None):
    return health_alerts(
        stores["animals"].list(), now, staleness_days=settings.checkup_staleness_days
    )
