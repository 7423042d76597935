from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.domain.derivations import filter_audit_logs
from src.domain.permissions import AUDIT_READ
from src.models.user import User
from src.routes.deps import get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.resources import ResourceService, field_equals, paginate
from src.services.store import Stores

router = APIRouter(prefix="/api/audit-logs", tags=["Audit Logs"])


@router.get("")
@handle_route_errors("Failed to fetch audit logs")
async def list_audit_logs(
    action: Optional[str] = None,
    resource: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(100, ge=1),
    user: User = Depends(require_roles(AUDIT_READ)),
    stores: Stores = Depends(get_stores),
):
    service = ResourceService(stores["audit-logs"], "Audit log")
    predicates = [field_equals("resource", resource)] if resource else []
    logs = filter_audit_logs(service.list(predicates), term=search, action=action)
    logs = sorted(logs, key=lambda log: log.get("timestamp") or "", reverse=True)
    items, pagination = paginate(logs, page, limit)
    return envelope("Audit logs retrieved successfully", auditLogs=items, pagination=pagination)
