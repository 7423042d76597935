from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.core.exceptions import NotFoundError
from src.core.security import get_current_user
from src.domain.permissions import NOTIFICATION_ADMIN
from src.domain.refs import ref_id
from src.models.notification import NotificationCreate
from src.models.user import User
from src.routes.deps import actor_for, get_stores, require_roles
from src.routes.errors import envelope, handle_route_errors
from src.services.notifications import NotificationService
from src.services.resources import paginate
from src.services.store import Stores

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


def notification_service(stores: Stores = Depends(get_stores)) -> NotificationService:
    return NotificationService(stores["notifications"], stores["audit-logs"])


def _owned(service: NotificationService, notification_id: str, user: User) -> dict:
    notification = service.get(notification_id)
    if ref_id(notification.get("userId")) not in (None, user.id):
        raise NotFoundError("Notification not found")
    return notification


@router.get("")
@handle_route_errors("Failed to fetch notifications")
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    read: Optional[bool] = None,
    type: Optional[str] = None,
    priority: Optional[str] = None,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(notification_service),
):
    notifications = service.for_user(user, read=read, type=type, priority=priority)
    items, pagination = paginate(notifications, page, limit)
    return envelope("Notifications retrieved successfully", data=items, pagination=pagination)


@router.post("")
@handle_route_errors("Failed to create notification")
async def create_notification(
    payload: NotificationCreate,
    request: Request,
    user: User = Depends(require_roles(NOTIFICATION_ADMIN)),
    service: NotificationService = Depends(notification_service),
):
    notification = service.create(payload.to_create_document(), actor_for(request, user))
    return envelope("Notification created successfully", data=notification)


@router.get("/unread-count")
@handle_route_errors("Failed to fetch unread count")
async def get_unread_count(
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(notification_service),
):
    return envelope(
        "Unread count retrieved successfully", data={"unreadCount": service.unread_count(user)}
    )


@router.patch("/mark-all-read")
@handle_route_errors("Failed to mark notifications as read")
async def mark_all_notifications_read(
    request: Request,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(notification_service),
):
    updated = service.mark_all_read(user, actor_for(request, user))
    return envelope(
        f"Marked {updated} notifications as read", data={"modifiedCount": updated}
    )


@router.get("/stats")
@handle_route_errors("Failed to fetch notification stats")
async def get_notification_stats(
    user: User = Depends(require_roles(NOTIFICATION_ADMIN)),
    service: NotificationService = Depends(notification_service),
):
    return envelope("Notification stats retrieved successfully", data=service.stats())


@router.patch("/{notification_id}/read")
@handle_route_errors("Failed to mark notification as read")
async def mark_notification_read(
    notification_id: str,
    request: Request,
    user: User = Depends(get_current_user),
    service: NotificationService = Depends(notification_service),
):
    _owned(service, notification_id, user)
    notification = service.mark_read(notification_id, actor_for(request, user))
    return envelope("Notification marked as read", data=notification)


@router.delete("/{notification_id}")
@handle_route_errors("Failed to delete notification")
async def delete_notification(
    notification_id: str,
    request: Request,
    user: User = Depends(require_roles(NOTIFICATION_ADMIN)),
    service: NotificationService = Depends(notification_service),
):
    service.delete(notification_id, actor_for(request, user))
    return envelope("Notification deleted successfully")
