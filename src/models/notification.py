from typing import Optional

from pydantic import Field

from src.models.common import (
    ApiModel,
    NotificationPriority,
    NotificationType,
    Reference,
)


class NotificationCreate(ApiModel):
    type: NotificationType
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    priority: NotificationPriority = NotificationPriority.MEDIUM
    read: bool = False
    user_id: Optional[Reference] = None
    related_id: Optional[str] = None
