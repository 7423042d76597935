from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field

from src.models.common import ApiModel, AuditAction


class AuditLog(ApiModel):
    user_id: str
    action: AuditAction
    resource: str
    resource_id: str
    old_data: Optional[dict[str, Any]] = None
    new_data: Optional[dict[str, Any]] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    ip_address: Optional[str] = None
