from datetime import datetime
from typing import Optional

from src.models.common import ApiModel, Role


class User(ApiModel):
    id: str
    email: str
    name: str
    role: Role
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    # use_enum_values stores the plain string; keep the enum for callers
    @property
    def role_value(self) -> str:
        return Role(self.role).value
