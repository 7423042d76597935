from typing import Any, Iterable, Optional

from src.core.exceptions import PermissionDeniedError
from src.models.common import Role

ADMIN, DOCTOR, CARETAKER = Role.ADMIN.value, Role.DOCTOR.value, Role.CARETAKER.value

# There is no role hierarchy: every action lists the roles it accepts.
ALL_ROLES = frozenset({ADMIN, DOCTOR, CARETAKER})
ANIMAL_WRITE = frozenset({ADMIN, CARETAKER})
ANIMAL_DELETE = frozenset({ADMIN})
ENCLOSURE_WRITE = frozenset({ADMIN, CARETAKER})
ENCLOSURE_DELETE = frozenset({ADMIN})
INVENTORY_WRITE = frozenset({ADMIN})
INVENTORY_USE = frozenset({ADMIN, CARETAKER})
MEDICAL_READ = frozenset({ADMIN, DOCTOR})
MEDICAL_WRITE = frozenset({ADMIN, DOCTOR})
FEEDING_WRITE = frozenset({ADMIN, CARETAKER})
NOTIFICATION_ADMIN = frozenset({ADMIN})
SPECIES_WRITE = frozenset({ADMIN})
USER_ADMIN = frozenset({ADMIN})
AUDIT_READ = frozenset({ADMIN})
ANALYTICS_READ = frozenset({ADMIN})


def user_role(user: Any) -> Optional[str]:
    if user is None:
        return None
    role = user.get("role") if isinstance(user, dict) else getattr(user, "role", None)
    if isinstance(role, Role):
        return role.value
    return role


def has_permission(user: Any, required_roles: Iterable[str]) -> bool:
    """True iff a user is present and its role is one of ``required_roles``."""
    role = user_role(user)
    if role is None:
        return False
    return role in {Role(r).value if isinstance(r, Role) else r for r in required_roles}


def require_permission(user: Any, required_roles: Iterable[str]) -> None:
    if not has_permission(user, required_roles):
        raise PermissionDeniedError()
