"""Role checks. Authentication happens elsewhere; this only authorizes mutations."""

from typing import Iterable, Optional

from errors import PermissionDenied
from schemas import User

PLAN_ROLES = frozenset({"admin", "manager", "planner"})
ACTUAL_ROLES = frozenset({"admin", "manager", "operator"})
EDIT_ROLES = frozenset({"admin", "manager"})
OFF_DAY_ROLES = frozenset({"admin", "manager"})
ADMIN_ROLES = frozenset({"admin"})


def has_permission(role: Optional[str], allowed_roles: Iterable[str]) -> bool:
    if not role:
        return False
    return role in allowed_roles


def require_role(actor: Optional[User], allowed_roles: Iterable[str], action: str = "perform this action") -> None:
    """Raise PermissionDenied unless the actor's role is allowed. No actor is never allowed."""
    if actor is None or not has_permission(actor.role, allowed_roles):
        role = actor.role if actor else "anonymous"
        raise PermissionDenied(f"Role '{role}' is not allowed to {action}")
