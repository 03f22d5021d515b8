"""
Capability checks shared by every mutating operation.

Roles are derived from Django's user flags: staff and superusers are admins,
everyone else is a regular user.
"""
from .exceptions import Unauthorized

ROLE_USER = "user"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_ADMIN)


def is_admin(user):
    """Check if user holds the admin role."""
    if user is None or not user.is_authenticated:
        return False
    return bool(user.is_staff or user.is_superuser)


def user_role(user):
    return ROLE_ADMIN if is_admin(user) else ROLE_USER


def can_manage(user, owner_id):
    """Owner-or-admin capability: may ``user`` mutate a resource owned by ``owner_id``?"""
    if user is None or not user.is_authenticated or not user.is_active:
        return False
    return is_admin(user) or user.pk == owner_id


def require_active(user):
    """Raise Unauthorized unless user is an authenticated, active account."""
    if user is None or not user.is_authenticated:
        raise Unauthorized("Authentication required")
    if not user.is_active:
        raise Unauthorized("Account is deactivated")


def require_owner_or_admin(user, owner_id, action="modify this post"):
    require_active(user)
    if not can_manage(user, owner_id):
        raise Unauthorized(f"Not authorized to {action}")


def require_admin(user):
    require_active(user)
    if not is_admin(user):
        raise Unauthorized("Admin access required")
